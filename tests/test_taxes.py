"""Tests for federal and Massachusetts tax calculations."""

import pytest

from benefits.exceptions import InvalidInputError
from benefits.tax_config import CURRENT_TAX_CONFIG
from benefits.taxes import (
    FilingStatus,
    calculate_federal_tax,
    calculate_massachusetts_tax,
    calculate_retirement_taxes,
    calculate_social_security_taxable,
    estimate_marginal_rate,
    federal_standard_deduction,
    get_brackets,
)


class TestFilingStatus:
    """Tests for filing status coercion."""

    @pytest.mark.parametrize(
        "value",
        ["married_filing_jointly", "marriedFilingJointly", "mfj", "MFJ",
         "Married Filing Jointly", "marriedJoint", "married",
         FilingStatus.MARRIED_FILING_JOINTLY],
    )
    def test_joint_aliases(self, value):
        assert FilingStatus.coerce(value) == FilingStatus.MARRIED_FILING_JOINTLY

    def test_other_statuses(self):
        assert FilingStatus.coerce("SINGLE") == FilingStatus.SINGLE
        assert FilingStatus.coerce("headOfHousehold") == FilingStatus.HEAD_OF_HOUSEHOLD
        assert FilingStatus.coerce("mfs") == FilingStatus.MARRIED_FILING_SEPARATELY
        assert FilingStatus.coerce("marriedSeparate") == FilingStatus.MARRIED_FILING_SEPARATELY

    def test_unknown_raises(self):
        with pytest.raises(InvalidInputError):
            FilingStatus.coerce("qualifying_widow")


class TestFederalTax:
    """Tests for federal bracket calculation."""

    def test_zero_income(self):
        result = calculate_federal_tax(0)
        assert result.total_tax == 0
        assert result.brackets == ()

    def test_first_bracket(self):
        assert calculate_federal_tax(10_000).total_tax == pytest.approx(1_000)

    def test_single_three_brackets(self):
        result = calculate_federal_tax(50_000, FilingStatus.SINGLE)
        assert result.total_tax == pytest.approx(6_053)
        assert result.marginal_rate == 0.22
        assert [s.rate for s in result.brackets] == [0.10, 0.12, 0.22]
        assert sum(s.income for s in result.brackets) == pytest.approx(50_000)

    def test_married_filing_jointly(self):
        result = calculate_federal_tax(50_000, "married_filing_jointly")
        assert result.total_tax == pytest.approx(5_536)
        assert result.marginal_rate == 0.12

    def test_separate_top_bracket_lower(self):
        """MFS reaches 37% at $365,600."""
        assert estimate_marginal_rate(400_000, FilingStatus.MARRIED_FILING_SEPARATELY) == 0.37
        assert estimate_marginal_rate(400_000, FilingStatus.SINGLE) == 0.35

    def test_head_of_household_brackets(self):
        assert get_brackets(FilingStatus.HEAD_OF_HOUSEHOLD)[0] == (16_550, 0.10)

    def test_effective_below_marginal(self):
        result = calculate_federal_tax(150_000)
        assert result.effective_rate <= result.marginal_rate


class TestStandardDeduction:
    """Tests for the federal standard deduction."""

    def test_by_status(self):
        assert federal_standard_deduction("single") == 14_600
        assert federal_standard_deduction("mfj") == 29_200
        assert federal_standard_deduction("hoh") == 21_900

    def test_age_65_additional(self):
        assert federal_standard_deduction("single", True) == 16_550
        assert federal_standard_deduction("mfj", True) == 32_300


class TestSocialSecurityTaxable:
    """Tests for taxable Social Security."""

    def test_below_first_threshold(self):
        assert calculate_social_security_taxable(20_000, 10_000) == 0.0

    def test_fifty_percent_tier(self):
        """Provisional income of $30,000 makes $2,500 taxable."""
        assert calculate_social_security_taxable(20_000, 20_000) == pytest.approx(2_500)

    def test_eighty_five_percent_cap(self):
        assert calculate_social_security_taxable(30_000, 50_000) == pytest.approx(25_500)

    def test_joint_thresholds(self):
        assert calculate_social_security_taxable(
            20_000, 30_000, FilingStatus.MARRIED_FILING_JOINTLY
        ) == pytest.approx(4_000)

    def test_no_benefit(self):
        assert calculate_social_security_taxable(0, 100_000) == 0.0


class TestMassachusettsTax:
    """Tests for Massachusetts tax."""

    def test_single(self):
        result = calculate_massachusetts_tax(50_000)
        assert result.taxable_income == pytest.approx(41_200)
        assert result.total_tax == pytest.approx(2_060)
        assert result.marginal_rate == 0.05

    def test_single_65(self):
        assert calculate_massachusetts_tax(50_000, "single", True).total_tax == pytest.approx(2_025)

    def test_joint(self):
        assert calculate_massachusetts_tax(50_000, "mfj").total_tax == pytest.approx(1_620)
        assert calculate_massachusetts_tax(50_000, "mfj", True).total_tax == pytest.approx(1_550)

    def test_below_deductions(self):
        result = calculate_massachusetts_tax(8_000)
        assert result.total_tax == 0
        assert result.marginal_rate == 0

    def test_surtax(self):
        """Income above $1,053,750 pays an extra 4%."""
        result = calculate_massachusetts_tax(2_000_000)
        assert result.total_tax == pytest.approx(1_991_200 * 0.05 + (1_991_200 - 1_053_750) * 0.04)
        assert result.marginal_rate == pytest.approx(0.09)
        assert len(result.brackets) == 2


class TestRetirementTaxes:
    """Tests for combined retirement income tax."""

    def test_pension_and_social_security(self):
        result = calculate_retirement_taxes(40_000, 24_000, 0, FilingStatus.SINGLE)
        assert result.gross_income == 64_000
        assert result.taxable_social_security == pytest.approx(19_800)
        assert result.federal_tax == pytest.approx(5_192)
        assert result.state_tax == pytest.approx(1_560)
        assert result.total_tax == pytest.approx(6_752)
        assert result.net_income == pytest.approx(57_248)
        assert result.marginal_rate == pytest.approx(0.17)

    def test_social_security_not_taxed_by_massachusetts(self):
        result = calculate_retirement_taxes(0, 30_000, 0)
        assert result.state_tax == 0

    def test_exempt_public_pension(self):
        result = calculate_retirement_taxes(60_000, 0, 0, exempt_public_pension=True)
        assert result.state_tax == 0
        assert result.federal_tax > 0

    def test_age_65_lowers_tax(self):
        younger = calculate_retirement_taxes(30_000, 0, 0, age_65_or_older=False)
        older = calculate_retirement_taxes(30_000, 0, 0, age_65_or_older=True)
        assert older.federal_tax == pytest.approx(1_382)
        assert older.total_tax < younger.total_tax

    def test_negative_incomes(self):
        result = calculate_retirement_taxes(-10_000, -5_000, -1_000)
        assert result.total_tax == 0
        assert result.effective_rate == 0

    def test_invalid_filing_status(self):
        with pytest.raises(InvalidInputError):
            calculate_retirement_taxes(40_000, 20_000, 0, "unknown")

    def test_breakdowns_attached(self):
        result = calculate_retirement_taxes(80_000, 0, 10_000)
        assert result.federal.total_tax == pytest.approx(result.federal_tax, abs=0.01)
        assert result.state.total_tax == pytest.approx(result.state_tax, abs=0.01)

    def test_rate_invariants(self, rng):
        """Effective rate never exceeds marginal; total is federal plus state."""
        statuses = list(FilingStatus)
        for _ in range(300):
            result = calculate_retirement_taxes(
                float(rng.uniform(0, 400_000)),
                float(rng.uniform(0, 60_000)),
                float(rng.uniform(0, 2_000_000)) if rng.random() < 0.1 else float(rng.uniform(0, 50_000)),
                statuses[rng.integers(len(statuses))],
                bool(rng.random() < 0.5),
            )
            assert result.effective_rate <= result.marginal_rate
            assert result.total_tax == result.federal_tax + result.state_tax

    def test_config_year(self):
        assert CURRENT_TAX_CONFIG.year == 2024
