"""Tests for Social Security calculations."""

import pandas as pd
import pytest

from benefits.exceptions import InvalidInputError
from benefits.social_security import (
    SocialSecurityParams,
    calculate_aime,
    calculate_cola_adjustment,
    calculate_delayed_retirement_credits,
    calculate_optimal_claiming_age,
    calculate_primary_insurance_amount,
    calculate_social_security_benefit,
    calculate_spousal_benefit,
    calculate_survivor_benefit,
    claiming_age_comparison,
    early_reduction,
    full_retirement_age,
)
from utils.helpers import format_currency


class TestFullRetirementAge:
    """Tests for FRA by birth year."""

    @pytest.mark.parametrize(
        "birth_year,expected",
        [(1950, 66), (1954, 66), (1955, 66.2), (1956, 66.3), (1957, 66.5),
         (1958, 66.7), (1959, 66.8), (1960, 67), (1985, 67)],
    )
    def test_schedule(self, birth_year, expected):
        assert full_retirement_age(birth_year) == expected

    @pytest.mark.parametrize("birth_year", [1900, 1850, 2101])
    def test_implausible_year_raises(self, birth_year):
        with pytest.raises(InvalidInputError):
            full_retirement_age(birth_year)

    def test_upper_bound_inclusive(self):
        assert full_retirement_age(2100) == 67


class TestPrimaryInsuranceAmount:
    """Tests for the bend-point formula."""

    def test_below_first_bend_point(self):
        assert calculate_primary_insurance_amount(1_000) == pytest.approx(900)

    def test_at_first_bend_point(self):
        assert calculate_primary_insurance_amount(1_174) == pytest.approx(1_056.6)

    def test_middle_segment(self):
        assert calculate_primary_insurance_amount(5_000) == pytest.approx(2_280.92)

    def test_top_segment(self):
        assert calculate_primary_insurance_amount(8_000) == pytest.approx(3_084.18)

    def test_zero_and_negative(self):
        assert calculate_primary_insurance_amount(0) == 0.0
        assert calculate_primary_insurance_amount(-500) == 0.0


class TestAime:
    """Tests for AIME from earnings history."""

    def test_thirty_five_years(self):
        assert calculate_aime([60_000] * 35) == 5_000

    def test_only_highest_years_count(self):
        history = [60_000] * 35 + [10_000] * 5
        assert calculate_aime(history) == 5_000

    def test_short_career_counts_zeros(self):
        assert calculate_aime([84_000] * 10) == 2_000

    def test_derived_when_aime_missing(self):
        params = SocialSecurityParams(
            birth_year=1960, claiming_age=67, earnings_history=tuple([60_000] * 35)
        )
        result = calculate_social_security_benefit(params)
        assert result.aime == 5_000
        assert result.monthly_benefit == pytest.approx(2_280.92)


class TestSocialSecurityBenefit:
    """Tests for the retirement benefit."""

    def test_benefit_at_fra(self, ss_params_1960):
        result = calculate_social_security_benefit(ss_params_1960)
        assert result.eligible is True
        assert result.full_retirement_age == 67
        assert result.monthly_benefit == pytest.approx(2_280.92)
        assert result.annual_benefit == pytest.approx(2_280.92 * 12, abs=0.01)
        assert result.reduction_percentage == 0.0
        assert result.delayed_retirement_credits == 0.0

    def test_early_reduction_at_62(self):
        """60 months early: 36 at 5/9% and 24 at 5/12% is 30%."""
        result = calculate_social_security_benefit(
            SocialSecurityParams(birth_year=1960, claiming_age=62, aime=5_000)
        )
        assert result.reduction_percentage == pytest.approx(0.30)
        assert result.monthly_benefit == pytest.approx(2_280.92 * 0.70, abs=0.01)
        assert result.delayed_retirement_credits == 0.0

    def test_delayed_credits_at_70(self):
        result = calculate_social_security_benefit(
            SocialSecurityParams(birth_year=1960, claiming_age=70, aime=5_000)
        )
        assert result.delayed_retirement_credits == pytest.approx(0.24)
        assert result.monthly_benefit == pytest.approx(2_280.92 * 1.24, abs=0.01)
        assert result.reduction_percentage == 0.0

    def test_credits_stop_at_70(self):
        at_70 = calculate_social_security_benefit(
            SocialSecurityParams(birth_year=1960, claiming_age=70, aime=5_000)
        )
        at_72 = calculate_social_security_benefit(
            SocialSecurityParams(birth_year=1960, claiming_age=72, aime=5_000)
        )
        assert at_72.monthly_benefit == at_70.monthly_benefit

    def test_phase_in_fra(self):
        """Born 1955: FRA 66 and 2 months, so claiming at 66 is 2 months early."""
        result = calculate_social_security_benefit(
            SocialSecurityParams(birth_year=1955, claiming_age=66, aime=5_000)
        )
        assert result.full_retirement_age == 66.2
        assert result.reduction_percentage == pytest.approx(2 * 5 / 900)

    def test_before_62_not_eligible(self):
        result = calculate_social_security_benefit(
            SocialSecurityParams(birth_year=1960, claiming_age=61, aime=5_000)
        )
        assert result.eligible is False
        assert result.monthly_benefit == 0.0

    def test_zero_earnings(self):
        result = calculate_social_security_benefit(
            SocialSecurityParams(birth_year=1960, claiming_age=67, aime=0)
        )
        assert result.monthly_benefit == 0.0
        assert result.eligible is False

    def test_negative_earnings(self):
        result = calculate_social_security_benefit(
            SocialSecurityParams(birth_year=1960, claiming_age=67, aime=-1_000)
        )
        assert result.monthly_benefit == 0.0

    def test_invalid_birth_year_raises(self):
        with pytest.raises(InvalidInputError):
            calculate_social_security_benefit(
                SocialSecurityParams(birth_year=1899, claiming_age=67, aime=5_000)
            )

    def test_monotonic_in_claiming_age(self):
        """Later claiming never lowers the monthly benefit."""
        benefits = [
            calculate_social_security_benefit(
                SocialSecurityParams(birth_year=1958, claiming_age=age, aime=4_000)
            ).monthly_benefit
            for age in range(62, 71)
        ]
        assert benefits == sorted(benefits)

    def test_reduction_and_credits_exclusive(self, rng):
        for _ in range(100):
            params = SocialSecurityParams(
                birth_year=int(rng.integers(1940, 2000)),
                claiming_age=float(rng.uniform(60, 72)),
                aime=float(rng.uniform(0, 10_000)),
            )
            result = calculate_social_security_benefit(params)
            assert result.reduction_percentage == 0 or result.delayed_retirement_credits == 0


class TestEarlyReduction:
    """Tests for the early claiming schedule."""

    def test_first_tier(self):
        assert early_reduction(36) == pytest.approx(0.20)

    def test_second_tier(self):
        assert early_reduction(48) == pytest.approx(0.25)

    def test_none(self):
        assert early_reduction(0) == 0.0


class TestDelayedRetirementCredits:
    """Tests for delayed retirement credits."""

    def test_three_years(self):
        result = calculate_delayed_retirement_credits(67, 70, 2_000)
        assert result.credits_percentage == 0.24
        assert result.additional_benefit == 480
        assert result.total_benefit == 2_480

    def test_not_before_fra(self):
        result = calculate_delayed_retirement_credits(67, 65, 2_000)
        assert result.credits_percentage == 0
        assert result.additional_benefit == 0
        assert result.total_benefit == 2_000

    def test_capped_at_70(self):
        result = calculate_delayed_retirement_credits(67, 72, 2_000)
        assert result.credits_percentage == 0.24
        assert result.total_benefit == 2_480


class TestSpousalBenefit:
    """Tests for spousal benefits."""

    def test_spousal_higher(self):
        result = calculate_spousal_benefit(2_000, 800)
        assert result.spousal_benefit == 1_000
        assert result.total_benefit == 1_000

    def test_own_higher(self):
        result = calculate_spousal_benefit(2_000, 1_200)
        assert result.spousal_benefit == 1_000
        assert result.total_benefit == 1_200

    def test_no_own_benefit(self):
        result = calculate_spousal_benefit(2_000, 0)
        assert result.spousal_benefit == 1_000
        assert result.total_benefit == 1_000


class TestSurvivorBenefit:
    """Tests for survivor benefits."""

    def test_full_at_fra(self):
        assert calculate_survivor_benefit(2_000, 67, 67) == 2_000

    def test_maximum_reduction_at_60(self):
        assert calculate_survivor_benefit(2_000, 60, 67) == pytest.approx(1_430)

    def test_linear_between(self):
        assert calculate_survivor_benefit(1_000, 63.5, 67) == pytest.approx(857.5)

    def test_before_60(self):
        assert calculate_survivor_benefit(2_000, 59, 67) == 0.0


class TestColaAdjustment:
    """Tests for Social Security COLA."""

    def test_compounding(self):
        assert calculate_cola_adjustment(2_000, 5, 0.025) == pytest.approx(2_262.82, abs=0.01)

    def test_zero_rate(self):
        assert calculate_cola_adjustment(2_000, 5, 0) == 2_000

    def test_zero_years(self):
        assert calculate_cola_adjustment(2_000, 0, 0.025) == 2_000

    def test_negative_inputs(self):
        assert calculate_cola_adjustment(-1_000, 5, 0.025) <= 0
        assert calculate_cola_adjustment(2_000, -1, 0.025) == 2_000


class TestOptimalClaimingAge:
    """Tests for claiming age optimization."""

    def test_recommendation_in_range(self):
        result = calculate_optimal_claiming_age(1960, 85, 5_000, current_age=62)
        assert 62 <= result.recommended_age <= 70
        assert result.total_lifetime_benefit > 0
        assert result.reasoning

    def test_long_life_favours_delay(self):
        result = calculate_optimal_claiming_age(1960, 90, 5_000, current_age=62)
        assert result.recommended_age == 70
        assert result.break_even_age is not None
        assert 70 < result.break_even_age < 90

    def test_short_life_favours_early(self):
        result = calculate_optimal_claiming_age(1960, 75, 5_000, current_age=62)
        assert result.recommended_age == 62
        assert result.break_even_age is None

    def test_no_earnings(self):
        result = calculate_optimal_claiming_age(1960, 85, 0, current_age=62)
        assert result.total_lifetime_benefit == 0
        assert "No Social Security benefit" in result.reasoning

    def test_comparison_table(self):
        table = claiming_age_comparison(1960, 85, 5_000, current_age=62)
        assert isinstance(table, pd.DataFrame)
        assert list(table["claiming_age"]) == list(range(62, 71))
        assert table["monthly_benefit"].is_monotonic_increasing

    def test_comparison_skips_past_ages(self):
        table = claiming_age_comparison(1960, 85, 5_000, current_age=65.5)
        assert list(table["claiming_age"]) == [66, 67, 68, 69, 70]

    def test_past_seventy_caps_candidate(self):
        """Credits stop at 70, so an older claimant is offered 70 only."""
        result = calculate_optimal_claiming_age(1950, 90, 5_000, current_age=75)
        assert result.recommended_age == 70
        assert list(result.comparison["claiming_age"]) == [70]

    def test_life_expectancy_before_earliest_age(self):
        result = calculate_optimal_claiming_age(1960, 61, 5_000)
        assert result.total_lifetime_benefit == 0
        assert result.monthly_benefit > 0
        assert "No Social Security benefit" not in result.reasoning
        assert "earliest claiming age of 62" in result.reasoning

    def test_reasoning_shows_lifetime_dollars(self):
        result = calculate_optimal_claiming_age(1960, 85, 5_000, current_age=62)
        assert format_currency(result.total_lifetime_benefit) in result.reasoning
