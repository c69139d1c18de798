"""Federal and Massachusetts tax calculation for retirement income."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from enum import Enum

from benefits.exceptions import InvalidInputError
from benefits.tax_config import CURRENT_TAX_CONFIG, TaxYearConfig
from utils.helpers import round_currency

logger = logging.getLogger(__name__)


class FilingStatus(Enum):
    """Tax filing status."""

    SINGLE = "single"
    MARRIED_FILING_JOINTLY = "married_filing_jointly"
    MARRIED_FILING_SEPARATELY = "married_filing_separately"
    HEAD_OF_HOUSEHOLD = "head_of_household"

    @classmethod
    def coerce(cls, value: "FilingStatus | str") -> "FilingStatus":
        """
        Convert form input into a FilingStatus.

        Accepts the enum, its value, camelCase ("marriedFilingJointly"), the
        short forms mfj, mfs and hoh, and the calculator spellings
        "married", "marriedJoint" and "marriedSeparate".
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            key = re.sub(r"[\s-]+", "_", value.strip())
            key = re.sub(r"(?<=[a-z])(?=[A-Z])", "_", key).lower()
            key = _FILING_STATUS_ALIASES.get(key, key)
            try:
                return cls(key)
            except ValueError:
                pass
        raise InvalidInputError("filing_status", f"Unknown filing status: {value!r}")

    @property
    def filers(self) -> int:
        """Number of people covered by the return."""
        return 2 if self == FilingStatus.MARRIED_FILING_JOINTLY else 1


_FILING_STATUS_ALIASES = {
    "mfj": "married_filing_jointly",
    "mfs": "married_filing_separately",
    "hoh": "head_of_household",
    "married": "married_filing_jointly",
    "married_joint": "married_filing_jointly",
    "married_separate": "married_filing_separately",
}


@dataclass(frozen=True)
class BracketSlice:
    """Income taxed at a single rate."""

    rate: float
    income: float
    tax: float


@dataclass(frozen=True)
class TaxBreakdown:
    """Tax owed to one jurisdiction, bracket by bracket."""

    taxable_income: float
    total_tax: float
    effective_rate: float
    marginal_rate: float
    brackets: tuple[BracketSlice, ...] = ()


@dataclass(frozen=True)
class TaxResult:
    """
    Result of a retirement income tax calculation.

    Attributes:
        gross_income: Pension + Social Security + other income
        federal_tax: Federal income tax
        state_tax: Massachusetts income tax
        total_tax: federal_tax + state_tax
        net_income: gross_income - total_tax
        effective_rate: total_tax / gross_income
        marginal_rate: Federal plus state rate on the next dollar
        taxable_social_security: Portion of benefits subject to federal tax
        federal: Federal bracket breakdown
        state: Massachusetts breakdown
    """

    gross_income: float
    federal_tax: float
    state_tax: float
    total_tax: float
    net_income: float
    effective_rate: float
    marginal_rate: float
    taxable_social_security: float = 0.0
    federal: TaxBreakdown | None = field(default=None, compare=False)
    state: TaxBreakdown | None = field(default=None, compare=False)

    @property
    def monthly_net_income(self) -> float:
        return round_currency(self.net_income / 12)


def get_brackets(
    filing_status: FilingStatus | str,
    config: TaxYearConfig = CURRENT_TAX_CONFIG,
) -> list[tuple[float, float]]:
    """
    Get federal income tax brackets for a filing status.

    Returns:
        List of (upper_bound, rate) tuples
    """
    return config.federal_brackets[FilingStatus.coerce(filing_status).value]


def estimate_marginal_rate(
    taxable_income: float,
    filing_status: FilingStatus | str = FilingStatus.SINGLE,
    config: TaxYearConfig = CURRENT_TAX_CONFIG,
) -> float:
    """
    Federal rate on the last dollar of taxable income.

    Returns 0.0 when there is no taxable income.
    """
    if taxable_income <= 0:
        return 0.0

    brackets = get_brackets(filing_status, config)
    for upper_bound, rate in brackets:
        if taxable_income <= upper_bound:
            return rate

    # If income exceeds all brackets, return top rate
    return brackets[-1][1]


def calculate_federal_tax(
    taxable_income: float,
    filing_status: FilingStatus | str = FilingStatus.SINGLE,
    config: TaxYearConfig = CURRENT_TAX_CONFIG,
) -> TaxBreakdown:
    """
    Calculate federal income tax using marginal tax brackets.

    Args:
        taxable_income: Income after deductions
        filing_status: Tax filing status
        config: Tax year settings

    Returns:
        TaxBreakdown with per-bracket slices
    """
    brackets = get_brackets(filing_status, config)

    if taxable_income <= 0:
        return TaxBreakdown(
            taxable_income=0.0,
            total_tax=0.0,
            effective_rate=0.0,
            marginal_rate=0.0,
        )

    tax = 0.0
    prev_bound = 0.0
    slices = []

    for upper_bound, rate in brackets:
        if taxable_income <= prev_bound:
            break

        bracket_income = min(taxable_income, upper_bound) - prev_bound
        if bracket_income > 0:
            bracket_tax = bracket_income * rate
            tax += bracket_tax
            slices.append(BracketSlice(rate=rate, income=bracket_income, tax=bracket_tax))

        prev_bound = upper_bound

    return TaxBreakdown(
        taxable_income=taxable_income,
        total_tax=tax,
        effective_rate=tax / taxable_income,
        marginal_rate=estimate_marginal_rate(taxable_income, filing_status, config),
        brackets=tuple(slices),
    )


def calculate_social_security_taxable(
    ss_benefit: float,
    other_income: float,
    filing_status: FilingStatus | str = FilingStatus.SINGLE,
    config: TaxYearConfig = CURRENT_TAX_CONFIG,
) -> float:
    """
    Portion of annual Social Security benefits subject to federal tax.

    Provisional income is other income plus half of benefits. Below the
    first threshold nothing is taxable; between the thresholds up to 50%;
    above the second threshold up to 85%.

    Args:
        ss_benefit: Annual Social Security benefits
        other_income: Other income counted toward provisional income
        filing_status: Tax filing status
        config: Tax year settings

    Returns:
        Taxable amount, never more than 85% of benefits
    """
    filing_status = FilingStatus.coerce(filing_status)
    if ss_benefit <= 0:
        return 0.0

    key = filing_status.value if filing_status.value in config.ss_thresholds else "single"
    lower, upper = config.ss_thresholds[key]
    provisional = max(0.0, other_income) + ss_benefit * 0.5

    if provisional <= lower:
        return 0.0
    if provisional <= upper:
        return min(ss_benefit * 0.5, (provisional - lower) * 0.5)

    first_tier = min(ss_benefit * 0.5, (upper - lower) * 0.5)
    return min(ss_benefit * 0.85, (provisional - upper) * 0.85 + first_tier)


def calculate_massachusetts_tax(
    ma_gross_income: float,
    filing_status: FilingStatus | str = FilingStatus.SINGLE,
    age_65_or_older: bool = False,
    config: TaxYearConfig = CURRENT_TAX_CONFIG,
) -> TaxBreakdown:
    """
    Calculate Massachusetts income tax.

    Social Security is not part of Massachusetts gross income, so callers
    pass pension and other income only. Joint filers get double deductions
    and exemptions; the 65+ exemption assumes both spouses qualify.

    Args:
        ma_gross_income: Income taxable by Massachusetts
        filing_status: Tax filing status
        age_65_or_older: Whether the filer (and spouse) are 65 or older
        config: Tax year settings

    Returns:
        TaxBreakdown with the flat-rate slice and any surtax slice
    """
    filing_status = FilingStatus.coerce(filing_status)
    filers = filing_status.filers

    deductions = (config.ma_deduction + config.ma_personal_exemption) * filers
    if age_65_or_older:
        deductions += config.ma_age_65_exemption * filers

    taxable_income = max(0.0, ma_gross_income - deductions)
    if taxable_income <= 0:
        return TaxBreakdown(
            taxable_income=0.0,
            total_tax=0.0,
            effective_rate=0.0,
            marginal_rate=0.0,
        )

    base_tax = taxable_income * config.ma_tax_rate
    slices = [BracketSlice(rate=config.ma_tax_rate, income=taxable_income, tax=base_tax)]
    marginal_rate = config.ma_tax_rate

    surtax_income = taxable_income - config.ma_surtax_threshold
    if surtax_income > 0:
        surtax = surtax_income * config.ma_surtax_rate
        slices.append(BracketSlice(rate=config.ma_surtax_rate, income=surtax_income, tax=surtax))
        marginal_rate += config.ma_surtax_rate

    total_tax = sum(s.tax for s in slices)

    return TaxBreakdown(
        taxable_income=taxable_income,
        total_tax=total_tax,
        effective_rate=total_tax / ma_gross_income,
        marginal_rate=marginal_rate,
        brackets=tuple(slices),
    )


def federal_standard_deduction(
    filing_status: FilingStatus | str,
    age_65_or_older: bool = False,
    config: TaxYearConfig = CURRENT_TAX_CONFIG,
) -> float:
    """Standard deduction including the additional amount for 65+ filers."""
    filing_status = FilingStatus.coerce(filing_status)
    deduction = config.standard_deductions[filing_status.value]
    if age_65_or_older:
        if filing_status in (FilingStatus.SINGLE, FilingStatus.HEAD_OF_HOUSEHOLD):
            deduction += config.additional_deduction_65_unmarried
        else:
            deduction += config.additional_deduction_65_married * filing_status.filers
    return deduction


def calculate_retirement_taxes(
    gross_pension: float,
    gross_social_security: float,
    other_income: float = 0.0,
    filing_status: FilingStatus | str = FilingStatus.SINGLE,
    age_65_or_older: bool = False,
    exempt_public_pension: bool = False,
    config: TaxYearConfig = CURRENT_TAX_CONFIG,
) -> TaxResult:
    """
    Calculate federal and Massachusetts tax on annual retirement income.

    Federal tax applies to pension, other income and the taxable part of
    Social Security after the standard deduction. Massachusetts taxes
    pension and other income; Social Security is exempt, and a contributory
    Massachusetts public pension can be excluded with
    ``exempt_public_pension``.

    Args:
        gross_pension: Annual pension income
        gross_social_security: Annual Social Security benefits
        other_income: Other annual taxable income
        filing_status: Tax filing status
        age_65_or_older: Whether the filer is 65 or older
        exempt_public_pension: Exclude the pension from Massachusetts income
        config: Tax year settings

    Returns:
        TaxResult with federal and state breakdowns

    Raises:
        InvalidInputError: If the filing status is unknown
    """
    filing_status = FilingStatus.coerce(filing_status)

    # Negative amounts contribute nothing to tax
    pension = max(0.0, gross_pension)
    social_security = max(0.0, gross_social_security)
    other = max(0.0, other_income)

    taxable_ss = calculate_social_security_taxable(
        social_security, pension + other, filing_status, config
    )
    federal_income = pension + other + taxable_ss
    deduction = federal_standard_deduction(filing_status, age_65_or_older, config)
    federal = calculate_federal_tax(max(0.0, federal_income - deduction), filing_status, config)

    ma_income = other if exempt_public_pension else pension + other
    state = calculate_massachusetts_tax(ma_income, filing_status, age_65_or_older, config)

    gross_income = pension + social_security + other
    federal_tax = round_currency(federal.total_tax)
    state_tax = round_currency(state.total_tax)
    total_tax = federal_tax + state_tax
    unrounded_total = federal.total_tax + state.total_tax
    effective_rate = unrounded_total / gross_income if gross_income > 0 else 0.0

    logger.debug(
        f"Taxes on {gross_income:,.2f} ({filing_status.value}): "
        f"federal {federal_tax:,.2f}, state {state_tax:,.2f}"
    )

    return TaxResult(
        gross_income=round_currency(gross_income),
        federal_tax=federal_tax,
        state_tax=state_tax,
        total_tax=total_tax,
        net_income=round_currency(gross_income - total_tax),
        effective_rate=effective_rate,
        marginal_rate=federal.marginal_rate + state.marginal_rate,
        taxable_social_security=round_currency(taxable_ss),
        federal=federal,
        state=state,
    )
