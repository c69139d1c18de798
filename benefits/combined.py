"""Combined pension, Social Security and tax summary for a retiree."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from benefits.medicare import MedicarePremium, calculate_medicare_premium
from benefits.pension import MemberProfile, PensionResult, calculate_pension_benefit
from benefits.social_security import (
    SocialSecurityParams,
    SocialSecurityResult,
    SpousalBenefitResult,
    calculate_social_security_benefit,
    calculate_spousal_benefit,
)
from benefits.taxes import (
    FilingStatus,
    TaxResult,
    calculate_retirement_taxes,
    calculate_social_security_taxable,
)
from utils.helpers import round_currency

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CombinedResult:
    """
    Retirement income from all sources, before and after tax.

    Attributes:
        monthly_pension: Pension paid per month
        monthly_social_security: Social Security per month (spousal total when given)
        monthly_other_income: Other income per month
        total_monthly_income: Gross income per month
        total_annual_income: Gross income per year
        taxes: Federal and Massachusetts tax on the annual total
        net_annual_income: Annual income after tax
        net_monthly_income: Monthly income after tax
        medicare_annual_premium: Part B and Part D IRMAA premiums per year
        net_income_after_premiums: Net annual income less Medicare premiums
    """

    monthly_pension: float
    monthly_social_security: float
    monthly_other_income: float
    total_monthly_income: float
    total_annual_income: float
    taxes: TaxResult
    net_annual_income: float
    net_monthly_income: float
    medicare_annual_premium: float = 0.0
    net_income_after_premiums: float = 0.0
    pension: PensionResult | None = field(default=None, compare=False, repr=False)
    social_security: SocialSecurityResult | None = field(default=None, compare=False, repr=False)
    spousal: SpousalBenefitResult | None = field(default=None, compare=False, repr=False)
    medicare: MedicarePremium | None = field(default=None, compare=False, repr=False)

    @property
    def annual_pension(self) -> float:
        return round_currency(self.monthly_pension * 12)

    @property
    def annual_social_security(self) -> float:
        return round_currency(self.monthly_social_security * 12)


def combine_retirement_income(
    pension: PensionResult | None,
    social_security: SocialSecurityResult | None,
    other_income: float = 0.0,
    filing_status: FilingStatus | str = FilingStatus.SINGLE,
    age_65_or_older: bool = False,
    spousal: SpousalBenefitResult | None = None,
    medicare: MedicarePremium | None = None,
    exempt_public_pension: bool = False,
) -> CombinedResult:
    """
    Merge engine results into one income and tax summary.

    Pension, Social Security and other income are summed before tax; a
    spousal result replaces the retiree's own Social Security amount.
    Negative other income counts as zero, as it does for tax.

    Args:
        pension: Pension result (None when there is no pension)
        social_security: Social Security result (None when not claiming)
        other_income: Other annual taxable income
        filing_status: Tax filing status
        age_65_or_older: Whether the retiree is 65 or older
        spousal: Spousal benefit comparison
        medicare: Medicare premiums to subtract from net income
        exempt_public_pension: Exclude the pension from Massachusetts income

    Returns:
        CombinedResult
    """
    filing_status = FilingStatus.coerce(filing_status)
    other_income = max(0.0, other_income)

    monthly_pension = pension.monthly_pension if pension is not None else 0.0
    annual_pension = pension.annual_pension if pension is not None else 0.0

    if spousal is not None:
        monthly_ss = spousal.total_benefit
    elif social_security is not None:
        monthly_ss = social_security.monthly_benefit
    else:
        monthly_ss = 0.0
    annual_ss = round_currency(monthly_ss * 12)

    total_annual = annual_pension + annual_ss + other_income

    taxes = calculate_retirement_taxes(
        annual_pension,
        annual_ss,
        other_income,
        filing_status,
        age_65_or_older,
        exempt_public_pension,
    )

    medicare_annual = medicare.annual_total if medicare is not None else 0.0
    net_annual = taxes.net_income

    return CombinedResult(
        monthly_pension=monthly_pension,
        monthly_social_security=monthly_ss,
        monthly_other_income=round_currency(other_income / 12),
        total_monthly_income=round_currency(total_annual / 12),
        total_annual_income=round_currency(total_annual),
        taxes=taxes,
        net_annual_income=net_annual,
        net_monthly_income=round_currency(net_annual / 12),
        medicare_annual_premium=medicare_annual,
        net_income_after_premiums=round_currency(net_annual - medicare_annual),
        pension=pension,
        social_security=social_security,
        spousal=spousal,
        medicare=medicare,
    )


def calculate_combined_retirement(
    profile: MemberProfile,
    ss_params: SocialSecurityParams | None = None,
    other_income: float = 0.0,
    filing_status: FilingStatus | str = FilingStatus.SINGLE,
    age_65_or_older: bool | None = None,
    higher_earner_benefit: float | None = None,
    include_medicare: bool | None = None,
    exempt_public_pension: bool = False,
) -> CombinedResult:
    """
    Run the pension, Social Security and Medicare engines and combine them.

    Args:
        profile: Member's pension inputs
        ss_params: Social Security inputs (None for no Social Security)
        other_income: Other annual taxable income
        filing_status: Tax filing status
        age_65_or_older: Defaults to the member's retirement age being 65+
        higher_earner_benefit: Spouse's monthly benefit, for a spousal comparison
        include_medicare: Subtract Medicare premiums (defaults to age_65_or_older).
            IRMAA income is the pension, other income and the taxable part
            of Social Security.
        exempt_public_pension: Exclude the pension from Massachusetts income

    Returns:
        CombinedResult with the engine results attached
    """
    if age_65_or_older is None:
        age_65_or_older = profile.age >= 65
    if include_medicare is None:
        include_medicare = age_65_or_older

    pension = calculate_pension_benefit(profile)
    social_security = (
        calculate_social_security_benefit(ss_params) if ss_params is not None else None
    )

    spousal = None
    if higher_earner_benefit is not None:
        own = social_security.monthly_benefit if social_security is not None else 0.0
        spousal = calculate_spousal_benefit(higher_earner_benefit, own)

    medicare = None
    if include_medicare:
        ss_monthly = spousal.total_benefit if spousal is not None else (
            social_security.monthly_benefit if social_security is not None else 0.0
        )
        non_ss_income = pension.annual_pension + max(0.0, other_income)
        taxable_ss = calculate_social_security_taxable(
            round_currency(ss_monthly * 12), non_ss_income, filing_status
        )
        income = non_ss_income + taxable_ss
        medicare = calculate_medicare_premium(income, filing_status)

    logger.debug(
        f"Combined retirement for {profile.group.value} at {profile.age}: "
        f"pension {pension.annual_pension:,.2f}"
    )

    return combine_retirement_income(
        pension,
        social_security,
        other_income,
        filing_status,
        age_65_or_older,
        spousal=spousal,
        medicare=medicare,
        exempt_public_pension=exempt_public_pension,
    )
