"""Social Security retirement, spousal and survivor benefit calculations."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import Sequence

import pandas as pd

from benefits.exceptions import InvalidInputError
from benefits.ss_config import (
    AIME_COMPUTATION_YEARS,
    CURRENT_SS_CONFIG,
    EARLY_REDUCTION_BEYOND_36_MONTHS,
    EARLY_REDUCTION_FIRST_36_MONTHS,
    EARLY_REDUCTION_TIER_MONTHS,
    FRA_MONTHS_BEFORE_1955,
    FRA_MONTHS_BY_BIRTH_YEAR,
    FRA_MONTHS_FROM_1960,
    MAX_BIRTH_YEAR,
    MIN_BIRTH_YEAR,
    PIA_RATES,
    SPOUSAL_BENEFIT_PERCENTAGE,
    SURVIVOR_MAX_REDUCTION,
    SURVIVOR_MINIMUM_AGE,
)
from utils.helpers import format_currency, round_currency

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SocialSecurityParams:
    """
    Inputs for a retirement benefit estimate.

    Attributes:
        birth_year: Year of birth
        claiming_age: Age at which benefits start
        aime: Average Indexed Monthly Earnings; derived from
            earnings_history when None
        earnings_history: Annual indexed earnings (any order)
    """

    birth_year: int
    claiming_age: float
    aime: float | None = None
    earnings_history: tuple[float, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class SocialSecurityResult:
    """Result of a Social Security benefit calculation."""

    monthly_benefit: float
    annual_benefit: float
    primary_insurance_amount: float
    full_retirement_age: float
    eligible: bool
    reduction_percentage: float = 0.0  # fraction, early claiming only
    delayed_retirement_credits: float = 0.0  # fraction, delayed claiming only
    claiming_age: float = 0.0
    aime: float = 0.0


@dataclass(frozen=True)
class DelayedCreditsResult:
    """Delayed retirement credits earned by claiming after FRA."""

    credits_percentage: float
    additional_benefit: float
    total_benefit: float


@dataclass(frozen=True)
class SpousalBenefitResult:
    """Spousal benefit compared with the spouse's own benefit."""

    spousal_benefit: float
    own_benefit: float
    total_benefit: float


@dataclass(frozen=True)
class ClaimingStrategy:
    """
    Recommended claiming age from a lifetime-benefit comparison.

    Attributes:
        recommended_age: Claiming age with the largest lifetime benefit
        monthly_benefit: Monthly benefit at the recommended age
        total_lifetime_benefit: Benefits collected through life expectancy
        break_even_age: Age at which the recommendation overtakes claiming
            at the earliest candidate age (None if they coincide)
        reasoning: Plain-language explanation
        comparison: Per-age table the recommendation was drawn from
    """

    recommended_age: int
    monthly_benefit: float
    total_lifetime_benefit: float
    break_even_age: float | None
    reasoning: str
    comparison: pd.DataFrame = field(default_factory=pd.DataFrame, compare=False, repr=False)


def _validate_birth_year(birth_year: int) -> None:
    if not MIN_BIRTH_YEAR < birth_year <= MAX_BIRTH_YEAR:
        raise InvalidInputError(
            "birth_year",
            f"Must be after {MIN_BIRTH_YEAR} and no later than {MAX_BIRTH_YEAR}, got {birth_year}",
        )


def full_retirement_age_months(birth_year: int) -> int:
    """Full retirement age in months for a birth year."""
    _validate_birth_year(birth_year)
    if birth_year < 1955:
        return FRA_MONTHS_BEFORE_1955
    if birth_year >= 1960:
        return FRA_MONTHS_FROM_1960
    return FRA_MONTHS_BY_BIRTH_YEAR[birth_year]


def full_retirement_age(birth_year: int) -> float:
    """
    Full retirement age in years, to one decimal (66.2 for 1955).

    Raises:
        InvalidInputError: If the birth year is implausible
    """
    return round(full_retirement_age_months(birth_year) / 12, 1)


def calculate_primary_insurance_amount(aime: float) -> float:
    """
    Apply the SSA bend-point formula to AIME.

    90% of AIME up to the first bend point, 32% up to the second and 15%
    above it.
    """
    if aime <= 0:
        return 0.0

    first = CURRENT_SS_CONFIG.first_bend_point
    second = CURRENT_SS_CONFIG.second_bend_point
    rate_low, rate_mid, rate_high = PIA_RATES

    pia = rate_low * min(aime, first)
    if aime > first:
        pia += rate_mid * (min(aime, second) - first)
    if aime > second:
        pia += rate_high * (aime - second)
    return pia


def calculate_aime(earnings_history: Sequence[float]) -> float:
    """
    Average Indexed Monthly Earnings from annual indexed earnings.

    The highest 35 years are summed and divided by 420 months; missing years
    count as zero. SSA truncates the result to whole dollars.
    """
    highest = sorted((max(0.0, float(e)) for e in earnings_history), reverse=True)
    total = math.fsum(highest[:AIME_COMPUTATION_YEARS])
    return float(math.floor(total / (AIME_COMPUTATION_YEARS * 12)))


def early_reduction(months_early: int) -> float:
    """Fractional reduction for claiming ``months_early`` months before FRA."""
    if months_early <= 0:
        return 0.0
    first_tier = min(months_early, EARLY_REDUCTION_TIER_MONTHS)
    beyond = max(0, months_early - EARLY_REDUCTION_TIER_MONTHS)
    return (
        first_tier * EARLY_REDUCTION_FIRST_36_MONTHS
        + beyond * EARLY_REDUCTION_BEYOND_36_MONTHS
    )


def calculate_delayed_retirement_credits(
    full_retirement_age: float,
    claiming_age: float,
    base_benefit: float,
) -> DelayedCreditsResult:
    """
    Delayed retirement credits for claiming after FRA.

    Credits accrue monthly at 8% a year and stop at age 70.

    Args:
        full_retirement_age: FRA in years (66.5 for 66 and 6 months)
        claiming_age: Age benefits start
        base_benefit: Monthly benefit at FRA (the PIA)

    Returns:
        DelayedCreditsResult; zero credits when claiming at or before FRA
    """
    effective_age = min(claiming_age, CURRENT_SS_CONFIG.max_delay_age)
    months_late = round((effective_age - full_retirement_age) * 12)
    if months_late <= 0:
        return DelayedCreditsResult(
            credits_percentage=0.0,
            additional_benefit=0.0,
            total_benefit=base_benefit,
        )

    credits = round(months_late * CURRENT_SS_CONFIG.delayed_credit_per_year / 12, 6)
    additional = base_benefit * credits
    return DelayedCreditsResult(
        credits_percentage=credits,
        additional_benefit=round_currency(additional),
        total_benefit=round_currency(base_benefit + additional),
    )


def calculate_social_security_benefit(params: SocialSecurityParams) -> SocialSecurityResult:
    """
    Estimate the monthly retirement benefit at a claiming age.

    Args:
        params: Birth year, claiming age and AIME (or earnings history)

    Returns:
        SocialSecurityResult; zero benefit and not eligible when claiming
        before 62 or without covered earnings

    Raises:
        InvalidInputError: If the birth year is implausible
    """
    fra_months = full_retirement_age_months(params.birth_year)
    fra = round(fra_months / 12, 1)

    if params.aime is not None:
        aime = float(params.aime)
    else:
        aime = calculate_aime(params.earnings_history)

    claiming_age = params.claiming_age
    pia = calculate_primary_insurance_amount(aime)
    eligible = claiming_age >= CURRENT_SS_CONFIG.early_claiming_age and aime > 0

    if not eligible:
        return SocialSecurityResult(
            monthly_benefit=0.0,
            annual_benefit=0.0,
            primary_insurance_amount=round_currency(pia),
            full_retirement_age=fra,
            eligible=False,
            claiming_age=claiming_age,
            aime=aime,
        )

    claiming_months = round(claiming_age * 12)
    reduction = 0.0
    credits = 0.0

    if claiming_months < fra_months:
        reduction = early_reduction(fra_months - claiming_months)
        monthly = pia * (1 - reduction)
    elif claiming_months > fra_months:
        delayed = calculate_delayed_retirement_credits(fra_months / 12, claiming_age, pia)
        credits = delayed.credits_percentage
        monthly = pia * (1 + credits)
    else:
        monthly = pia

    logger.debug(
        f"SS birth {params.birth_year} claim {claiming_age}: AIME {aime:.0f}, "
        f"PIA {pia:.2f}, monthly {monthly:.2f}"
    )

    return SocialSecurityResult(
        monthly_benefit=round_currency(monthly),
        annual_benefit=round_currency(monthly * 12),
        primary_insurance_amount=round_currency(pia),
        full_retirement_age=fra,
        eligible=True,
        reduction_percentage=reduction,
        delayed_retirement_credits=credits,
        claiming_age=claiming_age,
        aime=aime,
    )


def calculate_spousal_benefit(
    higher_earner_benefit: float,
    own_benefit: float,
) -> SpousalBenefitResult:
    """
    Spousal benefit (50% of the higher earner) against the spouse's own.

    The spouse receives whichever is larger.
    """
    spousal = max(0.0, higher_earner_benefit) * SPOUSAL_BENEFIT_PERCENTAGE
    own = max(0.0, own_benefit)
    return SpousalBenefitResult(
        spousal_benefit=round_currency(spousal),
        own_benefit=round_currency(own),
        total_benefit=round_currency(max(own, spousal)),
    )


def calculate_survivor_benefit(
    deceased_benefit: float,
    survivor_age: float,
    full_retirement_age: float = 67.0,
) -> float:
    """
    Monthly survivor benefit for a widow(er).

    100% of the deceased's benefit at the survivor's FRA, reduced linearly
    to a 28.5% reduction at age 60. Nothing is payable before 60.
    """
    if deceased_benefit <= 0 or survivor_age < SURVIVOR_MINIMUM_AGE:
        return 0.0
    if survivor_age >= full_retirement_age:
        return round_currency(deceased_benefit)

    span = full_retirement_age - SURVIVOR_MINIMUM_AGE
    reduction = SURVIVOR_MAX_REDUCTION * (full_retirement_age - survivor_age) / span
    return round_currency(deceased_benefit * (1 - reduction))


def calculate_cola_adjustment(base_benefit: float, years: float, cola_rate: float) -> float:
    """
    Grow a benefit by an annual COLA for a number of years.

    Negative years leave the benefit unchanged.
    """
    if years < 0:
        return base_benefit
    return base_benefit * (1 + cola_rate) ** years


def claiming_age_comparison(
    birth_year: int,
    life_expectancy: float,
    aime: float,
    current_age: float = 62,
) -> pd.DataFrame:
    """
    Compare benefits for each whole claiming age from now (or 62) to 70.

    Past 70 the only candidate is 70, when credits stop accruing.

    Args:
        birth_year: Year of birth
        life_expectancy: Age benefits are assumed to stop
        aime: Average Indexed Monthly Earnings
        current_age: Claimant's current age; earlier ages are skipped

    Returns:
        DataFrame with one row per claiming age
    """
    last_age = CURRENT_SS_CONFIG.max_delay_age
    first_age = min(max(CURRENT_SS_CONFIG.early_claiming_age, math.ceil(current_age)), last_age)

    rows = []
    for age in range(first_age, last_age + 1):
        result = calculate_social_security_benefit(
            SocialSecurityParams(birth_year=birth_year, claiming_age=age, aime=aime)
        )
        years_collecting = max(0.0, life_expectancy - age)
        rows.append({
            "claiming_age": age,
            "monthly_benefit": result.monthly_benefit,
            "annual_benefit": result.annual_benefit,
            "years_collecting": years_collecting,
            "lifetime_benefit": round_currency(result.monthly_benefit * 12 * years_collecting),
            "reduction_percentage": result.reduction_percentage,
            "delayed_retirement_credits": result.delayed_retirement_credits,
        })

    return pd.DataFrame(rows)


def calculate_optimal_claiming_age(
    birth_year: int,
    life_expectancy: float,
    aime: float,
    current_age: float = 62,
) -> ClaimingStrategy:
    """
    Recommend the claiming age that maximizes lifetime benefits.

    Lifetime benefit is the monthly benefit times the months collected up to
    life expectancy, with no discounting. Ties go to the earlier age.

    Returns:
        ClaimingStrategy with the per-age comparison attached
    """
    table = claiming_age_comparison(birth_year, life_expectancy, aime, current_age)

    best = table.iloc[0]
    for _, row in table.iterrows():
        if row["lifetime_benefit"] > best["lifetime_benefit"]:
            best = row

    earliest = table.iloc[0]
    recommended_age = int(best["claiming_age"])
    earliest_age = int(earliest["claiming_age"])
    best_monthly = float(best["monthly_benefit"])
    earliest_monthly = float(earliest["monthly_benefit"])
    lifetime = float(best["lifetime_benefit"])

    break_even_age = None
    if recommended_age != earliest_age and best_monthly > earliest_monthly:
        break_even_age = round(
            (best_monthly * recommended_age - earliest_monthly * earliest_age)
            / (best_monthly - earliest_monthly),
            1,
        )

    if best_monthly <= 0:
        reasoning = "No Social Security benefit is payable with the earnings entered."
    elif lifetime <= 0:
        reasoning = (
            f"Life expectancy of {life_expectancy:g} is at or before the earliest "
            f"claiming age of {earliest_age}, so no benefits would be collected."
        )
    elif break_even_age is None:
        reasoning = (
            f"Claiming at {recommended_age} gives the highest estimated lifetime "
            f"benefit ({format_currency(lifetime)}) with a life expectancy of {life_expectancy:g}."
        )
    else:
        reasoning = (
            f"Claiming at {recommended_age} gives the highest estimated lifetime "
            f"benefit ({format_currency(lifetime)}) with a life expectancy of {life_expectancy:g}. "
            f"Waiting past {earliest_age} pays off if you live beyond age {break_even_age:.1f}."
        )

    logger.debug(f"Optimal claiming age for {birth_year}: {recommended_age}")

    return ClaimingStrategy(
        recommended_age=recommended_age,
        monthly_benefit=best_monthly,
        total_lifetime_benefit=lifetime,
        break_even_age=break_even_age,
        reasoning=reasoning,
        comparison=table,
    )
