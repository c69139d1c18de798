"""Year-by-year pension and retirement income projections."""

from __future__ import annotations

import logging
from typing import Any

import pandas as pd

from benefits.cola import calculate_ma_pension_cola
from benefits.pension import MemberProfile, calculate_pension_benefit
from benefits.pension_config import (
    CURRENT_MA_COLA,
    MAX_PENSION_PERCENTAGE_OF_SALARY,
    RetirementGroup,
    RetirementOption,
    ServiceEntry,
)
from benefits.social_security import SocialSecurityResult, calculate_cola_adjustment
from utils.helpers import round_currency

logger = logging.getLogger(__name__)

# Oldest age shown in a service projection, per group
GROUP_MAX_PROJECTION_AGE: dict[RetirementGroup, int] = {
    RetirementGroup.GROUP_1: 70,
    RetirementGroup.GROUP_2: 68,
    RetirementGroup.GROUP_3: 68,
    RetirementGroup.GROUP_4: 65,
}

MAX_PROJECTION_YEARS = 30

PROJECTION_TABLE_COLUMNS = [
    "age",
    "years_of_service",
    "benefit_factor",
    "total_benefit_percentage",
    "annual_pension",
    "monthly_pension",
    "survivor_annual",
    "survivor_monthly",
]

BENEFITS_PROJECTION_COLUMNS = [
    "age",
    "years_in_retirement",
    "pension_annual",
    "cola_increase",
    "cumulative_cola",
    "pension_monthly",
    "social_security_annual",
    "social_security_monthly",
    "combined_annual",
    "combined_monthly",
]


def generate_projection_table(
    group: RetirementGroup | str,
    start_age: float,
    years_of_service: float,
    average_salary: float,
    option: RetirementOption | str = RetirementOption.A,
    beneficiary_age: float | None = None,
    service_entry: ServiceEntry | str = ServiceEntry.BEFORE_2012,
) -> pd.DataFrame:
    """
    Project the allowance for each additional year worked.

    Rows start at ``start_age`` and add one year of age and service per row,
    skipping years the member is not yet eligible. The table stops once the
    80% cap is reached, at the group's projection age limit, or after 30
    years. The beneficiary ages alongside the member.

    Returns:
        DataFrame with one row per eligible retirement age
    """
    group = RetirementGroup.coerce(group)
    max_age = GROUP_MAX_PROJECTION_AGE[group]
    rows = []

    for offset in range(MAX_PROJECTION_YEARS):
        age = start_age + offset
        service = years_of_service + offset
        if service < 0:
            continue
        if int(age) > max_age:
            break

        result = calculate_pension_benefit(
            MemberProfile(
                age=age,
                years_of_service=service,
                group=group,
                service_entry=service_entry,
                average_salary=average_salary,
                option=option,
                beneficiary_age=beneficiary_age + offset if beneficiary_age else None,
            )
        )
        if not result.eligible:
            continue

        has_survivor = result.retirement_option == RetirementOption.C
        rows.append({
            "age": age,
            "years_of_service": service,
            "benefit_factor": result.benefit_factor,
            "total_benefit_percentage": result.total_benefit_percentage,
            "annual_pension": result.annual_pension,
            "monthly_pension": result.monthly_pension,
            "survivor_annual": result.survivor_annual_pension if has_survivor else None,
            "survivor_monthly": result.survivor_monthly_pension if has_survivor else None,
        })

        if result.total_benefit_percentage >= MAX_PENSION_PERCENTAGE_OF_SALARY:
            break

    logger.debug(f"Projection table for {group.value} from age {start_age}: {len(rows)} rows")
    return pd.DataFrame(rows, columns=PROJECTION_TABLE_COLUMNS)


def calculate_benefits_projection(
    profile: MemberProfile,
    social_security: SocialSecurityResult | None = None,
    end_age: float = 80,
    include_cola: bool = True,
    cola_rate: float = CURRENT_MA_COLA.rate,
    cola_base: float = CURRENT_MA_COLA.base_amount,
    ss_cola_rate: float = 0.0,
) -> pd.DataFrame:
    """
    Project retirement income from the retirement age to ``end_age``.

    The allowance is fixed at retirement and grows only by the MA COLA
    (granted on the first ``cola_base`` dollars each year after the first).
    Social Security is paid from its claiming age and compounds at
    ``ss_cola_rate``.

    Args:
        profile: Member's pension inputs at retirement
        social_security: Social Security result (None for no benefit)
        end_age: Last age in the projection
        include_cola: Apply the MA pension COLA
        cola_rate: MA COLA rate
        cola_base: Portion of the allowance the COLA applies to
        ss_cola_rate: Assumed annual Social Security COLA

    Returns:
        DataFrame with one row per year of retirement (empty when the
        member is not eligible)
    """
    pension = calculate_pension_benefit(profile)
    if not pension.eligible:
        return pd.DataFrame(columns=BENEFITS_PROJECTION_COLUMNS)

    rows = []
    annual_pension = pension.annual_pension
    cumulative_cola = 0.0
    years = int(end_age - profile.age)

    for year in range(max(0, years) + 1):
        age = profile.age + year
        increase = 0.0
        if include_cola and year > 0:
            increase = calculate_ma_pension_cola(annual_pension, cola_rate, cola_base)
            annual_pension += increase
            cumulative_cola += increase

        ss_annual = 0.0
        if (
            social_security is not None
            and social_security.eligible
            and age >= social_security.claiming_age
        ):
            years_claimed = int(age - social_security.claiming_age)
            ss_annual = calculate_cola_adjustment(
                social_security.annual_benefit, years_claimed, ss_cola_rate
            )

        combined = annual_pension + ss_annual
        rows.append({
            "age": age,
            "years_in_retirement": year,
            "pension_annual": round_currency(annual_pension),
            "cola_increase": round_currency(increase),
            "cumulative_cola": round_currency(cumulative_cola),
            "pension_monthly": round_currency(annual_pension / 12),
            "social_security_annual": round_currency(ss_annual),
            "social_security_monthly": round_currency(ss_annual / 12),
            "combined_annual": round_currency(combined),
            "combined_monthly": round_currency(combined / 12),
        })

    return pd.DataFrame(rows, columns=BENEFITS_PROJECTION_COLUMNS)


def projection_summary(projection: pd.DataFrame) -> dict[str, Any] | None:
    """
    Summary statistics for a benefits projection.

    Returns:
        Dictionary of headline figures, or None for an empty projection
    """
    if projection.empty:
        return None

    first = projection.iloc[0]
    last = projection.iloc[-1]
    return {
        "start_age": float(first["age"]),
        "end_age": float(last["age"]),
        "total_projection_years": len(projection),
        "initial_monthly_pension": float(first["pension_monthly"]),
        "final_monthly_pension": float(last["pension_monthly"]),
        "peak_monthly_income": float(projection["combined_monthly"].max()),
        "total_cola_benefit": float(last["cumulative_cola"]),
        "years_with_social_security": int((projection["social_security_annual"] > 0).sum()),
        "lifetime_income": round_currency(float(projection["combined_annual"].sum())),
    }
