"""Massachusetts state pension benefit calculation (MSRB rules)."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any, Iterable

import numpy as np

from benefits.exceptions import InvalidInputError
from benefits.pension_config import (
    ELIGIBILITY_AGES,
    GROUP_3_FACTOR,
    GROUP_3_SERVICE_YEARS,
    MAX_PENSION_PERCENTAGE_OF_SALARY,
    MINIMUM_FACTOR_AGE,
    OPTION_B_REDUCTION_POINTS,
    OPTION_C_AGE_GAP_WEIGHT,
    OPTION_C_GENERAL_REDUCTION_APPROX,
    OPTION_C_PERCENTAGES_OF_A,
    OPTION_C_SURVIVOR_PERCENTAGE,
    PENSION_FACTORS_DEFAULT,
    PENSION_FACTORS_POST_2012_LT_30YOS,
    POST_2012_FULL_FACTOR_YEARS,
    REFORM_DATE,
    SALARY_AVERAGING_YEARS,
    VESTING_YEARS,
    RetirementGroup,
    RetirementOption,
    ServiceEntry,
)
from utils.helpers import format_percentage, round_currency, safe_mean

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MemberProfile:
    """
    Career facts for one retirement scenario.

    Attributes:
        age: Age at retirement (fractional ages allowed for projections)
        years_of_service: Creditable service in years
        group: MSRB classification group
        service_entry: Membership before or on/after April 2, 2012
        salaries: Highest annual salaries (3 or 5 depending on era)
        average_salary: Pre-computed average; takes precedence over salaries
        option: Retirement allowance option
        beneficiary_age: Beneficiary's age, used by Option C only
    """

    age: float
    years_of_service: float
    group: RetirementGroup
    service_entry: ServiceEntry = ServiceEntry.BEFORE_2012
    salaries: tuple[float, ...] = field(default_factory=tuple)
    average_salary: float | None = None
    option: RetirementOption = RetirementOption.A
    beneficiary_age: float | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "group", RetirementGroup.coerce(self.group))
        object.__setattr__(self, "service_entry", ServiceEntry.coerce(self.service_entry))
        object.__setattr__(self, "option", RetirementOption.coerce(self.option))
        object.__setattr__(self, "salaries", tuple(float(s) for s in self.salaries))

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "MemberProfile":
        """Create from form data using the calculator's field names."""
        return cls(
            age=float(data.get("age", 0.0)),
            years_of_service=float(data.get("years_of_service", 0.0)),
            group=data.get("group", RetirementGroup.GROUP_1),
            service_entry=data.get("service_entry", ServiceEntry.BEFORE_2012),
            salaries=tuple(data.get("salaries", ())),
            average_salary=data.get("average_salary"),
            option=data.get("option", RetirementOption.A),
            beneficiary_age=data.get("beneficiary_age"),
        )


@dataclass(frozen=True)
class OptionResult:
    """
    Allowance after applying a retirement option to the Option A base.

    Attributes:
        pension: Member's annual allowance under the option
        survivor_pension: Annual amount continuing to the beneficiary
        reduction_factor: Fraction of the Option A base paid to the member
        description: Short label for display
        warning: Set when the factor was approximated
        interpolated: True when an Option C factor was not an exact table entry
    """

    pension: float
    survivor_pension: float
    reduction_factor: float
    description: str
    warning: str = ""
    interpolated: bool = False


@dataclass(frozen=True)
class PensionResult:
    """Result of a pension benefit calculation. Dollar amounts are rounded to the cent."""

    average_salary: float
    benefit_factor: float
    total_benefit_percentage: float
    uncapped_annual_pension: float
    base_annual_pension: float
    annual_pension: float
    monthly_pension: float
    eligible: bool
    eligibility_message: str
    retirement_option: RetirementOption
    beneficiary_age: float | None = None
    survivor_annual_pension: float = 0.0
    survivor_monthly_pension: float = 0.0
    option_reduction: float = 0.0
    capped_at_maximum: bool = False
    option_description: str = ""
    warning: str = ""

    @property
    def benefit_multiplier(self) -> float:
        """Alias used by the calculator forms."""
        return self.benefit_factor

    @property
    def max_pension_allowed(self) -> float:
        """Annual allowance ceiling (80% of average salary)."""
        return round_currency(self.average_salary * MAX_PENSION_PERCENTAGE_OF_SALARY)


def _round_age(age: float) -> int:
    """Round half up, matching how MSRB tables quote ages."""
    return int(math.floor(age + 0.5))


def _factor_table(
    group: RetirementGroup,
    service_entry: ServiceEntry,
    years_of_service: float,
) -> dict[int, float]:
    if (
        service_entry == ServiceEntry.AFTER_2012
        and years_of_service < POST_2012_FULL_FACTOR_YEARS
    ):
        return PENSION_FACTORS_POST_2012_LT_30YOS[group]
    return PENSION_FACTORS_DEFAULT[group]


def get_benefit_factor(
    age: float,
    group: RetirementGroup | str,
    service_entry: ServiceEntry | str = ServiceEntry.BEFORE_2012,
    years_of_service: float = 0.0,
) -> float:
    """
    Look up the MSRB benefit factor (age factor) for a member.

    Group 3 is a flat 2.5% at any age. Other groups use an age-indexed table
    chosen by membership era: the default chart, or the reduced chart for
    post-2012 members with fewer than 30 years of service.

    Args:
        age: Age at retirement; the completed year is used
        group: Retirement group (invalid values raise InvalidInputError)
        service_entry: Membership era
        years_of_service: Creditable service

    Returns:
        Factor as a fraction (0.025 for 2.5%), or 0.0 below the group's
        minimum age or for negative service
    """
    group = RetirementGroup.coerce(group)
    service_entry = ServiceEntry.coerce(service_entry)

    if years_of_service < 0:
        return 0.0
    if age < 0:
        # Clamped rather than rejected; see DESIGN.md
        age = MINIMUM_FACTOR_AGE[group]

    if group == RetirementGroup.GROUP_3:
        return GROUP_3_FACTOR

    table = _factor_table(group, service_entry, years_of_service)
    whole_age = math.floor(age)
    lowest, highest = min(table), max(table)

    if whole_age < lowest:
        return 0.0
    if whole_age >= highest:
        return table[highest]
    return table[whole_age]


def calculate_benefit_multiplier(
    group: RetirementGroup | str,
    age: float,
    years_of_service: float,
    service_entry: ServiceEntry | str = ServiceEntry.BEFORE_2012,
) -> float:
    """Benefit factor with group-first argument order."""
    return get_benefit_factor(age, group, service_entry, years_of_service)


def _eligibility(
    age: float,
    years_of_service: float,
    group: RetirementGroup,
    service_entry: ServiceEntry,
) -> tuple[bool, str]:
    label = group.value.replace("_", " ").title()

    if age < 0 or years_of_service < 0:
        return False, "Not eligible: age and years of service must be non-negative."

    if service_entry == ServiceEntry.AFTER_2012 and years_of_service < VESTING_YEARS:
        return False, (
            f"Not eligible: members hired on or after 04/02/2012 need at least "
            f"{VESTING_YEARS} years of creditable service."
        )

    if group == RetirementGroup.GROUP_3:
        if years_of_service >= GROUP_3_SERVICE_YEARS:
            return True, "Eligible for retirement benefits"
        return False, (
            f"Not eligible: {label} requires {GROUP_3_SERVICE_YEARS}+ years of service."
        )

    vesting_age, any_service_age = ELIGIBILITY_AGES[group]
    if age >= any_service_age:
        return True, "Eligible for retirement benefits"
    if age >= vesting_age:
        if years_of_service >= VESTING_YEARS:
            return True, "Eligible for retirement benefits"
        return False, (
            f"Not eligible: {label} requires {VESTING_YEARS}+ years of service "
            f"before age {any_service_age}."
        )
    return False, f"Not eligible: {label} requires a minimum age of {vesting_age}."


def check_eligibility(
    age: float,
    years_of_service: float,
    group: RetirementGroup | str,
    service_entry: ServiceEntry | str = ServiceEntry.BEFORE_2012,
) -> bool:
    """
    Determine whether a member can retire with a superannuation allowance.

    Group 1: age 60 with 10 years, or age 65 with any service.
    Group 2: age 55 with 10 years, or age 60 with any service.
    Group 3: any age with 20 years.
    Group 4: age 50 with 10 years, or age 55 with any service.
    Members hired on or after April 2, 2012 always need 10 years.

    Out-of-range numbers return False rather than raising.
    """
    eligible, _ = _eligibility(
        age,
        years_of_service,
        RetirementGroup.coerce(group),
        ServiceEntry.coerce(service_entry),
    )
    return eligible


def eligibility_message(
    age: float,
    years_of_service: float,
    group: RetirementGroup | str,
    service_entry: ServiceEntry | str = ServiceEntry.BEFORE_2012,
) -> str:
    """Human-readable explanation of the eligibility decision."""
    _, message = _eligibility(
        age,
        years_of_service,
        RetirementGroup.coerce(group),
        ServiceEntry.coerce(service_entry),
    )
    return message


def calculate_average_highest_salary(salaries: Iterable[float]) -> float:
    """Average of the supplied salaries; 0 when none have been entered."""
    return safe_mean(salaries)


def salary_averaging_years(service_entry: ServiceEntry | str) -> int:
    """Number of highest-paid years averaged for the membership era."""
    return SALARY_AVERAGING_YEARS[ServiceEntry.coerce(service_entry)]


def determine_service_entry(membership_date: date | str | None) -> ServiceEntry:
    """
    Classify a membership date against the April 2, 2012 reform.

    A missing date is treated as post-reform, the less generous rule set.
    Strings must be ISO dates (YYYY-MM-DD).
    """
    if membership_date is None or membership_date == "":
        return ServiceEntry.AFTER_2012
    if isinstance(membership_date, str):
        try:
            membership_date = date.fromisoformat(membership_date.strip())
        except ValueError:
            raise InvalidInputError(
                "membership_date", f"Not an ISO date: {membership_date!r}"
            ) from None
    if isinstance(membership_date, datetime):
        membership_date = membership_date.date()
    if membership_date < REFORM_DATE:
        return ServiceEntry.BEFORE_2012
    return ServiceEntry.AFTER_2012


def average_highest_salaries(
    salary_history: Iterable[float],
    service_entry: ServiceEntry | str = ServiceEntry.BEFORE_2012,
    years: int | None = None,
) -> float:
    """
    Average the highest-paid years from a longer salary history.

    Args:
        salary_history: Annual regular compensation, any order
        service_entry: Membership era (3 years before 2012, 5 after)
        years: Override the number of years averaged

    Returns:
        Average of the highest ``years`` salaries (fewer if the history is short)
    """
    if years is None:
        years = salary_averaging_years(service_entry)
    highest = sorted((float(s) for s in salary_history), reverse=True)[: max(0, years)]
    return calculate_average_highest_salary(highest)


def option_b_reduction(member_age: float) -> float:
    """Option B reduction for a member age (1% at 50, 3% at 60, 5% at 70)."""
    ages, reductions = zip(*OPTION_B_REDUCTION_POINTS)
    return float(np.interp(member_age, ages, reductions))


def _interpolate_option_c(member_age: int, beneficiary_age: int) -> float:
    """
    Resolve an Option C factor for a pair missing from the MSRB table.

    1. Entries with the same age gap that bracket the member age are
       interpolated linearly on member age.
    2. Otherwise the entry minimising 2*|gap difference| + |member age
       difference| is used; ties go to the earlier table entry.
    """
    gap = member_age - beneficiary_age
    same_gap = sorted(
        (m, factor)
        for (m, b), factor in OPTION_C_PERCENTAGES_OF_A.items()
        if m - b == gap
    )
    if len(same_gap) >= 2 and same_gap[0][0] <= member_age <= same_gap[-1][0]:
        member_ages, factors = zip(*same_gap)
        factor = float(np.interp(member_age, member_ages, factors))
        logger.info(
            f"Option C factor for {member_age}/{beneficiary_age} interpolated "
            f"along age gap {gap}: {factor:.6f}"
        )
        return factor

    def score(key: tuple[int, int]) -> int:
        m, b = key
        return OPTION_C_AGE_GAP_WEIGHT * abs((m - b) - gap) + abs(m - member_age)

    nearest = min(OPTION_C_PERCENTAGES_OF_A, key=score)
    logger.info(
        f"Option C factor for {member_age}/{beneficiary_age} taken from nearest "
        f"table entry {nearest[0]}/{nearest[1]}"
    )
    return OPTION_C_PERCENTAGES_OF_A[nearest]


def option_c_factor(member_age: float, beneficiary_age: float) -> tuple[float, bool]:
    """
    Fraction of the Option A allowance paid under Option C.

    Returns:
        Tuple of (factor, interpolated)
    """
    key = (_round_age(member_age), _round_age(beneficiary_age))
    if key in OPTION_C_PERCENTAGES_OF_A:
        return OPTION_C_PERCENTAGES_OF_A[key], False
    return _interpolate_option_c(*key), True


def calculate_pension_with_option(
    base_pension: float,
    option: RetirementOption | str,
    member_age: float,
    beneficiary_age: float | None = None,
) -> OptionResult:
    """
    Apply a retirement option to the (already capped) Option A allowance.

    Args:
        base_pension: Option A annual allowance after the 80% cap
        option: A, B or C
        member_age: Member's age at retirement
        beneficiary_age: Beneficiary's age (Option C)

    Returns:
        OptionResult with the member's allowance and any survivor benefit
    """
    option = RetirementOption.coerce(option)

    if option == RetirementOption.A:
        return OptionResult(
            pension=base_pension,
            survivor_pension=0.0,
            reduction_factor=1.0,
            description="Option A: Full Allowance",
        )

    if option == RetirementOption.B:
        reduction = option_b_reduction(member_age)
        return OptionResult(
            pension=base_pension * (1 - reduction),
            survivor_pension=0.0,
            reduction_factor=1 - reduction,
            description=f"Option B: Annuity Protection ({format_percentage(reduction, 1)} reduction)",
        )

    if beneficiary_age is None or beneficiary_age <= 0:
        factor = OPTION_C_GENERAL_REDUCTION_APPROX
        pension = base_pension * factor
        return OptionResult(
            pension=pension,
            survivor_pension=pension * OPTION_C_SURVIVOR_PERCENTAGE,
            reduction_factor=factor,
            description=(
                f"Option C: Joint & Survivor (66.67%) - "
                f"{format_percentage(1 - factor, 0)} reduction (general approx.)"
            ),
            warning="Valid beneficiary age needed for Option C. Using general approximation.",
            interpolated=True,
        )

    factor, interpolated = option_c_factor(member_age, beneficiary_age)
    pension = base_pension * factor
    ages = f"{_round_age(member_age)}/{_round_age(beneficiary_age)}"
    warning = ""
    if interpolated:
        warning = (
            f"Factor for ages {ages} is not in the MSRB table; "
            f"estimated from nearby entries. Official calculation needed."
        )
    return OptionResult(
        pension=pension,
        survivor_pension=pension * OPTION_C_SURVIVOR_PERCENTAGE,
        reduction_factor=factor,
        description=(
            f"Option C: Joint & Survivor (66.67%) - "
            f"{format_percentage(1 - factor)} reduction (ages {ages})"
        ),
        warning=warning,
        interpolated=interpolated,
    )


def calculate_pension_benefit(profile: MemberProfile) -> PensionResult:
    """
    Calculate the annual and monthly allowance for a member.

    The 80% cap is applied to the Option A allowance first; the capped amount
    is the basis for every option's reduction.

    Args:
        profile: Member's career facts and chosen option

    Returns:
        PensionResult (zero allowance when the member is not eligible)
    """
    if profile.average_salary is not None:
        average_salary = float(profile.average_salary)
    else:
        average_salary = calculate_average_highest_salary(profile.salaries)

    age = profile.age
    years = profile.years_of_service
    eligible, message = _eligibility(age, years, profile.group, profile.service_entry)
    factor = get_benefit_factor(age, profile.group, profile.service_entry, years)
    total_percentage = factor * max(0.0, years)

    if eligible and factor == 0:
        eligible = False
        message = f"No benefit factor available for age {math.floor(age)}."

    if not eligible:
        return PensionResult(
            average_salary=round_currency(average_salary),
            benefit_factor=factor,
            total_benefit_percentage=min(total_percentage, MAX_PENSION_PERCENTAGE_OF_SALARY),
            uncapped_annual_pension=0.0,
            base_annual_pension=0.0,
            annual_pension=0.0,
            monthly_pension=0.0,
            eligible=False,
            eligibility_message=message,
            retirement_option=profile.option,
            beneficiary_age=profile.beneficiary_age,
        )

    uncapped = average_salary * total_percentage
    max_pension = average_salary * MAX_PENSION_PERCENTAGE_OF_SALARY
    capped_at_maximum = uncapped > max_pension
    if capped_at_maximum:
        base_pension = max_pension
        total_percentage = MAX_PENSION_PERCENTAGE_OF_SALARY
    else:
        base_pension = uncapped
    base_pension = max(0.0, base_pension)

    option_result = calculate_pension_with_option(
        base_pension,
        profile.option,
        age,
        profile.beneficiary_age,
    )
    annual = option_result.pension
    option_reduction = (base_pension - annual) / base_pension if base_pension > 0 else 0.0

    logger.debug(
        f"{profile.group.value} age {age} yos {years}: factor {factor}, "
        f"base {base_pension:.2f}, option {profile.option.value} -> {annual:.2f}"
    )

    return PensionResult(
        average_salary=round_currency(average_salary),
        benefit_factor=factor,
        total_benefit_percentage=total_percentage,
        uncapped_annual_pension=round_currency(uncapped),
        base_annual_pension=round_currency(base_pension),
        annual_pension=round_currency(annual),
        monthly_pension=round_currency(annual / 12),
        eligible=True,
        eligibility_message=message,
        retirement_option=profile.option,
        beneficiary_age=profile.beneficiary_age,
        survivor_annual_pension=round_currency(option_result.survivor_pension),
        survivor_monthly_pension=round_currency(option_result.survivor_pension / 12),
        option_reduction=option_reduction,
        capped_at_maximum=capped_at_maximum,
        option_description=option_result.description,
        warning=option_result.warning,
    )


def calculate_cola_projection(base_benefit: float, years: float, cola_rate: float) -> float:
    """
    Compound a benefit forward: base * (1 + rate) ** years.

    Negative years mean "no projection" and return the base unchanged.
    """
    if years < 0:
        return base_benefit
    return base_benefit * (1 + cola_rate) ** years
