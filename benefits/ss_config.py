"""Social Security and Medicare parameters for benefit calculations."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class SocialSecurityConfig:
    """
    SSA benefit formula parameters for a given year.

    These values are set annually by the SSA and should be verified
    against current SSA publications.

    Attributes:
        year: Year these parameters apply to
        first_bend_point: AIME up to which 90% is credited
        second_bend_point: AIME up to which 32% is credited
        early_claiming_age: Earliest retirement claiming age
        max_delay_age: Age after which delayed credits stop accruing
        delayed_credit_per_year: Delayed retirement credit per year past FRA
        cola_rate: Most recent cost-of-living adjustment
    """

    year: int
    first_bend_point: float = 1_174
    second_bend_point: float = 7_078
    early_claiming_age: int = 62
    max_delay_age: int = 70
    delayed_credit_per_year: float = 0.08
    cola_rate: float = 0.032


SS_CONFIG_2024 = SocialSecurityConfig(
    year=2024,
    first_bend_point=1_174,
    second_bend_point=7_078,
    cola_rate=0.032,
)

CURRENT_SS_CONFIG = SS_CONFIG_2024

# PIA formula rates for the three AIME segments
PIA_RATES: tuple[float, float, float] = (0.90, 0.32, 0.15)

# Early claiming reduction per month before FRA
EARLY_REDUCTION_FIRST_36_MONTHS = 5 / 900  # 5/9 of 1%
EARLY_REDUCTION_BEYOND_36_MONTHS = 5 / 1200  # 5/12 of 1%
EARLY_REDUCTION_TIER_MONTHS = 36

# AIME averages the highest 35 years of indexed earnings
AIME_COMPUTATION_YEARS = 35

SPOUSAL_BENEFIT_PERCENTAGE = 0.50

# Survivor benefits: 100% at FRA, at most 28.5% reduction at age 60
SURVIVOR_MINIMUM_AGE = 60
SURVIVOR_MAX_REDUCTION = 0.285

# Plausible birth years: lower bound exclusive, upper bound inclusive
MIN_BIRTH_YEAR = 1900
MAX_BIRTH_YEAR = 2100

# Full retirement age in months, for birth years in the 1955-1959 phase-in
FRA_MONTHS_BY_BIRTH_YEAR: dict[int, int] = {
    1955: 66 * 12 + 2,
    1956: 66 * 12 + 4,
    1957: 66 * 12 + 6,
    1958: 66 * 12 + 8,
    1959: 66 * 12 + 10,
}
FRA_MONTHS_BEFORE_1955 = 66 * 12
FRA_MONTHS_FROM_1960 = 67 * 12


@dataclass(frozen=True)
class MedicarePartBConfig:
    """
    Medicare Part B premium and IRMAA thresholds for a given year.

    Tiers are (upper income bound, Part B monthly premium, Part D monthly
    surcharge) for single filers; married filing jointly doubles the bounds.

    Attributes:
        year: Premium year
        standard_premium: Standard monthly Part B premium
        tiers: IRMAA tiers ordered by income
    """

    year: int
    standard_premium: float
    tiers: tuple[tuple[float, float, float], ...]


MEDICARE_2024 = MedicarePartBConfig(
    year=2024,
    standard_premium=174.70,
    tiers=(
        (103_000, 174.70, 0.00),
        (129_000, 244.60, 12.90),
        (161_000, 349.40, 33.30),
        (193_000, 454.20, 53.80),
        (500_000, 559.00, 74.20),
        (float("inf"), 594.00, 81.00),
    ),
)

CURRENT_MEDICARE = MEDICARE_2024
