"""Massachusetts State Retirement Board (MSRB) tables and plan constants."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from enum import Enum

from benefits.exceptions import InvalidInputError


class RetirementGroup(Enum):
    """MSRB job classification group."""

    GROUP_1 = "GROUP_1"  # General employees
    GROUP_2 = "GROUP_2"  # Certain hazardous duty positions
    GROUP_3 = "GROUP_3"  # State Police
    GROUP_4 = "GROUP_4"  # Public safety (police, fire, corrections)

    @classmethod
    def coerce(cls, value: "RetirementGroup | str | int") -> "RetirementGroup":
        """
        Convert user or form input into a RetirementGroup.

        Accepts the enum itself, "GROUP_1", "Group 1", "group_1" or a bare
        group number. Anything else is malformed input.
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, bool):
            raise InvalidInputError("group", f"Unknown retirement group: {value!r}")
        if isinstance(value, int):
            key = f"GROUP_{value}"
        elif isinstance(value, str):
            key = value.strip().upper().replace(" ", "_")
            if key.isdigit():
                key = f"GROUP_{key}"
        else:
            raise InvalidInputError("group", f"Unknown retirement group: {value!r}")
        try:
            return cls(key)
        except ValueError:
            raise InvalidInputError("group", f"Unknown retirement group: {value!r}") from None


class ServiceEntry(Enum):
    """Membership date relative to the April 2, 2012 pension reform."""

    BEFORE_2012 = "before_2012"
    AFTER_2012 = "after_2012"

    @classmethod
    def coerce(cls, value: "ServiceEntry | str") -> "ServiceEntry":
        """Convert a form value into a ServiceEntry."""
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            try:
                return cls(value.strip().lower())
            except ValueError:
                pass
        raise InvalidInputError("service_entry", f"Unknown service entry period: {value!r}")


class RetirementOption(Enum):
    """MSRB retirement allowance options."""

    A = "A"  # Full allowance, no survivor benefit
    B = "B"  # Annuity protection (refund of remaining contributions)
    C = "C"  # Joint and survivor (2/3 to the beneficiary)

    @classmethod
    def coerce(cls, value: "RetirementOption | str") -> "RetirementOption":
        """Convert a form value into a RetirementOption."""
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            try:
                return cls(value.strip().upper())
            except ValueError:
                pass
        raise InvalidInputError("option", f"Unknown retirement option: {value!r}")


# Pension reform effective date (Chapter 176 of the Acts of 2011)
REFORM_DATE = date(2012, 4, 2)

# Post-reform members with at least this much service use the default table
POST_2012_FULL_FACTOR_YEARS = 30

MAX_PENSION_PERCENTAGE_OF_SALARY = 0.80

# Minimum service for the age-and-service path (and for any post-2012 retirement)
VESTING_YEARS = 10

# Group 3 may retire at any age with this much service
GROUP_3_SERVICE_YEARS = 20

# (age with 10 years of service, age with any service) per group
ELIGIBILITY_AGES: dict[RetirementGroup, tuple[int, int]] = {
    RetirementGroup.GROUP_1: (60, 65),
    RetirementGroup.GROUP_2: (55, 60),
    RetirementGroup.GROUP_4: (50, 55),
}

# Lowest age in each group's factor table
MINIMUM_FACTOR_AGE: dict[RetirementGroup, int] = {
    RetirementGroup.GROUP_1: 60,
    RetirementGroup.GROUP_2: 55,
    RetirementGroup.GROUP_3: 0,
    RetirementGroup.GROUP_4: 50,
}

GROUP_3_FACTOR = 0.025

# Benefit factor by age for members hired before April 2, 2012, or hired
# after with 30+ years of service. Ages above the last key use its factor.
PENSION_FACTORS_DEFAULT: dict[RetirementGroup, dict[int, float]] = {
    RetirementGroup.GROUP_1: {
        60: 0.020,
        61: 0.021,
        62: 0.022,
        63: 0.023,
        64: 0.024,
        65: 0.025,
    },
    RetirementGroup.GROUP_2: {
        55: 0.020,
        56: 0.021,
        57: 0.022,
        58: 0.023,
        59: 0.024,
        60: 0.025,
    },
    RetirementGroup.GROUP_4: {
        50: 0.020,
        51: 0.021,
        52: 0.022,
        53: 0.023,
        54: 0.024,
        55: 0.025,
    },
}

# Members hired on or after April 2, 2012 with fewer than 30 years of service
PENSION_FACTORS_POST_2012_LT_30YOS: dict[RetirementGroup, dict[int, float]] = {
    RetirementGroup.GROUP_1: {
        60: 0.0145,
        61: 0.0160,
        62: 0.0175,
        63: 0.0190,
        64: 0.0205,
        65: 0.0220,
        66: 0.0235,
        67: 0.0250,
    },
    RetirementGroup.GROUP_2: {
        55: 0.0145,
        56: 0.0160,
        57: 0.0175,
        58: 0.0190,
        59: 0.0205,
        60: 0.0220,
        61: 0.0235,
        62: 0.0250,
    },
    RetirementGroup.GROUP_4: {
        50: 0.0145,
        51: 0.0160,
        52: 0.0175,
        53: 0.0190,
        54: 0.0205,
        55: 0.0220,
        56: 0.0235,
        57: 0.0250,
    },
}

# Option B reduction anchors: (member age, reduction). Linear between anchors,
# flat outside them.
OPTION_B_REDUCTION_POINTS: tuple[tuple[float, float], ...] = (
    (50, 0.01),
    (60, 0.03),
    (70, 0.05),
)

# Option C: fraction of the Option A allowance paid to the member, keyed by
# (member age, beneficiary age). Values validated against the MSRB calculator.
OPTION_C_PERCENTAGES_OF_A: dict[tuple[int, int], float] = {
    (55, 53): 0.9295,
    (55, 55): 0.9295,
    (56, 54): 0.9253,
    (57, 55): 0.9209,
    (58, 56): 0.9163,
    (59, 57): 0.9571,
    (65, 55): 0.84,
    (65, 65): 0.89,
    (70, 65): 0.83,
    (70, 70): 0.86,
}

# Used when Option C is chosen without a usable beneficiary age
OPTION_C_GENERAL_REDUCTION_APPROX = 0.88

OPTION_C_SURVIVOR_PERCENTAGE = 2 / 3

# Option C nearest-neighbour scoring weight on the age gap
OPTION_C_AGE_GAP_WEIGHT = 2

# Salary averaging period by membership era
SALARY_AVERAGING_YEARS: dict[ServiceEntry, int] = {
    ServiceEntry.BEFORE_2012: 3,
    ServiceEntry.AFTER_2012: 5,
}


@dataclass(frozen=True)
class MaColaConfig:
    """
    Massachusetts retiree cost-of-living adjustment for a fiscal year.

    The COLA is not automatic: it is granted by the legislature each year
    and applies only to the first ``base_amount`` of the annual allowance.

    Attributes:
        fiscal_year: Fiscal year the settings apply to
        rate: COLA rate (0.03 = 3%)
        base_amount: Portion of the allowance the rate applies to
    """

    fiscal_year: int
    rate: float = 0.03
    base_amount: float = 13_000

    @property
    def max_annual_increase(self) -> float:
        """Largest COLA increase a retiree can receive in one year."""
        return self.base_amount * self.rate

    @property
    def max_monthly_increase(self) -> float:
        """Largest monthly COLA increase."""
        return self.max_annual_increase / 12


MA_COLA_FY2025 = MaColaConfig(fiscal_year=2025, rate=0.03, base_amount=13_000)

CURRENT_MA_COLA = MA_COLA_FY2025
