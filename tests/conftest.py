"""Shared pytest fixtures for retirement benefits calculator tests."""

import numpy as np
import pytest

from benefits.pension import MemberProfile
from benefits.pension_config import RetirementGroup, RetirementOption, ServiceEntry
from benefits.social_security import SocialSecurityParams


@pytest.fixture
def group_1_profile() -> MemberProfile:
    """Group 1 member retiring at 62 with 30 years."""
    return MemberProfile(
        age=62,
        years_of_service=30,
        group=RetirementGroup.GROUP_1,
        salaries=(70_000, 72_000, 74_000),
    )


@pytest.fixture
def group_3_profile() -> MemberProfile:
    """State Police member whose service exceeds the 80% cap."""
    return MemberProfile(
        age=55,
        years_of_service=40,
        group=RetirementGroup.GROUP_3,
        salaries=(80_000, 82_000, 84_000),
    )


@pytest.fixture
def option_c_profile() -> MemberProfile:
    """Group 1 member at 65 choosing joint and survivor with a 65-year-old beneficiary."""
    return MemberProfile(
        age=65,
        years_of_service=30,
        group=RetirementGroup.GROUP_1,
        average_salary=80_000,
        option=RetirementOption.C,
        beneficiary_age=65,
    )


@pytest.fixture
def post_reform_profile() -> MemberProfile:
    """Member hired after April 2, 2012 with fewer than 30 years."""
    return MemberProfile(
        age=62,
        years_of_service=20,
        group=RetirementGroup.GROUP_1,
        service_entry=ServiceEntry.AFTER_2012,
        average_salary=60_000,
    )


@pytest.fixture
def ss_params_1960() -> SocialSecurityParams:
    """Born 1960 (FRA 67), claiming at FRA with AIME of $5,000."""
    return SocialSecurityParams(birth_year=1960, claiming_age=67, aime=5_000)


@pytest.fixture
def rng() -> np.random.Generator:
    """Seeded generator for randomized property checks."""
    return np.random.default_rng(42)
