"""Input validation for retirement benefit calculator forms."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Sequence

from benefits.exceptions import InvalidInputError
from benefits.pension_config import RetirementGroup, RetirementOption, ServiceEntry
from benefits.ss_config import MAX_BIRTH_YEAR, MIN_BIRTH_YEAR
from benefits.taxes import FilingStatus


@dataclass
class ValidationResult:
    """Result of validation containing any errors found."""

    errors: list[tuple[str, str]] = field(default_factory=list)

    def add_error(self, field_name: str, message: str) -> None:
        """Add a validation error."""
        self.errors.append((field_name, message))

    def is_valid(self) -> bool:
        """Return True if no validation errors."""
        return len(self.errors) == 0

    def error_messages(self) -> list[str]:
        """Return formatted error messages."""
        return [f"{field_name}: {message}" for field_name, message in self.errors]


def validate_member_profile(
    age: float,
    years_of_service: float,
    group: RetirementGroup | str,
    salaries: Sequence[float] = (),
    average_salary: float | None = None,
    service_entry: ServiceEntry | str = ServiceEntry.BEFORE_2012,
    option: RetirementOption | str = RetirementOption.A,
    beneficiary_age: float | None = None,
) -> ValidationResult:
    """Validate pension calculator inputs."""
    result = ValidationResult()

    if age < 18:
        result.add_error("age", "Must be at least 18")
    if age > 100:
        result.add_error("age", "Must be at most 100")

    if years_of_service < 0:
        result.add_error("years_of_service", "Cannot be negative")
    if years_of_service > age - 14:
        result.add_error("years_of_service", "Exceeds possible working years for age")

    coerced = {}
    for name, value, coerce in (
        ("group", group, RetirementGroup.coerce),
        ("service_entry", service_entry, ServiceEntry.coerce),
        ("option", option, RetirementOption.coerce),
    ):
        try:
            coerced[name] = coerce(value)
        except InvalidInputError as exc:
            result.add_error(name, exc.message)

    if average_salary is None and not salaries:
        result.add_error("salaries", "Enter at least one salary or an average salary")
    if any(s < 0 for s in salaries):
        result.add_error("salaries", "Cannot be negative")
    if average_salary is not None and average_salary < 0:
        result.add_error("average_salary", "Cannot be negative")
    if any(s > 10_000_000 for s in salaries):
        result.add_error("salaries", "Exceeds maximum allowed value")

    if coerced.get("option") == RetirementOption.C:
        if beneficiary_age is None or beneficiary_age <= 0:
            result.add_error("beneficiary_age", "Required for Option C")
        elif beneficiary_age > 110:
            result.add_error("beneficiary_age", "Must be at most 110")

    return result


def validate_social_security_params(
    birth_year: int,
    claiming_age: float,
    aime: float | None = None,
) -> ValidationResult:
    """Validate Social Security calculator inputs."""
    result = ValidationResult()

    if not MIN_BIRTH_YEAR < birth_year <= MAX_BIRTH_YEAR:
        result.add_error("birth_year", f"Must be between {MIN_BIRTH_YEAR + 1} and {MAX_BIRTH_YEAR}")

    if claiming_age < 62:
        result.add_error("claiming_age", "Benefits cannot start before age 62")
    if claiming_age > 70:
        result.add_error("claiming_age", "No additional credits accrue after age 70")

    if aime is not None and aime < 0:
        result.add_error("aime", "Cannot be negative")

    return result


def validate_tax_inputs(
    pension_income: float,
    social_security_income: float,
    other_income: float = 0.0,
    filing_status: FilingStatus | str = FilingStatus.SINGLE,
) -> ValidationResult:
    """Validate tax calculator inputs."""
    result = ValidationResult()

    for field_name, value in (
        ("pension_income", pension_income),
        ("social_security_income", social_security_income),
        ("other_income", other_income),
    ):
        if value < 0:
            result.add_error(field_name, "Cannot be negative")
        if value > 1_000_000_000:  # 1 billion sanity check
            result.add_error(field_name, "Exceeds maximum allowed value")

    try:
        FilingStatus.coerce(filing_status)
    except InvalidInputError as exc:
        result.add_error("filing_status", exc.message)

    return result


def validate_all(
    age: float,
    years_of_service: float,
    group: RetirementGroup | str,
    salaries: Sequence[float],
    birth_year: int,
    claiming_age: float,
    filing_status: FilingStatus | str = FilingStatus.SINGLE,
    option: RetirementOption | str = RetirementOption.A,
    beneficiary_age: float | None = None,
    other_income: float = 0.0,
) -> ValidationResult:
    """Run all validations and combine results."""
    combined = ValidationResult()

    validations = [
        validate_member_profile(
            age,
            years_of_service,
            group,
            salaries,
            option=option,
            beneficiary_age=beneficiary_age,
        ),
        validate_social_security_params(birth_year, claiming_age),
        validate_tax_inputs(0.0, 0.0, other_income, filing_status),
    ]

    for result in validations:
        combined.errors.extend(result.errors)

    return combined
