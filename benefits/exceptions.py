"""Custom exceptions for the retirement benefits calculator."""

from __future__ import annotations


class BenefitCalculatorError(Exception):
    """Base exception for benefit calculator errors."""

    pass


class InvalidInputError(BenefitCalculatorError, ValueError):
    """Raised when an input is malformed (unknown enum value, implausible year)."""

    def __init__(self, field: str, message: str) -> None:
        self.field = field
        self.message = message
        super().__init__(f"{field}: {message}")
