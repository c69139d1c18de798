from __future__ import annotations

import math
from typing import Iterable


def round_currency(value: float) -> float:
    """Round a dollar amount to the cent."""
    return round(float(value), 2)


def format_currency(value: float) -> str:
    return f"${value:,.0f}"


def format_percentage(rate: float, decimals: int = 2) -> str:
    return f"{rate * 100:.{decimals}f}%"


def safe_mean(values: Iterable[float]) -> float:
    """Arithmetic mean, or 0.0 when there are no values."""
    items = [float(v) for v in values]
    if not items:
        return 0.0
    return math.fsum(items) / len(items)
