"""Massachusetts retiree cost-of-living adjustments."""

from __future__ import annotations

from dataclasses import dataclass

from benefits.pension_config import CURRENT_MA_COLA
from utils.helpers import round_currency


@dataclass(frozen=True)
class ColaYear:
    """
    One year of an MA pension COLA projection.

    Attributes:
        year: Years since retirement (1 = first COLA)
        pension_before: Annual allowance before this year's COLA
        cola_increase: Dollar increase granted
        pension_after: Annual allowance after the COLA
        cumulative_increase: Total increase over the starting allowance
    """

    year: int
    pension_before: float
    cola_increase: float
    pension_after: float
    cumulative_increase: float

    @property
    def monthly_pension(self) -> float:
        return round_currency(self.pension_after / 12)


def calculate_ma_pension_cola(
    annual_pension: float,
    cola_rate: float = CURRENT_MA_COLA.rate,
    cola_base: float = CURRENT_MA_COLA.base_amount,
) -> float:
    """
    One year's COLA increase for an MA state pension.

    The rate applies only to the first ``cola_base`` dollars of the annual
    allowance, so with the defaults the increase never exceeds $390.

    Returns:
        Dollar increase (0 for non-positive pensions or rates)
    """
    if annual_pension <= 0 or cola_rate <= 0 or cola_base <= 0:
        return 0.0
    return min(annual_pension, cola_base) * cola_rate


def project_ma_pension_cola(
    initial_pension: float,
    years: int,
    cola_rate: float = CURRENT_MA_COLA.rate,
    cola_base: float = CURRENT_MA_COLA.base_amount,
) -> list[ColaYear]:
    """
    Project an MA pension with a COLA granted every year.

    Each year's increase is computed on the previous year's adjusted
    allowance.

    Args:
        initial_pension: Annual allowance at retirement
        years: Number of COLA years to project
        cola_rate: COLA rate
        cola_base: Portion of the allowance the rate applies to

    Returns:
        One ColaYear per projected year (empty for years <= 0)
    """
    rows: list[ColaYear] = []
    pension = max(0.0, initial_pension)

    for year in range(1, max(0, years) + 1):
        increase = calculate_ma_pension_cola(pension, cola_rate, cola_base)
        after = pension + increase
        rows.append(
            ColaYear(
                year=year,
                pension_before=round_currency(pension),
                cola_increase=round_currency(increase),
                pension_after=round_currency(after),
                cumulative_increase=round_currency(after - max(0.0, initial_pension)),
            )
        )
        pension = after

    return rows
