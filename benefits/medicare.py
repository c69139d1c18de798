"""Medicare Part B premium and IRMAA surcharge estimates."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from benefits.ss_config import CURRENT_MEDICARE, MedicarePartBConfig
from benefits.taxes import FilingStatus
from utils.helpers import round_currency

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MedicarePremium:
    """
    Monthly Medicare premiums at an income level.

    Attributes:
        part_b: Standard Part B premium
        irmaa_adjustment: Part B income-related surcharge above standard
        total_premium: Part B premium including IRMAA
        part_d_irmaa: Part D income-related surcharge
        income_tier: 0 for standard, 1-5 for IRMAA tiers
    """

    part_b: float
    irmaa_adjustment: float
    total_premium: float
    part_d_irmaa: float = 0.0
    income_tier: int = 0

    @property
    def monthly_total(self) -> float:
        """Part B plus Part D IRMAA per month."""
        return round_currency(self.total_premium + self.part_d_irmaa)

    @property
    def annual_total(self) -> float:
        return round_currency(self.monthly_total * 12)


def calculate_medicare_premium(
    income: float,
    filing_status: FilingStatus | str = FilingStatus.SINGLE,
    config: MedicarePartBConfig = CURRENT_MEDICARE,
) -> MedicarePremium:
    """
    Look up the Part B premium and IRMAA tier for a modified AGI.

    Thresholds are doubled for married couples filing jointly. The premium
    is a step function of income, never decreasing as income rises.

    Args:
        income: Modified adjusted gross income (two years prior)
        filing_status: Tax filing status
        config: Premium year settings

    Returns:
        MedicarePremium with monthly amounts
    """
    filing_status = FilingStatus.coerce(filing_status)
    multiplier = 2 if filing_status == FilingStatus.MARRIED_FILING_JOINTLY else 1

    tier_index = len(config.tiers) - 1
    for index, (upper_bound, _, _) in enumerate(config.tiers):
        if income <= upper_bound * multiplier:
            tier_index = index
            break

    _, part_b_premium, part_d_surcharge = config.tiers[tier_index]
    irmaa = round_currency(part_b_premium - config.standard_premium)

    if tier_index > 0:
        logger.debug(f"IRMAA tier {tier_index} applies at income {income:,.0f}")

    return MedicarePremium(
        part_b=config.standard_premium,
        irmaa_adjustment=irmaa,
        total_premium=round_currency(config.standard_premium + irmaa),
        part_d_irmaa=part_d_surcharge,
        income_tier=tier_index,
    )
