"""Federal and Massachusetts income tax configuration for retirement income."""

from __future__ import annotations

from dataclasses import dataclass, field

# Federal tax brackets for 2024 (single filer)
# Format: (upper_bound, marginal_rate)
FEDERAL_BRACKETS_2024_SINGLE: list[tuple[float, float]] = [
    (11_600, 0.10),
    (47_150, 0.12),
    (100_525, 0.22),
    (191_950, 0.24),
    (243_725, 0.32),
    (609_350, 0.35),
    (float("inf"), 0.37),
]

# Federal tax brackets for 2024 (married filing jointly)
FEDERAL_BRACKETS_2024_MFJ: list[tuple[float, float]] = [
    (23_200, 0.10),
    (94_300, 0.12),
    (201_050, 0.22),
    (383_900, 0.24),
    (487_450, 0.32),
    (731_200, 0.35),
    (float("inf"), 0.37),
]

# Federal tax brackets for 2024 (married filing separately)
FEDERAL_BRACKETS_2024_MFS: list[tuple[float, float]] = [
    (11_600, 0.10),
    (47_150, 0.12),
    (100_525, 0.22),
    (191_950, 0.24),
    (243_725, 0.32),
    (365_600, 0.35),
    (float("inf"), 0.37),
]

# Federal tax brackets for 2024 (head of household)
FEDERAL_BRACKETS_2024_HOH: list[tuple[float, float]] = [
    (16_550, 0.10),
    (63_100, 0.12),
    (100_500, 0.22),
    (191_950, 0.24),
    (243_700, 0.32),
    (609_350, 0.35),
    (float("inf"), 0.37),
]


@dataclass(frozen=True)
class TaxYearConfig:
    """
    Federal and Massachusetts tax parameters for a given tax year.

    Tables are keyed by filing status value ("single",
    "married_filing_jointly", "married_filing_separately",
    "head_of_household"). These figures are updated annually and should be
    verified against current IRS and DOR publications.

    Attributes:
        year: Tax year these settings apply to
        federal_brackets: Ordinary income brackets per filing status
        standard_deductions: Federal standard deduction per filing status
        additional_deduction_65_unmarried: Extra deduction at 65+ (single, HOH)
        additional_deduction_65_married: Extra deduction per 65+ spouse
        ss_thresholds: Provisional income thresholds (50% tier, 85% tier)
        ma_tax_rate: Massachusetts flat income tax rate
        ma_deduction: Massachusetts deduction per filer
        ma_personal_exemption: Massachusetts personal exemption per filer
        ma_age_65_exemption: Additional exemption per filer aged 65+
        ma_surtax_threshold: Income above which the millionaires surtax applies
        ma_surtax_rate: Surtax rate
    """

    year: int
    federal_brackets: dict[str, list[tuple[float, float]]] = field(default_factory=dict)
    standard_deductions: dict[str, float] = field(default_factory=dict)
    additional_deduction_65_unmarried: float = 1_950
    additional_deduction_65_married: float = 1_550
    ss_thresholds: dict[str, tuple[float, float]] = field(default_factory=dict)
    ma_tax_rate: float = 0.05
    ma_deduction: float = 4_400
    ma_personal_exemption: float = 4_400
    ma_age_65_exemption: float = 700
    ma_surtax_threshold: float = 1_053_750
    ma_surtax_rate: float = 0.04


TAX_CONFIG_2024 = TaxYearConfig(
    year=2024,
    federal_brackets={
        "single": FEDERAL_BRACKETS_2024_SINGLE,
        "married_filing_jointly": FEDERAL_BRACKETS_2024_MFJ,
        "married_filing_separately": FEDERAL_BRACKETS_2024_MFS,
        "head_of_household": FEDERAL_BRACKETS_2024_HOH,
    },
    standard_deductions={
        "single": 14_600,
        "married_filing_jointly": 29_200,
        "married_filing_separately": 14_600,
        "head_of_household": 21_900,
    },
    additional_deduction_65_unmarried=1_950,
    additional_deduction_65_married=1_550,
    # Filers other than MFJ use the single thresholds
    ss_thresholds={
        "single": (25_000, 34_000),
        "married_filing_jointly": (32_000, 44_000),
    },
    ma_tax_rate=0.05,
    ma_deduction=4_400,
    ma_personal_exemption=4_400,
    ma_age_65_exemption=700,
    ma_surtax_threshold=1_053_750,
    ma_surtax_rate=0.04,
)

# Default to current year
CURRENT_TAX_CONFIG = TAX_CONFIG_2024
