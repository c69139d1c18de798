"""Tests for Massachusetts pension COLA."""

import pytest

from benefits.cola import calculate_ma_pension_cola, project_ma_pension_cola
from benefits.pension_config import CURRENT_MA_COLA, MaColaConfig


class TestMaColaConfig:
    """Tests for COLA settings."""

    def test_max_increase(self):
        """3% of $13,000 caps the increase at $390 a year."""
        assert CURRENT_MA_COLA.max_annual_increase == pytest.approx(390)
        assert CURRENT_MA_COLA.max_monthly_increase == pytest.approx(32.5)

    def test_custom_year(self):
        config = MaColaConfig(fiscal_year=2026, rate=0.03, base_amount=14_000)
        assert config.max_annual_increase == pytest.approx(420)


class TestMaPensionCola:
    """Tests for a single year's COLA."""

    def test_pension_above_base(self):
        """Large pensions get the $390 maximum."""
        assert calculate_ma_pension_cola(30_000) == pytest.approx(390)

    def test_pension_below_base(self):
        """Small pensions get 3% of the whole allowance."""
        assert calculate_ma_pension_cola(10_000) == pytest.approx(300)

    def test_zero_and_negative(self):
        assert calculate_ma_pension_cola(0) == 0.0
        assert calculate_ma_pension_cola(-5_000) == 0.0

    def test_zero_rate(self):
        assert calculate_ma_pension_cola(30_000, cola_rate=0.0) == 0.0


class TestMaColaProjection:
    """Tests for multi-year COLA projection."""

    def test_flat_increase_above_base(self):
        """Above the base the increase is $390 every year."""
        rows = project_ma_pension_cola(30_000, 3)
        assert [r.pension_after for r in rows] == [30_390, 30_780, 31_170]
        assert rows[-1].cumulative_increase == pytest.approx(1_170)

    def test_compounds_below_base(self):
        """Below the base each year's COLA uses the adjusted allowance."""
        rows = project_ma_pension_cola(10_000, 3)
        assert rows[0].cola_increase == pytest.approx(300)
        assert rows[1].cola_increase == pytest.approx(309)
        assert rows[2].cola_increase == pytest.approx(318.27)
        assert rows[2].pension_after == pytest.approx(10_927.27)

    def test_years_numbered_from_one(self):
        rows = project_ma_pension_cola(20_000, 2)
        assert [r.year for r in rows] == [1, 2]
        assert rows[0].pension_before == 20_000

    def test_no_years(self):
        assert project_ma_pension_cola(20_000, 0) == []

    def test_monthly_pension(self):
        rows = project_ma_pension_cola(30_000, 1)
        assert rows[0].monthly_pension == pytest.approx(30_390 / 12, abs=0.01)
