"""
Unit tests for the evapotranspiration estimate.
"""

import math

import pytest

from ambient_exporter.core.atmosphere import pressure_at_elevation
from ambient_exporter.core.evapotranspiration import (
    adjusted_wind_speed,
    evapotranspiration,
    fao_saturation_vapor_pressure,
    saturation_slope,
)
from ambient_exporter.core.psychrometrics import saturation_vapor_pressure


class TestFaoCurve:
    """FAO-56 saturation curve helpers."""

    def test_saturation_at_20c(self):
        assert fao_saturation_vapor_pressure(20.0) == pytest.approx(2.338, abs=0.001)

    def test_differs_from_magnus_curve(self):
        """The two curves are close but deliberately not the same function."""
        fao_hpa = fao_saturation_vapor_pressure(20.0) * 10
        magnus_hpa = saturation_vapor_pressure(20.0)
        assert fao_hpa != magnus_hpa
        assert fao_hpa == pytest.approx(magnus_hpa, rel=1e-2)

    def test_slope_at_20c(self):
        assert saturation_slope(20.0) == pytest.approx(0.1447, abs=0.0005)


class TestAdjustedWindSpeed:
    """Reference-height wind adjustment."""

    def test_zero_at_sea_level(self):
        assert adjusted_wind_speed(10.0, 0) == 0

    def test_unity_factor_at_reference_height(self):
        """At 10 m the factor is 1 and only the unit changes."""
        assert adjusted_wind_speed(10.0, 10 / 0.3048) == pytest.approx(4.4704)

    def test_below_sea_level_is_nan(self):
        assert math.isnan(adjusted_wind_speed(10.0, -50))


class TestEvapotranspiration:
    """Simplified Penman-Monteith."""

    def test_no_sun_no_wind_is_zero(self):
        """At sea level the wind term vanishes; with no radiation ET is 0."""
        assert evapotranspiration(20.0, 50, 10.0, 0.0, 0) == 0

    def test_radiation_term_at_sea_level(self):
        assert evapotranspiration(20.0, 50, 0.0, 500.0, 0) == pytest.approx(36.07, rel=1e-2)

    def test_saturated_air_without_sun(self):
        """With es == ea and no radiation nothing evaporates, wind or not."""
        assert evapotranspiration(20.0, 100, 15.0, 0.0, 3000) == pytest.approx(0.0)

    def test_increases_with_radiation(self):
        low = evapotranspiration(20.0, 50, 5.0, 100.0, 1500)
        high = evapotranspiration(20.0, 50, 5.0, 800.0, 1500)
        assert high > low

    def test_dry_wind_adds_evaporation(self):
        calm = evapotranspiration(25.0, 30, 0.0, 0.0, 1500)
        windy = evapotranspiration(25.0, 30, 20.0, 0.0, 1500)
        assert windy > calm

    def test_supplied_pressure_matches_computed(self):
        computed = evapotranspiration(18.0, 40, 8.0, 400.0, 2500)
        supplied = evapotranspiration(
            18.0, 40, 8.0, 400.0, 2500, pressure_hpa=pressure_at_elevation(2500)
        )
        assert supplied == computed
