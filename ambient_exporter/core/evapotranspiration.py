"""
evapotranspiration.py
Reference evapotranspiration estimate for the station.

Simplified FAO-56 Penman-Monteith with two site adjustments: the wind speed
is scaled by the (h / 10) ^ 0.2 reference-height factor and the
psychrometric constant follows station pressure. Solar radiation is used as
reported by the station (W/m²) in place of net radiation.

The FAO saturation curve (0.6108 kPa, 17.27, 237.3 °C) differs slightly from
the Magnus curve in ambient_exporter.core.psychrometrics; the es/ea values
here are internal to the estimate and are not the exported vapor pressures.
"""

from typing import Optional, Tuple

import numpy as np

from ambient_exporter.core.atmosphere import pressure_at_elevation
from ambient_exporter.utils.units import Numeric, feet_to_meters, mph_to_ms

FAO_SVP = 0.6108
FAO_SVP_A = 17.27
FAO_SVP_B = 237.3

PSYCHROMETRIC_FACTOR = 0.665e-3
REFERENCE_HEIGHT_M = 10.0


def fao_saturation_vapor_pressure(temp_c: Numeric) -> Numeric:
    """Saturation vapor pressure from the FAO-56 curve, in kPa."""
    return FAO_SVP * np.exp((FAO_SVP_A * temp_c) / (temp_c + FAO_SVP_B))


def saturation_slope(temp_c: Numeric) -> Numeric:
    """Slope of the FAO saturation vapor pressure curve (delta) at temp_c."""
    return 4098 * fao_saturation_vapor_pressure(temp_c) / np.power(temp_c + FAO_SVP_B, 2)


def adjusted_wind_speed(wind_speed_mph: Numeric, elevation_ft: Numeric) -> Numeric:
    """
    Wind speed in m/s scaled by the reference-height factor (h / 10) ^ 0.2.

    The factor is zero at sea level and NaN below it.
    """
    elevation_m = feet_to_meters(elevation_ft)
    with np.errstate(invalid="ignore"):
        return mph_to_ms(wind_speed_mph) * np.power(elevation_m / REFERENCE_HEIGHT_M, 0.2)


def _vapor_pressures(temp_c: Numeric, humidity: Numeric) -> Tuple[Numeric, Numeric]:
    es = fao_saturation_vapor_pressure(temp_c)
    ea = es * (humidity / 100.0)
    return es, ea


def evapotranspiration(
    temp_c: Numeric,
    humidity: Numeric,
    wind_speed_mph: Numeric,
    solar_radiation: Numeric,
    elevation_ft: Numeric,
    pressure_hpa: Optional[Numeric] = None,
) -> Numeric:
    """
    Calculate evapotranspiration in mm/day.

    ET = (0.408 Δ Rs + γ (900 / (T + 273)) u (es - ea)) / (Δ + γ (1 + 0.34 u))

    :param temp_c: Air temperature in °C
    :param humidity: Relative humidity in percent
    :param wind_speed_mph: Wind speed in mph
    :param solar_radiation: Solar radiation in W/m²
    :param elevation_ft: Station elevation in feet
    :param pressure_hpa: Station pressure, computed from elevation if None
    :return: Evapotranspiration in mm/day
    """
    wind_ms = adjusted_wind_speed(wind_speed_mph, elevation_ft)

    if pressure_hpa is None:
        pressure_hpa = pressure_at_elevation(elevation_ft)
    gamma = PSYCHROMETRIC_FACTOR * pressure_hpa

    delta = saturation_slope(temp_c)
    es, ea = _vapor_pressures(temp_c, humidity)

    numerator = 0.408 * delta * solar_radiation + gamma * (900 / (temp_c + 273)) * wind_ms * (
        es - ea
    )
    denominator = delta + gamma * (1 + 0.34 * wind_ms)
    with np.errstate(divide="ignore", invalid="ignore"):
        return numerator / denominator
