"""
psychrometrics.py
Moisture and apparent-temperature calculations for the Ambient Weather exporter.

All vapor pressures here come from the Magnus-type saturation curve
(6.112 hPa, 17.67, 243.5 °C). The evapotranspiration model uses the FAO
curve instead; see ambient_exporter.core.evapotranspiration.

Functions accept floats or numpy/pandas arrays. Inputs outside a formula's
domain (0 % humidity for dew point, negative wind speed for wind chill)
produce NaN or inf rather than an exception.
"""

from typing import Optional

import numpy as np

from ambient_exporter.config import SEA_LEVEL_PRESSURE_HPA
from ambient_exporter.core.atmosphere import pressure_at_elevation
from ambient_exporter.utils.units import (
    Numeric,
    celsius_to_fahrenheit,
    fahrenheit_to_celsius,
)

# Magnus saturation vapor pressure constants
MAGNUS_SVP_HPA = 6.112
MAGNUS_SVP_A = 17.67
MAGNUS_SVP_B = 243.5

# Magnus dew point constants (Alduchov & Eskridge set)
DEW_POINT_A = 17.27
DEW_POINT_B = 237.7

# g/m³ per hPa/K, from the water vapor gas constant
ABSOLUTE_HUMIDITY_FACTOR = 216.7


def saturation_vapor_pressure(temp_c: Numeric) -> Numeric:
    """
    Saturation vapor pressure over water.

    :param temp_c: Air temperature in °C
    :return: Saturation vapor pressure in hPa
    """
    return MAGNUS_SVP_HPA * np.exp((MAGNUS_SVP_A * temp_c) / (temp_c + MAGNUS_SVP_B))


def actual_vapor_pressure(temp_c: Numeric, humidity: Numeric) -> Numeric:
    """
    Partial pressure of water vapor in the air.

    :param temp_c: Air temperature in °C
    :param humidity: Relative humidity in percent
    :return: Vapor pressure in hPa
    """
    return saturation_vapor_pressure(temp_c) * (humidity / 100.0)


def vapor_pressure_deficit(temp_c: Numeric, humidity: Numeric) -> Numeric:
    """
    Difference between saturation and actual vapor pressure.

    Non-negative for humidity in [0, 100] and exactly zero at 100 %.

    :param temp_c: Air temperature in °C
    :param humidity: Relative humidity in percent
    :return: Vapor pressure deficit in hPa
    """
    svp = saturation_vapor_pressure(temp_c)
    avp = svp * (humidity / 100.0)
    return svp - avp


def dew_point(temp_c: Numeric, humidity: Numeric) -> Numeric:
    """
    Dew point from the inverted Magnus formula.

    Elevation has no significant effect here. At 0 % humidity the log term
    diverges and the result is NaN.

    :param temp_c: Air temperature in °C
    :param humidity: Relative humidity in percent
    :return: Dew point in °C
    """
    with np.errstate(divide="ignore", invalid="ignore"):
        alpha = ((DEW_POINT_A * temp_c) / (DEW_POINT_B + temp_c)) + np.log(
            humidity / 100.0
        )
        return (DEW_POINT_B * alpha) / (DEW_POINT_A - alpha)


def absolute_humidity(
    temp_c: Numeric,
    humidity: Numeric,
    elevation_ft: Numeric,
    pressure_hpa: Optional[Numeric] = None,
) -> Numeric:
    """
    Mass of water vapor per volume of air, corrected for station altitude.

    The sea-level value is scaled by the density ratio P / 1013.25. Pass
    pressure_hpa when station pressure has already been computed so that a
    report uses a single pressure value throughout.

    :param temp_c: Air temperature in °C
    :param humidity: Relative humidity in percent
    :param elevation_ft: Station elevation in feet
    :param pressure_hpa: Station pressure in hPa, computed from elevation if None
    :return: Absolute humidity in g/m³
    """
    if pressure_hpa is None:
        pressure_hpa = pressure_at_elevation(elevation_ft)
    avp = actual_vapor_pressure(temp_c, humidity)
    density_ratio = pressure_hpa / SEA_LEVEL_PRESSURE_HPA
    return (ABSOLUTE_HUMIDITY_FACTOR * avp) / (temp_c + 273.15) * density_ratio


def heat_index(temp_c: Numeric, humidity: Numeric) -> Numeric:
    """
    NWS heat index (Rothfusz regression).

    The regression is fitted for 80 °F and above with humidity of at least
    40 %. Outside that range the value is still returned, unclamped.

    :param temp_c: Air temperature in °C
    :param humidity: Relative humidity in percent
    :return: Heat index in °C
    """
    t = celsius_to_fahrenheit(temp_c)
    # float so np.power cannot overflow a Python or int64 integer
    rh = humidity * 1.0
    hi_f = (
        -42.379
        + 2.04901523 * t
        + 10.14333127 * rh
        - 0.22475541 * t * rh
        - 6.83783e-3 * np.power(t, 2)
        - 5.481717e-2 * np.power(rh, 2)
        + 1.22874e-3 * np.power(t, 2) * rh
        + 8.5282e-4 * t * np.power(rh, 2)
        - 1.99e-6 * np.power(t, 2) * np.power(rh, 2)
    )
    return fahrenheit_to_celsius(hi_f)


def wind_chill(temp_c: Numeric, wind_speed_mph: Numeric) -> Numeric:
    """
    NWS wind chill.

    Negative wind speeds have no real v^0.16 and give NaN.

    :param temp_c: Air temperature in °C
    :param wind_speed_mph: Wind speed in mph
    :return: Wind chill in °C
    """
    t = celsius_to_fahrenheit(temp_c)
    with np.errstate(invalid="ignore"):
        v = np.power(wind_speed_mph, 0.16)
    wc_f = 35.74 + 0.6215 * t - 35.75 * v + 0.4275 * t * v
    return fahrenheit_to_celsius(wc_f)
