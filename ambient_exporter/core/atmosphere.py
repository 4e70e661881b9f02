"""
atmosphere.py
Air pressure at the station's elevation.

The exporter has no pressure sensor model of its own; station pressure is
estimated from the international barometric formula and a fixed elevation.
"""

import numpy as np

from ambient_exporter.config import SEA_LEVEL_PRESSURE_HPA
from ambient_exporter.utils.units import Numeric, feet_to_meters

# Standard lapse rate (K/m) and sea-level temperature (K)
LAPSE_RATE = 0.0065
SEA_LEVEL_TEMP_K = 288.15
BAROMETRIC_EXPONENT = 5.255


def pressure_at_elevation(elevation_ft: Numeric) -> Numeric:
    """
    Calculate atmospheric pressure at elevation using the barometric formula.

    P = 1013.25 * (1 - 0.0065 * h / 288.15) ^ 5.255, h in meters.

    Valid for real-world station heights. Elevations high enough to make the
    base negative (above ~44 km) return NaN instead of raising.

    :param elevation_ft: Station elevation in feet
    :return: Pressure in hPa
    """
    elevation_m = feet_to_meters(elevation_ft)
    base = 1 - (LAPSE_RATE * elevation_m / SEA_LEVEL_TEMP_K)
    with np.errstate(invalid="ignore"):
        return SEA_LEVEL_PRESSURE_HPA * np.power(base, BAROMETRIC_EXPONENT)
