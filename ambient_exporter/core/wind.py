"""
wind.py
Wind run estimate.
"""

from ambient_exporter.config import WIND_RUN_HOURS
from ambient_exporter.utils.units import Numeric


def wind_run(wind_speed_mph: Numeric) -> Numeric:
    """
    Calculate wind run in miles.

    The current speed is treated as constant over a fixed 24 hour window;
    a true wind run would integrate the measured speed over time.

    :param wind_speed_mph: Average wind speed in mph
    :return: Miles of wind over WIND_RUN_HOURS
    """
    return wind_speed_mph * WIND_RUN_HOURS
