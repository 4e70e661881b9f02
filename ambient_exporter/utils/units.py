"""
Unit conversion helpers.

Plain arithmetic, so every function accepts a float, a numpy array or a
pandas Series and returns the same kind of value. No bounds are applied;
callers decide what a sensible input is.
"""

from typing import Union

import numpy as np
import pandas as pd

Numeric = Union[float, np.ndarray, pd.Series]

FEET_TO_METERS = 0.3048
MPH_TO_MS = 0.44704


def fahrenheit_to_celsius(temp_f: Numeric) -> Numeric:
    """
    Convert a temperature from Fahrenheit to Celsius.

    :param temp_f: Temperature in °F
    :return: Temperature in °C
    """
    return (temp_f - 32.0) * 5.0 / 9.0


def celsius_to_fahrenheit(temp_c: Numeric) -> Numeric:
    """
    Convert a temperature from Celsius to Fahrenheit.

    :param temp_c: Temperature in °C
    :return: Temperature in °F
    """
    return (temp_c * 9.0 / 5.0) + 32.0


def feet_to_meters(feet: Numeric) -> Numeric:
    """Convert a length in feet to meters."""
    return feet * FEET_TO_METERS


def mph_to_ms(speed_mph: Numeric) -> Numeric:
    """Convert a speed in miles per hour to meters per second."""
    return speed_mph * MPH_TO_MS
