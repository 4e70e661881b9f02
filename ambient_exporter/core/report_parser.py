"""
report_parser.py
Normalize raw station uploads into WeatherReport objects.

Stations send every value as a string in a flat key/value set. Parsing is
lenient for numbers and strict for the timestamp:

- A numeric key that is absent, empty or unparseable becomes 0. A missing
  value and a reported 0 are therefore indistinguishable downstream.
- tempf/tempinf are converted to Celsius, except that a parsed 0 stays 0
  instead of becoming -17.8 °C.
- A non-empty dateutc that does not match "YYYY-MM-DD HH:MM:SS" rejects the
  whole report with MalformedTimestampError.

normalize_report_frame() applies the same rules column-wise to an archive
export held in a DataFrame.
"""

import re
from datetime import datetime, timezone
from typing import Mapping, Optional

import pandas as pd

from ambient_exporter.config import (
    DATEUTC_FORMAT,
    DATEUTC_PATTERN,
    FLOAT_FIELDS,
    INTEGER_FIELDS,
    TEMPERATURE_FIELDS,
    station_fields,
)
from ambient_exporter.models.weather import WeatherReport
from ambient_exporter.utils.units import fahrenheit_to_celsius

_DATEUTC_RE = re.compile(DATEUTC_PATTERN)
_INT_RE = re.compile(r"[+-]?[0-9]+")

# Out-of-range integers saturate at the int64 bounds
INT64_MIN = -(2**63)
INT64_MAX = 2**63 - 1
# Largest float64 that still fits in int64
_FRAME_INT_MAX = 2**63 - 1024

# station key -> WeatherReport attribute
FIELD_ATTRIBUTES = {
    key: attr for group in station_fields.values() for key, attr in group.items()
}


class MalformedTimestampError(ValueError):
    """Raised when a report carries a dateutc value that cannot be parsed."""

    def __init__(self, value: str):
        super().__init__(f"failed to parse date: {value!r}")
        self.value = value


# ---------- field parsers ----------


def parse_float(key: str, params: Mapping[str, str]) -> float:
    """
    Parse a float field, defaulting to 0.0.

    :param key: Station field name, e.g. 'windspeedmph'
    :param params: Raw upload parameters
    :return: Parsed value, or 0.0 if absent or unparseable
    """
    value = params.get(key)
    if not value:
        return 0.0
    try:
        return float(value)
    except ValueError:
        return 0.0


def parse_int(key: str, params: Mapping[str, str]) -> int:
    """
    Parse an integer field, defaulting to 0.

    Only an optionally signed run of digits is accepted, so decimal strings
    count as unparseable. Values beyond the int64 range are clamped to it.
    """
    value = params.get(key)
    if not value or not _INT_RE.fullmatch(value):
        return 0
    return min(max(int(value), INT64_MIN), INT64_MAX)


def parse_temp_f(key: str, params: Mapping[str, str]) -> float:
    """
    Parse a Fahrenheit field and return it in Celsius.

    A parsed 0 (including absent) is returned as 0, not as -17.8 °C.
    """
    temp_f = parse_float(key, params)
    if temp_f == 0:
        return 0.0
    return fahrenheit_to_celsius(temp_f)


def parse_dateutc(value: Optional[str]) -> Optional[datetime]:
    """
    Parse the station's dateutc value as a UTC datetime.

    Some firmware encodes the space as '+', so '+' is replaced first.

    :param value: Raw dateutc value, may be None or empty
    :return: Timezone-aware datetime, or None when no value was sent
    :raises MalformedTimestampError: If the value is present but malformed
    """
    if not value:
        return None
    date_str = value.replace("+", " ")
    if not _DATEUTC_RE.match(date_str):
        raise MalformedTimestampError(value)
    try:
        parsed = datetime.strptime(date_str, DATEUTC_FORMAT)
    except ValueError as e:
        raise MalformedTimestampError(value) from e
    return parsed.replace(tzinfo=timezone.utc)


# ---------- entry points ----------


def parse_weather_report(params: Mapping[str, str]) -> WeatherReport:
    """
    Build a WeatherReport from raw upload parameters.

    :param params: Flat mapping of station field name to string value
    :return: Normalized WeatherReport without derived measures
    :raises MalformedTimestampError: If dateutc is present but malformed
    """
    values = {
        "passkey": params.get("PASSKEY") or "",
        "station_type": params.get("stationtype") or "",
        "date_utc": parse_dateutc(params.get("dateutc")),
    }

    for key in TEMPERATURE_FIELDS:
        values[FIELD_ATTRIBUTES[key]] = parse_temp_f(key, params)
    for key in INTEGER_FIELDS:
        values[FIELD_ATTRIBUTES[key]] = parse_int(key, params)
    for key in FLOAT_FIELDS:
        values[FIELD_ATTRIBUTES[key]] = parse_float(key, params)

    return WeatherReport(**values)


def normalize_report_frame(df: pd.DataFrame) -> pd.DataFrame:
    """
    Normalize an archive of station records column-wise.

    Output columns are named after WeatherReport attributes. Missing columns
    are filled with 0 and unparseable values coerced to 0, like single
    reports. dateutc and stationtype are passed through unchanged when present.

    :param df: DataFrame keyed by station field names (tempf, humidity, ...)
    :return: New DataFrame with the same index
    """
    out = pd.DataFrame(index=df.index)

    for key in ("dateutc", "stationtype"):
        if key in df.columns:
            out[FIELD_ATTRIBUTES[key]] = df[key]

    def numeric(key: str) -> pd.Series:
        if key not in df.columns:
            return pd.Series(0.0, index=df.index)
        return pd.to_numeric(df[key], errors="coerce").fillna(0.0)

    for key in TEMPERATURE_FIELDS:
        temp_f = numeric(key)
        out[FIELD_ATTRIBUTES[key]] = fahrenheit_to_celsius(temp_f).where(temp_f != 0, 0.0)
    for key in INTEGER_FIELDS:
        s = numeric(key).clip(INT64_MIN, _FRAME_INT_MAX)
        out[FIELD_ATTRIBUTES[key]] = s.where(s % 1 == 0, 0).astype("int64")
    for key in FLOAT_FIELDS:
        out[FIELD_ATTRIBUTES[key]] = numeric(key).astype(float)

    return out
