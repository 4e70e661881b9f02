"""
Weather data models and type definitions.

This module provides the data structures passed between the report parser,
the derived-measure pipeline and the metrics publisher. Both are frozen:
a report is created once per upload and enriched by building a new instance.
"""

from dataclasses import dataclass, replace
from datetime import datetime
from typing import Optional


@dataclass(frozen=True)
class DerivedMeasures:
    """Quantities computed from a report and the station elevation."""

    atmospheric_pressure: float  # hPa
    dew_point: float  # °C
    heat_index: float  # °C
    wind_chill: float  # °C
    absolute_humidity: float  # g/m³
    vapor_pressure: float  # hPa
    vapor_pressure_deficit: float  # hPa
    wind_run: float  # miles over 24h
    evapotranspiration: float  # mm/day


@dataclass(frozen=True)
class WeatherReport:
    """
    One normalized station upload.

    Temperatures are in Celsius; everything else keeps the station's units.
    Numeric fields the station did not send are 0, the same as a reported 0.
    """

    # Station info
    passkey: str = ""
    station_type: str = ""
    date_utc: Optional[datetime] = None

    # Outdoor conditions
    temp_c: float = 0.0
    humidity: int = 0
    wind_speed_mph: float = 0.0
    wind_gust_mph: float = 0.0
    max_daily_gust_mph: float = 0.0
    wind_dir: int = 0
    uv: int = 0
    solar_radiation: float = 0.0
    batt_out: int = 0

    # Rain, already accumulated by the station
    hourly_rain_in: float = 0.0
    event_rain_in: float = 0.0
    daily_rain_in: float = 0.0
    weekly_rain_in: float = 0.0
    monthly_rain_in: float = 0.0
    yearly_rain_in: float = 0.0
    total_rain_in: float = 0.0

    # Indoor conditions
    temp_in_c: float = 0.0
    humidity_in: int = 0

    # Barometric pressure
    barom_rel_in: float = 0.0
    barom_abs_in: float = 0.0

    derived: Optional[DerivedMeasures] = None

    def with_derived(self, derived: DerivedMeasures) -> "WeatherReport":
        """Return a copy of this report with derived measures attached."""
        return replace(self, derived=derived)
