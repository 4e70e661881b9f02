"""
metrics.py: Publish weather reports as Prometheus gauges.

The publisher only talks to a MetricsSink, so the formulas and the parser
never touch the registry. PrometheusSink is the production sink: one Gauge
per field, created up front on its own CollectorRegistry, plus a labelled
info gauge carrying the station type.

Concurrent reports overwrite the same gauges; last write wins. Gauge updates
are locked inside prometheus_client.

Metrics (all prefixed ambient_weather_):
    station_info{station_type}                 raw
    outdoor_temperature_celsius ... baromabs   raw, one per report field
    atmospheric_pressure_hpa ... evapotranspiration_mm_day   derived
"""

from typing import Callable, Dict, List, NamedTuple, Optional, Protocol

from prometheus_client import CollectorRegistry, Gauge

from ambient_exporter.config import METRIC_PREFIX
from ambient_exporter.models.weather import WeatherReport
from ambient_exporter.utils.log_util import app_logger

logger = app_logger(__name__)


class MetricsSink(Protocol):
    """Where published values go."""

    def set_named_value(self, name: str, value: float) -> None:
        ...

    def set_labeled_value(self, name: str, labels: Dict[str, str], value: float) -> None:
        ...


class GaugeSpec(NamedTuple):
    name: str
    help: str
    value: Callable[[WeatherReport], float]


STATION_INFO = f"{METRIC_PREFIX}_station_info"
STATION_INFO_HELP = "Ambient Weather station information"
STATION_INFO_LABELS = ("station_type",)

# ---------- gauge definitions ----------

REPORT_GAUGES: List[GaugeSpec] = [
    # Outdoor conditions
    GaugeSpec("outdoor_temperature_celsius", "Outdoor temperature in Celsius", lambda r: r.temp_c),
    GaugeSpec("outdoor_humidity_percent", "Outdoor relative humidity percentage", lambda r: r.humidity),
    GaugeSpec("wind_speed_mph", "Average wind speed in mph", lambda r: r.wind_speed_mph),
    GaugeSpec("wind_gust_mph", "Current wind gust in mph", lambda r: r.wind_gust_mph),
    GaugeSpec("max_daily_gust_mph", "Maximum wind gust today in mph", lambda r: r.max_daily_gust_mph),
    GaugeSpec("wind_direction_degrees", "Wind direction in degrees (0-360)", lambda r: r.wind_dir),
    GaugeSpec("uv_index", "UV index", lambda r: r.uv),
    GaugeSpec("solar_radiation_wm2", "Solar radiation in W/m²", lambda r: r.solar_radiation),
    GaugeSpec("outdoor_battery_ok", "Outdoor sensor battery status (1 = OK)", lambda r: r.batt_out),
    # Rain
    GaugeSpec("rain_hourly_inches", "Rain in last hour in inches", lambda r: r.hourly_rain_in),
    GaugeSpec("rain_event_inches", "Rain since last reset in inches", lambda r: r.event_rain_in),
    GaugeSpec("rain_daily_inches", "Rain today in inches", lambda r: r.daily_rain_in),
    GaugeSpec("rain_weekly_inches", "Rain this week in inches", lambda r: r.weekly_rain_in),
    GaugeSpec("rain_monthly_inches", "Rain this month in inches", lambda r: r.monthly_rain_in),
    GaugeSpec("rain_yearly_inches", "Rain this year in inches", lambda r: r.yearly_rain_in),
    GaugeSpec("rain_total_inches", "Lifetime rain total in inches", lambda r: r.total_rain_in),
    # Indoor conditions
    GaugeSpec("indoor_temperature_celsius", "Indoor temperature in Celsius", lambda r: r.temp_in_c),
    GaugeSpec("indoor_humidity_percent", "Indoor relative humidity percentage", lambda r: r.humidity_in),
    # Barometric pressure
    GaugeSpec(
        "barometric_pressure_relative_inhg",
        "Sea-level (relative) barometric pressure in inHg",
        lambda r: r.barom_rel_in,
    ),
    GaugeSpec(
        "barometric_pressure_absolute_inhg",
        "Absolute station barometric pressure in inHg",
        lambda r: r.barom_abs_in,
    ),
]

DERIVED_GAUGES: List[GaugeSpec] = [
    GaugeSpec(
        "atmospheric_pressure_hpa",
        "Atmospheric pressure at station elevation in hPa",
        lambda r: r.derived.atmospheric_pressure,
    ),
    GaugeSpec("dew_point_celsius", "Dew point in Celsius", lambda r: r.derived.dew_point),
    GaugeSpec("heat_index_celsius", "Heat index in Celsius", lambda r: r.derived.heat_index),
    GaugeSpec("wind_chill_celsius", "Wind chill in Celsius", lambda r: r.derived.wind_chill),
    GaugeSpec(
        "absolute_humidity_gm3", "Absolute humidity in g/m³", lambda r: r.derived.absolute_humidity
    ),
    GaugeSpec("vapor_pressure_hpa", "Vapor pressure in hPa", lambda r: r.derived.vapor_pressure),
    GaugeSpec(
        "vapor_pressure_deficit_hpa",
        "Vapor pressure deficit in hPa",
        lambda r: r.derived.vapor_pressure_deficit,
    ),
    GaugeSpec("wind_run_miles", "Wind run in miles (24-hour period)", lambda r: r.derived.wind_run),
    GaugeSpec(
        "evapotranspiration_mm_day",
        "Evapotranspiration in mm/day",
        lambda r: r.derived.evapotranspiration,
    ),
]


def metric_name(spec: GaugeSpec) -> str:
    return f"{METRIC_PREFIX}_{spec.name}"


class PrometheusSink:
    """MetricsSink backed by prometheus_client gauges."""

    def __init__(self, registry: Optional[CollectorRegistry] = None):
        self.registry = registry if registry is not None else CollectorRegistry()
        self._gauges: Dict[str, Gauge] = {}
        for spec in REPORT_GAUGES + DERIVED_GAUGES:
            name = metric_name(spec)
            self._gauges[name] = Gauge(name, spec.help, registry=self.registry)
        self._labeled: Dict[str, Gauge] = {
            STATION_INFO: Gauge(
                STATION_INFO,
                STATION_INFO_HELP,
                labelnames=STATION_INFO_LABELS,
                registry=self.registry,
            )
        }

    def set_named_value(self, name: str, value: float) -> None:
        try:
            gauge = self._gauges[name]
        except KeyError:
            raise ValueError(f"Unknown metric: {name}") from None
        gauge.set(value)

    def set_labeled_value(self, name: str, labels: Dict[str, str], value: float) -> None:
        try:
            gauge = self._labeled[name]
        except KeyError:
            raise ValueError(f"Unknown labelled metric: {name}") from None
        gauge.labels(**labels).set(value)


def publish_report(report: WeatherReport, sink: MetricsSink) -> None:
    """
    Write every raw field, and the derived measures when present, to sink.

    :param report: Normalized report, usually with derived measures attached
    :param sink: Destination for the values
    """
    sink.set_labeled_value(STATION_INFO, {"station_type": report.station_type}, 1)
    for spec in REPORT_GAUGES:
        sink.set_named_value(metric_name(spec), float(spec.value(report)))

    if report.derived is None:
        logger.debug("Report has no derived measures; skipping derived gauges")
        return
    for spec in DERIVED_GAUGES:
        sink.set_named_value(metric_name(spec), float(spec.value(report)))
