# config.py
"""
Configurations for the Ambient Weather exporter.

This module contains the station field index and the constants that are
shared across the listener, the derived-measure formulas and the metrics
publisher. Per-process values (station elevation, listen address) come from
the command line, see ambient_exporter.cli.exporter.
"""

DEFAULT_ADDR = ":9600"
DEFAULT_HOST = "0.0.0.0"

REPORT_PATH = "/data/report/"
METRICS_PATH = "/metrics"
HEALTH_PATH = "/health"

METRIC_PREFIX = "ambient_weather"

# Stations upload dateutc in this layout, with spaces sent as "+".
DATEUTC_FORMAT = "%Y-%m-%d %H:%M:%S"
DATEUTC_PATTERN = r"^\d{4}-\d{2}-\d{2} \d{2}:\d{2}:\d{2}$"

# Wind run treats the current speed as constant over this window.
WIND_RUN_HOURS = 24.0

# Standard atmosphere at sea level
SEA_LEVEL_PRESSURE_HPA = 1013.25

HISTORY_FILE_TYPES = ("csv", "parquet")

# Station upload keys, grouped the way the station reports them.
# Values are the WeatherReport attribute each key normalizes into.
station_fields = {
    "station": {
        "PASSKEY": "passkey",
        "stationtype": "station_type",
        "dateutc": "date_utc",
    },
    "outdoor": {
        "tempf": "temp_c",
        "humidity": "humidity",
        "windspeedmph": "wind_speed_mph",
        "windgustmph": "wind_gust_mph",
        "maxdailygust": "max_daily_gust_mph",
        "winddir": "wind_dir",
        "uv": "uv",
        "solarradiation": "solar_radiation",
        "battout": "batt_out",
    },
    "rain": {
        "hourlyrainin": "hourly_rain_in",
        "eventrainin": "event_rain_in",
        "dailyrainin": "daily_rain_in",
        "weeklyrainin": "weekly_rain_in",
        "monthlyrainin": "monthly_rain_in",
        "yearlyrainin": "yearly_rain_in",
        "totalrainin": "total_rain_in",
    },
    "indoor": {
        "tempinf": "temp_in_c",
        "humidityin": "humidity_in",
    },
    "pressure": {
        "baromrelin": "barom_rel_in",
        "baromabsin": "barom_abs_in",
    },
}

# Keys reported in Fahrenheit and stored in Celsius
TEMPERATURE_FIELDS = ("tempf", "tempinf")

# Keys parsed as integers
INTEGER_FIELDS = ("humidity", "humidityin", "uv", "winddir", "battout")

# Keys parsed as floats (everything numeric that is not above)
FLOAT_FIELDS = (
    "windspeedmph",
    "windgustmph",
    "maxdailygust",
    "solarradiation",
    "hourlyrainin",
    "eventrainin",
    "dailyrainin",
    "weeklyrainin",
    "monthlyrainin",
    "yearlyrainin",
    "totalrainin",
    "baromrelin",
    "baromabsin",
)

# Column names used for derived measures in archive exports
DERIVED_COLUMNS = {
    "atmospheric_pressure": "atmosphericpressure",
    "dew_point": "dewpoint",
    "heat_index": "heatindex",
    "wind_chill": "windchill",
    "absolute_humidity": "absolutehumidity",
    "vapor_pressure": "vaporpressure",
    "vapor_pressure_deficit": "vaporpressuredeficit",
    "wind_run": "windrun",
    "evapotranspiration": "evapotranspiration",
}
