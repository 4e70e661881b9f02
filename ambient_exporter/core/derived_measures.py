"""
derived_measures.py
Compute the derived measures for a report at the station's elevation.

Order matters only through station pressure: it is computed first and handed
to absolute humidity and evapotranspiration so one report never mixes two
pressure values. Every step is pure; the same report and elevation always
give the same result.
"""

import pandas as pd

from ambient_exporter.config import DERIVED_COLUMNS
from ambient_exporter.core.atmosphere import pressure_at_elevation
from ambient_exporter.core.evapotranspiration import evapotranspiration
from ambient_exporter.core.psychrometrics import (
    absolute_humidity,
    actual_vapor_pressure,
    dew_point,
    heat_index,
    vapor_pressure_deficit,
    wind_chill,
)
from ambient_exporter.core.wind import wind_run
from ambient_exporter.models.weather import DerivedMeasures, WeatherReport


def compute_derived_measures(report: WeatherReport, elevation_ft: float) -> DerivedMeasures:
    """
    Run the derived-measure formulas for one report.

    :param report: Normalized report (temperatures in °C)
    :param elevation_ft: Station elevation in feet
    :return: DerivedMeasures for the report
    """
    temp_c = report.temp_c
    humidity = report.humidity
    wind_mph = report.wind_speed_mph

    pressure = pressure_at_elevation(elevation_ft)
    return DerivedMeasures(
        atmospheric_pressure=float(pressure),
        dew_point=float(dew_point(temp_c, humidity)),
        heat_index=float(heat_index(temp_c, humidity)),
        wind_chill=float(wind_chill(temp_c, wind_mph)),
        absolute_humidity=float(
            absolute_humidity(temp_c, humidity, elevation_ft, pressure_hpa=pressure)
        ),
        vapor_pressure=float(actual_vapor_pressure(temp_c, humidity)),
        vapor_pressure_deficit=float(vapor_pressure_deficit(temp_c, humidity)),
        wind_run=float(wind_run(wind_mph)),
        evapotranspiration=float(
            evapotranspiration(
                temp_c,
                humidity,
                wind_mph,
                report.solar_radiation,
                elevation_ft,
                pressure_hpa=pressure,
            )
        ),
    )


def calculate_derived_measures(report: WeatherReport, elevation_ft: float) -> WeatherReport:
    """Return a copy of report with its derived measures attached."""
    return report.with_derived(compute_derived_measures(report, elevation_ft))


def derive_measures_frame(df: pd.DataFrame, elevation_ft: float) -> pd.DataFrame:
    """
    Add derived-measure columns to a normalized archive frame.

    :param df: Output of normalize_report_frame()
    :param elevation_ft: Station elevation in feet
    :return: Copy of df with one column per derived measure
    """
    out = df.copy()
    if out.empty:
        for column in DERIVED_COLUMNS.values():
            out[column] = pd.Series(dtype=float)
        return out

    temp_c = out["temp_c"]
    humidity = out["humidity"]
    wind_mph = out["wind_speed_mph"]

    pressure = float(pressure_at_elevation(elevation_ft))
    out[DERIVED_COLUMNS["atmospheric_pressure"]] = pressure
    out[DERIVED_COLUMNS["dew_point"]] = dew_point(temp_c, humidity)
    out[DERIVED_COLUMNS["heat_index"]] = heat_index(temp_c, humidity)
    out[DERIVED_COLUMNS["wind_chill"]] = wind_chill(temp_c, wind_mph)
    out[DERIVED_COLUMNS["absolute_humidity"]] = absolute_humidity(
        temp_c, humidity, elevation_ft, pressure_hpa=pressure
    )
    out[DERIVED_COLUMNS["vapor_pressure"]] = actual_vapor_pressure(temp_c, humidity)
    out[DERIVED_COLUMNS["vapor_pressure_deficit"]] = vapor_pressure_deficit(temp_c, humidity)
    out[DERIVED_COLUMNS["wind_run"]] = wind_run(wind_mph)
    out[DERIVED_COLUMNS["evapotranspiration"]] = evapotranspiration(
        temp_c,
        humidity,
        wind_mph,
        out["solar_radiation"],
        elevation_ft,
        pressure_hpa=pressure,
    )
    return out
