"""
Unit tests for station report normalization.
"""

from datetime import datetime, timezone

import pandas as pd
import pytest

from ambient_exporter.core.report_parser import (
    MalformedTimestampError,
    normalize_report_frame,
    parse_dateutc,
    parse_float,
    parse_int,
    parse_temp_f,
    parse_weather_report,
)

SAMPLE_UPLOAD = {
    "PASSKEY": "98:CD:AC:22:0D:E5",
    "stationtype": "AMBWeatherV4.3.4",
    "dateutc": "2024-06-15+18:25:00",
    "tempf": "68",
    "humidity": "50",
    "windspeedmph": "5.1",
    "windgustmph": "8.3",
    "maxdailygust": "14.8",
    "winddir": "225",
    "uv": "4",
    "solarradiation": "512.7",
    "battout": "1",
    "hourlyrainin": "0.000",
    "eventrainin": "0.063",
    "dailyrainin": "0.063",
    "weeklyrainin": "0.291",
    "monthlyrainin": "1.102",
    "yearlyrainin": "18.540",
    "totalrainin": "61.220",
    "tempinf": "71.6",
    "humidityin": "44",
    "baromrelin": "30.012",
    "baromabsin": "29.532",
}


class TestFieldParsers:
    """Individual field parsing with zero defaults."""

    def test_float(self):
        assert parse_float("windspeedmph", {"windspeedmph": "5.1"}) == 5.1

    @pytest.mark.parametrize("params", [{}, {"windspeedmph": ""}, {"windspeedmph": "calm"}])
    def test_float_defaults_to_zero(self, params):
        assert parse_float("windspeedmph", params) == 0.0

    def test_int(self):
        assert parse_int("humidity", {"humidity": "73"}) == 73

    @pytest.mark.parametrize("value", ["", "50.5", "high", " 50", "5_0"])
    def test_int_defaults_to_zero(self, value):
        assert parse_int("humidity", {"humidity": value}) == 0

    def test_int_sign(self):
        assert parse_int("winddir", {"winddir": "+270"}) == 270
        assert parse_int("winddir", {"winddir": "-5"}) == -5

    def test_int_clamped_to_int64(self):
        """Out-of-range values saturate instead of growing without bound."""
        assert parse_int("humidity", {"humidity": "99999999999999999999"}) == 2**63 - 1
        assert parse_int("humidity", {"humidity": "-99999999999999999999"}) == -(2**63)

    def test_temp_converted_to_celsius(self):
        assert parse_temp_f("tempf", {"tempf": "68"}) == pytest.approx(20.0)

    def test_temp_zero_stays_zero(self):
        """0 °F is indistinguishable from a missing value and is not converted."""
        assert parse_temp_f("tempf", {"tempf": "0"}) == 0
        assert parse_temp_f("tempf", {}) == 0

    def test_negative_temp_converted(self):
        assert parse_temp_f("tempf", {"tempf": "-4"}) == pytest.approx(-20.0)


class TestParseDateutc:
    """Strict timestamp parsing."""

    def test_plus_encoded_space(self):
        assert parse_dateutc("2024-06-15+18:25:00") == datetime(
            2024, 6, 15, 18, 25, 0, tzinfo=timezone.utc
        )

    def test_space(self):
        assert parse_dateutc("2024-06-15 18:25:00").tzinfo == timezone.utc

    @pytest.mark.parametrize("value", [None, ""])
    def test_absent(self, value):
        assert parse_dateutc(value) is None

    @pytest.mark.parametrize(
        "value",
        ["not-a-date", "now", "2024-6-15 18:25:00", "2024-06-15T18:25:00", "2024-13-01 00:00:00"],
    )
    def test_malformed(self, value):
        with pytest.raises(MalformedTimestampError):
            parse_dateutc(value)

    def test_error_is_value_error(self):
        with pytest.raises(ValueError, match="failed to parse date"):
            parse_dateutc("not-a-date")


class TestParseWeatherReport:
    """Full upload normalization."""

    def test_full_upload(self):
        report = parse_weather_report(SAMPLE_UPLOAD)

        assert report.passkey == "98:CD:AC:22:0D:E5"
        assert report.station_type == "AMBWeatherV4.3.4"
        assert report.date_utc == datetime(2024, 6, 15, 18, 25, tzinfo=timezone.utc)
        assert report.temp_c == pytest.approx(20.0)
        assert report.humidity == 50
        assert report.wind_speed_mph == 5.1
        assert report.wind_dir == 225
        assert report.uv == 4
        assert report.batt_out == 1
        assert report.solar_radiation == 512.7
        assert report.total_rain_in == 61.22
        assert report.temp_in_c == pytest.approx(22.0)
        assert report.humidity_in == 44
        assert report.barom_rel_in == 30.012
        assert report.barom_abs_in == 29.532
        assert report.derived is None

    def test_empty_upload_defaults(self):
        report = parse_weather_report({})

        assert report.passkey == ""
        assert report.date_utc is None
        assert report.temp_c == 0
        assert report.humidity == 0
        assert report.daily_rain_in == 0

    def test_malformed_timestamp_rejects_report(self):
        with pytest.raises(MalformedTimestampError):
            parse_weather_report({**SAMPLE_UPLOAD, "dateutc": "not-a-date"})

    def test_report_is_frozen(self):
        report = parse_weather_report(SAMPLE_UPLOAD)
        with pytest.raises(AttributeError):
            report.temp_c = 30.0


class TestNormalizeReportFrame:
    """Column-wise normalization of archive exports."""

    def test_matches_single_report_rules(self):
        df = pd.DataFrame(
            {
                "dateutc": [1718475900000, 1718476200000],
                "tempf": [68.0, 0.0],
                "humidity": [50, 61.5],
                "windspeedmph": ["5.1", "n/a"],
                "tempinf": [71.6, None],
            }
        )
        out = normalize_report_frame(df)

        assert list(out["date_utc"]) == [1718475900000, 1718476200000]
        assert list(out["temp_c"]) == pytest.approx([20.0, 0.0])
        assert list(out["humidity"]) == [50, 0]
        assert list(out["wind_speed_mph"]) == pytest.approx([5.1, 0.0])
        assert list(out["temp_in_c"]) == pytest.approx([22.0, 0.0])

    def test_missing_columns_filled_with_zero(self):
        out = normalize_report_frame(pd.DataFrame({"tempf": [50.0]}))

        assert out["solar_radiation"].iloc[0] == 0
        assert out["uv"].iloc[0] == 0
        assert "date_utc" not in out.columns

    def test_out_of_range_integers_clamped(self):
        out = normalize_report_frame(pd.DataFrame({"humidity": [1e20, -1e20, 50]}))

        assert out["humidity"].dtype == "int64"
        assert out["humidity"].iloc[0] > 9e18
        assert out["humidity"].iloc[1] == -(2**63)
        assert out["humidity"].iloc[2] == 50
