"""
server.py: HTTP listener for station uploads.

Flask application providing:
- /data/report/ for station uploads (Ambient Weather "customized" protocol)
- /metrics for Prometheus scraping
- /health for liveness checks

Some station firmware sends the upload as /data/report/&PASSKEY=...&tempf=...
with no '?'. When the query string is empty and the path contains '&',
everything after the first '&' is treated as the query.
"""

import re
from datetime import datetime, timezone
from typing import Dict, Optional
from urllib.parse import parse_qsl

from flask import Flask, Response, jsonify, request
from prometheus_client import REGISTRY, CONTENT_TYPE_LATEST, CollectorRegistry, generate_latest

from ambient_exporter.api.metrics import MetricsSink, PrometheusSink, publish_report
from ambient_exporter.config import HEALTH_PATH, METRICS_PATH, REPORT_PATH
from ambient_exporter.core.derived_measures import calculate_derived_measures
from ambient_exporter.core.report_parser import parse_weather_report
from ambient_exporter.utils.log_util import app_logger

logger = app_logger(__name__)

# '%' not followed by two hex digits
_BAD_ESCAPE_RE = re.compile(r"%(?![0-9A-Fa-f]{2})")


def extract_raw_query(path: str, query_string: str) -> str:
    """
    Return the query to parse, recovering it from the path for '&'-only uploads.

    :param path: Request path, e.g. '/data/report/&PASSKEY=abc&tempf=68'
    :param query_string: Raw query string of the request, may be empty
    :return: Raw query string
    """
    if query_string == "" and "&" in path:
        return path.split("&", 1)[1]
    return query_string


def parse_query(raw_query: str) -> Dict[str, str]:
    """
    Decode a raw query into a flat mapping; the first value of a repeated key wins.

    Malformed percent-escapes, undecodable bytes and ';' separators are
    rejected rather than passed through.

    :raises ValueError: If the query cannot be decoded
    """
    match = _BAD_ESCAPE_RE.search(raw_query)
    if match:
        raise ValueError(f"invalid URL escape {raw_query[match.start() : match.start() + 3]!r}")
    if ";" in raw_query:
        raise ValueError("invalid semicolon separator in query")

    params: Dict[str, str] = {}
    for key, value in parse_qsl(raw_query, keep_blank_values=True, errors="strict"):
        params.setdefault(key, value)
    return params


def _bad_request() -> Response:
    return Response("Bad request\n", status=400, mimetype="text/plain")


def _method_not_allowed() -> Response:
    return Response(
        "Method not allowed\n", status=405, mimetype="text/plain", headers={"Allow": "GET"}
    )


def create_app(
    elevation_ft: float,
    sink: Optional[MetricsSink] = None,
    registry: Optional[CollectorRegistry] = None,
) -> Flask:
    """
    Build the exporter's Flask application.

    The default sink registers its gauges on the global prometheus_client
    REGISTRY, so /metrics also carries the process and platform collectors.
    Only one such app can exist per process; pass a sink with a private
    registry to build more.

    :param elevation_ft: Station elevation in feet, fixed for the app's lifetime
    :param sink: Where reports are published, a PrometheusSink if None
    :param registry: Registry served on /metrics, the sink's own if None
    :return: Flask app
    """
    if sink is None:
        sink = PrometheusSink(registry if registry is not None else REGISTRY)
    if registry is None:
        registry = getattr(sink, "registry", None)
    if registry is None:
        registry = CollectorRegistry()

    app = Flask(__name__)
    app.config["ELEVATION_FT"] = elevation_ft
    start_time = datetime.now(timezone.utc)

    @app.route(REPORT_PATH, methods=["GET"])
    @app.route(f"{REPORT_PATH}<path:_rest>", methods=["GET"])
    def report(_rest: str = ""):
        """Accept one station upload and publish it."""
        # Flask routes HEAD to GET handlers; only GET may publish
        if request.method != "GET":
            return _method_not_allowed()

        try:
            raw_query = extract_raw_query(
                request.path, request.query_string.decode("utf-8")
            )
            params = parse_query(raw_query)
        except ValueError as e:
            logger.error(f"Failed to parse query: {e}")
            return _bad_request()

        try:
            weather_report = parse_weather_report(params)
        except ValueError as e:
            logger.error(f"Failed to parse weather report: {e}")
            return _bad_request()

        weather_report = calculate_derived_measures(weather_report, elevation_ft)
        publish_report(weather_report, sink)
        logger.debug(
            f"Report received: station={weather_report.station_type or 'unknown'}, "
            f"temp={weather_report.temp_c:.1f}°C, humidity={weather_report.humidity}%"
        )
        return jsonify({"status": "received"})

    @app.route(METRICS_PATH)
    def metrics():
        """Prometheus text exposition."""
        return Response(generate_latest(registry), content_type=CONTENT_TYPE_LATEST)

    @app.route(HEALTH_PATH)
    def health():
        return jsonify(
            {
                "status": "ok",
                "elevation_ft": elevation_ft,
                "uptime_s": int((datetime.now(timezone.utc) - start_time).total_seconds()),
            }
        )

    return app
