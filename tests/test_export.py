"""Tests for JSON export and report rendering."""

import json
import os
import tempfile
from datetime import datetime, timezone

from perfharness.display import render_report
from perfharness.export import (
    FRAMEWORK_VERSION,
    build_export,
    default_export_path,
    write_export,
)
from perfharness.models import MetricSample, Success
from perfharness.report import generate_report


def _report():
    samples = [
        MetricSample("/", "GET", 12.0, Success(200, 10), 1700000000.0),
        MetricSample("/api/a-very-long-endpoint-path/that/keeps/going", "GET", 20.0,
                     Success(200, 10), 1700000001.0),
    ]
    return generate_report(samples)


NOW = datetime(2024, 5, 1, 12, 30, 15, 250000, tzinfo=timezone.utc)


class TestBuildExport:
    def test_metadata(self):
        data = build_export(_report(), "http://localhost:3004", "quick-benchmark", now=NOW)
        assert data["metadata"] == {
            "testTimestamp": "2024-05-01T12:30:15.250000+00:00",
            "baseUrl": "http://localhost:3004",
            "frameworkVersion": FRAMEWORK_VERSION,
            "testType": "quick-benchmark",
        }

    def test_report_fields_merged(self):
        data = build_export(_report(), "http://x", "load-test")
        for key in ("summary", "endpointBreakdown", "timeSeriesData", "recommendations"):
            assert key in data
        assert len(data["timeSeriesData"]) == 2


class TestWriteExport:
    def test_default_path_has_no_colons(self):
        path = default_export_path(NOW)
        assert path.startswith("perf-harness-2024-05-01T12-30-15")
        assert path.endswith(".json")
        assert ":" not in path

    def test_write_creates_parent_directories(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            path = os.path.join(tmpdir, "nested", "dir", "run.json")
            data = build_export(_report(), "http://x", "validation")
            assert write_export(data, path) == path
            with open(path, "r") as f:
                parsed = json.load(f)
            assert parsed["metadata"]["testType"] == "validation"
            assert parsed["summary"]["totalRequests"] == 2


class TestRenderReport:
    def test_sections_present(self):
        text = render_report(_report())
        assert "Total Requests: 2" in text
        assert "ENDPOINT BREAKDOWN:" in text
        assert "RECOMMENDATIONS:" in text
        assert "Latency: SUB-100MS" in text
        assert "Reliability: PRODUCTION GRADE" in text

    def test_long_paths_truncated(self):
        text = render_report(_report())
        assert "| /api/a-very-long-endpoi... |" in text
        assert "| " + "/".ljust(26) + " |" in text
