"""JSON export of a finished run."""

import json
import os
from datetime import datetime, timezone
from typing import Optional

from perfharness.models import Report
from perfharness.prober import VERSION
from perfharness.report import report_to_dict

FRAMEWORK_VERSION = f"perf-harness/{VERSION}"


def build_export(
    report: Report,
    base_url: str,
    test_type: str,
    now: Optional[datetime] = None,
) -> dict:
    """Merge run metadata with the serialized report.

    Args:
        report: The generated report.
        base_url: Target the run was pointed at.
        test_type: Label of the driver that produced the report.
        now: Timestamp to record; defaults to the current UTC time.

    Returns:
        A dict with a ``metadata`` block followed by the report fields.
    """
    now = now or datetime.now(timezone.utc)
    return {
        "metadata": {
            "testTimestamp": now.isoformat(),
            "baseUrl": base_url,
            "frameworkVersion": FRAMEWORK_VERSION,
            "testType": test_type,
        },
        **report_to_dict(report),
    }


def default_export_path(now: Optional[datetime] = None) -> str:
    now = now or datetime.now(timezone.utc)
    stamp = now.isoformat().replace(":", "-").replace(".", "-")
    return f"perf-harness-{stamp}.json"


def write_export(data: dict, path: str) -> str:
    """Write export data as indented JSON, creating parent directories.

    Returns:
        The path written to.
    """
    parent = os.path.dirname(path)
    if parent and not os.path.isdir(parent):
        os.makedirs(parent, exist_ok=True)

    with open(path, "w") as f:
        f.write(json.dumps(data, indent=2) + "\n")
    return path
