"""Endpoint catalogs, weighted selection, and catalog file loading."""

import json
import os
import random
from typing import List, Sequence

import yaml

from perfharness.models import EndpointDescriptor


class CatalogValidationError(Exception):
    """Raised when an endpoint catalog file fails validation."""


_E = EndpointDescriptor

# Mix of public and protected endpoints used by the quick benchmark and load test.
DEFAULT_CATALOG = (
    _E("/", "GET", 20, "Home page (Static)"),
    _E("/api/analytics", "GET", 15, "Analytics data"),
    _E("/api/blogs", "GET", 15, "Blog content API"),
    _E("/api/projects", "GET", 15, "Projects portfolio API"),
    _E("/api/settings", "GET", 15, "Settings API"),
    _E("/api/roadmap", "GET", 10, "Product roadmap API"),
    _E("/api/system", "GET", 3, "System information"),
    _E("/api/appointments", "GET", 6, "Appointments API (Protected)"),
    _E("/api/contact", "GET", 4, "Contact form API (Protected)"),
    _E("/health", "GET", 10, "Health check endpoint"),
)

# Only endpoints expected to answer with a success status.
VALIDATION_CATALOG = (
    _E("/", "GET", 20, "Home page"),
    _E("/api/analytics", "GET", 15, "Analytics API"),
    _E("/api/blogs", "GET", 15, "Blog API"),
    _E("/api/projects", "GET", 15, "Projects API"),
    _E("/api/roadmap", "GET", 10, "Roadmap API"),
    _E("/health", "GET", 10, "Health check endpoint"),
)

# Includes endpoints expected to answer 401, 404 and 405.
COMPREHENSIVE_CATALOG = (
    _E("/", "GET", 15, "Home page (Static)"),
    _E("/api/analytics", "GET", 10, "Analytics data"),
    _E("/api/blogs", "GET", 7, "Blog content API"),
    _E("/api/projects", "GET", 6, "Projects portfolio API"),
    _E("/api/settings", "GET", 4, "Settings API"),
    _E("/api/roadmap", "GET", 2, "Product roadmap API"),
    _E("/api/dashboard", "GET", 8, "Dashboard data (Protected)"),
    _E("/api/appointments", "GET", 6, "Appointments API (Protected)"),
    _E("/api/contact", "GET", 4, "Contact form API (Protected)"),
    _E("/api/ai-assistant", "GET", 2, "AI Assistant API (POST Only)"),
    _E("/api/system", "GET", 3, "System information (Not Implemented)"),
    _E("/api/notifications", "GET", 3, "Notifications API (Not Implemented)"),
    _E("/api/auth", "GET", 2, "Authentication API (Not Implemented)"),
    _E("/api/payment", "GET", 2, "Payment API (Not Implemented)"),
    _E("/api/search", "GET", 1, "Search API (Not Implemented)"),
    _E("/assets/css/styles.css", "GET", 2, "Stylesheet (Missing File)"),
    _E("/assets/js/app.js", "GET", 2, "JavaScript bundle (Missing File)"),
    _E("/favicon.ico", "GET", 1, "Site favicon (Missing File)"),
)


CATALOGS = {
    "default": DEFAULT_CATALOG,
    "validation": VALIDATION_CATALOG,
    "comprehensive": COMPREHENSIVE_CATALOG,
}


def get_catalog(name: str) -> Sequence[EndpointDescriptor]:
    """Look up a built-in catalog by name.

    Raises:
        KeyError: If no catalog has that name.
    """
    try:
        return CATALOGS[name]
    except KeyError:
        raise KeyError(
            f"unknown catalog: {name} (expected one of {', '.join(sorted(CATALOGS))})"
        ) from None


def select_endpoint(catalog: Sequence[EndpointDescriptor], rng=random) -> EndpointDescriptor:
    """Pick an endpoint with probability proportional to its weight.

    Falls back to the first entry when rounding exhausts the draw without a hit.

    Args:
        catalog: Non-empty sequence of endpoint descriptors.
        rng: Source of uniform floats in [0, 1); anything with ``random()``.

    Raises:
        ValueError: If the catalog is empty.
    """
    if not catalog:
        raise ValueError("cannot select from an empty catalog")

    total_weight = sum(ep.weight for ep in catalog)
    remaining = rng.random() * total_weight
    for endpoint in catalog:
        remaining -= endpoint.weight
        if remaining <= 0:
            return endpoint
    return catalog[0]


def load_catalog(path: str) -> List[EndpointDescriptor]:
    """Load an endpoint catalog from a YAML or JSON file.

    The file holds a top-level ``endpoints`` list; each entry needs a ``path``
    and may set ``method`` (default GET), ``weight`` (default 1) and
    ``description``.

    Raises:
        CatalogValidationError: If the file is missing, unreadable, or invalid.
    """
    if not os.path.isfile(path):
        raise CatalogValidationError(f"catalog file not found: {path}")

    ext = os.path.splitext(path)[1].lower()
    try:
        with open(path, "r") as f:
            if ext in (".yaml", ".yml"):
                raw = yaml.safe_load(f)
            elif ext == ".json":
                raw = json.load(f)
            else:
                raise CatalogValidationError(
                    f"unsupported file extension: {ext} (expected .yaml, .yml, or .json)"
                )
    except (yaml.YAMLError, json.JSONDecodeError) as exc:
        raise CatalogValidationError(f"failed to parse {path}: {exc}") from exc

    if not isinstance(raw, dict):
        raise CatalogValidationError("catalog must be a mapping/object at the top level")

    return _build_catalog(raw.get("endpoints"))


def _build_catalog(raw) -> List[EndpointDescriptor]:
    errors: List[str] = []

    if not isinstance(raw, list) or not raw:
        raise CatalogValidationError("'endpoints' is required and must be a non-empty list")

    endpoints = []
    for i, ep in enumerate(raw):
        if not isinstance(ep, dict):
            errors.append(f"endpoints[{i}] must be a mapping")
            continue

        path = ep.get("path")
        if not path or not isinstance(path, str):
            errors.append(f"endpoints[{i}].path is required")
            continue
        if not path.startswith("/"):
            errors.append(f"endpoints[{i}].path must start with '/': {path!r}")
            continue

        weight = ep.get("weight", 1)
        # bool is an int subclass; reject it explicitly
        if isinstance(weight, bool) or not isinstance(weight, int) or weight <= 0:
            errors.append(f"endpoints[{i}].weight must be a positive integer, got {weight!r}")
            continue

        method = str(ep.get("method", "GET")).upper()
        description = str(ep.get("description", ""))
        endpoints.append(EndpointDescriptor(path, method, weight, description))

    if errors:
        raise CatalogValidationError(
            "catalog validation failed:\n  - " + "\n  - ".join(errors)
        )
    return endpoints
