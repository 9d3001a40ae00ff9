# src/maritime_reporting_api/infrastructure/observability/metrics.py
# Copyright (c) Maritime Reporting API contributors.
# SPDX-License-Identifier: MIT
"""Prometheus metrics utilities (registry-aware, hot-reload safe).

This module provides accessor functions for every collector the service
emits. Each accessor returns a *singleton* bound to the **current**
``prometheus_client.REGISTRY``:

    - Safe under hot reload and tests that swap the default registry.
    - No duplicate-registration errors.
    - Cache automatically resets when the active registry changes.

Collectors:
    * Readiness probe latency (DB, Redis).
    * DB operation latency and errors, per repository method.
    * Cache operation latency and counts (report-type registry).
    * Workflow transitions by name and outcome.
    * Report-number allocation retries.

Example:
    get_report_transitions_total().labels(transition="submit", outcome="success").inc()
"""

from __future__ import annotations

import logging
import threading
from contextlib import suppress
from typing import Final

import prometheus_client as prom
from prometheus_client import Counter, Histogram

_log = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Common histogram buckets (seconds)
_BUCKETS: Final[tuple[float, ...]] = (
    0.005,
    0.010,
    0.025,
    0.050,
    0.100,
    0.250,
    0.500,
    1.000,
    2.500,
    5.000,
    10.000,
)

# Cache keyed by metric name within the currently-active registry.
_registry_id: int | None = None
_hist_cache: dict[str, Histogram] = {}
_counter_cache: dict[str, Counter] = {}
_lock = threading.RLock()


# ---------------------------------------------------------------------------
# Registry-handling primitives


def _ensure_registry() -> None:
    """Reset caches if the active registry changed (common in tests)."""
    global _registry_id
    with _lock:
        rid = id(prom.REGISTRY)
        if _registry_id is None or _registry_id != rid:
            _hist_cache.clear()
            _counter_cache.clear()
            _registry_id = rid


def _lookup_existing[C: (Histogram, Counter)](name: str, kind: type[C]) -> C | None:
    """Return a previously-registered collector of ``kind`` from the active registry.

    Args:
        name: Collector name.
        kind: Expected collector class.

    Returns:
        The existing collector if present and of the correct type.
    """
    with _lock, suppress(Exception):
        mapping = getattr(prom.REGISTRY, "_names_to_collectors", None)
        if isinstance(mapping, dict):
            col = mapping.get(name)
            if isinstance(col, kind):
                return col
    return None


# ---------------------------------------------------------------------------
# Get-or-create helpers


def _get_or_create_hist(
    name: str,
    help_text: str,
    *,
    buckets: tuple[float, ...] = _BUCKETS,
    labelnames: tuple[str, ...] = (),
) -> Histogram:
    """Get or create a registry-bound ``Histogram`` with stable identity.

    Strategy:
    1. Return from module cache if present for the active registry.
    2. If registry already has a collector by this name, reuse it.
    3. Otherwise, register a new collector on the active registry.
    4. If concurrent registration triggers a duplication error, retry step 2.

    Args:
        name: Metric name (snake_case).
        help_text: Human-readable description.
        buckets: Histogram buckets in seconds.
        labelnames: Optional label names tuple.

    Returns:
        Histogram: Bound to ``prom.REGISTRY``.
    """
    _ensure_registry()
    with _lock:
        cached = _hist_cache.get(name)
        if cached is not None:
            return cached

        existing = _lookup_existing(name, Histogram)
        if existing is not None:
            _hist_cache[name] = existing
            return existing

        try:
            h = Histogram(name, help_text, labelnames, buckets=buckets, registry=prom.REGISTRY)
            _hist_cache[name] = h
            return h
        except ValueError as exc:
            if "Duplicated timeseries" in str(exc):
                again = _lookup_existing(name, Histogram)
                if again is not None:
                    _hist_cache[name] = again
                    return again
            _log.exception("Failed to register Prometheus histogram %s", name)
            raise


def _get_or_create_counter(
    name: str,
    help_text: str,
    *,
    labelnames: tuple[str, ...] = (),
) -> Counter:
    """Get or create a registry-bound ``Counter`` with stable identity.

    Args:
        name: Metric name (snake_case).
        help_text: Human-readable description.
        labelnames: Optional label names tuple.

    Returns:
        Counter: Bound to ``prom.REGISTRY``.
    """
    _ensure_registry()
    with _lock:
        cached = _counter_cache.get(name)
        if cached is not None:
            return cached

        existing = _lookup_existing(name, Counter)
        if existing is not None:
            _counter_cache[name] = existing
            return existing

        try:
            c = Counter(name, help_text, labelnames, registry=prom.REGISTRY)
            _counter_cache[name] = c
            return c
        except ValueError as exc:
            if "Duplicated timeseries" in str(exc):
                again = _lookup_existing(name, Counter)
                if again is not None:
                    _counter_cache[name] = again
                    return again
            _log.exception("Failed to register Prometheus counter %s", name)
            raise


# ---------------------------------------------------------------------------
# Health metrics


def get_readyz_db_latency_seconds() -> Histogram:
    """Return (and cache) the DB readiness latency histogram."""
    return _get_or_create_hist(
        name="readyz_db_latency_seconds",
        help_text="Latency of Postgres readiness probe (seconds).",
    )


def get_readyz_redis_latency_seconds() -> Histogram:
    """Return (and cache) the Redis readiness latency histogram."""
    return _get_or_create_hist(
        name="readyz_redis_latency_seconds",
        help_text="Latency of Redis readiness probe (seconds).",
    )


# ---------------------------------------------------------------------------
# DB metrics


def get_db_operation_duration_seconds() -> Histogram:
    """Return histogram for DB operation latency.

    Labels:
        operation: Logical operation name (e.g. ``add_report``).
        model: Logical model/table name (e.g. ``report_headers``).
        outcome: ``success`` or ``error``.
    """
    return _get_or_create_hist(
        name="db_operation_duration_seconds",
        help_text="Latency (seconds) of database operations.",
        labelnames=("operation", "model", "outcome"),
    )


def get_db_errors_total() -> Counter:
    """Return counter for DB errors.

    Labels:
        operation: Logical operation name.
        model: Logical model/table name.
        reason: Error class or short reason.
    """
    return _get_or_create_counter(
        name="db_errors_total",
        help_text="Total database errors by operation/model.",
        labelnames=("operation", "model", "reason"),
    )


# ---------------------------------------------------------------------------
# Cache metrics


def get_cache_operation_duration_seconds() -> Histogram:
    """Return histogram for cache operation latency.

    Labels:
        operation: Cache operation name (``get_json`` / ``set_json`` / ``delete``).
        namespace: Cache namespace/prefix.
        hit: ``true``/``false``/``n/a``.
    """
    return _get_or_create_hist(
        name="cache_operation_duration_seconds",
        help_text="Latency (seconds) of cache operations.",
        labelnames=("operation", "namespace", "hit"),
    )


def get_cache_operations_total() -> Counter:
    """Return counter for cache operations (same labels as the histogram)."""
    return _get_or_create_counter(
        name="cache_operations_total",
        help_text="Total cache operations by type/namespace.",
        labelnames=("operation", "namespace", "hit"),
    )


# ---------------------------------------------------------------------------
# Reporting workflow metrics


def get_report_transitions_total() -> Counter:
    """Return counter for workflow operations on reports and amendments.

    Labels:
        transition: Operation name (``create``, ``submit``, ``approve`` ...).
        outcome: ``success`` or the failing error kind in lower case.
    """
    return _get_or_create_counter(
        name="reporting_transitions_total",
        help_text="Report workflow operations by transition and outcome.",
        labelnames=("transition", "outcome"),
    )


def get_report_number_retries_total() -> Counter:
    """Return counter for retried report-number allocations.

    Labels:
        prefix: Report number prefix (``NOON``, ``DEP`` ...).
        reason: Exception class that triggered the retry.
    """
    return _get_or_create_counter(
        name="reporting_number_allocation_retries_total",
        help_text="Retries of report creation caused by allocation conflicts.",
        labelnames=("prefix", "reason"),
    )
