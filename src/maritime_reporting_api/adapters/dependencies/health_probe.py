# src/maritime_reporting_api/adapters/dependencies/health_probe.py
# Copyright (c) Maritime Reporting API contributors.
# SPDX-License-Identifier: MIT
"""FastAPI dependency wiring for health probes.

Provides a factory that yields a `DbRedisProbe` bound to the app's session
factory and, outside test mode, the shared Redis client. Only wiring lives
here; the probe logic stays in infrastructure.
"""

from __future__ import annotations

from maritime_reporting_api.config.settings import is_test_mode
from maritime_reporting_api.infrastructure.caching.redis_client import get_redis_client
from maritime_reporting_api.infrastructure.database.session import get_sessionmaker
from maritime_reporting_api.infrastructure.health.probe import DbRedisProbe


def build_health_probe() -> DbRedisProbe:
    """Construct the concrete readiness probe."""
    redis = None if is_test_mode() else get_redis_client()
    return DbRedisProbe(session_factory=get_sessionmaker(), redis=redis)
