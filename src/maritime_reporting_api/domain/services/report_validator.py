# src/maritime_reporting_api/domain/services/report_validator.py
# Copyright (c) Maritime Reporting API contributors.
# SPDX-License-Identifier: MIT
"""Maritime business-rule validator.

Purpose:
    Pure, stateless plausibility checks for report payloads. Each check adds
    either a blocking *error* (the report is never persisted) or a
    non-blocking *warning* (persisted into the header remarks and logged).

Layer:
    domain/services

Rules:
    * Positions: reject coordinates near (0, 0) ("Null Island", a GPS fault).
    * Noon: SOG x 24 h cross-checked against distance run (>30% deviation
      warns), fuel and ROB bounds, local-noon timing, weather consistency.
    * Departure / Arrival: port presence, ETA ordering, draft and trim sanity,
      ROB bounds.
    * Bunker: MARPOL Annex VI sulphur caps (0.50% global is an error, 0.10%
      ECA is a warning), BDN quality ranges, ROB conservation.
    * Position: speed/course ranges, report reason, clock plausibility.

Notes:
    ``now`` is injected so callers (and tests) control the clock. Numeric
    formatting in messages is part of the crew-facing contract.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta
from typing import Final

from maritime_reporting_api.domain.entities.report_payloads import (
    ArrivalPayload,
    BunkerPayload,
    DeparturePayload,
    NoonPayload,
    PositionPayload,
    ReportPayload,
)

__all__ = [
    "ValidationOutcome",
    "validate_report",
    "validate_noon",
    "validate_departure",
    "validate_arrival",
    "validate_bunker",
    "validate_position",
    "COMMON_FUEL_TYPES",
    "STANDARD_REPORT_REASONS",
]

NULL_ISLAND_TOLERANCE_DEG: Final[float] = 0.01
SPEED_DISTANCE_MAX_DEVIATION: Final[float] = 0.30
GLOBAL_SULPHUR_CAP_PCT: Final[float] = 0.50
ECA_SULPHUR_CAP_PCT: Final[float] = 0.10
BUNKER_ROB_TOLERANCE_MT: Final[float] = 10.0
MAX_TRIM_M: Final[float] = 3.0

COMMON_FUEL_TYPES: Final[frozenset[str]] = frozenset(
    {"HFO", "VLSFO", "ULSFO", "MGO", "MDO", "LNG", "LSMGO"}
)
STANDARD_REPORT_REASONS: Final[tuple[str, ...]] = (
    "ROUTINE",
    "EMERGENCY",
    "REQUEST",
    "SPECIAL_AREA",
    "PIRACY_AREA",
    "ECA_ZONE",
)


@dataclass(slots=True)
class ValidationOutcome:
    """Errors and warnings collected for one payload."""

    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return not self.errors

    def error(self, message: str) -> None:
        self.errors.append(message)

    def warn(self, message: str) -> None:
        self.warnings.append(message)


def _as_utc(value: datetime) -> datetime:
    return value if value.tzinfo is not None else value.replace(tzinfo=UTC)


def _check_null_island(
    out: ValidationOutcome,
    lat: float | None,
    lon: float | None,
    *,
    exact_message: str,
) -> None:
    if lat is None or lon is None:
        return
    if abs(lat) < NULL_ISLAND_TOLERANCE_DEG and abs(lon) < NULL_ISLAND_TOLERANCE_DEG:
        out.error("Invalid position: Coordinates near (0,0) 'Null Island' - likely GPS error")
    if lat == 0 and lon == 0:
        out.error(exact_message)


def _check_drafts(out: ValidationOutcome, forward: float | None, aft: float | None) -> None:
    if forward is None or aft is None:
        return
    if forward < 0 or aft < 0:
        out.error("Draft cannot be negative")
    trim = abs(aft - forward)
    if trim > MAX_TRIM_M:
        out.warn(f"Large trim: {trim:.2f} meters difference between forward and aft drafts")


# ---------------------------------------------------------------------------
# Per-kind rules


def validate_noon(payload: NoonPayload, *, now: datetime | None = None) -> ValidationOutcome:
    """Validate a noon report.

    Args:
        payload: Noon figures.
        now: Unused; accepted for a uniform signature.

    Returns:
        ValidationOutcome: Collected errors and warnings.
    """
    out = ValidationOutcome()

    _check_null_island(
        out,
        payload.latitude,
        payload.longitude,
        exact_message="Invalid position: Exactly (0,0) is highly suspicious",
    )

    sog = payload.speed_over_ground
    distance = payload.distance_traveled
    if sog is not None and distance is not None:
        if sog < 0.1 and distance > 10:
            out.error("Inconsistent data: Speed near zero but significant distance traveled")
        if distance < 1 and sog > 5:
            out.warn("Unusual: High speed reported but minimal distance traveled")
        expected = sog * 24
        if expected > 0 and abs(expected - distance) / expected > SPEED_DISTANCE_MAX_DEVIATION:
            out.warn(
                f"Speed/distance mismatch: Expected {expected:.1f} nm based on SOG, "
                f"but reported {distance:.1f} nm"
            )

    fuel = payload.fuel_oil_consumed
    if fuel is not None:
        if fuel < 0:
            out.error("Invalid fuel consumption: Cannot be negative")
        if fuel > 100:
            out.warn(f"Unusually high fuel consumption: {fuel:.1f} MT/day")
        if fuel == 0 and sog is not None and sog > 1:
            out.error("Invalid: Zero fuel consumption while vessel is underway")
        if sog is not None and sog > 0:
            rate = fuel / sog
            if rate > 10:
                out.warn(f"High specific fuel consumption: {rate:.2f} MT per knot")

    rob = payload.fuel_oil_rob
    if rob is not None and rob < 0:
        out.error("Invalid: Fuel ROB cannot be negative")
    if rob is not None and fuel is not None and rob < fuel * 2:
        out.warn(f"Low fuel ROB: Only {rob:.1f} MT remaining, consumed {fuel:.1f} MT today")

    # The ship's clock offset travels with the timestamp; naive values are ship time.
    hour = payload.report_date.hour
    if hour < 10 or hour > 14:
        out.warn(
            f"Noon report time unusual: Reported at {hour:02d}:00 local time "
            "(expected 11:00-13:00)"
        )

    if payload.wind_speed is not None and payload.sea_state is not None:
        if payload.wind_speed > 30 and "Calm" in payload.sea_state:
            out.warn("Inconsistent weather: High wind speed but calm sea state")

    air = payload.air_temperature
    if air is not None and (air < -50 or air > 50):
        out.warn(f"Extreme air temperature: {air}°C")

    sea = payload.sea_temperature
    if sea is not None and (sea < -2 or sea > 35):
        out.warn(f"Unusual sea temperature: {sea}°C")

    pressure = payload.barometric_pressure
    if pressure is not None:
        if pressure < 950:
            out.warn(f"Very low pressure: {pressure} hPa - possible typhoon/hurricane")
        if pressure > 1040:
            out.warn(f"Very high pressure: {pressure} hPa")

    return out


def validate_departure(
    payload: DeparturePayload, *, now: datetime | None = None
) -> ValidationOutcome:
    """Validate a departure report."""
    out = ValidationOutcome()

    port = (payload.port_name or "").strip()
    destination = (payload.destination_port or "").strip()
    if not port:
        out.error("Port name is required for departure report")
    if not destination:
        out.warn("Destination port not specified")
    if port and destination and port.casefold() == destination.casefold():
        out.warn("Departure and destination ports are the same")

    if payload.estimated_arrival is not None:
        duration = _as_utc(payload.estimated_arrival) - _as_utc(payload.departure_date_time)
        if duration < timedelta(0):
            out.error("ETA cannot be before departure time")
        days = duration.total_seconds() / 86400
        if days > 60:
            out.warn(f"Very long voyage: {days:.1f} days to destination")

    _check_drafts(out, payload.draft_forward, payload.draft_aft)

    if payload.fuel_oil_rob is not None and payload.fuel_oil_rob < 10:
        out.warn(f"Very low fuel ROB at departure: {payload.fuel_oil_rob:.1f} MT")

    return out


def validate_arrival(payload: ArrivalPayload, *, now: datetime | None = None) -> ValidationOutcome:
    """Validate an arrival report (port, position, draft and ROB sanity)."""
    out = ValidationOutcome()

    if not (payload.port_name or "").strip():
        out.error("Port name is required for arrival report")

    _check_null_island(
        out,
        payload.arrival_latitude,
        payload.arrival_longitude,
        exact_message="Invalid position: Exactly (0,0) is highly suspicious",
    )
    _check_drafts(out, payload.draft_forward, payload.draft_aft)

    if payload.fuel_oil_rob is not None and payload.fuel_oil_rob < 0:
        out.error("Invalid: Fuel ROB cannot be negative")

    speed = payload.average_speed
    if speed is not None and (speed < 0 or speed > 50):
        out.error(f"Invalid average speed: {speed} knots (must be 0-50)")

    if payload.pilot_on_board_time is not None and _as_utc(payload.pilot_on_board_time) > _as_utc(
        payload.arrival_date_time
    ):
        out.warn("Pilot boarded after the reported arrival time")

    return out


def validate_bunker(payload: BunkerPayload, *, now: datetime | None = None) -> ValidationOutcome:
    """Validate a bunker report against BDN ranges and MARPOL Annex VI."""
    out = ValidationOutcome()

    qty = payload.quantity_received
    if qty <= 0:
        out.error("Bunker quantity must be positive")
    if qty > 5000:
        out.warn(f"Very large bunker quantity: {qty:.0f} MT")

    fuel_type = (payload.fuel_type or "").strip()
    if not fuel_type:
        out.error("Fuel type is required for bunker report")
    elif fuel_type.upper() not in COMMON_FUEL_TYPES:
        out.warn(f"Unusual fuel type: {payload.fuel_type} (Common types: HFO, VLSFO, MGO)")

    sulphur = payload.sulphur_content
    if sulphur is not None:
        if sulphur < 0:
            out.error("Sulphur content cannot be negative")
        if sulphur > GLOBAL_SULPHUR_CAP_PCT:
            out.error(
                f"Sulphur content {sulphur}% exceeds MARPOL 2020 global limit of 0.50% "
                "(unless in ECA or using scrubber)"
            )
        elif sulphur > ECA_SULPHUR_CAP_PCT:
            out.warn(f"Sulphur content {sulphur}% exceeds ECA limit of 0.10%")

    density = payload.density
    if density is not None and (density < 0.7 or density > 1.1):
        out.warn(f"Unusual fuel density: {density} kg/L (typical range: 0.8-1.0)")

    viscosity = payload.viscosity
    if viscosity is not None and (viscosity < 1 or viscosity > 1000):
        out.warn(f"Unusual viscosity: {viscosity} cSt")

    if payload.rob_before is not None and payload.rob_after is not None:
        expected = payload.rob_before + qty
        if abs(payload.rob_after - expected) > BUNKER_ROB_TOLERANCE_MT:
            out.warn(
                f"ROB mismatch: Expected {expected:.1f} MT after bunkering "
                f"(Before: {payload.rob_before:.1f} + Received: {qty:.1f}), "
                f"but reported {payload.rob_after:.1f} MT"
            )

    return out


def validate_position(
    payload: PositionPayload,
    *,
    now: datetime | None = None,
    future_tolerance: timedelta = timedelta(hours=1),
) -> ValidationOutcome:
    """Validate a position report.

    Args:
        payload: Position figures.
        now: Reference instant; defaults to the current UTC time.
        future_tolerance: Clock skew allowed before a report counts as future-dated.

    Returns:
        ValidationOutcome: Collected errors and warnings.
    """
    out = ValidationOutcome()
    current = _as_utc(now) if now is not None else datetime.now(UTC)

    _check_null_island(
        out,
        payload.latitude,
        payload.longitude,
        exact_message="Exact coordinates (0,0) detected - GPS malfunction",
    )

    sog = payload.speed_over_ground
    if sog is not None:
        if sog < 0 or sog > 50:
            out.error(f"Invalid speed: {sog} knots (must be 0-50)")
        if sog > 30:
            out.warn(f"High speed reported: {sog} knots - verify accuracy")

    cog = payload.course_over_ground
    if cog is not None and (cog < 0 or cog > 360):
        out.error(f"Invalid course: {cog}° (must be 0-360)")

    if (payload.report_reason or "").upper() not in STANDARD_REPORT_REASONS:
        out.warn(
            f"Unusual report reason: {payload.report_reason}. "
            f"Standard reasons: {', '.join(STANDARD_REPORT_REASONS)}"
        )

    reported = _as_utc(payload.report_date_time)
    if reported > current + future_tolerance:
        out.error("Report datetime cannot be in the future")

    if payload.eta is not None:
        eta = _as_utc(payload.eta)
        if eta < reported:
            out.error("ETA cannot be before position report time")
        if eta < current:
            out.warn("ETA is in the past - may need update")

    return out


_VALIDATORS: dict[type, Callable[..., ValidationOutcome]] = {
    NoonPayload: validate_noon,
    DeparturePayload: validate_departure,
    ArrivalPayload: validate_arrival,
    BunkerPayload: validate_bunker,
    PositionPayload: validate_position,
}


def validate_report(
    payload: ReportPayload,
    *,
    now: datetime | None = None,
    future_tolerance: timedelta = timedelta(hours=1),
) -> ValidationOutcome:
    """Dispatch to the rule set for the payload's report kind.

    Args:
        payload: Any typed report payload.
        now: Reference instant for clock-dependent rules.
        future_tolerance: Clock skew allowed for position reports.

    Returns:
        ValidationOutcome: Collected errors and warnings.

    Raises:
        TypeError: If the payload type has no rule set.
    """
    validator = _VALIDATORS.get(type(payload))
    if validator is None:
        raise TypeError(f"No validator for payload type {type(payload).__name__}")
    if isinstance(payload, PositionPayload):
        return validate_position(payload, now=now, future_tolerance=future_tolerance)
    return validator(payload, now=now)
