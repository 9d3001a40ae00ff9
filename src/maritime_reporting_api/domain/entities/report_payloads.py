# src/maritime_reporting_api/domain/entities/report_payloads.py
# Copyright (c) Maritime Reporting API contributors.
# SPDX-License-Identifier: MIT
"""Typed child payloads, one per report kind.

Purpose:
    Kind-specific measurements owned 1:1 by a report header. Payloads carry
    no identity of their own and never outlive their header.

Layer:
    domain

Notes:
    - Every payload exposes ``report_time``, the instant that drives the
      header's ``report_date_time`` and the report-number date.
    - Units: positions in decimal degrees, speeds in knots, distances in
      nautical miles, fuel and water in metric tonnes, drafts in metres.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from maritime_reporting_api.domain.enums.reporting import ReportKind


@dataclass(frozen=True, slots=True)
class NoonPayload:
    """Daily performance figures logged around local noon."""

    report_date: datetime
    latitude: float | None = None
    longitude: float | None = None
    course_over_ground: float | None = None
    speed_over_ground: float | None = None
    distance_traveled: float | None = None
    distance_to_go: float | None = None
    estimated_time_of_arrival: datetime | None = None
    weather_conditions: str | None = None
    sea_state: str | None = None
    air_temperature: float | None = None
    sea_temperature: float | None = None
    barometric_pressure: float | None = None
    wind_direction: str | None = None
    wind_speed: float | None = None
    visibility: str | None = None
    fuel_oil_consumed: float | None = None
    diesel_oil_consumed: float | None = None
    lub_oil_consumed: float | None = None
    fresh_water_consumed: float | None = None
    fuel_oil_rob: float | None = None
    diesel_oil_rob: float | None = None
    lub_oil_rob: float | None = None
    fresh_water_rob: float | None = None
    main_engine_running_hours: str | None = None
    main_engine_rpm: float | None = None
    main_engine_power: float | None = None
    aux_engine_running_hours: str | None = None
    cargo_on_board: float | None = None
    cargo_description: str | None = None
    operational_remarks: str | None = None
    machinery_remarks: str | None = None
    cargo_remarks: str | None = None

    @property
    def report_time(self) -> datetime:
        return self.report_date


@dataclass(frozen=True, slots=True)
class DeparturePayload:
    """Port departure (end of sea passage preparation, start of voyage)."""

    port_name: str
    departure_date_time: datetime
    port_code: str | None = None
    pilot_off_time: datetime | None = None
    last_line_let_go_time: datetime | None = None
    departure_latitude: float | None = None
    departure_longitude: float | None = None
    draft_forward: float | None = None
    draft_aft: float | None = None
    draft_midship: float | None = None
    fuel_oil_rob: float | None = None
    diesel_oil_rob: float | None = None
    lub_oil_rob: float | None = None
    fresh_water_rob: float | None = None
    cargo_on_board: float | None = None
    cargo_description: str | None = None
    crew_on_board: int | None = None
    passengers_on_board: int | None = None
    destination_port: str | None = None
    estimated_arrival: datetime | None = None

    @property
    def report_time(self) -> datetime:
        return self.departure_date_time


@dataclass(frozen=True, slots=True)
class ArrivalPayload:
    """Port arrival, closing a voyage."""

    port_name: str
    arrival_date_time: datetime
    port_code: str | None = None
    pilot_on_board_time: datetime | None = None
    first_line_ashore_time: datetime | None = None
    arrival_latitude: float | None = None
    arrival_longitude: float | None = None
    voyage_distance: float | None = None
    voyage_duration: float | None = None
    average_speed: float | None = None
    draft_forward: float | None = None
    draft_aft: float | None = None
    draft_midship: float | None = None
    fuel_oil_rob: float | None = None
    diesel_oil_rob: float | None = None
    lub_oil_rob: float | None = None
    fresh_water_rob: float | None = None
    total_fuel_consumed: float | None = None
    total_diesel_consumed: float | None = None
    cargo_on_board: float | None = None
    cargo_description: str | None = None
    crew_on_board: int | None = None
    passengers_on_board: int | None = None

    @property
    def report_time(self) -> datetime:
        return self.arrival_date_time


@dataclass(frozen=True, slots=True)
class BunkerPayload:
    """Fuel delivery as recorded on the Bunker Delivery Note (BDN)."""

    bunker_date: datetime
    port_name: str
    supplier_name: str
    bdn_number: str
    fuel_type: str
    quantity_received: float
    port_code: str | None = None
    fuel_grade: str | None = None
    density: float | None = None
    sulphur_content: float | None = None
    viscosity: float | None = None
    flash_point: float | None = None
    rob_before: float | None = None
    rob_after: float | None = None
    unit_price: float | None = None
    total_cost: float | None = None
    delivery_method: str | None = None

    @property
    def report_time(self) -> datetime:
        return self.bunker_date


@dataclass(frozen=True, slots=True)
class PositionPayload:
    """Ad-hoc or routine position report (e.g. entering an ECA or piracy area)."""

    report_date_time: datetime
    latitude: float
    longitude: float
    course_over_ground: float | None = None
    speed_over_ground: float | None = None
    report_reason: str = "ROUTINE"
    last_port: str | None = None
    next_port: str | None = None
    eta: datetime | None = None
    cargo_on_board: float | None = None
    crew_on_board: int | None = None

    @property
    def report_time(self) -> datetime:
        return self.report_date_time


ReportPayload = NoonPayload | DeparturePayload | ArrivalPayload | BunkerPayload | PositionPayload

PAYLOAD_TYPES: dict[ReportKind, type[ReportPayload]] = {
    ReportKind.NOON: NoonPayload,
    ReportKind.DEPARTURE: DeparturePayload,
    ReportKind.ARRIVAL: ArrivalPayload,
    ReportKind.BUNKER: BunkerPayload,
    ReportKind.POSITION: PositionPayload,
}


def kind_of(payload: ReportPayload) -> ReportKind:
    """Return the report kind a payload instance belongs to."""
    for kind, cls in PAYLOAD_TYPES.items():
        if isinstance(payload, cls):
            return kind
    raise TypeError(f"Unsupported payload type: {type(payload).__name__}")
