# src/maritime_reporting_api/infrastructure/database/models/reporting.py
# Copyright (c) Maritime Reporting API contributors.
# SPDX-License-Identifier: MIT
"""Reporting ORM models.

Purpose:
    SQLAlchemy mappings for the report lifecycle:

    * ``report_types``: Seeded catalog of report kinds.
    * ``report_headers``: Common header with status, signatures, transmission
      state, soft-delete markers and the optimistic-locking ``version``.
      Partial unique indexes hold the per-period rules for visible rows.
    * ``noon_reports`` .. ``position_reports``: One child row per header,
      keyed by ``header_id``; column names equal the domain payload fields.
    * ``workflow_history``: Append-only audit trail.
    * ``report_amendments``: Corrections, unique per (header, number).
    * ``transmission_logs``: Transmission attempts.
    * ``report_sequences``: Per ``PREFIX-YYYYMMDD`` number counters.

Layer:
    infrastructure / database / models
"""

from __future__ import annotations

from datetime import datetime
from typing import Any

from sqlalchemy import (
    Boolean,
    Date,
    DateTime,
    Float,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    UniqueConstraint,
    cast,
    func,
    text,
)
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column

from maritime_reporting_api.infrastructure.database.models.base import (
    Base,
    IdentityMixin,
    SoftDeleteMixin,
    TimestampMixin,
    now_utc,
)

_HEADER_FK = "report_headers.id"


class ReportTypeModel(IdentityMixin, Base):
    """Report-type catalog entry (report_types)."""

    __tablename__ = "report_types"

    type_code: Mapped[str] = mapped_column(String(20), nullable=False, unique=True)
    type_name: Mapped[str] = mapped_column(String(100), nullable=False)
    category: Mapped[str] = mapped_column(String(50), nullable=False)
    frequency: Mapped[str] = mapped_column(String(50), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    regulation_reference: Mapped[str | None] = mapped_column(String(200), nullable=True)
    is_mandatory: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=True, server_default=text("true")
    )
    requires_master_signature: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=True, server_default=text("true")
    )
    is_active: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=True, server_default=text("true")
    )


class ReportHeaderModel(IdentityMixin, TimestampMixin, SoftDeleteMixin, Base):
    """Report header (report_headers)."""

    __tablename__ = "report_headers"
    __table_args__ = (
        Index("ix_report_headers_kind_report_date_time", "kind", "report_date_time"),
        Index("ix_report_headers_kind_voyage_id", "kind", "voyage_id"),
    )

    report_number: Mapped[str] = mapped_column(String(50), nullable=False, unique=True)
    report_type_id: Mapped[int] = mapped_column(ForeignKey("report_types.id"), nullable=False)
    kind: Mapped[str] = mapped_column(String(20), nullable=False)
    report_date_time: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    status: Mapped[str] = mapped_column(
        String(20), nullable=False, index=True, server_default=text("'DRAFT'")
    )
    prepared_by: Mapped[str | None] = mapped_column(String(100), nullable=True)
    voyage_id: Mapped[int | None] = mapped_column(Integer, nullable=True)
    master_signature: Mapped[str | None] = mapped_column(String(100), nullable=True)
    signed_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    is_transmitted: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False, server_default=text("false")
    )
    transmitted_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    remarks: Mapped[str | None] = mapped_column(Text, nullable=True)
    version: Mapped[int] = mapped_column(Integer, nullable=False, server_default="1")

    __mapper_args__ = {"version_id_col": version}


#: Per-period uniqueness among visible reports. Names are matched by the
#: repository to tell these violations apart from report-number collisions.
NOON_PER_DAY_INDEX = "uq_report_headers_noon_day"
MOVEMENT_PER_VOYAGE_INDEX = "uq_report_headers_movement_voyage"

Index(
    NOON_PER_DAY_INDEX,
    cast(func.timezone("UTC", ReportHeaderModel.report_date_time), Date),
    unique=True,
    postgresql_where=text("kind = 'noon' AND deleted_at IS NULL"),
)
Index(
    MOVEMENT_PER_VOYAGE_INDEX,
    ReportHeaderModel.kind,
    ReportHeaderModel.voyage_id,
    unique=True,
    postgresql_where=text(
        "kind IN ('departure', 'arrival') AND voyage_id IS NOT NULL AND deleted_at IS NULL"
    ),
)


class _ChildMixin:
    header_id: Mapped[int] = mapped_column(
        ForeignKey(_HEADER_FK, ondelete="CASCADE"), primary_key=True
    )


class NoonReportModel(_ChildMixin, Base):
    """Noon report payload (noon_reports)."""

    __tablename__ = "noon_reports"

    report_date: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, index=True)
    latitude: Mapped[float | None] = mapped_column(Float)
    longitude: Mapped[float | None] = mapped_column(Float)
    course_over_ground: Mapped[float | None] = mapped_column(Float)
    speed_over_ground: Mapped[float | None] = mapped_column(Float)
    distance_traveled: Mapped[float | None] = mapped_column(Float)
    distance_to_go: Mapped[float | None] = mapped_column(Float)
    estimated_time_of_arrival: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))
    weather_conditions: Mapped[str | None] = mapped_column(String(50))
    sea_state: Mapped[str | None] = mapped_column(String(20))
    air_temperature: Mapped[float | None] = mapped_column(Float)
    sea_temperature: Mapped[float | None] = mapped_column(Float)
    barometric_pressure: Mapped[float | None] = mapped_column(Float)
    wind_direction: Mapped[str | None] = mapped_column(String(20))
    wind_speed: Mapped[float | None] = mapped_column(Float)
    visibility: Mapped[str | None] = mapped_column(String(20))
    fuel_oil_consumed: Mapped[float | None] = mapped_column(Float)
    diesel_oil_consumed: Mapped[float | None] = mapped_column(Float)
    lub_oil_consumed: Mapped[float | None] = mapped_column(Float)
    fresh_water_consumed: Mapped[float | None] = mapped_column(Float)
    fuel_oil_rob: Mapped[float | None] = mapped_column(Float)
    diesel_oil_rob: Mapped[float | None] = mapped_column(Float)
    lub_oil_rob: Mapped[float | None] = mapped_column(Float)
    fresh_water_rob: Mapped[float | None] = mapped_column(Float)
    main_engine_running_hours: Mapped[str | None] = mapped_column(String(50))
    main_engine_rpm: Mapped[float | None] = mapped_column(Float)
    main_engine_power: Mapped[float | None] = mapped_column(Float)
    aux_engine_running_hours: Mapped[str | None] = mapped_column(String(50))
    cargo_on_board: Mapped[float | None] = mapped_column(Float)
    cargo_description: Mapped[str | None] = mapped_column(String(100))
    operational_remarks: Mapped[str | None] = mapped_column(Text)
    machinery_remarks: Mapped[str | None] = mapped_column(Text)
    cargo_remarks: Mapped[str | None] = mapped_column(Text)


class DepartureReportModel(_ChildMixin, Base):
    """Departure report payload (departure_reports)."""

    __tablename__ = "departure_reports"

    port_name: Mapped[str] = mapped_column(String(100), nullable=False)
    departure_date_time: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    port_code: Mapped[str | None] = mapped_column(String(10))
    pilot_off_time: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))
    last_line_let_go_time: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))
    departure_latitude: Mapped[float | None] = mapped_column(Float)
    departure_longitude: Mapped[float | None] = mapped_column(Float)
    draft_forward: Mapped[float | None] = mapped_column(Float)
    draft_aft: Mapped[float | None] = mapped_column(Float)
    draft_midship: Mapped[float | None] = mapped_column(Float)
    fuel_oil_rob: Mapped[float | None] = mapped_column(Float)
    diesel_oil_rob: Mapped[float | None] = mapped_column(Float)
    lub_oil_rob: Mapped[float | None] = mapped_column(Float)
    fresh_water_rob: Mapped[float | None] = mapped_column(Float)
    cargo_on_board: Mapped[float | None] = mapped_column(Float)
    cargo_description: Mapped[str | None] = mapped_column(String(100))
    crew_on_board: Mapped[int | None] = mapped_column(Integer)
    passengers_on_board: Mapped[int | None] = mapped_column(Integer)
    destination_port: Mapped[str | None] = mapped_column(String(100))
    estimated_arrival: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))


class ArrivalReportModel(_ChildMixin, Base):
    """Arrival report payload (arrival_reports)."""

    __tablename__ = "arrival_reports"

    port_name: Mapped[str] = mapped_column(String(100), nullable=False)
    arrival_date_time: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    port_code: Mapped[str | None] = mapped_column(String(10))
    pilot_on_board_time: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))
    first_line_ashore_time: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))
    arrival_latitude: Mapped[float | None] = mapped_column(Float)
    arrival_longitude: Mapped[float | None] = mapped_column(Float)
    voyage_distance: Mapped[float | None] = mapped_column(Float)
    voyage_duration: Mapped[float | None] = mapped_column(Float)
    average_speed: Mapped[float | None] = mapped_column(Float)
    draft_forward: Mapped[float | None] = mapped_column(Float)
    draft_aft: Mapped[float | None] = mapped_column(Float)
    draft_midship: Mapped[float | None] = mapped_column(Float)
    fuel_oil_rob: Mapped[float | None] = mapped_column(Float)
    diesel_oil_rob: Mapped[float | None] = mapped_column(Float)
    lub_oil_rob: Mapped[float | None] = mapped_column(Float)
    fresh_water_rob: Mapped[float | None] = mapped_column(Float)
    total_fuel_consumed: Mapped[float | None] = mapped_column(Float)
    total_diesel_consumed: Mapped[float | None] = mapped_column(Float)
    cargo_on_board: Mapped[float | None] = mapped_column(Float)
    cargo_description: Mapped[str | None] = mapped_column(String(100))
    crew_on_board: Mapped[int | None] = mapped_column(Integer)
    passengers_on_board: Mapped[int | None] = mapped_column(Integer)


class BunkerReportModel(_ChildMixin, Base):
    """Bunker delivery payload (bunker_reports)."""

    __tablename__ = "bunker_reports"

    bunker_date: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    port_name: Mapped[str] = mapped_column(String(100), nullable=False)
    supplier_name: Mapped[str] = mapped_column(String(200), nullable=False)
    bdn_number: Mapped[str] = mapped_column(String(50), nullable=False)
    fuel_type: Mapped[str] = mapped_column(String(20), nullable=False)
    quantity_received: Mapped[float] = mapped_column(Float, nullable=False)
    port_code: Mapped[str | None] = mapped_column(String(10))
    fuel_grade: Mapped[str | None] = mapped_column(String(20))
    density: Mapped[float | None] = mapped_column(Float)
    sulphur_content: Mapped[float | None] = mapped_column(Float)
    viscosity: Mapped[float | None] = mapped_column(Float)
    flash_point: Mapped[float | None] = mapped_column(Float)
    rob_before: Mapped[float | None] = mapped_column(Float)
    rob_after: Mapped[float | None] = mapped_column(Float)
    unit_price: Mapped[float | None] = mapped_column(Float)
    total_cost: Mapped[float | None] = mapped_column(Float)
    delivery_method: Mapped[str | None] = mapped_column(String(50))


class PositionReportModel(_ChildMixin, Base):
    """Position report payload (position_reports)."""

    __tablename__ = "position_reports"

    report_date_time: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    latitude: Mapped[float] = mapped_column(Float, nullable=False)
    longitude: Mapped[float] = mapped_column(Float, nullable=False)
    course_over_ground: Mapped[float | None] = mapped_column(Float)
    speed_over_ground: Mapped[float | None] = mapped_column(Float)
    report_reason: Mapped[str] = mapped_column(
        String(50), nullable=False, server_default=text("'ROUTINE'")
    )
    last_port: Mapped[str | None] = mapped_column(String(100))
    next_port: Mapped[str | None] = mapped_column(String(100))
    eta: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))
    cargo_on_board: Mapped[float | None] = mapped_column(Float)
    crew_on_board: Mapped[int | None] = mapped_column(Integer)


class WorkflowHistoryModel(IdentityMixin, Base):
    """Audit trail row (workflow_history)."""

    __tablename__ = "workflow_history"

    header_id: Mapped[int] = mapped_column(ForeignKey(_HEADER_FK), nullable=False, index=True)
    from_status: Mapped[str] = mapped_column(String(20), nullable=False)
    to_status: Mapped[str] = mapped_column(String(20), nullable=False)
    changed_by: Mapped[str] = mapped_column(String(100), nullable=False)
    changed_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=now_utc
    )
    remarks: Mapped[str | None] = mapped_column(Text, nullable=True)


class AmendmentModel(IdentityMixin, TimestampMixin, Base):
    """Report amendment (report_amendments)."""

    __tablename__ = "report_amendments"
    __table_args__ = (
        UniqueConstraint(
            "original_header_id",
            "amendment_number",
            name="uq_report_amendments_header_number",
        ),
    )

    original_header_id: Mapped[int] = mapped_column(ForeignKey(_HEADER_FK), nullable=False)
    amendment_number: Mapped[int] = mapped_column(Integer, nullable=False)
    amendment_reason: Mapped[str] = mapped_column(Text, nullable=False)
    corrected_fields: Mapped[dict[str, Any]] = mapped_column(JSONB, nullable=False)
    amended_report_data: Mapped[dict[str, Any] | None] = mapped_column(JSONB, nullable=True)
    amended_by: Mapped[str] = mapped_column(String(100), nullable=False)
    status: Mapped[str] = mapped_column(
        String(20), nullable=False, server_default=text("'DRAFT'")
    )
    master_signature: Mapped[str | None] = mapped_column(String(100), nullable=True)
    signed_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    is_transmitted: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False, server_default=text("false")
    )
    transmitted_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    remarks: Mapped[str | None] = mapped_column(Text, nullable=True)


class TransmissionLogModel(IdentityMixin, Base):
    """Transmission attempt (transmission_logs)."""

    __tablename__ = "transmission_logs"

    header_id: Mapped[int] = mapped_column(ForeignKey(_HEADER_FK), nullable=False, index=True)
    transmission_method: Mapped[str] = mapped_column(String(20), nullable=False)
    recipients: Mapped[list[str]] = mapped_column(
        JSONB, nullable=False, server_default=text("'[]'::jsonb")
    )
    transmission_status: Mapped[str] = mapped_column(String(20), nullable=False)
    transmitted_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    confirmation_number: Mapped[str | None] = mapped_column(String(50), nullable=True)
    error_message: Mapped[str | None] = mapped_column(Text, nullable=True)


class ReportSequenceModel(Base):
    """Per-prefix, per-day report number counter (report_sequences)."""

    __tablename__ = "report_sequences"

    sequence_key: Mapped[str] = mapped_column(String(32), primary_key=True)
    last_value: Mapped[int] = mapped_column(
        Integer, nullable=False, default=0, server_default=text("0")
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=now_utc, onupdate=now_utc
    )
