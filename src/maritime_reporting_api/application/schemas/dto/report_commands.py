# src/maritime_reporting_api/application/schemas/dto/report_commands.py
# Copyright (c) Maritime Reporting API contributors.
# SPDX-License-Identifier: MIT
"""Application DTOs for report commands.

Synopsis:
    Strict (Pydantic v2) input models for creating, editing and advancing
    reports. Range constraints reject physically impossible figures before
    the business-rule validator sees them; plausibility checks stay in the
    domain validator.

    Every report kind has a create model and a partial (PATCH) model with
    the same fields, all optional. Only fields explicitly sent with a
    non-null value are applied by a partial update.

Layer:
    application/schemas/dto
"""

from __future__ import annotations

from datetime import datetime
from typing import Annotated, Any, ClassVar, Final

from pydantic import Field

from maritime_reporting_api.application.schemas.dto.base import BaseDTO
from maritime_reporting_api.domain.entities.report_payloads import (
    ArrivalPayload,
    BunkerPayload,
    DeparturePayload,
    NoonPayload,
    PositionPayload,
    ReportPayload,
)
from maritime_reporting_api.domain.enums.reporting import ReportKind, TransmissionMethod

# ---------------------------------------------------------------------------
# Constrained scalars

Latitude = Annotated[float, Field(ge=-90, le=90)]
Longitude = Annotated[float, Field(ge=-180, le=180)]
Course = Annotated[float, Field(ge=0, le=360)]
Speed = Annotated[float, Field(ge=0, le=50)]
DailyDistance = Annotated[float, Field(ge=0, le=1000)]
Temperature = Annotated[float, Field(ge=-50, le=50)]
Pressure = Annotated[float, Field(ge=900, le=1100)]
WindSpeed = Annotated[float, Field(ge=0, le=100)]
BunkerQuantity = Annotated[float, Field(ge=0, le=10000)]
SulphurPct = Annotated[float, Field(ge=0, le=5)]

Str10 = Annotated[str, Field(max_length=10)]
Str20 = Annotated[str, Field(max_length=20)]
Str30 = Annotated[str, Field(max_length=30)]
Str50 = Annotated[str, Field(max_length=50)]
Str100 = Annotated[str, Field(max_length=100)]
Str200 = Annotated[str, Field(max_length=200)]

#: Fields that live on the report header rather than the typed payload.
HEADER_FIELDS: Final[frozenset[str]] = frozenset({"voyage_id", "prepared_by", "remarks"})


class ReportCreateDTO(BaseDTO):
    """Header fields shared by every create model."""

    payload_type: ClassVar[type[ReportPayload]]

    voyage_id: int | None = None
    prepared_by: Str100 | None = None
    remarks: str | None = None

    def to_payload(self) -> ReportPayload:
        """Build the typed domain payload from the non-header fields."""
        return self.payload_type(**self.model_dump(exclude=set(HEADER_FIELDS)))


# ---------------------------------------------------------------------------
# Create models


class NoonReportCreateDTO(ReportCreateDTO):
    """Noon report submission."""

    payload_type: ClassVar[type[ReportPayload]] = NoonPayload

    report_date: datetime
    latitude: Latitude | None = None
    longitude: Longitude | None = None
    course_over_ground: Course | None = None
    speed_over_ground: Speed | None = None
    distance_traveled: DailyDistance | None = None
    distance_to_go: float | None = None
    estimated_time_of_arrival: datetime | None = None
    weather_conditions: Str50 | None = None
    sea_state: Str20 | None = None
    air_temperature: Temperature | None = None
    sea_temperature: Temperature | None = None
    barometric_pressure: Pressure | None = None
    wind_direction: Str20 | None = None
    wind_speed: WindSpeed | None = None
    visibility: Str20 | None = None
    fuel_oil_consumed: float | None = None
    diesel_oil_consumed: float | None = None
    lub_oil_consumed: float | None = None
    fresh_water_consumed: float | None = None
    fuel_oil_rob: float | None = None
    diesel_oil_rob: float | None = None
    lub_oil_rob: float | None = None
    fresh_water_rob: float | None = None
    main_engine_running_hours: Str50 | None = None
    main_engine_rpm: float | None = None
    main_engine_power: float | None = None
    aux_engine_running_hours: Str50 | None = None
    cargo_on_board: float | None = None
    cargo_description: Str100 | None = None
    operational_remarks: str | None = None
    machinery_remarks: str | None = None
    cargo_remarks: str | None = None


class DepartureReportCreateDTO(ReportCreateDTO):
    """Departure report submission."""

    payload_type: ClassVar[type[ReportPayload]] = DeparturePayload

    port_name: Str100
    departure_date_time: datetime
    port_code: Str10 | None = None
    pilot_off_time: datetime | None = None
    last_line_let_go_time: datetime | None = None
    departure_latitude: Latitude | None = None
    departure_longitude: Longitude | None = None
    draft_forward: float | None = None
    draft_aft: float | None = None
    draft_midship: float | None = None
    fuel_oil_rob: float | None = None
    diesel_oil_rob: float | None = None
    lub_oil_rob: float | None = None
    fresh_water_rob: float | None = None
    cargo_on_board: float | None = None
    cargo_description: Str200 | None = None
    crew_on_board: int | None = None
    passengers_on_board: int | None = None
    destination_port: Str100 | None = None
    estimated_arrival: datetime | None = None


class ArrivalReportCreateDTO(ReportCreateDTO):
    """Arrival report submission."""

    payload_type: ClassVar[type[ReportPayload]] = ArrivalPayload

    port_name: Str100
    arrival_date_time: datetime
    port_code: Str10 | None = None
    pilot_on_board_time: datetime | None = None
    first_line_ashore_time: datetime | None = None
    arrival_latitude: Latitude | None = None
    arrival_longitude: Longitude | None = None
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
    cargo_description: Str200 | None = None
    crew_on_board: int | None = None
    passengers_on_board: int | None = None


class BunkerReportCreateDTO(ReportCreateDTO):
    """Bunker delivery submission (BDN figures)."""

    payload_type: ClassVar[type[ReportPayload]] = BunkerPayload

    bunker_date: datetime
    port_name: Str100
    supplier_name: Str200
    bdn_number: Str50
    fuel_type: Str20
    quantity_received: BunkerQuantity
    port_code: Str10 | None = None
    fuel_grade: Str50 | None = None
    density: float | None = None
    sulphur_content: SulphurPct | None = None
    viscosity: float | None = None
    flash_point: float | None = None
    rob_before: float | None = None
    rob_after: float | None = None
    unit_price: float | None = None
    total_cost: float | None = None
    delivery_method: Str30 | None = None


class PositionReportCreateDTO(ReportCreateDTO):
    """Position report submission."""

    payload_type: ClassVar[type[ReportPayload]] = PositionPayload

    report_date_time: datetime
    latitude: Latitude
    longitude: Longitude
    course_over_ground: Course | None = None
    speed_over_ground: Speed | None = None
    report_reason: Str50 = "ROUTINE"
    last_port: Str100 | None = None
    next_port: Str100 | None = None
    eta: datetime | None = None
    cargo_on_board: float | None = None
    crew_on_board: int | None = None


CREATE_DTOS: Final[dict[ReportKind, type[ReportCreateDTO]]] = {
    ReportKind.NOON: NoonReportCreateDTO,
    ReportKind.DEPARTURE: DepartureReportCreateDTO,
    ReportKind.ARRIVAL: ArrivalReportCreateDTO,
    ReportKind.BUNKER: BunkerReportCreateDTO,
    ReportKind.POSITION: PositionReportCreateDTO,
}


# ---------------------------------------------------------------------------
# Partial (PATCH) models


class ReportPatchDTO(BaseDTO):
    """Header fields a draft edit may change."""

    voyage_id: int | None = None
    prepared_by: Str100 | None = None

    def changes(self) -> dict[str, Any]:
        """Return only the fields that were sent with a non-null value."""
        return self.model_dump(exclude_unset=True, exclude_none=True)


class NoonReportPatchDTO(ReportPatchDTO):
    """Partial noon edit."""

    report_date: datetime | None = None
    latitude: Latitude | None = None
    longitude: Longitude | None = None
    course_over_ground: Course | None = None
    speed_over_ground: Speed | None = None
    distance_traveled: DailyDistance | None = None
    distance_to_go: float | None = None
    estimated_time_of_arrival: datetime | None = None
    weather_conditions: Str50 | None = None
    sea_state: Str20 | None = None
    air_temperature: Temperature | None = None
    sea_temperature: Temperature | None = None
    barometric_pressure: Pressure | None = None
    wind_direction: Str20 | None = None
    wind_speed: WindSpeed | None = None
    visibility: Str20 | None = None
    fuel_oil_consumed: float | None = None
    diesel_oil_consumed: float | None = None
    lub_oil_consumed: float | None = None
    fresh_water_consumed: float | None = None
    fuel_oil_rob: float | None = None
    diesel_oil_rob: float | None = None
    lub_oil_rob: float | None = None
    fresh_water_rob: float | None = None
    main_engine_running_hours: Str50 | None = None
    main_engine_rpm: float | None = None
    main_engine_power: float | None = None
    aux_engine_running_hours: Str50 | None = None
    cargo_on_board: float | None = None
    cargo_description: Str100 | None = None
    operational_remarks: str | None = None
    machinery_remarks: str | None = None
    cargo_remarks: str | None = None


class DepartureReportPatchDTO(ReportPatchDTO):
    """Partial departure edit."""

    port_name: Str100 | None = None
    departure_date_time: datetime | None = None
    port_code: Str10 | None = None
    pilot_off_time: datetime | None = None
    last_line_let_go_time: datetime | None = None
    departure_latitude: Latitude | None = None
    departure_longitude: Longitude | None = None
    draft_forward: float | None = None
    draft_aft: float | None = None
    draft_midship: float | None = None
    fuel_oil_rob: float | None = None
    diesel_oil_rob: float | None = None
    lub_oil_rob: float | None = None
    fresh_water_rob: float | None = None
    cargo_on_board: float | None = None
    cargo_description: Str200 | None = None
    crew_on_board: int | None = None
    passengers_on_board: int | None = None
    destination_port: Str100 | None = None
    estimated_arrival: datetime | None = None


class ArrivalReportPatchDTO(ReportPatchDTO):
    """Partial arrival edit."""

    port_name: Str100 | None = None
    arrival_date_time: datetime | None = None
    port_code: Str10 | None = None
    pilot_on_board_time: datetime | None = None
    first_line_ashore_time: datetime | None = None
    arrival_latitude: Latitude | None = None
    arrival_longitude: Longitude | None = None
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
    cargo_description: Str200 | None = None
    crew_on_board: int | None = None
    passengers_on_board: int | None = None


class BunkerReportPatchDTO(ReportPatchDTO):
    """Partial bunker edit."""

    bunker_date: datetime | None = None
    port_name: Str100 | None = None
    supplier_name: Str200 | None = None
    bdn_number: Str50 | None = None
    fuel_type: Str20 | None = None
    quantity_received: BunkerQuantity | None = None
    port_code: Str10 | None = None
    fuel_grade: Str50 | None = None
    density: float | None = None
    sulphur_content: SulphurPct | None = None
    viscosity: float | None = None
    flash_point: float | None = None
    rob_before: float | None = None
    rob_after: float | None = None
    unit_price: float | None = None
    total_cost: float | None = None
    delivery_method: Str30 | None = None


class PositionReportPatchDTO(ReportPatchDTO):
    """Partial position edit."""

    report_date_time: datetime | None = None
    latitude: Latitude | None = None
    longitude: Longitude | None = None
    course_over_ground: Course | None = None
    speed_over_ground: Speed | None = None
    report_reason: Str50 | None = None
    last_port: Str100 | None = None
    next_port: Str100 | None = None
    eta: datetime | None = None
    cargo_on_board: float | None = None
    crew_on_board: int | None = None


PATCH_DTOS: Final[dict[ReportKind, type[ReportPatchDTO]]] = {
    ReportKind.NOON: NoonReportPatchDTO,
    ReportKind.DEPARTURE: DepartureReportPatchDTO,
    ReportKind.ARRIVAL: ArrivalReportPatchDTO,
    ReportKind.BUNKER: BunkerReportPatchDTO,
    ReportKind.POSITION: PositionReportPatchDTO,
}


# ---------------------------------------------------------------------------
# Workflow actions


class ApproveReportDTO(BaseDTO):
    """Master approval of a submitted report."""

    master_signature: str = Field(..., max_length=100)
    approval_remarks: str | None = Field(default=None, max_length=500)


class RejectReportDTO(BaseDTO):
    """Rejection of a submitted report; an empty reason is refused by the workflow."""

    reason: str = Field(..., max_length=500)


class ReopenReportDTO(BaseDTO):
    """Reopen a rejected report with the corrections to make."""

    corrections: str = Field(..., max_length=1000)


class TransmitReportDTO(BaseDTO):
    """Shore transmission request."""

    transmission_method: TransmissionMethod = TransmissionMethod.EMAIL
    recipient_emails: list[str] = Field(default_factory=list)
    include_attachments: bool = True


class SoftDeleteReportDTO(BaseDTO):
    """Soft-delete request; the reason is kept for the retention record."""

    reason: str = Field(..., min_length=1, max_length=500)


class FieldCorrectionDTO(BaseDTO):
    """Old and new value of one corrected field."""

    old_value: Any = None
    new_value: Any = None


class CreateAmendmentDTO(BaseDTO):
    """Correction request for an approved or transmitted report."""

    amendment_reason: str = Field(..., min_length=10, max_length=1000)
    corrected_fields: dict[str, FieldCorrectionDTO]
    amended_report_data: dict[str, Any] | None = None
    remarks: str | None = None


class ApproveAmendmentDTO(BaseDTO):
    """Master approval of an amendment."""

    master_signature: str = Field(..., min_length=3, max_length=100)
    approval_remarks: str | None = Field(default=None, max_length=500)
