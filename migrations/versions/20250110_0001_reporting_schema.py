"""Reporting schema: report types, headers, typed payloads, audit and amendments.

Revision ID: 20250110_0001
Revises:
Create Date: 2025-01-10

This migration:
  * Creates report_types and seeds the five report kinds.
  * Creates report_headers (optimistic ``version``, soft-delete markers) and
    the one-to-one payload tables noon/departure/arrival/bunker/position.
  * Partial unique indexes keep one visible noon report per UTC day and one
    visible departure or arrival report per voyage.
  * Creates workflow_history (append-only audit trail).
  * Creates report_amendments, unique per (original_header_id, amendment_number).
  * Creates transmission_logs and report_sequences (per PREFIX-YYYYMMDD counters).

Notes:
  - Tables are unqualified; env.py places DB_SCHEMA first on the search_path.
"""

from __future__ import annotations

from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = "20250110_0001"
down_revision: str | None = None
branch_labels: Sequence[str] | None = None
depends_on: Sequence[str] | None = None

_TS = sa.TIMESTAMP(timezone=True)

_REPORT_TYPES: tuple[dict[str, object], ...] = (
    {
        "type_code": "NOON",
        "type_name": "Noon Report",
        "category": "OPERATIONAL",
        "frequency": "DAILY",
        "description": "Daily position, performance and consumption report at local noon.",
        "regulation_reference": "SOLAS Chapter V",
        "is_mandatory": True,
        "requires_master_signature": True,
    },
    {
        "type_code": "DEPARTURE",
        "type_name": "Departure Report",
        "category": "PORT",
        "frequency": "PER_VOYAGE",
        "description": "Port departure with drafts, remaining-on-board and cargo.",
        "regulation_reference": "SOLAS Chapter V",
        "is_mandatory": True,
        "requires_master_signature": True,
    },
    {
        "type_code": "ARRIVAL",
        "type_name": "Arrival Report",
        "category": "PORT",
        "frequency": "PER_VOYAGE",
        "description": "Port arrival with voyage totals and remaining-on-board.",
        "regulation_reference": "SOLAS Chapter V",
        "is_mandatory": True,
        "requires_master_signature": True,
    },
    {
        "type_code": "BUNKER",
        "type_name": "Bunker Delivery Report",
        "category": "ENVIRONMENTAL",
        "frequency": "PER_EVENT",
        "description": "Bunker delivery note and fuel quality figures.",
        "regulation_reference": "MARPOL Annex VI Regulation 18",
        "is_mandatory": True,
        "requires_master_signature": True,
    },
    {
        "type_code": "POSITION",
        "type_name": "Position Report",
        "category": "OPERATIONAL",
        "frequency": "AS_REQUIRED",
        "description": "Ad hoc or routine position report.",
        "regulation_reference": "SOLAS Chapter V Regulation 19",
        "is_mandatory": False,
        "requires_master_signature": False,
    },
)


def _header_fk(ondelete: str | None = None) -> sa.ForeignKey:
    return sa.ForeignKey("report_headers.id", ondelete=ondelete)


def upgrade() -> None:
    """Apply the migration."""
    report_types = op.create_table(
        "report_types",
        sa.Column("id", sa.Integer, autoincrement=True, nullable=False),
        sa.Column("type_code", sa.String(20), nullable=False),
        sa.Column("type_name", sa.String(100), nullable=False),
        sa.Column("category", sa.String(50), nullable=False),
        sa.Column("frequency", sa.String(50), nullable=False),
        sa.Column("description", sa.Text, nullable=True),
        sa.Column("regulation_reference", sa.String(200), nullable=True),
        sa.Column("is_mandatory", sa.Boolean, nullable=False, server_default=sa.text("true")),
        sa.Column(
            "requires_master_signature",
            sa.Boolean,
            nullable=False,
            server_default=sa.text("true"),
        ),
        sa.Column("is_active", sa.Boolean, nullable=False, server_default=sa.text("true")),
        sa.PrimaryKeyConstraint("id", name="pk_report_types"),
        sa.UniqueConstraint("type_code", name="uq_report_types_type_code"),
    )
    op.bulk_insert(report_types, [dict(row) for row in _REPORT_TYPES])

    op.create_table(
        "report_headers",
        sa.Column("id", sa.Integer, autoincrement=True, nullable=False),
        sa.Column("report_number", sa.String(50), nullable=False),
        sa.Column(
            "report_type_id",
            sa.Integer,
            sa.ForeignKey("report_types.id", name="fk_report_headers_report_type_id_report_types"),
            nullable=False,
        ),
        sa.Column("kind", sa.String(20), nullable=False),
        sa.Column("report_date_time", _TS, nullable=False),
        sa.Column("status", sa.String(20), nullable=False, server_default=sa.text("'DRAFT'")),
        sa.Column("prepared_by", sa.String(100), nullable=True),
        sa.Column("voyage_id", sa.Integer, nullable=True),
        sa.Column("master_signature", sa.String(100), nullable=True),
        sa.Column("signed_at", _TS, nullable=True),
        sa.Column("is_transmitted", sa.Boolean, nullable=False, server_default=sa.text("false")),
        sa.Column("transmitted_at", _TS, nullable=True),
        sa.Column("remarks", sa.Text, nullable=True),
        sa.Column("version", sa.Integer, nullable=False, server_default="1"),
        sa.Column("created_at", _TS, nullable=False, server_default=sa.text("now()")),
        sa.Column("updated_at", _TS, nullable=False, server_default=sa.text("now()")),
        sa.Column("deleted_at", _TS, nullable=True),
        sa.Column("deleted_by", sa.String(100), nullable=True),
        sa.Column("deleted_reason", sa.Text, nullable=True),
        sa.PrimaryKeyConstraint("id", name="pk_report_headers"),
        sa.UniqueConstraint("report_number", name="uq_report_headers_report_number"),
    )
    op.create_index("ix_report_headers_status", "report_headers", ["status"])
    op.create_index("ix_report_headers_deleted_at", "report_headers", ["deleted_at"])
    op.create_index(
        "ix_report_headers_kind_report_date_time", "report_headers", ["kind", "report_date_time"]
    )
    op.create_index("ix_report_headers_kind_voyage_id", "report_headers", ["kind", "voyage_id"])
    op.create_index(
        "uq_report_headers_noon_day",
        "report_headers",
        [sa.text("CAST(timezone('UTC', report_date_time) AS DATE)")],
        unique=True,
        postgresql_where=sa.text("kind = 'noon' AND deleted_at IS NULL"),
    )
    op.create_index(
        "uq_report_headers_movement_voyage",
        "report_headers",
        ["kind", "voyage_id"],
        unique=True,
        postgresql_where=sa.text(
            "kind IN ('departure', 'arrival') AND voyage_id IS NOT NULL AND deleted_at IS NULL"
        ),
    )

    op.create_table(
        "noon_reports",
        sa.Column("header_id", sa.Integer, _header_fk("CASCADE"), nullable=False),
        sa.Column("report_date", _TS, nullable=False),
        sa.Column("latitude", sa.Float),
        sa.Column("longitude", sa.Float),
        sa.Column("course_over_ground", sa.Float),
        sa.Column("speed_over_ground", sa.Float),
        sa.Column("distance_traveled", sa.Float),
        sa.Column("distance_to_go", sa.Float),
        sa.Column("estimated_time_of_arrival", _TS),
        sa.Column("weather_conditions", sa.String(50)),
        sa.Column("sea_state", sa.String(20)),
        sa.Column("air_temperature", sa.Float),
        sa.Column("sea_temperature", sa.Float),
        sa.Column("barometric_pressure", sa.Float),
        sa.Column("wind_direction", sa.String(20)),
        sa.Column("wind_speed", sa.Float),
        sa.Column("visibility", sa.String(20)),
        sa.Column("fuel_oil_consumed", sa.Float),
        sa.Column("diesel_oil_consumed", sa.Float),
        sa.Column("lub_oil_consumed", sa.Float),
        sa.Column("fresh_water_consumed", sa.Float),
        sa.Column("fuel_oil_rob", sa.Float),
        sa.Column("diesel_oil_rob", sa.Float),
        sa.Column("lub_oil_rob", sa.Float),
        sa.Column("fresh_water_rob", sa.Float),
        sa.Column("main_engine_running_hours", sa.String(50)),
        sa.Column("main_engine_rpm", sa.Float),
        sa.Column("main_engine_power", sa.Float),
        sa.Column("aux_engine_running_hours", sa.String(50)),
        sa.Column("cargo_on_board", sa.Float),
        sa.Column("cargo_description", sa.String(100)),
        sa.Column("operational_remarks", sa.Text),
        sa.Column("machinery_remarks", sa.Text),
        sa.Column("cargo_remarks", sa.Text),
        sa.PrimaryKeyConstraint("header_id", name="pk_noon_reports"),
    )
    op.create_index("ix_noon_reports_report_date", "noon_reports", ["report_date"])

    op.create_table(
        "departure_reports",
        sa.Column("header_id", sa.Integer, _header_fk("CASCADE"), nullable=False),
        sa.Column("port_name", sa.String(100), nullable=False),
        sa.Column("departure_date_time", _TS, nullable=False),
        sa.Column("port_code", sa.String(10)),
        sa.Column("pilot_off_time", _TS),
        sa.Column("last_line_let_go_time", _TS),
        sa.Column("departure_latitude", sa.Float),
        sa.Column("departure_longitude", sa.Float),
        sa.Column("draft_forward", sa.Float),
        sa.Column("draft_aft", sa.Float),
        sa.Column("draft_midship", sa.Float),
        sa.Column("fuel_oil_rob", sa.Float),
        sa.Column("diesel_oil_rob", sa.Float),
        sa.Column("lub_oil_rob", sa.Float),
        sa.Column("fresh_water_rob", sa.Float),
        sa.Column("cargo_on_board", sa.Float),
        sa.Column("cargo_description", sa.String(100)),
        sa.Column("crew_on_board", sa.Integer),
        sa.Column("passengers_on_board", sa.Integer),
        sa.Column("destination_port", sa.String(100)),
        sa.Column("estimated_arrival", _TS),
        sa.PrimaryKeyConstraint("header_id", name="pk_departure_reports"),
    )

    op.create_table(
        "arrival_reports",
        sa.Column("header_id", sa.Integer, _header_fk("CASCADE"), nullable=False),
        sa.Column("port_name", sa.String(100), nullable=False),
        sa.Column("arrival_date_time", _TS, nullable=False),
        sa.Column("port_code", sa.String(10)),
        sa.Column("pilot_on_board_time", _TS),
        sa.Column("first_line_ashore_time", _TS),
        sa.Column("arrival_latitude", sa.Float),
        sa.Column("arrival_longitude", sa.Float),
        sa.Column("voyage_distance", sa.Float),
        sa.Column("voyage_duration", sa.Float),
        sa.Column("average_speed", sa.Float),
        sa.Column("draft_forward", sa.Float),
        sa.Column("draft_aft", sa.Float),
        sa.Column("draft_midship", sa.Float),
        sa.Column("fuel_oil_rob", sa.Float),
        sa.Column("diesel_oil_rob", sa.Float),
        sa.Column("lub_oil_rob", sa.Float),
        sa.Column("fresh_water_rob", sa.Float),
        sa.Column("total_fuel_consumed", sa.Float),
        sa.Column("total_diesel_consumed", sa.Float),
        sa.Column("cargo_on_board", sa.Float),
        sa.Column("cargo_description", sa.String(100)),
        sa.Column("crew_on_board", sa.Integer),
        sa.Column("passengers_on_board", sa.Integer),
        sa.PrimaryKeyConstraint("header_id", name="pk_arrival_reports"),
    )

    op.create_table(
        "bunker_reports",
        sa.Column("header_id", sa.Integer, _header_fk("CASCADE"), nullable=False),
        sa.Column("bunker_date", _TS, nullable=False),
        sa.Column("port_name", sa.String(100), nullable=False),
        sa.Column("supplier_name", sa.String(200), nullable=False),
        sa.Column("bdn_number", sa.String(50), nullable=False),
        sa.Column("fuel_type", sa.String(20), nullable=False),
        sa.Column("quantity_received", sa.Float, nullable=False),
        sa.Column("port_code", sa.String(10)),
        sa.Column("fuel_grade", sa.String(20)),
        sa.Column("density", sa.Float),
        sa.Column("sulphur_content", sa.Float),
        sa.Column("viscosity", sa.Float),
        sa.Column("flash_point", sa.Float),
        sa.Column("rob_before", sa.Float),
        sa.Column("rob_after", sa.Float),
        sa.Column("unit_price", sa.Float),
        sa.Column("total_cost", sa.Float),
        sa.Column("delivery_method", sa.String(50)),
        sa.PrimaryKeyConstraint("header_id", name="pk_bunker_reports"),
    )

    op.create_table(
        "position_reports",
        sa.Column("header_id", sa.Integer, _header_fk("CASCADE"), nullable=False),
        sa.Column("report_date_time", _TS, nullable=False),
        sa.Column("latitude", sa.Float, nullable=False),
        sa.Column("longitude", sa.Float, nullable=False),
        sa.Column("course_over_ground", sa.Float),
        sa.Column("speed_over_ground", sa.Float),
        sa.Column(
            "report_reason", sa.String(50), nullable=False, server_default=sa.text("'ROUTINE'")
        ),
        sa.Column("last_port", sa.String(100)),
        sa.Column("next_port", sa.String(100)),
        sa.Column("eta", _TS),
        sa.Column("cargo_on_board", sa.Float),
        sa.Column("crew_on_board", sa.Integer),
        sa.PrimaryKeyConstraint("header_id", name="pk_position_reports"),
    )

    op.create_table(
        "workflow_history",
        sa.Column("id", sa.Integer, autoincrement=True, nullable=False),
        sa.Column("header_id", sa.Integer, _header_fk(), nullable=False),
        sa.Column("from_status", sa.String(20), nullable=False),
        sa.Column("to_status", sa.String(20), nullable=False),
        sa.Column("changed_by", sa.String(100), nullable=False),
        sa.Column("changed_at", _TS, nullable=False),
        sa.Column("remarks", sa.Text, nullable=True),
        sa.PrimaryKeyConstraint("id", name="pk_workflow_history"),
    )
    op.create_index("ix_workflow_history_header_id", "workflow_history", ["header_id"])

    op.create_table(
        "report_amendments",
        sa.Column("id", sa.Integer, autoincrement=True, nullable=False),
        sa.Column("original_header_id", sa.Integer, _header_fk(), nullable=False),
        sa.Column("amendment_number", sa.Integer, nullable=False),
        sa.Column("amendment_reason", sa.Text, nullable=False),
        sa.Column("corrected_fields", postgresql.JSONB, nullable=False),
        sa.Column("amended_report_data", postgresql.JSONB, nullable=True),
        sa.Column("amended_by", sa.String(100), nullable=False),
        sa.Column("status", sa.String(20), nullable=False, server_default=sa.text("'DRAFT'")),
        sa.Column("master_signature", sa.String(100), nullable=True),
        sa.Column("signed_at", _TS, nullable=True),
        sa.Column("is_transmitted", sa.Boolean, nullable=False, server_default=sa.text("false")),
        sa.Column("transmitted_at", _TS, nullable=True),
        sa.Column("remarks", sa.Text, nullable=True),
        sa.Column("created_at", _TS, nullable=False, server_default=sa.text("now()")),
        sa.Column("updated_at", _TS, nullable=False, server_default=sa.text("now()")),
        sa.PrimaryKeyConstraint("id", name="pk_report_amendments"),
        sa.UniqueConstraint(
            "original_header_id",
            "amendment_number",
            name="uq_report_amendments_header_number",
        ),
    )

    op.create_table(
        "transmission_logs",
        sa.Column("id", sa.Integer, autoincrement=True, nullable=False),
        sa.Column("header_id", sa.Integer, _header_fk(), nullable=False),
        sa.Column("transmission_method", sa.String(20), nullable=False),
        sa.Column(
            "recipients",
            postgresql.JSONB,
            nullable=False,
            server_default=sa.text("'[]'::jsonb"),
        ),
        sa.Column("transmission_status", sa.String(20), nullable=False),
        sa.Column("transmitted_at", _TS, nullable=False),
        sa.Column("confirmation_number", sa.String(50), nullable=True),
        sa.Column("error_message", sa.Text, nullable=True),
        sa.PrimaryKeyConstraint("id", name="pk_transmission_logs"),
    )
    op.create_index("ix_transmission_logs_header_id", "transmission_logs", ["header_id"])

    op.create_table(
        "report_sequences",
        sa.Column("sequence_key", sa.String(32), nullable=False),
        sa.Column("last_value", sa.Integer, nullable=False, server_default=sa.text("0")),
        sa.Column("updated_at", _TS, nullable=False),
        sa.PrimaryKeyConstraint("sequence_key", name="pk_report_sequences"),
    )


def downgrade() -> None:
    """Revert the migration."""
    op.drop_table("report_sequences")
    op.drop_index("ix_transmission_logs_header_id", table_name="transmission_logs")
    op.drop_table("transmission_logs")
    op.drop_table("report_amendments")
    op.drop_index("ix_workflow_history_header_id", table_name="workflow_history")
    op.drop_table("workflow_history")
    for table in (
        "position_reports",
        "bunker_reports",
        "arrival_reports",
        "departure_reports",
    ):
        op.drop_table(table)
    op.drop_index("ix_noon_reports_report_date", table_name="noon_reports")
    op.drop_table("noon_reports")
    op.drop_index("uq_report_headers_movement_voyage", table_name="report_headers")
    op.drop_index("uq_report_headers_noon_day", table_name="report_headers")
    op.drop_index("ix_report_headers_kind_voyage_id", table_name="report_headers")
    op.drop_index("ix_report_headers_kind_report_date_time", table_name="report_headers")
    op.drop_index("ix_report_headers_deleted_at", table_name="report_headers")
    op.drop_index("ix_report_headers_status", table_name="report_headers")
    op.drop_table("report_headers")
    op.drop_table("report_types")
