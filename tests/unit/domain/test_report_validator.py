# tests/unit/domain/test_report_validator.py
# Copyright (c) Maritime Reporting API contributors.
# SPDX-License-Identifier: MIT
from __future__ import annotations

from datetime import UTC, datetime, timedelta

import pytest

from maritime_reporting_api.domain.entities.report_payloads import (
    ArrivalPayload,
    BunkerPayload,
    DeparturePayload,
    NoonPayload,
    PositionPayload,
)
from maritime_reporting_api.domain.services.report_validator import (
    validate_bunker,
    validate_departure,
    validate_noon,
    validate_report,
)

NOW = datetime(2025, 1, 10, 14, 0, tzinfo=UTC)
NULL_ISLAND = "Invalid position: Coordinates near (0,0) 'Null Island' - likely GPS error"


def _noon(**overrides: object) -> NoonPayload:
    fields: dict[str, object] = {
        "report_date": datetime(2025, 1, 10, 12, 0, tzinfo=UTC),
        "latitude": 35.5,
        "longitude": 139.8,
        "speed_over_ground": 12.5,
        "distance_traveled": 300.0,
        "fuel_oil_consumed": 28.0,
        "fuel_oil_rob": 800.0,
    }
    fields.update(overrides)
    return NoonPayload(**fields)  # type: ignore[arg-type]


def _bunker(**overrides: object) -> BunkerPayload:
    fields: dict[str, object] = {
        "bunker_date": datetime(2025, 1, 9, 8, 0, tzinfo=UTC),
        "port_name": "Singapore",
        "supplier_name": "Harbour Fuels",
        "bdn_number": "BDN-001",
        "fuel_type": "VLSFO",
        "quantity_received": 500.0,
    }
    fields.update(overrides)
    return BunkerPayload(**fields)  # type: ignore[arg-type]


def test_plausible_noon_report_is_clean() -> None:
    outcome = validate_noon(_noon())
    assert outcome.is_valid
    assert outcome.errors == []
    assert outcome.warnings == []


def test_null_island_position_is_blocking() -> None:
    outcome = validate_noon(_noon(latitude=0.005, longitude=-0.002))
    assert not outcome.is_valid
    assert NULL_ISLAND in outcome.errors


def test_exact_zero_position_adds_second_error() -> None:
    outcome = validate_noon(_noon(latitude=0.0, longitude=0.0))
    assert len(outcome.errors) == 2
    assert "Invalid position: Exactly (0,0) is highly suspicious" in outcome.errors


def test_speed_distance_mismatch_warns_with_expected_distance() -> None:
    outcome = validate_noon(_noon(speed_over_ground=12.0, distance_traveled=150.0))
    assert outcome.is_valid
    assert (
        "Speed/distance mismatch: Expected 288.0 nm based on SOG, but reported 150.0 nm"
        in outcome.warnings
    )


def test_zero_fuel_while_underway_is_blocking() -> None:
    outcome = validate_noon(_noon(fuel_oil_consumed=0.0))
    assert "Invalid: Zero fuel consumption while vessel is underway" in outcome.errors


@pytest.mark.parametrize("hour", [6, 15, 23])
def test_noon_outside_window_warns(hour: int) -> None:
    outcome = validate_noon(_noon(report_date=datetime(2025, 1, 10, hour, 0, tzinfo=UTC)))
    assert outcome.is_valid
    assert any(w.startswith("Noon report time unusual") for w in outcome.warnings)


def test_low_rob_and_weather_inconsistency_warn() -> None:
    outcome = validate_noon(_noon(fuel_oil_rob=40.0, wind_speed=35.0, sea_state="Calm"))
    assert "Low fuel ROB: Only 40.0 MT remaining, consumed 28.0 MT today" in outcome.warnings
    assert "Inconsistent weather: High wind speed but calm sea state" in outcome.warnings


@pytest.mark.parametrize("consumed", [None, 28.0])
def test_negative_rob_is_blocking_with_or_without_consumption(consumed: float | None) -> None:
    outcome = validate_noon(_noon(fuel_oil_rob=-50.0, fuel_oil_consumed=consumed))
    assert not outcome.is_valid
    assert "Invalid: Fuel ROB cannot be negative" in outcome.errors


def test_sulphur_above_global_cap_is_an_error() -> None:
    outcome = validate_bunker(_bunker(sulphur_content=0.60))
    assert not outcome.is_valid
    assert outcome.errors == [
        "Sulphur content 0.6% exceeds MARPOL 2020 global limit of 0.50% "
        "(unless in ECA or using scrubber)"
    ]


def test_sulphur_above_eca_cap_only_warns() -> None:
    outcome = validate_bunker(_bunker(sulphur_content=0.15))
    assert outcome.is_valid
    assert outcome.warnings == ["Sulphur content 0.15% exceeds ECA limit of 0.10%"]


def test_compliant_sulphur_is_silent() -> None:
    outcome = validate_bunker(_bunker(sulphur_content=0.05))
    assert outcome.is_valid
    assert outcome.warnings == []


def test_bunker_rob_mismatch_warns() -> None:
    outcome = validate_bunker(_bunker(rob_before=100.0, rob_after=560.0))
    assert outcome.warnings == [
        "ROB mismatch: Expected 600.0 MT after bunkering "
        "(Before: 100.0 + Received: 500.0), but reported 560.0 MT"
    ]


def test_unusual_fuel_type_and_zero_quantity() -> None:
    outcome = validate_bunker(_bunker(fuel_type="KEROSENE", quantity_received=0.0))
    assert "Bunker quantity must be positive" in outcome.errors
    assert any(w.startswith("Unusual fuel type: KEROSENE") for w in outcome.warnings)


def test_departure_eta_before_departure_is_blocking() -> None:
    departed = datetime(2025, 1, 8, 6, 0, tzinfo=UTC)
    outcome = validate_departure(
        DeparturePayload(
            port_name="Rotterdam",
            departure_date_time=departed,
            destination_port="Hamburg",
            estimated_arrival=departed - timedelta(hours=2),
        )
    )
    assert "ETA cannot be before departure time" in outcome.errors


def test_departure_same_port_and_missing_destination_warn() -> None:
    departed = datetime(2025, 1, 8, 6, 0, tzinfo=UTC)
    same = validate_departure(
        DeparturePayload(port_name="Rotterdam", departure_date_time=departed, destination_port="rotterdam")
    )
    assert "Departure and destination ports are the same" in same.warnings

    missing = validate_departure(DeparturePayload(port_name="Rotterdam", departure_date_time=departed))
    assert "Destination port not specified" in missing.warnings


def test_large_trim_warns() -> None:
    outcome = validate_report(
        ArrivalPayload(
            port_name="Hamburg",
            arrival_date_time=datetime(2025, 1, 9, 6, 0, tzinfo=UTC),
            draft_forward=8.0,
            draft_aft=11.5,
        ),
        now=NOW,
    )
    assert outcome.is_valid
    assert "Large trim: 3.50 meters difference between forward and aft drafts" in outcome.warnings


def test_position_in_the_future_beyond_tolerance_is_blocking() -> None:
    payload = PositionPayload(
        report_date_time=NOW + timedelta(hours=2), latitude=10.0, longitude=20.0
    )
    outcome = validate_report(payload, now=NOW, future_tolerance=timedelta(hours=1))
    assert "Report datetime cannot be in the future" in outcome.errors


def test_position_within_tolerance_is_accepted() -> None:
    payload = PositionPayload(
        report_date_time=NOW + timedelta(minutes=30), latitude=10.0, longitude=20.0
    )
    assert validate_report(payload, now=NOW, future_tolerance=timedelta(hours=1)).is_valid


def test_position_unusual_reason_and_stale_eta_warn() -> None:
    payload = PositionPayload(
        report_date_time=NOW - timedelta(hours=5),
        latitude=10.0,
        longitude=20.0,
        report_reason="SIGHTSEEING",
        eta=NOW - timedelta(hours=1),
    )
    outcome = validate_report(payload, now=NOW)
    assert outcome.is_valid
    assert any(w.startswith("Unusual report reason: SIGHTSEEING") for w in outcome.warnings)
    assert "ETA is in the past - may need update" in outcome.warnings


def test_unknown_payload_type_is_rejected() -> None:
    with pytest.raises(TypeError):
        validate_report(object(), now=NOW)  # type: ignore[arg-type]
