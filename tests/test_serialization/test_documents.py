"""Tests for document-store mapping of users, trainings, sessions and zone systems."""

from __future__ import annotations

from datetime import date, datetime

import pytest

from load_engine.exceptions import DocumentStoreError, InvalidZoneSystemError
from load_engine.models.athlete import LoadState
from load_engine.models.enums import BlockType, SportType, ZoneReferenceType
from load_engine.models.pmc import PmcDataPoint
from load_engine.models.workout import Training, WorkoutBlock
from load_engine.serialization import (
    apply_load_state,
    block_from_document,
    block_to_document,
    load_state_from_document,
    pmc_to_documents,
    session_from_document,
    thresholds_from_document,
    training_from_document,
    training_to_document,
    zone_system_from_document,
)


class TestBlocks:
    def test_from_document(self) -> None:
        block = block_from_document({
            "type": "interval",
            "label": "Hard",
            "durationSeconds": 300,
            "intensityTarget": 110,
            "zoneLabel": "Z5",
        })
        assert block.type == BlockType.INTERVAL
        assert block.duration_seconds == 300
        assert block.intensity_target == 110
        assert block.zone_label == "Z5"
        assert block.distance_meters is None

    def test_to_document_omits_unset_fields(self) -> None:
        doc = block_to_document(WorkoutBlock(duration_seconds=600, intensity_target=70))
        assert doc == {"type": "ACTIVE", "label": "", "durationSeconds": 600, "intensityTarget": 70}

    def test_missing_type_is_active(self) -> None:
        assert block_from_document({"durationSeconds": 60}).type == BlockType.ACTIVE

    def test_unknown_type_rejected(self) -> None:
        with pytest.raises(DocumentStoreError):
            block_from_document({"type": "SPRINTY"})


class TestTrainings:
    def test_from_document(self) -> None:
        training = training_from_document({
            "_id": "t1",
            "title": "FTP test",
            "sportType": "CYCLING",
            "createdBy": "athlete-1",
            "blocks": [{"type": "WARMUP", "durationSeconds": 600, "intensityTarget": 60}],
        })
        assert training.id == "t1"
        assert training.sport == SportType.CYCLING
        assert training.blocks[0].type == BlockType.WARMUP
        assert training.estimated_tss is None

    def test_missing_sport_is_cycling(self) -> None:
        assert training_from_document({"id": "t2"}).sport == SportType.CYCLING

    def test_to_document(self) -> None:
        training = Training(
            id="t3",
            sport_type=SportType.RUNNING,
            blocks=(WorkoutBlock(distance_meters=5000, intensity_target=90),),
            estimated_tss=38,
        )
        doc = training_to_document(training)
        assert doc["sportType"] == "RUNNING"
        assert doc["blocks"] == [{"type": "ACTIVE", "label": "", "distanceMeters": 5000, "intensityTarget": 90}]
        assert doc["estimatedTss"] == 38

    def test_blocks_must_be_list(self) -> None:
        with pytest.raises(DocumentStoreError):
            training_from_document({"id": "t4", "blocks": "nope"})


class TestThresholds:
    def test_missing_keys_take_profile_defaults(self) -> None:
        thresholds = thresholds_from_document({"id": "u1"})
        assert thresholds.ftp == 250
        assert thresholds.threshold_pace_s_per_km == 300
        assert thresholds.css_s_per_100m == 120
        assert thresholds.pace_marathon_s_per_km == 315
        assert thresholds.vo2max_power is None

    def test_explicit_null_stays_unknown(self) -> None:
        thresholds = thresholds_from_document({"id": "u1", "ftp": None, "criticalSwimSpeed": 105})
        assert thresholds.ftp is None
        assert thresholds.css_s_per_100m == 105

    def test_missing_id_rejected(self) -> None:
        with pytest.raises(DocumentStoreError):
            thresholds_from_document({"ftp": 250})


class TestLoadState:
    def test_round_trip_onto_profile(self) -> None:
        doc = {"id": "u1", "ftp": 250, "ctl": 10.0}
        updated = apply_load_state(doc, LoadState(ctl=42.5, atl=50.1, tsb=-7.6))
        assert (updated["ctl"], updated["atl"], updated["tsb"]) == (42.5, 50.1, -7.6)
        assert updated["ftp"] == 250
        assert doc["ctl"] == 10.0
        assert load_state_from_document(updated).atl == 50.1

    def test_missing_values_are_zero(self) -> None:
        assert load_state_from_document({}) == LoadState()


class TestSessions:
    def test_from_document(self) -> None:
        session = session_from_document({
            "id": "s1",
            "userId": "u1",
            "completedAt": "2025-03-01T07:30:00Z",
            "totalDurationSeconds": 3600,
            "sportType": "RUNNING",
            "avgSpeed": 3.2,
            "avgHR": 150,
            "tss": 80.5,
        })
        assert session.completed_on == date(2025, 3, 1)
        assert session.avg_speed == pytest.approx(3.2)
        assert session.avg_hr == pytest.approx(150.0)
        assert session.tss == pytest.approx(80.5)
        assert session.intensity_factor is None

    def test_naive_datetime(self) -> None:
        session = session_from_document({"userId": "u1", "completedAt": "2025-03-01T18:00:00"})
        assert session.completed_at == datetime(2025, 3, 1, 18, 0)

    def test_missing_completion_time(self) -> None:
        assert session_from_document({"userId": "u1"}).completed_at is None

    def test_missing_user_rejected(self) -> None:
        with pytest.raises(DocumentStoreError):
            session_from_document({"id": "s1", "completedAt": "2025-03-01T07:30:00"})

    def test_bad_timestamp_rejected(self) -> None:
        with pytest.raises(DocumentStoreError):
            session_from_document({"userId": "u1", "completedAt": "yesterday"})


class TestZoneSystems:
    def _doc(self, **overrides) -> dict:
        doc = {
            "id": "zs1",
            "coachId": "coach-1",
            "name": "Power",
            "sportType": "CYCLING",
            "referenceType": "FTP",
            "active": True,
            "zones": [
                {"label": "Z1", "low": 0, "high": 55},
                {"label": "Z2", "lowerPercent": 56, "upperPercent": 75, "description": "Endurance"},
            ],
        }
        doc.update(overrides)
        return doc

    def test_from_document(self) -> None:
        system = zone_system_from_document(self._doc())
        assert system.reference_type == ZoneReferenceType.FTP
        assert system.active
        assert not system.default
        assert system.find_zone("z2").low == 56.0

    def test_invalid_zones_rejected(self) -> None:
        zones = [{"label": "Z1", "low": 0, "high": 55}, {"label": "z1", "low": 60, "high": 70}]
        with pytest.raises(InvalidZoneSystemError):
            zone_system_from_document(self._doc(zones=zones))

    def test_unknown_reference_rejected(self) -> None:
        with pytest.raises(DocumentStoreError):
            zone_system_from_document(self._doc(referenceType="HEART_RATE_MAGIC"))

    def test_missing_coach_rejected(self) -> None:
        doc = self._doc()
        del doc["coachId"]
        with pytest.raises(DocumentStoreError):
            zone_system_from_document(doc)


class TestPmcDocuments:
    def test_chart_rows(self) -> None:
        points = [PmcDataPoint(date(2025, 3, 1), 2.4, 13.3, -11.0, 100.0)]
        assert pmc_to_documents(points) == [{
            "date": "2025-03-01",
            "ctl": 2.4,
            "atl": 13.3,
            "tsb": -11.0,
            "dailyTss": 100.0,
            "predicted": False,
        }]
