"""Tests for zone systems, zone lookup and validation."""

from __future__ import annotations

import pytest

from load_engine.exceptions import InvalidZoneSystemError, LoadEngineError
from load_engine.models.enums import SportType, ZoneReferenceType
from load_engine.models.zone_system import Zone, ZoneSystem, validate_zone_system


def _system(*zones: Zone) -> ZoneSystem:
    return ZoneSystem(
        coach_id="coach-1",
        sport_type=SportType.CYCLING,
        reference_type=ZoneReferenceType.FTP,
        zones=zones,
        name="Test zones",
    )


class TestZone:
    def test_midpoint(self) -> None:
        assert Zone("Z4", 91, 105).midpoint == 98.0


class TestFindZone:
    def test_exact_label(self, ftp_zones: ZoneSystem) -> None:
        assert ftp_zones.find_zone("Z3").description == "Tempo"

    def test_case_insensitive(self, ftp_zones: ZoneSystem) -> None:
        assert ftp_zones.find_zone("z4") == ftp_zones.find_zone("Z4")

    def test_surrounding_whitespace(self, ftp_zones: ZoneSystem) -> None:
        assert ftp_zones.find_zone(" Z2 ").label == "Z2"

    def test_unknown_label(self, ftp_zones: ZoneSystem) -> None:
        assert ftp_zones.find_zone("Z9") is None

    def test_empty_label(self, ftp_zones: ZoneSystem) -> None:
        assert ftp_zones.find_zone(None) is None
        assert ftp_zones.find_zone("") is None


class TestValidateZoneSystem:
    def test_valid_system_returned(self, ftp_zones: ZoneSystem) -> None:
        assert validate_zone_system(ftp_zones) is ftp_zones

    def test_duplicate_label_rejected(self) -> None:
        with pytest.raises(InvalidZoneSystemError, match="Duplicate"):
            validate_zone_system(_system(Zone("Z1", 0, 55), Zone("z1", 56, 75)))

    def test_inverted_bounds_rejected(self) -> None:
        with pytest.raises(InvalidZoneSystemError):
            validate_zone_system(_system(Zone("Z1", 80, 60)))

    def test_single_point_zone_allowed(self) -> None:
        validate_zone_system(_system(Zone("FTP", 100, 100)))

    def test_error_is_load_engine_error(self) -> None:
        assert issubclass(InvalidZoneSystemError, LoadEngineError)


class TestZoneReferenceType:
    @pytest.mark.parametrize(
        "reference",
        [
            ZoneReferenceType.THRESHOLD_PACE,
            ZoneReferenceType.VO2MAX_PACE,
            ZoneReferenceType.CSS,
            ZoneReferenceType.PACE_5K,
            ZoneReferenceType.PACE_MARATHON,
        ],
    )
    def test_pace_references(self, reference: ZoneReferenceType) -> None:
        assert reference.is_pace

    @pytest.mark.parametrize(
        "reference",
        [ZoneReferenceType.FTP, ZoneReferenceType.VO2MAX_POWER, ZoneReferenceType.CUSTOM],
    )
    def test_percentage_references(self, reference: ZoneReferenceType) -> None:
        assert not reference.is_pace


class TestSportTypeParse:
    def test_known(self) -> None:
        assert SportType.parse("SWIMMING") == SportType.SWIMMING

    def test_unknown_and_missing_are_cycling(self) -> None:
        assert SportType.parse("YOGA") == SportType.CYCLING
        assert SportType.parse(None) == SportType.CYCLING
