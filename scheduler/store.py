"""JSON-file document store backing the nightly job.

Reads a directory export of the platform's collections and serves them to
the engine through its collaborator interfaces:

    <data_dir>/users.json               athlete/coach profiles (thresholds, ctl/atl/tsb)
    <data_dir>/completed_sessions.json  scored sessions
    <data_dir>/zone_systems.json        coach zone systems
    <data_dir>/tags.json                coach groups: {"coachId", "athleteIds"}

Each file holds a JSON array. Missing files are treated as empty.
"""

from __future__ import annotations

import json
import logging
import os
from datetime import datetime
from pathlib import Path
from typing import Any, Sequence

from load_engine.exceptions import (
    AthleteNotFoundError,
    DocumentStoreError,
    ZoneSystemNotFoundError,
)
from load_engine.models.athlete import AthleteThresholds, LoadState
from load_engine.models.enums import SportType
from load_engine.models.session import CompletedSession
from load_engine.models.zone_system import ZoneSystem
from load_engine.ports import (
    AthleteDirectory,
    CoachDirectory,
    SessionHistory,
    ZoneSystemCatalog,
)
from load_engine.serialization.documents import (
    apply_load_state,
    document_id,
    session_from_document,
    thresholds_from_document,
    zone_system_from_document,
)
from load_engine.zone_resolution.resolver import pick_zone_system

logger = logging.getLogger(__name__)

USERS_FILE = "users.json"
SESSIONS_FILE = "completed_sessions.json"
ZONE_SYSTEMS_FILE = "zone_systems.json"
TAGS_FILE = "tags.json"

COACH_ROLE = "COACH"


class JsonDocumentStore(AthleteDirectory, SessionHistory, CoachDirectory, ZoneSystemCatalog):
    """In-memory view of a JSON export, with write-back of load state.

    Usage:
        store = JsonDocumentStore(Path("data"))
        engine = TrainingLoadEngine(store, store, store, store)
        store.save_load_state(athlete_id, engine.recompute_load(athlete_id))
        store.commit()
    """

    def __init__(self, data_dir: Path | str) -> None:
        self.data_dir = Path(data_dir)
        self._users: dict[str, dict[str, Any]] = {}
        for doc in self._read(USERS_FILE):
            user_id = document_id(doc)
            if user_id is None:
                raise DocumentStoreError(f"User document without id in {USERS_FILE}")
            self._users[user_id] = doc

        self._sessions: dict[str, list[CompletedSession]] = {}
        for doc in self._read(SESSIONS_FILE):
            session = session_from_document(doc)
            self._sessions.setdefault(session.user_id, []).append(session)
        for sessions in self._sessions.values():
            sessions.sort(key=_session_sort_key)

        self._zone_systems = [zone_system_from_document(doc) for doc in self._read(ZONE_SYSTEMS_FILE)]
        self._tags = self._read(TAGS_FILE)
        self._dirty = False

        logger.info(
            "Loaded store %s: %d users, %d sessions, %d zone systems, %d tags",
            self.data_dir,
            len(self._users),
            sum(len(s) for s in self._sessions.values()),
            len(self._zone_systems),
            len(self._tags),
        )

    # ------------------------------------------------------------------
    # Collaborator interfaces
    # ------------------------------------------------------------------

    def get_thresholds(self, athlete_id: str) -> AthleteThresholds:
        doc = self._users.get(athlete_id)
        if doc is None:
            raise AthleteNotFoundError(athlete_id)
        return thresholds_from_document(doc)

    def list_completed_sessions(self, athlete_id: str) -> Sequence[CompletedSession]:
        return list(self._sessions.get(athlete_id, []))

    def find_coaches_for_athlete(self, athlete_id: str) -> Sequence[str]:
        """Coaches of every tag containing the athlete, first seen first."""
        coaches: list[str] = []
        for tag in self._tags:
            coach_id = tag.get("coachId")
            if coach_id and athlete_id in (tag.get("athleteIds") or []) and coach_id not in coaches:
                coaches.append(coach_id)
        return coaches

    def find_zone_system(
        self,
        coach_id: str,
        sport_type: SportType,
        prefer_active: bool = True,
        fallback_default: bool = True,
    ) -> ZoneSystem | None:
        owned = [s for s in self._zone_systems if s.coach_id == coach_id]
        return pick_zone_system(owned, sport_type, prefer_active, fallback_default)

    def get_zone_system(self, zone_system_id: str) -> ZoneSystem:
        for system in self._zone_systems:
            if system.id == zone_system_id:
                return system
        raise ZoneSystemNotFoundError(zone_system_id)

    # ------------------------------------------------------------------
    # Batch helpers
    # ------------------------------------------------------------------

    def list_athlete_ids(self) -> list[str]:
        """Ids of every non-coach user, in file order."""
        return [
            user_id
            for user_id, doc in self._users.items()
            if str(doc.get("role") or "ATHLETE").upper() != COACH_ROLE
        ]

    def user_document(self, athlete_id: str) -> dict[str, Any]:
        doc = self._users.get(athlete_id)
        if doc is None:
            raise AthleteNotFoundError(athlete_id)
        return dict(doc)

    def save_load_state(self, athlete_id: str, state: LoadState) -> None:
        """Stage ctl/atl/tsb on the athlete's profile; written by commit()."""
        if athlete_id not in self._users:
            raise AthleteNotFoundError(athlete_id)
        self._users[athlete_id] = apply_load_state(self._users[athlete_id], state)
        self._dirty = True

    def commit(self) -> None:
        """Write staged profile changes back to users.json atomically."""
        if not self._dirty:
            return
        path = self.data_dir / USERS_FILE
        tmp_path = path.with_suffix(".json.tmp")
        with open(tmp_path, "w") as f:
            json.dump(list(self._users.values()), f, indent=2)
        os.replace(tmp_path, path)
        self._dirty = False
        logger.info("Wrote %d user profiles to %s", len(self._users), path)

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _read(self, filename: str) -> list[dict[str, Any]]:
        path = self.data_dir / filename
        if not path.exists():
            logger.warning("%s not found, treating as empty", path)
            return []
        try:
            with open(path) as f:
                docs = json.load(f)
        except json.JSONDecodeError as exc:
            raise DocumentStoreError(f"Invalid JSON in {path}: {exc}") from exc
        if not isinstance(docs, list):
            raise DocumentStoreError(f"{path} must contain a JSON array")
        return docs


def _session_sort_key(session: CompletedSession) -> tuple[bool, datetime]:
    if session.completed_at is None:
        return (True, datetime.min)
    return (False, session.completed_at.replace(tzinfo=None))
