"""Nightly scheduler — refreshes every athlete's rolling training load.

Usage:
    python -m scheduler.nightly --once      # single run (for cron)
    python -m scheduler.nightly --daemon    # APScheduler loop
"""

from __future__ import annotations

import argparse
import logging
from datetime import date
from pathlib import Path

from load_engine.engine import TrainingLoadEngine
from load_engine.exceptions import LoadEngineError

from scheduler.config import DATA_DIR, LOG_LEVEL, NIGHTLY_HOUR, NIGHTLY_MINUTE
from scheduler.store import JsonDocumentStore

logger = logging.getLogger(__name__)


def nightly_job(
    store: JsonDocumentStore | None = None,
    today: date | None = None,
) -> dict[str, int]:
    """Execute one nightly cycle: recompute CTL/ATL/TSB for every athlete.

    Athletes without history keep their stored values. One athlete failing
    does not stop the batch.

    Returns:
        Counts of ``updated``, ``skipped`` and ``failed`` athletes.
    """
    logger.info("Starting nightly job")
    today = today or date.today()
    if store is None:
        store = JsonDocumentStore(DATA_DIR)

    engine = TrainingLoadEngine(store, store, store, store)
    counts = {"updated": 0, "skipped": 0, "failed": 0}

    for athlete_id in store.list_athlete_ids():
        try:
            state = engine.recompute_load(athlete_id, today)
        except LoadEngineError as exc:
            logger.error("Load recompute failed for athlete %s: %s", athlete_id, exc)
            counts["failed"] += 1
            continue

        if not state.computed:
            logger.debug("Athlete %s has no sessions, load left unchanged", athlete_id)
            counts["skipped"] += 1
            continue

        store.save_load_state(athlete_id, state)
        counts["updated"] += 1

    store.commit()
    logger.info(
        "Nightly job complete: %d updated, %d skipped, %d failed",
        counts["updated"], counts["skipped"], counts["failed"],
    )
    return counts


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Training load nightly scheduler")
    group = parser.add_mutually_exclusive_group(required=True)
    group.add_argument("--once", action="store_true", help="Run once and exit")
    group.add_argument("--daemon", action="store_true", help="Run as APScheduler daemon")
    parser.add_argument("--data-dir", type=Path, default=DATA_DIR, help="JSON store directory")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=LOG_LEVEL,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )

    def job() -> None:
        nightly_job(JsonDocumentStore(args.data_dir))

    if args.once:
        job()
        return

    from apscheduler.schedulers.blocking import BlockingScheduler

    scheduler = BlockingScheduler()
    scheduler.add_job(
        job,
        "cron",
        hour=NIGHTLY_HOUR,
        minute=NIGHTLY_MINUTE,
        id="nightly_job",
    )
    logger.info(
        "Scheduler started, nightly job at %02d:%02d",
        NIGHTLY_HOUR,
        NIGHTLY_MINUTE,
    )
    try:
        scheduler.start()
    except (KeyboardInterrupt, SystemExit):
        logger.info("Scheduler stopped")


if __name__ == "__main__":
    main()
