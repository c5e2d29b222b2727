import argparse
import logging
import sys
import time

from matchfinder.core.config import get_settings
from matchfinder.core.database import Base, SessionLocal, engine
from matchfinder.core.errors import ConfigurationError, UpstreamError
from matchfinder.core.logging import setup_logging
from matchfinder.models import competition, match  # noqa: F401
from matchfinder.services.import_service import ImportPipeline

logger = logging.getLogger("run_import")


def import_once(skip_competitions: bool = False):
    """One import run. ConfigurationError and UpstreamError propagate to the caller."""
    settings = get_settings()
    db = SessionLocal()
    try:
        pipeline = ImportPipeline(db, settings)
        report = pipeline.run(sync_competitions=not skip_competitions)
    finally:
        db.close()

    logger.info(f"Report: {report}")
    return report


def run_once(skip_competitions: bool = False) -> int:
    try:
        import_once(skip_competitions)
    except (ConfigurationError, UpstreamError) as e:
        logger.error(f"Import aborted: {e}")
        return 1
    return 0


def run_scheduled(every_hours: float, skip_competitions: bool = False) -> int:
    """Repeat the import until a configuration problem makes every later run pointless."""
    logger.info(f"Scheduled import every {every_hours}h")
    runs = 0
    while True:
        runs += 1
        try:
            import_once(skip_competitions)
        except ConfigurationError as e:
            logger.error(f"Scheduler stopped after {runs} run(s): {e}")
            return 1
        except Exception as e:
            # This run is lost, the next tick tries again
            logger.error(f"Import run {runs} failed: {e}")
        time.sleep(every_hours * 3600)


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Import competitions and upcoming matches from football-data.org")
    parser.add_argument("--every-hours", type=float, default=None, help="Repeat the import on this interval")
    parser.add_argument("--skip-competitions", action="store_true", help="Only sync matches for stored competitions")
    args = parser.parse_args(argv)

    setup_logging(get_settings())
    Base.metadata.create_all(bind=engine)

    if args.every_hours is None:
        return run_once(args.skip_competitions)
    return run_scheduled(args.every_hours, args.skip_competitions)


if __name__ == "__main__":
    sys.exit(main())
