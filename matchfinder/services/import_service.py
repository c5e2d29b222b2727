"""
import_service.py - Competitions + fixtures import from football-data.org.

Phase 1 upserts every competition by provider id (name overwritten).
Phase 2 walks the competitions in storage, keeps fixtures inside the
forward window, resolves stadium and coordinates for the home team and
inserts the match keyed by external_id (existing rows are never touched).

Both phases are safe to re-run. A failing competition is logged and
skipped; a missing credential aborts the run.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Dict, List, Optional

import requests
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from matchfinder.core.config import Settings
from matchfinder.core.errors import ConfigurationError, Found, Lookup, UpstreamError
from matchfinder.repositories.competition_repository import CompetitionRepository
from matchfinder.repositories.match_repository import MatchRepository
from matchfinder.schemas.provider import ProviderMatch
from matchfinder.services.football_data import FootballDataClient
from matchfinder.services.stadium_resolver import Coordinates, StadiumResolver

logger = logging.getLogger(__name__)


@dataclass
class ImportReport:
    competitions_synced: int = 0
    fixtures_seen: int = 0
    inserted: int = 0
    duplicates: int = 0
    skipped_out_of_window: int = 0
    skipped_missing_teams: int = 0
    skipped_no_stadium: int = 0
    skipped_no_coordinates: int = 0
    failed_inserts: int = 0
    failed_competitions: List[str] = field(default_factory=list)


class ImportPipeline:
    def __init__(
        self,
        db: Session,
        settings: Settings,
        client: Optional[FootballDataClient] = None,
        resolver: Optional[StadiumResolver] = None,
        session: Optional[requests.Session] = None,
    ):
        if not settings.OPENCAGE_API_KEY:
            raise ConfigurationError("OPENCAGE_API_KEY is not set")

        self.db = db
        self.settings = settings
        self.horizon = timedelta(days=settings.IMPORT_HORIZON_DAYS)
        self.client = client or FootballDataClient(settings, session=session)
        self.resolver = resolver or StadiumResolver(settings, session=session)
        self.competitions = CompetitionRepository(db)
        self.matches = MatchRepository(db)

        # Per-run memo: the same home team shows up in many fixtures
        self._stadiums: Dict[str, Lookup[str]] = {}
        self._coordinates: Dict[str, Lookup[Coordinates]] = {}

    # --- Phase 1 ---

    def sync_competitions(self, report: Optional[ImportReport] = None) -> ImportReport:
        report = report or ImportReport()
        # A failure here propagates: without competitions there is nothing to import
        competitions = self.client.get_competitions()
        logger.info(f"Fetched {len(competitions)} competitions from the API.")

        for competition in competitions:
            try:
                self.competitions.upsert(competition.id, competition.name)
                report.competitions_synced += 1
                logger.info(f"Inserted/updated competition: {competition.name} (ID: {competition.id})")
            except SQLAlchemyError as e:
                self.db.rollback()
                logger.error(f"Failed to upsert competition ID {competition.id}: {e}")

        return report

    # --- Phase 2 ---

    def sync_matches(self, now: Optional[datetime] = None, report: Optional[ImportReport] = None) -> ImportReport:
        report = report or ImportReport()
        now = now or datetime.now(timezone.utc)
        window_end = now + self.horizon

        competitions = self.competitions.list_all()
        logger.info(f"Fetched {len(competitions)} competitions from the database.")

        for competition in competitions:
            logger.info(f"Fetching matches for competition: {competition.name} (ID: {competition.id})")
            try:
                fixtures = self.client.get_competition_matches(competition.id)
            except UpstreamError as e:
                logger.error(f"Error fetching matches for competition {competition.name}: {e}")
                report.failed_competitions.append(competition.name)
                continue

            logger.info(f"Fetched {len(fixtures)} matches for {competition.name}.")
            for fixture in fixtures:
                report.fixtures_seen += 1
                self._import_fixture(competition.id, fixture, now, window_end, report)

        logger.info("All competitions processed.")
        return report

    def _import_fixture(
        self, competition_id: int, fixture: ProviderMatch, now: datetime, window_end: datetime, report: ImportReport
    ) -> None:
        if not (now <= fixture.utc_date <= window_end):
            report.skipped_out_of_window += 1
            return

        team_home, team_away = fixture.home_team.name, fixture.away_team.name
        if not team_home or not team_away:
            report.skipped_missing_teams += 1
            return

        stadium = self._stadium_for(team_home)
        if not isinstance(stadium, Found):
            logger.warning(f"Stadium name not found for team: {team_home}. Skipping match ID {fixture.id}.")
            report.skipped_no_stadium += 1
            return

        coords = self._coordinates_for(stadium.value)
        if not isinstance(coords, Found):
            logger.warning(f"Coordinates not found for stadium: {stadium.value}. Skipping match ID {fixture.id}.")
            report.skipped_no_coordinates += 1
            return

        try:
            inserted = self.matches.insert_ignore(
                external_id=fixture.id,
                competition_id=competition_id,
                team_home=team_home,
                team_away=team_away,
                match_date=fixture.utc_date,
                stadium_name=stadium.value,
                latitude=coords.value.lat,
                longitude=coords.value.lon,
            )
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Failed to insert match ID {fixture.id}: {e}")
            report.failed_inserts += 1
            return

        if inserted:
            report.inserted += 1
            logger.info(f"Inserted match ID {fixture.id}: {team_home} vs {team_away} at {stadium.value}")
        else:
            report.duplicates += 1
            logger.debug(f"Match ID {fixture.id} already stored, left unchanged")

    def _stadium_for(self, team_name: str) -> Lookup[str]:
        if team_name not in self._stadiums:
            self._stadiums[team_name] = self.resolver.resolve_stadium(team_name)
        return self._stadiums[team_name]

    def _coordinates_for(self, stadium_name: str) -> Lookup[Coordinates]:
        if stadium_name not in self._coordinates:
            self._coordinates[stadium_name] = self.resolver.resolve_coordinates(stadium_name)
        return self._coordinates[stadium_name]

    # --- Full run ---

    def run(self, now: Optional[datetime] = None, sync_competitions: bool = True) -> ImportReport:
        report = ImportReport()
        if sync_competitions:
            self.sync_competitions(report)
        self.sync_matches(now=now, report=report)
        logger.info(
            f"Import finished: {report.inserted} inserted, {report.duplicates} already stored, "
            f"{report.skipped_no_stadium + report.skipped_no_coordinates} without location, "
            f"{len(report.failed_competitions)} competitions failed"
        )
        return report
