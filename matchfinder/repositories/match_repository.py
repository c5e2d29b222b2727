import logging
from datetime import datetime, time, timedelta, timezone
from typing import List, Optional, Tuple

from sqlalchemy import select, func, or_
from sqlalchemy.orm import Session

from matchfinder.core.database import dialect_insert
from matchfinder.core.geo import GeodesicWithin
from matchfinder.models.competition import Competition
from matchfinder.models.match import Match
from matchfinder.schemas.filters import MatchFilters

logger = logging.getLogger(__name__)

MatchRow = Tuple[Match, str]


def _day_start(day) -> datetime:
    return datetime.combine(day, time.min, tzinfo=timezone.utc)


def _like_pattern(text: str) -> str:
    # Team names are matched literally; LIKE wildcards in user input are escaped
    escaped = text.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


class MatchRepository:
    def __init__(self, db: Session):
        self.db = db

    def insert_ignore(
        self,
        external_id: int,
        competition_id: int,
        team_home: str,
        team_away: str,
        match_date: datetime,
        stadium_name: str,
        latitude: float,
        longitude: float,
    ) -> bool:
        """Insert keyed by external_id; an existing row is left untouched. Returns True if a row was inserted."""
        stmt = dialect_insert(self.db, Match).values(
            external_id=external_id,
            competition_id=competition_id,
            team_home=team_home,
            team_away=team_away,
            match_date=match_date,
            stadium_name=stadium_name,
            latitude=latitude,
            longitude=longitude,
        )
        stmt = stmt.on_conflict_do_nothing(index_elements=["external_id"])
        result = self.db.execute(stmt)
        self.db.commit()
        return result.rowcount == 1

    def count(self) -> int:
        return self.db.scalar(select(func.count()).select_from(Match))

    def _base_select(self):
        return select(Match, Competition.name.label("competition_name")).join(
            Competition, Match.competition_id == Competition.id
        )

    def search(self, filters: MatchFilters, now: datetime) -> List[MatchRow]:
        """
        Upcoming matches (match_date >= now) narrowed by every filter present.
        Values always travel as bound parameters.
        """
        conditions = [Match.match_date >= now]

        if filters.league:
            conditions.append(Competition.name == filters.league)

        if filters.team:
            pattern = _like_pattern(filters.team)
            conditions.append(
                or_(
                    Match.team_home.ilike(pattern, escape="\\"),
                    Match.team_away.ilike(pattern, escape="\\"),
                )
            )

        if filters.date_from:
            conditions.append(Match.match_date >= _day_start(filters.date_from))

        if filters.date_to:
            # Whole dateTo day included
            conditions.append(Match.match_date < _day_start(filters.date_to + timedelta(days=1)))

        if filters.proximity:
            p = filters.proximity
            conditions.append(GeodesicWithin(Match.latitude, Match.longitude, p.lat, p.lon, p.radius_m))

        stmt = self._base_select().where(*conditions).order_by(Match.match_date.asc(), Match.external_id.asc())
        logger.debug(f"Match search: {stmt} | filters={filters}")
        return [(row.Match, row.competition_name) for row in self.db.execute(stmt)]

    def list_all(self) -> List[MatchRow]:
        stmt = self._base_select().order_by(Match.match_date.asc(), Match.external_id.asc())
        return [(row.Match, row.competition_name) for row in self.db.execute(stmt)]

    def get_row(self, external_id: int) -> Optional[MatchRow]:
        row = self.db.execute(self._base_select().where(Match.external_id == external_id)).first()
        if row is None:
            return None
        return row.Match, row.competition_name

    def get(self, external_id: int) -> Optional[Match]:
        return self.db.get(Match, external_id)

    def add(self, match: Match) -> Match:
        self.db.add(match)
        self.db.commit()
        self.db.refresh(match)
        return match

    def save(self, match: Match) -> Match:
        self.db.commit()
        self.db.refresh(match)
        return match

    def delete(self, match: Match) -> None:
        self.db.delete(match)
        self.db.commit()
