import logging
import math
from datetime import datetime, timezone
from typing import List, Optional

from sqlalchemy.orm import Session

from matchfinder.models.match import Match
from matchfinder.repositories.match_repository import MatchRepository
from matchfinder.schemas.filters import MatchFilters
from matchfinder.schemas.match import MatchLocation, MatchOut

logger = logging.getLogger(__name__)


def _valid_coordinate(value) -> Optional[float]:
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    return number if math.isfinite(number) else None


def to_match_out(match: Match, competition_name: str) -> Optional[MatchOut]:
    """Public shape of a match, or None when its stored point is unusable."""
    lat = _valid_coordinate(match.latitude)
    lon = _valid_coordinate(match.longitude)
    if lat is None or lon is None:
        logger.warning(
            f"Match ID {match.external_id} has invalid coordinates "
            f"(lat={match.latitude}, lon={match.longitude}). Dropping it."
        )
        return None

    return MatchOut(
        id=match.external_id,
        team_home=match.team_home,
        team_away=match.team_away,
        competition_name=competition_name,
        match_date=match.match_date,
        stadium_name=match.stadium_name,
        location=MatchLocation(coordinates=[lat, lon]),
    )


class MatchQueryService:
    def __init__(self, db: Session):
        self.repo = MatchRepository(db)

    def query(self, filters: MatchFilters, now: Optional[datetime] = None) -> List[MatchOut]:
        """Upcoming matches matching every present filter, ascending by date."""
        now = now or datetime.now(timezone.utc)
        rows = self.repo.search(filters, now)

        matches = [m for m in (to_match_out(match, name) for match, name in rows) if m is not None]
        if not matches:
            logger.info(f"No upcoming matches found for filters {filters}")
        return matches
