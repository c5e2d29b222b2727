import logging
from typing import List

from sqlalchemy.orm import Session

from matchfinder.core.errors import Found, MatchNotFound, ValidationFailed
from matchfinder.models.match import Match
from matchfinder.repositories.competition_repository import CompetitionRepository
from matchfinder.repositories.match_repository import MatchRepository
from matchfinder.schemas.match import AdminMatchIn, AdminMatchOut
from matchfinder.services.stadium_resolver import Coordinates, StadiumResolver

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ("team_home", "team_away", "competition_name", "match_date", "stadium_name")


def _to_admin_out(match: Match, competition_name: str) -> AdminMatchOut:
    return AdminMatchOut(
        id=match.external_id,
        team_home=match.team_home,
        team_away=match.team_away,
        competition_name=competition_name,
        match_date=match.match_date,
        stadium_name=match.stadium_name,
        latitude=match.latitude,
        longitude=match.longitude,
    )


class AdminMatchService:
    def __init__(self, db: Session, resolver: StadiumResolver):
        self.db = db
        self.resolver = resolver
        self.matches = MatchRepository(db)
        self.competitions = CompetitionRepository(db)

    def list_matches(self) -> List[AdminMatchOut]:
        return [_to_admin_out(match, name) for match, name in self.matches.list_all()]

    def get_match(self, external_id: int) -> AdminMatchOut:
        row = self.matches.get_row(external_id)
        if row is None:
            raise MatchNotFound(external_id)
        return _to_admin_out(*row)

    def _validate(self, payload: AdminMatchIn) -> None:
        missing = []
        for name in REQUIRED_FIELDS:
            value = getattr(payload, name)
            if value is None or (isinstance(value, str) and not value.strip()):
                missing.append(name)
        if missing:
            raise ValidationFailed(f"Missing required fields ({', '.join(REQUIRED_FIELDS)}): {', '.join(missing)}.")

    def _geocode(self, stadium_name: str) -> Coordinates:
        result = self.resolver.resolve_coordinates(stadium_name)
        if not isinstance(result, Found):
            raise ValidationFailed(f"Unable to find location for stadium: {stadium_name}. Check the name and try again.")
        return result.value

    def create_match(self, payload: AdminMatchIn) -> int:
        self._validate(payload)
        coords = self._geocode(payload.stadium_name.strip())
        competition = self.competitions.get_or_create_by_name(payload.competition_name.strip())

        match = Match(
            team_home=payload.team_home.strip(),
            team_away=payload.team_away.strip(),
            competition_id=competition.id,
            match_date=payload.match_date,
            stadium_name=payload.stadium_name.strip(),
            latitude=coords.lat,
            longitude=coords.lon,
        )
        match = self.matches.add(match)
        logger.info(f"Inserted new match with external_id={match.external_id}")
        return match.external_id

    def update_match(self, external_id: int, payload: AdminMatchIn) -> int:
        self._validate(payload)
        match = self.matches.get(external_id)
        if match is None:
            raise MatchNotFound(external_id)

        coords = self._geocode(payload.stadium_name.strip())
        competition = self.competitions.get_or_create_by_name(payload.competition_name.strip())

        match.team_home = payload.team_home.strip()
        match.team_away = payload.team_away.strip()
        match.competition_id = competition.id
        match.match_date = payload.match_date
        match.stadium_name = payload.stadium_name.strip()
        match.latitude = coords.lat
        match.longitude = coords.lon
        self.matches.save(match)
        logger.info(f"Updated match external_id={external_id}")
        return external_id

    def delete_match(self, external_id: int) -> int:
        match = self.matches.get(external_id)
        if match is None:
            raise MatchNotFound(external_id)
        self.matches.delete(match)
        logger.info(f"Deleted match external_id={external_id}")
        return external_id
