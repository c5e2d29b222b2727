import logging
from typing import List, Optional

import requests
from pydantic import ValidationError

from matchfinder.core.config import Settings
from matchfinder.core.errors import ConfigurationError, UpstreamError
from matchfinder.schemas.provider import ProviderCompetition, ProviderMatch

logger = logging.getLogger(__name__)


def _entries(data: dict, key: str) -> list:
    entries = data.get(key) or []
    if not isinstance(entries, list):
        raise UpstreamError(f"'{key}' is {type(entries).__name__}, expected a list")
    return entries


def _entry_id(raw):
    return raw.get("id") if isinstance(raw, dict) else raw


class FootballDataClient:
    """Thin client for the football-data.org REST API."""

    def __init__(self, settings: Settings, session: Optional[requests.Session] = None):
        if not settings.FOOTBALL_DATA_API_KEY:
            raise ConfigurationError("FOOTBALL_DATA_API_KEY is not set")
        if not settings.FOOTBALL_DATA_API_URL:
            raise ConfigurationError("FOOTBALL_DATA_API_URL is not set")

        self.base_url = settings.FOOTBALL_DATA_API_URL.rstrip("/")
        self.timeout = settings.HTTP_TIMEOUT_SECONDS
        self.session = session or requests.Session()
        self.headers = {"X-Auth-Token": settings.FOOTBALL_DATA_API_KEY, "Accept": "application/json"}

    def _get(self, endpoint: str) -> dict:
        url = f"{self.base_url}{endpoint}"
        try:
            r = self.session.get(url, headers=self.headers, timeout=self.timeout)
        except requests.RequestException as e:
            raise UpstreamError(f"No response from {url}: {e}") from e

        if r.status_code >= 400:
            raise UpstreamError(f"GET {url} failed", status_code=r.status_code, body=r.text)

        try:
            data = r.json()
        except ValueError as e:
            raise UpstreamError(f"GET {url} returned non-JSON", status_code=r.status_code, body=r.text) from e

        if not isinstance(data, dict):
            raise UpstreamError(f"GET {url} returned {type(data).__name__}, expected an object",
                                status_code=r.status_code, body=r.text)
        return data

    def get_competitions(self) -> List[ProviderCompetition]:
        data = self._get("/competitions")
        competitions = []
        for raw in _entries(data, "competitions"):
            try:
                competitions.append(ProviderCompetition.model_validate(raw))
            except ValidationError as e:
                logger.warning(f"Skipping malformed competition {_entry_id(raw)}: {e}")
        return competitions

    def get_competition_matches(self, competition_id: int) -> List[ProviderMatch]:
        data = self._get(f"/competitions/{competition_id}/matches")
        matches = []
        for raw in _entries(data, "matches"):
            try:
                matches.append(ProviderMatch.model_validate(raw))
            except ValidationError as e:
                logger.warning(f"Skipping malformed fixture {_entry_id(raw)}: {e}")
        return matches
