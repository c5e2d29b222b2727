"""
stadium_resolver.py - Team -> stadium -> coordinates lookups.

Stadium names come from the Wikipedia infobox of the team's article,
coordinates from the OpenCage geocoder. Both lookups are best-effort:
any failure is logged and returned as NotFound, never raised.
"""

import logging
import re
from dataclasses import dataclass
from typing import Optional

import requests
from bs4 import BeautifulSoup

from matchfinder.core.config import Settings
from matchfinder.core.errors import Found, NotFound, Lookup

logger = logging.getLogger(__name__)

# Tried in order; the first one with a search hit wins
SEARCH_VARIANTS = (
    "{team} ",
    "{team} Football Club",
    "{team} (football club)",
    "{team} Association Football Club",
    "{team} cf",
    "{team} F.C",
)

STADIUM_HEADERS = frozenset({"ground", "ground(s)", "home ground", "stadium"})

CITATION_RE = re.compile(r"\[.*?\]")

LOOKUP_ERRORS = (requests.RequestException, ValueError, KeyError, TypeError, AttributeError)


@dataclass(frozen=True)
class Coordinates:
    lat: float
    lon: float


def extract_stadium_from_html(html: str) -> Optional[str]:
    """First row of any infobox whose header is a known stadium synonym, cleaned. None if absent."""
    soup = BeautifulSoup(html, "html.parser")
    rows = [row for infobox in soup.select(".infobox") for row in infobox.find_all("tr")]

    for row in rows:
        header = row.find("th")
        if header is None or header.get_text().strip().lower() not in STADIUM_HEADERS:
            continue

        cell = row.find("td")
        if cell is None:
            return None

        for br in cell.find_all("br"):
            br.replace_with("\n")

        text = CITATION_RE.sub("", cell.get_text()).strip()
        # "Old Trafford\nCapacity: 74,310" -> "Old Trafford"
        name = text.split("\n")[0].strip()
        return name or None

    return None


def _json_object(response) -> dict:
    data = response.json()
    if not isinstance(data, dict):
        raise ValueError(f"expected a JSON object, got {type(data).__name__}")
    return data


class StadiumResolver:
    def __init__(self, settings: Settings, session: Optional[requests.Session] = None):
        self.settings = settings
        self.session = session or requests.Session()
        self.timeout = settings.HTTP_TIMEOUT_SECONDS

    def _wiki(self, params: dict) -> dict:
        r = self.session.get(
            self.settings.WIKIPEDIA_API_URL,
            params={**params, "format": "json"},
            timeout=self.timeout,
        )
        r.raise_for_status()
        return _json_object(r)

    def _find_team_page(self, team_name: str) -> Optional[str]:
        for variant in SEARCH_VARIANTS:
            query = variant.format(team=team_name)
            data = self._wiki({"action": "query", "list": "search", "srsearch": query, "srlimit": 1})
            results = data.get("query", {}).get("search", [])
            if results:
                title = results[0]["title"]
                logger.debug(f"Search query '{query}' -> page '{title}'")
                return title
            logger.debug(f"Search query '{query}' -> no results")
        return None

    def resolve_stadium(self, team_name: str) -> Lookup[str]:
        try:
            title = self._find_team_page(team_name)
            if title is None:
                logger.warning(f"No Wikipedia page found for team: {team_name}")
                return NotFound(f"no wiki page for {team_name}")

            data = self._wiki({"action": "parse", "page": title, "prop": "text", "redirects": 1})
            html = data["parse"]["text"]["*"]
            if not isinstance(html, str):
                raise TypeError(f"page text is {type(html).__name__}")
        except LOOKUP_ERRORS as e:
            logger.error(f"Error fetching stadium name for team {team_name}: {e}")
            return NotFound(f"wiki lookup failed for {team_name}")

        stadium = extract_stadium_from_html(html)
        if stadium is None:
            logger.warning(f"Stadium name not found in infobox for team: {team_name}")
            return NotFound(f"no stadium row in infobox of '{title}'")

        logger.info(f"Extracted stadium '{stadium}' for team '{team_name}'")
        return Found(stadium)

    def resolve_coordinates(self, stadium_name: str) -> Lookup[Coordinates]:
        if not self.settings.OPENCAGE_API_KEY:
            logger.error("OPENCAGE_API_KEY is not set")
            return NotFound("geocoding credential missing")

        try:
            r = self.session.get(
                self.settings.OPENCAGE_API_URL,
                params={"key": self.settings.OPENCAGE_API_KEY, "q": stadium_name, "limit": 1},
                timeout=self.timeout,
            )
            r.raise_for_status()
            results = _json_object(r).get("results", [])
            if not results:
                logger.warning(f"No geocoding results for stadium: {stadium_name}")
                return NotFound(f"no geocoding results for {stadium_name}")

            geometry = results[0]["geometry"]
            coords = Coordinates(lat=float(geometry["lat"]), lon=float(geometry["lng"]))
        except LOOKUP_ERRORS as e:
            logger.error(f"Error geocoding stadium '{stadium_name}': {e}")
            return NotFound(f"geocoding failed for {stadium_name}")

        logger.info(f"Coordinates for '{stadium_name}': lat={coords.lat}, lon={coords.lon}")
        return Found(coords)
