import logging
import math
from dataclasses import dataclass
from datetime import date
from typing import Optional

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Proximity:
    lat: float
    lon: float
    radius_km: float

    @property
    def radius_m(self) -> float:
        return self.radius_km * 1000


@dataclass(frozen=True)
class MatchFilters:
    """Optional, independently composable filters for the match query. All present ones are ANDed."""
    league: Optional[str] = None
    team: Optional[str] = None
    date_from: Optional[date] = None
    date_to: Optional[date] = None
    proximity: Optional[Proximity] = None

    @classmethod
    def from_params(
        cls,
        league: Optional[str] = None,
        team: Optional[str] = None,
        lat: Optional[str] = None,
        lon: Optional[str] = None,
        radius: Optional[str] = None,
        date_from: Optional[date] = None,
        date_to: Optional[date] = None,
    ) -> "MatchFilters":
        """
        Builds filters from raw query-string values.
        Unparseable numbers drop the proximity filter with a warning instead of failing the request.
        """
        proximity = None
        lat_f = _parse_number("lat", lat)
        lon_f = _parse_number("lon", lon)
        radius_f = _parse_number("radius", radius)

        if radius_f is not None:
            if lat_f is None or lon_f is None:
                logger.warning("Radius given without both lat and lon. Skipping proximity filter.")
            elif radius_f <= 0:
                logger.warning(f"Non-positive radius {radius_f}. Skipping proximity filter.")
            elif not (-90 <= lat_f <= 90 and -180 <= lon_f <= 180):
                logger.warning(f"Point out of range (lat={lat_f}, lon={lon_f}). Skipping proximity filter.")
            else:
                proximity = Proximity(lat=lat_f, lon=lon_f, radius_km=radius_f)

        return cls(
            league=_clean(league),
            team=_clean(team),
            date_from=date_from,
            date_to=date_to,
            proximity=proximity,
        )


def _clean(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    return value or None


def _parse_number(name: str, raw: Optional[str]) -> Optional[float]:
    if raw is None or not str(raw).strip():
        return None
    try:
        value = float(raw)
    except (TypeError, ValueError):
        logger.warning(f"Invalid {name} '{raw}'. Ignoring it.")
        return None
    if not math.isfinite(value):
        logger.warning(f"Invalid {name} '{raw}'. Ignoring it.")
        return None
    return value
