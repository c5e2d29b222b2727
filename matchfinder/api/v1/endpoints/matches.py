from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from matchfinder.api.deps import get_current_user
from matchfinder.core.database import get_db
from matchfinder.schemas.filters import MatchFilters
from matchfinder.schemas.match import MatchOut
from matchfinder.services.match_query import MatchQueryService

router = APIRouter(dependencies=[Depends(get_current_user)])


@router.get("/matches", response_model=List[MatchOut])
def list_upcoming_matches(
    league: Optional[str] = Query(None, description="Exact competition name"),
    team: Optional[str] = Query(None, description="Substring of home or away team (case-insensitive)"),
    # Numbers stay strings so a bad value drops the filter instead of failing the request
    lat: Optional[str] = Query(None, description="Latitude of the search centre"),
    lon: Optional[str] = Query(None, description="Longitude of the search centre"),
    radius: Optional[str] = Query(None, description="Search radius in km (needs lat and lon)"),
    date_from: Optional[date] = Query(None, alias="dateFrom"),
    date_to: Optional[date] = Query(None, alias="dateTo", description="Inclusive: the whole day counts"),
    db: Session = Depends(get_db),
):
    """
    Upcoming matches, soonest first. Filters combine with AND.
    A radius only applies together with lat and lon; invalid numbers drop that filter.
    """
    filters = MatchFilters.from_params(
        league=league, team=team, lat=lat, lon=lon, radius=radius, date_from=date_from, date_to=date_to
    )
    return MatchQueryService(db).query(filters)
