from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field


# --- Public query output ---

class MatchLocation(BaseModel):
    # [latitude, longitude], the order Leaflet expects
    coordinates: List[float] = Field(..., min_length=2, max_length=2)


class MatchOut(BaseModel):
    id: int
    team_home: str
    team_away: str
    competition_name: str
    match_date: datetime
    stadium_name: str
    location: MatchLocation


# --- Admin ---

class AdminMatchIn(BaseModel):
    """Write payload. Presence is checked by the service so missing fields map to 400."""
    team_home: Optional[str] = None
    team_away: Optional[str] = None
    competition_name: Optional[str] = None
    match_date: Optional[datetime] = None
    stadium_name: Optional[str] = None


class AdminMatchOut(BaseModel):
    id: int
    team_home: str
    team_away: str
    competition_name: str
    match_date: datetime
    stadium_name: str
    latitude: Optional[float] = None
    longitude: Optional[float] = None


class MatchCreated(BaseModel):
    message: str = "Match created successfully"
    id: int


class MatchRef(BaseModel):
    id: int
