from datetime import datetime, timezone
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


# Payloads from football-data.org. Only the fields the import uses are declared.

class ProviderCompetition(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: int
    name: str


class ProviderTeam(BaseModel):
    model_config = ConfigDict(extra="ignore")

    # null for fixtures whose participants are not decided yet
    name: Optional[str] = None


class ProviderMatch(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    id: int
    utc_date: datetime = Field(alias="utcDate")
    home_team: ProviderTeam = Field(alias="homeTeam")
    away_team: ProviderTeam = Field(alias="awayTeam")

    @field_validator("utc_date")
    @classmethod
    def as_utc(cls, v: datetime) -> datetime:
        # utcDate is documented as UTC even when the offset is missing
        if v.tzinfo is None:
            return v.replace(tzinfo=timezone.utc)
        return v.astimezone(timezone.utc)
