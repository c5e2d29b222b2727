from datetime import datetime
from typing import Optional

from sqlalchemy import Float, ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from matchfinder.core.database import Base, UTCDateTime


class Match(Base):
    __tablename__ = "matches"

    # Provider id, the de-duplication key for imports
    external_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    team_home: Mapped[str] = mapped_column(String(255), index=True)
    team_away: Mapped[str] = mapped_column(String(255), index=True)
    competition_id: Mapped[int] = mapped_column(ForeignKey("competitions.id"), index=True)
    match_date: Mapped[datetime] = mapped_column(UTCDateTime, index=True)
    stadium_name: Mapped[str] = mapped_column(String(255))

    # WGS84 point
    latitude: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    longitude: Mapped[Optional[float]] = mapped_column(Float, nullable=True)

    competition = relationship("Competition", back_populates="matches")

    def __repr__(self):
        return f"<Match(external_id={self.external_id}, {self.team_home} vs {self.team_away})>"
