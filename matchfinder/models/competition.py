from sqlalchemy import Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from matchfinder.core.database import Base


class Competition(Base):
    __tablename__ = "competitions"

    # Provider id for imported competitions, autoincrement for admin-created ones
    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(255), index=True)

    matches = relationship("Match", back_populates="competition")

    def __repr__(self):
        return f"<Competition(id={self.id}, name='{self.name}')>"
