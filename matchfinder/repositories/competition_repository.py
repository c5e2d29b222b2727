import logging
from typing import List

from sqlalchemy import select
from sqlalchemy.orm import Session

from matchfinder.core.database import dialect_insert
from matchfinder.models.competition import Competition

logger = logging.getLogger(__name__)


class CompetitionRepository:
    def __init__(self, db: Session):
        self.db = db

    def upsert(self, competition_id: int, name: str) -> None:
        """Insert by provider id, overwriting the name on conflict."""
        stmt = dialect_insert(self.db, Competition).values(id=competition_id, name=name)
        stmt = stmt.on_conflict_do_update(index_elements=["id"], set_={"name": stmt.excluded.name})
        self.db.execute(stmt)
        self.db.commit()

    def list_all(self) -> List[Competition]:
        return list(self.db.scalars(select(Competition).order_by(Competition.id)))

    def get_or_create_by_name(self, name: str) -> Competition:
        """Exact-name lookup; creates the competition when absent (id allocated by the database)."""
        competition = self.db.scalars(
            select(Competition).where(Competition.name == name).order_by(Competition.id).limit(1)
        ).first()
        if competition is not None:
            logger.info(f"Found existing competition '{name}' => id {competition.id}")
            return competition

        competition = Competition(name=name)
        self.db.add(competition)
        self.db.flush()
        logger.info(f"Created new competition '{name}' => id {competition.id}")
        return competition
