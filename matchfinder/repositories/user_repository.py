from typing import Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from matchfinder.models.user import User, ROLE_USER


class UserRepository:
    def __init__(self, db: Session):
        self.db = db

    def get_by_username(self, username: str) -> Optional[User]:
        return self.db.scalars(select(User).where(User.username == username)).first()

    def create(self, username: str, password_hash: str, email: str, country: str, role: str = ROLE_USER) -> User:
        user = User(username=username, password_hash=password_hash, email=email, country=country, role=role)
        self.db.add(user)
        self.db.commit()
        self.db.refresh(user)
        return user
