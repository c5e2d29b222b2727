import os

# Keep the app's own engine off disk while tests import it
os.environ["DATABASE_URL"] = "sqlite://"

from datetime import datetime, timezone

import pytest
import requests
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from matchfinder.api.deps import get_stadium_resolver
from matchfinder.core.config import Settings, get_settings
from matchfinder.core.database import Base, build_engine, get_db
from matchfinder.core.errors import Found, NotFound
from matchfinder.core.security import create_access_token
from matchfinder.main import app
from matchfinder.models.competition import Competition
from matchfinder.models.match import Match
from matchfinder.models import user  # noqa: F401
from matchfinder.services.stadium_resolver import Coordinates

engine = build_engine("sqlite://", poolclass=StaticPool)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


# --- Fake HTTP ---

class FakeResponse:
    def __init__(self, status_code=200, payload=None, text=None):
        self.status_code = status_code
        self._payload = payload
        self.text = text if text is not None else str(payload)

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} Error", response=self)

    def json(self):
        if self._payload is None:
            raise ValueError("No JSON payload configured")
        return self._payload


class FakeSession:
    """requests.Session stand-in. `handler(url, params)` returns a FakeResponse or raises."""

    def __init__(self, handler):
        self.handler = handler
        self.calls = []

    def get(self, url, params=None, headers=None, timeout=None):
        self.calls.append({"url": url, "params": params or {}, "headers": headers or {}})
        return self.handler(url, params or {})


class FakeResolver:
    """Stadium resolver with canned answers; unknown names are NotFound."""

    def __init__(self, stadiums=None, coordinates=None):
        self.stadiums = stadiums or {}
        self.coordinates = coordinates or {}
        self.stadium_calls = []
        self.coordinate_calls = []

    def resolve_stadium(self, team_name):
        self.stadium_calls.append(team_name)
        if team_name in self.stadiums:
            return Found(self.stadiums[team_name])
        return NotFound(f"no stadium for {team_name}")

    def resolve_coordinates(self, stadium_name):
        self.coordinate_calls.append(stadium_name)
        if stadium_name in self.coordinates:
            lat, lon = self.coordinates[stadium_name]
            return Found(Coordinates(lat=lat, lon=lon))
        return NotFound(f"no coordinates for {stadium_name}")


# --- Fixtures ---

@pytest.fixture
def settings():
    return Settings(
        DATABASE_URL="sqlite://",
        FOOTBALL_DATA_API_URL="https://football.test/v4/",
        FOOTBALL_DATA_API_KEY="football-key",
        OPENCAGE_API_URL="https://geo.test/json",
        OPENCAGE_API_KEY="geo-key",
        WIKIPEDIA_API_URL="https://wiki.test/w/api.php",
        IMPORT_HORIZON_DAYS=15,
        JWT_SECRET="test-secret",
    )


@pytest.fixture
def db_session():
    """Fresh in-memory database per test."""
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def fake_resolver():
    return FakeResolver(
        stadiums={"Arsenal FC": "Emirates Stadium"},
        coordinates={
            "Emirates Stadium": (51.5549, -0.1084),
            "Old Trafford": (53.4631, -2.2913),
        },
    )


@pytest.fixture
def client(db_session, settings, fake_resolver):
    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_settings] = lambda: settings
    app.dependency_overrides[get_stadium_resolver] = lambda: fake_resolver
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture
def user_headers(settings):
    return {"Authorization": f"Bearer {create_access_token(settings, 'fan', False)}"}


@pytest.fixture
def admin_headers(settings):
    return {"Authorization": f"Bearer {create_access_token(settings, 'boss', True)}"}


@pytest.fixture
def now():
    return datetime.now(timezone.utc).replace(microsecond=0)


@pytest.fixture
def add_match(db_session):
    """Insert a match (and its competition on first use) directly."""
    competitions = {}

    def _add(external_id, match_date, team_home="Arsenal FC", team_away="Chelsea FC",
             competition="Premier League", stadium="Emirates Stadium", lat=51.5549, lon=-0.1084):
        if competition not in competitions:
            comp = Competition(id=len(competitions) + 2000, name=competition)
            db_session.add(comp)
            db_session.flush()
            competitions[competition] = comp.id

        match = Match(
            external_id=external_id,
            competition_id=competitions[competition],
            team_home=team_home,
            team_away=team_away,
            match_date=match_date,
            stadium_name=stadium,
            latitude=lat,
            longitude=lon,
        )
        db_session.add(match)
        db_session.commit()
        return match

    return _add


