import asyncio
import os

# Keep the app's own engine off disk before anything imports settings
os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")
os.environ.setdefault("SEASON_CONFIG_SOURCE", "missing-season-config.json")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from colts_league.core.database import Base, get_db, init_db
from colts_league.core.data_store import SqlAlchemyDataStore
from colts_league.core.season_config import SeasonConfig, get_season_config
from colts_league.fixtures.models.fixture_model import Fixture, FixtureStatus
from colts_league.leagues.models.leagues_models import League
from colts_league.results.models.result_model import Result
from colts_league.standings.services.standings_engine import StandingsEngine
from colts_league.teams.models.team_model import Team
from colts_league.main import app

CURRENT_SEASON = "2025-26"

# In-memory SQLite database for testing
engine = create_engine(
    "sqlite:///:memory:",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)

TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def run(coro):
    return asyncio.run(coro)


def try_scorers(count, player="Winger"):
    return [{"playerName": f"{player} {i}", "scoreType": "try", "points": 5} for i in range(count)]


@pytest.fixture(scope="function")
def db_session():
    """Create a fresh in-memory database for each test."""
    init_db(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def season_config():
    return SeasonConfig(current_season=CURRENT_SEASON, source="tests")


@pytest.fixture
def data_store(db_session):
    return SqlAlchemyDataStore(db_session)


@pytest.fixture
def standings_engine(data_store, season_config):
    return StandingsEngine(data_store, season_config)


@pytest.fixture
def league_data(db_session):
    """Two leagues (current and historical) with four teams in the current one."""
    db_session.add_all([
        League(id="L1", league_name="Devon Colts", league_season=CURRENT_SEASON),
        League(id="L2", league_name="Devon Colts", league_season="2024-25"),
    ])
    db_session.add_all([
        Team(id=team_id, team_name=name, team_club=name, plays_in="L1")
        for team_id, name in [("A", "Exeter Colts"), ("B", "Plymouth Colts"), ("C", "Torquay Colts"), ("D", "Barnstaple Colts")]
    ])
    db_session.commit()
    return db_session


def add_fixture(db, fixture_id, home, away, status=FixtureStatus.COMPLETED, league_id="L1"):
    db.add(Fixture(id=fixture_id, league_id=league_id, home_team=home, away_team=away, venue="Sandy Park", status=int(status)))
    db.commit()


def add_result(db, fixture_id, home_score, away_score, home_scorers=None, away_scorers=None, result_id=None):
    db.add(Result(
        id=result_id or f"R-{fixture_id}",
        fixture_id=fixture_id,
        home_score=home_score,
        away_score=away_score,
        home_scorers=home_scorers,
        away_scorers=away_scorers,
    ))
    db.commit()


@pytest.fixture(scope="function")
def client(db_session, season_config):
    """TestClient with database and season dependency overrides."""
    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_season_config] = lambda: season_config
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()
