from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, declarative_base
from sqlalchemy.pool import StaticPool
from colts_league.core.config import settings


def _engine_options(url: str) -> dict:
    if url.startswith("sqlite"):
        # SQLite connections are shared across FastAPI worker threads
        options = {"connect_args": {"check_same_thread": False}}
        if ":memory:" in url:
            options["poolclass"] = StaticPool
        return options
    return {
        "pool_pre_ping": True,   # tests connections before using them
        "pool_recycle": 1800,    # recycle every 30 min to avoid stale connections
        "pool_size": 10,
        "max_overflow": 10,
        "pool_timeout": 30,
    }


engine = create_engine(settings.DATABASE_URL, **_engine_options(settings.DATABASE_URL))

# Create session factory
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# Base class for models
Base = declarative_base()

# Dependency to get DB session
def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()

# Function to initialize the database
def init_db(bind=None):
    # Import all models here
    from colts_league.leagues.models.leagues_models import League
    from colts_league.teams.models.team_model import Team
    from colts_league.fixtures.models.fixture_model import Fixture
    from colts_league.results.models.result_model import Result
    from colts_league.standings.models.standings_model import Standing

    # Use context manager to ensure connection is released
    with (bind or engine).begin() as conn:
        Base.metadata.create_all(bind=conn)
