from fastapi import Depends, FastAPI
import logging
from fastapi.middleware.cors import CORSMiddleware
from colts_league.core.config import settings
from colts_league.core.database import init_db
from colts_league.core.season_config import SeasonConfig, get_season_config, load_season_config
from colts_league.api import api_router
from colts_league.core.scheduler import start_scheduler

# Setup logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

app = FastAPI()


# Allow CORS for all origins (the admin SPA is served from a different host)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

@app.on_event("startup")
async def startup():
    # Loaded once; never raises, falls back to settings.FALLBACK_SEASON
    app.state.season_config = await load_season_config()
    try:
        init_db()  # Calls Base.metadata.create_all(bind=engine)
        logger.info("✅ Database connected and tables created.")
    except Exception as e:
        logger.error(f"❌ Database connection error: {e}")

    if settings.SCHEDULER_ENABLED:
        start_scheduler()
        logger.info("⏰ Scheduler started.")

@app.get("/")
async def home():
    return {"message": "Welcome to the Colts League backend"}

@app.get("/season/")
async def current_season(season_config: SeasonConfig = Depends(get_season_config)):
    return {"currentSeason": season_config.current_season, "source": season_config.source}

# Include all API routes
app.include_router(api_router)
