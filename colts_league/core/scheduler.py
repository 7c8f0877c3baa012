import asyncio
import logging
from multiprocessing import Process
from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.cron import CronTrigger
from colts_league.core.config import settings

logger = logging.getLogger(__name__)


def recalculate_all_standings():
    """Nightly full recalculation, run in a separate process with its own session"""
    from colts_league.core.database import SessionLocal
    from colts_league.core.data_store import SqlAlchemyDataStore
    from colts_league.core.season_config import load_season_config
    from colts_league.standings.services.standings_engine import StandingsEngine

    async def task():
        season_config = await load_season_config()
        db = SessionLocal()
        try:
            engine = StandingsEngine(SqlAlchemyDataStore(db), season_config)
            outcome = await engine.recalculate_all_leagues()
            logger.info(f"📨 Nightly recalculation: {outcome.message}")
        finally:
            db.close()

    asyncio.run(task())


def start_scheduler(hour=None, minute=None):
    scheduler = BackgroundScheduler()
    trigger = CronTrigger(
        hour=settings.RECALCULATE_HOUR if hour is None else hour,
        minute=settings.RECALCULATE_MINUTE if minute is None else minute,
    )

    @scheduler.scheduled_job(trigger, id="nightly_standings")
    def nightly_standings_job():
        logger.info("🔁 Running nightly standings recalculation")
        p = Process(target=recalculate_all_standings)
        p.start()

    scheduler.start()
    logger.info(f"✅ Scheduler started: standings recalculation at {trigger}")
    return scheduler
