from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from colts_league.core.database import get_db
from colts_league.core.data_store import SqlAlchemyDataStore
from colts_league.core.errors import LeagueError
from colts_league.core.season_config import SeasonConfig, get_season_config
from colts_league.standings.services.standings_engine import StandingsEngine
from colts_league.standings.services.league_table_service import LeagueTableService

router = APIRouter()


def get_standings_engine(
    db: Session = Depends(get_db),
    season_config: SeasonConfig = Depends(get_season_config),
) -> StandingsEngine:
    return StandingsEngine(SqlAlchemyDataStore(db), season_config)


def get_league_table_service(
    db: Session = Depends(get_db),
    season_config: SeasonConfig = Depends(get_season_config),
) -> LeagueTableService:
    return LeagueTableService(SqlAlchemyDataStore(db), season_config)


@router.post("/recalculate/{league_id}")
async def recalculate_league(league_id: str, season: str, engine: StandingsEngine = Depends(get_standings_engine)):
    """Recalculate and save one league's standings for the given season label."""
    return await engine.compute_and_persist_league_standings(league_id, season)


@router.post("/recalculate-fixture/{fixture_id}")
async def recalculate_for_fixture(fixture_id: str, engine: StandingsEngine = Depends(get_standings_engine)):
    """Recalculate the league that a fixture belongs to."""
    return await engine.recalculate_for_fixture(fixture_id)


@router.post("/recalculate-all/")
async def recalculate_all(engine: StandingsEngine = Depends(get_standings_engine)):
    """Recalculate every league; non-current seasons are skipped."""
    return await engine.recalculate_all_leagues()


@router.get("/league/{league_id}")
async def get_league_table(league_id: str, service: LeagueTableService = Depends(get_league_table_service)):
    try:
        table = await service.get_league_table(league_id)
    except LeagueError as e:
        raise HTTPException(status_code=500, detail=e.message)

    if not table:
        return {"message": "No standings found for this league.", "table": []}
    return {"table": table}


@router.get("/current/")
async def get_current_tables(service: LeagueTableService = Depends(get_league_table_service)):
    try:
        tables = await service.get_current_season_tables()
    except LeagueError as e:
        raise HTTPException(status_code=500, detail=e.message)
    return {"season": service.season_config.current_season, "leagues": tables}
