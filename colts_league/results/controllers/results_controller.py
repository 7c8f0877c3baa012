from fastapi import APIRouter, Depends, File, HTTPException, UploadFile
from colts_league.core.errors import DataStoreError, LeagueError, NotFoundError
from colts_league.results.schemas.result_schema import ResultSubmission
from colts_league.results.services.result_service import ResultService
from colts_league.results.services.result_upload_service import ResultUploadService
from colts_league.standings.controllers.standings_controller import get_standings_engine
from colts_league.standings.services.standings_engine import StandingsEngine

router = APIRouter()


def get_result_service(engine: StandingsEngine = Depends(get_standings_engine)) -> ResultService:
    return ResultService(engine.data_store, engine)


@router.post("/fixture/{fixture_id}")
async def record_result(
    fixture_id: str,
    submission: ResultSubmission,
    service: ResultService = Depends(get_result_service),
):
    """Save a fixture's result and refresh its league standings."""
    try:
        return await service.record_result(fixture_id, submission)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=e.message)
    except DataStoreError as e:
        raise HTTPException(status_code=500, detail=e.message)
    except LeagueError as e:
        raise HTTPException(status_code=400, detail=e.message)


@router.post("/upload-results-csv/")
async def upload_csv(
    file: UploadFile = File(...),
    service: ResultService = Depends(get_result_service),
):
    """Upload CSV and delegate processing to the service layer."""
    upload_service = ResultUploadService(service)
    return await upload_service.process_csv(file)
