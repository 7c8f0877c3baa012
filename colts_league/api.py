from fastapi import APIRouter
from colts_league.standings.controllers.standings_controller import router as standings_router
from colts_league.results.controllers.results_controller import router as results_router

api_router = APIRouter()

api_router.include_router(standings_router, prefix="/standing", tags=["standing"])
api_router.include_router(results_router, prefix="/result", tags=["result"])
