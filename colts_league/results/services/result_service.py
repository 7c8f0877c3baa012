import logging
from datetime import datetime
from typing import Any, Dict, Optional

from colts_league.core.data_store import DataStore, FIXTURES, RESULTS
from colts_league.core.errors import DataStoreError, NotFoundError
from colts_league.fixtures.models.fixture_model import FixtureStatus
from colts_league.results.schemas.result_schema import ResultSubmission
from colts_league.results.schemas.scorer_schema import scorers_to_json
from colts_league.standings.services.standings_engine import StandingsEngine

logger = logging.getLogger(__name__)


class ResultService:
    def __init__(self, data_store: DataStore, standings_engine: StandingsEngine):
        self.data_store = data_store
        self.standings_engine = standings_engine

    async def get_fixture(self, fixture_id) -> Dict[str, Any]:
        result = await self.data_store.read(FIXTURES, {"id": fixture_id})
        if not result.ok:
            raise DataStoreError(FIXTURES, f"Failed to fetch fixtures: {result.error}", result.error)
        if not result.records:
            raise NotFoundError("Fixture not found")
        return result.records[0]

    async def _set_fixture_status(self, fixture_id, status: FixtureStatus):
        result = await self.data_store.update(FIXTURES, {"status": int(status)}, {"id": fixture_id})
        if not result.ok:
            raise DataStoreError(FIXTURES, "Failed to update match status", result.error)

    async def record_result(self, fixture_id, submission: ResultSubmission, recalculate: bool = True) -> Dict[str, Any]:
        """
        Save the score for a fixture and move it to the submitted status.

        Cancelled/abandoned matches only change status. A completed match
        triggers a standings recalculation for its league; a failed
        recalculation is reported but does not undo the saved result. A failed
        status update is returned under "error" with the saved result.
        """
        fixture = await self.get_fixture(fixture_id)

        if submission.status in (FixtureStatus.CANCELLED, FixtureStatus.ABANDONED):
            await self._set_fixture_status(fixture_id, submission.status)
            label = "cancelled" if submission.status == FixtureStatus.CANCELLED else "abandoned"
            return {"message": f"Match marked as {label}", "fixture": fixture, "result": None, "standings": None}

        result_data = {
            "homeScore": submission.home_score,
            "awayScore": submission.away_score,
            "homeScorers": scorers_to_json(submission.home_scorers),
            "awayScorers": scorers_to_json(submission.away_scorers),
            "submittedBy": submission.submitted_by,
            "dateSubmitted": datetime.now(),
        }

        existing = await self.data_store.read(RESULTS, {"fixtureID": fixture_id})
        if not existing.ok:
            raise DataStoreError(RESULTS, f"Failed to fetch results: {existing.error}", existing.error)

        if existing.records:
            saved = await self.data_store.update(RESULTS, result_data, {"fixtureID": fixture_id})
        else:
            saved = await self.data_store.create(RESULTS, {"fixtureID": fixture_id, **result_data})
        if not saved.ok:
            raise DataStoreError(RESULTS, "Failed to save result", saved.error)

        try:
            await self._set_fixture_status(fixture_id, submission.status)
        except DataStoreError as e:
            # The result row stays; standings wait until the status is fixed
            logger.error(f"❌ Result saved for fixture {fixture_id} but status update failed: {e.details}")
            return {
                "message": "Result saved but failed to update fixture status",
                "fixture": fixture,
                "result": saved.records[0],
                "standings": None,
                "error": e.details,
            }

        standings: Optional[Any] = None
        if recalculate and submission.status == FixtureStatus.COMPLETED:
            logger.info(f"🔁 Updating standings for fixture {fixture_id}")
            standings = await self.standings_engine.recalculate_for_fixture(fixture_id)
            if not standings.success:
                logger.error(f"❌ Error updating standings for fixture {fixture_id}: {standings.message}")

        return {
            "message": "Result saved",
            "fixture": {**fixture, "status": int(submission.status)},
            "result": saved.records[0],
            "standings": standings,
        }
