import logging
from io import StringIO

import pandas as pd
from fastapi import UploadFile

from colts_league.core.errors import LeagueError
from colts_league.fixtures.models.fixture_model import FixtureStatus
from colts_league.results.schemas.result_schema import ResultSubmission, coerce_score
from colts_league.results.schemas.scorer_schema import parse_scorers
from colts_league.results.services.result_service import ResultService

logger = logging.getLogger(__name__)

REQUIRED_COLUMNS = {"fixture_id", "home_score", "away_score"}


def _cell(row, column):
    """Row value, or None for a missing column / empty cell."""
    if column not in row:
        return None
    value = row[column]
    return None if pd.isna(value) else value


def _status(value) -> FixtureStatus:
    """Status cell as a FixtureStatus; blank means Completed."""
    if value is None or not str(value).strip():
        return FixtureStatus.COMPLETED
    try:
        return FixtureStatus(int(str(value).strip()))
    except ValueError:
        raise ValueError(f"Invalid status {value!r}: expected an integer 0-4")


class ResultUploadService:
    def __init__(self, result_service: ResultService):
        self.result_service = result_service
        self.standings_engine = result_service.standings_engine

    async def process_csv(self, file: UploadFile):
        """Reads the CSV, records each result, then recalculates each affected league once."""
        contents = await file.read()
        try:
            text = contents.decode("utf-8")
        except UnicodeDecodeError as e:
            logger.error(f"❌ Results CSV is not UTF-8: {e}")
            return {"error": f"Results CSV must be UTF-8 encoded: {e}"}
        return await self.process_text(text)

    async def process_text(self, text: str):
        try:
            df = pd.read_csv(StringIO(text), dtype=str)
        except (ValueError, pd.errors.ParserError) as e:
            return {"error": f"Failed to read results CSV: {e}"}

        # Rename columns to match expected format
        df.columns = [col.strip().lower().replace(' ', '_') for col in df.columns]
        missing = REQUIRED_COLUMNS - set(df.columns)
        if missing:
            return {"error": f"Results CSV is missing column(s): {', '.join(sorted(missing))}"}

        recorded = 0
        errors = []
        league_fixture = {}  # leagueID -> one fixture to recalculate through

        for index, row in df.iterrows():
            fixture_id = _cell(row, "fixture_id")
            try:
                submission = ResultSubmission(
                    home_score=coerce_score(_cell(row, "home_score")),
                    away_score=coerce_score(_cell(row, "away_score")),
                    home_scorers=parse_scorers(_cell(row, "home_scorers")),
                    away_scorers=parse_scorers(_cell(row, "away_scorers")),
                    status=_status(_cell(row, "status")),
                    submitted_by=_cell(row, "submitted_by"),
                )
                saved = await self.result_service.record_result(fixture_id, submission, recalculate=False)
            except (LeagueError, ValueError) as e:
                message = e.message if isinstance(e, LeagueError) else str(e)
                logger.error(f"❌ Row {index + 1} (fixture {fixture_id}): {message}")
                errors.append({"row": index + 1, "fixture_id": fixture_id, "error": message})
                continue

            if saved.get("error"):
                errors.append({"row": index + 1, "fixture_id": fixture_id, "error": saved["message"]})
                continue

            recorded += 1
            if submission.status == FixtureStatus.COMPLETED:
                league_fixture.setdefault(saved["fixture"].get("leagueID"), fixture_id)

        standings = {}
        for league_id, fixture_id in league_fixture.items():
            standings[str(league_id)] = await self.standings_engine.recalculate_for_fixture(fixture_id)

        return {
            "message": f"Results CSV processed: {recorded} recorded, {len(errors)} failed",
            "recorded": recorded,
            "errors": errors,
            "standings": standings,
        }
