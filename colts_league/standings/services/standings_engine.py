import asyncio
import logging
from collections import defaultdict
from typing import Any, Dict, List

from colts_league.core.data_store import DataStore, FIXTURES, LEAGUES, RESULTS, STANDINGS
from colts_league.core.errors import DataStoreError, LeagueError, NotFoundError
from colts_league.core.season_config import SeasonConfig
from colts_league.results.schemas.result_schema import ResultLine
from colts_league.standings.schemas.standings_schema import (
    BulkRecalculationOutcome,
    NOT_CURRENT_SEASON,
    RecalculationStatus,
    STANDINGS_UPDATED,
    StandingsOutcome,
    TeamFailure,
)
from colts_league.standings.services.standings_calculator import (
    STANDING_FIELDS,
    compute_standings,
    rank_standings,
)

logger = logging.getLogger(__name__)

# One recalculation per league at a time within this process
_league_locks: Dict[str, asyncio.Lock] = defaultdict(asyncio.Lock)


class StandingsEngine:
    def __init__(self, data_store: DataStore, season_config: SeasonConfig):
        self.data_store = data_store
        self.season_config = season_config

    async def compute_and_persist_league_standings(self, league_id, league_season: str) -> StandingsOutcome:
        """
        Recompute a league's table from its completed fixtures and write one
        standings row per team (update if present, create otherwise).

        Leagues outside the configured current season are skipped without
        reading or writing anything.
        """
        if league_season != self.season_config.current_season:
            logger.info(f"⏭️ Skipping standings calculation for league {league_id} ({league_season}): not current season")
            return StandingsOutcome(success=True, message=NOT_CURRENT_SEASON, status=RecalculationStatus.SKIPPED)

        async with _league_locks[str(league_id)]:
            try:
                table = await self._compute_table(league_id)
            except LeagueError as e:
                logger.error(f"❌ Error calculating standings for league {league_id}: {e.message}")
                return StandingsOutcome(success=False, message=e.message, status=RecalculationStatus.FAILED)
            except Exception as e:
                logger.exception(f"❌ Unexpected error calculating standings for league {league_id}")
                return StandingsOutcome(success=False, message=str(e), status=RecalculationStatus.FAILED)

            failed_teams = await self._persist_table(league_id, table)

        logger.info(
            f"✅ Standings updated for league {league_id}: {len(table)} team(s), "
            f"{len(failed_teams)} persistence failure(s)"
        )
        return StandingsOutcome(
            success=True,
            message=STANDINGS_UPDATED,
            status=RecalculationStatus.UPDATED,
            table=table,
            failed_teams=failed_teams,
        )

    async def recalculate_for_fixture(self, fixture_id) -> StandingsOutcome:
        """Recalculate the league a fixture belongs to, using that league's stored season."""
        try:
            fixtures = await self._read(FIXTURES, {"id": fixture_id})
            if not fixtures:
                raise NotFoundError("Fixture not found")
            fixture = fixtures[0]

            leagues = await self._read(LEAGUES, {"id": fixture.get("leagueID")})
            if not leagues:
                raise NotFoundError("League not found")
            league = leagues[0]
        except LeagueError as e:
            logger.error(f"❌ Error updating standings for fixture {fixture_id}: {e.message}")
            return StandingsOutcome(success=False, message=e.message, status=RecalculationStatus.FAILED)

        return await self.compute_and_persist_league_standings(league["id"], league.get("leagueSeason"))

    async def recalculate_all_leagues(self) -> BulkRecalculationOutcome:
        """Run the league recalculation for every stored league, one after another."""
        try:
            leagues = await self._read(LEAGUES)
        except LeagueError as e:
            logger.error(f"❌ Error recalculating standings: {e.message}")
            return BulkRecalculationOutcome(success=False, message=f"Failed to recalculate standings: {e.message}")

        bulk = BulkRecalculationOutcome(success=True, message="")
        for league in leagues:
            logger.info(f"🔁 Recalculating standings for {league.get('leagueName')} ({league.get('leagueSeason')})")
            outcome = await self.compute_and_persist_league_standings(league["id"], league.get("leagueSeason"))
            bulk.leagues[str(league["id"])] = outcome

            if outcome.status == RecalculationStatus.SKIPPED:
                bulk.skipped += 1
            elif outcome.success:
                bulk.updated += 1
            else:
                bulk.failed += 1

        bulk.message = (
            f"Recalculation complete! Updated {bulk.updated} league(s), "
            f"skipped {bulk.skipped} non-current season(s)."
        )
        if bulk.failed:
            bulk.message += f" {bulk.failed} league(s) failed."
        return bulk

    async def _read(self, table: str, filter=None) -> List[Dict[str, Any]]:
        result = await self.data_store.read(table, filter)
        if not result.ok:
            raise DataStoreError(table, f"Failed to fetch {table}: {result.error}", result.error)
        return result.records

    async def _compute_table(self, league_id) -> List[Dict[str, Any]]:
        fixtures = await self._read(FIXTURES)
        results = await self._read(RESULTS)

        # Last row wins if a fixture has more than one result
        results_by_fixture = {}
        for record in results:
            results_by_fixture[record.get("fixtureID")] = ResultLine.from_record(record)

        return rank_standings(compute_standings(league_id, fixtures, results_by_fixture))

    async def _persist_table(self, league_id, table: List[Dict[str, Any]]) -> List[TeamFailure]:
        failed_teams = []
        for row in table:
            team_id = row["teamID"]
            standing_data = {
                "leagueID": league_id,
                "teamID": team_id,
                **{field: row[field] for field in STANDING_FIELDS},
            }
            try:
                reason = await self._upsert_standing(league_id, team_id, standing_data)
            except Exception as e:
                logger.exception(f"❌ Unexpected error saving standing for team {team_id}")
                reason = str(e)

            if reason:
                logger.error(f"❌ Failed to save standing for team {team_id} in league {league_id}: {reason}")
                failed_teams.append(TeamFailure(team_id=team_id, reason=reason))
        return failed_teams

    async def _upsert_standing(self, league_id, team_id, standing_data: Dict[str, Any]):
        """Returns None on success, otherwise the failure reason."""
        existing_result = await self.data_store.read(STANDINGS)
        if not existing_result.ok:
            return f"Failed to fetch standings: {existing_result.error}"

        existing = next(
            (
                standing for standing in existing_result.records
                if standing.get("leagueID") == league_id and standing.get("teamID") == team_id
            ),
            None,
        )
        if existing:
            outcome = await self.data_store.update(STANDINGS, standing_data, {"id": existing["id"]})
        else:
            outcome = await self.data_store.create(STANDINGS, standing_data)

        if not outcome.ok:
            return outcome.error or f"status {outcome.status}"
        return None
