from typing import Any, Dict, List

from colts_league.core.data_store import DataStore, LEAGUES, STANDINGS, TEAMS
from colts_league.core.errors import DataStoreError
from colts_league.core.season_config import SeasonConfig
from colts_league.standings.services.standings_calculator import rank_standings


class LeagueTableService:
    def __init__(self, data_store: DataStore, season_config: SeasonConfig):
        self.data_store = data_store
        self.season_config = season_config

    async def _read(self, table: str, filter=None) -> List[Dict[str, Any]]:
        result = await self.data_store.read(table, filter)
        if not result.ok:
            raise DataStoreError(table, f"Failed to fetch {table}: {result.error}", result.error)
        return result.records

    async def _team_names(self) -> Dict[Any, str]:
        return {team["id"]: team.get("teamName") for team in await self._read(TEAMS)}

    async def get_league_table(self, league_id, team_names=None) -> List[Dict[str, Any]]:
        """Stored standings for one league, ranked, with positions and team names."""
        standings = await self._read(STANDINGS, {"leagueID": league_id})
        if team_names is None:
            team_names = await self._team_names()

        table = rank_standings(standings)
        for row in table:
            row["teamName"] = team_names.get(row["teamID"]) or "Unknown"
        return table

    async def get_current_season_tables(self) -> List[Dict[str, Any]]:
        """Tables for every current-season league that has standings."""
        leagues = await self._read(LEAGUES, {"leagueSeason": self.season_config.current_season})
        team_names = await self._team_names()

        tables = []
        for league in leagues:
            table = await self.get_league_table(league["id"], team_names)
            if not table:
                continue
            tables.append({
                "leagueID": league["id"],
                "leagueName": league.get("leagueName"),
                "leagueSeason": league.get("leagueSeason"),
                "table": table,
            })
        return tables
