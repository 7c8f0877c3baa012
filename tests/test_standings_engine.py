import json

from colts_league.core.data_store import DataStoreResult, STANDINGS, SqlAlchemyDataStore
from colts_league.fixtures.models.fixture_model import FixtureStatus
from colts_league.standings.models.standings_model import Standing
from colts_league.standings.schemas.standings_schema import (
    NOT_CURRENT_SEASON,
    RecalculationStatus,
    STANDINGS_UPDATED,
)
from colts_league.standings.services.standings_engine import StandingsEngine
from conftest import CURRENT_SEASON, add_fixture, add_result, run, try_scorers


class CountingDataStore(SqlAlchemyDataStore):
    def __init__(self, db, fail_reads=(), fail_create_for=()):
        super().__init__(db)
        self.fail_reads = set(fail_reads)
        self.fail_create_for = set(fail_create_for)
        self.calls = []

    async def read(self, table, filter=None, order_by=None):
        self.calls.append(("read", table))
        if table in self.fail_reads:
            return DataStoreResult.failure(503, "backend unavailable")
        return await super().read(table, filter, order_by)

    async def create(self, table, record):
        self.calls.append(("create", table))
        if record.get("teamID") in self.fail_create_for:
            return DataStoreResult.failure(500, "insert rejected")
        return await super().create(table, record)

    async def update(self, table, record, match_filter):
        self.calls.append(("update", table))
        return await super().update(table, record, match_filter)

    @property
    def writes(self):
        return [call for call in self.calls if call[0] in ("create", "update")]


def stored_standings(db, league_id="L1"):
    rows = db.query(Standing).filter(Standing.league_id == league_id).order_by(Standing.team_id).all()
    return {
        row.team_id: {
            "played": row.played, "won": row.won, "drawn": row.drawn, "lost": row.lost,
            "pointsFor": row.points_for, "pointsAgainst": row.points_against,
            "pointsDifference": row.points_difference, "bonusPoints": row.bonus_points,
            "points": row.points,
        }
        for row in rows
    }


def test_end_to_end_four_try_win(league_data, standings_engine):
    add_fixture(league_data, "F1", "A", "B")
    add_result(league_data, "F1", 20, 0, home_scorers=try_scorers(4), away_scorers=[])

    outcome = run(standings_engine.compute_and_persist_league_standings("L1", CURRENT_SEASON))

    assert outcome.success is True
    assert outcome.message == STANDINGS_UPDATED
    assert outcome.status == RecalculationStatus.UPDATED
    assert [(row["teamID"], row["position"]) for row in outcome.table] == [("A", 1), ("B", 2)]

    standings = stored_standings(league_data)
    assert standings["A"] == {
        "played": 1, "won": 1, "drawn": 0, "lost": 0, "pointsFor": 20, "pointsAgainst": 0,
        "pointsDifference": 20, "bonusPoints": 1, "points": 5,
    }
    assert standings["B"] == {
        "played": 1, "won": 0, "drawn": 0, "lost": 1, "pointsFor": 0, "pointsAgainst": 20,
        "pointsDifference": -20, "bonusPoints": 0, "points": 0,
    }


def test_losing_bonus_boundary(league_data, standings_engine):
    add_fixture(league_data, "F1", "A", "B")
    add_result(league_data, "F1", 20, 13)
    add_fixture(league_data, "F2", "C", "D")
    add_result(league_data, "F2", 20, 12)

    run(standings_engine.compute_and_persist_league_standings("L1", CURRENT_SEASON))
    standings = stored_standings(league_data)

    assert (standings["A"]["won"], standings["A"]["points"]) == (1, 4)
    assert (standings["B"]["lost"], standings["B"]["points"], standings["B"]["bonusPoints"]) == (1, 1, 1)
    assert (standings["D"]["points"], standings["D"]["bonusPoints"]) == (0, 0)


def test_draw_is_two_points_each(league_data, standings_engine):
    add_fixture(league_data, "F1", "A", "B")
    add_result(league_data, "F1", 15, 15)

    run(standings_engine.compute_and_persist_league_standings("L1", CURRENT_SEASON))
    standings = stored_standings(league_data)

    for team_id in ("A", "B"):
        assert standings[team_id]["drawn"] == 1
        assert standings[team_id]["points"] == 2
        assert standings[team_id]["pointsDifference"] == 0


def test_recalculation_is_idempotent(league_data, db_session, season_config):
    add_fixture(league_data, "F1", "A", "B")
    add_result(league_data, "F1", 27, 22, home_scorers=json.dumps(try_scorers(4)))
    add_fixture(league_data, "F2", "B", "C")
    add_result(league_data, "F2", 10, 10)
    engine = StandingsEngine(SqlAlchemyDataStore(db_session), season_config)

    run(engine.compute_and_persist_league_standings("L1", CURRENT_SEASON))
    first = stored_standings(db_session)
    first_ids = sorted(row.id for row in db_session.query(Standing).all())

    run(engine.compute_and_persist_league_standings("L1", CURRENT_SEASON))

    assert stored_standings(db_session) == first
    assert sorted(row.id for row in db_session.query(Standing).all()) == first_ids


def test_existing_rows_are_updated_not_duplicated(league_data, season_config):
    league_data.add(Standing(id="ST9", league_id="L1", team_id="A", played=9, won=9, points=99))
    league_data.commit()
    add_fixture(league_data, "F1", "A", "B")
    add_result(league_data, "F1", 3, 0)
    store = CountingDataStore(league_data)

    run(StandingsEngine(store, season_config).compute_and_persist_league_standings("L1", CURRENT_SEASON))

    rows = league_data.query(Standing).filter(Standing.team_id == "A").all()
    assert [row.id for row in rows] == ["ST9"]
    assert (rows[0].played, rows[0].points) == (1, 4)
    assert ("update", STANDINGS) in store.calls
    assert store.writes.count(("create", STANDINGS)) == 1


def test_non_current_season_is_skipped_without_writes(league_data, season_config):
    add_fixture(league_data, "F1", "A", "B", league_id="L2")
    add_result(league_data, "F1", 20, 0)
    store = CountingDataStore(league_data)

    outcome = run(StandingsEngine(store, season_config).compute_and_persist_league_standings("L2", "2024-25"))

    assert outcome.success is True
    assert outcome.status == RecalculationStatus.SKIPPED
    assert outcome.message == NOT_CURRENT_SEASON
    assert store.calls == []
    assert league_data.query(Standing).count() == 0


def test_non_contributing_fixtures_leave_played_at_zero(league_data, standings_engine):
    add_fixture(league_data, "F1", "A", "B", status=FixtureStatus.SCHEDULED)
    add_fixture(league_data, "F2", "A", "C", status=FixtureStatus.CANCELLED)
    add_result(league_data, "F2", 30, 0)
    add_fixture(league_data, "F3", "B", "D", status=FixtureStatus.ABANDONED)
    add_result(league_data, "F3", 7, 7)
    add_fixture(league_data, "F4", "C", "D")  # completed, no result

    outcome = run(standings_engine.compute_and_persist_league_standings("L1", CURRENT_SEASON))

    assert outcome.success is True
    standings = stored_standings(league_data)
    assert set(standings) == {"C", "D"}
    assert all(row["played"] == 0 and row["points"] == 0 for row in standings.values())


def test_malformed_scorers_do_not_abort(league_data, standings_engine):
    add_fixture(league_data, "F1", "A", "B")
    add_result(league_data, "F1", 25, 0, home_scorers="[{broken", away_scorers=None)

    outcome = run(standings_engine.compute_and_persist_league_standings("L1", CURRENT_SEASON))

    assert outcome.success is True
    assert stored_standings(league_data)["A"]["points"] == 4


def test_last_result_wins_for_duplicate_results(league_data, standings_engine):
    add_fixture(league_data, "F1", "A", "B")
    add_result(league_data, "F1", 10, 0, result_id="R1")
    add_result(league_data, "F1", 0, 10, result_id="R2")

    run(standings_engine.compute_and_persist_league_standings("L1", CURRENT_SEASON))
    standings = stored_standings(league_data)

    assert standings["B"]["won"] == 1
    assert standings["A"]["lost"] == 1


def test_fixture_read_failure_aborts_without_writes(league_data, season_config):
    add_fixture(league_data, "F1", "A", "B")
    add_result(league_data, "F1", 10, 0)
    store = CountingDataStore(league_data, fail_reads={"fixtures"})

    outcome = run(StandingsEngine(store, season_config).compute_and_persist_league_standings("L1", CURRENT_SEASON))

    assert outcome.success is False
    assert outcome.status == RecalculationStatus.FAILED
    assert "Failed to fetch fixtures" in outcome.message
    assert "backend unavailable" in outcome.message
    assert store.writes == []


def test_result_read_failure_aborts_without_writes(league_data, season_config):
    add_fixture(league_data, "F1", "A", "B")
    store = CountingDataStore(league_data, fail_reads={"results"})

    outcome = run(StandingsEngine(store, season_config).compute_and_persist_league_standings("L1", CURRENT_SEASON))

    assert outcome.success is False
    assert "Failed to fetch results" in outcome.message
    assert store.writes == []


def test_team_persistence_failure_is_reported_and_others_continue(league_data, season_config):
    add_fixture(league_data, "F1", "A", "B")
    add_result(league_data, "F1", 10, 0)
    store = CountingDataStore(league_data, fail_create_for={"A"})

    outcome = run(StandingsEngine(store, season_config).compute_and_persist_league_standings("L1", CURRENT_SEASON))

    assert outcome.success is True
    assert outcome.message == STANDINGS_UPDATED
    assert [(failure.team_id, failure.reason) for failure in outcome.failed_teams] == [("A", "insert rejected")]
    assert set(stored_standings(league_data)) == {"B"}


def test_recalculate_for_fixture_uses_the_league_season(league_data, standings_engine):
    add_fixture(league_data, "F1", "A", "B")
    add_result(league_data, "F1", 12, 5)
    add_fixture(league_data, "F2", "C", "D", league_id="L2")
    add_result(league_data, "F2", 12, 5)

    current = run(standings_engine.recalculate_for_fixture("F1"))
    historical = run(standings_engine.recalculate_for_fixture("F2"))

    assert current.status == RecalculationStatus.UPDATED
    assert historical.status == RecalculationStatus.SKIPPED
    assert stored_standings(league_data, "L2") == {}


def test_recalculate_for_missing_fixture_or_league(league_data, standings_engine):
    add_fixture(league_data, "F1", "A", "B", league_id="L404")

    missing_fixture = run(standings_engine.recalculate_for_fixture("F999"))
    missing_league = run(standings_engine.recalculate_for_fixture("F1"))

    assert (missing_fixture.success, missing_fixture.message) == (False, "Fixture not found")
    assert (missing_league.success, missing_league.message) == (False, "League not found")


def test_recalculate_all_leagues_counts_updates_and_skips(league_data, standings_engine):
    add_fixture(league_data, "F1", "A", "B")
    add_result(league_data, "F1", 12, 5)

    bulk = run(standings_engine.recalculate_all_leagues())

    assert bulk.success is True
    assert (bulk.updated, bulk.skipped, bulk.failed) == (1, 1, 0)
    assert bulk.message == "Recalculation complete! Updated 1 league(s), skipped 1 non-current season(s)."
    assert bulk.leagues["L2"].status == RecalculationStatus.SKIPPED


def test_recalculate_all_leagues_fails_when_leagues_unreadable(league_data, season_config):
    store = CountingDataStore(league_data, fail_reads={"leagues"})

    bulk = run(StandingsEngine(store, season_config).recalculate_all_leagues())

    assert bulk.success is False
    assert "Failed to fetch leagues" in bulk.message


def test_try_with_malformed_minute_still_earns_bonus(league_data, standings_engine):
    scorers = try_scorers(3) + [{"playerName": "Late", "scoreType": "try", "minute": "80+2"}]
    add_fixture(league_data, "F1", "A", "B")
    add_result(league_data, "F1", 20, 0, home_scorers=scorers, away_scorers=[])

    run(standings_engine.compute_and_persist_league_standings("L1", CURRENT_SEASON))

    standings = stored_standings(league_data)
    assert standings["A"]["bonusPoints"] == 1
    assert standings["A"]["points"] == 5
