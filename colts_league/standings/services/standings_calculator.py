"""
Rugby union league table arithmetic.

- Win: 4 points, draw: 2 points, loss: 0 points
- Losing by 7 or fewer: +1 bonus point
- Scoring 4 or more tries: +1 bonus point (independent of the result)
- Ranked by points, then points difference, then points for
"""
from typing import Any, Dict, Iterable, List, Mapping

from colts_league.fixtures.models.fixture_model import FixtureStatus
from colts_league.results.schemas.result_schema import ResultLine
from colts_league.results.schemas.scorer_schema import count_tries

WIN_POINTS = 4
DRAW_POINTS = 2
LOSING_BONUS_MARGIN = 7
TRY_BONUS_THRESHOLD = 4

STANDING_FIELDS = (
    "played", "won", "drawn", "lost",
    "pointsFor", "pointsAgainst", "pointsDifference",
    "bonusPoints", "points",
)


def empty_standing(team_id) -> Dict[str, Any]:
    return {"teamID": team_id, **{field: 0 for field in STANDING_FIELDS}}


def is_completed(fixture: Mapping[str, Any]) -> bool:
    try:
        return int(fixture.get("status")) == FixtureStatus.COMPLETED
    except (TypeError, ValueError):
        return False


def _award_bonus(standing: Dict[str, Any]):
    standing["bonusPoints"] += 1
    standing["points"] += 1


def apply_result(home: Dict[str, Any], away: Dict[str, Any], result: ResultLine):
    """Accrue one completed match into both teams' running totals."""
    home_score, away_score = result.home_score, result.away_score

    home["played"] += 1
    away["played"] += 1

    home["pointsFor"] += home_score
    home["pointsAgainst"] += away_score
    away["pointsFor"] += away_score
    away["pointsAgainst"] += home_score

    if home_score > away_score:
        home["won"] += 1
        home["points"] += WIN_POINTS
        away["lost"] += 1
        if away_score + LOSING_BONUS_MARGIN >= home_score:
            _award_bonus(away)
    elif away_score > home_score:
        away["won"] += 1
        away["points"] += WIN_POINTS
        home["lost"] += 1
        if home_score + LOSING_BONUS_MARGIN >= away_score:
            _award_bonus(home)
    else:
        home["drawn"] += 1
        away["drawn"] += 1
        home["points"] += DRAW_POINTS
        away["points"] += DRAW_POINTS

    if count_tries(result.home_scorers) >= TRY_BONUS_THRESHOLD:
        _award_bonus(home)
    if count_tries(result.away_scorers) >= TRY_BONUS_THRESHOLD:
        _award_bonus(away)

    home["pointsDifference"] = home["pointsFor"] - home["pointsAgainst"]
    away["pointsDifference"] = away["pointsFor"] - away["pointsAgainst"]


def compute_standings(
    league_id,
    fixtures: Iterable[Mapping[str, Any]],
    results_by_fixture: Mapping[Any, ResultLine],
) -> List[Dict[str, Any]]:
    """
    Build fresh, unranked totals for every team that appears in a completed
    fixture of ``league_id``. Completed fixtures without a result still
    register their teams but add nothing to the table.
    """
    league_fixtures = [
        fixture for fixture in fixtures
        if fixture.get("leagueID") == league_id and is_completed(fixture)
    ]

    standings: Dict[Any, Dict[str, Any]] = {}
    for fixture in league_fixtures:
        for team_id in (fixture.get("homeTeam"), fixture.get("awayTeam")):
            if team_id not in standings:
                standings[team_id] = empty_standing(team_id)

    for fixture in league_fixtures:
        result = results_by_fixture.get(fixture.get("id"))
        if result is None:
            continue
        apply_result(standings[fixture.get("homeTeam")], standings[fixture.get("awayTeam")], result)

    return list(standings.values())


def standing_sort_key(standing: Mapping[str, Any]):
    return (
        -int(standing.get("points") or 0),
        -int(standing.get("pointsDifference") or 0),
        -int(standing.get("pointsFor") or 0),
    )


def rank_standings(standings: Iterable[Mapping[str, Any]]) -> List[Dict[str, Any]]:
    """Stable sort by the league comparator and attach a 1-based position."""
    ranked = sorted(standings, key=standing_sort_key)
    return [{**standing, "position": index} for index, standing in enumerate(ranked, start=1)]
