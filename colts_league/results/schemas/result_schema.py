import math
import re
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from colts_league.fixtures.models.fixture_model import FixtureStatus
from colts_league.results.schemas.scorer_schema import Scorer, parse_scorers

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")


def coerce_score(value: Any) -> int:
    """Read a stored score as an int; anything non-numeric counts as 0."""
    if isinstance(value, bool) or value is None:
        return 0
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if math.isfinite(value) else 0
    match = _LEADING_INT.match(str(value))
    return int(match.group(1)) if match else 0


class ResultLine(BaseModel):
    """A Result row decoded once at the storage boundary."""

    fixture_id: Any
    home_score: int = 0
    away_score: int = 0
    home_scorers: List[Scorer] = Field(default_factory=list)
    away_scorers: List[Scorer] = Field(default_factory=list)

    @classmethod
    def from_record(cls, record: Dict[str, Any]) -> "ResultLine":
        return cls(
            fixture_id=record.get("fixtureID"),
            home_score=coerce_score(record.get("homeScore")),
            away_score=coerce_score(record.get("awayScore")),
            home_scorers=parse_scorers(record.get("homeScorers")),
            away_scorers=parse_scorers(record.get("awayScorers")),
        )


class ResultSubmission(BaseModel):
    """Payload of the admin result form."""

    model_config = ConfigDict(populate_by_name=True)

    home_score: int = Field(0, ge=0, alias="homeScore")
    away_score: int = Field(0, ge=0, alias="awayScore")
    home_scorers: List[Scorer] = Field(default_factory=list, alias="homeScorers")
    away_scorers: List[Scorer] = Field(default_factory=list, alias="awayScorers")
    status: FixtureStatus = FixtureStatus.COMPLETED
    submitted_by: Optional[str] = Field(None, alias="submittedBy")
