import enum
import json
import logging
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator

logger = logging.getLogger(__name__)

PENALTY_TRY_NAME = "Penalty Try"


class ScoreType(str, enum.Enum):
    TRY = "try"
    CONVERSION = "conversion"
    PENALTY = "penalty"
    DROP_GOAL = "dropGoal"


DEFAULT_POINTS = {
    ScoreType.TRY: 5,
    ScoreType.CONVERSION: 2,
    ScoreType.PENALTY: 3,
    ScoreType.DROP_GOAL: 3,
}


class Scorer(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    player_name: str = Field("", alias="playerName")
    score_type: ScoreType = Field(alias="scoreType")
    # Stored points are authoritative; the type only supplies a default
    points: Optional[int] = None
    minute: Optional[int] = None
    is_penalty_try: bool = Field(False, alias="isPenaltyTry")

    @field_validator("points", "minute", mode="before")
    @classmethod
    def _lenient_int(cls, value: Any):
        # Unparseable values such as "80+2" read as unknown; the entry still counts
        if value is None or isinstance(value, bool):
            return None
        if isinstance(value, int):
            return value
        try:
            return int(str(value).strip())
        except ValueError:
            return None

    @field_validator("player_name", mode="before")
    @classmethod
    def _name_or_blank(cls, value: Any):
        return "" if value is None else str(value)

    @field_validator("is_penalty_try", mode="before")
    @classmethod
    def _flag_or_false(cls, value: Any):
        if value is None or isinstance(value, bool):
            return bool(value)
        return str(value).strip().lower() in ("true", "1", "yes")

    @model_validator(mode="after")
    def _apply_defaults(self):
        if self.is_penalty_try:
            self.player_name = PENALTY_TRY_NAME
            self.score_type = ScoreType.TRY
        if self.points is None:
            self.points = DEFAULT_POINTS[self.score_type]
        return self


def parse_scorers(value: Any) -> List[Scorer]:
    """
    Decode a stored scorer field into Scorer objects.

    Accepts None, a list of dicts/Scorers, or a JSON string of that list.
    Undecodable documents become an empty list; entries without a usable
    scoreType are dropped.
    Both cases are logged, neither raises.
    """
    if value is None or value == "":
        return []

    if isinstance(value, (str, bytes, bytearray)):
        try:
            value = json.loads(value)
        except ValueError as e:
            logger.error(f"❌ Error parsing scorers JSON, treating as no scorers: {e}")
            return []
        if value is None:
            return []

    if not isinstance(value, list):
        logger.error(f"❌ Scorers must be a list, got {type(value).__name__}; treating as no scorers")
        return []

    scorers = []
    for entry in value:
        if isinstance(entry, Scorer):
            scorers.append(entry)
            continue
        try:
            scorers.append(Scorer.model_validate(entry))
        except ValidationError as e:
            logger.error(f"❌ Skipping invalid scorer entry {entry!r}: {e.errors()}")
    return scorers


def count_tries(scorers: List[Scorer]) -> int:
    return sum(1 for scorer in scorers if scorer.score_type == ScoreType.TRY)


def scorers_to_json(scorers: List[Scorer]) -> str:
    return json.dumps([scorer.model_dump(by_alias=True, mode="json") for scorer in scorers])
