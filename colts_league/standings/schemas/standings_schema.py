import enum
from typing import Any, Dict, List

from pydantic import BaseModel, Field

STANDINGS_UPDATED = "Standings updated successfully"
NOT_CURRENT_SEASON = "Not current season"


class RecalculationStatus(str, enum.Enum):
    UPDATED = "updated"
    SKIPPED = "skipped"
    FAILED = "failed"


class TeamFailure(BaseModel):
    team_id: Any
    reason: str


class StandingsOutcome(BaseModel):
    success: bool
    message: str
    status: RecalculationStatus
    # Ranked rows with a transient 1-based position
    table: List[Dict[str, Any]] = Field(default_factory=list)
    failed_teams: List[TeamFailure] = Field(default_factory=list)


class BulkRecalculationOutcome(BaseModel):
    success: bool
    message: str
    updated: int = 0
    skipped: int = 0
    failed: int = 0
    leagues: Dict[str, StandingsOutcome] = Field(default_factory=dict)
