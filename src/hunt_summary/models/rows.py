"""Team and player row Pydantic models."""

from enum import Enum
from typing import List, Tuple

from pydantic import BaseModel, ConfigDict, Field, model_validator


class StrategyKind(str, Enum):
    """Schema discovery strategies."""
    PATTERN = "pattern"
    FIXED = "fixed"


class TeamSlot(BaseModel):
    """Number of player slots a team occupies in the dump."""

    model_config = ConfigDict(frozen=True)

    team_index: int = Field(..., ge=0, description="0-based team index")
    player_count: int = Field(..., ge=0, description="Player slots declared or discovered")


class PlayerRecord(BaseModel):
    """One output row: a player slot and its field values in header order."""

    team_index: int = Field(..., ge=0, description="0-based team index")
    player_index: int = Field(..., ge=0, description="0-based player index within the team")
    field_values: List[Tuple[str, str]] = Field(default_factory=list, description="(header, value) pairs")

    @property
    def headers(self) -> List[str]:
        return [header for header, _ in self.field_values]

    @property
    def values(self) -> List[str]:
        return [value for _, value in self.field_values]

    def cells(self, zero_based: bool = False) -> List[str]:
        """Render the row as CSV cells, Team and Player first."""
        offset = 0 if zero_based else 1
        return [str(self.team_index + offset), str(self.player_index + offset), *self.values]


class ResolvedSchema(BaseModel):
    """Team layout and header set of one dump, as found by a resolver."""

    strategy: StrategyKind
    num_teams: int = Field(..., ge=0)
    teams: List[TeamSlot] = Field(default_factory=list)
    headers: List[str] = Field(default_factory=list)

    @model_validator(mode='after')
    def check_teams_contiguous(self) -> "ResolvedSchema":
        for position, slot in enumerate(self.teams):
            if slot.team_index != position:
                raise ValueError(f"team slots must be contiguous from 0, got {slot.team_index} at {position}")
            if slot.team_index >= self.num_teams:
                raise ValueError(f"team {slot.team_index} is not below num_teams={self.num_teams}")
        return self

    @property
    def header_row(self) -> List[str]:
        return ["Team", "Player", *self.headers]
