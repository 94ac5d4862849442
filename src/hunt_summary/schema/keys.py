"""Attribute key naming used by the game client for match data."""

import re
from dataclasses import dataclass, field
from typing import Dict, List, Tuple

from ..models.attributes import AttributeIndex

NUM_TEAMS_KEY = "MissionBagNumTeams"

PLAYER_ENTRY_RE = re.compile(r"^MissionBagPlayer_(\d+)_(\d+)_(\w+)$")

# Older dumps are grouped as 3 * team + player; teams in the game hold at most three hunters.
LEGACY_PLAYER_STRIDE = 3

# Static header set of the fixed schema, in output order.
FIXED_PLAYER_FIELDS: Tuple[str, ...] = (
    "blood_line_name",
    "profileid",
    "mmr",
    "bountyextracted",
    "bountypickedup",
    "downedbyme",
    "downedbyteammate",
    "downedme",
    "downedteammate",
    "hadWellspring",
    "hadbounty",
    "ispartner",
    "issoulsurvivor",
    "killedbyme",
    "killedbyteammate",
    "killedme",
    "killedteammate",
)


def team_players_key(team: int) -> str:
    return f"MissionBagTeam_{team}_numplayers"


def player_field_key(team: int, player: int, field_name: str) -> str:
    return f"MissionBagPlayer_{team}_{player}_{field_name}"


def composite_player_key(team: int, player: int) -> int:
    return LEGACY_PLAYER_STRIDE * team + player


@dataclass
class PlayerGroup:
    """Entries of one player slot under the legacy composite key."""

    composite_key: int
    team: int
    player: int
    fields: List[Tuple[str, str]] = field(default_factory=list)

    @property
    def first_value(self) -> str:
        return self.fields[0][1] if self.fields else ""

    def value_of(self, field_name: str, default: str = "") -> str:
        for name, value in self.fields:
            if name == field_name:
                return value
        return default


def group_player_entries(index: AttributeIndex, num_teams: int) -> List[PlayerGroup]:
    """Group ``MissionBagPlayer_*`` entries below ``num_teams`` by composite key.

    Groups come back in increasing composite-key order; fields inside a group
    keep the dump order. A group takes its team and player numbers from the
    first entry seen for its key.
    """
    groups: Dict[int, PlayerGroup] = {}
    for name, value in index.items():
        match = PLAYER_ENTRY_RE.match(name)
        if match is None:
            continue
        team, player = int(match.group(1)), int(match.group(2))
        if team >= num_teams:
            continue
        key = composite_player_key(team, player)
        group = groups.get(key)
        if group is None:
            group = groups[key] = PlayerGroup(composite_key=key, team=team, player=player)
        group.fields.append((match.group(3), value))
    return [groups[key] for key in sorted(groups)]
