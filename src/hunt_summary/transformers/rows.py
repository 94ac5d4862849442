"""Assemble ordered player rows from a resolved schema."""

from typing import List

from ..errors import MissingField
from ..hunt_logging import get_logger
from ..models.attributes import AttributeIndex
from ..models.rows import PlayerRecord, ResolvedSchema, StrategyKind
from ..schema.keys import group_player_entries, player_field_key

logger = get_logger(__name__)


def assemble_rows(index: AttributeIndex, schema: ResolvedSchema) -> List[PlayerRecord]:
    """Build one row per occupied player slot, in (team, player) order."""
    if schema.strategy == StrategyKind.FIXED:
        return assemble_fixed_rows(index, schema)
    return assemble_pattern_rows(index, schema)


def assemble_fixed_rows(index: AttributeIndex, schema: ResolvedSchema) -> List[PlayerRecord]:
    """Every declared slot gets a row; every header must be present.

    Raises:
        MissingField: naming the first absent ``MissionBagPlayer_*`` key.
    """
    rows: List[PlayerRecord] = []
    for slot in schema.teams:
        for player in range(slot.player_count):
            values = []
            for header in schema.headers:
                key = player_field_key(slot.team_index, player, header)
                if key not in index:
                    raise MissingField(key)
                values.append((header, index[key]))
            rows.append(PlayerRecord(team_index=slot.team_index, player_index=player, field_values=values))
    return rows


def assemble_pattern_rows(index: AttributeIndex, schema: ResolvedSchema) -> List[PlayerRecord]:
    """Rows for key-scanned dumps.

    An empty first value marks a slot the match never filled; that team and
    every team after it are left out.
    """
    rows: List[PlayerRecord] = []
    for group in group_player_entries(index, schema.num_teams):
        if group.first_value == "":
            logger.debug("Empty player slot, skipping remaining teams", team=group.team, player=group.player)
            break

        missing = [header for header in schema.headers if all(name != header for name, _ in group.fields)]
        if missing:
            logger.debug("Player slot lacks fields", team=group.team, player=group.player, fields=missing)

        rows.append(PlayerRecord(
            team_index=group.team,
            player_index=group.player,
            field_values=[(header, group.value_of(header)) for header in schema.headers],
        ))
    return rows
