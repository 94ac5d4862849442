"""Schema discovery: how many teams and players a dump holds, and which fields.

Two strategies exist. The fixed strategy reads explicit per-team player counts
and uses a static header list; it is what current dumps need. The pattern
strategy scans ``MissionBagPlayer_<team>_<player>_<field>`` keys and is kept
for older dumps that lack the per-team counts.

A resolver returns ``None`` when the dump holds no finished match (no team
count), which callers treat as "nothing to write this run".
"""

from abc import ABC, abstractmethod
from collections import Counter
from typing import Optional

from ..config import SchemaStrategy
from ..hunt_logging import get_logger
from ..models.attributes import AttributeIndex
from ..models.rows import ResolvedSchema, StrategyKind, TeamSlot
from .keys import (
    FIXED_PLAYER_FIELDS,
    LEGACY_PLAYER_STRIDE,
    NUM_TEAMS_KEY,
    group_player_entries,
    team_players_key,
)

logger = get_logger(__name__)


class SchemaResolver(ABC):
    """Resolve the team/player layout of one attribute dump."""

    kind: StrategyKind

    @abstractmethod
    def resolve(self, index: AttributeIndex) -> Optional[ResolvedSchema]:
        """Return the layout, or ``None`` if the dump describes no finished match.

        Raises:
            MalformedInput: if a count is present but unusable.
        """

    @staticmethod
    def has_match_data(index: AttributeIndex) -> bool:
        return NUM_TEAMS_KEY in index


class PatternSchemaResolver(SchemaResolver):
    """Discover players by scanning key names."""

    kind = StrategyKind.PATTERN

    def resolve(self, index: AttributeIndex) -> Optional[ResolvedSchema]:
        if not self.has_match_data(index):
            return None
        num_teams = index.require_int(NUM_TEAMS_KEY)
        groups = group_player_entries(index, num_teams)

        oversized = sorted({g.player for g in groups if g.player >= LEGACY_PLAYER_STRIDE})
        if oversized:
            logger.warning(
                "Player index beyond legacy stride; slots overlap the next team",
                stride=LEGACY_PLAYER_STRIDE,
                player_indices=oversized,
            )

        # Every group is assumed to share the first group's field set and order
        headers = [name for name, _ in groups[0].fields] if groups else []

        per_team = Counter(g.team for g in groups)
        last_team = max(per_team) if per_team else -1
        teams = [TeamSlot(team_index=t, player_count=per_team.get(t, 0)) for t in range(last_team + 1)]

        return ResolvedSchema(
            strategy=self.kind,
            num_teams=num_teams,
            teams=teams,
            headers=headers,
        )


class FixedSchemaResolver(SchemaResolver):
    """Read explicit per-team player counts; headers are static."""

    kind = StrategyKind.FIXED

    def resolve(self, index: AttributeIndex) -> Optional[ResolvedSchema]:
        if not self.has_match_data(index):
            return None
        num_teams = index.require_int(NUM_TEAMS_KEY)
        teams = [
            TeamSlot(team_index=t, player_count=index.require_int(team_players_key(t)))
            for t in range(num_teams)
        ]
        return ResolvedSchema(
            strategy=self.kind,
            num_teams=num_teams,
            teams=teams,
            headers=list(FIXED_PLAYER_FIELDS),
        )


def select_resolver(index: AttributeIndex, strategy: SchemaStrategy = SchemaStrategy.AUTO) -> SchemaResolver:
    """Pick a resolver; ``auto`` uses the fixed schema when per-team counts are present."""
    if strategy == SchemaStrategy.PATTERN:
        return PatternSchemaResolver()
    if strategy == SchemaStrategy.FIXED:
        return FixedSchemaResolver()
    if team_players_key(0) in index:
        return FixedSchemaResolver()
    return PatternSchemaResolver()


def resolve_schema(index: AttributeIndex, strategy: SchemaStrategy = SchemaStrategy.AUTO) -> Optional[ResolvedSchema]:
    resolver = select_resolver(index, strategy)
    schema = resolver.resolve(index)
    if schema is None:
        logger.info("No match data in attribute dump", strategy=resolver.kind.value)
    else:
        logger.debug(
            "Resolved schema",
            strategy=schema.strategy.value,
            num_teams=schema.num_teams,
            players=[slot.player_count for slot in schema.teams],
            headers=len(schema.headers),
        )
    return schema
