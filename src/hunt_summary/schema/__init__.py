"""Schema discovery over the flat attribute namespace."""

from .keys import FIXED_PLAYER_FIELDS, LEGACY_PLAYER_STRIDE, NUM_TEAMS_KEY
from .resolver import (
    FixedSchemaResolver,
    PatternSchemaResolver,
    SchemaResolver,
    resolve_schema,
    select_resolver,
)

__all__ = [
    "FIXED_PLAYER_FIELDS",
    "LEGACY_PLAYER_STRIDE",
    "NUM_TEAMS_KEY",
    "FixedSchemaResolver",
    "PatternSchemaResolver",
    "SchemaResolver",
    "resolve_schema",
    "select_resolver",
]
