"""Data models for the extraction pipeline."""

from .attributes import AttributeEntry, AttributeIndex
from .rows import PlayerRecord, ResolvedSchema, StrategyKind, TeamSlot

__all__ = [
    "AttributeEntry",
    "AttributeIndex",
    "PlayerRecord",
    "ResolvedSchema",
    "StrategyKind",
    "TeamSlot",
]
