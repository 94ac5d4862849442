"""Attribute dump models: raw name/value entries and the per-run lookup index."""

from typing import Dict, Iterable, Iterator, Mapping, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field

from ..errors import MalformedInput


class AttributeEntry(BaseModel):
    """One ``<Attr name=... value=...>`` element of the dump."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., description="Attribute name, e.g. MissionBagNumTeams")
    value: str = Field(default="", description="Raw attribute value, never coerced")


class AttributeIndex(Mapping[str, str]):
    """Read-only name -> value lookup over one dump.

    Built fresh for every pipeline run. When a name repeats, the last value
    wins while the name keeps the position where it was first seen.
    """

    def __init__(self, values: Optional[Dict[str, str]] = None):
        self._values: Dict[str, str] = dict(values or {})

    @classmethod
    def from_entries(cls, entries: Iterable[AttributeEntry]) -> "AttributeIndex":
        values: Dict[str, str] = {}
        for entry in entries:
            values[entry.name] = entry.value
        return cls(values)

    @classmethod
    def from_pairs(cls, pairs: Iterable[Tuple[str, str]]) -> "AttributeIndex":
        return cls.from_entries(AttributeEntry(name=name, value=value) for name, value in pairs)

    def __getitem__(self, key: str) -> str:
        return self._values[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __repr__(self) -> str:
        return f"AttributeIndex({len(self._values)} attributes)"

    def require_int(self, key: str) -> int:
        """Read ``key`` as a non-negative integer.

        Raises:
            MalformedInput: if the key is absent or its value is not a
                non-negative integer.
        """
        raw = self._values.get(key)
        if raw is None:
            raise MalformedInput(key)
        text = raw.strip()
        if not (text.isascii() and text.isdigit()):
            raise MalformedInput(key, raw)
        return int(text)
