"""Input clients."""

from .attributes import parse_attributes, read_attributes

__all__ = ["parse_attributes", "read_attributes"]
