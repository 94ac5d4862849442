"""Transformers from attribute dumps to tabular rows."""

from .rows import assemble_fixed_rows, assemble_pattern_rows, assemble_rows

__all__ = ["assemble_fixed_rows", "assemble_pattern_rows", "assemble_rows"]
