"""Pipelines."""

from .extract import ExtractionResult, ExtractionStatus, run_extraction

__all__ = ["ExtractionResult", "ExtractionStatus", "run_extraction"]
