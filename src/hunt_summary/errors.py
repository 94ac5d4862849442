"""Exception hierarchy for the extraction pipeline.

Every error aborts the current pipeline run only. The CLI decides whether that
is fatal (single-shot mode) or reported and skipped (watch mode).
"""

from pathlib import Path
from typing import Optional, Union


class HuntSummaryError(Exception):
    """Base class for all pipeline errors."""
    pass


class InputUnavailable(HuntSummaryError):
    """The attribute dump could not be opened or read."""

    def __init__(self, path: Union[str, Path], reason: str = ""):
        self.path = Path(path)
        self.reason = reason
        message = f"Could not read attribute dump '{self.path}'"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)


class MalformedDump(HuntSummaryError):
    """The attribute dump is not a well-formed `<Attributes>` document."""

    def __init__(self, path: Optional[Union[str, Path]], reason: str):
        self.path = Path(path) if path is not None else None
        self.reason = reason
        message = "Malformed attribute dump"
        if self.path is not None:
            message = f"{message} '{self.path}'"
        super().__init__(f"{message}: {reason}")


class MalformedInput(HuntSummaryError):
    """The dump parsed, but a required value is missing or not an integer."""

    def __init__(self, key: str, value: Optional[str] = None, reason: str = ""):
        self.key = key
        self.value = value
        if not reason:
            if value is None:
                reason = "key is missing"
            else:
                reason = f"expected a non-negative integer, got {value!r}"
        super().__init__(f"Malformed attribute '{key}': {reason}")


class MissingField(MalformedInput):
    """A statically expected player field is absent from the dump."""

    def __init__(self, key: str):
        super().__init__(key, None, reason="expected player field is missing")


class OutputUnavailable(HuntSummaryError):
    """The output directory, staging file, or promoted snapshot could not be written."""

    def __init__(self, path: Union[str, Path], reason: str = ""):
        self.path = Path(path)
        self.reason = reason
        message = f"Could not write to '{self.path}'"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)


class WatchUnavailable(HuntSummaryError):
    """Change notifications for the dump could not be established."""

    def __init__(self, path: Union[str, Path], reason: str = ""):
        self.path = Path(path)
        self.reason = reason
        message = f"Could not watch '{self.path}'"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)
