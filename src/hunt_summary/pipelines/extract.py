"""One extraction run: dump -> index -> schema -> rows -> snapshot."""

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Optional, Union

from ..config import SchemaStrategy
from ..hunt_logging import clear_run_id, get_logger, monitor_function, new_run_id
from ..io_clients.attributes import read_attributes
from ..models.attributes import AttributeIndex
from ..schema.resolver import resolve_schema
from ..storage.snapshots import SnapshotWriter, serialize_snapshot
from ..transformers.rows import assemble_rows

logger = get_logger(__name__)


class ExtractionStatus(str, Enum):
    """What a run did with the output directory."""
    NO_MATCH_DATA = "no_match_data"
    UNCHANGED = "unchanged"
    PROMOTED = "promoted"


@dataclass(frozen=True)
class ExtractionResult:
    status: ExtractionStatus
    path: Optional[Path] = None
    content: Optional[bytes] = None
    rows: int = 0

    @property
    def promoted(self) -> bool:
        return self.status == ExtractionStatus.PROMOTED

    @property
    def text(self) -> str:
        return self.content.decode("utf-8") if self.content is not None else ""


@monitor_function("pipeline.extract")
def run_extraction(
    input_path: Union[str, Path],
    writer: SnapshotWriter,
    *,
    zero_based: bool = False,
    strategy: SchemaStrategy = SchemaStrategy.AUTO,
) -> ExtractionResult:
    """Run the pipeline once over the dump at ``input_path``.

    A dump without a finished match leaves the output directory untouched.

    Raises:
        InputUnavailable: the dump cannot be read.
        MalformedDump: the dump is not a complete, well-formed document.
        MalformedInput: counts are missing or not integers.
        MissingField: a fixed-schema field is absent.
        OutputUnavailable: the snapshot cannot be staged or promoted.
    """
    run_id = new_run_id()
    try:
        logger.debug("Extraction started", input=str(input_path), run=run_id)
        index = AttributeIndex.from_entries(read_attributes(input_path))

        schema = resolve_schema(index, strategy)
        if schema is None:
            return ExtractionResult(status=ExtractionStatus.NO_MATCH_DATA)

        rows = assemble_rows(index, schema)
        content = serialize_snapshot(schema.header_row, rows, zero_based=zero_based)
        outcome = writer.write(content)

        status = ExtractionStatus.PROMOTED if outcome.promoted else ExtractionStatus.UNCHANGED
        logger.info("Extraction finished", status=status.value, rows=len(rows), teams=len(schema.teams))
        return ExtractionResult(status=status, path=outcome.path, content=content, rows=len(rows))
    finally:
        clear_run_id()
