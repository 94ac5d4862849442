"""Reader for the game client's ``attributes.xml`` dump."""

from pathlib import Path
from typing import List, Optional, Union

from lxml import etree

from ..errors import InputUnavailable, MalformedDump
from ..hunt_logging import get_logger
from ..models.attributes import AttributeEntry

logger = get_logger(__name__)

ROOT_TAG = "Attributes"
ENTRY_TAG = "Attr"


def _parser() -> etree.XMLParser:
    # Strict: a dump caught mid-write must fail rather than parse partially
    return etree.XMLParser(recover=False, resolve_entities=False, no_network=True, remove_comments=True)


def parse_attributes(markup: Union[str, bytes], source: Optional[Path] = None) -> List[AttributeEntry]:
    """Parse dump markup into entries, in document order.

    ``Attr`` elements without a ``name`` are skipped and a missing ``value``
    reads as an empty string.

    Raises:
        MalformedDump: if the markup is not well-formed XML or its root is not
            an ``Attributes`` element.
    """
    if isinstance(markup, str):
        markup = markup.encode("utf-8")
    if not markup.strip():
        raise MalformedDump(source, "not well-formed XML: document is empty")
    try:
        root = etree.fromstring(markup, parser=_parser())
    except etree.XMLSyntaxError as e:
        raise MalformedDump(source, f"not well-formed XML: {e}") from e
    if root.tag != ROOT_TAG:
        raise MalformedDump(source, f"expected <{ROOT_TAG}> root element, got <{root.tag}>")

    entries: List[AttributeEntry] = []
    skipped = 0
    for element in root.iterchildren(ENTRY_TAG):
        name = element.get("name")
        if not name:
            skipped += 1
            continue
        entries.append(AttributeEntry(name=name, value=element.get("value", "")))

    if skipped:
        logger.debug("Skipped unnamed attribute elements", count=skipped)
    return entries


def read_attributes(path: Union[str, Path]) -> List[AttributeEntry]:
    """Read and parse the dump at ``path`` in full.

    Raises:
        InputUnavailable: if the file cannot be opened or read.
        MalformedDump: if the file is not a complete ``Attributes`` document.
    """
    path = Path(path)
    try:
        markup = path.read_bytes()
    except OSError as e:
        raise InputUnavailable(path, e.strerror or str(e)) from e

    entries = parse_attributes(markup, source=path)
    logger.debug("Read attribute dump", path=str(path), bytes=len(markup), entries=len(entries))
    return entries
