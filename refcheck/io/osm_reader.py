"""
OSM Input Reader.

Decodes OSM files (XML, PBF, OPL and their compressed variants) with pyosmium
into the entity records consumed by the reference validator. The file is read
in a single forward pass; objects are converted as they stream by and never
retained.
"""

from collections.abc import Iterator
from pathlib import Path as FilePath

import osmium
import osmium.io
import osmium.osm
import structlog

from refcheck.graph.schema import Entity, EntityKind, Path, Point, Relation, RelationMember

logger = structlog.get_logger(__name__)

STDIN = "-"

_MEMBER_KINDS = {
    "n": EntityKind.POINT,
    "w": EntityKind.PATH,
    "r": EntityKind.RELATION,
}


class InputError(Exception):
    """Raised when the input cannot be opened."""

    def __init__(self, message: str, source: str | None = None):
        super().__init__(message)
        self.source = source


class InputFormatError(InputError):
    """Raised when the input format cannot be determined."""


def _open_input(
    source: str,
    input_format: str | None,
) -> str | osmium.io.File:
    if source in ("", STDIN):
        if not input_format:
            raise InputFormatError(
                "When reading from STDIN you need to use the --input-format,-F "
                "option to declare the file format.",
                source=STDIN,
            )
        # libosmium streams STDIN when given "-"
        return osmium.io.File(STDIN, input_format)

    if not FilePath(source).is_file():
        raise InputError(f"Input file not found: {source}", source=source)

    if input_format:
        return osmium.io.File(source, input_format)
    return source


def read_entities(source: str, input_format: str | None = None) -> Iterator[Entity]:
    """
    Stream the entities of an OSM file.

    Args:
        source: File path, or "-" for STDIN
        input_format: Explicit format (e.g. "pbf", "osm", "opl"); detected
            from the file name when omitted

    Yields:
        Point, Path and Relation records in file order
    """
    data = _open_input(source, input_format)
    logger.debug("Opening input", source=source, input_format=input_format)

    processor = osmium.FileProcessor(
        data, osmium.osm.NODE | osmium.osm.WAY | osmium.osm.RELATION
    )

    for obj in processor:
        if obj.is_node():
            yield Point(obj.id)
        elif obj.is_way():
            yield Path(obj.id, tuple(node.ref for node in obj.nodes))
        elif obj.is_relation():
            yield Relation(
                obj.id,
                tuple(
                    RelationMember(_MEMBER_KINDS[member.type], member.ref)
                    for member in obj.members
                ),
            )
