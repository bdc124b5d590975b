"""
Graph Module.

Entity records, stream dispatch and integrity checks for OSM-style graphs.
"""

from refcheck.graph.schema import (
    Entity,
    EntityKind,
    MissingReference,
    Path,
    Point,
    Relation,
    RelationMember,
)
from refcheck.graph.stream import (
    StreamOrderError,
    apply_stream,
    iter_missing_references,
)

__all__ = [
    # Schema
    "Entity",
    "EntityKind",
    "MissingReference",
    "Point",
    "Path",
    "Relation",
    "RelationMember",
    # Stream
    "StreamOrderError",
    "apply_stream",
    "iter_missing_references",
]
