"""
Graph Schema Models.

Defines entity kinds and the lightweight records streamed into the checker.
"""

from dataclasses import dataclass
from enum import Enum


class EntityKind(str, Enum):
    """Entity kinds in an OSM-style dataset."""

    POINT = "point"        # OSM node
    PATH = "path"          # OSM way
    RELATION = "relation"  # OSM relation

    @property
    def prefix(self) -> str:
        """Single-letter prefix used in reports (n, w, r)."""
        return _PREFIXES[self]

    @property
    def phase(self) -> int:
        """Position of this kind in the stream order."""
        return _PHASES[self]

    @classmethod
    def from_prefix(cls, prefix: str) -> "EntityKind":
        for kind, letter in _PREFIXES.items():
            if letter == prefix:
                return kind
        raise ValueError(f"Unknown entity prefix: {prefix!r}")


_PREFIXES = {
    EntityKind.POINT: "n",
    EntityKind.PATH: "w",
    EntityKind.RELATION: "r",
}

_PHASES = {
    EntityKind.POINT: 0,
    EntityKind.PATH: 1,
    EntityKind.RELATION: 2,
}


@dataclass(frozen=True)
class Point:
    """Point entity (node)."""

    id: int

    kind = EntityKind.POINT


@dataclass(frozen=True)
class Path:
    """Path entity (way) with its ordered point references."""

    id: int
    point_ids: tuple[int, ...] = ()

    kind = EntityKind.PATH


@dataclass(frozen=True)
class RelationMember:
    """Typed member reference inside a relation."""

    kind: EntityKind
    ref: int


@dataclass(frozen=True)
class Relation:
    """Relation entity with its ordered members."""

    id: int
    members: tuple[RelationMember, ...] = ()

    kind = EntityKind.RELATION


Entity = Point | Path | Relation


@dataclass(frozen=True)
class MissingReference:
    """A reference from one entity to another that does not exist."""

    referencing_kind: EntityKind
    referencing_id: int | None
    referenced_kind: EntityKind
    referenced_id: int

    def __str__(self) -> str:
        referrer = self.referencing_kind.prefix
        if self.referencing_id is not None:
            referrer += str(self.referencing_id)
        return f"{self.referenced_kind.prefix}{self.referenced_id} in {referrer}"
