"""
Entity Stream Dispatch.

Feeds an ordered entity stream into a ReferenceValidator, enforcing the
point -> path -> relation ordering the checker depends on.
"""

from collections.abc import Iterable, Iterator

import structlog

from refcheck.graph.integrity.reference_validator import ReferenceValidator
from refcheck.graph.integrity.report import RefCheckReport
from refcheck.graph.schema import Entity, EntityKind, MissingReference, Path, Point, Relation

logger = structlog.get_logger(__name__)


class StreamOrderError(Exception):
    """Raised when an entity arrives after a later phase has started."""

    def __init__(self, entity_kind: EntityKind, entity_id: int, current_phase: EntityKind):
        self.entity_kind = entity_kind
        self.entity_id = entity_id
        self.current_phase = current_phase
        super().__init__(
            f"{entity_kind.value} {entity_id} arrived after {current_phase.value}s; "
            "input must list all nodes, then all ways, then all relations"
        )


def _dispatch(
    entities: Iterable[Entity],
    validator: ReferenceValidator,
) -> Iterator[list[MissingReference]]:
    phase = EntityKind.POINT

    for entity in entities:
        if entity.kind.phase < phase.phase:
            raise StreamOrderError(entity.kind, entity.id, phase)
        phase = entity.kind

        if isinstance(entity, Point):
            validator.on_point(entity.id)
        elif isinstance(entity, Path):
            yield validator.on_path(entity.id, entity.point_ids)
        elif isinstance(entity, Relation):
            yield validator.on_relation(entity.id, entity.members)


def apply_stream(entities: Iterable[Entity], validator: ReferenceValidator) -> RefCheckReport:
    """
    Run the whole stream through the validator.

    Args:
        entities: Entities in point, path, relation order
        validator: Open validator to feed

    Returns:
        RefCheckReport for the finalized validator
    """
    for _ in _dispatch(entities, validator):
        pass

    report = validator.report()

    logger.info(
        "Reference check completed",
        is_healthy=report.is_healthy,
        missing=report.missing_total,
        duration_s=round(report.duration_seconds, 2),
    )

    return report


def iter_missing_references(
    entities: Iterable[Entity],
    validator: ReferenceValidator,
) -> Iterator[MissingReference]:
    """
    Lazily yield missing references while the stream is consumed.

    Point and path findings are yielded as soon as the entity holding them is
    processed. Relation members are yielded after the stream is exhausted,
    once the validator has been finalized. The sequence can only be replayed
    by scanning the input again with a fresh validator.
    """
    for missing in _dispatch(entities, validator):
        yield from missing

    validator.finalize()
    yield from validator.missing_relation_references()
