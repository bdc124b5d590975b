"""
Reference Validator.

Consumes an ordered entity stream (points, then paths, then relations) and
detects references to entities that do not exist:
- Points missing from paths
- Points and paths missing from relations
- Relations missing from relations (resolved after the stream ends)
"""

from collections.abc import Iterable
from datetime import datetime
from enum import Enum

import structlog

from refcheck.graph.integrity.presence_set import DEFAULT_CHUNK_BITS, PresenceSet
from refcheck.graph.integrity.relation_ledger import RelationLedger
from refcheck.graph.integrity.report import RefCheckReport
from refcheck.graph.schema import EntityKind, MissingReference, RelationMember

logger = structlog.get_logger(__name__)


class ValidatorState(str, Enum):
    """Lifecycle states of a validator."""

    OPEN = "open"            # Accepting entities
    FINALIZED = "finalized"  # Relation members reconciled, read-only


class ValidatorStateError(Exception):
    """Raised when an operation is invalid in the validator's current state."""

    def __init__(self, operation: str, state: ValidatorState):
        self.operation = operation
        self.state = state
        super().__init__(f"Cannot {operation} while validator is {state.value}")


class ReferenceValidator:
    """
    Streaming referential integrity checker.

    Points are tracked in a presence set as they stream by, so every path can
    be checked against them immediately. With ``check_relations`` enabled,
    paths are tracked too and relation members are checked; references to
    other relations are collected and reconciled by ``finalize()``.

    Usage:
        ```python
        validator = ReferenceValidator(check_relations=True)

        for point_id in point_ids:
            validator.on_point(point_id)
        for path in paths:
            validator.on_path(path.id, path.point_ids)
        for relation in relations:
            validator.on_relation(relation.id, relation.members)

        if validator.has_any_error():
            print(validator.missing_relation_ids)
        ```
    """

    def __init__(
        self,
        check_relations: bool = False,
        chunk_bits: int = DEFAULT_CHUNK_BITS,
    ) -> None:
        self._check_relations = check_relations
        self._state = ValidatorState.OPEN
        self._started_at = datetime.utcnow()

        self._points = PresenceSet(chunk_bits, name="points")
        self._paths = PresenceSet(chunk_bits, name="paths") if check_relations else None
        self._ledger = RelationLedger()
        self._missing_relation_ids: list[int] = []

        self._point_count = 0
        self._path_count = 0
        self._relation_count = 0

        self._missing_points_in_paths = 0
        self._missing_points_in_relations = 0
        self._missing_paths_in_relations = 0

    @property
    def state(self) -> ValidatorState:
        return self._state

    @property
    def check_relations(self) -> bool:
        return self._check_relations

    @property
    def ledger(self) -> RelationLedger:
        return self._ledger

    @property
    def point_count(self) -> int:
        return self._point_count

    @property
    def path_count(self) -> int:
        return self._path_count

    @property
    def relation_count(self) -> int:
        return self._relation_count

    @property
    def missing_points_in_paths(self) -> int:
        return self._missing_points_in_paths

    @property
    def missing_points_in_relations(self) -> int:
        return self._missing_points_in_relations

    @property
    def missing_paths_in_relations(self) -> int:
        return self._missing_paths_in_relations

    @property
    def missing_relations_in_relations(self) -> int:
        self._require_finalized("count missing relation members")
        return len(self._missing_relation_ids)

    @property
    def missing_relation_ids(self) -> list[int]:
        self._require_finalized("list missing relation members")
        return list(self._missing_relation_ids)

    # =========================================================================
    # Ingestion
    # =========================================================================

    def on_point(self, point_id: int) -> None:
        self._require_open("ingest points")
        if self._point_count == 0:
            logger.info("Reading points")
        self._point_count += 1

        self._points.mark(point_id)

    def on_path(self, path_id: int, point_ids: Iterable[int]) -> list[MissingReference]:
        """
        Check the point references of a path.

        Missing points are reported once per occurrence and are not marked
        present: a path is not authoritative for point existence.

        Returns:
            Missing references found in this path
        """
        self._require_open("ingest paths")
        if self._path_count == 0:
            logger.info("Reading paths")
        self._path_count += 1

        if self._paths is not None:
            self._paths.mark(path_id)

        points = self._points
        missing: list[MissingReference] = []
        for point_id in point_ids:
            if not points.contains(point_id):
                missing.append(MissingReference(
                    referencing_kind=EntityKind.PATH,
                    referencing_id=path_id,
                    referenced_kind=EntityKind.POINT,
                    referenced_id=point_id,
                ))

        self._missing_points_in_paths += len(missing)
        return missing

    def on_relation(
        self,
        relation_id: int,
        members: Iterable[RelationMember],
    ) -> list[MissingReference]:
        """
        Check the members of a relation.

        A missing point or path member is counted on first occurrence and
        then marked present, so the same dangling member shared by many
        relations is reported once. Relation members are only recorded here
        and resolved by ``finalize()``.

        Returns:
            Missing point and path members found in this relation
        """
        self._require_open("ingest relations")
        if self._relation_count == 0:
            logger.info("Reading relations")
        self._relation_count += 1

        if not self._check_relations:
            return []

        self._ledger.observe(relation_id)

        missing: list[MissingReference] = []
        for member in members:
            if member.kind == EntityKind.POINT:
                presence = self._points
            elif member.kind == EntityKind.PATH:
                presence = self._paths
            else:
                self._ledger.reference(member.ref, relation_id)
                continue

            if not presence.contains(member.ref):
                presence.mark(member.ref)
                missing.append(MissingReference(
                    referencing_kind=EntityKind.RELATION,
                    referencing_id=relation_id,
                    referenced_kind=member.kind,
                    referenced_id=member.ref,
                ))
                if member.kind == EntityKind.POINT:
                    self._missing_points_in_relations += 1
                else:
                    self._missing_paths_in_relations += 1

        return missing

    # =========================================================================
    # Reconciliation
    # =========================================================================

    def finalize(self) -> list[int]:
        """
        Resolve relation members against the relations seen in the stream.

        Runs the reconciliation once; later calls return the cached result.

        Returns:
            Missing relation IDs in ascending order
        """
        if self._state == ValidatorState.OPEN:
            self._missing_relation_ids = self._ledger.missing()
            self._state = ValidatorState.FINALIZED

            logger.debug(
                "Relation members reconciled",
                observed=self._ledger.observed_count,
                referenced=len(self._ledger.referenced_relation_ids),
                missing=len(self._missing_relation_ids),
            )

        return list(self._missing_relation_ids)

    def missing_relation_references(self) -> list[MissingReference]:
        """Missing relation members, each attributed to its first referrer."""
        self._require_finalized("list missing relation members")
        return [
            MissingReference(
                referencing_kind=EntityKind.RELATION,
                referencing_id=self._ledger.referrer_of(relation_id),
                referenced_kind=EntityKind.RELATION,
                referenced_id=relation_id,
            )
            for relation_id in self._missing_relation_ids
        ]

    def has_any_error(self) -> bool:
        self.finalize()
        return (
            self._missing_points_in_paths > 0
            or self._missing_points_in_relations > 0
            or self._missing_paths_in_relations > 0
            or len(self._missing_relation_ids) > 0
        )

    def report(self) -> RefCheckReport:
        """Finalize and build the aggregate result."""
        self.finalize()

        return RefCheckReport(
            check_relations=self._check_relations,
            point_count=self._point_count,
            path_count=self._path_count,
            relation_count=self._relation_count,
            missing_points_in_paths=self._missing_points_in_paths,
            missing_points_in_relations=self._missing_points_in_relations,
            missing_paths_in_relations=self._missing_paths_in_relations,
            missing_relations_in_relations=len(self._missing_relation_ids),
            missing_relation_ids=list(self._missing_relation_ids),
            duration_seconds=(datetime.utcnow() - self._started_at).total_seconds(),
        )

    def _require_open(self, operation: str) -> None:
        if self._state != ValidatorState.OPEN:
            raise ValidatorStateError(operation, self._state)

    def _require_finalized(self, operation: str) -> None:
        if self._state != ValidatorState.FINALIZED:
            raise ValidatorStateError(operation, self._state)
