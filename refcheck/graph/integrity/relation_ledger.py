"""
Relation ID Ledger and Reconciliation.

Relation members may point at relations that appear later in the stream, so
they cannot be checked during the forward pass. The ledger remembers which
relation IDs were seen and which were referenced; reconciliation computes the
difference once the stream is exhausted.
"""

from array import array
from collections.abc import Iterable


def reconcile(referenced: Iterable[int], observed: Iterable[int]) -> list[int]:
    """
    Find referenced relation IDs that were never observed.

    Args:
        referenced: Relation IDs used as relation members (any order)
        observed: Relation IDs seen as top-level relations (any order)

    Returns:
        Missing relation IDs in ascending order, without duplicates
    """
    seen = set(observed)
    return sorted({ref for ref in referenced if ref not in seen})


class RelationLedger:
    """Tracks observed and referenced relation IDs for the deferred check."""

    def __init__(self) -> None:
        self._observed = array("q")
        # referenced id -> first relation that referenced it
        self._referenced: dict[int, int] = {}

    def observe(self, relation_id: int) -> None:
        self._observed.append(relation_id)

    def reference(self, relation_id: int, referrer_id: int) -> None:
        self._referenced.setdefault(relation_id, referrer_id)

    @property
    def observed_relation_ids(self) -> frozenset[int]:
        return frozenset(self._observed)

    @property
    def referenced_relation_ids(self) -> frozenset[int]:
        return frozenset(self._referenced)

    @property
    def observed_count(self) -> int:
        return len(self._observed)

    def referrer_of(self, relation_id: int) -> int | None:
        """Return the first relation that referenced relation_id."""
        return self._referenced.get(relation_id)

    def missing(self) -> list[int]:
        """Referenced relation IDs never observed, ascending."""
        return reconcile(self._referenced, self._observed)
