"""
Graph Integrity Checking.

Provides streaming referential integrity checking:
- Presence sets for observed IDs
- Dangling reference detection for paths and relations
- Deferred reconciliation of relation members
"""

from refcheck.graph.integrity.presence_set import DEFAULT_CHUNK_BITS, PresenceSet
from refcheck.graph.integrity.reference_validator import (
    ReferenceValidator,
    ValidatorState,
    ValidatorStateError,
)
from refcheck.graph.integrity.relation_ledger import RelationLedger, reconcile
from refcheck.graph.integrity.report import RefCheckReport

__all__ = [
    # Presence tracking
    "DEFAULT_CHUNK_BITS",
    "PresenceSet",
    # Relation members
    "RelationLedger",
    "reconcile",
    # Validator
    "ReferenceValidator",
    "ValidatorState",
    "ValidatorStateError",
    "RefCheckReport",
]
