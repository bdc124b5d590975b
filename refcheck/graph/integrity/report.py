"""
Reference Check Report.

Aggregate result of a reference check run: entity counts, missing reference
counts per category and the unresolved relation members.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any


@dataclass
class RefCheckReport:
    """Report of reference check results."""

    checked_at: datetime = field(default_factory=datetime.utcnow)
    check_relations: bool = False

    # Entity counts
    point_count: int = 0
    path_count: int = 0
    relation_count: int = 0

    # Missing references by category
    missing_points_in_paths: int = 0
    missing_points_in_relations: int = 0
    missing_paths_in_relations: int = 0
    missing_relations_in_relations: int = 0

    missing_relation_ids: list[int] = field(default_factory=list)

    # Duration
    duration_seconds: float = 0.0

    @property
    def missing_total(self) -> int:
        return (
            self.missing_points_in_paths
            + self.missing_points_in_relations
            + self.missing_paths_in_relations
            + self.missing_relations_in_relations
        )

    @property
    def has_errors(self) -> bool:
        return self.missing_total > 0

    @property
    def is_healthy(self) -> bool:
        return not self.has_errors

    def summary_lines(self) -> list[str]:
        """Human readable summary, one line per entry."""
        lines = [
            f"There are {self.point_count} nodes, {self.path_count} ways, "
            f"and {self.relation_count} relations in this file."
        ]
        if self.check_relations:
            lines.extend([
                f"Nodes     in ways      missing: {self.missing_points_in_paths}",
                f"Nodes     in relations missing: {self.missing_points_in_relations}",
                f"Ways      in relations missing: {self.missing_paths_in_relations}",
                f"Relations in relations missing: {self.missing_relations_in_relations}",
            ])
        else:
            lines.append(f"Nodes in ways missing: {self.missing_points_in_paths}")
        return lines

    def to_dict(self) -> dict[str, Any]:
        return {
            "checked_at": self.checked_at.isoformat(),
            "is_healthy": self.is_healthy,
            "check_relations": self.check_relations,
            "counts": {
                "points": self.point_count,
                "paths": self.path_count,
                "relations": self.relation_count,
            },
            "missing": {
                "points_in_paths": self.missing_points_in_paths,
                "points_in_relations": self.missing_points_in_relations,
                "paths_in_relations": self.missing_paths_in_relations,
                "relations_in_relations": self.missing_relations_in_relations,
                "total": self.missing_total,
            },
            "missing_relation_ids": self.missing_relation_ids,
            "duration_seconds": round(self.duration_seconds, 2),
        }
