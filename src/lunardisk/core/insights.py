"""Heuristic insights about a scanned tree.

Produces short, human-readable observations (dominant child, file volume)
for display next to a scan. Cancellation yields no insights at all rather
than a partial list.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from enum import Enum
from typing import Final

from lunardisk.core.cancellation import CancellationToken
from lunardisk.core.summary import count_nodes
from lunardisk.types.models import FileNode

# Share of the folder above which the largest child is flagged
DOMINANT_CHILD_RATIO: Final[float] = 0.5

# File count above which the scan is flagged as unusually large
LARGE_FILE_COUNT: Final[int] = 20_000


class InsightSeverity(str, Enum):
    """Enumeration for insight severities."""

    INFO = "info"
    WARNING = "warning"


@dataclass(slots=True, frozen=True)
class Insight:
    severity: InsightSeverity
    message: str
    id: uuid.UUID = field(default_factory=uuid.uuid4)


class HeuristicAnalyzer:
    """Analyzer generating insights from simple size and count heuristics."""

    def generate_insights(
        self,
        root: FileNode,
        *,
        cancellation: CancellationToken | None = None,
    ) -> list[Insight]:
        """Generate insights for a scan tree.

        Args:
            root: Root of a completed scan tree
            cancellation: Token checked before and after counting (keyword-only)

        Returns:
            Insights in display order, or an empty list if cancelled
        """
        if cancellation is not None and cancellation.cancelled:
            return []

        if root.size_bytes <= 0:
            return [Insight(severity=InsightSeverity.INFO, message="Selected folder is empty.")]

        insights: list[Insight] = []

        sorted_children = root.sorted_children_by_size()
        if sorted_children:
            largest = sorted_children[0]
            ratio = largest.size_bytes / max(root.size_bytes, 1)
            percent = round(ratio * 100)
            severity = InsightSeverity.WARNING if ratio > DOMINANT_CHILD_RATIO else InsightSeverity.INFO
            insights.append(
                Insight(
                    severity=severity,
                    message=f'"{largest.name}" uses {percent}% of this folder.',
                )
            )

        file_count = count_nodes(root).files
        if cancellation is not None and cancellation.cancelled:
            return []

        if file_count > LARGE_FILE_COUNT:
            insights.append(
                Insight(
                    severity=InsightSeverity.WARNING,
                    message=(
                        f"This scan includes {file_count} files. "
                        "Cleanup candidates may be duplicated media or cache directories."
                    ),
                )
            )
        else:
            insights.append(
                Insight(severity=InsightSeverity.INFO, message=f"Scan includes {file_count} files.")
            )

        return insights
