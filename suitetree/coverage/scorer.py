"""Coverage summary text."""

from __future__ import annotations

from typing import Optional

from suitetree.models.coverage import CoverageSummary
from suitetree.store.files import FileStore


def _pct(value: Optional[float]) -> str:
    return "n/a" if value is None else f"{value:.2f}%"


def calculate_coverage_summary(store: FileStore) -> str:
    """Generate a human-readable coverage summary."""
    total: CoverageSummary = store.total_coverage
    measured = [
        n for n in store.coverage_nodes.values()
        if not n.is_directory and n.coverage.line_percentage is not None
    ]
    lines = [
        "Coverage Summary",
        f"  Statements: {_pct(total.statement_percentage)}",
        f"  Branches: {_pct(total.branches_percentage)}",
        f"  Functions: {_pct(total.function_percentage)}",
        f"  Lines: {_pct(total.line_percentage)}",
        f"  Files with coverage: {len(measured)}",
    ]
    if measured:
        lowest = min(measured, key=lambda n: n.coverage.line_percentage)
        lines.append(f"  Lowest line coverage: {lowest.path} ({_pct(lowest.coverage.line_percentage)})")
    return "\n".join(lines)
