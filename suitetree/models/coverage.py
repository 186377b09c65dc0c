"""Coverage data structures: per-file metrics and run-wide summaries."""

from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, Field, field_validator


class CoverageSummary(BaseModel):
    """Percentages in [0, 100]; ``None`` means the metric was not measured."""

    branches_percentage: Optional[float] = None
    line_percentage: Optional[float] = None
    function_percentage: Optional[float] = None
    statement_percentage: Optional[float] = None


class CoverageMetric(BaseModel):
    total: int = 0
    covered: int = 0
    skipped: int = 0
    pct: Optional[float] = None

    @field_validator("pct", mode="before")
    @classmethod
    def unknown_pct_is_none(cls, v: Any) -> Any:
        # Reporters write "Unknown" when nothing of that kind was instrumented
        if isinstance(v, str) and v.strip().lower() == "unknown":
            return None
        return v


class FileCoverage(BaseModel):
    """Coverage metrics for a single file as reported by the coverage run."""

    path: str = ""
    branches: CoverageMetric = Field(default_factory=CoverageMetric)
    lines: CoverageMetric = Field(default_factory=CoverageMetric)
    functions: CoverageMetric = Field(default_factory=CoverageMetric)
    statements: CoverageMetric = Field(default_factory=CoverageMetric)

    def to_summary(self) -> CoverageSummary:
        return CoverageSummary(
            branches_percentage=self.branches.pct,
            line_percentage=self.lines.pct,
            function_percentage=self.functions.pct,
            statement_percentage=self.statements.pct,
        )


class CoverageReport(BaseModel):
    """One coverage run: per-file metrics keyed by path plus the reported total.

    The total is taken as reported and never recomputed from the files.
    """

    files: dict[str, FileCoverage] = Field(default_factory=dict)
    total: FileCoverage = Field(default_factory=FileCoverage)

    def get_coverage_for_file(self, path: str) -> Optional[FileCoverage]:
        return self.files.get(path)

    def get_summary(self) -> CoverageSummary:
        return self.total.to_summary()

    @classmethod
    def from_summary_mapping(cls, data: dict[str, Any]) -> "CoverageReport":
        """Build a report from an istanbul-style ``{"total": ..., "<path>": ...}`` mapping."""
        files: dict[str, FileCoverage] = {}
        total = FileCoverage(path="total")
        for key, metrics in data.items():
            if key == "total":
                total = FileCoverage(path="total", **metrics)
            else:
                files[key] = FileCoverage(path=key, **metrics)
        return cls(files=files, total=total)
