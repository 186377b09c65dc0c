"""Pytest configuration and shared fixtures."""

import json
from pathlib import Path

import pytest

from suitetree.models.config import SuiteTreeConfig
from suitetree.models.coverage import CoverageReport
from suitetree.models.project import Project, ProjectFile
from suitetree.models.test_result import AssertionResult, FileResult, RunResults, RunSummary
from suitetree.store.files import FileStore
from suitetree.tree.builder import build_forest


# ============================================================================
# Project Fixtures
# ============================================================================


@pytest.fixture
def project() -> Project:
    """A small project with two source files and two test files."""
    return Project(
        root_dir=".",
        files=[
            ProjectFile(path="src/a.ts"),
            ProjectFile(path="src/b.ts"),
            ProjectFile(path="test/a.spec.ts", is_test=True, it_blocks=["adds", "subtracts"]),
            ProjectFile(
                path="test/deep/b.spec.ts",
                is_test=True,
                it_blocks=["renders", "matches snapshot", "handles errors"],
            ),
        ],
    )


@pytest.fixture
def store(project: Project) -> FileStore:
    """A store initialized with both views of the project."""
    store = FileStore()
    tests, test_index = build_forest(project)
    files, file_index = build_forest(project, include=lambda f: not f.is_test)
    store.initialize(tests, test_index)
    store.initialize_coverage_files(files, file_index)
    return store


# ============================================================================
# Result Fixtures
# ============================================================================


@pytest.fixture
def file_results() -> list[FileResult]:
    return [
        FileResult(
            file="test/a.spec.ts",
            status="KnownSuccess",
            message="",
            assertions=[
                AssertionResult(title="adds", status="KnownSuccess"),
                AssertionResult(title="subtracts", status="KnownSuccess"),
            ],
        ),
        FileResult(
            file="test/deep/b.spec.ts",
            status="KnownFail",
            message="2 tests failed",
            assertions=[
                AssertionResult(title="renders", status="KnownSuccess"),
                AssertionResult(
                    title="matches snapshot",
                    status="KnownFail",
                    message="Received value does not match stored snapshot 1.",
                ),
                AssertionResult(
                    title="handles errors",
                    status="KnownFail",
                    message="expect(received).toThrow()",
                ),
            ],
        ),
    ]


@pytest.fixture
def run_summary() -> RunSummary:
    return RunSummary.model_validate({
        "numPassedTestSuites": 1,
        "numFailedTestSuites": 1,
        "numPassedTests": 3,
        "numFailedTests": 2,
        "snapshot": {"matched": 4, "unmatched": 1},
    })


# ============================================================================
# Coverage Fixtures
# ============================================================================


def _metrics(pct):
    return {
        "lines": {"total": 10, "covered": 8, "skipped": 0, "pct": pct},
        "statements": {"total": 12, "covered": 9, "skipped": 0, "pct": 75},
        "functions": {"total": 4, "covered": 2, "skipped": 0, "pct": 50},
        "branches": {"total": 0, "covered": 0, "skipped": 0, "pct": "Unknown"},
    }


@pytest.fixture
def coverage_mapping() -> dict:
    """An istanbul-style coverage summary covering only src/a.ts."""
    return {
        "total": _metrics(66.67),
        "src/a.ts": _metrics(80),
    }


@pytest.fixture
def coverage_report(coverage_mapping: dict) -> CoverageReport:
    return CoverageReport.from_summary_mapping(coverage_mapping)


# ============================================================================
# On-disk Fixtures
# ============================================================================


@pytest.fixture
def workspace(tmp_path: Path, project: Project, file_results, run_summary, coverage_mapping) -> Path:
    """A directory holding a config plus every collaborator file it points at."""
    (tmp_path / "suitetree-project.json").write_text(project.model_dump_json())
    results = RunResults(test_results=file_results, summary=run_summary)
    (tmp_path / "test-results.json").write_text(results.model_dump_json(by_alias=True))
    coverage_dir = tmp_path / "coverage"
    coverage_dir.mkdir()
    (coverage_dir / "coverage-summary.json").write_text(json.dumps(coverage_mapping))
    SuiteTreeConfig().save(tmp_path / "suitetree.json")
    return tmp_path
