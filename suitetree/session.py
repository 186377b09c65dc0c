"""Session driver: wires the discovery, runner and coverage inputs into one file store."""

from __future__ import annotations

import json
import logging
import time
from pathlib import Path

from suitetree.coverage.loader import load_coverage_report
from suitetree.models.config import SuiteTreeConfig
from suitetree.models.project import Project
from suitetree.models.test_result import RunResults
from suitetree.store.files import FileStore
from suitetree.tree.builder import build_forest

logger = logging.getLogger(__name__)


class Session:
    """Loads collaborator outputs from disk and applies them to a FileStore."""

    def __init__(self, config: SuiteTreeConfig, base_dir: Path | None = None):
        self.config = config
        self.base_dir = base_dir or Path(".")
        self.store = FileStore(
            tests_only=config.tests_only,
            strict=config.strict,
            snapshot_mismatch_marker=config.snapshot_mismatch_marker,
        )
        self.project: Project | None = None

    def _resolve(self, name: str) -> Path:
        path = Path(name)
        return path if path.is_absolute() else self.base_dir / path

    def load_project(self, project: Project | None = None) -> Project:
        """Build both views from the project description and initialize the store."""
        start = time.time()
        if project is None:
            project = Project.load(self._resolve(self.config.project_file))
        self.project = project

        tests, test_index = build_forest(project)
        files, file_index = build_forest(project, include=lambda f: not f.is_test)
        self.store.initialize(tests, test_index)
        self.store.initialize_coverage_files(files, file_index)

        logger.info(
            "Loaded project: %d test files, %d source files in %.2fs",
            len(project.test_files), len(project.source_files), time.time() - start,
        )
        return project

    def apply_results(self, results: RunResults | None = None) -> RunResults:
        """Apply a completed run's results (and totals, when present)."""
        if results is None:
            path = self._resolve(self.config.results_file)
            if not path.exists():
                raise FileNotFoundError(f"Results file not found: {path}")
            with open(path) as f:
                results = RunResults(**json.load(f))

        self.store.apply_run_results(results.test_results)
        if results.summary is not None:
            self.store.apply_total_result(results.summary)

        failing = self.store.failing_assertions_by_file()
        logger.info(
            "Applied results for %d files, %d with failures",
            len(results.test_results), len(failing),
        )
        return results

    def apply_coverage(self) -> bool:
        """Apply the configured coverage report; returns False when none was usable."""
        report = load_coverage_report(self._resolve(self.config.coverage_file))
        if report is None:
            return False
        self.store.apply_coverage(report)
        return True
