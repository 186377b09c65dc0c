"""The file store: canonical test/file trees reconciled against run and coverage results."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Mapping, Sequence
from functools import wraps
from typing import Optional, Protocol

from suitetree.models.coverage import CoverageSummary, FileCoverage
from suitetree.models.node import (
    ItBlock,
    Node,
    SnapshotErrorStatus,
    TestStatus,
    coverage_label,
    status_label,
)
from suitetree.models.test_result import FileResult, RunSummary, TotalResult
from suitetree.tree.builder import build_root
from suitetree.tree.filtering import filter_by_text, filter_tree

logger = logging.getLogger(__name__)

Listener = Callable[["FileStore"], None]


class CoverageProvider(Protocol):
    def get_coverage_for_file(self, path: str) -> Optional[FileCoverage]: ...

    def get_summary(self) -> CoverageSummary: ...


def _mutation(method):
    """Emit exactly one change notification per outermost mutating call."""

    @wraps(method)
    def wrapper(self: "FileStore", *args, **kwargs):
        self._depth += 1
        try:
            return method(self, *args, **kwargs)
        finally:
            self._depth -= 1
            if self._depth == 0:
                self._notify()

    return wrapper


class FileStore:
    """Owns the tests and files forests plus their flat path indices.

    All mutation goes through this class, one operation at a time. Results
    that reference unknown paths or test titles are dropped, never raised.
    """

    def __init__(
        self,
        tests_only: bool = True,
        strict: bool = False,
        snapshot_mismatch_marker: str = "stored snapshot",
    ):
        self.tests_only = tests_only
        self.strict = strict
        self.snapshot_mismatch_marker = snapshot_mismatch_marker

        self.files: list[Node] = []
        self.tests: list[Node] = []
        self.nodes: dict[str, Node] = {}
        self.coverage_nodes: dict[str, Node] = {}
        self.text = ""
        self.total_result = TotalResult()
        self.total_coverage = CoverageSummary()

        self.version = 0
        self._listeners: list[Listener] = []
        self._depth = 0

    # ------------------------------------------------------------------
    # Change notification
    # ------------------------------------------------------------------

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Call ``listener`` after every mutation; returns an unsubscribe function."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self) -> None:
        self.version += 1
        for listener in list(self._listeners):
            listener(self)

    # ------------------------------------------------------------------
    # Initialization
    # ------------------------------------------------------------------

    @_mutation
    def initialize(self, tests: Sequence[Node], nodes: Mapping[str, Node]) -> None:
        """Replace the tests forest and test index wholesale."""
        keep = (lambda node: node.is_test) if self.tests_only else None
        filtered = filter_tree(build_root(tests), keep)

        self.tests = list(filtered.child_nodes)
        self.nodes = dict(nodes)
        # Pruned directories are copies; index the objects the forest shows
        for top in self.tests:
            for node in top.walk():
                self.nodes[node.path] = node
        logger.debug("Initialized tests view: %d roots, %d nodes", len(self.tests), len(self.nodes))

    @_mutation
    def initialize_coverage_files(self, files: Sequence[Node], nodes: Mapping[str, Node]) -> None:
        """Replace the files forest and coverage index wholesale."""
        self.files = list(files)
        self.coverage_nodes = dict(nodes)
        logger.debug(
            "Initialized files view: %d roots, %d nodes", len(self.files), len(self.coverage_nodes)
        )

    def get_node_by_path(self, path: str) -> Optional[Node]:
        node = self.nodes.get(path)
        if node is not None:
            return node
        return self.coverage_nodes.get(path)

    # ------------------------------------------------------------------
    # Reconciliation
    # ------------------------------------------------------------------

    def _dropped(self, msg: str, *args) -> None:
        logger.log(logging.WARNING if self.strict else logging.DEBUG, msg, *args)

    @_mutation
    def apply_run_results(self, results: Iterable[FileResult]) -> None:
        """Merge a run's file results into the test tree.

        Status is reset first so nodes missing from ``results`` do not keep a
        previous run's outcome. Applying the same results twice is a no-op
        the second time.
        """
        self.reset_status()

        for result in results:
            node = self.nodes.get(result.file)
            if node is None:
                self._dropped("Dropping result for unknown file: %s", result.file)
                continue

            node.set_to_file_icon()
            node.status = result.status
            node.output = result.message
            node.secondary_label = status_label(result.status)

            for assertion in result.assertions:
                it = node.find_it_block(assertion.title)
                if it is None:
                    self._dropped(
                        "Dropping result for unknown test %r in %s", assertion.title, result.file
                    )
                    continue
                it.status = assertion.status
                it.assertion_message = assertion.message
                it.is_executing = False
                it.snapshot_error_status = (
                    SnapshotErrorStatus.ERROR
                    if self.snapshot_mismatch_marker in assertion.message
                    else SnapshotErrorStatus.UNKNOWN
                )

    @_mutation
    def apply_coverage(self, coverage: CoverageProvider) -> None:
        """Merge per-file coverage; files absent from the report keep their last values."""
        updated = 0
        for index in (self.nodes, self.coverage_nodes):
            for node in index.values():
                if node.is_test:
                    continue
                file_coverage = coverage.get_coverage_for_file(node.path)
                if file_coverage is None:
                    continue
                summary = file_coverage.to_summary()
                node.coverage.branches_percentage = summary.branches_percentage
                node.coverage.line_percentage = summary.line_percentage
                node.coverage.function_percentage = summary.function_percentage
                node.coverage.statement_percentage = summary.statement_percentage
                node.secondary_label = coverage_label(summary.line_percentage)
                updated += 1

        total = coverage.get_summary()
        self.total_coverage.branches_percentage = total.branches_percentage
        self.total_coverage.line_percentage = total.line_percentage
        self.total_coverage.function_percentage = total.function_percentage
        self.total_coverage.statement_percentage = total.statement_percentage
        logger.debug("Applied coverage to %d nodes", updated)

    @_mutation
    def apply_total_result(self, summary: RunSummary) -> None:
        self.total_result = TotalResult.from_run_summary(summary)

    # ------------------------------------------------------------------
    # Status lifecycle
    # ------------------------------------------------------------------

    @_mutation
    def mark_all_executing(self) -> None:
        """Show every file as in progress while a run is dispatched."""
        self.reset_status()
        for node in self.nodes.values():
            if not node.is_directory:
                node.spin()
            for it in node.it_blocks:
                it.is_executing = True

    @_mutation
    def reset_status(self) -> None:
        for node in self.nodes.values():
            node.set_to_file_icon()
            for it in node.it_blocks:
                it.is_executing = False
                it.status = TestStatus.UNKNOWN

    # ------------------------------------------------------------------
    # Selection
    # ------------------------------------------------------------------

    @_mutation
    def unhighlight_all(self) -> None:
        for index in (self.nodes, self.coverage_nodes):
            for node in index.values():
                node.is_selected = False

    @_mutation
    def select(self, path: str) -> Optional[Node]:
        self.unhighlight_all()
        node = self.get_node_by_path(path)
        if node is not None:
            node.is_selected = True
        return node

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    @_mutation
    def set_search_text(self, text: str) -> None:
        self.text = text

    def visible_files(self) -> Sequence[Node]:
        return filter_by_text(self.coverage_nodes, self.text, default=self.files)

    def visible_tests(self) -> Sequence[Node]:
        return filter_by_text(
            self.nodes, self.text, predicate=lambda node: node.is_test, default=self.tests
        )

    def failing_assertions_by_file(self) -> dict[str, list[ItBlock]]:
        failed: dict[str, list[ItBlock]] = {}
        for node in self.nodes.values():
            failing = [it for it in node.it_blocks if it.status == TestStatus.FAILED]
            if failing:
                failed[node.path] = failing
        return failed

    @_mutation
    def clear(self) -> None:
        """Empty both forests; the flat indices and reconciled state are kept."""
        self.files = []
        self.tests = []
