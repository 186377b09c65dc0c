"""Tree node data structures shared by the test and file views."""

from __future__ import annotations

from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field

from suitetree.models.coverage import CoverageSummary


class TestStatus(str, Enum):
    """Reconciliation state reported by the test runner."""

    __test__ = False

    UNKNOWN = "Unknown"
    PASSED = "KnownSuccess"
    FAILED = "KnownFail"
    SKIPPED = "KnownSkip"


class NodeKind(str, Enum):
    DIRECTORY = "directory"
    FILE = "file"
    TEST = "test"


class DisplayState(str, Enum):
    IDLE = "idle"
    EXECUTING = "executing"


class SnapshotErrorStatus(str, Enum):
    ERROR = "error"
    UNKNOWN = "unknown"


class ItBlock(BaseModel):
    """A single test case inside a test file, matched to results by name."""

    name: str
    status: TestStatus = TestStatus.UNKNOWN
    assertion_message: str = ""
    is_executing: bool = False
    snapshot_error_status: SnapshotErrorStatus = SnapshotErrorStatus.UNKNOWN


class Node(BaseModel):
    """A directory, source file or test file in one of the tree views."""

    path: str
    label: str = ""
    secondary_label: str = ""
    kind: NodeKind = NodeKind.FILE
    status: TestStatus = TestStatus.UNKNOWN
    output: str = ""
    it_blocks: list[ItBlock] = Field(default_factory=list)
    coverage: CoverageSummary = Field(default_factory=CoverageSummary)
    is_selected: bool = False
    display: DisplayState = DisplayState.IDLE
    child_nodes: list[Node] = Field(default_factory=list)

    @property
    def is_test(self) -> bool:
        return self.kind == NodeKind.TEST

    @property
    def is_directory(self) -> bool:
        return self.kind == NodeKind.DIRECTORY

    @property
    def is_executing(self) -> bool:
        return self.display == DisplayState.EXECUTING

    def set_to_file_icon(self) -> None:
        self.display = DisplayState.IDLE

    def spin(self) -> None:
        self.display = DisplayState.EXECUTING

    def find_it_block(self, name: str) -> Optional[ItBlock]:
        """Return the first it block titled ``name``; later duplicates are never matched."""
        for it in self.it_blocks:
            if it.name == name:
                return it
        return None

    def walk(self):
        """Yield this node and all descendants depth-first, in child order."""
        yield self
        for child in self.child_nodes:
            yield from child.walk()


def status_label(status: TestStatus | str) -> str:
    """Plain secondary label for a file's reconciled status."""
    return {
        TestStatus.PASSED: "passed",
        TestStatus.FAILED: "failed",
        TestStatus.SKIPPED: "skipped",
    }.get(TestStatus(status), "")


def coverage_label(pct: Optional[float]) -> str:
    if pct is None:
        return ""
    return f"{pct:g}%"
