"""Configuration models for suitetree."""

from __future__ import annotations

import json
from pathlib import Path

from pydantic import BaseModel, field_validator


class SuiteTreeConfig(BaseModel):
    # Collaborator inputs
    project_file: str = "suitetree-project.json"
    results_file: str = "test-results.json"
    coverage_file: str = "coverage/coverage-summary.json"

    # Tree views
    tests_only: bool = True  # prune non-test files from the tests view

    # Reconciliation
    strict: bool = False  # log unmatched results as warnings instead of debug
    snapshot_mismatch_marker: str = "stored snapshot"

    @field_validator("snapshot_mismatch_marker")
    @classmethod
    def marker_not_empty(cls, v: str) -> str:
        if not v:
            raise ValueError("snapshot_mismatch_marker must not be empty")
        return v

    @classmethod
    def load(cls, path: str | Path) -> "SuiteTreeConfig":
        """Load config from a JSON file."""
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")
        with open(path) as f:
            data = json.load(f)
        return cls(**data)

    def save(self, path: str | Path) -> None:
        """Save config to a JSON file."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w") as f:
            json.dump(self.model_dump(), f, indent=2)
