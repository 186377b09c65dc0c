"""Project description supplied by the test discovery step."""

from __future__ import annotations

import json
from pathlib import Path

from pydantic import BaseModel, Field


class ProjectFile(BaseModel):
    path: str
    is_test: bool = False
    it_blocks: list[str] = Field(default_factory=list)  # test titles, in file order


class Project(BaseModel):
    root_dir: str = "."
    files: list[ProjectFile] = Field(default_factory=list)

    @property
    def test_files(self) -> list[ProjectFile]:
        return [f for f in self.files if f.is_test]

    @property
    def source_files(self) -> list[ProjectFile]:
        return [f for f in self.files if not f.is_test]

    @classmethod
    def load(cls, path: str | Path) -> "Project":
        """Load a project description from a JSON file."""
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Project file not found: {path}")
        with open(path) as f:
            data = json.load(f)
        return cls(**data)
