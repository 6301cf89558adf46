from pathlib import Path
from textwrap import dedent
from typing import Any, Dict, List, Tuple

import tomli_w


class WorkspaceFactory:
    """Builds a throwaway project: a pyproject.toml plus source files."""

    def __init__(self, root_path: Path):
        self.root_path = root_path
        self._sources: List[Tuple[str, str]] = []
        self._pyproject_data: Dict[str, Any] = {}

    def with_project_name(self, name: str) -> "WorkspaceFactory":
        project = self._pyproject_data.setdefault("project", {})
        project["name"] = name
        return self

    def with_config(self, prototyper_config: Dict[str, Any]) -> "WorkspaceFactory":
        tool = self._pyproject_data.setdefault("tool", {})
        tool.setdefault("prototyper", {}).update(prototyper_config)
        return self

    def with_dependencies(self, types: Dict[str, str]) -> "WorkspaceFactory":
        return self.with_config({"dependencies": types})

    def with_source(self, path: str, content: str) -> "WorkspaceFactory":
        self._sources.append((path, dedent(content).lstrip()))
        return self

    def build(self) -> Path:
        if self._pyproject_data:
            with (self.root_path / "pyproject.toml").open("wb") as f:
                tomli_w.dump(self._pyproject_data, f)

        for path, content in self._sources:
            output_path = self.root_path / path
            output_path.parent.mkdir(parents=True, exist_ok=True)
            output_path.write_text(content, encoding="utf-8")
        return self.root_path
