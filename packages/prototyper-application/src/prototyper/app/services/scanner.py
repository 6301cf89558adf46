import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, List, Optional

from prototyper.common import bus
from prototyper.lang.python import is_package_file, path_to_logical_fqn
from prototyper.needle import L

log = logging.getLogger(__name__)

SKIPPED_DIRS = {"__pycache__", "node_modules"}


@dataclass
class SourceFile:
    path: Path
    # Relative to the project root, or absolute when outside of it
    rel_path: Path
    namespace: str
    is_package: bool


def _is_within(path: Path, directory: Path) -> bool:
    return directory in path.parents


class ScannerService:
    def __init__(self, root_path: Path, scan_paths: Iterable[str] = (".",)):
        self.root_path = root_path.resolve()
        self.scan_roots = [(self.root_path / p).resolve() for p in scan_paths]

    def _is_skipped(self, path: Path, base: Path) -> bool:
        parts = path.relative_to(base).parts[:-1]
        return any(part.startswith(".") or part in SKIPPED_DIRS for part in parts)

    def _collect(self, targets: Iterable[Path]) -> List[Path]:
        found = set()
        for target in targets:
            if target.is_dir():
                found.update(
                    p for p in target.rglob("*.py") if not self._is_skipped(p, target)
                )
            elif target.is_file() and target.suffix == ".py":
                found.add(target)
            elif not target.exists():
                bus.warning(L.scan.path_not_found, path=target)
        return sorted(found)

    def _module_root_for(self, file_path: Path) -> Path:
        """The directory that dotted module names of file_path are relative to."""
        owners = [root for root in self.scan_roots if _is_within(file_path, root)]
        if owners:
            return max(owners, key=lambda root: len(root.parts))
        if _is_within(file_path, self.root_path):
            return self.root_path
        return file_path.parent

    def describe(self, file_path: Path) -> SourceFile:
        file_path = file_path.resolve()
        logical = file_path.relative_to(self._module_root_for(file_path))
        if _is_within(file_path, self.root_path):
            rel_path = file_path.relative_to(self.root_path)
        else:
            rel_path = file_path
        return SourceFile(
            path=file_path,
            rel_path=rel_path,
            namespace=path_to_logical_fqn(logical),
            is_package=is_package_file(logical),
        )

    def scan(self, paths: Optional[List[Path]] = None) -> List[SourceFile]:
        """
        Collects the Python files below `paths`, or below the configured scan
        paths when none are given.
        """
        targets = [p.resolve() for p in paths] if paths else self.scan_roots
        files = [self.describe(p) for p in self._collect(targets)]
        log.debug(f"Collected {len(files)} files from {len(targets)} targets")
        return files
