from pathlib import Path
from typing import List, Optional

from prototyper.common import FileSystemAdapter, TransactionManager
from prototyper.config import PrototyperConfig, load_config_from_path
from .runners import ClassReport, InjectRunner, ListRunner
from .services import DependencyRegistry, ScannerService


class PrototyperApp:
    """Wires configuration, scanning and the runners for one project."""

    def __init__(
        self,
        root_path: Path,
        config: Optional[PrototyperConfig] = None,
        fs: Optional[FileSystemAdapter] = None,
    ):
        self.config = config or load_config_from_path(root_path)
        self.root_path = self.config.root_path
        self.registry = DependencyRegistry(self.config.dependencies)
        self.scanner = ScannerService(self.root_path, self.config.scan_paths)
        self.transaction = TransactionManager(self.root_path, fs=fs)

        self.list_runner = ListRunner(self.scanner, self.registry, self.config.trait)
        self.inject_runner = InjectRunner(
            self.scanner, self.registry, self.transaction, self.config.trait
        )

    def run_list(self, paths: Optional[List[Path]] = None) -> List[ClassReport]:
        return self.list_runner.run(paths)

    def run_inject(
        self,
        paths: Optional[List[Path]] = None,
        remove_trait: bool = False,
        dry_run: bool = False,
    ) -> List[Path]:
        return self.inject_runner.run(paths, remove_trait=remove_trait, dry_run=dry_run)

    @property
    def error_count(self) -> int:
        return self.list_runner.error_count + self.inject_runner.error_count
