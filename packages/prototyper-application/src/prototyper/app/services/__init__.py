from .registry import DependencyRegistry
from .scanner import ScannerService, SourceFile

__all__ = ["DependencyRegistry", "ScannerService", "SourceFile"]
