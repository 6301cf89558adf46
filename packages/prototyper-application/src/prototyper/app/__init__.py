__path__ = __import__("pkgutil").extend_path(__path__, __name__)

from .core import PrototyperApp
from .runners import ClassReport, InjectRunner, ListRunner
from .services import DependencyRegistry, ScannerService, SourceFile

__all__ = [
    "PrototyperApp",
    "ClassReport",
    "InjectRunner",
    "ListRunner",
    "DependencyRegistry",
    "ScannerService",
    "SourceFile",
]
