__path__ = __import__("pkgutil").extend_path(__path__, __name__)

from pathlib import Path

from prototyper.needle import needle
from .messaging.bus import MessageBus
from .messaging.protocols import Renderer
from .transaction import FileSystemAdapter, RealFileSystem, TransactionManager

# Packaged message catalogs sit below the project's own overrides
needle.add_root(Path(__file__).parent / "assets")

bus = MessageBus()

__all__ = [
    "bus",
    "MessageBus",
    "Renderer",
    "FileSystemAdapter",
    "RealFileSystem",
    "TransactionManager",
]
