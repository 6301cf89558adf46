from pathlib import Path
from typing import Any, Dict, Protocol


class FileHandler(Protocol):
    """A parser for one catalog file format."""

    def match(self, path: Path) -> bool: ...

    def load(self, path: Path) -> Dict[str, Any]: ...
