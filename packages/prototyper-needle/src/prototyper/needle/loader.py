import logging
import os
from pathlib import Path
from typing import Any, Dict, List, Optional

from .handlers import JsonHandler
from .interfaces import FileHandler

log = logging.getLogger(__name__)


def flatten(data: Dict[str, Any], prefix: str = "") -> Dict[str, str]:
    """
    Turns nested catalog sections into dotted keys, so that
    `{"inject": {"file": {"success": "..."}}}` and
    `{"inject.file.success": "..."}` are equivalent.
    """
    flat: Dict[str, str] = {}
    for key, value in data.items():
        full_key = f"{prefix}.{key}" if prefix else str(key)
        if isinstance(value, dict):
            flat.update(flatten(value, full_key))
        else:
            flat[full_key] = str(value)
    return flat


class Loader:
    def __init__(self, handlers: Optional[List[FileHandler]] = None):
        self.handlers = handlers or [JsonHandler()]

    def _load_file(self, path: Path) -> Dict[str, str]:
        for handler in self.handlers:
            if not handler.match(path):
                continue
            try:
                return flatten(handler.load(path))
            except (OSError, ValueError) as e:
                log.warning(f"Skipping unreadable message catalog {path}: {e}")
            return {}
        return {}

    def load_directory(self, root_path: Path) -> Dict[str, str]:
        """Merges every catalog below root_path, in sorted path order."""
        registry: Dict[str, str] = {}
        if not root_path.is_dir():
            return registry

        for dirpath, dirnames, filenames in os.walk(root_path):
            dirnames.sort()
            for filename in sorted(filenames):
                registry.update(self._load_file(Path(dirpath) / filename))
        return registry
