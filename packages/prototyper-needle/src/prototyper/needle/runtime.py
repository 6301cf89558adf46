import os
from pathlib import Path
from typing import Dict, List, Optional, Set, Union

from .loader import Loader
from .pointer import SemanticPointer

LANG_ENV_VAR = "PROTOTYPER_LANG"


def find_project_root(start_dir: Optional[Path] = None) -> Path:
    """Walks upwards to the nearest directory holding pyproject.toml or .git."""
    start = (start_dir or Path.cwd()).resolve()
    current = start
    while current.parent != current:
        if (current / "pyproject.toml").is_file() or (current / ".git").is_dir():
            return current
        current = current.parent
    return start


class Needle:
    """
    Resolves semantic pointers to message templates.

    Every root may carry `needle/<lang>/` (packaged catalogs) and
    `.prototyper/needle/<lang>/` (project overrides). Roots later in the list
    override earlier ones.
    """

    def __init__(self, roots: Optional[List[Path]] = None):
        self.default_lang = "en"
        self.roots: List[Path] = roots if roots else [find_project_root()]
        self._loader = Loader()
        self._registry: Dict[str, Dict[str, str]] = {}
        self._loaded_langs: Set[str] = set()

    def add_root(self, path: Path) -> None:
        """Registers a root with the lowest priority."""
        if path not in self.roots:
            self.roots.insert(0, path)
            self.reload()

    def reload(self) -> None:
        self._registry.clear()
        self._loaded_langs.clear()

    def _ensure_lang_loaded(self, lang: str) -> None:
        if lang in self._loaded_langs:
            return

        merged: Dict[str, str] = {}
        for root in self.roots:
            for catalog_dir in (
                root / "needle" / lang,
                root / ".prototyper" / "needle" / lang,
            ):
                merged.update(self._loader.load_directory(catalog_dir))

        self._registry[lang] = merged
        self._loaded_langs.add(lang)

    def _lookup(self, key: str, lang: str) -> Optional[str]:
        self._ensure_lang_loaded(lang)
        return self._registry[lang].get(key)

    def get(
        self, pointer: Union[SemanticPointer, str], lang: Optional[str] = None
    ) -> str:
        """
        Looks the pointer up in the requested language, then in the default
        language, and finally falls back to the pointer's own path.
        """
        key = str(pointer)
        target_lang = lang or os.getenv(LANG_ENV_VAR) or self.default_lang

        value = self._lookup(key, target_lang)
        if value is None and target_lang != self.default_lang:
            value = self._lookup(key, self.default_lang)
        return key if value is None else value


needle = Needle()
