import logging
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

from prototyper.spec import ConfigError

if sys.version_info < (3, 11):
    import tomli as tomllib
else:
    import tomllib

log = logging.getLogger(__name__)


@dataclass
class PrototyperConfig:
    root_path: Path = field(default_factory=Path.cwd)
    scan_paths: List[str] = field(default_factory=lambda: ["."])
    # Fully-qualified name of the marker base class
    trait: Optional[str] = None
    # Property name -> fully-qualified type name
    dependencies: Dict[str, str] = field(default_factory=dict)


def find_pyproject_toml(search_path: Path) -> Optional[Path]:
    current_dir = search_path.resolve()
    while True:
        pyproject_path = current_dir / "pyproject.toml"
        if pyproject_path.is_file():
            return pyproject_path
        if current_dir.parent == current_dir:
            return None
        current_dir = current_dir.parent


def _is_dotted_name(value: Any) -> bool:
    return (
        isinstance(value, str)
        and bool(value)
        and all(part.isidentifier() for part in value.split("."))
    )


def _parse_section(data: Dict[str, Any], root_path: Path) -> PrototyperConfig:
    config = PrototyperConfig(root_path=root_path)

    if "scan_paths" in data:
        scan_paths = data["scan_paths"]
        if not isinstance(scan_paths, list) or not all(
            isinstance(p, str) for p in scan_paths
        ):
            raise ConfigError("'scan_paths' must be a list of strings")
        config.scan_paths = scan_paths

    trait = data.get("trait")
    if trait is not None:
        if not _is_dotted_name(trait):
            raise ConfigError(f"'trait' must be a dotted class name, got {trait!r}")
        config.trait = trait

    dependencies = data.get("dependencies", {})
    if not isinstance(dependencies, dict):
        raise ConfigError("'dependencies' must be a table")
    for name, fqn in dependencies.items():
        if not name.isidentifier():
            raise ConfigError(f"Dependency name {name!r} is not an identifier")
        if not _is_dotted_name(fqn):
            raise ConfigError(
                f"Dependency '{name}' must map to a dotted class name, got {fqn!r}"
            )
    config.dependencies = dict(dependencies)
    return config


def load_config_from_path(search_path: Path) -> PrototyperConfig:
    """
    Reads `[tool.prototyper]` from the nearest pyproject.toml at or above
    search_path. Without one, the defaults apply with search_path as root.
    """
    config_path = find_pyproject_toml(search_path)
    if config_path is None:
        return PrototyperConfig(root_path=search_path.resolve())

    try:
        with open(config_path, "rb") as f:
            data = tomllib.load(f)
    except OSError as e:
        log.warning(f"Could not read {config_path}: {e}")
        return PrototyperConfig(root_path=config_path.parent)
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(f"{config_path}: {e}") from e

    section = data.get("tool", {}).get("prototyper", {})
    if not isinstance(section, dict):
        raise ConfigError(f"{config_path}: [tool.prototyper] must be a table")
    log.debug(f"Loaded configuration from {config_path}")
    return _parse_section(section, config_path.parent)
