__path__ = __import__("pkgutil").extend_path(__path__, __name__)

from .loader import PrototyperConfig, find_pyproject_toml, load_config_from_path

__all__ = ["PrototyperConfig", "find_pyproject_toml", "load_config_from_path"]
