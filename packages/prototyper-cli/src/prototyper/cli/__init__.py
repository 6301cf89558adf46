__path__ = __import__("pkgutil").extend_path(__path__, __name__)

from pathlib import Path

from prototyper.needle import needle

# Help texts are resolved while the commands are declared, so the CLI
# catalogs must be registered before '.main' is imported.
needle.add_root(Path(__file__).parent / "assets")

from .main import app  # noqa: E402

__all__ = ["app"]
