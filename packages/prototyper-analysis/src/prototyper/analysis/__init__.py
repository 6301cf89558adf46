__path__ = __import__("pkgutil").extend_path(__path__, __name__)

from .conflicts import Sequences, Names, Namespaces
from .builder import ClassModelBuilder
from .properties import extract_virtual_properties

__all__ = [
    "Sequences",
    "Names",
    "Namespaces",
    "ClassModelBuilder",
    "extract_virtual_properties",
]
