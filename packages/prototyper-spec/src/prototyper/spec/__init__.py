# This must be the very first line to allow this package to coexist with other
# namespace packages in editable installs.
__path__ = __import__("pkgutil").extend_path(__path__, __name__)

from .models import (
    ArgumentKind,
    ClassModel,
    ConstructorParam,
    Dependency,
    ImportUsage,
    TypeRef,
)
from .facts import ClassFacts, ClassIdentity, ConstructorFacts, PropertyFacts
from .exceptions import PrototypeError, ClassNotDeclaredError, ConfigError
from .protocols import (
    ClassExtractorProtocol,
    PropertyLocatorProtocol,
    DependencyInjectorProtocol,
)

__all__ = [
    "ClassExtractorProtocol",
    "PropertyLocatorProtocol",
    "DependencyInjectorProtocol",
    "ArgumentKind",
    "ClassModel",
    "ConstructorParam",
    "Dependency",
    "ImportUsage",
    "TypeRef",
    # Parser facts
    "ClassFacts",
    "ClassIdentity",
    "ConstructorFacts",
    "PropertyFacts",
    # Errors
    "PrototypeError",
    "ClassNotDeclaredError",
    "ConfigError",
]
