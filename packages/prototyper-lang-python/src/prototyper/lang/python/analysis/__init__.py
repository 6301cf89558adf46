from .utils import is_package_file, path_to_logical_fqn
from .visitors import (
    DeclareClass,
    LocateConstructor,
    LocateProperties,
    LocateStatements,
    LocateVariables,
)

__all__ = [
    "is_package_file",
    "path_to_logical_fqn",
    "DeclareClass",
    "LocateConstructor",
    "LocateProperties",
    "LocateStatements",
    "LocateVariables",
]
