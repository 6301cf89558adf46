"""Python language support for Prototyper."""

from .extractor import ClassSummary, NodeExtractor, PropertyExtractor, list_classes
from .injector import Injector
from .analysis.utils import is_package_file, path_to_logical_fqn

__all__ = [
    "ClassSummary",
    "NodeExtractor",
    "PropertyExtractor",
    "list_classes",
    "Injector",
    "is_package_file",
    "path_to_logical_fqn",
]
