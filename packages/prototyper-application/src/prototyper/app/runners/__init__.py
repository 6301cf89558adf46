from .injection import InjectRunner
from .listing import ClassReport, ListRunner, select_targets

__all__ = ["ClassReport", "InjectRunner", "ListRunner", "select_targets"]
