from .sequences import Sequences
from .names import Names
from .namespaces import Namespaces

__all__ = ["Sequences", "Names", "Namespaces"]
