from typing import Dict, Iterable, List, Optional, Tuple

from prototyper.spec import Dependency


class DependencyRegistry:
    """Maps property names to the fully-qualified types that back them."""

    def __init__(self, types: Optional[Dict[str, str]] = None):
        self._types: Dict[str, str] = dict(types or {})

    def resolve(self, names: Iterable[str]) -> Tuple[List[Dependency], List[str]]:
        dependencies: List[Dependency] = []
        unresolved: List[str] = []
        for name in names:
            fqn = self._types.get(name)
            if fqn is None:
                unresolved.append(name)
            else:
                dependencies.append(Dependency.create(name, fqn))
        return dependencies, unresolved
