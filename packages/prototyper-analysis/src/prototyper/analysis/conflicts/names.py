import logging
from collections import defaultdict
from typing import Dict, Iterable, List, Optional, Set

from prototyper.spec import ClassModel
from .entities import parse_name
from .sequences import Sequences

log = logging.getLogger(__name__)


class Names:
    """
    Assigns every dependency a constructor variable name that collides neither
    with existing constructor parameters, nor with local variables of the
    constructor body, nor with another dependency.
    """

    def __init__(self, sequences: Optional[Sequences] = None):
        self.sequences = sequences or Sequences()

    def resolve(self, model: ClassModel) -> None:
        reserved = self._reserved_sequences(self._reserved_names(model))

        # Insertion order decides which dependency keeps the bare name.
        for dependency in model.dependencies.values():
            entity = parse_name(dependency.var)
            used = reserved[entity.name]

            entity.sequence = self.sequences.find(used, entity.sequence)
            used.add(entity.sequence)

            resolved = entity.full_name()
            if resolved != dependency.var:
                log.debug(
                    f"{model.class_name}: renamed variable '{dependency.var}' "
                    f"to '{resolved}'"
                )
            dependency.var = resolved

    def _reserved_names(self, model: ClassModel) -> List[str]:
        names = list(model.constructor_vars)
        names.extend(model.constructor_params.keys())
        return names

    def _reserved_sequences(self, names: Iterable[str]) -> Dict[str, Set[int]]:
        sequences: Dict[str, Set[int]] = defaultdict(set)
        for name in names:
            entity = parse_name(name)
            sequences[entity.name].add(entity.sequence)
        return sequences
