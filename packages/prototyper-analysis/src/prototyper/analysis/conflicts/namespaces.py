import logging
from collections import defaultdict
from typing import Dict, Optional

from prototyper.spec import ClassModel, TypeRef
from .entities import NamespaceEntity, parse_namespace
from .sequences import Sequences

log = logging.getLogger(__name__)

# base short name -> {sequence: entity}
Counters = Dict[str, Dict[int, NamespaceEntity]]


class Namespaces:
    """
    Assigns import aliases to dependency types so that no two names bound in
    the module clash. Existing imports, instantiated types and the module's
    own classes are reserved before any new import is placed.
    """

    def __init__(self, sequences: Optional[Sequences] = None):
        self.sequences = sequences or Sequences()

    def resolve(self, model: ClassModel) -> None:
        counters = self._initiate_counters(model)

        for dependency in model.dependencies.values():
            type_ref = dependency.type

            imported = model.find_import(type_ref.fqn)
            if imported is not None:
                type_ref.alias = imported.alias
                continue

            namespace = parse_namespace(type_ref.short_name, type_ref.fqn)
            slots = counters[namespace.name]

            known = self._find_reusable(slots, type_ref.fqn)
            if known is not None:
                type_ref.alias = known.alias
                continue

            sequence = self.sequences.find(slots.keys(), namespace.sequence)
            if sequence != namespace.sequence:
                namespace.sequence = sequence
                namespace.alias = namespace.full_name()
                log.debug(
                    f"{model.class_name}: importing '{type_ref.fqn}' "
                    f"as '{namespace.alias}'"
                )
            type_ref.alias = namespace.alias
            slots[sequence] = namespace

    def _initiate_counters(self, model: ClassModel) -> Counters:
        counters: Counters = defaultdict(dict)

        # The class itself comes first, so that instantiating it never makes
        # its own name importable.
        self._reserve(
            counters,
            parse_namespace(model.class_name, model.fqn, reusable=False),
        )

        for usage in model.imports:
            self._reserve(
                counters, parse_namespace(usage.bound_name, usage.fqn, usage.alias)
            )

        for fqn in model.instantiations:
            short_name = TypeRef(fqn).short_name
            self._reserve(counters, parse_namespace(short_name, fqn))

        # Sibling classes rebind their names after any import.
        for name in model.module_classes:
            fqn = f"{model.namespace}.{name}" if model.namespace else name
            self._reserve(counters, parse_namespace(name, fqn))

        return counters

    def _reserve(self, counters: Counters, namespace: NamespaceEntity) -> None:
        # The first binding of a name wins, later ones can not be told apart.
        slots = counters[namespace.name]
        if namespace.sequence not in slots:
            slots[namespace.sequence] = namespace

    def _find_reusable(
        self, slots: Dict[int, NamespaceEntity], fqn: str
    ) -> Optional[NamespaceEntity]:
        for namespace in slots.values():
            if namespace.reusable and namespace.fqn == fqn:
                return namespace
        return None
