from dataclasses import replace
from typing import Iterable, Optional

from prototyper.spec import ClassFacts, ClassModel, ClassNotDeclaredError, Dependency
from .conflicts import Names, Namespaces


class ClassModelBuilder:
    def __init__(
        self,
        names: Optional[Names] = None,
        namespaces: Optional[Namespaces] = None,
    ):
        self.names = names or Names()
        self.namespaces = namespaces or Namespaces()

    def build(
        self, facts: ClassFacts, dependencies: Iterable[Dependency]
    ) -> ClassModel:
        if facts.identity is None:
            raise ClassNotDeclaredError()

        model = ClassModel.create(facts.identity.name, facts.identity.namespace)
        for dependency in dependencies:
            # The model owns its dependencies: resolution mutates them in place.
            model.dependencies[dependency.name] = replace(
                dependency, type=replace(dependency.type)
            )

        self._fill_stmts(model, facts)
        self._fill_constructor_params(model, facts)
        self._fill_constructor_vars(model, facts)
        self._resolve_conflicts(model)
        return model

    def _fill_stmts(self, model: ClassModel, facts: ClassFacts) -> None:
        for usage in facts.imports:
            model.add_import(usage.fqn, usage.alias)

        for fqn in facts.instantiations:
            model.add_instantiation(fqn)

        model.module_classes = list(facts.module_classes)

    def _fill_constructor_params(self, model: ClassModel, facts: ClassFacts) -> None:
        model.has_constructor = facts.constructor.declared
        for param in facts.constructor.params:
            model.add_param(replace(param))

    def _fill_constructor_vars(self, model: ClassModel, facts: ClassFacts) -> None:
        # Variables that are also constructor parameters are already reserved
        # through the parameter list.
        for var in facts.local_vars:
            if var in model.constructor_params or var in model.constructor_vars:
                continue
            model.constructor_vars.append(var)

    def _resolve_conflicts(self, model: ClassModel) -> None:
        self.names.resolve(model)
        self.namespaces.resolve(model)
