import logging
from dataclasses import dataclass, field
from typing import Iterable, List, Optional

import libcst as cst
from libcst.helpers import get_full_name_for_node

from prototyper.analysis import ClassModelBuilder, extract_virtual_properties
from prototyper.spec import (
    ClassFacts,
    ClassIdentity,
    ClassModel,
    ClassNotDeclaredError,
    Dependency,
    PropertyFacts,
)
from .analysis.visitors import (
    DEFAULT_IGNORED_BASES,
    DeclareClass,
    LocateConstructor,
    LocateProperties,
    LocateStatements,
    LocateVariables,
    find_method,
    receiver_name,
    resolve_reference,
)

log = logging.getLogger(__name__)


@dataclass
class ClassSummary:
    name: str
    # Fully-qualified names of the bases, as far as they can be resolved
    bases: List[str] = field(default_factory=list)


class NodeExtractor:
    def __init__(
        self,
        builder: Optional[ClassModelBuilder] = None,
        ignored_bases: Iterable[str] = (),
    ):
        self.builder = builder or ClassModelBuilder()
        self.ignored_bases = {*DEFAULT_IGNORED_BASES, *ignored_bases}

    def extract(
        self,
        source_code: str,
        dependencies: List[Dependency],
        namespace: str = "",
        class_name: Optional[str] = None,
        is_package: bool = False,
    ) -> ClassModel:
        module = cst.parse_module(source_code)
        facts = self.collect_facts(module, namespace, class_name, is_package)
        return self.builder.build(facts, dependencies)

    def collect_facts(
        self,
        module: cst.Module,
        namespace: str = "",
        class_name: Optional[str] = None,
        is_package: bool = False,
    ) -> ClassFacts:
        declaration = DeclareClass(class_name)
        module.visit(declaration)
        node = declaration.node
        if node is None:
            raise ClassNotDeclaredError(class_name)

        statements = LocateStatements(namespace, is_package)
        module.visit(statements)

        constructor = LocateConstructor(
            declaration.classes,
            statements.bindings,
            namespace,
            self.ignored_bases,
        ).locate(node)

        log.debug(
            f"Collected facts for '{node.name.value}': "
            f"{len(statements.imports)} imports, "
            f"{len(constructor.params)} constructor params"
        )
        return ClassFacts(
            identity=ClassIdentity(node.name.value, namespace),
            imports=statements.imports,
            instantiations=statements.instantiations,
            constructor=constructor,
            local_vars=self._local_vars(node),
            module_classes=list(declaration.classes),
        )

    def _local_vars(self, node: cst.ClassDef) -> List[str]:
        init = find_method(node, "__init__")
        if init is None:
            # The generated constructor will bind 'self'
            return ["self"]

        variables = LocateVariables()
        init.body.visit(variables)
        receiver = receiver_name(init)
        names = [receiver] if receiver else []
        return names + [name for name in variables.names if name != receiver]


class PropertyExtractor:
    def get_prototype_properties(
        self, source_code: str, class_name: Optional[str] = None
    ) -> List[str]:
        module = cst.parse_module(source_code)
        declaration = DeclareClass(class_name)
        module.visit(declaration)
        if declaration.node is None:
            raise ClassNotDeclaredError(class_name)

        locator = LocateProperties()
        declaration.node.visit(locator)
        return extract_virtual_properties(
            PropertyFacts(declared=locator.declared, referenced=locator.referenced)
        )


def list_classes(
    source_code: str, namespace: str = "", is_package: bool = False
) -> List[ClassSummary]:
    """The module's top-level classes with their bases resolved."""
    module = cst.parse_module(source_code)
    declaration = DeclareClass()
    module.visit(declaration)
    statements = LocateStatements(namespace, is_package)
    module.visit(statements)
    bindings = statements.bindings

    summaries = []
    for name, node in declaration.classes.items():
        bases = []
        for base in node.bases:
            written = get_full_name_for_node(base.value)
            resolved = resolve_reference(written, bindings, namespace) if written else None
            if resolved:
                bases.append(resolved)
        summaries.append(ClassSummary(name=name, bases=bases))
    return summaries
