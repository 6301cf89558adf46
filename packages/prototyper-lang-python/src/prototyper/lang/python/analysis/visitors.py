import keyword
from typing import Dict, Iterable, List, Optional, Sequence, Set, Tuple

import libcst as cst
from libcst.helpers import (
    get_absolute_module_from_package_for_import,
    get_full_name_for_node,
)

from prototyper.spec import ArgumentKind, ConstructorFacts, ConstructorParam, ImportUsage

# Bases that never contribute constructor parameters.
DEFAULT_IGNORED_BASES = (
    "object",
    "builtins.object",
    "abc.ABC",
    "typing.Generic",
    "typing.Protocol",
)

_dummy_module = cst.Module([])


def code_for(node: cst.CSTNode) -> str:
    return _dummy_module.code_for_node(node).strip()


def resolve_reference(
    name: str, bindings: Dict[str, str], namespace: str = ""
) -> Optional[str]:
    """
    Resolves a dotted name as written in a module to a fully-qualified name.

    The head of the name is looked up in the module's import bindings. A bare
    name that is not imported is assumed to live in the module itself, a
    dotted one with an unknown head cannot be resolved.
    """
    head, _, rest = name.partition(".")
    if head in bindings:
        return f"{bindings[head]}.{rest}" if rest else bindings[head]
    if rest:
        return None
    return f"{namespace}.{name}" if namespace else name


def find_method(node: cst.ClassDef, name: str) -> Optional[cst.FunctionDef]:
    if not isinstance(node.body, cst.IndentedBlock):
        return None
    for stmt in node.body.body:
        if isinstance(stmt, cst.FunctionDef) and stmt.name.value == name:
            return stmt
    return None


def receiver_name(func: cst.FunctionDef) -> Optional[str]:
    for decorator in func.decorators:
        if get_full_name_for_node(decorator) in ("staticmethod", "classmethod"):
            return None
    params = [*func.params.posonly_params, *func.params.params]
    return params[0].name.value if params else None


def _param_names(params: cst.Parameters) -> Set[str]:
    names = {p.name.value for p in (*params.posonly_params, *params.params)}
    names.update(p.name.value for p in params.kwonly_params)
    if isinstance(params.star_arg, cst.Param):
        names.add(params.star_arg.name.value)
    if params.star_kwarg is not None:
        names.add(params.star_kwarg.name.value)
    return names


def is_nullable(annotation: Optional[cst.BaseExpression]) -> bool:
    """True for `Optional[...]`, `Union[..., None]` and `X | None`."""
    if annotation is None:
        return False

    if isinstance(annotation, cst.SimpleString):
        # Forward reference: look inside the string
        try:
            annotation = cst.parse_expression(str(annotation.evaluated_value))
        except cst.ParserSyntaxError:
            return False

    if isinstance(annotation, cst.Name):
        return annotation.value == "None"

    if isinstance(annotation, cst.BinaryOperation) and isinstance(
        annotation.operator, cst.BitOr
    ):
        return is_nullable(annotation.left) or is_nullable(annotation.right)

    if isinstance(annotation, cst.Subscript):
        name = get_full_name_for_node(annotation.value) or ""
        short_name = name.rsplit(".", 1)[-1]
        if short_name == "Optional":
            return True
        if short_name == "Union":
            return any(
                isinstance(element.slice, cst.Index)
                and is_nullable(element.slice.value)
                for element in annotation.slice
            )

    return False


def read_params(
    params: cst.Parameters, skip_receiver: bool = True
) -> List[ConstructorParam]:
    result: List[ConstructorParam] = []

    def extract(param: cst.Param, kind: ArgumentKind) -> ConstructorParam:
        annotation = None
        nullable = False
        if param.annotation is not None:
            annotation = code_for(param.annotation.annotation)
            nullable = is_nullable(param.annotation.annotation)

        default = None
        if param.default is not None:
            default = code_for(param.default)

        return ConstructorParam(
            name=param.name.value,
            kind=kind,
            annotation=annotation,
            default=default,
            nullable=nullable,
        )

    for p in params.posonly_params:
        result.append(extract(p, ArgumentKind.POSITIONAL_ONLY))

    for p in params.params:
        result.append(extract(p, ArgumentKind.POSITIONAL_OR_KEYWORD))

    # A bare '*' (ParamStar) only marks the start of keyword-only params
    if isinstance(params.star_arg, cst.Param):
        result.append(extract(params.star_arg, ArgumentKind.VAR_POSITIONAL))

    for p in params.kwonly_params:
        result.append(extract(p, ArgumentKind.KEYWORD_ONLY))

    if params.star_kwarg is not None:
        result.append(extract(params.star_kwarg, ArgumentKind.VAR_KEYWORD))

    positional = (ArgumentKind.POSITIONAL_ONLY, ArgumentKind.POSITIONAL_OR_KEYWORD)
    if skip_receiver and result and result[0].kind in positional:
        result = result[1:]
    return result


class DeclareClass(cst.CSTVisitor):
    """
    Collects the module's top-level classes and picks the target one: the
    class named `class_name`, or the first class when no name is given.
    """

    def __init__(self, class_name: Optional[str] = None):
        self.class_name = class_name
        self.classes: Dict[str, cst.ClassDef] = {}
        self.node: Optional[cst.ClassDef] = None

    def visit_ClassDef(self, node: cst.ClassDef) -> Optional[bool]:
        name = node.name.value
        self.classes.setdefault(name, node)
        if self.node is None and self.class_name in (None, name):
            self.node = node
        # Nested classes are never targets
        return False

    def visit_FunctionDef(self, node: cst.FunctionDef) -> Optional[bool]:
        return False


class LocateStatements(cst.CSTVisitor):
    """
    Collects module-level imports and the classes instantiated anywhere in
    the module, resolved to fully-qualified names.
    """

    def __init__(self, namespace: str = "", is_package: bool = False):
        self.namespace = namespace
        self.package = namespace if is_package else namespace.rpartition(".")[0]
        self.imports: List[ImportUsage] = []
        self._calls: List[str] = []
        self._depth = 0

    @property
    def bindings(self) -> Dict[str, str]:
        return {usage.bound_name: usage.fqn for usage in self.imports}

    @property
    def instantiations(self) -> List[str]:
        bindings = self.bindings
        result: List[str] = []
        for name in self._calls:
            fqn = resolve_reference(name, bindings, self.namespace)
            if fqn and fqn not in result:
                result.append(fqn)
        return result

    def visit_ClassDef(self, node: cst.ClassDef) -> Optional[bool]:
        self._depth += 1
        return True

    def leave_ClassDef(self, original_node: cst.ClassDef) -> None:
        self._depth -= 1

    def visit_FunctionDef(self, node: cst.FunctionDef) -> Optional[bool]:
        self._depth += 1
        return True

    def leave_FunctionDef(self, original_node: cst.FunctionDef) -> None:
        self._depth -= 1

    def visit_Import(self, node: cst.Import) -> Optional[bool]:
        if self._depth:
            return False

        for alias in node.names:
            name = get_full_name_for_node(alias.name)
            if not name:
                continue
            bound = alias.evaluated_alias
            if bound:
                self.imports.append(ImportUsage(name, bound))
            else:
                # 'import a.b' binds 'a'
                self.imports.append(ImportUsage(name.split(".")[0]))
        return False

    def visit_ImportFrom(self, node: cst.ImportFrom) -> Optional[bool]:
        if self._depth or isinstance(node.names, cst.ImportStar):
            return False

        module = get_absolute_module_from_package_for_import(
            self.package or None, node
        )
        if not module or module == "__future__":
            return False

        for alias in node.names:
            self.imports.append(
                ImportUsage(f"{module}.{alias.evaluated_name}", alias.evaluated_alias)
            )
        return False

    def visit_Call(self, node: cst.Call) -> Optional[bool]:
        name = get_full_name_for_node(node.func)
        if name and name.rsplit(".", 1)[-1][:1].isupper():
            self._calls.append(name)
        return True


class LocateConstructor:
    """
    Reads the constructor signature of a class.

    A class without its own `__init__` inherits the first one found along
    its same-module base classes. When a base outside the module comes
    first, its signature is unknown and the constructor is modelled as a
    pass-through `*args, **kwargs`.
    """

    def __init__(
        self,
        classes: Dict[str, cst.ClassDef],
        bindings: Optional[Dict[str, str]] = None,
        namespace: str = "",
        ignored_bases: Iterable[str] = DEFAULT_IGNORED_BASES,
    ):
        self.classes = classes
        self.bindings = bindings or {}
        self.namespace = namespace
        self.ignored_bases = set(ignored_bases)

    def locate(self, node: cst.ClassDef) -> ConstructorFacts:
        init = find_method(node, "__init__")
        if init is not None:
            return ConstructorFacts(declared=True, params=read_params(init.params))

        inherited, opaque = self._find_inherited(node, {node.name.value})
        if inherited is not None:
            return ConstructorFacts(declared=False, params=read_params(inherited.params))
        if opaque:
            return ConstructorFacts(
                declared=False,
                params=[
                    ConstructorParam("args", ArgumentKind.VAR_POSITIONAL),
                    ConstructorParam("kwargs", ArgumentKind.VAR_KEYWORD),
                ],
            )
        return ConstructorFacts()

    def _find_inherited(
        self, node: cst.ClassDef, seen: Set[str]
    ) -> Tuple[Optional[cst.FunctionDef], bool]:
        for base in node.bases:
            name = get_full_name_for_node(base.value)
            if name is not None and name in self.classes:
                if name in seen:
                    continue
                seen.add(name)
                parent = self.classes[name]
                init = find_method(parent, "__init__")
                if init is not None:
                    return init, False
                found, opaque = self._find_inherited(parent, seen)
                if found is not None or opaque:
                    return found, opaque
            elif not self._is_ignored(name):
                return None, True
        return None, False

    def _is_ignored(self, name: Optional[str]) -> bool:
        if name is None:
            return False
        if name in self.ignored_bases:
            return True
        return resolve_reference(name, self.bindings, self.namespace) in self.ignored_bases


class LocateVariables(cst.CSTVisitor):
    """
    Every plain name used in a function body: assigned locals, loop and
    handler targets, nested definitions, and the globals it reads.
    Attribute and keyword-argument names are not variables.
    """

    def __init__(self):
        self.names: List[str] = []
        self._skipped: Set[int] = set()

    def visit_Attribute(self, node: cst.Attribute) -> Optional[bool]:
        self._skipped.add(id(node.attr))
        return True

    def visit_Arg(self, node: cst.Arg) -> Optional[bool]:
        if node.keyword is not None:
            self._skipped.add(id(node.keyword))
        return True

    def visit_Name(self, node: cst.Name) -> Optional[bool]:
        name = node.value
        if id(node) in self._skipped or keyword.iskeyword(name):
            return False
        if name not in self.names:
            self.names.append(name)
        return False


class LocateProperties(cst.CSTVisitor):
    """
    Splits the instance attributes of a class into the ones it declares and
    the ones its instance methods read through the receiver (`self.x`).

    Visit it from the ClassDef node itself.
    """

    def __init__(self):
        self.declared: List[str] = []
        self.referenced: List[str] = []
        self._receivers: List[Optional[str]] = []
        self._stores: Set[int] = set()
        self._class_depth = 0

    @property
    def _receiver(self) -> Optional[str]:
        return self._receivers[-1] if self._receivers else None

    def _declare(self, name: str) -> None:
        if name not in self.declared:
            self.declared.append(name)

    def _is_receiver_attribute(self, node: cst.BaseExpression) -> bool:
        receiver = self._receiver
        return (
            receiver is not None
            and isinstance(node, cst.Attribute)
            and isinstance(node.value, cst.Name)
            and node.value.value == receiver
        )

    def _declare_members(self, node: cst.ClassDef) -> None:
        body = node.body
        if isinstance(body, cst.SimpleStatementSuite):
            self._declare_statements(body.body)
            return

        for stmt in body.body:
            if isinstance(stmt, (cst.FunctionDef, cst.ClassDef)):
                self._declare(stmt.name.value)
            elif isinstance(stmt, cst.SimpleStatementLine):
                self._declare_statements(stmt.body)

    def _declare_statements(
        self, statements: Sequence[cst.BaseSmallStatement]
    ) -> None:
        for small in statements:
            if isinstance(small, cst.Assign):
                for target in small.targets:
                    for name in _target_names(target.target):
                        self._declare(name)
            elif isinstance(small, (cst.AnnAssign, cst.AugAssign)):
                if isinstance(small.target, cst.Name):
                    self._declare(small.target.value)

    def _mark_store(self, target: cst.BaseExpression) -> None:
        if isinstance(target, (cst.Tuple, cst.List)):
            for element in target.elements:
                self._mark_store(element.value)
        elif isinstance(target, cst.Attribute) and self._is_receiver_attribute(
            target
        ):
            self._stores.add(id(target))
            self._declare(target.attr.value)

    def visit_ClassDef(self, node: cst.ClassDef) -> Optional[bool]:
        self._class_depth += 1
        if self._class_depth == 1:
            self._declare_members(node)
        return True

    def leave_ClassDef(self, original_node: cst.ClassDef) -> None:
        self._class_depth -= 1

    def visit_FunctionDef(self, node: cst.FunctionDef) -> Optional[bool]:
        if self._class_depth != 1:
            receiver = None
        elif not self._receivers:
            # A method of the class itself
            receiver = receiver_name(node)
        elif self._receiver in _param_names(node.params):
            receiver = None
        else:
            # Closures keep the enclosing method's receiver
            receiver = self._receiver
        self._receivers.append(receiver)
        return True

    def leave_FunctionDef(self, original_node: cst.FunctionDef) -> None:
        self._receivers.pop()

    def visit_Lambda(self, node: cst.Lambda) -> Optional[bool]:
        receiver = self._receiver
        if receiver in _param_names(node.params):
            receiver = None
        self._receivers.append(receiver)
        return True

    def leave_Lambda(self, original_node: cst.Lambda) -> None:
        self._receivers.pop()

    def visit_AssignTarget(self, node: cst.AssignTarget) -> Optional[bool]:
        self._mark_store(node.target)
        return True

    def visit_AnnAssign(self, node: cst.AnnAssign) -> Optional[bool]:
        self._mark_store(node.target)
        return True

    def visit_Attribute(self, node: cst.Attribute) -> Optional[bool]:
        if id(node) not in self._stores and self._is_receiver_attribute(node):
            self.referenced.append(node.attr.value)
        return True


def _target_names(target: cst.BaseExpression) -> List[str]:
    if isinstance(target, cst.Name):
        return [target.value]
    if isinstance(target, (cst.Tuple, cst.List)):
        names: List[str] = []
        for element in target.elements:
            names.extend(_target_names(element.value))
        return names
    return []
