from typing import Dict, List, Optional, Sequence

import libcst as cst

from prototyper.spec import ClassModel, Dependency


class ModelTransformer(cst.CSTTransformer):
    """Base for every tree edit driven by a resolved ClassModel."""

    def __init__(self, model: ClassModel, trait: Optional[str] = None):
        self.model = model
        self.trait = trait

    @property
    def package(self) -> str:
        return self.model.namespace.rpartition(".")[0]

    @property
    def bindings(self) -> Dict[str, str]:
        return {usage.bound_name: usage.fqn for usage in self.model.imports}


class ClassTransformer(ModelTransformer):
    """
    Edits the top-level class the model describes. Nested classes and
    function bodies are never entered.
    """

    def __init__(self, model: ClassModel, trait: Optional[str] = None):
        super().__init__(model, trait)
        self._found = False

    def visit_ClassDef(self, node: cst.ClassDef) -> Optional[bool]:
        return False

    def visit_FunctionDef(self, node: cst.FunctionDef) -> Optional[bool]:
        return False

    def leave_ClassDef(
        self, original_node: cst.ClassDef, updated_node: cst.ClassDef
    ) -> cst.ClassDef:
        if self._found or updated_node.name.value != self.model.class_name:
            return updated_node
        self._found = True
        return self.transform_class(updated_node)

    def transform_class(self, node: cst.ClassDef) -> cst.ClassDef:
        raise NotImplementedError


def blank_line() -> cst.EmptyLine:
    return cst.EmptyLine(indent=False)


def is_docstring(stmt: cst.CSTNode) -> bool:
    return (
        isinstance(stmt, cst.SimpleStatementLine)
        and len(stmt.body) == 1
        and isinstance(stmt.body[0], cst.Expr)
        and isinstance(stmt.body[0].value, cst.SimpleString)
    )


def is_placeholder(stmt: cst.CSTNode) -> bool:
    """A line made only of `pass` or `...`."""
    if not isinstance(stmt, cst.SimpleStatementLine):
        return False
    return all(
        isinstance(small, cst.Pass)
        or (isinstance(small, cst.Expr) and isinstance(small.value, cst.Ellipsis))
        for small in stmt.body
    )


def body_statements(body: cst.BaseSuite) -> List[cst.BaseStatement]:
    """
    The statements of a block about to receive new members, one per line and
    without placeholder lines.
    """
    statements: List[cst.BaseStatement] = []
    if isinstance(body, cst.IndentedBlock):
        statements.extend(body.body)
    elif isinstance(body, cst.SimpleStatementSuite):
        for small in body.body:
            small = small.with_changes(semicolon=cst.MaybeSentinel.DEFAULT)
            statements.append(cst.SimpleStatementLine(body=[small]))
    return [stmt for stmt in statements if not is_placeholder(stmt)]


def replace_body(
    body: cst.BaseSuite, statements: Sequence[cst.BaseStatement]
) -> cst.IndentedBlock:
    if isinstance(body, cst.IndentedBlock):
        return body.with_changes(body=statements)
    return cst.IndentedBlock(body=statements)


def separate_next(
    statements: List[cst.BaseStatement], index: int
) -> List[cst.BaseStatement]:
    """Puts a blank line above a compound statement that has none."""
    if index < len(statements):
        stmt = statements[index]
        if isinstance(stmt, cst.BaseCompoundStatement) and not stmt.leading_lines:
            statements[index] = stmt.with_changes(leading_lines=[blank_line()])
    return statements


def annotation_for(model: ClassModel, dependency: Dependency) -> cst.BaseExpression:
    type_ref = dependency.type
    if model.is_local_type(type_ref):
        # Types of the class's own module, itself included, are not imported
        return cst.SimpleString(f'"{type_ref.short_name}"')
    return cst.parse_expression(type_ref.alias_or_short_name)
