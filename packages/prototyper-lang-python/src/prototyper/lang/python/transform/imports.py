from typing import List, Sequence, Set, Union, cast

import libcst as cst
from libcst.helpers import get_absolute_module_from_package_for_import

from .base import ModelTransformer, blank_line, is_docstring


def _is_import_line(stmt: cst.CSTNode) -> bool:
    return isinstance(stmt, cst.SimpleStatementLine) and all(
        isinstance(small, (cst.Import, cst.ImportFrom)) for small in stmt.body
    )


def keep_trailing_comma(
    original: Sequence[cst.CSTNode], kept: List[cst.CSTNode]
) -> List[cst.CSTNode]:
    """
    After removing items from a comma separated list, the new last item
    inherits the comma of the old last one.
    """
    last = original[-1]
    if kept and kept[-1] is not last:
        kept[-1] = kept[-1].with_changes(comma=getattr(last, "comma"))
    return kept


class AddImportTransformer(ModelTransformer):
    """
    Adds `from <module> import <Type> [as <Alias>]` for every dependency type
    that is neither imported nor declared in the class's own module.
    """

    def _build_imports(self) -> List[cst.SimpleStatementLine]:
        seen: Set[str] = set()
        statements = []
        for dependency in self.model.dependencies.values():
            type_ref = dependency.type
            if self.model.is_local_type(type_ref) or self.model.find_import(
                type_ref.fqn
            ):
                continue

            line = f"from {type_ref.module} import {type_ref.short_name}"
            if type_ref.alias and type_ref.alias != type_ref.short_name:
                line += f" as {type_ref.alias}"
            if line in seen:
                continue
            seen.add(line)

            stmt = cst.parse_statement(line + "\n")
            statements.append(cast(cst.SimpleStatementLine, stmt))
        return statements

    def leave_Module(
        self, original_node: cst.Module, updated_node: cst.Module
    ) -> cst.Module:
        new_imports = self._build_imports()
        if not new_imports:
            return updated_node

        body = list(updated_node.body)
        last_import = -1
        for i, stmt in enumerate(body):
            if _is_import_line(stmt):
                last_import = i

        if last_import >= 0:
            index = last_import + 1
        elif body and is_docstring(body[0]):
            index = 1
            new_imports[0] = new_imports[0].with_changes(leading_lines=[blank_line()])
        else:
            index = 0

        body[index:index] = new_imports
        after = index + len(new_imports)
        if last_import < 0 and after < len(body) and not body[after].leading_lines:
            # Separate the new import block from the code that follows
            body[after] = body[after].with_changes(leading_lines=[blank_line()])
        return updated_node.with_changes(body=body)


class RemoveImportTransformer(ModelTransformer):
    """Drops the trait from `from ... import` statements."""

    def leave_ImportFrom(
        self, original_node: cst.ImportFrom, updated_node: cst.ImportFrom
    ) -> Union[cst.BaseSmallStatement, cst.RemovalSentinel]:
        if not self.trait or isinstance(updated_node.names, cst.ImportStar):
            return updated_node

        module = get_absolute_module_from_package_for_import(
            self.package or None, updated_node
        )
        if module is None:
            return updated_node

        names = updated_node.names
        kept = [
            alias for alias in names if f"{module}.{alias.evaluated_name}" != self.trait
        ]
        if len(kept) == len(names):
            return updated_node
        if not kept:
            return cst.RemoveFromParent()
        return updated_node.with_changes(names=keep_trailing_comma(names, kept))
