from typing import List, Optional, Union

import libcst as cst
from libcst.helpers import get_full_name_for_node

from prototyper.spec import ArgumentKind, ConstructorParam
from ..analysis.visitors import find_method, receiver_name, resolve_reference
from .base import (
    ClassTransformer,
    annotation_for,
    blank_line,
    body_statements,
    is_docstring,
    replace_body,
    separate_next,
)
from .imports import keep_trailing_comma


class RemoveBaseTransformer(ClassTransformer):
    def _is_trait(self, base: cst.Arg) -> bool:
        written = get_full_name_for_node(base.value)
        if not written or not self.trait:
            return False
        bindings = self.bindings
        if resolve_reference(written, bindings, self.model.namespace) == self.trait:
            return True
        # The import may already be gone when several classes share the trait
        short_name = self.trait.rsplit(".", 1)[-1]
        return written == short_name and written not in bindings

    def transform_class(self, node: cst.ClassDef) -> cst.ClassDef:
        kept = [base for base in node.bases if not self._is_trait(base)]
        if len(kept) == len(node.bases):
            return node

        if not kept and not node.keywords:
            return node.with_changes(
                bases=[],
                lpar=cst.MaybeSentinel.DEFAULT,
                rpar=cst.MaybeSentinel.DEFAULT,
            )
        if node.keywords:
            # The remaining bases are still followed by keywords
            return node.with_changes(bases=kept)
        return node.with_changes(bases=keep_trailing_comma(node.bases, kept))


class AddPropertyTransformer(ClassTransformer):
    """Declares `<property>: <Type>` at the top of the class body."""

    def transform_class(self, node: cst.ClassDef) -> cst.ClassDef:
        dependencies = list(self.model.dependencies.values())
        if not dependencies:
            return node

        properties = [
            cst.SimpleStatementLine(
                body=[
                    cst.AnnAssign(
                        target=cst.Name(dependency.property),
                        annotation=cst.Annotation(
                            annotation_for(self.model, dependency)
                        ),
                    )
                ]
            )
            for dependency in dependencies
        ]

        statements = body_statements(node.body)
        index = 0
        while index < len(statements) and isinstance(
            statements[index], cst.SimpleStatementLine
        ):
            index += 1
        if index == 1 and is_docstring(statements[0]):
            properties[0] = properties[0].with_changes(leading_lines=[blank_line()])

        statements[index:index] = properties
        statements = separate_next(statements, index + len(properties))
        return node.with_changes(body=replace_body(node.body, statements))


class DefineConstructorTransformer(ClassTransformer):
    """Adds an empty `def __init__(self)` before the first method."""

    def transform_class(self, node: cst.ClassDef) -> cst.ClassDef:
        if find_method(node, "__init__") is not None:
            return node

        statements = body_statements(node.body)
        index = len(statements)
        for i, stmt in enumerate(statements):
            if isinstance(stmt, cst.FunctionDef):
                index = i
                break

        init = cst.FunctionDef(
            name=cst.Name("__init__"),
            params=cst.Parameters(params=[cst.Param(cst.Name("self"))]),
            body=cst.IndentedBlock(body=[]),
            leading_lines=[blank_line()] if index > 0 else [],
        )
        statements.insert(index, init)
        statements = separate_next(statements, index + 1)
        return node.with_changes(body=replace_body(node.body, statements))


class UpdateConstructorTransformer(ClassTransformer):
    """
    Adds one parameter per dependency to `__init__` and stores it on the
    instance.

    Parameters are appended positionally unless the existing signature has
    positional defaults or a star argument, in which case they become
    keyword-only. When the model's constructor is inherited, the parent's
    parameters are re-declared and forwarded through `super().__init__`.
    """

    def transform_class(self, node: cst.ClassDef) -> cst.ClassDef:
        if not self.model.dependencies:
            return node

        statements = body_statements(node.body)
        for i, stmt in enumerate(statements):
            if isinstance(stmt, cst.FunctionDef) and stmt.name.value == "__init__":
                statements[i] = self._update(stmt)
                break
        else:
            return node
        return node.with_changes(body=replace_body(node.body, statements))

    @property
    def _inherited(self) -> bool:
        return not self.model.has_constructor and bool(self.model.constructor_params)

    def _update(self, init: cst.FunctionDef) -> cst.FunctionDef:
        receiver = receiver_name(init) or "self"
        params = init.params
        if self._inherited:
            params = self._redeclare(receiver)
        params = self._add_params(params)

        assignments: List[cst.BaseStatement] = [
            cst.parse_statement(f"{receiver}.{dependency.property} = {dependency.var}\n")
            for dependency in self.model.dependencies.values()
        ]
        if self._inherited:
            assignments.append(self._super_call())

        statements = body_statements(init.body)
        index = 1 if statements and is_docstring(statements[0]) else 0
        statements[index:index] = assignments
        return init.with_changes(params=params, body=replace_body(init.body, statements))

    def _add_params(self, params: cst.Parameters) -> cst.Parameters:
        new_params = [
            cst.Param(
                name=cst.Name(dependency.var),
                annotation=cst.Annotation(annotation_for(self.model, dependency)),
            )
            for dependency in self.model.dependencies.values()
        ]

        positional = [*params.posonly_params, *params.params]
        keyword_only = any(p.default is not None for p in positional) or not isinstance(
            params.star_arg, cst.MaybeSentinel
        )
        if keyword_only:
            return params.with_changes(
                kwonly_params=_append_params(params.kwonly_params, new_params)
            )
        return params.with_changes(params=_append_params(params.params, new_params))

    def _redeclare(self, receiver: str) -> cst.Parameters:
        posonly: List[cst.Param] = []
        positional: List[cst.Param] = []
        kwonly: List[cst.Param] = []
        star_arg: Union[cst.Param, cst.MaybeSentinel] = cst.MaybeSentinel.DEFAULT
        star_kwarg: Optional[cst.Param] = None

        for param in self.model.constructor_params.values():
            node = _param_node(param)
            if param.kind == ArgumentKind.POSITIONAL_ONLY:
                posonly.append(node)
            elif param.kind == ArgumentKind.POSITIONAL_OR_KEYWORD:
                positional.append(node)
            elif param.kind == ArgumentKind.VAR_POSITIONAL:
                star_arg = node
            elif param.kind == ArgumentKind.KEYWORD_ONLY:
                kwonly.append(node)
            else:
                star_kwarg = node

        receiver_param = cst.Param(cst.Name(receiver))
        if posonly:
            posonly.insert(0, receiver_param)
        else:
            positional.insert(0, receiver_param)

        return cst.Parameters(
            posonly_params=posonly,
            params=positional,
            star_arg=star_arg,
            kwonly_params=kwonly,
            star_kwarg=star_kwarg,
        )

    def _super_call(self) -> cst.BaseStatement:
        args = []
        for param in self.model.constructor_params.values():
            if param.kind == ArgumentKind.VAR_POSITIONAL:
                args.append(f"*{param.name}")
            elif param.kind == ArgumentKind.VAR_KEYWORD:
                args.append(f"**{param.name}")
            elif param.kind == ArgumentKind.KEYWORD_ONLY:
                args.append(f"{param.name}={param.name}")
            else:
                args.append(param.name)
        return cst.parse_statement(f"super().__init__({', '.join(args)})\n")


def _param_node(param: ConstructorParam) -> cst.Param:
    annotation = None
    if param.annotation is not None:
        annotation = cst.Annotation(cst.parse_expression(param.annotation))
    default = None
    if param.default is not None:
        default = cst.parse_expression(param.default)
    return cst.Param(name=cst.Name(param.name), annotation=annotation, default=default)


def _append_params(existing, added: List[cst.Param]) -> List[cst.Param]:
    """
    Appends parameters, reusing the existing comma layout so that one
    parameter per line stays one parameter per line.
    """
    existing = list(existing)
    if not existing or not isinstance(existing[-1].comma, cst.Comma):
        return existing + added

    trailing = existing[-1].comma
    between = trailing
    if len(existing) > 1 and isinstance(existing[-2].comma, cst.Comma):
        between = existing[-2].comma

    head = existing[:-1] + [existing[-1].with_changes(comma=between)]
    tail = [param.with_changes(comma=between) for param in added[:-1]]
    tail.append(added[-1].with_changes(comma=trailing))
    return head + tail
