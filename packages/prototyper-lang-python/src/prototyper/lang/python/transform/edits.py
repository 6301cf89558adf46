from enum import Enum
from typing import Dict, Iterable, Optional, Type

import libcst as cst

from prototyper.spec import ClassModel
from .base import ModelTransformer
from .classes import (
    AddPropertyTransformer,
    DefineConstructorTransformer,
    RemoveBaseTransformer,
    UpdateConstructorTransformer,
)
from .imports import AddImportTransformer, RemoveImportTransformer


class EditKind(str, Enum):
    ADD_IMPORT = "ADD_IMPORT"
    REMOVE_IMPORT = "REMOVE_IMPORT"
    REMOVE_BASE = "REMOVE_BASE"
    ADD_PROPERTY = "ADD_PROPERTY"
    DEFINE_CONSTRUCTOR = "DEFINE_CONSTRUCTOR"
    UPDATE_CONSTRUCTOR = "UPDATE_CONSTRUCTOR"


TRANSFORMERS: Dict[EditKind, Type[ModelTransformer]] = {
    EditKind.ADD_IMPORT: AddImportTransformer,
    EditKind.REMOVE_IMPORT: RemoveImportTransformer,
    EditKind.REMOVE_BASE: RemoveBaseTransformer,
    EditKind.ADD_PROPERTY: AddPropertyTransformer,
    EditKind.DEFINE_CONSTRUCTOR: DefineConstructorTransformer,
    EditKind.UPDATE_CONSTRUCTOR: UpdateConstructorTransformer,
}


def apply_edits(
    module: cst.Module,
    model: ClassModel,
    edits: Iterable[EditKind],
    trait: Optional[str] = None,
) -> cst.Module:
    """Applies the edits in order, each one as a separate pass over the tree."""
    for kind in edits:
        module = module.visit(TRANSFORMERS[kind](model, trait))
    return module
