import logging
from typing import List, Optional

import libcst as cst

from prototyper.spec import ClassModel
from .transform import EditKind, apply_edits

log = logging.getLogger(__name__)


class Injector:
    def plan(
        self, model: ClassModel, remove_trait: bool = False, trait: Optional[str] = None
    ) -> List[EditKind]:
        edits: List[EditKind] = []
        if remove_trait and trait:
            edits += [EditKind.REMOVE_IMPORT, EditKind.REMOVE_BASE]

        if model.dependencies:
            edits += [EditKind.ADD_IMPORT, EditKind.ADD_PROPERTY]
            if not model.has_constructor:
                edits.append(EditKind.DEFINE_CONSTRUCTOR)
            edits.append(EditKind.UPDATE_CONSTRUCTOR)
        return edits

    def inject_dependencies(
        self,
        source_code: str,
        model: ClassModel,
        remove_trait: bool = False,
        trait: Optional[str] = None,
    ) -> str:
        edits = self.plan(model, remove_trait, trait)
        if not edits:
            return source_code

        log.debug(f"Applying {[e.value for e in edits]} to '{model.fqn}'")
        module = cst.parse_module(source_code)
        return apply_edits(module, model, edits, trait).code
