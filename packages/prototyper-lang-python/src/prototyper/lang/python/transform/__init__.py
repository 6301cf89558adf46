from .edits import EditKind, TRANSFORMERS, apply_edits

__all__ = ["EditKind", "TRANSFORMERS", "apply_edits"]
