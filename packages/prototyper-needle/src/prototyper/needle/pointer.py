from typing import Any


class SemanticPointer:
    """
    A dotted message address built by attribute access:
    `L.inject.file.success` points at "inject.file.success".
    """

    def __init__(self, path: str = ""):
        # Name-mangled so that catalog keys like `_path` stay addressable
        self.__path = path

    def __getattr__(self, name: str) -> "SemanticPointer":
        if name.startswith("__"):
            raise AttributeError(name)
        return SemanticPointer(f"{self.__path}.{name}" if self.__path else name)

    def __str__(self) -> str:
        return self.__path

    def __repr__(self) -> str:
        return f"<SemanticPointer: '{self.__path}'>"

    def __eq__(self, other: Any) -> bool:
        if isinstance(other, SemanticPointer):
            return self.__path == other.__path
        return str(other) == self.__path

    def __hash__(self) -> int:
        return hash(self.__path)


L = SemanticPointer()
