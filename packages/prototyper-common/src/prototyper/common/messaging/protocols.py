from typing import Protocol


class Renderer(Protocol):
    """
    Presents a fully resolved message to the user.

    `level` is one of "debug", "info", "success", "warning" or "error".
    """

    def render(self, message: str, level: str) -> None: ...
