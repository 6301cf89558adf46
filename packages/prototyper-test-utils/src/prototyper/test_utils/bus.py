from contextlib import contextmanager
from typing import Any, Dict, List, Optional, Union

import prototyper.common
from prototyper.needle import SemanticPointer


class SpyRenderer:
    def __init__(self):
        self.messages: List[Dict[str, Any]] = []

    def render(self, message: str, level: str) -> None:
        pass

    def record(self, level: str, msg_id: SemanticPointer, params: Dict[str, Any]):
        self.messages.append({"level": level, "id": str(msg_id), "params": params})


class SpyBus:
    """
    Records what the global `prototyper.common.bus` was asked to say.

    Modules hold on to the singleton through `from prototyper.common import
    bus`, so the instance is patched in place instead of being replaced.
    """

    def __init__(self):
        self._spy_renderer = SpyRenderer()

    @contextmanager
    def patch(self, monkeypatch: Any):
        real_bus = prototyper.common.bus

        def intercept_render(
            level: str, msg_id: Union[str, SemanticPointer], **kwargs: Any
        ) -> None:
            # Only semantic ids are intents; nothing is rendered
            if isinstance(msg_id, SemanticPointer):
                self._spy_renderer.record(level, msg_id, kwargs)

        monkeypatch.setattr(real_bus, "_render", intercept_render)
        monkeypatch.setattr(real_bus, "_renderer", self._spy_renderer)
        yield self

    def get_messages(self) -> List[Dict[str, Any]]:
        return self._spy_renderer.messages

    def get_ids(self, level: Optional[str] = None) -> List[str]:
        return [
            msg["id"]
            for msg in self.get_messages()
            if level is None or msg["level"] == level
        ]

    def assert_id_called(self, msg_id: SemanticPointer, level: Optional[str] = None):
        key = str(msg_id)
        if key not in self.get_ids(level):
            ids_seen = [m["id"] for m in self.get_messages()]
            raise AssertionError(
                f"Message with ID '{key}' was not sent.\nCaptured IDs: {ids_seen}"
            )

    def assert_id_not_called(self, msg_id: SemanticPointer):
        key = str(msg_id)
        if key in self.get_ids():
            raise AssertionError(f"Message with ID '{key}' was unexpectedly sent.")
