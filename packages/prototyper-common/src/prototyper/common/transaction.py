from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional, Protocol, Union


class FileSystemAdapter(Protocol):
    def write_text(self, path: Path, content: str) -> None: ...
    def read_text(self, path: Path) -> str: ...
    def exists(self, path: Path) -> bool: ...


class RealFileSystem:
    def write_text(self, path: Path, content: str) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")

    def read_text(self, path: Path) -> str:
        return path.read_text(encoding="utf-8")

    def exists(self, path: Path) -> bool:
        return path.exists()


@dataclass
class WriteFileOp:
    path: Path
    content: str

    def execute(self, fs: FileSystemAdapter, root: Path) -> None:
        fs.write_text(root / self.path, self.content)

    def describe(self) -> str:
        return f"[WRITE] {self.path.as_posix()}"


class TransactionManager:
    """
    Collects file writes relative to a root and applies them in one go.
    A later write to the same path replaces the pending one.
    """

    def __init__(self, root_path: Path, fs: Optional[FileSystemAdapter] = None):
        self.root_path = root_path
        self.fs = fs or RealFileSystem()
        self._ops: Dict[Path, WriteFileOp] = {}

    def add_write(self, path: Union[str, Path], content: str) -> None:
        op = WriteFileOp(Path(path), content)
        self._ops.pop(op.path, None)
        self._ops[op.path] = op

    def preview(self) -> List[str]:
        return [op.describe() for op in self._ops.values()]

    def commit(self) -> List[Path]:
        written = []
        for op in self._ops.values():
            op.execute(self.fs, self.root_path)
            written.append(op.path)
        self._ops.clear()
        return written

    def discard(self) -> None:
        self._ops.clear()

    @property
    def pending_count(self) -> int:
        return len(self._ops)
