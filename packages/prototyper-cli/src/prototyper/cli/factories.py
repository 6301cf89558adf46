from pathlib import Path

from prototyper.app import PrototyperApp


def get_project_root() -> Path:
    return Path.cwd()


def make_app() -> PrototyperApp:
    return PrototyperApp(root_path=get_project_root())
