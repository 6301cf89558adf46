from pathlib import PurePath
from typing import Union


def path_to_logical_fqn(rel_path: Union[str, PurePath]) -> str:
    # Normalize path separators to dots
    fqn = PurePath(rel_path).as_posix().replace("/", ".")

    if fqn.endswith(".py"):
        fqn = fqn[:-3]

    # 'pkg.__init__' -> 'pkg', a root '__init__' has no module name at all
    if fqn == "__init__":
        return ""
    if fqn.endswith(".__init__"):
        fqn = fqn[: -len(".__init__")]

    return fqn


def is_package_file(rel_path: Union[str, PurePath]) -> bool:
    return PurePath(rel_path).name == "__init__.py"
