from pathlib import Path

from prototyper.app import ScannerService
from prototyper.needle import L


def _touch(root: Path, *paths: str) -> None:
    for path in paths:
        target = root / path
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text("", encoding="utf-8")


def test_module_names_are_relative_to_the_scan_root(tmp_path: Path):
    _touch(
        tmp_path,
        "src/app/__init__.py",
        "src/app/services.py",
        "src/app/.cache/ignored.py",
        "src/app/__pycache__/ignored.py",
        "src/app/notes.txt",
        "tools/build.py",
    )
    scanner = ScannerService(tmp_path, ["src"])

    files = scanner.scan()

    assert [(f.rel_path.as_posix(), f.namespace, f.is_package) for f in files] == [
        ("src/app/__init__.py", "app", True),
        ("src/app/services.py", "app.services", False),
    ]


def test_explicit_paths(tmp_path: Path):
    _touch(tmp_path, "src/app/services.py", "tools/build.py")
    scanner = ScannerService(tmp_path, ["src"])

    files = scanner.scan([tmp_path / "src" / "app", tmp_path / "tools" / "build.py"])

    assert [(f.rel_path.as_posix(), f.namespace) for f in files] == [
        ("src/app/services.py", "app.services"),
        # Outside every scan path, named relative to the project root
        ("tools/build.py", "tools.build"),
    ]


def test_nested_scan_paths_prefer_the_closest_root(tmp_path: Path):
    _touch(tmp_path, "lib/vendor/pkg/mod.py")
    scanner = ScannerService(tmp_path, [".", "lib/vendor"])

    files = scanner.scan()

    assert [f.namespace for f in files] == ["pkg.mod"]


def test_missing_paths_are_reported(tmp_path: Path, spy_bus):
    scanner = ScannerService(tmp_path)

    assert scanner.scan([tmp_path / "missing.py"]) == []
    spy_bus.assert_id_called(L.scan.path_not_found, level="warning")
