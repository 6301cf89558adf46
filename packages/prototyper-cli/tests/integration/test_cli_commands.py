from typer.testing import CliRunner

from prototyper.cli.main import app
from prototyper.needle import L

runner = CliRunner()

SERVICE = """
from app.prototype import Prototyped


class Service(Prototyped):
    def run(self):
        return self.cache.get()
"""


def _project(workspace_factory):
    return (
        workspace_factory.with_config(
            {"scan_paths": ["src"], "trait": "app.prototype.Prototyped"}
        )
        .with_dependencies({"cache": "app.cache.Cache"})
        .with_source("src/app/service.py", SERVICE)
        .build()
    )


def test_inject_command(workspace_factory, spy_bus):
    root = _project(workspace_factory)

    result = runner.invoke(app, ["inject", "--remove-trait"])

    assert result.exit_code == 0, result.stdout
    content = (root / "src/app/service.py").read_text(encoding="utf-8")
    assert "class Service:\n    cache: Cache\n" in content
    assert "    def __init__(self, cache: Cache):\n        self.cache = cache\n" in content
    spy_bus.assert_id_called(L.inject.run.complete, level="success")


def test_inject_dry_run_with_explicit_path(workspace_factory, spy_bus):
    root = _project(workspace_factory)

    result = runner.invoke(app, ["inject", "--dry-run", "src/app/service.py"])

    assert result.exit_code == 0, result.stdout
    assert "Prototyped" in (root / "src/app/service.py").read_text(encoding="utf-8")
    spy_bus.assert_id_called(L.inject.run.dry_run, level="info")


def test_list_command(workspace_factory, spy_bus):
    _project(workspace_factory)

    result = runner.invoke(app, ["list"])

    assert result.exit_code == 0, result.stdout
    spy_bus.assert_id_called(L.list.entry, level="info")
    spy_bus.assert_id_called(L.list.property.resolved, level="info")


def test_errors_set_the_exit_code(workspace_factory, spy_bus):
    _project(workspace_factory).joinpath("src/app/broken.py").write_text(
        "class Broken(:\n", encoding="utf-8"
    )

    result = runner.invoke(app, ["inject"])

    assert result.exit_code == 1
    spy_bus.assert_id_called(L.error.syntax, level="error")


def test_invalid_configuration(workspace_factory, spy_bus):
    workspace_factory.with_config({"scan_paths": "src"}).build()

    result = runner.invoke(app, ["list"])

    assert result.exit_code == 1
    spy_bus.assert_id_called(L.error.config, level="error")
