from pathlib import Path
from typing import List, Optional

import libcst as cst

from prototyper.app import (
    DependencyRegistry,
    InjectRunner,
    PrototyperApp,
    ScannerService,
)
from prototyper.common import TransactionManager
from prototyper.needle import L
from prototyper.test_utils import WorkspaceFactory

TRAIT = "app.prototype.Prototyped"


def _project(tmp_path: Path) -> Path:
    return (
        WorkspaceFactory(tmp_path)
        .with_config({"scan_paths": ["src"], "trait": TRAIT})
        .with_dependencies({"cache": "app.cache.Cache", "logger": "logging.Logger"})
        .with_source("src/app/__init__.py", "")
        .with_source(
            "src/app/prototype.py",
            """
            class Prototyped:
                pass
            """,
        )
        .with_source(
            "src/app/services.py",
            """
            from app.prototype import Prototyped


            class Reporter(Prototyped):
                def report(self):
                    self.logger.info(self.cache.stats())


            class Plain:
                def run(self):
                    return self.missing
            """,
        )
        .with_source(
            "src/app/mailing.py",
            """
            from . import prototype


            class Mailer(prototype.Prototyped):
                def send(self, message):
                    self.transport.deliver(message)
                    self.logger.debug(message)
            """,
        )
        .build()
    )


def test_inject_rewrites_prototyped_classes(tmp_path, spy_bus):
    root = _project(tmp_path)
    app = PrototyperApp(root)

    written = app.run_inject(remove_trait=True)

    services = (root / "src/app/services.py").read_text(encoding="utf-8")
    mailing = (root / "src/app/mailing.py").read_text(encoding="utf-8")
    assert sorted(p.name for p in written) == ["mailing.py", "services.py"]
    assert app.error_count == 0

    assert services.startswith(
        "from logging import Logger\nfrom app.cache import Cache\n\n\n"
        "class Reporter:\n"
        "    logger: Logger\n"
        "    cache: Cache\n"
        "\n"
        "    def __init__(self, logger: Logger, cache: Cache):\n"
        "        self.logger = logger\n"
        "        self.cache = cache\n"
    )
    # Classes without the trait are left alone
    assert "class Plain:\n    def run(self):\n        return self.missing\n" in services

    assert "class Mailer:" in mailing
    assert "def __init__(self, logger: Logger):" in mailing
    assert "transport" not in mailing.split("def send")[0]
    cst.parse_module(services)
    cst.parse_module(mailing)

    spy_bus.assert_id_called(L.inject.file.success, level="success")
    spy_bus.assert_id_called(L.inject.property.unresolved, level="warning")
    spy_bus.assert_id_called(L.inject.run.complete, level="success")
    assert [r.class_name for r in app.inject_runner.reports] == ["Mailer", "Reporter"]


def test_second_run_is_a_no_op(tmp_path, spy_bus):
    root = _project(tmp_path)
    PrototyperApp(root).run_inject()
    first = (root / "src/app/services.py").read_text(encoding="utf-8")

    assert PrototyperApp(root).run_inject() == []
    assert (root / "src/app/services.py").read_text(encoding="utf-8") == first


def test_dry_run_writes_nothing(tmp_path, spy_bus):
    root = _project(tmp_path)
    before = (root / "src/app/services.py").read_text(encoding="utf-8")

    assert PrototyperApp(root).run_inject(dry_run=True) == []

    assert (root / "src/app/services.py").read_text(encoding="utf-8") == before
    spy_bus.assert_id_called(L.inject.run.preview, level="info")
    spy_bus.assert_id_called(L.inject.run.dry_run, level="info")
    spy_bus.assert_id_not_called(L.inject.run.complete)


def test_broken_files_are_reported_and_skipped(tmp_path, spy_bus):
    root = _project(tmp_path)
    (root / "src/app/broken.py").write_text("class Broken(:\n", encoding="utf-8")
    app = PrototyperApp(root)

    written = app.run_inject()

    assert app.error_count == 1
    assert "services.py" in [p.name for p in written]
    spy_bus.assert_id_called(L.error.syntax, level="error")


def test_remove_trait_requires_a_configured_trait(tmp_path, spy_bus):
    root = (
        WorkspaceFactory(tmp_path)
        .with_dependencies({"cache": "app.cache.Cache"})
        .with_source(
            "service.py",
            """
            class Service:
                def run(self):
                    return self.cache
            """,
        )
        .build()
    )

    PrototyperApp(root).run_inject(remove_trait=True)

    spy_bus.assert_id_called(L.inject.trait.missing, level="warning")
    assert "def __init__(self, cache: Cache):" in (root / "service.py").read_text(
        encoding="utf-8"
    )


def test_nothing_to_do(tmp_path, spy_bus):
    root = (
        WorkspaceFactory(tmp_path)
        .with_project_name("demo")
        .with_source("empty.py", "x = 1\n")
        .build()
    )

    assert PrototyperApp(root).run_inject() == []
    spy_bus.assert_id_called(L.inject.run.nothing, level="info")


class OnlyCache:
    def get_prototype_properties(
        self, source_code: str, class_name: Optional[str] = None
    ) -> List[str]:
        return ["cache"]


def test_runner_uses_the_given_property_locator(tmp_path, spy_bus):
    root = (
        WorkspaceFactory(tmp_path)
        .with_project_name("demo")
        .with_source(
            "service.py",
            """
            class Service:
                def run(self):
                    return self.cache.get(self.logger)
            """,
        )
        .build()
    )
    registry = DependencyRegistry(
        {"cache": "app.cache.Cache", "logger": "logging.Logger"}
    )
    runner = InjectRunner(
        ScannerService(root),
        registry,
        TransactionManager(root),
        properties=OnlyCache(),
    )

    written = runner.run()

    content = (root / "service.py").read_text(encoding="utf-8")
    assert [p.name for p in written] == ["service.py"]
    assert "def __init__(self, cache: Cache):" in content
    assert "Logger" not in content
    assert [r.resolved for r in runner.reports] == [{"cache": "app.cache.Cache"}]
