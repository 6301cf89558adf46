import logging
from pathlib import Path
from typing import List, Optional

import libcst as cst

from prototyper.common import TransactionManager, bus
from prototyper.lang.python import (
    Injector,
    NodeExtractor,
    PropertyExtractor,
    list_classes,
)
from prototyper.needle import L
from prototyper.spec import (
    ClassExtractorProtocol,
    ClassNotDeclaredError,
    DependencyInjectorProtocol,
    PropertyLocatorProtocol,
)
from ..services import DependencyRegistry, ScannerService, SourceFile
from .listing import ClassReport, select_targets

log = logging.getLogger(__name__)


class InjectRunner:
    """
    Rewrites prototyped classes so that every resolvable virtual property
    becomes a constructor-injected dependency.
    """

    def __init__(
        self,
        scanner: ScannerService,
        registry: DependencyRegistry,
        transaction: TransactionManager,
        trait: Optional[str] = None,
        extractor: Optional[ClassExtractorProtocol] = None,
        properties: Optional[PropertyLocatorProtocol] = None,
        injector: Optional[DependencyInjectorProtocol] = None,
    ):
        self.scanner = scanner
        self.registry = registry
        self.transaction = transaction
        self.trait = trait
        self.extractor: ClassExtractorProtocol = extractor or NodeExtractor(
            ignored_bases=[trait] if trait else ()
        )
        self.properties: PropertyLocatorProtocol = properties or PropertyExtractor()
        self.injector: DependencyInjectorProtocol = injector or Injector()
        self.reports: List[ClassReport] = []
        self.error_count = 0

    def _inject_class(
        self, content: str, source: SourceFile, class_name: str, remove_trait: bool
    ) -> str:
        path = source.rel_path.as_posix()
        names = self.properties.get_prototype_properties(content, class_name)
        dependencies, unresolved = self.registry.resolve(names)
        for name in unresolved:
            bus.warning(
                L.inject.property.unresolved, property=name, name=class_name, path=path
            )
        if names:
            self.reports.append(
                ClassReport(
                    path=path,
                    class_name=class_name,
                    resolved={d.name: d.type.fqn for d in dependencies},
                    unresolved=unresolved,
                )
            )
        if not dependencies and not remove_trait:
            return content

        model = self.extractor.extract(
            content,
            dependencies,
            source.namespace,
            class_name,
            source.is_package,
        )
        updated = self.injector.inject_dependencies(
            content, model, remove_trait, self.trait
        )
        if updated == content:
            bus.debug(L.inject.file.nothing, name=class_name, path=path)
        elif dependencies:
            bus.success(
                L.inject.file.success,
                count=len(dependencies),
                name=class_name,
                path=path,
            )
        else:
            bus.success(L.inject.file.trait_removed, name=class_name, path=path)
        return updated

    def _inject_file(self, source: SourceFile, remove_trait: bool) -> Optional[str]:
        original = source.path.read_text(encoding="utf-8")
        summaries = list_classes(original, source.namespace, source.is_package)

        content = original
        for class_name in select_targets(summaries, self.trait):
            content = self._inject_class(content, source, class_name, remove_trait)
        return content if content != original else None

    def run(
        self,
        paths: Optional[List[Path]] = None,
        remove_trait: bool = False,
        dry_run: bool = False,
    ) -> List[Path]:
        self.reports = []
        self.error_count = 0
        if remove_trait and not self.trait:
            bus.warning(L.inject.trait.missing)
            remove_trait = False

        files = self.scanner.scan(paths)
        bus.debug(L.scan.files, count=len(files))

        for source in files:
            path = source.rel_path.as_posix()
            try:
                updated = self._inject_file(source, remove_trait)
            except cst.ParserSyntaxError as e:
                self.error_count += 1
                bus.error(L.error.syntax, path=path, line=e.raw_line, error=e.message)
                continue
            except ClassNotDeclaredError as e:
                self.error_count += 1
                bus.error(L.error.class_not_declared, path=path, error=e)
                continue
            except (OSError, UnicodeDecodeError) as e:
                self.error_count += 1
                bus.error(L.error.read, path=path, error=e)
                continue
            if updated is not None:
                self.transaction.add_write(source.rel_path, updated)

        count = self.transaction.pending_count
        if count == 0:
            if not self.reports:
                bus.info(L.inject.run.nothing)
            return []

        if dry_run:
            for op in self.transaction.preview():
                bus.info(L.inject.run.preview, op=op)
            self.transaction.discard()
            bus.info(L.inject.run.dry_run, count=count)
            return []

        written = self.transaction.commit()
        log.debug(f"Wrote {written}")
        bus.success(L.inject.run.complete, count=count)
        return [self.transaction.root_path / p for p in written]
