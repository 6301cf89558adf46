import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional

import libcst as cst

from prototyper.common import bus
from prototyper.lang.python import ClassSummary, PropertyExtractor, list_classes
from prototyper.needle import L
from prototyper.spec import ClassNotDeclaredError, PropertyLocatorProtocol
from ..services import DependencyRegistry, ScannerService, SourceFile

log = logging.getLogger(__name__)


@dataclass
class ClassReport:
    path: str
    class_name: str
    # Property name -> fully-qualified type
    resolved: Dict[str, str] = field(default_factory=dict)
    unresolved: List[str] = field(default_factory=list)


def select_targets(summaries: List[ClassSummary], trait: Optional[str]) -> List[str]:
    """
    With a trait configured, only classes deriving from it are prototyped.
    Without one, every class is a candidate.
    """
    if trait is None:
        return [summary.name for summary in summaries]
    return [summary.name for summary in summaries if trait in summary.bases]


class ListRunner:
    def __init__(
        self,
        scanner: ScannerService,
        registry: DependencyRegistry,
        trait: Optional[str] = None,
        properties: Optional[PropertyLocatorProtocol] = None,
    ):
        self.scanner = scanner
        self.registry = registry
        self.trait = trait
        self.properties: PropertyLocatorProtocol = properties or PropertyExtractor()
        self.error_count = 0

    def _report_file(self, source: SourceFile) -> List[ClassReport]:
        content = source.path.read_text(encoding="utf-8")
        summaries = list_classes(content, source.namespace, source.is_package)

        reports = []
        for class_name in select_targets(summaries, self.trait):
            names = self.properties.get_prototype_properties(content, class_name)
            if not names:
                continue
            dependencies, unresolved = self.registry.resolve(names)
            reports.append(
                ClassReport(
                    path=source.rel_path.as_posix(),
                    class_name=class_name,
                    resolved={d.name: d.type.fqn for d in dependencies},
                    unresolved=unresolved,
                )
            )
        return reports

    def run(self, paths: Optional[List[Path]] = None) -> List[ClassReport]:
        files = self.scanner.scan(paths)
        bus.debug(L.scan.files, count=len(files))

        self.error_count = 0
        reports: List[ClassReport] = []
        for source in files:
            path = source.rel_path.as_posix()
            try:
                reports.extend(self._report_file(source))
            except cst.ParserSyntaxError as e:
                self.error_count += 1
                bus.error(L.error.syntax, path=path, line=e.raw_line, error=e.message)
            except ClassNotDeclaredError as e:
                self.error_count += 1
                bus.error(L.error.class_not_declared, path=path, error=e)
            except (OSError, UnicodeDecodeError) as e:
                self.error_count += 1
                bus.error(L.error.read, path=path, error=e)

        for report in reports:
            bus.info(L.list.entry, path=report.path, name=report.class_name)
            for name, fqn in report.resolved.items():
                bus.info(L.list.property.resolved, property=name, type=fqn)
            for name in report.unresolved:
                bus.warning(L.list.property.unresolved, property=name)

        if reports:
            bus.info(
                L.list.run.complete,
                count=len(reports),
                unresolved=sum(len(r.unresolved) for r in reports),
            )
        else:
            bus.info(L.list.run.empty)
        return reports
