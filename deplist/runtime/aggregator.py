"""Project-level aggregation of module references into a dependency report.

Per-file extraction is independent and side-effect free, so files are
fanned out over a thread pool. Every file produces a ``FileResult``; the
results are folded into a ``DependencyAccumulator`` only once all of them
are available, using set union, so the outcome does not depend on the
order in which workers finish.
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from functools import reduce
from pathlib import Path
from typing import Callable, Iterable, List, Optional, Set, Tuple

from deplist.parsers.base import RecoverableError, read_source
from deplist.parsers.npm.code_parser import NpmCodeParser
from deplist.parsers.npm.resolver import resolve_package_name
from deplist.runtime.report import (
    CategorizedReport,
    DependencyRecord,
    FileFailure,
    ProjectDescriptor,
)

logger = logging.getLogger("deplist.runtime.aggregator")

FileReader = Callable[[Path], str]

DEFAULT_MAX_WORKERS = 8


@dataclass
class DependencyAccumulator:
    """Packages seen so far, split by the kind of file that referenced them.

    ``regular`` holds packages referenced from at least one main file,
    ``dev_seen`` packages referenced from at least one dev file. A package
    may be in both; ``categorize`` resolves that in favour of regular.
    """

    regular: Set[str] = field(default_factory=set)
    dev_seen: Set[str] = field(default_factory=set)

    def add(self, record: DependencyRecord) -> None:
        (self.dev_seen if record.dev else self.regular).add(record.package)

    def merge(self, other: "DependencyAccumulator") -> "DependencyAccumulator":
        """Union of two accumulators (associative and commutative)."""
        return DependencyAccumulator(
            regular=self.regular | other.regular,
            dev_seen=self.dev_seen | other.dev_seen,
        )

    def categorize(self) -> Tuple[Tuple[str, ...], Tuple[str, ...]]:
        """Return sorted ``(regular, dev)`` with dev-only packages in ``dev``."""
        return (
            tuple(sorted(self.regular)),
            tuple(sorted(self.dev_seen - self.regular)),
        )


@dataclass(frozen=True)
class FileResult:
    """Outcome of extracting one file."""

    path: Path
    dev: bool
    records: Tuple[DependencyRecord, ...] = ()
    failure: Optional[FileFailure] = None

    def accumulate(self) -> DependencyAccumulator:
        accumulator = DependencyAccumulator()
        for record in self.records:
            accumulator.add(record)
        return accumulator


class ProjectAggregator:
    """Builds a ``CategorizedReport`` for each project.

    Attributes:
        code_parser: Extractor used for every file.
        max_workers: Upper bound on concurrently processed files; ``1``
            processes files inline.
    """

    def __init__(
        self,
        code_parser: Optional[NpmCodeParser] = None,
        max_workers: int = DEFAULT_MAX_WORKERS,
    ) -> None:
        if max_workers < 1:
            raise ValueError("max_workers must be at least 1")
        self.code_parser = code_parser or NpmCodeParser()
        self.max_workers = max_workers

    def process_file(
        self, file_path: Path, dev: bool, file_reader: FileReader = read_source
    ) -> FileResult:
        """Extract and resolve one file, isolating read and parse failures.

        Args:
            file_path: Source file.
            dev: Whether references count as dev dependencies.
            file_reader: Callable returning the file's text.

        Returns:
            FileResult: Records for every external reference, or a failure.
        """
        try:
            specifiers = self.code_parser.parse_file(file_path, file_reader)
        except RecoverableError as e:
            kind = type(e).__name__
            logger.warning("%s in %s: %s", kind, file_path, e)
            return FileResult(
                path=file_path,
                dev=dev,
                failure=FileFailure(path=str(file_path), kind=kind, message=str(e)),
            )

        records = []
        for specifier in specifiers:
            package = resolve_package_name(specifier)
            if package:
                records.append(DependencyRecord(package=package, dev=dev))
        return FileResult(path=file_path, dev=dev, records=tuple(records))

    def _run(
        self, jobs: List[Tuple[Path, bool]], file_reader: FileReader
    ) -> List[FileResult]:
        if self.max_workers == 1 or len(jobs) <= 1:
            return [self.process_file(path, dev, file_reader) for path, dev in jobs]

        workers = min(self.max_workers, len(jobs))
        with ThreadPoolExecutor(
            max_workers=workers, thread_name_prefix="deplist-parse"
        ) as pool:
            futures = [
                pool.submit(self.process_file, path, dev, file_reader)
                for path, dev in jobs
            ]
            return [future.result() for future in futures]

    def build_report(
        self, descriptor: ProjectDescriptor, file_reader: FileReader = read_source
    ) -> CategorizedReport:
        """Scan a project's files and categorize the packages they reference.

        Args:
            descriptor: Project with its main and dev file sets.
            file_reader: Callable returning a file's text; may raise ReadError.

        Returns:
            CategorizedReport: Possibly empty, never an error.
        """
        jobs = [(Path(path), False) for path in descriptor.main_files]
        jobs.extend((Path(path), True) for path in descriptor.dev_files)
        logger.debug(
            "Project %s: %d main file(s), %d dev file(s)",
            descriptor.name,
            len(descriptor.main_files),
            len(descriptor.dev_files),
        )

        results = self._run(jobs, file_reader)
        accumulator = reduce(
            DependencyAccumulator.merge,
            (result.accumulate() for result in results),
            DependencyAccumulator(),
        )
        regular, dev = accumulator.categorize()
        failures = tuple(result.failure for result in results if result.failure)

        logger.info(
            "Project %s: %d regular, %d dev dependencies, %d failed file(s)",
            descriptor.name,
            len(regular),
            len(dev),
            len(failures),
        )
        return CategorizedReport(
            project=descriptor.name,
            root=descriptor.root,
            regular=regular,
            dev=dev,
            failures=failures,
        )

    def build_reports(
        self,
        descriptors: Iterable[ProjectDescriptor],
        file_reader: FileReader = read_source,
    ) -> List[CategorizedReport]:
        return [self.build_report(d, file_reader) for d in descriptors]


def build_report(
    descriptor: ProjectDescriptor,
    file_reader: FileReader = read_source,
    max_workers: int = DEFAULT_MAX_WORKERS,
) -> CategorizedReport:
    """Convenience wrapper around ``ProjectAggregator.build_report``."""
    return ProjectAggregator(max_workers=max_workers).build_report(
        descriptor, file_reader
    )


__all__ = [
    "DependencyAccumulator",
    "FileResult",
    "ProjectAggregator",
    "build_report",
]
