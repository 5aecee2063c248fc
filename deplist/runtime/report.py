"""Data model for project scans and their dependency reports."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional, Tuple


@dataclass(frozen=True)
class ProjectDescriptor:
    """A project to scan: one ``package.json`` and its source files.

    Attributes:
        name: Package name from package.json, or the directory name.
        root: Project root directory.
        main_files: Files whose references count as regular dependencies.
        dev_files: Test/script files whose references count as dev dependencies.
        package_json: Path of the manifest that defined the project.
    """

    name: str
    root: Path
    main_files: Tuple[Path, ...] = ()
    dev_files: Tuple[Path, ...] = ()
    package_json: Optional[Path] = None

    def __post_init__(self) -> None:
        overlap = set(self.main_files) & set(self.dev_files)
        if overlap:
            raise ValueError(
                f"Project {self.name!r}: {len(overlap)} file(s) are both main and dev"
            )


@dataclass(frozen=True)
class DependencyRecord:
    """One qualifying reference to a package, before deduplication."""

    package: str
    dev: bool


@dataclass(frozen=True)
class FileFailure:
    """A file that contributed nothing because it could not be read or parsed."""

    path: str
    kind: str
    message: str

    def to_dict(self) -> Dict[str, str]:
        return {"path": self.path, "kind": self.kind, "message": self.message}


@dataclass(frozen=True)
class CategorizedReport:
    """Deduplicated dependencies of one project.

    ``regular`` and ``dev`` are sorted and disjoint: a package referenced
    from any main file is only ever listed as regular.
    """

    project: str
    root: Path
    regular: Tuple[str, ...] = ()
    dev: Tuple[str, ...] = ()
    failures: Tuple[FileFailure, ...] = field(default=())

    @property
    def is_empty(self) -> bool:
        return not self.regular and not self.dev

    def to_dict(self) -> Dict[str, Any]:
        return {
            "project": self.project,
            "root": str(self.root),
            "regular": list(self.regular),
            "dev": list(self.dev),
            "failures": [failure.to_dict() for failure in self.failures],
        }


__all__ = [
    "CategorizedReport",
    "DependencyRecord",
    "FileFailure",
    "ProjectDescriptor",
]
