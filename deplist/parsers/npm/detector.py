"""NPM ecosystem detector.

Detects Node.js/npm projects by scanning for package.json files and splits
each project's source files into main and dev buckets.
"""

import json
import logging
from pathlib import Path
from typing import List, Optional, Tuple

from deplist.config.schema import ScanConfig
from deplist.parsers.base import ConfigurationError
from deplist.runtime.report import ProjectDescriptor
from deplist.utils.scanner import IgnoreMatcher, load_gitignore_patterns, scan_files

logger = logging.getLogger("deplist.parsers.npm.detector")


def read_package_name(package_json_path: Path) -> Optional[str]:
    """Return the ``name`` declared by a package.json, if any.

    Raises:
        ConfigurationError: If the file is unreadable or not a JSON object.
    """
    try:
        pkg = json.loads(package_json_path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise ConfigurationError(f"Invalid JSON in {package_json_path}: {e}") from e
    except (OSError, UnicodeDecodeError) as e:
        raise ConfigurationError(f"Cannot read {package_json_path}: {e}") from e

    if not isinstance(pkg, dict):
        raise ConfigurationError(f"{package_json_path} is not a JSON object")
    name = pkg.get("name")
    return name if isinstance(name, str) and name.strip() else None


class NpmDetector:
    """Detector for npm/Node.js projects.

    Every package.json below the workspace root that is not ignored defines
    a project rooted at its directory. Ignore rules are the configured
    patterns plus, unless disabled, every .gitignore below the root; they
    are evaluated relative to the workspace root.
    """

    NAME = "npm_detector"

    def __init__(self, workspace_root: Path, config: Optional[ScanConfig] = None) -> None:
        self.workspace_root = Path(workspace_root).resolve()
        self.config = config or ScanConfig.default()
        self._ignore: Optional[IgnoreMatcher] = None
        logger.debug("Detector %s initialized for %s", self.NAME, self.workspace_root)

    @property
    def ignore(self) -> IgnoreMatcher:
        """Ignore rules for this workspace, built on first use."""
        if self._ignore is None:
            matcher = IgnoreMatcher(self.config.all_ignore_patterns)
            if self.config.respect_gitignore:
                matcher.add(load_gitignore_patterns(self.workspace_root))
            self._ignore = matcher
        return self._ignore

    def detect(self) -> List[Path]:
        """Detect package.json files in the workspace.

        Returns:
            List[Path]: Sorted package.json paths.
        """
        logger.info("NpmDetector: scanning for package.json files in %s", self.workspace_root)
        detected = sorted(
            scan_files(
                self.workspace_root,
                ["**/package.json"],
                ignore=self.ignore,
            )
        )
        logger.info("NpmDetector: found %d package.json file(s)", len(detected))
        return detected

    def collect_project_files(self, project_root: Path) -> Tuple[Tuple[Path, ...], Tuple[Path, ...]]:
        """Split a project's source files into (main, dev).

        Dev files match one of the dev patterns; main files are all other
        source files, so the two buckets are disjoint.
        """
        dev_patterns = self.config.resolved_dev_patterns
        main_files = scan_files(
            project_root,
            self.config.source_patterns,
            ignore=self.ignore,
            ignore_root=self.workspace_root,
            exclude=dev_patterns,
        )
        dev_files = scan_files(
            project_root,
            dev_patterns,
            ignore=self.ignore,
            ignore_root=self.workspace_root,
        )
        return tuple(main_files), tuple(dev_files)

    def describe_project(self, package_json_path: Path) -> ProjectDescriptor:
        """Build the descriptor of the project owning ``package_json_path``.

        Raises:
            ConfigurationError: If the package.json is malformed.
        """
        project_root = package_json_path.parent
        name = read_package_name(package_json_path) or project_root.name
        main_files, dev_files = self.collect_project_files(project_root)
        logger.debug(
            "Project %s at %s: %d main, %d dev file(s)",
            name,
            project_root,
            len(main_files),
            len(dev_files),
        )
        return ProjectDescriptor(
            name=name,
            root=project_root,
            main_files=main_files,
            dev_files=dev_files,
            package_json=package_json_path,
        )

    def detect_projects(self) -> List[ProjectDescriptor]:
        """Detect every project with its file buckets.

        Malformed package.json files are logged and skipped.
        """
        projects = []
        for package_json_path in self.detect():
            try:
                projects.append(self.describe_project(package_json_path))
            except ConfigurationError as e:
                logger.error("Failed to read or parse %s: %s", package_json_path, e)
        return projects


__all__ = ["NpmDetector", "read_package_name"]
