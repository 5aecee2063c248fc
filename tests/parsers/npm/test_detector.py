"""Tests for npm project discovery and main/dev file bucketing."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from deplist.config.schema import ScanConfig
from deplist.parsers.base import ConfigurationError
from deplist.parsers.npm.detector import NpmDetector, read_package_name


def _write(root: Path, rel: str, content: str = "") -> Path:
    path = root / rel
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
    return path


def _rel(root: Path, paths) -> list[str]:
    return sorted(p.relative_to(root).as_posix() for p in paths)


@pytest.fixture
def workspace(tmp_path: Path) -> Path:
    _write(tmp_path, "package.json", json.dumps({"name": "web"}))
    _write(tmp_path, "src/index.js", "import 'react';")
    _write(tmp_path, "src/App.tsx")
    _write(tmp_path, "src/app.test.js")
    _write(tmp_path, "src/types.d.ts")
    _write(tmp_path, "src/README.md")
    _write(tmp_path, "tests/helper.ts")
    _write(tmp_path, "scripts/release.js")
    _write(tmp_path, "setupTests.js")
    _write(tmp_path, "dist/bundle.js")
    _write(tmp_path, "coverage/lcov.js")
    _write(tmp_path, "node_modules/react/package.json", json.dumps({"name": "react"}))
    _write(tmp_path, "node_modules/react/index.js")
    return tmp_path


def test_detect_skips_node_modules(workspace: Path) -> None:
    detector = NpmDetector(workspace)
    assert _rel(workspace, detector.detect()) == ["package.json"]


def test_files_are_split_into_main_and_dev(workspace: Path) -> None:
    (project,) = NpmDetector(workspace).detect_projects()

    assert project.name == "web"
    assert project.root == workspace.resolve()
    assert _rel(project.root, project.main_files) == ["src/App.tsx", "src/index.js"]
    assert _rel(project.root, project.dev_files) == [
        "scripts/release.js",
        "setupTests.js",
        "src/app.test.js",
        "tests/helper.ts",
    ]


def test_nested_projects_and_name_fallback(workspace: Path) -> None:
    _write(workspace, "packages/api/package.json", json.dumps({"version": "1.0.0"}))
    _write(workspace, "packages/api/server.js")

    projects = NpmDetector(workspace).detect_projects()
    by_name = {p.name: p for p in projects}

    assert sorted(by_name) == ["api", "web"]
    assert _rel(by_name["api"].root, by_name["api"].main_files) == ["server.js"]
    # the enclosing project scans the nested project's files too
    assert "packages/api/server.js" in _rel(workspace, by_name["web"].main_files)


def test_gitignore_rules_apply(workspace: Path) -> None:
    _write(workspace, ".gitignore", "# build output\ngenerated/\n*.gen.js\n")
    _write(workspace, "src/.gitignore", "local.js\n")
    _write(workspace, "generated/client.js")
    _write(workspace, "src/schema.gen.js")
    _write(workspace, "src/local.js")

    (project,) = NpmDetector(workspace).detect_projects()
    main = _rel(workspace, project.main_files)
    assert "generated/client.js" not in main
    assert "src/schema.gen.js" not in main
    assert "src/local.js" not in main

    config = ScanConfig(respect_gitignore=False)
    (project,) = NpmDetector(workspace, config).detect_projects()
    main = _rel(workspace, project.main_files)
    assert {"generated/client.js", "src/schema.gen.js", "src/local.js"} <= set(main)


def test_extra_ignore_patterns_and_extensions(workspace: Path) -> None:
    _write(workspace, "src/legacy/old.js")
    _write(workspace, "src/worker.mjs")
    config = ScanConfig(extra_ignore_patterns=["legacy/"], file_extensions=["js", ".MJS"])

    (project,) = NpmDetector(workspace, config).detect_projects()

    assert _rel(workspace, project.main_files) == ["src/index.js", "src/worker.mjs"]


def test_malformed_package_json_is_skipped(workspace: Path) -> None:
    _write(workspace, "broken/package.json", "{not json")
    _write(workspace, "array/package.json", "[]")

    projects = NpmDetector(workspace).detect_projects()

    assert [p.name for p in projects] == ["web"]


def test_read_package_name(tmp_path: Path) -> None:
    named = _write(tmp_path, "a/package.json", json.dumps({"name": "@acme/ui"}))
    blank = _write(tmp_path, "b/package.json", json.dumps({"name": "  "}))
    broken = _write(tmp_path, "c/package.json", "{")

    assert read_package_name(named) == "@acme/ui"
    assert read_package_name(blank) is None
    with pytest.raises(ConfigurationError):
        read_package_name(broken)
    with pytest.raises(ConfigurationError):
        read_package_name(tmp_path / "missing" / "package.json")
