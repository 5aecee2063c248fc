"""Tests for glob matching, ignore rules and file scanning."""

from pathlib import Path

import pytest

from deplist.utils.scanner import (
    IgnoreMatcher,
    expand_braces,
    glob_match,
    load_gitignore_patterns,
    scan_files,
)


def _touch(root: Path, rel: str, content: str = "") -> None:
    path = root / rel
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")


def test_expand_braces() -> None:
    assert expand_braces("*.js") == ["*.js"]
    assert expand_braces("*.{js,ts}") == ["*.js", "*.ts"]
    assert expand_braces("{src,lib}/*.{js,ts}") == [
        "src/*.js",
        "src/*.ts",
        "lib/*.js",
        "lib/*.ts",
    ]


@pytest.mark.parametrize(
    ("path", "pattern", "expected"),
    [
        ("index.js", "**/*.js", True),
        ("src/deep/index.js", "**/*.js", True),
        ("src/index.ts", "**/*.{js,jsx}", False),
        ("src/index.js", "*.js", False),
        ("test/a.js", "**/test/**/*.js", True),
        ("pkg/test/unit/a.js", "**/test/**/*.js", True),
        ("testing/a.js", "**/test/**/*.js", False),
        ("src/app.test.tsx", "**/*.test.{js,tsx}", True),
        ("src/app.test/x.js", "**/*.test.js", False),
        ("node_modules", "**/node_modules/**", True),
        ("a/node_modules/b/c.js", "**/node_modules/**", True),
        ("a1.js", "a?.js", True),
        ("ab/.js", "a?.js", False),
        ("b.js", "[ab].js", True),
        ("c.js", "[!ab].js", True),
    ],
)
def test_glob_match(path: str, pattern: str, expected: bool) -> None:
    assert glob_match(path, pattern) is expected


def test_unanchored_rules_match_any_basename() -> None:
    matcher = IgnoreMatcher(["*.log", "dist", "# comment", ""])

    assert matcher.is_ignored("debug.log")
    assert matcher.is_ignored("logs/deep/debug.log")
    assert matcher.is_ignored("dist", is_dir=True)
    assert matcher.is_ignored("packages/web/dist/index.js")
    assert not matcher.is_ignored("distribution/index.js")
    assert [r.source for r in matcher.rules] == ["*.log", "dist"]


def test_anchored_rules() -> None:
    matcher = IgnoreMatcher(["/build", "docs/*.js"])

    assert matcher.is_ignored("build/out.js")
    assert not matcher.is_ignored("src/build/out.js")
    assert matcher.is_ignored("docs/site.js")
    assert not matcher.is_ignored("src/docs/site.js")
    assert not matcher.is_ignored("docs/api/site.js")


def test_directory_only_rules() -> None:
    matcher = IgnoreMatcher(["cache/"])

    assert matcher.is_ignored("cache", is_dir=True)
    assert matcher.is_ignored("cache/a.js")
    assert not matcher.is_ignored("cache", is_dir=False)


def test_last_matching_rule_wins() -> None:
    matcher = IgnoreMatcher(["*.js", "!keep.js"])

    assert matcher.is_ignored("drop.js")
    assert not matcher.is_ignored("src/keep.js")

    matcher.add(["keep.js"])
    assert matcher.is_ignored("src/keep.js")


def test_negation_cannot_reinclude_below_ignored_directory() -> None:
    matcher = IgnoreMatcher(["vendor/", "!vendor/keep.js"])

    assert matcher.is_ignored("vendor/keep.js")


def test_filter_and_root() -> None:
    matcher = IgnoreMatcher(["*.map"])

    assert matcher.filter(["a.js", "a.js.map", "b/c.map"]) == ["a.js"]
    assert not matcher.is_ignored("")
    assert not matcher.is_ignored(".")


def test_scan_files_order_and_filters(tmp_path: Path) -> None:
    for rel in ["z.js", "a.js", "lib/b.ts", "lib/a.spec.js", "lib/sub/c.jsx", "README.md"]:
        _touch(tmp_path, rel)
    _touch(tmp_path, "node_modules/dep/index.js")
    _touch(tmp_path, ".git/hooks/pre-commit.js")

    found = scan_files(tmp_path, ["**/*.{js,jsx,ts}"], exclude=["**/*.spec.js"])

    assert [p.relative_to(tmp_path.resolve()).as_posix() for p in found] == [
        "a.js",
        "z.js",
        "lib/b.ts",
        "lib/sub/c.jsx",
    ]


def test_scan_files_non_recursive_and_ignore_list(tmp_path: Path) -> None:
    for rel in ["a.js", "b.min.js", "lib/c.js"]:
        _touch(tmp_path, rel)

    assert [p.name for p in scan_files(tmp_path, ["*.js"], recursive=False)] == ["a.js", "b.min.js"]
    assert [p.name for p in scan_files(tmp_path, ["**/*.js"], ignore=["*.min.js", "lib/"])] == ["a.js"]


def test_scan_files_ignore_root(tmp_path: Path) -> None:
    _touch(tmp_path, "packages/web/src/index.js")
    _touch(tmp_path, "packages/web/generated/api.js")
    matcher = IgnoreMatcher(["packages/web/generated"])

    found = scan_files(tmp_path / "packages" / "web", ["**/*.js"], ignore=matcher, ignore_root=tmp_path)

    assert [p.name for p in found] == ["index.js"]


def test_load_gitignore_patterns(tmp_path: Path) -> None:
    _touch(tmp_path, ".gitignore", "# comment\n\n*.log\n/out\n")
    _touch(tmp_path, "src/.gitignore", "local.js\n")
    _touch(tmp_path, "node_modules/pkg/.gitignore", "ignored-by-walk\n")

    assert load_gitignore_patterns(tmp_path) == ["*.log", "/out", "local.js"]
