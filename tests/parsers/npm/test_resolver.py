"""Tests for specifier to package name resolution."""

import pytest

from deplist.parsers.npm.resolver import is_local_specifier, resolve_package_name


@pytest.mark.parametrize("specifier", [".", "..", "./x", "../lib/y", "/abs/path", ".hidden"])
def test_local_specifiers_resolve_to_none(specifier: str) -> None:
    assert is_local_specifier(specifier)
    assert resolve_package_name(specifier) is None


@pytest.mark.parametrize(
    ("specifier", "package"),
    [
        ("lodash", "lodash"),
        ("lodash/fp/map", "lodash"),
        ("chart.js/auto", "chart.js"),
        ("@scope/pkg", "@scope/pkg"),
        ("@scope/pkg/sub/path", "@scope/pkg"),
        ("@babel/core/lib/index.js", "@babel/core"),
        ("node:fs", "node:fs"),
    ],
)
def test_package_names(specifier: str, package: str) -> None:
    assert resolve_package_name(specifier) == package


def test_malformed_scoped_specifier_is_passed_through() -> None:
    assert resolve_package_name("@scope") == "@scope"
    assert resolve_package_name("@") == "@"


def test_resolution_is_total() -> None:
    samples = ["", "/", "@/", "@scope/", "a//b", " ", "~/x", "#internal", "été"]
    for specifier in samples:
        result = resolve_package_name(specifier)
        assert result is None or (isinstance(result, str) and result)
