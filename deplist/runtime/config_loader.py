"""Helpers for loading scan configuration from TOML/JSON sources.

This module provides a single entry point `load_scan_config` that accepts
various configuration sources:

* None -> default ScanConfig
* dict -> ScanConfig.from_dict
* Path / path-like string -> load .toml/.json from filesystem
* Inline JSON/TOML strings

TOML documents may keep their settings under ``[tool.deplist]`` so the
configuration can live in a project's ``pyproject.toml``.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional, Union

from pydantic import ValidationError

from deplist.config.schema import ScanConfig
from deplist.parsers.base import ConfigurationError

logger = logging.getLogger("deplist.runtime.config_loader")

ConfigSource = Union[str, Path, Dict[str, Any], None]


def _parse_toml(text: str) -> Dict[str, Any]:
    """Parse TOML text into a dict.

    Uses stdlib tomllib on Python 3.11+ and `tomli` on older interpreters.
    """
    try:
        import tomllib  # type: ignore[attr-defined]
    except ImportError:  # pragma: no cover - Python <3.11 path
        import tomli as tomllib  # type: ignore[import-not-found,no-redef]

    try:
        return tomllib.loads(text)
    except tomllib.TOMLDecodeError as e:
        raise ConfigurationError(f"Invalid TOML configuration: {e}") from e


def _unwrap_tool_section(data: Dict[str, Any]) -> Dict[str, Any]:
    tool = data.get("tool")
    if not isinstance(tool, dict):
        return data
    # pyproject.toml-shaped document; other tables belong to other tools
    section = tool.get("deplist", {})
    if not isinstance(section, dict):
        raise ConfigurationError("[tool.deplist] must be a table")
    return section


def _validate(data: Dict[str, Any]) -> ScanConfig:
    try:
        return ScanConfig.from_dict(data)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid deplist configuration:\n{e}") from e


def load_scan_config(source: ConfigSource) -> ScanConfig:
    """Load ScanConfig from various configuration sources.

    Args:
        source: One of:
            * None: returns ScanConfig.default()
            * dict: treated as already-parsed configuration mapping
            * str/Path: either a filesystem path to a .toml/.json file,
              or an inline TOML/JSON string (auto-detected)

    Returns:
        ScanConfig instance.

    Raises:
        ConfigurationError: If the source cannot be read, parsed or validated.
    """
    if source is None:
        logger.debug("No config source provided; using default ScanConfig")
        return ScanConfig.default()

    if isinstance(source, dict):
        logger.debug("Loading ScanConfig from provided dict")
        return _validate(source)

    if not isinstance(source, (str, Path)):
        raise TypeError(f"Unsupported config source type: {type(source)!r}")

    path = Path(source)
    text: Optional[str] = None
    fmt: Optional[str] = None

    if path.is_file():
        try:
            text = path.read_text(encoding="utf-8")
        except OSError as e:
            raise ConfigurationError(f"Cannot read configuration {path}: {e}") from e
        suffix = path.suffix.lower()
        if suffix in {".toml", ".tml"}:
            fmt = "toml"
        elif suffix == ".json":
            fmt = "json"
        else:
            stripped = text.lstrip()
            fmt = "json" if stripped.startswith(("{", "[")) else "toml"
        logger.info("Loading configuration from file: %s (fmt=%s)", path, fmt)
    else:
        text = str(source)
        stripped = text.lstrip()
        fmt = "json" if stripped.startswith(("{", "[")) else "toml"
        logger.info("Loading configuration from inline %s string", fmt)

    if fmt == "json":
        try:
            data = json.loads(text)
        except json.JSONDecodeError as e:
            raise ConfigurationError(f"Invalid JSON configuration: {e}") from e
    else:
        data = _parse_toml(text)

    if not isinstance(data, dict):
        raise ConfigurationError("Top-level configuration must be a mapping/dict")

    return _validate(_unwrap_tool_section(data))


__all__ = ["load_scan_config"]
