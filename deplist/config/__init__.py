"""Configuration schema and validation for deplist."""

from .schema import (
    DEFAULT_DEV_FILE_PATTERNS,
    DEFAULT_FILE_EXTENSIONS,
    DEFAULT_IGNORE_PATTERNS,
    ScanConfig,
)

__all__ = [
    "DEFAULT_DEV_FILE_PATTERNS",
    "DEFAULT_FILE_EXTENSIONS",
    "DEFAULT_IGNORE_PATTERNS",
    "ScanConfig",
]
