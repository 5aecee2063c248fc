"""Shared error taxonomy and source reading for deplist parsers.

Every failure raised while handling a single file or project derives from
``RecoverableError``: callers skip the current item, record the failure and
keep scanning. Anything else (``TypeError``, ``AttributeError``...) is a
programming error and propagates.
"""

import logging
from pathlib import Path
from typing import Optional, Union

logger = logging.getLogger("deplist.parsers.base")


# =============================================================================
# Custom Exception Hierarchy
# =============================================================================

class RecoverableError(Exception):
    """Base class for recoverable business errors.

    These errors indicate expected failure conditions that can be handled
    gracefully by skipping the current item and continuing processing.
    """
    pass


class ConfigurationError(RecoverableError):
    """Configuration file error - can skip current target and continue.

    Raised when a ``package.json`` or a deplist configuration source is
    malformed or contains invalid data.
    """
    pass


class ParseError(RecoverableError):
    """Source code parsing error - can skip current file and continue.

    Raised when a source file is not a valid program in the selected
    dialect. ``line`` and ``column`` are 1-based when known.
    """

    def __init__(
        self,
        message: str,
        path: Optional[Union[str, Path]] = None,
        line: Optional[int] = None,
        column: Optional[int] = None,
    ) -> None:
        super().__init__(message)
        self.path = str(path) if path is not None else None
        self.line = line
        self.column = column

    def __str__(self) -> str:
        message = super().__str__()
        if self.line is not None:
            message = f"{message} ({self.line}:{self.column})"
        if self.path:
            message = f"{self.path}: {message}"
        return message


class ReadError(RecoverableError):
    """Source file could not be read - can skip current file and continue."""

    def __init__(self, message: str, path: Optional[Union[str, Path]] = None) -> None:
        super().__init__(message)
        self.path = str(path) if path is not None else None


def read_source(file_path: Union[str, Path]) -> str:
    """Read a source file as text.

    UTF-8 is tried first; files that are not valid UTF-8 are decoded as
    latin-1 so a stray byte never hides a file's imports.

    Args:
        file_path: Path to the source file.

    Returns:
        str: File content.

    Raises:
        ReadError: If the file is missing or unreadable.
    """
    path = Path(file_path)
    try:
        return path.read_text(encoding="utf-8")
    except UnicodeDecodeError:
        logger.debug("%s is not valid UTF-8, decoding as latin-1", path)
        try:
            return path.read_text(encoding="latin-1")
        except OSError as e:
            raise ReadError(f"Cannot read file: {e}", path) from e
    except OSError as e:
        raise ReadError(f"Cannot read file: {e}", path) from e


__all__ = [
    "RecoverableError",
    "ConfigurationError",
    "ParseError",
    "ReadError",
    "read_source",
]
