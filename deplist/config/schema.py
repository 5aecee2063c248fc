"""Configuration schema definitions using Pydantic for validation.

Scan settings are validated up front so a typo in a config file fails
with a clear message instead of silently scanning the wrong files.
"""

from typing import Any, Dict, List

from pydantic import BaseModel, Field, field_validator

DEFAULT_FILE_EXTENSIONS = ["js", "jsx", "ts", "tsx"]

# Paths never scanned, in .gitignore syntax
DEFAULT_IGNORE_PATTERNS = [
    "**/node_modules/**",
    "**/*.d.ts",
    "dist",
    "build",
    ".env",
    ".DS_Store",
    "*.log",
    "coverage",
]

# Files whose references count as dev dependencies. ``{ext}`` expands to the
# configured extensions.
DEFAULT_DEV_FILE_PATTERNS = [
    "**/test/**/*.{ext}",
    "**/__tests__/**/*.{ext}",
    "**/tests/**/*.{ext}",
    "**/scripts/**/*.{ext}",
    "**/*.test.{ext}",
    "**/*.spec.{ext}",
    "**/__mocks__/**/*.{ext}",
    "**/__fixtures__/**/*.{ext}",
    "**/setupTests.{ext}",
]


class ScanConfig(BaseModel):
    """Settings for project discovery and dependency extraction.

    Attributes:
        file_extensions: Source file extensions to scan (without the dot).
        ignore_patterns: Built-in ignore rules (gitignore syntax).
        extra_ignore_patterns: Additional ignore rules appended to the built-ins.
        dev_file_patterns: Glob patterns selecting dev (test/script) files.
        respect_gitignore: Whether .gitignore files below the root apply.
        max_workers: Maximum number of files parsed concurrently.
    """

    file_extensions: List[str] = Field(
        default_factory=lambda: list(DEFAULT_FILE_EXTENSIONS)
    )
    ignore_patterns: List[str] = Field(
        default_factory=lambda: list(DEFAULT_IGNORE_PATTERNS)
    )
    extra_ignore_patterns: List[str] = Field(default_factory=list)
    dev_file_patterns: List[str] = Field(
        default_factory=lambda: list(DEFAULT_DEV_FILE_PATTERNS)
    )
    respect_gitignore: bool = True
    max_workers: int = Field(default=8, ge=1, le=64)

    model_config = {"extra": "forbid"}

    @field_validator("file_extensions")
    @classmethod
    def normalize_extensions(cls, v: List[str]) -> List[str]:
        """Strip leading dots, lower-case, drop duplicates."""
        normalized: List[str] = []
        for ext in v:
            clean = ext.strip().lstrip(".").lower()
            if not clean:
                raise ValueError(f"Invalid file extension: {ext!r}")
            if clean not in normalized:
                normalized.append(clean)
        if not normalized:
            raise ValueError("file_extensions must contain at least one extension")
        return normalized

    @field_validator("ignore_patterns", "extra_ignore_patterns", "dev_file_patterns")
    @classmethod
    def strip_patterns(cls, v: List[str]) -> List[str]:
        return [p.strip() for p in v if p.strip()]

    @property
    def all_ignore_patterns(self) -> List[str]:
        return self.ignore_patterns + self.extra_ignore_patterns

    @property
    def extension_glob(self) -> str:
        """Brace alternative of the configured extensions, e.g. ``{js,ts}``."""
        if len(self.file_extensions) == 1:
            return self.file_extensions[0]
        return "{" + ",".join(self.file_extensions) + "}"

    @property
    def source_patterns(self) -> List[str]:
        return [f"**/*.{self.extension_glob}"]

    @property
    def resolved_dev_patterns(self) -> List[str]:
        return [p.replace("{ext}", self.extension_glob) for p in self.dev_file_patterns]

    @classmethod
    def default(cls) -> "ScanConfig":
        return cls()

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ScanConfig":
        """Create configuration from dictionary.

        Raises:
            ValidationError: If configuration is invalid.
        """
        return cls.model_validate(data)

    def to_dict(self) -> Dict[str, Any]:
        return self.model_dump()
