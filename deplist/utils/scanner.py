"""File scanner with simplified .gitignore semantics.

Globs use ``/`` separated paths relative to a root. ``*`` and ``?`` never
cross a ``/``, ``**`` spans any number of directories (including none) and
``{a,b}`` alternatives are expanded before matching.
"""

import logging
import os
import re
from functools import lru_cache
from pathlib import Path
from typing import Generator, Iterable, List, Optional, Sequence, Union

logger = logging.getLogger("deplist.utils.scanner")

# Never scanned, whatever the configuration says
ALWAYS_IGNORED_DIRS = frozenset({".git", ".svn", ".hg", "node_modules"})

_BRACE_RE = re.compile(r"\{([^{}]*)\}")


def expand_braces(pattern: str) -> List[str]:
    """Expand ``{a,b}`` alternatives: ``*.{js,ts}`` -> ``['*.js', '*.ts']``."""
    match = _BRACE_RE.search(pattern)
    if match is None:
        return [pattern]
    head, tail = pattern[: match.start()], pattern[match.end():]
    expanded: List[str] = []
    for option in match.group(1).split(","):
        expanded.extend(expand_braces(head + option + tail))
    return expanded


@lru_cache(maxsize=1024)
def _glob_regex(pattern: str) -> "re.Pattern[str]":
    out = []
    i, n = 0, len(pattern)
    while i < n:
        c = pattern[i]
        if pattern.startswith("**/", i):
            out.append("(?:.*/)?")
            i += 3
        elif pattern.startswith("/**", i) and i + 3 == n:
            out.append("(?:/.*)?")
            i += 3
        elif pattern.startswith("**", i):
            out.append(".*")
            i += 2
        elif c == "*":
            out.append("[^/]*")
            i += 1
        elif c == "?":
            out.append("[^/]")
            i += 1
        elif c == "[":
            end = pattern.find("]", i + 1)
            if end == -1:
                out.append(re.escape(c))
                i += 1
            else:
                body = pattern[i + 1:end]
                if body.startswith("!"):
                    body = "^" + body[1:]
                out.append(f"[{body}]")
                i = end + 1
        else:
            out.append(re.escape(c))
            i += 1
    return re.compile("".join(out) + r"\Z", re.DOTALL)


def glob_match(rel_path: str, pattern: str) -> bool:
    """Match a relative ``/`` path against a glob (with brace expansion)."""
    return any(_glob_regex(p).match(rel_path) for p in expand_braces(pattern))


class IgnoreRule:
    """One .gitignore line."""

    def __init__(self, pattern: str) -> None:
        self.source = pattern
        self.negated = pattern.startswith("!")
        if self.negated:
            pattern = pattern[1:]
        self.dir_only = pattern.endswith("/")
        pattern = pattern.rstrip("/")
        # a slash anywhere but the end anchors the pattern to the root
        self.anchored = "/" in pattern
        self.pattern = pattern.lstrip("/")
        # "dir/**" ignores everything below dir, so dir itself can be pruned
        self.prune_pattern = self.pattern[:-3] if self.pattern.endswith("/**") else None

    def matches(self, rel_path: str, is_dir: bool) -> bool:
        if self.dir_only and not is_dir:
            return False
        if self.anchored:
            if glob_match(rel_path, self.pattern):
                return True
            return bool(
                is_dir and self.prune_pattern and glob_match(rel_path, self.prune_pattern)
            )
        return glob_match(rel_path.rsplit("/", 1)[-1], self.pattern)

    def __repr__(self) -> str:
        return f"IgnoreRule({self.source!r})"


class IgnoreMatcher:
    """Ordered .gitignore-style rules; the last matching rule wins.

    A path is ignored when it, or any directory above it, is ignored.
    """

    def __init__(self, patterns: Iterable[str] = ()) -> None:
        self.rules: List[IgnoreRule] = []
        self.add(patterns)

    def add(self, patterns: Iterable[str]) -> "IgnoreMatcher":
        for pattern in patterns:
            pattern = pattern.strip()
            if pattern and not pattern.startswith("#"):
                self.rules.append(IgnoreRule(pattern))
        return self

    def _decide(self, rel_path: str, is_dir: bool) -> bool:
        ignored = False
        for rule in self.rules:
            if rule.matches(rel_path, is_dir):
                ignored = not rule.negated
        return ignored

    def is_ignored(self, rel_path: str, is_dir: bool = False) -> bool:
        """Check a root-relative ``/`` path.

        Args:
            rel_path: Path relative to the matcher's root.
            is_dir: Whether the path is a directory.

        Returns:
            bool: True if ignored.
        """
        rel_path = rel_path.strip("/")
        if not rel_path or rel_path == ".":
            return False
        parts = rel_path.split("/")
        for i in range(1, len(parts)):
            if self._decide("/".join(parts[:i]), True):
                return True
        return self._decide(rel_path, is_dir)

    def filter(self, rel_paths: Iterable[str]) -> List[str]:
        return [p for p in rel_paths if not self.is_ignored(p)]


def _relative(path: Path, root: Path) -> Optional[str]:
    try:
        return path.relative_to(root).as_posix()
    except ValueError:
        return None


def load_gitignore_patterns(root_path: Path) -> List[str]:
    """Load patterns from every .gitignore below ``root_path``.

    Patterns from nested files are applied relative to the root, like the
    rest of the ignore rules. VCS and node_modules directories are skipped.
    """
    patterns: List[str] = []
    for dirpath, dirnames, filenames in os.walk(root_path):
        dirnames[:] = sorted(d for d in dirnames if d not in ALWAYS_IGNORED_DIRS)
        if ".gitignore" not in filenames:
            continue
        gitignore = Path(dirpath) / ".gitignore"
        try:
            with open(gitignore, "r", encoding="utf-8") as f:
                for line in f:
                    line = line.strip()
                    if line and not line.startswith("#"):
                        patterns.append(line)
        except (OSError, UnicodeDecodeError) as exc:
            logger.warning("Failed to read %s: %s", gitignore, exc)
            continue
        logger.info("Loaded patterns from %s", _relative(gitignore, root_path))
    return patterns


def scan_files(
    root_path: Path,
    patterns: Sequence[str],
    ignore: Optional[Union[IgnoreMatcher, Sequence[str]]] = None,
    ignore_root: Optional[Path] = None,
    exclude: Sequence[str] = (),
    recursive: bool = True,
) -> Generator[Path, None, None]:
    """Scan files matching patterns, respecting ignores.

    Args:
        root_path: Root directory to scan.
        patterns: Globs (relative to ``root_path``) a file must match.
        ignore: Ignore rules, as a matcher or a list of gitignore patterns.
        ignore_root: Directory the ignore rules are relative to
            (defaults to ``root_path``).
        exclude: Globs (relative to ``root_path``) a file must not match.
        recursive: Whether to scan recursively.

    Yields:
        Absolute paths of matching files in sorted, depth-first order.
    """
    root_path = root_path.resolve()
    ignore_root = (ignore_root or root_path).resolve()
    if ignore is None:
        matcher = IgnoreMatcher()
    elif isinstance(ignore, IgnoreMatcher):
        matcher = ignore
    else:
        matcher = IgnoreMatcher(ignore)

    def ignored(path: Path, is_dir: bool) -> bool:
        rel = _relative(path, ignore_root)
        return rel is not None and matcher.is_ignored(rel, is_dir)

    stack = [root_path]
    while stack:
        current_dir = stack.pop()
        try:
            entries = sorted(os.scandir(current_dir), key=lambda e: e.name)
        except OSError as exc:
            logger.debug("Cannot list %s: %s", current_dir, exc)
            continue

        dirs = []
        for entry in entries:
            path = Path(entry.path)
            if entry.is_dir(follow_symlinks=False):
                if recursive and entry.name not in ALWAYS_IGNORED_DIRS and not ignored(path, True):
                    dirs.append(path)
                continue
            if not entry.is_file() or ignored(path, False):
                continue
            rel = path.relative_to(root_path).as_posix()
            if not any(glob_match(rel, p) for p in patterns):
                continue
            if any(glob_match(rel, p) for p in exclude):
                continue
            yield path

        # reversed so the first directory is popped first
        stack.extend(reversed(dirs))


__all__ = [
    "IgnoreMatcher",
    "IgnoreRule",
    "expand_braces",
    "glob_match",
    "load_gitignore_patterns",
    "scan_files",
]
