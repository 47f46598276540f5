"""Ignore rules for backup targets.

This module provides:
- IgnoreRules: gitignore-style matching built from a target's .sandmanignore
  and the global .sandmanignore in the configuration directory

Each source is compiled on its own and a path is excluded when either source
excludes it, so a negation in one file never re-includes a path the other
file excludes.
"""

from __future__ import annotations

import logging
import re
from pathlib import Path

import pathspec

from sandman.core.paths import ignore_file_for

logger = logging.getLogger(__name__)


def load_ignore_spec(path: Path) -> pathspec.GitIgnoreSpec | None:
    """Compile the patterns of one ignore file.

    Blank lines and comments are skipped by the gitignore syntax itself.

    Args:
        path: Ignore file to read.

    Returns:
        Compiled spec, or None if the file is absent, unreadable or invalid.
    """
    if not path.is_file():
        logger.debug(f"No ignore file at {path}")
        return None

    try:
        lines = path.read_text(encoding="utf-8").splitlines()
        return pathspec.GitIgnoreSpec.from_lines(lines)
    except (OSError, ValueError, re.error) as e:
        # UnicodeDecodeError and GitWildMatchPatternError are ValueErrors;
        # a bad bracket range only fails in the regex compiler
        logger.warning(f"Ignoring unusable ignore file {path}: {e}")
        return None


class IgnoreRules:
    """Exclusion rules applied while scanning one target directory."""

    def __init__(
        self,
        base_path: Path,
        specs: list[pathspec.GitIgnoreSpec] | None = None,
    ) -> None:
        """Initialize with compiled specs.

        Args:
            base_path: Target directory the patterns are relative to.
            specs: Compiled pattern sets; a path excluded by any is excluded.
        """
        self._base_path = Path(base_path)
        self._specs = list(specs or [])

    @classmethod
    def from_patterns(cls, base_path: Path, *sources: list[str]) -> IgnoreRules:
        """Build rules from in-memory pattern lists, one spec per list."""
        return cls(base_path, [pathspec.GitIgnoreSpec.from_lines(lines) for lines in sources])

    @classmethod
    def for_target(
        cls,
        directory: Path | str,
        global_ignore_file: Path | None = None,
    ) -> IgnoreRules:
        """Load the rules of a target directory.

        Args:
            directory: Target directory, searched for .sandmanignore.
            global_ignore_file: Ignore file shared by all targets, if any.

        Returns:
            IgnoreRules; sources that are missing or invalid contribute nothing.
        """
        base_path = Path(directory)
        sources = [ignore_file_for(base_path)]
        if global_ignore_file is not None:
            sources.append(global_ignore_file)

        specs = [spec for spec in (load_ignore_spec(p) for p in sources) if spec is not None]
        return cls(base_path, specs)

    def excluded(self, path: Path | str, is_dir: bool = False) -> bool:
        """Check if a path is excluded.

        Args:
            path: Path relative to the base path, or an absolute path below it.
            is_dir: Whether the path is a directory (enables `dir/` patterns).

        Returns:
            True if any source excludes the path.
        """
        if not self._specs:
            return False

        candidate = Path(path)
        if candidate.is_absolute():
            try:
                candidate = candidate.relative_to(self._base_path)
            except ValueError:
                return False

        rel_str = candidate.as_posix()
        if rel_str in ("", "."):
            return False
        if is_dir:
            rel_str += "/"

        return any(spec.match_file(rel_str) for spec in self._specs)
