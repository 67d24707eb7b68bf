"""Ignore-file rules for the directory walk.

Entries matched by an ignore file are excluded from the traversal
entirely. Two kinds of ignore files are honoured:

- ``.ignore`` files, always.
- ``.gitignore`` files and ``.git/info/exclude``, only when the walk
  root is inside a git repository.

Rules found in a directory apply to everything below it and are matched
relative to that directory. Deeper rules take precedence over shallower
ones, and ``.ignore`` takes precedence over ``.gitignore`` in the same
directory. Patterns use gitwildmatch semantics via pathspec; a line that
is not a valid pattern is skipped with a warning.
"""

import logging
from dataclasses import dataclass
from pathlib import Path

import pathspec

logger = logging.getLogger(__name__)

GITIGNORE_FILE = ".gitignore"
IGNORE_FILE = ".ignore"
GIT_EXCLUDE_FILE = Path(".git") / "info" / "exclude"


def _read_patterns(path: Path) -> list[str]:
    """Read ignore patterns from a file.

    Missing files yield no patterns. Unreadable files are logged and
    treated as empty.

    Args:
        path: Ignore file to read.

    Returns:
        Raw pattern lines (blank lines and comments are handled by pathspec).
    """
    try:
        with open(path, encoding="utf-8", errors="replace") as f:
            return f.read().splitlines()
    except FileNotFoundError:
        return []
    except OSError as e:
        logger.warning("Cannot read ignore file %s: %s", path, e)
        return []


def is_in_git_repo(root: Path) -> bool:
    """Check whether a directory is inside a git repository.

    Args:
        root: Directory to check.

    Returns:
        True if ``root`` or any of its ancestors holds a ``.git`` entry.
    """
    for directory in (root, *root.parents):
        if (directory / ".git").exists():
            return True
    return False


def _compile_patterns(lines: list[str], directory: Path) -> pathspec.PathSpec:
    """Compile ignore patterns, dropping lines that are not valid patterns.

    One bad line only loses that line; the rest of the file still applies.
    """
    valid: list[str] = []
    for line in lines:
        try:
            pathspec.PathSpec.from_lines("gitwildmatch", [line])
        except ValueError as e:
            logger.warning("Skipping invalid ignore pattern in %s: %s", directory, e)
            continue
        valid.append(line)
    return pathspec.PathSpec.from_lines("gitwildmatch", valid)


@dataclass(frozen=True, slots=True)
class _IgnoreLevel:
    """Compiled patterns of one directory."""

    base: Path
    spec: pathspec.PathSpec

    def match(self, path: Path, is_dir: bool) -> bool | None:
        """Match a path against this level.

        Returns:
            True if ignored, False if explicitly re-included by a negated
            pattern, None if no pattern matched.
        """
        try:
            relative = path.relative_to(self.base).as_posix()
        except ValueError:
            return None
        if is_dir:
            relative += "/"

        result: bool | None = None
        for pattern in self.spec.patterns:
            if pattern.include is None:
                continue
            if pattern.match_file(relative) is not None:
                result = pattern.include
        return result


class IgnoreRules:
    """Stack of ignore rules from the walk root down to one directory.

    Instances are immutable. Each directory listing job derives its own
    rules with :meth:`child`, so no state is shared between workers.

    Example:
        >>> rules = IgnoreRules.for_root(Path("/photos"))
        >>> sub = rules.child(Path("/photos/2024"))
        >>> sub.is_ignored(Path("/photos/2024/tmp"), is_dir=True)
        False
    """

    def __init__(
        self,
        levels: tuple[_IgnoreLevel, ...] = (),
        *,
        use_git: bool = False,
        enabled: bool = True,
    ) -> None:
        self._levels = levels
        self._use_git = use_git
        self._enabled = enabled

    @classmethod
    def disabled(cls) -> "IgnoreRules":
        """Rules that never ignore anything."""
        return cls(enabled=False)

    @classmethod
    def for_root(cls, root: Path, enabled: bool = True) -> "IgnoreRules":
        """Build the rules for the walk root.

        Args:
            root: Walk root directory.
            enabled: If False, return rules that ignore nothing.

        Returns:
            IgnoreRules including the root's own ignore files.
        """
        if not enabled:
            return cls.disabled()

        use_git = is_in_git_repo(root)
        rules = cls(use_git=use_git)
        return rules.child(root, include_git_exclude=use_git)

    @property
    def enabled(self) -> bool:
        return self._enabled

    def child(self, directory: Path, *, include_git_exclude: bool = False) -> "IgnoreRules":
        """Extend the rules with the ignore files of a directory.

        Args:
            directory: Directory about to be listed.
            include_git_exclude: Also read ``.git/info/exclude`` from it.

        Returns:
            New IgnoreRules, or ``self`` if the directory adds no patterns.
        """
        if not self._enabled:
            return self

        lines: list[str] = []
        if self._use_git:
            if include_git_exclude:
                lines.extend(_read_patterns(directory / GIT_EXCLUDE_FILE))
            lines.extend(_read_patterns(directory / GITIGNORE_FILE))
        lines.extend(_read_patterns(directory / IGNORE_FILE))

        if not lines:
            return self

        spec = _compile_patterns(lines, directory)
        level = _IgnoreLevel(base=directory, spec=spec)
        return IgnoreRules((*self._levels, level), use_git=self._use_git)

    def is_ignored(self, path: Path, is_dir: bool = False) -> bool:
        """Check whether a path is excluded from the walk.

        Args:
            path: Absolute path of the entry.
            is_dir: Whether the entry is a directory.

        Returns:
            True if the deepest matching rule ignores the path.
        """
        # Deepest level wins
        for level in reversed(self._levels):
            result = level.match(path, is_dir)
            if result is not None:
                return result
        return False
