"""Path utilities for finding dependency lock files and filtering paths."""

import fnmatch
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator, List, Optional


@dataclass
class LockFile:
    """A file that lists resolved crate versions."""

    path: Path
    parser_type: str

    def __post_init__(self) -> None:
        """Validate the lock file."""
        if not self.path.exists():
            raise ValueError(f"Lock file does not exist: {self.path}")


DEFAULT_IGNORE_PATTERNS = [
    "**/target/**",
    "**/.git/**",
    "**/node_modules/**",
    "**/__pycache__/**",
    "**/.venv/**",
    "**/venv/**",
    "**/.pytest_cache/**",
]


class PathFilter:
    """Filters paths based on glob patterns."""

    def __init__(self, ignore_patterns: Optional[List[str]] = None) -> None:
        """Initialize path filter.

        Args:
            ignore_patterns: Additional glob patterns to ignore
        """
        self.ignore_patterns = DEFAULT_IGNORE_PATTERNS + list(ignore_patterns or [])

    def is_ignored(self, path: Path) -> bool:
        """Check if a path should be ignored.

        Args:
            path: Path to check

        Returns:
            True if path should be ignored
        """
        path_str = path.as_posix()
        return any(fnmatch.fnmatch(path_str, pattern) for pattern in self.ignore_patterns)


class LockFileFinder:
    """Finds lock files and target lists in a project directory."""

    LOCK_FILE_PATTERNS = {
        "Cargo.lock": "cargo-lock",
        "targets.txt": "target-list",
        "*.targets": "target-list",
    }

    def __init__(self, ignore_patterns: Optional[List[str]] = None) -> None:
        self.path_filter = PathFilter(ignore_patterns)

    def find_lock_files(self, root_path: Path) -> List[LockFile]:
        """Find all lock files in a directory tree.

        Args:
            root_path: Root directory to search

        Returns:
            Found lock files, sorted by path
        """
        if not root_path.exists():
            raise ValueError(f"Root path does not exist: {root_path}")

        lock_files = []
        for file_path in self._walk_files(root_path):
            parser_type = self._get_file_type(file_path)
            if parser_type:
                lock_files.append(LockFile(path=file_path, parser_type=parser_type))

        return sorted(lock_files, key=lambda lock_file: lock_file.path)

    def _walk_files(self, root_path: Path) -> Iterator[Path]:
        for file_path in root_path.rglob("*"):
            if file_path.is_file() and not self.path_filter.is_ignored(file_path):
                yield file_path

    def _get_file_type(self, file_path: Path) -> Optional[str]:
        filename = file_path.name

        if filename in self.LOCK_FILE_PATTERNS:
            return self.LOCK_FILE_PATTERNS[filename]

        for pattern, parser_type in self.LOCK_FILE_PATTERNS.items():
            if fnmatch.fnmatch(filename, pattern):
                return parser_type

        return None


def find_lock_files(
    root_path: Path,
    ignore_patterns: Optional[List[str]] = None
) -> List[LockFile]:
    """Convenience function to find lock files.

    Args:
        root_path: Root directory to search
        ignore_patterns: Additional ignore patterns

    Returns:
        List of found lock files
    """
    return LockFileFinder(ignore_patterns).find_lock_files(root_path)


def is_ignored_path(path: Path, ignore_patterns: Optional[List[str]] = None) -> bool:
    """Check if a path should be ignored."""
    return PathFilter(ignore_patterns).is_ignored(path)
