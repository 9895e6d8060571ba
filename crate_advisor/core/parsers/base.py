"""Base parser class and data models for crate lock files."""

import os
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Set

from ..models import ResolutionTarget


@dataclass
class LockedCrate:
    """A crate pinned to one version by a lock file."""

    name: str
    version: str
    source: Optional[str] = None
    source_file: Optional[Path] = None
    line_number: Optional[int] = None
    metadata: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        """Validate the locked crate."""
        if not self.name:
            raise ValueError("Crate name cannot be empty")
        if not self.version:
            raise ValueError(f"Crate {self.name} has no version")

    def to_target(self) -> ResolutionTarget:
        return ResolutionTarget(self.name, self.version)


@dataclass
class ParsedLockFile:
    """Container for crates parsed from one file."""

    crates: List[LockedCrate] = field(default_factory=list)
    source_file: Optional[Path] = None
    parser_type: str = ""
    metadata: Dict[str, Any] = field(default_factory=dict)

    def add_crate(self, crate: LockedCrate) -> None:
        self.crates.append(crate)

    def get_targets(self) -> Set[ResolutionTarget]:
        """Distinct ``name/version`` targets of the parsed crates."""
        return {crate.to_target() for crate in self.crates}

    def find_crate(self, name: str) -> Optional[LockedCrate]:
        """Find the first crate with the given name."""
        for crate in self.crates:
            if crate.name == name:
                return crate
        return None


class BaseParser(ABC):
    """Abstract base class for lock file parsers."""

    parser_type: str = ""

    @abstractmethod
    def can_parse(self, file_path: Path) -> bool:
        """Check if this parser can handle the given file.

        Args:
            file_path: Path to the file to check

        Returns:
            True if parser can handle the file
        """

    @abstractmethod
    def parse(self, file_path: Path) -> ParsedLockFile:
        """Parse a lock file.

        Args:
            file_path: Path to the file to parse

        Returns:
            Crates listed in the file
        """

    def validate_file(self, file_path: Path) -> None:
        """Validate that the file exists and is readable.

        Raises:
            FileNotFoundError: If file doesn't exist
            ValueError: If the path is not a file
            PermissionError: If file is not readable
        """
        if not file_path.exists():
            raise FileNotFoundError(f"File not found: {file_path}")

        if not file_path.is_file():
            raise ValueError(f"Path is not a file: {file_path}")

        if not os.access(file_path, os.R_OK):
            raise PermissionError(f"File is not readable: {file_path}")
