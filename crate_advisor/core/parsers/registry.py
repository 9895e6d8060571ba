"""Registry of lock file parsers."""

from pathlib import Path
from typing import Dict, Iterable, List, Optional

from ...utils.logging import get_logger
from .base import BaseParser, ParsedLockFile


class ParserRegistry:
    """Lock file parsers keyed by ``parser_type``, tried in registration order."""

    def __init__(self) -> None:
        self._parsers: Dict[str, BaseParser] = {}
        self.logger = get_logger("ParserRegistry")

    def register(self, parser: BaseParser) -> None:
        """Register ``parser``, replacing any parser of the same type.

        Raises:
            ValueError: If the parser does not declare a ``parser_type``
        """
        if not parser.parser_type:
            raise ValueError(f"{type(parser).__name__} has no parser_type")
        self._parsers[parser.parser_type] = parser

    def get_supported_parser_types(self) -> List[str]:
        return sorted(self._parsers)

    def find_parser_for_file(self, file_path: Path) -> Optional[BaseParser]:
        return next(
            (parser for parser in self._parsers.values() if parser.can_parse(file_path)),
            None,
        )

    def parse_file(self, file_path: Path) -> Optional[ParsedLockFile]:
        """Parse ``file_path`` with the first parser that accepts it.

        Returns:
            Parsed lock file, or None if no registered parser handles the file
        """
        parser = self.find_parser_for_file(file_path)
        if parser is None:
            self.logger.debug(f"No parser for {file_path}")
            return None

        parsed = parser.parse(file_path)
        self.logger.debug(f"{parser.parser_type}: {len(parsed.crates)} crates in {file_path}")
        return parsed

    def parse_files(self, file_paths: Iterable[Path]) -> List[ParsedLockFile]:
        """Parse several files, skipping those no parser handles."""
        results = []
        for file_path in file_paths:
            parsed = self.parse_file(file_path)
            if parsed is not None:
                results.append(parsed)
        return results
