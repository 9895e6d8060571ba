"""Parsers for Cargo.lock files and plain target lists."""

import tomllib
from pathlib import Path

from ..models import parse_target
from .base import BaseParser, LockedCrate, ParsedLockFile


class CargoLockParser(BaseParser):
    """Parser for Cargo.lock files."""

    parser_type = "cargo-lock"

    def can_parse(self, file_path: Path) -> bool:
        return file_path.name == "Cargo.lock"

    def parse(self, file_path: Path) -> ParsedLockFile:
        """Parse the ``[[package]]`` tables of a Cargo.lock file.

        Args:
            file_path: Path to the Cargo.lock file

        Returns:
            Every locked crate; workspace members are included

        Raises:
            ValueError: If the file is not valid TOML or a package lacks a name or version
        """
        self.validate_file(file_path)

        with open(file_path, 'rb') as f:
            try:
                data = tomllib.load(f)
            except tomllib.TOMLDecodeError as e:
                raise ValueError(f"Invalid Cargo.lock {file_path}: {e}") from e

        result = ParsedLockFile(
            source_file=file_path,
            parser_type=self.parser_type,
            metadata={"lock_version": data.get("version")},
        )

        for package in data.get("package", []):
            result.add_crate(LockedCrate(
                name=package.get("name", ""),
                version=package.get("version", ""),
                source=package.get("source"),
                source_file=file_path,
                metadata={"checksum": package["checksum"]} if "checksum" in package else {},
            ))

        return result


class TargetListParser(BaseParser):
    """Parser for plain ``name/version`` lists, one target per line."""

    parser_type = "target-list"

    def can_parse(self, file_path: Path) -> bool:
        return file_path.name == "targets.txt" or file_path.suffix == ".targets"

    def parse(self, file_path: Path) -> ParsedLockFile:
        """Parse a target list.

        Blank lines and ``#`` comments are skipped.

        Raises:
            ValueError: If a line is not ``name/version``
        """
        self.validate_file(file_path)

        result = ParsedLockFile(source_file=file_path, parser_type=self.parser_type)

        with open(file_path, 'r', encoding='utf-8') as f:
            for line_number, line in enumerate(f, 1):
                line = line.split("#", 1)[0].strip()
                if not line:
                    continue

                try:
                    target = parse_target(line)
                except ValueError as e:
                    raise ValueError(f"{file_path}:{line_number}: {e}") from e

                result.add_crate(LockedCrate(
                    name=target.name,
                    version=target.version,
                    source_file=file_path,
                    line_number=line_number,
                ))

        return result
