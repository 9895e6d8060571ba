"""Lock file parsers producing crate resolution targets."""

from .base import BaseParser, LockedCrate, ParsedLockFile
from .cargo import CargoLockParser, TargetListParser
from .registry import ParserRegistry

# Register built-in parsers
registry = ParserRegistry()
registry.register(CargoLockParser())
registry.register(TargetListParser())

# Convenience exports
LockFileParser = registry
__all__ = [
    "BaseParser",
    "LockedCrate",
    "ParsedLockFile",
    "CargoLockParser",
    "TargetListParser",
    "LockFileParser",
    "ParserRegistry",
    "registry",
]
