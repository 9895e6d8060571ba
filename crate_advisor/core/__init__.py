"""Core version matching and advisory resolution for crate-advisor."""

from .versions import compare_versions, parse_version, sort_descending
from .constraints import (
    ClosedClause,
    Comparator,
    ConstraintExpression,
    ExactClause,
    MalformedClause,
    OpenClause,
    parse_clause,
)
from .models import AdvisoryDetail, AdvisorySummary, ResolutionTarget, parse_target
from .evaluator import RangeEvaluator, is_in_patched_range, is_vulnerable, satisfies
from .resolver import VulnerabilityResolver
from .parsers import LockFileParser, LockedCrate, ParsedLockFile

__all__ = [
    "compare_versions",
    "parse_version",
    "sort_descending",
    "ClosedClause",
    "Comparator",
    "ConstraintExpression",
    "ExactClause",
    "MalformedClause",
    "OpenClause",
    "parse_clause",
    "AdvisoryDetail",
    "AdvisorySummary",
    "ResolutionTarget",
    "parse_target",
    "RangeEvaluator",
    "is_in_patched_range",
    "is_vulnerable",
    "satisfies",
    "VulnerabilityResolver",
    "LockFileParser",
    "LockedCrate",
    "ParsedLockFile",
]
