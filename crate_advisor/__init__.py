"""crate-advisor - check crate versions against security advisories and their patched ranges."""

__version__ = "0.1.0"

from .core.evaluator import RangeEvaluator, is_vulnerable
from .core.constraints import ConstraintExpression
from .core.models import AdvisoryDetail, AdvisorySummary, ResolutionTarget
from .core.resolver import VulnerabilityResolver
from .core.parsers import LockFileParser
from .store import AdvisoryStoreError, InMemoryAdvisoryStore, OfflineAdvisoryStore
from .output.formatters import ConsoleFormatter, JSONFormatter

__all__ = [
    "RangeEvaluator",
    "is_vulnerable",
    "ConstraintExpression",
    "AdvisoryDetail",
    "AdvisorySummary",
    "ResolutionTarget",
    "VulnerabilityResolver",
    "LockFileParser",
    "AdvisoryStoreError",
    "InMemoryAdvisoryStore",
    "OfflineAdvisoryStore",
    "ConsoleFormatter",
    "JSONFormatter",
]
