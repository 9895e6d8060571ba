"""Parsing of advisory "patched" range expressions.

A patched expression is a ``|``-separated list of clauses, any one of which
marks a version as fixed. Each clause is one of:

* ``^1.2.3`` - an exact literal; matched by plain string equality.
* ``>=1.2.3`` (or ``>``, ``<``, ``<=``) - a one-sided bound.
* ``>=1.2.3, <2.0.0`` - a two-sided bound, sides in either order.

Clause strings are not trimmed before classification, so whitespace around a
``|`` stays part of the clause. Anything that cannot be classified becomes a
:class:`MalformedClause`, which never matches.
"""

from dataclasses import dataclass
from enum import Enum
from typing import List, Tuple, Union

from ..utils.logging import get_logger

CLAUSE_SEPARATOR = "|"
BOUND_SEPARATOR = ","
EXACT_PREFIX = "^"

logger = get_logger("ConstraintParser")


class Comparator(Enum):
    """Comparison operator of a bound."""

    GT = ">"
    GE = ">="
    LT = "<"
    LE = "<="

    @property
    def is_strict(self) -> bool:
        return self in (Comparator.GT, Comparator.LT)

    @property
    def is_lower(self) -> bool:
        return self in (Comparator.GT, Comparator.GE)


@dataclass(frozen=True)
class ExactClause:
    """``^literal``: satisfied only by the identical version string."""

    raw: str
    literal: str


@dataclass(frozen=True)
class OpenClause:
    """One-sided bound such as ``>=1.2.3``."""

    raw: str
    op: Comparator
    bound: str


@dataclass(frozen=True)
class ClosedClause:
    """Two-sided bound such as ``>=1.2.3, <2.0.0``."""

    raw: str
    lower_op: Comparator
    lower: str
    upper_op: Comparator
    upper: str

    def __post_init__(self) -> None:
        if not self.lower_op.is_lower or self.upper_op.is_lower:
            raise ValueError(
                f"Invalid bound pairing {self.lower_op.value}/{self.upper_op.value} in {self.raw!r}"
            )


@dataclass(frozen=True)
class MalformedClause:
    """A clause that could not be classified. It matches nothing."""

    raw: str
    reason: str


ConstraintClause = Union[ExactClause, OpenClause, ClosedClause, MalformedClause]


def _split_lower_bound(text: str) -> Tuple[Comparator, str]:
    if text.startswith(">="):
        return Comparator.GE, text[2:]
    if text.startswith(">"):
        return Comparator.GT, text[1:]
    raise ValueError(f"not a lower bound: {text!r}")


def _split_upper_bound(text: str) -> Tuple[Comparator, str]:
    if text.startswith("<="):
        return Comparator.LE, text[2:]
    if text.startswith("<"):
        return Comparator.LT, text[1:]
    raise ValueError(f"not an upper bound: {text!r}")


def _parse_closed(raw: str) -> ConstraintClause:
    sides = [side.strip() for side in raw.split(BOUND_SEPARATOR)]
    if len(sides) != 2:
        return MalformedClause(raw, f"expected two bounds, got {len(sides)}")

    first, second = sides
    if first.startswith(">"):
        lower, upper = first, second
    elif first.startswith("<"):
        lower, upper = second, first
    else:
        return MalformedClause(raw, "first bound has no comparator")

    try:
        lower_op, lower_version = _split_lower_bound(lower)
        upper_op, upper_version = _split_upper_bound(upper)
    except ValueError as e:
        return MalformedClause(raw, str(e))

    return ClosedClause(raw, lower_op, lower_version, upper_op, upper_version)


def _parse_open(raw: str) -> ConstraintClause:
    if raw.startswith(">") and not raw.startswith(">="):
        return OpenClause(raw, Comparator.GT, raw[1:])
    if raw.startswith(">="):
        return OpenClause(raw, Comparator.GE, raw[2:])
    if raw.startswith("<") and not raw.startswith("<="):
        return OpenClause(raw, Comparator.LT, raw[1:])
    if raw.startswith("<="):
        return OpenClause(raw, Comparator.LE, raw[2:])
    return MalformedClause(raw, "no comparator prefix")


def parse_clause(raw: str) -> ConstraintClause:
    """Classify a single OR-branch of a patched expression.

    Args:
        raw: Clause text exactly as it appears between separators

    Returns:
        The parsed clause; never raises
    """
    if BOUND_SEPARATOR in raw:
        clause = _parse_closed(raw)
    elif EXACT_PREFIX in raw:
        if raw.startswith(EXACT_PREFIX):
            clause = ExactClause(raw, raw[len(EXACT_PREFIX):])
        else:
            clause = MalformedClause(raw, "'^' is not at the start of the clause")
    else:
        clause = _parse_open(raw)

    if isinstance(clause, MalformedClause):
        logger.debug(f"Malformed clause {raw!r}: {clause.reason}")
    return clause


@dataclass(frozen=True)
class ConstraintExpression:
    """An ordered, OR-combined list of clauses parsed from a patched field."""

    raw: str
    clauses: Tuple[ConstraintClause, ...]

    @classmethod
    def parse(cls, raw: str) -> "ConstraintExpression":
        """Parse a raw patched expression.

        Args:
            raw: The advisory's patched field

        Returns:
            Parsed expression holding one clause per ``|``-separated part
        """
        return cls(raw=raw, clauses=tuple(parse_clause(part) for part in raw.split(CLAUSE_SEPARATOR)))

    @property
    def malformed_clauses(self) -> List[MalformedClause]:
        return [clause for clause in self.clauses if isinstance(clause, MalformedClause)]

    def __str__(self) -> str:
        return self.raw
