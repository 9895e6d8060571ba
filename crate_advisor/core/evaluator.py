"""Evaluation of patched-range clauses against a concrete version.

Bounds are checked by ranking rather than by direct comparison: the query and
its bound(s) are stably sorted from highest to lowest with
:func:`~crate_advisor.core.versions.sort_descending` and the query must land in
the right slot. Slot checks compare strings, so a query equal to a bound
string always counts as sitting at that bound.
"""

from typing import Union

from .constraints import (
    ClosedClause,
    Comparator,
    ConstraintClause,
    ConstraintExpression,
    ExactClause,
    MalformedClause,
    OpenClause,
)
from .versions import sort_descending

Expression = Union[str, ConstraintExpression]


class RangeEvaluator:
    """Decides whether versions are covered by patched expressions."""

    def satisfies(self, clause: ConstraintClause, version: str) -> bool:
        """Check a single clause.

        Args:
            clause: Parsed clause
            version: Query version string

        Returns:
            True if the clause covers ``version``
        """
        if isinstance(clause, ExactClause):
            return version == clause.literal
        if isinstance(clause, OpenClause):
            return self._satisfies_open(clause, version)
        if isinstance(clause, ClosedClause):
            return self._satisfies_closed(clause, version)
        if isinstance(clause, MalformedClause):
            return False
        raise TypeError(f"Unknown clause type: {type(clause).__name__}")

    def _satisfies_open(self, clause: OpenClause, version: str) -> bool:
        ranked = sort_descending([version, clause.bound])

        if clause.op is Comparator.GT:
            return ranked[0] == version and clause.bound != version
        if clause.op is Comparator.GE:
            return ranked[0] == version
        if clause.op is Comparator.LT:
            return ranked[1] == version and clause.bound != version
        return ranked[1] == version

    def _satisfies_closed(self, clause: ClosedClause, version: str) -> bool:
        highest, middle, lowest = sort_descending([version, clause.lower, clause.upper])

        if middle != version:
            return False
        if clause.lower_op is Comparator.GT and lowest == version:
            return False
        if clause.upper_op is Comparator.LT and highest == version:
            return False
        return True

    def is_in_patched_range(self, expression: Expression, version: str) -> bool:
        """True if any clause of ``expression`` covers ``version``."""
        if isinstance(expression, str):
            expression = ConstraintExpression.parse(expression)
        return any(self.satisfies(clause, version) for clause in expression.clauses)

    def is_vulnerable(self, expression: Expression, version: str) -> bool:
        """True if ``version`` is not covered by any patched clause."""
        return not self.is_in_patched_range(expression, version)


_default_evaluator = RangeEvaluator()


def satisfies(clause: ConstraintClause, version: str) -> bool:
    return _default_evaluator.satisfies(clause, version)


def is_in_patched_range(expression: Expression, version: str) -> bool:
    return _default_evaluator.is_in_patched_range(expression, version)


def is_vulnerable(expression: Expression, version: str) -> bool:
    """Whether ``version`` remains exposed under a patched expression.

    >>> is_vulnerable("^1.2.3", "1.2.3")
    False
    >>> is_vulnerable(">1.0.0, <2.0.0", "2.0.0")
    True
    """
    return _default_evaluator.is_vulnerable(expression, version)
