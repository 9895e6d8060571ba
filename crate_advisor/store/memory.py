"""In-memory advisory store."""

from typing import Dict, Iterable, List

from ..core.models import AdvisoryDetail, AdvisorySummary
from .base import AdvisoryStore


class InMemoryAdvisoryStore(AdvisoryStore):
    """Advisory store over records already held in memory.

    Detail rows are kept as given, so an id with two identical rows returns
    both.
    """

    def __init__(
        self,
        summaries: Iterable[AdvisorySummary] = (),
        details: Iterable[AdvisoryDetail] = ()
    ) -> None:
        self._summaries: List[AdvisorySummary] = list(summaries)
        self._details: Dict[str, List[AdvisoryDetail]] = {}
        for detail in details:
            self._details.setdefault(detail.id, []).append(detail)

    def list_summaries(self) -> List[AdvisorySummary]:
        return list(self._summaries)

    def get_details(self, advisory_id: str) -> List[AdvisoryDetail]:
        return list(self._details.get(advisory_id, []))

    def get_statistics(self) -> Dict[str, int]:
        """Counts of summaries, crates and detail rows in the store."""
        return {
            "total_summaries": len(self._summaries),
            "total_crates": len({summary.crate_name for summary in self._summaries}),
            "total_details": sum(len(rows) for rows in self._details.values()),
        }
