"""Vulnerability resolution for crate versions.

Each resolution call takes one snapshot of an
:class:`~crate_advisor.store.base.AdvisoryStore`, keeps the summaries for the
queried crate whose patched expression does not cover the queried version,
and returns the detail rows of those advisories from the same snapshot.
"""

import asyncio
from typing import Dict, Iterable, List, Optional, Tuple, Union

from ..store.base import AdvisoryStore, AdvisoryStoreError
from ..utils.logging import get_logger
from ..utils.performance import PerformanceMonitor, benchmark
from .evaluator import RangeEvaluator
from .models import AdvisoryDetail, AdvisorySummary, ResolutionTarget, parse_target

Target = Union[str, ResolutionTarget, Tuple[str, str]]
SummaryIndex = Dict[str, List[AdvisorySummary]]

__all__ = ["VulnerabilityResolver", "build_index", "parse_target"]


def build_index(summaries: Iterable[AdvisorySummary]) -> SummaryIndex:
    """Group summaries by crate name, keeping snapshot order.

    Args:
        summaries: Advisory summaries from one snapshot

    Returns:
        Mapping of crate name to its summaries
    """
    index: SummaryIndex = {}
    for summary in summaries:
        index.setdefault(summary.crate_name, []).append(summary)
    return index


def _dedupe(details: Iterable[AdvisoryDetail]) -> List[AdvisoryDetail]:
    return list(dict.fromkeys(details))


class VulnerabilityResolver:
    """Answers "is this crate@version affected?" against an advisory store."""

    def __init__(
        self,
        store: AdvisoryStore,
        evaluator: Optional[RangeEvaluator] = None,
        enable_performance_monitoring: bool = False
    ) -> None:
        """Initialize the resolver.

        Args:
            store: Source of advisory summaries and details
            evaluator: Range evaluator, a default one when omitted
            enable_performance_monitoring: Track memory as well as timings
        """
        self.store = store
        self.evaluator = evaluator or RangeEvaluator()
        self.logger = get_logger("VulnerabilityResolver")
        self.performance_monitor = PerformanceMonitor(enable_performance_monitoring)

    @benchmark
    def resolve(self, crate_name: str, version: str) -> List[AdvisoryDetail]:
        """Advisories that ``crate_name`` at ``version`` is not patched against.

        Detail rows are returned as stored, duplicates included.

        Args:
            crate_name: Exact crate name
            version: Version string of the crate

        Returns:
            Detail records of every advisory the version is exposed to

        Raises:
            AdvisoryStoreError: If the store fails
        """
        with self.performance_monitor.measure("resolve"):
            snapshot = self._open_snapshot()
            index = build_index(self._load_summaries(snapshot))
            details = self._resolve_target(snapshot, index, ResolutionTarget(crate_name, version))

            self.logger.info(f"{crate_name}/{version}: {len(details)} advisories")
            return details

    @benchmark
    def resolve_many(self, targets: Iterable[Target]) -> List[AdvisoryDetail]:
        """Advisories affecting any of ``targets``, without duplicates.

        Args:
            targets: ``name/version`` strings or ResolutionTarget values

        Returns:
            Structurally distinct detail records across all targets

        Raises:
            ValueError: If a target string is not ``name/version``
            AdvisoryStoreError: If the store fails
        """
        with self.performance_monitor.measure("resolve_many"):
            resolved_targets = self._normalize_targets(targets)
            snapshot = self._open_snapshot()
            index = build_index(self._load_summaries(snapshot))

            details: List[AdvisoryDetail] = []
            for target in resolved_targets:
                details.extend(self._resolve_target(snapshot, index, target))

            unique = _dedupe(details)
            self.logger.info(
                f"Resolved {len(resolved_targets)} targets: "
                f"{len(unique)} unique advisories ({len(details)} before dedup)"
            )
            return unique

    async def resolve_many_async(self, targets: Iterable[Target]) -> List[AdvisoryDetail]:
        """Async version of resolve_many.

        Targets are resolved concurrently in worker threads, since detail
        lookups may block on the store; results are merged and deduplicated
        once all targets are done.
        """
        with self.performance_monitor.measure("resolve_many_async"):
            resolved_targets = self._normalize_targets(targets)
            snapshot = await asyncio.to_thread(self._open_snapshot)
            summaries = await asyncio.to_thread(self._load_summaries, snapshot)
            index = build_index(summaries)

            results = await asyncio.gather(*(
                asyncio.to_thread(self._resolve_target, snapshot, index, target)
                for target in resolved_targets
            ))

            details: List[AdvisoryDetail] = []
            for target_details in results:
                details.extend(target_details)
            return _dedupe(details)

    def _normalize_targets(self, targets: Iterable[Target]) -> List[ResolutionTarget]:
        normalized = set()
        for target in targets:
            if isinstance(target, str):
                target = parse_target(target)
            elif not isinstance(target, ResolutionTarget):
                target = ResolutionTarget(*target)
            normalized.add(target)
        return sorted(normalized)

    def _resolve_target(
        self,
        snapshot: AdvisoryStore,
        index: SummaryIndex,
        target: ResolutionTarget
    ) -> List[AdvisoryDetail]:
        details: List[AdvisoryDetail] = []

        candidates = index.get(target.name, [])
        if candidates:
            self.logger.debug(f"Found {len(candidates)} advisories for {target}")

        for summary in candidates:
            if self.evaluator.is_in_patched_range(summary.patched, target.version):
                self.logger.debug(f"PATCHED: {target} is covered by {summary.id} ({summary.patched})")
                continue

            self.logger.debug(f"VULNERABLE: {target} is not covered by {summary.id} ({summary.patched})")
            details.extend(self._fetch_details(snapshot, summary.id))

        return details

    def _open_snapshot(self) -> AdvisoryStore:
        try:
            return self.store.snapshot()
        except AdvisoryStoreError:
            raise
        except Exception as e:
            raise AdvisoryStoreError(f"Failed to open advisory snapshot: {e}") from e

    def _load_summaries(self, snapshot: AdvisoryStore) -> List[AdvisorySummary]:
        try:
            return list(snapshot.list_summaries())
        except AdvisoryStoreError:
            raise
        except Exception as e:
            raise AdvisoryStoreError(f"Failed to load advisory summaries: {e}") from e

    def _fetch_details(self, snapshot: AdvisoryStore, advisory_id: str) -> List[AdvisoryDetail]:
        try:
            return list(snapshot.get_details(advisory_id))
        except AdvisoryStoreError:
            raise
        except Exception as e:
            raise AdvisoryStoreError(f"Failed to load details for {advisory_id}: {e}") from e

    def get_performance_summary(self) -> Dict[str, object]:
        """Get performance summary from the resolver."""
        return self.performance_monitor.get_summary()

    def print_performance_summary(self) -> None:
        """Print performance summary to console."""
        self.performance_monitor.print_summary()
