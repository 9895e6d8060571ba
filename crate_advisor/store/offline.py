"""Offline advisory store reading a local JSON snapshot."""

import json
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Tuple

from ..core.models import AdvisoryDetail, AdvisorySummary
from ..utils.logging import get_logger
from ..utils.performance import PerformanceMonitor, benchmark
from .base import AdvisoryStore, AdvisoryStoreError
from .memory import InMemoryAdvisoryStore


@dataclass
class AdvisoryDatabaseConfig:
    """Configuration for a local advisory snapshot."""

    database_path: Path
    max_workers: int = 4

    def __post_init__(self) -> None:
        """Validate configuration."""
        self.database_path = Path(self.database_path)
        if not self.database_path.exists():
            raise ValueError(f"Database path does not exist: {self.database_path}")
        if self.max_workers < 1:
            raise ValueError("max_workers must be at least 1")


class OfflineAdvisoryStore(AdvisoryStore):
    """Advisory store over a JSON file or a directory of JSON files.

    Each file holds either ``{"summaries": [...], "details": [...]}`` or a
    single advisory object carrying both summary and detail fields. The store
    keeps nothing between calls: every read goes to the files, and
    :meth:`snapshot` returns an in-memory copy that one resolution call reads
    both summaries and details from.
    """

    def __init__(self, config: AdvisoryDatabaseConfig) -> None:
        """Initialize the offline store.

        Args:
            config: Database configuration
        """
        self.config = config
        self.logger = get_logger("OfflineAdvisoryStore")
        self.performance_monitor = PerformanceMonitor()

    def list_summaries(self) -> List[AdvisorySummary]:
        return self.load_snapshot().list_summaries()

    def get_details(self, advisory_id: str) -> List[AdvisoryDetail]:
        return self.load_snapshot().get_details(advisory_id)

    def snapshot(self) -> InMemoryAdvisoryStore:
        return self.load_snapshot()

    @benchmark
    def load_snapshot(self) -> InMemoryAdvisoryStore:
        """Read every snapshot file.

        Returns:
            The advisory records as they are on disk now

        Raises:
            AdvisoryStoreError: If a file cannot be read, decoded or mapped to records
        """
        with self.performance_monitor.measure("load_snapshot"):
            files = self._snapshot_files()

            with ThreadPoolExecutor(max_workers=self.config.max_workers) as executor:
                parsed = list(executor.map(self._read_file, files))

            summaries: List[AdvisorySummary] = []
            details: List[AdvisoryDetail] = []
            for file_summaries, file_details in parsed:
                summaries.extend(file_summaries)
                details.extend(file_details)

            self.logger.info(f"Loaded {len(summaries)} advisory summaries from {len(files)} files")
            return InMemoryAdvisoryStore(summaries, details)

    def _snapshot_files(self) -> List[Path]:
        path = self.config.database_path
        if path.is_file():
            return [path]
        return sorted(path.rglob("*.json"))

    def _read_file(self, path: Path) -> Tuple[List[AdvisorySummary], List[AdvisoryDetail]]:
        try:
            with open(path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except (json.JSONDecodeError, OSError) as e:
            raise AdvisoryStoreError(f"Failed to read {path}: {e}") from e

        try:
            return self._parse_records(data)
        except (ValueError, TypeError, AttributeError) as e:
            raise AdvisoryStoreError(f"Invalid advisory record in {path}: {e}") from e

    def _parse_records(self, data: Any) -> Tuple[List[AdvisorySummary], List[AdvisoryDetail]]:
        if isinstance(data, dict) and ("summaries" in data or "details" in data):
            summaries = [AdvisorySummary.from_dict(item) for item in data.get("summaries", [])]
            details = [AdvisoryDetail.from_dict(item) for item in data.get("details", [])]
            return summaries, details

        records = data if isinstance(data, list) else [data]
        summaries = []
        details = []
        for record in records:
            summary_record = dict(record)
            if "crate_name" not in summary_record and "cratename" not in summary_record:
                summary_record["crate_name"] = record.get("package", "")
            summaries.append(AdvisorySummary.from_dict(summary_record))
            details.append(AdvisoryDetail.from_dict(record))
        return summaries, details

    def get_database_stats(self) -> Dict[str, Any]:
        """Statistics over the snapshot as it is on disk now."""
        snapshot = self.load_snapshot()
        summaries = snapshot.list_summaries()
        crates = {summary.crate_name for summary in summaries}
        return {
            "total_summaries": len(summaries),
            "total_crates": len(crates),
            "unique_advisories": len({summary.id for summary in summaries}),
            "total_details": snapshot.get_statistics()["total_details"],
            "average_advisories_per_crate": len(summaries) / len(crates) if crates else 0,
        }
