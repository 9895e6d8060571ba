"""Advisory store interface."""

from abc import ABC, abstractmethod
from typing import List

from ..core.models import AdvisoryDetail, AdvisorySummary


class AdvisoryStoreError(Exception):
    """Raised when advisory data cannot be read from its backend."""


class AdvisoryStore(ABC):
    """Source of advisory summaries and details."""

    @abstractmethod
    def list_summaries(self) -> List[AdvisorySummary]:
        """Return every advisory summary in the store, unfiltered."""

    @abstractmethod
    def get_details(self, advisory_id: str) -> List[AdvisoryDetail]:
        """Return the stored detail rows for ``advisory_id``, in storage order."""

    def snapshot(self) -> "AdvisoryStore":
        """Return a view whose summaries and details stay consistent for one resolution call.

        Stores whose contents never change hand out themselves.
        """
        return self
