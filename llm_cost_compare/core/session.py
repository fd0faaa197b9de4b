"""
Comparison sessions with request sequencing.

Rapid successive inputs can start a new comparison before the previous one
has been rendered. Each request gets a monotonically increasing sequence
number and only the result for the latest issued number is applied; stale
results are discarded.
"""

import logging
import threading
from typing import Iterable, List, Optional

from .pricing import CostResult, PricingEngine, UsageInput

logger = logging.getLogger(__name__)


class ComparisonSession:
    """Tracks the latest comparison request for one presentation session."""

    def __init__(self, engine: Optional[PricingEngine] = None):
        self.engine = engine or PricingEngine()
        self._lock = threading.Lock()
        self._issued = 0
        self._applied: Optional[int] = None
        self._results: List[CostResult] = []

    @property
    def latest_sequence(self) -> int:
        """Most recently issued sequence number (0 before any request)."""
        with self._lock:
            return self._issued

    @property
    def applied_sequence(self) -> Optional[int]:
        """Sequence number whose results are currently applied, if any."""
        with self._lock:
            return self._applied

    @property
    def latest_results(self) -> List[CostResult]:
        with self._lock:
            return list(self._results)

    def begin(self) -> int:
        """Issue a new sequence number for an incoming request."""
        with self._lock:
            self._issued += 1
            return self._issued

    def is_current(self, sequence: int) -> bool:
        with self._lock:
            return sequence == self._issued

    def complete(self, sequence: int, results: List[CostResult]) -> bool:
        """Apply results if ``sequence`` is still the latest request.

        Returns:
            True if the results were applied, False if they were stale
        """
        with self._lock:
            if sequence != self._issued:
                logger.debug(
                    "Discarding stale comparison %d (latest is %d)", sequence, self._issued
                )
                return False
            self._applied = sequence
            self._results = list(results)
            return True

    def run(
        self,
        usage: UsageInput,
        selected_provider_ids: Optional[Iterable[str]] = None,
    ) -> Optional[List[CostResult]]:
        """Run a comparison and apply it unless a newer request superseded it.

        Returns:
            The ranked results, or None if they were discarded as stale

        Raises:
            ValidationError: If the usage values are invalid
        """
        sequence = self.begin()
        results = self.engine.compare_providers(usage, selected_provider_ids)
        if self.complete(sequence, results):
            return results
        return None
