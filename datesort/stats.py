"""
Statistics tracking for classification and move passes.
"""

from typing import Dict, Iterable

from .core import FileRecord
from .file_operations import MoveResult
from .timestamps import Provenance


class StatsManager:
    """Encapsulates per-run counters for provenance tiers and moves."""

    def __init__(self):
        self._provenance = {provenance: 0 for provenance in Provenance}
        self._moves = {
            'moved': 0,
            'failed': 0,
            'dry_run': 0,
        }

    def record_plan(self, records: Iterable[FileRecord]) -> None:
        """Count classified records by provenance."""
        for record in records:
            self._provenance[record.provenance] += 1

    def record_moves(self, results: Iterable[MoveResult]) -> None:
        """Count the outcome of a move pass."""
        for result in results:
            if result.performed:
                self._moves['moved'] += 1
            elif result.dry_run:
                self._moves['dry_run'] += 1
            elif result.failed:
                self._moves['failed'] += 1

    def get_provenance_counts(self) -> Dict[Provenance, int]:
        """Get a copy of the per-provenance counts."""
        return self._provenance.copy()

    def get_count(self, provenance: Provenance) -> int:
        return self._provenance[provenance]

    def get_total_files(self) -> int:
        return sum(self._provenance.values())

    def get_trusted(self) -> int:
        return sum(count for provenance, count in self._provenance.items() if provenance.is_trusted)

    def get_unsortable(self) -> int:
        return self._provenance[Provenance.NONE_FOUND] + self._provenance[Provenance.ERROR]

    def get_moved(self) -> int:
        return self._moves['moved']

    def get_failed(self) -> int:
        return self._moves['failed']

    def get_dry_run(self) -> int:
        return self._moves['dry_run']

    def has_errors(self) -> bool:
        """Check whether any file errored during classification or moving."""
        return self._provenance[Provenance.ERROR] > 0 or self._moves['failed'] > 0
