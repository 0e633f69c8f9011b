"""
Preview and confirmation flow for executing a sorting plan.
"""

from enum import Enum
from typing import Callable, List, Optional, Sequence

from .constants import get_logger
from .core import FileRecord
from .errors import WorkflowError
from .file_operations import FileOperations, MoveResult
from .stats import StatsManager


class Stage(Enum):
    PREVIEW = "preview"
    CONFIRM_TRUSTED = "confirm_trusted"
    CONFIRM_FALLBACK = "confirm_fallback"
    DONE = "done"


# Receives the stage being confirmed and the records it would move
ConfirmCallback = Callable[[Stage, List[FileRecord]], bool]


class SortSession:
    """Drives one plan through preview, trusted moves and fallback moves.

    Each step must be called in order; the trusted pass only moves
    DateTaken/MediaCreated records and the fallback pass only DateModified
    records. Records without a date are never moved.
    """

    def __init__(self, records: Sequence[FileRecord], file_ops: FileOperations,
                 stats_manager: Optional[StatsManager] = None):
        self.records = list(records)
        self.file_ops = file_ops
        self.stats_manager = stats_manager or StatsManager()
        self.stage = Stage.PREVIEW
        self.results: List[MoveResult] = []
        self.logger = get_logger()

    @property
    def trusted_records(self) -> List[FileRecord]:
        return [r for r in self.records if r.provenance.is_trusted]

    @property
    def fallback_records(self) -> List[FileRecord]:
        return [r for r in self.records if r.provenance.is_fallback]

    def _expect(self, stage: Stage) -> None:
        if self.stage is not stage:
            raise WorkflowError(f"Cannot run {stage.value} step while session is at {self.stage.value}")

    def preview(self) -> List[FileRecord]:
        """Return the full plan for display and advance to the trusted pass."""
        self._expect(Stage.PREVIEW)
        self.stats_manager.record_plan(self.records)
        self.stage = Stage.CONFIRM_TRUSTED
        return list(self.records)

    def _run_pass(self, records: List[FileRecord], approved: bool, label: str) -> List[MoveResult]:
        if not approved:
            self.logger.info(f"Skipped moving {len(records)} {label} files")
            return []

        self.logger.info(f"Moving {len(records)} {label} files")
        results = self.file_ops.move_records(records)
        self.stats_manager.record_moves(results)
        self.results.extend(results)
        return results

    def confirm_trusted(self, approved: bool) -> List[MoveResult]:
        """Move DateTaken and MediaCreated records if approved."""
        self._expect(Stage.CONFIRM_TRUSTED)
        results = self._run_pass(self.trusted_records, approved, "trusted-date")
        self.stage = Stage.CONFIRM_FALLBACK
        return results

    def confirm_fallback(self, approved: bool) -> List[MoveResult]:
        """Move DateModified records if approved."""
        self._expect(Stage.CONFIRM_FALLBACK)
        results = self._run_pass(self.fallback_records, approved, "modified-date")
        self.stage = Stage.DONE
        return results

    def run(self, confirm: ConfirmCallback) -> List[MoveResult]:
        """Run all remaining steps, asking ``confirm`` before each non-empty pass."""
        if self.stage is Stage.PREVIEW:
            self.preview()
        if self.stage is Stage.CONFIRM_TRUSTED:
            trusted = self.trusted_records
            self.confirm_trusted(bool(trusted) and confirm(Stage.CONFIRM_TRUSTED, trusted))
        if self.stage is Stage.CONFIRM_FALLBACK:
            fallback = self.fallback_records
            self.confirm_fallback(bool(fallback) and confirm(Stage.CONFIRM_FALLBACK, fallback))
        return list(self.results)
