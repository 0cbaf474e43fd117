"""Service for spaced repetition scheduling decisions."""
import logging
from datetime import date, datetime, timedelta
from typing import List, Optional, Sequence

from wordtrainer import monitoring
from wordtrainer.config import settings
from wordtrainer.exceptions import InvalidDateError
from wordtrainer.models.training_models import ProgressRecord, Word, parse_review_date
from wordtrainer.services.progress_service import ProgressMap

logger = logging.getLogger(__name__)


def _as_day(today: Optional[date]) -> date:
    if today is None:
        return date.today()
    if isinstance(today, datetime):
        return today.date()
    return today


class SchedulerService:
    """Decides when words are due and how answers move their SRS stage.

    Stage ``n`` (1-based) schedules the next review ``intervals[n - 1]`` days
    ahead; stage 0 means the word has not advanced yet. The length of the
    interval table is the highest stage.
    """

    def __init__(self, intervals: Optional[Sequence[int]] = None):
        """Initialize the service with an interval table in days."""
        self.intervals: List[int] = list(settings.learning.srs_intervals if intervals is None else intervals)
        if not self.intervals:
            raise ValueError("At least one SRS interval is required")

    @property
    def max_stage(self) -> int:
        return len(self.intervals)

    def clamp_stage(self, stage: int) -> int:
        """Clamp a stored stage into ``[0, max_stage]``."""
        return max(0, min(stage, self.max_stage))

    def is_due(self, record: Optional[ProgressRecord], today: Optional[date] = None) -> bool:
        """Check whether a word with this record should be reviewed today.

        Words without a record are due. Unparseable review dates are due too,
        since over-reviewing is better than hiding a word.
        """
        if record is None:
            return True
        try:
            review_date = parse_review_date(record.next_review_date)
        except InvalidDateError as e:
            logger.warning(f"{e}; treating word as due")
            monitoring.invalid_dates.inc()
            return True
        return review_date <= _as_day(today)

    def due_words(
        self, words: Sequence[Word], progress: ProgressMap, today: Optional[date] = None
    ) -> List[Word]:
        """Filter words down to those due today, keeping their order."""
        day = _as_day(today)
        return [word for word in words if self.is_due(progress.record_for(word), day)]

    def apply_know(self, record: Optional[ProgressRecord], today: Optional[date] = None) -> ProgressRecord:
        """Advance a word one stage and schedule its next review."""
        current_stage = self.clamp_stage(record.srs_stage) if record else 0
        new_stage = min(current_stage + 1, self.max_stage)
        interval_days = self.intervals[new_stage - 1]
        next_review_date = _as_day(today) + timedelta(days=interval_days)
        logger.debug(f"Stage {current_stage} -> {new_stage}, next review {next_review_date}")
        return ProgressRecord(srs_stage=new_stage, next_review_date=next_review_date)

    def apply_dont_know(
        self, record: Optional[ProgressRecord], today: Optional[date] = None
    ) -> Optional[ProgressRecord]:
        """Reset a studied word to stage 0, due today.

        A word that was never studied gets no record, so it stays
        "never studied" instead of "regressed".
        """
        if record is None:
            return None
        return ProgressRecord(srs_stage=0, next_review_date=_as_day(today))
