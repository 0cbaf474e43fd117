"""Models for vocabulary and training-related data structures."""
from dataclasses import dataclass, field, replace
from datetime import date, datetime
from enum import Enum
from typing import Any, Dict, Iterator, Optional, Tuple, Union
import logging

from wordtrainer.config import settings
from wordtrainer.exceptions import InvalidDateError, MalformedWordError


logger = logging.getLogger(__name__)

ReviewDate = Union[date, str]


class Outcome(Enum):
    """Possible answers to a flashcard."""
    KNOW = "know"
    DONT_KNOW = "dont_know"


class TranslationMode(Enum):
    """Which side of a card is shown as the prompt."""
    STANDARD = "standard"  # front -> back
    REVERSE = "reverse"  # back -> front


def parse_review_date(value: Any) -> date:
    """Parse a stored review date, truncating any time of day.

    Accepts ``date``/``datetime`` objects and ISO 8601 strings, including
    the ``Z`` suffix written by JavaScript's ``toISOString``.
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str) and value.strip():
        text = value.strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            return datetime.fromisoformat(text).date()
        except ValueError:
            pass
        try:
            return date.fromisoformat(text)
        except ValueError:
            pass
    raise InvalidDateError(value)


@dataclass(frozen=True)
class Word:
    """A flashcard: front (source language) and back (target language)."""
    front: str
    back: str

    def __post_init__(self):
        for side in (self.front, self.back):
            if not isinstance(side, str) or not side or side != side.strip():
                raise MalformedWordError(
                    f"Word sides must be non-empty trimmed strings: {self.front!r} / {self.back!r}"
                )

    @classmethod
    def create(cls, front: Any, back: Any) -> "Word":
        """Create a word from raw cell values, trimming both sides."""
        front_text = str(front).strip() if front is not None else ""
        back_text = str(back).strip() if back is not None else ""
        return cls(front=front_text, back=back_text)

    @property
    def word_id(self) -> str:
        """Identity used for progress tracking."""
        return self.back

    def prompt(self, mode: TranslationMode = TranslationMode.STANDARD) -> str:
        return self.front if mode is TranslationMode.STANDARD else self.back

    def answer(self, mode: TranslationMode = TranslationMode.STANDARD) -> str:
        return self.back if mode is TranslationMode.STANDARD else self.front

    def to_dict(self) -> Dict[str, str]:
        """Convert to dictionary for JSON serialization."""
        return {"front": self.front, "back": self.back}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Word":
        """Create from dictionary."""
        return cls.create(data["front"], data["back"])


def word_id(word: Word) -> str:
    """Get the progress identity of a word."""
    return word.word_id


@dataclass(frozen=True)
class WordSet:
    """A named, ordered group of words studied together."""
    name: str
    words: Tuple[Word, ...]
    origin_group_id: int
    lang1: str = ""
    lang2: str = ""

    def __len__(self) -> int:
        return len(self.words)

    def __iter__(self) -> Iterator[Word]:
        return iter(self.words)


@dataclass(frozen=True)
class Dictionary:
    """An imported dictionary split into study sets."""
    name: str
    sets: Tuple[WordSet, ...] = ()

    def origin_group_ids(self) -> Tuple[int, ...]:
        """Distinct origin group ids in set order."""
        seen: Dict[int, None] = {}
        for word_set in self.sets:
            seen.setdefault(word_set.origin_group_id, None)
        return tuple(seen)

    def sets_in_group(self, origin_group_id: int) -> Tuple[WordSet, ...]:
        return tuple(s for s in self.sets if s.origin_group_id == origin_group_id)

    def all_words(self) -> Tuple[Word, ...]:
        return tuple(word for word_set in self.sets for word in word_set.words)


@dataclass(frozen=True)
class ProgressRecord:
    """Spaced repetition state of a single word.

    ``next_review_date`` holds the raw stored value when it could not be
    parsed; the scheduler treats such records as due.
    """
    srs_stage: int = 0
    next_review_date: ReviewDate = field(default_factory=date.today)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        review_date = self.next_review_date
        if isinstance(review_date, date):
            review_date = review_date.isoformat()
        return {"srsStage": self.srs_stage, "nextReviewDate": review_date}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ProgressRecord":
        """Create from dictionary.

        A stage that is not an integer loads as 0 and any other stage is
        clamped into ``[0, max_stage]`` of the configured interval table.
        """
        raw_date = data.get("nextReviewDate")
        try:
            review_date: ReviewDate = parse_review_date(raw_date)
        except InvalidDateError:
            logger.debug(f"Keeping unparseable review date {raw_date!r}")
            review_date = raw_date if isinstance(raw_date, str) else str(raw_date)

        raw_stage = data.get("srsStage", 0)
        try:
            stage = int(raw_stage)
        except (TypeError, ValueError, OverflowError):
            logger.warning(f"Invalid SRS stage {raw_stage!r}; starting from stage 0")
            stage = 0
        max_stage = settings.learning.max_stage
        if not 0 <= stage <= max_stage:
            logger.warning(f"SRS stage {stage} out of range; clamping to [0, {max_stage}]")
            stage = max(0, min(stage, max_stage))
        return cls(srs_stage=stage, next_review_date=review_date)


@dataclass(frozen=True)
class SessionState:
    """Position of a study session within its working words."""
    working_words: Tuple[Word, ...] = ()
    cursor: int = 0
    answer_history: Tuple[int, ...] = ()
    is_retraining: bool = False
    is_finished: bool = True

    @property
    def current_word(self) -> Optional[Word]:
        if self.cursor < len(self.working_words):
            return self.working_words[self.cursor]
        return None

    @property
    def total(self) -> int:
        return len(self.working_words)

    @property
    def can_go_back(self) -> bool:
        return bool(self.answer_history)

    def evolve(self, **changes: Any) -> "SessionState":
        """Copy with changes, recomputing ``is_finished`` from the cursor."""
        state = replace(self, **changes)
        return replace(state, is_finished=state.cursor >= len(state.working_words))
