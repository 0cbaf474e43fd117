"""Service for running flashcard study sessions."""
import logging
import random
from dataclasses import dataclass
from datetime import date
from typing import Callable, Iterable, List, Mapping, Optional, Sequence, Tuple

from wordtrainer import monitoring
from wordtrainer.exceptions import InvalidStateError
from wordtrainer.models.training_models import Outcome, SessionState, TranslationMode, Word, WordSet
from wordtrainer.services.progress_service import MistakeList, ProgressMap
from wordtrainer.services.scheduler_service import SchedulerService
from wordtrainer.services.store_service import ProgressStore


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AnswerResult:
    """New state produced by answering one card."""
    session: SessionState
    progress: ProgressMap
    mistakes: MistakeList


def example_for(word: Word, sentences: Optional[Mapping[str, str]]) -> Optional[str]:
    """Look up an example sentence for a word, if one was generated."""
    if not sentences:
        return None
    return sentences.get(word.word_id)


def session_progress(session: SessionState) -> Tuple[int, int]:
    """Position for a progress bar as ``(answered, total)``."""
    return min(session.cursor, session.total), session.total


def is_nothing_due(session: SessionState) -> bool:
    """True for a review session that started with no due words.

    Hosts show this differently from a completed set.
    """
    return session.is_finished and not session.is_retraining and session.total == 0


def check_answer(word: Word, text: str, mode: TranslationMode = TranslationMode.STANDARD) -> bool:
    """Check a typed answer, ignoring surrounding whitespace and case."""
    return text.strip().casefold() == word.answer(mode).casefold()


def guess_options(
    word: Word,
    word_set: Iterable[Word],
    mode: TranslationMode = TranslationMode.STANDARD,
    rng: Optional[random.Random] = None,
    count: int = 4,
) -> List[str]:
    """Build shuffled multiple-choice options for a word.

    The correct answer comes with up to ``count - 1`` distinct wrong
    answers drawn from the other words of the same set.
    """
    rng = rng or random.Random()
    correct = word.answer(mode)
    distractors: List[str] = []
    for other in word_set:
        option = other.answer(mode)
        if other.word_id == word.word_id or option == correct or option in distractors:
            continue
        distractors.append(option)

    options = [correct] + rng.sample(distractors, max(0, min(count - 1, len(distractors))))
    rng.shuffle(options)
    return options


class SessionService:
    """Service for the state transitions of a study session.

    All operations are pure: they take the current state and return new
    state, leaving persistence to the caller.
    """

    def __init__(self, scheduler: Optional[SchedulerService] = None, rng: Optional[random.Random] = None):
        """Initialize the service with a scheduler and a random source."""
        self.scheduler = scheduler or SchedulerService()
        self.rng = rng or random.Random()

    def _shuffled(self, words: Sequence[Word]) -> Tuple[Word, ...]:
        shuffled = list(words)
        self.rng.shuffle(shuffled)
        return tuple(shuffled)

    def start_session(
        self, word_set: WordSet, progress: ProgressMap, today: Optional[date] = None
    ) -> SessionState:
        """Start reviewing the due words of a set in random order."""
        due = self.scheduler.due_words(word_set.words, progress, today)
        logger.info(f"Starting session for '{word_set.name}': {len(due)}/{len(word_set)} words due")
        monitoring.sessions_started.labels(kind="review").inc()
        if not due:
            monitoring.nothing_due_sessions.inc()
        return SessionState().evolve(
            working_words=self._shuffled(due),
            cursor=0,
            answer_history=(),
            is_retraining=False,
        )

    def start_retraining(self, mistakes: Sequence[Word]) -> SessionState:
        """Start a practice round over the words answered "don't know"."""
        logger.info(f"Starting retraining with {len(mistakes)} words")
        monitoring.sessions_started.labels(kind="retraining").inc()
        return SessionState().evolve(
            working_words=self._shuffled(mistakes),
            cursor=0,
            answer_history=(),
            is_retraining=True,
        )

    def answer(
        self,
        session: SessionState,
        outcome: Outcome,
        progress: ProgressMap,
        mistakes: MistakeList,
        today: Optional[date] = None,
    ) -> AnswerResult:
        """Record an answer for the current card.

        In a review session both outcomes update the word's schedule and the
        cursor moves on; "don't know" also adds the word to the mistakes.
        In retraining "know" advances the schedule and drops the word from
        both the mistakes and the working words, so the cursor stays put;
        "don't know" leaves the schedule alone and moves on.
        """
        word = session.current_word
        if word is None:
            monitoring.error_count.labels(error_type="InvalidStateError").inc()
            raise InvalidStateError(
                f"Cannot answer: cursor {session.cursor} is past {session.total} words"
            )

        kind = "retraining" if session.is_retraining else "review"
        monitoring.answers.labels(outcome=outcome.value, kind=kind).inc()
        history = session.answer_history + (session.cursor,)
        record = progress.record_for(word)

        if outcome is Outcome.KNOW:
            progress = progress.with_record(word.word_id, self.scheduler.apply_know(record, today))
            monitoring.words_advanced.inc()
            if session.is_retraining:
                mistakes = mistakes.remove(word)
                monitoring.mistakes_cleared.inc()
                remaining = session.working_words[:session.cursor] + session.working_words[session.cursor + 1:]
                new_session = session.evolve(working_words=remaining, answer_history=history)
            else:
                new_session = session.evolve(cursor=session.cursor + 1, answer_history=history)
        else:
            if not session.is_retraining:
                reset = self.scheduler.apply_dont_know(record, today)
                if reset is not None:
                    progress = progress.with_record(word.word_id, reset)
                mistakes = mistakes.add(word)
            new_session = session.evolve(cursor=session.cursor + 1, answer_history=history)

        logger.debug(f"Answered {outcome.value} for '{word.word_id}' ({kind}), cursor {new_session.cursor}")
        return AnswerResult(session=new_session, progress=progress, mistakes=mistakes)

    def go_back(self, session: SessionState) -> SessionState:
        """Show the previously answered card again.

        The earlier answer's effect on progress and mistakes is kept.
        """
        if not session.answer_history:
            monitoring.error_count.labels(error_type="InvalidStateError").inc()
            raise InvalidStateError("Cannot go back: answer history is empty")
        previous = session.answer_history[-1]
        return session.evolve(cursor=previous, answer_history=session.answer_history[:-1])

    def shuffle_current(self, session: SessionState) -> SessionState:
        """Reshuffle the working words and restart from the first card."""
        return session.evolve(
            working_words=self._shuffled(session.working_words),
            cursor=0,
            answer_history=(),
        )


class StudySession:
    """Stateful controller for one study screen.

    Wraps SessionService for a single dictionary, loading and saving the
    active origin group's progress through the injected store after every
    answer. One instance should own a given set at a time.
    """

    def __init__(
        self,
        dictionary_name: str,
        store: ProgressStore,
        service: Optional[SessionService] = None,
        clock: Callable[[], date] = date.today,
    ):
        self.dictionary_name = dictionary_name
        self.store = store
        self.service = service or SessionService()
        self.clock = clock
        self.word_set: Optional[WordSet] = None
        self.state = SessionState()
        self.progress = ProgressMap()
        self.mistakes = MistakeList()

    def select_set(self, word_set: WordSet) -> SessionState:
        """Load the set's progress and start reviewing its due words."""
        self.word_set = word_set
        self.progress = self.store.load_progress(self.dictionary_name, word_set.origin_group_id)
        self.mistakes = self.store.load_mistakes(self.dictionary_name, word_set.origin_group_id)
        self.state = self.service.start_session(word_set, self.progress, self.clock())
        return self.state

    def _require_set(self) -> WordSet:
        if self.word_set is None:
            raise InvalidStateError("No word set selected")
        return self.word_set

    def answer(self, outcome: Outcome) -> SessionState:
        """Answer the current card and persist the resulting progress."""
        word_set = self._require_set()
        result = self.service.answer(self.state, outcome, self.progress, self.mistakes, self.clock())
        if result.progress is not self.progress:
            self.store.save_progress(self.dictionary_name, word_set.origin_group_id, result.progress)
        if result.mistakes is not self.mistakes:
            self.store.save_mistakes(self.dictionary_name, word_set.origin_group_id, result.mistakes)
        self.state, self.progress, self.mistakes = result.session, result.progress, result.mistakes
        return self.state

    def train_mistakes(self) -> SessionState:
        """Start (or repeat) a practice round over the current mistakes."""
        word_set = self._require_set()
        self.mistakes = self.store.load_mistakes(self.dictionary_name, word_set.origin_group_id)
        self.state = self.service.start_retraining(self.mistakes)
        return self.state

    def go_back(self) -> SessionState:
        self.state = self.service.go_back(self.state)
        return self.state

    def shuffle(self) -> SessionState:
        self.state = self.service.shuffle_current(self.state)
        return self.state

    @property
    def current_word(self) -> Optional[Word]:
        return self.state.current_word

    @property
    def nothing_due(self) -> bool:
        return is_nothing_due(self.state)

    def words_to_retrain(self) -> List[Word]:
        return list(self.mistakes)
