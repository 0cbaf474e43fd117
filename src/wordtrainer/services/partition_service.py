"""Service for splitting imported word lists into study sets."""
import logging
from typing import Any, Iterable, List, Optional, Sequence, Tuple

from wordtrainer.config import settings
from wordtrainer.exceptions import MalformedWordError
from wordtrainer.models.training_models import Dictionary, Word, WordSet

logger = logging.getLogger(__name__)


class PartitionService:
    """Service for turning origin groups of words into bounded-size sets."""

    def __init__(self, max_set_size: Optional[int] = None, default_set_name: Optional[str] = None):
        """Initialize the service with the set size cap."""
        self.max_set_size = settings.learning.max_set_size if max_set_size is None else max_set_size
        self.default_set_name = settings.learning.default_set_name if default_set_name is None else default_set_name
        if self.max_set_size < 1:
            raise ValueError("max_set_size must be positive")

    def partition(
        self,
        words: Sequence[Word],
        base_name: str,
        origin_group_id: int,
        lang1: str = "",
        lang2: str = "",
    ) -> List[WordSet]:
        """Split one origin group into sets of at most ``max_set_size`` words.

        Oversized groups become consecutive chunks named
        ``"{base_name} ({first}-{last})"`` with 1-based inclusive indices.
        """
        if not words:
            return []

        if len(words) <= self.max_set_size:
            return [WordSet(base_name, tuple(words), origin_group_id, lang1, lang2)]

        sets = []
        for start in range(0, len(words), self.max_set_size):
            chunk = tuple(words[start:start + self.max_set_size])
            name = f"{base_name} ({start + 1}-{start + len(chunk)})"
            sets.append(WordSet(name, chunk, origin_group_id, lang1, lang2))
        logger.debug(f"Split '{base_name}' ({len(words)} words) into {len(sets)} sets")
        return sets

    def make_words(self, rows: Iterable[Tuple[Any, Any]]) -> List[Word]:
        """Build words from raw (front, back) rows, dropping malformed ones."""
        words = []
        for front, back in rows:
            try:
                words.append(Word.create(front, back))
            except MalformedWordError:
                logger.debug(f"Dropping malformed row: {front!r} / {back!r}")
        return words

    def build_dictionary(
        self,
        name: str,
        groups: Iterable[Tuple[Optional[str], Sequence[Word]]],
        lang1: str = "",
        lang2: str = "",
    ) -> Dictionary:
        """Assemble a dictionary from origin groups in document order.

        Empty groups are skipped and do not consume an origin group id.
        Unnamed groups are called ``"Set {n}"`` after their 1-based id.
        """
        sets: List[WordSet] = []
        origin_group_id = 0
        for group_name, words in groups:
            if not words:
                logger.debug(f"Skipping empty group {group_name!r} in '{name}'")
                continue
            base_name = group_name or f"{self.default_set_name} {origin_group_id + 1}"
            sets.extend(self.partition(words, base_name, origin_group_id, lang1, lang2))
            origin_group_id += 1

        if not sets:
            raise ValueError(f"No valid word sets found in '{name}'")

        logger.info(f"Built dictionary '{name}' with {len(sets)} sets from {origin_group_id} groups")
        return Dictionary(name=name, sets=tuple(sets))
