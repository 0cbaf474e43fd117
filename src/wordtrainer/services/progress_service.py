"""Progress maps, mistake lists and their serialized forms."""
import logging
from collections.abc import Mapping, Sequence
from datetime import date
from typing import Any, Dict, Iterable, Iterator, List, Optional, Tuple

from wordtrainer.exceptions import InvalidDateError, MalformedWordError
from wordtrainer.models.training_models import (
    Dictionary,
    ProgressRecord,
    Word,
    parse_review_date,
)

logger = logging.getLogger(__name__)

PROGRESS_KIND = "srs"
MISTAKES_KIND = "unknown"


def storage_key(kind: str, dictionary_name: str, origin_group_id: int) -> str:
    """Composite key of a persisted progress document."""
    return f"{kind}_{dictionary_name}_{origin_group_id}"


class ProgressMap(Mapping):
    """Immutable mapping of word id to progress record.

    Updates return a new map; the original is left untouched.
    """

    def __init__(self, records: Optional[Iterable[Tuple[str, ProgressRecord]]] = None):
        self._records: Dict[str, ProgressRecord] = dict(records or ())

    def __getitem__(self, key: str) -> ProgressRecord:
        return self._records[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._records)

    def __len__(self) -> int:
        return len(self._records)

    def __repr__(self) -> str:
        return f"ProgressMap({self._records!r})"

    def has(self, word: Word) -> bool:
        return word.word_id in self._records

    def record_for(self, word: Word) -> Optional[ProgressRecord]:
        return self._records.get(word.word_id)

    def with_record(self, key: str, record: ProgressRecord) -> "ProgressMap":
        """Return a copy with ``key`` set to ``record``."""
        records = dict(self._records)
        records[key] = record
        return ProgressMap(records.items())

    def to_pairs(self) -> List[List[Any]]:
        """Serialize as ``[[word_id, {"srsStage", "nextReviewDate"}], ...]``."""
        return [[key, record.to_dict()] for key, record in self._records.items()]

    @classmethod
    def from_pairs(cls, pairs: Optional[Iterable[Any]]) -> "ProgressMap":
        """Create from the serialized pair list."""
        return cls((str(key), ProgressRecord.from_dict(value)) for key, value in (pairs or ()))


class MistakeList(Sequence):
    """Immutable ordered list of words answered "don't know", unique by word id."""

    def __init__(self, words: Optional[Iterable[Word]] = None):
        unique: Dict[str, Word] = {}
        for word in words or ():
            unique.setdefault(word.word_id, word)
        self._words: Tuple[Word, ...] = tuple(unique.values())

    def __getitem__(self, index):
        return self._words[index]

    def __len__(self) -> int:
        return len(self._words)

    def __contains__(self, word: object) -> bool:
        if isinstance(word, Word):
            return any(w.word_id == word.word_id for w in self._words)
        return False

    def __eq__(self, other: object) -> bool:
        if isinstance(other, MistakeList):
            return self._words == other._words
        return NotImplemented

    def __repr__(self) -> str:
        return f"MistakeList({list(self._words)!r})"

    def add(self, word: Word) -> "MistakeList":
        """Return a copy with ``word`` appended unless already present."""
        if word in self:
            return self
        return MistakeList(self._words + (word,))

    def remove(self, word: Word) -> "MistakeList":
        """Return a copy without ``word``."""
        return MistakeList(w for w in self._words if w.word_id != word.word_id)

    def to_list(self) -> List[Dict[str, str]]:
        return [word.to_dict() for word in self._words]

    @classmethod
    def from_list(cls, data: Optional[Iterable[Dict[str, Any]]]) -> "MistakeList":
        """Create from the serialized word list, dropping malformed entries."""
        words = []
        for item in data or ():
            try:
                words.append(Word.from_dict(item))
            except (MalformedWordError, KeyError, TypeError):
                logger.warning(f"Dropping malformed mistake entry: {item!r}")
        return cls(words)


def _review_sort_key(record: ProgressRecord) -> Tuple[int, date]:
    try:
        review_date = parse_review_date(record.next_review_date)
    except InvalidDateError:
        review_date = date.min
    return record.srs_stage, review_date


def merge_progress(local: ProgressMap, remote: ProgressMap) -> ProgressMap:
    """Merge two copies of one progress map, keeping the most progress.

    Per word id the record with the higher stage wins; ties go to the later
    review date. Unparseable dates lose every tie.
    """
    merged = dict(local)
    for key, remote_record in remote.items():
        local_record = merged.get(key)
        if local_record is None or _review_sort_key(remote_record) > _review_sort_key(local_record):
            merged[key] = remote_record
    logger.debug(f"Merged progress maps: {len(local)} local + {len(remote)} remote -> {len(merged)}")
    return ProgressMap(merged.items())


def merge_mistakes(local: MistakeList, remote: MistakeList) -> MistakeList:
    """Union of two mistake lists, local order first."""
    return MistakeList(list(local) + list(remote))


def learned_words(
    dictionary: Dictionary, progress_by_group: Mapping
) -> List[Tuple[Word, ProgressRecord]]:
    """List words of a dictionary that advanced past stage 0, sorted by front.

    ``progress_by_group`` maps origin group id to that group's ProgressMap.
    """
    words_by_id: Dict[str, Word] = {}
    for word in dictionary.all_words():
        words_by_id[word.word_id] = word

    learned: Dict[str, Tuple[Word, ProgressRecord]] = {}
    for origin_group_id in dictionary.origin_group_ids():
        progress = progress_by_group.get(origin_group_id) or ProgressMap()
        for key, record in progress.items():
            word = words_by_id.get(key)
            if word is not None and record.srs_stage > 0:
                learned[key] = (word, record)

    return sorted(learned.values(), key=lambda item: item[0].front.casefold())
