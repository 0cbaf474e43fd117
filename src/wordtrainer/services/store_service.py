"""Persistence adapters for progress maps and mistake lists."""
import json
import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional, Tuple

from sqlalchemy.orm import Session

from wordtrainer import monitoring
from wordtrainer.models.models import ProgressDocument
from wordtrainer.models.training_models import Dictionary
from wordtrainer.services.progress_service import (
    MISTAKES_KIND,
    PROGRESS_KIND,
    MistakeList,
    ProgressMap,
    learned_words,
    storage_key,
)

logger = logging.getLogger(__name__)


class ProgressStore(ABC):
    """Storage for per-origin-group progress documents.

    Documents are stored in their serialized form: a progress map as a list
    of ``[word_id, record]`` pairs and a mistake list as a list of words.
    """

    @abstractmethod
    def read(self, kind: str, dictionary_name: str, origin_group_id: int) -> Optional[Any]:
        """Read a raw document, or None if it does not exist."""

    @abstractmethod
    def write(self, kind: str, dictionary_name: str, origin_group_id: int, payload: Any) -> None:
        """Replace a raw document."""

    @abstractmethod
    def reset_dictionary(self, dictionary_name: str) -> int:
        """Delete every document of a dictionary and return how many were removed."""

    def load_progress(self, dictionary_name: str, origin_group_id: int) -> ProgressMap:
        monitoring.store_operations.labels(operation_type="load_progress").inc()
        return ProgressMap.from_pairs(self.read(PROGRESS_KIND, dictionary_name, origin_group_id))

    def save_progress(self, dictionary_name: str, origin_group_id: int, progress: ProgressMap) -> None:
        monitoring.store_operations.labels(operation_type="save_progress").inc()
        self.write(PROGRESS_KIND, dictionary_name, origin_group_id, progress.to_pairs())

    def load_mistakes(self, dictionary_name: str, origin_group_id: int) -> MistakeList:
        monitoring.store_operations.labels(operation_type="load_mistakes").inc()
        return MistakeList.from_list(self.read(MISTAKES_KIND, dictionary_name, origin_group_id))

    def save_mistakes(self, dictionary_name: str, origin_group_id: int, mistakes: MistakeList) -> None:
        monitoring.store_operations.labels(operation_type="save_mistakes").inc()
        self.write(MISTAKES_KIND, dictionary_name, origin_group_id, mistakes.to_list())

    def learned_words(self, dictionary: Dictionary) -> list:
        """Words of the dictionary past stage 0, sorted by front."""
        progress_by_group = {
            group_id: self.load_progress(dictionary.name, group_id)
            for group_id in dictionary.origin_group_ids()
        }
        return learned_words(dictionary, progress_by_group)


class InMemoryProgressStore(ProgressStore):
    """Progress store that keeps JSON documents in a dictionary."""

    def __init__(self):
        self.documents: Dict[str, Tuple[str, str, int, str]] = {}

    def read(self, kind: str, dictionary_name: str, origin_group_id: int) -> Optional[Any]:
        entry = self.documents.get(storage_key(kind, dictionary_name, origin_group_id))
        return json.loads(entry[3]) if entry else None

    def write(self, kind: str, dictionary_name: str, origin_group_id: int, payload: Any) -> None:
        key = storage_key(kind, dictionary_name, origin_group_id)
        self.documents[key] = (kind, dictionary_name, origin_group_id, json.dumps(payload))

    def reset_dictionary(self, dictionary_name: str) -> int:
        keys = [key for key, entry in self.documents.items() if entry[1] == dictionary_name]
        for key in keys:
            del self.documents[key]
        logger.info(f"Reset {len(keys)} progress documents for '{dictionary_name}'")
        return len(keys)


class SqlProgressStore(ProgressStore):
    """Progress store backed by the ``progress_documents`` table."""

    def __init__(self, db: Session):
        """Initialize the store with a database session."""
        self.db = db

    def _get_document(self, kind: str, dictionary_name: str, origin_group_id: int) -> Optional[ProgressDocument]:
        return (
            self.db.query(ProgressDocument)
            .filter(ProgressDocument.key == storage_key(kind, dictionary_name, origin_group_id))
            .first()
        )

    def read(self, kind: str, dictionary_name: str, origin_group_id: int) -> Optional[Any]:
        document = self._get_document(kind, dictionary_name, origin_group_id)
        if document is None:
            return None
        try:
            return json.loads(document.payload)
        except json.JSONDecodeError as e:
            logger.error(f"Corrupt progress document {document.key}: {e}")
            monitoring.error_count.labels(error_type="JSONDecodeError").inc()
            return None

    def write(self, kind: str, dictionary_name: str, origin_group_id: int, payload: Any) -> None:
        document = self._get_document(kind, dictionary_name, origin_group_id)
        if document is None:
            document = ProgressDocument(
                key=storage_key(kind, dictionary_name, origin_group_id),
                kind=kind,
                dictionary_name=dictionary_name,
                origin_group_id=origin_group_id,
                payload=json.dumps(payload),
            )
            self.db.add(document)
        else:
            document.payload = json.dumps(payload)
        self.db.commit()

    def reset_dictionary(self, dictionary_name: str) -> int:
        removed = (
            self.db.query(ProgressDocument)
            .filter(ProgressDocument.dictionary_name == dictionary_name)
            .delete(synchronize_session=False)
        )
        self.db.commit()
        logger.info(f"Reset {removed} progress documents for '{dictionary_name}'")
        return removed
