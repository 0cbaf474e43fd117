"""Database models for persisted progress."""
from sqlalchemy import Column, Integer, String, Text, UniqueConstraint

from wordtrainer.models.base import Base, TimestampMixin


class ProgressDocument(Base, TimestampMixin):
    """A serialized progress map or mistake list of one origin group."""

    __tablename__ = "progress_documents"
    __table_args__ = (
        UniqueConstraint("kind", "dictionary_name", "origin_group_id", name="uq_progress_scope"),
    )

    id = Column(Integer, primary_key=True)
    key = Column(String, unique=True, nullable=False, index=True)  # e.g. "srs_Verbs_0"
    kind = Column(String, nullable=False)  # "srs" or "unknown"
    dictionary_name = Column(String, nullable=False, index=True)
    origin_group_id = Column(Integer, nullable=False)
    payload = Column(Text, nullable=False)  # JSON document
