"""Test configuration."""
import os
import random
from pathlib import Path
from typing import Generator

import pytest
from dotenv import load_dotenv

# Set test environment before any imports
os.environ["ENV"] = "test"

# Load test environment variables
test_env_path = Path(__file__).resolve().parents[3] / ".env.test"
load_dotenv(test_env_path)
os.environ.setdefault("DATABASE_URL", "sqlite://")

# Import after environment setup
from sqlalchemy.orm import Session

from wordtrainer.models.base import SessionLocal, drop_db, init_db
from wordtrainer.models.training_models import Word, WordSet


@pytest.fixture
def db() -> Generator[Session, None, None]:
    """Create a fresh database session for each test."""
    drop_db()
    init_db()
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def rng() -> random.Random:
    """Seeded random source for reproducible shuffles."""
    return random.Random(1234)


def make_words(count: int, prefix: str = "word") -> list[Word]:
    """Create distinct words ``word1 / target-word1`` ... in order."""
    return [Word(f"{prefix}{i}", f"target-{prefix}{i}") for i in range(1, count + 1)]


@pytest.fixture
def words_factory():
    """Factory for lists of distinct words."""
    return make_words


@pytest.fixture
def word_set() -> WordSet:
    """A small three-word set."""
    return WordSet(
        name="Animals",
        words=(Word("кіт", "cat"), Word("пес", "dog"), Word("птах", "bird")),
        origin_group_id=0,
        lang1="Ukrainian",
        lang2="English",
    )
