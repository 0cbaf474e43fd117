"""Tests for configuration settings."""
import pytest

from wordtrainer.config import (
    SRS_INTERVALS_DAYS,
    DatabaseSettings,
    LearningSettings,
    Settings,
    get_srs_intervals,
    settings,
)


def test_settings_defaults():
    """Test default settings values."""
    assert SRS_INTERVALS_DAYS == [1, 3, 7, 14, 30, 60, 90, 180, 365]
    assert settings.learning.srs_intervals == SRS_INTERVALS_DAYS
    assert settings.learning.max_set_size == 30
    assert settings.learning.max_stage == 9
    assert settings.database.url == "sqlite://"


def test_srs_intervals_from_env(monkeypatch):
    """Test that intervals can be overridden by an environment variable."""
    monkeypatch.setenv("SRS_INTERVALS", "1, 2,4,8")
    assert get_srs_intervals() == [1, 2, 4, 8]
    assert LearningSettings().max_stage == 4


def test_srs_intervals_default_when_unset(monkeypatch):
    monkeypatch.delenv("SRS_INTERVALS", raising=False)
    intervals = get_srs_intervals()
    assert intervals == SRS_INTERVALS_DAYS
    assert intervals is not SRS_INTERVALS_DAYS


def test_validate_accepts_defaults():
    Settings().validate()


@pytest.mark.parametrize(
    "learning, message",
    [
        (LearningSettings(srs_intervals=[]), "at least one"),
        (LearningSettings(srs_intervals=[1, 0, 3]), "positive"),
        (LearningSettings(srs_intervals=[7, 3, 1]), "non-decreasing"),
        (LearningSettings(max_set_size=0), "MAX_SET_SIZE"),
    ],
)
def test_validate_rejects_bad_learning_settings(learning, message):
    with pytest.raises(ValueError, match=message):
        Settings(learning=learning).validate()


def test_validate_requires_database_url():
    with pytest.raises(ValueError, match="DATABASE_URL"):
        Settings(database=DatabaseSettings(url="")).validate()


if __name__ == "__main__":
    pytest.main([__file__])
