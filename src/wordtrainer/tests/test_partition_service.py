"""Tests for partition service."""
import pytest

from wordtrainer.models.training_models import Word
from wordtrainer.services.partition_service import PartitionService


@pytest.fixture
def partition_service() -> PartitionService:
    """Create a partition service with the default cap of 30."""
    return PartitionService(max_set_size=30)


def test_empty_group_yields_no_sets(partition_service: PartitionService) -> None:
    assert partition_service.partition([], "Set 1", 0) == []


def test_small_group_is_kept_whole(partition_service: PartitionService, words_factory) -> None:
    words = words_factory(12)
    sets = partition_service.partition(words, "Verbs", 3, "Ukrainian", "English")
    assert len(sets) == 1
    assert sets[0].name == "Verbs"
    assert list(sets[0].words) == words
    assert sets[0].origin_group_id == 3
    assert (sets[0].lang1, sets[0].lang2) == ("Ukrainian", "English")


def test_exactly_max_size_is_not_split(partition_service: PartitionService, words_factory) -> None:
    sets = partition_service.partition(words_factory(30), "Set 1", 0)
    assert [s.name for s in sets] == ["Set 1"]


def test_thirty_five_words_split_in_two(partition_service: PartitionService, words_factory) -> None:
    """Test the 35-word example: 30 + 5 with display ranges."""
    words = words_factory(35)
    sets = partition_service.partition(words, "Set 1", 0)

    assert [s.name for s in sets] == ["Set 1 (1-30)", "Set 1 (31-35)"]
    assert [len(s) for s in sets] == [30, 5]
    assert all(s.origin_group_id == 0 for s in sets)


@pytest.mark.parametrize("count", [1, 29, 30, 31, 59, 60, 61, 95])
def test_partition_size_and_order_invariants(
    partition_service: PartitionService, words_factory, count: int
) -> None:
    words = words_factory(count)
    sets = partition_service.partition(words, "Group", 7)

    assert all(1 <= len(s) <= 30 for s in sets)
    assert [w for s in sets for w in s.words] == words
    assert {s.origin_group_id for s in sets} == {7}


def test_partition_is_deterministic(partition_service: PartitionService, words_factory) -> None:
    words = words_factory(70)
    assert partition_service.partition(words, "A", 0) == partition_service.partition(words, "A", 0)


def test_custom_max_size(words_factory) -> None:
    sets = PartitionService(max_set_size=4).partition(words_factory(10), "S", 0)
    assert [s.name for s in sets] == ["S (1-4)", "S (5-8)", "S (9-10)"]


@pytest.mark.parametrize("max_set_size", [-1, 0])
def test_invalid_max_size(max_set_size: int) -> None:
    with pytest.raises(ValueError):
        PartitionService(max_set_size=max_set_size)


def test_make_words_drops_malformed_rows(partition_service: PartitionService) -> None:
    rows = [(" кіт ", "cat"), ("", "dog"), ("птах", None), ("риба", " fish "), (None, None)]
    words = partition_service.make_words(rows)
    assert words == [Word("кіт", "cat"), Word("риба", "fish")]


def test_build_dictionary_numbers_groups_densely(
    partition_service: PartitionService, words_factory
) -> None:
    """Empty groups are skipped without consuming an origin group id."""
    groups = [
        (None, words_factory(3, "a")),
        ("Empty", []),
        (None, words_factory(35, "b")),
        ("Food", words_factory(2, "c")),
    ]
    dictionary = partition_service.build_dictionary("Lesson 1", groups)

    assert dictionary.name == "Lesson 1"
    assert [(s.name, s.origin_group_id) for s in dictionary.sets] == [
        ("Set 1", 0),
        ("Set 2 (1-30)", 1),
        ("Set 2 (31-35)", 1),
        ("Food", 2),
    ]
    assert dictionary.origin_group_ids() == (0, 1, 2)


def test_build_dictionary_without_words_fails(partition_service: PartitionService) -> None:
    with pytest.raises(ValueError, match="No valid word sets"):
        partition_service.build_dictionary("Empty", [(None, []), ("Named", [])])


if __name__ == "__main__":
    pytest.main([__file__])
