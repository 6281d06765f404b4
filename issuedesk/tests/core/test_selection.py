"""Unit tests for copy selection strategies."""

import pytest

from issuedesk.core.models import AccessionRecord, Item
from issuedesk.core.selection import (
    FirstMatchStrategy,
    RandomSelectionStrategy,
    build_strategy,
)


@pytest.fixture
def candidates() -> list[AccessionRecord]:
    item = Item(item_id=1, title="Item To Issue")
    return [AccessionRecord(accession_record_id=i, item=item) for i in range(10, 16)]


def test_first_match_picks_first(candidates: list[AccessionRecord]) -> None:
    assert FirstMatchStrategy().choose(candidates) is candidates[0]


def test_random_picks_a_candidate(candidates: list[AccessionRecord]) -> None:
    strategy = RandomSelectionStrategy()
    for _ in range(20):
        assert strategy.choose(candidates) in candidates


def test_seeded_random_is_reproducible(candidates: list[AccessionRecord]) -> None:
    first = RandomSelectionStrategy(seed=42)
    second = RandomSelectionStrategy(seed=42)

    picks_a = [first.choose(candidates).accession_record_id for _ in range(10)]
    picks_b = [second.choose(candidates).accession_record_id for _ in range(10)]

    assert picks_a == picks_b


@pytest.mark.parametrize("strategy", [FirstMatchStrategy(), RandomSelectionStrategy(seed=1)])
def test_empty_candidates_rejected(strategy) -> None:
    with pytest.raises(ValueError, match="empty"):
        strategy.choose([])


def test_build_strategy() -> None:
    assert isinstance(build_strategy("first"), FirstMatchStrategy)
    random_strategy = build_strategy("random", seed=7)
    assert isinstance(random_strategy, RandomSelectionStrategy)
    assert random_strategy.seed == 7
    with pytest.raises(ValueError, match="Unknown selection strategy"):
        build_strategy("lottery")
