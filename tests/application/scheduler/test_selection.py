import random

import pytest

from retenta.application.scheduler.selection import (
    due_for_review,
    select_for_presentation,
    select_new_items,
)
from retenta.application.scheduler.shuffle import shuffle
from retenta.application.scheduler.validation import InvalidInputError
from retenta.domain.progress.models import SchedulerConfig
from tests.factories import DAY, NOW, make_record


@pytest.fixture
def progress():
    # a and d tie on overdue time; c is not due yet
    return {
        "a": make_record("a", next_review=NOW - 3 * DAY),
        "b": make_record("b", next_review=NOW - DAY),
        "c": make_record("c", next_review=NOW + DAY),
        "d": make_record("d", next_review=NOW - 3 * DAY),
        "e": make_record("e", next_review=NOW - 2 * DAY),
    }


# --- due_for_review ---


def test_due_items_sorted_most_overdue_first(progress):
    due = due_for_review(progress, NOW)

    assert [d.item for d in due] == ["a", "d", "e", "b"]
    assert [d.overdue for d in due] == [3 * DAY, 3 * DAY, 2 * DAY, DAY]


def test_due_never_includes_future_reviews(progress):
    for now in (NOW - 4 * DAY, NOW - DAY, NOW, NOW + 2 * DAY):
        for d in due_for_review(progress, now, limit=100):
            assert d.record.next_review <= now


def test_due_includes_items_due_exactly_now():
    due = due_for_review({"x": make_record("x", next_review=NOW)}, NOW)
    assert [(d.item, d.overdue) for d in due] == [("x", 0)]


def test_due_respects_limit(progress):
    assert [d.item for d in due_for_review(progress, NOW, limit=2)] == ["a", "d"]
    assert due_for_review(progress, NOW, limit=0) == []


def test_due_default_limit_comes_from_config():
    progress = {f"w{i}": make_record(f"w{i}", next_review=NOW - i) for i in range(15)}

    assert len(due_for_review(progress, NOW)) == 10
    assert len(due_for_review(progress, NOW, config=SchedulerConfig(max_review_items=4))) == 4


def test_due_rejects_negative_limit(progress):
    with pytest.raises(InvalidInputError):
        due_for_review(progress, NOW, limit=-1)


# --- select_new_items ---


def test_new_items_skip_tracked_words(progress, rng):
    chosen = select_new_items(progress, ["a", "x", "c", "y", "z"], limit=10, rng=rng)

    assert sorted(chosen) == ["x", "y", "z"]


def test_new_items_respect_limit(rng):
    chosen = select_new_items({}, ["p", "q", "r", "s"], limit=2, rng=rng)

    assert len(chosen) == 2
    assert set(chosen) <= {"p", "q", "r", "s"}


def test_new_items_collapse_duplicates(rng):
    chosen = select_new_items({}, ["p", "p", "q", "p"], limit=5, rng=rng)
    assert sorted(chosen) == ["p", "q"]


def test_new_items_same_seed_same_order():
    pool = [f"w{i}" for i in range(20)]
    first = select_new_items({}, pool, limit=5, rng=random.Random(7))
    second = select_new_items({}, pool, limit=5, rng=random.Random(7))
    assert first == second


def test_every_permutation_is_reachable():
    seen = {
        tuple(select_new_items({}, ["x", "y", "z"], limit=3, rng=random.Random(seed)))
        for seed in range(300)
    }
    assert len(seen) == 6


def test_shuffle_leaves_input_untouched(rng):
    items = [1, 2, 3, 4, 5]
    shuffled = shuffle(items, rng)

    assert items == [1, 2, 3, 4, 5]
    assert sorted(shuffled) == items


def test_shuffle_handles_tiny_inputs(rng):
    assert shuffle([], rng) == []
    assert shuffle(["only"], rng) == ["only"]


# --- select_for_presentation ---


def test_presentation_puts_visible_reviews_first(progress, rng):
    visible = ["b", "c", "d", "e", "n1", "n2", "n3", "n4"]

    chosen = select_for_presentation(progress, visible, 6, now=NOW, rng=rng)

    assert chosen[:3] == ["d", "e", "b"]
    assert len(chosen) == 6
    assert set(chosen[3:]) <= {"n1", "n2", "n3", "n4"}
    assert len(set(chosen)) == len(chosen)
    assert "c" not in chosen  # tracked but not due


def test_presentation_caps_review_slots(rng):
    progress = {w: make_record(w, next_review=NOW - i * DAY) for i, w in enumerate("pqrst")}

    chosen = select_for_presentation(progress, list("pqrst") + ["new"], 6, now=NOW, rng=rng)

    assert chosen == ["t", "s", "r", "new"]


def test_presentation_budget_smaller_than_review_slots(progress, rng):
    chosen = select_for_presentation(progress, ["a", "d", "e", "n1"], 2, now=NOW, rng=rng)
    assert chosen == ["a", "d"]


def test_presentation_zero_budget(progress, rng):
    assert select_for_presentation(progress, ["a", "n1"], 0, now=NOW, rng=rng) == []


def test_presentation_without_due_items_is_all_new(rng):
    chosen = select_for_presentation({}, ["n1", "n2", "n3"], 6, now=NOW, rng=rng)
    assert sorted(chosen) == ["n1", "n2", "n3"]


def test_presentation_ignores_due_items_not_on_page(progress, rng):
    chosen = select_for_presentation(progress, ["n1"], 6, now=NOW, rng=rng)
    assert chosen == ["n1"]


def test_presentation_default_budget(rng):
    visible = [f"n{i}" for i in range(10)]
    assert len(select_for_presentation({}, visible, now=NOW, rng=rng)) == 6
