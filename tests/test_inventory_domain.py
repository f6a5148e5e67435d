"""Tests for inventory domain helpers."""

from datetime import date
from uuid import uuid4

import pytest

from pantry_tracker.domain.inventory import (
    Food,
    Place,
    coerce_quantity,
    group_foods_by_place,
    move_item,
    parse_expiration_date,
)


def _food(food_id: int, place_id: int) -> Food:
    return Food(
        id=food_id,
        name=f"food-{food_id}",
        quantity=1,
        expiration_date=None,
        place_id=place_id,
    )


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        (12, 12),
        ("7", 7),
        (" 4 ", 4),
        ("2.7", 2),
        (3.9, 3),
        (0, 1),
        (-5, 1),
        ("abc", 1),
        ("", 1),
        (None, 1),
        (True, 1),
        (0.5, 1),
        ("1e400", 1),
        ("inf", 1),
        ("-Infinity", 1),
        ("nan", 1),
        (float("inf"), 1),
        (float("nan"), 1),
    ],
)
def test_coerce_quantity(raw: object, expected: int) -> None:
    assert coerce_quantity(raw) == expected


def test_parse_expiration_date() -> None:
    assert parse_expiration_date(None) is None
    assert parse_expiration_date("  ") is None
    assert parse_expiration_date("2026-10-19") == date(2026, 10, 19)
    assert parse_expiration_date("2026-10-19T00:00:00") == date(2026, 10, 19)
    assert parse_expiration_date(date(2027, 1, 1)) == date(2027, 1, 1)


@pytest.mark.parametrize("raw", ["next tuesday", "2026-10-19junk", "2026-13-01"])
def test_parse_expiration_date_rejects_garbage(raw: str) -> None:
    with pytest.raises(ValueError):
        parse_expiration_date(raw)


def test_move_item_reinserts_instead_of_swapping() -> None:
    a, b, c = _food(1, 1), _food(2, 1), _food(3, 1)
    foods = [a, b, c]

    assert move_item(foods, 2, 0) == [c, a, b]
    assert move_item(foods, 0, 2) == [b, c, a]
    assert foods == [a, b, c]


def test_group_foods_by_place_keeps_empty_and_drops_orphans() -> None:
    user_id = uuid4()
    fridge = Place(id=1, name="Fridge", user_id=user_id)
    pantry = Place(id=2, name="Pantry", user_id=user_id)
    milk, orphan, rice, eggs = _food(10, 1), _food(11, 99), _food(12, 2), _food(13, 1)

    groups = group_foods_by_place([pantry, fridge], [milk, orphan, rice, eggs])

    assert [group.name for group in groups] == ["Pantry", "Fridge"]
    assert groups[0].foods == [rice]
    assert groups[1].foods == [milk, eggs]
    assert group_foods_by_place([fridge], [])[0].foods == []
