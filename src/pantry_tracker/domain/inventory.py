"""Domain models for places, foods and recipes."""

import math
from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from uuid import UUID


@dataclass(frozen=True)
class Place:
    """A named storage location owned by one user."""

    id: int
    name: str
    user_id: UUID


@dataclass(frozen=True)
class PlaceRef:
    """Place id and name joined onto a food row."""

    id: int
    name: str


@dataclass(frozen=True)
class Food:
    """A food item stored in a place."""

    id: int
    name: str
    quantity: int
    expiration_date: date | None
    place_id: int
    order: int = 0
    place: PlaceRef | None = None


@dataclass(frozen=True)
class RecipeIngredient:
    """A food used by a recipe."""

    food_id: int
    quantity: int


@dataclass(frozen=True)
class Recipe:
    """A user's recipe with its ingredients."""

    id: int
    user_id: UUID
    name: str | None = None
    ingredients: list[RecipeIngredient] = field(default_factory=list)


@dataclass(frozen=True)
class PlaceGroup:
    """A place and the foods stored in it, in display order."""

    id: int
    name: str
    foods: list[Food]


class ErrorKind(Enum):
    """Category of an inventory error."""

    FETCH = "fetch"
    MUTATION = "mutation"
    # Local and remote state disagree until the next reload or retry.
    CONSISTENCY = "consistency"


@dataclass(frozen=True)
class InventoryError:
    """User-facing error stored in the view-model error slot."""

    kind: ErrorKind
    operation: str
    message: str


def coerce_quantity(value: object) -> int:
    """Return a positive integer quantity, falling back to 1."""
    if isinstance(value, bool):
        return 1
    if isinstance(value, int):
        return value if value >= 1 else 1
    if isinstance(value, float):
        number = value
    elif isinstance(value, str):
        try:
            number = float(value.strip())
        except ValueError:
            return 1
    else:
        return 1
    # nan and inf have no integer value.
    if not math.isfinite(number) or number < 1:
        return 1
    return int(number)


def parse_expiration_date(value: date | str | None) -> date | None:
    """Parse an optional ISO calendar date; blank input means no date."""
    if value is None:
        return None
    if isinstance(value, date):
        return value
    cleaned = value.strip()
    if not cleaned:
        return None
    return datetime.fromisoformat(cleaned).date()


def move_item(foods: list[Food], old_index: int, new_index: int) -> list[Food]:
    """Return a copy with the item at old_index reinserted at new_index."""
    moved = list(foods)
    moved.insert(new_index, moved.pop(old_index))
    return moved


def group_foods_by_place(places: list[Place], foods: list[Food]) -> list[PlaceGroup]:
    """Group foods under their place; foods of unknown places are dropped."""
    grouped: dict[int, list[Food]] = {place.id: [] for place in places}
    for food in foods:
        bucket = grouped.get(food.place_id)
        if bucket is not None:
            bucket.append(food)
    return [
        PlaceGroup(id=place.id, name=place.name, foods=grouped[place.id])
        for place in places
    ]
