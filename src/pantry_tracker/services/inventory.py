"""Inventory view-model keeping places and foods in sync with the store."""

import logging
from collections.abc import Callable
from dataclasses import dataclass, field, replace
from datetime import date
from typing import Protocol
from uuid import UUID

from pantry_tracker.domain.inventory import (
    ErrorKind,
    Food,
    InventoryError,
    Place,
    PlaceGroup,
    PlaceRef,
    Recipe,
    coerce_quantity,
    group_foods_by_place,
    move_item,
    parse_expiration_date,
)
from pantry_tracker.services.auth import NotAuthenticatedError

_logger = logging.getLogger(__name__)

ERROR_MESSAGES = {
    "load_places": "Failed to load places",
    "load_foods": "Failed to load foods",
    "load_recipes": "Failed to load recipes",
    "add_place": "Failed to add place",
    "add_food": "Failed to add food",
    "edit_food": "Failed to update food",
    "delete_food": "Failed to delete food",
    "delete_place_foods": "Failed to delete the foods stored in this place",
    "delete_place": "Failed to delete place",
    "reorder_food": "Failed to update the food order",
}


class PlaceRepository(Protocol):
    """Persistence interface for places."""

    def list_places(self, user_id: UUID) -> list[Place]:
        """Return all places owned by the user."""

    def create_place(self, user_id: UUID, name: str) -> Place:
        """Create a place and return it with its assigned id."""

    def delete_place(self, place_id: int) -> None:
        """Delete a place by id."""


class FoodRepository(Protocol):
    """Persistence interface for foods."""

    def list_foods(self, user_id: UUID) -> list[Food]:
        """Return the user's foods joined with their place, in stored order."""

    def create_food(self, payload: dict[str, object]) -> Food:
        """Create a food and return it with its assigned id."""

    def update_food(self, food_id: int, payload: dict[str, object]) -> None:
        """Update a food; raise when no row matched."""

    def delete_food(self, food_id: int) -> None:
        """Delete a food by id."""

    def delete_foods_for_place(self, place_id: int) -> None:
        """Delete every food stored in a place."""

    def set_order(self, food_id: int, order: int) -> None:
        """Persist the display order of a food."""


class RecipeRepository(Protocol):
    """Read-only persistence interface for recipes."""

    def list_recipes(self, user_id: UUID) -> list[Recipe]:
        """Return the user's recipes with their ingredients."""


@dataclass
class FoodDraft:
    """Add-food form state."""

    name: str = ""
    place_id: int | None = None
    quantity: int = 1
    expiration_date: str = ""


Listener = Callable[["InventoryViewModel"], None]


@dataclass
class InventoryViewModel:
    """In-memory snapshot of one user's places, foods and recipes.

    Every mutation performs its remote call first and reconciles local state
    from the outcome. Remote failures never propagate: they are logged and
    stored in the single ``error`` slot, most recent wins. Listeners
    registered with ``subscribe`` are called after every state change.
    """

    place_repository: PlaceRepository
    food_repository: FoodRepository
    recipe_repository: RecipeRepository
    persist_full_order: bool = False
    user_id: UUID | None = None
    places: list[Place] = field(default_factory=list)
    foods: list[Food] = field(default_factory=list)
    recipes: list[Recipe] = field(default_factory=list)
    error: InventoryError | None = None
    ready: bool = False
    place_draft: str = ""
    food_draft: FoodDraft = field(default_factory=FoodDraft)
    food_to_delete: Food | None = None
    food_to_edit: Food | None = None
    place_to_delete: Place | None = None
    pending_place_deletions: list[int] = field(default_factory=list)
    _listeners: list[Listener] = field(default_factory=list, init=False, repr=False)

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a change listener and return a function removing it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def initialize(self, user_id: UUID | None) -> None:
        """Load places, foods and recipes for the user.

        Each collection loads independently: a failed fetch sets the error
        slot and leaves that collection as it was. ``ready`` is set once all
        three fetches have been attempted.
        """
        if user_id is None:
            raise NotAuthenticatedError("No authenticated user")
        self.user_id = user_id
        self.ready = False
        self.error = None

        try:
            self.places = self.place_repository.list_places(user_id)
        except Exception:
            self._fail(ErrorKind.FETCH, "load_places")
        try:
            self.foods = self.food_repository.list_foods(user_id)
        except Exception:
            self._fail(ErrorKind.FETCH, "load_foods")
        try:
            self.recipes = self.recipe_repository.list_recipes(user_id)
        except Exception:
            self._fail(ErrorKind.FETCH, "load_recipes")

        self.ready = True
        _logger.info(
            "Inventory loaded: user_id=%s places=%s foods=%s recipes=%s",
            user_id,
            len(self.places),
            len(self.foods),
            len(self.recipes),
        )
        self._notify()

    def group_by_place(self) -> list[PlaceGroup]:
        """Return every place with its foods in display order."""
        return group_foods_by_place(self.places, self.foods)

    def find_place(self, place_id: int) -> Place | None:
        """Return a loaded place by id."""
        return next((place for place in self.places if place.id == place_id), None)

    def find_food(self, food_id: int) -> Food | None:
        """Return a loaded food by id."""
        return next((food for food in self.foods if food.id == food_id), None)

    def add_place(self, name: str) -> Place | None:
        """Create a place and append it to the local list."""
        cleaned = name.strip()
        if not cleaned or self.user_id is None:
            return None
        try:
            place = self.place_repository.create_place(self.user_id, cleaned)
        except Exception:
            self._fail(ErrorKind.MUTATION, "add_place")
            self._notify()
            return None
        self.places = [*self.places, place]
        self.place_draft = ""
        self._notify()
        return place

    def add_food(
        self,
        name: str,
        place_id: int | None,
        quantity: object = 1,
        expiration_date: date | str | None = None,
    ) -> Food | None:
        """Create a food in one of the user's places and append it locally."""
        cleaned = name.strip()
        if not cleaned or place_id is None or self.user_id is None:
            return None
        place = self.find_place(place_id)
        if place is None:
            return None
        expires = parse_expiration_date(expiration_date)
        payload: dict[str, object] = {
            "name": cleaned,
            "place_id": place.id,
            "quantity": coerce_quantity(quantity),
            "expiration_date": expires.isoformat() if expires else None,
            "order": len(self.foods),
        }
        try:
            created = self.food_repository.create_food(payload)
        except Exception:
            self._fail(ErrorKind.MUTATION, "add_food")
            self._notify()
            return None
        if created.place is None:
            created = replace(created, place=PlaceRef(id=place.id, name=place.name))
        self.foods = [*self.foods, created]
        self.food_draft = FoodDraft()
        self._notify()
        return created

    def edit_food(self, food: Food) -> Food | None:
        """Persist a food's name, quantity and expiration date.

        The edited record keeps its position in the list; id and place are
        never changed by an edit.
        """
        cleaned = food.name.strip()
        current = self.find_food(food.id)
        if current is None or not cleaned:
            return None
        quantity = coerce_quantity(food.quantity)
        expires = parse_expiration_date(food.expiration_date)
        payload: dict[str, object] = {
            "name": cleaned,
            "quantity": quantity,
            "expiration_date": expires.isoformat() if expires else None,
        }
        try:
            self.food_repository.update_food(food.id, payload)
        except Exception:
            self._fail(ErrorKind.MUTATION, "edit_food")
            self.food_to_edit = None
            self._notify()
            return None
        updated = replace(
            current, name=cleaned, quantity=quantity, expiration_date=expires
        )
        self.foods = [updated if item.id == food.id else item for item in self.foods]
        self.food_to_edit = None
        self._notify()
        return updated

    def delete_food(self, food: Food) -> bool:
        """Delete a food remotely, then drop it from the local list."""
        deleted = True
        try:
            self.food_repository.delete_food(food.id)
        except Exception:
            self._fail(ErrorKind.MUTATION, "delete_food")
            deleted = False
        else:
            self.foods = [item for item in self.foods if item.id != food.id]
        self.food_to_delete = None
        self._notify()
        return deleted

    def delete_place(self, place: Place) -> bool:
        """Delete a place and its foods in two steps.

        Step one removes the place's foods; if it fails nothing changes and
        the place stays selected for deletion. Step two removes the place.
        If step two fails the foods are already gone remotely, so they are
        dropped locally, the place is kept, and its id is recorded in
        ``pending_place_deletions`` for ``retry_place_deletions``.
        """
        try:
            self.food_repository.delete_foods_for_place(place.id)
        except Exception:
            self._fail(ErrorKind.MUTATION, "delete_place_foods")
            self._notify()
            return False
        _logger.info("Deleted foods of place: place_id=%s", place.id)

        remaining_foods = [food for food in self.foods if food.place_id != place.id]
        deleted = True
        try:
            self.place_repository.delete_place(place.id)
        except Exception:
            self._fail(ErrorKind.CONSISTENCY, "delete_place")
            self.foods = remaining_foods
            if place.id not in self.pending_place_deletions:
                self.pending_place_deletions = [
                    *self.pending_place_deletions,
                    place.id,
                ]
            deleted = False
        else:
            self.places = [item for item in self.places if item.id != place.id]
            self.foods = remaining_foods
            self.pending_place_deletions = [
                place_id
                for place_id in self.pending_place_deletions
                if place_id != place.id
            ]
        self.place_to_delete = None
        self._notify()
        return deleted

    def retry_place_deletions(self) -> int:
        """Re-run the delete of places left behind by a failed second step."""
        removed = 0
        for place_id in list(self.pending_place_deletions):
            place = self.find_place(place_id)
            if place is None:
                self.pending_place_deletions = [
                    pending
                    for pending in self.pending_place_deletions
                    if pending != place_id
                ]
                continue
            if self.delete_place(place):
                removed += 1
        return removed

    def reorder_food(self, active_id: int, over_id: int) -> bool:
        """Move a food to the position of another and persist the new order.

        The local list changes before the remote write. If any write fails
        the previous order is restored.
        """
        if active_id == over_id:
            return False
        old_index = self._food_index(active_id)
        new_index = self._food_index(over_id)
        if old_index is None or new_index is None:
            return False

        previous = self.foods
        reordered = move_item(previous, old_index, new_index)
        self.foods = reordered
        self._notify()

        writes = self._order_writes(reordered, active_id, new_index)
        completed = 0
        try:
            for food_id, order in writes:
                self.food_repository.set_order(food_id, order)
                completed += 1
        except Exception:
            self.foods = previous
            kind = ErrorKind.CONSISTENCY if completed else ErrorKind.MUTATION
            self._fail(kind, "reorder_food")
            self._notify()
            return False

        written = dict(writes)
        self.foods = [
            replace(food, order=written[food.id]) if food.id in written else food
            for food in reordered
        ]
        self._notify()
        return True

    def submit_place_draft(self) -> Place | None:
        """Add a place from the add-place form."""
        return self.add_place(self.place_draft)

    def submit_food_draft(self) -> Food | None:
        """Add a food from the add-food form."""
        draft = self.food_draft
        return self.add_food(
            draft.name,
            draft.place_id,
            quantity=draft.quantity,
            expiration_date=draft.expiration_date,
        )

    def request_food_deletion(self, food: Food) -> None:
        """Select a food for the delete confirmation prompt."""
        self.food_to_delete = food
        self._notify()

    def request_place_deletion(self, place: Place) -> None:
        """Select a place for the delete confirmation prompt."""
        self.place_to_delete = place
        self._notify()

    def start_food_edit(self, food: Food) -> None:
        """Select a food for the edit dialog."""
        self.food_to_edit = food
        self._notify()

    def confirm_food_deletion(self) -> bool:
        """Delete the food selected for deletion, if any."""
        if self.food_to_delete is None:
            return False
        return self.delete_food(self.food_to_delete)

    def confirm_place_deletion(self) -> bool:
        """Delete the place selected for deletion, if any."""
        if self.place_to_delete is None:
            return False
        return self.delete_place(self.place_to_delete)

    def cancel_dialogs(self) -> None:
        """Close every confirmation and edit dialog."""
        self.food_to_delete = None
        self.food_to_edit = None
        self.place_to_delete = None
        self._notify()

    def clear_error(self) -> None:
        """Empty the error slot."""
        self.error = None
        self._notify()

    def _order_writes(
        self, reordered: list[Food], active_id: int, new_index: int
    ) -> list[tuple[int, int]]:
        if not self.persist_full_order:
            return [(active_id, new_index)]
        return [
            (food.id, index)
            for index, food in enumerate(reordered)
            if food.order != index
        ]

    def _food_index(self, food_id: int) -> int | None:
        for index, food in enumerate(self.foods):
            if food.id == food_id:
                return index
        return None

    def _fail(self, kind: ErrorKind, operation: str) -> None:
        """Log the active exception and store a user-facing error."""
        _logger.exception(
            "Inventory operation failed: operation=%s user_id=%s",
            operation,
            self.user_id,
        )
        self.error = InventoryError(
            kind=kind, operation=operation, message=ERROR_MESSAGES[operation]
        )

    def _notify(self) -> None:
        for listener in list(self._listeners):
            listener(self)
