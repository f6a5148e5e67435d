"""Per-user dashboard sessions."""

from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta
from uuid import UUID

from pantry_tracker.domain.models import UserRecord
from pantry_tracker.services.inventory import (
    FoodRepository,
    InventoryViewModel,
    PlaceRepository,
    RecipeRepository,
)


def _utc_now() -> datetime:
    return datetime.now(tz=UTC)


@dataclass
class _Entry:
    view_model: InventoryViewModel
    last_seen: datetime


@dataclass
class DashboardService:
    """Keeps one initialized inventory view-model per signed-in user.

    View-models unused for ``idle_ttl_seconds`` are dropped on the next
    access by any user, so users who never log out do not pile up.
    """

    place_repository: PlaceRepository
    food_repository: FoodRepository
    recipe_repository: RecipeRepository
    persist_full_order: bool = False
    idle_ttl_seconds: int = 3600
    clock: Callable[[], datetime] = _utc_now
    _entries: dict[UUID, _Entry] = field(default_factory=dict, init=False, repr=False)

    def open(self, user: UserRecord) -> InventoryViewModel:
        """Return the user's view-model, loading it on first access."""
        now = self._evict_idle()
        entry = self._entries.get(user.id)
        if entry is None:
            view_model = self._build_view_model()
            view_model.initialize(user.id)
            entry = _Entry(view_model=view_model, last_seen=now)
            self._entries[user.id] = entry
        entry.last_seen = now
        return entry.view_model

    def reload(self, user: UserRecord) -> InventoryViewModel:
        """Re-fetch everything from the store for the user."""
        now = self._evict_idle()
        entry = self._entries.get(user.id)
        view_model = entry.view_model if entry else self._build_view_model()
        view_model.initialize(user.id)
        self._entries[user.id] = _Entry(view_model=view_model, last_seen=now)
        return view_model

    def close(self, user_id: UUID) -> None:
        """Forget the user's view-model."""
        self._entries.pop(user_id, None)

    def active_users(self) -> list[UUID]:
        """Return the users currently holding a view-model."""
        return list(self._entries)

    def _evict_idle(self) -> datetime:
        now = self.clock()
        cutoff = now - timedelta(seconds=self.idle_ttl_seconds)
        for user_id, entry in list(self._entries.items()):
            if entry.last_seen <= cutoff:
                self._entries.pop(user_id, None)
        return now

    def _build_view_model(self) -> InventoryViewModel:
        return InventoryViewModel(
            place_repository=self.place_repository,
            food_repository=self.food_repository,
            recipe_repository=self.recipe_repository,
            persist_full_order=self.persist_full_order,
        )
