"""Shared test fixtures."""

from dataclasses import dataclass, field, replace
from datetime import date
from uuid import UUID, uuid4

import pytest

from pantry_tracker.config import Settings
from pantry_tracker.containers import AppContainer
from pantry_tracker.domain.inventory import Food, Place, PlaceRef, Recipe
from pantry_tracker.domain.models import AuthSession, UserRecord
from pantry_tracker.services.auth import AuthGateway, AuthService
from pantry_tracker.services.dashboard import DashboardService
from pantry_tracker.services.inventory import (
    FoodRepository,
    InventoryViewModel,
    PlaceRepository,
    RecipeRepository,
)

# Shaped like a JWT so supabase.create_client accepts it.
TEST_SERVICE_KEY = (
    "eyJhbGciOiJIUzI1NiIsInR5cCI6IkpXVCJ9."
    "eyJyb2xlIjoic2VydmljZV9yb2xlIn0."
    "c2lnbmF0dXJl"
)


class StoreFailure(RuntimeError):
    """Simulated remote store error."""


@dataclass
class InMemoryPlaceRepository(PlaceRepository):
    """In-memory place repository for tests."""

    places: dict[int, Place] = field(default_factory=dict)
    failures: set[str] = field(default_factory=set)
    calls: list[tuple[object, ...]] = field(default_factory=list)
    next_id: int = 1

    def list_places(self, user_id: UUID) -> list[Place]:
        self._check("list")
        return [place for place in self.places.values() if place.user_id == user_id]

    def create_place(self, user_id: UUID, name: str) -> Place:
        self.calls.append(("create", name))
        self._check("create")
        place = Place(id=self.next_id, name=name, user_id=user_id)
        self.next_id += 1
        self.places[place.id] = place
        return place

    def delete_place(self, place_id: int) -> None:
        self.calls.append(("delete", place_id))
        self._check("delete")
        self.places.pop(place_id, None)

    def _check(self, action: str) -> None:
        if action in self.failures:
            raise StoreFailure(f"places {action} failed")


@dataclass
class InMemoryFoodRepository(FoodRepository):
    """In-memory food repository joined to an in-memory place repository."""

    place_repository: InMemoryPlaceRepository
    foods: dict[int, Food] = field(default_factory=dict)
    failures: set[str] = field(default_factory=set)
    calls: list[tuple[object, ...]] = field(default_factory=list)
    set_order_fails_after: int | None = None
    next_id: int = 100

    def list_foods(self, user_id: UUID) -> list[Food]:
        self._check("list")
        owned = {
            place.id: place
            for place in self.place_repository.places.values()
            if place.user_id == user_id
        }
        rows = [
            replace(
                food,
                place=PlaceRef(
                    id=food.place_id, name=owned[food.place_id].name
                ),
            )
            for food in self.foods.values()
            if food.place_id in owned
        ]
        return sorted(rows, key=lambda food: food.order)

    def create_food(self, payload: dict[str, object]) -> Food:
        self.calls.append(("create", payload))
        self._check("create")
        expiration = payload.get("expiration_date")
        food = Food(
            id=self.next_id,
            name=str(payload["name"]),
            quantity=int(payload.get("quantity", 1)),
            expiration_date=date.fromisoformat(expiration) if expiration else None,
            place_id=int(payload["place_id"]),
            order=int(payload.get("order", 0)),
        )
        self.next_id += 1
        self.foods[food.id] = food
        return food

    def update_food(self, food_id: int, payload: dict[str, object]) -> None:
        self.calls.append(("update", food_id, payload))
        self._check("update")
        if food_id not in self.foods:
            raise StoreFailure("food not found")
        expiration = payload.get("expiration_date")
        self.foods[food_id] = replace(
            self.foods[food_id],
            name=str(payload["name"]),
            quantity=int(payload["quantity"]),
            expiration_date=date.fromisoformat(expiration) if expiration else None,
        )

    def delete_food(self, food_id: int) -> None:
        self.calls.append(("delete", food_id))
        self._check("delete")
        self.foods.pop(food_id, None)

    def delete_foods_for_place(self, place_id: int) -> None:
        self.calls.append(("delete_for_place", place_id))
        self._check("delete_for_place")
        self.foods = {
            food_id: food
            for food_id, food in self.foods.items()
            if food.place_id != place_id
        }

    def set_order(self, food_id: int, order: int) -> None:
        self._check("set_order")
        written = len(self.order_writes())
        if self.set_order_fails_after is not None and (
            written >= self.set_order_fails_after
        ):
            raise StoreFailure("set_order failed")
        self.calls.append(("set_order", food_id, order))
        self.foods[food_id] = replace(self.foods[food_id], order=order)

    def order_writes(self) -> list[tuple[object, ...]]:
        return [call for call in self.calls if call[0] == "set_order"]

    def _check(self, action: str) -> None:
        if action in self.failures:
            raise StoreFailure(f"foods {action} failed")


@dataclass
class InMemoryRecipeRepository(RecipeRepository):
    """In-memory recipe repository for tests."""

    recipes: list[Recipe] = field(default_factory=list)
    fail: bool = False

    def list_recipes(self, user_id: UUID) -> list[Recipe]:
        if self.fail:
            raise StoreFailure("recipes list failed")
        return [recipe for recipe in self.recipes if recipe.user_id == user_id]


@dataclass
class FakeAuthGateway(AuthGateway):
    """Fake auth provider keeping accounts and tokens in memory."""

    accounts: dict[str, tuple[str, UserRecord]] = field(default_factory=dict)
    tokens: dict[str, UserRecord] = field(default_factory=dict)
    signed_out: list[str] = field(default_factory=list)
    reset_emails: list[tuple[str, str | None]] = field(default_factory=list)
    sign_up_returns_user: bool = True
    fail_reset: bool = False

    def get_user(self, access_token: str) -> UserRecord | None:
        return self.tokens.get(access_token)

    def sign_up(
        self, email: str, password: str, redirect_to: str | None
    ) -> UserRecord | None:
        if email in self.accounts:
            raise RuntimeError("User already registered")
        user = UserRecord(id=uuid4(), email=email)
        self.accounts[email] = (password, user)
        return user if self.sign_up_returns_user else None

    def sign_in(self, email: str, password: str) -> AuthSession:
        account = self.accounts.get(email)
        if account is None or account[0] != password:
            raise RuntimeError("Invalid login credentials")
        user = account[1]
        token = f"token-{uuid4()}"
        self.tokens[token] = user
        return AuthSession(access_token=token, refresh_token="refresh", user=user)

    def sign_out(self, access_token: str) -> None:
        self.signed_out.append(access_token)
        self.tokens.pop(access_token, None)

    def send_password_reset(self, email: str, redirect_to: str | None) -> None:
        if self.fail_reset:
            raise RuntimeError("smtp down")
        self.reset_emails.append((email, redirect_to))

    def update_password(self, user_id: UUID, password: str) -> None:
        for email, (_, user) in self.accounts.items():
            if user.id == user_id:
                self.accounts[email] = (password, user)


@pytest.fixture
def settings() -> Settings:
    return Settings(
        supabase_url="https://example.supabase.co",
        supabase_service_key=TEST_SERVICE_KEY,
        password_reset_redirect_url="https://pantry.example/update-password",
    )


@pytest.fixture
def user_id() -> UUID:
    return uuid4()


@pytest.fixture
def place_repository() -> InMemoryPlaceRepository:
    return InMemoryPlaceRepository()


@pytest.fixture
def food_repository(
    place_repository: InMemoryPlaceRepository,
) -> InMemoryFoodRepository:
    return InMemoryFoodRepository(place_repository=place_repository)


@pytest.fixture
def recipe_repository() -> InMemoryRecipeRepository:
    return InMemoryRecipeRepository()


@pytest.fixture
def view_model(
    place_repository: InMemoryPlaceRepository,
    food_repository: InMemoryFoodRepository,
    recipe_repository: InMemoryRecipeRepository,
) -> InventoryViewModel:
    return InventoryViewModel(
        place_repository=place_repository,
        food_repository=food_repository,
        recipe_repository=recipe_repository,
    )


@pytest.fixture
def auth_gateway() -> FakeAuthGateway:
    return FakeAuthGateway()


@pytest.fixture
def container(
    settings: Settings,
    auth_gateway: FakeAuthGateway,
    place_repository: InMemoryPlaceRepository,
    food_repository: InMemoryFoodRepository,
    recipe_repository: InMemoryRecipeRepository,
) -> AppContainer:
    return AppContainer(
        settings=settings,
        auth_service=AuthService(
            gateway=auth_gateway,
            password_reset_redirect_url=settings.password_reset_redirect_url,
        ),
        dashboard_service=DashboardService(
            place_repository=place_repository,
            food_repository=food_repository,
            recipe_repository=recipe_repository,
        ),
    )


def seed_food(  # noqa: PLR0913
    repository: InMemoryFoodRepository,
    name: str,
    place_id: int,
    order: int,
    quantity: int = 1,
    expiration_date: str | None = None,
) -> Food:
    """Store a food directly in the repository."""
    food = repository.create_food(
        {
            "name": name,
            "place_id": place_id,
            "quantity": quantity,
            "expiration_date": expiration_date,
            "order": order,
        }
    )
    repository.calls.clear()
    return food
