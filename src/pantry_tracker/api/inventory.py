"""Dashboard API endpoints over the inventory view-model."""

from __future__ import annotations

from dataclasses import replace
from typing import TYPE_CHECKING

from fastapi import APIRouter, Depends, HTTPException, Request, status

from pantry_tracker.api.auth import require_user
from pantry_tracker.api.models import (  # noqa: TC001
    FoodCreate,
    FoodUpdate,
    PlaceCreate,
    ReorderRequest,
)
from pantry_tracker.domain.inventory import (
    Food,
    InventoryError,
    Recipe,
    coerce_quantity,
    parse_expiration_date,
)
from pantry_tracker.domain.models import UserRecord  # noqa: TC001

if TYPE_CHECKING:
    from datetime import date

    from pantry_tracker.containers import AppContainer
    from pantry_tracker.services.inventory import InventoryViewModel

router = APIRouter(tags=["inventory"])


def _open(request: Request, user: UserRecord) -> InventoryViewModel:
    container: AppContainer = request.app.state.container
    return container.dashboard_service.open(user)


@router.get("/dashboard")
async def dashboard(
    request: Request, user: UserRecord = Depends(require_user)
) -> dict[str, object]:
    """Return places with their foods, recipes and the error slot."""
    return serialize_dashboard(_open(request, user))


@router.post("/dashboard/reload")
async def reload_dashboard(
    request: Request, user: UserRecord = Depends(require_user)
) -> dict[str, object]:
    """Re-fetch the user's inventory from the store."""
    container: AppContainer = request.app.state.container
    return serialize_dashboard(container.dashboard_service.reload(user))


@router.post("/places")
async def add_place(
    body: PlaceCreate, request: Request, user: UserRecord = Depends(require_user)
) -> dict[str, object]:
    """Add a storage place."""
    view_model = _open(request, user)
    view_model.add_place(body.name)
    return serialize_dashboard(view_model)


@router.delete("/places/{place_id}")
async def delete_place(
    place_id: int, request: Request, user: UserRecord = Depends(require_user)
) -> dict[str, object]:
    """Delete a place and every food stored in it."""
    view_model = _open(request, user)
    place = view_model.find_place(place_id)
    if place is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND)
    view_model.delete_place(place)
    return serialize_dashboard(view_model)


@router.post("/places/retry-deletions")
async def retry_place_deletions(
    request: Request, user: UserRecord = Depends(require_user)
) -> dict[str, object]:
    """Retry place deletions left half done."""
    view_model = _open(request, user)
    view_model.retry_place_deletions()
    return serialize_dashboard(view_model)


@router.post("/foods")
async def add_food(
    body: FoodCreate, request: Request, user: UserRecord = Depends(require_user)
) -> dict[str, object]:
    """Add a food to one of the user's places."""
    view_model = _open(request, user)
    if body.place_id is not None and view_model.find_place(body.place_id) is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND)
    expiration_date = _parse_date(body.expiration_date)
    view_model.add_food(
        body.name,
        body.place_id,
        quantity=body.quantity,
        expiration_date=expiration_date,
    )
    return serialize_dashboard(view_model)


@router.patch("/foods/{food_id}")
async def edit_food(
    food_id: int,
    body: FoodUpdate,
    request: Request,
    user: UserRecord = Depends(require_user),
) -> dict[str, object]:
    """Edit a food's name, quantity and expiration date."""
    view_model = _open(request, user)
    food = view_model.find_food(food_id)
    if food is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND)
    view_model.edit_food(
        replace(
            food,
            name=body.name,
            quantity=coerce_quantity(body.quantity),
            expiration_date=_parse_date(body.expiration_date),
        )
    )
    return serialize_dashboard(view_model)


@router.delete("/foods/{food_id}")
async def delete_food(
    food_id: int, request: Request, user: UserRecord = Depends(require_user)
) -> dict[str, object]:
    """Delete a food."""
    view_model = _open(request, user)
    food = view_model.find_food(food_id)
    if food is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND)
    view_model.delete_food(food)
    return serialize_dashboard(view_model)


@router.post("/foods/reorder")
async def reorder_food(
    body: ReorderRequest, request: Request, user: UserRecord = Depends(require_user)
) -> dict[str, object]:
    """Move a food to the position of the food it was dropped on."""
    view_model = _open(request, user)
    if (
        view_model.find_food(body.active_id) is None
        or view_model.find_food(body.over_id) is None
    ):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND)
    view_model.reorder_food(body.active_id, body.over_id)
    return serialize_dashboard(view_model)


def serialize_dashboard(view_model: InventoryViewModel) -> dict[str, object]:
    """Render the view-model state as JSON-ready data."""
    return {
        "ready": view_model.ready,
        "error": _serialize_error(view_model.error),
        "places": [
            {
                "id": group.id,
                "name": group.name,
                "foods": [_serialize_food(food) for food in group.foods],
            }
            for group in view_model.group_by_place()
        ],
        "recipes": [_serialize_recipe(recipe) for recipe in view_model.recipes],
        "pending_place_deletions": list(view_model.pending_place_deletions),
    }


def _parse_date(value: str | None) -> date | None:
    try:
        return parse_expiration_date(value)
    except ValueError as exc:
        raise HTTPException(
            status_code=422,
            detail="expiration_date must be an ISO date (YYYY-MM-DD)",
        ) from exc


def _serialize_error(error: InventoryError | None) -> dict[str, str] | None:
    if error is None:
        return None
    return {
        "kind": error.kind.value,
        "operation": error.operation,
        "message": error.message,
    }


def _serialize_food(food: Food) -> dict[str, object]:
    return {
        "id": food.id,
        "name": food.name,
        "quantity": food.quantity,
        "expiration_date": (
            food.expiration_date.isoformat() if food.expiration_date else None
        ),
        "place_id": food.place_id,
        "order": food.order,
    }


def _serialize_recipe(recipe: Recipe) -> dict[str, object]:
    return {
        "id": recipe.id,
        "name": recipe.name,
        "ingredients": [
            {"food_id": item.food_id, "quantity": item.quantity}
            for item in recipe.ingredients
        ],
    }
