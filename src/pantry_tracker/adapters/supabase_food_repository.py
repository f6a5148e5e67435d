"""Supabase implementation for stored foods."""

from dataclasses import dataclass
from datetime import date
from uuid import UUID

from supabase import Client

from pantry_tracker.domain.inventory import Food, PlaceRef
from pantry_tracker.services.inventory import FoodRepository

# Inner join so the place's owner filter also filters the foods.
_FOOD_WITH_PLACE = "*, places!inner(id, name)"


@dataclass
class SupabaseFoodRepository(FoodRepository):
    """Supabase-backed repository for foods."""

    client: Client

    def list_foods(self, user_id: UUID) -> list[Food]:
        """Return the user's foods joined with their place."""
        response = (
            self.client.table("foods")
            .select(_FOOD_WITH_PLACE)
            .eq("places.user_id", str(user_id))
            .order("order")
            .execute()
        )
        return [_parse_food(row) for row in response.data or []]

    def create_food(self, payload: dict[str, object]) -> Food:
        """Create a food row and return it."""
        response = self.client.table("foods").insert(payload).execute()
        if not response.data:
            raise RuntimeError("Failed to create food")
        return _parse_food(response.data[0])

    def update_food(self, food_id: int, payload: dict[str, object]) -> None:
        """Update a food row."""
        response = (
            self.client.table("foods").update(payload).eq("id", food_id).execute()
        )
        if not response.data:
            raise RuntimeError("Failed to update food")

    def delete_food(self, food_id: int) -> None:
        """Delete a food row."""
        self.client.table("foods").delete().eq("id", food_id).execute()

    def delete_foods_for_place(self, place_id: int) -> None:
        """Delete every food row of a place."""
        self.client.table("foods").delete().eq("place_id", place_id).execute()

    def set_order(self, food_id: int, order: int) -> None:
        """Persist the display order of a food."""
        response = (
            self.client.table("foods")
            .update({"order": order})
            .eq("id", food_id)
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to update food order")


def _parse_food(row: dict[str, object]) -> Food:
    """Parse a food row, with its optional place join, into a domain model."""
    expiration_raw = row.get("expiration_date")
    expiration_date = (
        date.fromisoformat(expiration_raw[:10])
        if isinstance(expiration_raw, str) and expiration_raw
        else None
    )
    place_raw = row.get("places")
    place = (
        PlaceRef(id=int(place_raw["id"]), name=str(place_raw.get("name", "")))
        if isinstance(place_raw, dict)
        else None
    )
    return Food(
        id=int(row["id"]),
        name=str(row.get("name", "")),
        quantity=int(row.get("quantity") or 1),
        expiration_date=expiration_date,
        place_id=int(row["place_id"]),
        order=int(row.get("order") or 0),
        place=place,
    )
