"""Supabase-backed place repository."""

from dataclasses import dataclass
from uuid import UUID

from supabase import Client

from pantry_tracker.domain.inventory import Place
from pantry_tracker.services.inventory import PlaceRepository


@dataclass
class SupabasePlaceRepository(PlaceRepository):
    """Supabase implementation for storage places."""

    client: Client

    def list_places(self, user_id: UUID) -> list[Place]:
        """Return all places owned by the user."""
        response = (
            self.client.table("places")
            .select("*")
            .eq("user_id", str(user_id))
            .execute()
        )
        return [_parse_place(row) for row in response.data or []]

    def create_place(self, user_id: UUID, name: str) -> Place:
        """Create a place row and return it."""
        response = (
            self.client.table("places")
            .insert({"name": name, "user_id": str(user_id)})
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to create place")
        return _parse_place(response.data[0])

    def delete_place(self, place_id: int) -> None:
        """Delete a place row."""
        self.client.table("places").delete().eq("id", place_id).execute()


def _parse_place(row: dict[str, object]) -> Place:
    return Place(
        id=int(row["id"]),
        name=str(row.get("name", "")),
        user_id=UUID(str(row["user_id"])),
    )
