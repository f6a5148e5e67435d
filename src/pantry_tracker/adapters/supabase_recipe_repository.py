"""Supabase repository for recipes."""

from dataclasses import dataclass
from uuid import UUID

from supabase import Client

from pantry_tracker.domain.inventory import Recipe, RecipeIngredient
from pantry_tracker.services.inventory import RecipeRepository


@dataclass
class SupabaseRecipeRepository(RecipeRepository):
    """Read-only Supabase recipe repository."""

    client: Client

    def list_recipes(self, user_id: UUID) -> list[Recipe]:
        """Return the user's recipes with their ingredients."""
        response = (
            self.client.table("recipes")
            .select("*, recipe_ingredients(food_id, quantity)")
            .eq("user_id", str(user_id))
            .execute()
        )
        recipes = []
        for row in response.data or []:
            ingredients = [
                RecipeIngredient(
                    food_id=int(item["food_id"]),
                    quantity=int(item.get("quantity") or 1),
                )
                for item in row.get("recipe_ingredients") or []
            ]
            recipes.append(
                Recipe(
                    id=int(row["id"]),
                    user_id=UUID(str(row["user_id"])),
                    name=row.get("name"),
                    ingredients=ingredients,
                )
            )
        return recipes
