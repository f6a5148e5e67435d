"""Dependency container wiring for the application."""

from dataclasses import dataclass

from supabase import create_client
from supabase.client import ClientOptions

from pantry_tracker.adapters.supabase_auth_gateway import SupabaseAuthGateway
from pantry_tracker.adapters.supabase_food_repository import SupabaseFoodRepository
from pantry_tracker.adapters.supabase_place_repository import (
    SupabasePlaceRepository,
)
from pantry_tracker.adapters.supabase_recipe_repository import (
    SupabaseRecipeRepository,
)
from pantry_tracker.config import Settings
from pantry_tracker.services.auth import AuthService
from pantry_tracker.services.dashboard import DashboardService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    auth_service: AuthService
    dashboard_service: DashboardService


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    data_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_service_key
    )
    # Sign-ins store a session on their client; keep it off the data client.
    auth_client = create_client(
        resolved_settings.supabase_url,
        resolved_settings.supabase_service_key,
        options=ClientOptions(auto_refresh_token=False, persist_session=False),
    )
    auth_service = AuthService(
        gateway=SupabaseAuthGateway(auth_client),
        email_redirect_url=resolved_settings.email_redirect_url,
        password_reset_redirect_url=resolved_settings.password_reset_redirect_url,
    )
    dashboard_service = DashboardService(
        place_repository=SupabasePlaceRepository(data_client),
        food_repository=SupabaseFoodRepository(data_client),
        recipe_repository=SupabaseRecipeRepository(data_client),
        persist_full_order=resolved_settings.persist_full_food_order,
        idle_ttl_seconds=resolved_settings.dashboard_idle_ttl_seconds,
    )
    return AppContainer(
        settings=resolved_settings,
        auth_service=auth_service,
        dashboard_service=dashboard_service,
    )
