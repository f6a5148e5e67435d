"""ASGI entrypoint: ``uvicorn pantry_tracker.api.asgi:app``."""

import logging

from pantry_tracker.api.app import create_app
from pantry_tracker.config import Settings
from pantry_tracker.containers import build_container

settings = Settings()
app = create_app(build_container(settings))
logging.getLogger(__name__).info(
    "Pantry tracker API ready: environment=%s persist_full_food_order=%s",
    settings.environment,
    settings.persist_full_food_order,
)
