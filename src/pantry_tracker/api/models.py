"""Pydantic models for API request bodies."""

from pydantic import BaseModel, Field


class Credentials(BaseModel):
    """Email and password pair."""

    email: str = Field(min_length=3)
    password: str = Field(min_length=1)


class PasswordResetRequest(BaseModel):
    """Request for a password reset email."""

    email: str = Field(min_length=3)


class PasswordUpdate(BaseModel):
    """New password for the signed-in user."""

    password: str = Field(min_length=1)


class PlaceCreate(BaseModel):
    """Add-place form."""

    name: str = ""


class FoodCreate(BaseModel):
    """Add-food form."""

    name: str = ""
    place_id: int | None = None
    quantity: int | str | None = 1
    expiration_date: str | None = None


class FoodUpdate(BaseModel):
    """Edit-food form."""

    name: str
    quantity: int | str | None = 1
    expiration_date: str | None = None


class ReorderRequest(BaseModel):
    """Drag-and-drop result: the dragged food and the food it was dropped on."""

    active_id: int
    over_id: int
