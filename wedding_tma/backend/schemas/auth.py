"""
Auth Schemas.

Login request and the user view returned to the Mini App.
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class TelegramLoginRequest(BaseModel):
    """Raw initData as handed to the Mini App by the Telegram client."""

    init_data: str = Field(
        ...,
        min_length=1,
        description="URL-encoded Telegram WebApp initData",
    )


class UserResponse(BaseModel):
    """Schema for the authenticated user."""

    id: str = Field(description="User unique identifier")
    telegram_id: str = Field(description="Telegram user id")
    first_name: str
    last_name: str
    username: str
    role: str = Field(description="admin or guest")
    approval_status: str | None = Field(
        description="pending, approved, denied, or null if never requested",
    )
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class LoginResponse(BaseModel):
    """Session token plus the user it was issued for."""

    token: str
    token_type: str = "bearer"
    user: UserResponse
