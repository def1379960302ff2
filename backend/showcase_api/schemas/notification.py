from typing import Literal

from pydantic import BaseModel, Field, StrictStr, field_validator


class RegistrationMessage(BaseModel):
    """First frame a client sends on the notification socket."""

    type: Literal["register"]
    user_id: StrictStr = Field(alias="userId")

    @field_validator("user_id")
    @classmethod
    def _require_user_id(cls, value: str) -> str:
        if not value:
            raise ValueError("userId must not be empty")
        return value


class NotificationIn(BaseModel):
    title: str | None = None
    body: str | None = None


class NotificationSentOut(BaseModel):
    message: str


class PresenceOut(BaseModel):
    user_id: str
    connected: bool
