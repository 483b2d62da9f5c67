"""Session model returned by a successful sign-in."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class Session(BaseModel):
    """
    An authenticated session.

    Only ``token`` is required; the backend also reports the user's id,
    username and email alongside it.
    """

    model_config = ConfigDict(
        populate_by_name=True,
        extra="ignore",
        frozen=True,
    )

    token: str = Field(..., alias="accessToken", min_length=1)
    user_id: int | str | None = Field(default=None, alias="id")
    username: str | None = None
    email: str | None = None

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> Session:
        return cls.model_validate(data)
