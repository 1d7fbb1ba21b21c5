"""Authenticated identity model."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class UserIdentity(BaseModel):
    """Identity returned by the login exchange.

    Parameters
    ----------
    user_id : int
        Server-side user id; the only thing a sync needs.
    username : str
        Display name echoed back by the server.
    """

    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
        populate_by_name=True,
        alias_generator=to_camel,
    )

    user_id: int = Field(gt=0)
    username: str = ""
