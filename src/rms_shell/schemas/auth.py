"""Pydantic schemas for stored credentials and the login workflow."""
from typing import Any

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class UserRecord(BaseModel):
    """
    Profile of the signed-in user, as stored next to the bearer token.

    Unknown keys returned by the API are preserved so a stored profile
    round-trips unchanged.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="allow",
    )

    id: str
    first_name: str
    last_name: str
    email: str
    role: str
    avatar: str | None = None
    company_id: str | None = None
    is_super_admin: bool | None = None
    referral_code: str | None = None

    def to_wire(self) -> dict[str, Any]:
        """Serialize with the API's camelCase keys, omitting unset fields."""
        return self.model_dump(by_alias=True, exclude_none=True)


class LoginRequest(BaseModel):
    """Credentials posted to the login endpoint."""

    email: str
    password: str


class LoginResult(BaseModel):
    """Login response body (after envelope unwrapping)."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )

    access_token: str
    refresh_token: str | None = None
    expires_in: str | None = None
    user: UserRecord
