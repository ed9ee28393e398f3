"""Login, logout and profile refresh on top of AuthStorage."""
import logging
from typing import Any

import httpx

from rms_shell.schemas.auth import LoginRequest, LoginResult, UserRecord
from rms_shell.services.api_client import ApiClient, ApiError
from rms_shell.services.auth_storage import AuthStorage

logger = logging.getLogger(__name__)


def unwrap_envelope(raw: Any) -> Any:
    """Return ``raw["data"]`` for ``{success, data}`` envelopes, else raw."""
    if isinstance(raw, dict) and "data" in raw and ("success" in raw or len(raw) == 1):
        return raw["data"]
    return raw


class SessionService:
    """Auth workflow; credentials are stored only after a successful login."""

    def __init__(self, api: ApiClient, auth_storage: AuthStorage) -> None:
        self._api = api
        self._auth = auth_storage

    async def login(self, email: str, password: str) -> UserRecord:
        """
        Authenticate and store the credential pair.

        Raises:
            ApiError: If the API rejects the credentials.
        """
        body = LoginRequest(email=email, password=password)
        raw = await self._api.post("/auth/login", body.model_dump())
        result = LoginResult.model_validate(unwrap_envelope(raw))
        self._auth.set_auth(result.access_token, result.user)
        logger.info("login_succeeded", extra={"user_id": result.user.id})
        return result.user

    async def logout(self) -> None:
        """Revoke server-side if possible; local credentials are always cleared."""
        try:
            if self._auth.get_token() is not None:
                await self._api.post("/auth/logout")
        except (ApiError, httpx.HTTPError, ValueError) as e:
            logger.warning("logout_request_failed", extra={"reason": str(e)})
        finally:
            self._auth.clear_auth()

    async def refresh_profile(self) -> UserRecord | None:
        """Merge the server's profile into the stored user."""
        if self._auth.get_token() is None:
            return None
        profile = unwrap_envelope(await self._api.get("/auth/profile"))
        if isinstance(profile, dict):
            self._auth.update_user(profile)
        return self._auth.get_user()
