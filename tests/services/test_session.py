"""Tests for the login/logout workflow."""
import httpx
import pytest

from rms_shell.bootstrap import ShellContainer
from rms_shell.services.api_client import ApiError

from conftest import SAMPLE_USER

LOGIN_BODY = {
    "success": True,
    "data": {"user": SAMPLE_USER, "accessToken": "jwt", "refreshToken": "r", "expiresIn": "7d"},
}


class TestLogin:
    """Tests for SessionService.login."""

    async def test__stores_credential_pair(
        self, container: ShellContainer, upstream: dict,
    ) -> None:
        upstream[("POST", "/api/v1/auth/login")] = (200, LOGIN_BODY)

        user = await container.session.login("a@b.com", "secret")

        assert user.email == "a@b.com"
        assert container.auth_storage.get_token() == "jwt"
        assert container.auth_storage.get_user().to_wire() == SAMPLE_USER

    async def test__rejected__stores_nothing(
        self, container: ShellContainer, upstream: dict,
    ) -> None:
        upstream[("POST", "/api/v1/auth/login")] = (401, {"message": "Invalid credentials"})

        with pytest.raises(ApiError, match="Invalid credentials"):
            await container.session.login("a@b.com", "wrong")

        assert container.auth_storage.get_token() is None
        assert container.auth_storage.get_user() is None


class TestLogout:
    """Tests for SessionService.logout."""

    async def test__revokes_and_clears(
        self,
        container: ShellContainer,
        upstream: dict,
        seen_requests: list[httpx.Request],
    ) -> None:
        upstream[("POST", "/api/v1/auth/logout")] = (200, {"message": "Logged out successfully"})
        container.auth_storage.set_auth("jwt", SAMPLE_USER)

        await container.session.logout()

        assert seen_requests[-1].headers["Authorization"] == "Bearer jwt"
        assert container.auth_storage.get_token() is None

    async def test__upstream_failure__still_clears(self, container: ShellContainer) -> None:
        """Unrouted logout answers 404; local credentials go regardless."""
        container.auth_storage.set_auth("jwt", SAMPLE_USER)

        await container.session.logout()

        assert container.auth_storage.get_token() is None
        assert container.auth_storage.get_user() is None

    async def test__not_signed_in__skips_request(
        self, container: ShellContainer, seen_requests: list[httpx.Request],
    ) -> None:
        await container.session.logout()
        assert seen_requests == []

    async def test__no_content_answer__clears(
        self, container: ShellContainer, upstream: dict,
    ) -> None:
        upstream[("POST", "/api/v1/auth/logout")] = (204, None)
        container.auth_storage.set_auth("jwt", SAMPLE_USER)

        await container.session.logout()

        assert container.auth_storage.get_token() is None
        assert container.auth_storage.get_user() is None

    async def test__non_json_answer__still_clears(
        self, container: ShellContainer, upstream: dict,
    ) -> None:
        upstream[("POST", "/api/v1/auth/logout")] = (200, b"<html>bye</html>")
        container.auth_storage.set_auth("jwt", SAMPLE_USER)

        await container.session.logout()

        assert container.auth_storage.get_token() is None


class TestRefreshProfile:
    """Tests for SessionService.refresh_profile."""

    async def test__merges_profile(self, container: ShellContainer, upstream: dict) -> None:
        upstream[("GET", "/api/v1/auth/profile")] = (
            200, {"success": True, "data": {"firstName": "C", "avatar": "/a.png"}},
        )
        container.auth_storage.set_auth("jwt", SAMPLE_USER)

        user = await container.session.refresh_profile()

        assert user.first_name == "C"
        assert user.avatar == "/a.png"
        assert user.last_name == "B"

    async def test__not_signed_in__returns_none(self, container: ShellContainer) -> None:
        assert await container.session.refresh_profile() is None
