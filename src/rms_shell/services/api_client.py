"""Async REST client for the RMS API."""
import logging
from collections.abc import Callable, Sequence
from typing import Any

import httpx

from rms_shell.schemas.branding import BrandingRecord, MalformedBranding, decode_branding_payload

logger = logging.getLogger(__name__)

API_PREFIX = "/api/v1"
BRANDING_ENDPOINT = "/cms/public/branding"
DEFAULT_TIMEOUT = 10.0

# (filename, content, content_type)
UploadFile = tuple[str, bytes, str]


class ApiError(Exception):
    """Raised when the API answers with a non-2xx status."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        self.message = message
        self.status_code = status_code
        super().__init__(message)


class BrandingUnavailableError(Exception):
    """Branding could not be fetched or decoded right now."""

    pass


def _error_message(response: httpx.Response, default: str) -> str:
    try:
        body = response.json()
    except ValueError:
        return default
    if isinstance(body, dict) and body.get("message"):
        message = body["message"]
        # Validation errors come back as a list of messages
        if isinstance(message, list):
            return "; ".join(str(m) for m in message)
        return str(message)
    return default


class ApiClient:
    """
    Thin wrapper over httpx.AsyncClient.

    Every request is signed with the bearer token returned by token_provider
    at call time, so a login or logout takes effect on the next request.
    """

    def __init__(
        self,
        base_url: str,
        token_provider: Callable[[], str | None] = lambda: None,
        timeout: float = DEFAULT_TIMEOUT,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.base_url = f"{base_url.rstrip('/')}{API_PREFIX}"
        self._token_provider = token_provider
        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=timeout,
            transport=transport,
        )

    def get_headers(self) -> dict[str, str]:
        """JSON content type plus bearer token when signed in."""
        return {"Content-Type": "application/json", **self.get_auth_headers()}

    def get_auth_headers(self) -> dict[str, str]:
        """Bearer token header only (multipart uploads set their own type)."""
        token = self._token_provider()
        return {"Authorization": f"Bearer {token}"} if token else {}

    async def _request(self, method: str, endpoint: str, data: Any = None) -> Any:
        response = await self._client.request(
            method,
            endpoint,
            headers=self.get_headers(),
            json=data,
        )
        if not response.is_success:
            raise ApiError(_error_message(response, "Request failed"), response.status_code)
        if response.status_code == 204 or not response.content:
            return None
        return response.json()

    async def get(self, endpoint: str) -> Any:
        return await self._request("GET", endpoint)

    async def post(self, endpoint: str, data: Any = None) -> Any:
        return await self._request("POST", endpoint, data)

    async def put(self, endpoint: str, data: Any = None) -> Any:
        return await self._request("PUT", endpoint, data)

    async def patch(self, endpoint: str, data: Any = None) -> Any:
        return await self._request("PATCH", endpoint, data)

    async def delete(self, endpoint: str) -> Any:
        return await self._request("DELETE", endpoint)

    async def upload_files(
        self,
        endpoint: str,
        files: Sequence[UploadFile],
        field_name: str = "files",
    ) -> Any:
        """Post files as multipart form data. Returns the uploaded URLs."""
        response = await self._client.post(
            endpoint,
            headers=self.get_auth_headers(),
            files=[(field_name, file) for file in files],
        )
        if not response.is_success:
            raise ApiError(_error_message(response, "Upload failed"), response.status_code)
        result = response.json()
        if isinstance(result, dict) and "urls" in result:
            return result["urls"]
        return result

    async def fetch_branding(self) -> BrandingRecord:
        """
        Fetch public tenant branding (no auth header).

        Raises:
            BrandingUnavailableError: On network errors, non-2xx responses,
                or a payload that is not a branding record.
        """
        try:
            response = await self._client.get(BRANDING_ENDPOINT)
        except httpx.HTTPError as e:
            raise BrandingUnavailableError(f"branding request failed: {e}") from e
        if not response.is_success:
            raise BrandingUnavailableError(f"branding request returned {response.status_code}")
        try:
            raw = response.json()
        except ValueError as e:
            raise BrandingUnavailableError("branding response is not JSON") from e

        result = decode_branding_payload(raw)
        if isinstance(result, MalformedBranding):
            raise BrandingUnavailableError(result.reason)
        return result.record

    async def aclose(self) -> None:
        """Close the underlying connection pool."""
        await self._client.aclose()
