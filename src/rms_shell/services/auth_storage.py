"""
Bearer credential and user profile storage across two scopes.

An installed (standalone) host writes to the persistent scope and mirrors
into the session scope; an ordinary browser host writes to the session scope
only, so credentials never leak into long-lived storage from a plain tab.
Reads fall back to the other scope because the host classification can change
between sessions (e.g. the app was installed after a login in a tab). Logout
purges both scopes unconditionally.
"""
import json
import logging
from collections.abc import Mapping
from typing import Any

from pydantic import ValidationError

from rms_shell.core.events import USER_UPDATED, EventBus
from rms_shell.core.platform import PlatformCapabilities
from rms_shell.core.storage import KeyValueStore
from rms_shell.schemas.auth import UserRecord

logger = logging.getLogger(__name__)

TOKEN_KEY = "token"
USER_KEY = "user"


class AuthStorage:
    """Dual-scope credential store. Every read is safe on a headless host."""

    def __init__(self, platform: PlatformCapabilities, events: EventBus | None = None) -> None:
        self._platform = platform
        self.events = events or EventBus()

    def is_host_standalone(self) -> bool:
        """True only for an interactive host running as an installed app."""
        return self._platform.is_interactive_host() and self._platform.is_standalone_host()

    def select_scope(self) -> KeyValueStore | None:
        """Primary read/write scope for the current host, None if headless."""
        if not self._platform.is_interactive_host():
            return None
        if self.is_host_standalone():
            return self._platform.get_persistent_store()
        return self._platform.get_session_store()

    def _other_scope(self) -> KeyValueStore | None:
        if not self._platform.is_interactive_host():
            return None
        if self.is_host_standalone():
            return self._platform.get_session_store()
        return self._platform.get_persistent_store()

    def _read(self, key: str) -> str | None:
        for scope in (self.select_scope(), self._other_scope()):
            if scope is None:
                continue
            value = scope.get_item(key)
            if value is not None:
                return value
        return None

    def _write(self, key: str, value: str) -> None:
        primary = self.select_scope()
        if primary is None:
            return
        primary.set_item(key, value)
        if self.is_host_standalone():
            # One-way mirror: persistent -> session, never the reverse
            session = self._platform.get_session_store()
            if session is not None:
                session.set_item(key, value)

    def _read_user_payload(self) -> dict[str, Any] | None:
        stored = self._read(USER_KEY)
        if stored is None:
            return None
        try:
            payload = json.loads(stored)
        except ValueError:
            logger.debug("stored_user_corrupt")
            return None
        return payload if isinstance(payload, dict) else None

    def get_token(self) -> str | None:
        """Stored bearer token, or None."""
        return self._read(TOKEN_KEY)

    def get_user(self) -> UserRecord | None:
        """Stored user profile, or None if missing or unparseable."""
        payload = self._read_user_payload()
        if payload is None:
            return None
        try:
            return UserRecord.model_validate(payload)
        except ValidationError:
            logger.debug("stored_user_invalid")
            return None

    def is_authenticated(self) -> bool:
        return self.get_token() is not None and self.get_user() is not None

    def set_auth(self, token: str, user: UserRecord | Mapping[str, Any]) -> None:
        """
        Store token and user together.

        Raises:
            ValidationError: If a mapping user is not a valid UserRecord.
                Nothing is stored in that case.
        """
        record = user if isinstance(user, UserRecord) else UserRecord.model_validate(dict(user))
        self._write(TOKEN_KEY, token)
        self._write(USER_KEY, json.dumps(record.to_wire()))

    def update_user(self, updates: Mapping[str, Any] | None = None, **fields: Any) -> bool:
        """
        Shallow-merge fields into the stored user and emit ``user-updated``.

        ``updates`` uses the API's camelCase keys; keyword arguments may use
        the snake_case field names of UserRecord. Returns False without
        writing or emitting if no user is stored or the merged profile is
        not a valid UserRecord.
        """
        current = self._read_user_payload()
        if current is None:
            return False

        merged = {**current, **(updates or {})}
        for name, value in fields.items():
            field = UserRecord.model_fields.get(name)
            merged[field.alias if field and field.alias else name] = value

        try:
            record = UserRecord.model_validate(merged)
        except ValidationError as e:
            logger.warning("user_update_rejected", extra={"errors": e.error_count()})
            return False

        self._write(USER_KEY, json.dumps(record.to_wire()))
        self.events.emit(USER_UPDATED)
        return True

    def clear_auth(self) -> None:
        """Remove token and user from both scopes, whatever the host is now."""
        if not self._platform.is_interactive_host():
            return
        for scope in (self._platform.get_persistent_store(), self._platform.get_session_store()):
            if scope is None:
                continue
            scope.remove_item(TOKEN_KEY)
            scope.remove_item(USER_KEY)
