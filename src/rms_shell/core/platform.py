"""
Host environment capabilities.

Storage scopes and display-mode probes are injected through a
PlatformCapabilities implementation instead of being probed at call time.
Production wiring uses HostPlatform; a non-interactive host (server-side
rendering, CLI, tests without stores) uses HeadlessPlatform, for which every
auth/branding read resolves to a safe default.
"""
from typing import Protocol

from rms_shell.core.config import Settings
from rms_shell.core.storage import KeyValueStore


STANDALONE_DISPLAY_MODE = "standalone"


class PlatformCapabilities(Protocol):
    """Probes and storage scopes offered by the execution host."""

    def is_interactive_host(self) -> bool:
        """True when running inside a browser-like, interactive host."""
        ...

    def is_standalone_host(self) -> bool:
        """True when running as an installed (display-mode standalone) app."""
        ...

    def get_persistent_store(self) -> KeyValueStore | None:
        """Store that survives restarts, or None if the host has none."""
        ...

    def get_session_store(self) -> KeyValueStore | None:
        """Store scoped to the current session, or None if the host has none."""
        ...


class HostPlatform:
    """Interactive host with both storage scopes available."""

    def __init__(
        self,
        persistent_store: KeyValueStore,
        session_store: KeyValueStore,
        display_mode: str = "browser",
        navigator_standalone: bool = False,
    ) -> None:
        self._persistent = persistent_store
        self._session = session_store
        self.display_mode = display_mode
        self.navigator_standalone = navigator_standalone

    def is_interactive_host(self) -> bool:
        return True

    def is_standalone_host(self) -> bool:
        # Media query match, or the vendor flag set by iOS home-screen apps
        return self.display_mode == STANDALONE_DISPLAY_MODE or self.navigator_standalone

    def get_persistent_store(self) -> KeyValueStore:
        return self._persistent

    def get_session_store(self) -> KeyValueStore:
        return self._session


class HeadlessPlatform:
    """Non-interactive host: no probes match and no storage exists."""

    def is_interactive_host(self) -> bool:
        return False

    def is_standalone_host(self) -> bool:
        return False

    def get_persistent_store(self) -> None:
        return None

    def get_session_store(self) -> None:
        return None


def build_platform(
    settings: Settings,
    persistent_store: KeyValueStore,
    session_store: KeyValueStore,
) -> PlatformCapabilities:
    """Pick the platform implementation described by settings."""
    if not settings.interactive_host:
        return HeadlessPlatform()
    return HostPlatform(
        persistent_store,
        session_store,
        display_mode=settings.display_mode,
        navigator_standalone=settings.navigator_standalone,
    )
