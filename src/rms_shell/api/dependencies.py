"""FastAPI dependencies for injection."""
from fastapi import Depends, HTTPException, Request, status

from rms_shell.bootstrap import ShellContainer
from rms_shell.schemas.auth import UserRecord
from rms_shell.services.auth_storage import AuthStorage
from rms_shell.services.branding_cache import BrandingCache
from rms_shell.services.branding_gate import BrandingGate
from rms_shell.services.session import SessionService


def get_container(request: Request) -> ShellContainer:
    """The per-process container held on app.state."""
    return request.app.state.container


def get_branding_cache(container: ShellContainer = Depends(get_container)) -> BrandingCache:
    return container.branding


def get_branding_gate(container: ShellContainer = Depends(get_container)) -> BrandingGate:
    return container.gate


def get_auth_storage(container: ShellContainer = Depends(get_container)) -> AuthStorage:
    return container.auth_storage


def get_session_service(container: ShellContainer = Depends(get_container)) -> SessionService:
    return container.session


def get_current_user(auth: AuthStorage = Depends(get_auth_storage)) -> UserRecord:
    """Stored user, or 401 when no credential pair is stored."""
    user = auth.get_user()
    if user is None or auth.get_token() is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Not authenticated")
    return user


__all__ = [
    "get_auth_storage",
    "get_branding_cache",
    "get_branding_gate",
    "get_container",
    "get_current_user",
    "get_session_service",
]
