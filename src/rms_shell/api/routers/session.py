"""
Session endpoints over the stored credential pair.

The shell serves a single local user: one credential pair per process, shared
by every request. It binds to the loopback interface by default and is not
meant to be exposed to other clients.
"""
from typing import Any

from fastapi import APIRouter, Body, Depends, HTTPException, Response, status

from rms_shell.api.dependencies import get_auth_storage, get_current_user, get_session_service
from rms_shell.schemas.auth import LoginRequest, UserRecord
from rms_shell.services.auth_storage import AuthStorage
from rms_shell.services.session import SessionService

router = APIRouter(prefix="/session", tags=["session"])


@router.post("/login", response_model=UserRecord, response_model_exclude_none=True)
async def login(
    credentials: LoginRequest,
    session: SessionService = Depends(get_session_service),
) -> UserRecord:
    """Log in upstream and store the credential pair. Upstream errors pass through."""
    return await session.login(credentials.email, credentials.password)


@router.post("/logout", status_code=status.HTTP_204_NO_CONTENT)
async def logout(session: SessionService = Depends(get_session_service)) -> Response:
    """Clear stored credentials from every scope."""
    await session.logout()
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# Storage reads and writes block, so these run in the threadpool
@router.get("/me", response_model=UserRecord, response_model_exclude_none=True)
def read_me(current_user: UserRecord = Depends(get_current_user)) -> UserRecord:
    return current_user


@router.patch("/me", response_model=UserRecord, response_model_exclude_none=True)
def update_me(
    updates: dict[str, Any] = Body(...),
    current_user: UserRecord = Depends(get_current_user),  # noqa: ARG001
    auth: AuthStorage = Depends(get_auth_storage),
) -> UserRecord:
    """Shallow-merge fields (camelCase keys) into the stored user."""
    if not auth.update_user(updates):
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail="Update would leave an invalid user profile",
        )
    return auth.get_user()
