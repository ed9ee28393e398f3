"""Pydantic schemas for branding and credential records."""
from rms_shell.schemas.auth import LoginRequest, LoginResult, UserRecord
from rms_shell.schemas.branding import (
    BrandingRecord,
    DecodedBranding,
    MalformedBranding,
    decode_branding_payload,
)

__all__ = [
    "BrandingRecord",
    "DecodedBranding",
    "LoginRequest",
    "LoginResult",
    "MalformedBranding",
    "UserRecord",
    "decode_branding_payload",
]
