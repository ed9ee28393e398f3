"""Pydantic schemas and payload decoding for tenant branding."""
from dataclasses import dataclass
from typing import Any

from pydantic import BaseModel, ConfigDict, ValidationError
from pydantic.alias_generators import to_camel


DEFAULT_COMPANY_NAME = "RMS Platform"
DEFAULT_SHORT_NAME = "RMS"


class BrandingRecord(BaseModel):
    """
    Tenant display configuration.

    Every field is optional. Fallback names are applied where the record is
    displayed (get_company_name / get_short_name), never stored in the record.
    Records are immutable: a refresh replaces the whole record.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
        frozen=True,
    )

    company_name: str | None = None
    short_name: str | None = None
    logo: str | None = None  # URL or path
    whatsapp_number: str | None = None
    whatsapp_link: str | None = None
    support_email: str | None = None
    support_phone: str | None = None
    address: str | None = None

    @property
    def is_empty(self) -> bool:
        return not self.to_wire()

    def to_wire(self) -> dict[str, str]:
        """Serialize with the API's camelCase keys, omitting unset fields."""
        return self.model_dump(by_alias=True, exclude_none=True)


@dataclass(frozen=True)
class DecodedBranding:
    """Payload decoded into a record."""

    record: BrandingRecord


@dataclass(frozen=True)
class MalformedBranding:
    """Payload that is neither a record nor a {data: record} envelope."""

    reason: str


BrandingDecodeResult = DecodedBranding | MalformedBranding


def decode_branding_payload(raw: Any) -> BrandingDecodeResult:
    """
    Decode a branding response body.

    Accepts a bare record or a one-level ``{"data": record}`` envelope. An
    envelope whose data is null means no branding has been configured and
    decodes to the empty record. Anything else that is not a JSON object, or
    that carries non-string field values, is malformed.
    """
    if not isinstance(raw, dict):
        return MalformedBranding(f"expected a JSON object, got {type(raw).__name__}")

    payload = raw
    if "data" in raw:
        payload = raw["data"]
        if payload is None:
            return DecodedBranding(BrandingRecord())
        if not isinstance(payload, dict):
            return MalformedBranding(
                f"envelope data must be an object, got {type(payload).__name__}",
            )

    try:
        return DecodedBranding(BrandingRecord.model_validate(payload))
    except ValidationError as e:
        fields = ", ".join(".".join(str(p) for p in err["loc"]) for err in e.errors())
        return MalformedBranding(f"invalid branding fields: {fields}")


def get_company_name(branding: BrandingRecord) -> str:
    """Company name with fallback."""
    return branding.company_name or DEFAULT_COMPANY_NAME


def get_short_name(branding: BrandingRecord) -> str:
    """Short name with fallback."""
    return branding.short_name or DEFAULT_SHORT_NAME


def apply_branding_title(title: str, branding: BrandingRecord) -> str:
    """Replace the default platform name in a page title with the company name."""
    if not branding.company_name:
        return title
    return title.replace(DEFAULT_COMPANY_NAME, branding.company_name)
