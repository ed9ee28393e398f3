"""Branding endpoints: cached record, web app manifest, and the gated shell page."""
from html import escape

from fastapi import APIRouter, Depends
from fastapi.responses import HTMLResponse, JSONResponse
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from rms_shell.api.dependencies import get_branding_cache, get_branding_gate
from rms_shell.schemas.branding import (
    BrandingRecord,
    apply_branding_title,
    get_company_name,
    get_short_name,
)
from rms_shell.services.branding_cache import BrandingCache
from rms_shell.services.branding_gate import BrandingGate

router = APIRouter(tags=["branding"])

MANIFEST_DESCRIPTION = (
    "Enterprise-grade PropTech platform for managing realtors, properties, and clients"
)
MANIFEST_ICON_SIZES = (72, 96, 128, 144, 152, 192, 384, 512)
MANIFEST_CACHE_CONTROL = "public, max-age=300, s-maxage=300"
SHELL_TITLE = "Dashboard | RMS Platform"

LOADING_PAGE = """<!doctype html>
<html lang="en">
<head>
<meta charset="utf-8">
<meta http-equiv="refresh" content="1">
<title>Loading</title>
</head>
<body><div class="spinner" role="status" aria-label="Loading"></div></body>
</html>
"""


class BrandingResponse(BaseModel):
    """Cached branding plus the names to display (fallbacks applied)."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    branding: BrandingRecord
    display_name: str
    display_short_name: str


def _icon(size: int) -> dict[str, str]:
    icon = {"src": f"/icons/icon-{size}x{size}.png", "sizes": f"{size}x{size}", "type": "image/png"}
    if size == 192:
        icon["purpose"] = "any"
    elif size == 512:
        icon["purpose"] = "any maskable"
    return icon


def build_manifest(branding: BrandingRecord) -> dict:
    """Web app manifest named after the tenant."""
    return {
        "name": get_company_name(branding),
        "short_name": get_short_name(branding),
        "description": MANIFEST_DESCRIPTION,
        "start_url": "/",
        "display": "standalone",
        "orientation": "portrait-primary",
        "background_color": "#ffffff",
        "theme_color": "#0b5c46",
        "icons": [_icon(size) for size in MANIFEST_ICON_SIZES],
        "categories": ["business", "productivity"],
        "lang": "en",
    }


def render_shell_page(branding: BrandingRecord) -> str:
    """Application shell with the branded tab title and header."""
    title = escape(apply_branding_title(SHELL_TITLE, branding))
    name = escape(get_company_name(branding))
    logo = f'<img src="{escape(branding.logo)}" alt="{name}">' if branding.logo else ""
    return (
        "<!doctype html>\n"
        '<html lang="en">\n'
        f'<head>\n<meta charset="utf-8">\n<title>{title}</title>\n'
        '<link rel="manifest" href="/manifest.json">\n</head>\n'
        f"<body>\n<header>{logo}<span>{name}</span></header>\n"
        '<main id="app"></main>\n</body>\n</html>\n'
    )


@router.get(
    "/branding",
    response_model=BrandingResponse,
    response_model_exclude_none=True,
)
async def read_branding(cache: BrandingCache = Depends(get_branding_cache)) -> BrandingResponse:
    """
    Stale-while-revalidate read.

    Answers from the cache immediately; a background refresh picks up CMS
    edits for the next request.
    """
    record = cache.use_branding()
    return BrandingResponse(
        branding=record,
        display_name=get_company_name(record),
        display_short_name=get_short_name(record),
    )


@router.get("/manifest.json")
async def read_manifest(cache: BrandingCache = Depends(get_branding_cache)) -> JSONResponse:
    """Web app manifest; falls back to the default names without branding."""
    return JSONResponse(
        build_manifest(cache.use_branding()),
        media_type="application/manifest+json",
        headers={"Cache-Control": MANIFEST_CACHE_CONTROL},
    )


@router.get("/", response_class=HTMLResponse)
async def read_shell(
    gate: BrandingGate = Depends(get_branding_gate),
    cache: BrandingCache = Depends(get_branding_cache),
) -> HTMLResponse:
    """Shell page, or the loading placeholder while the gate is pending."""
    page = gate.render(
        lambda: render_shell_page(cache.data or BrandingRecord()),
        LOADING_PAGE,
    )
    headers = {} if gate.is_ready else {"Cache-Control": "no-store"}
    return HTMLResponse(page, headers=headers)
