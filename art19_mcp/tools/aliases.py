from __future__ import annotations

from typing import Optional, Union

from ..common.art19 import Art19Client
from .base import ToolInputError

# Jupiter Broadcasting show shorthands
SERIES_ALIASES = {
    "lu": "linux-unplugged",
    "cr": "coder-radio",
    "ssh": "self-hosted",
    "lan": "linux-action-news",
    "twib": "this-week-in-bitcoin",
    "launch": "the-launch",
}

CREDIT_ROLES = {
    "host": "HostCredit",
    "cohost": "CoHostCredit",
    "co-host": "CoHostCredit",
    "guest": "GuestCredit",
    "producer": "ProducerCredit",
    "editor": "EditorCredit",
}

MARKER_POSITION_TYPES = {
    "preroll": 0,
    "midroll": 1,
    "postroll": 2,
}
MARKER_POSITION_NAMES = {value: key for key, value in MARKER_POSITION_TYPES.items()}


def canonical_series_slug(value: str) -> str:
    slug = value.strip().lower()
    return SERIES_ALIASES.get(slug, slug)


def canonical_credit_role(value: str) -> str:
    role = value.strip()
    return CREDIT_ROLES.get(role.lower(), role)


def marker_position_type(value: Union[int, str]) -> int:
    if isinstance(value, bool):
        raise ToolInputError("position_type must be a name or an integer, not a boolean")
    if isinstance(value, int):
        if value not in MARKER_POSITION_NAMES:
            raise ToolInputError(f"position_type must be one of {sorted(MARKER_POSITION_NAMES)}")
        return value
    text = value.strip().lower()
    if text.isdigit():
        return marker_position_type(int(text))
    if text not in MARKER_POSITION_TYPES:
        raise ToolInputError(
            f"position_type must be one of {', '.join(MARKER_POSITION_TYPES)} or 0-2"
        )
    return MARKER_POSITION_TYPES[text]


def marker_position_name(value: object) -> object:
    if isinstance(value, int):
        return MARKER_POSITION_NAMES.get(value, value)
    return value


def resolve_series_id(
    client: Art19Client,
    series_id: Optional[str] = None,
    series_slug: Optional[str] = None,
) -> str:
    """Return the series ID, looking it up by (aliased) slug when needed."""
    if series_id:
        return series_id
    if not series_slug:
        raise ToolInputError("one of series_id or series_slug is required")
    slug = canonical_series_slug(series_slug)
    payload = client.get("/series", params={"filter[slug]": slug})
    matches = payload.get("data") if isinstance(payload, dict) else None
    if not matches:
        raise ToolInputError(f"No series found for slug '{slug}'")
    return matches[0]["id"]
