"""Shared input models and JSON:API document helpers for the tool translators."""
from __future__ import annotations

from typing import Any, Dict, Iterable, List, Optional
from urllib.parse import quote

from pydantic import BaseModel, ConfigDict, Field


class ToolInputError(ValueError):
    """Raised when a call's arguments cannot be turned into an upstream request."""


class ToolInput(BaseModel):
    """Base for every tool's arguments; unknown keys are ignored."""

    model_config = ConfigDict(str_strip_whitespace=True, extra="ignore")


class SeriesRefInput(ToolInput):
    series_id: Optional[str] = Field(default=None, description="ART19 series ID")
    series_slug: Optional[str] = Field(
        default=None,
        description="Series slug or show alias (lu, cr, ssh, lan, twib, launch)",
    )


def describe_choices(fields: Iterable[str]) -> str:
    names = list(fields)
    if len(names) == 1:
        return names[0]
    if len(names) == 2:
        return f"{names[0]} or {names[1]}"
    return f"{', '.join(names[:-1])}, or {names[-1]}"


def require_one_of(model: BaseModel, *fields: str) -> None:
    if not any(getattr(model, field, None) not in (None, "") for field in fields):
        raise ValueError(f"one of {describe_choices(fields)} is required")


def require_any_update(model: BaseModel, *fields: str) -> None:
    if all(getattr(model, field, None) is None for field in fields):
        raise ValueError(f"at least one of {describe_choices(fields)} must be provided")


def compact(values: Dict[str, Any]) -> Dict[str, Any]:
    return {key: value for key, value in values.items() if value is not None}


def resource_path(collection: str, resource_id: str, *suffix: str) -> str:
    """Build an upstream path with ``resource_id`` as exactly one path segment."""
    if not resource_id or resource_id.strip(".") == "" or any(c in resource_id for c in "/?#\\"):
        raise ToolInputError(f"invalid ID {resource_id!r}: must be a single path segment")
    return "/".join(("", collection, quote(resource_id, safe=""), *suffix))


def relationship(resource_type: str, resource_id: str) -> Dict[str, Any]:
    return {"data": {"type": resource_type, "id": resource_id}}


def document(
    resource_type: str,
    attributes: Dict[str, Any],
    relationships: Optional[Dict[str, Any]] = None,
    resource_id: Optional[str] = None,
) -> Dict[str, Any]:
    data: Dict[str, Any] = {"type": resource_type, "attributes": compact(attributes)}
    if resource_id is not None:
        data["id"] = resource_id
    if relationships:
        data["relationships"] = relationships
    return {"data": data}


def attrs(item: Dict[str, Any]) -> Dict[str, Any]:
    return item.get("attributes") or {}


def related_id(item: Dict[str, Any], name: str) -> Optional[str]:
    rel = (item.get("relationships") or {}).get(name) or {}
    data = rel.get("data")
    if isinstance(data, dict):
        return data.get("id")
    return None


def listing(key: str, items: List[Dict[str, Any]]) -> Dict[str, Any]:
    return {key: items, "count": len(items)}
