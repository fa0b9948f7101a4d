from __future__ import annotations

from typing import Any, Dict

from pydantic import Field, model_validator

from ..common.art19 import Art19Client
from ..common.pagination import paginate
from .aliases import resolve_series_id
from .base import SeriesRefInput, ToolInput, attrs, listing, require_one_of, resource_path
from .registry import tool


class ListSeriesInput(ToolInput):
    pass


class SeriesInput(SeriesRefInput):
    @model_validator(mode="after")
    def _check_reference(self) -> "SeriesInput":
        require_one_of(self, "series_id", "series_slug")
        return self


class GetSeasonInput(ToolInput):
    season_id: str = Field(..., description="ART19 season ID", min_length=1)


def _series_summary(item: Dict[str, Any]) -> Dict[str, Any]:
    attributes = attrs(item)
    return {
        "id": item.get("id"),
        "title": attributes.get("title"),
        "slug": attributes.get("slug"),
        "status": attributes.get("status"),
    }


def _season_summary(item: Dict[str, Any]) -> Dict[str, Any]:
    attributes = attrs(item)
    return {
        "id": item.get("id"),
        "title": attributes.get("title"),
        "number": attributes.get("number"),
    }


@tool("list_series", ListSeriesInput, title="List Series", read_only=True)
def list_series(client: Art19Client, params: ListSeriesInput) -> Dict[str, Any]:
    """List every series (show) the credentials can see, with ID, title, slug and status."""
    items = paginate(client, "/series")
    return listing("series", [_series_summary(item) for item in items])


@tool("get_series", SeriesInput, title="Get Series", read_only=True)
def get_series(client: Art19Client, params: SeriesInput) -> Any:
    """Get full details for one series by ID or slug.

    Show aliases such as ``lu`` (Linux Unplugged) or ``cr`` (Coder Radio) are
    accepted in ``series_slug``.
    """
    series_id = resolve_series_id(client, params.series_id, params.series_slug)
    return client.get(resource_path("series", series_id))


@tool("list_seasons", SeriesInput, title="List Seasons", read_only=True)
def list_seasons(client: Art19Client, params: SeriesInput) -> Dict[str, Any]:
    """List the seasons of a series."""
    series_id = resolve_series_id(client, params.series_id, params.series_slug)
    items = paginate(client, "/seasons", {"filter[series_id]": series_id})
    return listing("seasons", [_season_summary(item) for item in items])


@tool("get_season", GetSeasonInput, title="Get Season", read_only=True)
def get_season(client: Art19Client, params: GetSeasonInput) -> Any:
    """Get full details for one season by ID."""
    return client.get(resource_path("seasons", params.season_id))
