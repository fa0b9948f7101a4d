from __future__ import annotations

from typing import Any, Dict, Optional

from pydantic import Field, model_validator

from ..common.art19 import Art19Client
from ..common.pagination import paginate
from .aliases import resolve_series_id
from .base import (
    SeriesRefInput,
    ToolInput,
    attrs,
    document,
    listing,
    relationship,
    require_any_update,
    require_one_of,
    resource_path,
)
from .registry import tool

ITUNES_TYPE_HELP = "iTunes episode type: full, trailer or bonus"


class ListFeedItemsInput(SeriesRefInput):
    episode_id: Optional[str] = Field(default=None, description="ART19 episode ID")
    feed_id: Optional[str] = Field(default=None, description="ART19 feed ID")

    @model_validator(mode="after")
    def _check_reference(self) -> "ListFeedItemsInput":
        require_one_of(self, "episode_id", "series_id", "series_slug", "feed_id")
        return self


class FeedItemIdInput(ToolInput):
    feed_item_id: str = Field(..., description="ART19 feed item ID", min_length=1)


class CreateFeedItemInput(SeriesRefInput):
    title: str = Field(..., description="Feed item title", min_length=1, max_length=500)
    episode_id: Optional[str] = Field(default=None, description="Episode the item points at")
    feed_id: Optional[str] = Field(default=None, description="Feed to publish the item in")
    description: Optional[str] = None
    itunes_type: Optional[str] = Field(default=None, description=ITUNES_TYPE_HELP)

    @model_validator(mode="after")
    def _check_reference(self) -> "CreateFeedItemInput":
        require_one_of(self, "series_id", "series_slug")
        return self


class UpdateFeedItemInput(FeedItemIdInput):
    title: Optional[str] = Field(default=None, min_length=1, max_length=500)
    description: Optional[str] = None
    itunes_type: Optional[str] = Field(default=None, description=ITUNES_TYPE_HELP)
    published: Optional[bool] = None
    released_at: Optional[str] = Field(default=None, description="Release time, ISO8601")

    @model_validator(mode="after")
    def _check_update(self) -> "UpdateFeedItemInput":
        require_any_update(self, "title", "description", "itunes_type", "published", "released_at")
        return self


def _feed_item_summary(item: Dict[str, Any]) -> Dict[str, Any]:
    attributes = attrs(item)
    return {
        "id": item.get("id"),
        "title": attributes.get("title"),
        "status": attributes.get("status"),
        "published": attributes.get("published"),
        "itunes_type": attributes.get("itunes_type"),
        "enclosure_url": attributes.get("enclosure_url"),
    }


@tool("list_feed_items", ListFeedItemsInput, title="List Feed Items", read_only=True)
def list_feed_items(client: Art19Client, params: ListFeedItemsInput) -> Dict[str, Any]:
    """List RSS feed items by episode, series or feed.

    One of episode_id, series_id, series_slug or feed_id is required.
    """
    query: Dict[str, Any] = {}
    if params.episode_id:
        query["episode_id"] = params.episode_id
    if params.series_id or params.series_slug:
        query["series_id"] = resolve_series_id(client, params.series_id, params.series_slug)
    if params.feed_id:
        query["feed_id"] = params.feed_id
    items = paginate(client, "/feed_items", query)
    return listing("feed_items", [_feed_item_summary(item) for item in items])


@tool("get_feed_item", FeedItemIdInput, title="Get Feed Item", read_only=True)
def get_feed_item(client: Art19Client, params: FeedItemIdInput) -> Any:
    """Get full details for one feed item by ID."""
    return client.get(resource_path("feed_items", params.feed_item_id))


@tool("create_feed_item", CreateFeedItemInput, title="Create Feed Item")
def create_feed_item(client: Art19Client, params: CreateFeedItemInput) -> Any:
    """Create a draft feed item (e.g. a bonus or trailer entry) in a series feed."""
    series_id = resolve_series_id(client, params.series_id, params.series_slug)
    relationships = {"series": relationship("series", series_id)}
    if params.episode_id:
        relationships["episode"] = relationship("episodes", params.episode_id)
    if params.feed_id:
        relationships["feed"] = relationship("feeds", params.feed_id)
    body = document(
        "feed_items",
        {
            "title": params.title,
            "description": params.description,
            "itunes_type": params.itunes_type,
        },
        relationships,
    )
    return client.post("/feed_items", body)


@tool("update_feed_item", UpdateFeedItemInput, title="Update Feed Item", idempotent=True)
def update_feed_item(client: Art19Client, params: UpdateFeedItemInput) -> Any:
    """Update a feed item's title, description, iTunes type, release time or published flag."""
    body = document(
        "feed_items",
        {
            "title": params.title,
            "description": params.description,
            "itunes_type": params.itunes_type,
            "published": params.published,
            "released_at": params.released_at,
        },
        resource_id=params.feed_item_id,
    )
    return client.patch(resource_path("feed_items", params.feed_item_id), body)


@tool("delete_feed_item", FeedItemIdInput, title="Delete Feed Item", destructive=True, idempotent=True)
def delete_feed_item(client: Art19Client, params: FeedItemIdInput) -> Dict[str, Any]:
    """Delete a feed item."""
    client.delete(resource_path("feed_items", params.feed_item_id))
    return {"deleted": params.feed_item_id}
