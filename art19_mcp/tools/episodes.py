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
    related_id,
    relationship,
    require_any_update,
    require_one_of,
    resource_path,
)
from .registry import tool

EPISODE_FIELDS = ("title", "description", "released_at", "season_id", "status")


class ListEpisodesInput(SeriesRefInput):
    season_id: Optional[str] = Field(default=None, description="ART19 season ID")
    published: Optional[bool] = Field(default=None, description="Only published (true) or unpublished (false) episodes")
    status: Optional[str] = Field(default=None, description="Episode status filter, e.g. 'draft'")
    q: Optional[str] = Field(default=None, description="Free text search on episode title")

    @model_validator(mode="after")
    def _check_reference(self) -> "ListEpisodesInput":
        require_one_of(self, "series_id", "series_slug", "season_id")
        return self


class EpisodeIdInput(ToolInput):
    episode_id: str = Field(..., description="ART19 episode ID", min_length=1)


class CreateEpisodeInput(SeriesRefInput):
    title: str = Field(..., description="Episode title", min_length=1, max_length=500)
    description: Optional[str] = Field(default=None, description="Episode show notes (HTML allowed)")
    season_id: Optional[str] = Field(default=None, description="Season to file the episode under")
    released_at: Optional[str] = Field(default=None, description="Release time, ISO8601")

    @model_validator(mode="after")
    def _check_reference(self) -> "CreateEpisodeInput":
        require_one_of(self, "series_id", "series_slug")
        return self


class UpdateEpisodeInput(EpisodeIdInput):
    title: Optional[str] = Field(default=None, min_length=1, max_length=500)
    description: Optional[str] = None
    released_at: Optional[str] = Field(default=None, description="Release time, ISO8601")
    season_id: Optional[str] = None
    status: Optional[str] = None

    @model_validator(mode="after")
    def _check_update(self) -> "UpdateEpisodeInput":
        require_any_update(self, *EPISODE_FIELDS)
        return self


class PublishEpisodeInput(EpisodeIdInput):
    released_at: Optional[str] = Field(
        default=None, description="Release time, ISO8601; omit to release immediately"
    )


def _episode_summary(item: Dict[str, Any]) -> Dict[str, Any]:
    attributes = attrs(item)
    return {
        "id": item.get("id"),
        "title": attributes.get("title"),
        "status": attributes.get("status"),
        "published": attributes.get("published"),
        "released_at": attributes.get("released_at"),
        "duration": attributes.get("duration"),
        "series_id": related_id(item, "series"),
    }


@tool("list_episodes", ListEpisodesInput, title="List Episodes", read_only=True)
def list_episodes(client: Art19Client, params: ListEpisodesInput) -> Dict[str, Any]:
    """List episodes of a series or season.

    One of series_id, series_slug (aliases like ``lu`` accepted) or season_id
    is required. Optional filters: published, status, q.
    """
    query: Dict[str, Any] = {}
    if params.season_id:
        query["filter[season_id]"] = params.season_id
    if params.series_id or params.series_slug:
        query["filter[series_id]"] = resolve_series_id(client, params.series_id, params.series_slug)
    if params.published is not None:
        query["filter[published]"] = "true" if params.published else "false"
    if params.status:
        query["filter[status]"] = params.status
    if params.q:
        query["q"] = params.q

    items = paginate(client, "/episodes", query)
    return listing("episodes", [_episode_summary(item) for item in items])


@tool("get_episode", EpisodeIdInput, title="Get Episode", read_only=True)
def get_episode(client: Art19Client, params: EpisodeIdInput) -> Any:
    """Get full details for one episode by ID."""
    return client.get(resource_path("episodes", params.episode_id))


@tool("create_episode", CreateEpisodeInput, title="Create Episode")
def create_episode(client: Art19Client, params: CreateEpisodeInput) -> Any:
    """Create a draft episode in a series.

    Requires a title and series_id or series_slug. The episode starts
    unpublished; use publish_episode to release it.
    """
    series_id = resolve_series_id(client, params.series_id, params.series_slug)
    relationships = {"series": relationship("series", series_id)}
    if params.season_id:
        relationships["season"] = relationship("seasons", params.season_id)
    body = document(
        "episodes",
        {
            "title": params.title,
            "description": params.description,
            "released_at": params.released_at,
        },
        relationships,
    )
    return client.post("/episodes", body)


@tool("update_episode", UpdateEpisodeInput, title="Update Episode", idempotent=True)
def update_episode(client: Art19Client, params: UpdateEpisodeInput) -> Any:
    """Update an episode's title, description, release time, season or status.

    Only the fields given are sent.
    """
    relationships = None
    if params.season_id:
        relationships = {"season": relationship("seasons", params.season_id)}
    body = document(
        "episodes",
        {
            "title": params.title,
            "description": params.description,
            "released_at": params.released_at,
            "status": params.status,
        },
        relationships,
        resource_id=params.episode_id,
    )
    return client.patch(resource_path("episodes", params.episode_id), body)


@tool("publish_episode", PublishEpisodeInput, title="Publish Episode", idempotent=True)
def publish_episode(client: Art19Client, params: PublishEpisodeInput) -> Any:
    """Mark an episode as published, optionally scheduling its release time."""
    body = document(
        "episodes",
        {"published": True, "released_at": params.released_at},
        resource_id=params.episode_id,
    )
    return client.patch(resource_path("episodes", params.episode_id), body)


@tool("unpublish_episode", EpisodeIdInput, title="Unpublish Episode", idempotent=True)
def unpublish_episode(client: Art19Client, params: EpisodeIdInput) -> Any:
    """Take an episode out of its feeds by marking it unpublished."""
    body = document("episodes", {"published": False}, resource_id=params.episode_id)
    return client.patch(resource_path("episodes", params.episode_id), body)


@tool("delete_episode", EpisodeIdInput, title="Delete Episode", destructive=True, idempotent=True)
def delete_episode(client: Art19Client, params: EpisodeIdInput) -> Dict[str, Any]:
    """Permanently delete an episode."""
    client.delete(resource_path("episodes", params.episode_id))
    return {"deleted": params.episode_id}


@tool("get_episode_next_sibling", EpisodeIdInput, title="Get Next Episode", read_only=True)
def get_episode_next_sibling(client: Art19Client, params: EpisodeIdInput) -> Any:
    """Get the episode released after the given one in the same series."""
    return client.get(resource_path("episodes", params.episode_id, "next_sibling"))


@tool("get_episode_previous_sibling", EpisodeIdInput, title="Get Previous Episode", read_only=True)
def get_episode_previous_sibling(client: Art19Client, params: EpisodeIdInput) -> Any:
    """Get the episode released before the given one in the same series."""
    return client.get(resource_path("episodes", params.episode_id, "previous_sibling"))
