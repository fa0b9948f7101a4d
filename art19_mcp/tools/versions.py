from __future__ import annotations

from typing import Any, Dict, Optional

from pydantic import Field, model_validator

from ..common.art19 import Art19Client
from ..common.pagination import paginate
from .base import (
    ToolInput,
    attrs,
    document,
    listing,
    relationship,
    require_any_update,
    resource_path,
)
from .registry import tool


class ListVersionsInput(ToolInput):
    episode_id: str = Field(..., description="ART19 episode ID", min_length=1)


class VersionIdInput(ToolInput):
    version_id: str = Field(..., description="ART19 episode version ID", min_length=1)


class CreateVersionInput(ToolInput):
    episode_id: str = Field(..., description="ART19 episode ID", min_length=1)
    source_url: str = Field(..., description="Public URL of the audio file ART19 should fetch", min_length=1)


class UpdateVersionInput(VersionIdInput):
    processing_status: Optional[str] = Field(
        default=None, description="Set to 'submitted' to start processing an uploaded version"
    )
    status_on_completion: Optional[str] = Field(
        default=None, description="Version status once processing finishes, e.g. 'active'"
    )
    source_url: Optional[str] = Field(default=None, description="Replacement audio URL")

    @model_validator(mode="after")
    def _check_update(self) -> "UpdateVersionInput":
        require_any_update(self, "processing_status", "status_on_completion", "source_url")
        return self


class ListMediaAssetsInput(ToolInput):
    attachment_id: str = Field(..., description="ID of the record the assets belong to", min_length=1)
    attachment_type: str = Field(
        default="EpisodeVersion", description="Type of the attachment record", min_length=1
    )


def _version_summary(item: Dict[str, Any]) -> Dict[str, Any]:
    attributes = attrs(item)
    return {
        "id": item.get("id"),
        "processing_status": attributes.get("processing_status"),
        "source_url": attributes.get("source_url"),
        "created_at": attributes.get("created_at"),
    }


def _media_asset_summary(item: Dict[str, Any]) -> Dict[str, Any]:
    attributes = attrs(item)
    return {
        "id": item.get("id"),
        "asset_type": attributes.get("asset_type"),
        "content_type": attributes.get("content_type"),
        "file_name": attributes.get("file_name"),
        "file_size": attributes.get("file_size"),
        "duration_in_ms": attributes.get("duration_in_ms"),
        "url": attributes.get("url"),
    }


@tool("list_episode_versions", ListVersionsInput, title="List Episode Versions", read_only=True)
def list_episode_versions(client: Art19Client, params: ListVersionsInput) -> Dict[str, Any]:
    """List the audio versions uploaded for an episode with their processing status."""
    items = paginate(client, "/episode_versions", {"filter[episode_id]": params.episode_id})
    return listing("versions", [_version_summary(item) for item in items])


@tool("get_episode_version", VersionIdInput, title="Get Episode Version", read_only=True)
def get_episode_version(client: Art19Client, params: VersionIdInput) -> Any:
    """Get full details for one episode version by ID."""
    return client.get(resource_path("episode_versions", params.version_id))


@tool("create_episode_version", CreateVersionInput, title="Create Episode Version")
def create_episode_version(client: Art19Client, params: CreateVersionInput) -> Any:
    """Attach new audio to an episode from a public URL.

    The version starts in draft; call update_episode_version with
    processing_status 'submitted' to have ART19 process it.
    """
    body = document(
        "episode_versions",
        {"source_url": params.source_url},
        {"episode": relationship("episodes", params.episode_id)},
    )
    return client.post("/episode_versions", body)


@tool("update_episode_version", UpdateVersionInput, title="Update Episode Version", idempotent=True)
def update_episode_version(client: Art19Client, params: UpdateVersionInput) -> Any:
    """Update an episode version's processing status, completion status or source URL."""
    body = document(
        "episode_versions",
        {
            "processing_status": params.processing_status,
            "status_on_completion": params.status_on_completion,
            "source_url": params.source_url,
        },
        resource_id=params.version_id,
    )
    return client.patch(resource_path("episode_versions", params.version_id), body)


@tool(
    "delete_episode_version",
    VersionIdInput,
    title="Delete Episode Version",
    destructive=True,
    idempotent=True,
)
def delete_episode_version(client: Art19Client, params: VersionIdInput) -> Dict[str, Any]:
    """Delete an episode version and its audio."""
    client.delete(resource_path("episode_versions", params.version_id))
    return {"deleted": params.version_id}


@tool("list_media_assets", ListMediaAssetsInput, title="List Media Assets", read_only=True)
def list_media_assets(client: Art19Client, params: ListMediaAssetsInput) -> Dict[str, Any]:
    """List the processed files for an episode version: URL, size and duration in ms."""
    items = paginate(
        client,
        "/media_assets",
        {"attachment_id": params.attachment_id, "attachment_type": params.attachment_type},
    )
    return listing("media_assets", [_media_asset_summary(item) for item in items])
