from __future__ import annotations

from typing import Any, Dict, Optional, Union

from pydantic import Field, StrictInt

from ..common.art19 import Art19Client
from ..common.pagination import paginate
from .aliases import marker_position_name, marker_position_type
from .base import ToolInput, attrs, document, listing, relationship, resource_path
from .registry import tool


class ListMarkersInput(ToolInput):
    episode_version_id: str = Field(..., description="ART19 episode version ID", min_length=1)


class CreateMarkerInput(ToolInput):
    episode_version_id: str = Field(..., description="ART19 episode version ID", min_length=1)
    position_type: Union[StrictInt, str] = Field(
        ..., description="preroll, midroll or postroll (or 0, 1, 2)"
    )
    start_position: Optional[float] = Field(
        default=None, description="Offset in seconds; required by ART19 for midroll markers", ge=0
    )


class MarkerIdInput(ToolInput):
    marker_point_id: str = Field(..., description="ART19 marker point ID", min_length=1)


def _marker_summary(item: Dict[str, Any]) -> Dict[str, Any]:
    attributes = attrs(item)
    position = attributes.get("position_type_name") or marker_position_name(attributes.get("position_type"))
    return {
        "id": item.get("id"),
        "position_type": position,
        "start_position": attributes.get("start_position"),
    }


@tool("list_marker_points", ListMarkersInput, title="List Ad Markers", read_only=True)
def list_marker_points(client: Art19Client, params: ListMarkersInput) -> Dict[str, Any]:
    """List the ad insertion markers on an episode version."""
    items = paginate(
        client, "/marker_points", {"filter[episode_version_id]": params.episode_version_id}
    )
    return listing("marker_points", [_marker_summary(item) for item in items])


@tool("create_marker_point", CreateMarkerInput, title="Create Ad Marker")
def create_marker_point(client: Art19Client, params: CreateMarkerInput) -> Any:
    """Add a preroll, midroll or postroll ad marker to an episode version."""
    body = document(
        "marker_points",
        {
            "position_type": marker_position_type(params.position_type),
            "start_position": params.start_position,
        },
        {"episode_version": relationship("episode_versions", params.episode_version_id)},
    )
    return client.post("/marker_points", body)


@tool("delete_marker_point", MarkerIdInput, title="Delete Ad Marker", destructive=True, idempotent=True)
def delete_marker_point(client: Art19Client, params: MarkerIdInput) -> Dict[str, Any]:
    """Remove an ad marker."""
    client.delete(resource_path("marker_points", params.marker_point_id))
    return {"deleted": params.marker_point_id}
