from __future__ import annotations

from typing import Any, Dict

from pydantic import Field, model_validator

from ..common.art19 import Art19Client
from ..common.pagination import paginate
from .aliases import resolve_series_id
from .base import SeriesRefInput, attrs, document, listing, relationship, require_one_of
from .registry import tool


class ListImagesInput(SeriesRefInput):
    @model_validator(mode="after")
    def _check_reference(self) -> "ListImagesInput":
        require_one_of(self, "series_id", "series_slug")
        return self


class UploadImageInput(SeriesRefInput):
    source_url: str = Field(..., description="Public URL of the artwork to import", min_length=1)

    @model_validator(mode="after")
    def _check_reference(self) -> "UploadImageInput":
        require_one_of(self, "series_id", "series_slug")
        return self


def _image_summary(item: Dict[str, Any]) -> Dict[str, Any]:
    attributes = attrs(item)
    return {
        "id": item.get("id"),
        "status": attributes.get("status"),
        "source_url": attributes.get("source_url"),
    }


@tool("list_images", ListImagesInput, title="List Series Images", read_only=True)
def list_images(client: Art19Client, params: ListImagesInput) -> Dict[str, Any]:
    """List the artwork uploaded to a series."""
    series_id = resolve_series_id(client, params.series_id, params.series_slug)
    items = paginate(
        client, "/images", {"filter[bucket_id]": series_id, "filter[bucket_type]": "Series"}
    )
    return listing("images", [_image_summary(item) for item in items])


@tool("upload_image", UploadImageInput, title="Upload Image")
def upload_image(client: Art19Client, params: UploadImageInput) -> Any:
    """Import artwork from a public URL into a series' image bucket."""
    series_id = resolve_series_id(client, params.series_id, params.series_slug)
    body = document(
        "images",
        {"source_url": params.source_url},
        {"bucket": relationship("series", series_id)},
    )
    return client.post("/images", body)
