from __future__ import annotations

from typing import Any, Dict

from pydantic import Field

from ..common.art19 import Art19Client
from ..common.pagination import paginate
from .base import ToolInput, attrs, document, listing, resource_path
from .registry import tool


class SearchPeopleInput(ToolInput):
    q: str = Field(..., description="Name (or part of a name) to search for", min_length=1, max_length=200)


class PersonIdInput(ToolInput):
    person_id: str = Field(..., description="ART19 person ID", min_length=1)


class CreatePersonInput(ToolInput):
    first_name: str = Field(..., min_length=1, max_length=200)
    last_name: str = Field(..., min_length=1, max_length=200)


def _person_summary(item: Dict[str, Any]) -> Dict[str, Any]:
    attributes = attrs(item)
    full_name = attributes.get("full_name")
    if not full_name:
        full_name = " ".join(
            part for part in (attributes.get("first_name"), attributes.get("last_name")) if part
        ) or None
    return {
        "id": item.get("id"),
        "full_name": full_name,
        "first_name": attributes.get("first_name"),
        "last_name": attributes.get("last_name"),
    }


@tool("search_people", SearchPeopleInput, title="Search People", read_only=True)
def search_people(client: Art19Client, params: SearchPeopleInput) -> Dict[str, Any]:
    """Find people by name. Use the returned IDs with add_credit."""
    items = paginate(client, "/people", {"filter[name]": params.q})
    return listing("people", [_person_summary(item) for item in items])


@tool("get_person", PersonIdInput, title="Get Person", read_only=True)
def get_person(client: Art19Client, params: PersonIdInput) -> Any:
    """Get full details for one person by ID."""
    return client.get(resource_path("people", params.person_id))


@tool("create_person", CreatePersonInput, title="Create Person")
def create_person(client: Art19Client, params: CreatePersonInput) -> Any:
    """Create a person record so they can be credited on episodes."""
    body = document("people", {"first_name": params.first_name, "last_name": params.last_name})
    return client.post("/people", body)
