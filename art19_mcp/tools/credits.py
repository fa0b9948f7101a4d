from __future__ import annotations

from typing import Any, Dict

from pydantic import Field

from ..common.art19 import Art19Client
from ..common.pagination import paginate
from .aliases import canonical_credit_role
from .base import ToolInput, attrs, document, listing, related_id, relationship, resource_path
from .registry import tool

ROLE_HELP = "Credit type, e.g. HostCredit, CoHostCredit, GuestCredit (or host, cohost, guest, producer)"


class ListCreditsInput(ToolInput):
    episode_id: str = Field(..., description="ART19 episode ID", min_length=1)


class AddCreditInput(ToolInput):
    episode_id: str = Field(..., description="ART19 episode ID", min_length=1)
    person_id: str = Field(..., description="ART19 person ID", min_length=1)
    role: str = Field(..., description=ROLE_HELP, min_length=1)


class UpdateCreditInput(ToolInput):
    credit_id: str = Field(..., description="ART19 credit ID", min_length=1)
    role: str = Field(..., description=ROLE_HELP, min_length=1)


class CreditIdInput(ToolInput):
    credit_id: str = Field(..., description="ART19 credit ID", min_length=1)


def _credit_summary(item: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "id": item.get("id"),
        "role": attrs(item).get("type"),
        "person_id": related_id(item, "person"),
    }


@tool("list_credits", ListCreditsInput, title="List Episode Credits", read_only=True)
def list_credits(client: Art19Client, params: ListCreditsInput) -> Dict[str, Any]:
    """List the people credited on an episode with their role."""
    items = paginate(
        client,
        "/credits",
        {"filter[creditable_id]": params.episode_id, "filter[creditable_type]": "Episode"},
    )
    return listing("credits", [_credit_summary(item) for item in items])


@tool("add_credit", AddCreditInput, title="Add Episode Credit")
def add_credit(client: Art19Client, params: AddCreditInput) -> Any:
    """Credit a person on an episode (host, co-host, guest, producer...)."""
    body = document(
        "credits",
        {"type": canonical_credit_role(params.role)},
        {
            "creditable": relationship("episodes", params.episode_id),
            "person": relationship("people", params.person_id),
        },
    )
    return client.post("/credits", body)


@tool("update_credit", UpdateCreditInput, title="Update Episode Credit", idempotent=True)
def update_credit(client: Art19Client, params: UpdateCreditInput) -> Any:
    """Change the role of an existing credit."""
    body = document(
        "credits",
        {"type": canonical_credit_role(params.role)},
        resource_id=params.credit_id,
    )
    return client.patch(resource_path("credits", params.credit_id), body)


@tool("remove_credit", CreditIdInput, title="Remove Episode Credit", destructive=True, idempotent=True)
def remove_credit(client: Art19Client, params: CreditIdInput) -> Dict[str, Any]:
    """Remove a credit from its episode."""
    client.delete(resource_path("credits", params.credit_id))
    return {"removed": params.credit_id}
