from __future__ import annotations

from typing import Any, Dict, List, Optional

from .art19 import Art19Client

DEFAULT_PAGE_SIZE = 100
MAX_PAGES = 20


def paginate(
    client: Art19Client,
    path: str,
    params: Optional[Dict[str, Any]] = None,
    *,
    page_size: int = DEFAULT_PAGE_SIZE,
    max_pages: int = MAX_PAGES,
) -> List[Dict[str, Any]]:
    """Collect ``data`` items across pages of a JSON:API collection.

    Stops on a missing ``links.next``, an empty page, or after ``max_pages``
    requests. An error on any page propagates and the partial items are dropped.
    """
    items: List[Dict[str, Any]] = []
    for page in range(1, max_pages + 1):
        query = dict(params or {})
        query["page[number]"] = page
        query["page[size]"] = page_size
        response = client.request("GET", path, params=query)
        data = response.data.get("data") if isinstance(response.data, dict) else None
        if not data:
            break
        items.extend(data)
        if not response.next_link:
            break
    return items
