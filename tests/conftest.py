"""
Shared fixtures: an in-process ART19 API simulator and an MCP test client.
"""
import json
import os
import re
import sys
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

import httpx
import pytest
from fastapi.testclient import TestClient

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from art19_mcp.common.art19 import Art19Client
from art19_mcp.common.config import Settings
from art19_mcp.common.sessions import SessionStore
from art19_mcp.main import create_app

BASE_URL = "https://art19.test"

FIXTURE_DATA: Dict[str, List[Dict[str, Any]]] = {
    "series": [
        {"id": "s-001", "type": "series",
         "attributes": {"title": "Linux Unplugged", "slug": "linux-unplugged", "status": "active"}},
        {"id": "s-002", "type": "series",
         "attributes": {"title": "Coder Radio", "slug": "coder-radio", "status": "active"}},
    ],
    "seasons": [
        {"id": "sn-001", "type": "seasons", "attributes": {"title": "Season 24", "number": 24},
         "relationships": {"series": {"data": {"id": "s-001", "type": "series"}}}},
    ],
    "episodes": [
        {"id": "ep-001", "type": "episodes",
         "attributes": {"title": "Episode 600", "status": "published", "published": True,
                        "released_at": "2026-01-01T12:00:00Z", "duration": 3600},
         "relationships": {"series": {"data": {"id": "s-001", "type": "series"}}}},
        {"id": "ep-002", "type": "episodes",
         "attributes": {"title": "Episode 599", "status": "draft", "published": False,
                        "released_at": None, "duration": 2400},
         "relationships": {"series": {"data": {"id": "s-001", "type": "series"}}}},
    ],
    "credits": [
        {"id": "cr-001", "type": "credits", "attributes": {"type": "HostCredit"},
         "relationships": {"creditable": {"data": {"id": "ep-001", "type": "episodes"}},
                           "person": {"data": {"id": "p-001", "type": "people"}}}},
    ],
    "people": [
        {"id": "p-001", "type": "people",
         "attributes": {"first_name": "Chris", "last_name": "Fisher", "full_name": "Chris Fisher"}},
        {"id": "p-002", "type": "people",
         "attributes": {"first_name": "Wes", "last_name": "Payne", "full_name": "Wes Payne"}},
    ],
    "episode_versions": [
        {"id": "v-001", "type": "episode_versions",
         "attributes": {"processing_status": "complete",
                        "source_url": "https://cdn.example.com/ep600.mp3",
                        "created_at": "2026-01-01T10:00:00Z"},
         "relationships": {"episode": {"data": {"id": "ep-001", "type": "episodes"}}}},
    ],
    "marker_points": [
        {"id": "mp-001", "type": "marker_points",
         "attributes": {"position_type": 0, "position_type_name": "preroll", "start_position": None}},
    ],
    "images": [
        {"id": "img-001", "type": "images",
         "attributes": {"status": "processed", "source_url": "https://cdn.example.com/cover.jpg"}},
    ],
    "media_assets": [
        {"id": "ma-001", "type": "media_assets",
         "attributes": {"content_type": "audio/mpeg", "file_name": "episode.mp3",
                        "file_size": 52428800, "duration_in_ms": 3600500,
                        "url": "https://cdn.art19.com/episodes/ep-001/episode.mp3",
                        "asset_type": "original"},
         "relationships": {"episode_version": {"data": {"id": "v-001", "type": "episode_versions"}}}},
    ],
    "feed_items": [
        {"id": "fi-001", "type": "feed_items",
         "attributes": {"title": "Bonus Episode", "status": "draft", "published": False,
                        "itunes_type": "bonus",
                        "enclosure_url": "https://rss.art19.com/episodes/bonus-episode.mp3"},
         "relationships": {"episode": {"data": {"id": "ep-001", "type": "episodes"}},
                           "series": {"data": {"id": "s-001", "type": "series"}},
                           "feed": {"data": {"id": "f-001", "type": "feeds"}}}},
        {"id": "fi-002", "type": "feed_items",
         "attributes": {"title": "Main Feed Item", "status": "published", "published": True,
                        "itunes_type": "full",
                        "enclosure_url": "https://rss.art19.com/episodes/main-episode.mp3"},
         "relationships": {"episode": {"data": {"id": "ep-002", "type": "episodes"}},
                           "series": {"data": {"id": "s-001", "type": "series"}},
                           "feed": {"data": {"id": "f-001", "type": "feeds"}}}},
    ],
}

CREATED_IDS = {
    "episodes": "ep-new",
    "credits": "cr-new",
    "people": "p-new",
    "episode_versions": "v-new",
    "marker_points": "mp-new",
    "images": "img-new",
    "feed_items": "fi-new",
}

CREATED_DEFAULTS = {
    "episodes": {"status": "draft", "published": False},
    "episode_versions": {"processing_status": "draft"},
    "images": {"status": "uploaded"},
    "feed_items": {"status": "draft", "published": False},
}

LIST_FILTERS = {
    "series": {"filter[slug]": ("attributes", "slug")},
    "seasons": {"filter[series_id]": ("relationships", "series")},
    "episodes": {
        "filter[series_id]": ("relationships", "series"),
        "filter[season_id]": ("relationships", "season"),
    },
    "credits": {"filter[creditable_id]": ("relationships", "creditable")},
    "episode_versions": {"filter[episode_id]": ("relationships", "episode")},
    "media_assets": {"attachment_id": ("relationships", "episode_version")},
    "feed_items": {
        "episode_id": ("relationships", "episode"),
        "series_id": ("relationships", "series"),
        "feed_id": ("relationships", "feed"),
    },
}

NOT_FOUND = {
    "series": "Series not found",
    "seasons": "Season not found",
    "episodes": "Episode not found",
    "people": "Person not found",
    "episode_versions": "Version not found",
    "feed_items": "Feed item not found",
}


@dataclass
class RecordedRequest:
    method: str
    path: str
    params: Dict[str, Any]
    body: Optional[Dict[str, Any]]
    headers: Dict[str, str] = field(default_factory=dict)


def jsonapi_error(status: int, detail: str) -> Dict[str, Any]:
    return {"errors": [{"status": str(status), "detail": detail}]}


class FakeArt19:
    """Stand-in for ``httpx.request`` that behaves like the ART19 JSON:API."""

    def __init__(self) -> None:
        self.requests: List[RecordedRequest] = []
        self.overrides: Dict[tuple, Any] = {}

    def __call__(self, method, url, *, headers=None, params=None, json=None, timeout=None, **kwargs):
        request = httpx.Request(method, url)
        path = request.url.path
        self.requests.append(RecordedRequest(method, path, dict(params or {}), json, dict(headers or {})))

        override = self.overrides.get((method, path))
        if isinstance(override, Exception):
            raise override
        if callable(override):
            status, payload = override(dict(params or {}))
        elif override is not None:
            status, payload = override
        else:
            status, payload = self.respond(method, path, dict(params or {}), json)

        if payload is None:
            return httpx.Response(status, request=request)
        if isinstance(payload, str):
            return httpx.Response(status, text=payload, request=request)
        return httpx.Response(status, json=payload, request=request)

    def last(self, method: str, path_prefix: str = "") -> Optional[RecordedRequest]:
        matches = [r for r in self.requests if r.method == method and r.path.startswith(path_prefix)]
        return matches[-1] if matches else None

    def respond(self, method: str, path: str, params: Dict[str, Any], body: Optional[Dict[str, Any]]):
        parts = [p for p in path.split("/") if p]
        if not parts or parts[0] not in FIXTURE_DATA and parts[0] not in CREATED_IDS:
            return 404, jsonapi_error(404, f"Unknown path: {path}")
        collection = parts[0]
        items = FIXTURE_DATA.get(collection, [])

        if method == "GET" and len(parts) == 3 and parts[2] in ("next_sibling", "previous_sibling"):
            word = "after" if parts[2] == "next_sibling" else "before"
            sibling_id = "ep-next" if word == "after" else "ep-prev"
            return 200, {"data": {"id": sibling_id, "type": "episodes",
                                  "attributes": {"title": f"Episode {word} {parts[1]}", "status": "draft"}}}

        if method == "GET" and len(parts) == 2:
            item = next((i for i in items if i["id"] == parts[1]), None)
            if item is None:
                return 404, jsonapi_error(404, NOT_FOUND.get(collection, "Not found"))
            return 200, {"data": item}

        if method == "GET":
            return 200, {"data": self._filter(collection, items, params), "links": {"next": None}}

        if method == "POST":
            data = (body or {}).get("data", {})
            attributes = dict(CREATED_DEFAULTS.get(collection, {}))
            attributes.update(data.get("attributes") or {})
            if collection == "people":
                attributes["full_name"] = f"{attributes.get('first_name')} {attributes.get('last_name')}"
            created = {"id": CREATED_IDS[collection], "type": collection, "attributes": attributes}
            if data.get("relationships"):
                created["relationships"] = data["relationships"]
            return 201, {"data": created}

        if method == "PATCH" and len(parts) == 2:
            base = next((i for i in items if i["id"] == parts[1]), None)
            attributes = dict((base or {}).get("attributes") or {})
            attributes.update(((body or {}).get("data") or {}).get("attributes") or {})
            return 200, {"data": {"id": parts[1], "type": collection, "attributes": attributes}}

        if method == "DELETE" and len(parts) == 2:
            return 204, None

        return 405, jsonapi_error(405, "Method not allowed")

    @staticmethod
    def _filter(collection: str, items: List[Dict[str, Any]], params: Dict[str, Any]):
        if collection == "people" and params.get("filter[name]"):
            needle = str(params["filter[name]"]).lower()
            return [i for i in items if needle in (i["attributes"].get("full_name") or "").lower()]
        for param, (section, key) in LIST_FILTERS.get(collection, {}).items():
            wanted = params.get(param)
            if wanted is None:
                continue
            if section == "attributes":
                items = [i for i in items if i["attributes"].get(key) == wanted]
            else:
                items = [
                    i for i in items
                    if ((i.get("relationships") or {}).get(key) or {}).get("data", {}).get("id") == wanted
                ]
        return items


@pytest.fixture
def fake_api(monkeypatch):
    fake = FakeArt19()
    monkeypatch.setattr("art19_mcp.common.art19.httpx.request", fake)
    return fake


@pytest.fixture
def settings():
    return Settings(api_token="test-token", api_credential="test-cred", base_url=BASE_URL)


@pytest.fixture
def art19_client(settings):
    return Art19Client.from_settings(settings)


@pytest.fixture
def sessions():
    return SessionStore()


@pytest.fixture
def client(settings, art19_client, sessions, fake_api):
    app = create_app(settings, client=art19_client, sessions=sessions)
    with TestClient(app) as test_client:
        yield test_client


def initialize(client, protocol_version="2025-03-26"):
    return client.post(
        "/mcp",
        json={
            "jsonrpc": "2.0",
            "id": "init",
            "method": "initialize",
            "params": {
                "protocolVersion": protocol_version,
                "capabilities": {},
                "clientInfo": {"name": "test", "version": "0"},
            },
        },
    )


@pytest.fixture
def session_id(client):
    response = initialize(client)
    sid = response.headers["mcp-session-id"]
    client.post(
        "/mcp",
        headers={"Mcp-Session-Id": sid},
        json={"jsonrpc": "2.0", "method": "notifications/initialized", "params": {}},
    )
    return sid


@pytest.fixture
def rpc(client, session_id):
    """Send a JSON-RPC request on the test session and return the parsed body."""

    def _rpc(method, params=None):
        response = client.post(
            "/mcp",
            headers={"Mcp-Session-Id": session_id},
            json={"jsonrpc": "2.0", "id": "req-1", "method": method, "params": params or {}},
        )
        return response.json()

    return _rpc


@pytest.fixture
def call_tool(rpc):
    def _call(name, arguments=None):
        return rpc("tools/call", {"name": name, "arguments": arguments or {}})

    return _call


def tool_result(body):
    """Text content of a tools/call response, parsed as JSON when possible."""
    text = body["result"]["content"][0]["text"]
    try:
        return json.loads(text)
    except ValueError:
        return text


def tool_error(body):
    return body["result"]["isError"] is True
