from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Optional

import httpx

from .api import MCPHTTPError
from .config import DEFAULT_BASE_URL, DEFAULT_TIMEOUT, Art19ConfigError, Settings

JSONAPI_MEDIA_TYPE = "application/vnd.api+json"


class Art19APIError(MCPHTTPError):
    """An upstream failure: a 4xx/5xx answer or a transport error (``status_code`` is None)."""


@dataclass(frozen=True)
class Art19Response:
    data: Any
    status_code: int
    next_link: Optional[str] = None


class Art19Client:
    """Thin wrapper around the ART19 JSON:API content API."""

    def __init__(
        self,
        *,
        token: Optional[str],
        credential: Optional[str],
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = DEFAULT_TIMEOUT,
    ) -> None:
        if not (token and credential):
            raise Art19ConfigError(
                "Missing ART19 credentials (set ART19_API_TOKEN and ART19_API_CREDENTIAL "
                "or write ~/.config/art19/config.yaml)",
                status_code=None,
            )
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.headers = {
            "Authorization": f'Token token="{token}", credential="{credential}"',
            "Accept": JSONAPI_MEDIA_TYPE,
        }

    @classmethod
    def from_settings(cls, settings: Settings) -> "Art19Client":
        return cls(
            token=settings.api_token,
            credential=settings.api_credential,
            base_url=settings.base_url,
            timeout=settings.timeout,
        )

    def request(
        self,
        method: str,
        path: str,
        *,
        params: Optional[Dict[str, Any]] = None,
        body: Optional[Dict[str, Any]] = None,
    ) -> Art19Response:
        url = f"{self.base_url}/{path.lstrip('/')}"
        headers = dict(self.headers)
        kwargs: Dict[str, Any] = {}
        if body is not None:
            headers["Content-Type"] = JSONAPI_MEDIA_TYPE
            kwargs["json"] = body
        try:
            response = httpx.request(
                method,
                url,
                headers=headers,
                params=params or {},
                timeout=self.timeout,
                **kwargs,
            )
        except httpx.HTTPError as exc:
            raise Art19APIError(f"{method} {path} failed: {exc}", status_code=None) from exc

        payload = _parse_body(response)
        if response.status_code >= 400:
            raise Art19APIError(
                _error_message(response.status_code, payload),
                status_code=response.status_code,
                payload=payload,
            )
        if isinstance(payload, str):
            raise Art19APIError(
                f"{method} {path} returned a non-JSON body",
                status_code=response.status_code,
                payload=payload[:500],
            )
        next_link = None
        if isinstance(payload, dict):
            next_link = (payload.get("links") or {}).get("next") or None
        return Art19Response(data=payload, status_code=response.status_code, next_link=next_link)

    def get(self, path: str, *, params: Optional[Dict[str, Any]] = None) -> Any:
        return self.request("GET", path, params=params).data

    def post(self, path: str, body: Dict[str, Any]) -> Any:
        return self.request("POST", path, body=body).data

    def patch(self, path: str, body: Dict[str, Any]) -> Any:
        return self.request("PATCH", path, body=body).data

    def delete(self, path: str) -> Any:
        return self.request("DELETE", path).data


def _parse_body(response: httpx.Response) -> Any:
    if not response.text.strip():
        return {}
    try:
        return response.json()
    except ValueError:
        return response.text


def _error_message(status: int, payload: Any) -> str:
    """Build a readable message from a JSON:API ``errors`` array."""
    parts: List[str] = []
    errors = payload.get("errors") if isinstance(payload, dict) else None
    for error in errors or []:
        if not isinstance(error, dict):
            continue
        detail = str(error.get("detail") or error.get("title") or "")
        source = error.get("source")
        parameter = None
        if isinstance(source, dict):
            parameter = source.get("parameter") or source.get("pointer")
        labels = [str(error["code"])] if error.get("code") else []
        if parameter:
            labels.append(f"[{parameter}]")
        prefix = " ".join(labels)
        if prefix and detail:
            parts.append(f"{prefix}: {detail}")
        elif prefix or detail:
            parts.append(prefix or detail)
    if not parts:
        if isinstance(payload, str) and payload.strip():
            parts.append(payload.strip()[:500])
        elif isinstance(payload, dict) and payload.get("error"):
            parts.append(str(payload["error"]))
        else:
            parts.append("no error details")
    return f"ART19 API returned {status}: {'; '.join(parts)}"
