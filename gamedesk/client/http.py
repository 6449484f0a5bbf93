"""HTTP/JSON ResourceClient backed by httpx.

Maps the CRUD contract onto the collection endpoints:

    fetch_all   GET     /games
    fetch_one   GET     /games/{id}
    create      POST    /games
    update      PUT     /games/{id}
    delete      DELETE  /games/{id}

No timeout is enforced unless one is configured: a hung request suspends only
the task awaiting it.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any
from urllib.parse import quote

import httpx
import structlog

from gamedesk.client.base import ResourceClient
from gamedesk.errors import NetworkFailure, NotFound, RemoteError
from gamedesk.models.config import RemoteConfig
from gamedesk.models.games import Game
from gamedesk.observability.metrics import remote_requests_total

_log = structlog.get_logger(component="client.http")


class HttpResourceClient(ResourceClient):
    """ResourceClient for a JSON collection served over HTTP.

    Args:
        base_url:   API root, e.g. ``https://example.mockapi.io``.
        collection: Collection path segment. Defaults to ``games``.
        timeout:    Per-request timeout in seconds; None disables it.
        transport:  Optional httpx transport (tests pass ``httpx.MockTransport``).
    """

    def __init__(
        self,
        base_url: str,
        collection: str = "games",
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        if not base_url:
            raise ValueError("Remote base_url must not be empty")
        self._collection_path = f"/{collection.strip('/')}"
        self._client = httpx.AsyncClient(
            base_url=base_url.rstrip("/"),
            timeout=httpx.Timeout(timeout),
            headers={"Content-Type": "application/json"},
            transport=transport,
        )

    @classmethod
    def from_config(cls, config: RemoteConfig) -> HttpResourceClient:
        return cls(
            base_url=config.base_url,
            collection=config.collection,
            timeout=config.timeout_seconds or None,
        )

    async def create(self, record: Mapping[str, object]) -> Game:
        response = await self._request("create", "POST", self._collection_path, json=dict(record))
        return Game.from_payload(_json_object(response))

    async def fetch_all(self) -> list[Game]:
        response = await self._request("fetch_all", "GET", self._collection_path)
        body = _decode(response)
        if not isinstance(body, list):
            raise RemoteError(response.status_code, "expected a JSON array")
        return [Game.from_payload(item) for item in body if isinstance(item, dict)]

    async def fetch_one(self, game_id: str) -> Game:
        response = await self._request("fetch_one", "GET", self._item_path(game_id), game_id=game_id)
        return Game.from_payload(_json_object(response))

    async def update(self, game_id: str, fields: Mapping[str, object]) -> Game:
        response = await self._request("update", "PUT", self._item_path(game_id), json=dict(fields))
        return Game.from_payload(_json_object(response))

    async def delete(self, game_id: str) -> None:
        await self._request("delete", "DELETE", self._item_path(game_id))

    async def close(self) -> None:
        await self._client.aclose()

    def _item_path(self, game_id: str) -> str:
        return f"{self._collection_path}/{quote(game_id, safe='')}"

    async def _request(
        self,
        operation: str,
        method: str,
        path: str,
        json: dict[str, Any] | None = None,
        game_id: str | None = None,
    ) -> httpx.Response:
        """Issue one request and map failures onto the client error taxonomy.

        Only ``fetch_one`` passes *game_id*: a 404 there means the record is
        absent and raises NotFound.  Every other non-2xx raises RemoteError.  Any
        ``httpx.RequestError`` (transport, redirect or body decoding) raises
        NetworkFailure.
        """
        try:
            response = await self._client.request(method, path, json=json)
        except httpx.RequestError as exc:
            remote_requests_total.labels(operation=operation, outcome="failed").inc()
            _log.warning("remote_network_failure", operation=operation, path=path, error=str(exc))
            raise NetworkFailure(f"{method} {path} failed: {exc}") from exc

        if response.is_success:
            remote_requests_total.labels(operation=operation, outcome="success").inc()
            _log.debug("remote_request_ok", operation=operation, path=path, status_code=response.status_code)
            return response

        remote_requests_total.labels(operation=operation, outcome="failed").inc()
        _log.warning(
            "remote_non_2xx_response",
            operation=operation,
            path=path,
            status_code=response.status_code,
            body=response.text[:200],
        )
        if game_id is not None and response.status_code == 404:
            raise NotFound(game_id, status=response.status_code)
        raise RemoteError(response.status_code, response.text[:200])


def _decode(response: httpx.Response) -> Any:
    try:
        return response.json()
    except ValueError as exc:
        raise RemoteError(response.status_code, "response body is not JSON") from exc


def _json_object(response: httpx.Response) -> dict[str, Any]:
    body = _decode(response)
    if not isinstance(body, dict):
        raise RemoteError(response.status_code, "expected a JSON object")
    return body
