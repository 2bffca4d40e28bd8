# src/caldo/storage/api_client.py

from __future__ import annotations

import logging
from typing import Any

import httpx

from ..board.models import Task, tasks_from_payload, tasks_to_payload
from .errors import StorageError

logger = logging.getLogger(__name__)


class HttpTaskApi:
    """
    Client for the date-keyed task server.

    Endpoints (whole-list, JSON):
    - GET    {base_url}/tasks/{yy-mm-dd} -> [Task, ...]
    - POST   {base_url}/tasks/{yy-mm-dd} <- [Task, ...]
    - DELETE {base_url}/tasks/{yy-mm-dd}

    The client is created lazily and reused; no retries are attempted, a
    failed request raises StorageError and the caller decides the fallback.
    """

    def __init__(
        self,
        base_url: str = "http://localhost:3111",
        *,
        timeout_seconds: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._timeout = httpx.Timeout(timeout_seconds, connect=min(5.0, timeout_seconds))
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    @property
    def base_url(self) -> str:
        return self._base_url

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self._base_url,
                timeout=self._timeout,
                transport=self._transport,
            )
        return self._client

    async def _request(self, method: str, date_key: str, *, json_body: Any = None) -> httpx.Response:
        path = f"/tasks/{date_key}"
        try:
            resp = await self._get_client().request(method, path, json=json_body)
            resp.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise StorageError(
                f"{method} {path} failed with HTTP {e.response.status_code}", date_key=date_key
            ) from e
        except httpx.HTTPError as e:
            raise StorageError(f"{method} {path} failed: {e.__class__.__name__}: {e}", date_key=date_key) from e
        return resp

    async def load(self, date_key: str) -> list[Task]:
        resp = await self._request("GET", date_key)
        try:
            payload = resp.json()
        except ValueError as e:
            raise StorageError(f"GET /tasks/{date_key} returned invalid JSON", date_key=date_key) from e
        if not isinstance(payload, list):
            logger.warning("GET /tasks/%s returned %s, expected a list", date_key, type(payload).__name__)
            return []
        return tasks_from_payload(payload)

    async def save(self, date_key: str, tasks: list[Task]) -> None:
        await self._request("POST", date_key, json_body=tasks_to_payload(tasks))
        logger.debug("Posted %d tasks for %s", len(tasks), date_key)

    async def clear(self, date_key: str) -> None:
        await self._request("DELETE", date_key)
        logger.debug("Deleted tasks for %s", date_key)

    async def aclose(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None
