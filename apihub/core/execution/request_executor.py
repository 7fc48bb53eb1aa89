"""Request executor for the API hub.

Turns a stored connection profile plus a method, endpoint and body into a
fully authenticated outbound HTTP call and records the outcome.
"""

import json
import time
import uuid
from typing import Any, Dict, Optional
from urllib.parse import urlencode

import httpx

from apihub.core.errors import ConnectionNotFound
from apihub.core.events import REQUEST_COMPLETE, REQUEST_ERROR, EventBus
from apihub.core.execution.auth_resolver import AuthResolver, has_header, set_header
from apihub.core.execution.outcome import (
    TRANSPORT_FAILURE_STATUS,
    TRANSPORT_FAILURE_TEXT,
    classify,
)
from apihub.core.execution.template_filler import TemplateFiller, stringify
from apihub.core.logging import logger
from apihub.infrastructure.storage.models import ConnectionProfile, HistoryEntry
from apihub.infrastructure.storage.repositories import ConnectionRepository, HistoryRepository
from apihub.utils.scheduling import format_timestamp, utc_now

BODYLESS_METHODS = ("GET", "HEAD")


def build_url(base_url: str, endpoint: str, query: Dict[str, str]) -> str:
    """Join base URL and endpoint, appending the query string if any."""
    path = endpoint if endpoint.startswith("/") else f"/{endpoint}"
    url = base_url.rstrip("/") + path
    if query:
        url += ("&" if "?" in url else "?") + urlencode(query)
    return url


def decode_body(response: httpx.Response) -> Any:
    """Parse JSON bodies when the content type says so, falling back to text."""
    content_type = response.headers.get("content-type", "")
    if "json" in content_type.lower():
        try:
            return response.json()
        except ValueError:
            return response.text
    return response.text


def merge_headers(profile: ConnectionProfile, custom_headers: Optional[Dict[str, Any]]) -> Dict[str, str]:
    """Layer static, per-connection and caller headers.

    Later layers win, matching header names case-insensitively.
    """
    headers: Dict[str, str] = {}
    for layer in (profile.extra_headers, profile.headers, custom_headers):
        for name, value in (layer or {}).items():
            set_header(headers, name, stringify(value))
    return headers


class RequestExecutor:
    """Executes requests against stored connection profiles.

    Only an unknown connection id raises. Transport failures, non-2xx statuses
    and undecodable bodies all resolve to a HistoryEntry the caller inspects.
    Outbound calls run concurrently; only the bookkeeping writes serialize.
    """

    def __init__(
        self,
        connections: ConnectionRepository,
        history: HistoryRepository,
        events: Optional[EventBus] = None,
        http_client: Optional[httpx.AsyncClient] = None,
        timeout: Optional[float] = None,
    ):
        self.connections = connections
        self.history = history
        self.events = events or EventBus()
        self._client = http_client
        self._owns_client = http_client is None
        self._timeout = timeout

    @property
    def client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=httpx.Timeout(self._timeout))
        return self._client

    async def aclose(self) -> None:
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None

    async def execute(
        self,
        connection_id: str,
        method: str = "GET",
        endpoint: str = "",
        body: Any = None,
        query_params: Optional[Dict[str, Any]] = None,
        path_params: Optional[Dict[str, Any]] = None,
        custom_headers: Optional[Dict[str, Any]] = None,
    ) -> HistoryEntry:
        """Execute one request through a connection profile.

        Args:
            connection_id: Connection profile id
            method: HTTP method (case-insensitive)
            endpoint: Path template relative to the profile's base URL
            body: String sent verbatim, anything else JSON-encoded. Not sent for GET/HEAD.
            query_params: Query parameters (auth query injection wins on conflicts)
            path_params: Values for {{name}} placeholders in the endpoint
            custom_headers: Caller headers layered over the profile's headers

        Returns:
            HistoryEntry describing the outcome (status 0 on transport failure)

        Raises:
            ConnectionNotFound: If no profile has this id. Nothing is sent or recorded.
        """
        profile = self.connections.get_by_id(connection_id)
        if profile is None:
            raise ConnectionNotFound(connection_id)

        method = (method or "GET").upper()
        resolved_endpoint = TemplateFiller.fill_path(endpoint or "", path_params)
        if not resolved_endpoint.startswith("/"):
            resolved_endpoint = f"/{resolved_endpoint}"

        query = {name: stringify(value) for name, value in (query_params or {}).items()}
        headers = merge_headers(profile, custom_headers)

        artifact = AuthResolver.resolve(profile)
        if artifact is not None and artifact.location == "query" and artifact.name in query:
            logger.info(
                "auth_query_param_overridden",
                connection_id=profile.id,
                param=artifact.name,
            )
        AuthResolver.apply(profile, headers, query)

        has_body = body is not None and body != ""
        if has_body and not has_header(headers, "Content-Type"):
            headers["Content-Type"] = "application/json"

        content = None
        if has_body and method not in BODYLESS_METHODS:
            content = body if isinstance(body, str) else json.dumps(body)

        url = build_url(profile.base_url, resolved_endpoint, query)
        request_body = body if has_body else None

        start_time = time.perf_counter()
        try:
            request = self.client.build_request(method, url, headers=headers, content=content)
            response = await self.client.send(request)
        except (httpx.HTTPError, httpx.InvalidURL, ValueError) as e:
            # ValueError covers header values httpx cannot encode
            elapsed = int((time.perf_counter() - start_time) * 1000)
            entry = HistoryEntry(
                id=str(uuid.uuid4()),
                connection_id=profile.id,
                connection_name=profile.name,
                connection_color=profile.color,
                method=method,
                url=url,
                endpoint=resolved_endpoint,
                status=TRANSPORT_FAILURE_STATUS,
                status_text=TRANSPORT_FAILURE_TEXT,
                elapsed=elapsed,
                response_body=str(e) or type(e).__name__,
                response_type="error",
                request_body=request_body,
                timestamp=format_timestamp(utc_now()),
            )
            logger.warning(
                "request_transport_failed",
                connection_id=profile.id,
                method=method,
                endpoint=resolved_endpoint,
                error_type=type(e).__name__,
                error=entry.response_body,
                elapsed_ms=elapsed,
            )
            await self._record(profile, entry, REQUEST_ERROR)
            return entry

        elapsed = int((time.perf_counter() - start_time) * 1000)
        entry = HistoryEntry(
            id=str(uuid.uuid4()),
            connection_id=profile.id,
            connection_name=profile.name,
            connection_color=profile.color,
            method=method,
            url=url,
            endpoint=resolved_endpoint,
            status=response.status_code,
            status_text=response.reason_phrase,
            elapsed=elapsed,
            response_headers=dict(response.headers),
            response_body=decode_body(response),
            response_type=response.headers.get("content-type", ""),
            request_body=request_body,
            timestamp=format_timestamp(utc_now()),
        )
        logger.info(
            "request_executed",
            connection_id=profile.id,
            method=method,
            endpoint=resolved_endpoint,
            status=entry.status,
            outcome=classify(entry).value,
            elapsed_ms=elapsed,
        )
        await self._record(profile, entry, REQUEST_COMPLETE)
        return entry

    async def _record(self, profile: ConnectionProfile, entry: HistoryEntry, topic: str) -> None:
        await self.history.prepend(entry)
        await self.connections.record_usage(profile.id, utc_now())
        self.events.publish(topic, entry.to_dict())
