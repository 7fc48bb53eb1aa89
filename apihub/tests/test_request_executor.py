"""Unit tests for RequestExecutor."""

import json

import httpx
import pytest

from apihub.core.errors import ConnectionNotFound


class TestExecuteSuccess:
    """Test executing requests against a reachable upstream."""

    @pytest.mark.asyncio
    async def test_builds_url_and_records_history(self, hub, profile_factory):
        """Test URL composition, history entry and usage counters."""
        await hub.connections.add(profile_factory())

        entry = await hub.executor.execute(
            "conn-1",
            method="get",
            endpoint="users/{{user_id}}",
            path_params={"user_id": "a b"},
            query_params={"verbose": True, "page": 2},
        )

        assert entry.status == 200
        assert entry.method == "GET"
        assert entry.endpoint == "/users/a%20b"
        assert entry.url == "https://api.example.com/users/a%20b?verbose=true&page=2"
        assert entry.response_body == {"ok": True}
        assert entry.connection_name == "Example"
        assert entry.connection_color == "#123456"
        assert hub.history.query() == [entry]

        profile = hub.connections.get_by_id("conn-1")
        assert profile.request_count == 1
        assert profile.last_used is not None
        assert hub.topics == ["request:complete"]

    @pytest.mark.asyncio
    async def test_upstream_500_is_data_not_error(self, hub_factory, profile_factory):
        """Test a 500 response resolves to an entry with status 500."""
        hub = hub_factory(lambda request: httpx.Response(500, json={"error": "boom"}))
        await hub.connections.add(profile_factory())

        entry = await hub.executor.execute("conn-1", endpoint="/fail")

        assert entry.status == 500
        assert entry.response_body == {"error": "boom"}
        assert hub.topics == ["request:complete"]

    @pytest.mark.asyncio
    async def test_malformed_json_falls_back_to_text(self, hub_factory, profile_factory):
        """Test a declared JSON body that does not parse is kept as text."""
        hub = hub_factory(
            lambda request: httpx.Response(
                200, content=b"not json", headers={"Content-Type": "application/json"}
            )
        )
        await hub.connections.add(profile_factory())

        entry = await hub.executor.execute("conn-1", endpoint="/x")

        assert entry.response_body == "not json"
        assert entry.response_type == "application/json"


class TestHeadersAndBody:
    """Test header layering and body handling."""

    @pytest.mark.asyncio
    async def test_header_precedence_and_auth_last(self, hub, profile_factory):
        """Test extra < connection < caller headers, with auth authoritative."""
        await hub.connections.add(
            profile_factory(
                auth_type="bearer",
                auth_param="Authorization",
                auth_value="tok",
                extra_headers={"X-Layer": "extra", "Accept": "text/plain"},
                headers={"X-Layer": "connection", "X-Conn": "1"},
            )
        )

        await hub.executor.execute(
            "conn-1",
            endpoint="/x",
            custom_headers={"X-Layer": "caller", "authorization": "Bearer caller"},
        )

        sent = hub.transport.requests[0].headers
        assert sent["X-Layer"] == "caller"
        assert sent["X-Conn"] == "1"
        assert sent["Accept"] == "text/plain"
        assert sent.get_list("Authorization") == ["Bearer tok"]

    @pytest.mark.asyncio
    async def test_header_layers_match_names_case_insensitively(self, hub, profile_factory):
        """Test a caller header replaces a profile header differing only in case."""
        await hub.connections.add(profile_factory(extra_headers={"accept": "text/plain"}))

        await hub.executor.execute(
            "conn-1", endpoint="/x", custom_headers={"Accept": "application/json"}
        )

        sent = hub.transport.requests[0].headers
        assert sent.get_list("Accept") == ["application/json"]

    @pytest.mark.asyncio
    async def test_post_body_json_encoded_with_default_content_type(self, hub, profile_factory):
        """Test dict bodies are JSON-encoded and Content-Type defaults to JSON."""
        await hub.connections.add(profile_factory())

        entry = await hub.executor.execute("conn-1", method="POST", endpoint="/items", body={"a": 1})

        sent = hub.transport.requests[0]
        assert json.loads(sent.content) == {"a": 1}
        assert sent.headers["Content-Type"] == "application/json"
        assert entry.request_body == {"a": 1}

    @pytest.mark.asyncio
    async def test_string_body_passed_through_and_content_type_kept(self, hub, profile_factory):
        """Test string bodies are sent verbatim and caller Content-Type is respected."""
        await hub.connections.add(profile_factory())

        await hub.executor.execute(
            "conn-1",
            method="PUT",
            endpoint="/raw",
            body="a=1&b=2",
            custom_headers={"content-type": "application/x-www-form-urlencoded"},
        )

        sent = hub.transport.requests[0]
        assert sent.content == b"a=1&b=2"
        assert sent.headers.get_list("Content-Type") == ["application/x-www-form-urlencoded"]

    @pytest.mark.asyncio
    async def test_get_never_sends_body(self, hub, profile_factory):
        """Test GET/HEAD skip the body even when one is supplied."""
        await hub.connections.add(profile_factory())

        entry = await hub.executor.execute("conn-1", method="GET", endpoint="/x", body={"a": 1})

        assert hub.transport.requests[0].content == b""
        assert entry.request_body == {"a": 1}

    @pytest.mark.asyncio
    async def test_query_auth_wins_over_caller_param(self, hub, profile_factory):
        """Test the injected auth query value replaces a caller value with the same key."""
        await hub.connections.add(
            profile_factory(auth_type="apikey", auth_param="key", auth_in="query", auth_value="secret")
        )

        await hub.executor.execute("conn-1", endpoint="/x", query_params={"key": "mine", "q": "1"})

        params = hub.transport.requests[0].url.params
        assert params.get_list("key") == ["secret"]
        assert params["q"] == "1"


class TestExecuteFailures:
    """Test failure handling."""

    @pytest.mark.asyncio
    async def test_unknown_connection_raises_without_history(self, hub):
        """Test ConnectionNotFound is raised and nothing is sent or recorded."""
        with pytest.raises(ConnectionNotFound):
            await hub.executor.execute("missing", endpoint="/x")

        assert hub.history.query() == []
        assert hub.transport.requests == []
        assert hub.published == []

    @pytest.mark.asyncio
    async def test_transport_failure_resolves_to_status_zero(self, hub_factory, profile_factory):
        """Test network errors become a failure-shaped entry instead of raising."""

        def refuse(request):
            raise httpx.ConnectError("Connection refused", request=request)

        hub = hub_factory(refuse)
        await hub.connections.add(profile_factory())

        entry = await hub.executor.execute("conn-1", endpoint="/x")

        assert entry.status == 0
        assert entry.status_text == "Network Error"
        assert entry.response_body == "Connection refused"
        assert entry.response_type == "error"
        assert hub.history.query() == [entry]
        assert hub.connections.get_by_id("conn-1").request_count == 1
        assert hub.topics == ["request:error"]

    @pytest.mark.asyncio
    async def test_unencodable_header_resolves_to_status_zero(self, hub, profile_factory):
        """Test a header value httpx cannot encode becomes a failure entry."""
        await hub.connections.add(
            profile_factory(auth_type="apikey", auth_param="X-Key", auth_value="clé")
        )

        entry = await hub.executor.execute("conn-1", endpoint="/x")

        assert entry.status == 0
        assert entry.status_text == "Network Error"
        assert entry.response_type == "error"
        assert hub.transport.requests == []
        assert hub.history.query() == [entry]
        assert hub.connections.get_by_id("conn-1").request_count == 1
        assert hub.topics == ["request:error"]
