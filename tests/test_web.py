"""
Tests for the HTTP status service.
"""
import logging

import pytest


@pytest.mark.asyncio
class TestStatus:

    async def test_returns_ok(self, client):
        response = await client.get("/status")

        assert response.status == 200
        assert response.content_type == "application/json"
        assert await response.json() == {"ok": True}

    async def test_accepts_trailing_slash(self, client):
        response = await client.get("/status/")

        assert response.status == 200
        assert await response.json() == {"ok": True}

    async def test_is_stateless(self, client):
        await client.get("/missing")
        await client.post("/status", json={"foo": "bar"})

        response = await client.get("/status")

        assert response.status == 200
        assert await response.json() == {"ok": True}


@pytest.mark.asyncio
class TestUnknownRoutes:

    @pytest.mark.parametrize(
        "method, path",
        [
            ("GET", "/nonexistent"),
            ("POST", "/nonexistent"),
            ("DELETE", "/status/extra"),
            ("PUT", "/status"),
            ("PATCH", "/"),
        ],
    )
    async def test_returns_json_404(self, client, method, path):
        response = await client.request(method, path)

        assert response.status == 404
        assert response.content_type == "application/json"
        assert await response.json() == {
            "success": False,
            "error": {"code": "NOT_FOUND", "message": f"Route {method} {path} not found"},
        }

    async def test_post_with_json_body(self, client):
        response = await client.post("/nonexistent", json={"foo": "bar"})

        body = await response.json()
        assert response.status == 404
        assert body["error"]["code"] == "NOT_FOUND"

    async def test_message_keeps_percent_encoding(self, client):
        response = await client.get("/foo%20bar")

        body = await response.json()
        assert response.status == 404
        assert body["error"]["message"] == "Route GET /foo%20bar not found"

    async def test_status_match_is_case_sensitive(self, client):
        response = await client.get("/STATUS")

        assert response.status == 404

    async def test_message_excludes_query_string(self, client):
        response = await client.get("/nope", params={"a": "1"})

        body = await response.json()
        assert body["error"]["message"] == "Route GET /nope not found"


@pytest.mark.asyncio
class TestContentTypeWarnings:

    async def test_warns_on_non_json_post(self, client, caplog):
        with caplog.at_level(logging.WARNING, logger="mc-body.test.web"):
            response = await client.post(
                "/nonexistent", data="hello", headers={"Content-Type": "text/plain"}
            )

        assert response.status == 404
        assert "Unexpected Content-Type: text/plain" in caplog.text

    async def test_no_warning_for_json(self, client, caplog):
        with caplog.at_level(logging.WARNING, logger="mc-body.test.web"):
            await client.put("/nonexistent", json={"foo": "bar"})

        assert caplog.records == []

    async def test_no_warning_for_get(self, client, caplog):
        with caplog.at_level(logging.WARNING, logger="mc-body.test.web"):
            await client.get("/status", headers={"Content-Type": "text/plain"})

        assert caplog.records == []

    async def test_malformed_json_is_not_rejected(self, client, caplog):
        with caplog.at_level(logging.WARNING, logger="mc-body.test.web"):
            response = await client.patch(
                "/nonexistent", data="{not json", headers={"Content-Type": "application/json"}
            )

        assert response.status == 404
        assert "malformed JSON" in caplog.text

    async def test_unknown_charset_is_not_rejected(self, client, caplog):
        with caplog.at_level(logging.WARNING, logger="mc-body.test.web"):
            response = await client.post(
                "/nonexistent",
                data=b'{"a": 1}',
                headers={"Content-Type": "application/json; charset=bogus"},
            )

        body = await response.json()
        assert response.status == 404
        assert body["error"]["code"] == "NOT_FOUND"
        assert "malformed JSON" in caplog.text
