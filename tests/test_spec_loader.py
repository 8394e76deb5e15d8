"""
Tests for the Spec Loader.

Tests cover:
- In-memory documents
- Local JSON and YAML files
- URL sources via a shared client
- Failures mapped onto SpecLoadError
"""

import json
from unittest.mock import AsyncMock

import httpx
import pytest

from openapi_mcp.errors import SpecLoadError
from openapi_mcp.spec.loader import is_url, load_spec, parse_document

SPEC_URL = "https://api.example.com/openapi.json"

YAML_SPEC = """
openapi: 3.0.0
info:
  title: Pets
  version: 1.0.0
paths:
  /pets:
    get:
      operationId: listPets
"""


def _url_client(response: httpx.Response | Exception) -> AsyncMock:
    client = AsyncMock()
    if isinstance(response, Exception):
        client.get = AsyncMock(side_effect=response)
    else:
        client.get = AsyncMock(return_value=response)
    return client


class TestParseDocument:
    """Tests for body parsing."""

    def test_json(self):
        assert parse_document('{"paths": {}}', source="x") == {"paths": {}}

    def test_yaml_fallback(self):
        document = parse_document(YAML_SPEC, source="x")
        assert document["paths"]["/pets"]["get"]["operationId"] == "listPets"

    def test_non_mapping_rejected(self):
        with pytest.raises(SpecLoadError, match="must be an object"):
            parse_document("[1, 2, 3]", source="spec.json")

    def test_invalid_yaml(self):
        with pytest.raises(SpecLoadError, match="Invalid spec document"):
            parse_document("paths: [unclosed", source="spec.yaml")


class TestIsUrl:
    """Tests for URL detection."""

    @pytest.mark.parametrize(
        "source, expected",
        [
            ("https://x/openapi.json", True),
            ("http://localhost:8080/spec", True),
            ("./openapi.json", False),
            ("/etc/openapi.yaml", False),
        ],
    )
    def test_detection(self, source, expected):
        assert is_url(source) is expected


class TestLoadSpec:
    """Tests for load_spec sources."""

    @pytest.mark.asyncio
    async def test_mapping_used_as_is(self, users_spec):
        assert await load_spec(users_spec) == users_spec

    @pytest.mark.asyncio
    async def test_json_file(self, tmp_path, users_spec):
        path = tmp_path / "openapi.json"
        path.write_text(json.dumps(users_spec), encoding="utf-8")

        assert await load_spec(str(path)) == users_spec

    @pytest.mark.asyncio
    async def test_yaml_file(self, tmp_path):
        path = tmp_path / "openapi.yaml"
        path.write_text(YAML_SPEC, encoding="utf-8")

        document = await load_spec(path)

        assert list(document["paths"]) == ["/pets"]

    @pytest.mark.asyncio
    async def test_missing_file(self, tmp_path):
        missing = tmp_path / "nope.json"

        with pytest.raises(SpecLoadError) as exc_info:
            await load_spec(str(missing))

        assert exc_info.value.source == str(missing)
        assert "Failed to read spec file" in str(exc_info.value)

    @pytest.mark.asyncio
    async def test_url_with_shared_client(self, users_spec):
        client = _url_client(
            httpx.Response(
                200,
                text=json.dumps(users_spec),
                request=httpx.Request("GET", SPEC_URL),
            )
        )

        document = await load_spec(SPEC_URL, http_client=client)

        assert document == users_spec
        client.get.assert_awaited_once_with(SPEC_URL)
        client.aclose.assert_not_called()

    @pytest.mark.asyncio
    async def test_url_http_error(self):
        client = _url_client(
            httpx.Response(404, text="missing", request=httpx.Request("GET", SPEC_URL))
        )

        with pytest.raises(SpecLoadError, match="HTTP 404") as exc_info:
            await load_spec(SPEC_URL, http_client=client)

        assert exc_info.value.source == SPEC_URL

    @pytest.mark.asyncio
    async def test_url_connect_error(self):
        client = _url_client(httpx.ConnectError("refused"))

        with pytest.raises(SpecLoadError, match="Failed to fetch spec"):
            await load_spec(SPEC_URL, http_client=client)

    @pytest.mark.asyncio
    async def test_url_non_mapping_body(self):
        client = _url_client(
            httpx.Response(200, text='"just a string"', request=httpx.Request("GET", SPEC_URL))
        )

        with pytest.raises(SpecLoadError, match="must be an object"):
            await load_spec(SPEC_URL, http_client=client)
