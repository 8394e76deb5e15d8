"""
Pytest configuration and fixtures for openapi-mcp-server tests.
"""

import sys
from pathlib import Path
from unittest.mock import AsyncMock

import httpx
import pytest

# Add the repository root to path for imports
# This allows `from openapi_mcp.spec import ...` to work
repo_root = Path(__file__).parent.parent
if str(repo_root) not in sys.path:
    sys.path.insert(0, str(repo_root))


BASE_URL = "https://api.example.com"


@pytest.fixture
def base_url():
    """Base URL of the wrapped API."""
    return BASE_URL


@pytest.fixture
def users_spec():
    """Small OpenAPI document with reads, writes and auth endpoints."""
    return {
        "openapi": "3.0.0",
        "info": {"title": "Users API", "version": "1.0.0"},
        "paths": {
            "/users": {
                "get": {
                    "operationId": "listUsers",
                    "summary": "List users",
                    "parameters": [
                        {
                            "name": "tags",
                            "in": "query",
                            "schema": {"type": "array"},
                            "description": "Filter by tags",
                        },
                        {"name": "limit", "in": "query", "schema": {"type": "integer"}},
                    ],
                },
                "post": {
                    "summary": "Create user",
                    "description": "Create a new user",
                },
            },
            "/users/{id}": {
                "parameters": [
                    {"name": "id", "in": "path", "required": True, "schema": {"type": "string"}},
                ],
                "get": {"operationId": "getUser"},
                "put": {"operationId": "replaceUser"},
                "patch": {"operationId": "updateUser"},
                "delete": {"operationId": "deleteUser"},
            },
            "/authentication": {"post": {"summary": "Log in"}},
            "/token": {"post": {"summary": "Refresh token"}},
        },
    }


@pytest.fixture
def mock_client():
    """AsyncMock standing in for httpx.AsyncClient (returns 200 {} by default)."""
    client = AsyncMock()
    client.request = AsyncMock(return_value=httpx.Response(200, json={}))
    return client
