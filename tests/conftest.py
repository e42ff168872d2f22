import httpx
import pytest
from mcp.types import Tool

from tools.base import BasePostmanTool

BASE_URL = "https://api.getpostman.com"


class CollectionTool(BasePostmanTool):
    """Minimal concrete tool used across the tests."""

    def get_tool_definitions(self):
        return [
            Tool(name="a", description="first", inputSchema={"type": "object"}),
            Tool(name="b", description="second", inputSchema={"type": "object"}),
        ]


def mock_client(handler, **kwargs) -> httpx.AsyncClient:
    """AsyncClient whose requests are answered by ``handler``."""
    kwargs.setdefault("base_url", BASE_URL)
    return httpx.AsyncClient(transport=httpx.MockTransport(handler), **kwargs)


@pytest.fixture
def recorded_requests():
    return []


@pytest.fixture
def ok_client(recorded_requests):
    def handler(request: httpx.Request) -> httpx.Response:
        recorded_requests.append(request)
        return httpx.Response(200, json={"collections": []})

    return mock_client(handler)
