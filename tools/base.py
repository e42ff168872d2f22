from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

import httpx
from mcp.shared.exceptions import McpError
from mcp.types import INVALID_REQUEST, Resource, Tool

from core.config import DEFAULT_BASE_URL, ConfigurationError, get_postman_settings
from core.errors import mcp_error, translate_http_error
from core.logging_config import setup_logging
from utils.response_utils import robust_parse_text

logger = logging.getLogger(__name__)

REQUEST_TIMEOUT = 30.0  # seconds

ToolMapping = Dict[str, "BasePostmanTool"]


@dataclass(frozen=True)
class PostmanToolOptions:
    """Settings for a client built by :class:`BasePostmanTool`.

    ``verify_ssl=False`` turns off TLS certificate checks. Only set it behind
    an intercepting corporate proxy.
    """

    base_url: str = DEFAULT_BASE_URL
    accept_header: Optional[str] = None
    verify_ssl: bool = True


def build_client(api_key: str, options: PostmanToolOptions) -> httpx.AsyncClient:
    """Create an AsyncClient authenticated against the Postman API.

    Redirects are followed. ``REQUEST_TIMEOUT`` applies to each phase
    (connect, write, read, pool) separately, not to the request as a whole.
    """
    if not options.verify_ssl:
        logger.warning("TLS certificate verification is disabled for %s", options.base_url)
    return httpx.AsyncClient(
        base_url=options.base_url or DEFAULT_BASE_URL,
        headers={
            "X-Api-Key": api_key,
            "Content-Type": "application/json",
        },
        timeout=REQUEST_TIMEOUT,
        verify=options.verify_ssl,
        follow_redirects=True,
    )


class BasePostmanTool(ABC):
    """Base class for Postman API tools.

    Owns (or shares) the HTTP client and installs the hooks every Postman
    request goes through: request logging, the optional Accept override, and
    translation of error responses into MCP errors. Subclasses describe their
    tools via :meth:`get_tool_definitions` and should issue calls through
    :meth:`request` (or the verb helpers) so transport failures are
    translated too.
    """

    def __init__(
        self,
        api_key: Optional[str],
        options: Optional[PostmanToolOptions] = None,
        existing_client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        options = options or PostmanToolOptions()
        self.options = options

        if existing_client is not None:
            self.client = existing_client
            self._owns_client = False
        else:
            if not api_key:
                raise ConfigurationError("API key is required when not providing an existing client")
            self.client = build_client(api_key, options)
            self._owns_client = True

        self.client.event_hooks["request"].append(self._log_request)
        if options.accept_header:
            self.client.event_hooks["request"].append(self._set_accept_header)
        self.client.event_hooks["response"].append(self._raise_for_status)

    @classmethod
    def from_config(
        cls,
        existing_client: Optional[httpx.AsyncClient] = None,
        configure_logging: bool = True,
        **kwargs: Any,
    ):
        """Build a tool from config.yaml and the POSTMAN_API_KEY environment variable.

        Unless ``configure_logging`` is False, root logging is set up first
        at the configured ``log_level``.
        """
        settings = get_postman_settings()
        if configure_logging:
            setup_logging(level=settings["log_level"])
        if existing_client is None and not settings["api_key"]:
            raise ConfigurationError("POSTMAN_API_KEY must be set in the environment or .env")
        options = PostmanToolOptions(
            base_url=settings["base_url"],
            accept_header=settings["accept_header"],
            verify_ssl=settings["verify_ssl"],
        )
        return cls(settings["api_key"], options, existing_client, **kwargs)

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Close the client if this tool created it. Shared clients stay open."""
        if self._owns_client:
            await self.client.aclose()

    # -- hooks ---------------------------------------------------------------

    async def _log_request(self, request: httpx.Request) -> None:
        logger.info("Making request to: %s %s", request.method, request.url)

    async def _set_accept_header(self, request: httpx.Request) -> None:
        request.headers["Accept"] = self.options.accept_header

    async def _raise_for_status(self, response: httpx.Response) -> None:
        if response.is_success:
            return
        if response.has_redirect_location and self.client.follow_redirects:
            # httpx follows it once the hooks return
            return
        await self._raise_translated(response)

    async def _raise_translated(self, response: httpx.Response) -> None:
        await response.aread()
        try:
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            raise translate_http_error(exc) from exc

    # -- requests ------------------------------------------------------------

    async def request(self, method: str, url: str, **kwargs: Any) -> httpx.Response:
        """Send a request, re-raising any failure as an McpError."""
        try:
            response = await self.client.request(method, url, **kwargs)
        except McpError:
            raise
        except Exception as exc:
            raise translate_http_error(exc) from exc
        if not response.is_success:
            # 3xx left unfollowed by follow_redirects=False on this call
            await self._raise_translated(response)
        return response

    async def get(self, url: str, **kwargs: Any) -> httpx.Response:
        return await self.request("GET", url, **kwargs)

    async def post(self, url: str, **kwargs: Any) -> httpx.Response:
        return await self.request("POST", url, **kwargs)

    async def put(self, url: str, **kwargs: Any) -> httpx.Response:
        return await self.request("PUT", url, **kwargs)

    async def patch(self, url: str, **kwargs: Any) -> httpx.Response:
        return await self.request("PATCH", url, **kwargs)

    async def delete(self, url: str, **kwargs: Any) -> httpx.Response:
        return await self.request("DELETE", url, **kwargs)

    async def request_json(self, method: str, url: str, **kwargs: Any) -> Any:
        """Like :meth:`request`, but return the decoded body."""
        response = await self.request(method, url, **kwargs)
        try:
            return response.json()
        except ValueError as e:
            logger.warning(
                f"Failed to decode JSON from {response.request.url}: {e}; returning parsed fallback (raw/ndjson/first-chunk)"
            )
            return robust_parse_text(response.text)

    # -- discovery -----------------------------------------------------------

    def get_tool_mappings(self) -> ToolMapping:
        """Map every tool name from :meth:`get_tool_definitions` to this instance.

        A later definition with the same name overwrites an earlier one.
        """
        mappings: ToolMapping = {}
        for tool in self.get_tool_definitions():
            mappings[tool.name] = self
        return mappings

    @abstractmethod
    def get_tool_definitions(self) -> List[Tool]:
        """Return the tools this class handles. Must be implemented by subclasses."""
        raise NotImplementedError("get_tool_definitions() must be implemented by derived class")

    async def list_tool_resources(self) -> List[Resource]:
        """List resources this tool can interact with. None by default."""
        return []

    async def get_tool_resource_details(self, resource_uri: str) -> Resource:
        """Describe how this tool handles ``resource_uri``.

        Raises McpError(INVALID_REQUEST) unless overridden.
        """
        raise mcp_error(INVALID_REQUEST, f"Resource {resource_uri} cannot be handled by this tool")

    async def can_handle_resource(self, resource_uri: str) -> bool:
        # Any failure, transient or not, counts as "cannot handle"
        try:
            await self.get_tool_resource_details(resource_uri)
            return True
        except Exception:
            return False
