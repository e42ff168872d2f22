"""Translation of HTTP failures into MCP error codes.

Every failure coming out of the Postman HTTP client ends up as an
:class:`mcp.shared.exceptions.McpError` with one of two codes: ``INVALID_REQUEST``
for caller-caused failures and ``INTERNAL_ERROR`` for everything else.
"""
import logging
from typing import Optional

import httpx
from mcp.shared.exceptions import McpError
from mcp.types import INTERNAL_ERROR, INVALID_REQUEST, ErrorData

from utils.response_utils import extract_error_message

logger = logging.getLogger(__name__)

INVALID_PARAMETERS_MESSAGE = "Invalid request parameters"
INTERNAL_SERVER_ERROR_MESSAGE = "Internal server error"
NO_RESPONSE_MESSAGE = "No response received from Postman API"

# status -> fixed message; None means "use the body message, else the fallback"
INVALID_REQUEST_STATUSES = {
    400: None,
    401: "Unauthorized: Invalid or missing API key",
    403: "Forbidden: Insufficient permissions or feature unavailable",
    404: "Resource not found",
    422: None,
    429: "Rate limit exceeded",
}

# Raised after the request went out but before a response arrived
NO_RESPONSE_ERRORS = (
    httpx.TimeoutException,
    httpx.NetworkError,
    httpx.RemoteProtocolError,
    httpx.ProxyError,
)


def mcp_error(code: int, message: str) -> McpError:
    return McpError(ErrorData(code=code, message=message))


def _body_message(response: httpx.Response) -> Optional[str]:
    try:
        return extract_error_message(response.content)
    except httpx.ResponseNotRead:
        return None


def error_for_response(response: httpx.Response) -> McpError:
    """Map a failed response to an McpError by status code."""
    status = response.status_code
    if status in INVALID_REQUEST_STATUSES:
        message = INVALID_REQUEST_STATUSES[status]
        if message is None:
            message = _body_message(response) or INVALID_PARAMETERS_MESSAGE
        return mcp_error(INVALID_REQUEST, message)
    return mcp_error(INTERNAL_ERROR, _body_message(response) or INTERNAL_SERVER_ERROR_MESSAGE)


def translate_http_error(error: BaseException) -> McpError:
    """Log ``error`` and return the McpError that replaces it.

    Already-translated errors are returned as-is.
    """
    if isinstance(error, McpError):
        return error

    if isinstance(error, httpx.HTTPStatusError):
        logger.error("HTTP error: %s %s", error.response.status_code, error)
        return error_for_response(error.response)

    logger.error("HTTP error: %s %s", type(error).__name__, error)
    if isinstance(error, NO_RESPONSE_ERRORS):
        return mcp_error(INTERNAL_ERROR, NO_RESPONSE_MESSAGE)
    return mcp_error(INTERNAL_ERROR, f"Error making request: {error}")
