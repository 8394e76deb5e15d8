"""
Outbound HTTP helper.

Single place where requests to the wrapped API are issued and where
httpx failures are mapped onto UpstreamRequestError:

- Non-2xx response: status code, reason phrase and body preserved verbatim
- Timeout: retryable=True (nothing retries automatically; the flag is
  for the caller)
- Other transport errors: retryable=False

Any other exception propagates unchanged.
"""

from __future__ import annotations

import logging
from typing import Any

import httpx

from openapi_mcp.errors import UpstreamRequestError

logger = logging.getLogger(__name__)


def check_response(response: httpx.Response) -> None:
    """
    Raise UpstreamRequestError for a non-2xx response.

    Args:
        response: HTTP response to check
    """
    if response.is_success:
        return

    body = response.text
    raise UpstreamRequestError(
        f"{response.status_code} {response.reason_phrase}".strip(),
        status_code=response.status_code,
        status_text=response.reason_phrase,
        response_body=body or None,
        retryable=response.status_code == 429 or response.status_code >= 500,
    )


async def send(
    client: httpx.AsyncClient,
    method: str,
    url: str,
    **kwargs: Any,
) -> httpx.Response:
    """
    Issue one request and return the 2xx response.

    Args:
        client: HTTP client (timeouts are the client's)
        method: HTTP method on the wire
        url: Absolute URL
        **kwargs: Passed to `client.request` (params, data, files, headers)

    Raises:
        UpstreamRequestError: On non-2xx or transport failure
    """
    try:
        response = await client.request(method, url, **kwargs)
    except httpx.TimeoutException as e:
        logger.error(f"[http] {method} {url} timed out: {e}")
        raise UpstreamRequestError(
            f"Request timed out: {e}", retryable=True
        ) from e
    except httpx.TransportError as e:
        logger.error(f"[http] {method} {url} transport error: {e}")
        raise UpstreamRequestError(f"Connection failed: {e}") from e

    logger.debug(f"[http] {method} {url} -> {response.status_code}")
    check_response(response)
    return response
