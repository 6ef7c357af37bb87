"""One-shot HTTP transport for token requests.

The grant builder and parser never touch the network. This module is the
thin :mod:`httpx` glue used by the CLI: :func:`send` posts a
:class:`~clientgrant.models.TransportRequest` and :func:`fetch_token` runs
build, send and parse in sequence.

There is no retry, token cache or connection reuse here; each call opens
and closes its own connection.
"""

from __future__ import annotations

import httpx

from clientgrant.exceptions import ConnectionError_
from clientgrant.grant.response import parse_response
from clientgrant.models import DecodeFailure, GrantRequest, TokenResult, TransportRequest
from clientgrant.output import get_output


def send(
    request: TransportRequest,
    timeout: float = 30.0,
    verify: bool = True,
) -> httpx.Response:
    """POST *request* to its URL and return the raw response.

    Any HTTP status is returned as-is; interpreting it is the parser's job.

    Args:
        request: The request produced by the grant builder.
        timeout: Request timeout in seconds.
        verify: Verify the server's TLS certificate.

    Returns:
        The :class:`httpx.Response` from the token endpoint.

    Raises:
        ConnectionError_: On network or timeout errors.
    """
    headers = {"Accept": "application/json", **request.headers}
    try:
        return httpx.post(
            request.url,
            content=request.body,
            headers=headers,
            timeout=timeout,
            verify=verify,
        )
    except httpx.HTTPError as exc:
        raise ConnectionError_(f"Token request to {request.url} failed: {exc}") from exc


def fetch_token(
    grant: GrantRequest,
    timeout: float = 30.0,
    verify: bool = True,
) -> TokenResult:
    """Request a token for *grant* and decode the answer.

    Returns:
        A :class:`~clientgrant.models.TokenResponse` or a
        :class:`~clientgrant.models.DecodeFailure`.

    Raises:
        ConnectionError_: When the token endpoint cannot be reached.
    """
    output = get_output()
    request = grant.build()

    output.debug(f"{request.method} {request.url}")
    response = send(request, timeout=timeout, verify=verify)
    output.debug(f"HTTP {response.status_code} from token endpoint")

    result = parse_response(response)
    if isinstance(result, DecodeFailure):
        output.debug(f"Token response rejected ({result.kind.value}): {result.detail}")
    else:
        output.debug(
            f"Received {result.token_type} token"
            + (f", expires in {result.expires_in}s" if result.expires_in is not None else "")
        )
    return result
