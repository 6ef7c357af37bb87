"""Token response parser for the Client Credentials grant.

Decodes a successful access token response (:rfc:`6749#section-5.1`)::

    HTTP/1.1 200 OK
    Content-Type: application/json;charset=UTF-8

    {
      "access_token": "2YotnFZFEjr1zCsicMWpAA",
      "token_type": "example",
      "expires_in": 3600
    }

The response goes through a linear pipeline -- status, UTF-8, JSON syntax,
object shape, mandatory members, optional ``expires_in`` -- and the first
stage that rejects it decides the :class:`~clientgrant.models.DecodeFailureKind`.
Failures are returned, not raised.
"""

from __future__ import annotations

import json
from http import HTTPStatus
from typing import TYPE_CHECKING, Any, Optional, Union

from clientgrant.exceptions import TokenDecodeError
from clientgrant.models import (
    DecodeFailure,
    DecodeFailureKind,
    RawResponse,
    TokenResponse,
    TokenResponseParameter,
    TokenResult,
)

if TYPE_CHECKING:
    import httpx


def parse_response(raw: Union[RawResponse, httpx.Response]) -> TokenResult:
    """Decode an HTTP response from the token endpoint.

    Args:
        raw: Anything with ``status_code`` and ``content`` attributes,
            typically a :class:`httpx.Response` or a
            :class:`~clientgrant.models.RawResponse`.

    Returns:
        A :class:`~clientgrant.models.TokenResponse` when the status is 200
        and the body holds a valid token object, otherwise a
        :class:`~clientgrant.models.DecodeFailure`.
    """
    status_code = raw.status_code
    if status_code != HTTPStatus.OK:
        return DecodeFailure(
            kind=DecodeFailureKind.UNEXPECTED_STATUS,
            detail=f"token endpoint answered HTTP {status_code}",
            status_code=status_code,
        )

    try:
        text = raw.content.decode("utf-8")
    except UnicodeDecodeError as exc:
        return DecodeFailure(
            kind=DecodeFailureKind.INVALID_ENCODING,
            detail=f"body is not valid UTF-8: {exc.reason} at byte {exc.start}",
            status_code=status_code,
        )

    try:
        value = json.loads(text, parse_constant=_reject_constant)
    except json.JSONDecodeError as exc:
        detail = f"body is not JSON: {exc.msg} (line {exc.lineno} column {exc.colno})"
    except (ValueError, RecursionError) as exc:
        # decoder limits (integer digits, nesting depth) and rejected constants
        detail = f"body is not JSON: {exc}"
    else:
        result = parse_body(value)
        if isinstance(result, DecodeFailure):
            return result.model_copy(update={"status_code": status_code})
        return result

    return DecodeFailure(
        kind=DecodeFailureKind.MALFORMED_JSON,
        detail=detail,
        status_code=status_code,
    )


def parse_body(value: Any) -> TokenResult:
    """Decode an already-parsed JSON value into a token response.

    Usable on its own when the caller has checked the HTTP status and
    parsed the body itself.

    ``expires_in`` is optional: a value that is not a JSON integer is
    dropped rather than failing the whole response.

    Args:
        value: The decoded JSON document.

    Returns:
        A :class:`~clientgrant.models.TokenResponse` or a
        :class:`~clientgrant.models.DecodeFailure` of kind
        ``unexpected_shape`` or ``missing_field``.
    """
    if not isinstance(value, dict):
        return DecodeFailure(
            kind=DecodeFailureKind.UNEXPECTED_SHAPE,
            detail=f"expected a JSON object, got {_json_type_name(value)}",
        )

    access_token = value.get(TokenResponseParameter.ACCESS_TOKEN.value)
    token_type = value.get(TokenResponseParameter.TOKEN_TYPE.value)
    for name, member in (
        (TokenResponseParameter.ACCESS_TOKEN, access_token),
        (TokenResponseParameter.TOKEN_TYPE, token_type),
    ):
        if not isinstance(member, str):
            return DecodeFailure(
                kind=DecodeFailureKind.MISSING_FIELD,
                detail=f"'{name.value}' is missing or not a string",
            )

    return TokenResponse(
        access_token=access_token,
        token_type=token_type,
        expires_in=_optional_int(value.get(TokenResponseParameter.EXPIRES_IN.value)),
    )


def raise_for_failure(result: TokenResult) -> TokenResponse:
    """Return *result* if it is a token, raise :class:`TokenDecodeError` otherwise.

    Raises:
        TokenDecodeError: Carrying the :class:`~clientgrant.models.DecodeFailure`.
    """
    if isinstance(result, DecodeFailure):
        raise TokenDecodeError(result)
    return result


def _optional_int(value: Any) -> Optional[int]:
    # bool is an int subclass but JSON true/false is not a number
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    return None


def _json_type_name(value: Any) -> str:
    """Name *value*'s type the way JSON does."""
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, (int, float)):
        return "number"
    if isinstance(value, str):
        return "string"
    if isinstance(value, list):
        return "array"
    return type(value).__name__


def _reject_constant(name: str) -> Any:
    raise ValueError(f"{name} is not a JSON value")
