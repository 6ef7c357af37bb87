"""Token request builder for the Client Credentials grant.

Builds the body of an access token request (:rfc:`6749#section-4.4.2`)::

    POST /token HTTP/1.1
    Content-Type: application/x-www-form-urlencoded

    grant_type=client_credentials&scope=read+write&client_id=...&client_secret=...

Client authentication is carried in the request body
(:rfc:`6749#section-2.3.1`); the HTTP Basic variant is not produced here.
"""

from __future__ import annotations

from typing import Optional
from urllib.parse import parse_qsl, urlencode

from clientgrant.models import (
    ClientCredentials,
    GrantParameter,
    GrantType,
    ParameterSet,
    TransportRequest,
)

FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"


def build_parameters(
    scope: Optional[str] = None,
    credentials: Optional[ClientCredentials] = None,
) -> ParameterSet:
    """Collect the form parameters of a token request.

    ``grant_type`` is always present. ``scope`` is added whenever it is not
    ``None`` and the credential pair is added as a whole or not at all.

    Args:
        scope: Space-delimited scope string, passed through unmodified.
        credentials: Client identifier and secret to send in the body.

    Returns:
        A mapping from :class:`~clientgrant.models.GrantParameter` to value.
    """
    parameters: ParameterSet = {
        GrantParameter.GRANT_TYPE: GrantType.CLIENT_CREDENTIALS.value,
    }
    if scope is not None:
        parameters[GrantParameter.SCOPE] = scope
    if credentials is not None:
        parameters[GrantParameter.CLIENT_ID] = credentials.client_id
        parameters[GrantParameter.CLIENT_SECRET] = credentials.client_secret
    return parameters


def encode_parameters(parameters: ParameterSet) -> bytes:
    """Render *parameters* as an ``application/x-www-form-urlencoded`` body.

    Spaces become ``+`` and reserved characters are percent-escaped, as
    HTML form submission does.
    """
    return urlencode({key.value: value for key, value in parameters.items()}).encode("ascii")


def decode_parameters(body: bytes) -> dict[str, str]:
    """Parse a form-encoded body back into a ``name -> value`` dict.

    Blank values are kept so that an empty ``scope`` is still visible.
    """
    return dict(parse_qsl(body.decode("ascii"), keep_blank_values=True))


def build_request(
    endpoint: str,
    scope: Optional[str] = None,
    credentials: Optional[ClientCredentials] = None,
) -> TransportRequest:
    """Build the token request for a Client Credentials grant.

    The result is meant to be sent as ``POST`` to *endpoint*. Reachability
    and syntax of *endpoint* are not checked; this function cannot fail.

    Args:
        endpoint: Token endpoint URL of the authorization server.
        scope: Optional space-delimited scope string.
        credentials: Optional client identifier/secret pair.

    Returns:
        The :class:`~clientgrant.models.TransportRequest` to send.

    Example::

        request = build_request(
            "https://auth.example.com/token",
            credentials=ClientCredentials(client_id="id1", client_secret="secret1"),
        )
        # request.body == b"grant_type=client_credentials&client_id=id1&client_secret=secret1"
    """
    body = encode_parameters(build_parameters(scope=scope, credentials=credentials))
    return TransportRequest(
        url=endpoint,
        body=body,
        headers={"Content-Type": FORM_CONTENT_TYPE},
    )
