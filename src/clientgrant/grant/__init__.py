"""OAuth 2.0 Client Credentials grant (:rfc:`6749#section-4.4`).

The grant is modelled as two independent, pure transformations:

- :func:`build_request` turns a token endpoint, an optional scope and an
  optional :class:`~clientgrant.models.ClientCredentials` pair into a
  :class:`~clientgrant.models.TransportRequest`.
- :func:`parse_response` turns the raw HTTP response into a
  :class:`~clientgrant.models.TokenResponse` or a
  :class:`~clientgrant.models.DecodeFailure`.

Neither performs I/O; sending the request is left to the caller's HTTP
client (or :mod:`clientgrant.transport`).

See Also:
    :mod:`clientgrant.grant.request`
    :mod:`clientgrant.grant.response`
"""

from clientgrant.grant.request import (
    FORM_CONTENT_TYPE,
    build_parameters,
    build_request,
    decode_parameters,
    encode_parameters,
)
from clientgrant.grant.response import parse_body, parse_response, raise_for_failure

__all__ = [
    "FORM_CONTENT_TYPE",
    "build_parameters",
    "build_request",
    "decode_parameters",
    "encode_parameters",
    "parse_body",
    "parse_response",
    "raise_for_failure",
]
