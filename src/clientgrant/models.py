"""Canonical Pydantic models shared across all clientgrant modules.

This is the single source of truth for data shapes in the project. Every other
module imports from here rather than defining its own models. The models fall
into two groups:

**Grant models** -- immutable values flowing through the request builder and
the response parser:
    :class:`GrantType`, :class:`GrantParameter`, :class:`TokenResponseParameter`,
    :class:`ClientCredentials`, :class:`GrantRequest`, :class:`TransportRequest`,
    :class:`RawResponse`, :class:`TokenResponse`, :class:`DecodeFailureKind`
    and :class:`DecodeFailure`.

**Configuration models** -- serialised as JSON in the user's config directory:
    :class:`RequestConfig`, :class:`Profile` and :class:`GlobalConfig`.

Grant models are frozen, so two instances built from the same input compare
equal field by field and cannot be altered after construction.
"""

from __future__ import annotations

import enum
import re
from typing import ClassVar, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


# --- Closed enumerations ---


class GrantType(str, enum.Enum):
    """OAuth 2.0 grant types known to this package."""

    CLIENT_CREDENTIALS = "client_credentials"


class GrantParameter(str, enum.Enum):
    """Form parameter names of a client credentials token request (:rfc:`6749#section-4.4.2`)."""

    GRANT_TYPE = "grant_type"
    SCOPE = "scope"
    CLIENT_ID = "client_id"
    CLIENT_SECRET = "client_secret"


class TokenResponseParameter(str, enum.Enum):
    """JSON member names of a successful token response (:rfc:`6749#section-5.1`)."""

    ACCESS_TOKEN = "access_token"
    TOKEN_TYPE = "token_type"
    EXPIRES_IN = "expires_in"


ParameterSet = dict[GrantParameter, str]


# --- Request side ---


class ClientCredentials(BaseModel):
    """A client identifier and its secret, sent together in the request body."""

    model_config = ConfigDict(frozen=True)

    client_id: str
    client_secret: str = Field(repr=False)


class TransportRequest(BaseModel):
    """Transport-agnostic description of the token request.

    The HTTP client of the surrounding application is expected to ``POST``
    :attr:`body` to :attr:`url` with :attr:`headers`.
    """

    model_config = ConfigDict(frozen=True)

    method: ClassVar[str] = "POST"

    url: str
    body: bytes
    headers: dict[str, str]


class GrantRequest(BaseModel):
    """Inputs of a client credentials grant.

    Example::

        grant = GrantRequest(
            endpoint="https://auth.example.com/token",
            scope="read write",
            credentials=ClientCredentials(client_id="id1", client_secret="secret1"),
        )
        transport_request = grant.build()
    """

    model_config = ConfigDict(frozen=True)

    grant_type: ClassVar[GrantType] = GrantType.CLIENT_CREDENTIALS

    endpoint: str = Field(description="Token endpoint URL of the authorization server")
    scope: Optional[str] = Field(
        default=None, description="Space-delimited scope string, passed through unmodified"
    )
    credentials: Optional[ClientCredentials] = None

    def build(self) -> TransportRequest:
        """Render this grant as a :class:`TransportRequest`."""
        from clientgrant.grant.request import build_request

        return build_request(self.endpoint, scope=self.scope, credentials=self.credentials)


# --- Response side ---


class RawResponse(BaseModel):
    """Minimal HTTP response handed to the parser.

    Mirrors the two attributes of :class:`httpx.Response` the parser reads,
    so either type can be passed to
    :func:`~clientgrant.grant.response.parse_response`.
    """

    model_config = ConfigDict(frozen=True)

    status_code: int
    content: bytes = b""


class TokenResponse(BaseModel):
    """A successfully decoded access token response."""

    model_config = ConfigDict(frozen=True)

    grant_type: ClassVar[GrantType] = GrantType.CLIENT_CREDENTIALS

    access_token: str = Field(repr=False)
    token_type: str
    expires_in: Optional[int] = Field(
        default=None, description="Token lifetime in seconds, when the server reported one"
    )

    @property
    def authorization_header(self) -> str:
        """Value for an ``Authorization`` header carrying this token."""
        return f"{self.token_type} {self.access_token}"


class DecodeFailureKind(str, enum.Enum):
    """Stage of the response pipeline that rejected the response."""

    UNEXPECTED_STATUS = "unexpected_status"
    INVALID_ENCODING = "invalid_encoding"
    MALFORMED_JSON = "malformed_json"
    UNEXPECTED_SHAPE = "unexpected_shape"
    MISSING_FIELD = "missing_field"


class DecodeFailure(BaseModel):
    """Typed negative outcome of decoding a token response.

    No partially populated :class:`TokenResponse` ever accompanies a
    failure; the caller decides whether to retry, report or abort.
    """

    model_config = ConfigDict(frozen=True)

    kind: DecodeFailureKind
    detail: str = ""
    status_code: Optional[int] = None


TokenResult = Union[TokenResponse, DecodeFailure]


# --- Configuration ---

PROFILE_NAME_RE = re.compile(r"[A-Za-z0-9_][A-Za-z0-9_.-]*")
"""Profile names double as file stems, so no separators and no leading dot."""


class RequestConfig(BaseModel):
    """HTTP settings used when a profile's token request is actually sent."""

    timeout: float = Field(default=30.0, description="Request timeout in seconds")
    verify_ssl: bool = Field(default=True, description="Verify SSL certificates")


class Profile(BaseModel):
    """A named token endpoint configuration, stored as one JSON file.

    Credentials are never stored directly; ``client_id_source`` and
    ``client_secret_source`` name where to read them from (see
    :func:`~clientgrant.config.resolve_credential`). Both sources are set
    or neither is.

    Example::

        Profile(
            name="billing",
            token_url="https://auth.example.com/token",
            scope="invoices:read",
            client_id_source="env:BILLING_CLIENT_ID",
            client_secret_source="file:~/.secrets/billing",
        )
    """

    name: str = Field(description="Profile name (also the file stem)")
    token_url: str = Field(description="Token endpoint URL")
    scope: Optional[str] = None
    client_id_source: Optional[str] = Field(
        default=None, description="Credential source: env:VAR, file:/path, prompt"
    )
    client_secret_source: Optional[str] = Field(
        default=None, description="Credential source: env:VAR, file:/path, prompt"
    )
    request: RequestConfig = Field(default_factory=RequestConfig)

    @field_validator("name")
    @classmethod
    def _name_is_file_stem(cls, value: str) -> str:
        if not PROFILE_NAME_RE.fullmatch(value):
            raise ValueError(
                f"invalid profile name {value!r}: use letters, digits, '_', '.' or '-'"
                " and do not start with '.'"
            )
        return value

    @model_validator(mode="after")
    def _credential_sources_paired(self) -> Profile:
        if (self.client_id_source is None) != (self.client_secret_source is None):
            raise ValueError(
                "client_id_source and client_secret_source must be set together"
            )
        return self


class GlobalConfig(BaseModel):
    """User-wide configuration persisted at ``~/.config/clientgrant/config.json``.

    Loaded and saved by :func:`~clientgrant.config.load_global_config` and
    :func:`~clientgrant.config.save_global_config`. See
    :func:`~clientgrant.config.resolve_profile` for how ``default_profile``
    ranks against the ``--profile`` flag and the environment.
    """

    default_profile: Optional[str] = None
    auto_select_single_profile: bool = Field(
        default=True,
        description="Use the only existing profile when none is selected",
    )
