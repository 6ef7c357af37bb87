"""Token commands -- request an access token or preview the request.

Provides the ``clientgrant token`` sub-command group. Both commands resolve
the active profile (``--profile``, ``CLIENTGRANT_PROFILE``, the default
profile) and let command-line options override individual fields, so a
token can also be fetched without any saved profile.

Typical workflow::

    clientgrant token request --profile billing   # inspect what will be sent
    clientgrant token fetch --profile billing     # send it
    clientgrant token fetch --header              # "Bearer eyJ..." only
"""

from __future__ import annotations

from typing import Any, Optional

import typer

from clientgrant.exceptions import ClientGrantError, InvalidUsageError
from clientgrant.models import GrantParameter, GrantRequest, Profile, RequestConfig
from clientgrant.output import error, format_response, print_data, warning


token_app = typer.Typer(no_args_is_help=True)

_REDACTED = "***"

_TOKEN_URL_OPTION = typer.Option(None, "--token-url", help="Token endpoint URL.")
_SCOPE_OPTION = typer.Option(None, "--scope", "-s", help="Space-delimited scope string.")
_CLIENT_ID_OPTION = typer.Option(
    None, "--client-id-source", help="Client id source (env:VAR, file:/path, prompt)."
)
_CLIENT_SECRET_OPTION = typer.Option(
    None, "--client-secret-source", help="Client secret source (env:VAR, file:/path, prompt)."
)


def _effective_profile(
    ctx: typer.Context,
    token_url: Optional[str],
    scope: Optional[str],
    client_id_source: Optional[str],
    client_secret_source: Optional[str],
) -> Profile:
    """Merge command-line overrides into the active profile.

    Raises:
        InvalidUsageError: If neither a profile nor ``--token-url`` is
            available, or the merged settings are inconsistent.
        ConfigError: If the selected profile cannot be loaded.
    """
    from clientgrant.config import resolve_profile

    profile_name = ctx.obj.get("profile") if ctx.obj else None
    profile = resolve_profile(profile_name)

    overrides: dict[str, Any] = {
        key: value
        for key, value in {
            "token_url": token_url,
            "scope": scope,
            "client_id_source": client_id_source,
            "client_secret_source": client_secret_source,
        }.items()
        if value is not None
    }

    if profile is None:
        if token_url is None:
            raise InvalidUsageError(
                "No profile selected. Pass --profile or --token-url."
            )
        data: dict[str, Any] = {"name": "command-line", **overrides}
    else:
        data = {**profile.model_dump(), **overrides}

    try:
        return Profile.model_validate(data)
    except ValueError as exc:
        raise InvalidUsageError(str(exc)) from exc


def _grant_for(profile: Profile) -> GrantRequest:
    from clientgrant.config import grant_request_from_profile

    return grant_request_from_profile(profile)


@token_app.command("fetch")
def token_fetch(
    ctx: typer.Context,
    token_url: Optional[str] = _TOKEN_URL_OPTION,
    scope: Optional[str] = _SCOPE_OPTION,
    client_id_source: Optional[str] = _CLIENT_ID_OPTION,
    client_secret_source: Optional[str] = _CLIENT_SECRET_OPTION,
    timeout: Optional[float] = typer.Option(
        None, "--timeout", help="Request timeout in seconds."
    ),
    insecure: bool = typer.Option(
        False, "--insecure", "-k", help="Skip TLS certificate verification."
    ),
    header: bool = typer.Option(
        False, "--header", help="Print only the Authorization header value."
    ),
) -> None:
    """Request an access token from the token endpoint.

    Prints the decoded token response to stdout. When the endpoint answers
    anything other than a valid token, the failure kind is reported on
    stderr and the command exits with the matching exit code (3 for a
    non-200 status, 7 for an undecodable body).

    Example::

        clientgrant token fetch --profile billing
        clientgrant token fetch --token-url https://auth.example.com/token \\
            --client-id-source env:CID --client-secret-source env:CSECRET --json
    """
    from clientgrant.grant import raise_for_failure
    from clientgrant.transport import fetch_token

    try:
        profile = _effective_profile(
            ctx, token_url, scope, client_id_source, client_secret_source
        )
        request_config: RequestConfig = profile.request
        verify = request_config.verify_ssl and not insecure
        if not verify:
            warning(f"TLS certificate verification is disabled for {profile.token_url}")
        result = fetch_token(
            _grant_for(profile),
            timeout=timeout if timeout is not None else request_config.timeout,
            verify=verify,
        )
        token = raise_for_failure(result)
    except ClientGrantError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None

    if header:
        print_data(token.authorization_header)
    else:
        format_response(token.model_dump(mode="json"))


@token_app.command("request")
def token_request(
    ctx: typer.Context,
    token_url: Optional[str] = _TOKEN_URL_OPTION,
    scope: Optional[str] = _SCOPE_OPTION,
    client_id_source: Optional[str] = _CLIENT_ID_OPTION,
    client_secret_source: Optional[str] = _CLIENT_SECRET_OPTION,
    show_secret: bool = typer.Option(
        False, "--show-secret", help="Do not redact client_secret."
    ),
) -> None:
    """Show the token request without sending it.

    The form body is decoded back into its parameters for display; the
    client secret is redacted unless ``--show-secret`` is given.

    Example::

        clientgrant token request --profile billing --json
    """
    from clientgrant.grant import decode_parameters

    try:
        profile = _effective_profile(
            ctx, token_url, scope, client_id_source, client_secret_source
        )
        request = _grant_for(profile).build()
    except ClientGrantError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None

    params = decode_parameters(request.body)
    secret_key = GrantParameter.CLIENT_SECRET.value
    if secret_key in params and not show_secret:
        params[secret_key] = _REDACTED

    format_response(
        {
            "method": request.method,
            "url": request.url,
            "headers": request.headers,
            "params": params,
        }
    )
