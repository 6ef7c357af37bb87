"""Profile commands -- manage saved token endpoint profiles.

Provides the ``clientgrant profile`` sub-command group. A profile stores
the token URL, default scope and *where* to read the client credentials
from; the credentials themselves are never written to disk.

Typical workflow::

    clientgrant profile add billing --token-url https://auth.example.com/token \\
        --client-id-source env:BILLING_ID --client-secret-source env:BILLING_SECRET
    clientgrant profile use billing
    clientgrant profile list
"""

from __future__ import annotations

from typing import Optional

import typer

from clientgrant.exceptions import ConfigError
from clientgrant.output import error, format_response, info, print_table, success


profile_app = typer.Typer(no_args_is_help=True)


@profile_app.command("add")
def profile_add(
    name: str = typer.Argument(help="Profile name."),
    token_url: str = typer.Option(..., "--token-url", help="Token endpoint URL."),
    scope: Optional[str] = typer.Option(None, "--scope", "-s", help="Default scope."),
    client_id_source: Optional[str] = typer.Option(
        None, "--client-id-source", help="Client id source (env:VAR, file:/path, prompt)."
    ),
    client_secret_source: Optional[str] = typer.Option(
        None, "--client-secret-source", help="Client secret source (env:VAR, file:/path, prompt)."
    ),
    timeout: float = typer.Option(30.0, "--timeout", help="Request timeout in seconds."),
    insecure: bool = typer.Option(
        False, "--insecure", help="Skip TLS certificate verification."
    ),
    force: bool = typer.Option(False, "--force", "-f", help="Overwrite an existing profile."),
) -> None:
    """Create or overwrite a profile.

    Raises:
        typer.Exit: With code 2 when the settings do not validate (bad
            name, half a credential pair) or the profile exists and
            ``--force`` is not given.
    """
    from clientgrant.config import profile_exists, save_profile
    from clientgrant.models import Profile, RequestConfig

    try:
        profile = Profile(
            name=name,
            token_url=token_url,
            scope=scope,
            client_id_source=client_id_source,
            client_secret_source=client_secret_source,
            request=RequestConfig(timeout=timeout, verify_ssl=not insecure),
        )
    except ValueError as exc:
        error(f"Invalid profile: {exc}")
        raise typer.Exit(code=2) from None

    if profile_exists(name) and not force:
        error(f"Profile '{name}' already exists. Use --force to overwrite.")
        raise typer.Exit(code=2)

    save_profile(profile)
    success(f"Profile '{name}' saved.")


@profile_app.command("list")
def profile_list() -> None:
    """List saved profiles; the default one is marked with ``*``."""
    from clientgrant.config import list_profiles, load_global_config, load_profile

    names = list_profiles()
    if not names:
        info("No profiles configured. Create one with 'clientgrant profile add'.")
        return

    default = load_global_config().default_profile
    rows: list[list[str]] = []
    for name in names:
        try:
            profile = load_profile(name)
        except ConfigError as exc:
            rows.append([name, "", "", f"invalid: {exc}"])
            continue
        rows.append(
            [
                f"{name} *" if name == default else name,
                profile.token_url,
                profile.scope or "",
                "yes" if profile.client_id_source else "no",
            ]
        )
    print_table(["name", "token_url", "scope", "credentials"], rows, title="Profiles")


@profile_app.command("show")
def profile_show(name: str = typer.Argument(help="Profile name.")) -> None:
    """Print a profile's stored settings."""
    from clientgrant.config import load_profile

    try:
        profile = load_profile(name)
    except ConfigError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None
    format_response(profile.model_dump(mode="json"))


@profile_app.command("remove")
def profile_remove(name: str = typer.Argument(help="Profile name.")) -> None:
    """Delete a profile, clearing it as default if needed."""
    from clientgrant.config import delete_profile, load_global_config, save_global_config

    try:
        delete_profile(name)
    except ConfigError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None

    config = load_global_config()
    if config.default_profile == name:
        save_global_config(config.model_copy(update={"default_profile": None}))
    success(f"Profile '{name}' removed.")


@profile_app.command("use")
def profile_use(name: str = typer.Argument(help="Profile name.")) -> None:
    """Make a profile the default."""
    from clientgrant.config import load_global_config, profile_exists, save_global_config

    try:
        exists = profile_exists(name)
    except ConfigError as exc:
        error(str(exc))
        raise typer.Exit(code=2) from None
    if not exists:
        error(f"Profile '{name}' not found.")
        raise typer.Exit(code=2)

    config = load_global_config()
    save_global_config(config.model_copy(update={"default_profile": name}))
    success(f"Default profile set to '{name}'.")
