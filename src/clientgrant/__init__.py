"""clientgrant -- OAuth 2.0 Client Credentials grant, request and response.

This package builds the token request of the Client Credentials grant
(:rfc:`6749#section-4.4`) and decodes the token endpoint's answer into a
typed result. The core is transport-agnostic; a small ``httpx`` helper and
a Typer CLI sit on top of it.

Typical workflow::

    clientgrant profile add billing --token-url https://auth.example.com/token \\
        --client-id-source env:CLIENT_ID --client-secret-source env:CLIENT_SECRET
    clientgrant token fetch --profile billing

Modules:
    grant: Request builder and response parser.
    models: Pydantic models shared across the entire package.
    transport: One-shot ``httpx`` token request.
    config: XDG-aware configuration and profile management.
    exceptions: Exception hierarchy with exit-code mapping.
    exit_codes: Numeric exit codes following clig.dev conventions.
    output: stdout/stderr formatting system with Rich support.
    app: Typer application and CLI entry point.
"""

__version__ = "0.1.0"
