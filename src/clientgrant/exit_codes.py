"""Process exit codes of the ``clientgrant`` command.

Scripts can tell a refused client from an unreachable or misbehaving
token endpoint by the exit status alone::

    clientgrant token fetch --profile billing > token.json
    case $? in
        3) echo "credentials rejected" ;;
        6) echo "token endpoint unreachable" ;;
        7) echo "token endpoint sent something that is not a token" ;;
    esac

Codes 2 and 6 keep their meaning from the clig.dev conventions.
"""

EXIT_GENERIC_FAILURE = 1
"""Configuration problems and anything unclassified."""

EXIT_INVALID_USAGE = 2
"""Bad or contradictory options, such as half a credential pair."""

EXIT_AUTH_FAILURE = 3
"""The token endpoint answered with a status other than 200."""

EXIT_CONNECTION_ERROR = 6
"""The token endpoint could not be reached (DNS, refused, timeout, TLS)."""

EXIT_DECODE_ERROR = 7
"""HTTP 200, but the body is not a usable token response."""

EXIT_CANCELLED = 130
"""Interrupted with Ctrl-C (128 + SIGINT)."""
