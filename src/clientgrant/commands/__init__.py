"""Built-in sub-command groups of the ``clientgrant`` CLI.

Each module exposes one :class:`typer.Typer` group that
:mod:`clientgrant.app` mounts on the root application.
"""
