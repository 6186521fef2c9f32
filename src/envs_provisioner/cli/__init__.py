"""Command-line entry point: ``envs-provisioner plan|apply|validate|which``.

Logging goes to stderr so ``which`` output stays pipeable.
"""

from __future__ import annotations

import logging
import os
import sys

import typer

from envs_provisioner import __version__

app = typer.Typer(
    name="envs-provisioner",
    no_args_is_help=True,
    add_completion=False,
)


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"envs-provisioner {__version__}")
        raise typer.Exit


# Installers run for minutes; timestamps show where the time went.
_LOG_FORMAT = "%(asctime)s %(levelname)-7s %(name)s: %(message)s"
_LOG_DATEFMT = "%H:%M:%S"

# Index is the number of -v flags, capped at -vv.
_VERBOSITY = (None, logging.INFO, logging.DEBUG)


def _log_level(verbose: int) -> int | None:
    """``ENVS_LOG`` beats ``-v``; None leaves logging alone."""
    name = os.environ.get("ENVS_LOG", "").upper()
    if not name:
        return _VERBOSITY[min(verbose, len(_VERBOSITY) - 1)]

    known = logging.getLevelNamesMapping()
    if name in known and name != "NOTSET":
        return known[name]
    typer.echo(
        typer.style(
            f"WARNING: invalid ENVS_LOG level '{name}', using INFO", fg=typer.colors.YELLOW
        ),
        err=True,
    )
    return logging.INFO


def _configure_logging(verbose: int) -> None:
    # Without a level Python's last-resort handler still prints warnings.
    level = _log_level(verbose)
    if level is None:
        return
    logging.basicConfig(format=_LOG_FORMAT, datefmt=_LOG_DATEFMT, stream=sys.stderr, force=True)
    logging.getLogger("envs_provisioner").setLevel(level)


@app.callback()
def main(
    version: bool | None = typer.Option(
        None,
        "--version",
        "-V",
        help="Show version and exit.",
        callback=_version_callback,
        is_eager=True,
    ),
    verbose: int = typer.Option(
        0,
        "--verbose",
        "-v",
        count=True,
        help="Increase log verbosity (-v info, -vv debug).",
    ),
) -> None:
    """Provision Python interpreters, virtualenvs and conda environments."""
    _ = version
    _configure_logging(verbose)


# Register commands after app is created to avoid circular imports.
from envs_provisioner.cli import commands as _commands  # noqa: E402, F401
