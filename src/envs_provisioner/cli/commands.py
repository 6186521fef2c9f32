"""CLI command implementations."""

from __future__ import annotations

import os
from pathlib import Path
from typing import TYPE_CHECKING, Annotated, Literal

import typer

from envs_provisioner.cli import app
from envs_provisioner.cli.errors import handle_error

if TYPE_CHECKING:
    from envs_provisioner.config.schema import Config
    from envs_provisioner.engine.types import ApplyResult, Plan

ConfigPath = Annotated[
    Path,
    typer.Option("--config", "-c", help="Path to the configuration file."),
]

NoColor = Annotated[
    bool,
    typer.Option("--no-color", help="Disable colored output."),
]

AutoApprove = Annotated[
    bool,
    typer.Option("--auto-approve", help="Skip interactive approval."),
]

DEFAULT_CONFIG = Path("envs.yaml")


def _use_color(no_color: bool) -> bool:
    """Determine whether to use color output."""
    return not (no_color or os.environ.get("NO_COLOR"))


def _apply_with_progress(plan_obj: Plan, cfg: Config, *, color: bool) -> ApplyResult:
    """Apply a plan with a Rich progress bar and per-resource status lines."""
    from rich.console import Console
    from rich.progress import BarColumn, Progress, SpinnerColumn, TaskProgressColumn, TextColumn

    from envs_provisioner.config import apply
    from envs_provisioner.engine.types import Action, ResourceChange

    console = Console(no_color=not color)
    actionable = [c for c in plan_obj.changes if c.action == Action.PROVISION]

    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        BarColumn(),
        TaskProgressColumn(),
        console=console,
    ) as progress:
        task = progress.add_task("Provisioning", total=len(actionable))

        def on_progress(
            change: ResourceChange, event: Literal["start", "done", "failed"]
        ) -> None:
            if event == "start":
                progress.update(task, description=f"{change.address}: provisioning...")
            elif event == "done":
                progress.console.print(f"  {change.address}: provisioned")
                progress.advance(task)
            else:
                progress.console.print(f"  {change.address}: [red]failed[/red]")
                progress.advance(task)

        return apply(plan_obj, cfg, progress=on_progress)


@app.command()
def plan(
    config: ConfigPath = DEFAULT_CONFIG,
    out: Annotated[
        Path | None,
        typer.Option("--out", "-o", help="Save plan to file."),
    ] = None,
    no_color: NoColor = False,
) -> None:
    """Show which environments would be provisioned.

    Exits with code 2 when something is left to provision.
    """
    from envs_provisioner.cli.formatting import (
        format_plan,
        format_plan_summary,
        has_actionable_changes,
    )
    from envs_provisioner.config import load
    from envs_provisioner.config import plan as plan_fn

    color = _use_color(no_color)
    try:
        cfg = load(config)
        plan_obj = plan_fn(cfg)
    except Exception as exc:
        raise typer.Exit(handle_error(exc, color=color)) from exc

    typer.echo(format_plan(plan_obj, color=color))
    typer.echo()
    typer.echo(format_plan_summary(plan_obj.summary(), color=color))

    if out is not None:
        plan_obj.save(out)
        typer.echo(f"\nPlan saved to {out}")

    if has_actionable_changes(plan_obj):
        raise typer.Exit(2)


@app.command(name="apply")
def apply_cmd(
    plan_file: Annotated[
        Path | None,
        typer.Argument(help="Saved plan file to apply."),
    ] = None,
    config: ConfigPath = DEFAULT_CONFIG,
    auto_approve: AutoApprove = False,
    no_color: NoColor = False,
) -> None:
    """Provision every declared environment that does not exist yet.

    Exits with code 1 when any environment failed to provision.
    """
    from envs_provisioner.cli.formatting import (
        format_apply_summary,
        format_plan,
        format_plan_summary,
        has_actionable_changes,
    )
    from envs_provisioner.config import load
    from envs_provisioner.config import plan as plan_fn
    from envs_provisioner.engine.types import Plan

    color = _use_color(no_color)
    try:
        cfg = load(config)
        plan_obj = Plan.load(plan_file) if plan_file is not None else plan_fn(cfg)
    except Exception as exc:
        raise typer.Exit(handle_error(exc, color=color)) from exc

    if not has_actionable_changes(plan_obj):
        typer.echo("Nothing to provision. Environments are up-to-date.")
        raise typer.Exit(0)

    typer.echo(format_plan(plan_obj, color=color))
    typer.echo()
    typer.echo(format_plan_summary(plan_obj.summary(), color=color))
    typer.echo()

    if not auto_approve:
        try:
            typer.confirm("Do you want to provision these environments?", abort=True)
        except typer.Abort as e:
            typer.echo("Apply canceled.", err=True)
            raise typer.Exit(1) from e

    try:
        result = _apply_with_progress(plan_obj, cfg, color=color)
    except Exception as exc:
        raise typer.Exit(handle_error(exc, color=color)) from exc

    typer.echo()
    typer.echo(format_apply_summary(result, color=color))
    if not result.ok:
        raise typer.Exit(1)


@app.command()
def validate(
    config: ConfigPath = DEFAULT_CONFIG,
    no_color: NoColor = False,
) -> None:
    """Validate the configuration file."""
    from envs_provisioner.cli.formatting import styler
    from envs_provisioner.config import load
    from envs_provisioner.config import plan as plan_fn

    color = _use_color(no_color)
    try:
        cfg = load(config)
        plan_fn(cfg)
    except Exception as exc:
        raise typer.Exit(handle_error(exc, color=color)) from exc

    typer.echo(styler(color)("Configuration is valid.", fg="green"))


@app.command()
def which(
    env_name: Annotated[str, typer.Argument(metavar="NAME", help="Environment name.")],
    name: Annotated[str, typer.Argument(metavar="EXECUTABLE", help="Executable name.")],
    config: ConfigPath = DEFAULT_CONFIG,
    no_color: NoColor = False,
) -> None:
    """Print the path of an executable inside a declared environment."""
    from envs_provisioner.config import load
    from envs_provisioner.config import which as which_fn

    color = _use_color(no_color)
    try:
        cfg = load(config)
        path = which_fn(cfg, env_name, name)
    except Exception as exc:
        raise typer.Exit(handle_error(exc, color=color)) from exc

    typer.echo(str(path))
