"""Plan and apply output rendering."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, NamedTuple

import typer

from envs_provisioner.engine.types import Action, Status

if TYPE_CHECKING:
    from collections.abc import Callable

    from envs_provisioner.engine.types import ApplyResult, Plan, ResourceChange


class _ActionStyle(NamedTuple):
    color: str
    symbol: str


_ACTION_STYLES: dict[str, _ActionStyle] = {
    "provision": _ActionStyle("green", "+"),
    "no-op": _ActionStyle("bright_black", " "),
    "skip": _ActionStyle("yellow", "!"),
    "unsupported": _ActionStyle("red", "x"),
}

_ACTION_DESC: dict[str, str] = {
    "provision": "will be provisioned",
    "no-op": "already exists",
    "skip": "will be skipped",
    "unsupported": "is not supported",
}

# Attributes that only matter to the engine.
_HIDDEN_ATTRS = frozenset({"name", "depends_on", "content"})


def styler(color: bool) -> Callable[..., str]:
    """Return ``typer.style`` when *color* is True, otherwise a passthrough."""
    if color:
        return typer.style
    return lambda text, **_kw: text


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def has_actionable_changes(plan: Plan) -> bool:
    """Return True if the plan would provision anything."""
    return any(c.action == Action.PROVISION for c in plan.changes)


def _align_values(items: dict[str, str]) -> list[tuple[str, str]]:
    """Right-pad keys so ``=`` signs align."""
    if not items:
        return []
    max_key = max(len(k) for k in items)
    return [(k.ljust(max_key), v) for k, v in items.items()]


def _format_value(value: Any) -> str:
    """Format a value for display in a plan block."""
    if isinstance(value, str):
        return f'"{value}"'
    if value is None:
        return "null"
    if isinstance(value, bool):
        return str(value).lower()
    if isinstance(value, list):
        return "[" + ", ".join(_format_value(v) for v in value) + "]"
    return str(value)


# ---------------------------------------------------------------------------
# Plan rendering
# ---------------------------------------------------------------------------


def _change_attrs(change: ResourceChange) -> dict[str, str]:
    """Extract displayable ``key → formatted value`` pairs from a change."""
    if not change.desired:
        return {}
    return {
        k: _format_value(v)
        for k, v in change.desired.items()
        if k not in _HIDDEN_ATTRS and v not in (None, [], "")
    }


def format_change(change: ResourceChange, *, color: bool = True) -> str:
    """Render a single ResourceChange as a block (provision) or a one-liner."""
    style = styler(color)
    action_val = change.action.value
    sc = {"fg": _ACTION_STYLES[action_val].color}
    symbol = _ACTION_STYLES[action_val].symbol

    if change.action != Action.PROVISION:
        line = f"  {symbol} {change.address} {_ACTION_DESC[action_val]}"
        if change.reason and change.action != Action.NOOP:
            line += f": {change.reason}"
        return style(line, **sc)

    name = change.address.split(".", 1)[1] if "." in change.address else change.address
    lines = [
        style(f"  # {change.address} {_ACTION_DESC[action_val]}", bold=True, **sc),
        style(f'  {symbol} {change.resource_type} "{name}" {{', **sc),
        *[
            style(f"      {symbol} {k} = {v}", **sc)
            for k, v in _align_values(_change_attrs(change))
        ],
        style("    }", **sc),
    ]
    return "\n".join(lines)


def format_plan(plan: Plan, *, color: bool = True) -> str:
    """Render the full plan, grouped by category in run order."""
    if not plan.changes:
        return "Nothing declared. No environments to provision."

    style = styler(color)
    sections: list[str] = []
    current: str | None = None
    for change in plan.changes:
        if change.category != current:
            current = change.category
            sections.append(style(f"{current}:", bold=True))
        sections.append(format_change(change, color=color))
    return "\n".join(sections)


# ---------------------------------------------------------------------------
# Summaries
# ---------------------------------------------------------------------------


def format_plan_summary(summary: dict[str, int], *, color: bool = True) -> str:
    """Render ``Plan: 2 to provision, 1 up-to-date, 0 to skip.``"""
    style = styler(color)
    parts = [
        (summary.get("provision", 0), "to provision", "green"),
        (summary.get("no-op", 0), "up-to-date", None),
        (summary.get("skip", 0) + summary.get("unsupported", 0), "to skip", "yellow"),
    ]
    text = ", ".join(
        style(f"{n} {label}", fg=fg) if n and fg else f"{n} {label}" for n, label, fg in parts
    )
    return f"Plan: {text}."


def format_apply_summary(result: ApplyResult, *, color: bool = True) -> str:
    """Render ``Provisioning complete! Resources: 2 provisioned, 1 skipped, 0 failed.``"""
    style = styler(color)
    summary = result.summary()
    if result.ok:
        header = style("Provisioning complete!", fg="green", bold=True)
    else:
        header = style("Provisioning finished with errors!", fg="red", bold=True)
    counts = ", ".join(
        f"{summary[s.value]} {s.value}" for s in (Status.PROVISIONED, Status.SKIPPED, Status.FAILED)
    )
    lines = [f"{header} Resources: {counts}."]
    for outcome in result.failed:
        lines.append(style(f"  - {outcome.address}: {outcome.message}", fg="red"))
    return "\n".join(lines)
