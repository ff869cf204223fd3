"""Landing zone CLI (list/show/resolve/order/plan)."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer
from rich.json import JSON
from rich.markup import escape
from rich.table import Table

from landing_zone.domain.errors import LandingZoneError
from landing_zone.infrastructure.artifacts import (
    ensure_run_dir,
    write_bicepparam,
    write_plan_artifacts,
)
from landing_zone.infrastructure.logging import get_console, log_plan_start, render_panel
from landing_zone.infrastructure.templating.engine import render_bicepparam
from landing_zone.runtime import AppContext, bootstrap
from landing_zone.services.deps import layers, topo_sort
from landing_zone.services.executor import execute_plan
from landing_zone.services.outputs import collect_outputs
from landing_zone.services.resolver import parse_resource_id
from landing_zone.services.spec_loader import (
    apply_overrides,
    discover_parameter_sets,
    load_parameters,
    resolve_parameter_set,
)
from landing_zone.services.stages import build_plan, plan_graph
from landing_zone.utils.selection import parse_selection

app = typer.Typer(help="AI landing zone planner", no_args_is_help=True)

RootOpt = Annotated[Path | None, typer.Option(help="Parameter sets directory")]


@app.callback()
def init() -> None:
    """Bootstrap environment (dotenv + config + logging) before any command."""
    bootstrap()


def _root(root: Path | None) -> Path:
    return root or AppContext.get().config.parameters_root


def _fail(exc: Exception) -> typer.Exit:
    get_console().print(f"[bold red]error:[/bold red] {escape(str(exc))}", soft_wrap=True)
    return typer.Exit(code=1)


@app.command("list")
def list_cmd(
    root: RootOpt = None,
    json_out: Annotated[bool, typer.Option("--json", help="Emit JSON list")] = False,
) -> None:
    cons = get_console()
    mapping = discover_parameter_sets(_root(root))
    if not mapping:
        cons.print("[yellow]No parameter sets found[/yellow]")
        return
    rows: list[dict[str, str]] = []
    for name, path in mapping.items():
        try:
            params = load_parameters(path)
        except LandingZoneError as exc:
            status = escape(str(exc))
            rows.append({"name": name, "location": "-", "resource_group": "-", "status": status})
            continue
        rows.append(
            {
                "name": name,
                "location": params.location,
                "resource_group": params.resource_group,
                "status": "ok",
            }
        )
    if json_out:
        cons.print(JSON.from_data(rows))
        return
    table = Table(title="Parameter sets")
    for col in ("Name", "Location", "Resource Group", "Status"):
        table.add_column(col)
    for r in rows:
        table.add_row(r["name"], r["location"], r["resource_group"], r["status"])
    cons.print(table)


@app.command("show")
def show_cmd(
    name: str,
    root: RootOpt = None,
    override: Annotated[list[str] | None, typer.Option(help="key=value overrides")] = None,
    json_out: Annotated[bool, typer.Option("--json", help="Emit JSON")] = False,
) -> None:
    cons = get_console()
    try:
        params = apply_overrides(resolve_parameter_set(name, _root(root)), override or [])
        plan = build_plan(params, strict=AppContext.get().config.strict_resource_ids)
    except LandingZoneError as exc:
        raise _fail(exc) from exc
    if json_out:
        cons.print(JSON.from_data({
            "parameters": params.model_dump(mode="json"),
            "token": plan.token,
            "refs": {k: v.model_dump(mode="json") for k, v in plan.refs.items()},
        }))
        return
    table = Table(title=f"{params.name} (token {plan.token})")
    for col in ("Component", "Action", "Name", "Subscription", "Resource Group"):
        table.add_column(col)
    for component, ref in plan.refs.items():
        style = "green" if ref.create else "blue"
        table.add_row(
            component,
            f"[{style}]{ref.action}[/{style}]",
            ref.name,
            ref.subscription_id or "-",
            ref.resource_group or "-",
        )
    cons.print(table)


@app.command("resolve")
def resolve_cmd(
    resource_id: Annotated[str, typer.Argument(help="Fully-qualified resource id")],
    strict: Annotated[bool, typer.Option(help="Reject malformed ids")] = False,
    json_out: Annotated[bool, typer.Option("--json", help="Emit JSON")] = False,
) -> None:
    cons = get_console()
    try:
        parts = parse_resource_id(resource_id, strict=strict)
    except LandingZoneError as exc:
        raise _fail(exc) from exc
    if json_out:
        cons.print(JSON.from_data(parts.model_dump()))
        return
    table = Table(title="Resource id")
    table.add_column("Segment")
    table.add_column("Value")
    for key, value in parts.model_dump().items():
        table.add_row(key, value or "[dim]-[/dim]")
    cons.print(table)
    if not parts.is_complete:
        cons.print(
            "[yellow]incomplete resource id: it would still be reused as-is "
            "(pass --strict to reject)[/yellow]",
            soft_wrap=True,
        )


@app.command("order")
def order_cmd(
    name: str,
    root: RootOpt = None,
    target: Annotated[
        str | None, typer.Option(help="Comma separated steps or patterns (plus dependencies)")
    ] = None,
    show_layers: Annotated[bool, typer.Option("--layers", help="Group into parallel waves")] = False,
) -> None:
    try:
        params = resolve_parameter_set(name, _root(root))
        plan = build_plan(params, strict=AppContext.get().config.strict_resource_ids)
        graph = plan_graph(plan)
        targets = parse_selection(target, plan.step_names)
    except (LandingZoneError, ValueError) as exc:
        raise _fail(exc) from exc
    if show_layers:
        body = "\n".join(f"{i}: {', '.join(wave)}" for i, wave in enumerate(layers(graph)))
        render_panel("deployment layers", body, style="cyan")
        return
    render_panel("deployment order", "\n".join(topo_sort(graph, targets)), style="cyan")


@app.command("plan")
def plan_cmd(
    name: str,
    root: RootOpt = None,
    override: Annotated[list[str] | None, typer.Option(help="key=value overrides")] = None,
    target: Annotated[
        str | None, typer.Option(help="Comma separated steps or patterns (plus dependencies)")
    ] = None,
    output: Annotated[Path | None, typer.Option(help="Artifacts output root")] = None,
    fail_fast: Annotated[
        bool | None, typer.Option("--fail-fast/--no-fail-fast", help="Stop at first failure")
    ] = None,
    strict: Annotated[
        bool | None, typer.Option("--strict/--lenient", help="Reject malformed resource ids")
    ] = None,
    json_out: Annotated[bool, typer.Option("--json", help="Emit outputs JSON only")] = False,
) -> None:
    config = AppContext.get().config
    cons = get_console()
    try:
        params = apply_overrides(resolve_parameter_set(name, _root(root)), override or [])
        if not json_out:
            log_plan_start(name=params.name, description=params.description)
        plan = build_plan(
            params, strict=config.strict_resource_ids if strict is None else strict
        )
        targets = parse_selection(target, plan.step_names)
    except (LandingZoneError, ValueError) as exc:
        raise _fail(exc) from exc
    report = execute_plan(
        plan,
        fail_fast=config.fail_fast if fail_fast is None else fail_fast,
        targets=targets,
        show_progress=not json_out,
    )
    outputs = collect_outputs(plan, report)
    run_dir = ensure_run_dir((output or config.output_root) / params.name)
    write_plan_artifacts(run_dir, plan, outputs, report)
    write_bicepparam(run_dir, render_bicepparam(plan, params))
    if json_out:
        cons.print(JSON.from_data(outputs.model_dump(mode="json")))
    else:
        counts = report.counts()
        info = [
            f"[bold cyan]{params.name}[/bold cyan] token {plan.token}",
            "steps: " + ", ".join(f"{k}={v}" for k, v in sorted(counts.items())),
            f"create: {sum(1 for r in plan.refs.values() if r.create)}"
            f" reuse: {sum(1 for r in plan.refs.values() if r.reuse)}",
            f"artifacts: [link={run_dir.resolve().as_uri()}]{run_dir}[/link]",
        ]
        render_panel("plan summary", "\n".join(info), style="green" if report.succeeded else "red")
    if not report.succeeded:
        raise typer.Exit(code=1)


if __name__ == "__main__":  # pragma: no cover
    app()
