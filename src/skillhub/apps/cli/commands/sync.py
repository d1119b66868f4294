# src/skillhub/apps/cli/commands/sync.py
from __future__ import annotations

import json
from typing import Optional

import typer
from rich import print

from skillhub.apps.cli.common import parse_strategy, parse_tools, run_safe
from skillhub.domain import SyncPlan
from skillhub.services.hub_context import get_ctx

app = typer.Typer(help="Projection of hub skills into tools")


@app.command("run")
@run_safe
def sync_cmd(
    skill: Optional[str] = typer.Option(None, "--skill", help="Only this skill (default: every installed skill)"),
    tools: Optional[str] = typer.Option(None, "--tools", help="Comma-separated tool ids (default: all registered)"),
    strategy: Optional[str] = typer.Option(None, "--strategy", help="auto | link | copy"),
    reconcile: bool = typer.Option(False, "--reconcile", help="Check drift first so drifted projections are repaired"),
):
    """Plan and execute the sync of installed skills to tools."""
    ctx = get_ctx()
    engine = ctx.engine
    forced = parse_strategy(strategy)
    target_tools = parse_tools(tools, [a.tool for a in engine.adapters])

    if reconcile:
        drifts = engine.check_drift()
        if not drifts:
            print("  [green]✓[/green] no drift detected")
        for d in drifts:
            print(f"  [yellow]•[/yellow] {d.skill_id} in {d.tool}: {d.drift.drift_type.label()}")

    records = ctx.store.list_installed()
    if skill:
        records = [r for r in records if r.skill_id == skill]
        if not records:
            print(f"[red]error:[/red] skill not installed: {skill}")
            raise typer.Exit(code=1)
    if not records:
        print("[dim]No skills to sync.[/dim]")
        return

    plan = SyncPlan()
    for rec in records:
        for tool in target_tools:
            st = forced or ctx.config.strategy_for(tool)
            for action in engine.plan_sync(rec.skill_id, [tool], st).actions():
                plan.add(action)

    if plan.is_empty():
        print("[green]Everything is in sync.[/green]")
        return

    failed = 0
    for r in engine.execute_plan(plan):
        if r.success:
            print(f"  [green]✓[/green] {r.action.value} {r.skill_id} → {r.tool}")
        else:
            failed += 1
            print(f"  [red]✗[/red] {r.action.value} {r.skill_id} → {r.tool} ({r.error})")
    if failed:
        raise typer.Exit(code=1)


@app.command("remove")
@run_safe
def unsync_cmd(
    skill_id: str = typer.Argument(...),
    tools: Optional[str] = typer.Option(None, "--tools", help="Comma-separated tool ids (default: all registered)"),
):
    """Remove a skill's projection from tools."""
    engine = get_ctx().engine
    for tool in parse_tools(tools, [a.tool for a in engine.adapters]):
        removed = engine.unsync_skill(skill_id, tool)
        print(f"  {'[green]removed[/green]' if removed else '[dim]absent[/dim]'} {skill_id} ← {tool}")


@app.command("drift")
@run_safe
def drift_cmd(json_output: bool = typer.Option(False, "--json", help="Print JSON")):
    """Tracked projections that no longer match the filesystem."""
    drifts = get_ctx().engine.check_drift()
    if json_output:
        payload = [{"skill_id": d.skill_id, "tool": d.tool, **d.drift.to_dict()} for d in drifts]
        typer.echo(json.dumps({"drift": payload}, ensure_ascii=False))
        return
    if not drifts:
        print("[green]No drift detected.[/green]")
        return
    for d in drifts:
        print(f"  [yellow]•[/yellow] {d.skill_id} in {d.tool}: {d.drift.drift_type.label()} ({d.drift.description})")
