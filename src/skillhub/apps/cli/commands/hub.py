# src/skillhub/apps/cli/commands/hub.py
from __future__ import annotations

import json
from dataclasses import asdict
from pathlib import Path
from typing import Optional

import typer
from rich import print
from rich.console import Console
from rich.table import Table

from skillhub.apps.cli.common import parse_strategy, run_safe
from skillhub.services.hub_context import get_ctx

app = typer.Typer(help="Hub contents and hub⇄tools reconciliation")


@app.command("list")
@run_safe
def list_cmd(json_output: bool = typer.Option(False, "--json", help="Print JSON")):
    """Skills in the hub. Directories without an install record are marked as untracked."""
    ctx = get_ctx()
    records = {r.skill_id: r for r in ctx.store.list_installed()}
    items = []
    for sid in ctx.store.list_skill_ids():
        rec = records.get(sid)
        items.append(
            {
                "id": sid,
                "version": rec.version.version if rec else None,
                "hash": rec.version.content_hash if rec else None,
                "tools": list(rec.projected_tools) if rec else [],
                "tracked": rec is not None,
            }
        )
    if json_output:
        typer.echo(json.dumps({"skills": items}, ensure_ascii=False))
        return
    if not items:
        print("[yellow]The hub is empty.[/yellow]")
        return
    for it in items:
        if it["tracked"]:
            print(f"- {it['id']} (version: {it['version']}, hash: {it['hash'][:12]}) → {', '.join(it['tools']) or '-'}")
        else:
            print(f"- {it['id']} [dim](untracked)[/dim]")


@app.command("import")
@run_safe
def import_cmd(
    path: Path = typer.Argument(..., help="Skill directory (or single file) to copy into the hub"),
    skill_id: Optional[str] = typer.Option(None, "--id", help="Skill id (defaults to the directory name)"),
    version: str = typer.Option("0.0.0", "--version", help="Version label"),
):
    ctx = get_ctx()
    rec = ctx.store.import_skill(path, skill_id=skill_id, version=version)
    print(f"[green]imported[/green] {rec.skill_id} ({rec.version.content_hash[:12]})")


@app.command("refresh")
@run_safe
def refresh_cmd(
    skill_id: str = typer.Argument(...),
    version: Optional[str] = typer.Option(None, "--version", help="New version label (default: keep the current one)"),
):
    """Re-hash a hub skill after its content was edited, so the next `sync run` updates the tools."""
    ctx = get_ctx()
    current = ctx.store.get_record(skill_id)
    old_hash = current.version.content_hash if current else None
    rec = ctx.store.refresh_version(skill_id, version)
    changed = old_hash != rec.version.content_hash
    state = "[green]changed[/green]" if changed else "[dim]unchanged[/dim]"
    print(f"{state} {rec.skill_id} (version: {rec.version.version}, hash: {rec.version.content_hash[:12]})")


@app.command("remove")
@run_safe
def remove_cmd(skill_id: str = typer.Argument(...)):
    """Unsync a skill from every tool and delete it from the hub."""
    ctx = get_ctx()
    for adapter in ctx.engine.adapters:
        ctx.engine.unsync_skill(skill_id, adapter.tool)
    ctx.store.remove_skill(skill_id)
    print(f"[green]removed[/green] {skill_id}")


@app.command("scan")
@run_safe
def scan_cmd(json_output: bool = typer.Option(False, "--json", help="Print JSON")):
    """Skills found in the tools' directories."""
    ctx = get_ctx()
    scanned = ctx.engine.scan_all_tools()
    if json_output:
        payload = [{**asdict(s), "path": str(s.path)} for s in scanned]
        typer.echo(json.dumps({"skills": payload}, ensure_ascii=False))
        return
    table = Table(title="Skills in tools")
    for col in ("skill", "tool", "in hub", "link", "path"):
        table.add_column(col)
    for s in scanned:
        table.add_row(s.id, s.tool, "yes" if s.in_hub else "no", "yes" if s.is_link else "no", str(s.path))
    Console().print(table)


@app.command("collect")
@run_safe
def collect_cmd():
    """Copy skills that only tools have into the hub."""
    result = get_ctx().engine.collect_to_hub()
    for sid in result.collected:
        print(f"  [green]✓[/green] {sid}")
    for sid, tool, err in result.errors:
        print(f"  [red]✗[/red] {sid} ({tool}): {err}")
    print(f"collected {len(result.collected)} skill(s)")


@app.command("distribute")
@run_safe
def distribute_cmd(strategy: Optional[str] = typer.Option(None, "--strategy", help="auto | link | copy (default: per-tool config)")):
    """Project every hub skill into every tool that lacks it."""
    ctx = get_ctx()
    forced = parse_strategy(strategy)
    resolver = (lambda _t: forced) if forced else ctx.config.strategy_for
    results = ctx.engine.distribute_from_hub(resolver)
    for r in results:
        mark = "[green]✓[/green]" if r.success else "[red]✗[/red]"
        print(f"  {mark} {r.skill_id} → {r.tool}")
    print(f"distributed {sum(r.success for r in results)}/{len(results)}")


@app.command("full-sync")
@run_safe
def full_sync_cmd(json_output: bool = typer.Option(False, "--json", help="Print JSON")):
    """Collect into the hub, then distribute to all tools."""
    ctx = get_ctx()
    result = ctx.engine.full_sync(ctx.config.strategy_for)
    if json_output:
        payload = {
            "collected_count": result.collected_count,
            "collected_skills": result.collected_skills,
            "collect_errors": [list(e) for e in result.collect_errors],
            "distributed": [r._asdict() for r in result.distributed],
        }
        typer.echo(json.dumps(payload, ensure_ascii=False))
        return
    print(f"collected {result.collected_count}, distributed {result.distributed_ok}/{len(result.distributed)}")


@app.command("status")
@run_safe
def status_cmd(json_output: bool = typer.Option(False, "--json", help="Print JSON")):
    """Which tools have each hub skill, from a fresh scan."""
    statuses = get_ctx().engine.get_hub_status()
    if json_output:
        payload = [{**asdict(s), "hub_path": str(s.hub_path)} for s in statuses]
        typer.echo(json.dumps({"skills": payload}, ensure_ascii=False))
        return
    table = Table(title="Hub status")
    for col in ("skill", "synced to", "missing in"):
        table.add_column(col)
    for s in statuses:
        table.add_row(s.skill_id, ", ".join(s.synced_to) or "-", ", ".join(s.missing_in) or "-")
    Console().print(table)
