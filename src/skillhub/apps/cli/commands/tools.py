# src/skillhub/apps/cli/commands/tools.py
from __future__ import annotations

import json

import typer
from rich.console import Console
from rich.table import Table

from skillhub.adapters.tools.registry import make_adapter
from skillhub.apps.cli.common import run_safe
from skillhub.services.hub_context import get_ctx

app = typer.Typer(help="Tools known to skillhub")


@app.command("list")
@run_safe
def list_cmd(
    json_output: bool = typer.Option(False, "--json", help="Print JSON"),
    all_tools: bool = typer.Option(False, "--all", help="Include tools that are not detected"),
):
    """Configured tools, their skills directory and whether they are detected."""
    ctx = get_ctx()
    home = ctx.paths.user_home()
    rows = []
    for profile in ctx.config.profiles():
        adapter = make_adapter(profile, home=home)
        detected = adapter.detect()
        if not (all_tools or detected):
            continue
        path = profile.global_skills_dir(home)
        rows.append(
            {
                "tool": profile.tool,
                "name": profile.display_name(),
                "enabled": profile.enabled,
                "detected": detected,
                "strategy": ctx.config.strategy_for(profile.tool).value,
                "skills_dir": str(path) if path else None,
            }
        )

    if json_output:
        typer.echo(json.dumps({"tools": rows}, ensure_ascii=False))
        return

    table = Table(title="Tools")
    for col in ("tool", "name", "enabled", "detected", "strategy", "skills_dir"):
        table.add_column(col)
    for r in rows:
        table.add_row(r["tool"], r["name"], "yes" if r["enabled"] else "no", "yes" if r["detected"] else "no", r["strategy"], r["skills_dir"] or "-")
    Console().print(table)
