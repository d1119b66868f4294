# src/skillhub/apps/cli/app.py
from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer
from dotenv import find_dotenv, load_dotenv

from skillhub.apps.bootstrap import init_ctx
from skillhub.apps.cli.commands import hub, sync, tools
from skillhub.services.hub_context import get_ctx
from skillhub.services.settings import Settings

app = typer.Typer(help="skillhub: one hub of skills, projected into every tool")


@app.callback()
def main(
    hub_dir: Optional[Path] = typer.Option(None, "--hub", help="Hub root (default: $SKILLHUB_HOME or ~/.local/share/skillhub/store)"),
    home: Optional[Path] = typer.Option(None, "--home", help="Home directory tools are resolved against"),
    log_level: Optional[str] = typer.Option(None, "--log-level", help="DEBUG | INFO | WARNING"),
):
    """
    Composition root: reads settings (ENV > .env > defaults), applies CLI overrides and builds the context.
    """
    load_dotenv(find_dotenv(usecwd=True))
    settings = Settings.from_sources().with_overrides(hub_root=hub_dir, user_home=home, log_level=log_level)
    init_ctx(settings)


@app.command("where")
def where():
    """Print the hub root and config file."""
    ctx = get_ctx()
    typer.echo(f"hub: {ctx.paths.hub_dir()}")
    typer.echo(f"config: {ctx.paths.config_file()}")
    typer.echo(f"home: {ctx.paths.user_home()}")


app.add_typer(hub.app, name="hub")
app.add_typer(sync.app, name="sync")
app.add_typer(tools.app, name="tools")

if __name__ == "__main__":
    app()
