# src/skillhub/apps/cli/common.py
from __future__ import annotations

import functools
import os
import traceback
from typing import Optional

import typer
from rich import print

from skillhub.domain import SyncStrategy
from skillhub.errors import SkillHubError


def run_safe(func):
    """Turn core errors into a one-line message and exit code 1."""

    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except (SkillHubError, ValueError, FileNotFoundError) as e:
            if os.getenv("SKILLHUB_CLI_DEBUG") == "1":
                traceback.print_exc()
            print(f"[red]error:[/red] {e}")
            raise typer.Exit(code=1)

    return wrapper


def parse_tools(value: Optional[str], default: list[str]) -> list[str]:
    if not value:
        return list(default)
    return [t.strip().lower() for t in value.split(",") if t.strip()]


def parse_strategy(value: Optional[str]) -> Optional[SyncStrategy]:
    if value is None:
        return None
    try:
        return SyncStrategy.parse(value)
    except ValueError as exc:
        raise typer.BadParameter(str(exc)) from None
