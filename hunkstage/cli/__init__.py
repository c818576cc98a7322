"""CLI entry point for hunkstage.

This module provides the main CLI application that combines all commands
and subcommands into a single unified interface.
"""

import typer

from hunkstage.cli.clean import clean_command
from hunkstage.cli.config import config_app
from hunkstage.cli.init import init_config
from hunkstage.cli.main import main_command
from hunkstage.cli.stage import (
    focus_command,
    patch_command,
    show_command,
    stage_command,
    unstage_command,
)

# Main application
app = typer.Typer(
    name="hunkstage",
    help="hunkstage: stage individual lines and hunks from the command line",
    add_completion=False,
)

# Add subcommand groups
app.add_typer(config_app, name="config")

# Add individual commands
app.command("init")(init_config)
app.command("show")(show_command)
app.command("stage")(stage_command)
app.command("unstage")(unstage_command)
app.command("patch")(patch_command)
app.command("focus")(focus_command)
app.command("clean")(clean_command)

# Set the main callback for default behavior (includes --version flag)
app.callback(invoke_without_command=True)(main_command)


__all__ = [
    "app",
    "clean_command",
    "config_app",
    "init_config",
    "main_command",
    "show_command",
    "stage_command",
    "unstage_command",
    "patch_command",
    "focus_command",
]
