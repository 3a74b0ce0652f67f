"""RuleForge CLI - browse rule catalogs and build configuration files.

Usage:
    ruleforge games
    ruleforge rules chess --category movement
    ruleforge new chess --name "Big Board" --set chess-board-size.width=10 --output ./configs
    ruleforge check ./configs/big-board-rules.json
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Annotated, Any, Optional

import typer
from dotenv import load_dotenv

# Load .env early so RULEFORGE_* variables reach the config defaults
load_dotenv()
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from ruleforge.app.config import get_config, reload_config
from ruleforge.app.factory import create_engine
from ruleforge.core.engine import GameRuleEngine
from ruleforge.core.errors import RuleForgeError
from ruleforge.core.models.configuration import ConfigurationMetadata, RuleValidationResult
from ruleforge.utils.logging import setup_logging

app = typer.Typer(
    name="ruleforge",
    help="RuleForge - game rule catalogs and configurations",
    add_completion=False,
)

console = Console()


@app.callback()
def configure(
    config: Annotated[Optional[Path], typer.Option("--config", "-c", help="Engine config JSON file")] = None,
    log_level: Annotated[Optional[str], typer.Option("--log-level", help="DEBUG, INFO, WARNING or ERROR")] = None,
) -> None:
    """Load the engine configuration and set up logging."""
    engine_config = reload_config(config)
    level = (log_level or engine_config.log_level).upper()
    if level not in ("DEBUG", "INFO", "WARNING", "ERROR"):
        console.print(f"[red]Error:[/red] Unknown log level: {log_level}")
        raise typer.Exit(2)
    setup_logging(level=level, console_output=True, file_output=False)


def _engine() -> GameRuleEngine:
    try:
        return create_engine(get_config())
    except RuleForgeError as e:
        console.print(f"[red]Catalog error:[/red] {e.message}")
        raise typer.Exit(1)


def _parse_assignment(text: str) -> tuple[str, str, Any]:
    """Split 'rule-id.key=value'; the value is read as JSON when it parses."""
    target, sep, raw = text.partition("=")
    rule_id, dot, key = target.rpartition(".")
    if not sep or not dot or not rule_id or not key:
        raise typer.BadParameter(f"Expected RULE.KEY=VALUE, got '{text}'", param_hint="--set")
    try:
        value = json.loads(raw)
    except json.JSONDecodeError:
        value = raw
    return rule_id, key, value


def _print_validation(validation: RuleValidationResult) -> None:
    if validation.valid:
        console.print("[green]Configuration is valid[/green]")
    for error in validation.errors:
        console.print(f"[red]error:[/red] {error}", markup=True, highlight=False)
    for warning in validation.warnings:
        console.print(f"[yellow]warning:[/yellow] {warning}", markup=True, highlight=False)


# --- Catalog Commands ---
@app.command("games")
def list_games() -> None:
    """List base games with registered rules."""
    engine = _engine()

    table = Table(title="Games")
    table.add_column("Game", style="cyan")
    table.add_column("Rules", justify="right")
    table.add_column("Default rules", justify="right")
    table.add_column("Categories")

    for game in engine.list_games():
        table.add_row(
            game,
            str(len(engine.get_rules_for_game(game))),
            str(len(engine.registry.default_rule_ids(game))),
            ", ".join(engine.get_categories(game)),
        )
    console.print(table)


@app.command("rules")
def list_rules(
    game: Annotated[str, typer.Argument(help="Base game, e.g. chess")],
    category: Annotated[Optional[str], typer.Option("--category", help="Only rules in this category")] = None,
) -> None:
    """List the rules of a base game."""
    engine = _engine()
    if not engine.registry.has_game(game):
        console.print(f"[red]Error:[/red] Unknown game: {game}")
        raise typer.Exit(1)

    rules = (
        engine.get_rules_by_category(game, category) if category
        else engine.get_rules_for_game(game)
    )

    table = Table(title=f"{game} rules")
    table.add_column("Id", style="cyan")
    table.add_column("Name")
    table.add_column("Category")
    table.add_column("Parameters", justify="right")
    table.add_column("Tags")
    table.add_column("Requires")

    for rule in rules:
        table.add_row(
            rule.id,
            rule.name,
            rule.category,
            str(len(rule.parameters)),
            ", ".join(rule.tags),
            ", ".join(rule.requires),
        )
    console.print(table)


# --- Configuration Commands ---
@app.command("new")
def new_configuration(
    game: Annotated[str, typer.Argument(help="Base game, e.g. chess")],
    name: Annotated[str, typer.Option("--name", "-n", help="Configuration name")] = "Custom Rules",
    description: Annotated[str, typer.Option("--description", "-d", help="Configuration description")] = "",
    author: Annotated[str, typer.Option("--author", help="Author recorded in the metadata")] = "",
    tags: Annotated[Optional[list[str]], typer.Option("--tag", "-t", help="Metadata tag")] = None,
    enable: Annotated[Optional[list[str]], typer.Option("--enable", "-e", help="Rule id to enable")] = None,
    disable: Annotated[Optional[list[str]], typer.Option("--disable", help="Rule id to disable")] = None,
    assignments: Annotated[Optional[list[str]], typer.Option("--set", "-s", help="RULE.KEY=VALUE override")] = None,
    output: Annotated[Optional[Path], typer.Option("--output", "-o", help="Output file or directory")] = None,
) -> None:
    """Create a configuration and export it as JSON."""
    engine = _engine()
    parsed = [_parse_assignment(text) for text in assignments or []]

    try:
        metadata = ConfigurationMetadata(author=author, tags=tags or [])
        snapshot = engine.create_configuration(game, name, description, metadata)
        for rule_id in enable or []:
            engine.enable_rule(snapshot.game_id, rule_id)
        for rule_id in disable or []:
            engine.disable_rule(snapshot.game_id, rule_id)
        for rule_id, key, value in parsed:
            engine.set_rule_parameter(snapshot.game_id, rule_id, key, value)
    except RuleForgeError as e:
        console.print(f"[red]Error:[/red] {e.message}", highlight=False)
        raise typer.Exit(1)

    payload = engine.export_configuration(snapshot.game_id)

    if output is None:
        typer.echo(payload)
    else:
        if output.is_dir():
            output = output / engine.export_filename(snapshot.game_id)
        output.parent.mkdir(parents=True, exist_ok=True)
        output.write_text(payload, encoding="utf-8")
        console.print(f"Saved configuration to [bold]{output}[/bold]")

    validation = engine.validate_configuration(snapshot.game_id)
    if output is not None:
        _print_validation(validation)
    if not validation.valid:
        raise typer.Exit(1)


@app.command("check")
def check_configuration(
    file: Annotated[Path, typer.Argument(help="Exported configuration JSON")],
) -> None:
    """Import a configuration file and report its validation result."""
    if not file.exists():
        console.print(f"[red]Error:[/red] File not found: {file}")
        raise typer.Exit(1)

    engine = _engine()
    try:
        game_id = engine.load_configuration(file)
    except RuleForgeError as e:
        console.print(f"[red]Import failed:[/red] {e.message}", highlight=False)
        raise typer.Exit(1)

    snapshot = engine.get_configuration(game_id)
    console.print(Panel(
        f"[bold]Name:[/bold] {snapshot.name}\n"
        f"[bold]Game:[/bold] {snapshot.base_game}\n"
        f"[bold]Author:[/bold] {snapshot.metadata.author or '-'}  [bold]Version:[/bold] {snapshot.metadata.version}\n"
        f"[bold]Active rules:[/bold] {len(snapshot.active_rules)}",
        title="Configuration",
        border_style="blue",
    ))
    _print_validation(snapshot.validation)
    if not snapshot.validation.valid:
        raise typer.Exit(1)


# Module entry point
def main() -> None:
    """Entry point for the ``ruleforge`` console script."""
    app()


if __name__ == "__main__":
    main()
