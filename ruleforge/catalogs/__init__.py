"""
RuleForge built-in catalogs.

Rule definitions for the built-in games ship as YAML files next to this
module. Each ``register_*`` function loads one of them into a registry;
registering the same catalog twice is a no-op.
"""

from __future__ import annotations

from pathlib import Path
from typing import Iterable

from ruleforge.catalogs.loader import CatalogLoader
from ruleforge.core.errors import CatalogError
from ruleforge.core.models.rule import GameRule
from ruleforge.core.registry import RuleRegistry

CATALOG_DIR = Path(__file__).parent

BUILTIN_CATALOGS: dict[str, str] = {
    "chess": "chess.yaml",
    "platformer": "platformer.yaml",
    "tictactoe": "tictactoe.yaml",
}


def register_builtin_game(registry: RuleRegistry, game: str) -> list[GameRule]:
    """Register the built-in catalog of one game.

    Raises:
        CatalogError: No built-in catalog exists for ``game``
    """
    filename = BUILTIN_CATALOGS.get(game)
    if filename is None:
        raise CatalogError(
            f"No built-in catalog for game: {game}",
            {"game": game, "available": sorted(BUILTIN_CATALOGS)},
        )
    return CatalogLoader(registry).load_file(CATALOG_DIR / filename)


def register_chess_rules(registry: RuleRegistry) -> list[GameRule]:
    return register_builtin_game(registry, "chess")


def register_platformer_rules(registry: RuleRegistry) -> list[GameRule]:
    return register_builtin_game(registry, "platformer")


def register_tictactoe_rules(registry: RuleRegistry) -> list[GameRule]:
    return register_builtin_game(registry, "tictactoe")


def register_builtin_games(
    registry: RuleRegistry,
    games: Iterable[str] | None = None,
) -> list[GameRule]:
    """Register several built-in catalogs (all of them by default)."""
    added: list[GameRule] = []
    for game in games if games is not None else BUILTIN_CATALOGS:
        added.extend(register_builtin_game(registry, game))
    return added


__all__ = [
    "CATALOG_DIR",
    "BUILTIN_CATALOGS",
    "CatalogLoader",
    "register_builtin_game",
    "register_chess_rules",
    "register_platformer_rules",
    "register_tictactoe_rules",
    "register_builtin_games",
]
