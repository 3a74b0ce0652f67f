"""
Game Rule Engine facade.

The single object the presentation and game-loop layers talk to. It wires a
registry into the store, validator, notifier, and serializer and exposes
their operations as one public surface.

Usage:
    registry = RuleRegistry()
    register_chess_rules(registry)
    engine = GameRuleEngine(registry)

    config = engine.create_configuration("chess", "My Chess", "Bigger board")
    with engine.on_configuration_change(config.game_id, game_loop.reload):
        engine.set_rule_parameter(config.game_id, "chess-board-size", "width", 10)
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Optional

from ruleforge.core.models.configuration import (
    ConfigurationMetadata,
    ConfigurationSnapshot,
    RuleValidationResult,
)
from ruleforge.core.models.modification import GameModification
from ruleforge.core.models.rule import GameRule
from ruleforge.core.notifier import ChangeHandler, ChangeNotifier, Subscription
from ruleforge.core.registry import RuleRegistry
from ruleforge.core.serializer import ConfigurationSerializer, export_filename
from ruleforge.core.store import ConfigurationStore
from ruleforge.core.validator import ConfigurationValidator
from ruleforge.core.errors import NotFoundError


class GameRuleEngine:
    """Rule registry plus per-session configurations with hot-reload."""

    def __init__(
        self,
        registry: RuleRegistry,
        default_tag: str = "default",
        config_id_prefix: str = "CONFIG",
        export_indent: int | None = 2,
        import_id_prefix: str = "IMPORT",
    ) -> None:
        self.registry = registry
        self.validator = ConfigurationValidator(registry)
        self.notifier = ChangeNotifier()
        self.store = ConfigurationStore(
            registry,
            self.validator,
            self.notifier,
            default_tag=default_tag,
            id_prefix=config_id_prefix,
        )
        self.serializer = ConfigurationSerializer(
            registry,
            self.store,
            indent=export_indent,
            import_id_prefix=import_id_prefix,
        )

    # Registry -----------------------------------------------------------

    def get_rule(self, rule_id: str) -> Optional[GameRule]:
        return self.registry.get_rule(rule_id)

    def get_rules_for_game(self, base_game: str) -> list[GameRule]:
        return self.registry.get_rules_for_game(base_game)

    def get_rules_by_category(self, base_game: str, category: str) -> list[GameRule]:
        return self.registry.get_rules_by_category(base_game, category)

    def get_categories(self, base_game: str) -> list[str]:
        return self.registry.get_categories(base_game)

    def list_games(self) -> list[str]:
        return self.registry.list_games()

    # Configurations -----------------------------------------------------

    def create_configuration(
        self,
        base_game: str,
        name: str,
        description: str = "",
        metadata: Optional[ConfigurationMetadata] = None,
    ) -> ConfigurationSnapshot:
        return self.store.create_configuration(base_game, name, description, metadata)

    def get_configuration(self, game_id: str) -> Optional[ConfigurationSnapshot]:
        return self.store.get_configuration(game_id)

    def list_configurations(self) -> list[ConfigurationSnapshot]:
        return self.store.list_configurations()

    def enable_rule(self, game_id: str, rule_id: str) -> ConfigurationSnapshot:
        return self.store.enable_rule(game_id, rule_id)

    def disable_rule(self, game_id: str, rule_id: str) -> ConfigurationSnapshot:
        return self.store.disable_rule(game_id, rule_id)

    def set_rule_parameter(
        self,
        game_id: str,
        rule_id: str,
        key: str,
        value: Any,
    ) -> ConfigurationSnapshot:
        return self.store.set_rule_parameter(game_id, rule_id, key, value)

    def get_rule_parameter_value(self, game_id: str, rule_id: str, key: str) -> Any:
        return self.store.get_rule_parameter_value(game_id, rule_id, key)

    def update_configuration(
        self,
        game_id: str,
        name: Optional[str] = None,
        description: Optional[str] = None,
        metadata: Optional[ConfigurationMetadata] = None,
    ) -> ConfigurationSnapshot:
        return self.store.update_configuration(
            game_id, name=name, description=description, metadata=metadata
        )

    def dispose_configuration(self, game_id: str) -> bool:
        return self.store.dispose_configuration(game_id)

    # Validation & notification ------------------------------------------

    def validate_configuration(self, game_id: str) -> Optional[RuleValidationResult]:
        """Validation computed after the configuration's last mutation."""
        return self.store.get_validation(game_id)

    def on_configuration_change(self, game_id: str, callback: ChangeHandler) -> Subscription:
        """Subscribe to post-mutation snapshots of one configuration.

        Raises:
            NotFoundError: Unknown configuration
        """
        if game_id not in self.store:
            raise NotFoundError(f"Configuration not found: {game_id}", {"game_id": game_id})
        return self.notifier.subscribe(game_id, callback)

    # Export / import ----------------------------------------------------

    def export_configuration(self, game_id: str) -> Optional[str]:
        return self.serializer.export_configuration(game_id)

    def import_configuration(self, data: str | bytes) -> str:
        return self.serializer.import_configuration(data)

    def export_filename(self, game_id: str) -> Optional[str]:
        snapshot = self.store.get_configuration(game_id)
        if snapshot is None:
            return None
        return export_filename(snapshot.name)

    def save_configuration(self, game_id: str, directory: str | Path) -> Optional[Path]:
        return self.serializer.save_configuration(game_id, directory)

    def load_configuration(self, path: str | Path) -> str:
        return self.serializer.load_configuration(path)

    # Game modifications -------------------------------------------------

    def create_game_modification(self, game_id: str) -> Optional[GameModification]:
        return self.serializer.create_game_modification(game_id)

    def apply_game_modification(self, modification: GameModification | str | bytes) -> str:
        return self.serializer.apply_game_modification(modification)
