"""
Configuration Store for RuleForge.

Owns the mutable per-session configurations and is their only mutator.
Every committed mutation follows the same sequence:

1. mutate the configuration
2. recompute validation
3. publish the resulting snapshot to subscribers

so a subscriber never observes a snapshot whose validation is stale.
Calls that would change nothing (enabling an active rule, disabling an
inactive one) are not mutations and publish nothing.
"""

from __future__ import annotations

import copy
import logging
from typing import Any, Optional

from ruleforge.core.errors import NotFoundError, ValidationError
from ruleforge.core.models.configuration import (
    ConfigurationMetadata,
    ConfigurationRecord,
    ConfigurationSnapshot,
    GameConfiguration,
    RuleValidationResult,
)
from ruleforge.core.models.rule import GameRule
from ruleforge.core.notifier import ChangeNotifier
from ruleforge.core.registry import RuleRegistry
from ruleforge.core.validator import ConfigurationValidator
from ruleforge.utils.ids import generate_configuration_id, is_valid_id
from ruleforge.utils.logging import get_logger, log_operation

logger = get_logger("core.store")


class ConfigurationStore:
    """Per-session configuration state keyed by ``game_id``."""

    def __init__(
        self,
        registry: RuleRegistry,
        validator: ConfigurationValidator,
        notifier: ChangeNotifier,
        default_tag: str = "default",
        id_prefix: str = "CONFIG",
    ) -> None:
        self._registry = registry
        self._validator = validator
        self._notifier = notifier
        self._default_tag = default_tag
        self._id_prefix = id_prefix
        self._configs: dict[str, GameConfiguration] = {}

    # ------------------------------------------------------------------
    # Creation
    # ------------------------------------------------------------------

    def create_configuration(
        self,
        base_game: str,
        name: str,
        description: str = "",
        metadata: Optional[ConfigurationMetadata] = None,
    ) -> ConfigurationSnapshot:
        """Create a configuration with the base game's default rules active.

        Raises:
            NotFoundError: No rules are registered for ``base_game``
        """
        if not self._registry.has_game(base_game):
            raise NotFoundError(f"Unknown base game: {base_game}", {"base_game": base_game})

        config = GameConfiguration(
            game_id=generate_configuration_id(self._id_prefix),
            base_game=base_game,
            name=name,
            description=description,
            active_rules=self._registry.default_rule_ids(base_game, self._default_tag),
            metadata=metadata.model_copy(deep=True) if metadata else ConfigurationMetadata(),
        )
        for rule_id in config.active_rules:
            self._seed_defaults(config, self._registry.get_rule(rule_id))

        config.validation = self._validator.validate(config)
        self._configs[config.game_id] = config

        log_operation(logger, "Created configuration", {
            "game_id": config.game_id,
            "base_game": base_game,
            "active_rules": len(config.active_rules),
        })
        return self._snapshot(config)

    def adopt(self, record: ConfigurationRecord, game_id: str) -> ConfigurationSnapshot:
        """Register a configuration built from an already checked record.

        The record's own id is ignored; ``game_id`` must be freshly minted.
        """
        if not is_valid_id(game_id):
            raise ValidationError(f"Not a generated configuration id: {game_id!r}", {"game_id": game_id})
        if game_id in self._configs:
            raise ValidationError(f"Configuration id already in use: {game_id}", {"game_id": game_id})

        overrides: dict[str, dict[str, Any]] = {}
        for rule_id, values in record.parameter_overrides.items():
            rule = self._registry.get_rule(rule_id)
            overrides[rule_id] = {}
            for key, value in values.items():
                param = rule.get_parameter(key) if rule else None
                overrides[rule_id][key] = copy.deepcopy(param.normalize(value) if param else value)

        config = GameConfiguration(
            game_id=game_id,
            base_game=record.base_game,
            name=record.name,
            description=record.description,
            active_rules=list(record.active_rules),
            parameter_overrides=overrides,
            metadata=record.metadata.to_metadata(),
        )
        config.validation = self._validator.validate(config)
        self._configs[game_id] = config
        return self._snapshot(config)

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def get_configuration(self, game_id: str) -> Optional[ConfigurationSnapshot]:
        config = self._configs.get(game_id)
        if config is None:
            return None
        return self._snapshot(config)

    def list_configurations(self) -> list[ConfigurationSnapshot]:
        return [self._snapshot(config) for config in self._configs.values()]

    def get_validation(self, game_id: str) -> Optional[RuleValidationResult]:
        config = self._configs.get(game_id)
        if config is None or config.validation is None:
            return None
        return config.validation.model_copy(deep=True)

    def get_record(self, game_id: str) -> Optional[ConfigurationRecord]:
        """Portable record including overrides retained for disabled rules."""
        config = self._configs.get(game_id)
        if config is None:
            return None
        return ConfigurationRecord.from_configuration(config)

    def get_rule_parameter_value(self, game_id: str, rule_id: str, key: str) -> Any:
        """Current value of a parameter, or None if anything is unknown.

        Overrides of a disabled rule stay hidden; the declared default is
        reported until the rule is enabled again.
        """
        config = self._configs.get(game_id)
        rule = self._registry.get_rule(rule_id)
        if config is None or rule is None:
            return None

        param = rule.get_parameter(key)
        if param is None:
            return None

        if config.is_active(rule_id):
            overrides = config.parameter_overrides.get(rule_id, {})
            if key in overrides:
                return copy.deepcopy(overrides[key])
        return copy.deepcopy(param.default_value)

    def __contains__(self, game_id: object) -> bool:
        return game_id in self._configs

    def __len__(self) -> int:
        return len(self._configs)

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def enable_rule(self, game_id: str, rule_id: str) -> ConfigurationSnapshot:
        """Activate a rule of the configuration's base game.

        Unknown rules, rules of another base game, and already active rules
        leave the configuration untouched.
        """
        config = self._require(game_id)
        if not self._registry.is_rule_for_game(rule_id, config.base_game):
            logger.debug(f"Ignoring enable of '{rule_id}' for {config.base_game} configuration {game_id}")
            return self._snapshot(config)
        if config.is_active(rule_id):
            return self._snapshot(config)

        config.active_rules.append(rule_id)
        self._seed_defaults(config, self._registry.get_rule(rule_id))
        return self._commit(config, "enable_rule", rule_id=rule_id)

    def disable_rule(self, game_id: str, rule_id: str) -> ConfigurationSnapshot:
        """Deactivate a rule; its overrides are kept for a later re-enable."""
        config = self._require(game_id)
        if not config.is_active(rule_id):
            return self._snapshot(config)

        config.active_rules.remove(rule_id)
        return self._commit(config, "disable_rule", rule_id=rule_id)

    def set_rule_parameter(
        self,
        game_id: str,
        rule_id: str,
        key: str,
        value: Any,
    ) -> ConfigurationSnapshot:
        """Override a parameter of an active rule.

        Numeric values outside the declared bounds are clamped to the nearest
        bound before they are stored.

        Raises:
            NotFoundError: Unknown configuration
            ValidationError: Rule is not active or does not declare ``key``
        """
        config = self._require(game_id)
        if not config.is_active(rule_id):
            raise ValidationError(
                f"Rule '{rule_id}' is not active in configuration {game_id}",
                {"game_id": game_id, "rule_id": rule_id},
            )

        rule = self._registry.get_rule(rule_id)
        param = rule.get_parameter(key) if rule else None
        if param is None:
            raise ValidationError(
                f"Rule '{rule_id}' has no parameter '{key}'",
                {"rule_id": rule_id, "key": key},
            )

        stored = param.normalize(value)
        if stored != value:
            logger.debug(f"Clamped {rule_id}.{key} from {value!r} to {stored!r}")

        config.parameter_overrides.setdefault(rule_id, {})[key] = copy.deepcopy(stored)
        return self._commit(config, "set_rule_parameter", rule_id=rule_id, key=key, value=stored)

    def update_configuration(
        self,
        game_id: str,
        name: Optional[str] = None,
        description: Optional[str] = None,
        metadata: Optional[ConfigurationMetadata] = None,
    ) -> ConfigurationSnapshot:
        """Rename, re-describe, or replace the metadata of a configuration."""
        config = self._require(game_id)
        changed = False
        if name is not None and name != config.name:
            config.name = name
            changed = True
        if description is not None and description != config.description:
            config.description = description
            changed = True
        if metadata is not None and metadata != config.metadata:
            config.metadata = metadata.model_copy(deep=True)
            changed = True
        if not changed:
            return self._snapshot(config)
        return self._commit(config, "update_configuration")

    def dispose_configuration(self, game_id: str) -> bool:
        """Forget a configuration and release all of its subscriptions."""
        config = self._configs.pop(game_id, None)
        self._notifier.clear(game_id)
        if config is None:
            return False
        log_operation(logger, "Disposed configuration", {"game_id": game_id})
        return True

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _require(self, game_id: str) -> GameConfiguration:
        config = self._configs.get(game_id)
        if config is None:
            raise NotFoundError(f"Configuration not found: {game_id}", {"game_id": game_id})
        return config

    @staticmethod
    def _seed_defaults(config: GameConfiguration, rule: Optional[GameRule]) -> None:
        if rule is None:
            return
        overrides = config.parameter_overrides.setdefault(rule.id, {})
        for key, default in rule.default_values().items():
            overrides.setdefault(key, copy.deepcopy(default))

    def _commit(self, config: GameConfiguration, operation: str, **details: Any) -> ConfigurationSnapshot:
        config.touch()
        config.validation = self._validator.validate(config)
        snapshot = self._snapshot(config)
        log_operation(
            logger,
            operation,
            {"game_id": config.game_id, "revision": config.revision, **details},
            level=logging.DEBUG,
        )
        self._notifier.publish(snapshot)
        return snapshot

    def _snapshot(self, config: GameConfiguration) -> ConfigurationSnapshot:
        values: dict[str, dict[str, Any]] = {}
        for rule_id in config.active_rules:
            rule = self._registry.get_rule(rule_id)
            if rule is None:
                continue
            overrides = config.parameter_overrides.get(rule_id, {})
            values[rule_id] = {
                param.key: copy.deepcopy(overrides.get(param.key, param.default_value))
                for param in rule.parameters
            }

        return ConfigurationSnapshot(
            game_id=config.game_id,
            base_game=config.base_game,
            name=config.name,
            description=config.description,
            active_rules=list(config.active_rules),
            parameter_overrides=config.visible_overrides(),
            values=values,
            validation=(config.validation or self._validator.validate(config)).model_copy(deep=True),
            metadata=config.metadata.model_copy(deep=True),
            created_at=config.created_at,
            updated_at=config.updated_at,
            revision=config.revision,
        )
