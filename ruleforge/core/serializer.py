"""
Configuration Serializer for RuleForge.

Exports configurations as canonical JSON records and imports them back.
An import always mints a new configuration id, so importing a record
exported from a live session never collides with that session. Game
modifications, the shareable form of a configuration, go through the same
checks when applied.

Record layout:

    {
      "schemaVersion": 1,
      "gameId": "CONFIG_1704067200_001",
      "baseGame": "chess",
      "name": "My Chess",
      "description": "...",
      "activeRules": ["chess-board-size", ...],
      "parameterOverrides": {"chess-board-size": {"width": 10}},
      "metadata": {"version": "1.0.0", "author": "", "tags": [], "featured": false,
                   "created": "...", "modified": "..."}
    }
"""

from __future__ import annotations

import json
import re
from pathlib import Path
from typing import Any

from pydantic import ValidationError as PydanticValidationError

from ruleforge.core.errors import ParseError, ValidationError
from ruleforge.core.models.configuration import SCHEMA_VERSION, ConfigurationRecord
from ruleforge.core.models.modification import GameModification, ModificationMetadata, ModifiedRule
from ruleforge.core.registry import RuleRegistry
from ruleforge.core.store import ConfigurationStore
from ruleforge.utils.ids import generate_import_id, generate_modification_id
from ruleforge.utils.logging import get_logger, log_error, log_operation

logger = get_logger("core.serializer")


def export_filename(name: str) -> str:
    """File name offered for an exported configuration, e.g. 'my-chess-rules.json'."""
    slug = re.sub(r"[^a-z0-9._-]+", "-", name.strip().lower()).strip("-.")
    return f"{slug or 'configuration'}-rules.json"


class ConfigurationSerializer:
    """Round-trips configurations through portable JSON records."""

    def __init__(
        self,
        registry: RuleRegistry,
        store: ConfigurationStore,
        indent: int | None = 2,
        import_id_prefix: str = "IMPORT",
    ) -> None:
        self._registry = registry
        self._store = store
        self._indent = indent
        self._import_id_prefix = import_id_prefix

    # ------------------------------------------------------------------
    # Export
    # ------------------------------------------------------------------

    def export_configuration(self, game_id: str) -> str | None:
        """Serialize a configuration, or None if the id is unknown."""
        record = self._store.get_record(game_id)
        if record is None:
            return None
        return self.dumps(record)

    def dumps(self, record: ConfigurationRecord) -> str:
        payload = record.model_dump(by_alias=True, mode="json")
        return json.dumps(payload, indent=self._indent, sort_keys=True, ensure_ascii=False)

    def save_configuration(self, game_id: str, directory: str | Path) -> Path | None:
        """Write the export file named after the configuration into ``directory``."""
        snapshot = self._store.get_configuration(game_id)
        text = self.export_configuration(game_id)
        if snapshot is None or text is None:
            return None

        directory = Path(directory)
        directory.mkdir(parents=True, exist_ok=True)
        path = directory / export_filename(snapshot.name)
        path.write_text(text, encoding="utf-8")
        log_operation(logger, "Saved configuration", {"game_id": game_id, "path": path})
        return path

    # ------------------------------------------------------------------
    # Import
    # ------------------------------------------------------------------

    def parse(self, data: str | bytes) -> ConfigurationRecord:
        """Parse record text without touching any state.

        Raises:
            ParseError: Malformed JSON, wrong shape, or unsupported schema version
        """
        try:
            payload: Any = json.loads(data)
        except (json.JSONDecodeError, UnicodeDecodeError, TypeError) as exc:
            raise ParseError(f"Invalid configuration data: {exc}") from exc

        if not isinstance(payload, dict):
            raise ParseError("Invalid configuration data: expected a JSON object")

        version = payload.get("schemaVersion", SCHEMA_VERSION)
        if isinstance(version, bool) or not isinstance(version, int) or not 1 <= version <= SCHEMA_VERSION:
            raise ParseError(
                f"Unsupported schema version: {version!r}",
                {"supported": SCHEMA_VERSION},
            )

        try:
            return ConfigurationRecord.model_validate(payload)
        except PydanticValidationError as exc:
            raise ParseError(
                f"Invalid configuration data: {exc.error_count()} schema error(s)",
                {"errors": exc.errors(include_url=False)},
            ) from exc

    def check(self, record: ConfigurationRecord) -> None:
        """Check that a record only references rules of its base game.

        Raises:
            ValidationError: Unknown base game, foreign rule id, or undeclared parameter
        """
        base_game = record.base_game
        if not self._registry.has_game(base_game):
            raise ValidationError(f"Unknown base game: {base_game}", {"base_game": base_game})

        foreign = [
            rule_id for rule_id in record.referenced_rule_ids()
            if not self._registry.is_rule_for_game(rule_id, base_game)
        ]
        if foreign:
            raise ValidationError(
                f"Rules not available for {base_game}: {', '.join(foreign)}",
                {"base_game": base_game, "rule_ids": foreign},
            )

        for rule_id, values in record.parameter_overrides.items():
            rule = self._registry.get_rule(rule_id)
            undeclared = [key for key in values if rule.get_parameter(key) is None]
            if undeclared:
                raise ValidationError(
                    f"Rule '{rule_id}' has no parameter(s): {', '.join(undeclared)}",
                    {"rule_id": rule_id, "keys": undeclared},
                )

    def import_configuration(self, data: str | bytes) -> str:
        """Create a new configuration from record text and return its id.

        Nothing is registered unless the whole record parses and checks out.
        """
        try:
            record = self.parse(data)
            self.check(record)
        except (ParseError, ValidationError) as exc:
            log_error(logger, "import_configuration", exc)
            raise

        game_id = generate_import_id(self._import_id_prefix)
        self._store.adopt(record, game_id)
        log_operation(logger, "Imported configuration", {
            "game_id": game_id,
            "source_id": record.game_id,
            "base_game": record.base_game,
        })
        return game_id

    def load_configuration(self, path: str | Path) -> str:
        """Import a configuration from an exported file."""
        return self.import_configuration(Path(path).read_bytes())

    # ------------------------------------------------------------------
    # Game modifications
    # ------------------------------------------------------------------

    def create_game_modification(self, game_id: str) -> GameModification | None:
        """Build a shareable modification from a configuration, or None if unknown.

        Active rules are listed enabled, in activation order. Disabled rules
        with retained overrides follow, listed disabled.
        """
        record = self._store.get_record(game_id)
        if record is None:
            return None

        rules = [
            ModifiedRule(
                rule_id=rule_id,
                enabled=True,
                parameters=record.parameter_overrides.get(rule_id, {}),
            )
            for rule_id in record.active_rules
        ]
        rules.extend(
            ModifiedRule(rule_id=rule_id, enabled=False, parameters=values)
            for rule_id, values in record.parameter_overrides.items()
            if rule_id not in record.active_rules and values
        )

        modification = GameModification(
            id=generate_modification_id(),
            name=record.name,
            description=record.description,
            base_game_id=record.base_game,
            rules=rules,
            metadata=ModificationMetadata(
                author=record.metadata.author,
                version=record.metadata.version,
                tags=list(record.metadata.tags),
            ),
        )
        log_operation(logger, "Created game modification", {
            "modification_id": modification.id,
            "game_id": game_id,
            "rules": len(rules),
        })
        return modification

    def parse_modification(self, data: str | bytes) -> GameModification:
        """Parse modification JSON text.

        Raises:
            ParseError: Malformed JSON or wrong shape
        """
        try:
            return GameModification.from_json(data)
        except PydanticValidationError as exc:
            raise ParseError(
                f"Invalid modification data: {exc.error_count()} schema error(s)",
                {"errors": exc.errors(include_url=False)},
            ) from exc

    def apply_game_modification(self, modification: GameModification | str | bytes) -> str:
        """Create a new configuration from a modification and return its id.

        The modification is checked like an imported record; nothing is
        registered if any rule or parameter key is foreign to its base game.
        """
        try:
            if not isinstance(modification, GameModification):
                modification = self.parse_modification(modification)
            record = modification.to_record()
            self.check(record)
        except (ParseError, ValidationError) as exc:
            log_error(logger, "apply_game_modification", exc)
            raise

        game_id = generate_import_id(self._import_id_prefix)
        self._store.adopt(record, game_id)
        log_operation(logger, "Applied game modification", {
            "game_id": game_id,
            "modification_id": modification.id,
            "base_game": record.base_game,
        })
        return game_id
