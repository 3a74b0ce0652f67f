"""
Catalog Loader for RuleForge.

Loads rule catalogs from YAML/JSON files into a ``RuleRegistry``.

A catalog file names its base game once and lists the game's rules:

    base_game: chess
    rules:
      - id: chess-board-size
        name: Board Size
        parameters:
          - key: width
            type: number
            default_value: 8
            constraints: {min: 4, max: 12, step: 1}
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError as PydanticValidationError

from ruleforge.core.errors import CatalogError, DuplicateRegistrationError
from ruleforge.core.models.rule import GameRule
from ruleforge.core.registry import RuleRegistry
from ruleforge.utils.logging import get_logger

logger = get_logger("catalogs.loader")


class CatalogLoader:
    """Loads rule catalogs from files.

    Supports JSON and YAML formats. A file is registered all or nothing:
    if any rule in it is malformed or reuses a registered id with a
    different definition, none of its rules are registered.

    Usage:
        loader = CatalogLoader(registry)
        loader.load_file("catalogs/chess.yaml")
        loader.load_directory("catalogs/")
    """

    SUFFIXES = (".json", ".yaml", ".yml")

    def __init__(self, registry: RuleRegistry):
        """Initialize the loader.

        Args:
            registry: Registry to load rules into
        """
        self.registry = registry

    def read_file(self, file_path: str | Path) -> list[GameRule]:
        """Parse a catalog file without registering it.

        Args:
            file_path: Path to the catalog file

        Returns:
            The rules declared in the file

        Raises:
            CatalogError: Missing file, unsupported format, or invalid content
        """
        file_path = Path(file_path)

        if not file_path.exists():
            raise CatalogError(f"Catalog file not found: {file_path}", {"path": str(file_path)})

        suffix = file_path.suffix.lower()
        if suffix == ".json":
            data = self._load_json(file_path)
        elif suffix in (".yaml", ".yml"):
            data = self._load_yaml(file_path)
        else:
            raise CatalogError(f"Unsupported catalog format: {suffix}", {"path": str(file_path)})

        return self.parse_catalog(data, source=str(file_path))

    def parse_catalog(self, data: Any, source: str = "<memory>") -> list[GameRule]:
        """Build rules from an already decoded catalog document."""
        if not isinstance(data, dict):
            raise CatalogError(f"Catalog {source} must be a mapping", {"path": source})

        base_game = data.get("base_game")
        if not isinstance(base_game, str) or not base_game:
            raise CatalogError(f"Catalog {source} is missing 'base_game'", {"path": source})

        entries = data.get("rules") or []
        if not isinstance(entries, list):
            raise CatalogError(f"Catalog {source}: 'rules' must be a list", {"path": source})

        rules = []
        for index, entry in enumerate(entries):
            if not isinstance(entry, dict):
                raise CatalogError(
                    f"Catalog {source}: rule #{index} must be a mapping",
                    {"path": source, "index": index},
                )
            entry = {**entry, "base_game": entry.get("base_game", base_game)}
            try:
                rules.append(GameRule.model_validate(entry))
            except PydanticValidationError as e:
                raise CatalogError(
                    f"Catalog {source}: invalid rule '{entry.get('id', index)}': {e}",
                    {"path": source, "index": index},
                ) from e
        return rules

    def load_file(self, file_path: str | Path) -> list[GameRule]:
        """Load a catalog file into the registry.

        Args:
            file_path: Path to the catalog file

        Returns:
            The rules that were newly registered

        Raises:
            CatalogError: The file could not be read or parsed
            DuplicateRegistrationError: A rule id clashes with a registered rule
        """
        file_path = Path(file_path)
        rules = self.read_file(file_path)

        try:
            added = self.registry.register_many(rules)
        except DuplicateRegistrationError:
            logger.error(f"Duplicate rule id while loading {file_path.name}")
            raise

        logger.info(f"Loaded {len(added)} rules from {file_path.name}")
        return added

    def load_directory(self, dir_path: str | Path) -> list[GameRule]:
        """Load all catalogs from a directory, in file name order.

        Args:
            dir_path: Path to the directory

        Returns:
            List of newly registered rules
        """
        dir_path = Path(dir_path)

        if not dir_path.exists():
            logger.warning(f"Catalog directory not found: {dir_path}")
            return []

        rules: list[GameRule] = []
        for file_path in sorted(dir_path.iterdir()):
            if file_path.is_file() and file_path.suffix.lower() in self.SUFFIXES:
                rules.extend(self.load_file(file_path))

        logger.info(f"Loaded {len(rules)} rules from {dir_path}")
        return rules

    def _load_json(self, file_path: Path) -> Any:
        """Load a JSON file."""
        try:
            with open(file_path, "r", encoding="utf-8") as f:
                return json.load(f)
        except json.JSONDecodeError as e:
            raise CatalogError(f"Invalid JSON in {file_path}: {e}", {"path": str(file_path)}) from e

    def _load_yaml(self, file_path: Path) -> Any:
        """Load a YAML file."""
        try:
            with open(file_path, "r", encoding="utf-8") as f:
                return yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise CatalogError(f"Invalid YAML in {file_path}: {e}", {"path": str(file_path)}) from e
