"""
Game Modification Models for RuleForge.

A modification is the shareable form of a configuration. It lists every rule
the configuration touches with its enabled flag and parameter values, plus
community metadata (author, version, downloads, rating, tags).

Layout:

    {
      "id": "MOD_1704067200_004",
      "name": "Speed Chess",
      "description": "...",
      "baseGameId": "chess",
      "rules": [
        {"ruleId": "chess-time-control", "enabled": true, "parameters": {"initialTime": 5}}
      ],
      "metadata": {"author": "...", "version": "1.0.0", "created": "...",
                   "downloads": 0, "rating": 0.0, "tags": []}
    }
"""

from __future__ import annotations

import copy
from datetime import UTC, datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from ruleforge.core.models.configuration import ConfigurationRecord, RecordMetadata


class ModifiedRule(BaseModel):
    """One rule of a modification."""

    rule_id: str = Field(alias="ruleId", min_length=1)
    enabled: bool = True
    parameters: dict[str, Any] = Field(default_factory=dict)

    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class ModificationMetadata(BaseModel):
    author: str = ""
    version: str = "1.0.0"
    created: datetime = Field(default_factory=lambda: datetime.now(UTC))
    downloads: int = Field(default=0, ge=0)
    rating: float = Field(default=0.0, ge=0.0)
    tags: list[str] = Field(default_factory=list)

    model_config = ConfigDict(extra="ignore")


class GameModification(BaseModel):
    """Shareable bundle of rule choices for one base game."""

    id: str = Field(min_length=1)
    name: str = ""
    description: str = ""
    base_game_id: str = Field(alias="baseGameId", min_length=1)
    rules: list[ModifiedRule] = Field(default_factory=list)
    metadata: ModificationMetadata = Field(default_factory=ModificationMetadata)

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    def enabled_rule_ids(self) -> list[str]:
        return list(dict.fromkeys(rule.rule_id for rule in self.rules if rule.enabled))

    def to_record(self) -> ConfigurationRecord:
        """Configuration record equivalent to this modification.

        Enabled rules become active; every non-empty parameter set becomes an
        override, so values of disabled rules are kept for a later re-enable.
        """
        overrides: dict[str, dict[str, Any]] = {}
        for rule in self.rules:
            if rule.parameters:
                overrides.setdefault(rule.rule_id, {}).update(copy.deepcopy(rule.parameters))

        return ConfigurationRecord(
            base_game=self.base_game_id,
            name=self.name,
            description=self.description,
            active_rules=self.enabled_rule_ids(),
            parameter_overrides=overrides,
            metadata=RecordMetadata(
                author=self.metadata.author,
                version=self.metadata.version,
                tags=list(self.metadata.tags),
            ),
        )

    def to_json(self) -> str:
        """Serialize the modification to JSON text."""
        return self.model_dump_json(indent=2, by_alias=True)

    @classmethod
    def from_json(cls, json_str: str | bytes) -> "GameModification":
        """Deserialize a modification from JSON text."""
        return cls.model_validate_json(json_str)
