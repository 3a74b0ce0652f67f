"""
Configuration Models for RuleForge.

- ``GameConfiguration``: mutable per-session state, owned by the store
- ``ConfigurationSnapshot``: frozen read view handed to callers and subscribers
- ``RuleValidationResult``: outcome of a consistency check
- ``ConfigurationMetadata``: authoring details (version, author, tags)
- ``ConfigurationRecord``: the portable export/import record
"""

from __future__ import annotations

import copy
from datetime import UTC, datetime
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

SCHEMA_VERSION = 1


# ============================================================================
# Validation Result
# ============================================================================


class RuleValidationResult(BaseModel):
    """Consistency of a configuration.

    ``valid`` reflects only rule conflicts and missing dependencies;
    ``warnings`` lists parameter values that do not fit their declaration.
    """

    valid: bool = True
    errors: list[str] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)

    model_config = ConfigDict(frozen=True)


# ============================================================================
# Metadata
# ============================================================================


class ConfigurationMetadata(BaseModel):
    """Authoring details of a configuration, kept through export and sharing."""

    version: str = "1.0.0"
    author: str = ""
    tags: list[str] = Field(default_factory=list)
    featured: bool = False

    model_config = ConfigDict(extra="ignore")

    @field_validator("tags")
    @classmethod
    def _dedupe_tags(cls, value: list[str]) -> list[str]:
        return list(dict.fromkeys(value))


class RecordMetadata(ConfigurationMetadata):
    """Metadata as exported; ``created``/``modified`` mirror the source timestamps.

    Imported timestamps are informational only. A configuration built from a
    record gets its own creation time.
    """

    created: Optional[datetime] = None
    modified: Optional[datetime] = None

    def to_metadata(self) -> ConfigurationMetadata:
        return ConfigurationMetadata(
            version=self.version,
            author=self.author,
            tags=list(self.tags),
            featured=self.featured,
        )


# ============================================================================
# Configuration (mutable, store-owned)
# ============================================================================


class GameConfiguration(BaseModel):
    """A named set of enabled rules and parameter overrides for one base game.

    Attributes:
        game_id: Unique configuration id, immutable once assigned
        base_game: The base game this configuration is bound to
        name: Display name
        description: Free text
        active_rules: Enabled rule ids, in activation order, without duplicates
        parameter_overrides: rule id -> parameter key -> value. Entries for
            disabled rules are retained but never exposed in snapshots.
        created_at: Creation timestamp
        updated_at: Last committed mutation
        revision: Number of committed mutations
        validation: Result computed after the last mutation
        metadata: Version, author and tags
    """

    game_id: str
    base_game: str
    name: str = ""
    description: str = ""
    active_rules: list[str] = Field(default_factory=list)
    parameter_overrides: dict[str, dict[str, Any]] = Field(default_factory=dict)
    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))
    updated_at: datetime = Field(default_factory=lambda: datetime.now(UTC))
    revision: int = 0
    validation: Optional[RuleValidationResult] = None
    metadata: ConfigurationMetadata = Field(default_factory=ConfigurationMetadata)

    def __repr__(self) -> str:
        return (
            f"<GameConfiguration id={self.game_id} game={self.base_game} "
            f"active={len(self.active_rules)} rev={self.revision}>"
        )

    def is_active(self, rule_id: str) -> bool:
        return rule_id in self.active_rules

    def visible_overrides(self) -> dict[str, dict[str, Any]]:
        """Deep copy of the overrides that belong to active rules."""
        return {
            rule_id: copy.deepcopy(values)
            for rule_id, values in self.parameter_overrides.items()
            if rule_id in self.active_rules
        }

    def touch(self) -> None:
        """Record a committed mutation."""
        self.revision += 1
        self.updated_at = datetime.now(UTC)


# ============================================================================
# Snapshot (frozen, read-only)
# ============================================================================


class ConfigurationSnapshot(BaseModel):
    """Post-mutation view of a configuration.

    ``values`` is the materialized mapping consumed by running game loops:
    active rule id -> parameter key -> current value (override or default).
    """

    game_id: str
    base_game: str
    name: str
    description: str
    active_rules: list[str]
    parameter_overrides: dict[str, dict[str, Any]]
    values: dict[str, dict[str, Any]]
    validation: RuleValidationResult
    created_at: datetime
    updated_at: datetime
    revision: int
    metadata: ConfigurationMetadata = Field(default_factory=ConfigurationMetadata)

    model_config = ConfigDict(frozen=True)

    def is_active(self, rule_id: str) -> bool:
        return rule_id in self.active_rules

    def get_value(self, rule_id: str, key: str, default: Any = None) -> Any:
        return self.values.get(rule_id, {}).get(key, default)


# ============================================================================
# Portable Record
# ============================================================================


class ConfigurationRecord(BaseModel):
    """Portable configuration record exchanged as JSON.

    Field aliases give the camelCase keys used in exported files.
    """

    schema_version: int = Field(default=SCHEMA_VERSION, alias="schemaVersion")
    game_id: Optional[str] = Field(default=None, alias="gameId")
    base_game: str = Field(alias="baseGame", min_length=1)
    name: str = ""
    description: str = ""
    active_rules: list[str] = Field(default_factory=list, alias="activeRules")
    parameter_overrides: dict[str, dict[str, Any]] = Field(
        default_factory=dict, alias="parameterOverrides"
    )
    metadata: RecordMetadata = Field(default_factory=RecordMetadata)

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    @field_validator("active_rules")
    @classmethod
    def _dedupe_active_rules(cls, value: list[str]) -> list[str]:
        return list(dict.fromkeys(value))

    @classmethod
    def from_configuration(cls, config: GameConfiguration) -> "ConfigurationRecord":
        return cls(
            schema_version=SCHEMA_VERSION,
            game_id=config.game_id,
            base_game=config.base_game,
            name=config.name,
            description=config.description,
            active_rules=list(config.active_rules),
            parameter_overrides=copy.deepcopy(config.parameter_overrides),
            metadata=RecordMetadata(
                **config.metadata.model_dump(),
                created=config.created_at,
                modified=config.updated_at,
            ),
        )

    def referenced_rule_ids(self) -> list[str]:
        """Every rule id named by the record, active or overridden."""
        ids = list(self.active_rules)
        ids.extend(rule_id for rule_id in self.parameter_overrides if rule_id not in ids)
        return ids
