"""
Game Rule Model for RuleForge.

A ``GameRule`` is a unit of optional, parameterized behavior scoped to one
base game. Rules are created once when a game's catalog is registered and are
never mutated afterwards, so the model is frozen.
"""

from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from ruleforge.core.models.parameter import RuleParameter


class GameRule(BaseModel):
    """Immutable rule definition.

    Attributes:
        id: Globally unique rule id (e.g. 'chess-board-size')
        name: Human-readable name
        description: What the rule changes
        category: Grouping used by editors (e.g. 'movement', 'physics')
        base_game: The base game this rule belongs to
        parameters: Ordered parameter definitions with unique keys
        tags: Free-form tags; 'default' marks rules active in new configurations
        conflicts: Ids of rules that must not be active together with this one
        requires: Ids of rules that must be active whenever this one is
        version: Definition version
        priority: Ordering hint for editors
    """

    id: str = Field(min_length=1)
    name: str = ""
    description: str = ""
    category: str = "gameplay"
    base_game: str = Field(min_length=1)
    parameters: tuple[RuleParameter, ...] = ()
    tags: tuple[str, ...] = ()
    conflicts: tuple[str, ...] = ()
    requires: tuple[str, ...] = ()
    version: str = "1.0.0"
    priority: int = 0

    model_config = ConfigDict(frozen=True, extra="forbid")

    @model_validator(mode="after")
    def _check_definition(self) -> "GameRule":
        seen: set[str] = set()
        for param in self.parameters:
            if param.key in seen:
                raise ValueError(f"Rule '{self.id}' declares parameter '{param.key}' twice")
            seen.add(param.key)
        if self.id in self.conflicts or self.id in self.requires:
            raise ValueError(f"Rule '{self.id}' cannot conflict with or require itself")
        return self

    def __str__(self) -> str:
        return f"GameRule({self.id}, game={self.base_game})"

    def get_parameter(self, key: str) -> Optional[RuleParameter]:
        """Get a parameter definition by key."""
        for param in self.parameters:
            if param.key == key:
                return param
        return None

    def parameter_keys(self) -> list[str]:
        return [param.key for param in self.parameters]

    def default_values(self) -> dict[str, Any]:
        """Declared default value for every parameter."""
        return {param.key: param.default_value for param in self.parameters}

    def has_tag(self, tag: str) -> bool:
        return tag in self.tags
