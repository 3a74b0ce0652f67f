"""
Rule Parameter Models for RuleForge.

A rule parameter is one of a small closed set of kinds (boolean, number,
select, color, text). Each kind is its own pydantic model carrying the
constraint payload that makes sense for it, and the kinds are combined into
the ``RuleParameter`` discriminated union keyed by ``type``.

Every variant implements the same two hooks used by the engine:

- ``normalize(value)``: the value actually stored for an override
  (numbers are clamped into ``[min, max]``, everything else passes through)
- ``check(value)``: a human-readable problem with the value, or ``None``
"""

from __future__ import annotations

import math
import re
from enum import Enum
from typing import Annotated, Any, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, model_validator


_COLOR_PATTERN = re.compile(r"^#(?:[0-9a-fA-F]{3}|[0-9a-fA-F]{6}|[0-9a-fA-F]{8})$")


# ============================================================================
# Enums
# ============================================================================


class ParameterType(str, Enum):
    """Kinds of rule parameters."""
    BOOLEAN = "boolean"
    NUMBER = "number"
    SELECT = "select"
    COLOR = "color"
    TEXT = "text"


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


# ============================================================================
# Constraint Payloads
# ============================================================================


class NumberConstraints(BaseModel):
    """Numeric bounds and editor step."""

    min: Optional[Union[int, float]] = None
    max: Optional[Union[int, float]] = None
    step: Optional[Union[int, float]] = None

    model_config = ConfigDict(frozen=True, extra="forbid")

    @model_validator(mode="after")
    def _check_bounds(self) -> "NumberConstraints":
        if self.min is not None and self.max is not None and self.min > self.max:
            raise ValueError(f"min ({self.min}) is greater than max ({self.max})")
        if self.step is not None and self.step <= 0:
            raise ValueError("step must be positive")
        return self

    def clamp(self, value: Union[int, float]) -> Union[int, float]:
        """Return the nearest value inside ``[min, max]``."""
        if self.min is not None and value < self.min:
            return self.min
        if self.max is not None and value > self.max:
            return self.max
        return value


class SelectOption(BaseModel):
    """One choice of a select parameter."""

    value: Any
    label: str = ""

    model_config = ConfigDict(frozen=True, extra="forbid")


class SelectConstraints(BaseModel):
    """The allowed options of a select parameter."""

    options: tuple[SelectOption, ...] = Field(min_length=1)

    model_config = ConfigDict(frozen=True, extra="forbid")

    def values(self) -> list[Any]:
        return [option.value for option in self.options]


# ============================================================================
# Parameter Variants
# ============================================================================


class _ParameterBase(BaseModel):
    """Fields shared by every parameter kind."""

    key: str = Field(min_length=1, description="Unique key within the owning rule")
    name: str = Field(default="", description="Human-readable name")
    description: str = Field(default="", description="Help text for editors")
    category: Optional[str] = Field(default=None, description="Editor grouping")
    live_preview: bool = Field(default=True, description="Apply edits without restart")

    model_config = ConfigDict(frozen=True, extra="forbid")

    @property
    def parameter_type(self) -> ParameterType:
        return ParameterType(self.type)  # type: ignore[attr-defined]

    def normalize(self, value: Any) -> Any:
        return value

    def check(self, value: Any) -> Optional[str]:
        return None


class BooleanParameter(_ParameterBase):
    type: Literal["boolean"] = "boolean"
    default_value: bool = False

    def check(self, value: Any) -> Optional[str]:
        if not isinstance(value, bool):
            return "Must be true or false"
        return None


class NumberParameter(_ParameterBase):
    type: Literal["number"] = "number"
    default_value: Union[int, float] = 0
    constraints: Optional[NumberConstraints] = None

    @model_validator(mode="after")
    def _default_in_bounds(self) -> "NumberParameter":
        if self.constraints is not None:
            if self.constraints.clamp(self.default_value) != self.default_value:
                raise ValueError(
                    f"default value {self.default_value} of '{self.key}' is outside its bounds"
                )
        return self

    def normalize(self, value: Any) -> Any:
        if self.constraints is None or not _is_number(value) or math.isnan(value):
            return value
        return self.constraints.clamp(value)

    def check(self, value: Any) -> Optional[str]:
        if not _is_number(value) or math.isnan(value):
            return "Must be a number"
        if self.constraints is not None:
            if self.constraints.min is not None and value < self.constraints.min:
                return f"Must be at least {self.constraints.min}"
            if self.constraints.max is not None and value > self.constraints.max:
                return f"Must be at most {self.constraints.max}"
        return None


class SelectParameter(_ParameterBase):
    type: Literal["select"] = "select"
    default_value: Any = None
    constraints: SelectConstraints

    @model_validator(mode="after")
    def _default_is_option(self) -> "SelectParameter":
        if self.default_value not in self.constraints.values():
            raise ValueError(
                f"default value {self.default_value!r} of '{self.key}' is not one of its options"
            )
        return self

    def check(self, value: Any) -> Optional[str]:
        if value not in self.constraints.values():
            return f"Invalid option {value!r}"
        return None


class ColorParameter(_ParameterBase):
    type: Literal["color"] = "color"
    default_value: str = "#000000"

    def check(self, value: Any) -> Optional[str]:
        if not isinstance(value, str) or not _COLOR_PATTERN.match(value):
            return "Must be a hex color such as #ff8800"
        return None


class TextParameter(_ParameterBase):
    type: Literal["text"] = "text"
    default_value: str = ""

    def check(self, value: Any) -> Optional[str]:
        if not isinstance(value, str):
            return "Must be text"
        return None


RuleParameter = Annotated[
    Union[
        BooleanParameter,
        NumberParameter,
        SelectParameter,
        ColorParameter,
        TextParameter,
    ],
    Field(discriminator="type"),
]

_parameter_adapter: TypeAdapter = TypeAdapter(RuleParameter)


def parse_parameter(data: dict) -> RuleParameter:
    """Build the parameter variant named by ``data["type"]``."""
    return _parameter_adapter.validate_python(data)
