"""
Core Models - rule definitions, configurations, snapshots, records.
"""

from ruleforge.core.models.parameter import (
    BooleanParameter,
    ColorParameter,
    NumberConstraints,
    NumberParameter,
    ParameterType,
    RuleParameter,
    SelectConstraints,
    SelectOption,
    SelectParameter,
    TextParameter,
    parse_parameter,
)
from ruleforge.core.models.rule import GameRule
from ruleforge.core.models.configuration import (
    SCHEMA_VERSION,
    ConfigurationMetadata,
    ConfigurationRecord,
    ConfigurationSnapshot,
    GameConfiguration,
    RecordMetadata,
    RuleValidationResult,
)
from ruleforge.core.models.modification import (
    GameModification,
    ModificationMetadata,
    ModifiedRule,
)

__all__ = [
    "BooleanParameter",
    "ColorParameter",
    "NumberConstraints",
    "NumberParameter",
    "ParameterType",
    "RuleParameter",
    "SelectConstraints",
    "SelectOption",
    "SelectParameter",
    "TextParameter",
    "parse_parameter",
    "GameRule",
    "SCHEMA_VERSION",
    "ConfigurationMetadata",
    "ConfigurationRecord",
    "ConfigurationSnapshot",
    "GameConfiguration",
    "RecordMetadata",
    "RuleValidationResult",
    "GameModification",
    "ModificationMetadata",
    "ModifiedRule",
]
