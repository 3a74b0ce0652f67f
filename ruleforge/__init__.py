"""RuleForge - game rule registry and live configurations."""

from .app import EngineConfig, create_engine
from .catalogs import (
    CatalogLoader,
    register_builtin_games,
    register_chess_rules,
    register_platformer_rules,
    register_tictactoe_rules,
)
from .core import (
    CatalogError,
    ConfigurationSerializer,
    DuplicateRegistrationError,
    GameRuleEngine,
    NotFoundError,
    ParseError,
    RuleForgeError,
    RuleRegistry,
    Subscription,
    ValidationError,
)
from .core.models import (
    ConfigurationMetadata,
    ConfigurationRecord,
    ConfigurationSnapshot,
    GameModification,
    GameRule,
    ModifiedRule,
    ParameterType,
    RuleValidationResult,
)

__version__ = "1.0.0"

__all__ = [
    "EngineConfig",
    "create_engine",
    "CatalogLoader",
    "register_builtin_games",
    "register_chess_rules",
    "register_platformer_rules",
    "register_tictactoe_rules",
    "CatalogError",
    "ConfigurationSerializer",
    "DuplicateRegistrationError",
    "GameRuleEngine",
    "NotFoundError",
    "ParseError",
    "RuleForgeError",
    "RuleRegistry",
    "Subscription",
    "ValidationError",
    "ConfigurationMetadata",
    "ConfigurationRecord",
    "ConfigurationSnapshot",
    "GameModification",
    "GameRule",
    "ModifiedRule",
    "ParameterType",
    "RuleValidationResult",
]
