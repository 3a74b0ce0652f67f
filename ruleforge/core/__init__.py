"""
RuleForge core - registry, configuration store, validator, notifier, serializer.
"""

from ruleforge.core.engine import GameRuleEngine
from ruleforge.core.errors import (
    CatalogError,
    DuplicateRegistrationError,
    NotFoundError,
    ParseError,
    RuleForgeError,
    ValidationError,
)
from ruleforge.core.notifier import ChangeNotifier, Subscription
from ruleforge.core.registry import RuleRegistry
from ruleforge.core.serializer import ConfigurationSerializer
from ruleforge.core.store import ConfigurationStore
from ruleforge.core.validator import ConfigurationValidator

__all__ = [
    "GameRuleEngine",
    "CatalogError",
    "DuplicateRegistrationError",
    "NotFoundError",
    "ParseError",
    "RuleForgeError",
    "ValidationError",
    "ChangeNotifier",
    "Subscription",
    "RuleRegistry",
    "ConfigurationSerializer",
    "ConfigurationStore",
    "ConfigurationValidator",
]
