"""
Exception types for the RuleForge engine.
"""

from __future__ import annotations


class RuleForgeError(Exception):
    """Base exception for engine errors."""

    def __init__(self, message: str, details: dict | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class NotFoundError(RuleForgeError):
    """Unknown configuration, rule, or base game on a non-read path."""
    pass


class ValidationError(RuleForgeError):
    """A request or import references rules or parameters it may not use."""
    pass


class ParseError(RuleForgeError):
    """An import payload could not be parsed into a configuration record."""
    pass


class DuplicateRegistrationError(RuleForgeError):
    """A different rule definition reuses an already registered id."""

    def __init__(self, rule_id: str):
        super().__init__(
            f"Rule id '{rule_id}' is already registered with a different definition",
            {"rule_id": rule_id},
        )
        self.rule_id = rule_id


class CatalogError(RuleForgeError):
    """A rule catalog file is unreadable or does not match the rule schema."""
    pass
