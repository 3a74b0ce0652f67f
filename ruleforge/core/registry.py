"""
Rule Registry for RuleForge.

Holds every ``GameRule`` keyed by id with a secondary index by base game.
Catalogs are registered once at startup; afterwards the registry is only read.
"""

from __future__ import annotations

from typing import Iterable, Iterator

from ruleforge.core.errors import DuplicateRegistrationError
from ruleforge.core.models.rule import GameRule
from ruleforge.utils.logging import get_logger

logger = get_logger("core.registry")


class RuleRegistry:
    """Catalog of rule definitions.

    Usage:
        registry = RuleRegistry()
        register_chess_rules(registry)

        rule = registry.get_rule("chess-board-size")
        rules = registry.get_rules_for_game("chess")
    """

    def __init__(self, rules: Iterable[GameRule] | None = None) -> None:
        self._rules: dict[str, GameRule] = {}
        self._by_game: dict[str, list[str]] = {}
        if rules:
            self.register_many(rules)

    def register(self, rule: GameRule) -> None:
        """Register a rule.

        Re-registering an identical definition is a no-op.

        Raises:
            DuplicateRegistrationError: A different definition already uses the id
        """
        existing = self._rules.get(rule.id)
        if existing is not None:
            if existing == rule:
                return
            raise DuplicateRegistrationError(rule.id)

        self._rules[rule.id] = rule
        self._by_game.setdefault(rule.base_game, []).append(rule.id)
        logger.debug(f"Registered rule: {rule.id} ({rule.base_game})")

    def register_many(self, rules: Iterable[GameRule]) -> list[GameRule]:
        """Register a batch of rules, all or nothing.

        Every rule is checked before any is stored, so a conflicting id
        leaves the registry exactly as it was.

        Returns:
            The rules that were newly added
        """
        batch = list(rules)
        pending: dict[str, GameRule] = {}
        for rule in batch:
            existing = self._rules.get(rule.id) or pending.get(rule.id)
            if existing is not None and existing != rule:
                raise DuplicateRegistrationError(rule.id)
            pending.setdefault(rule.id, rule)

        added = [rule for rule_id, rule in pending.items() if rule_id not in self._rules]
        for rule in added:
            self.register(rule)
        return added

    def get_rule(self, rule_id: str) -> GameRule | None:
        """Get a rule by id, or None if it is not registered."""
        return self._rules.get(rule_id)

    def get_rules_for_game(self, base_game: str) -> list[GameRule]:
        """Rules of a base game in registration order."""
        return [self._rules[rule_id] for rule_id in self._by_game.get(base_game, [])]

    def get_rules_by_category(self, base_game: str, category: str) -> list[GameRule]:
        return [
            rule for rule in self.get_rules_for_game(base_game)
            if rule.category == category
        ]

    def get_categories(self, base_game: str) -> list[str]:
        """Distinct rule categories of a base game, in first-seen order."""
        return list(dict.fromkeys(rule.category for rule in self.get_rules_for_game(base_game)))

    def default_rule_ids(self, base_game: str, tag: str = "default") -> list[str]:
        """Ids of the rules a new configuration starts with."""
        return [rule.id for rule in self.get_rules_for_game(base_game) if rule.has_tag(tag)]

    def is_rule_for_game(self, rule_id: str, base_game: str) -> bool:
        rule = self._rules.get(rule_id)
        return rule is not None and rule.base_game == base_game

    def has_game(self, base_game: str) -> bool:
        return bool(self._by_game.get(base_game))

    def list_games(self) -> list[str]:
        """Base games with at least one registered rule."""
        return [game for game, ids in self._by_game.items() if ids]

    def iterate(self) -> Iterator[GameRule]:
        yield from self._rules.values()

    def __len__(self) -> int:
        return len(self._rules)

    def __contains__(self, rule_id: object) -> bool:
        return rule_id in self._rules
