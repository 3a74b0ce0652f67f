"""
Configuration Validator for RuleForge.

Computes consistency errors for a configuration: conflicting active rules and
active rules whose required rules are not active. Parameter values that do not
fit their declaration are reported as warnings. The result is advisory; an
invalid configuration stays fully usable.
"""

from __future__ import annotations

from ruleforge.core.models.configuration import GameConfiguration, RuleValidationResult
from ruleforge.core.models.rule import GameRule
from ruleforge.core.registry import RuleRegistry
from ruleforge.utils.logging import get_logger

logger = get_logger("core.validator")


class ConfigurationValidator:
    """Checks configurations against the rule registry."""

    def __init__(self, registry: RuleRegistry) -> None:
        self._registry = registry

    def validate(self, config: GameConfiguration) -> RuleValidationResult:
        """Validate a configuration.

        Active rules are scanned in rule-id order. Conflict edges are directed
        as declared, so two rules that each list the other produce two errors.
        """
        errors: list[str] = []
        warnings: list[str] = []
        active = set(config.active_rules)

        for rule_id in sorted(active):
            rule = self._registry.get_rule(rule_id)
            if rule is None:
                errors.append(f"Unknown rule: {rule_id}")
                continue

            for conflict_id in rule.conflicts:
                if conflict_id in active:
                    errors.append(
                        f"Rule {self._label(rule)} conflicts with {self._label_id(conflict_id)}"
                    )

            for required_id in rule.requires:
                if required_id not in active:
                    errors.append(
                        f"Rule {self._label(rule)} requires {self._label_id(required_id)} to be enabled"
                    )

            overrides = config.parameter_overrides.get(rule_id, {})
            for param in rule.parameters:
                value = overrides.get(param.key, param.default_value)
                problem = param.check(value)
                if problem:
                    warnings.append(
                        f"Invalid parameter '{param.name or param.key}' in rule "
                        f"{self._label(rule)}: {problem}"
                    )

        if errors:
            logger.debug(f"Configuration {config.game_id} has {len(errors)} error(s)")

        return RuleValidationResult(valid=not errors, errors=errors, warnings=warnings)

    @staticmethod
    def _label(rule: GameRule) -> str:
        return f"'{rule.name or rule.id}' ({rule.id})"

    def _label_id(self, rule_id: str) -> str:
        rule = self._registry.get_rule(rule_id)
        if rule is None:
            return f"'{rule_id}'"
        return self._label(rule)
