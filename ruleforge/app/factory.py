"""
Engine construction.

Builds a ready-to-use ``GameRuleEngine`` from an ``EngineConfig``: the
configured built-in catalogs are registered first, then any extra catalogs
found in ``catalogs_dir``.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from ruleforge.catalogs import CatalogLoader, register_builtin_games
from ruleforge.core.engine import GameRuleEngine
from ruleforge.core.registry import RuleRegistry
from ruleforge.utils.logging import get_logger

if TYPE_CHECKING:
    from ruleforge.app.config import EngineConfig


logger = get_logger("app.factory")


def build_registry(config: "EngineConfig") -> RuleRegistry:
    """Registry holding every catalog named by ``config``."""
    registry = RuleRegistry()
    register_builtin_games(registry, config.builtin_games)
    if config.catalogs_dir is not None:
        CatalogLoader(registry).load_directory(config.catalogs_dir)
    return registry


def create_engine(config: "EngineConfig | None" = None) -> GameRuleEngine:
    """Create an engine from ``config`` (the process-wide config if omitted).

    Raises:
        CatalogError: A configured catalog is missing or invalid
        DuplicateRegistrationError: Two catalogs define the same rule id differently
    """
    if config is None:
        from ruleforge.app.config import get_config
        config = get_config()

    registry = build_registry(config)
    engine = GameRuleEngine(
        registry,
        default_tag=config.default_tag,
        config_id_prefix=config.config_id_prefix,
        export_indent=config.export.indent,
        import_id_prefix=config.export.import_id_prefix,
    )
    logger.info(
        f"Engine ready: {len(registry)} rules across {len(registry.list_games())} games"
    )
    return engine
