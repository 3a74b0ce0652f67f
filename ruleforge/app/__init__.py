"""
RuleForge application layer - configuration and engine construction.
"""

from ruleforge.app.config import EngineConfig, get_config, set_config, reload_config
from ruleforge.app.factory import build_registry, create_engine

__all__ = [
    "EngineConfig",
    "get_config",
    "set_config",
    "reload_config",
    "build_registry",
    "create_engine",
]
