"""
RuleForge Configuration.

Central configuration for building an engine: which built-in catalogs to
register, where to find extra catalog files, and serializer/id settings.
"""

from __future__ import annotations

import json
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Literal

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR"]


# ============================================================================
# Default Paths
# ============================================================================


def get_default_data_dir() -> Path:
    """Get the default data directory for RuleForge."""
    if env_path := os.environ.get("RULEFORGE_DATA_DIR"):
        return Path(env_path)
    return Path.home() / ".ruleforge"


def get_default_config_path() -> Path:
    return get_default_data_dir() / "ruleforge_config.json"


def get_default_catalogs_dir() -> Path | None:
    """Extra catalog directory from the environment, if any."""
    if env_path := os.environ.get("RULEFORGE_CATALOGS_DIR"):
        return Path(env_path)
    return None


def _default_log_level() -> LogLevel:
    level = os.environ.get("RULEFORGE_LOG_LEVEL", "WARNING").upper()
    if level not in ("DEBUG", "INFO", "WARNING", "ERROR"):
        return "WARNING"
    return level  # type: ignore[return-value]


# ============================================================================
# Configuration Classes
# ============================================================================


@dataclass
class ExportConfig:
    """Configuration for configuration export/import."""

    indent: int = 2
    import_id_prefix: str = "IMPORT"

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ExportConfig":
        return cls(**{k: v for k, v in data.items() if hasattr(cls, k)})

    def to_dict(self) -> dict[str, Any]:
        return {
            "indent": self.indent,
            "import_id_prefix": self.import_id_prefix,
        }


@dataclass
class EngineConfig:
    """Main configuration for building a rule engine.

    Attributes:
        builtin_games: Built-in catalogs registered at startup
        catalogs_dir: Extra directory of YAML/JSON catalogs (optional)
        default_tag: Tag marking rules active in new configurations
        config_id_prefix: Prefix for created configuration ids
        export: Export/import settings
        log_level: Logging level applied by the CLI
    """

    builtin_games: list[str] = field(
        default_factory=lambda: ["chess", "platformer", "tictactoe"]
    )
    catalogs_dir: Path | None = field(default_factory=get_default_catalogs_dir)
    default_tag: str = "default"
    config_id_prefix: str = "CONFIG"
    export: ExportConfig = field(default_factory=ExportConfig)
    log_level: LogLevel = field(default_factory=_default_log_level)

    def __post_init__(self):
        if isinstance(self.catalogs_dir, str):
            self.catalogs_dir = Path(self.catalogs_dir)

    @classmethod
    def load(cls, config_path: str | Path | None = None) -> "EngineConfig":
        """Load configuration from a JSON file; defaults if the file is missing."""
        if config_path is None:
            config_path = get_default_config_path()

        config_path = Path(config_path)

        if not config_path.exists():
            return cls()

        with open(config_path, "r", encoding="utf-8") as f:
            data = json.load(f)

        return cls.from_dict(data)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "EngineConfig":
        defaults = cls()
        catalogs_dir = data.get("catalogs_dir", defaults.catalogs_dir)
        return cls(
            builtin_games=list(data.get("builtin_games", defaults.builtin_games)),
            catalogs_dir=Path(catalogs_dir) if catalogs_dir else None,
            default_tag=data.get("default_tag", defaults.default_tag),
            config_id_prefix=data.get("config_id_prefix", defaults.config_id_prefix),
            export=ExportConfig.from_dict(data.get("export", {})),
            log_level=data.get("log_level", defaults.log_level),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "builtin_games": list(self.builtin_games),
            "catalogs_dir": str(self.catalogs_dir) if self.catalogs_dir else None,
            "default_tag": self.default_tag,
            "config_id_prefix": self.config_id_prefix,
            "export": self.export.to_dict(),
            "log_level": self.log_level,
        }

    def save(self, config_path: str | Path | None = None) -> Path:
        """Save configuration to a JSON file and return its path."""
        if config_path is None:
            config_path = get_default_config_path()

        config_path = Path(config_path)
        config_path.parent.mkdir(parents=True, exist_ok=True)

        with open(config_path, "w", encoding="utf-8") as f:
            json.dump(self.to_dict(), f, indent=2)

        return config_path


# ============================================================================
# Global Config Instance
# ============================================================================


_global_config: EngineConfig | None = None


def get_config() -> EngineConfig:
    """Get the process-wide configuration, loading it on first use."""
    global _global_config
    if _global_config is None:
        _global_config = EngineConfig.load()
    return _global_config


def set_config(config: EngineConfig) -> None:
    global _global_config
    _global_config = config


def reload_config(config_path: str | Path | None = None) -> EngineConfig:
    """Reload configuration from disk."""
    global _global_config
    _global_config = EngineConfig.load(config_path)
    return _global_config
