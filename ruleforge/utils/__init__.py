"""
RuleForge Utils - logging setup and ID generation.
"""

from ruleforge.utils.logging import setup_logging, get_logger
from ruleforge.utils.ids import generate_id

__all__ = [
    "setup_logging",
    "get_logger",
    "generate_id",
]
