"""
ID generation utilities for RuleForge.

Configuration ids are minted here and never reused within a process.
"""

from __future__ import annotations

import threading
import time


# ============================================================================
# Counter
# ============================================================================


class _ThreadSafeCounter:
    """Incrementing counter."""

    def __init__(self):
        self._value = 0
        self._lock = threading.Lock()

    def next(self) -> int:
        with self._lock:
            self._value += 1
            return self._value


_counter = _ThreadSafeCounter()


# ============================================================================
# ID Generation Functions
# ============================================================================


def generate_id(prefix: str = "") -> str:
    """Generate a unique identifier.

    Format: {prefix}_{timestamp}_{counter}

    The counter only grows, so no two calls in a process return the same id.

    Example:
        >>> generate_id("CONFIG")
        "CONFIG_1704067200_001"
    """
    timestamp = int(time.time())
    count = _counter.next()
    if prefix:
        return f"{prefix}_{timestamp}_{count:03d}"
    return f"{timestamp}_{count:03d}"


def generate_configuration_id(prefix: str = "CONFIG") -> str:
    """Generate an id for a newly created configuration."""
    return generate_id(prefix)


def generate_import_id(prefix: str = "IMPORT") -> str:
    """Generate an id for an imported configuration."""
    return generate_id(prefix)


def generate_modification_id(prefix: str = "MOD") -> str:
    """Generate an id for a shareable game modification."""
    return generate_id(prefix)


# ============================================================================
# ID Parsing
# ============================================================================


def parse_id(value: str) -> tuple[str, int, int]:
    """Parse an ID into (prefix, timestamp, counter).

    Raises:
        ValueError: If ID format is invalid
    """
    parts = value.rsplit("_", 2)

    if len(parts) == 3:
        prefix, ts_str, count_str = parts
        return prefix, int(ts_str), int(count_str)
    elif len(parts) == 2:
        ts_str, count_str = parts
        return "", int(ts_str), int(count_str)
    else:
        raise ValueError(f"Invalid ID format: {value}")


def is_valid_id(value: str) -> bool:
    """Check if a string is a valid generated ID."""
    try:
        parse_id(value)
        return True
    except (ValueError, TypeError, AttributeError):
        return False
