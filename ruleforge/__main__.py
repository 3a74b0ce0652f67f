"""
Entry point for running RuleForge as a module.

Usage:
    python -m ruleforge games
    python -m ruleforge rules chess
    python -m ruleforge --help
"""

from ruleforge.cli import main

if __name__ == "__main__":
    raise SystemExit(main())
