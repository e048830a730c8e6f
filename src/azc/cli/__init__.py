"""
azc CLI Module.

Provides the command-line interface for azc.
"""

from azc.cli.main import main, cli

__all__ = ["main", "cli"]
