"""
Command-line interface for timerlat-top.
"""

from .main import apply_cli_overrides, build_parser, main_cli

__all__ = ["apply_cli_overrides", "build_parser", "main_cli"]
