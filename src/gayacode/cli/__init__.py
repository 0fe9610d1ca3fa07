"""
Command-line interface for the gayacode package.
"""

from .main import build_parser, main_cli

__all__ = ["build_parser", "main_cli"]
