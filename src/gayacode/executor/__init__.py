"""
Target process execution for the gayacode package.

This module provides the ProcessRunner, which launches the analysed program,
reports its exit and terminates it on request.
"""

from .process_runner import ProcessRunner, signal_name_from_return_code

__all__ = [
    "ProcessRunner",
    "signal_name_from_return_code",
]
