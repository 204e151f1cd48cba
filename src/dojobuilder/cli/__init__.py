"""
Command-line interface for the dojobuilder package.
"""

from .main import main_cli

__all__ = [
    "main_cli",
]
