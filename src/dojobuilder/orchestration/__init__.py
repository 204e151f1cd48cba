"""
Orchestration of named Dojo builds.
"""

from .builder import Builder, run_builds

__all__ = [
    "Builder",
    "run_builds",
]
