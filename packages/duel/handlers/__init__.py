"""
Handlers - stateful orchestration over the pure combat functions.
"""

from .duel import DuelRunner, DEFAULT_MAX_TURNS

__all__ = ["DuelRunner", "DEFAULT_MAX_TURNS"]
