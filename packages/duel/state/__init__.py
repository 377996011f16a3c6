"""
State module - combat state and RNG.

Contains:
- RNG system (XorShift128, seed management)
- Combat state snapshot passed through every transition
"""

from .rng import XorShift128, Random, seed_to_long, entropy_seed

from .combat import (
    CombatState,
    CombatWizard,
    CombatLogEntry,
    ActiveEffect,
    ActiveEffectKind,
    ExtraTurn,
    Side,
    CombatStatus,
    Difficulty,
    create_combat_wizard,
)

__all__ = [
    # RNG
    "XorShift128", "Random", "seed_to_long", "entropy_seed",
    # Combat State
    "CombatState",
    "CombatWizard",
    "CombatLogEntry",
    "ActiveEffect",
    "ActiveEffectKind",
    "ExtraTurn",
    "Side",
    "CombatStatus",
    "Difficulty",
    "create_combat_wizard",
]
