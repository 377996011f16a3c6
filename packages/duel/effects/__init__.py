"""
Spell effect system for wizard duels.

Spell effects are applied through a registry of handlers keyed by
EffectType; active effects tick through a second registry keyed by
ActiveEffectKind.

Usage:
    from packages.duel.effects import apply_spell_effect, process_active_effects

    state = apply_spell_effect(state, spell.effects[0], is_player_caster=True)
    state = process_active_effects(state, is_player=False)
"""

from .registry import (
    DEFAULT_SUMMON_DURATION,
    EffectContext,
    TickContext,
    effect,
    tick,
    get_effect_name,
    is_time_warp,
    apply_spell_effect,
    process_active_effects,
    regenerate_mana,
)

__all__ = [
    "DEFAULT_SUMMON_DURATION",
    "EffectContext",
    "TickContext",
    "effect",
    "tick",
    "get_effect_name",
    "is_time_warp",
    "apply_spell_effect",
    "process_active_effects",
    "regenerate_mana",
]
