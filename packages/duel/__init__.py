"""
Wizard Duel Engine

Turn-based card combat between two wizards: shuffled spell decks, a
three-pile hand cycle, spell casting and the Mystic Punch fallback, timed
effects, and AI opponents.

Core subsystems:
- state: RNG (XorShift128), combat state snapshot
- content: Spells, wizards, sample opponents
- deck: Draw / hand / discard lifecycle and the discard gate
- effects: Spell effect application and active effect ticks
- combat_engine: Turn flow and action resolution
- ai: Spell selection strategies
- handlers: DuelRunner orchestration

Usage:
    from packages.duel import DuelRunner, create_wizard, get_sample_opponent

    runner = DuelRunner(create_wizard("Merlin"), get_sample_opponent("dark_acolyte"), seed=42)
    runner.player_cast(0)
    runner.take_enemy_turn()

    result = DuelRunner(create_wizard("A"), create_wizard("B"), seed="DUEL").run_auto()
"""

__version__ = "0.1.0"

# RNG System
from .state.rng import XorShift128, Random, seed_to_long

# Combat State
from .state.combat import (
    CombatState, CombatWizard, CombatLogEntry, ActiveEffect, ActiveEffectKind,
    ExtraTurn, Side, CombatStatus, Difficulty,
)

# Content
from .content.spells import (
    Spell, SpellEffect, SpellType, Element, EffectType, EffectTarget, CatalogError,
    ALL_SPELLS, get_spell, load_spells,
)
from .content.wizards import Wizard, CombatStats, create_wizard, get_sample_opponent

# Deck
from .deck import (
    initialize_combat, draw_cards, discard_spell, shuffle_discard_into_draw,
    process_discard_phase, MAX_HAND_SIZE,
)

# Effects
from .effects.registry import apply_spell_effect, process_active_effects, regenerate_mana

# Combat Engine
from .combat_engine import (
    advance_turn, execute_spell_cast, execute_mystic_punch, skip_turn,
    check_combat_status, select_spell, select_card,
    CombatResult, get_result, calculate_experience_gained,
)

# AI
from .ai import AIStrategyFactory, AIMemory, AIDecision, get_ai_spell_selection, classify_archetype

# Handlers
from .handlers.duel import DuelRunner

__all__ = [
    # RNG
    "XorShift128", "Random", "seed_to_long",
    # State
    "CombatState", "CombatWizard", "CombatLogEntry", "ActiveEffect", "ActiveEffectKind",
    "ExtraTurn", "Side", "CombatStatus", "Difficulty",
    # Content
    "Spell", "SpellEffect", "SpellType", "Element", "EffectType", "EffectTarget",
    "CatalogError", "ALL_SPELLS", "get_spell", "load_spells",
    "Wizard", "CombatStats", "create_wizard", "get_sample_opponent",
    # Deck
    "initialize_combat", "draw_cards", "discard_spell", "shuffle_discard_into_draw",
    "process_discard_phase", "MAX_HAND_SIZE",
    # Effects
    "apply_spell_effect", "process_active_effects", "regenerate_mana",
    # Combat Engine
    "advance_turn", "execute_spell_cast", "execute_mystic_punch", "skip_turn",
    "check_combat_status", "select_spell", "select_card",
    "CombatResult", "get_result", "calculate_experience_gained",
    # AI
    "AIStrategyFactory", "AIMemory", "AIDecision", "get_ai_spell_selection", "classify_archetype",
    # Handlers
    "DuelRunner",
]
