"""
AI module - spell selection for computer-controlled wizards.

Contains:
- Strategies (Defensive, Aggressive, Balanced, Elemental and five archetypes)
- Factory choosing a strategy from difficulty, level and archetype
- Mystic Punch and discard heuristics
"""

from .strategies import (
    AIMemory,
    AIDecision,
    AIStrategy,
    DefensiveStrategy,
    AggressiveStrategy,
    BalancedStrategy,
    ElementalStrategy,
    NecromancerStrategy,
    TimeWeaverStrategy,
    BattleMageStrategy,
    IllusionistStrategy,
    AlchemistStrategy,
    STRATEGY_CLASSES,
    ARCHETYPES,
    get_strategy,
    affordable_spells,
)

from .factory import (
    AIStrategyFactory,
    classify_archetype,
    get_ai_spell_selection,
    should_use_mystic_punch,
    select_spell_to_discard,
)

__all__ = [
    # Strategies
    "AIMemory", "AIDecision", "AIStrategy",
    "DefensiveStrategy", "AggressiveStrategy", "BalancedStrategy", "ElementalStrategy",
    "NecromancerStrategy", "TimeWeaverStrategy", "BattleMageStrategy",
    "IllusionistStrategy", "AlchemistStrategy",
    "STRATEGY_CLASSES", "ARCHETYPES", "get_strategy", "affordable_spells",
    # Factory
    "AIStrategyFactory", "classify_archetype", "get_ai_spell_selection",
    "should_use_mystic_punch", "select_spell_to_discard",
]
