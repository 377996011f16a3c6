"""
Strategy selection and the enemy's turn-level decisions.

Selection order:
1. A themed keyword in the wizard's name forces an archetype strategy
2. easy   -> Defensive
3. hard   -> Elemental (level >= 8) / Aggressive (>= 5) / Balanced
4. normal -> weighted draw, shifting toward advanced strategies with level
"""

from __future__ import annotations

import logging
from typing import List, Optional, Sequence, Tuple, Union

from ..content.spells import Spell
from ..state.combat import CombatState, Difficulty
from ..state.rng import Random, entropy_seed
from .strategies import AIDecision, AIMemory, AIStrategy, affordable_spells, get_strategy

logger = logging.getLogger(__name__)


# (keyword, archetype); first match wins
ARCHETYPE_KEYWORDS: List[Tuple[str, str]] = [
    ("necro", "necromancer"),
    ("death", "necromancer"),
    ("dark", "necromancer"),
    ("skeleton", "necromancer"),
    ("chronos", "timeWeaver"),
    ("time", "timeWeaver"),
    ("battle", "battleMage"),
    ("warrior", "battleMage"),
    ("knight", "battleMage"),
    ("illusion", "illusionist"),
    ("mirage", "illusionist"),
    ("alchem", "alchemist"),
    ("potion", "alchemist"),
]

# Normal difficulty: (min level, [(cumulative threshold, strategy id), ...])
NORMAL_WEIGHTS: List[Tuple[int, List[Tuple[float, str]]]] = [
    (7, [(0.4, "balanced"), (0.7, "aggressive"), (1.0, "elemental")]),
    (4, [(0.5, "defensive"), (0.9, "balanced"), (1.0, "aggressive")]),
    (0, [(0.7, "defensive"), (1.0, "balanced")]),
]

# Chance of choosing Mystic Punch over an affordable spell
PUNCH_CHANCE = {
    Difficulty.EASY: 0.1,
    Difficulty.NORMAL: 0.25,
    Difficulty.HARD: 0.3,
}


def classify_archetype(name: str) -> Optional[str]:
    """Archetype implied by a wizard's name, or None."""
    lowered = name.lower()
    for keyword, archetype in ARCHETYPE_KEYWORDS:
        if keyword in lowered:
            return archetype
    return None


class AIStrategyFactory:
    """Pure selection of a strategy from (difficulty, level, archetype) and one draw."""

    @staticmethod
    def create_strategy(
        difficulty: Union[Difficulty, str],
        level: int,
        archetype: Optional[str] = None,
        rng: Optional[Random] = None,
    ) -> AIStrategy:
        if archetype is not None:
            return get_strategy(archetype)

        difficulty = Difficulty(difficulty)
        if difficulty == Difficulty.EASY:
            return get_strategy("defensive")

        if difficulty == Difficulty.HARD:
            if level >= 8:
                return get_strategy("elemental")
            if level >= 5:
                return get_strategy("aggressive")
            return get_strategy("balanced")

        rng = rng or Random(entropy_seed())
        roll = rng.random_float()
        for min_level, table in NORMAL_WEIGHTS:
            if level >= min_level:
                for threshold, strategy_id in table:
                    if roll < threshold:
                        return get_strategy(strategy_id)
                return get_strategy(table[-1][1])
        raise ValueError(f"No strategy table for level {level}")


def get_ai_spell_selection(
    state: CombatState,
    rng: Random,
    memory: Optional[AIMemory] = None,
    is_player: bool = False,
) -> AIDecision:
    """Choose a strategy for the acting wizard and let it pick a spell."""
    wizard = state.wizard_for(is_player).wizard
    strategy = AIStrategyFactory.create_strategy(
        state.difficulty, wizard.level, classify_archetype(wizard.name), rng
    )
    decision = strategy.select(state, rng, memory, is_player=is_player)
    logger.debug(
        f"AI using {decision.strategy} strategy selected: "
        f"{decision.spell.name if decision.spell else 'Mystic Punch'}"
    )
    return decision


def should_use_mystic_punch(state: CombatState, rng: Random, is_player: bool = False) -> bool:
    """
    Whether to punch instead of casting.

    Always when nothing is affordable; otherwise a difficulty-scaled chance
    that on hard grows as the opponent's health drops.
    """
    if not affordable_spells(state.wizard_for(is_player)):
        return True

    chance = PUNCH_CHANCE[state.difficulty]
    if state.difficulty == Difficulty.HARD:
        chance += (1 - state.opponent_of(is_player).health_ratio) * 0.2
    return rng.random_float() < chance


def select_spell_to_discard(
    hand: Sequence[Spell], difficulty: Union[Difficulty, str], rng: Random
) -> Optional[Spell]:
    """
    Card to throw away for a Mystic Punch.

    easy discards the highest tier, hard the lowest, normal a random card.
    """
    if not hand:
        return None

    difficulty = Difficulty(difficulty)
    if difficulty == Difficulty.EASY:
        return max(hand, key=lambda s: s.tier)
    if difficulty == Difficulty.HARD:
        return min(hand, key=lambda s: s.tier)
    return rng.choice(hand)
