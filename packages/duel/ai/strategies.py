"""
AI Strategies - spell selection for computer-controlled wizards.

Each strategy is a stateless class: select() looks at the combat state and
returns an AIDecision. The only memory any strategy keeps (the Elemental
strategy's last element) travels in AIMemory, passed in and handed back.

Decision flow:
1. Affordable spells = hand cards whose mana cost <= current mana
2. None affordable -> Mystic Punch (spell is None)
3. Otherwise the strategy's priority chain picks one

Key thresholds (fraction of max):
- low health      < 0.40
- critical health < 0.25
- low mana        < 0.30

All randomness comes from the Random passed to select().
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import Callable, Dict, List, Optional, Sequence, Type

from ..content.spells import EffectTarget, EffectType, Element, Spell, SpellType
from ..effects.registry import is_time_warp
from ..state.combat import ActiveEffectKind, CombatState, CombatWizard, Side
from ..state.rng import Random

logger = logging.getLogger(__name__)


LOW_HEALTH = 0.4
CRITICAL_HEALTH = 0.25
LOW_MANA = 0.3


@dataclass(frozen=True)
class AIMemory:
    """Per-duel AI memory."""
    last_element: Optional[Element] = None


@dataclass(frozen=True)
class AIDecision:
    """A strategy's pick. spell=None means Mystic Punch."""
    spell: Optional[Spell]
    strategy: str
    memory: AIMemory


# ============ HELPERS ============

def affordable_spells(wizard: CombatWizard) -> List[Spell]:
    return [s for s in wizard.hand if s.mana_cost <= wizard.current_mana]


def spells_of_type(spells: Sequence[Spell], *types: SpellType) -> List[Spell]:
    return [s for s in spells if s.type in types]


def spells_of_element(spells: Sequence[Spell], element: Element) -> List[Spell]:
    return [s for s in spells if s.element == element]


def spells_with_effect(spells: Sequence[Spell], predicate: Callable) -> List[Spell]:
    return [s for s in spells if any(predicate(e) for e in s.effects)]


def best_healing(spells: Sequence[Spell]) -> Spell:
    return max(spells, key=lambda s: s.total_healing)


def best_damage(spells: Sequence[Spell]) -> Spell:
    return max(spells, key=lambda s: s.total_damage)


def is_low_health(wizard: CombatWizard) -> bool:
    return wizard.current_health < wizard.max_health * LOW_HEALTH


def is_critical_health(wizard: CombatWizard) -> bool:
    return wizard.current_health < wizard.max_health * CRITICAL_HEALTH


def is_low_mana(wizard: CombatWizard) -> bool:
    return wizard.current_mana < wizard.max_mana * LOW_MANA


def has_effect(wizard: CombatWizard, *kinds: ActiveEffectKind, source: Optional[Side] = None) -> bool:
    return any(
        e.kind in kinds and (source is None or e.source == source)
        for e in wizard.active_effects
    )


def is_buffed(wizard: CombatWizard) -> bool:
    return has_effect(wizard, ActiveEffectKind.BUFF)


# ============ BASE STRATEGY ============

class AIStrategy:
    """Base class for all spell selection strategies."""

    ID = "base"
    NAME = "Base"

    def select(
        self,
        state: CombatState,
        rng: Random,
        memory: Optional[AIMemory] = None,
        is_player: bool = False,
    ) -> AIDecision:
        """
        Pick a spell for one side (the enemy unless is_player).

        Returns an AIDecision with spell None when nothing is affordable.
        """
        memory = memory or AIMemory()
        me = state.wizard_for(is_player)
        foe = state.opponent_of(is_player)

        available = affordable_spells(me)
        if not available:
            logger.debug(f"{self.NAME}: nothing affordable, using Mystic Punch")
            return AIDecision(None, self.NAME, memory)

        spell = self.choose(available, me, foe, rng, memory)
        if spell is not None:
            memory = self.remember(memory, spell)
        logger.debug(f"{self.NAME} selected: {spell.name if spell else 'Mystic Punch'}")
        return AIDecision(spell, self.NAME, memory)

    def choose(
        self,
        available: List[Spell],
        me: CombatWizard,
        foe: CombatWizard,
        rng: Random,
        memory: AIMemory,
    ) -> Optional[Spell]:
        raise NotImplementedError("Subclass must implement choose()")

    def remember(self, memory: AIMemory, spell: Spell) -> AIMemory:
        return memory


# ============ GENERAL STRATEGIES ============

class DefensiveStrategy(AIStrategy):
    """
    Prioritizes survival.

    - critical health: strongest heal
    - low health: random heal or buff
    - opponent buffed: debuff (50%)
    - damage (70%), else anything
    """

    ID = "defensive"
    NAME = "Defensive"

    def choose(self, available, me, foe, rng, memory):
        if is_critical_health(me):
            healing = spells_of_type(available, SpellType.HEALING)
            if healing:
                return best_healing(healing)

        if is_low_health(me):
            defensive = spells_of_type(available, SpellType.HEALING) + spells_of_type(available, SpellType.BUFF)
            if defensive:
                return rng.choice(defensive)

        if is_buffed(foe):
            debuffs = spells_of_type(available, SpellType.DEBUFF)
            if debuffs and rng.random_float() > 0.5:
                return rng.choice(debuffs)

        damage = spells_of_type(available, SpellType.ATTACK)
        if damage and rng.random_float() > 0.3:
            return rng.choice(damage)

        return rng.choice(available)


class AggressiveStrategy(AIStrategy):
    """
    Prioritizes damage.

    - critical health: heal only 30% of the time
    - one of the top three damage spells (70%)
    - opponent above 70% health: debuff (50%)
    """

    ID = "aggressive"
    NAME = "Aggressive"

    def choose(self, available, me, foe, rng, memory):
        if is_critical_health(me) and rng.random_float() > 0.7:
            healing = spells_of_type(available, SpellType.HEALING)
            if healing:
                return rng.choice(healing)

        damage = spells_of_type(available, SpellType.ATTACK)
        if damage:
            top = sorted(damage, key=lambda s: s.total_damage, reverse=True)[:3]
            if rng.random_float() < 0.7:
                return rng.choice(top)

        if foe.current_health > foe.max_health * 0.7:
            debuffs = spells_of_type(available, SpellType.DEBUFF)
            if debuffs and rng.random_float() > 0.5:
                return rng.choice(debuffs)

        return rng.choice(available)


class BalancedStrategy(AIStrategy):
    """
    Reads the situation.

    - critical health: strongest heal
    - opponent at low health: strongest damage
    - opponent buffed: debuff (40%)
    - otherwise 40% damage / 30% buff-or-debuff / 30% healing
    """

    ID = "balanced"
    NAME = "Balanced"

    def choose(self, available, me, foe, rng, memory):
        if is_critical_health(me):
            healing = spells_of_type(available, SpellType.HEALING)
            if healing:
                return best_healing(healing)

        if is_low_health(foe):
            damage = spells_of_type(available, SpellType.ATTACK)
            if damage:
                return best_damage(damage)

        if is_buffed(foe) and rng.random_float() > 0.6:
            debuffs = spells_of_type(available, SpellType.DEBUFF)
            if debuffs:
                return rng.choice(debuffs)

        roll = rng.random_float()
        if roll < 0.4:
            pool = spells_of_type(available, SpellType.ATTACK)
        elif roll < 0.7:
            pool = spells_of_type(available, SpellType.BUFF, SpellType.DEBUFF)
        else:
            pool = spells_of_type(available, SpellType.HEALING)
        if pool:
            return rng.choice(pool)

        return rng.choice(available)


class ElementalStrategy(AIStrategy):
    """
    Chains elements.

    - critical health: strongest heal
    - same element as last cast (60%)
    - an element the opponent's effects don't carry (50%)
    - damage (70%), else anything

    Remembers the element of every pick in AIMemory.last_element.
    """

    ID = "elemental"
    NAME = "Elemental"

    def choose(self, available, me, foe, rng, memory):
        if is_critical_health(me):
            healing = spells_of_type(available, SpellType.HEALING)
            if healing:
                return best_healing(healing)

        if memory.last_element is not None:
            same = spells_of_element(available, memory.last_element)
            if same and rng.random_float() > 0.4:
                return rng.choice(same)

        foe_elements = {e.element for e in foe.active_effects if e.element is not None}
        if foe_elements and rng.random_float() > 0.5:
            counters = [s for s in available if s.element not in foe_elements]
            if counters:
                return rng.choice(counters)

        damage = spells_of_type(available, SpellType.ATTACK)
        if damage and rng.random_float() > 0.3:
            return rng.choice(damage)

        return rng.choice(available)

    def remember(self, memory, spell):
        return replace(memory, last_element=spell.element)


# ============ ARCHETYPE STRATEGIES ============

class NecromancerStrategy(AIStrategy):
    """Heals when low, attacks while a minion is up, otherwise raises one."""

    ID = "necromancer"
    NAME = "Necromancer"

    def choose(self, available, me, foe, rng, memory):
        if is_low_health(me):
            healing = spells_of_type(available, SpellType.HEALING)
            if healing:
                return best_healing(healing)

        damage = spells_of_type(available, SpellType.ATTACK, SpellType.DEBUFF)
        if has_effect(me, ActiveEffectKind.SUMMON):
            if damage:
                return best_damage(damage)
        else:
            summons = spells_with_effect(available, lambda e: e.type == EffectType.SUMMON)
            if summons:
                return rng.choice(summons)

        if damage:
            return rng.choice(damage)
        return rng.choice(available)


class TimeWeaverStrategy(AIStrategy):
    """Bends time first, then recovers mana, then attacks."""

    ID = "timeWeaver"
    NAME = "Time Weaver"

    def choose(self, available, me, foe, rng, memory):
        if is_critical_health(me):
            healing = spells_of_type(available, SpellType.HEALING)
            if healing:
                return best_healing(healing)

        warps = spells_with_effect(available, is_time_warp)
        if warps:
            return warps[0]

        if is_low_mana(me):
            mana = spells_with_effect(
                available,
                lambda e: e.type in (EffectType.MANA_RESTORE, EffectType.MANA_RESTORE_OVER_TIME),
            )
            if mana:
                return rng.choice(mana)

        damage = spells_of_type(available, SpellType.ATTACK)
        if damage:
            return rng.choice(damage)
        return rng.choice(available)


class BattleMageStrategy(AIStrategy):
    """
    Fights up close.

    Buffs itself when unbuffed, casts its hardest hitter, and prefers
    Mystic Punch over utility spells.
    """

    ID = "battleMage"
    NAME = "Battle Mage"

    def choose(self, available, me, foe, rng, memory):
        if is_critical_health(me):
            healing = spells_of_type(available, SpellType.HEALING)
            if healing:
                return best_healing(healing)

        if not is_buffed(me):
            buffs = spells_of_type(available, SpellType.BUFF)
            if buffs:
                return rng.choice(buffs)

        damage = spells_of_type(available, SpellType.ATTACK)
        if damage:
            return best_damage(damage)
        return None


class IllusionistStrategy(AIStrategy):
    """Keeps the opponent debuffed and itself shielded, then attacks."""

    ID = "illusionist"
    NAME = "Illusionist"

    def choose(self, available, me, foe, rng, memory):
        debuffed = has_effect(
            foe,
            ActiveEffectKind.DAMAGE_REDUCTION,
            ActiveEffectKind.DAMAGE_OVER_TIME,
            ActiveEffectKind.STATUS,
        )
        if not debuffed:
            debuffs = spells_of_type(available, SpellType.DEBUFF)
            if debuffs:
                return rng.choice(debuffs)

        if not has_effect(me, ActiveEffectKind.DAMAGE_REDUCTION):
            reactions = spells_of_type(available, SpellType.REACTION)
            if reactions:
                return rng.choice(reactions)

        damage = spells_of_type(available, SpellType.ATTACK)
        if damage:
            return rng.choice(damage)
        return rng.choice(available)


class AlchemistStrategy(AIStrategy):
    """Poisons first, patches itself up when low, then attacks."""

    ID = "alchemist"
    NAME = "Alchemist"

    def choose(self, available, me, foe, rng, memory):
        if is_low_health(me):
            remedies = spells_with_effect(
                available,
                lambda e: e.type in (EffectType.HEALING, EffectType.HEALING_OVER_TIME)
                or (e.type == EffectType.STATUS_EFFECT and e.target == EffectTarget.SELF and e.value > 0),
            )
            if remedies:
                return rng.choice(remedies)

        if not has_effect(foe, ActiveEffectKind.DAMAGE_OVER_TIME):
            poisons = spells_with_effect(
                available,
                lambda e: e.type == EffectType.DAMAGE_OVER_TIME
                or (e.type == EffectType.STATUS_EFFECT and e.target == EffectTarget.ENEMY and e.value > 0),
            )
            if poisons:
                return rng.choice(poisons)

        damage = spells_of_type(available, SpellType.ATTACK, SpellType.DEBUFF)
        if damage:
            return rng.choice(damage)
        return rng.choice(available)


# ============ REGISTRY ============

STRATEGY_CLASSES: Dict[str, Type[AIStrategy]] = {
    cls.ID: cls
    for cls in (
        DefensiveStrategy,
        AggressiveStrategy,
        BalancedStrategy,
        ElementalStrategy,
        NecromancerStrategy,
        TimeWeaverStrategy,
        BattleMageStrategy,
        IllusionistStrategy,
        AlchemistStrategy,
    )
}

ARCHETYPES = ("necromancer", "timeWeaver", "battleMage", "illusionist", "alchemist")


def get_strategy(strategy_id: str) -> AIStrategy:
    """Instantiate a strategy by ID."""
    if strategy_id not in STRATEGY_CLASSES:
        raise ValueError(f"Unknown strategy: {strategy_id}")
    return STRATEGY_CLASSES[strategy_id]()
