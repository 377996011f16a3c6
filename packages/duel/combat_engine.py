"""
Combat Engine - turn flow and action resolution for wizard duels.

Handles:
1. Turn alternation, extra turns and round boundaries
2. Spell casting, Mystic Punch and skipping
3. The end-of-round discard gate
4. Terminal status and combat results

Every public function takes a CombatState and returns a new one; the input
is never mutated. Once the status is terminal every transition returns its
input unchanged.

Usage:
    from packages.duel.combat_engine import select_card, execute_spell_cast

    state = initialize_combat(player, enemy, seed=42)
    state = select_card(state, 0, is_player=True)
    state = execute_spell_cast(state, is_player=True)
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Dict, Optional

from .content.spells import Spell
from .deck import (
    CARDS_PER_DRAW,
    _discard_spell,
    _draw_cards,
    _process_discard_phase,
    _shuffle_discard_into_draw,
)
from .effects.registry import (
    _apply_spell_effect,
    _process_active_effects,
    _regenerate_mana,
)
from .state.combat import (
    ActiveEffect,
    ActiveEffectKind,
    CombatState,
    CombatStatus,
    Difficulty,
    Side,
)

logger = logging.getLogger(__name__)


# Flat Mystic Punch bonus by difficulty and attacker
MYSTIC_PUNCH_MODIFIERS: Dict[Difficulty, Dict[Side, int]] = {
    Difficulty.EASY: {Side.PLAYER: 20, Side.ENEMY: 5},
    Difficulty.NORMAL: {Side.PLAYER: 5, Side.ENEMY: 10},
    Difficulty.HARD: {Side.PLAYER: 2, Side.ENEMY: 15},
}

# Rounds a Mystic Punch bleed lasts
BLEED_DURATION = 3

# Experience per enemy level, scaled by difficulty
EXPERIENCE_PER_LEVEL = 10
EXPERIENCE_MULTIPLIERS: Dict[Difficulty, float] = {
    Difficulty.EASY: 10,
    Difficulty.NORMAL: 1,
    Difficulty.HARD: 0.1,
}


def _name(is_player: bool) -> str:
    return "You" if is_player else "Enemy"


# =============================================================================
# Turn flow
# =============================================================================


def _end_round(state: CombatState) -> None:
    """Enemy turn ended: discard gate, then start the next round."""
    state.turn += 1
    _process_discard_phase(state, False)
    gate = _process_discard_phase(state, True)
    if gate.needs_player_discard:
        state.pending_discard = gate.cards_to_discard
        logger.debug(f"Round {state.round} held: player must discard {gate.cards_to_discard}")
        return

    state.pending_discard = 0
    state.is_player_turn = True
    state.round += 1

    for is_player in (True, False):
        _process_active_effects(state, is_player)
        if state.is_terminal:
            return

    for is_player in (True, False):
        _regenerate_mana(state, is_player)

    for is_player in (True, False):
        _draw_cards(state, is_player, CARDS_PER_DRAW)
    if state.is_terminal:
        return

    for is_player in (True, False):
        _shuffle_discard_into_draw(state, is_player)


def _advance_turn(state: CombatState) -> None:
    if state.is_terminal:
        return

    if state.extra_turn is not None:
        side = state.extra_turn.side
        state.extra_turn = None
        state.is_player_turn = side is Side.PLAYER
        state.turn += 1
        who = "You take" if state.is_player_turn else "Enemy takes"
        state.add_log(side.value, "extra_turn", f"{who} an extra turn!")
        return

    if state.is_player_turn:
        state.is_player_turn = False
        state.turn += 1
        return

    _end_round(state)


def advance_turn(state: CombatState) -> CombatState:
    """
    Hand the turn to the next actor.

    A pending extra turn is consumed first. After the enemy's turn the round
    ends: the enemy auto-discards down to the hand limit, and if the player
    is over it the state is returned with pending_discard set and the round
    held. Otherwise effects tick, mana regenerates, both sides draw and
    reshuffle, and the player acts next. The turn counter always advances.
    """
    if state.is_terminal:
        return state
    new_state = state.copy()
    _advance_turn(new_state)
    return new_state


def check_combat_status(state: CombatState) -> CombatState:
    """Set the terminal status if a combatant is at 0 health."""
    if state.is_terminal:
        return state
    new_state = state.copy()
    if not new_state.update_status():
        return state
    return new_state


# =============================================================================
# Selection
# =============================================================================


def select_spell(state: CombatState, spell: Optional[Spell], is_player: bool) -> CombatState:
    """Set (or with None, clear) the spell a side will cast."""
    if state.is_terminal:
        return state
    new_state = state.copy()
    new_state.wizard_for(is_player).selected_spell = spell
    return new_state


def select_card(state: CombatState, hand_index: int, is_player: bool) -> CombatState:
    """Select the card at hand_index. An invalid slot leaves the state unchanged."""
    hand = state.wizard_for(is_player).hand
    if not 0 <= hand_index < len(hand):
        logger.warning(f"Invalid hand slot {hand_index} for {Side.of(is_player).value} ({len(hand)} cards)")
        return state
    return select_spell(state, hand[hand_index], is_player)


# =============================================================================
# Actions
# =============================================================================


def execute_spell_cast(state: CombatState, is_player: bool) -> CombatState:
    """
    Cast the side's selected spell.

    Without enough mana the cast fails, the selection is cleared and the turn
    still passes. Otherwise the mana is paid, effects apply in order (stopping
    if combat ends), the card goes to the discard pile and the turn passes.
    """
    if state.is_terminal:
        return state

    spell = state.wizard_for(is_player).selected_spell
    if spell is None:
        logger.warning(f"{Side.of(is_player).value} tried to cast with no spell selected")
        return state

    new_state = state.copy()
    side = Side.of(is_player).value
    caster = new_state.wizard_for(is_player)

    if caster.current_mana < spell.mana_cost:
        new_state.add_log(
            side, "cast_failed",
            f"{_name(is_player)} didn't have enough mana to cast {spell.name}!",
            spell_name=spell.name,
        )
        caster.selected_spell = None
        _advance_turn(new_state)
        return new_state

    caster.current_mana -= spell.mana_cost
    new_state.add_log(
        side, "cast", f"{_name(is_player)} cast {spell.name}!",
        spell_name=spell.name, mana=spell.mana_cost,
    )

    for spell_effect in spell.effects:
        _apply_spell_effect(new_state, spell_effect, is_player)
        if new_state.is_terminal:
            return new_state

    _discard_spell(new_state, spell.id, is_player, reason="spell_cast")
    caster.selected_spell = None
    _advance_turn(new_state)
    return new_state


def execute_mystic_punch(state: CombatState, spell_tier: int, is_player: bool) -> CombatState:
    """
    Melee attack for spell_tier + difficulty modifier + mystic_punch_power.

    A bleed_effect combat stat also applies a Bleed damage-over-time to the
    target. The selected spell, if any, is discarded as the cost.
    """
    if state.is_terminal:
        return state

    new_state = state.copy()
    side = Side.of(is_player)
    caster = new_state.wizard_for(is_player)
    target = new_state.opponent_of(is_player)
    stats = caster.wizard.combat_stats

    damage = spell_tier + MYSTIC_PUNCH_MODIFIERS[new_state.difficulty][side] + stats.mystic_punch_power
    target.damage(damage)
    new_state.add_log(
        side.value, "mystic_punch",
        f"{_name(is_player)} used Mystic Punch for {damage} damage!",
        damage=damage, target="enemy" if is_player else "you",
    )
    if new_state.update_status():
        return new_state

    if stats.bleed_effect > 0:
        target.active_effects.append(ActiveEffect(
            name="Bleed",
            kind=ActiveEffectKind.DAMAGE_OVER_TIME,
            value=stats.bleed_effect,
            duration=BLEED_DURATION,
            remaining_duration=BLEED_DURATION,
            source=side,
        ))
        new_state.add_log(
            side.value, "effect_applied",
            f"Bleed applied to {'enemy' if is_player else 'you'} for {BLEED_DURATION} rounds!",
        )

    if caster.selected_spell is not None:
        _discard_spell(new_state, caster.selected_spell.id, is_player, reason="punch_discard")
        caster.selected_spell = None

    _advance_turn(new_state)
    return new_state


def skip_turn(state: CombatState, is_player: bool) -> CombatState:
    """Pass without acting."""
    if state.is_terminal:
        return state
    new_state = state.copy()
    you = "You" if is_player else "Enemy"
    verb = "skipped your" if is_player else "skipped its"
    new_state.add_log(Side.of(is_player).value, "skip_turn", f"{you} {verb} turn.")
    _advance_turn(new_state)
    return new_state


# =============================================================================
# Results
# =============================================================================


@dataclass
class CombatResult:
    """Summary of a duel."""
    status: CombatStatus
    victory: bool
    player_health: int
    enemy_health: int
    hp_lost: int
    turns: int
    rounds: int
    spells_cast: int
    experience_gained: int = 0


def calculate_experience_gained(state: CombatState) -> int:
    """floor(enemy level * 10 * difficulty multiplier) for a player win, else 0."""
    if state.status != CombatStatus.PLAYER_WON:
        return 0
    level = state.enemy.wizard.level
    return math.floor(level * EXPERIENCE_PER_LEVEL * EXPERIENCE_MULTIPLIERS[state.difficulty])


def get_result(state: CombatState) -> CombatResult:
    """Summarize the duel from the player's side."""
    return CombatResult(
        status=state.status,
        victory=state.status == CombatStatus.PLAYER_WON,
        player_health=state.player.current_health,
        enemy_health=state.enemy.current_health,
        hp_lost=state.player.max_health - state.player.current_health,
        turns=state.turn,
        rounds=state.round,
        spells_cast=sum(1 for e in state.get_events("cast") if e.actor == Side.PLAYER.value),
        experience_gained=calculate_experience_gained(state),
    )
