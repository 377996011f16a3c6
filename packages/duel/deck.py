"""
Deck & Hand Manager - draw pile / hand / discard pile for both combatants.

Cards only ever move between the three piles; none are created or destroyed,
so len(hand) + len(draw_pile) + len(discard_pile) is constant per side.

Pile orientation: the END of draw_pile is the top (pop() draws).

Public functions take a CombatState and return a new one. The underscore
variants mutate a state in place and are used by the combat engine, which
copies once per transition.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional, Union

from .content.spells import Spell
from .content.wizards import Wizard
from .state.combat import (
    CombatState,
    CombatWizard,
    Difficulty,
    Side,
    create_combat_wizard,
)
from .state.rng import Random, entropy_seed, seed_to_long

logger = logging.getLogger(__name__)


# Cards in the opening hand
INITIAL_HAND_SIZE = 3

# Cards drawn per side at each round boundary
CARDS_PER_DRAW = 1

# Hand size above which a discard is required
MAX_HAND_SIZE = 2

# Known spells used when a wizard has neither an active deck nor equipped spells
DEFAULT_DECK_SIZE = 5


@dataclass
class DiscardPhaseResult:
    """Outcome of a discard phase check."""
    state: CombatState
    needs_player_discard: bool = False
    cards_to_discard: int = 0


def _name(is_player: bool) -> str:
    return "You" if is_player else "Enemy"


# =============================================================================
# Deck construction
# =============================================================================


def get_deck(wizard: Wizard) -> List[Spell]:
    """
    Spells a wizard takes into combat.

    Active deck if it has cards, else equipped spells, else the first five
    known spells.
    """
    active = wizard.get_active_deck()
    if active and active.spells:
        return list(active.spells)
    if wizard.equipped_spells:
        return list(wizard.equipped_spells)
    return list(wizard.spells[:DEFAULT_DECK_SIZE])


def _shuffle(state: CombatState, cards: List[Spell]) -> List[Spell]:
    """Fisher-Yates with the state's shuffle RNG, saving the advanced RNG state."""
    rng = Random.from_state(state.shuffle_rng_state)
    shuffled = rng.shuffle(cards)
    state.shuffle_rng_state = rng.get_state()
    return shuffled


def initialize_combat(
    player_wizard: Wizard,
    enemy_wizard: Wizard,
    difficulty: Union[Difficulty, str] = Difficulty.NORMAL,
    seed: Optional[Union[int, str]] = None,
) -> CombatState:
    """
    Build the opening CombatState.

    A combat_start entry is logged, both decks are shuffled and each side
    draws INITIAL_HAND_SIZE cards. The player acts first. A wizard too frail
    to survive its failed draws loses before the first turn.

    Args:
        player_wizard: Player wizard (equipment-merged stats)
        enemy_wizard: Opponent wizard
        difficulty: Difficulty or its string value
        seed: Shuffle seed (int or seed string); random when omitted
    """
    if seed is None:
        seed = entropy_seed()
    elif isinstance(seed, str):
        seed = seed_to_long(seed)

    state = CombatState(
        player=create_combat_wizard(player_wizard),
        enemy=create_combat_wizard(enemy_wizard),
        difficulty=Difficulty(difficulty),
        turn=1,
        round=1,
        is_player_turn=True,
        shuffle_rng_state=Random(seed).get_state(),
    )

    state.player.draw_pile = _shuffle(state, get_deck(player_wizard))
    state.enemy.draw_pile = _shuffle(state, get_deck(enemy_wizard))

    state.add_log(
        "system", "combat_start",
        f"The duel between {player_wizard.name} and {enemy_wizard.name} has begun!",
    )

    _draw_cards(state, True, INITIAL_HAND_SIZE)
    _draw_cards(state, False, INITIAL_HAND_SIZE)
    logger.debug(
        f"Combat initialized ({state.difficulty.value}): "
        f"player deck {state.player.cards_in_deck()}, enemy deck {state.enemy.cards_in_deck()}"
    )
    return state


# =============================================================================
# Drawing and shuffling
# =============================================================================


def _draw_cards(state: CombatState, is_player: bool, count: int) -> None:
    if state.is_terminal:
        return

    wizard = state.wizard_for(is_player)
    actual_count = count + wizard.wizard.combat_stats.extra_card_draw

    for _ in range(actual_count):
        if not wizard.draw_pile:
            wizard.damage(1)
            state.add_log(
                Side.of(is_player).value, "failed_draw",
                f"{_name(is_player)} couldn't draw a card and took 1 damage!",
                damage=1,
            )
            continue
        wizard.hand.append(wizard.draw_pile.pop())

    if count > 0:
        plural = "s" if actual_count != 1 else ""
        state.add_log(
            Side.of(is_player).value, "draw_cards",
            f"{_name(is_player)} drew {actual_count} card{plural}.",
        )

    logger.debug(
        f"{Side.of(is_player).value} drew {actual_count}: hand {len(wizard.hand)}, "
        f"draw {len(wizard.draw_pile)}, discard {len(wizard.discard_pile)}"
    )
    state.update_status()


def draw_cards(state: CombatState, is_player: bool, count: int) -> CombatState:
    """
    Draw count cards (plus the extra_card_draw bonus) into hand.

    Each draw from an empty draw pile costs 1 health instead and is logged
    as failed_draw; there is no reshuffle or retry. A wizard brought to 0
    health this way loses the duel.
    """
    if state.is_terminal:
        return state

    new_state = state.copy()
    _draw_cards(new_state, is_player, count)
    return new_state


def _shuffle_discard_into_draw(state: CombatState, is_player: bool) -> None:
    wizard = state.wizard_for(is_player)
    if not wizard.discard_pile:
        return

    # Existing draw-pile cards stay on top; the reshuffled discards go underneath
    wizard.draw_pile = _shuffle(state, wizard.discard_pile) + wizard.draw_pile
    wizard.discard_pile = []
    state.add_log(
        Side.of(is_player).value, "shuffle_discard",
        f"{_name(is_player)} shuffled the discard pile back into the draw pile.",
    )


def shuffle_discard_into_draw(state: CombatState, is_player: bool) -> CombatState:
    """Shuffle a non-empty discard pile underneath the remaining draw pile."""
    new_state = state.copy()
    _shuffle_discard_into_draw(new_state, is_player)
    return new_state


# =============================================================================
# Discarding
# =============================================================================


def _discard_spell(
    state: CombatState, spell_id: str, is_player: bool, reason: str = "discard"
) -> Optional[Spell]:
    wizard = state.wizard_for(is_player)
    for i, spell in enumerate(wizard.hand):
        if spell.id == spell_id:
            del wizard.hand[i]
            wizard.discard_pile.append(spell)
            state.add_log(
                Side.of(is_player).value, reason,
                f"{_name(is_player)} discarded {spell.name}.",
                spell_name=spell.name,
            )
            return spell

    logger.warning(f"Card {spell_id!r} not found in {Side.of(is_player).value} hand")
    return None


def discard_spell(state: CombatState, spell_id: str, is_player: bool) -> CombatState:
    """Move one card with this id from hand to discard. Unknown ids are a no-op."""
    new_state = state.copy()
    if _discard_spell(new_state, spell_id, is_player) is None:
        return state
    if is_player and new_state.pending_discard:
        new_state.pending_discard = cards_over_limit(new_state.player)
    return new_state


def cards_over_limit(wizard: CombatWizard) -> int:
    return max(0, len(wizard.hand) - MAX_HAND_SIZE)


def needs_to_discard(state: CombatState, is_player: bool) -> bool:
    return cards_over_limit(state.wizard_for(is_player)) > 0


def _process_discard_phase(state: CombatState, is_player_active: bool) -> DiscardPhaseResult:
    wizard = state.wizard_for(is_player_active)
    excess = cards_over_limit(wizard)
    if excess == 0:
        return DiscardPhaseResult(state=state)

    if not is_player_active:
        while cards_over_limit(wizard) > 0:
            _discard_spell(state, wizard.hand[0].id, False)
        return DiscardPhaseResult(state=state)

    plural = "s" if excess != 1 else ""
    state.add_log(
        Side.PLAYER.value, "discard_required",
        f"You must discard {excess} card{plural} (maximum hand size is {MAX_HAND_SIZE}).",
    )
    return DiscardPhaseResult(state=state, needs_player_discard=True, cards_to_discard=excess)


def process_discard_phase(state: CombatState, is_player_active: bool) -> DiscardPhaseResult:
    """
    Enforce MAX_HAND_SIZE for one side.

    The enemy discards from the front of its hand until within the limit.
    The player is only flagged: the result carries needs_player_discard and
    the caller must collect the choice and call discard_spell.
    """
    return _process_discard_phase(state.copy(), is_player_active)
