"""
Duel Execution - drives a duel between a player and an AI opponent.

DuelRunner owns the current CombatState plus the AI's RNG and memory, and
sequences calls into the combat engine so that one action is fully resolved
before the next is accepted.

Duel Flow:
1. initialize_combat shuffles both decks and deals opening hands
2. Player acts (cast / punch / skip)
3. Enemy acts via its AI strategy
4. Round end: if the player holds too many cards the duel waits for
   player_discard before the next round starts
5. Repeat until a side reaches 0 health
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional, Union

from ..ai.factory import get_ai_spell_selection, select_spell_to_discard, should_use_mystic_punch
from ..ai.strategies import AIMemory
from ..combat_engine import (
    CombatResult,
    advance_turn,
    execute_mystic_punch,
    execute_spell_cast,
    get_result,
    select_card,
    select_spell,
    skip_turn,
)
from ..content.wizards import Wizard
from ..deck import discard_spell, initialize_combat
from ..state.combat import CombatState, Difficulty
from ..state.rng import Random, entropy_seed, seed_to_long

logger = logging.getLogger(__name__)


# Safety cap on actions for simulated duels
DEFAULT_MAX_TURNS = 500


class DuelRunner:
    """Stateful facade over the pure combat functions."""

    def __init__(
        self,
        player: Wizard,
        enemy: Wizard,
        difficulty: Union[Difficulty, str] = Difficulty.NORMAL,
        seed: Optional[Union[int, str]] = None,
        ai_rng: Optional[Random] = None,
    ):
        if seed is None:
            seed = entropy_seed()
        elif isinstance(seed, str):
            seed = seed_to_long(seed)
        self.seed = seed

        self.state: CombatState = initialize_combat(player, enemy, difficulty, seed)
        self.ai_rng = ai_rng or Random(seed)
        self.memory = AIMemory()
        self.player_memory = AIMemory()

    # -------------------------------------------------------------------------
    # Status
    # -------------------------------------------------------------------------

    @property
    def is_over(self) -> bool:
        return self.state.is_terminal

    @property
    def awaiting_discard(self) -> bool:
        return self.state.pending_discard > 0

    def _player_can_act(self) -> Optional[str]:
        """Reason the player cannot act now, or None."""
        if self.is_over:
            return "Combat is over"
        if self.awaiting_discard:
            return f"Discard {self.state.pending_discard} card(s) first"
        if not self.state.is_player_turn:
            return "Not your turn"
        return None

    def get_result(self) -> CombatResult:
        return get_result(self.state)

    # -------------------------------------------------------------------------
    # Player actions
    # -------------------------------------------------------------------------

    def select(self, hand_index: int) -> Dict[str, Any]:
        error = self._player_can_act()
        if error:
            return {"success": False, "error": error}
        new_state = select_card(self.state, hand_index, True)
        if new_state is self.state:
            return {"success": False, "error": f"Invalid hand slot: {hand_index}"}
        self.state = new_state
        return {"success": True, "action": "select", "spell": new_state.player.selected_spell.id}

    def player_cast(self, hand_index: Optional[int] = None) -> Dict[str, Any]:
        """Cast the card at hand_index, or the already selected spell."""
        if hand_index is not None:
            result = self.select(hand_index)
            if not result["success"]:
                return result
        else:
            error = self._player_can_act()
            if error:
                return {"success": False, "error": error}

        spell = self.state.player.selected_spell
        if spell is None:
            return {"success": False, "error": "No spell selected"}

        self.state = execute_spell_cast(self.state, True)
        return {"success": True, "action": "cast", "spell": spell.id}

    def player_punch(self, hand_index: Optional[int] = None) -> Dict[str, Any]:
        """Mystic Punch, discarding the card at hand_index (or the selected spell) as the cost."""
        if hand_index is not None:
            result = self.select(hand_index)
            if not result["success"]:
                return result
        else:
            error = self._player_can_act()
            if error:
                return {"success": False, "error": error}

        selected = self.state.player.selected_spell
        tier = selected.tier if selected else 1
        self.state = execute_mystic_punch(self.state, tier, True)
        return {
            "success": True,
            "action": "mystic_punch",
            "tier": tier,
            "discarded": selected.id if selected else None,
        }

    def player_skip(self) -> Dict[str, Any]:
        error = self._player_can_act()
        if error:
            return {"success": False, "error": error}
        self.state = skip_turn(self.state, True)
        return {"success": True, "action": "skip_turn"}

    def player_discard(self, spell_id: str) -> Dict[str, Any]:
        """Discard during the round-end gate; the round resumes once the hand fits."""
        if not self.awaiting_discard:
            return {"success": False, "error": "No discard required"}

        new_state = discard_spell(self.state, spell_id, True)
        if new_state is self.state:
            return {"success": False, "error": f"Card not in hand: {spell_id}"}

        if new_state.pending_discard == 0:
            new_state = advance_turn(new_state)
        self.state = new_state
        return {"success": True, "action": "discard", "remaining": self.state.pending_discard}

    # -------------------------------------------------------------------------
    # AI actions
    # -------------------------------------------------------------------------

    def take_enemy_turn(self) -> Dict[str, Any]:
        if self.is_over:
            return {"success": False, "error": "Combat is over"}
        if self.awaiting_discard:
            return {"success": False, "error": "Waiting for player discard"}
        if self.state.is_player_turn:
            return {"success": False, "error": "Not the enemy's turn"}
        return self._take_ai_turn(False)

    def _take_ai_turn(self, is_player: bool) -> Dict[str, Any]:
        rng = self.ai_rng
        strategy = None
        spell = None

        if not should_use_mystic_punch(self.state, rng, is_player):
            memory = self.player_memory if is_player else self.memory
            decision = get_ai_spell_selection(self.state, rng, memory, is_player)
            if is_player:
                self.player_memory = decision.memory
            else:
                self.memory = decision.memory
            strategy = decision.strategy
            spell = decision.spell

        if spell is not None:
            self.state = execute_spell_cast(select_spell(self.state, spell, is_player), is_player)
            return {"success": True, "action": "cast", "spell": spell.id, "strategy": strategy}

        hand = self.state.wizard_for(is_player).hand
        discard = select_spell_to_discard(hand, self.state.difficulty, rng)
        tier = discard.tier if discard else 1
        self.state = execute_mystic_punch(select_spell(self.state, discard, is_player), tier, is_player)
        return {
            "success": True,
            "action": "mystic_punch",
            "tier": tier,
            "discarded": discard.id if discard else None,
            "strategy": strategy,
        }

    def step(self) -> Dict[str, Any]:
        """
        Resolve one action with AI on whichever side is due.

        During the discard gate the action is a single player discard.
        """
        if self.is_over:
            return {"success": False, "error": "Combat is over"}
        if self.awaiting_discard:
            card = select_spell_to_discard(self.state.player.hand, self.state.difficulty, self.ai_rng)
            return self.player_discard(card.id)
        return self._take_ai_turn(self.state.is_player_turn)

    def run_auto(self, max_turns: int = DEFAULT_MAX_TURNS) -> CombatResult:
        """Play both sides with AI until the duel ends or max_turns actions pass."""
        actions = 0
        while not self.is_over and actions < max_turns:
            self.step()
            actions += 1

        if not self.is_over:
            logger.warning(f"Duel still active after {max_turns} actions (turn {self.state.turn})")
        return self.get_result()

    def to_dict(self) -> Dict[str, Any]:
        data = self.state.to_dict()
        data["awaiting_discard"] = self.awaiting_discard
        return data
