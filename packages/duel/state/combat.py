"""
Combat State for wizard duels.

One CombatState value is the authoritative snapshot of a duel. Transition
functions never mutate their input: they call copy() and mutate the copy.

Optimized for:
1. Cheap copying (spells are immutable and shared between copies)
2. Easy serialization (to_dict)
"""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

from ..content.spells import Element, Spell, SpellEffect, spell_to_dict
from ..content.wizards import Wizard


# =============================================================================
# Enums
# =============================================================================


class Side(Enum):
    """The two combatants."""
    PLAYER = "player"
    ENEMY = "enemy"

    @classmethod
    def of(cls, is_player: bool) -> Side:
        return cls.PLAYER if is_player else cls.ENEMY

    @property
    def opponent(self) -> Side:
        return Side.ENEMY if self is Side.PLAYER else Side.PLAYER


class CombatStatus(Enum):
    ACTIVE = "active"
    PLAYER_WON = "playerWon"
    ENEMY_WON = "enemyWon"


class Difficulty(Enum):
    EASY = "easy"
    NORMAL = "normal"
    HARD = "hard"


class ActiveEffectKind(Enum):
    """What an active effect does when it ticks."""
    DAMAGE_OVER_TIME = "damage_over_time"
    HEALING_OVER_TIME = "healing_over_time"
    MANA_REGEN = "mana_regen"
    BUFF = "buff"
    DAMAGE_REDUCTION = "damageReduction"
    SUMMON = "summon"
    STATUS = "status"


# =============================================================================
# Records
# =============================================================================


@dataclass
class ActiveEffect:
    """A duration-bearing effect attached to one combatant."""

    name: str
    kind: ActiveEffectKind
    value: int
    duration: int
    remaining_duration: int
    source: Side
    element: Optional[Element] = None
    effect: Optional[SpellEffect] = None  # Originating spell effect

    def copy(self) -> ActiveEffect:
        return ActiveEffect(
            name=self.name,
            kind=self.kind,
            value=self.value,
            duration=self.duration,
            remaining_duration=self.remaining_duration,
            source=self.source,
            element=self.element,
            effect=self.effect,
        )


@dataclass(frozen=True)
class CombatLogEntry:
    """A single combat log entry."""
    turn: int
    round: int
    actor: str
    action: str
    details: str = ""
    damage: Optional[int] = None
    healing: Optional[int] = None
    mana: Optional[int] = None
    spell_name: Optional[str] = None
    target: Optional[str] = None
    timestamp: float = field(default_factory=time.time)

    def to_dict(self) -> Dict[str, Any]:
        data = {
            "turn": self.turn,
            "round": self.round,
            "actor": self.actor,
            "action": self.action,
            "details": self.details,
            "timestamp": self.timestamp,
        }
        for key in ("damage", "healing", "mana", "spell_name", "target"):
            value = getattr(self, key)
            if value is not None:
                data[key] = value
        return data


@dataclass(frozen=True)
class ExtraTurn:
    """Pending override of turn alternation, consumed by the next advance_turn."""
    side: Side


# =============================================================================
# Combatant
# =============================================================================


@dataclass
class CombatWizard:
    """One combatant: wizard stats plus everything that changes during combat."""

    wizard: Wizard
    current_health: int
    current_mana: int
    active_effects: List[ActiveEffect] = field(default_factory=list)
    selected_spell: Optional[Spell] = None

    # Card piles; the end of draw_pile is the top
    hand: List[Spell] = field(default_factory=list)
    draw_pile: List[Spell] = field(default_factory=list)
    discard_pile: List[Spell] = field(default_factory=list)

    @property
    def max_health(self) -> int:
        return self.wizard.max_health

    @property
    def max_mana(self) -> int:
        return self.wizard.max_mana

    @property
    def is_dead(self) -> bool:
        return self.current_health <= 0

    @property
    def health_ratio(self) -> float:
        return self.current_health / self.max_health if self.max_health else 0.0

    @property
    def mana_ratio(self) -> float:
        return self.current_mana / self.max_mana if self.max_mana else 0.0

    def cards_in_deck(self) -> int:
        """Total cards across all piles."""
        return len(self.hand) + len(self.draw_pile) + len(self.discard_pile)

    def damage(self, amount: int) -> None:
        self.current_health = max(0, min(self.max_health, self.current_health - amount))

    def heal(self, amount: int) -> None:
        self.current_health = max(0, min(self.max_health, self.current_health + amount))

    def restore_mana(self, amount: int) -> None:
        self.current_mana = max(0, min(self.max_mana, self.current_mana + amount))

    def copy(self) -> CombatWizard:
        """Copy piles and effects; spells and the wizard record are shared."""
        return CombatWizard(
            wizard=self.wizard,
            current_health=self.current_health,
            current_mana=self.current_mana,
            active_effects=[e.copy() for e in self.active_effects],
            selected_spell=self.selected_spell,
            hand=self.hand.copy(),
            draw_pile=self.draw_pile.copy(),
            discard_pile=self.discard_pile.copy(),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.wizard.name,
            "level": self.wizard.level,
            "current_health": self.current_health,
            "max_health": self.max_health,
            "current_mana": self.current_mana,
            "max_mana": self.max_mana,
            "selected_spell": self.selected_spell.id if self.selected_spell else None,
            "hand": [spell_to_dict(s) for s in self.hand],
            "draw_pile_size": len(self.draw_pile),
            "discard_pile_size": len(self.discard_pile),
            "active_effects": [
                {
                    "name": e.name,
                    "kind": e.kind.value,
                    "value": e.value,
                    "remaining_duration": e.remaining_duration,
                    "source": e.source.value,
                }
                for e in self.active_effects
            ],
        }


def create_combat_wizard(wizard: Wizard) -> CombatWizard:
    """Fresh combatant at full health and mana with empty piles."""
    return CombatWizard(
        wizard=wizard,
        current_health=wizard.max_health,
        current_mana=wizard.max_mana,
    )


# =============================================================================
# Combat State
# =============================================================================


@dataclass
class CombatState:
    """
    Complete combat state - everything needed to continue the duel.

    Card piles hold Spell objects; a spell may appear more than once in a
    deck, so piles are multisets and cards are matched by id.
    """

    player: CombatWizard
    enemy: CombatWizard
    difficulty: Difficulty = Difficulty.NORMAL
    turn: int = 1
    round: int = 1
    is_player_turn: bool = True
    log: List[CombatLogEntry] = field(default_factory=list)
    status: CombatStatus = CombatStatus.ACTIVE
    extra_turn: Optional[ExtraTurn] = None

    # Discard gate: cards the player must still discard before the round advances
    pending_discard: int = 0

    # RNG state for deterministic shuffles (seed0, seed1)
    shuffle_rng_state: Tuple[int, int] = (0, 0)

    # -------------------------------------------------------------------------
    # Core Methods
    # -------------------------------------------------------------------------

    def copy(self) -> CombatState:
        """Copy for a transition. Log entries are immutable and shared."""
        return CombatState(
            player=self.player.copy(),
            enemy=self.enemy.copy(),
            difficulty=self.difficulty,
            turn=self.turn,
            round=self.round,
            is_player_turn=self.is_player_turn,
            log=self.log.copy(),
            status=self.status,
            extra_turn=self.extra_turn,
            pending_discard=self.pending_discard,
            shuffle_rng_state=self.shuffle_rng_state,
        )

    @property
    def is_terminal(self) -> bool:
        return self.status != CombatStatus.ACTIVE

    def wizard_for(self, is_player: bool) -> CombatWizard:
        return self.player if is_player else self.enemy

    def opponent_of(self, is_player: bool) -> CombatWizard:
        return self.enemy if is_player else self.player

    def add_log(self, actor: str, action: str, details: str = "", **data) -> CombatLogEntry:
        """Append a log entry stamped with the current turn and round."""
        entry = CombatLogEntry(
            turn=self.turn,
            round=self.round,
            actor=actor,
            action=action,
            details=details,
            **data,
        )
        self.log.append(entry)
        return entry

    def update_status(self) -> bool:
        """
        Move to a terminal status if either side is at 0 health.

        Appends combat_end exactly once. Returns True if combat is over.
        """
        if self.status != CombatStatus.ACTIVE:
            return True

        if self.player.is_dead:
            self.status = CombatStatus.ENEMY_WON
            self.add_log("system", "combat_end", "Enemy won the duel!")
        elif self.enemy.is_dead:
            self.status = CombatStatus.PLAYER_WON
            self.add_log("system", "combat_end", "You won the duel!")
        else:
            return False

        self.extra_turn = None
        self.pending_discard = 0
        return True

    def get_events(self, action: str) -> List[CombatLogEntry]:
        """Get all log entries of one action type."""
        return [e for e in self.log if e.action == action]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "turn": self.turn,
            "round": self.round,
            "is_player_turn": self.is_player_turn,
            "status": self.status.value,
            "difficulty": self.difficulty.value,
            "extra_turn": self.extra_turn.side.value if self.extra_turn else None,
            "pending_discard": self.pending_discard,
            "player": self.player.to_dict(),
            "enemy": self.enemy.to_dict(),
            "log": [e.to_dict() for e in self.log],
        }
