"""
Shared pytest fixtures for the wizard duel test suite.

This module provides reusable fixtures for:
- RNG with known seeds
- Sample wizards
- Combat state creation (fresh duels and hand-built positions)
"""

import pytest
import sys

# Ensure project root is in path
import os
_project_root = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
sys.path.insert(0, _project_root)

from packages.duel.content.spells import get_spell
from packages.duel.content.wizards import CombatStats, create_wizard
from packages.duel.deck import initialize_combat
from packages.duel.state.combat import CombatState, Difficulty, create_combat_wizard
from packages.duel.state.rng import Random, seed_to_long


# =============================================================================
# RNG Fixtures
# =============================================================================


@pytest.fixture
def rng_seed_42():
    """RNG initialized with seed 42 for deterministic tests."""
    return Random(42)


@pytest.fixture
def known_seeds():
    """Collection of seed strings used across tests."""
    return {
        "ABC": seed_to_long("ABC"),
        "DUEL42": seed_to_long("DUEL42"),
        "ZZZZZ": seed_to_long("ZZZZZ"),
    }


# =============================================================================
# Wizard Fixtures
# =============================================================================


@pytest.fixture
def player_wizard():
    """Level 1 wizard with the five starter spells."""
    return create_wizard("Player")


@pytest.fixture
def enemy_wizard():
    """Level 1 opponent whose name maps to no archetype."""
    return create_wizard("Opponent")


@pytest.fixture
def combat_state(player_wizard, enemy_wizard):
    """Freshly initialized duel, seed 42."""
    return initialize_combat(player_wizard, enemy_wizard, seed=42)


# =============================================================================
# Hand-built positions
# =============================================================================


def _spells(ids):
    return [get_spell(s) for s in ids]


def build_state(
    player_hand=(),
    enemy_hand=(),
    player_draw=(),
    enemy_draw=(),
    player_discard=(),
    enemy_discard=(),
    player_health=100,
    enemy_health=100,
    player_mana=100,
    enemy_mana=100,
    difficulty=Difficulty.NORMAL,
    is_player_turn=True,
    player_stats=None,
    enemy_stats=None,
    enemy_name="Opponent",
    enemy_level=1,
):
    """
    CombatState with exact piles and resources.

    Piles are given as spell ids; the END of a draw list is the top card.
    """
    player = create_combat_wizard(create_wizard("Player", combat_stats=player_stats or CombatStats()))
    enemy = create_combat_wizard(create_wizard(
        enemy_name, level=enemy_level, combat_stats=enemy_stats or CombatStats()
    ))

    player.hand, player.draw_pile, player.discard_pile = (
        _spells(player_hand), _spells(player_draw), _spells(player_discard)
    )
    enemy.hand, enemy.draw_pile, enemy.discard_pile = (
        _spells(enemy_hand), _spells(enemy_draw), _spells(enemy_discard)
    )
    player.current_health, player.current_mana = player_health, player_mana
    enemy.current_health, enemy.current_mana = enemy_health, enemy_mana

    return CombatState(
        player=player,
        enemy=enemy,
        difficulty=difficulty,
        is_player_turn=is_player_turn,
        shuffle_rng_state=Random(1).get_state(),
    )


@pytest.fixture
def make_state():
    """Factory for hand-built combat positions (see build_state)."""
    return build_state
