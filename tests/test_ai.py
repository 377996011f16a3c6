"""
AI tests: archetype detection, strategy factory, strategy priorities,
Mystic Punch and discard heuristics.
"""

import pytest

from packages.duel.ai import (
    AIMemory,
    AIStrategyFactory,
    AggressiveStrategy,
    AlchemistStrategy,
    BalancedStrategy,
    BattleMageStrategy,
    DefensiveStrategy,
    ElementalStrategy,
    IllusionistStrategy,
    NecromancerStrategy,
    STRATEGY_CLASSES,
    ARCHETYPES,
    TimeWeaverStrategy,
    classify_archetype,
    get_ai_spell_selection,
    get_strategy,
    select_spell_to_discard,
    should_use_mystic_punch,
)
from packages.duel.content.spells import Element, get_spell
from packages.duel.state.combat import ActiveEffect, ActiveEffectKind, Difficulty, Side
from packages.duel.state.rng import Random


class FixedRoll:
    """Stand-in RNG: every float roll is the same value, choice takes the first item."""

    def __init__(self, value=0.5):
        self.value = value

    def random_float(self):
        return self.value

    def choice(self, items):
        return items[0]


def effect(kind, source=Side.PLAYER, element=None):
    return ActiveEffect(
        name=kind.value, kind=kind, value=3, duration=3, remaining_duration=3,
        source=source, element=element,
    )


def pick(strategy, state, roll=0.5, memory=None, is_player=False):
    return strategy.select(state, FixedRoll(roll), memory, is_player=is_player).spell


def spell_id(spell):
    return spell.id if spell else None


# =============================================================================
# Archetypes and factory
# =============================================================================


class TestClassifyArchetype:

    @pytest.mark.parametrize("name, archetype", [
        ("Dark Acolyte", "necromancer"),
        ("NECROMANCER", "necromancer"),
        ("Chronos Adept", "timeWeaver"),
        ("Battle Mage Kael", "battleMage"),
        ("Sir Knight", "battleMage"),
        ("Mirage Illusionist", "illusionist"),
        ("Potion Alchemist", "alchemist"),
        ("Apprentice", None),
        ("Archmage", None),
    ])
    def test_names(self, name, archetype):
        assert classify_archetype(name) == archetype


class TestStrategyFactory:

    def test_archetype_wins(self):
        strategy = AIStrategyFactory.create_strategy(Difficulty.EASY, 1, "alchemist")
        assert isinstance(strategy, AlchemistStrategy)

    def test_easy_is_defensive(self):
        assert isinstance(AIStrategyFactory.create_strategy("easy", 10), DefensiveStrategy)

    @pytest.mark.parametrize("level, cls", [
        (9, ElementalStrategy),
        (8, ElementalStrategy),
        (5, AggressiveStrategy),
        (4, BalancedStrategy),
        (1, BalancedStrategy),
    ])
    def test_hard_by_level(self, level, cls):
        assert isinstance(AIStrategyFactory.create_strategy(Difficulty.HARD, level), cls)

    @pytest.mark.parametrize("level, roll, cls", [
        (1, 0.5, DefensiveStrategy),
        (1, 0.8, BalancedStrategy),
        (4, 0.3, DefensiveStrategy),
        (5, 0.7, BalancedStrategy),
        (5, 0.95, AggressiveStrategy),
        (7, 0.1, BalancedStrategy),
        (7, 0.6, AggressiveStrategy),
        (9, 0.9, ElementalStrategy),
    ])
    def test_normal_weighted(self, level, roll, cls):
        strategy = AIStrategyFactory.create_strategy(Difficulty.NORMAL, level, rng=FixedRoll(roll))
        assert isinstance(strategy, cls)

    def test_registry(self):
        assert set(ARCHETYPES) <= set(STRATEGY_CLASSES)
        assert get_strategy("timeWeaver").NAME == "Time Weaver"
        with pytest.raises(ValueError):
            get_strategy("berserker")


# =============================================================================
# General strategies
# =============================================================================


class TestCommonBehaviour:

    @pytest.mark.parametrize("strategy_id", sorted(STRATEGY_CLASSES))
    def test_nothing_affordable_means_punch(self, make_state, strategy_id):
        state = make_state(enemy_hand=["fireball", "inferno"], enemy_mana=5)
        decision = get_strategy(strategy_id).select(state, Random(3))
        assert decision.spell is None

    @pytest.mark.parametrize("strategy_id", sorted(STRATEGY_CLASSES))
    def test_only_affordable_hand_cards(self, make_state, strategy_id):
        state = make_state(enemy_hand=["gust", "inferno", "healing_light"], enemy_mana=10)
        for seed in range(10):
            spell = get_strategy(strategy_id).select(state, Random(seed)).spell
            assert spell is None or spell.id in ("gust", "healing_light")

    def test_plays_for_player_side(self, make_state):
        state = make_state(player_hand=["healing_light", "fireball"], player_health=20,
                           enemy_hand=["gust"])
        assert spell_id(pick(DefensiveStrategy(), state, is_player=True)) == "healing_light"


class TestDefensive:

    def test_critical_heals(self, make_state):
        state = make_state(enemy_hand=["fireball", "healing_light"], enemy_health=20)
        assert spell_id(pick(DefensiveStrategy(), state)) == "healing_light"

    def test_low_health_heal_or_buff(self, make_state):
        state = make_state(enemy_hand=["fireball", "stone_skin"], enemy_health=35)
        assert spell_id(pick(DefensiveStrategy(), state)) == "stone_skin"

    def test_debuffs_buffed_opponent(self, make_state):
        state = make_state(enemy_hand=["fireball", "weaken"])
        state.player.active_effects = [effect(ActiveEffectKind.BUFF)]
        assert spell_id(pick(DefensiveStrategy(), state, roll=0.8)) == "weaken"

    def test_low_roll_falls_through_to_any(self, make_state):
        state = make_state(enemy_hand=["stone_skin", "fireball"])
        assert spell_id(pick(DefensiveStrategy(), state, roll=0.1)) == "stone_skin"


class TestAggressive:

    def test_top_damage(self, make_state):
        state = make_state(enemy_hand=["gust", "fireball", "inferno"])
        assert spell_id(pick(AggressiveStrategy(), state, roll=0.5)) == "inferno"

    def test_debuffs_healthy_opponent(self, make_state):
        state = make_state(enemy_hand=["gust", "weaken"])
        assert spell_id(pick(AggressiveStrategy(), state, roll=0.9)) == "weaken"


class TestBalanced:

    def test_finishes_low_opponent(self, make_state):
        state = make_state(enemy_hand=["gust", "fireball", "healing_light"], player_health=30)
        assert spell_id(pick(BalancedStrategy(), state)) == "fireball"

    def test_critical_heals_first(self, make_state):
        state = make_state(enemy_hand=["fireball", "healing_light"], player_health=30, enemy_health=10)
        assert spell_id(pick(BalancedStrategy(), state)) == "healing_light"

    @pytest.mark.parametrize("roll, expected", [
        (0.2, "gust"),
        (0.5, "stone_skin"),
        (0.9, "healing_light"),
    ])
    def test_weighted_pool(self, make_state, roll, expected):
        state = make_state(enemy_hand=["gust", "stone_skin", "healing_light"])
        assert spell_id(pick(BalancedStrategy(), state, roll=roll)) == expected


class TestElemental:

    def test_chains_last_element(self, make_state):
        state = make_state(enemy_hand=["frost_bolt", "fireball"])
        decision = ElementalStrategy().select(state, FixedRoll(0.9), AIMemory(Element.FIRE))
        assert decision.spell.id == "fireball"
        assert decision.memory.last_element == Element.FIRE

    def test_remembers_pick(self, make_state):
        state = make_state(enemy_hand=["frost_bolt", "fireball"])
        decision = ElementalStrategy().select(state, FixedRoll(0.9))
        assert decision.spell.id == "frost_bolt"
        assert decision.memory.last_element == Element.WATER

    def test_avoids_opponent_elements(self, make_state):
        state = make_state(enemy_hand=["curse_of_decay", "fireball"])
        state.player.active_effects = [effect(ActiveEffectKind.DAMAGE_OVER_TIME, Side.ENEMY, Element.SHADOW)]
        assert spell_id(pick(ElementalStrategy(), state, roll=0.6)) == "fireball"

    def test_memory_not_mutated(self, make_state):
        memory = AIMemory()
        ElementalStrategy().select(make_state(enemy_hand=["gust"]), FixedRoll(), memory)
        assert memory.last_element is None


# =============================================================================
# Archetypes
# =============================================================================


class TestNecromancer:

    def test_raises_minion(self, make_state):
        state = make_state(enemy_hand=["shadow_bolt", "raise_skeleton"])
        assert spell_id(pick(NecromancerStrategy(), state)) == "raise_skeleton"

    def test_attacks_with_minion_up(self, make_state):
        state = make_state(enemy_hand=["gust", "raise_skeleton", "shadow_bolt"])
        state.enemy.active_effects = [effect(ActiveEffectKind.SUMMON, Side.ENEMY)]
        assert spell_id(pick(NecromancerStrategy(), state)) == "shadow_bolt"

    def test_heals_when_low(self, make_state):
        state = make_state(enemy_hand=["raise_skeleton", "healing_light"], enemy_health=30)
        assert spell_id(pick(NecromancerStrategy(), state)) == "healing_light"


class TestTimeWeaver:

    def test_time_warp_first(self, make_state):
        state = make_state(enemy_hand=["gust", "time_warp"])
        assert spell_id(pick(TimeWeaverStrategy(), state)) == "time_warp"

    def test_recovers_mana(self, make_state):
        state = make_state(enemy_hand=["gust", "mana_surge", "time_warp"], enemy_mana=20)
        assert spell_id(pick(TimeWeaverStrategy(), state)) == "mana_surge"

    def test_attacks_otherwise(self, make_state):
        state = make_state(enemy_hand=["stone_skin", "frost_bolt"])
        assert spell_id(pick(TimeWeaverStrategy(), state)) == "frost_bolt"


class TestBattleMage:

    def test_buffs_when_unbuffed(self, make_state):
        state = make_state(enemy_hand=["fireball", "arcane_empower"])
        assert spell_id(pick(BattleMageStrategy(), state)) == "arcane_empower"

    def test_hardest_hitter_when_buffed(self, make_state):
        state = make_state(enemy_hand=["gust", "arcane_empower", "inferno"])
        state.enemy.active_effects = [effect(ActiveEffectKind.BUFF, Side.ENEMY)]
        assert spell_id(pick(BattleMageStrategy(), state)) == "inferno"

    def test_punches_instead_of_utility(self, make_state):
        state = make_state(enemy_hand=["healing_light", "weaken"])
        state.enemy.active_effects = [effect(ActiveEffectKind.BUFF, Side.ENEMY)]
        assert pick(BattleMageStrategy(), state) is None


class TestIllusionist:

    def test_debuffs_first(self, make_state):
        state = make_state(enemy_hand=["gust", "mirror_image", "weaken"])
        assert spell_id(pick(IllusionistStrategy(), state)) == "weaken"

    def test_shields_when_opponent_debuffed(self, make_state):
        state = make_state(enemy_hand=["gust", "mirror_image", "weaken"])
        state.player.active_effects = [effect(ActiveEffectKind.DAMAGE_REDUCTION, Side.ENEMY)]
        assert spell_id(pick(IllusionistStrategy(), state)) == "mirror_image"

    def test_attacks_when_set_up(self, make_state):
        state = make_state(enemy_hand=["mirror_image", "weaken", "gust"])
        state.player.active_effects = [effect(ActiveEffectKind.DAMAGE_OVER_TIME, Side.ENEMY)]
        state.enemy.active_effects = [effect(ActiveEffectKind.DAMAGE_REDUCTION, Side.ENEMY)]
        assert spell_id(pick(IllusionistStrategy(), state)) == "gust"


class TestAlchemist:

    def test_poisons_first(self, make_state):
        state = make_state(enemy_hand=["fireball", "acid_flask"])
        assert spell_id(pick(AlchemistStrategy(), state)) == "acid_flask"

    def test_curse_counts_as_poison(self, make_state):
        state = make_state(enemy_hand=["fireball", "curse_of_decay"])
        assert spell_id(pick(AlchemistStrategy(), state)) == "curse_of_decay"

    def test_attacks_once_poisoned(self, make_state):
        state = make_state(enemy_hand=["fireball", "acid_flask"])
        state.player.active_effects = [effect(ActiveEffectKind.DAMAGE_OVER_TIME, Side.ENEMY)]
        assert spell_id(pick(AlchemistStrategy(), state)) == "fireball"

    def test_remedy_when_low(self, make_state):
        state = make_state(enemy_hand=["acid_flask", "rejuvenation"], enemy_health=30)
        assert spell_id(pick(AlchemistStrategy(), state)) == "rejuvenation"


# =============================================================================
# Turn-level decisions
# =============================================================================


class TestSpellSelection:

    def test_archetype_from_name(self, make_state):
        state = make_state(enemy_hand=["shadow_bolt", "raise_skeleton"], enemy_name="Dark Acolyte")
        decision = get_ai_spell_selection(state, Random(5))
        assert decision.strategy == "Necromancer"
        assert decision.spell.id == "raise_skeleton"

    def test_same_rng_sequence(self, combat_state):
        rng_a, rng_b = Random(7), Random(7)
        picks_a = [get_ai_spell_selection(combat_state, rng_a).spell for _ in range(5)]
        picks_b = [get_ai_spell_selection(combat_state, rng_b).spell for _ in range(5)]
        assert picks_a == picks_b


class TestMysticPunchChoice:

    def test_forced_when_broke(self, make_state):
        state = make_state(enemy_hand=["fireball"], enemy_mana=0)
        assert should_use_mystic_punch(state, FixedRoll(0.99))

    @pytest.mark.parametrize("roll, expected", [(0.2, True), (0.3, False)])
    def test_normal_chance(self, make_state, roll, expected):
        state = make_state(enemy_hand=["gust"])
        assert should_use_mystic_punch(state, FixedRoll(roll)) is expected

    def test_hard_scales_with_opponent_health(self, make_state):
        healthy = make_state(enemy_hand=["gust"], difficulty=Difficulty.HARD)
        hurt = make_state(enemy_hand=["gust"], difficulty=Difficulty.HARD, player_health=50)
        assert not should_use_mystic_punch(healthy, FixedRoll(0.35))
        assert should_use_mystic_punch(hurt, FixedRoll(0.35))

    def test_player_side(self, make_state):
        state = make_state(player_hand=["fireball"], player_mana=0, enemy_hand=["gust"])
        assert should_use_mystic_punch(state, FixedRoll(0.99), is_player=True)
        assert not should_use_mystic_punch(state, FixedRoll(0.99))


class TestDiscardChoice:

    HAND = [get_spell("fireball"), get_spell("time_warp"), get_spell("tidal_wave")]

    @pytest.mark.parametrize("difficulty, expected", [
        (Difficulty.EASY, "time_warp"),
        (Difficulty.HARD, "fireball"),
        (Difficulty.NORMAL, "fireball"),
    ])
    def test_by_difficulty(self, difficulty, expected):
        assert select_spell_to_discard(self.HAND, difficulty, FixedRoll()).id == expected

    def test_empty_hand(self):
        assert select_spell_to_discard([], "normal", FixedRoll()) is None
