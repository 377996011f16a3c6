"""
Spell and wizard catalog tests.

Covers the starter catalog, JSON loading, and CatalogError on bad data.
"""

import json

import pytest

from packages.duel.content.spells import (
    ALL_SPELLS,
    STARTER_SPELL_IDS,
    CatalogError,
    EffectTarget,
    EffectType,
    Element,
    SpellType,
    get_spell,
    get_starting_spells,
    load_spells,
    resolve_spell_ids,
    spell_from_dict,
    spell_to_dict,
)
from packages.duel.content.wizards import (
    SAMPLE_OPPONENTS,
    get_sample_opponent,
    wizard_from_dict,
)


RAW_SPELL = {
    "id": "spark",
    "name": "Spark",
    "type": "attack",
    "element": "air",
    "tier": 2,
    "manaCost": 7,
    "effects": [
        {"type": "damage", "value": 9, "target": "enemy", "element": "air"},
        {"type": "damageOverTime", "value": 2, "duration": 2},
    ],
}


class TestStarterCatalog:

    def test_ids_match_keys(self):
        for spell_id, spell in ALL_SPELLS.items():
            assert spell.id == spell_id

    def test_starter_spells(self):
        spells = get_starting_spells()
        assert [s.id for s in spells] == STARTER_SPELL_IDS
        assert len(spells) == 5

    def test_fireball(self):
        fireball = get_spell("fireball")
        assert fireball.type == SpellType.ATTACK
        assert fireball.element == Element.FIRE
        assert fireball.mana_cost == 10
        assert fireball.total_damage == 15
        assert fireball.total_healing == 0

    def test_time_warp_shape(self):
        effect = get_spell("time_warp").effects[0]
        assert effect.type == EffectType.STATUS_EFFECT
        assert effect.value == 1
        assert effect.duration == 1
        assert effect.target == EffectTarget.SELF

    def test_summon_spell(self):
        effect = get_spell("raise_skeleton").effects[0]
        assert effect.type == EffectType.SUMMON
        assert effect.minion_name == "Skeleton"

    def test_every_effect_type_used(self):
        used = {e.type for s in ALL_SPELLS.values() for e in s.effects}
        assert used == set(EffectType) - {EffectType.HEALING_OVER_TIME}

    def test_unknown_spell(self):
        with pytest.raises(CatalogError):
            get_spell("nope")

    def test_catalog_error_is_value_error(self):
        assert issubclass(CatalogError, ValueError)


class TestSpellParsing:

    def test_spell_from_dict(self):
        spell = spell_from_dict(RAW_SPELL)
        assert spell.id == "spark"
        assert spell.type == SpellType.ATTACK
        assert spell.mana_cost == 7
        assert spell.tier == 2
        assert len(spell.effects) == 2
        assert spell.effects[1].type == EffectType.DAMAGE_OVER_TIME
        assert spell.effects[1].target == EffectTarget.ENEMY
        assert spell.effects[1].element is None

    def test_to_dict_uses_camel_case(self):
        data = spell_to_dict(get_spell("fireball"))
        assert data["manaCost"] == 10
        assert data["effects"][0]["type"] == "damage"
        assert spell_from_dict(data) == get_spell("fireball")

    def test_unknown_effect_type(self):
        bad = dict(RAW_SPELL, effects=[{"type": "teleport", "value": 1}])
        with pytest.raises(CatalogError, match="effect type"):
            spell_from_dict(bad)

    def test_missing_field(self):
        bad = {k: v for k, v in RAW_SPELL.items() if k != "element"}
        with pytest.raises(CatalogError):
            spell_from_dict(bad)

    def test_effect_missing_value(self):
        bad = dict(RAW_SPELL, effects=[{"type": "damage"}])
        with pytest.raises(CatalogError):
            spell_from_dict(bad)

    @pytest.mark.parametrize("effect_type", ["damage", "healing", "manaRestore", "damageOverTime"])
    def test_negative_amount(self, effect_type):
        bad = dict(RAW_SPELL, effects=[{"type": effect_type, "value": -5}])
        with pytest.raises(CatalogError, match="Negative"):
            spell_from_dict(bad)

    def test_negative_stat_modifier_allowed(self):
        data = dict(RAW_SPELL, effects=[{"type": "statModifier", "value": -3, "duration": 2}])
        assert spell_from_dict(data).effects[0].value == -3

    def test_numeric_strings_coerced(self):
        data = dict(RAW_SPELL, tier="3", effects=[{"type": "damage", "value": "4", "duration": "2"}])
        spell = spell_from_dict(data)
        assert spell.tier == 3
        assert spell.effects[0].value == 4
        assert spell.effects[0].duration == 2

    def test_missing_duration_stays_none(self):
        assert spell_from_dict(RAW_SPELL).effects[0].duration is None

    @pytest.mark.parametrize("field, effect", [
        ("duration", {"type": "damage", "value": 4, "duration": "soon"}),
        ("value", {"type": "damage", "value": [4]}),
        ("value", {"type": "damage", "value": None}),
    ])
    def test_non_integer_effect_field(self, field, effect):
        with pytest.raises(CatalogError, match=field):
            spell_from_dict(dict(RAW_SPELL, effects=[effect]))

    def test_non_integer_mana_cost(self):
        with pytest.raises(CatalogError, match="manaCost"):
            spell_from_dict(dict(RAW_SPELL, manaCost="lots"))


class TestLoadSpells:

    def test_list_form(self, tmp_path):
        path = tmp_path / "spells.json"
        path.write_text(json.dumps([RAW_SPELL]))
        catalog = load_spells(path)
        assert list(catalog) == ["spark"]

    def test_object_form(self, tmp_path):
        path = tmp_path / "spells.json"
        path.write_text(json.dumps({"spells": [RAW_SPELL]}))
        assert "spark" in load_spells(str(path))

    def test_duplicate_ids(self, tmp_path):
        path = tmp_path / "spells.json"
        path.write_text(json.dumps([RAW_SPELL, RAW_SPELL]))
        with pytest.raises(CatalogError, match="duplicate"):
            load_spells(path)

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "spells.json"
        path.write_text("{not json")
        with pytest.raises(CatalogError):
            load_spells(path)

    def test_resolve_against_custom_catalog(self, tmp_path):
        path = tmp_path / "spells.json"
        path.write_text(json.dumps([RAW_SPELL]))
        catalog = load_spells(path)
        assert resolve_spell_ids(["spark", "spark"], catalog)[1].id == "spark"
        with pytest.raises(CatalogError):
            resolve_spell_ids(["fireball"], catalog)


class TestWizards:

    def test_wizard_from_dict(self):
        wizard = wizard_from_dict({
            "id": "w1",
            "name": "Morgana",
            "level": 3,
            "maxHealth": 120,
            "spells": ["fireball", "gust"],
            "equippedSpells": ["gust"],
            "decks": [{"id": "d1", "name": "Main", "spells": ["fireball", "fireball"]}],
            "activeDeckId": "d1",
            "combatStats": {"mysticPunchPower": 4, "bleedEffect": 3},
        })
        assert wizard.max_health == 120
        assert wizard.max_mana == 100
        assert wizard.combat_stats.mystic_punch_power == 4
        assert wizard.combat_stats.bleed_effect == 3
        assert wizard.combat_stats.extra_card_draw == 0
        assert [s.id for s in wizard.get_active_deck().spells] == ["fireball", "fireball"]

    def test_wizard_unknown_spell(self):
        with pytest.raises(CatalogError):
            wizard_from_dict({"id": "w1", "name": "X", "spells": ["nope"]})

    def test_wizard_missing_name(self):
        with pytest.raises(CatalogError):
            wizard_from_dict({"id": "w1"})

    def test_missing_active_deck(self):
        wizard = wizard_from_dict({"id": "w1", "name": "X", "activeDeckId": "gone"})
        assert wizard.get_active_deck() is None

    @pytest.mark.parametrize("key", sorted(SAMPLE_OPPONENTS))
    def test_sample_opponents_build(self, key):
        wizard = get_sample_opponent(key)
        assert len(wizard.equipped_spells) == 5
        assert wizard.level == SAMPLE_OPPONENTS[key]["level"]

    def test_sample_opponent_name(self):
        assert get_sample_opponent("dark_acolyte").name == "Dark Acolyte"

    def test_unknown_opponent(self):
        with pytest.raises(CatalogError):
            get_sample_opponent("dragon")
