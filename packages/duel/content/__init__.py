"""
Content module - spell and wizard data definitions.
"""

from .spells import (
    Spell, SpellEffect, SpellType, Element, EffectType, EffectTarget, CatalogError,
    ALL_SPELLS, STARTER_SPELL_IDS,
    get_spell, get_starting_spells, load_spells, resolve_spell_ids,
    spell_from_dict, spell_to_dict, effect_from_dict,
)
from .wizards import (
    Wizard, Deck, CombatStats, SAMPLE_OPPONENTS,
    create_wizard, wizard_from_dict, get_sample_opponent,
)

__all__ = [
    "Spell", "SpellEffect", "SpellType", "Element", "EffectType", "EffectTarget",
    "CatalogError", "ALL_SPELLS", "STARTER_SPELL_IDS",
    "get_spell", "get_starting_spells", "load_spells", "resolve_spell_ids",
    "spell_from_dict", "spell_to_dict", "effect_from_dict",
    "Wizard", "Deck", "CombatStats", "SAMPLE_OPPONENTS",
    "create_wizard", "wizard_from_dict", "get_sample_opponent",
]
