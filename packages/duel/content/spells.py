"""
Spell Definitions - immutable spell and effect descriptors.

Spell structure:
- id, name, type (attack, healing, buff, debuff, reaction, summon)
- element (fire, water, earth, air, arcane, nature, shadow, light)
- tier (1-10), mana_cost
- effects: ordered tuple of SpellEffect

Effect structure:
- type: what the effect does (damage, healing, statModifier, ...)
- value: magnitude (sign matters for stat modifiers)
- target: "self" (caster) or "enemy" (opponent)
- duration: rounds the effect persists (None / 0 = instant)

The combat engine only reads these. Catalog loading lives here too so that
malformed data fails loudly before it reaches combat.
"""

import json
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Tuple, Union


class CatalogError(ValueError):
    """Malformed catalog data or an unresolvable spell reference."""


class SpellType(Enum):
    """Spell categories. ATTACK spells are the AI's damage pool."""
    ATTACK = "attack"
    HEALING = "healing"
    BUFF = "buff"
    DEBUFF = "debuff"
    REACTION = "reaction"
    SUMMON = "summon"


class Element(Enum):
    """Elemental affinities."""
    FIRE = "fire"
    WATER = "water"
    EARTH = "earth"
    AIR = "air"
    ARCANE = "arcane"
    NATURE = "nature"
    SHADOW = "shadow"
    LIGHT = "light"


class EffectType(Enum):
    """Effect kinds. Every member must have a handler in effects.registry."""
    DAMAGE = "damage"
    HEALING = "healing"
    MANA_RESTORE = "manaRestore"
    STAT_MODIFIER = "statModifier"
    STATUS_EFFECT = "statusEffect"
    SUMMON = "summon"
    DAMAGE_OVER_TIME = "damageOverTime"
    HEALING_OVER_TIME = "healingOverTime"
    MANA_RESTORE_OVER_TIME = "manaRestoreOverTime"


class EffectTarget(Enum):
    """Who an effect lands on, relative to the caster."""
    SELF = "self"
    ENEMY = "enemy"


@dataclass(frozen=True)
class SpellEffect:
    """One effect of a spell."""
    type: EffectType
    value: int
    target: EffectTarget = EffectTarget.ENEMY
    element: Optional[Element] = None
    duration: Optional[int] = None
    minion_name: Optional[str] = None

    @property
    def has_duration(self) -> bool:
        return bool(self.duration) and self.duration > 0


@dataclass(frozen=True)
class Spell:
    """A spell definition (a card in a wizard's deck)."""
    id: str
    name: str
    type: SpellType
    element: Element
    tier: int = 1
    mana_cost: int = 0
    effects: Tuple[SpellEffect, ...] = ()
    description: str = ""
    rarity: str = "common"

    @property
    def total_damage(self) -> int:
        """Sum of immediate damage effects."""
        return sum(e.value for e in self.effects if e.type == EffectType.DAMAGE)

    @property
    def total_healing(self) -> int:
        """Sum of immediate healing effects."""
        return sum(e.value for e in self.effects if e.type == EffectType.HEALING)


# =============================================================================
# Parsing
# =============================================================================


def _enum_value(enum_cls, raw: Any, what: str):
    try:
        return enum_cls(raw)
    except ValueError:
        raise CatalogError(f"Unknown {what}: {raw!r}") from None


def _int_field(data: Dict[str, Any], key: str, default: Any = None) -> Any:
    raw = data.get(key, default)
    if raw is None and default is None:
        return None
    try:
        return int(raw)
    except (TypeError, ValueError):
        raise CatalogError(f"{key!r} must be an integer: {raw!r}") from None


# Effects whose value is an amount; a negative amount would invert them
NON_NEGATIVE_EFFECTS = frozenset({
    EffectType.DAMAGE,
    EffectType.HEALING,
    EffectType.MANA_RESTORE,
    EffectType.SUMMON,
    EffectType.DAMAGE_OVER_TIME,
    EffectType.HEALING_OVER_TIME,
    EffectType.MANA_RESTORE_OVER_TIME,
})


def effect_from_dict(data: Dict[str, Any]) -> SpellEffect:
    """Build a SpellEffect from its JSON form."""
    if "type" not in data or "value" not in data:
        raise CatalogError(f"Effect is missing 'type' or 'value': {data!r}")
    effect_type = _enum_value(EffectType, data["type"], "effect type")
    value = _int_field(data, "value")
    if value is None:
        raise CatalogError(f"Effect value is null: {data!r}")
    if value < 0 and effect_type in NON_NEGATIVE_EFFECTS:
        raise CatalogError(f"Negative {effect_type.value} value: {value}")
    element = data.get("element")
    return SpellEffect(
        type=effect_type,
        value=value,
        target=_enum_value(EffectTarget, data.get("target", "enemy"), "effect target"),
        element=_enum_value(Element, element, "element") if element else None,
        duration=_int_field(data, "duration"),
        minion_name=data.get("minionName"),
    )


def spell_from_dict(data: Dict[str, Any]) -> Spell:
    """Build a Spell from its JSON form (camelCase keys, as exported by the game)."""
    for key in ("id", "name", "type", "element"):
        if key not in data:
            raise CatalogError(f"Spell is missing {key!r}: {data!r}")
    return Spell(
        id=data["id"],
        name=data["name"],
        type=_enum_value(SpellType, data["type"], "spell type"),
        element=_enum_value(Element, data["element"], "element"),
        tier=_int_field(data, "tier", 1),
        mana_cost=_int_field(data, "manaCost", 0),
        effects=tuple(effect_from_dict(e) for e in data.get("effects", [])),
        description=data.get("description", ""),
        rarity=data.get("rarity", "common"),
    )


def spell_to_dict(spell: Spell) -> Dict[str, Any]:
    """Inverse of spell_from_dict (used by the HTTP layer)."""
    return {
        "id": spell.id,
        "name": spell.name,
        "type": spell.type.value,
        "element": spell.element.value,
        "tier": spell.tier,
        "manaCost": spell.mana_cost,
        "description": spell.description,
        "rarity": spell.rarity,
        "effects": [
            {
                "type": e.type.value,
                "value": e.value,
                "target": e.target.value,
                "element": e.element.value if e.element else None,
                "duration": e.duration,
                "minionName": e.minion_name,
            }
            for e in spell.effects
        ],
    }


def load_spells(path: Union[str, Path]) -> Dict[str, Spell]:
    """
    Load a JSON spell catalog.

    Accepts either a list of spells or {"spells": [...]}. Duplicate ids are
    rejected.
    """
    with open(path, "r", encoding="utf-8") as f:
        try:
            raw = json.load(f)
        except json.JSONDecodeError as e:
            raise CatalogError(f"{path}: invalid JSON ({e})") from e

    if isinstance(raw, dict):
        raw = raw.get("spells", [])
    if not isinstance(raw, list):
        raise CatalogError(f"{path}: expected a list of spells")

    catalog: Dict[str, Spell] = {}
    for entry in raw:
        spell = spell_from_dict(entry)
        if spell.id in catalog:
            raise CatalogError(f"{path}: duplicate spell id {spell.id!r}")
        catalog[spell.id] = spell
    return catalog


def resolve_spell_ids(
    spell_ids: Iterable[str], catalog: Optional[Dict[str, Spell]] = None
) -> List[Spell]:
    """Turn card references into Spells; unknown ids are a data error."""
    catalog = ALL_SPELLS if catalog is None else catalog
    spells = []
    for spell_id in spell_ids:
        if spell_id not in catalog:
            raise CatalogError(f"Unknown spell id: {spell_id!r}")
        spells.append(catalog[spell_id])
    return spells


# =============================================================================
# Starter catalog
# =============================================================================


def _dmg(value: int, element: Element) -> SpellEffect:
    return SpellEffect(EffectType.DAMAGE, value, EffectTarget.ENEMY, element)


FIREBALL = Spell(
    id="fireball", name="Fireball", type=SpellType.ATTACK, element=Element.FIRE,
    tier=1, mana_cost=10, effects=(_dmg(15, Element.FIRE),),
    description="Hurl a ball of flame.",
)

INFERNO = Spell(
    id="inferno", name="Inferno", type=SpellType.ATTACK, element=Element.FIRE,
    tier=3, mana_cost=30,
    effects=(
        _dmg(25, Element.FIRE),
        SpellEffect(EffectType.DAMAGE_OVER_TIME, 5, EffectTarget.ENEMY, Element.FIRE, duration=2),
    ),
    description="Engulf the target in lingering flames.",
    rarity="rare",
)

FROST_BOLT = Spell(
    id="frost_bolt", name="Frost Bolt", type=SpellType.ATTACK, element=Element.WATER,
    tier=1, mana_cost=8, effects=(_dmg(12, Element.WATER),),
)

TIDAL_WAVE = Spell(
    id="tidal_wave", name="Tidal Wave", type=SpellType.ATTACK, element=Element.WATER,
    tier=2, mana_cost=20, effects=(_dmg(20, Element.WATER),),
    rarity="uncommon",
)

STONE_SKIN = Spell(
    id="stone_skin", name="Stone Skin", type=SpellType.BUFF, element=Element.EARTH,
    tier=1, mana_cost=12,
    effects=(SpellEffect(EffectType.STAT_MODIFIER, -5, EffectTarget.SELF, Element.EARTH, duration=3),),
    description="Harden your skin against incoming blows.",
)

GUST = Spell(
    id="gust", name="Gust", type=SpellType.ATTACK, element=Element.AIR,
    tier=1, mana_cost=6, effects=(_dmg(8, Element.AIR),),
)

ARCANE_EMPOWER = Spell(
    id="arcane_empower", name="Arcane Empowerment", type=SpellType.BUFF, element=Element.ARCANE,
    tier=2, mana_cost=15,
    effects=(SpellEffect(EffectType.STAT_MODIFIER, 5, EffectTarget.SELF, Element.ARCANE, duration=3),),
)

MANA_SURGE = Spell(
    id="mana_surge", name="Mana Surge", type=SpellType.BUFF, element=Element.ARCANE,
    tier=1, mana_cost=0,
    effects=(SpellEffect(EffectType.MANA_RESTORE, 20, EffectTarget.SELF, Element.ARCANE),),
)

TIME_WARP = Spell(
    id="time_warp", name="Time Warp", type=SpellType.BUFF, element=Element.ARCANE,
    tier=4, mana_cost=40,
    effects=(SpellEffect(EffectType.STATUS_EFFECT, 1, EffectTarget.SELF, Element.ARCANE, duration=1),),
    description="Bend time to take another turn.",
    rarity="epic",
)

HEALING_LIGHT = Spell(
    id="healing_light", name="Healing Light", type=SpellType.HEALING, element=Element.LIGHT,
    tier=1, mana_cost=10,
    effects=(SpellEffect(EffectType.HEALING, 15, EffectTarget.SELF, Element.LIGHT),),
)

REJUVENATION = Spell(
    id="rejuvenation", name="Rejuvenation", type=SpellType.HEALING, element=Element.NATURE,
    tier=2, mana_cost=14,
    effects=(SpellEffect(EffectType.STATUS_EFFECT, 6, EffectTarget.SELF, Element.NATURE, duration=3),),
    rarity="uncommon",
)

THORN_WHIP = Spell(
    id="thorn_whip", name="Thorn Whip", type=SpellType.ATTACK, element=Element.NATURE,
    tier=1, mana_cost=7, effects=(_dmg(10, Element.NATURE),),
)

SHADOW_BOLT = Spell(
    id="shadow_bolt", name="Shadow Bolt", type=SpellType.ATTACK, element=Element.SHADOW,
    tier=2, mana_cost=15, effects=(_dmg(18, Element.SHADOW),),
)

CURSE_OF_DECAY = Spell(
    id="curse_of_decay", name="Curse of Decay", type=SpellType.DEBUFF, element=Element.SHADOW,
    tier=2, mana_cost=12,
    effects=(SpellEffect(EffectType.STATUS_EFFECT, 4, EffectTarget.ENEMY, Element.SHADOW, duration=3),),
)

WEAKEN = Spell(
    id="weaken", name="Weaken", type=SpellType.DEBUFF, element=Element.SHADOW,
    tier=1, mana_cost=8,
    effects=(SpellEffect(EffectType.STAT_MODIFIER, -3, EffectTarget.ENEMY, Element.SHADOW, duration=2),),
)

RAISE_SKELETON = Spell(
    id="raise_skeleton", name="Raise Skeleton", type=SpellType.SUMMON, element=Element.SHADOW,
    tier=2, mana_cost=18,
    effects=(SpellEffect(EffectType.SUMMON, 6, EffectTarget.SELF, Element.SHADOW, duration=3,
                         minion_name="Skeleton"),),
)

MIRROR_IMAGE = Spell(
    id="mirror_image", name="Mirror Image", type=SpellType.REACTION, element=Element.ARCANE,
    tier=2, mana_cost=10,
    effects=(SpellEffect(EffectType.STAT_MODIFIER, -4, EffectTarget.SELF, Element.ARCANE, duration=2),),
)

ACID_FLASK = Spell(
    id="acid_flask", name="Acid Flask", type=SpellType.DEBUFF, element=Element.NATURE,
    tier=1, mana_cost=9,
    effects=(
        _dmg(6, Element.NATURE),
        SpellEffect(EffectType.DAMAGE_OVER_TIME, 3, EffectTarget.ENEMY, Element.NATURE, duration=3),
    ),
)

ELIXIR = Spell(
    id="elixir", name="Elixir of Vigor", type=SpellType.HEALING, element=Element.NATURE,
    tier=2, mana_cost=12,
    effects=(
        SpellEffect(EffectType.HEALING, 8, EffectTarget.SELF, Element.NATURE),
        SpellEffect(EffectType.MANA_RESTORE_OVER_TIME, 5, EffectTarget.SELF, Element.NATURE, duration=2),
    ),
)

ALL_SPELLS: Dict[str, Spell] = {
    s.id: s for s in (
        FIREBALL, INFERNO, FROST_BOLT, TIDAL_WAVE, STONE_SKIN, GUST,
        ARCANE_EMPOWER, MANA_SURGE, TIME_WARP, HEALING_LIGHT, REJUVENATION,
        THORN_WHIP, SHADOW_BOLT, CURSE_OF_DECAY, WEAKEN, RAISE_SKELETON,
        MIRROR_IMAGE, ACID_FLASK, ELIXIR,
    )
}

STARTER_SPELL_IDS: List[str] = [
    "fireball", "frost_bolt", "gust", "healing_light", "stone_skin",
]


def get_spell(spell_id: str) -> Spell:
    """Look up a starter-catalog spell."""
    if spell_id not in ALL_SPELLS:
        raise CatalogError(f"Unknown spell id: {spell_id!r}")
    return ALL_SPELLS[spell_id]


def get_starting_spells() -> List[Spell]:
    """Default five-spell loadout for a new wizard."""
    return [ALL_SPELLS[sid] for sid in STARTER_SPELL_IDS]
