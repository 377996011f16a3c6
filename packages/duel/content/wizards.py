"""
Wizard records consumed by the combat engine.

Stats arrive already merged with equipment bonuses; combat never recomputes
them. CombatStats holds the equipment-driven combat bonuses that the engine
reads directly (punch power, bleed, extra draw).
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from .spells import ALL_SPELLS, CatalogError, Spell, get_starting_spells, resolve_spell_ids


@dataclass(frozen=True)
class CombatStats:
    """Equipment combat bonuses."""
    mystic_punch_power: int = 0
    bleed_effect: int = 0
    extra_card_draw: int = 0


@dataclass
class Deck:
    """A named spell list a wizard can take into combat."""
    id: str
    name: str
    spells: List[Spell] = field(default_factory=list)


@dataclass
class Wizard:
    """A wizard with effective (equipment-merged) statistics."""
    id: str
    name: str
    level: int = 1
    max_health: int = 100
    max_mana: int = 100
    mana_regen: int = 10
    spells: List[Spell] = field(default_factory=list)
    equipped_spells: List[Spell] = field(default_factory=list)
    decks: List[Deck] = field(default_factory=list)
    active_deck_id: Optional[str] = None
    combat_stats: CombatStats = field(default_factory=CombatStats)

    def get_active_deck(self) -> Optional[Deck]:
        """The deck selected for combat, if any."""
        if not self.active_deck_id:
            return None
        for deck in self.decks:
            if deck.id == self.active_deck_id:
                return deck
        return None


def wizard_from_dict(data: Dict[str, Any], catalog: Optional[Dict[str, Spell]] = None) -> Wizard:
    """
    Build a Wizard from JSON. Spells are referenced by id and resolved against
    the catalog; an unknown id raises CatalogError.
    """
    catalog = ALL_SPELLS if catalog is None else catalog
    for key in ("id", "name"):
        if key not in data:
            raise CatalogError(f"Wizard is missing {key!r}")

    stats = data.get("combatStats", {})
    decks = [
        Deck(id=d["id"], name=d.get("name", d["id"]),
             spells=resolve_spell_ids(d.get("spells", []), catalog))
        for d in data.get("decks", [])
    ]
    return Wizard(
        id=data["id"],
        name=data["name"],
        level=int(data.get("level", 1)),
        max_health=int(data.get("maxHealth", 100)),
        max_mana=int(data.get("maxMana", 100)),
        mana_regen=int(data.get("manaRegen", 10)),
        spells=resolve_spell_ids(data.get("spells", []), catalog),
        equipped_spells=resolve_spell_ids(data.get("equippedSpells", []), catalog),
        decks=decks,
        active_deck_id=data.get("activeDeckId"),
        combat_stats=CombatStats(
            mystic_punch_power=int(stats.get("mysticPunchPower", 0)),
            bleed_effect=int(stats.get("bleedEffect", 0)),
            extra_card_draw=int(stats.get("extraCardDraw", 0)),
        ),
    )


def create_wizard(
    name: str,
    level: int = 1,
    spell_ids: Optional[List[str]] = None,
    max_health: int = 100,
    max_mana: int = 100,
    mana_regen: int = 10,
    combat_stats: Optional[CombatStats] = None,
) -> Wizard:
    """Convenience constructor: equips the given spells (or the starter five)."""
    spells = resolve_spell_ids(spell_ids) if spell_ids is not None else get_starting_spells()
    return Wizard(
        id=name.lower().replace(" ", "_"),
        name=name,
        level=level,
        max_health=max_health,
        max_mana=max_mana,
        mana_regen=mana_regen,
        spells=list(spells),
        equipped_spells=list(spells),
        combat_stats=combat_stats or CombatStats(),
    )


# Sample opponents, one per archetype plus generic duelists.
SAMPLE_OPPONENTS: Dict[str, Dict[str, Any]] = {
    "apprentice": {
        "level": 1,
        "spells": ["fireball", "frost_bolt", "gust", "healing_light", "stone_skin"],
    },
    "dark_acolyte": {
        "level": 4,
        "spells": ["shadow_bolt", "raise_skeleton", "curse_of_decay", "healing_light", "weaken"],
    },
    "chronos_adept": {
        "level": 6,
        "spells": ["time_warp", "arcane_empower", "mana_surge", "frost_bolt", "gust"],
    },
    "battle_mage_kael": {
        "level": 5,
        "spells": ["fireball", "inferno", "stone_skin", "arcane_empower", "thorn_whip"],
    },
    "mirage_illusionist": {
        "level": 5,
        "spells": ["mirror_image", "weaken", "shadow_bolt", "gust", "healing_light"],
    },
    "potion_alchemist": {
        "level": 5,
        "spells": ["acid_flask", "elixir", "rejuvenation", "thorn_whip", "fireball"],
    },
    "archmage": {
        "level": 9,
        "spells": ["inferno", "tidal_wave", "shadow_bolt", "rejuvenation", "curse_of_decay"],
    },
}


def get_sample_opponent(key: str) -> Wizard:
    """Build one of the SAMPLE_OPPONENTS."""
    if key not in SAMPLE_OPPONENTS:
        raise CatalogError(f"Unknown opponent: {key!r}")
    data = SAMPLE_OPPONENTS[key]
    name = key.replace("_", " ").title()
    return create_wizard(name, level=data["level"], spell_ids=data["spells"])
