"""
Effect Registry - applies spell effects and ticks active effects.

Handlers are registered per effect kind with decorators:

    @effect(EffectType.HEALING)
    def healing(ctx: EffectContext) -> None:
        ctx.target.heal(ctx.effect.value)

    @tick(ActiveEffectKind.HEALING_OVER_TIME)
    def tick_healing(ctx: TickContext) -> None:
        ctx.holder.heal(ctx.active.value)

Both registries are checked against their enums when this module is
imported: a kind without a handler raises RuntimeError at import instead of
being silently ignored during combat.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Dict, List

from ..content.spells import EffectTarget, EffectType, SpellEffect
from ..state.combat import (
    ActiveEffect,
    ActiveEffectKind,
    CombatState,
    CombatWizard,
    ExtraTurn,
    Side,
)

logger = logging.getLogger(__name__)


# Rounds a summoned minion stays when the effect carries no duration
DEFAULT_SUMMON_DURATION = 3


# =============================================================================
# Contexts
# =============================================================================


@dataclass
class EffectContext:
    """A spell effect being applied; mutates state in place."""
    state: CombatState
    effect: SpellEffect
    is_player_caster: bool

    @property
    def caster_side(self) -> Side:
        return Side.of(self.is_player_caster)

    @property
    def actor(self) -> str:
        return self.caster_side.value

    @property
    def target_is_player(self) -> bool:
        if self.effect.target == EffectTarget.SELF:
            return self.is_player_caster
        return not self.is_player_caster

    @property
    def target(self) -> CombatWizard:
        return self.state.wizard_for(self.target_is_player)

    @property
    def target_label(self) -> str:
        return "you" if self.target_is_player else "enemy"

    def log(self, action: str, details: str, **data) -> None:
        self.state.add_log(self.actor, action, details, target=self.target_label, **data)

    def add_active_effect(self, kind: ActiveEffectKind, name: str, duration: int) -> ActiveEffect:
        active = ActiveEffect(
            name=name,
            kind=kind,
            value=self.effect.value,
            duration=duration,
            remaining_duration=duration,
            source=self.caster_side,
            element=self.effect.element,
            effect=self.effect,
        )
        self.target.active_effects.append(active)
        self.log(
            "effect_applied",
            f"{name} applied to {self.target_label} for {duration} round{'s' if duration != 1 else ''}!",
        )
        return active


@dataclass
class TickContext:
    """An active effect ticking on the combatant that holds it."""
    state: CombatState
    active: ActiveEffect
    holder_is_player: bool

    @property
    def holder(self) -> CombatWizard:
        return self.state.wizard_for(self.holder_is_player)

    @property
    def holder_label(self) -> str:
        return "you" if self.holder_is_player else "enemy"

    def log(self, action: str, details: str, **data) -> None:
        self.state.add_log(self.active.source.value, action, details, **data)


# =============================================================================
# Registries
# =============================================================================

_EFFECT_HANDLERS: Dict[EffectType, Callable[[EffectContext], None]] = {}
_TICK_HANDLERS: Dict[ActiveEffectKind, Callable[[TickContext], None]] = {}


def effect(effect_type: EffectType):
    """Register the handler for one EffectType."""
    def decorator(func: Callable[[EffectContext], None]) -> Callable:
        _EFFECT_HANDLERS[effect_type] = func
        return func
    return decorator


def tick(kind: ActiveEffectKind):
    """Register the per-round behaviour of one ActiveEffectKind."""
    def decorator(func: Callable[[TickContext], None]) -> Callable:
        _TICK_HANDLERS[kind] = func
        return func
    return decorator


def get_effect_name(effect: SpellEffect) -> str:
    """Display name for an active effect created from this spell effect."""
    if effect.type == EffectType.STAT_MODIFIER:
        return "Damage Reduction" if effect.value < 0 else "Power Boost"
    if effect.type == EffectType.STATUS_EFFECT:
        if effect.target == EffectTarget.SELF and effect.value > 0:
            return "Healing Over Time"
        if effect.target == EffectTarget.ENEMY and effect.value > 0:
            return "Damage Over Time"
        return "Status Effect"
    if effect.type == EffectType.DAMAGE_OVER_TIME:
        return "Damage Over Time"
    if effect.type == EffectType.HEALING_OVER_TIME:
        return "Healing Over Time"
    if effect.type == EffectType.MANA_RESTORE_OVER_TIME:
        return "Mana Restore Over Time"
    if effect.type == EffectType.SUMMON:
        return f"Summoned {effect.minion_name or 'Minion'}"
    return effect.type.value


def is_time_warp(effect: SpellEffect) -> bool:
    return effect.type == EffectType.STATUS_EFFECT and effect.value == 1 and effect.duration == 1


# =============================================================================
# Immediate effects
# =============================================================================


@effect(EffectType.DAMAGE)
def apply_damage(ctx: EffectContext) -> None:
    value = ctx.effect.value
    ctx.target.damage(value)
    element = f" {ctx.effect.element.value}" if ctx.effect.element else ""
    ctx.log("damage", f"{value}{element} damage to {ctx.target_label}!", damage=value)
    ctx.state.update_status()


@effect(EffectType.HEALING)
def apply_healing(ctx: EffectContext) -> None:
    value = ctx.effect.value
    ctx.target.heal(value)
    ctx.log("healing", f"{value} healing to {ctx.target_label}!", healing=value)
    ctx.state.update_status()


@effect(EffectType.MANA_RESTORE)
def apply_mana_restore(ctx: EffectContext) -> None:
    value = ctx.effect.value
    ctx.target.restore_mana(value)
    ctx.log("mana_restore", f"{value} mana restored to {ctx.target_label}!", mana=value)


# =============================================================================
# Duration effects
# =============================================================================


@effect(EffectType.STAT_MODIFIER)
def apply_stat_modifier(ctx: EffectContext) -> None:
    if not ctx.effect.has_duration:
        logger.debug(f"Instant stat modifier ignored: {ctx.effect}")
        return
    kind = ActiveEffectKind.DAMAGE_REDUCTION if ctx.effect.value < 0 else ActiveEffectKind.BUFF
    ctx.add_active_effect(kind, get_effect_name(ctx.effect), ctx.effect.duration)


@effect(EffectType.STATUS_EFFECT)
def apply_status_effect(ctx: EffectContext) -> None:
    if is_time_warp(ctx.effect):
        you = "You" if ctx.is_player_caster else "Enemy"
        ctx.state.extra_turn = ExtraTurn(ctx.caster_side)
        ctx.state.add_log(ctx.actor, "effect_applied", f"Time warped! {you} will get an extra turn!")
        return

    if not ctx.effect.has_duration:
        logger.debug(f"Instant status effect ignored: {ctx.effect}")
        return

    name = get_effect_name(ctx.effect)
    if name == "Healing Over Time":
        kind = ActiveEffectKind.HEALING_OVER_TIME
    elif name == "Damage Over Time":
        kind = ActiveEffectKind.DAMAGE_OVER_TIME
    else:
        kind = ActiveEffectKind.STATUS
    ctx.add_active_effect(kind, name, ctx.effect.duration)


@effect(EffectType.DAMAGE_OVER_TIME)
def apply_damage_over_time(ctx: EffectContext) -> None:
    ctx.add_active_effect(
        ActiveEffectKind.DAMAGE_OVER_TIME, get_effect_name(ctx.effect), ctx.effect.duration or 1
    )


@effect(EffectType.HEALING_OVER_TIME)
def apply_healing_over_time(ctx: EffectContext) -> None:
    ctx.add_active_effect(
        ActiveEffectKind.HEALING_OVER_TIME, get_effect_name(ctx.effect), ctx.effect.duration or 1
    )


@effect(EffectType.MANA_RESTORE_OVER_TIME)
def apply_mana_restore_over_time(ctx: EffectContext) -> None:
    ctx.add_active_effect(
        ActiveEffectKind.MANA_REGEN, get_effect_name(ctx.effect), ctx.effect.duration or 1
    )


@effect(EffectType.SUMMON)
def apply_summon(ctx: EffectContext) -> None:
    ctx.add_active_effect(
        ActiveEffectKind.SUMMON,
        get_effect_name(ctx.effect),
        ctx.effect.duration or DEFAULT_SUMMON_DURATION,
    )


# =============================================================================
# Ticks
# =============================================================================


@tick(ActiveEffectKind.DAMAGE_OVER_TIME)
def tick_damage(ctx: TickContext) -> None:
    value = ctx.active.value
    ctx.holder.damage(value)
    ctx.log(
        "damage_over_time",
        f"{value} damage to {ctx.holder_label} from {ctx.active.name}!",
        damage=value,
    )
    ctx.state.update_status()


@tick(ActiveEffectKind.HEALING_OVER_TIME)
def tick_healing(ctx: TickContext) -> None:
    value = ctx.active.value
    ctx.holder.heal(value)
    ctx.log(
        "healing_over_time",
        f"{value} healing to {ctx.holder_label} from {ctx.active.name}!",
        healing=value,
    )
    ctx.state.update_status()


@tick(ActiveEffectKind.MANA_REGEN)
def tick_mana(ctx: TickContext) -> None:
    value = ctx.active.value
    ctx.holder.restore_mana(value)
    ctx.log(
        "mana_restore_over_time",
        f"{value} mana restored to {ctx.holder_label} from {ctx.active.name}!",
        mana=value,
    )


@tick(ActiveEffectKind.SUMMON)
def tick_summon(ctx: TickContext) -> None:
    value = ctx.active.value
    opponent_is_player = not ctx.holder_is_player
    ctx.state.wizard_for(opponent_is_player).damage(value)
    ctx.log(
        "summon_attack",
        f"{ctx.active.name} strikes {'you' if opponent_is_player else 'enemy'} for {value} damage!",
        damage=value,
    )
    ctx.state.update_status()


@tick(ActiveEffectKind.BUFF)
@tick(ActiveEffectKind.DAMAGE_REDUCTION)
@tick(ActiveEffectKind.STATUS)
def tick_passive(ctx: TickContext) -> None:
    pass


def _verify_registries() -> None:
    missing_effects = [t.value for t in EffectType if t not in _EFFECT_HANDLERS]
    missing_ticks = [k.value for k in ActiveEffectKind if k not in _TICK_HANDLERS]
    if missing_effects or missing_ticks:
        raise RuntimeError(
            f"Unhandled effect kinds: effects={missing_effects}, ticks={missing_ticks}"
        )


_verify_registries()


# =============================================================================
# Engine entry points
# =============================================================================


def _apply_spell_effect(state: CombatState, effect: SpellEffect, is_player_caster: bool) -> None:
    if state.is_terminal:
        return
    _EFFECT_HANDLERS[effect.type](EffectContext(state, effect, is_player_caster))


def apply_spell_effect(state: CombatState, effect: SpellEffect, is_player_caster: bool) -> CombatState:
    """
    Apply one spell effect. SELF targets the caster, ENEMY the opponent.

    Returns a new state; terminal states are returned unchanged.
    """
    if state.is_terminal:
        return state
    new_state = state.copy()
    _apply_spell_effect(new_state, effect, is_player_caster)
    return new_state


def _process_active_effects(state: CombatState, is_player: bool) -> None:
    wizard = state.wizard_for(is_player)
    remaining: List[ActiveEffect] = []
    expired: List[ActiveEffect] = []

    for active in list(wizard.active_effects):
        _TICK_HANDLERS[active.kind](TickContext(state, active, is_player))
        if state.is_terminal:
            return

        active.remaining_duration -= 1
        if active.remaining_duration <= 0:
            expired.append(active)
        else:
            remaining.append(active)

    label = "you" if is_player else "enemy"
    for active in expired:
        state.add_log(active.source.value, "effect_expired", f"{active.name} has expired for {label}!")

    wizard.active_effects = remaining


def process_active_effects(state: CombatState, is_player: bool) -> CombatState:
    """
    Tick every active effect on one side once, then expire finished ones.

    Expiry entries are logged after all ticks; surviving effects keep their
    order.
    """
    if state.is_terminal:
        return state
    new_state = state.copy()
    _process_active_effects(new_state, is_player)
    return new_state


def _regenerate_mana(state: CombatState, is_player: bool) -> None:
    wizard = state.wizard_for(is_player)
    regen = wizard.wizard.mana_regen
    wizard.restore_mana(regen)
    you = "You" if is_player else "Enemy"
    state.add_log(Side.of(is_player).value, "mana_regen", f"{you} regenerated {regen} mana!", mana=regen)


def regenerate_mana(state: CombatState, is_player: bool) -> CombatState:
    """Add the wizard's mana_regen, clamped to max mana."""
    new_state = state.copy()
    _regenerate_mana(new_state, is_player)
    return new_state
