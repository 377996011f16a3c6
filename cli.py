#!/usr/bin/env python3
"""
Wizard Duel - Command Line Interface

CLI for simulating duels and inspecting the spell catalog and AI.

Usage:
    python cli.py duel --opponent dark_acolyte --seed DUEL42 --difficulty hard
    python cli.py spells --element fire
    python cli.py strategy --name "Chronos Adept" --level 6
"""

import argparse
import json
import logging
import sys
import os
from typing import List, Optional

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from packages.duel.ai import AIStrategyFactory, classify_archetype
from packages.duel.content.spells import ALL_SPELLS, CatalogError, Element, Spell, load_spells, spell_to_dict
from packages.duel.content.wizards import SAMPLE_OPPONENTS, create_wizard, get_sample_opponent
from packages.duel.handlers.duel import DEFAULT_MAX_TURNS, DuelRunner
from packages.duel.state.combat import CombatState, Difficulty
from packages.duel.state.rng import Random, seed_to_long

logger = logging.getLogger("cli")


# =============================================================================
# OUTPUT FORMATTING
# =============================================================================

def format_spell(spell: Spell) -> str:
    """One catalog line."""
    effects = ", ".join(
        f"{e.type.value} {e.value}" + (f" x{e.duration}" if e.duration else "")
        for e in spell.effects
    )
    return (
        f"  {spell.id:<16} {spell.name:<20} {spell.type.value:<8} "
        f"{spell.element.value:<7} T{spell.tier} {spell.mana_cost:>3} mana  [{effects}]"
    )


def format_status_line(state: CombatState) -> str:
    p, e = state.player, state.enemy
    return (
        f"Round {state.round}, turn {state.turn}: "
        f"{p.wizard.name} {p.current_health}/{p.max_health} HP {p.current_mana} MP | "
        f"{e.wizard.name} {e.current_health}/{e.max_health} HP {e.current_mana} MP"
    )


# =============================================================================
# COMMANDS
# =============================================================================

def cmd_duel(args) -> int:
    """Simulate an AI-vs-AI duel and print the combat log."""
    try:
        player = create_wizard(args.player, level=args.level)
        enemy = get_sample_opponent(args.opponent)
    except CatalogError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    runner = DuelRunner(player, enemy, difficulty=args.difficulty, seed=args.seed)
    logger.info(f"Duel: {player.name} vs {enemy.name} ({args.difficulty}, seed {runner.seed})")
    result = runner.run_auto(max_turns=args.max_turns)

    if args.json:
        print(json.dumps({
            "result": {
                "status": result.status.value,
                "victory": result.victory,
                "player_health": result.player_health,
                "enemy_health": result.enemy_health,
                "turns": result.turns,
                "rounds": result.rounds,
                "experience_gained": result.experience_gained,
            },
            "log": [entry.to_dict() for entry in runner.state.log],
        }, indent=2))
        return 0

    for entry in runner.state.log:
        print(f"[R{entry.round:>2} T{entry.turn:>3}] {entry.actor:<6} {entry.details}")
    print()
    print(format_status_line(runner.state))
    print(f"Result: {result.status.value} after {result.rounds} rounds")
    if result.victory:
        print(f"Experience gained: {result.experience_gained}")
    return 0


def cmd_spells(args) -> int:
    """List the spell catalog."""
    try:
        catalog = load_spells(args.catalog) if args.catalog else ALL_SPELLS
    except CatalogError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    spells: List[Spell] = list(catalog.values())
    if args.element:
        spells = [s for s in spells if s.element == Element(args.element)]

    if args.json:
        print(json.dumps([spell_to_dict(s) for s in spells], indent=2))
        return 0

    print(f"{len(spells)} spells:")
    for spell in sorted(spells, key=lambda s: (s.tier, s.id)):
        print(format_spell(spell))
    return 0


def cmd_strategy(args) -> int:
    """Show which AI strategy a wizard would use."""
    archetype = classify_archetype(args.name)
    rng = Random(seed_to_long(args.seed)) if args.seed else None
    strategy = AIStrategyFactory.create_strategy(args.difficulty, args.level, archetype, rng)

    print(f"Wizard:     {args.name} (level {args.level})")
    print(f"Difficulty: {args.difficulty}")
    print(f"Archetype:  {archetype or '-'}")
    print(f"Strategy:   {strategy.NAME}")
    return 0


# =============================================================================
# MAIN
# =============================================================================

def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(
        description="Wizard Duel - combat simulator",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s duel --opponent dark_acolyte --seed DUEL42
  %(prog)s duel --difficulty hard --json
  %(prog)s spells --element shadow
  %(prog)s strategy --name "Battle Mage Kael" --difficulty hard --level 5
        """
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Verbose logging")

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    difficulties = [d.value for d in Difficulty]

    # Duel command
    duel_parser = subparsers.add_parser("duel", help="Simulate an AI-vs-AI duel")
    duel_parser.add_argument("--player", "-p", default="Player", help="Player wizard name")
    duel_parser.add_argument("--level", "-l", type=int, default=1, help="Player wizard level")
    duel_parser.add_argument("--opponent", "-o", default="apprentice",
                             choices=sorted(SAMPLE_OPPONENTS), help="Sample opponent")
    duel_parser.add_argument("--difficulty", "-d", default="normal", choices=difficulties)
    duel_parser.add_argument("--seed", "-s", help="Duel seed (e.g., DUEL42)")
    duel_parser.add_argument("--max-turns", type=int, default=DEFAULT_MAX_TURNS,
                             help="Stop after this many actions")
    duel_parser.add_argument("--json", "-j", action="store_true", help="Output in JSON format")

    # Spells command
    spells_parser = subparsers.add_parser("spells", help="List the spell catalog")
    spells_parser.add_argument("--element", "-e", choices=[e.value for e in Element],
                               help="Only spells of this element")
    spells_parser.add_argument("--catalog", "-c", help="JSON catalog file instead of the built-in one")
    spells_parser.add_argument("--json", "-j", action="store_true", help="Output in JSON format")

    # Strategy command
    strategy_parser = subparsers.add_parser("strategy", help="Show the AI strategy for a wizard")
    strategy_parser.add_argument("--name", "-n", required=True, help="Wizard name")
    strategy_parser.add_argument("--difficulty", "-d", default="normal", choices=difficulties)
    strategy_parser.add_argument("--level", "-l", type=int, default=1, help="Wizard level")
    strategy_parser.add_argument("--seed", "-s", help="Seed for the normal-difficulty draw")

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )

    if not args.command:
        parser.print_help()
        return 1

    # Dispatch to command handler
    commands = {
        "duel": cmd_duel,
        "spells": cmd_spells,
        "strategy": cmd_strategy,
    }

    handler = commands.get(args.command)
    if handler:
        return handler(args)
    else:
        parser.print_help()
        return 1


if __name__ == "__main__":
    sys.exit(main())
