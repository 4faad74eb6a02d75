"""
Labyrinth CLI - Command-line interface for the engine.

Usage:
    labyrinth simulate --seed N --turns K   Walk a generated maze, printing each turn
    labyrinth validate [--catalog FILE]     Validate a content catalog
    labyrinth serve [--host H --port P]     Run the REST API under uvicorn
"""

import argparse
import json
import logging
import random
import sys


def main(argv=None):
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Labyrinth - turn-based maze exploration engine",
        prog="labyrinth",
    )
    parser.add_argument("--log-level", default="WARNING", help="Logging level (default: WARNING)")
    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # Simulate command
    simulate_parser = subparsers.add_parser("simulate", help="Play a generated game automatically")
    simulate_parser.add_argument("--seed", type=int, default=None, help="Random seed")
    simulate_parser.add_argument("--turns", type=int, default=20, help="Maximum rooms to enter")
    simulate_parser.add_argument("--weighted", action="store_true", help="Weighted encounter selection")

    # Validate command
    validate_parser = subparsers.add_parser("validate", help="Validate a content catalog")
    validate_parser.add_argument("--catalog", help="Path to a catalog JSON file (default: built-in)")

    # Serve command
    serve_parser = subparsers.add_parser("serve", help="Run the REST API")
    serve_parser.add_argument("--host", default="127.0.0.1")
    serve_parser.add_argument("--port", type=int, default=8000)

    args = parser.parse_args(argv)
    logging.basicConfig(level=args.log_level.upper())

    if args.command == "simulate":
        return cmd_simulate(args)
    elif args.command == "validate":
        return cmd_validate(args)
    elif args.command == "serve":
        return cmd_serve(args)
    else:
        parser.print_help()
        return 1


def cmd_simulate(args):
    """Walk random neighbouring rooms, always taking the first available choice."""
    from .content.labyrinth_base import create_base_catalog
    from .session import GameLoop, SelectionPolicy, SessionManager

    manager = SessionManager(catalog=create_base_catalog())
    selection = SelectionPolicy.WEIGHTED if args.weighted else SelectionPolicy.FIRST
    session = manager.create_session(seed=args.seed, selection=selection)
    loop = GameLoop(session)
    walker = random.Random(session.seed)

    print(f"Session {session.session_id} (seed {session.seed})")
    for turn in range(1, args.turns + 1):
        here = session.game_state.current_room_id
        target = walker.choice(session.grid.neighbors(here))

        result = loop.enter_room(target.room_id)
        if not result.success:
            print(f"Turn {turn}: {result.error}")
            return 1
        if result.encounter is None:
            print(f"Turn {turn}: died before reaching {target.room_id}")
            break

        view = result.encounter
        print(f"\nTurn {turn} - room {view.room_id}: {view.encounter.name or view.encounter.id}")
        if view.encounter.description:
            print(f"  {view.encounter.description}")
        for choice in view.choices:
            mark = " " if choice.is_available else "x"
            print(f"  [{mark}] {choice.index}. {choice.text}")

        chosen = next((c for c in view.choices if c.is_available), None)
        if chosen is None:
            print("  No choice available, moving on")
            continue

        outcome = loop.choose(chosen.index).outcome
        print(f"  -> {chosen.text}: {outcome.description}")
        if outcome.rest_benefits:
            print(f"     {outcome.rest_benefits}")
        for warning in outcome.result.report.warnings:
            print(f"     ! {warning.message}")

        stats = session.game_state.player.stats
        print(f"  HP {stats.hp}  SAN {stats.san}  FIT {stats.fit}  HUNGER {stats.hunger}")

        if session.game_state.player.is_game_over:
            break

    player = session.game_state.player
    if player.is_game_over:
        print(f"\nGame over: {player.game_over_reason} after {player.turn_count} turns")
    else:
        print(f"\nSurvived {player.turn_count} turns")
    return 0


def cmd_validate(args):
    """Validate a content catalog."""
    from .content_schema import Catalog, validate_catalog
    from .content.labyrinth_base import create_base_catalog

    if args.catalog:
        try:
            with open(args.catalog, "r", encoding="utf-8") as f:
                catalog = Catalog.from_dict(json.load(f))
        except FileNotFoundError:
            print(f"Error: File not found: {args.catalog}")
            return 1
        print(f"Validating: {args.catalog}")
    else:
        catalog = create_base_catalog()
        print("Validating built-in catalog")

    result = validate_catalog(catalog)
    print(f"Encounters: {len(catalog.encounters)}  Items: {len(catalog.items)}  Statuses: {len(catalog.statuses)}")

    if result.warnings:
        print("\nWarnings:")
        for w in result.warnings:
            print(f"  - {w}")

    if result.errors:
        print("\nErrors:")
        for e in result.errors:
            print(f"  - {e}")
        return 1

    print("Catalog is valid")
    return 0


def cmd_serve(args):
    """Run the REST API."""
    import uvicorn

    uvicorn.run("labyrinth.api.app:app", host=args.host, port=args.port, log_level=args.log_level.lower())
    return 0


if __name__ == "__main__":
    sys.exit(main())
