#!/usr/bin/env python3
"""Command-line driver for Stoppa."""
import asyncio
import random
import sys
from typing import Optional

from stoppa.config import config
from stoppa.game.table import Table, TableState
from stoppa.protocol.handlers import MessageHandler
from stoppa.protocol.messages import parse_command
from stoppa.utils.logger import set_log_level

HUMAN_SEAT = 0


def _format_cards(cards: list[dict]) -> str:
    if not cards:
        return "-"
    return " ".join(f"{c['rank']}{c['suit'][0]}" for c in cards)


def print_state(state: dict) -> None:
    """Render a game state message as text."""
    print(f"\n[{state['state']}] phase {state['phase'] + 1}/4  "
          f"pot {state['pot']}  hand pot {state['hand_pot']}  bet {state['current_bet']}")
    for p in state["players"]:
        markers = ""
        if p["index"] == state["dealer_seat"]:
            markers += "D"
        if p["index"] == state["current_seat"]:
            markers += ">"
        status = "folded" if p["folded"] else f"bet {p['current_bet']}"
        print(f"  {markers:<2} {p['name']:<10} {p['fiches']:>3} fiches  {status:<8} "
              f"hand {_format_cards(p['cards'])}  earlier {_format_cards(p['previous_cards'])}")
    result = state.get("last_result")
    if result:
        print(f"  last hand: {result['winner_name']} won {result['amount']} "
              f"({result['reason']}, score {result['score']})")
    if state["valid_actions"]:
        print(f"  your move: {', '.join(state['valid_actions'])} "
              f"(to call {state['call_amount']}, min raise {state['min_raise']})")
    print(f"  {state['message']}")


def _prompt(table: Table) -> str:
    if table.state == TableState.AWAITING_DEAL_CHOICE:
        return "deal 2|3 > "
    if table.state in (TableState.TALKING, TableState.DECLARING):
        return "declare <score> > "
    if table.state == TableState.ROUND_OVER:
        return "next|quit > "
    return "fold|call|raise <n> > "


async def play(seed: Optional[int] = None) -> None:
    """Play rounds at seat 0 against four heuristic agents."""
    set_log_level("WARNING")
    table = Table.create(human_players=1, rng=random.Random(seed))
    handler = MessageHandler(table, seat=HUMAN_SEAT)

    print_state(await handler.handle({"type": "start_round"}))
    while True:
        try:
            line = input(_prompt(table))
        except EOFError:
            break
        if line.strip().lower() in ("quit", "exit", "q"):
            break
        try:
            message = parse_command(line)
        except ValueError as e:
            print(f"Error: {e}")
            continue

        response = await handler.handle(message)
        if response["type"] == "error":
            print(f"Error: {response['message']}")
            continue
        print_state(response)


async def simulate(rounds: int, seed: Optional[int] = None) -> None:
    """Play all-agent rounds and print chip standings."""
    set_log_level("WARNING")
    table = Table.create(human_players=0, rng=random.Random(seed), agent_delay=0)

    for _ in range(rounds):
        await table.start_round()

    print(f"\nStandings after {rounds} rounds:")
    print(f"{'Seat':<6} {'Name':<10} {'Profile':<12} {'Fiches':>6}")
    print("-" * 38)
    for p in sorted(table.players, key=lambda p: p.fiches, reverse=True):
        print(f"{p.index:<6} {p.name:<10} {p.profile or '-':<12} {p.fiches:>6}")
    print(f"\nCarry-over pot: {table.pot.carry}")


def print_usage():
    """Print usage information."""
    print("""
Stoppa CLI

Usage:
  python -m stoppa.cli <command> [args]

Commands:
  play [seed]              Play against four agents
  simulate [rounds] [seed] Run agent-only rounds and print standings

In play:
  deal 2|3, fold, call, check, raise <n>, declare <score>, state, next, quit

Examples:
  python -m stoppa.cli play
  python -m stoppa.cli simulate 100 42
""")


def _int_arg(index: int, default: Optional[int]) -> Optional[int]:
    if len(sys.argv) <= index:
        return default
    try:
        return int(sys.argv[index])
    except ValueError:
        print(f"Error: expected a number, got '{sys.argv[index]}'.")
        sys.exit(1)


def main():
    """Main CLI entry point."""
    if len(sys.argv) < 2:
        print_usage()
        sys.exit(1)

    command = sys.argv[1].lower()

    if command == "play":
        asyncio.run(play(_int_arg(2, config.random_seed)))

    elif command == "simulate":
        asyncio.run(simulate(_int_arg(2, 10), _int_arg(3, config.random_seed)))

    elif command in ("help", "-h", "--help"):
        print_usage()

    else:
        print(f"Unknown command: {command}")
        print_usage()
        sys.exit(1)


if __name__ == "__main__":
    main()
