"""
Text front end for a heads-up game.

Usage:
    pokerduel-cli [--seed N] [--stack N] [ACTION ...]

Each ACTION is one of ``check``, ``call``, ``fold``, ``allin`` or
``bet:<amount>`` (``raise:<amount>`` is accepted too). Without actions,
commands are read from stdin one per line. A new round starts whenever the
previous one has ended.

Exit codes: 0 when every action was accepted, 1 on an illegal action,
2 on a malformed command.
"""

import argparse
import logging
import sys
from typing import Iterable, List, Optional, Tuple

from pokerduel.core.controller import RoundController
from pokerduel.core.rules import GameConfig, ActionType, HUMAN, COMPUTER, DEFAULT_STARTING_STACK


logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_ILLEGAL = 1
EXIT_MALFORMED = 2

SIMPLE_COMMANDS = {
    "check": ActionType.CHECK,
    "call": ActionType.CALL,
    "fold": ActionType.FOLD,
    "allin": ActionType.ALL_IN,
}


class CommandError(ValueError):
    """A command that cannot be parsed."""


def parse_command(text: str) -> Tuple[ActionType, int]:
    """
    Parse one command into an action and amount.

    Raises:
        CommandError: If the command is malformed
    """
    command = text.strip().lower()
    if command in SIMPLE_COMMANDS:
        return SIMPLE_COMMANDS[command], 0

    name, sep, value = command.partition(":")
    if sep and name in ("bet", "raise"):
        try:
            amount = int(value)
        except ValueError:
            raise CommandError(f"Bad amount in {text!r}")
        if amount <= 0:
            raise CommandError(f"Amount must be positive in {text!r}")
        return ActionType.RAISE, amount

    raise CommandError(f"Unknown command: {text!r}")


def format_state(controller: RoundController) -> str:
    """Render the human's view of the table as text."""
    state = controller.get_state(HUMAN)
    public, private = state["public_info"], state["private_info"]
    stacks = {p["id"]: p["stack"] for p in public["players"]}

    lines = [
        f"Round #{public['round_number']}  Street: {public['street']}  Pot: ${public['pot']}",
        f"You: ${stacks[HUMAN]}  Computer: ${stacks[COMPUTER]}",
    ]
    board = " ".join(c["text"] for c in public.get("community_cards", []))
    lines.append(f"Board: {board or '-'}")
    if private.get("hand"):
        lines.append("Your cards: " + " ".join(c["text"] for c in private["hand"]))
    if private.get("legal_actions"):
        lines.append(f"To call: ${private['call_amount']}")
        lines.append("Actions: " + ", ".join(_describe_action(a) for a in private["legal_actions"]))
    if public["game_over"]:
        lines.append("Game over.")
    return "\n".join(lines)


def _describe_action(action: dict) -> str:
    if "min" in action:
        return f"{action['type'].lower()}:{action['min']}-{action['max']}"
    return action["type"].lower()


def play(controller: RoundController, commands: Iterable[str], out=None) -> int:
    """
    Feed commands to the controller, printing new log lines as they appear.

    Returns:
        Process exit code
    """
    out = out or sys.stdout
    printed = 0
    played = False

    def flush_log():
        nonlocal printed
        for entry in controller.log[printed:]:
            print(f"[{entry.category}] {entry.text}", file=out)
        printed = len(controller.log)

    for raw in commands:
        if not raw.strip():
            continue
        try:
            action_type, amount = parse_command(raw)
        except CommandError as e:
            print(f"error: {e}", file=out)
            return EXIT_MALFORMED
        logger.debug(f"Command: {action_type.value} {amount}")

        if not controller.is_round_running():
            if not controller.start_round():
                print("error: the game is over", file=out)
                return EXIT_ILLEGAL
            flush_log()

        result = controller.act(HUMAN, action_type, amount)
        if not result.success:
            print(f"illegal: {result.message}", file=out)
            return EXIT_ILLEGAL
        flush_log()
        print(format_state(controller), file=out)
        played = True

    if not played:
        if controller.round_number == 0:
            controller.start_round()
        flush_log()
        print(format_state(controller), file=out)
    return EXIT_OK


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="pokerduel-cli",
        description="Play heads-up Texas Hold'em against the computer",
    )
    parser.add_argument("--seed", type=int, default=None, help="Seed for a reproducible game")
    parser.add_argument("--stack", type=int, default=DEFAULT_STARTING_STACK, help="Starting stack")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    parser.add_argument("actions", nargs="*", metavar="ACTION", help="check, call, fold, allin or bet:<amount>")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )

    try:
        config = GameConfig(starting_stack=args.stack, seed=args.seed)
    except ValueError as e:
        print(f"error: {e}", file=sys.stderr)
        return EXIT_MALFORMED

    controller = RoundController(config)
    commands = args.actions if args.actions else sys.stdin
    return play(controller, commands)


if __name__ == "__main__":
    sys.exit(main())
