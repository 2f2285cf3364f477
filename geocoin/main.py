# geocoin/main.py
import logging
import sys

from colorama import init, Fore, Style

from .console_utils import console_input, console_print
from .errors import GeocoinError, ResetError
from .game import DIRECTIONS, Game
from .logging_config import setup_logging
from .ui import HELP_TEXT, ConsoleView, render_caches, render_inventory, render_map, render_status

logger = logging.getLogger(__name__)

MOVE_COMMANDS = {"n": "north", "s": "south", "e": "east", "w": "west"}
MOVE_COMMANDS.update({d: d for d in DIRECTIONS})


def display_start_menu():
    print(f"{Fore.CYAN}=== Geocoin ==={Style.RESET_ALL}")
    print(f"{Fore.CYAN}1. Continue / New Game{Style.RESET_ALL}")
    print(f"{Fore.CYAN}2. Erase Progress and Start Over{Style.RESET_ALL}")
    print(f"{Fore.CYAN}3. Exit{Style.RESET_ALL}")
    choice = console_input("Select an option (1-3): ", color="yellow")
    return None if choice is None else choice.strip()


def _parse_cell(game, args):
    if len(args) < 2:
        raise ValueError("expected cell indices: <i> <j>")
    return game.cell(int(args[0]), int(args[1]))


def handle_command(game, line):
    """Run one command line. Returns False when the player wants to quit."""
    parts = line.split()
    if not parts:
        return True
    cmd, args = parts[0].lower(), parts[1:]

    if cmd in MOVE_COMMANDS:
        game.move(MOVE_COMMANDS[cmd])
        console_print(render_map(game), color="white")
        console_print(render_status(game), color="cyan")
    elif cmd == "look":
        console_print(render_map(game), color="white")
    elif cmd == "caches":
        console_print(render_caches(game), color="cyan")
    elif cmd == "collect":
        coin = game.collect(_parse_cell(game, args))
        if coin is None:
            console_print("That cache is empty.", color="yellow")
        else:
            console_print(f"Collected coin {coin}.", color="green")
    elif cmd == "deposit":
        cell = _parse_cell(game, args)
        coin = game.deposit(cell, args[2] if len(args) > 2 else None)
        console_print(f"Deposited coin {coin} at {cell}.", color="green")
    elif cmd in ("inv", "inventory"):
        console_print(render_inventory(game), color="cyan")
    elif cmd == "status":
        console_print(render_status(game), color="cyan")
    elif cmd == "home":
        game.return_to_start()
        console_print(render_status(game), color="cyan")
    elif cmd == "save":
        game.save()
        console_print("Saved.", color="green")
    elif cmd == "reset":
        answer = console_input("Erase all progress? Type 'yes' to confirm: ", color="red")
        if answer is not None and answer.strip().lower() == "yes":
            game.reset()
    elif cmd in ("help", "?"):
        console_print(HELP_TEXT, color="yellow")
    elif cmd in ("quit", "exit", "q"):
        return False
    else:
        console_print(f"Unknown command '{cmd}'. Type 'help'.", color="red")
    return True


def run_session(game):
    ConsoleView(game)
    game.start()
    console_print(render_map(game), color="white")
    console_print(render_status(game), color="cyan")
    console_print("Type 'help' for commands.", color="yellow")

    while True:
        line = console_input("> ", color="yellow")
        if line is None:
            break
        try:
            if not handle_command(game, line):
                break
        except (GeocoinError, ValueError) as e:
            logger.debug(f"Command '{line}' rejected: {e}")
            console_print(str(e), color="red")

    game.save()
    console_print("Progress saved. Goodbye!", color="cyan")


def main():
    setup_logging()
    init()  # colorama init
    logger.info("Starting Geocoin")

    try:
        game = Game()
        while True:
            choice = display_start_menu()
            if choice is None or choice == "3":
                console_print("Exiting Geocoin. Goodbye!", color="cyan")
                return 0
            if choice == "2":
                try:
                    game.reset()
                except ResetError as e:
                    console_print(f"Could not erase progress: {e}", color="red")
                    continue
            elif choice != "1":
                console_print("Invalid option! Please select 1-3.", color="red")
                continue
            run_session(game)
            return 0
    except KeyboardInterrupt:
        console_print("\nInterrupted.", color="yellow")
        return 130
    except Exception as e:
        logger.error(f"Game crashed: {e}", exc_info=True)
        console_print(f"Error: Game crashed - {e}. Check geocoin.log for details.", color="red")
        return 1


if __name__ == "__main__":
    sys.exit(main())
