# geocoin/ui.py
"""
Console presentation for a Game.

Nothing in here mutates game state. ConsoleView subscribes to the game's
events and prints short notices; the render_* helpers build strings so the
caller controls when they are shown.
"""

from __future__ import annotations

import logging
from typing import List

from colorama import Fore, Style

from .coin import coin_id
from .console_utils import console_print
from .game import Game

logger = logging.getLogger(__name__)

HELP_TEXT = """\
Commands:
  n / s / e / w            move one cell north / south / east / west
  look                     map of the cells around you
  caches                   list caches in view
  collect <i> <j>          take a coin from the cache at cell i,j
  deposit <i> <j> [coin]   leave a coin (default: the newest) at cell i,j
  inv                      list the coins you carry
  status                   position and coin count
  home                     walk back to the starting point
  save                     save now
  reset                    erase all progress (asks first)
  help                     this text
  quit                     save and exit"""


def render_map(game: Game, view_radius: int = 5) -> str:
    """
    ASCII window centred on the player, north at the top.

    '@' player, 'C' cache with coins, 'o' empty cache, '.' nothing.
    """
    here = game.player_cell
    lines: List[str] = []
    for di in range(view_radius, -view_radius - 1, -1):
        row: List[str] = []
        for dj in range(-view_radius, view_radius + 1):
            cell = game.cell(here.i + di, here.j + dj)
            if di == 0 and dj == 0:
                row.append(Fore.RED + "@" + Style.RESET_ALL)
                continue
            cache = game.window.cache_at(cell)
            if cache is None:
                row.append(".")
            elif cache.is_empty():
                row.append(Fore.WHITE + "o" + Style.RESET_ALL)
            else:
                row.append(Fore.YELLOW + "C" + Style.RESET_ALL)
        lines.append(" ".join(row))
    return "\n".join(lines)


def render_status(game: Game) -> str:
    pos = game.player.position
    cell = game.player_cell
    return (f"Position: {pos.lat:.6f}, {pos.lng:.6f} (cell {cell})\n"
            f"Coins: {game.coin_count} carried, {game.world_coin_total()} in view or carried")


def render_inventory(game: Game) -> str:
    coins = game.inventory()
    if not coins:
        return "You are not carrying any coins."
    return "\n".join(f"  Coin: {coin_id(c)}" for c in coins)


def render_caches(game: Game, limit: int = 20) -> str:
    caches = game.nearby_caches()
    if not caches:
        return "No caches in view."
    lines = [f"  Cache {c.cell}: {c.coin_count()} coin(s)" for c in caches[:limit]]
    if len(caches) > limit:
        lines.append(f"  ... and {len(caches) - limit} more")
    return "\n".join(lines)


class ConsoleView:
    """Prints one-line notices for the events a player cares about."""

    def __init__(self, game: Game) -> None:
        self.game = game
        bus = game.bus
        bus.subscribe("cache_mutated", self.on_cache_mutated)
        bus.subscribe("window_changed", self.on_window_changed)
        bus.subscribe("persistence_error", self.on_persistence_error)
        bus.subscribe("game_reset", self.on_game_reset)

    def on_cache_mutated(self, cell, coin_count) -> None:
        console_print(f"Cache {cell} now holds {coin_count} coin(s). You carry {self.game.coin_count}.",
                      color="cyan")

    def on_window_changed(self, entered, left) -> None:
        logger.debug(f"View shifted: {len(entered)} cells in, {len(left)} out")

    def on_persistence_error(self, error) -> None:
        console_print(f"Warning: progress could not be saved ({error}).", color="red")

    def on_game_reset(self) -> None:
        console_print("All progress erased. Back to the start.", color="yellow")
