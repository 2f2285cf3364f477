# geocoin/game.py
"""
Game
====

One play session: the board, the spawner, the store, the visibility window
and the player's state, wired together.

Everything runs on the caller's thread, one command at a time. A command
either completes or raises before anything in memory changes; store write
failures are the exception to that rule: memory stays authoritative, the
failure is logged and published as a ``persistence_error`` event.

Save ordering keeps a crash between two writes from duplicating a coin:

- collect writes the inventory first, then the cache;
- deposit writes the cache first, then the inventory.

A coin can then only end up recorded in both places, never in neither, and
the window drops any coin the player holds from a cache it loads.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Tuple

from .board import Board, Cell, LatLng
from .cache import Cache
from .coin import Coin, coin_id
from .errors import EmptyCache, NoCacheHere, PersistenceError
from .events import EventBus
from .player import PlayerState
from .storage import JsonFileStore, KeyValueStore
from .storage_manager import StorageManager
from .utils import save_path
from .window import VisibilityWindow, WindowChange
from .worldgen.config import load_game_cfg
from .worldgen.spawner import CacheSpawner

logger = logging.getLogger(__name__)

# (di, dj) per one-tile step; i follows latitude, j follows longitude
DIRECTIONS: Dict[str, Tuple[int, int]] = {
    "north": (1, 0),
    "south": (-1, 0),
    "east": (0, 1),
    "west": (0, -1),
}


class Game:
    def __init__(self,
                 cfg: Optional[Dict[str, Any]] = None,
                 store: Optional[KeyValueStore] = None,
                 bus: Optional[EventBus] = None) -> None:
        self.cfg = cfg if cfg is not None else load_game_cfg()
        self.bus = bus or EventBus()

        self.board = Board(float(self.cfg["tile_width"]))
        self.spawner = CacheSpawner.from_cfg(self.cfg)
        if store is None:
            store = JsonFileStore(save_path(str(self.cfg.get("save_name", "default"))))
        self.storage = StorageManager(store, self.board)

        start = self.cfg["start"]
        self.start_position = LatLng(float(start["lat"]), float(start["lng"]))
        self.player = PlayerState(self.start_position)

        self.window = VisibilityWindow(
            self.board,
            self.spawner,
            self.storage,
            int(self.cfg["neighborhood_size"]),
            bus=self.bus,
            claimed_ids=self._held_ids,
        )
        self.last_change: Optional[WindowChange] = None

    # ----------------------------------------------------------------------
    # Session lifecycle
    # ----------------------------------------------------------------------
    def start(self) -> None:
        """Restore the saved player (if any) and open the window around them."""
        restored = self.storage.load_game_state()
        inventory = self.storage.load_collected_coins()

        if restored is None:
            position = self.start_position
            if inventory:
                logger.warning("Saved inventory found without a saved position; starting at home.")
        else:
            position, saved_total = restored
            if saved_total is not None and saved_total != len(inventory):
                logger.warning(
                    f"Saved coin total {saved_total} disagrees with {len(inventory)} saved coins; "
                    f"trusting the coin list."
                )

        self.player = PlayerState(position, inventory)
        logger.info(f"Session started at {self.player_cell} with {self.coin_count} coins")
        self._recompute()
        self.bus.emit("inventory_changed", coin_count=self.coin_count)

    def save(self) -> None:
        logger.debug(f"Saving player state {self.player.to_dict()}")
        self._guarded(self._save_player)
        self._guarded(self.window.persist_all)

    def reset(self) -> None:
        """
        Wipe every saved cache and the player's save, then start over at home.

        Raises ResetError (leaving memory untouched) if the store cannot be
        cleared completely.
        """
        removed = self.storage.clear_all()
        self.window.reset()
        self.player = PlayerState(self.start_position)
        logger.info(f"Game reset ({removed} saved records removed)")
        self._recompute()
        self.bus.emit("game_reset")
        self.bus.emit("inventory_changed", coin_count=0)

    # ----------------------------------------------------------------------
    # Movement
    # ----------------------------------------------------------------------
    def move(self, direction: str) -> WindowChange:
        try:
            di, dj = DIRECTIONS[direction]
        except KeyError:
            raise ValueError(f"unknown direction '{direction}'") from None
        w = self.board.tile_width
        pos = self.player.position
        return self.move_to(LatLng(pos.lat + di * w, pos.lng + dj * w))

    def move_to(self, position: LatLng) -> WindowChange:
        self.player.position = LatLng(float(position.lat), float(position.lng))
        self._guarded(self._save_position)
        change = self._recompute()
        self.bus.emit("player_moved", position=self.player.position, cell=self.player_cell)
        return change

    def return_to_start(self) -> WindowChange:
        return self.move_to(self.start_position)

    def _recompute(self) -> WindowChange:
        try:
            self.last_change = self.window.update(self.player.position)
        except PersistenceError as e:
            self._report(e)
            # window.update finishes its pass before raising
            self.last_change = self.window.last_change
        return self.last_change or WindowChange()

    # ----------------------------------------------------------------------
    # Coins
    # ----------------------------------------------------------------------
    def _active_cache(self, cell: Cell) -> Cache:
        cache = self.window.cache_at(cell)
        if cache is None:
            raise NoCacheHere(cell)
        return cache

    def collect(self, cell: Cell) -> Optional[Coin]:
        """Move the top coin of ``cell``'s cache into the inventory. None if empty."""
        cache = self._active_cache(cell)
        try:
            coin = cache.collect()
        except EmptyCache:
            logger.info(f"Nothing to collect at {cell}")
            return None

        self.player.take(coin)
        logger.debug(f"Collected {coin_id(coin)} from {cell}")
        self._guarded(self._save_player)
        self._guarded(lambda: self.storage.save_cache_state(cache))
        self._announce(cache)
        return coin

    def deposit(self, cell: Cell, cid: Optional[str] = None) -> Coin:
        """
        Put a held coin into ``cell``'s cache: the named one, else the most
        recently collected. Raises CoinNotHeld / DuplicateCoin without
        changing anything.
        """
        cache = self._active_cache(cell)
        coin = self.player.find(cid)
        cache.deposit(coin)
        self.player.drop(coin)

        logger.debug(f"Deposited {coin_id(coin)} into {cell}")
        self._guarded(lambda: self.storage.save_cache_state(cache))
        self._guarded(self._save_player)
        self._announce(cache)
        return coin

    def _announce(self, cache: Cache) -> None:
        self.bus.emit("cache_mutated", cell=cache.cell, coin_count=cache.coin_count())
        self.bus.emit("inventory_changed", coin_count=self.coin_count)

    # ----------------------------------------------------------------------
    # Queries
    # ----------------------------------------------------------------------
    @property
    def coin_count(self) -> int:
        return self.player.coin_count

    @property
    def player_cell(self) -> Cell:
        return self.board.cell_for_point(self.player.position)

    def inventory(self) -> List[Coin]:
        return list(self.player.inventory)

    def cell(self, i: int, j: int) -> Cell:
        return self.board.cell_by_indices(i, j)

    def nearby_caches(self) -> List[Cache]:
        """Active caches, closest first (square distance, then i, then j)."""
        here = self.player_cell

        def _key(cache: Cache):
            c = cache.cell
            return (max(abs(c.i - here.i), abs(c.j - here.j)), c.i, c.j)

        return sorted(self.window.active_caches().values(), key=_key)

    def world_coin_total(self) -> int:
        """Coins in active caches plus the inventory."""
        in_caches = sum(c.coin_count() for c in self.window.active_caches().values())
        return in_caches + self.coin_count

    # ----------------------------------------------------------------------
    # Saving helpers
    # ----------------------------------------------------------------------
    def _held_ids(self):
        return {coin_id(c) for c in self.player.inventory}

    def _save_position(self) -> None:
        self.storage.save_game_state(self.player.position, self.coin_count)

    def _save_player(self) -> None:
        self.storage.save_collected_coins(self.player.inventory)
        self.storage.save_game_state(self.player.position, self.coin_count)

    def _guarded(self, action) -> None:
        try:
            action()
        except PersistenceError as e:
            self._report(e)

    def _report(self, error: PersistenceError) -> None:
        logger.error(f"Save failed, continuing with in-memory state: {error}")
        self.bus.emit("persistence_error", error=error)
