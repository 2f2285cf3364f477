# geocoin/window.py
"""
VisibilityWindow
================

Keeps in memory only the caches within ``radius`` cells (square distance) of
the player.

Each cell is in one of three states:

- Dormant: no Cache object in memory. Either never visited or evicted; if it
  was evicted its coins are in the store.
- Active: a Cache object is held here and handed to the UI.
- Empty: the cell is visible but has no cache (no saved record and the
  spawner says no). The spawner is deterministic, so an Empty cell comes back
  Empty on every visit.

Every position change recomputes the whole visible set and diffs it against
the previous one. Cells that left are saved and dropped first; cells that
entered are then loaded from the store, or generated, or marked Empty.

If the store refuses an eviction write, the cache is parked in an unsaved
table instead of being dropped, the recompute still completes, and
PersistenceError is raised at the end. A parked cache is reused as-is when
its cell comes back into view.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable, Dict, FrozenSet, List, Optional, Set

from .board import Board, Cell, LatLng
from .cache import Cache
from .errors import PersistenceError
from .events import EventBus
from .storage_manager import StorageManager, cache_key
from .worldgen.spawner import CacheSpawner

logger = logging.getLogger(__name__)


def _cell_order(cell: Cell):
    return (cell.i, cell.j)


@dataclass
class WindowChange:
    entered: List[Cell] = field(default_factory=list)
    left: List[Cell] = field(default_factory=list)
    activated: List[Cell] = field(default_factory=list)
    deactivated: List[Cell] = field(default_factory=list)


class VisibilityWindow:
    def __init__(self,
                 board: Board,
                 spawner: CacheSpawner,
                 storage: StorageManager,
                 radius: int,
                 bus: Optional[EventBus] = None,
                 claimed_ids: Optional[Callable[[], Set[str]]] = None) -> None:
        if radius < 0:
            raise ValueError(f"radius must be non-negative, got {radius}")
        self.board = board
        self.spawner = spawner
        self.storage = storage
        self.radius = int(radius)
        self.bus = bus or EventBus()
        # ids held elsewhere (the player's inventory); such coins never
        # reappear in a loaded or regenerated cache
        self.claimed_ids = claimed_ids

        self._visible: Set[Cell] = set()
        self._active: Dict[Cell, Cache] = {}
        self._unsaved: Dict[Cell, Cache] = {}
        # diff from the latest update(), kept even when that update raised
        self.last_change: Optional[WindowChange] = None

    # ----------------------------------------------------------------------
    # Queries
    # ----------------------------------------------------------------------
    def visible_cells(self) -> FrozenSet[Cell]:
        return frozenset(self._visible)

    def active_caches(self) -> Dict[Cell, Cache]:
        return dict(self._active)

    def cache_at(self, cell: Cell) -> Optional[Cache]:
        return self._active.get(cell)

    def is_active(self, cell: Cell) -> bool:
        return cell in self._active

    def unsaved_cells(self) -> List[Cell]:
        return sorted(self._unsaved, key=_cell_order)

    # ----------------------------------------------------------------------
    # Recompute
    # ----------------------------------------------------------------------
    def update(self, position: LatLng) -> WindowChange:
        wanted = self.board.cells_near(position, self.radius)
        change = WindowChange(
            entered=sorted(wanted - self._visible, key=_cell_order),
            left=sorted(self._visible - wanted, key=_cell_order),
        )

        failed_keys: List[str] = []
        for cell in change.left:
            cache = self._active.pop(cell, None)
            if cache is None:
                continue
            try:
                self.storage.save_cache_state(cache)
            except PersistenceError as e:
                logger.error(f"Could not persist cache {cell} on eviction; keeping it in memory: {e}")
                self._unsaved[cell] = cache
                failed_keys.append(cache_key(cell))
            change.deactivated.append(cell)
            self.bus.emit("cache_deactivated", cell=cell)

        self._visible = set(wanted)

        for cell in change.entered:
            cache = self._activate(cell)
            if cache is None:
                continue
            self._active[cell] = cache
            change.activated.append(cell)
            self.bus.emit("cache_activated", cell=cell, cache=cache)

        logger.debug(
            f"Window at {self.board.cell_for_point(position)}: +{len(change.entered)} "
            f"-{len(change.left)} cells, {len(self._active)} active caches"
        )
        self.last_change = change
        self.bus.emit("window_changed", entered=change.entered, left=change.left)

        if failed_keys:
            raise PersistenceError(f"{len(failed_keys)} cache(s) could not be saved", failed_keys)
        return change

    def _activate(self, cell: Cell) -> Optional[Cache]:
        parked = self._unsaved.pop(cell, None)
        if parked is not None:
            logger.debug(f"Reactivating unsaved cache {cell}")
            return parked

        cache = self.storage.load_cache_state(cell)
        if cache is not None:
            return self._without_claimed(cache)

        if self.spawner.spawn_decision(cell):
            count = self.spawner.initial_coin_count(cell)
            logger.debug(f"Spawning cache at {cell} with {count} coins")
            return self._without_claimed(Cache.create(cell, count))
        return None

    def _without_claimed(self, cache: Cache) -> Cache:
        if self.claimed_ids is None:
            return cache
        claimed = self.claimed_ids()
        clash = [cid for cid in claimed if cache.contains(cid)]
        if not clash:
            return cache
        logger.warning(f"Cache {cache.cell} holds {len(clash)} coin(s) already in the inventory; dropping them")
        keep = [c for c in cache.coins if c.id not in claimed]
        return Cache(cache.cell, keep, remaining_coins=max(0, cache.remaining_coins - len(clash)))

    # ----------------------------------------------------------------------
    # Persistence
    # ----------------------------------------------------------------------
    def persist(self, cell: Cell) -> None:
        cache = self._active.get(cell)
        if cache is None:
            raise KeyError(f"no active cache at {cell}")
        self.storage.save_cache_state(cache)

    def persist_all(self) -> int:
        """Save every active and parked cache. Returns how many were written."""
        failed_keys: List[str] = []
        written = 0
        for cell, cache in list(self._active.items()):
            try:
                self.storage.save_cache_state(cache)
                written += 1
            except PersistenceError:
                failed_keys.append(cache_key(cell))
        for cell, cache in list(self._unsaved.items()):
            try:
                self.storage.save_cache_state(cache)
                del self._unsaved[cell]
                written += 1
            except PersistenceError:
                failed_keys.append(cache_key(cell))
        if failed_keys:
            raise PersistenceError(f"{len(failed_keys)} cache(s) could not be saved", failed_keys)
        return written

    def reset(self) -> None:
        """Forget every cache without saving (used after the store is wiped)."""
        for cell in sorted(self._active, key=_cell_order):
            self.bus.emit("cache_deactivated", cell=cell)
        self._active.clear()
        self._unsaved.clear()
        self._visible.clear()
        self.last_change = None
