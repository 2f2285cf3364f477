# geocoin/storage_manager.py
"""
StorageManager: the keyed save/load API on top of a KeyValueStore.

Loaders never raise for absent or broken data; they return None (or an
empty inventory) and log, so callers fall back to regeneration. Writers
raise PersistenceError when the store refuses the write.
"""

from __future__ import annotations

import logging
from typing import Dict, Iterable, List, Optional, Tuple

from .board import Board, Cell, LatLng
from .cache import Cache
from .coin import Coin
from .errors import CorruptRecord, PersistenceError, RecordNotFound, ResetError
from .memento import (
    decode_cache,
    decode_coin_total,
    decode_inventory,
    decode_position,
    encode_cache,
    encode_coin_total,
    encode_inventory,
    encode_position,
)
from .storage import KeyValueStore

logger = logging.getLogger(__name__)

CACHE_KEY_PREFIX = "cache-"
PLAYER_POSITION_KEY = "playerPosition"
PLAYER_COINS_KEY = "playerCoins"
COLLECTED_COINS_KEY = "collectedCoins"
FIXED_KEYS = (PLAYER_POSITION_KEY, PLAYER_COINS_KEY, COLLECTED_COINS_KEY)


def cache_key(cell: Cell) -> str:
    return f"{CACHE_KEY_PREFIX}{cell.i}-{cell.j}"


class StorageManager:
    def __init__(self, store: KeyValueStore, board: Optional[Board] = None) -> None:
        self.store = store
        self.board = board

    def _set(self, key: str, value: str) -> None:
        try:
            self.store.set(key, value)
        except PersistenceError:
            raise
        except Exception as e:
            raise PersistenceError(f"could not save '{key}': {e}", [key]) from e

    def _delete(self, key: str) -> None:
        try:
            self.store.delete(key)
        except PersistenceError:
            raise
        except Exception as e:
            raise PersistenceError(f"could not delete '{key}': {e}", [key]) from e

    # ----------------------------------------------------------------------
    # Player
    # ----------------------------------------------------------------------
    def save_game_state(self, position: LatLng, player_coins: int) -> None:
        self._set(PLAYER_POSITION_KEY, encode_position(position))
        self._set(PLAYER_COINS_KEY, encode_coin_total(player_coins))

    def load_game_state(self) -> Optional[Tuple[LatLng, Optional[int]]]:
        """
        (position, coin total) or None when the position is missing or broken.

        The two records are decoded separately: a bad total comes back as None
        and leaves a good position in place.
        """
        try:
            position = decode_position(self.store.get(PLAYER_POSITION_KEY))
        except RecordNotFound:
            return None
        except CorruptRecord as e:
            logger.warning(f"Saved player position is corrupt, ignoring it: {e}")
            return None

        try:
            coins: Optional[int] = decode_coin_total(self.store.get(PLAYER_COINS_KEY))
        except RecordNotFound:
            logger.warning("Saved player position has no coin total alongside it")
            coins = None
        except CorruptRecord as e:
            logger.warning(f"Saved coin total is corrupt, ignoring it: {e}")
            coins = None
        return position, coins

    def save_collected_coins(self, coins: Iterable[Coin]) -> None:
        self._set(COLLECTED_COINS_KEY, encode_inventory(coins))

    def load_collected_coins(self) -> List[Coin]:
        try:
            return decode_inventory(self.store.get(COLLECTED_COINS_KEY), self.board)
        except RecordNotFound:
            return []
        except CorruptRecord as e:
            logger.warning(f"Saved inventory is corrupt, ignoring it: {e}")
            return []

    # ----------------------------------------------------------------------
    # Caches
    # ----------------------------------------------------------------------
    def save_cache_state(self, cache: Cache) -> None:
        self._set(cache_key(cache.cell), encode_cache(cache))
        logger.debug(f"Saved cache {cache.cell} ({cache.coin_count()} coins)")

    def load_cache_state(self, cell: Cell) -> Optional[Cache]:
        try:
            return decode_cache(self.store.get(cache_key(cell)), cell, self.board)
        except RecordNotFound:
            return None
        except CorruptRecord as e:
            logger.warning(f"Saved cache at {cell} is corrupt, regenerating: {e}")
            return None

    def clear_cache(self, cell: Cell) -> None:
        self._delete(cache_key(cell))

    def saved_cache_keys(self) -> List[str]:
        return [k for k in self.store.list_keys() if k.startswith(CACHE_KEY_PREFIX)]

    # ----------------------------------------------------------------------
    # Full reset
    # ----------------------------------------------------------------------
    def clear_all(self) -> int:
        """
        Delete every cache record and the three player keys.

        All or nothing: if any delete fails, every record removed so far is
        written back and ResetError is raised. Returns the number of records
        removed.
        """
        snapshot: Dict[str, str] = {}
        for key in self.saved_cache_keys() + list(FIXED_KEYS):
            value = self.store.get(key)
            if value is not None:
                snapshot[key] = value

        removed: List[str] = []
        try:
            for key in snapshot:
                self._delete(key)
                removed.append(key)
        except PersistenceError as e:
            logger.error(f"Reset failed after {len(removed)} of {len(snapshot)} records: {e}")
            self._restore(snapshot, removed)
            raise ResetError(f"reset failed: {e}", e.keys) from e

        logger.info(f"Cleared {len(removed)} saved records")
        return len(removed)

    def _restore(self, snapshot: Dict[str, str], removed: List[str]) -> None:
        unrestored = []
        for key in removed:
            try:
                self._set(key, snapshot[key])
            except PersistenceError:
                unrestored.append(key)
        if unrestored:
            logger.error(f"Could not restore {len(unrestored)} records after failed reset: {unrestored}")
