# geocoin/cache.py
"""
Cache entity: the coins sitting in one cell.

Coins come off the top of the stack (last deposited, first collected).
``remaining_coins`` moves in lockstep with the coin list; it is persisted
separately because saved records carry it as its own field.
"""

from __future__ import annotations

import logging
from typing import Iterable, List, Optional

from .board import Cell
from .coin import Coin, coin_id
from .errors import DuplicateCoin, EmptyCache

logger = logging.getLogger(__name__)


class Cache:
    def __init__(self, cell: Cell, coins: Optional[Iterable[Coin]] = None,
                 remaining_coins: Optional[int] = None) -> None:
        self.cell = cell
        self.coins: List[Coin] = []
        self._ids = set()
        for coin in coins or []:
            self._push(coin)
        self.remaining_coins: int = len(self.coins) if remaining_coins is None else remaining_coins

    @classmethod
    def create(cls, cell: Cell, count: int) -> "Cache":
        """Fresh cache with ``count`` coins minted in ``cell``, serials 0..count-1."""
        if count < 0:
            raise ValueError(f"coin count must be non-negative, got {count}")
        cache = cls(cell, (Coin(cell, serial) for serial in range(count)))
        logger.debug(f"Minted {count} coins at {cell}")
        return cache

    def _push(self, coin: Coin) -> None:
        cid = coin_id(coin)
        if cid in self._ids:
            raise DuplicateCoin(cid)
        self._ids.add(cid)
        self.coins.append(coin)

    # ----------------------------------------------------------------------
    # State transitions
    # ----------------------------------------------------------------------
    def collect(self) -> Coin:
        if not self.coins:
            raise EmptyCache(self.cell)
        coin = self.coins.pop()
        self._ids.discard(coin_id(coin))
        self.remaining_coins = max(0, self.remaining_coins - 1)
        return coin

    def deposit(self, coin: Coin) -> None:
        # Any coin is welcome here, whatever cache it came from.
        self._push(coin)
        self.remaining_coins += 1

    # ----------------------------------------------------------------------
    # Queries
    # ----------------------------------------------------------------------
    def coin_count(self) -> int:
        return len(self.coins)

    def is_empty(self) -> bool:
        return not self.coins

    def contains(self, cid: str) -> bool:
        return cid in self._ids

    def coin_ids(self) -> List[str]:
        return [coin_id(c) for c in self.coins]

    def __repr__(self) -> str:
        return f"Cache(cell={self.cell}, coins={len(self.coins)}, remaining={self.remaining_coins})"
