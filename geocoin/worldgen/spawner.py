"""
Which cells host a cache, and how many coins each starts with.

Both answers are pure functions of the cell indices, the seed string and the
configured constants. Same cell, same answer, in every session.
"""

from __future__ import annotations

import logging
import math
from typing import Any, Dict, Optional

from ..board import Cell
from .config import DEFAULT_GAME_CFG
from .luck import luck

logger = logging.getLogger(__name__)


class CacheSpawner:
    def __init__(self,
                 seed: str = DEFAULT_GAME_CFG["seed"],
                 spawn_probability: float = DEFAULT_GAME_CFG["cache_spawn_probability"],
                 min_coins: int = DEFAULT_GAME_CFG["min_coins"],
                 max_coins: int = DEFAULT_GAME_CFG["max_coins"]) -> None:
        if not 0.0 <= spawn_probability <= 1.0:
            raise ValueError(f"spawn probability must be within [0, 1], got {spawn_probability}")
        if min_coins < 1 or max_coins < min_coins:
            raise ValueError(f"invalid coin range {min_coins}..{max_coins}")
        self.seed = str(seed)
        self.spawn_probability = float(spawn_probability)
        self.min_coins = int(min_coins)
        self.max_coins = int(max_coins)

    @classmethod
    def from_cfg(cls, cfg: Optional[Dict[str, Any]] = None) -> "CacheSpawner":
        cfg = cfg or DEFAULT_GAME_CFG
        return cls(
            seed=str(cfg.get("seed", DEFAULT_GAME_CFG["seed"])),
            spawn_probability=float(cfg.get("cache_spawn_probability",
                                            DEFAULT_GAME_CFG["cache_spawn_probability"])),
            min_coins=int(cfg.get("min_coins", DEFAULT_GAME_CFG["min_coins"])),
            max_coins=int(cfg.get("max_coins", DEFAULT_GAME_CFG["max_coins"])),
        )

    def spawn_decision(self, cell: Cell) -> bool:
        return luck(f"{cell.i},{cell.j}", self.seed) < self.spawn_probability

    def initial_coin_count(self, cell: Cell) -> int:
        span = self.max_coins - self.min_coins + 1
        draw = luck(f"{cell.i},{cell.j},initialValue", self.seed)
        return self.min_coins + min(span - 1, math.floor(draw * span))
