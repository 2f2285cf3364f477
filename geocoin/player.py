# geocoin/player.py
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from .board import LatLng
from .coin import Coin, coin_id
from .errors import CoinNotHeld


@dataclass
class PlayerState:
    position: LatLng

    # Coins currently carried, oldest first
    inventory: List[Coin] = field(default_factory=list)

    @property
    def coin_count(self) -> int:
        # Derived, never stored: the saved playerCoins total is written from this.
        return len(self.inventory)

    def to_dict(self) -> Dict[str, Any]:
        """Plain snapshot for display and debugging."""
        return {
            "position": {"lat": self.position.lat, "lng": self.position.lng},
            "coins": self.coin_count,
            "inventory": [coin_id(c) for c in self.inventory],
        }

    # Convenience helpers
    def take(self, coin: Coin) -> None:
        self.inventory.append(coin)

    def find(self, cid: Optional[str] = None) -> Coin:
        """The named coin, or the newest one when no id is given."""
        if cid is None:
            if not self.inventory:
                raise CoinNotHeld("<any>")
            return self.inventory[-1]
        for coin in self.inventory:
            if coin_id(coin) == cid:
                return coin
        raise CoinNotHeld(cid)

    def drop(self, coin: Coin) -> None:
        self.inventory.remove(coin)
