# geocoin/memento.py
"""
Memento codec: flat JSON snapshots of caches and player state.

Record shapes (all values are JSON text):

    cache-{i}-{j}   {"coins": [{"cell": {"i": .., "j": ..}, "serial": ..}, ...],
                     "remainingCoins": int}
    collectedCoins  [{"cell": {"i": .., "j": ..}, "serial": ..}, ...]
    playerPosition  {"lat": float, "lng": float}
    playerCoins     "17"

Cache and inventory decoders also accept coins written as "i:j#serial" id
strings. Decoders raise RecordNotFound for a missing record and CorruptRecord
for anything they cannot turn into a whole entity. A single bad coin entry
is logged and skipped; the rest of the record still loads.
"""

from __future__ import annotations

import json
import logging
import math
from typing import Any, Iterable, List, Optional

from .board import Board, Cell, LatLng
from .cache import Cache
from .coin import Coin, coin_from_dict, coin_id
from .errors import CorruptRecord, InvalidCoinId, RecordNotFound

logger = logging.getLogger(__name__)


def _parse(record: Optional[str], what: str) -> Any:
    if record is None:
        raise RecordNotFound(f"no saved {what}")
    try:
        return json.loads(record)
    except (TypeError, ValueError) as e:
        raise CorruptRecord(f"unreadable {what}: {e}") from e


def _decode_coin_list(entries: Any, what: str, board: Optional[Board]) -> List[Coin]:
    if not isinstance(entries, list):
        raise CorruptRecord(f"{what}: coin list expected, got {type(entries).__name__}")

    coins: List[Coin] = []
    seen = set()
    for entry in entries:
        try:
            coin = coin_from_dict(entry, board)
        except InvalidCoinId as e:
            logger.warning(f"Skipping bad coin in {what}: {e}")
            continue
        cid = coin_id(coin)
        if cid in seen:
            logger.warning(f"Dropping duplicate coin {cid} in {what}")
            continue
        seen.add(cid)
        coins.append(coin)
    return coins


# -----------------------------------------------------------------------------
# Cache
# -----------------------------------------------------------------------------
def encode_cache(cache: Cache) -> str:
    return json.dumps({
        "coins": [c.to_dict() for c in cache.coins],
        "remainingCoins": cache.remaining_coins,
    })


def decode_cache(record: Optional[str], cell: Cell, board: Optional[Board] = None) -> Cache:
    what = f"cache {cell}"
    data = _parse(record, what)
    if not isinstance(data, dict) or "coins" not in data:
        raise CorruptRecord(f"{what}: expected an object with a 'coins' list")

    coins = _decode_coin_list(data["coins"], what, board)
    remaining = data.get("remainingCoins")
    if remaining is None:
        remaining = len(coins)
    elif not isinstance(remaining, int) or isinstance(remaining, bool) or remaining < 0:
        raise CorruptRecord(f"{what}: bad remainingCoins {remaining!r}")
    return Cache(cell, coins, remaining_coins=remaining)


# -----------------------------------------------------------------------------
# Player inventory
# -----------------------------------------------------------------------------
def encode_inventory(coins: Iterable[Coin]) -> str:
    return json.dumps([c.to_dict() for c in coins])


def decode_inventory(record: Optional[str], board: Optional[Board] = None) -> List[Coin]:
    return _decode_coin_list(_parse(record, "inventory"), "inventory", board)


# -----------------------------------------------------------------------------
# Player position / coin total
# -----------------------------------------------------------------------------
def encode_position(position: LatLng) -> str:
    return json.dumps({"lat": position.lat, "lng": position.lng})


def decode_position(record: Optional[str]) -> LatLng:
    data = _parse(record, "player position")
    # Leaflet serializes LatLng as an object; accept a [lat, lng] pair too
    if isinstance(data, dict):
        lat, lng = data.get("lat"), data.get("lng")
    elif isinstance(data, list) and len(data) == 2:
        lat, lng = data
    else:
        raise CorruptRecord(f"player position has unexpected shape: {data!r}")
    try:
        lat, lng = float(lat), float(lng)
    except (TypeError, ValueError) as e:
        raise CorruptRecord(f"player position is not numeric: {data!r}") from e
    if not (math.isfinite(lat) and math.isfinite(lng)):
        raise CorruptRecord(f"player position is not finite: {data!r}")
    return LatLng(lat, lng)


def encode_coin_total(count: int) -> str:
    return str(int(count))


def decode_coin_total(record: Optional[str]) -> int:
    if record is None:
        raise RecordNotFound("no saved coin total")
    try:
        count = int(record.strip(), 10)
    except (AttributeError, ValueError) as e:
        raise CorruptRecord(f"coin total is not a decimal integer: {record!r}") from e
    if count < 0:
        raise CorruptRecord(f"coin total is negative: {count}")
    return count
