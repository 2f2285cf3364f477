# geocoin/coin.py
from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Dict, Optional

from .board import Board, Cell
from .errors import InvalidCoinId

# exactly what coin_id() writes; anything else is rejected
_INT = r"(0|-?[1-9][0-9]*)"
_COIN_ID_RE = re.compile(_INT + ":" + _INT + r"#(0|[1-9][0-9]*)")


@dataclass(frozen=True)
class Coin:
    """A single coin, identified by the cell it spawned in and its serial."""

    cell: Cell
    serial: int

    @property
    def id(self) -> str:
        return coin_id(self)

    def __str__(self) -> str:
        return coin_id(self)

    def to_dict(self) -> Dict[str, Any]:
        return {"cell": {"i": self.cell.i, "j": self.cell.j}, "serial": self.serial}


def coin_id(coin: Coin) -> str:
    return f"{coin.cell.i}:{coin.cell.j}#{coin.serial}"


def _resolve_cell(i: int, j: int, board: Optional[Board]) -> Cell:
    if board is not None:
        return board.cell_by_indices(i, j)
    return Cell(i, j)


def parse_coin_id(text: str, board: Optional[Board] = None) -> Coin:
    """Parse ``"i:j#serial"`` back into a Coin."""
    if not isinstance(text, str):
        raise InvalidCoinId(f"coin id must be a string, got {type(text).__name__}")
    m = _COIN_ID_RE.fullmatch(text)
    if not m:
        raise InvalidCoinId(f"malformed coin id: {text!r}")
    i, j, serial = (int(g) for g in m.groups())
    return Coin(_resolve_cell(i, j, board), serial)


def coin_from_dict(data: Any, board: Optional[Board] = None) -> Coin:
    """
    Rehydrate a coin from either of the two persisted shapes:
      - ``{"cell": {"i": .., "j": ..}, "serial": ..}``
      - ``"i:j#serial"``
    """
    if isinstance(data, str):
        return parse_coin_id(data, board)
    if not isinstance(data, dict):
        raise InvalidCoinId(f"unsupported coin record: {data!r}")

    cell = data.get("cell")
    serial = data.get("serial")
    if not isinstance(cell, dict):
        raise InvalidCoinId(f"coin record without cell: {data!r}")
    i, j = cell.get("i"), cell.get("j")
    for value in (i, j, serial):
        # bool is an int subclass; reject it explicitly
        if not isinstance(value, int) or isinstance(value, bool):
            raise InvalidCoinId(f"coin record with non-integer fields: {data!r}")
    if serial < 0:
        raise InvalidCoinId(f"coin record with negative serial: {data!r}")
    return Coin(_resolve_cell(i, j, board), serial)
