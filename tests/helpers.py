# tests/helpers.py
# Shared fixtures: a unit-sized board config and a store that can be told to fail.

from geocoin.board import LatLng
from geocoin.errors import PersistenceError
from geocoin.storage import MemoryStore
from geocoin.worldgen.config import merge_cfg

# One degree per cell keeps positions readable: cell (i, j) is centred on (i + .5, j + .5)
TEST_CFG = merge_cfg({
    "tile_width": 1.0,
    "neighborhood_size": 1,
    "cache_spawn_probability": 1.0,
    "min_coins": 1,
    "max_coins": 3,
    "seed": "unit-tests",
    "start": {"lat": 0.5, "lng": 0.5},
    "save_name": "unit-tests",
})


def point(i, j):
    return LatLng(i + 0.5, j + 0.5)


def cfg_with(**overrides):
    return merge_cfg({**TEST_CFG, **overrides})


class FlakyStore(MemoryStore):
    """MemoryStore that refuses writes on demand."""

    def __init__(self, initial=None):
        super().__init__(initial)
        self.fail_sets = False
        self.fail_deletes_after = None
        self.deletes = 0

    def set(self, key, value):
        if self.fail_sets:
            raise PersistenceError("quota exceeded", [key])
        super().set(key, value)

    def delete(self, key):
        if self.fail_deletes_after is not None and self.deletes >= self.fail_deletes_after:
            raise PersistenceError("store is read-only", [key])
        self.deletes += 1
        super().delete(key)
