# ==============================================================================
# File: tests/test_window.py
# Purpose: visibility window activation, eviction and reload.
# ==============================================================================
import json
import unittest

from geocoin.board import Board
from geocoin.errors import PersistenceError
from geocoin.events import EventBus
from geocoin.storage_manager import StorageManager, cache_key
from geocoin.window import VisibilityWindow
from geocoin.worldgen.spawner import CacheSpawner

from tests.helpers import FlakyStore, point


def indices(cells):
    return {(c.i, c.j) for c in cells}


def square(i_range, j_range):
    return {(i, j) for i in i_range for j in j_range}


class TestVisibilityWindow(unittest.TestCase):

    def setUp(self):
        self.board = Board(1.0)
        self.store = FlakyStore()
        self.storage = StorageManager(self.store, self.board)
        self.spawner = CacheSpawner(seed="window-tests", spawn_probability=1.0, min_coins=2, max_coins=5)
        self.bus = EventBus()
        self.events = []
        for name in ("cache_activated", "cache_deactivated", "window_changed"):
            self.bus.subscribe(name, lambda _name=name, **payload: self.events.append((_name, payload)))
        self.window = VisibilityWindow(self.board, self.spawner, self.storage, 1, bus=self.bus)

    def cell(self, i, j):
        return self.board.cell_by_indices(i, j)

    def test_initial_window_is_nine_cells(self):
        change = self.window.update(point(0, 0))
        expected = square((-1, 0, 1), (-1, 0, 1))
        self.assertEqual(indices(self.window.visible_cells()), expected)
        self.assertEqual(indices(change.entered), expected)
        self.assertEqual(change.left, [])
        self.assertEqual(indices(self.window.active_caches()), expected)

    def test_caches_start_with_generated_coins(self):
        self.window.update(point(0, 0))
        for cell, cache in self.window.active_caches().items():
            self.assertEqual(cache.coin_count(), self.spawner.initial_coin_count(cell))
            self.assertIs(cache.cell, cell)

    def test_moving_shifts_the_window(self):
        self.window.update(point(0, 0))
        change = self.window.update(point(1, 0))

        self.assertEqual(indices(self.window.visible_cells()), square((0, 1, 2), (-1, 0, 1)))
        self.assertEqual(indices(change.left), square((-1,), (-1, 0, 1)))
        self.assertEqual(indices(change.entered), square((2,), (-1, 0, 1)))
        self.assertEqual(indices(change.deactivated), indices(change.left))
        for cell in change.left:
            self.assertFalse(self.window.is_active(cell))
            self.assertIsNotNone(self.store.get(cache_key(cell)))

    def test_collected_coin_stays_collected_after_leaving_and_returning(self):
        self.window.update(point(0, 0))
        corner = self.cell(-1, -1)
        cache = self.window.cache_at(corner)
        before = cache.coin_ids()
        taken = cache.collect()

        self.window.update(point(1, 0))
        self.assertIsNone(self.window.cache_at(corner))
        self.window.update(point(0, 0))

        reloaded = self.window.cache_at(corner)
        self.assertIsNot(reloaded, cache)
        self.assertEqual(reloaded.coin_ids(), [cid for cid in before if cid != taken.id])

    def test_same_position_is_a_no_op(self):
        self.window.update(point(0, 0))
        active = self.window.active_caches()
        change = self.window.update(point(0.2, 0.3))
        self.assertEqual((change.entered, change.left), ([], []))
        for cell, cache in self.window.active_caches().items():
            self.assertIs(cache, active[cell])

    def test_cells_without_a_cache_stay_empty(self):
        spawner = CacheSpawner(spawn_probability=0.0)
        window = VisibilityWindow(self.board, spawner, self.storage, 1)
        window.update(point(0, 0))
        self.assertEqual(len(window.visible_cells()), 9)
        self.assertEqual(window.active_caches(), {})

    def test_saved_record_beats_generation(self):
        self.store.set("cache-0-0", json.dumps({"coins": ["7:7#3"], "remainingCoins": 1}))
        self.window.update(point(0, 0))
        self.assertEqual(self.window.cache_at(self.cell(0, 0)).coin_ids(), ["7:7#3"])

    def test_corrupt_record_falls_back_to_generation(self):
        self.store.set("cache-0-0", "garbage")
        self.window.update(point(0, 0))
        cache = self.window.cache_at(self.cell(0, 0))
        self.assertEqual(cache.coin_count(), self.spawner.initial_coin_count(self.cell(0, 0)))

    def test_claimed_coins_are_not_regenerated(self):
        window = VisibilityWindow(self.board, self.spawner, self.storage, 0,
                                  claimed_ids=lambda: {"0:0#0"})
        window.update(point(0, 0))
        self.assertNotIn("0:0#0", window.cache_at(self.cell(0, 0)).coin_ids())

    def test_events(self):
        self.window.update(point(0, 0))
        self.events.clear()
        self.window.update(point(0, 1))

        names = [name for name, _ in self.events]
        self.assertEqual(names.count("cache_deactivated"), 3)
        self.assertEqual(names.count("cache_activated"), 3)
        self.assertEqual(names[-1], "window_changed")
        # departures are announced before arrivals
        self.assertLess(names.index("cache_deactivated"), names.index("cache_activated"))

    def test_failed_eviction_keeps_cache_in_memory(self):
        self.window.update(point(0, 0))
        leaving = self.window.cache_at(self.cell(-1, 0))
        leaving.collect()
        self.store.fail_sets = True

        with self.assertRaises(PersistenceError) as ctx:
            self.window.update(point(1, 0))
        self.assertEqual(sorted(ctx.exception.keys), ["cache--1--1", "cache--1-0", "cache--1-1"])
        # the recompute still completed
        self.assertEqual(indices(self.window.visible_cells()), square((0, 1, 2), (-1, 0, 1)))
        self.assertEqual(len(self.window.unsaved_cells()), 3)

        # the diff of the failed pass is still available
        self.assertEqual(indices(self.window.last_change.left), square((-1,), (-1, 0, 1)))

        self.store.fail_sets = False
        self.window.update(point(0, 0))
        self.assertIs(self.window.cache_at(self.cell(-1, 0)), leaving)
        self.assertEqual(self.window.unsaved_cells(), [])

    def test_persist_all_flushes_parked_caches(self):
        self.window.update(point(0, 0))
        self.store.fail_sets = True
        with self.assertRaises(PersistenceError):
            self.window.update(point(1, 0))
        self.store.fail_sets = False

        written = self.window.persist_all()
        self.assertEqual(written, 12)
        self.assertEqual(self.window.unsaved_cells(), [])
        self.assertIsNotNone(self.store.get("cache--1-0"))

    def test_persist_writes_one_cache(self):
        self.window.update(point(0, 0))
        self.window.persist(self.cell(0, 0))
        self.assertEqual(self.store.list_keys(), ["cache-0-0"])
        with self.assertRaises(KeyError):
            self.window.persist(self.cell(9, 9))

    def test_reset_forgets_without_saving(self):
        self.window.update(point(0, 0))
        self.window.reset()
        self.assertEqual(self.window.active_caches(), {})
        self.assertEqual(self.window.visible_cells(), frozenset())
        self.assertEqual(self.store.list_keys(), [])


if __name__ == '__main__':
    unittest.main()
