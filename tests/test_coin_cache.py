# ==============================================================================
# File: tests/test_coin_cache.py
# Purpose: coin identity and the cache's collect/deposit transitions.
# ==============================================================================
import unittest

from geocoin.board import Board, Cell
from geocoin.cache import Cache
from geocoin.coin import Coin, coin_from_dict, coin_id, parse_coin_id
from geocoin.errors import DuplicateCoin, EmptyCache, InvalidCoinId


class TestCoin(unittest.TestCase):

    def test_id_format(self):
        self.assertEqual(coin_id(Coin(Cell(3, -2), 0)), "3:-2#0")
        self.assertEqual(Coin(Cell(-10, 7), 42).id, "-10:7#42")

    def test_parse_round_trips_the_id(self):
        coin = parse_coin_id("3:-2#1")
        self.assertEqual(coin, Coin(Cell(3, -2), 1))
        self.assertEqual(coin.id, "3:-2#1")

    def test_parse_binds_to_canonical_cell(self):
        board = Board(1.0)
        coin = parse_coin_id("1:2#0", board)
        self.assertIs(coin.cell, board.cell_by_indices(1, 2))

    def test_parse_rejects_garbage(self):
        for bad in ("3-2#0", "a:b#c", "3:-2#-1", "3:-2", "", "3:-2#1#2"):
            with self.subTest(bad=bad):
                with self.assertRaises(InvalidCoinId):
                    parse_coin_id(bad)

    def test_parse_rejects_non_canonical_spellings(self):
        for bad in ("03:-2#1", "3:-2#01", "-0:0#0", " 3:-2#0 ", "3:-2#0\n", "٣:-2#0"):
            with self.subTest(bad=bad):
                with self.assertRaises(InvalidCoinId):
                    parse_coin_id(bad)

    def test_parse_accepts_what_coin_id_writes(self):
        for cid in ("0:0#0", "-10:7#120", "3:-2#1"):
            self.assertEqual(coin_id(parse_coin_id(cid)), cid)

    def test_coin_from_dict_accepts_both_shapes(self):
        a = coin_from_dict({"cell": {"i": 4, "j": 5}, "serial": 6})
        b = coin_from_dict("4:5#6")
        self.assertEqual(a, b)

    def test_coin_from_dict_rejects_bad_fields(self):
        for bad in ({"cell": {"i": 1}, "serial": 0},
                    {"cell": {"i": 1, "j": 2}, "serial": True},
                    {"cell": {"i": "1", "j": 2}, "serial": 0},
                    {"serial": 0},
                    42):
            with self.subTest(bad=bad):
                with self.assertRaises(InvalidCoinId):
                    coin_from_dict(bad)


class TestCache(unittest.TestCase):

    def setUp(self):
        self.cell = Cell(3, -2)
        self.cache = Cache.create(self.cell, 3)

    def test_create_mints_serials_in_order(self):
        self.assertEqual(self.cache.coin_ids(), ["3:-2#0", "3:-2#1", "3:-2#2"])
        self.assertEqual(self.cache.remaining_coins, 3)
        self.assertEqual(self.cache.coin_count(), 3)

    def test_collect_takes_the_newest_coin(self):
        coin = self.cache.collect()
        self.assertEqual(coin.id, "3:-2#2")
        self.assertEqual(self.cache.coin_count(), 2)
        self.assertEqual(self.cache.remaining_coins, 2)
        self.assertFalse(self.cache.contains("3:-2#2"))

    def test_deposit_then_collect_is_last_in_first_out(self):
        foreign = Coin(Cell(9, 9), 0)
        self.cache.deposit(foreign)
        self.assertEqual(self.cache.coin_count(), 4)
        self.assertEqual(self.cache.remaining_coins, 4)
        self.assertIs(self.cache.collect(), foreign)

    def test_collect_on_empty_cache_raises(self):
        empty = Cache.create(self.cell, 0)
        with self.assertRaises(EmptyCache):
            empty.collect()
        self.assertEqual(empty.coin_count(), 0)
        self.assertEqual(empty.remaining_coins, 0)

    def test_duplicate_deposit_is_refused(self):
        with self.assertRaises(DuplicateCoin):
            self.cache.deposit(Coin(Cell(3, -2), 1))
        self.assertEqual(self.cache.coin_count(), 3)
        self.assertEqual(self.cache.remaining_coins, 3)

    def test_collect_and_deposit_conserve_coins(self):
        held = [self.cache.collect() for _ in range(3)]
        other = Cache.create(Cell(0, 0), 2)
        for coin in held:
            other.deposit(coin)
        self.assertTrue(self.cache.is_empty())
        self.assertEqual(other.coin_count(), 5)
        self.assertEqual(len(set(other.coin_ids())), 5)


if __name__ == '__main__':
    unittest.main()
