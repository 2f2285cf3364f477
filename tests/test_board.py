# ==============================================================================
# File: tests/test_board.py
# Purpose: cell lattice, canonical cell identity, neighbourhoods.
# ==============================================================================
import unittest

from geocoin.board import Board, Cell, LatLng


class TestBoard(unittest.TestCase):

    def setUp(self):
        self.board = Board(1e-4)

    def test_same_point_yields_same_instance(self):
        a = self.board.cell_at(0.00015, -0.00025)
        b = self.board.cell_at(0.00015, -0.00025)
        self.assertIs(a, b)

    def test_points_in_one_tile_share_a_cell(self):
        a = self.board.cell_at(0.00011, -0.00021)
        b = self.board.cell_at(0.00019, -0.00029)
        self.assertIs(a, b)
        self.assertEqual((a.i, a.j), (1, -3))

    def test_indices_lookup_is_canonical(self):
        by_point = self.board.cell_at(0.00015, -0.00025)
        self.assertIs(self.board.cell_by_indices(by_point.i, by_point.j), by_point)
        self.assertIs(self.board.cell_for_point(LatLng(0.00015, -0.00025)), by_point)

    def test_negative_coordinates_floor(self):
        board = Board(1.0)
        cell = board.cell_at(-0.5, -1.5)
        self.assertEqual((cell.i, cell.j), (-1, -2))

    def test_bounds_of(self):
        board = Board(2.0)
        south_west, north_east = board.bounds_of(Cell(2, -1))
        self.assertEqual(south_west, LatLng(4.0, -2.0))
        self.assertEqual(north_east, LatLng(6.0, 0.0))

    def test_cells_near_is_a_square(self):
        board = Board(1.0)
        cells = board.cells_near(LatLng(0.5, 0.5), 2)
        self.assertEqual(len(cells), 25)
        self.assertEqual({(c.i, c.j) for c in cells},
                         {(i, j) for i in range(-2, 3) for j in range(-2, 3)})
        for cell in cells:
            self.assertIs(board.cell_by_indices(cell.i, cell.j), cell)

    def test_cells_near_radius_zero(self):
        board = Board(1.0)
        cells = board.cells_near(LatLng(3.2, -7.9), 0)
        self.assertEqual(cells, {board.cell_by_indices(3, -8)})

    def test_known_cell_count_grows_lazily(self):
        board = Board(1.0)
        self.assertEqual(board.known_cell_count, 0)
        board.cell_at(0.1, 0.1)
        board.cell_at(0.2, 0.2)
        board.cell_by_indices(5, 5)
        self.assertEqual(board.known_cell_count, 2)

    def test_rejects_non_positive_tile_width(self):
        with self.assertRaises(ValueError):
            Board(0)


if __name__ == '__main__':
    unittest.main()
