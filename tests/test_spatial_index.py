# tests/test_spatial_index.py

"""Tests for the spatial grid index and the R-tree backend."""

import random

import pytest

from core.exceptions import ConfigurationError, InvalidCellSizeError
from spatial import RTreeIndex, SpatialGridIndex
from spatial.entities import calculate_distance_3d


@pytest.fixture(params=["grid", "rtree"])
def index(request):
    """Every range-query backend, so both honor the same contract."""
    if request.param == "grid":
        return SpatialGridIndex(cell_size=10.0)
    return RTreeIndex()


class TestIndexBasics:
    """Test basic add/remove/size operations."""

    def test_create_index(self, index):
        """A new index is empty."""
        assert index.size == 0
        assert len(index) == 0

    def test_add_item(self, index, make_marker):
        """Added items are counted and contained."""
        item = make_marker((100.0, 0.0, 200.0))
        index.add(item)

        assert index.size == 1
        assert item in index

    def test_add_multiple_items(self, index, make_marker):
        """Can add many items."""
        for i in range(10):
            index.add(make_marker((float(i * 10), 0.0, float(i * 10))))

        assert index.size == 10

    def test_remove_item(self, index, make_marker):
        """Removed items are no longer counted."""
        item = make_marker((100.0, 0.0, 200.0))
        index.add(item)
        index.remove(item)

        assert index.size == 0
        assert item not in index

    def test_remove_nonexistent_item(self, index, make_marker):
        """Removing an item that was never added does nothing."""
        index.remove(make_marker((1.0, 2.0, 3.0)))
        assert index.size == 0

    def test_relocate_item(self, index, make_marker):
        """Relocating keeps the index consistent with the new position."""
        item = make_marker((0.0, 0.0, 0.0))
        index.add(item)

        index.relocate(item, (95.0, 0.0, 95.0))

        assert item.position == (95.0, 0.0, 95.0)
        assert index.get_in_range((0.0, 0.0, 0.0), 5.0) == []
        assert index.get_in_range((95.0, 0.0, 95.0), 1.0) == [item]

    def test_clear(self, index, make_marker):
        """Clear drops every item."""
        for i in range(10):
            index.add(make_marker((float(i), 0.0, float(i))))

        index.clear()
        assert index.size == 0


class TestRangeQueries:
    """Test radius queries."""

    def test_query_empty(self, index):
        """Query on an empty index returns an empty list."""
        assert index.get_in_range((0.0, 0.0, 0.0), 50.0) == []

    def test_round_trip_at_zero_range(self, index, make_marker):
        """An added item is found at its own position with range 0, and gone after removal."""
        positions = [(0.0, 0.0, 0.0), (-13.5, 4.0, 27.25), (1e4, -3.0, -1e4), (9.999, 0.0, 10.0)]
        items = [make_marker(p) for p in positions]
        for item in items:
            index.add(item)

        for item in items:
            assert item in index.get_in_range(item.position, 0.0)

        for item in items:
            index.remove(item)
            assert item not in index.get_in_range(item.position, 0.0)

    def test_height_counts_in_distance(self, index, make_marker):
        """Items stacked vertically are separated by 3D distance."""
        ground = make_marker((0.0, 0.0, 0.0))
        air = make_marker((0.0, 100.0, 0.0))
        index.add(ground)
        index.add(air)

        assert index.get_in_range((0.0, 0.0, 0.0), 10.0) == [ground]
        assert set(index.get_in_range((0.0, 50.0, 0.0), 50.0)) == {ground, air}

    def test_boundary_is_inclusive(self, index, make_marker):
        """An item exactly at the query radius is included."""
        item = make_marker((30.0, 0.0, 40.0))
        index.add(item)

        assert index.get_in_range((0.0, 0.0, 0.0), 50.0) == [item]
        assert index.get_in_range((0.0, 0.0, 0.0), 49.9) == []

    def test_negative_range_matches_nothing(self, index, make_marker):
        """A negative radius returns nothing."""
        item = make_marker((0.0, 0.0, 0.0))
        index.add(item)

        assert index.get_in_range((0.0, 0.0, 0.0), -1.0) == []

    def test_entities_near_alias(self, index, make_marker):
        """entities_near answers the same as get_in_range."""
        item = make_marker((3.0, 0.0, 4.0))
        index.add(item)

        assert index.entities_near((0.0, 0.0, 0.0), 5.0) == [item]

    def test_matches_brute_force(self, index, make_marker):
        """Results equal a linear scan on random data, for many random queries."""
        rng = random.Random(7)
        items = [
            make_marker((rng.uniform(-200, 200), rng.uniform(-20, 20), rng.uniform(-200, 200)))
            for _ in range(400)
        ]
        for item in items:
            index.add(item)

        for _ in range(200):
            center = (rng.uniform(-220, 220), rng.uniform(-25, 25), rng.uniform(-220, 220))
            radius = rng.uniform(0, 60)

            expected = {i for i in items if calculate_distance_3d(center, i.position) <= radius}
            results = index.get_in_range(center, radius)

            assert len(results) == len(set(results))
            assert set(results) == expected

    def test_large_query_range(self, index, make_marker):
        """A radius spanning many cells still finds far items."""
        far = make_marker((95.0, 0.0, -95.0))
        index.add(far)

        assert index.get_in_range((0.0, 0.0, 0.0), 150.0) == [far]


class TestSpatialGridIndex:
    """Grid-specific behavior."""

    def test_rejects_non_positive_cell_size(self):
        """Cell size must be positive."""
        with pytest.raises(InvalidCellSizeError):
            SpatialGridIndex(cell_size=0)
        with pytest.raises(ConfigurationError):
            SpatialGridIndex(cell_size=-5.0)

    def test_cell_key_floors_negative_coordinates(self, grid):
        """Negative coordinates land in negative cells."""
        assert grid.cell_key((-0.5, 0.0, 0.5)) == (-1, 0)
        assert grid.cell_key((25.0, 99.0, -10.0)) == (2, -1)

    def test_height_is_not_bucketed(self, grid, make_marker):
        """Items differing only in height share a cell."""
        grid.add(make_marker((1.0, 0.0, 1.0)))
        grid.add(make_marker((1.0, 500.0, 1.0)))

        assert grid.cell_count == 1
        assert grid.size == 2

    def test_empty_cells_are_dropped(self, grid, make_marker):
        """Removing the last item of a cell deletes the cell."""
        a = make_marker((1.0, 0.0, 1.0))
        b = make_marker((55.0, 0.0, 1.0))
        grid.add(a)
        grid.add(b)
        assert grid.cell_count == 2

        grid.remove(a)
        assert grid.cell_count == 1
        grid.remove(b)
        assert grid.cell_count == 0

    def test_size_sums_cells(self, grid, make_marker):
        """Size counts each item once across cells."""
        for x in range(5):
            for z in range(5):
                grid.add(make_marker((x * 7.0, 0.0, z * 7.0)))

        assert grid.size == 25
        assert len(list(grid)) == 25
        assert grid.cell_count == 9

    def test_adding_twice_keeps_one_copy(self, grid, make_marker):
        """Cells are sets; re-adding an item does not duplicate it."""
        item = make_marker((1.0, 0.0, 1.0))
        grid.add(item)
        grid.add(item)

        assert grid.size == 1
        assert grid.get_in_range((1.0, 0.0, 1.0), 5.0) == [item]

    def test_huge_radius_on_sparse_grid(self, grid, make_marker):
        """A radius covering millions of cells only looks at occupied ones."""

        class CountingCells(dict):
            lookups = 0

            def get(self, key, default=None):
                CountingCells.lookups += 1
                return super().get(key, default)

        near = make_marker((3.0, 0.0, 4.0))
        far = make_marker((-60_000.0, 0.0, 70_000.0))
        beyond = make_marker((200_000.0, 0.0, 0.0))
        for item in (near, far, beyond):
            grid.add(item)
        grid._cells = CountingCells(grid._cells)

        results = grid.get_in_range((0.0, 0.0, 0.0), 100_000.0)

        assert set(results) == {near, far}
        assert CountingCells.lookups == 0

    def test_small_radius_on_dense_grid(self, grid, make_marker):
        """Small queries on a dense grid match only the items within the radius."""
        for x in range(-50, 50, 5):
            for z in range(-50, 50, 5):
                grid.add(make_marker((float(x), 0.0, float(z))))

        results = grid.get_in_range((0.0, 0.0, 0.0), 5.0)

        assert {item.position for item in results} == {
            (0.0, 0.0, 0.0),
            (5.0, 0.0, 0.0),
            (-5.0, 0.0, 0.0),
            (0.0, 0.0, 5.0),
            (0.0, 0.0, -5.0),
        }

    def test_moved_without_remove_is_stale(self, grid, make_marker):
        """Mutating a position without remove/add leaves the item in its old cell."""
        item = make_marker((1.0, 0.0, 1.0))
        grid.add(item)

        item.position = (500.0, 0.0, 500.0)

        # Still bucketed by the old cell, so a query there sees nothing in range
        assert grid.get_in_range((500.0, 0.0, 500.0), 1.0) == []
        assert grid.size == 1


class TestRTreeIndex:
    """R-tree specific behavior."""

    def test_nearest(self, make_marker):
        """Nearest neighbors come back sorted by distance."""
        index = RTreeIndex()
        near = make_marker((1.0, 0.0, 0.0))
        mid = make_marker((5.0, 0.0, 0.0))
        far = make_marker((50.0, 0.0, 0.0))
        for item in (far, near, mid):
            index.add(item)

        results = index.nearest((0.0, 0.0, 0.0), k=2)

        assert [item for item, _ in results] == [near, mid]
        assert results[0][1] == pytest.approx(1.0)
