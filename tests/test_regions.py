"""Tests for region growth."""

import random

import pytest

from src.core.models import Position
from src.generation import (
    solve_seed,
    grow_regions,
    grow_fallback_regions,
    strategy_for_wave,
    GrowthStrategy,
)
from src.verifiers import validate_regions, is_region_connected


def assert_valid_partition(grid_size, seed, regions):
    """Regions cover the grid exactly once, are connected and keep their anchors."""
    assert len(regions) == grid_size
    assert validate_regions(grid_size, regions) == []

    all_cells = set()
    for index, region in enumerate(regions):
        assert region.id == index
        assert region.anchor == seed[index]
        assert region.anchor in region.cells
        assert is_region_connected(region.cells)
        assert not (all_cells & region.cells)
        all_cells |= region.cells

    assert len(all_cells) == grid_size * grid_size


class TestStrategyCycle:
    """Test the wave strategy rotation."""

    def test_changes_every_three_waves(self):
        """Strategy rotates distance, random, size every three waves."""
        strategies = [strategy_for_wave(wave) for wave in range(9)]
        assert strategies[:3] == [GrowthStrategy.DISTANCE_WEIGHTED] * 3
        assert strategies[3:6] == [GrowthStrategy.RANDOM] * 3
        assert strategies[6:9] == [GrowthStrategy.SIZE_BALANCING] * 3

    def test_cycle_wraps(self):
        """Wave 9 is back to distance weighting."""
        assert strategy_for_wave(9) == GrowthStrategy.DISTANCE_WEIGHTED


class TestGrowRegions:
    """Test the wave grower."""

    def test_four_by_four_seed(self):
        """Known 4x4 seed grows into four connected regions covering 16 cells."""
        seed = [Position(0, 1), Position(1, 3), Position(2, 0), Position(3, 2)]
        regions = grow_regions(seed, 4, rng=random.Random(0))

        assert_valid_partition(4, seed, regions)
        assert sum(region.size for region in regions) == 16

    @pytest.mark.parametrize("grid_size", [4, 5, 6, 8, 10, 12])
    @pytest.mark.parametrize("complexity", ["easy", "medium", "hard"])
    def test_partition_invariants(self, grid_size, complexity):
        """Every size and complexity yields an exact connected partition."""
        for trial in range(3):
            rng = random.Random(grid_size * 31 + trial)
            seed = solve_seed(grid_size, rng)
            regions = grow_regions(seed, grid_size, complexity, rng)
            assert_valid_partition(grid_size, seed, regions)

    def test_reproducible_with_same_rng(self):
        """Same seed and random state give the same regions."""
        seed = solve_seed(7, random.Random(3))
        first = grow_regions(seed, 7, rng=random.Random(11))
        second = grow_regions(seed, 7, rng=random.Random(11))
        assert first == second

    def test_regions_have_colors(self):
        """Each region gets a distinct palette color on boards up to 12."""
        seed = solve_seed(8, random.Random(5))
        regions = grow_regions(seed, 8, rng=random.Random(5))
        assert len({region.color for region in regions}) == 8

    def test_single_anchor_takes_whole_board(self):
        """One anchor grows over every cell."""
        regions = grow_regions([Position(1, 1)], 3, rng=random.Random(0))
        assert len(regions) == 1
        assert regions[0].size == 9


class TestGrowRegionsErrors:
    """Test seed validation."""

    def test_empty_seed(self):
        """An empty seed is rejected."""
        with pytest.raises(ValueError):
            grow_regions([], 4)

    def test_out_of_bounds_seed(self):
        """Seed positions must lie on the board."""
        with pytest.raises(ValueError):
            grow_regions([Position(0, 0), Position(4, 4)], 4)

    def test_duplicate_seed(self):
        """Seed positions must be distinct."""
        with pytest.raises(ValueError):
            grow_regions([Position(0, 0), Position(0, 0)], 4)


class TestFallbackRegions:
    """Test the fallback grower."""

    @pytest.mark.parametrize("complexity", ["easy", "medium", "hard"])
    def test_partition_invariants(self, complexity):
        """Fallback regions are also an exact connected partition."""
        for grid_size in (4, 6, 9):
            rng = random.Random(grid_size)
            seed = solve_seed(grid_size, rng)
            regions = grow_fallback_regions(seed, grid_size, complexity, rng)
            assert_valid_partition(grid_size, seed, regions)
