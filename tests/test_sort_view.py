"""
Tests for bar geometry in the array view.
"""

import pytest

from sorting.sort_view import MIN_BAR_HEIGHT, bar_extent


class TestBarExtent:
    def test_positive_scales_up(self) -> None:
        assert bar_extent(50, 2.0) == 100.0

    def test_negative_hangs_below_baseline(self) -> None:
        assert bar_extent(-40, 2.0) == -80.0

    @pytest.mark.parametrize("value, expected", [(0, MIN_BAR_HEIGHT), (1, MIN_BAR_HEIGHT), (-1, -MIN_BAR_HEIGHT)])
    def test_small_values_keep_minimum_height(self, value, expected) -> None:
        assert bar_extent(value, 1.0) == expected

    def test_mirror_values_have_mirror_heights(self) -> None:
        assert bar_extent(-30, 3.2) == -bar_extent(30, 3.2)
