"""Tests for the value and band scales used by the chart engine."""

import pytest

from src.generator.scales import BandScale, LinearScale, value_domain


# ===========================================================================
# value_domain
# ===========================================================================

class TestValueDomain:

    def test_positive_values_include_zero(self):
        assert value_domain([5, 10, 20]) == (0.0, 20)

    def test_negative_values_include_zero(self):
        assert value_domain([-8, -2]) == (-8, 0.0)

    def test_mixed_sign(self):
        assert value_domain([10, -5]) == (-5, 10)

    def test_all_zero_widened(self):
        assert value_domain([0, 0, 0]) == (0.0, 1.0)

    def test_empty_widened(self):
        assert value_domain([]) == (0.0, 1.0)

    def test_accepts_generator(self):
        assert value_domain(v for v in (1, 2, 3)) == (0.0, 3)


# ===========================================================================
# LinearScale
# ===========================================================================

class TestLinearScale:

    def test_maps_endpoints(self):
        scale = LinearScale((0, 100), (0, 500))
        assert scale(0) == 0
        assert scale(100) == 500
        assert scale(50) == 250

    def test_inverted_range_for_vertical_axis(self):
        y = LinearScale((0, 10), (400, 100))
        assert y(0) == 400
        assert y(10) == 100
        assert y(5) == pytest.approx(250)

    def test_zero_sits_between_mixed_values(self):
        y = LinearScale((-5, 10), (440, 60))
        assert y(10) < y(0) < y(-5)

    def test_degenerate_domain_returns_range_start(self):
        assert LinearScale((3, 3), (10, 20))(3) == 10

    def test_ticks_count_plus_one(self):
        ticks = LinearScale((0, 100), (0, 1)).ticks(5)
        assert ticks == [0, 20, 40, 60, 80, 100]

    def test_ticks_zero_count(self):
        assert LinearScale((2, 8), (0, 1)).ticks(0) == [2]


# ===========================================================================
# BandScale
# ===========================================================================

class TestBandScale:

    def test_step_and_bandwidth(self):
        band = BandScale(["a", "b", "c", "d"], (0, 400), padding=0.2)
        assert band.step == 100
        assert band.bandwidth == pytest.approx(80)

    def test_start_and_center(self):
        band = BandScale(["a", "b"], (0, 200), padding=0.2)
        assert band.start(0) == pytest.approx(10)
        assert band.start(1) == pytest.approx(110)
        assert band.center(0) == pytest.approx(50)
        assert band.center(1) == pytest.approx(150)

    def test_bands_do_not_overlap(self):
        band = BandScale(["a", "b", "c"], (80, 1160))
        for i in range(len(band) - 1):
            assert band.start(i) + band.bandwidth < band.start(i + 1)

    def test_single_label(self):
        band = BandScale(["only"], (0, 100), padding=0.2)
        assert band.bandwidth == pytest.approx(80)
        assert band.center(0) == pytest.approx(50)

    def test_no_labels_does_not_divide_by_zero(self):
        band = BandScale([], (0, 100))
        assert len(band) == 0
        assert band.step == 100
