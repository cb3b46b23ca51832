"""
Tests for the distance post-filter.
"""

import math

import pytest
from numpy.testing import assert_array_equal

from ais_reception.models.reception import ObservationSample, ReceptionAccumulator
from ais_reception.services.aggregator import add_sample
from ais_reception.services.post_filter import apply_distance_filter, distance_mask


def _accumulator(pairs):
    acc = ReceptionAccumulator()
    for i, (distance, bearing) in enumerate(pairs):
        add_sample(acc, ObservationSample(
            distance_nm=distance,
            bearing_deg=bearing,
            mmsi=100 + i,
            date="20250601",
            hour=12,
            lat=51.0 + i / 100,
            lon=-0.2,
        ))
    return acc


@pytest.fixture
def acc():
    return _accumulator([(5.0, 10.0), (15.0, 20.0), (30.0, 200.0), (60.0, 350.0)])


class TestDistanceMask:
    """Tests for the inclusive distance mask."""

    def test_disabled_bounds(self):
        assert distance_mask([1.0, 2.0]).tolist() == [True, True]
        assert distance_mask([1.0, 2.0], -5.0, 0.0).tolist() == [True, True]

    def test_inclusive(self):
        mask = distance_mask([10.0, 20.0, 50.0, 50.1], 10.0, 50.0)
        assert mask.tolist() == [True, True, True, False]


class TestApplyDistanceFilter:
    """Tests for the filtered view."""

    def test_min_and_max(self, acc):
        view = apply_distance_filter(acc, min_distance=10, max_distance=50)

        assert_array_equal(view.distances, [15.0, 30.0])
        assert_array_equal(view.bearings, [20.0, 200.0])
        assert [p.mmsi for p in view.positions] == [101, 102]
        assert view.count == 2
        assert view.source_count == 4

    def test_no_bounds_keeps_everything(self, acc):
        view = apply_distance_filter(acc)

        assert_array_equal(view.distances, acc.distances)
        assert_array_equal(view.bearings, acc.bearings)
        assert view.positions == acc.positions

    def test_alignment(self, acc):
        """Each filtered position matches its distance and bearing."""
        view = apply_distance_filter(acc, max_distance=40)
        for distance, bearing, position in zip(view.distances, view.bearings, view.positions):
            assert position.distance == distance
            assert position.bearing == bearing

    def test_sectors_recomputed_with_min(self, acc):
        view = apply_distance_filter(acc, min_distance=10)
        assert view.sector_counts == {15: 1, 195: 1, 345: 1}

    def test_sectors_kept_with_max_only(self, acc):
        view = apply_distance_filter(acc, max_distance=20)
        assert view.sector_counts == acc.sector_counts
        assert view.sector_counts is not acc.sector_counts

    def test_accumulator_untouched(self, acc):
        apply_distance_filter(acc, min_distance=10, max_distance=50)
        assert acc.distances == [5.0, 15.0, 30.0, 60.0]

    def test_nothing_left(self, acc):
        view = apply_distance_filter(acc, min_distance=100)
        assert view.count == 0
        assert view.positions == []
        assert view.sector_counts == {}

    def test_nan_bound_rejected(self, acc):
        with pytest.raises(ValueError):
            apply_distance_filter(acc, min_distance=math.nan)

    def test_logs_counts(self, acc, caplog):
        with caplog.at_level("INFO"):
            apply_distance_filter(acc, min_distance=10, max_distance=50)
        assert "Filtered from 4 to 2 positions" in caplog.text
