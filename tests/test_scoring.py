"""Unit tests for mode-weighted route scoring and ranking."""

from datetime import datetime

import pytest

from fleetroute.domain.entities import GeoPoint, RouteCandidate, RouteFeatures
from fleetroute.domain.enums import OptimizationMode
from fleetroute.domain.scoring import (
    MODE_WEIGHTS,
    rank,
    score,
    time_of_day_factor,
)

ORIGIN = GeoPoint(28.6139, 77.2090)


def _candidate(score_value: float, label: str) -> RouteCandidate:
    return RouteCandidate(
        origin=ORIGIN,
        destination=GeoPoint(28.7, 77.1),
        distance_km=10.0,
        duration_min=15.0,
        cost_estimate=245.0,
        score=score_value,
        mode=OptimizationMode.TIME,
        label=label,
    )


class TestWeights:
    @pytest.mark.parametrize("mode", list(OptimizationMode))
    def test_weights_sum_to_one(self, mode):
        assert MODE_WEIGHTS[mode].total() == pytest.approx(1.0)

    def test_distance_mode_favours_distance_over_time(self):
        w_dist = MODE_WEIGHTS[OptimizationMode.DISTANCE]
        w_time = MODE_WEIGHTS[OptimizationMode.TIME]
        assert w_dist.distance / w_dist.time > w_time.distance / w_time.time

    @pytest.mark.parametrize(
        "mode",
        [OptimizationMode.DISTANCE, OptimizationMode.FUEL, OptimizationMode.COST],
    )
    def test_distance_dominates_distance_family(self, mode):
        w = MODE_WEIGHTS[mode]
        assert w.distance == max(
            w.distance, w.time, w.traffic, w.weather, w.road_quality, w.time_of_day
        )

    def test_time_mode_dominated_by_time(self):
        w = MODE_WEIGHTS[OptimizationMode.TIME]
        assert w.time == 0.7
        assert w.time > w.distance


class TestScore:
    def test_pure_distance_and_time(self):
        features = RouteFeatures(distance_km=10.0, duration_min=20.0)
        # 10 x 0.7 + 20 x 0.1, perfect road, no penalties
        assert score(features, OptimizationMode.DISTANCE) == 9.0

    def test_all_features_balanced(self):
        features = RouteFeatures(
            distance_km=10.0,
            duration_min=20.0,
            traffic_factor=1.5,
            weather_impact=1.0,
            road_quality=6.0,
            time_of_day_factor=1.0,
        )
        # 3.0 + 5.0 + 0.3 + 0.1 + 0.4 + 0.05
        assert score(features, OptimizationMode.BALANCED) == 8.85

    def test_better_road_lowers_score(self):
        bad = RouteFeatures(10.0, 20.0, road_quality=2.0)
        good = RouteFeatures(10.0, 20.0, road_quality=9.0)
        for mode in OptimizationMode:
            assert score(good, mode) < score(bad, mode)

    def test_road_quality_clamped(self):
        over = RouteFeatures(10.0, 20.0, road_quality=15.0)
        top = RouteFeatures(10.0, 20.0, road_quality=10.0)
        assert score(over, OptimizationMode.FUEL) == score(top, OptimizationMode.FUEL)

    def test_rounded_to_two_places(self):
        features = RouteFeatures(distance_km=1.23456, duration_min=0.0)
        assert score(features, OptimizationMode.DISTANCE) == 0.86

    def test_distance_mode_more_sensitive_to_distance(self):
        base = RouteFeatures(10.0, 20.0)
        longer = RouteFeatures(11.0, 20.0)
        slower = RouteFeatures(10.0, 21.0)

        d_dist = score(longer, OptimizationMode.DISTANCE) - score(base, OptimizationMode.DISTANCE)
        d_time = score(slower, OptimizationMode.DISTANCE) - score(base, OptimizationMode.DISTANCE)
        assert d_dist > d_time

        t_dist = score(longer, OptimizationMode.TIME) - score(base, OptimizationMode.TIME)
        t_time = score(slower, OptimizationMode.TIME) - score(base, OptimizationMode.TIME)
        assert t_time > t_dist


class TestRank:
    def test_lowest_score_first(self):
        ranked = rank([_candidate(5.0, "b"), _candidate(1.0, "a"), _candidate(9.0, "c")])
        assert [c.label for c in ranked] == ["a", "b", "c"]

    def test_ties_keep_insertion_order(self):
        ranked = rank([_candidate(2.0, "first"), _candidate(2.0, "second"), _candidate(1.0, "x")])
        assert [c.label for c in ranked] == ["x", "first", "second"]

    def test_idempotent(self):
        items = [_candidate(s, str(s)) for s in (3.2, 1.1, 7.5, 0.4)]
        once = rank(items)
        assert rank(once) == once
        assert rank(items) == once


class TestTimeOfDay:
    @pytest.mark.parametrize(
        "hour,expected",
        [(8, 1.0), (17, 0.8), (12, 0.3), (20, 0.2), (2, 0.0), (23, 0.0)],
    )
    def test_bands(self, hour, expected):
        assert time_of_day_factor(datetime(2026, 10, 19, hour, 30)) == expected

    def test_unknown_departure_is_neutral(self):
        assert time_of_day_factor(None) == 0.0
