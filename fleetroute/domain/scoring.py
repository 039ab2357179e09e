"""
Weighted Route Scoring
======================

Each optimization mode selects a weight vector over six route features:

  score = w_d x distance_km
        + w_t x duration_min
        + w_tr x traffic_factor
        + w_w x weather_impact
        + w_r x (10 - road_quality)
        + w_h x time_of_day_factor

The score is a **penalty**: lower is better, and ``rank`` sorts ascending.
Road quality enters inversely because a better road should cost less.

Weights per mode sum to 1.0; the mode's dominant feature carries most of
the weight.  ``BALANCED`` spreads weight across all features.

Complexity
----------
* ``score``: O(1)
* ``rank``:  O(N log N), stable (ties keep insertion order)
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Iterable, Optional

from .entities import RouteCandidate, RouteFeatures
from .enums import OptimizationMode

MAX_ROAD_QUALITY = 10.0


@dataclass(frozen=True)
class ScoreWeights:
    distance: float
    time: float
    traffic: float
    weather: float
    road_quality: float
    time_of_day: float

    def total(self) -> float:
        return (
            self.distance
            + self.time
            + self.traffic
            + self.weather
            + self.road_quality
            + self.time_of_day
        )


MODE_WEIGHTS: dict[OptimizationMode, ScoreWeights] = {
    OptimizationMode.DISTANCE: ScoreWeights(0.7, 0.1, 0.05, 0.05, 0.05, 0.05),
    OptimizationMode.TIME: ScoreWeights(0.1, 0.7, 0.05, 0.05, 0.05, 0.05),
    OptimizationMode.FUEL: ScoreWeights(0.5, 0.1, 0.1, 0.1, 0.1, 0.1),
    OptimizationMode.COST: ScoreWeights(0.4, 0.2, 0.1, 0.1, 0.1, 0.1),
    OptimizationMode.BALANCED: ScoreWeights(0.3, 0.25, 0.2, 0.1, 0.1, 0.05),
}


def score(features: RouteFeatures, mode: OptimizationMode) -> float:
    """Weighted penalty for *features* under *mode*, rounded to 2 dp."""
    w = MODE_WEIGHTS[mode]
    road_penalty = MAX_ROAD_QUALITY - min(
        MAX_ROAD_QUALITY, max(0.0, features.road_quality)
    )
    total = (
        features.distance_km * w.distance
        + features.duration_min * w.time
        + features.traffic_factor * w.traffic
        + features.weather_impact * w.weather
        + road_penalty * w.road_quality
        + features.time_of_day_factor * w.time_of_day
    )
    return round(total, 2)


def rank(candidates: Iterable[RouteCandidate]) -> list[RouteCandidate]:
    """Best (lowest score) first.  ``sorted`` is stable, so ties keep order."""
    return sorted(candidates, key=lambda c: c.score)


def time_of_day_factor(departure: Optional[datetime]) -> float:
    """
    Congestion proxy from the departure hour (0 = free-flowing).

    Bands: morning peak 07-09, evening peak 16-18, daytime 10-15,
    evening 19-21, night 00-04.  Unknown departure is treated as neutral.
    """
    if departure is None:
        return 0.0

    hour = departure.hour
    if 7 <= hour <= 9:
        return 1.0
    if 16 <= hour <= 18:
        return 0.8
    if 10 <= hour <= 15:
        return 0.3
    if 19 <= hour <= 21:
        return 0.2
    return 0.0
