"""
Route Cost Model  (Strategy Pattern)
====================================

Formula
-------
Cost = Base_Fare + Distance x Rate_Per_KM + Duration x Rate_Per_Min

* **Route tariff**:   base 50, 12 / km, 5 / min (all configurable).
* **Booking tariff**: base rate from the vehicle class, 20 / km, 5 / min;
  duration defaults to ``max(30, round(2 x distance))`` minutes.

When no duration is supplied it is derived from the assumed average speed:
``Duration = Distance / Speed x 60``.

Complexity: O(1) per calculation.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Optional

from .distance import haversine_km
from .entities import BookingQuote, CapacityExceeded, GeoPoint
from .enums import VEHICLE_CLASS_RATES, VehicleClass

DEFAULT_BASE_FARE = 50.0
DEFAULT_DISTANCE_RATE = 12.0
DEFAULT_TIME_RATE = 5.0
DEFAULT_SPEED_KMH = 40.0


def estimate_cost(
    distance_km: float,
    duration_min: float,
    *,
    base_fare: float = DEFAULT_BASE_FARE,
    distance_rate: float = DEFAULT_DISTANCE_RATE,
    time_rate: float = DEFAULT_TIME_RATE,
) -> float:
    """Route cost with the given tariff, rounded to 2 dp."""
    return RouteTariff(base_fare, distance_rate, time_rate).calculate(
        distance_km, duration_min
    )


def estimate_duration(
    distance_km: float, speed_kmh: float = DEFAULT_SPEED_KMH
) -> float:
    """Minutes needed to cover *distance_km* at *speed_kmh*."""
    if speed_kmh <= 0:
        raise ValueError("speed_kmh must be positive")
    return max(0.0, distance_km) / speed_kmh * 60


# ── Strategy hierarchy ────────────────────────────────────────────────


class PricingStrategy(ABC):
    @abstractmethod
    def calculate(self, distance_km: float, duration_min: float) -> float: ...


class RouteTariff(PricingStrategy):
    def __init__(
        self,
        base_fare: float = DEFAULT_BASE_FARE,
        distance_rate: float = DEFAULT_DISTANCE_RATE,
        time_rate: float = DEFAULT_TIME_RATE,
    ):
        self.base_fare = base_fare
        self.distance_rate = distance_rate
        self.time_rate = time_rate

    def calculate(self, distance_km: float, duration_min: float) -> float:
        # negative inputs are treated as zero so cost never drops below base
        raw = (
            self.base_fare
            + max(0.0, distance_km) * self.distance_rate
            + max(0.0, duration_min) * self.time_rate
        )
        return round(raw, 2)


class BookingTariff(PricingStrategy):
    """Vehicle-class base rate plus the booking per-km / per-minute rates."""

    def __init__(
        self,
        vehicle_class: VehicleClass,
        distance_rate: float = 20.0,
        time_rate: float = 5.0,
    ):
        self.vehicle_class = vehicle_class
        self.base_rate, self.capacity = VEHICLE_CLASS_RATES[vehicle_class]
        self.distance_rate = distance_rate
        self.time_rate = time_rate

    def calculate(self, distance_km: float, duration_min: float) -> float:
        return self.breakdown(distance_km, duration_min).total_cost

    def breakdown(self, distance_km: float, duration_min: int) -> BookingQuote:
        distance_cost = round(max(0.0, distance_km) * self.distance_rate, 2)
        time_cost = round(max(0, duration_min) * self.time_rate, 2)
        return BookingQuote(
            vehicle_class=self.vehicle_class,
            distance_km=round(distance_km, 2),
            duration_min=duration_min,
            base_cost=self.base_rate,
            distance_cost=distance_cost,
            time_cost=time_cost,
            total_cost=round(self.base_rate + distance_cost + time_cost, 2),
        )


# ── Facades ───────────────────────────────────────────────────────────


class CostModel:
    """High-level API used by the route planner and the API layer."""

    def __init__(
        self,
        base_fare: float = DEFAULT_BASE_FARE,
        distance_rate: float = DEFAULT_DISTANCE_RATE,
        time_rate: float = DEFAULT_TIME_RATE,
        assumed_speed_kmh: float = DEFAULT_SPEED_KMH,
    ):
        self.tariff = RouteTariff(base_fare, distance_rate, time_rate)
        self.assumed_speed_kmh = assumed_speed_kmh

    def estimate_duration(self, distance_km: float) -> float:
        return estimate_duration(distance_km, self.assumed_speed_kmh)

    def estimate_cost(
        self, distance_km: float, duration_min: Optional[float] = None
    ) -> float:
        if duration_min is None:
            duration_min = self.estimate_duration(distance_km)
        return self.tariff.calculate(distance_km, duration_min)


class BookingEstimator:
    """Fare quotes for customer bookings, priced by vehicle class."""

    def __init__(
        self,
        distance_rate: float = 20.0,
        time_rate: float = 5.0,
        min_duration_min: int = 30,
    ):
        self.distance_rate = distance_rate
        self.time_rate = time_rate
        self.min_duration_min = min_duration_min

    def default_duration(self, distance_km: float) -> int:
        return max(self.min_duration_min, round(distance_km * 2))

    def quote(
        self,
        vehicle_class: VehicleClass,
        pickup: GeoPoint,
        dropoff: GeoPoint,
        duration_min: Optional[int] = None,
        passengers: int = 1,
    ) -> BookingQuote:
        tariff = BookingTariff(vehicle_class, self.distance_rate, self.time_rate)
        if passengers > tariff.capacity:
            raise CapacityExceeded(
                f"{vehicle_class.value} seats {tariff.capacity}, "
                f"{passengers} passengers requested"
            )

        distance = haversine_km(pickup.validate(), dropoff.validate())
        if duration_min is None:
            duration_min = self.default_duration(distance)
        return tariff.breakdown(distance, duration_min)
