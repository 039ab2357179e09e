"""Domain enumerations and the per-class booking rate card."""

import enum


class OptimizationMode(str, enum.Enum):
    TIME = "time"
    DISTANCE = "distance"
    FUEL = "fuel"
    COST = "cost"
    BALANCED = "balanced"


class RouteSource(str, enum.Enum):
    ROUTING_SERVICE = "routing_service"
    HAVERSINE = "haversine"


class VehicleClass(str, enum.Enum):
    ECONOMY = "economy"
    PREMIUM = "premium"
    SUV = "suv"
    ELECTRIC = "electric"
    VAN = "van"
    LUXURY = "luxury"


# vehicle class -> (base rate INR, passenger capacity)
VEHICLE_CLASS_RATES: dict[VehicleClass, tuple[float, int]] = {
    VehicleClass.ECONOMY: (150.0, 4),
    VehicleClass.PREMIUM: (250.0, 4),
    VehicleClass.SUV: (350.0, 7),
    VehicleClass.ELECTRIC: (200.0, 4),
    VehicleClass.VAN: (450.0, 12),
    VehicleClass.LUXURY: (600.0, 4),
}
