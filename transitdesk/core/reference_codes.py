import enum


class TransportMode(str, enum.Enum):
    ROAD = "ROAD"
    SEA = "SEA"
    AIR = "AIR"
    RAIL = "RAIL"


class CargoType(str, enum.Enum):
    GENERAL = "GENERAL"
    DANGEROUS = "DANGEROUS"
    PERISHABLE = "PERISHABLE"
    FRAGILE = "FRAGILE"
    BULK = "BULK"
    CONTAINER = "CONTAINER"
    PALLETIZED = "PALLETIZED"
    OTHER = "OTHER"


class Priority(str, enum.Enum):
    STANDARD = "STANDARD"
    NORMAL = "NORMAL"
    EXPRESS = "EXPRESS"
    URGENT = "URGENT"


# Delivery time multiplier applied to the per-mode median.
PRIORITY_DELIVERY_FACTORS: dict[Priority, float] = {
    Priority.STANDARD: 1.0,
    Priority.NORMAL: 0.8,
    Priority.EXPRESS: 0.6,
    Priority.URGENT: 0.4,
}

# Accepted range for configured surcharge fractions (-500% .. +500%).
SURCHARGE_MIN = -5.0
SURCHARGE_MAX = 5.0
