"""Known service types and their recommended intervals."""

import re
from dataclasses import dataclass
from typing import Dict, List, Optional


@dataclass(frozen=True)
class ServiceInfo:
    """Catalog entry for a maintenance service."""

    name: str
    subtitle: str
    default_interval: Optional[float] = None
    time_based: bool = False


BATTERY_REPLACEMENT = "Battery Replacement"


def normalize_name(name: str) -> str:
    """Collapse whitespace and lower-case a service name for lookup."""
    return re.sub(r"\s+", " ", name).strip().lower()


_SERVICES: List[ServiceInfo] = [
    ServiceInfo("Engine Oil", "Change every 10,000 km", 10000),
    ServiceInfo("Gearbox Oil", "Change every 50,000 km", 50000),
    ServiceInfo("Tires", "Town: 50k-80k km, Off-road: 40k-50k km"),
    ServiceInfo(
        BATTERY_REPLACEMENT,
        "Car batteries last 2-3 years. Replace earlier if voltage drops.",
        time_based=True,
    ),
    ServiceInfo("Shocks/Springs", "Town: 50k-60k km, Off-road: 30k-40k km"),
    ServiceInfo("Brake Pad", "Replace every 30,000-70,000 km"),
    ServiceInfo("Coolant", "Replace every 60,000 km", 60000),
    ServiceInfo("Spark Plugs", "Replace every 30,000-90,000 km"),
    ServiceInfo("Wheel Bearing", "Inspect every 50,000-80,000 km"),
    ServiceInfo("Timing Belt/Chain", "Inspect/replace every 100,000-160,000 km"),
    ServiceInfo("Wheel Alignment", "Check every 10,000 km", 10000),
    ServiceInfo("Air Filter", "Replace every 15,000-30,000 km"),
    ServiceInfo("Air Conditioning", "Inspect service system (filter/dryer as needed)"),
    ServiceInfo("Oil Change", "Change every 10,000 km", 10000),
    ServiceInfo("Fuel Filter", "Replace every 30,000-60,000 km"),
    ServiceInfo("Tire Pressure", "Check regularly"),
    ServiceInfo("Inspection", "General check as needed / schedule"),
    ServiceInfo("Car Wash", "As needed"),
    ServiceInfo("Lights", "Inspect every service"),
    ServiceInfo("Gearbox Oil Change", "Change every 50,000 km", 50000),
]

SERVICE_CATALOG: Dict[str, ServiceInfo] = {
    normalize_name(info.name): info for info in _SERVICES
}


def lookup(name: str) -> Optional[ServiceInfo]:
    """Find a catalog entry by (case/whitespace-insensitive) name."""
    return SERVICE_CATALOG.get(normalize_name(name))


def is_time_based(name: str) -> bool:
    """True for services whose due date depends only on elapsed time."""
    info = lookup(name)
    return info is not None and info.time_based


def default_interval(name: str) -> Optional[float]:
    info = lookup(name)
    return info.default_interval if info else None


def all_services() -> List[ServiceInfo]:
    return list(_SERVICES)
