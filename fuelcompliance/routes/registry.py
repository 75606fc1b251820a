"""Mini README: Route intensity registry and baseline comparisons.

Structure:
    * VesselType / FuelType - enums for the route filters.
    * RouteRecord - voyage level GHG intensity and emissions figures.
    * RouteComparison - one route measured against the baseline and target.
    * RouteRegistry - filtering, baseline selection and comparison helpers.

Baseline selection is plain mutable UI state and has nothing to do with the
compliance ledger. The registry stores deterministic demo routes in memory so
the dashboard can show comparisons without external data sources.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Iterable, List, Optional

import numpy as np

from ..configuration import DEFAULT_TARGET_INTENSITY
from ..logging_utils import get_logger

LOGGER = get_logger(__name__)


class VesselType(str, Enum):
    CONTAINER = "Container"
    BULK_CARRIER = "BulkCarrier"
    TANKER = "Tanker"
    RORO = "RoRo"


class FuelType(str, Enum):
    HFO = "HFO"
    LNG = "LNG"
    MGO = "MGO"


@dataclass(slots=True)
class RouteRecord:
    """GHG intensity summary for one route and reporting year."""

    route_id: str
    vessel_type: VesselType
    fuel_type: FuelType
    year: int
    ghg_intensity: float
    fuel_consumption_t: float
    distance_km: float
    total_emissions_t: float
    is_baseline: bool = False

    def as_dict(self) -> Dict[str, object]:
        return {
            "route_id": self.route_id,
            "vessel_type": self.vessel_type.value,
            "fuel_type": self.fuel_type.value,
            "year": self.year,
            "ghg_intensity": self.ghg_intensity,
            "fuel_consumption_t": self.fuel_consumption_t,
            "distance_km": self.distance_km,
            "total_emissions_t": self.total_emissions_t,
            "is_baseline": self.is_baseline,
        }


@dataclass(frozen=True, slots=True)
class RouteComparison:
    """Intensity of a route relative to the baseline and the target."""

    baseline: RouteRecord
    comparison: RouteRecord
    percent_diff: float
    target_diff: float
    compliant: bool

    def as_dict(self) -> Dict[str, object]:
        return {
            "baseline_route_id": self.baseline.route_id,
            "route_id": self.comparison.route_id,
            "baseline_intensity": self.baseline.ghg_intensity,
            "ghg_intensity": self.comparison.ghg_intensity,
            "percent_diff": self.percent_diff,
            "target_diff": self.target_diff,
            "compliant": self.compliant,
        }


class RouteRegistry:
    """Hold route records and compare them against a chosen baseline."""

    def __init__(
        self,
        routes: Optional[Iterable[RouteRecord]] = None,
        *,
        target_intensity: float = DEFAULT_TARGET_INTENSITY,
    ) -> None:
        if routes is None:
            routes = self._build_demo_routes()
        self._routes: Dict[str, RouteRecord] = {}
        for route in routes:
            if route.route_id in self._routes:
                raise ValueError(f"Route {route.route_id} already registered.")
            self._routes[route.route_id] = route
        if sum(route.is_baseline for route in self._routes.values()) > 1:
            raise ValueError("At most one route may be marked as baseline.")
        self.target_intensity = target_intensity
        LOGGER.debug("Initialised RouteRegistry with %s routes", len(self._routes))

    @staticmethod
    def _build_demo_routes() -> List[RouteRecord]:
        """Create deterministic demo routes for UI previews."""

        return [
            RouteRecord("R001", VesselType.CONTAINER, FuelType.HFO, 2024, 91.0, 5000.0, 12000.0, 4500.0, True),
            RouteRecord("R002", VesselType.BULK_CARRIER, FuelType.LNG, 2024, 88.0, 4800.0, 11500.0, 4200.0),
            RouteRecord("R003", VesselType.TANKER, FuelType.MGO, 2024, 93.5, 5100.0, 12500.0, 4700.0),
            RouteRecord("R004", VesselType.RORO, FuelType.HFO, 2025, 89.2, 4900.0, 11800.0, 4300.0),
            RouteRecord("R005", VesselType.CONTAINER, FuelType.LNG, 2025, 90.5, 4950.0, 11900.0, 4400.0),
        ]

    def list_routes(
        self,
        *,
        vessel_type: Optional[str] = None,
        fuel_type: Optional[str] = None,
        year: Optional[int] = None,
    ) -> List[RouteRecord]:
        """Return routes matching every provided filter, in registration order."""

        vessel = VesselType(vessel_type) if vessel_type else None
        fuel = FuelType(fuel_type) if fuel_type else None
        return [
            route
            for route in self._routes.values()
            if (vessel is None or route.vessel_type is vessel)
            and (fuel is None or route.fuel_type is fuel)
            and (year is None or route.year == year)
        ]

    def get_route(self, route_id: str) -> RouteRecord:
        if route_id not in self._routes:
            raise KeyError(f"Route {route_id} is not registered")
        return self._routes[route_id]

    def get_baseline(self) -> Optional[RouteRecord]:
        for route in self._routes.values():
            if route.is_baseline:
                return route
        return None

    def set_baseline(self, route_id: str) -> RouteRecord:
        """Mark ``route_id`` as the only baseline route."""

        target = self.get_route(route_id)
        for route in self._routes.values():
            route.is_baseline = route is target
        LOGGER.info("Route %s set as baseline", route_id)
        return target

    def compare_to_baseline(self) -> List[RouteComparison]:
        """Compare every non-baseline route against the baseline and target."""

        baseline = self.get_baseline()
        if baseline is None:
            return []
        comparisons = []
        for route in self._routes.values():
            if route is baseline:
                continue
            comparisons.append(
                RouteComparison(
                    baseline=baseline,
                    comparison=route,
                    percent_diff=(route.ghg_intensity / baseline.ghg_intensity - 1) * 100,
                    target_diff=(route.ghg_intensity / self.target_intensity - 1) * 100,
                    compliant=route.ghg_intensity <= self.target_intensity,
                )
            )
        return comparisons

    def summarise_metrics(self, routes: Optional[List[RouteRecord]] = None) -> Dict[str, float]:
        """Aggregate intensity, distance and emissions for the given routes."""

        if routes is None:
            routes = list(self._routes.values())
        if not routes:
            return {
                "route_count": 0,
                "average_intensity": 0.0,
                "total_distance_km": 0.0,
                "total_emissions_t": 0.0,
                "compliant_routes": 0,
                "compliance_rate": 0.0,
            }
        intensities = np.array([route.ghg_intensity for route in routes], dtype=float)
        compliant = int(np.count_nonzero(intensities <= self.target_intensity))
        return {
            "route_count": len(routes),
            "average_intensity": float(np.mean(intensities)),
            "total_distance_km": float(np.sum([route.distance_km for route in routes])),
            "total_emissions_t": float(np.sum([route.total_emissions_t for route in routes])),
            "compliant_routes": compliant,
            "compliance_rate": compliant / len(routes),
        }
