"""Mini README: Route intensity records and baseline comparison helpers."""

from .registry import FuelType, RouteComparison, RouteRecord, RouteRegistry, VesselType

__all__ = ["FuelType", "RouteComparison", "RouteRecord", "RouteRegistry", "VesselType"]
