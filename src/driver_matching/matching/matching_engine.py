"""Nearest-driver matching over the geohash index."""

import logging
from dataclasses import dataclass

from driver_matching.geo.distance import (
    estimate_eta_minutes,
    format_distance,
    format_eta,
    haversine_distance_km,
)
from driver_matching.geo.geohash import encode, validate_precision
from driver_matching.matching.driver_registry import Driver, DriverRegistry
from driver_matching.matching.min_heap import MinHeap
from driver_matching.metrics.prometheus_exporter import observe_latency, record_search_precision
from driver_matching.settings import MatchingSettings

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RankedCandidate:
    """A driver paired with its distance and ETA for one query."""

    driver: Driver
    distance_km: float
    eta_minutes: float

    def __lt__(self, other: "RankedCandidate") -> bool:
        return self.distance_km < other.distance_km

    @property
    def formatted_distance(self) -> str:
        return format_distance(self.distance_km)

    @property
    def formatted_eta(self) -> str:
        return format_eta(self.eta_minutes)


@dataclass(frozen=True)
class AvailabilityStats:
    available_count: int
    unavailable_count: int
    avg_distance_km: float

    @property
    def total_count(self) -> int:
        return self.available_count + self.unavailable_count


class MatchingEngine:
    """Answers nearest-driver queries with adaptive geohash precision.

    A search starts at the finest precision of the configured ladder
    (5, 4, 3 by default) and widens one step at a time while fewer than
    ``min_candidates`` available drivers are found. Candidates are ranked by
    haversine distance with a per-query min-heap so only the requested
    number of extractions is paid for.

    Only drivers under the pickup point's geohash prefix are considered;
    a driver just across a cell boundary is not found until the search
    widens to a shared parent cell.
    """

    def __init__(
        self,
        registry: DriverRegistry,
        settings: MatchingSettings | None = None,
    ) -> None:
        self._registry = registry
        self._settings = settings or MatchingSettings()

    def find_nearby(self, latitude: float, longitude: float, precision: int = 5) -> list[Driver]:
        """Available drivers inside the geohash cell of (lat, lon) at precision."""
        validate_precision(precision)
        prefix = encode(latitude, longitude, precision)
        return [d for d in self._registry.search_by_prefix(prefix) if d.available]

    def find_closest(self, latitude: float, longitude: float, k: int = 5) -> list[RankedCandidate]:
        """Up to k available drivers in ascending distance order."""
        with observe_latency("find_closest"):
            return self._closest(latitude, longitude, k)

    def find_closest_driver(self, latitude: float, longitude: float) -> RankedCandidate | None:
        closest = self.find_closest(latitude, longitude, 1)
        return closest[0] if closest else None

    def find_within_radius(
        self,
        latitude: float,
        longitude: float,
        max_distance_km: float,
        k: int = 10,
    ) -> list[RankedCandidate]:
        """Up to k ranked drivers no farther than max_distance_km.

        Only the closest ``radius_widening_factor * k`` candidates are
        considered, so when more drivers than that lie inside the radius
        some of them are left out.
        """
        with observe_latency("find_within_radius"):
            budget = k * self._settings.radius_widening_factor
            ranked = self._closest(latitude, longitude, budget)
            return [c for c in ranked if c.distance_km <= max_distance_km][:k]

    def availability_stats(self, latitude: float, longitude: float) -> AvailabilityStats:
        """Available/unavailable counts and mean distance around a point.

        Counts are taken over the same fallback-found nearby set that
        find_closest ranks. That set only ever holds available drivers, so
        ``unavailable_count`` is always 0.
        """
        with observe_latency("availability_stats"):
            nearby = self._search_with_fallback(latitude, longitude)
            available = [d for d in nearby if d.available]

            avg_distance = 0.0
            if available:
                total = sum(
                    haversine_distance_km(latitude, longitude, d.latitude, d.longitude)
                    for d in available
                )
                avg_distance = total / len(available)

            return AvailabilityStats(
                available_count=len(available),
                unavailable_count=len(nearby) - len(available),
                avg_distance_km=avg_distance,
            )

    def _closest(self, latitude: float, longitude: float, k: int) -> list[RankedCandidate]:
        return self._rank(latitude, longitude, self._search_with_fallback(latitude, longitude), k)

    def _search_with_fallback(self, latitude: float, longitude: float) -> list[Driver]:
        """Available drivers in the first cell of the ladder holding enough of them.

        Falls through to the coarsest precision and returns whatever it
        holds, possibly nothing. Ladder values are checked when settings load.
        """
        nearby: list[Driver] = []
        precisions = self._settings.search_precisions
        for step, precision in enumerate(precisions):
            prefix = encode(latitude, longitude, precision)
            nearby = [d for d in self._registry.search_by_prefix(prefix) if d.available]
            if len(nearby) >= self._settings.min_candidates or step == len(precisions) - 1:
                record_search_precision(precision)
                break
            logger.debug(
                "Found %d drivers at precision %d, widening search", len(nearby), precision
            )
        return nearby

    def _rank(
        self,
        latitude: float,
        longitude: float,
        drivers: list[Driver],
        k: int,
    ) -> list[RankedCandidate]:
        if not drivers or k < 1:
            return []

        speed = self._settings.average_speed_kmh
        candidates = []
        for driver in drivers:
            distance = haversine_distance_km(latitude, longitude, driver.latitude, driver.longitude)
            candidates.append(
                RankedCandidate(
                    driver=driver,
                    distance_km=distance,
                    eta_minutes=estimate_eta_minutes(distance, speed),
                )
            )

        heap = MinHeap.from_sequence(candidates)
        return [heap.extract_min() for _ in range(min(k, len(heap)))]
