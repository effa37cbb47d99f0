import logging
from dataclasses import dataclass, field, replace
from datetime import UTC, datetime

from driver_matching.core.exceptions import DriverNotFoundError, DuplicateDriverError
from driver_matching.core.locks import ReadWriteLock
from driver_matching.geo.geohash import DEFAULT_PRECISION, encode, validate_precision
from driver_matching.matching.geohash_trie import GeohashTrie, TrieStats
from driver_matching.metrics.prometheus_exporter import record_mutation
from driver_matching.service_logging import log_driver_context

logger = logging.getLogger(__name__)


@dataclass(eq=False)
class Driver:
    """Current state of one driver.

    ``geohash`` is derived from the coordinates by the registry and must not
    be assigned by callers. Equality is by ``driver_id``.
    """

    driver_id: str
    name: str
    latitude: float
    longitude: float
    geohash: str = ""
    available: bool = True
    last_updated: datetime = field(default_factory=lambda: datetime.now(UTC))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Driver):
            return NotImplemented
        return self.driver_id == other.driver_id

    def __hash__(self) -> int:
        return hash(self.driver_id)

    def snapshot(self) -> "Driver":
        return replace(self)


class DriverRegistry:
    """Authoritative driver store backed by a geohash trie.

    The registry owns every Driver record; the trie holds references to the
    same objects. Records returned to callers are snapshots, so outside code
    cannot change a driver's position behind the index's back.

    Thread-safe: each mutation updates the id map and the trie under one
    write lock, so readers never see one without the other. Queries share
    the read lock.
    """

    def __init__(
        self,
        index_precision: int = DEFAULT_PRECISION,
        index: GeohashTrie | None = None,
    ) -> None:
        self._index_precision = validate_precision(index_precision)
        # The registry lock guards every index call, so its own trie runs unlocked
        self._index = index or GeohashTrie(thread_safe=False)
        self._drivers: dict[str, Driver] = {}
        self._lock = ReadWriteLock()

    @property
    def index_precision(self) -> int:
        return self._index_precision

    def register_driver(
        self,
        driver_id: str,
        name: str,
        latitude: float,
        longitude: float,
        available: bool = True,
    ) -> Driver:
        # Geohash is computed before any state changes so a failure leaves nothing behind
        geohash = encode(latitude, longitude, self._index_precision)
        driver = Driver(
            driver_id=driver_id,
            name=name,
            latitude=latitude,
            longitude=longitude,
            geohash=geohash,
            available=available,
        )

        with log_driver_context(driver_id, operation="register"), self._lock.write_locked():
            if driver_id in self._drivers:
                logger.warning("Rejected duplicate registration")
                raise DuplicateDriverError(driver_id)

            self._index.insert(geohash, driver)
            self._drivers[driver_id] = driver
            count = len(self._drivers)
            logger.info("Registered driver at %s", geohash)
            record_mutation("register", count)
            return driver.snapshot()

    def update_location(self, driver_id: str, latitude: float, longitude: float) -> Driver:
        new_geohash = encode(latitude, longitude, self._index_precision)

        with log_driver_context(driver_id, operation="update_location"), self._lock.write_locked():
            driver = self._drivers.get(driver_id)
            if driver is None:
                raise DriverNotFoundError(driver_id)

            old_geohash = driver.geohash
            if old_geohash != new_geohash:
                self._index.relocate(old_geohash, new_geohash, driver)
                driver.geohash = new_geohash
                logger.debug("Relocated driver %s -> %s", old_geohash, new_geohash)

            # Coordinates always move, even inside the same cell
            driver.latitude = latitude
            driver.longitude = longitude
            driver.last_updated = datetime.now(UTC)
            record_mutation("update_location", len(self._drivers))
            return driver.snapshot()

    def set_availability(self, driver_id: str, available: bool) -> Driver:
        with log_driver_context(driver_id, operation="set_availability"), self._lock.write_locked():
            driver = self._drivers.get(driver_id)
            if driver is None:
                raise DriverNotFoundError(driver_id)

            driver.available = available
            logger.debug("Set availability to %s", available)
            record_mutation("set_availability", len(self._drivers))
            return driver.snapshot()

    def remove_driver(self, driver_id: str) -> bool:
        with log_driver_context(driver_id, operation="remove"), self._lock.write_locked():
            driver = self._drivers.get(driver_id)
            if driver is None:
                return False

            if not self._index.delete(driver.geohash, driver):
                logger.warning("Driver missing from index at %s during removal", driver.geohash)
            del self._drivers[driver_id]
            logger.info("Removed driver")
            record_mutation("remove", len(self._drivers))
            return True

    def get_driver(self, driver_id: str) -> Driver | None:
        with self._lock.read_locked():
            driver = self._drivers.get(driver_id)
            return driver.snapshot() if driver else None

    def list_drivers(self) -> list[Driver]:
        with self._lock.read_locked():
            return [driver.snapshot() for driver in self._drivers.values()]

    def search_by_prefix(self, prefix: str) -> list[Driver]:
        """Snapshots of all indexed drivers whose geohash starts with prefix."""
        with self._lock.read_locked():
            return [driver.snapshot() for driver in self._index.search_by_prefix(prefix)]

    @property
    def driver_count(self) -> int:
        with self._lock.read_locked():
            return len(self._drivers)

    def index_stats(self) -> TrieStats:
        with self._lock.read_locked():
            return self._index.stats()

    def clear(self) -> None:
        """Drop every driver from the map and the index."""
        with self._lock.write_locked():
            self._index.clear()
            self._drivers.clear()
            record_mutation("clear", 0)
