"""Geohash encoding and decoding.

A geohash interleaves longitude and latitude bisection bits (longitude
first) and packs every 5 bits into one base32 symbol. Strings sharing a
prefix lie in the same cell, which lets the driver index answer proximity
queries as prefix lookups.
"""

from driver_matching.core.exceptions import InvalidGeohashError, InvalidPrecisionError

BASE32 = "0123456789bcdefghjkmnpqrstuvwxyz"
DEFAULT_PRECISION = 6
MIN_PRECISION = 1
MAX_PRECISION = 8

_BASE32_INDEX = {char: index for index, char in enumerate(BASE32)}

# Approximate cell width in km per precision (index 0 = precision 1)
_CELL_WIDTH_KM: tuple[float, ...] = (
    5000.0,  # ±2500 km
    1250.0,  # ±630 km
    156.0,  # ±78 km
    39.1,  # ±20 km
    4.9,  # ±2.4 km
    1.2,  # ±0.61 km
    0.153,  # ±0.076 km
    0.0382,  # ±0.019 km
)


def validate_precision(precision: int) -> int:
    """Return precision unchanged, or raise if it is outside [1, 8]."""
    if not MIN_PRECISION <= precision <= MAX_PRECISION:
        raise InvalidPrecisionError(
            f"Precision must be between {MIN_PRECISION} and {MAX_PRECISION}",
            details={"precision": precision},
        )
    return precision


def encode(latitude: float, longitude: float, precision: int = DEFAULT_PRECISION) -> str:
    """Encode a coordinate into a geohash of the given length.

    Args:
        latitude: Latitude in degrees (-90 to 90)
        longitude: Longitude in degrees (-180 to 180)
        precision: Number of base32 characters to emit

    Returns:
        Geohash string of exactly ``precision`` characters
    """
    if precision < MIN_PRECISION:
        raise InvalidPrecisionError(
            f"Precision must be at least {MIN_PRECISION}", details={"precision": precision}
        )

    lat_lo, lat_hi = -90.0, 90.0
    lon_lo, lon_hi = -180.0, 180.0

    chars: list[str] = []
    value = 0
    bit_count = 0
    even = True

    while len(chars) < precision:
        if even:
            mid = (lon_lo + lon_hi) / 2
            if longitude > mid:
                value = (value << 1) | 1
                lon_lo = mid
            else:
                value <<= 1
                lon_hi = mid
        else:
            mid = (lat_lo + lat_hi) / 2
            if latitude > mid:
                value = (value << 1) | 1
                lat_lo = mid
            else:
                value <<= 1
                lat_hi = mid

        even = not even
        bit_count += 1

        if bit_count == 5:
            chars.append(BASE32[value])
            value = 0
            bit_count = 0

    return "".join(chars)


def decode_bounds(geohash: str) -> tuple[float, float, float, float]:
    """Decode a geohash into its cell bounds.

    Returns:
        Tuple of (min_lat, max_lat, min_lon, max_lon)
    """
    if not geohash:
        raise InvalidGeohashError("Geohash cannot be empty")

    lat_lo, lat_hi = -90.0, 90.0
    lon_lo, lon_hi = -180.0, 180.0
    even = True

    for char in geohash:
        index = _BASE32_INDEX.get(char)
        if index is None:
            raise InvalidGeohashError(
                f"Invalid geohash character: {char}", details={"geohash": geohash}
            )

        for mask in (16, 8, 4, 2, 1):
            if even:
                mid = (lon_lo + lon_hi) / 2
                if index & mask:
                    lon_lo = mid
                else:
                    lon_hi = mid
            else:
                mid = (lat_lo + lat_hi) / 2
                if index & mask:
                    lat_lo = mid
                else:
                    lat_hi = mid
            even = not even

    return lat_lo, lat_hi, lon_lo, lon_hi


def decode(geohash: str) -> tuple[float, float]:
    """Decode a geohash to the center point of its cell as (lat, lon)."""
    lat_lo, lat_hi, lon_lo, lon_hi = decode_bounds(geohash)
    return (lat_lo + lat_hi) / 2, (lon_lo + lon_hi) / 2


def precision_to_width_km(precision: int) -> float:
    """Approximate cell width in kilometers for a precision between 1 and 8."""
    validate_precision(precision)
    return _CELL_WIDTH_KM[precision - 1]
