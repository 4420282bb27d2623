"""Geohash encoding of coordinates into 64-bit codes and neighbour search."""

from __future__ import annotations

import base64
import math

DEFAULT_BIT_SIZE = 64  # 32 bits for latitude, 32 for longitude

_DR = math.pi / 180.0
EARTH_RADIUS = 6372797.560856
MERCATOR_MAX = 20037726.37
MERCATOR_MIN = -20037726.37

_U64 = 0xFFFFFFFFFFFFFFFF
_STD_ALPHABET = "ABCDEFGHIJKLMNOPQRSTUVWXYZ234567"
_GEO_ALPHABET = "0123456789bcdefghjkmnpqrstuvwxyz"
_TO_GEO = str.maketrans(_STD_ALPHABET, _GEO_ALPHABET)

Box = list[list[float]]


def _encode0(latitude: float, longitude: float, bit_size: int) -> tuple[bytes, Box]:
    box = [[-180.0, 180.0], [-90.0, 90.0]]  # lng, lat
    pos = (longitude, latitude)
    hash_len = (bit_size >> 3) + (1 if bit_size & 7 else 0)
    buf = bytearray(hash_len)
    precision = 0
    while precision < bit_size:
        for direction, val in enumerate(pos):
            lo, hi = box[direction]
            mid = (lo + hi) / 2
            if val < mid:
                box[direction][1] = mid
            else:
                box[direction][0] = mid
                buf[precision >> 3] |= 1 << (7 - (precision & 7))
            precision += 1
            if precision == bit_size:
                break
    return bytes(buf), box


def _decode0(buf: bytes) -> Box:
    box = [[-180.0, 180.0], [-90.0, 90.0]]
    direction = 0
    for code in buf:
        for j in range(8):
            mid = (box[direction][0] + box[direction][1]) / 2
            if code & (0x80 >> j):
                box[direction][0] = mid
            else:
                box[direction][1] = mid
            direction = (direction + 1) % 2
    return box


def encode(latitude: float, longitude: float) -> int:
    """Encode a coordinate into a 64-bit geohash code."""
    buf, _ = _encode0(latitude, longitude, DEFAULT_BIT_SIZE)
    return int.from_bytes(buf, "big")


def decode(code: int) -> tuple[float, float]:
    """Decode a 64-bit geohash code into ``(latitude, longitude)``."""
    box = _decode0(from_int(code))
    lng = (box[0][0] + box[0][1]) / 2
    lat = (box[1][0] + box[1][1]) / 2
    return lat, lng


def to_string(buf: bytes) -> str:
    """Render geohash bytes in the geohash base32 alphabet, unpadded."""
    text = base64.b32encode(bytes(buf)).decode("ascii").rstrip("=")
    return text.translate(_TO_GEO)


def to_int(buf: bytes) -> int:
    """Read up to 8 geohash bytes as a big-endian code, padding on the right."""
    return int.from_bytes(bytes(buf[:8]).ljust(8, b"\x00"), "big")


def from_int(code: int) -> bytes:
    """Write a 64-bit code as 8 big-endian bytes."""
    return (code & _U64).to_bytes(8, "big")


def distance(latitude1: float, longitude1: float, latitude2: float, longitude2: float) -> float:
    """Great-circle distance between two coordinates, in metres."""
    rad_lat1 = latitude1 * _DR
    rad_lat2 = latitude2 * _DR
    a = rad_lat1 - rad_lat2
    b = longitude1 * _DR - longitude2 * _DR
    return 2 * EARTH_RADIUS * math.asin(
        math.sqrt(
            math.sin(a / 2) ** 2
            + math.cos(rad_lat1) * math.cos(rad_lat2) * math.sin(b / 2) ** 2
        )
    )


def estimate_precision_by_radius(radius_meters: float, latitude: float) -> int:
    """Return the number of geohash bits whose cells cover ``radius_meters``."""
    if radius_meters == 0:
        return DEFAULT_BIT_SIZE - 1
    precision = 1
    while radius_meters < MERCATOR_MAX:
        radius_meters *= 2
        precision += 1
    # the counter is unsigned: going below zero wraps to a huge value
    precision = (precision - 2) & _U64
    if latitude > 66 or latitude < -66:
        precision = (precision - 1) & _U64
        if latitude > 80 or latitude < -80:
            precision = (precision - 1) & _U64
    if precision < 1:
        precision = 1
    if precision > 32:
        precision = 32
    return precision * 2 - 1


def to_range(scope: bytes, precision: int) -> tuple[int, int]:
    """Convert a geohash prefix of ``precision`` bits to a ``[lower, upper)`` code range."""
    lower = to_int(scope)
    radius = (1 << (64 - precision)) & _U64
    return lower, (lower + radius) & _U64


def _valid_lat(lat: float) -> float:
    return max(-90.0, min(90.0, lat))


def _valid_lng(lng: float) -> float:
    if lng > 180:
        return -360 + lng
    if lng < -180:
        return 360 + lng
    return lng


def get_neighbours(latitude: float, longitude: float, radius_meters: float) -> list[tuple[int, int]]:
    """Return code ranges of the 9 cells around a coordinate.

    Order: upper-left, upper, upper-right, left, centre, right,
    lower-left, lower, lower-right.
    """
    precision = estimate_precision_by_radius(radius_meters, latitude)
    center, box = _encode0(latitude, longitude, precision)
    height = box[0][1] - box[0][0]
    width = box[1][1] - box[1][0]
    center_lng = (box[0][1] + box[0][0]) / 2
    center_lat = (box[1][1] + box[1][0]) / 2
    max_lat = _valid_lat(center_lat + height)
    min_lat = _valid_lat(center_lat - height)
    max_lng = _valid_lng(center_lng + width)
    min_lng = _valid_lng(center_lng - width)

    def cell(lat: float, lng: float) -> tuple[int, int]:
        buf, _ = _encode0(lat, lng, precision)
        return to_range(buf, precision)

    return [
        cell(max_lat, min_lng),
        cell(max_lat, center_lng),
        cell(max_lat, max_lng),
        cell(center_lat, min_lng),
        to_range(center, precision),
        cell(center_lat, max_lng),
        cell(min_lat, min_lng),
        cell(min_lat, center_lng),
        cell(min_lat, max_lng),
    ]