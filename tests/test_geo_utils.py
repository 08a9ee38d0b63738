#!/usr/bin/env -S uv run
# /// script
# requires-python = ">=3.10"
# dependencies = []
# ///
"""Test great-circle distance and bearing on a spherical Earth."""

import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from qsomap.geo_utils import calc_bearing, calc_distance_km, bearing_to_direction
from qsomap.locator import grid_to_latlon


def test_bearing_cardinal():
    """Bearings along the equator and meridians."""
    cases = [
        ((0, 0, 0, 90), 90.0, "due east"),
        ((0, 0, 45, 0), 0.0, "due north"),
        ((45, 0, 0, 0), 180.0, "due south"),
        ((0, 90, 0, 0), 270.0, "due west"),
        ((0, 0, 0, 180), 90.0, "halfway around the equator"),
    ]
    for args, expected, label in cases:
        bearing = calc_bearing(*args)
        print(f"  {label}: {bearing:.1f}° (expected: {expected:.1f}°)")
        assert abs(bearing - expected) < 0.1


def test_bearing_between_grids():
    # Folsom (CM98kq) to London (IO91wl): roughly north-east
    home = grid_to_latlon("CM98kq", center=True)
    london = grid_to_latlon("IO91wl", center=True)
    bearing = calc_bearing(home.lat, home.lon, london.lat, london.lon)
    print(f"  CM98kq -> IO91wl: {bearing:.1f}° (expected: ~33° NNE)")
    assert 30 < bearing < 50
    assert bearing_to_direction(bearing) == "NNE"


def test_distance_known_values():
    cases = [
        ((0, 0, 0, 90), 10018, "quarter equator"),
        ((0, 0, 0, 180), 20015, "half equator"),
        ((0, 0, 90, 0), 10008, "equator to pole"),
        ((38.6, -121.2, 51.5, -0.2), 8600, "Folsom to London"),
    ]
    for args, expected, label in cases:
        dist = calc_distance_km(*args)
        print(f"  {label}: {dist:.0f} km (expected: ~{expected:,} km)")
        assert abs(dist - expected) < 200


def test_distance_symmetric_and_zero():
    assert calc_distance_km(47.5, -122.3, 47.5, -122.3) == 0
    a = calc_distance_km(47.5, -122.3, 35.7, 139.7)
    b = calc_distance_km(35.7, 139.7, 47.5, -122.3)
    assert abs(a - b) < 1e-6


def test_bearing_to_direction():
    cases = [
        (0, "N"), (359, "N"), (22.5, "NNE"), (45, "NE"), (90, "E"),
        (135, "SE"), (180, "S"), (225, "SW"), (270, "W"), (315, "NW"), (340, "NNW"),
    ]
    for bearing, expected in cases:
        assert bearing_to_direction(bearing) == expected, f"{bearing}° -> {expected}"


if __name__ == "__main__":
    print("=" * 60)
    print("Testing geo_utils on spherical Earth")
    print("=" * 60)

    test_bearing_cardinal()
    test_bearing_between_grids()
    test_distance_known_values()
    test_distance_symmetric_and_zero()
    test_bearing_to_direction()

    print("\n" + "=" * 60)
    print("✅ ALL TESTS PASSED")
    print("=" * 60)
