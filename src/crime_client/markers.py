"""
Neighborhood markers: fixed map positions and count-based sizing.
"""

import math
from collections import Counter

from .geocoding import Location

MIN_RADIUS = 8.0
MAX_RADIUS = 40.0

# Map view defaults for St. Paul
DEFAULT_CENTER = Location(44.955139, -93.102222)
DEFAULT_ZOOM = 12
# (north-west corner, south-east corner); the map center is kept inside
CITY_BOUNDS = (Location(45.008206, -93.217977), Location(44.883658, -92.993787))

NEIGHBORHOOD_LOCATIONS = {
    1: Location(44.942068, -93.020521),
    2: Location(44.977413, -93.025156),
    3: Location(44.931244, -93.079578),
    4: Location(44.956192, -93.060189),
    5: Location(44.978883, -93.068163),
    6: Location(44.975766, -93.113887),
    7: Location(44.959639, -93.121271),
    8: Location(44.947700, -93.128505),
    9: Location(44.930276, -93.119911),
    10: Location(44.982752, -93.147910),
    11: Location(44.963631, -93.167548),
    12: Location(44.973971, -93.197965),
    13: Location(44.949043, -93.178261),
    14: Location(44.934848, -93.176736),
    15: Location(44.913106, -93.170779),
    16: Location(44.937705, -93.136997),
    17: Location(44.949203, -93.093739),
}


def marker_radius(count, max_count):
    """
    Radius for a neighborhood with `count` incidents when the busiest one has
    `max_count`.

    Area grows with the count, so the radius grows with its square root.
    Neighborhoods with no incidents keep MIN_RADIUS and stay clickable.
    """
    if max_count <= 0 or count <= 0:
        return MIN_RADIUS
    share = min(count / max_count, 1.0)
    return MIN_RADIUS + (MAX_RADIUS - MIN_RADIUS) * math.sqrt(share)


def count_by_neighborhood(incidents):
    """Incident counts for every fixed neighborhood (0 where none matched)."""
    counts = Counter(incident["neighborhood_number"] for incident in incidents)
    return {number: counts.get(number, 0) for number in NEIGHBORHOOD_LOCATIONS}


def marker_radii(counts):
    """Radius for each neighborhood in counts, relative to the largest count."""
    max_count = max(counts.values(), default=0)
    return {number: marker_radius(count, max_count) for number, count in counts.items()}


def clamp_to_bounds(location, bounds=CITY_BOUNDS):
    north_west, south_east = bounds
    return Location(
        min(max(location.lat, south_east.lat), north_west.lat),
        min(max(location.lng, north_west.lng), south_east.lng),
    )
