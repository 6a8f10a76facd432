"""
Spatial analysis helper functions.

Provides utilities for:
- KD-Tree spatial indexing
- Proximity pair detection
- Overlap grouping (connected components of the proximity graph)
- Bounding box and coverage calculations
"""
from typing import Optional, Sequence
import numpy as np
from scipy.spatial import KDTree
from scipy.sparse import coo_matrix
from scipy.sparse.csgraph import connected_components
import logging

from mosaic_api.domain.models import (
    CoverageBoundingBox,
    GeoPoint,
    GroupBoundingBox,
    OverlapGroup,
)
from mosaic_api.utils.geo_distance import haversine_km

logger = logging.getLogger(__name__)

# Relative slack for the KD-Tree search radius; candidates are re-checked exactly
SEARCH_RADIUS_SLACK = 1e-9


def build_kdtree(coordinates: list[tuple[float, float]]) -> KDTree:
    """
    Build a KD-Tree for efficient spatial queries.

    Args:
        coordinates: List of (latitude, longitude) coordinate tuples

    Returns:
        KDTree instance
    """
    points = np.array(coordinates, dtype=float)
    return KDTree(points)


def find_proximity_pairs(
    coordinates: list[tuple[float, float]],
    threshold_degrees: float,
) -> np.ndarray:
    """
    Find all pairs of points whose planar degree distance is within the threshold.

    Uses scipy's query_pairs to collect candidates, then applies the exact
    predicate sqrt(Δlat² + Δlon²) <= threshold so that the result does not
    depend on the KD-Tree's internal distance arithmetic.

    Args:
        coordinates: List of (latitude, longitude) coordinate tuples
        threshold_degrees: Maximum distance in degrees for two points to overlap

    Returns:
        Integer array of shape (n_pairs, 2) with index1 < index2 in each row
    """
    if len(coordinates) < 2:
        return np.empty((0, 2), dtype=np.intp)

    points = np.array(coordinates, dtype=float)
    kdtree = build_kdtree(coordinates)

    search_radius = threshold_degrees * (1 + SEARCH_RADIUS_SLACK) + SEARCH_RADIUS_SLACK
    candidates = kdtree.query_pairs(r=search_radius, output_type='ndarray')

    if len(candidates) == 0:
        return np.empty((0, 2), dtype=np.intp)

    # Vectorized version of planar_distance_degrees
    deltas = points[candidates[:, 0]] - points[candidates[:, 1]]
    distances = np.sqrt(deltas[:, 0] ** 2 + deltas[:, 1] ** 2)

    pairs = candidates[distances <= threshold_degrees]

    logger.debug(f"Found {len(pairs)} overlapping pairs from {len(candidates)} candidates "
                 f"(threshold: {threshold_degrees}°)")
    return pairs


def label_components(size: int, pairs: np.ndarray) -> np.ndarray:
    """
    Label the connected components of the proximity graph.

    Args:
        size: Number of points (graph nodes)
        pairs: Array of shape (n_pairs, 2) of connected indices

    Returns:
        Array of component labels, one per point
    """
    adjacency = coo_matrix(
        (np.ones(len(pairs), dtype=np.int8), (pairs[:, 0], pairs[:, 1])),
        shape=(size, size),
    )
    _, labels = connected_components(adjacency, directed=False)
    return labels


def calculate_group_center(members: Sequence[GeoPoint]) -> tuple[float, float]:
    """
    Calculate the arithmetic mean position of a group of points.

    Args:
        members: Non-empty list of points

    Returns:
        (latitude, longitude) of the center
    """
    sum_lat = sum(point.latitude for point in members)
    sum_lon = sum(point.longitude for point in members)
    return (sum_lat / len(members), sum_lon / len(members))


def _bounds(points: Sequence[GeoPoint]) -> tuple[float, float, float, float]:
    lats = np.array([point.latitude for point in points], dtype=float)
    lons = np.array([point.longitude for point in points], dtype=float)
    return float(lats.min()), float(lons.min()), float(lats.max()), float(lons.max())


def calculate_group_bounding_box(members: Sequence[GeoPoint]) -> GroupBoundingBox:
    """
    Calculate the bounding box of a group in raw degree units.

    Args:
        members: Non-empty list of points

    Returns:
        GroupBoundingBox with width, height in degrees and area in degree²
    """
    min_lat, min_lon, max_lat, max_lon = _bounds(members)
    width = max_lon - min_lon
    height = max_lat - min_lat

    return GroupBoundingBox(
        southwest=(min_lat, min_lon),
        northeast=(max_lat, max_lon),
        width=width,
        height=height,
        area=width * height,
    )


def find_overlap_groups(
    points: list[GeoPoint],
    threshold_degrees: float = 0.0002,
) -> list[OverlapGroup]:
    """
    Partition points into overlap groups.

    Two points share a group iff they are connected by a chain of pairs whose
    planar degree distance is within the threshold. Groups are sorted by
    member count (largest first); equal-sized groups keep the order in which
    their first member appears in the input. Members keep input order.

    Args:
        points: Points to group
        threshold_degrees: Overlap distance threshold in degrees

    Returns:
        List of OverlapGroup objects
    """
    if not points:
        return []

    coordinates = [(point.latitude, point.longitude) for point in points]
    pairs = find_proximity_pairs(coordinates, threshold_degrees)

    labels = label_components(len(points), pairs)

    # Iterating in input order makes dict order the order of each
    # component's lowest index
    members_by_label: dict[int, list[int]] = {}
    for index, label in enumerate(labels.tolist()):
        members_by_label.setdefault(label, []).append(index)

    groups = []
    for indices in members_by_label.values():
        members = tuple(points[i] for i in indices)
        groups.append(OverlapGroup(
            members=members,
            center=calculate_group_center(members),
            bounding_box=calculate_group_bounding_box(members),
        ))

    # list.sort is stable, so ties keep discovery order
    groups.sort(key=lambda group: group.count, reverse=True)

    logger.debug(f"Grouped {len(points)} points into {len(groups)} groups ({len(pairs)} pairs)")
    return groups


def calculate_coverage(points: list[GeoPoint]) -> Optional[CoverageBoundingBox]:
    """
    Calculate the coverage bounding box of all points in kilometers.

    Height is the Haversine distance south-west to north-west, width is
    south-west to south-east, and area is their product (a planar rectangle
    approximation suited to extents below a hundred kilometers).

    Args:
        points: All input points

    Returns:
        CoverageBoundingBox, or None when there are no points
    """
    if not points:
        return None

    min_lat, min_lon, max_lat, max_lon = _bounds(points)
    height_km = haversine_km(min_lat, min_lon, max_lat, min_lon)
    width_km = haversine_km(min_lat, min_lon, min_lat, max_lon)

    return CoverageBoundingBox(
        southwest=(min_lat, min_lon),
        northeast=(max_lat, max_lon),
        width_km=width_km,
        height_km=height_km,
        area_km2=width_km * height_km,
    )
