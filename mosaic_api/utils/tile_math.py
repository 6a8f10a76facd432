"""
Web-Mercator-style tile math for estimating the rendered size of a mosaic.
"""
from typing import Optional
import math

from mosaic_api.domain.models import CoverageBoundingBox, ZoomEstimate
from mosaic_api.utils.geo_distance import round_half_up


TILE_SIZE_PIXELS = 256
DEFAULT_ZOOM = 15
UNKNOWN_PIXEL_COVERAGE = "—"
LARGE_DIMENSION_PIXELS = 10_000

# (exclusive lower bound in km², zoom), checked in order
ZOOM_AREA_THRESHOLDS = (
    (100.0, 12),
    (10.0, 13),
    (1.0, 14),
    (0.1, 15),
)
MAX_ZOOM = 16


def zoom_for_area(area_km2: float) -> int:
    """
    Pick a display zoom level from a coverage area.

    Args:
        area_km2: Coverage area in km²

    Returns:
        Zoom level between 12 and 16
    """
    for lower_bound, zoom in ZOOM_AREA_THRESHOLDS:
        if area_km2 > lower_bound:
            return zoom
    return MAX_ZOOM


def world_pixel_size(zoom: int) -> int:
    """World extent in pixels at a zoom level (same in both axes)."""
    return TILE_SIZE_PIXELS * 2 ** zoom


def estimate_pixel_dimensions(
    bounding_box: CoverageBoundingBox,
    zoom: int,
) -> tuple[float, float]:
    """
    Estimate the pixel width and height of a bounding box at a zoom level.

    Longitude maps linearly onto the world width. Latitude maps onto the
    world height and is stretched by 1/cos(center latitude) to approximate
    Mercator distortion at the box's vertical midpoint.

    Args:
        bounding_box: Coverage bounding box
        zoom: Zoom level

    Returns:
        (width_pixels, height_pixels)
    """
    world_pixels = world_pixel_size(zoom)
    south, west = bounding_box.southwest
    north, east = bounding_box.northeast

    center_lat_radians = math.radians((north + south) / 2)
    pixels_per_lon_degree = world_pixels / 360
    pixels_per_lat_degree = world_pixels / 180 / math.cos(center_lat_radians)

    width_pixels = (east - west) * pixels_per_lon_degree
    height_pixels = (north - south) * pixels_per_lat_degree
    return width_pixels, height_pixels


def format_pixel_coverage(width_pixels: float, height_pixels: float) -> str:
    """Format pixel dimensions, switching to thousands above 10,000 px."""
    if width_pixels > LARGE_DIMENSION_PIXELS or height_pixels > LARGE_DIMENSION_PIXELS:
        return f"~{width_pixels / 1000:.1f}K × {height_pixels / 1000:.1f}K pixels"
    return f"~{round_half_up(width_pixels)} × {round_half_up(height_pixels)} pixels"


def estimate_pixel_coverage(bounding_box: CoverageBoundingBox, zoom: int) -> str:
    width_pixels, height_pixels = estimate_pixel_dimensions(bounding_box, zoom)
    return format_pixel_coverage(width_pixels, height_pixels)


def get_optimal_zoom_level(
    bounding_box: Optional[CoverageBoundingBox] = None,
) -> ZoomEstimate:
    """
    Get the display zoom level and pixel footprint for a coverage bounding box.

    Args:
        bounding_box: Coverage bounding box from a previous analysis

    Returns:
        ZoomEstimate; zoom 15 with an unknown footprint when no box is given
    """
    if bounding_box is None:
        return ZoomEstimate(zoom=DEFAULT_ZOOM, pixel_coverage=UNKNOWN_PIXEL_COVERAGE)

    zoom = zoom_for_area(bounding_box.area_km2)
    return ZoomEstimate(
        zoom=zoom,
        pixel_coverage=estimate_pixel_coverage(bounding_box, zoom),
    )
