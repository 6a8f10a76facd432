"""
Domain service: Mosaic suitability analysis of geotagged images.

This module determines whether a set of geotagged images can be assembled
into a photographic mosaic using:
- Overlap grouping (connected components under planar degree proximity)
- Coverage geometry (Haversine-measured bounding box)
- Density classification
- Multi-factor suitability scoring
- Recommendation text generation

The analyzer holds only its immutable configuration. Every call to
`analyze` builds a fresh AnalysisResult from its arguments, so one instance
can safely serve concurrent requests.
"""
from typing import Optional
from dataclasses import dataclass, field
import logging

from mosaic_api.domain.models import (
    AnalysisResult,
    CoverageBoundingBox,
    DetailedAnalysis,
    GeoPoint,
    ZoomEstimate,
)
from mosaic_api.services.domain.suitability import (
    UPLOAD_PROMPT,
    DensityThresholds,
    calculate_group_stats,
    classify_density,
    generate_recommendation,
    score_suitability,
)
from mosaic_api.utils.spatial_helpers import calculate_coverage, find_overlap_groups
from mosaic_api.utils.tile_math import get_optimal_zoom_level
from mosaic_api.config import settings

logger = logging.getLogger(__name__)

NO_IMAGES_ERROR = "No images to analyze"


@dataclass(frozen=True)
class AnalysisConfig:
    """Configuration for mosaic suitability analysis."""

    overlap_threshold_degrees: float = 0.0002
    """Maximum planar distance in degrees for two images to overlap (~22 m at the equator)"""

    density_thresholds: DensityThresholds = field(default_factory=DensityThresholds)
    """Density tier boundaries in images per km²"""

    def __post_init__(self):
        if self.overlap_threshold_degrees < 0:
            raise ValueError(
                f"Overlap threshold must not be negative (got {self.overlap_threshold_degrees})"
            )

    @classmethod
    def from_settings(cls) -> "AnalysisConfig":
        """Build the default configuration from application settings."""
        return cls(
            overlap_threshold_degrees=settings.overlap_threshold_degrees,
            density_thresholds=DensityThresholds(
                low=settings.density_threshold_low,
                medium=settings.density_threshold_medium,
                high=settings.density_threshold_high,
            ),
        )


def analyze(
    points: list[GeoPoint],
    config: Optional[AnalysisConfig] = None,
) -> AnalysisResult:
    """
    Analyze the mosaic suitability of a set of geotagged images.

    Args:
        points: Image locations in input order
        config: Analysis configuration (defaults to AnalysisConfig())

    Returns:
        AnalysisResult. Empty input yields a result with `error` set,
        suitability 0 and an upload prompt.
    """
    config = config or AnalysisConfig()
    points = list(points)
    total_images = len(points)

    if total_images == 0:
        logger.info("No images to analyze")
        return AnalysisResult(
            error=NO_IMAGES_ERROR,
            suitability=0,
            recommendation=UPLOAD_PROMPT,
        )

    logger.info(f"Starting mosaic analysis for {total_images} images")

    # Step 1: Group overlapping images
    groups = find_overlap_groups(points, config.overlap_threshold_degrees)
    group_stats = calculate_group_stats(groups)
    logger.info(f"Found {group_stats.total_groups} overlap groups "
                f"(largest: {group_stats.largest_group}, singletons: {group_stats.single_image_groups})")

    # Step 2: Coverage area over all images
    bounding_box = calculate_coverage(points)
    coverage_area = bounding_box.area_km2 if bounding_box else 0.0
    logger.info(f"Coverage area: {coverage_area:.4f} km²")

    # Step 3: Density
    density = classify_density(total_images, coverage_area, config.density_thresholds)
    logger.info(f"Density: {density.images_per_km2:.2f} images/km² ({density.category})")

    # Step 4: Suitability score
    score_components = score_suitability(
        total_images=total_images,
        groups=groups,
        density=density.images_per_km2,
        thresholds=config.density_thresholds,
    )
    logger.info(f"Suitability score: {score_components.total}/100")

    # Step 5: Recommendation
    recommendation = generate_recommendation(
        total_images=total_images,
        suitability=score_components.total,
        density_category=density.category,
        group_stats=group_stats,
        best_group=groups[0] if groups else None,
    )

    return AnalysisResult(
        total_images=total_images,
        overlap_groups=groups,
        coverage_area=coverage_area,
        average_density=density.images_per_km2,
        suitability=score_components.total,
        recommendation=recommendation,
        detailed_analysis=DetailedAnalysis(
            group_stats=group_stats,
            bounding_box=bounding_box,
            density=density,
            score_components=score_components,
        ),
    )


def get_heatmap_data(points: list[GeoPoint]) -> list[tuple[float, float, int]]:
    """
    Get heatmap points for visualizing image density.

    Args:
        points: Image locations

    Returns:
        List of (latitude, longitude, weight) tuples with weight 1
    """
    return [(point.latitude, point.longitude, 1) for point in points]


class MosaicAnalyzer:
    """
    Domain service for mosaic suitability analysis.

    Wraps the pure analysis functions with a fixed configuration. Results
    are returned to the caller and never stored on the instance; follow-up
    derivations such as the zoom estimate take the previous result's
    bounding box as an explicit argument.
    """

    def __init__(self, config: Optional[AnalysisConfig] = None):
        """
        Initialize the analyzer.

        Args:
            config: Analysis configuration (defaults to application settings)
        """
        self.config = config or AnalysisConfig.from_settings()

        logger.info(f"Initialized MosaicAnalyzer with config: "
                    f"overlap_threshold={self.config.overlap_threshold_degrees}, "
                    f"density_thresholds={self.config.density_thresholds}")

    def analyze(self, points: list[GeoPoint]) -> AnalysisResult:
        return analyze(points, self.config)

    def get_heatmap_data(self, points: list[GeoPoint]) -> list[tuple[float, float, int]]:
        return get_heatmap_data(points)

    def get_optimal_zoom_level(
        self,
        bounding_box: Optional[CoverageBoundingBox] = None,
    ) -> ZoomEstimate:
        return get_optimal_zoom_level(bounding_box)
