"""
Domain service: density classification, suitability scoring and recommendations.

The suitability score is the rounded sum of four capped components:
- Image count (max 20)
- Overlap fraction (max 40)
- Density tier (max 30)
- Distribution evenness (max 10)
"""
from dataclasses import dataclass
from typing import Optional
import logging

from mosaic_api.domain.models import (
    DensityInfo,
    GroupStats,
    OverlapGroup,
    ScoreComponents,
)
from mosaic_api.utils.geo_distance import round_half_up

logger = logging.getLogger(__name__)


UPLOAD_PROMPT = "Upload geotagged images to analyze mosaic potential."
MORE_IMAGES_NEEDED = (
    "More images needed: For a good mosaic map, try to collect at least 10-20 "
    "geotagged images covering your area of interest."
)
EXCELLENT_POTENTIAL = (
    "Excellent mosaic potential! Your images have good overlap and density for "
    "creating a high-quality mosaic map. We recommend proceeding with mosaic creation."
)
GOOD_POTENTIAL = (
    "Good mosaic potential. Your images can create a reasonable mosaic map, though "
    "there may be some gaps or lower-quality areas. For best results, try adding "
    "more images in sparse areas."
)
FAIR_POTENTIAL = (
    "Fair mosaic potential. While a mosaic can be created, expect significant gaps "
    "or quality issues. Consider collecting more images with better overlap between them."
)
LIMITED_POTENTIAL = (
    "Limited mosaic potential. Your current image set is not ideal for creating a "
    "cohesive mosaic map. The images may be too spread out or have insufficient "
    "overlap. Try collecting more images in a more concentrated area."
)
LOW_DENSITY_CAVEAT = (
    " The image density is low; try collecting more images within the same area."
)
SPARSE_OVERLAP_CAVEAT = (
    " Many of your images lack overlap with others, which may result in a patchy "
    "mosaic. Try capturing images with more overlap between them."
)

MIN_IMAGES_FOR_ANALYSIS = 5
MIN_BEST_GROUP_SIZE = 5
SINGLE_GROUP_RATIO = 0.7

IMAGE_COUNT_CAP = 100
IMAGE_COUNT_WEIGHT = 20
OVERLAP_WEIGHT = 40
DISTRIBUTION_WEIGHT = 10
MAX_LARGEST_GROUP_FRACTION = 0.9


@dataclass(frozen=True)
class DensityThresholds:
    """Density tier boundaries in images per km²."""
    low: float = 10.0
    medium: float = 30.0
    high: float = 100.0

    def __post_init__(self):
        if self.low < 0:
            raise ValueError("Density thresholds must not be negative")
        if not self.low <= self.medium <= self.high:
            raise ValueError(
                f"Density thresholds must be ascending (got low={self.low}, "
                f"medium={self.medium}, high={self.high})"
            )


def calculate_density(total_images: int, coverage_area: float) -> float:
    """Images per km², or 0 when the coverage area is degenerate."""
    if coverage_area <= 0:
        return 0.0
    return total_images / coverage_area


def classify_density(
    total_images: int,
    coverage_area: float,
    thresholds: DensityThresholds,
) -> DensityInfo:
    """
    Calculate image density and its tier.

    Args:
        total_images: Number of input points
        coverage_area: Coverage area in km²
        thresholds: Tier boundaries

    Returns:
        DensityInfo with images_per_km2 and one of
        "low", "medium", "high", "very high"
    """
    density = calculate_density(total_images, coverage_area)

    if density < thresholds.low:
        category = "low"
    elif density < thresholds.medium:
        category = "medium"
    elif density < thresholds.high:
        category = "high"
    else:
        category = "very high"

    return DensityInfo(images_per_km2=density, category=category)


def density_score(density: float, thresholds: DensityThresholds) -> int:
    if density >= thresholds.high:
        return 30
    if density >= thresholds.medium:
        return 25
    if density >= thresholds.low:
        return 15
    if density > 0:
        return 5
    return 0


def calculate_group_stats(groups: list[OverlapGroup]) -> GroupStats:
    """
    Summarize overlap groups.

    Args:
        groups: Overlap groups sorted largest first

    Returns:
        GroupStats instance
    """
    if not groups:
        return GroupStats(
            total_groups=0,
            largest_group=0,
            average_group_size=0.0,
            single_image_groups=0,
        )

    return GroupStats(
        total_groups=len(groups),
        largest_group=groups[0].count,
        average_group_size=sum(group.count for group in groups) / len(groups),
        single_image_groups=sum(1 for group in groups if group.count == 1),
    )


def score_suitability(
    total_images: int,
    groups: list[OverlapGroup],
    density: float,
    thresholds: DensityThresholds,
) -> ScoreComponents:
    """
    Score how suitable a set of images is for mosaic creation.

    Args:
        total_images: Number of input points
        groups: Overlap groups sorted largest first
        density: Images per km²
        thresholds: Density tier boundaries

    Returns:
        ScoreComponents; `total` is the suitability score in [0, 100]
    """
    if total_images <= 0:
        return ScoreComponents(image_count=0, overlap=0, density=0, distribution=0, total=0)

    image_count_score = min(total_images, IMAGE_COUNT_CAP) / IMAGE_COUNT_CAP * IMAGE_COUNT_WEIGHT

    overlapping_images = sum(group.count for group in groups if group.count > 1)
    overlap_score = overlapping_images / total_images * OVERLAP_WEIGHT

    tier_score = density_score(density, thresholds)

    distribution_score = 0.0
    if groups:
        largest_fraction = groups[0].count / total_images
        distribution_score = DISTRIBUTION_WEIGHT * (
            1 - min(largest_fraction, MAX_LARGEST_GROUP_FRACTION)
        )

    raw_score = image_count_score + overlap_score + tier_score + distribution_score
    total = max(0, min(100, round_half_up(raw_score)))

    logger.debug(f"Score components: count={image_count_score:.2f}, overlap={overlap_score:.2f}, "
                 f"density={tier_score}, distribution={distribution_score:.2f}")

    return ScoreComponents(
        image_count=round_half_up(image_count_score),
        overlap=round_half_up(overlap_score),
        density=tier_score,
        distribution=round_half_up(distribution_score),
        total=total,
    )


def _base_recommendation(suitability: int) -> str:
    if suitability >= 80:
        return EXCELLENT_POTENTIAL
    if suitability >= 60:
        return GOOD_POTENTIAL
    if suitability >= 40:
        return FAIR_POTENTIAL
    return LIMITED_POTENTIAL


def generate_recommendation(
    total_images: int,
    suitability: int,
    density_category: str,
    group_stats: GroupStats,
    best_group: Optional[OverlapGroup],
) -> str:
    """
    Build guidance text for the user from the analysis outcome.

    Args:
        total_images: Number of input points
        suitability: Suitability score
        density_category: Density tier
        group_stats: Group summary statistics
        best_group: Largest overlap group, if any

    Returns:
        Recommendation text
    """
    if total_images == 0:
        return UPLOAD_PROMPT

    if total_images < MIN_IMAGES_FOR_ANALYSIS:
        return MORE_IMAGES_NEEDED

    recommendation = _base_recommendation(suitability)

    if density_category == "low":
        recommendation += LOW_DENSITY_CAVEAT

    if group_stats.single_image_groups > group_stats.total_groups * SINGLE_GROUP_RATIO:
        recommendation += SPARSE_OVERLAP_CAVEAT

    if best_group is not None and best_group.count >= MIN_BEST_GROUP_SIZE:
        center_lat, center_lon = best_group.center
        recommendation += (
            f" Your best mosaic area is centered around {center_lat:.6f}, {center_lon:.6f} "
            f"with {best_group.count} overlapping images."
        )

    return recommendation
