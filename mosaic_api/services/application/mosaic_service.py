"""
Application service: Orchestration layer for mosaic analysis requests.
"""
from typing import Optional
import logging

from fastapi.concurrency import run_in_threadpool

from mosaic_api.domain.exceptions import PointLimitExceededError
from mosaic_api.domain.models import (
    AnalysisResult,
    CoverageBoundingBox,
    GeoPoint,
    ZoomEstimate,
)
from mosaic_api.services.domain.mosaic_analyzer import (
    AnalysisConfig,
    MosaicAnalyzer,
    analyze,
)

logger = logging.getLogger(__name__)


class MosaicService:
    """
    Application service for mosaic-related operations.

    Enforces the input size cap and runs the CPU-bound analysis in a worker
    thread so it stays off the event loop. No business logic here, only
    coordination around the domain analyzer.
    """

    def __init__(
        self,
        analyzer: MosaicAnalyzer,
        max_points: int,
    ):
        """
        Initialize the service with dependencies.

        Args:
            analyzer: Mosaic analyzer holding the default configuration
            max_points: Maximum number of points per request
        """
        self.analyzer = analyzer
        self.max_points = max_points

    def _check_point_limit(self, points: list[GeoPoint]) -> None:
        if len(points) > self.max_points:
            logger.warning(f"Rejected request with {len(points)} points (limit: {self.max_points})")
            raise PointLimitExceededError(len(points), self.max_points)

    async def analyze_points(
        self,
        points: list[GeoPoint],
        config: Optional[AnalysisConfig] = None,
    ) -> AnalysisResult:
        """
        Run a mosaic suitability analysis.

        Args:
            points: Image locations
            config: Per-request configuration (defaults to the analyzer's)

        Returns:
            AnalysisResult

        Raises:
            PointLimitExceededError: If too many points were submitted
        """
        self._check_point_limit(points)
        return await run_in_threadpool(analyze, points, config or self.analyzer.config)

    def get_heatmap(self, points: list[GeoPoint]) -> list[tuple[float, float, int]]:
        self._check_point_limit(points)
        return self.analyzer.get_heatmap_data(points)

    def get_zoom(
        self,
        bounding_box: Optional[CoverageBoundingBox] = None,
    ) -> ZoomEstimate:
        return self.analyzer.get_optimal_zoom_level(bounding_box)

    async def build_report(
        self,
        points: list[GeoPoint],
        config: Optional[AnalysisConfig] = None,
    ) -> tuple[AnalysisResult, ZoomEstimate, list[tuple[float, float, int]]]:
        """
        Analyze points and derive the zoom estimate and heatmap from the result.

        Args:
            points: Image locations
            config: Per-request configuration (defaults to the analyzer's)

        Returns:
            Tuple of (analysis, zoom estimate, heatmap points)
        """
        analysis = await self.analyze_points(points, config)

        bounding_box = None
        if analysis.detailed_analysis is not None:
            bounding_box = analysis.detailed_analysis.bounding_box

        zoom = self.get_zoom(bounding_box)
        heatmap = self.analyzer.get_heatmap_data(points)
        return analysis, zoom, heatmap
