"""
API router for mosaic analysis endpoints.
"""
import logging
from fastapi import APIRouter, HTTPException, Request

from mosaic_api.api.dependencies import MosaicServiceDep
from mosaic_api.api.v1.models.requests import (
    AnalyzeRequest,
    HeatmapRequest,
    ZoomRequest,
)
from mosaic_api.api.v1.models.responses import HeatmapResponse, ReportResponse
from mosaic_api.domain.exceptions import MosaicAnalysisError
from mosaic_api.domain.models import AnalysisResult, ZoomEstimate
from mosaic_api.middleware.rate_limiter import RATE_LIMIT, limiter

logger = logging.getLogger(__name__)


router = APIRouter(
    prefix="/mosaic",
    tags=["mosaic"],
)

COMMON_RESPONSES = {
    413: {
        "description": "Too many points in a single request",
    },
    422: {
        "description": "Invalid points or configuration",
    },
    429: {
        "description": "Rate limit exceeded",
    },
}


@router.post(
    "/analyze",
    response_model=AnalysisResult,
    summary="Analyze mosaic suitability",
    description="""
    Analyze whether a set of geotagged images is suitable for a mosaic map.

    The analysis:
    1. Groups images whose coordinates lie within the overlap threshold
       (connected components, planar degree distance)
    2. Measures the coverage bounding box with the Haversine formula
    3. Classifies image density per km²
    4. Scores suitability from 0 to 100 (image count, overlap, density, distribution)
    5. Generates a recommendation

    An empty point list returns a result with an `error` message instead of failing.
    """,
    responses=COMMON_RESPONSES,
)
@limiter.limit(RATE_LIMIT)
async def analyze_mosaic(
    request: Request,
    payload: AnalyzeRequest,
    mosaic_service: MosaicServiceDep,
) -> AnalysisResult:
    """
    Analyze mosaic suitability for the submitted points.

    Args:
        request: Incoming request (used by the rate limiter)
        payload: Points and optional configuration overrides
        mosaic_service: Mosaic service (injected dependency)

    Returns:
        AnalysisResult

    Raises:
        HTTPException: If the request exceeds the point limit
    """
    config = None
    if payload.config is not None:
        config = payload.config.apply_to(mosaic_service.analyzer.config)

    try:
        return await mosaic_service.analyze_points(payload.points, config)
    except MosaicAnalysisError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


@router.post(
    "/heatmap",
    response_model=HeatmapResponse,
    summary="Get heatmap points",
    description="Return one weighted heatmap point per image, in input order.",
    responses=COMMON_RESPONSES,
)
@limiter.limit(RATE_LIMIT)
async def get_heatmap(
    request: Request,
    payload: HeatmapRequest,
    mosaic_service: MosaicServiceDep,
) -> HeatmapResponse:
    try:
        return HeatmapResponse(points=mosaic_service.get_heatmap(payload.points))
    except MosaicAnalysisError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


@router.post(
    "/zoom",
    response_model=ZoomEstimate,
    summary="Estimate optimal zoom level",
    description="""
    Estimate the display zoom level and rendered pixel footprint for the
    coverage bounding box of a previous analysis. Without a bounding box,
    the default zoom (15) is returned with an unknown footprint.
    """,
    responses={429: COMMON_RESPONSES[429]},
)
@limiter.limit(RATE_LIMIT)
async def estimate_zoom(
    request: Request,
    payload: ZoomRequest,
    mosaic_service: MosaicServiceDep,
) -> ZoomEstimate:
    return mosaic_service.get_zoom(payload.bounding_box)


@router.post(
    "/report",
    response_model=ReportResponse,
    summary="Analyze and prepare map view data",
    description="""
    Run the analysis, then derive the zoom estimate from its bounding box
    and the heatmap points, in a single call.
    """,
    responses=COMMON_RESPONSES,
)
@limiter.limit(RATE_LIMIT)
async def build_report(
    request: Request,
    payload: AnalyzeRequest,
    mosaic_service: MosaicServiceDep,
) -> ReportResponse:
    config = None
    if payload.config is not None:
        config = payload.config.apply_to(mosaic_service.analyzer.config)

    try:
        analysis, zoom, heatmap = await mosaic_service.build_report(payload.points, config)
    except MosaicAnalysisError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)

    logger.debug(f"Report ready: suitability={analysis.suitability}, zoom={zoom.zoom}")
    return ReportResponse(analysis=analysis, zoom=zoom, heatmap=heatmap)
