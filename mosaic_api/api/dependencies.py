"""
Dependency injection for FastAPI.
"""
from functools import lru_cache
from typing import Annotated
from fastapi import Depends

from mosaic_api.config import settings
from mosaic_api.services.domain.mosaic_analyzer import MosaicAnalyzer
from mosaic_api.services.application.mosaic_service import MosaicService


@lru_cache
def get_mosaic_analyzer() -> MosaicAnalyzer:
    """
    Dependency factory for MosaicAnalyzer.

    The analyzer is stateless apart from its configuration, so a single
    instance is shared across requests.

    Returns:
        MosaicAnalyzer instance
    """
    return MosaicAnalyzer()


def get_mosaic_service(
    analyzer: Annotated[MosaicAnalyzer, Depends(get_mosaic_analyzer)],
) -> MosaicService:
    """
    Dependency factory for MosaicService.

    Args:
        analyzer: Mosaic analyzer (injected)

    Returns:
        MosaicService instance
    """
    return MosaicService(analyzer=analyzer, max_points=settings.max_points)


# Type aliases for cleaner route signatures
MosaicServiceDep = Annotated[MosaicService, Depends(get_mosaic_service)]
