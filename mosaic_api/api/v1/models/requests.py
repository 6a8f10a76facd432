"""
API request models using Pydantic.
"""
from dataclasses import replace
from typing import List, Optional
from pydantic import BaseModel, Field, model_validator

from mosaic_api.config import settings
from mosaic_api.domain.models import CoverageBoundingBox, GeoPoint
from mosaic_api.services.domain.mosaic_analyzer import AnalysisConfig
from mosaic_api.services.domain.suitability import DensityThresholds


class DensityThresholdsRequest(BaseModel):
    """Density tier boundaries in images per km²."""
    low: float = Field(default=10.0, ge=0)
    medium: float = Field(default=30.0, ge=0)
    high: float = Field(default=100.0, ge=0)

    @model_validator(mode="after")
    def check_ascending(self):
        if not self.low <= self.medium <= self.high:
            raise ValueError("density thresholds must satisfy low <= medium <= high")
        return self


class AnalysisConfigRequest(BaseModel):
    """Per-request overrides of the analysis configuration."""
    overlap_threshold_degrees: Optional[float] = Field(
        default=None,
        ge=0,
        le=settings.max_overlap_threshold_degrees,
        description="Maximum planar distance in degrees for two images to overlap",
        examples=[0.0002],
    )
    density_thresholds: Optional[DensityThresholdsRequest] = None

    def apply_to(self, base: AnalysisConfig) -> AnalysisConfig:
        """Merge the overrides over a base configuration."""
        config = base
        if self.overlap_threshold_degrees is not None:
            config = replace(config, overlap_threshold_degrees=self.overlap_threshold_degrees)
        if self.density_thresholds is not None:
            config = replace(config, density_thresholds=DensityThresholds(
                low=self.density_thresholds.low,
                medium=self.density_thresholds.medium,
                high=self.density_thresholds.high,
            ))
        return config


class AnalyzeRequest(BaseModel):
    """Request body for mosaic analysis."""
    points: List[GeoPoint] = Field(
        description="Geotagged image locations in input order"
    )
    config: Optional[AnalysisConfigRequest] = None

    class Config:
        json_schema_extra = {
            "example": {
                "points": [
                    {"name": "IMG_0001.jpg", "latitude": 51.500729, "longitude": -0.124625},
                    {"name": "IMG_0002.jpg", "latitude": 51.500801, "longitude": -0.124580},
                    {"name": "IMG_0003.jpg", "latitude": 51.500655, "longitude": -0.124702},
                ],
                "config": {"overlap_threshold_degrees": 0.0002},
            }
        }


class HeatmapRequest(BaseModel):
    """Request body for heatmap data."""
    points: List[GeoPoint]


class ZoomRequest(BaseModel):
    """Request body for zoom estimation."""
    bounding_box: Optional[CoverageBoundingBox] = Field(
        default=None,
        description="Coverage bounding box from a previous analysis"
    )
