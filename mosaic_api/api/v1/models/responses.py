"""
API response models using Pydantic.
"""
from typing import List, Tuple
from pydantic import BaseModel, Field

from mosaic_api.domain.models import AnalysisResult, ZoomEstimate


class HeatmapResponse(BaseModel):
    """Response model for the heatmap endpoint."""
    points: List[Tuple[float, float, int]] = Field(
        description="Heatmap points as [latitude, longitude, weight]"
    )

    class Config:
        json_schema_extra = {
            "example": {
                "points": [
                    [51.500729, -0.124625, 1],
                    [51.500801, -0.12458, 1],
                ]
            }
        }


class ReportResponse(BaseModel):
    """Analysis together with the derivations a map view needs."""
    analysis: AnalysisResult
    zoom: ZoomEstimate
    heatmap: List[Tuple[float, float, int]]
