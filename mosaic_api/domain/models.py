"""
Domain models for geotagged images and mosaic analysis results.

These models represent the core domain entities and should be independent
of any infrastructure concerns (HTTP, file uploads, map rendering, etc.).
All of them are immutable: an analysis builds them once from the input
snapshot and never mutates them afterwards.
"""
from typing import Annotated, List, Optional, Tuple
from pydantic import BaseModel, Field, computed_field, model_validator


LatLon = Tuple[float, float]

Latitude = Annotated[float, Field(ge=-90, le=90, allow_inf_nan=False)]
Longitude = Annotated[float, Field(ge=-180, le=180, allow_inf_nan=False)]
Corner = Tuple[Latitude, Longitude]


class GeoPoint(BaseModel):
    """A geotagged image location. Identity is positional; names may repeat."""
    name: str = Field(min_length=1, description="Image name, used for display only")
    latitude: float = Field(ge=-90, le=90, allow_inf_nan=False)
    longitude: float = Field(ge=-180, le=180, allow_inf_nan=False)

    class Config:
        frozen = True


class GroupBoundingBox(BaseModel):
    """Bounding box of an overlap group in raw degree units."""
    southwest: LatLon
    northeast: LatLon
    width: float = Field(description="Longitude extent in degrees")
    height: float = Field(description="Latitude extent in degrees")
    area: float = Field(description="width * height in degree²")

    class Config:
        frozen = True


class CoverageBoundingBox(BaseModel):
    """Bounding box of the whole collection measured in kilometers."""
    southwest: Corner
    northeast: Corner
    width_km: float = Field(ge=0, allow_inf_nan=False)
    height_km: float = Field(ge=0, allow_inf_nan=False)
    area_km2: float = Field(ge=0, allow_inf_nan=False)

    class Config:
        frozen = True

    @model_validator(mode="after")
    def check_corner_order(self):
        if self.southwest[0] > self.northeast[0] or self.southwest[1] > self.northeast[1]:
            raise ValueError("southwest corner must not lie north or east of the northeast corner")
        return self


class OverlapGroup(BaseModel):
    """Connected component of images under the overlap proximity relation."""
    members: Tuple[GeoPoint, ...]
    center: LatLon = Field(description="Arithmetic mean of member coordinates")
    bounding_box: GroupBoundingBox

    class Config:
        frozen = True

    @computed_field
    @property
    def count(self) -> int:
        return len(self.members)


class GroupStats(BaseModel):
    """Summary statistics over all overlap groups."""
    total_groups: int
    largest_group: int
    average_group_size: float
    single_image_groups: int

    class Config:
        frozen = True


class DensityInfo(BaseModel):
    """Image density over the coverage area."""
    images_per_km2: float
    category: str

    class Config:
        frozen = True


class ScoreComponents(BaseModel):
    """Individual suitability score components, kept for diagnostics."""
    image_count: int = Field(description="Rounded image count component (max 20)")
    overlap: int = Field(description="Rounded overlap component (max 40)")
    density: int = Field(description="Density tier value (max 30)")
    distribution: int = Field(description="Rounded distribution component (max 10)")
    total: int

    class Config:
        frozen = True


class DetailedAnalysis(BaseModel):
    """Intermediate results of an analysis."""
    group_stats: GroupStats
    bounding_box: Optional[CoverageBoundingBox] = None
    density: DensityInfo
    score_components: ScoreComponents

    class Config:
        frozen = True


class AnalysisResult(BaseModel):
    """Outcome of a single mosaic suitability analysis."""
    total_images: int = 0
    overlap_groups: List[OverlapGroup] = Field(default_factory=list)
    coverage_area: float = Field(default=0.0, description="Coverage area in km²")
    average_density: float = Field(default=0.0, description="Images per km²")
    suitability: int = Field(default=0, ge=0, le=100)
    recommendation: str = ""
    detailed_analysis: Optional[DetailedAnalysis] = None
    error: Optional[str] = None

    class Config:
        frozen = True


class ZoomEstimate(BaseModel):
    """Display zoom level and estimated rendered pixel footprint."""
    zoom: int
    pixel_coverage: str

    class Config:
        frozen = True
