"""
Shared pytest fixtures for all tests.

This module provides common fixtures including:
- Sample point sets (clustered, gridded, far apart)
- Analysis configuration
- FastAPI test client
"""
import math
import pytest
import numpy as np
from fastapi.testclient import TestClient

from mosaic_api.main import app
from mosaic_api.domain.models import GeoPoint
from mosaic_api.services.domain.mosaic_analyzer import AnalysisConfig


# Degrees of arc per kilometer on the Haversine sphere
DEGREES_PER_KM = 180 / (6371.0 * math.pi)


def make_points(coords: list[tuple[float, float]], prefix: str = "IMG") -> list[GeoPoint]:
    """Build uniquely named points from (lat, lon) pairs."""
    return [
        GeoPoint(name=f"{prefix}_{i:04d}.jpg", latitude=lat, longitude=lon)
        for i, (lat, lon) in enumerate(coords)
    ]


# ============================================================
# Sample Data Fixtures
# ============================================================

@pytest.fixture
def clustered_points() -> list[GeoPoint]:
    """Three mutually overlapping points plus two far-away singletons."""
    return [
        GeoPoint(name="A", latitude=0.0, longitude=0.0),
        GeoPoint(name="B", latitude=0.0, longitude=0.0001),
        GeoPoint(name="C", latitude=0.0001, longitude=0.0),
        GeoPoint(name="D", latitude=10.0, longitude=10.0),
        GeoPoint(name="E", latitude=20.0, longitude=20.0),
    ]


@pytest.fixture
def one_km_grid_points() -> list[GeoPoint]:
    """50 points spread evenly over a 1 km x 1 km box at the equator."""
    side = DEGREES_PER_KM
    coords = [
        (float(lat), float(lon))
        for lat in np.linspace(0.0, side, 5)
        for lon in np.linspace(0.0, side, 10)
    ]
    return make_points(coords, prefix="GRID")


@pytest.fixture
def dense_cluster_points() -> list[GeoPoint]:
    """Six points chained along a meridian, each 0.0001° from the next."""
    coords = [(10.0 + i * 0.0001, 20.0) for i in range(6)]
    return make_points(coords, prefix="DENSE")


@pytest.fixture
def random_points() -> list[GeoPoint]:
    """Random points around a few cluster centers, with a fixed seed."""
    rng = np.random.default_rng(42)
    centers = [(-33.9249, 18.4241), (-33.9300, 18.4300), (-33.9150, 18.4100)]
    coords = []
    for center_lat, center_lon in centers:
        offsets = rng.normal(0, 0.0003, size=(40, 2))
        coords.extend((center_lat + d_lat, center_lon + d_lon) for d_lat, d_lon in offsets)
    return make_points([(float(lat), float(lon)) for lat, lon in coords], prefix="RND")


@pytest.fixture
def point_factory():
    """Expose make_points to tests."""
    return make_points


@pytest.fixture
def default_config() -> AnalysisConfig:
    return AnalysisConfig()


# ============================================================
# FastAPI Test Client Fixtures
# ============================================================

@pytest.fixture
def test_client() -> TestClient:
    """Create a synchronous test client for FastAPI."""
    return TestClient(app)
