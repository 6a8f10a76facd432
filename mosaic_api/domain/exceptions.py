"""
Domain exceptions for mosaic analysis.
"""


class MosaicAnalysisError(Exception):
    """Base exception for analysis requests that cannot be served."""

    def __init__(self, message: str, status_code: int = 400):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class PointLimitExceededError(MosaicAnalysisError):
    """Raised when a request carries more points than the configured cap."""

    def __init__(self, point_count: int, max_points: int):
        super().__init__(
            f"Too many points to analyze: {point_count} (limit: {max_points})",
            status_code=413,
        )
        self.point_count = point_count
        self.max_points = max_points
