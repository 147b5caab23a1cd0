"""Utilities for Nelson Rules statistical calculations."""

from .statistics import (
    ZoneBoundaries,
    as_series,
    band_direction,
    calculate_zones,
    sample_std,
    series_mean,
    within_band,
    zones_for_series,
)

__all__ = [
    # Data classes
    "ZoneBoundaries",
    # Summary statistics
    "as_series",
    "series_mean",
    "sample_std",
    # Zones
    "calculate_zones",
    "zones_for_series",
    "within_band",
    "band_direction",
]
