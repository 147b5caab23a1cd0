"""Statistical functions shared by the Nelson Rules.

This module provides functions for:
- Summary statistics of a series (mean, Bessel-corrected standard deviation)
- Zone boundary calculations (mean +/- 1, 2, 3 sigma)
- Band classification of every point of a series against those boundaries
"""

from dataclasses import dataclass
from typing import Sequence

import numpy as np


@dataclass
class ZoneBoundaries:
    """Zone boundaries for Nelson Rules testing.

    Zones are defined as:
    - Zone C: Between center line and +/- 1 sigma
    - Zone B: Between +/- 1 sigma and +/- 2 sigma
    - Zone A: Between +/- 2 sigma and +/- 3 sigma

    Attributes:
        center_line: Center line of the chart (series mean)
        sigma: Sample standard deviation of the series
        plus_1_sigma: Center line + 1 sigma
        plus_2_sigma: Center line + 2 sigma
        plus_3_sigma: Center line + 3 sigma
        minus_1_sigma: Center line - 1 sigma
        minus_2_sigma: Center line - 2 sigma
        minus_3_sigma: Center line - 3 sigma
    """
    center_line: float
    sigma: float
    plus_1_sigma: float
    plus_2_sigma: float
    plus_3_sigma: float
    minus_1_sigma: float
    minus_2_sigma: float
    minus_3_sigma: float

    def band(self, n_sigma: int) -> tuple[float, float]:
        """Return the (lower, upper) limits of the +/- n_sigma band.

        Raises:
            ValueError: If n_sigma is not 1, 2 or 3
        """
        if n_sigma == 1:
            return self.minus_1_sigma, self.plus_1_sigma
        if n_sigma == 2:
            return self.minus_2_sigma, self.plus_2_sigma
        if n_sigma == 3:
            return self.minus_3_sigma, self.plus_3_sigma
        raise ValueError(f"n_sigma must be 1, 2 or 3, got {n_sigma}")


def as_series(values: Sequence[float]) -> np.ndarray:
    """Convert a sequence of measurements into a 1-D float array.

    Raises:
        ValueError: If values is not one-dimensional
    """
    arr = np.asarray(values, dtype=np.float64)
    if arr.ndim != 1:
        raise ValueError(f"Series must be one-dimensional, got {arr.ndim} dimensions")
    return arr


def series_mean(values: Sequence[float]) -> float:
    """Arithmetic mean of a series.

    Raises:
        ValueError: If values is empty

    Examples:
        >>> series_mean([1, 2, 3, 4])
        2.5
    """
    arr = as_series(values)
    if arr.size == 0:
        raise ValueError("Cannot compute the mean of an empty series")
    return float(np.mean(arr))


def sample_std(values: Sequence[float]) -> float:
    """Sample standard deviation of a series (N-1 denominator).

    A series with fewer than two points has no spread to estimate, so
    its standard deviation is reported as 0.0 instead of NaN. Spreads too
    large for a float overflow to inf.

    Examples:
        >>> round(sample_std([2, 4, 4, 4, 5, 5, 7, 9]), 4)
        2.1381
        >>> sample_std([42.0])
        0.0
    """
    arr = as_series(values)
    if arr.size < 2:
        return 0.0
    with np.errstate(over="ignore"):
        return float(np.std(arr, ddof=1))


def _build_zones(center_line: float, sigma: float) -> ZoneBoundaries:
    return ZoneBoundaries(
        center_line=center_line,
        sigma=sigma,
        plus_1_sigma=center_line + sigma,
        plus_2_sigma=center_line + 2 * sigma,
        plus_3_sigma=center_line + 3 * sigma,
        minus_1_sigma=center_line - sigma,
        minus_2_sigma=center_line - 2 * sigma,
        minus_3_sigma=center_line - 3 * sigma,
    )


def calculate_zones(center_line: float, sigma: float) -> ZoneBoundaries:
    """Calculate zone boundaries for Nelson Rules testing.

    A sigma of zero is accepted and yields zero-width bands: a value equal
    to the center line is inside every band, any other value is outside.

    Args:
        center_line: The center line (mean) of the series
        sigma: The standard deviation of the series

    Returns:
        ZoneBoundaries with all zone boundaries calculated

    Raises:
        ValueError: If sigma is negative or not finite

    Examples:
        >>> zones = calculate_zones(100.0, 2.0)
        >>> zones.plus_1_sigma
        102.0
        >>> zones.minus_3_sigma
        94.0
    """
    if not np.isfinite(sigma) or sigma < 0:
        raise ValueError(f"Sigma must be a non-negative finite number, got {sigma}")

    return _build_zones(center_line, sigma)


def zones_for_series(values: Sequence[float]) -> ZoneBoundaries:
    """Zone boundaries from the mean and sample standard deviation of a series.

    When the standard deviation overflows the bands are infinite, so every
    finite point lies inside all of them.
    """
    return _build_zones(series_mean(values), sample_std(values))


def within_band(values: np.ndarray, zones: ZoneBoundaries, n_sigma: int) -> np.ndarray:
    """Boolean mask of points inside the closed +/- n_sigma band."""
    lower, upper = zones.band(n_sigma)
    return (lower <= values) & (values <= upper)


def band_direction(values: np.ndarray, zones: ZoneBoundaries, n_sigma: int) -> np.ndarray:
    """Classify each point against the +/- n_sigma band.

    Returns:
        Integer array: +1 above the upper limit, -1 below the lower limit,
        0 inside the band (limits included).
    """
    lower, upper = zones.band(n_sigma)
    return (values > upper).astype(np.int64) - (values < lower).astype(np.int64)
