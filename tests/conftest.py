"""Pytest configuration and shared fixtures."""

import pytest

# Published example series, one per rule, with the violations each produces
REFERENCE_CASES = {
    1: (
        [1, 2, 4, 5, 6, 7, -205, 9, -10, 12, 13, 200, 10, -5, 8, 3, -5, 5, 3, 9, -12, 17],
        [(7, 1), (12, 1)],
    ),
    2: (
        [39, 398, 4, 76, 435, 188, 236, 283, 481, 271, 270, 274, 270, 272, 273, 273,
         271, 271, 384, 194, 57, 232, 494, 468, 417, 104, 323, 469, 136, 214, 393, 267,
         160, 385, 253, 155, 289, 455, 104, 289, 138, 184, 356, 186, 146, 268, 76, 258],
        [(8, 12)],
    ),
    3: (
        [62, 79, 70, 81, 82, 83, 84, 87, 13, 83, 32, 5, 13, 36, 93, 74, 34, 20, 69, 96,
         98, 101, 104, 107, 110],
        [(3, 6), (18, 8)],
    ),
    4: (
        [1, 2, 1, 2, 1, 2, 1, 2, 1, 2, 1, 2, 1, 2, 3, 1, 2, 1, 2, 1, 2],
        [(1, 14)],
    ),
    5: (
        [1524, 1583, 2284, -882, 2184, -485, 57, -13, -3494, -3150, 1148, 2182, -953,
         863, -31, -621, 947, -65, 323, -237],
        [(8, 2), (9, 2)],
    ),
    6: (
        [816, 555, 712, 883, 397, 717, 165, 135, 261, 751, 1765, 1858, 1395, 1263, 1969,
         253, 783, 631, 145, 924, -914, -701, -361, -590, 252, 848, 371, 546, 113, 984],
        [(10, 4), (11, 5), (12, 4), (20, 4), (21, 4)],
    ),
    7: (
        [13, 81, 96, 40, 24, 66, 24, 34, 27, 72, 32, 73, 74, 22, 59, 39, 69, 62, 60, 2,
         52, 51, 48, 25, 40, 60, 23, 109, -15, 57],
        [(4, 15), (5, 15)],
    ),
    8: (
        list(range(1, 24)) + list(range(22, 0, -1)),
        [(19, 8), (20, 8)],
    ),
}

# Second rule 2 example: a run of exactly 9 at the end of the series
RULE2_TRAILING_RUN = (
    [26, 31, 46, 47, 81, 6, 88, 23, 73, 1, 66, 73, 6, 84, 70, 36, 80, 94, 63, 37, 62,
     84, 53, 54, 80, 75, 26, 56, 48, 3, 6, 56, 21, 43, 87, 28, 47, 73, 63, 48, 68, 60,
     63, 70, 60, 67, 61, 61, 66],
    [(41, 9)],
)

MIN_POINTS = {1: 1, 2: 9, 3: 6, 4: 14, 5: 3, 6: 5, 7: 15, 8: 8}


@pytest.fixture
def reference_cases() -> dict[int, tuple[list[float], list[tuple[int, int]]]]:
    """Example series and expected violations, keyed by rule number."""
    return REFERENCE_CASES


@pytest.fixture
def all_series() -> list[list[float]]:
    """Every example series, for properties that must hold on any input."""
    series = [s for s, _ in REFERENCE_CASES.values()]
    series.append(RULE2_TRAILING_RUN[0])
    return series


@pytest.fixture
def rule2_trailing_run() -> tuple[list[float], list[tuple[int, int]]]:
    return RULE2_TRAILING_RUN


@pytest.fixture
def min_points() -> dict[int, int]:
    """Minimum series length for each rule to report anything."""
    return MIN_POINTS
