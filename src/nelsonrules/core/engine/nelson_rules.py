"""Nelson Rules implementation for SPC violation detection.

Nelson rules are a method in process control of determining whether some
measured variable is out of control (unpredictable versus consistent). The
rules are applied to a control chart on which the magnitude of some variable
is plotted against time, and are based on the mean value and the sample
standard deviation of the series.

Every rule function accepts the same argument and returns the same type:

    series: Ordered measurements, one entry per unit of time
    returns: List of Violation(start, length) pairs in increasing start order

Start indices are 1-based: the first point of the series is index 1.

Rules are named ``ruleN`` where ``N`` goes from 1 to 8. To call rules
programmatically use ``rule(N, series)`` or NelsonRuleLibrary.

References:
    - Lloyd S. Nelson, "The Shewhart Control Chart - Tests for Special Causes" (1984)
    - https://en.wikipedia.org/wiki/Nelson_rules
"""

import logging
import numbers
from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Callable, Iterable, Mapping, NamedTuple, Sequence

import numpy as np
from numpy.lib.stride_tricks import sliding_window_view

from nelsonrules.utils.statistics import (
    as_series,
    band_direction,
    series_mean,
    within_band,
    zones_for_series,
)

logger = logging.getLogger(__name__)


class Violation(NamedTuple):
    """A subsequence of the series that violates a rule.

    Attributes:
        start: 1-based index of the first point of the subsequence
        length: Number of points in the subsequence (for rules 5 and 6,
            the number of points beyond the band in the same direction)
    """
    start: int
    length: int


class UnsupportedRuleError(ValueError):
    """Raised when a rule selector is not one of 1-8."""

    def __init__(self, selector: object):
        self.selector = selector
        super().__init__(
            f"Unsupported Nelson rule {selector!r}, expected an integer from 1 to 8"
        )


class Severity(Enum):
    """Violation severity levels."""
    WARNING = "WARNING"
    CRITICAL = "CRITICAL"


def _next_mismatch(signal: np.ndarray, value: float, start: int, end: int) -> int:
    """Index of the first element in signal[start:end] not equal to value, else end."""
    j = start
    while j < end and signal[j] == value:
        j += 1
    return j


def _scan_runs(signal: np.ndarray, min_points: int, extra_points: int) -> list[Violation]:
    """Greedy left-to-right scan for runs of identical values in signal.

    A run of k identical values covers k + extra_points points of the
    original series. Qualifying runs are reported and skipped over; shorter
    ones advance the scan by a single position.
    """
    violations: list[Violation] = []
    n = signal.size
    i = 0
    while i < n:
        next_change = _next_mismatch(signal, signal[i], i + 1, n)
        points = next_change - i + extra_points
        if points >= min_points:
            violations.append(Violation(i + 1, points))
            i = next_change
        else:
            i += 1
    return violations


def _window_sums(signal: np.ndarray, width: int) -> np.ndarray:
    """Sum of every window of `width` consecutive elements (len - width + 1 sums)."""
    return sliding_window_view(signal, width).sum(axis=1)


def rule1(series: Sequence[float]) -> list[Violation]:
    """Rule 1: One point is more than 3 standard deviations from the mean.

    Problem indicated: one or more samples are grossly out of control.
    Every violation has length 1.

    Example:
        >>> rule1([1, 2, 4, 5, 6, 7, -205, 9, -10, 12, 13, 200, 10, -5, 8, 3,
        ...        -5, 5, 3, 9, -12, 17])
        [Violation(start=7, length=1), Violation(start=12, length=1)]
    """
    values = as_series(series)
    if values.size == 0:
        return []

    zones = zones_for_series(values)
    outside = np.flatnonzero(~within_band(values, zones, 3))

    return [Violation(int(idx) + 1, 1) for idx in outside]


def rule2(series: Sequence[float]) -> list[Violation]:
    """Rule 2: Nine (or more) points in a row are on the same side of the mean.

    Problem indicated: some prolonged bias exists.

    A point exactly on the mean ends a run on either side. Reported runs
    never overlap.

    Example:
        >>> rule2([26, 31, 46, 47, 81, 6, 88, 23, 73, 1, 66, 73, 6, 84, 70, 36,
        ...        80, 94, 63, 37, 62, 84, 53, 54, 80, 75, 26, 56, 48, 3, 6, 56,
        ...        21, 43, 87, 28, 47, 73, 63, 48, 68, 60, 63, 70, 60, 67, 61,
        ...        61, 66])
        [Violation(start=41, length=9)]
    """
    values = as_series(series)
    # Need at least 9 points for this test
    if values.size < 9:
        return []

    side_of_mean = np.sign(values - series_mean(values))

    return _scan_runs(side_of_mean, min_points=9, extra_points=0)


def rule3(series: Sequence[float]) -> list[Violation]:
    """Rule 3: Six (or more) points in a row are continually increasing (or decreasing).

    Problem indicated: a trend exists.

    Example:
        >>> rule3([62, 79, 70, 81, 82, 83, 84, 87, 13, 83, 32, 5, 13, 36, 93,
        ...        74, 34, 20, 69, 96, 98, 101, 104, 107, 110])
        [Violation(start=3, length=6), Violation(start=18, length=8)]
    """
    values = as_series(series)
    # Need at least 6 points for this test
    if values.size < 6:
        return []

    delta_direction = np.sign(np.diff(values))

    # delta_direction has one fewer element than the series
    return _scan_runs(delta_direction, min_points=6, extra_points=1)


def rule4(series: Sequence[float]) -> list[Violation]:
    """Rule 4: Fourteen (or more) points in a row alternate in direction.

    Problem indicated: this much oscillation is beyond noise.

    The scan walks the list of direction reversals and jumps to the next
    break in that list whether or not the segment before it qualified.
    The reported start is the position of the segment's first reversal
    within the reversal list, which is the series position only when the
    series alternates from its first point. Lengths are capped so a
    violation never runs past the end of the series.

    Example:
        >>> rule4([1, 2, 1, 2, 1, 2, 1, 2, 1, 2, 1, 2, 1, 2, 3, 1, 2, 1, 2, 1, 2])
        [Violation(start=1, length=14)]
    """
    values = as_series(series)
    if values.size < 14:
        return []

    # +1 up, -1 down, 0 flat
    delta_direction = np.sign(np.diff(values))

    # |change of direction| is 2 only on a genuine up/down reversal;
    # transitions through a flat step give 0 or 1.
    swing = np.abs(np.diff(delta_direction))
    reversals = np.flatnonzero(swing == 2)

    reversal_gaps = np.diff(reversals)

    violations: list[Violation] = []
    n = reversals.size
    i = 0
    while i < n:
        next_gap = _next_mismatch(reversal_gaps, 1, i + 1, reversal_gaps.size)
        if next_gap >= reversal_gaps.size:
            next_gap = n
        # Three fewer gaps than zigzag points
        points = min(next_gap - i + 3, values.size - i)
        if points >= 14:
            violations.append(Violation(i + 1, points))
        i = next_gap

    return violations


def rule5(series: Sequence[float]) -> list[Violation]:
    """Rule 5: Two (or three) out of three points in a row are more than 2
    standard deviations from the mean in the same direction.

    Problem indicated: there is a medium tendency for samples to be
    mediumly out of control.

    The reported length is the number of points beyond 2 sigma (2 or 3).
    The same points can appear in consecutive windows of 3.

    Example:
        >>> rule5([1524, 1583, 2284, -882, 2184, -485, 57, -13, -3494, -3150,
        ...        1148, 2182, -953, 863, -31, -621, 947, -65, 323, -237])
        [Violation(start=8, length=2), Violation(start=9, length=2)]
    """
    values = as_series(series)
    if values.size < 3:
        return []

    element_direction = band_direction(values, zones_for_series(values), 2)

    window_counts = np.abs(_window_sums(element_direction, 3))
    starts = np.flatnonzero(window_counts >= 2)

    return [Violation(int(s) + 1, int(window_counts[s])) for s in starts]


def rule6(series: Sequence[float]) -> list[Violation]:
    """Rule 6: Four (or five) out of five points in a row are more than 1
    standard deviation from the mean in the same direction.

    Problem indicated: there is a strong tendency for samples to be
    slightly out of control.

    Example:
        >>> rule6([816, 555, 712, 883, 397, 717, 165, 135, 261, 751, 1765, 1858,
        ...        1395, 1263, 1969, 253, 783, 631, 145, 924, -914, -701, -361,
        ...        -590, 252, 848, 371, 546, 113, 984])  # doctest: +NORMALIZE_WHITESPACE
        [Violation(start=10, length=4), Violation(start=11, length=5),
         Violation(start=12, length=4), Violation(start=20, length=4),
         Violation(start=21, length=4)]
    """
    values = as_series(series)
    if values.size < 5:
        return []

    element_direction = band_direction(values, zones_for_series(values), 1)

    window_counts = np.abs(_window_sums(element_direction, 5))
    starts = np.flatnonzero(window_counts >= 4)

    return [Violation(int(s) + 1, int(window_counts[s])) for s in starts]


def rule7(series: Sequence[float]) -> list[Violation]:
    """Rule 7: Fifteen points in a row are all within 1 standard deviation
    of the mean on either side of the mean.

    Problem indicated: with 1 standard deviation, greater variation would
    be expected.

    Every violation has length 15; a longer stretch shows up as one
    violation per starting point.

    Example:
        >>> rule7([13, 81, 96, 40, 24, 66, 24, 34, 27, 72, 32, 73, 74, 22, 59,
        ...        39, 69, 62, 60, 2, 52, 51, 48, 25, 40, 60, 23, 109, -15, 57])
        [Violation(start=4, length=15), Violation(start=5, length=15)]
    """
    values = as_series(series)
    if values.size < 15:
        return []

    within_1_sigma = within_band(values, zones_for_series(values), 1)

    window_counts = _window_sums(within_1_sigma.astype(np.int64), 15)
    starts = np.flatnonzero(window_counts == 15)

    return [Violation(int(s) + 1, 15) for s in starts]


def rule8(series: Sequence[float]) -> list[Violation]:
    """Rule 8: Eight points in a row exist, but none within 1 standard
    deviation of the mean.

    Problem indicated: jumping from above to below while missing the first
    standard deviation band is rarely random.

    Only band membership is tested; the side of the mean each point falls
    on is not. Every violation has length 8, and a longer stretch shows up
    as one violation per starting point.

    Example:
        >>> rule8([1, 2, 3, 4, 5, 6, 7, 8, 9, 10, 11, 12, 13, 14, 15, 16, 17,
        ...        18, 19, 20, 21, 22, 23, 22, 21, 20, 19, 18, 17, 16, 15, 14,
        ...        13, 12, 11, 10, 9, 8, 7, 6, 5, 4, 3, 2, 1])
        [Violation(start=19, length=8), Violation(start=20, length=8)]
    """
    values = as_series(series)
    if values.size < 8:
        return []

    outside_1_sigma = ~within_band(values, zones_for_series(values), 1)

    window_counts = _window_sums(outside_1_sigma.astype(np.int64), 8)
    starts = np.flatnonzero(window_counts == 8)

    return [Violation(int(s) + 1, 8) for s in starts]


@dataclass(frozen=True)
class RuleInfo:
    """Description of a single Nelson Rule.

    Attributes:
        rule_id: Nelson Rule number (1-8)
        rule_name: Short human-readable name
        description: The pattern the rule detects
        problem_indicated: What a violation usually means for the process
        min_samples_required: Shorter series never violate the rule
        severity: Severity level for violations of this rule
        detect: The rule function
    """
    rule_id: int
    rule_name: str
    description: str
    problem_indicated: str
    min_samples_required: int
    severity: Severity
    detect: Callable[[Sequence[float]], list[Violation]]


RULES: Mapping[int, RuleInfo] = MappingProxyType({
    info.rule_id: info
    for info in (
        RuleInfo(
            1, "Outlier",
            "One point is more than 3 standard deviations from the mean",
            "One or more samples are grossly out of control",
            1, Severity.CRITICAL, rule1,
        ),
        RuleInfo(
            2, "Shift",
            "Nine or more points in a row are on the same side of the mean",
            "Some prolonged bias exists",
            9, Severity.WARNING, rule2,
        ),
        RuleInfo(
            3, "Trend",
            "Six or more points in a row are continually increasing or decreasing",
            "A trend exists",
            6, Severity.WARNING, rule3,
        ),
        RuleInfo(
            4, "Alternator",
            "Fourteen or more points in a row alternate in direction",
            "This much oscillation is beyond noise",
            14, Severity.WARNING, rule4,
        ),
        RuleInfo(
            5, "Zone A Warning",
            "Two or three out of three points in a row are more than "
            "2 standard deviations from the mean in the same direction",
            "There is a medium tendency for samples to be mediumly out of control",
            3, Severity.WARNING, rule5,
        ),
        RuleInfo(
            6, "Zone B Warning",
            "Four or five out of five points in a row are more than "
            "1 standard deviation from the mean in the same direction",
            "There is a strong tendency for samples to be slightly out of control",
            5, Severity.WARNING, rule6,
        ),
        RuleInfo(
            7, "Stratification",
            "Fifteen points in a row are all within 1 standard deviation of the mean",
            "With 1 standard deviation, greater variation would be expected",
            15, Severity.WARNING, rule7,
        ),
        RuleInfo(
            8, "Mixture",
            "Eight points in a row exist with none within 1 standard deviation of the mean",
            "Jumping from above to below while missing the first standard "
            "deviation band is rarely random",
            8, Severity.WARNING, rule8,
        ),
    )
})


def _lookup(selector: object) -> RuleInfo:
    if isinstance(selector, bool) or not isinstance(selector, numbers.Integral):
        raise UnsupportedRuleError(selector)
    info = RULES.get(int(selector))
    if info is None:
        raise UnsupportedRuleError(selector)
    return info


def rule(selector: int, series: Sequence[float]) -> list[Violation]:
    """Run Nelson Rule `selector` (1-8) against series.

    Equivalent to calling ``rule<selector>(series)`` directly.

    Raises:
        UnsupportedRuleError: If selector is not an integer from 1 to 8
    """
    info = _lookup(selector)
    violations = info.detect(series)
    logger.debug(
        f"Rule {info.rule_id} ({info.rule_name}) evaluated on {len(series)} points: "
        f"{len(violations)} violation(s)"
    )
    return violations


@dataclass
class RuleResult:
    """Result of checking a Nelson Rule against a series.

    Attributes:
        rule_id: Nelson Rule number (1-8)
        rule_name: Human-readable rule name
        severity: Severity level (WARNING or CRITICAL)
        violations: Violations found, in increasing start order
        message: Human-readable description of the violations
    """
    rule_id: int
    rule_name: str
    severity: Severity
    violations: list[Violation]
    message: str

    @property
    def triggered(self) -> bool:
        return bool(self.violations)


class NelsonRuleLibrary:
    """Aggregates all Nelson Rules.

    Provides a central registry for the 8 Nelson Rules and methods to
    check them individually or collectively against a series.

    Example:
        >>> library = NelsonRuleLibrary()
        >>> [r.rule_id for r in library.check_all([1, 2, 3, 4, 5, 6, 7])]
        [3]
    """

    def __init__(self):
        self._rules: dict[int, RuleInfo] = dict(RULES)

    @property
    def rule_ids(self) -> list[int]:
        return sorted(self._rules)

    def get_rule(self, rule_id: int) -> RuleInfo | None:
        """Get rule by ID.

        Returns:
            RuleInfo if found, None otherwise
        """
        return self._rules.get(rule_id)

    def check_single(self, series: Sequence[float], rule_id: int) -> list[Violation]:
        """Check a single rule.

        Raises:
            UnsupportedRuleError: If rule_id is not an integer from 1 to 8
        """
        return rule(rule_id, series)

    def check_all(
        self,
        series: Sequence[float],
        enabled_rules: Iterable[int] | None = None,
    ) -> list[RuleResult]:
        """Check all enabled rules and return those that were violated.

        Args:
            series: Ordered measurements
            enabled_rules: Rule IDs to check (None = check all)

        Returns:
            One RuleResult per violated rule, ordered by rule ID

        Raises:
            UnsupportedRuleError: If enabled_rules names an unknown rule
        """
        if enabled_rules is None:
            selected = self.rule_ids
        else:
            selected = sorted({_lookup(rule_id).rule_id for rule_id in enabled_rules})

        values = as_series(series)
        results = []
        for rule_id in selected:
            info = self._rules[rule_id]
            violations = self.check_single(values, rule_id)
            if violations:
                results.append(RuleResult(
                    rule_id=info.rule_id,
                    rule_name=info.rule_name,
                    severity=info.severity,
                    violations=violations,
                    message=_describe(info, violations),
                ))

        logger.debug(
            f"Checked rules {selected} on {values.size} points, "
            f"triggered={[r.rule_id for r in results]}"
        )
        return results


def _describe(info: RuleInfo, violations: list[Violation]) -> str:
    starts = ", ".join(str(v.start) for v in violations)
    noun = "violation" if len(violations) == 1 else "violations"
    return (
        f"Rule {info.rule_id} ({info.rule_name}): {len(violations)} {noun} "
        f"starting at point {starts}"
    )
