"""Nelson Rules for statistical process control.

Usage:
    >>> import nelsonrules
    >>> nelsonrules.rule3([62, 79, 70, 81, 82, 83, 84, 87, 13])
    [Violation(start=3, length=6)]
    >>> nelsonrules.rule(3, [62, 79, 70, 81, 82, 83, 84, 87, 13])
    [Violation(start=3, length=6)]

Violation start indices are 1-based.
"""

from nelsonrules.core.engine import (
    RULES,
    NelsonRuleLibrary,
    RuleInfo,
    RuleResult,
    Severity,
    UnsupportedRuleError,
    Violation,
    rule,
    rule1,
    rule2,
    rule3,
    rule4,
    rule5,
    rule6,
    rule7,
    rule8,
)
from nelsonrules.core.logging import configure_logging

__version__ = "0.1.0"

__all__ = [
    "rule",
    "rule1",
    "rule2",
    "rule3",
    "rule4",
    "rule5",
    "rule6",
    "rule7",
    "rule8",
    "Violation",
    "UnsupportedRuleError",
    "RULES",
    "NelsonRuleLibrary",
    "RuleInfo",
    "RuleResult",
    "Severity",
    "configure_logging",
]
