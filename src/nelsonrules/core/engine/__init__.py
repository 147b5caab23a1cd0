"""Rule Engine - Nelson Rules detection over a series."""

from .nelson_rules import (
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

__all__ = [
    # Rule functions
    "rule",
    "rule1",
    "rule2",
    "rule3",
    "rule4",
    "rule5",
    "rule6",
    "rule7",
    "rule8",
    # Results
    "Violation",
    "UnsupportedRuleError",
    # Rule library
    "RULES",
    "NelsonRuleLibrary",
    "RuleInfo",
    "RuleResult",
    "Severity",
]
