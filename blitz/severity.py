"""Severity classification of a record's remaining days."""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from config.settings import CRITICAL_THRESHOLD_DAYS, STALENESS_THRESHOLD_DAYS


class Severity(str, Enum):
    """Presentation tier of a record."""

    CRITICAL = "critical"        # 1 week or less
    WARNING = "warning"          # within the staleness criterion
    NONE = "none"


# Row class names shared with the existing stylesheet.
CSS_CLASSES = {
    Severity.CRITICAL: "vencendo-7d",
    Severity.WARNING: "vencendo-45d",
    Severity.NONE: "",
}


@dataclass
class SeverityThreshold:
    """Records with at most ``days`` remaining fall into ``severity``."""

    days: int
    severity: Severity
    label: str


def build_thresholds(
    critical_days: int = CRITICAL_THRESHOLD_DAYS,
    staleness_days: int = STALENESS_THRESHOLD_DAYS,
) -> list[SeverityThreshold]:
    return [
        SeverityThreshold(days=critical_days, severity=Severity.CRITICAL, label="1 semana"),
        SeverityThreshold(days=staleness_days, severity=Severity.WARNING, label=f"{staleness_days} dias"),
    ]


DEFAULT_THRESHOLDS = build_thresholds()


def classify(days_remaining: int, thresholds: Optional[list[SeverityThreshold]] = None) -> Severity:
    """Return the most severe tier whose threshold covers *days_remaining*."""
    for threshold in sorted(thresholds or DEFAULT_THRESHOLDS, key=lambda t: t.days):
        if days_remaining <= threshold.days:
            return threshold.severity
    return Severity.NONE


def css_class(severity: Severity) -> str:
    return CSS_CLASSES[severity]
