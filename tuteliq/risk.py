"""
tuteliq/risk.py
================
Quick-Analysis Risk Composition — Tuteliq Python SDK

Responsibility:
    - Bucket a 0.0–1.0 risk score into a discrete RiskLevel using fixed
      thresholds
    - Pick one recommended action from several sub-results by priority
    - Build the human-readable findings summary for ``analyze()``

Thresholds (inclusive lower bounds):
    >= 0.90 critical | >= 0.70 high | >= 0.50 medium | >= 0.30 low | else safe

This module does NOT:
    - Call the API
    - Re-score anything the server already scored
"""

from typing import Iterable

from tuteliq.enums import RecommendedAction, RiskLevel
from tuteliq.schemas.safety import BullyingResult, UnsafeResult

# ---------------------------------------------------------------------------
# Thresholds, checked highest first
# ---------------------------------------------------------------------------

RISK_THRESHOLDS: tuple[tuple[float, RiskLevel], ...] = (
    (0.90, RiskLevel.CRITICAL),
    (0.70, RiskLevel.HIGH),
    (0.50, RiskLevel.MEDIUM),
    (0.30, RiskLevel.LOW),
)

ACTION_PRIORITY: tuple[RecommendedAction, ...] = (
    RecommendedAction.IMMEDIATE_INTERVENTION,
    RecommendedAction.FLAG_FOR_MODERATOR,
    RecommendedAction.MONITOR,
)

NO_FINDINGS_SUMMARY = "No safety concerns detected."


def classify_risk_level(score: float) -> RiskLevel:
    """Map a risk score to its RiskLevel bucket."""
    for threshold, level in RISK_THRESHOLDS:
        if score >= threshold:
            return level
    return RiskLevel.SAFE


def pick_recommended_action(actions: Iterable[str | None]) -> str:
    """
    Return the highest-priority action present in ``actions``.

    immediate_intervention > flag_for_moderator > monitor > none.
    Unknown action strings are ignored.
    """
    present = {a for a in actions if a}
    for action in ACTION_PRIORITY:
        if action.value in present:
            return action.value
    return RecommendedAction.NONE.value


def build_summary(
    bullying: BullyingResult | None,
    unsafe: UnsafeResult | None,
) -> str:
    findings: list[str] = []
    if bullying is not None and bullying.is_bullying:
        findings.append(f"Bullying detected ({bullying.severity.value})")
    if unsafe is not None and unsafe.unsafe:
        findings.append(f"Unsafe content: {', '.join(unsafe.categories)}")
    if not findings:
        return NO_FINDINGS_SUMMARY
    return ". ".join(findings)


def sum_credits(*credits: int | None) -> int | None:
    """Total the credits of sub-results; None when none reported any."""
    reported = [c for c in credits if c is not None]
    if not reported:
        return None
    return sum(reported)
