"""
tuteliq/schemas/safety.py
==========================
Safety & Guidance Schemas — Tuteliq Python SDK

Responsibility:
    - Request-side value types (analysis context, conversation messages)
      with ``to_json`` encoders
    - Typed results for bullying, grooming, unsafe-content, quick analysis,
      emotions, action plans and incident reports, with ``from_json``
      decoders

Every result carries the optional correlation fields (``external_id``,
``metadata``) and the ``credits_used`` billing counter.

This module does NOT:
    - Perform HTTP calls
    - Compute risk levels (see tuteliq/risk.py)
"""

from dataclasses import dataclass, field
from typing import Any

from tuteliq.enums import (
    EmotionTrend,
    GroomingRisk,
    MessageRole,
    RiskLevel,
    Severity,
)


# ---------------------------------------------------------------------------
# Decoding helpers
# ---------------------------------------------------------------------------


def str_list(value: Any) -> list[str]:
    if not value:
        return []
    return [str(v) for v in value]


def as_float(value: Any, default: float = 0.0) -> float:
    if value is None:
        return default
    return float(value)


def opt_float(value: Any) -> float | None:
    return None if value is None else float(value)


def opt_int(value: Any) -> int | None:
    return None if value is None else int(value)


# ---------------------------------------------------------------------------
# Request-side types
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class AnalysisContext:
    """Optional context sent alongside analysed content."""

    language: str | None = None
    age_group: str | None = None
    relationship: str | None = None
    platform: str | None = None

    def to_json(self) -> dict[str, Any]:
        data: dict[str, Any] = {}
        if self.language is not None:
            data["language"] = self.language
        if self.age_group is not None:
            data["age_group"] = self.age_group
        if self.relationship is not None:
            data["relationship"] = self.relationship
        if self.platform is not None:
            data["platform"] = self.platform
        return data


@dataclass(frozen=True)
class GroomingMessage:
    """One conversation turn for grooming detection."""

    role: MessageRole
    content: str

    def to_json(self) -> dict[str, Any]:
        return {"sender_role": MessageRole(self.role).value, "text": self.content}


@dataclass(frozen=True)
class EmotionMessage:
    sender: str
    content: str

    def to_json(self) -> dict[str, Any]:
        return {"sender": self.sender, "text": self.content}


@dataclass(frozen=True)
class ReportMessage:
    sender: str
    content: str

    def to_json(self) -> dict[str, Any]:
        return {"sender": self.sender, "text": self.content}


# ---------------------------------------------------------------------------
# Detection results
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class BullyingResult:
    is_bullying: bool
    severity: Severity
    bullying_type: list[str]
    confidence: float
    rationale: str
    risk_score: float
    recommended_action: str
    external_id: str | None = None
    metadata: dict[str, Any] | None = None
    credits_used: int | None = None

    @classmethod
    def from_json(cls, data: dict[str, Any]) -> "BullyingResult":
        return cls(
            is_bullying=bool(data.get("is_bullying", False)),
            severity=Severity.parse(data.get("severity")),
            bullying_type=str_list(data.get("bullying_type")),
            confidence=as_float(data.get("confidence")),
            rationale=data.get("rationale", ""),
            risk_score=as_float(data.get("risk_score")),
            recommended_action=data.get("recommended_action", "none"),
            external_id=data.get("external_id"),
            metadata=data.get("metadata"),
            credits_used=opt_int(data.get("credits_used")),
        )


@dataclass(frozen=True)
class GroomingResult:
    grooming_risk: GroomingRisk
    flags: list[str]
    confidence: float
    rationale: str
    risk_score: float
    recommended_action: str
    external_id: str | None = None
    metadata: dict[str, Any] | None = None
    credits_used: int | None = None

    @classmethod
    def from_json(cls, data: dict[str, Any]) -> "GroomingResult":
        return cls(
            grooming_risk=GroomingRisk.parse(data.get("grooming_risk")),
            flags=str_list(data.get("flags")),
            confidence=as_float(data.get("confidence")),
            rationale=data.get("rationale", ""),
            risk_score=as_float(data.get("risk_score")),
            recommended_action=data.get("recommended_action", "none"),
            external_id=data.get("external_id"),
            metadata=data.get("metadata"),
            credits_used=opt_int(data.get("credits_used")),
        )


@dataclass(frozen=True)
class UnsafeResult:
    unsafe: bool
    categories: list[str]
    severity: Severity
    confidence: float
    rationale: str
    risk_score: float
    recommended_action: str
    external_id: str | None = None
    metadata: dict[str, Any] | None = None
    credits_used: int | None = None

    @classmethod
    def from_json(cls, data: dict[str, Any]) -> "UnsafeResult":
        return cls(
            unsafe=bool(data.get("unsafe", False)),
            categories=str_list(data.get("categories")),
            severity=Severity.parse(data.get("severity")),
            confidence=as_float(data.get("confidence")),
            rationale=data.get("rationale", ""),
            risk_score=as_float(data.get("risk_score")),
            recommended_action=data.get("recommended_action", "none"),
            external_id=data.get("external_id"),
            metadata=data.get("metadata"),
            credits_used=opt_int(data.get("credits_used")),
        )


@dataclass(frozen=True)
class AnalyzeResult:
    """Client-side composition of the bullying and unsafe-content checks."""

    risk_level: RiskLevel
    risk_score: float
    summary: str
    recommended_action: str
    bullying: BullyingResult | None = None
    unsafe: UnsafeResult | None = None
    external_id: str | None = None
    metadata: dict[str, Any] | None = None
    credits_used: int | None = None


# ---------------------------------------------------------------------------
# Analysis & guidance results
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class EmotionsResult:
    dominant_emotions: list[str]
    trend: EmotionTrend
    intensity: float
    concerning_patterns: list[str]
    recommended_followup: str
    external_id: str | None = None
    metadata: dict[str, Any] | None = None
    credits_used: int | None = None

    @classmethod
    def from_json(cls, data: dict[str, Any]) -> "EmotionsResult":
        return cls(
            dominant_emotions=str_list(data.get("dominant_emotions")),
            trend=EmotionTrend.parse(data.get("trend")),
            intensity=as_float(data.get("intensity")),
            concerning_patterns=str_list(data.get("concerning_patterns")),
            recommended_followup=data.get("recommended_followup", ""),
            external_id=data.get("external_id"),
            metadata=data.get("metadata"),
            credits_used=opt_int(data.get("credits_used")),
        )


@dataclass(frozen=True)
class ActionPlanResult:
    steps: list[str]
    tone: str
    resources: list[str] = field(default_factory=list)
    urgency: str = ""
    external_id: str | None = None
    metadata: dict[str, Any] | None = None
    credits_used: int | None = None

    @classmethod
    def from_json(cls, data: dict[str, Any]) -> "ActionPlanResult":
        return cls(
            steps=str_list(data.get("steps")),
            tone=data.get("tone", ""),
            resources=str_list(data.get("resources")),
            urgency=data.get("urgency", ""),
            external_id=data.get("external_id"),
            metadata=data.get("metadata"),
            credits_used=opt_int(data.get("credits_used")),
        )


@dataclass(frozen=True)
class ReportResult:
    summary: str
    risk_level: RiskLevel
    timeline: list[str]
    key_evidence: list[str]
    recommended_next_steps: list[str]
    external_id: str | None = None
    metadata: dict[str, Any] | None = None
    credits_used: int | None = None

    @classmethod
    def from_json(cls, data: dict[str, Any]) -> "ReportResult":
        return cls(
            summary=data.get("summary", ""),
            risk_level=RiskLevel.parse(data.get("risk_level")),
            timeline=str_list(data.get("timeline")),
            key_evidence=str_list(data.get("key_evidence")),
            recommended_next_steps=str_list(data.get("recommended_next_steps")),
            external_id=data.get("external_id"),
            metadata=data.get("metadata"),
            credits_used=opt_int(data.get("credits_used")),
        )
