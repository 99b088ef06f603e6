"""
tuteliq/enums.py
=================
Closed string enumerations used across request and result types.

Values are the exact strings the API sends and accepts. Decoders that
read server values fall back to a neutral member instead of failing, so
a new server-side value never breaks result parsing.
"""

from enum import Enum


class Severity(str, Enum):
    """Severity level for detected issues."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"

    @classmethod
    def parse(cls, value: str | None) -> "Severity":
        try:
            return cls(value)
        except ValueError:
            return cls.LOW


class GroomingRisk(str, Enum):
    """Risk level for grooming detection."""

    NONE = "none"
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"

    @classmethod
    def parse(cls, value: str | None) -> "GroomingRisk":
        try:
            return cls(value)
        except ValueError:
            return cls.NONE


class RiskLevel(str, Enum):
    """Overall risk level for content analysis."""

    SAFE = "safe"
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"

    @classmethod
    def parse(cls, value: str | None) -> "RiskLevel":
        try:
            return cls(value)
        except ValueError:
            return cls.SAFE


class EmotionTrend(str, Enum):
    """Emotion trend direction."""

    IMPROVING = "improving"
    STABLE = "stable"
    WORSENING = "worsening"

    @classmethod
    def parse(cls, value: str | None) -> "EmotionTrend":
        try:
            return cls(value)
        except ValueError:
            return cls.STABLE


class Audience(str, Enum):
    """Target audience for action plans."""

    CHILD = "child"
    PARENT = "parent"
    EDUCATOR = "educator"
    PLATFORM = "platform"


class MessageRole(str, Enum):
    """Role of a message sender in grooming detection."""

    ADULT = "adult"
    CHILD = "child"
    UNKNOWN = "unknown"


class RecommendedAction(str, Enum):
    """Moderation actions, highest priority first."""

    IMMEDIATE_INTERVENTION = "immediate_intervention"
    FLAG_FOR_MODERATOR = "flag_for_moderator"
    MONITOR = "monitor"
    NONE = "none"


class ConsentType(str, Enum):
    DATA_PROCESSING = "data_processing"
    ANALYTICS = "analytics"
    MARKETING = "marketing"
    THIRD_PARTY_SHARING = "third_party_sharing"
    CHILD_SAFETY_MONITORING = "child_safety_monitoring"


class AuditAction(str, Enum):
    DATA_ACCESS = "data_access"
    DATA_EXPORT = "data_export"
    DATA_DELETION = "data_deletion"
    DATA_RECTIFICATION = "data_rectification"
    CONSENT_GRANTED = "consent_granted"
    CONSENT_WITHDRAWN = "consent_withdrawn"
    BREACH_NOTIFICATION = "breach_notification"


class BreachSeverity(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class BreachStatus(str, Enum):
    DETECTED = "detected"
    INVESTIGATING = "investigating"
    CONTAINED = "contained"
    REPORTED = "reported"
    RESOLVED = "resolved"


class BreachNotificationStatus(str, Enum):
    PENDING = "pending"
    USERS_NOTIFIED = "users_notified"
    DPA_NOTIFIED = "dpa_notified"
    COMPLETED = "completed"
