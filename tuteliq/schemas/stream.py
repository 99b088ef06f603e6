"""
tuteliq/schemas/stream.py
==========================
Voice Streaming Wire Types — Tuteliq Python SDK

Responsibility:
    - Encode outbound control frames (auth, config, end) as JSON text
    - Decode inbound JSON text frames into one closed set of typed events:
      ready | transcription | alert | session_summary | config_updated | error
    - Drop unknown or malformed frames by returning None, never raising

Outbound frames::

    {"type": "auth", "token": "..."}
    {"type": "config", "interval_seconds": 10, "analysis_types": [...], "context": {...}}
    {"type": "end"}

Audio is sent as raw binary frames and never passes through this module.
"""

import json
import logging
from dataclasses import dataclass, field
from typing import Any, ClassVar, Union

from tuteliq.schemas.media import TranscriptionSegment

logger = logging.getLogger("tuteliq.schemas.stream")


# ---------------------------------------------------------------------------
# Outbound
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class VoiceStreamConfig:
    """Server-side session behaviour, sent at connect time or later updates."""

    interval_seconds: int | None = None
    analysis_types: tuple[str, ...] | None = None
    context: dict[str, str] | None = None

    def __post_init__(self) -> None:
        if self.analysis_types is not None:
            object.__setattr__(self, "analysis_types", tuple(self.analysis_types))
        if self.context is not None:
            object.__setattr__(self, "context", dict(self.context))

    def to_json(self) -> dict[str, Any]:
        data: dict[str, Any] = {"type": "config"}
        if self.interval_seconds is not None:
            data["interval_seconds"] = self.interval_seconds
        if self.analysis_types is not None:
            data["analysis_types"] = list(self.analysis_types)
        if self.context is not None:
            data["context"] = dict(self.context)
        return data


def auth_message(token: str) -> str:
    return json.dumps({"type": "auth", "token": token})


def config_message(config: VoiceStreamConfig) -> str:
    return json.dumps(config.to_json())


def end_message() -> str:
    return json.dumps({"type": "end"})


# ---------------------------------------------------------------------------
# Inbound events
# ---------------------------------------------------------------------------


def _require_str(data: dict[str, Any], key: str) -> str:
    value = data[key]
    if not isinstance(value, str):
        raise TypeError(f"{key!r} must be a string, got {type(value).__name__}")
    return value


@dataclass(frozen=True)
class ReadyEvent:
    type: ClassVar[str] = "ready"

    session_id: str
    config: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_json(cls, data: dict[str, Any]) -> "ReadyEvent":
        return cls(session_id=_require_str(data, "session_id"), config=data.get("config") or {})


@dataclass(frozen=True)
class TranscriptionEvent:
    type: ClassVar[str] = "transcription"

    text: str
    segments: list[TranscriptionSegment]
    flush_index: int

    @classmethod
    def from_json(cls, data: dict[str, Any]) -> "TranscriptionEvent":
        return cls(
            text=_require_str(data, "text"),
            segments=[
                TranscriptionSegment(
                    start=float(s["start"]), end=float(s["end"]), text=_require_str(s, "text"),
                )
                for s in data.get("segments") or []
            ],
            flush_index=int(data["flush_index"]),
        )


@dataclass(frozen=True)
class AlertEvent:
    type: ClassVar[str] = "alert"

    category: str
    severity: str
    risk_score: float
    details: dict[str, Any]
    flush_index: int

    @classmethod
    def from_json(cls, data: dict[str, Any]) -> "AlertEvent":
        return cls(
            category=_require_str(data, "category"),
            severity=_require_str(data, "severity"),
            risk_score=float(data["risk_score"]),
            details=data.get("details") or {},
            flush_index=int(data["flush_index"]),
        )


@dataclass(frozen=True)
class SessionSummaryEvent:
    type: ClassVar[str] = "session_summary"

    session_id: str
    duration_seconds: float
    overall_risk: str
    overall_risk_score: float
    total_flushes: int
    transcript: str

    @classmethod
    def from_json(cls, data: dict[str, Any]) -> "SessionSummaryEvent":
        return cls(
            session_id=_require_str(data, "session_id"),
            duration_seconds=float(data["duration_seconds"]),
            overall_risk=_require_str(data, "overall_risk"),
            overall_risk_score=float(data["overall_risk_score"]),
            total_flushes=int(data["total_flushes"]),
            transcript=_require_str(data, "transcript"),
        )


@dataclass(frozen=True)
class ConfigUpdatedEvent:
    type: ClassVar[str] = "config_updated"

    config: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_json(cls, data: dict[str, Any]) -> "ConfigUpdatedEvent":
        return cls(config=data.get("config") or {})


@dataclass(frozen=True)
class ErrorEvent:
    type: ClassVar[str] = "error"

    code: str
    message: str

    @classmethod
    def from_json(cls, data: dict[str, Any]) -> "ErrorEvent":
        return cls(code=_require_str(data, "code"), message=_require_str(data, "message"))


StreamEvent = Union[
    ReadyEvent,
    TranscriptionEvent,
    AlertEvent,
    SessionSummaryEvent,
    ConfigUpdatedEvent,
    ErrorEvent,
]

EVENT_TYPES: dict[str, type] = {
    cls.type: cls
    for cls in (
        ReadyEvent,
        TranscriptionEvent,
        AlertEvent,
        SessionSummaryEvent,
        ConfigUpdatedEvent,
        ErrorEvent,
    )
}


def decode_event(raw: str | bytes) -> StreamEvent | None:
    """
    Decode one inbound text frame.

    Returns:
        The typed event, or None when the frame is not JSON, is not an
        object, names an unknown ``type``, or lacks required fields.
    """
    try:
        data = json.loads(raw)
    except (TypeError, ValueError):
        logger.debug("Dropping non-JSON frame.")
        return None

    if not isinstance(data, dict):
        return None

    type_name = data.get("type")
    event_cls = EVENT_TYPES.get(type_name) if isinstance(type_name, str) else None
    if event_cls is None:
        logger.debug("Dropping frame with unknown type %r.", type_name)
        return None

    try:
        return event_cls.from_json(data)
    except (KeyError, TypeError, ValueError) as exc:
        logger.debug("Dropping malformed %s frame: %s", event_cls.type, exc)
        return None
