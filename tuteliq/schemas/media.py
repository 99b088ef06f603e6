"""
tuteliq/schemas/media.py
=========================
Voice & image upload results.

Both endpoints are multipart uploads; every field of their results is
optional because the server only fills the sections the requested
``analysis_type`` produced.
"""

from dataclasses import dataclass
from typing import Any

from tuteliq.schemas.safety import opt_float, opt_int


@dataclass(frozen=True)
class TranscriptionSegment:
    """A time-aligned slice of a transcript (seconds)."""

    start: float
    end: float
    text: str

    @classmethod
    def from_json(cls, data: dict[str, Any]) -> "TranscriptionSegment":
        return cls(
            start=float(data.get("start", 0.0)),
            end=float(data.get("end", 0.0)),
            text=data.get("text", ""),
        )


@dataclass(frozen=True)
class TranscriptionResult:
    text: str
    language: str | None = None
    duration: float | None = None
    segments: list[TranscriptionSegment] | None = None

    @classmethod
    def from_json(cls, data: dict[str, Any]) -> "TranscriptionResult":
        segments = data.get("segments")
        return cls(
            text=data.get("text", ""),
            language=data.get("language"),
            duration=opt_float(data.get("duration")),
            segments=(
                [TranscriptionSegment.from_json(s) for s in segments]
                if segments is not None else None
            ),
        )


@dataclass(frozen=True)
class VoiceAnalysisResult:
    file_id: str | None = None
    transcription: TranscriptionResult | None = None
    analysis: dict[str, Any] | None = None
    overall_risk_score: float | None = None
    overall_severity: str | None = None
    external_id: str | None = None
    customer_id: str | None = None
    metadata: dict[str, Any] | None = None
    credits_used: int | None = None

    @classmethod
    def from_json(cls, data: dict[str, Any]) -> "VoiceAnalysisResult":
        transcription = data.get("transcription")
        return cls(
            file_id=data.get("file_id"),
            transcription=(
                TranscriptionResult.from_json(transcription)
                if transcription is not None else None
            ),
            analysis=data.get("analysis"),
            overall_risk_score=opt_float(data.get("overall_risk_score")),
            overall_severity=data.get("overall_severity"),
            external_id=data.get("external_id"),
            customer_id=data.get("customer_id"),
            metadata=data.get("metadata"),
            credits_used=opt_int(data.get("credits_used")),
        )


@dataclass(frozen=True)
class VisionResult:
    extracted_text: str | None = None
    visual_categories: list[str] | None = None
    visual_severity: str | None = None
    visual_confidence: float | None = None
    visual_description: str | None = None
    contains_text: bool | None = None
    contains_faces: bool | None = None

    @classmethod
    def from_json(cls, data: dict[str, Any]) -> "VisionResult":
        categories = data.get("visual_categories")
        return cls(
            extracted_text=data.get("extracted_text"),
            visual_categories=list(categories) if categories is not None else None,
            visual_severity=data.get("visual_severity"),
            visual_confidence=opt_float(data.get("visual_confidence")),
            visual_description=data.get("visual_description"),
            contains_text=data.get("contains_text"),
            contains_faces=data.get("contains_faces"),
        )


@dataclass(frozen=True)
class ImageAnalysisResult:
    file_id: str | None = None
    vision: VisionResult | None = None
    text_analysis: dict[str, Any] | None = None
    overall_risk_score: float | None = None
    overall_severity: str | None = None
    external_id: str | None = None
    customer_id: str | None = None
    metadata: dict[str, Any] | None = None
    credits_used: int | None = None

    @classmethod
    def from_json(cls, data: dict[str, Any]) -> "ImageAnalysisResult":
        vision = data.get("vision")
        return cls(
            file_id=data.get("file_id"),
            vision=VisionResult.from_json(vision) if vision is not None else None,
            text_analysis=data.get("text_analysis"),
            overall_risk_score=opt_float(data.get("overall_risk_score")),
            overall_severity=data.get("overall_severity"),
            external_id=data.get("external_id"),
            customer_id=data.get("customer_id"),
            metadata=data.get("metadata"),
            credits_used=opt_int(data.get("credits_used")),
        )
