# tuteliq/__init__.py
# ====================
# Tuteliq Python SDK — typed async client for the Tuteliq child-safety API
#
# Components:
#   - Tuteliq            (client.py)        request/response operations
#   - VoiceStreamSession (voice_stream.py)  real-time voice analysis over WebSocket
#   - TuteliqError       (errors.py)        single error type, switch on .kind
#
# Public API:
#   Tuteliq(api_key=...) / Tuteliq.from_env()

from tuteliq.client import Tuteliq, resolve_platform  # noqa: F401
from tuteliq.config import TuteliqConfig  # noqa: F401
from tuteliq.enums import (  # noqa: F401
    Audience,
    AuditAction,
    BreachNotificationStatus,
    BreachSeverity,
    BreachStatus,
    ConsentType,
    EmotionTrend,
    GroomingRisk,
    MessageRole,
    RecommendedAction,
    RiskLevel,
    Severity,
)
from tuteliq.errors import ErrorKind, TuteliqError  # noqa: F401
from tuteliq.schemas import (  # noqa: F401
    AnalysisContext,
    GroomingMessage,
    EmotionMessage,
    ReportMessage,
    BullyingResult,
    GroomingResult,
    UnsafeResult,
    AnalyzeResult,
    EmotionsResult,
    ActionPlanResult,
    ReportResult,
    VoiceAnalysisResult,
    ImageAnalysisResult,
    VoiceStreamConfig,
    ReadyEvent,
    TranscriptionEvent,
    AlertEvent,
    SessionSummaryEvent,
    ConfigUpdatedEvent,
    ErrorEvent,
)
from tuteliq.transport import Usage  # noqa: F401
from tuteliq.voice_stream import (  # noqa: F401
    SessionState,
    VoiceStreamHandlers,
    VoiceStreamSession,
)

__version__ = "1.0.0"
