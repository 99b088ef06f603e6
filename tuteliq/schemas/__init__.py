# tuteliq/schemas/__init__.py
# ============================
# Typed request/result schemas — Tuteliq Python SDK
#
# Responsibility:
#   - Map raw JSON payloads to/from typed values for every API area
#   - One module per area: safety, media, account, webhooks, billing, stream
#
# Decoders accept the server's snake_case JSON and never perform I/O.

from tuteliq.schemas.safety import (  # noqa: F401
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
)
from tuteliq.schemas.media import (  # noqa: F401
    TranscriptionSegment,
    TranscriptionResult,
    VoiceAnalysisResult,
    VisionResult,
    ImageAnalysisResult,
)
from tuteliq.schemas.account import (  # noqa: F401
    AccountDeletionResult,
    AccountExportResult,
    ConsentRecord,
    ConsentActionResult,
    ConsentStatusResult,
    RectifyDataResult,
    AuditLogEntry,
    AuditLogsResult,
    BreachRecord,
    LogBreachResult,
    BreachListResult,
    BreachResult,
)
from tuteliq.schemas.webhooks import (  # noqa: F401
    Webhook,
    WebhookListResult,
    WebhookActionResult,
    DeleteWebhookResult,
    TestWebhookResult,
    RegenerateSecretResult,
)
from tuteliq.schemas.billing import (  # noqa: F401
    PricingPlan,
    PricingResult,
    PricingDetailPlan,
    PricingDetailsResult,
    UsageDay,
    UsageHistoryResult,
    UsageByToolResult,
    UsageMonthlyResult,
)
from tuteliq.schemas.stream import (  # noqa: F401
    VoiceStreamConfig,
    ReadyEvent,
    TranscriptionEvent,
    AlertEvent,
    SessionSummaryEvent,
    ConfigUpdatedEvent,
    ErrorEvent,
    StreamEvent,
    decode_event,
)
