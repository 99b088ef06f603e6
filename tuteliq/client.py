"""
tuteliq/client.py
==================
Client Facade — Tuteliq Python SDK

Responsibility:
    - Expose every API operation as one async method
    - Build each request (path + JSON body or multipart fields)
    - Run each call through RetryPolicy -> Transport
    - Decode responses into typed results and echo back the caller's
      ``external_id`` / ``metadata``
    - Record the request id and monthly Usage of the last successful call
    - Compose the quick ``analyze()`` result from bullying + unsafe checks
    - Create VoiceStreamSession objects (which bypass transport and retry)

Usage::

    async with Tuteliq(api_key="...") as client:
        result = await client.analyze("Message to check")
        if result.risk_level is not RiskLevel.SAFE:
            print(result.summary)

This module does NOT:
    - Perform any detection itself (all analysis is server-side)
    - Handle WebSocket frames (see voice_stream.py)
"""

import asyncio
import json
import logging
from dataclasses import replace
from typing import Any, Sequence
from urllib.parse import quote, urlencode

import aiohttp

from tuteliq.config import TuteliqConfig
from tuteliq.enums import (
    Audience,
    AuditAction,
    BreachNotificationStatus,
    BreachSeverity,
    BreachStatus,
    ConsentType,
    Severity,
)
from tuteliq.retry import RetryPolicy
from tuteliq.risk import (
    build_summary,
    classify_risk_level,
    pick_recommended_action,
    sum_credits,
)
from tuteliq.schemas.account import (
    AccountDeletionResult,
    AccountExportResult,
    AuditLogsResult,
    BreachListResult,
    BreachResult,
    ConsentActionResult,
    ConsentStatusResult,
    LogBreachResult,
    RectifyDataResult,
)
from tuteliq.schemas.billing import (
    PricingDetailsResult,
    PricingResult,
    UsageByToolResult,
    UsageHistoryResult,
    UsageMonthlyResult,
)
from tuteliq.schemas.media import ImageAnalysisResult, VoiceAnalysisResult
from tuteliq.schemas.safety import (
    ActionPlanResult,
    AnalysisContext,
    AnalyzeResult,
    BullyingResult,
    EmotionMessage,
    EmotionsResult,
    GroomingMessage,
    GroomingResult,
    ReportMessage,
    ReportResult,
    UnsafeResult,
)
from tuteliq.schemas.stream import VoiceStreamConfig
from tuteliq.schemas.webhooks import (
    DeleteWebhookResult,
    RegenerateSecretResult,
    TestWebhookResult,
    WebhookActionResult,
    WebhookListResult,
)
from tuteliq.transport import ApiResponse, Transport, Usage
from tuteliq.voice_stream import VoiceStreamHandlers, VoiceStreamSession

logger = logging.getLogger("tuteliq.client")

SDK_IDENTIFIER = "Python SDK"
DEFAULT_CHECKS: tuple[str, ...] = ("bullying", "unsafe")


def resolve_platform(platform: str | None) -> str:
    """Append the SDK marker to a caller-supplied platform name."""
    if platform:
        return f"{platform} - {SDK_IDENTIFIER}"
    return SDK_IDENTIFIER


def _with_query(path: str, params: dict[str, Any]) -> str:
    present = {k: v for k, v in params.items() if v is not None}
    if not present:
        return path
    return f"{path}?{urlencode(present)}"


def _enum_value(value: Any) -> Any:
    return getattr(value, "value", value)


class Tuteliq:
    """Async client for the Tuteliq child-safety API."""

    def __init__(
        self,
        api_key: str | None = None,
        *,
        config: TuteliqConfig | None = None,
        session: aiohttp.ClientSession | None = None,
        **settings: Any,
    ):
        """
        Args:
            api_key:  Tuteliq API key. Ignored when ``config`` is given.
            config:   Full client configuration.
            session:  Optional aiohttp session to reuse (not closed by us).
            settings: Overrides for TuteliqConfig fields (timeout,
                      max_retries, retry_delay, base_url, stream_url, ...).

        Raises:
            ValueError: If the API key is missing or malformed.
        """
        if config is None:
            config = TuteliqConfig(api_key=api_key or "", **settings)
        elif settings:
            config = config.with_overrides(**settings)

        self.config = config
        self._transport = Transport(
            api_key=config.api_key,
            base_url=config.base_url,
            timeout=config.timeout,
            session=session,
        )
        self._retry = RetryPolicy(
            max_retries=config.max_retries,
            retry_delay=config.retry_delay,
        )

        self.usage: Usage | None = None
        self.last_request_id: str | None = None

    @classmethod
    def from_env(cls, **settings: Any) -> "Tuteliq":
        return cls(config=TuteliqConfig.from_env(**settings))

    async def close(self) -> None:
        await self._transport.close()

    async def __aenter__(self) -> "Tuteliq":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    # ------------------------------------------------------------------
    # Voice streaming
    # ------------------------------------------------------------------

    def voice_stream(
        self,
        config: VoiceStreamConfig | None = None,
        handlers: VoiceStreamHandlers | None = None,
    ) -> VoiceStreamSession:
        """Create (but do not connect) a voice streaming session."""
        return VoiceStreamSession(
            self.config.api_key,
            config=config,
            handlers=handlers,
            url=self.config.stream_url,
            connect_timeout=self.config.connect_timeout,
        )

    # ------------------------------------------------------------------
    # Request plumbing
    # ------------------------------------------------------------------

    async def _call(
        self,
        method: str,
        path: str,
        body: dict[str, Any] | None = None,
    ) -> Any:
        response = await self._retry.run(
            lambda: self._transport.request(method, path, body)
        )
        return self._record(response)

    async def _upload(
        self,
        path: str,
        file: bytes,
        filename: str,
        fields: dict[str, str],
    ) -> Any:
        response = await self._retry.run(
            lambda: self._transport.upload(path, file, filename, "file", fields)
        )
        return self._record(response)

    def _record(self, response: ApiResponse) -> Any:
        self.last_request_id = response.request_id
        if response.usage is not None:
            self.usage = response.usage
        return response.data

    @staticmethod
    def _context(context: AnalysisContext | None, **extra: Any) -> dict[str, Any]:
        data = {k: v for k, v in extra.items() if v is not None}
        if context is not None:
            data.update(context.to_json())
        data["platform"] = resolve_platform(context.platform if context else None)
        return data

    @staticmethod
    def _correlate(
        body: dict[str, Any],
        external_id: str | None,
        metadata: dict[str, Any] | None,
    ) -> dict[str, Any]:
        if external_id is not None:
            body["external_id"] = external_id
        if metadata is not None:
            body["metadata"] = metadata
        return body

    @staticmethod
    def _echo(result: Any, external_id: str | None, metadata: dict[str, Any] | None) -> Any:
        changes: dict[str, Any] = {}
        if external_id is not None:
            changes["external_id"] = external_id
        if metadata is not None:
            changes["metadata"] = metadata
        return replace(result, **changes) if changes else result

    # ------------------------------------------------------------------
    # Safety detection
    # ------------------------------------------------------------------

    async def detect_bullying(
        self,
        content: str,
        context: AnalysisContext | None = None,
        external_id: str | None = None,
        metadata: dict[str, Any] | None = None,
    ) -> BullyingResult:
        body = self._correlate(
            {"text": content, "context": self._context(context)}, external_id, metadata,
        )
        data = await self._call("POST", "/api/v1/safety/bullying", body)
        return self._echo(BullyingResult.from_json(data), external_id, metadata)

    async def detect_grooming(
        self,
        messages: Sequence[GroomingMessage],
        child_age: int | None = None,
        context: AnalysisContext | None = None,
        external_id: str | None = None,
        metadata: dict[str, Any] | None = None,
    ) -> GroomingResult:
        body = self._correlate(
            {
                "messages": [m.to_json() for m in messages],
                "context": self._context(context, child_age=child_age),
            },
            external_id,
            metadata,
        )
        data = await self._call("POST", "/api/v1/safety/grooming", body)
        return self._echo(GroomingResult.from_json(data), external_id, metadata)

    async def detect_unsafe(
        self,
        content: str,
        context: AnalysisContext | None = None,
        external_id: str | None = None,
        metadata: dict[str, Any] | None = None,
    ) -> UnsafeResult:
        body = self._correlate(
            {"text": content, "context": self._context(context)}, external_id, metadata,
        )
        data = await self._call("POST", "/api/v1/safety/unsafe", body)
        return self._echo(UnsafeResult.from_json(data), external_id, metadata)

    async def analyze(
        self,
        content: str,
        context: AnalysisContext | None = None,
        include: Sequence[str] | None = None,
        external_id: str | None = None,
        metadata: dict[str, Any] | None = None,
    ) -> AnalyzeResult:
        """
        Quick analysis: run the bullying and unsafe-content checks
        concurrently and fold them into one risk level and action.

        Args:
            include: Which checks to run ("bullying", "unsafe"); both by default.
        """
        checks = set(include if include is not None else DEFAULT_CHECKS)

        bullying_task = unsafe_task = None
        if "bullying" in checks:
            bullying_task = asyncio.ensure_future(
                self.detect_bullying(content, context, external_id, metadata)
            )
        if "unsafe" in checks:
            unsafe_task = asyncio.ensure_future(
                self.detect_unsafe(content, context, external_id, metadata)
            )
        tasks = [t for t in (bullying_task, unsafe_task) if t is not None]

        try:
            await asyncio.gather(*tasks)
        except BaseException:
            # One check failed (or we were cancelled): stop the other one.
            for task in tasks:
                task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)
            raise

        bullying = bullying_task.result() if bullying_task is not None else None
        unsafe = unsafe_task.result() if unsafe_task is not None else None

        sub_results = [r for r in (bullying, unsafe) if r is not None]
        risk_score = max((r.risk_score for r in sub_results), default=0.0)

        return AnalyzeResult(
            risk_level=classify_risk_level(risk_score),
            risk_score=risk_score,
            summary=build_summary(bullying, unsafe),
            recommended_action=pick_recommended_action(
                r.recommended_action for r in sub_results
            ),
            bullying=bullying,
            unsafe=unsafe,
            external_id=external_id,
            metadata=metadata,
            credits_used=sum_credits(*(r.credits_used for r in sub_results)),
        )

    # ------------------------------------------------------------------
    # Emotion analysis & guidance
    # ------------------------------------------------------------------

    async def analyze_emotions(
        self,
        content: str | None = None,
        messages: Sequence[EmotionMessage] | None = None,
        context: AnalysisContext | None = None,
        external_id: str | None = None,
        metadata: dict[str, Any] | None = None,
    ) -> EmotionsResult:
        """Analyse emotions in a single text or in a conversation."""
        if content is not None:
            turns = [{"sender": "user", "text": content}]
        elif messages is not None:
            turns = [m.to_json() for m in messages]
        else:
            raise ValueError("Either content or messages is required")

        body = self._correlate(
            {"messages": turns, "context": self._context(context)}, external_id, metadata,
        )
        data = await self._call("POST", "/api/v1/analysis/emotions", body)
        return self._echo(EmotionsResult.from_json(data), external_id, metadata)

    async def get_action_plan(
        self,
        situation: str,
        child_age: int | None = None,
        audience: Audience = Audience.PARENT,
        severity: Severity | None = None,
        external_id: str | None = None,
        metadata: dict[str, Any] | None = None,
    ) -> ActionPlanResult:
        body: dict[str, Any] = {
            "role": _enum_value(audience),
            "situation": situation,
        }
        if child_age is not None:
            body["child_age"] = child_age
        if severity is not None:
            body["severity"] = _enum_value(severity)
        self._correlate(body, external_id, metadata)
        data = await self._call("POST", "/api/v1/guidance/action-plan", body)
        return self._echo(ActionPlanResult.from_json(data), external_id, metadata)

    async def generate_report(
        self,
        messages: Sequence[ReportMessage],
        child_age: int | None = None,
        incident_type: str | None = None,
        external_id: str | None = None,
        metadata: dict[str, Any] | None = None,
    ) -> ReportResult:
        body: dict[str, Any] = {"messages": [m.to_json() for m in messages]}
        meta: dict[str, Any] = {}
        if child_age is not None:
            meta["child_age"] = child_age
        if incident_type is not None:
            meta["type"] = incident_type
        if meta:
            body["meta"] = meta
        self._correlate(body, external_id, metadata)
        data = await self._call("POST", "/api/v1/reports/incident", body)
        return self._echo(ReportResult.from_json(data), external_id, metadata)

    # ------------------------------------------------------------------
    # Media uploads
    # ------------------------------------------------------------------

    @staticmethod
    def _upload_fields(
        analysis_type: str,
        platform: str | None,
        file_id: str | None,
        external_id: str | None,
        customer_id: str | None,
        metadata: dict[str, Any] | None,
        age_group: str | None,
        **extra: Any,
    ) -> dict[str, str]:
        fields = {
            "analysis_type": analysis_type,
            "platform": resolve_platform(platform),
        }
        optional = {
            "file_id": file_id,
            "external_id": external_id,
            "customer_id": customer_id,
            "metadata": json.dumps(metadata) if metadata is not None else None,
            "age_group": age_group,
            **extra,
        }
        for name, value in optional.items():
            if value is not None:
                fields[name] = str(value)
        return fields

    async def analyze_voice(
        self,
        file: bytes,
        filename: str,
        analysis_type: str = "all",
        file_id: str | None = None,
        external_id: str | None = None,
        customer_id: str | None = None,
        metadata: dict[str, Any] | None = None,
        age_group: str | None = None,
        language: str | None = None,
        platform: str | None = None,
        child_age: int | None = None,
    ) -> VoiceAnalysisResult:
        """Upload a recorded audio file for transcription and safety analysis."""
        fields = self._upload_fields(
            analysis_type, platform, file_id, external_id, customer_id, metadata,
            age_group, language=language, child_age=child_age,
        )
        data = await self._upload("/api/v1/safety/voice", file, filename, fields)
        return self._echo(VoiceAnalysisResult.from_json(data), external_id, metadata)

    async def analyze_image(
        self,
        file: bytes,
        filename: str,
        analysis_type: str = "all",
        file_id: str | None = None,
        external_id: str | None = None,
        customer_id: str | None = None,
        metadata: dict[str, Any] | None = None,
        age_group: str | None = None,
        platform: str | None = None,
    ) -> ImageAnalysisResult:
        fields = self._upload_fields(
            analysis_type, platform, file_id, external_id, customer_id, metadata, age_group,
        )
        data = await self._upload("/api/v1/safety/image", file, filename, fields)
        return self._echo(ImageAnalysisResult.from_json(data), external_id, metadata)

    # ------------------------------------------------------------------
    # Account management (GDPR)
    # ------------------------------------------------------------------

    async def delete_account_data(self) -> AccountDeletionResult:
        """Right to erasure (Article 17)."""
        data = await self._call("DELETE", "/api/v1/account/data")
        return AccountDeletionResult.from_json(data)

    async def export_account_data(self) -> AccountExportResult:
        """Right to data portability (Article 20)."""
        data = await self._call("GET", "/api/v1/account/export")
        return AccountExportResult.from_json(data)

    async def record_consent(
        self, consent_type: ConsentType, version: str,
    ) -> ConsentActionResult:
        data = await self._call("POST", "/api/v1/account/consent", {
            "consent_type": _enum_value(consent_type),
            "version": version,
        })
        return ConsentActionResult.from_json(data)

    async def get_consent_status(
        self, consent_type: ConsentType | None = None,
    ) -> ConsentStatusResult:
        path = _with_query("/api/v1/account/consent", {"type": _enum_value(consent_type)})
        data = await self._call("GET", path)
        return ConsentStatusResult.from_json(data)

    async def withdraw_consent(self, consent_type: ConsentType) -> ConsentActionResult:
        path = f"/api/v1/account/consent/{quote(_enum_value(consent_type), safe='')}"
        data = await self._call("DELETE", path)
        return ConsentActionResult.from_json(data)

    async def rectify_data(
        self, collection: str, document_id: str, fields: dict[str, Any],
    ) -> RectifyDataResult:
        """Right to rectification (Article 16)."""
        data = await self._call("PATCH", "/api/v1/account/data", {
            "collection": collection,
            "document_id": document_id,
            "fields": fields,
        })
        return RectifyDataResult.from_json(data)

    async def get_audit_logs(
        self, action: AuditAction | None = None, limit: int | None = None,
    ) -> AuditLogsResult:
        path = _with_query(
            "/api/v1/account/audit-logs",
            {"action": _enum_value(action), "limit": limit},
        )
        data = await self._call("GET", path)
        return AuditLogsResult.from_json(data)

    # ------------------------------------------------------------------
    # Breach management (GDPR Articles 33/34)
    # ------------------------------------------------------------------

    async def log_breach(
        self,
        title: str,
        description: str,
        severity: BreachSeverity,
        affected_user_ids: Sequence[str],
        data_categories: Sequence[str],
        reported_by: str,
    ) -> LogBreachResult:
        data = await self._call("POST", "/api/v1/admin/breach", {
            "title": title,
            "description": description,
            "severity": _enum_value(severity),
            "affected_user_ids": list(affected_user_ids),
            "data_categories": list(data_categories),
            "reported_by": reported_by,
        })
        return LogBreachResult.from_json(data)

    async def list_breaches(
        self, status: BreachStatus | None = None, limit: int | None = None,
    ) -> BreachListResult:
        path = _with_query(
            "/api/v1/admin/breach",
            {"status": _enum_value(status), "limit": limit},
        )
        data = await self._call("GET", path)
        return BreachListResult.from_json(data)

    async def get_breach(self, breach_id: str) -> BreachResult:
        data = await self._call("GET", f"/api/v1/admin/breach/{quote(breach_id, safe='')}")
        return BreachResult.from_json(data)

    async def update_breach_status(
        self,
        breach_id: str,
        status: BreachStatus,
        notification_status: BreachNotificationStatus | None = None,
        notes: str | None = None,
    ) -> BreachResult:
        body: dict[str, Any] = {"status": _enum_value(status)}
        if notification_status is not None:
            body["notification_status"] = _enum_value(notification_status)
        if notes is not None:
            body["notes"] = notes
        data = await self._call(
            "PATCH", f"/api/v1/admin/breach/{quote(breach_id, safe='')}", body,
        )
        return BreachResult.from_json(data)

    # ------------------------------------------------------------------
    # Webhooks
    # ------------------------------------------------------------------

    async def list_webhooks(self) -> WebhookListResult:
        data = await self._call("GET", "/api/v1/webhooks")
        return WebhookListResult.from_json(data)

    async def create_webhook(
        self, url: str, events: Sequence[str], active: bool = True,
    ) -> WebhookActionResult:
        data = await self._call("POST", "/api/v1/webhooks", {
            "url": url,
            "events": list(events),
            "active": active,
        })
        return WebhookActionResult.from_json(data)

    async def update_webhook(
        self,
        webhook_id: str,
        url: str | None = None,
        events: Sequence[str] | None = None,
        active: bool | None = None,
    ) -> WebhookActionResult:
        body: dict[str, Any] = {}
        if url is not None:
            body["url"] = url
        if events is not None:
            body["events"] = list(events)
        if active is not None:
            body["active"] = active
        data = await self._call(
            "PATCH", f"/api/v1/webhooks/{quote(webhook_id, safe='')}", body,
        )
        return WebhookActionResult.from_json(data)

    async def delete_webhook(self, webhook_id: str) -> DeleteWebhookResult:
        data = await self._call("DELETE", f"/api/v1/webhooks/{quote(webhook_id, safe='')}")
        return DeleteWebhookResult.from_json(data)

    async def test_webhook(self, webhook_id: str) -> TestWebhookResult:
        """Ask the server to deliver a test event to the webhook."""
        data = await self._call(
            "POST", f"/api/v1/webhooks/{quote(webhook_id, safe='')}/test", {},
        )
        return TestWebhookResult.from_json(data)

    async def regenerate_webhook_secret(self, webhook_id: str) -> RegenerateSecretResult:
        data = await self._call(
            "POST", f"/api/v1/webhooks/{quote(webhook_id, safe='')}/secret", {},
        )
        return RegenerateSecretResult.from_json(data)

    # ------------------------------------------------------------------
    # Pricing & usage
    # ------------------------------------------------------------------

    async def get_pricing(self) -> PricingResult:
        data = await self._call("GET", "/api/v1/pricing")
        return PricingResult.from_json(data)

    async def get_pricing_details(self) -> PricingDetailsResult:
        data = await self._call("GET", "/api/v1/pricing/details")
        return PricingDetailsResult.from_json(data)

    async def get_usage_history(self, days: int | None = None) -> UsageHistoryResult:
        """Daily request counts for the current API key."""
        data = await self._call("GET", _with_query("/api/v1/usage/history", {"days": days}))
        return UsageHistoryResult.from_json(data)

    async def get_usage_by_tool(self, date: str | None = None) -> UsageByToolResult:
        data = await self._call("GET", _with_query("/api/v1/usage/by-tool", {"date": date}))
        return UsageByToolResult.from_json(data)

    async def get_usage_monthly(self) -> UsageMonthlyResult:
        data = await self._call("GET", "/api/v1/usage/monthly")
        return UsageMonthlyResult.from_json(data)
