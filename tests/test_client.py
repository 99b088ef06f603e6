"""
tests/test_client.py
=====================
Client Facade Tests

Test categories:
    1. Construction — API key validation, configuration overrides
    2. Request building — paths, bodies, platform decoration, query strings
    3. Result decoding — typed results, correlation echo
    4. Usage side effects — retried successes, failed attempts
    5. Quick analysis — composition of bullying + unsafe results
    6. Voice stream factory

All tests are OFFLINE — the HTTP session is tests/fakes.FakeSession.
"""

import asyncio
import os
import sys
import unittest
from unittest.mock import AsyncMock, patch

import aiohttp

# Ensure project root (and this directory, for fakes) is on sys.path
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))
sys.path.insert(0, os.path.abspath(os.path.dirname(__file__)))

from fakes import FakeResponse, FakeSession
from tuteliq import (
    AnalysisContext,
    Audience,
    AuditAction,
    BreachNotificationStatus,
    BreachSeverity,
    BreachStatus,
    BullyingResult,
    ConsentType,
    EmotionMessage,
    ErrorKind,
    GroomingMessage,
    MessageRole,
    ReportMessage,
    RiskLevel,
    Severity,
    Tuteliq,
    TuteliqError,
    UnsafeResult,
    Usage,
    resolve_platform,
)
from tuteliq.transport import ApiResponse

API_KEY = "tq_test_key_0123456789"


# ===================================================================
# Test fixtures — realistic API payloads
# ===================================================================

def _bullying_payload(**overrides) -> dict:
    payload = {
        "is_bullying": True,
        "severity": "high",
        "bullying_type": ["insult", "exclusion"],
        "confidence": 0.91,
        "rationale": "Repeated insults targeting the child.",
        "risk_score": 0.82,
        "recommended_action": "flag_for_moderator",
        "credits_used": 1,
    }
    payload.update(overrides)
    return payload


def _unsafe_payload(**overrides) -> dict:
    payload = {
        "unsafe": False,
        "categories": [],
        "severity": "low",
        "confidence": 0.88,
        "rationale": "No unsafe content.",
        "risk_score": 0.12,
        "recommended_action": "none",
        "credits_used": 1,
    }
    payload.update(overrides)
    return payload


def _usage_headers(used: int) -> dict:
    return {
        "x-request-id": f"req-{used}",
        "x-monthly-limit": "100",
        "x-monthly-used": str(used),
        "x-monthly-remaining": str(100 - used),
    }


def _client(*outcomes, **settings):
    session = FakeSession(*outcomes)
    settings.setdefault("retry_delay", 0.0)
    return Tuteliq(API_KEY, session=session, **settings), session


# ===================================================================
# 1. CONSTRUCTION
# ===================================================================


class TestConstruction(unittest.TestCase):

    def test_empty_key_rejected(self):
        with self.assertRaises(ValueError):
            Tuteliq("")

    def test_short_key_rejected(self):
        with self.assertRaises(ValueError):
            Tuteliq("short")

    def test_settings_override_defaults(self):
        client = Tuteliq(API_KEY, timeout=5.0, max_retries=1, base_url="https://eu.example.test/")
        self.assertEqual(client.config.timeout, 5.0)
        self.assertEqual(client.config.max_retries, 1)
        self.assertEqual(client.config.base_url, "https://eu.example.test")
        self.assertNotIn(API_KEY, repr(client.config))

    def test_resolve_platform(self):
        self.assertEqual(resolve_platform("Discord"), "Discord - Python SDK")
        self.assertEqual(resolve_platform(None), "Python SDK")
        self.assertEqual(resolve_platform(""), "Python SDK")


# ===================================================================
# 2. REQUEST BUILDING
# ===================================================================


class TestRequestBuilding(unittest.IsolatedAsyncioTestCase):

    async def test_detect_bullying_body(self):
        client, session = _client(FakeResponse(200, _bullying_payload()))
        await client.detect_bullying(
            "you are stupid",
            context=AnalysisContext(language="en", age_group="10-12", platform="Roblox"),
            external_id="msg-1",
            metadata={"room": "lobby"},
        )
        self.assertTrue(session.calls[0]["url"].endswith("/api/v1/safety/bullying"))
        self.assertEqual(session.json_body(), {
            "text": "you are stupid",
            "context": {"language": "en", "age_group": "10-12", "platform": "Roblox - Python SDK"},
            "external_id": "msg-1",
            "metadata": {"room": "lobby"},
        })

    async def test_detect_grooming_body(self):
        client, session = _client(FakeResponse(200, {
            "grooming_risk": "medium", "flags": ["secrecy"], "confidence": 0.7,
            "rationale": "r", "risk_score": 0.6, "recommended_action": "monitor",
        }))
        result = await client.detect_grooming(
            [
                GroomingMessage(MessageRole.ADULT, "don't tell your parents"),
                GroomingMessage(MessageRole.CHILD, "ok"),
            ],
            child_age=11,
        )
        self.assertEqual(session.json_body(), {
            "messages": [
                {"sender_role": "adult", "text": "don't tell your parents"},
                {"sender_role": "child", "text": "ok"},
            ],
            "context": {"child_age": 11, "platform": "Python SDK"},
        })
        self.assertEqual(result.flags, ["secrecy"])

    async def test_action_plan_body(self):
        client, session = _client(FakeResponse(200, {
            "steps": ["Talk calmly"], "tone": "supportive", "resources": [], "urgency": "low",
        }))
        await client.get_action_plan(
            "Child received mean messages", child_age=9,
            audience=Audience.EDUCATOR, severity=Severity.MEDIUM,
        )
        self.assertEqual(session.json_body(), {
            "role": "educator",
            "situation": "Child received mean messages",
            "child_age": 9,
            "severity": "medium",
        })

    async def test_emotions_requires_input(self):
        client, _ = _client()
        with self.assertRaises(ValueError):
            await client.analyze_emotions()

    async def test_query_strings_are_encoded(self):
        client, session = _client(
            FakeResponse(200, {"consents": []}),
            FakeResponse(200, {"breaches": []}),
            FakeResponse(200, {"api_key_id": "k", "days": []}),
        )
        await client.get_consent_status(ConsentType.ANALYTICS)
        await client.list_breaches(status=BreachStatus.CONTAINED, limit=5)
        await client.get_usage_history()
        urls = [c["url"] for c in session.calls]
        self.assertTrue(urls[0].endswith("/api/v1/account/consent?type=analytics"))
        self.assertTrue(urls[1].endswith("/api/v1/admin/breach?status=contained&limit=5"))
        self.assertTrue(urls[2].endswith("/api/v1/usage/history"))

    async def test_methods_and_paths(self):
        client, session = _client(
            FakeResponse(200, {"message": "deleted", "deleted_count": 3}),
            FakeResponse(200, {"message": "updated", "webhook": {"id": "w 1"}}),
            FakeResponse(200, {"message": "gone"}),
        )
        deletion = await client.delete_account_data()
        await client.update_webhook("w 1", active=False)
        await client.delete_webhook("w 1")

        self.assertEqual(deletion.deleted_count, 3)
        self.assertEqual(
            [(c["method"], c["url"][len(client.config.base_url):]) for c in session.calls],
            [
                ("DELETE", "/api/v1/account/data"),
                ("PATCH", "/api/v1/webhooks/w%201"),
                ("DELETE", "/api/v1/webhooks/w%201"),
            ],
        )
        self.assertEqual(session.json_body(1), {"active": False})

    async def test_analyze_voice_fields(self):
        client, _ = _client()
        upload = AsyncMock(return_value=ApiResponse(data={"file_id": "f1", "credits_used": 4}))
        with patch.object(client._transport, "upload", upload):
            result = await client.analyze_voice(
                b"\x00\x01", "clip.wav",
                external_id="ext-9", metadata={"k": "v"}, child_age=12, language="en",
            )

        path, file, filename, field_name, fields = upload.call_args.args
        self.assertEqual(path, "/api/v1/safety/voice")
        self.assertEqual((file, filename, field_name), (b"\x00\x01", "clip.wav", "file"))
        self.assertEqual(fields, {
            "analysis_type": "all",
            "platform": "Python SDK",
            "external_id": "ext-9",
            "metadata": '{"k": "v"}',
            "language": "en",
            "child_age": "12",
        })
        self.assertEqual(result.file_id, "f1")
        self.assertEqual(result.external_id, "ext-9")

    async def test_analyze_image_fields(self):
        client, _ = _client()
        upload = AsyncMock(return_value=ApiResponse(data={"file_id": "img-1"}))
        with patch.object(client._transport, "upload", upload):
            await client.analyze_image(b"\x89PNG", "shot.png", platform="Discord", age_group="13-15")

        path, _, filename, _, fields = upload.call_args.args
        self.assertEqual((path, filename), ("/api/v1/safety/image", "shot.png"))
        self.assertEqual(fields, {
            "analysis_type": "all",
            "platform": "Discord - Python SDK",
            "age_group": "13-15",
        })

    async def test_every_endpoint(self):
        cases = [
            (lambda c: c.analyze_emotions("I feel alone"),
             "POST", "/api/v1/analysis/emotions",
             {"messages": [{"sender": "user", "text": "I feel alone"}],
              "context": {"platform": "Python SDK"}}),
            (lambda c: c.analyze_emotions(messages=[EmotionMessage("child", "sad")]),
             "POST", "/api/v1/analysis/emotions",
             {"messages": [{"sender": "child", "text": "sad"}],
              "context": {"platform": "Python SDK"}}),
            (lambda c: c.generate_report([ReportMessage("a", "b")], child_age=12, incident_type="bullying"),
             "POST", "/api/v1/reports/incident",
             {"messages": [{"sender": "a", "text": "b"}],
              "meta": {"child_age": 12, "type": "bullying"}}),
            (lambda c: c.export_account_data(), "GET", "/api/v1/account/export", None),
            (lambda c: c.record_consent(ConsentType.DATA_PROCESSING, "2.1"),
             "POST", "/api/v1/account/consent",
             {"consent_type": "data_processing", "version": "2.1"}),
            (lambda c: c.withdraw_consent(ConsentType.MARKETING),
             "DELETE", "/api/v1/account/consent/marketing", None),
            (lambda c: c.rectify_data("users", "u1", {"name": "Sam"}),
             "PATCH", "/api/v1/account/data",
             {"collection": "users", "document_id": "u1", "fields": {"name": "Sam"}}),
            (lambda c: c.get_audit_logs(action=AuditAction.DATA_EXPORT, limit=20),
             "GET", "/api/v1/account/audit-logs?action=data_export&limit=20", None),
            (lambda c: c.log_breach("Leak", "desc", BreachSeverity.HIGH, ["u1"], ["email"], "ops"),
             "POST", "/api/v1/admin/breach",
             {"title": "Leak", "description": "desc", "severity": "high",
              "affected_user_ids": ["u1"], "data_categories": ["email"], "reported_by": "ops"}),
            (lambda c: c.get_breach("b/1"), "GET", "/api/v1/admin/breach/b%2F1", None),
            (lambda c: c.update_breach_status(
                "b1", BreachStatus.RESOLVED, BreachNotificationStatus.COMPLETED, notes="done"),
             "PATCH", "/api/v1/admin/breach/b1",
             {"status": "resolved", "notification_status": "completed", "notes": "done"}),
            (lambda c: c.list_webhooks(), "GET", "/api/v1/webhooks", None),
            (lambda c: c.create_webhook("https://hooks.example.test", ["alert"]),
             "POST", "/api/v1/webhooks",
             {"url": "https://hooks.example.test", "events": ["alert"], "active": True}),
            (lambda c: c.test_webhook("w1"), "POST", "/api/v1/webhooks/w1/test", {}),
            (lambda c: c.regenerate_webhook_secret("w1"), "POST", "/api/v1/webhooks/w1/secret", {}),
            (lambda c: c.get_pricing_details(), "GET", "/api/v1/pricing/details", None),
            (lambda c: c.get_usage_history(days=7), "GET", "/api/v1/usage/history?days=7", None),
            (lambda c: c.get_usage_by_tool("2026-01-31"),
             "GET", "/api/v1/usage/by-tool?date=2026-01-31", None),
            (lambda c: c.get_usage_monthly(), "GET", "/api/v1/usage/monthly", None),
        ]
        for operation, method, path, body in cases:
            with self.subTest(path=path):
                client, session = _client(FakeResponse(200, {}))
                await operation(client)
                call = session.calls[0]
                self.assertEqual(call["method"], method)
                self.assertEqual(call["url"], client.config.base_url + path)
                if body is None:
                    self.assertIsNone(call["data"])
                else:
                    self.assertEqual(session.json_body(), body)


# ===================================================================
# 3. RESULT DECODING
# ===================================================================


class TestResultDecoding(unittest.IsolatedAsyncioTestCase):

    async def test_bullying_result_typed(self):
        client, _ = _client(FakeResponse(200, _bullying_payload()))
        result = await client.detect_bullying("text")
        self.assertTrue(result.is_bullying)
        self.assertIs(result.severity, Severity.HIGH)
        self.assertEqual(result.bullying_type, ["insult", "exclusion"])
        self.assertAlmostEqual(result.risk_score, 0.82)
        self.assertEqual(result.credits_used, 1)

    async def test_correlation_fields_echoed(self):
        client, _ = _client(FakeResponse(200, _unsafe_payload()))
        result = await client.detect_unsafe("text", external_id="abc", metadata={"n": 1})
        self.assertEqual(result.external_id, "abc")
        self.assertEqual(result.metadata, {"n": 1})

    async def test_unknown_severity_falls_back(self):
        client, _ = _client(FakeResponse(200, _bullying_payload(severity="apocalyptic")))
        result = await client.detect_bullying("text")
        self.assertIs(result.severity, Severity.LOW)


# ===================================================================
# 4. USAGE SIDE EFFECTS
# ===================================================================


class TestUsageTracking(unittest.IsolatedAsyncioTestCase):

    async def test_usage_from_last_successful_attempt(self):
        client, session = _client(
            aiohttp.ClientConnectionError("reset"),
            FakeResponse(503, {"error": {"message": "busy"}}, headers=_usage_headers(50)),
            FakeResponse(200, {"plans": []}, headers=_usage_headers(7)),
            max_retries=3,
        )
        await client.get_pricing()
        self.assertEqual(len(session.calls), 3)
        self.assertEqual(client.usage, Usage(limit=100, used=7, remaining=93))
        self.assertEqual(client.last_request_id, "req-7")

    async def test_non_retryable_is_single_attempt(self):
        client, session = _client(
            FakeResponse(401, {"error": {"message": "Invalid API key"}}),
            max_retries=3,
        )
        with self.assertRaises(TuteliqError) as ctx:
            await client.get_pricing()
        self.assertIs(ctx.exception.kind, ErrorKind.AUTHENTICATION)
        self.assertEqual(len(session.calls), 1)
        self.assertIsNone(client.usage)


# ===================================================================
# 5. QUICK ANALYSIS
# ===================================================================


class TestAnalyze(unittest.IsolatedAsyncioTestCase):

    async def _analyze(self, bullying, unsafe, **kwargs):
        client, _ = _client()
        with patch.object(client, "detect_bullying", AsyncMock(return_value=bullying)), \
                patch.object(client, "detect_unsafe", AsyncMock(return_value=unsafe)):
            return await client.analyze("some text", **kwargs)

    async def test_max_score_and_priority_action(self):
        bullying = BullyingResult.from_json(_bullying_payload(
            risk_score=0.55, recommended_action="monitor",
        ))
        unsafe = UnsafeResult.from_json(_unsafe_payload(
            unsafe=True, categories=["self_harm"], risk_score=0.93,
            recommended_action="immediate_intervention",
        ))
        result = await self._analyze(bullying, unsafe, external_id="x1")

        self.assertAlmostEqual(result.risk_score, 0.93)
        self.assertIs(result.risk_level, RiskLevel.CRITICAL)
        self.assertEqual(result.recommended_action, "immediate_intervention")
        self.assertEqual(
            result.summary, "Bullying detected (high). Unsafe content: self_harm",
        )
        self.assertEqual(result.credits_used, 2)
        self.assertEqual(result.external_id, "x1")

    async def test_clean_content(self):
        bullying = BullyingResult.from_json(_bullying_payload(
            is_bullying=False, risk_score=0.05, recommended_action="none", credits_used=None,
        ))
        unsafe = UnsafeResult.from_json(_unsafe_payload(credits_used=None))
        result = await self._analyze(bullying, unsafe)

        self.assertIs(result.risk_level, RiskLevel.SAFE)
        self.assertEqual(result.recommended_action, "none")
        self.assertEqual(result.summary, "No safety concerns detected.")
        self.assertIsNone(result.credits_used)

    async def test_failed_check_cancels_the_other(self):
        client, _ = _client()
        unsafe_state = []

        async def slow_unsafe(*args):
            unsafe_state.append("started")
            try:
                await asyncio.Event().wait()
            except asyncio.CancelledError:
                unsafe_state.append("cancelled")
                raise

        failing = AsyncMock(side_effect=TuteliqError(ErrorKind.VALIDATION, "text is required"))
        with patch.object(client, "detect_bullying", failing), \
                patch.object(client, "detect_unsafe", slow_unsafe):
            with self.assertRaises(TuteliqError) as ctx:
                await client.analyze("text")

        self.assertIs(ctx.exception.kind, ErrorKind.VALIDATION)
        self.assertEqual(unsafe_state, ["started", "cancelled"])

    async def test_include_limits_checks(self):
        client, session = _client(FakeResponse(200, _unsafe_payload(risk_score=0.4)))
        result = await client.analyze("text", include=["unsafe"])
        self.assertEqual(len(session.calls), 1)
        self.assertIsNone(result.bullying)
        self.assertIs(result.risk_level, RiskLevel.LOW)

    async def test_runs_both_endpoints(self):
        client, session = _client(
            FakeResponse(200, _bullying_payload()),
            FakeResponse(200, _unsafe_payload()),
        )
        result = await client.analyze("text")
        paths = sorted(c["url"].rsplit("/", 1)[-1] for c in session.calls)
        self.assertEqual(paths, ["bullying", "unsafe"])
        self.assertIs(result.risk_level, RiskLevel.HIGH)
        self.assertEqual(result.recommended_action, "flag_for_moderator")


# ===================================================================
# 6. VOICE STREAM FACTORY
# ===================================================================


class TestVoiceStreamFactory(unittest.TestCase):

    def test_session_uses_client_settings(self):
        client = Tuteliq(API_KEY, stream_url="wss://stream.example.test/voice", connect_timeout=5.0)
        session = client.voice_stream()
        self.assertEqual(session.url, "wss://stream.example.test/voice")
        self.assertEqual(session.connect_timeout, 5.0)
        self.assertIsNone(session.session_id)
        self.assertFalse(session.is_active)


if __name__ == "__main__":
    unittest.main()
