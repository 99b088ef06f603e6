"""
tests/test_stream_events.py
============================
Voice streaming wire format: outbound control frames and inbound event
decoding, including frames that must be dropped.
"""

import json
import os
import sys
import unittest

# Ensure project root is on sys.path
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

from tuteliq.schemas.media import TranscriptionSegment
from tuteliq.schemas.stream import (
    AlertEvent,
    ConfigUpdatedEvent,
    ErrorEvent,
    ReadyEvent,
    SessionSummaryEvent,
    TranscriptionEvent,
    VoiceStreamConfig,
    auth_message,
    config_message,
    decode_event,
    end_message,
)


def _frame(**fields) -> str:
    return json.dumps(fields)


# ===================================================================
# OUTBOUND
# ===================================================================


class TestOutboundFrames(unittest.TestCase):

    def test_auth_and_end(self):
        self.assertEqual(json.loads(auth_message("tq_abc")), {"type": "auth", "token": "tq_abc"})
        self.assertEqual(json.loads(end_message()), {"type": "end"})

    def test_config_omits_unset_fields(self):
        self.assertEqual(json.loads(config_message(VoiceStreamConfig())), {"type": "config"})
        self.assertEqual(
            json.loads(config_message(VoiceStreamConfig(interval_seconds=10))),
            {"type": "config", "interval_seconds": 10},
        )

    def test_config_full(self):
        config = VoiceStreamConfig(
            interval_seconds=15,
            analysis_types=["bullying", "grooming"],
            context={"age_group": "10-12"},
        )
        self.assertEqual(config.analysis_types, ("bullying", "grooming"))
        self.assertEqual(json.loads(config_message(config)), {
            "type": "config",
            "interval_seconds": 15,
            "analysis_types": ["bullying", "grooming"],
            "context": {"age_group": "10-12"},
        })


# ===================================================================
# INBOUND
# ===================================================================


class TestDecodeEvents(unittest.TestCase):

    def test_ready(self):
        event = decode_event(_frame(type="ready", session_id="s-1", config={"interval_seconds": 10}))
        self.assertEqual(event, ReadyEvent(session_id="s-1", config={"interval_seconds": 10}))

    def test_transcription(self):
        event = decode_event(_frame(
            type="transcription",
            text="hello there",
            segments=[{"start": 0, "end": 1.5, "text": "hello there"}],
            flush_index=2,
        ))
        self.assertIsInstance(event, TranscriptionEvent)
        self.assertEqual(event.segments, [TranscriptionSegment(0.0, 1.5, "hello there")])
        self.assertEqual(event.flush_index, 2)

    def test_alert(self):
        event = decode_event(_frame(
            type="alert", category="grooming", severity="high",
            risk_score=0.87, details={"flags": ["secrecy"]}, flush_index=3,
        ))
        self.assertIsInstance(event, AlertEvent)
        self.assertEqual(event.category, "grooming")
        self.assertAlmostEqual(event.risk_score, 0.87)
        self.assertEqual(event.details, {"flags": ["secrecy"]})

    def test_session_summary(self):
        event = decode_event(_frame(
            type="session_summary", session_id="s-1", duration_seconds=42.5,
            overall_risk="low", overall_risk_score=0.2, total_flushes=4,
            transcript="hello there",
        ))
        self.assertIsInstance(event, SessionSummaryEvent)
        self.assertEqual(event.total_flushes, 4)
        self.assertEqual(event.transcript, "hello there")

    def test_config_updated_and_error(self):
        self.assertEqual(
            decode_event(_frame(type="config_updated", config={"interval_seconds": 5})),
            ConfigUpdatedEvent(config={"interval_seconds": 5}),
        )
        self.assertEqual(
            decode_event(_frame(type="error", code="AUTH_FAILED", message="bad token")),
            ErrorEvent(code="AUTH_FAILED", message="bad token"),
        )

    def test_malformed_frames_dropped(self):
        frames = [
            "not json",
            "[1, 2, 3]",
            '"ready"',
            _frame(type="pong"),
            _frame(type=["ready"]),
            _frame(no_type=True),
            _frame(type="ready"),
            _frame(type="alert", category="x", severity="low", risk_score="high", flush_index=1),
            _frame(type="transcription", text="t", segments=[{"start": 0}], flush_index=0),
            _frame(type="ready", session_id=None),
            _frame(type="ready", session_id=42),
            _frame(type="transcription", text=None, segments=[], flush_index=0),
            _frame(type="transcription", text="t", segments=[{"start": 0, "end": 1, "text": 7}],
                   flush_index=0),
            _frame(type="alert", category=None, severity="low", risk_score=0.1, flush_index=1),
            _frame(type="session_summary", session_id="s", duration_seconds=1,
                   overall_risk=["low"], overall_risk_score=0.1, total_flushes=1, transcript=""),
            _frame(type="error", code=None, message="boom"),
        ]
        for raw in frames:
            with self.subTest(raw=raw):
                self.assertIsNone(decode_event(raw))


if __name__ == "__main__":
    unittest.main()
