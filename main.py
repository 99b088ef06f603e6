"""
main.py
========
Command-line entry point for the Tuteliq Python SDK.

Run with:
    python main.py analyze "Message to check"
    python main.py stream call.pcm --chunk-size 3200

The API key is read from TUTELIQ_API_KEY (a local .env file is honoured).
"""

import argparse
import asyncio
import json
import logging
import sys
from dataclasses import asdict

from dotenv import load_dotenv

load_dotenv()  # Load .env before any module reads env vars

# Configure logging for the entire application
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s | %(name)s | %(levelname)s | %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)

# Keep third-party transport chatter out of the output.
for _noisy_logger_name in (
    "aiohttp.access",
    "aiohttp.client",
    "websockets.client",
):
    logging.getLogger(_noisy_logger_name).setLevel(logging.WARNING)

from tuteliq import (  # noqa: E402
    Tuteliq,
    TuteliqError,
    VoiceStreamConfig,
    VoiceStreamHandlers,
)

logger = logging.getLogger("tuteliq.main")


def _print_json(value) -> None:
    print(json.dumps(value, indent=2, default=str))


async def run_analyze(text: str) -> int:
    async with Tuteliq.from_env() as client:
        result = await client.analyze(text)
        _print_json(asdict(result))
        if client.usage is not None:
            logger.info(
                "Monthly usage: %d/%d (%d remaining)",
                client.usage.used, client.usage.limit, client.usage.remaining,
            )
    return 0


async def run_stream(path: str, chunk_size: int, interval: int | None) -> int:
    handlers = VoiceStreamHandlers(
        on_transcription=lambda e: logger.info("[%d] %s", e.flush_index, e.text),
        on_alert=lambda e: logger.warning(
            "ALERT %s (%s, %.2f)", e.category, e.severity, e.risk_score,
        ),
        on_error=lambda e: logger.error("Server error %s: %s", e.code, e.message),
    )
    config = VoiceStreamConfig(interval_seconds=interval) if interval else None

    with open(path, "rb") as fh:
        audio = fh.read()

    async with Tuteliq.from_env() as client:
        async with client.voice_stream(config=config, handlers=handlers) as session:
            for offset in range(0, len(audio), chunk_size):
                await session.send_audio(audio[offset:offset + chunk_size])
            summary = await session.end()
            _print_json(asdict(summary))
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Tuteliq child-safety API client")
    commands = parser.add_subparsers(dest="command", required=True)

    analyze = commands.add_parser("analyze", help="Quick bullying + unsafe analysis")
    analyze.add_argument("text")

    stream = commands.add_parser("stream", help="Stream an audio file for live analysis")
    stream.add_argument("path")
    stream.add_argument("--chunk-size", type=int, default=3200)
    stream.add_argument("--interval", type=int, default=None)

    args = parser.parse_args(argv)

    try:
        if args.command == "analyze":
            return asyncio.run(run_analyze(args.text))
        return asyncio.run(run_stream(args.path, args.chunk_size, args.interval))
    except TuteliqError as exc:
        logger.error("Request failed [%s]: %s", exc.kind.value, exc.message)
        return 1
    except ValueError as exc:
        logger.error("%s", exc)
        return 2


if __name__ == "__main__":
    sys.exit(main())
