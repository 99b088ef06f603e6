"""
tuteliq/voice_stream.py
========================
Voice Streaming Session — Tuteliq Python SDK

Responsibility:
    - Own exactly one WebSocket connection to the streaming endpoint
    - Run the handshake: auth frame, optional config frame, wait for ``ready``
    - Dispatch inbound events to registered handlers from one background
      reader task for the life of the connection
    - Send binary audio frames and config/end control frames
    - Settle the two single-shot operations (ready, summary) exactly once

Lifecycle::

    idle -> connecting -> ready -> active -> ended
      \\_________\\__________\\________\\_______> closed

``connect()`` returns only after the server's ``ready`` event, so audio is
never sent to an unconfigured server-side session. A disconnect before
``ready`` fails ``connect()``; a disconnect afterwards fires ``on_close``
and fails any pending ``end()`` with CONNECTION_CLOSED.

This module does NOT:
    - Retry or reconnect
    - Queue audio sent outside the active window
    - Share the HTTP transport, retry policy or result codec
"""

import asyncio
import inspect
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Awaitable, Callable

import websockets

from tuteliq.config import DEFAULT_CONNECT_TIMEOUT, DEFAULT_STREAM_URL
from tuteliq.errors import ErrorKind, TuteliqError
from tuteliq.latch import Latch
from tuteliq.schemas.stream import (
    AlertEvent,
    ConfigUpdatedEvent,
    ErrorEvent,
    ReadyEvent,
    SessionSummaryEvent,
    StreamEvent,
    TranscriptionEvent,
    VoiceStreamConfig,
    auth_message,
    config_message,
    decode_event,
    end_message,
)

logger = logging.getLogger("tuteliq.voice_stream")

DEFAULT_CLOSE_CODE = 1000
DEFAULT_CLOSE_REASON = "Connection closed"


class SessionState(str, Enum):
    IDLE = "idle"
    CONNECTING = "connecting"
    READY = "ready"
    ACTIVE = "active"
    ENDED = "ended"
    CLOSED = "closed"


@dataclass(frozen=True)
class VoiceStreamHandlers:
    """
    Optional callbacks, one per inbound event type.

    Each may be a plain function or a coroutine function. Coroutine
    handlers are scheduled as tasks; plain handlers must return quickly.
    """

    on_ready: Callable[[ReadyEvent], Any] | None = None
    on_transcription: Callable[[TranscriptionEvent], Any] | None = None
    on_alert: Callable[[AlertEvent], Any] | None = None
    on_session_summary: Callable[[SessionSummaryEvent], Any] | None = None
    on_config_updated: Callable[[ConfigUpdatedEvent], Any] | None = None
    on_error: Callable[[ErrorEvent], Any] | None = None
    on_close: Callable[[int, str], Any] | None = None


_HANDLER_FOR_EVENT: dict[type, str] = {
    ReadyEvent: "on_ready",
    TranscriptionEvent: "on_transcription",
    AlertEvent: "on_alert",
    SessionSummaryEvent: "on_session_summary",
    ConfigUpdatedEvent: "on_config_updated",
    ErrorEvent: "on_error",
}


Connector = Callable[[str], Awaitable[Any]]


class VoiceStreamSession:
    """One real-time voice analysis session over WebSocket."""

    def __init__(
        self,
        api_key: str,
        config: VoiceStreamConfig | None = None,
        handlers: VoiceStreamHandlers | None = None,
        url: str = DEFAULT_STREAM_URL,
        connect_timeout: float | None = DEFAULT_CONNECT_TIMEOUT,
        connector: Connector | None = None,
    ):
        self._api_key = api_key
        self._config = config
        self._handlers = handlers or VoiceStreamHandlers()
        self.url = url
        self.connect_timeout = connect_timeout
        self._connector = connector or websockets.connect

        self._ws: Any = None
        self._reader: asyncio.Task | None = None
        self._handler_tasks: set[asyncio.Task] = set()
        self._state = SessionState.IDLE
        self._active = False
        self._session_id: str | None = None
        self.server_config: dict[str, Any] = {}

        self._ready: Latch[None] = Latch()
        self._summary: Latch[SessionSummaryEvent] = Latch()

    # ------------------------------------------------------------------
    # Introspection
    # ------------------------------------------------------------------

    @property
    def session_id(self) -> str | None:
        return self._session_id

    @property
    def is_active(self) -> bool:
        return self._active

    @property
    def state(self) -> SessionState:
        return self._state

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def connect(self) -> None:
        """
        Open the socket, authenticate, send the initial config, and wait for
        the server's ``ready`` event.

        Raises:
            TuteliqError: INVALID_STATE if already connected or closed;
                          TIMEOUT if ``ready`` does not arrive in time;
                          NETWORK or CONNECTION_CLOSED if the connection
                          fails before ``ready``.
        """
        if self._state is not SessionState.IDLE:
            raise TuteliqError(
                ErrorKind.INVALID_STATE,
                f"Cannot connect a session in state '{self._state.value}'",
            )

        self._state = SessionState.CONNECTING
        logger.info("Connecting to voice stream at %s", self.url)

        try:
            if self.connect_timeout is None:
                await self._open()
            else:
                await asyncio.wait_for(self._open(), timeout=self.connect_timeout)
        except asyncio.TimeoutError as exc:
            await self.close()
            raise TuteliqError(
                ErrorKind.TIMEOUT,
                f"Voice stream not ready after {self.connect_timeout:g}s",
            ) from exc
        except TuteliqError:
            await self.close()
            raise
        except (OSError, websockets.exceptions.WebSocketException) as exc:
            await self.close()
            raise TuteliqError(
                ErrorKind.NETWORK, f"Voice stream connection failed: {exc}"
            ) from exc

        logger.info("Voice stream ready (session %s)", self._session_id)

    async def _open(self) -> None:
        self._ws = await self._connector(self.url)
        await self._ws.send(auth_message(self._api_key))
        if self._config is not None:
            await self._ws.send(config_message(self._config))
        self._reader = asyncio.create_task(self._read_loop(self._ws))
        await self._ready.wait()

    async def close(self) -> None:
        """
        Release the socket and stop event delivery.

        Idempotent; safe to call from inside an event handler. Coroutine
        handlers still running are cancelled. A pending ``end()`` fails
        with CONNECTION_CLOSED.
        """
        if self._state is SessionState.CLOSED:
            return

        self._state = SessionState.CLOSED
        self._active = False

        current = asyncio.current_task()
        for task in list(self._handler_tasks):
            if task is not current:
                task.cancel()

        reader, self._reader = self._reader, None
        try:
            if reader is not None and reader is not current and not reader.done():
                reader.cancel()
                # wait() does not raise for the reader's own cancellation,
                # only for a cancellation of the task calling close().
                await asyncio.wait({reader})
        finally:
            ws, self._ws = self._ws, None
            if ws is not None:
                try:
                    await ws.close()
                except (OSError, websockets.exceptions.WebSocketException) as exc:
                    logger.debug("Ignoring error while closing socket: %s", exc)

            self._fail_pending(
                TuteliqError(ErrorKind.CONNECTION_CLOSED, "Voice stream session closed")
            )
            logger.info("Voice stream closed (session %s)", self._session_id)

    async def __aenter__(self) -> "VoiceStreamSession":
        await self.connect()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    # ------------------------------------------------------------------
    # Outbound
    # ------------------------------------------------------------------

    def _require_active(self) -> None:
        if not self._active or self._ws is None:
            raise TuteliqError(ErrorKind.INVALID_STATE, "Voice stream is not connected")

    async def _send(self, frame: str | bytes) -> None:
        try:
            await self._ws.send(frame)
        except websockets.exceptions.ConnectionClosed as exc:
            raise TuteliqError(
                ErrorKind.CONNECTION_CLOSED, f"Voice stream connection lost: {exc}"
            ) from exc

    async def send_audio(self, data: bytes) -> None:
        """Send one binary audio frame. No per-frame acknowledgment."""
        self._require_active()
        await self._send(bytes(data))
        if self._state is SessionState.READY:
            self._state = SessionState.ACTIVE

    async def update_config(self, config: VoiceStreamConfig) -> None:
        """
        Ask the server to change session behaviour.

        The change takes effect when the server answers with
        ``config_updated``; this call does not wait for it.
        """
        self._require_active()
        logger.debug("Sending config update")
        await self._send(config_message(config))

    async def end(self) -> SessionSummaryEvent:
        """
        Send ``end`` and wait for the terminal ``session_summary``.

        Waits without a timeout; fails with CONNECTION_CLOSED if the
        connection drops first.
        """
        self._require_active()
        await self._send(end_message())
        self._state = SessionState.ENDED
        return await self._summary.wait()

    # ------------------------------------------------------------------
    # Inbound
    # ------------------------------------------------------------------

    async def _read_loop(self, ws: Any) -> None:
        error: BaseException | None = None
        try:
            async for raw in ws:
                if isinstance(raw, (bytes, bytearray)):
                    continue
                event = decode_event(raw)
                if event is not None:
                    self._dispatch(event)
        except websockets.exceptions.ConnectionClosed as exc:
            error = exc
        except OSError as exc:
            error = exc
        self._handle_disconnect(ws, error)

    def _dispatch(self, event: StreamEvent) -> None:
        logger.debug("Received %s event", event.type)

        if isinstance(event, ReadyEvent):
            if self._session_id is None:
                self._session_id = event.session_id
            self.server_config = event.config
            if not self._ready.done:
                self._active = True
                if self._state is SessionState.CONNECTING:
                    self._state = SessionState.READY
        elif isinstance(event, ConfigUpdatedEvent):
            self.server_config = event.config

        self._emit(getattr(self._handlers, _HANDLER_FOR_EVENT[type(event)]), event)

        if isinstance(event, ReadyEvent):
            self._ready.resolve(None)
        elif isinstance(event, SessionSummaryEvent):
            self._summary.resolve(event)

    def _handle_disconnect(self, ws: Any, error: BaseException | None) -> None:
        if self._state is SessionState.CLOSED:
            return

        code = getattr(ws, "close_code", None) or DEFAULT_CLOSE_CODE
        reason = getattr(ws, "close_reason", None) or DEFAULT_CLOSE_REASON
        logger.info("Voice stream disconnected (code %s): %s", code, reason)

        self._state = SessionState.CLOSED
        self._active = False
        self._ws = None
        self._reader = None

        if error is not None and not isinstance(
            error, websockets.exceptions.ConnectionClosedOK
        ):
            ready_error = TuteliqError(
                ErrorKind.NETWORK, f"Voice stream connection failed: {error}"
            )
        else:
            ready_error = TuteliqError(
                ErrorKind.CONNECTION_CLOSED, "Connection closed before ready"
            )
        self._ready.reject(ready_error)
        self._ready.discard()
        self._emit(self._handlers.on_close, code, reason)
        self._fail_pending(
            TuteliqError(ErrorKind.CONNECTION_CLOSED, "Connection closed before session summary")
        )

    def _fail_pending(self, error: TuteliqError) -> None:
        for latch in (self._ready, self._summary):
            latch.reject(error)
            latch.discard()

    def _emit(self, handler: Callable[..., Any] | None, *args: Any) -> None:
        if handler is None:
            return
        try:
            result = handler(*args)
        except Exception:
            logger.exception("Voice stream handler %r raised", handler)
            return
        if inspect.isawaitable(result):
            task = asyncio.ensure_future(result)
            self._handler_tasks.add(task)
            task.add_done_callback(self._handler_finished)

    def _handler_finished(self, task: asyncio.Task) -> None:
        self._handler_tasks.discard(task)
        if not task.cancelled() and task.exception() is not None:
            logger.error("Voice stream handler failed: %s", task.exception())
