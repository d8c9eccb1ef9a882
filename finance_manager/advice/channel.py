"""
Advice Channel

Runs an advice request on a worker thread and hands its results back
to the thread that owns the stores.

DESIGN DECISION: The worker never calls the owner's callback. It posts
AdviceMessages into a bounded queue; the owner drains that queue on its
own thread (drain() from an event loop tick, or wait() to block). Views
updated from the callback are therefore only touched by the owner.

Request sequence on the worker:
1. No API key → canned local answer
2. Stream the answer token by token
3. If streaming fails → RETRY marker, then a single non-streaming attempt
4. If that fails too → a single ERROR message

Cancelling stops delivery immediately. Nothing in this module mutates
a store, so a cancelled or timed-out request leaves no partial state.
"""

import queue
import threading
import time
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from finance_manager.advice.callbacks import StreamCallback
from finance_manager.advice.consultant import AdviceConsultant, AdviceError
from finance_manager.config import get_settings
from finance_manager.logger import get_logger


POLL_INTERVAL_SECONDS = 0.05


class MessageKind(str, Enum):
    TOKEN = "token"
    RETRY = "retry"
    COMPLETE = "complete"
    ERROR = "error"


@dataclass(frozen=True)
class AdviceMessage:
    """One event posted from the worker to the owner."""

    kind: MessageKind
    text: str = ""


class _RequestCancelled(Exception):
    """Raised inside the worker's stream to stop it after cancel()."""


class _WorkerCallback(StreamCallback):
    """
    Forwards a streaming response into the channel queue.

    A streaming error is recorded rather than posted, because the
    worker falls back to a non-streaming request first.
    """

    def __init__(self, channel: "AdviceChannel"):
        self._channel = channel
        self.error: Optional[str] = None

    def on_token(self, token: str) -> None:
        if not self._channel._post(AdviceMessage(MessageKind.TOKEN, token)):
            raise _RequestCancelled()

    def on_complete(self) -> None:
        self._channel._post(AdviceMessage(MessageKind.COMPLETE))

    def on_error(self, error: str) -> None:
        self.error = error


class AdviceChannel:
    """
    A single advice request running on a worker thread.

    Usage:
        channel = AdviceChannel(consultant, prompt).start()
        ...
        channel.drain(view_callback)    # on the owner thread, repeatedly
    """

    def __init__(
        self,
        consultant: AdviceConsultant,
        prompt: str,
        queue_size: Optional[int] = None,
    ):
        self._consultant = consultant
        self._prompt = prompt
        self._queue: queue.Queue = queue.Queue(
            maxsize=queue_size or get_settings().advice.queue_size
        )
        self._cancelled = threading.Event()
        self._thread: Optional[threading.Thread] = None
        self._done = False
        self._succeeded = False
        self._logger = get_logger(__name__)

    # -------------------------------------------------------------------------
    # State
    # -------------------------------------------------------------------------

    @property
    def cancelled(self) -> bool:
        return self._cancelled.is_set()

    @property
    def done(self) -> bool:
        """True once the owner has dispatched the final message or cancelled."""
        return self._done or self.cancelled

    @property
    def succeeded(self) -> bool:
        return self._succeeded

    # -------------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------------

    def start(self) -> "AdviceChannel":
        if self._thread is not None:
            raise RuntimeError("Advice channel already started")
        self._thread = threading.Thread(
            target=self._run,
            name="advice-worker",
            daemon=True,
        )
        self._thread.start()
        return self

    def cancel(self) -> None:
        """Stop delivering messages. The worker exits at its next post."""
        if not self._cancelled.is_set():
            self._cancelled.set()
            self._logger.info("advice_cancelled")

    def join(self, timeout: Optional[float] = None) -> bool:
        """Wait for the worker thread to exit. Returns True if it has."""
        if self._thread is None:
            return True
        self._thread.join(timeout)
        return not self._thread.is_alive()

    # -------------------------------------------------------------------------
    # Worker side
    # -------------------------------------------------------------------------

    def _post(self, message: AdviceMessage) -> bool:
        """Queue a message, blocking while full. False once cancelled."""
        while not self._cancelled.is_set():
            try:
                self._queue.put(message, timeout=POLL_INTERVAL_SECONDS)
                return True
            except queue.Full:
                continue
        return False

    def _run(self) -> None:
        try:
            self._request()
        except _RequestCancelled:
            pass
        except Exception as e:
            self._logger.exception("advice_worker_failed", error=str(e))
            self._post(AdviceMessage(
                MessageKind.ERROR,
                f"Error getting AI advice: {e}\n\nPlease try again later.",
            ))

    def _request(self) -> None:
        consultant = self._consultant

        if not consultant.is_configured:
            self._logger.info("advice_offline_fallback")
            self._post(AdviceMessage(
                MessageKind.TOKEN, consultant.local_response(self._prompt)
            ))
            self._post(AdviceMessage(MessageKind.COMPLETE))
            return

        callback = _WorkerCallback(self)
        if consultant.stream_advice(self._prompt, callback):
            return
        if self._cancelled.is_set():
            return

        self._logger.warning("advice_stream_fallback", error=callback.error)
        self._post(AdviceMessage(MessageKind.RETRY))
        try:
            text = consultant.get_advice(self._prompt, attempts=1)
        except AdviceError as e:
            self._post(AdviceMessage(
                MessageKind.ERROR,
                f"Error getting AI advice: {e}\n\nPlease try again later.",
            ))
            return

        self._post(AdviceMessage(MessageKind.TOKEN, text))
        self._post(AdviceMessage(MessageKind.COMPLETE))

    # -------------------------------------------------------------------------
    # Owner side
    # -------------------------------------------------------------------------

    def _dispatch(self, message: AdviceMessage, callback: StreamCallback) -> None:
        if message.kind == MessageKind.TOKEN:
            callback.on_token(message.text)
        elif message.kind == MessageKind.RETRY:
            callback.on_retry()
        elif message.kind == MessageKind.COMPLETE:
            self._done = True
            self._succeeded = True
            callback.on_complete()
        elif message.kind == MessageKind.ERROR:
            self._done = True
            callback.on_error(message.text)

    def drain(self, callback: StreamCallback, max_messages: Optional[int] = None) -> int:
        """
        Dispatch messages already queued, without blocking.

        Must be called on the owner thread.

        Returns:
            Number of messages dispatched
        """
        dispatched = 0
        while not self.done:
            if max_messages is not None and dispatched >= max_messages:
                break
            try:
                message = self._queue.get_nowait()
            except queue.Empty:
                break
            self._dispatch(message, callback)
            dispatched += 1
        return dispatched

    def wait(self, callback: StreamCallback, timeout: Optional[float] = None) -> bool:
        """
        Dispatch messages until the request finishes.

        On timeout the channel is cancelled and callback.on_error is
        called with a timeout message.

        Returns:
            True if the request completed successfully
        """
        deadline = None if timeout is None else time.monotonic() + timeout

        while not self.done:
            wait_for = POLL_INTERVAL_SECONDS
            if deadline is not None:
                remaining = deadline - time.monotonic()
                if remaining <= 0:
                    self.cancel()
                    self._done = True
                    self._logger.warning("advice_timed_out", timeout=timeout)
                    callback.on_error("Advice request timed out")
                    return False
                wait_for = min(wait_for, remaining)
            try:
                message = self._queue.get(timeout=wait_for)
            except queue.Empty:
                continue
            self._dispatch(message, callback)

        return self._succeeded
