"""Per-recipient delivery gate with a sliding retention window.

Two suppression rules run against the recipient's recent history, after
stale records have been pruned:

1. **throttle**: a previous send landed in the same tick (whole multiples
   of ``tick_seconds``), whatever its content.
2. **duplicate**: a previous send carried exactly the same text.

When neither fires the send is recorded and the caller must dispatch it.
"""

from __future__ import annotations

import threading
import time
from collections.abc import Callable
from typing import Literal

from loguru import logger

from notifyy.core.models import SendRecord
from notifyy.telemetry.base import TelemetryPort

type SuppressReason = Literal["throttled", "duplicate"]

DEFAULT_RETENTION_SECONDS = 3600
DEFAULT_TICK_SECONDS = 1.0


class DeliveryGate:
    """Decide whether a message should actually go out to a recipient."""

    def __init__(
        self,
        *,
        retention_seconds: float = DEFAULT_RETENTION_SECONDS,
        tick_seconds: float = DEFAULT_TICK_SECONDS,
        clock: Callable[[], float] = time.monotonic,
        telemetry: TelemetryPort | None = None,
    ) -> None:
        if retention_seconds <= 0:
            raise ValueError("retention_seconds must be positive")
        if tick_seconds <= 0:
            raise ValueError("tick_seconds must be positive")
        self._retention_seconds = float(retention_seconds)
        self._tick_seconds = float(tick_seconds)
        self._clock = clock
        self._telemetry = telemetry
        self._histories: dict[str, list[SendRecord]] = {}
        self._lock = threading.Lock()

    @property
    def retention_seconds(self) -> float:
        return self._retention_seconds

    @property
    def tick_seconds(self) -> float:
        return self._tick_seconds

    def should_send(self, recipient_id: str, message: str) -> bool:
        """Return True and record the send, or False when it must be suppressed."""
        with self._lock:
            now = self._clock()
            history = self._prune(recipient_id, now)
            reason = self._suppress_reason(history, message, now)
            if reason is None:
                history.append(SendRecord(message=message, sent_at=now))

        if reason is not None:
            logger.debug(f"Gate suppressed message for {recipient_id[:8]}…: {reason}")
            self._metric("gate_suppressed_total", labels=(("reason", reason),))
            return False

        self._metric("gate_accepted_total")
        return True

    def history(self, recipient_id: str) -> list[SendRecord]:
        """Copy of the recorded (not yet pruned) sends for one recipient."""
        with self._lock:
            return list(self._histories.get(recipient_id, ()))

    def reset(self) -> None:
        """Forget every recipient's history."""
        with self._lock:
            self._histories.clear()

    def __len__(self) -> int:
        return len(self._histories)

    # ── Internals ────────────────────────────────────────────────────

    def _prune(self, recipient_id: str, now: float) -> list[SendRecord]:
        # Records aged exactly the retention window are kept.
        history = self._histories.setdefault(recipient_id, [])
        fresh = [r for r in history if now - r.sent_at <= self._retention_seconds]
        if len(fresh) != len(history):
            history[:] = fresh
        return history

    def _suppress_reason(
        self, history: list[SendRecord], message: str, now: float
    ) -> SuppressReason | None:
        for record in history:
            if int((now - record.sent_at) // self._tick_seconds) == 0:
                return "throttled"
        for record in history:
            if record.message == message:
                return "duplicate"
        return None

    def _metric(self, name: str, labels: tuple[tuple[str, str], ...] = ()) -> None:
        if self._telemetry is not None:
            self._telemetry.incr(name, labels=labels)
