"""Cooperative cancellation for an ingestion run.

SIGINT/SIGTERM set a flag that the fetchers check around every network call
and the store loop checks between games. A call that was in flight when the
flag was set has its response discarded and raises
:class:`OperationCancelled`. A second signal raises :class:`KeyboardInterrupt`.
"""

from __future__ import annotations

import logging
import signal
import threading

from lotto_ingest.errors import OperationCancelled

logger = logging.getLogger(__name__)


class CancellationToken:
    """Cancellation flag shared by the fetchers.

    Usage:
        token = CancellationToken()
        token.install_signal_handlers()

        token.raise_if_cancelled()
        resp = http.get(url)
        token.raise_if_cancelled()
    """

    def __init__(self) -> None:
        self._event = threading.Event()
        self._previous_handlers: dict[int, object] = {}

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def cancel(self) -> None:
        if not self._event.is_set():
            logger.warning("Cancellation requested; stopping after the current call")
            self._event.set()

    def raise_if_cancelled(self) -> None:
        if self._event.is_set():
            raise OperationCancelled()

    def _signal_handler(self, signum: int, frame) -> None:  # type: ignore[no-untyped-def]
        logger.info("Received %s signal", signal.Signals(signum).name)
        if self._event.is_set():
            # Second signal: stop waiting for the current call.
            raise KeyboardInterrupt
        self.cancel()

    def install_signal_handlers(self) -> None:
        """Route SIGTERM and SIGINT (Ctrl+C) to :meth:`cancel`."""

        signums = [signal.SIGTERM, signal.SIGINT]
        if hasattr(signal, "SIGBREAK"):
            signums.append(signal.SIGBREAK)
        for signum in signums:
            self._previous_handlers[signum] = signal.signal(signum, self._signal_handler)

    def restore_signal_handlers(self) -> None:
        for signum, handler in self._previous_handlers.items():
            signal.signal(signum, handler)  # type: ignore[arg-type]
        self._previous_handlers.clear()
