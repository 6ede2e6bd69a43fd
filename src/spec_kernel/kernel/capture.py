"""Per-step stdout capture.

``sys.stdout`` is pointed at the write end of an OS pipe while a relay thread
copies the read end into a buffer, so a chatty implementation never blocks on
a full pipe. ``text`` is populated on exit, after stdout is restored and the
relay has drained the closed pipe.
"""

from __future__ import annotations

import os
import sys
import threading
from types import TracebackType
from typing import TextIO

_READ_CHUNK = 65536


class OutputCapture:
    def __init__(self) -> None:
        self.text = ""
        self._chunks: list[bytes] = []
        self._done = threading.Event()
        self._saved: TextIO | None = None
        self._writer: TextIO | None = None

    def __enter__(self) -> OutputCapture:
        try:
            read_fd, write_fd = os.pipe()
        except OSError:
            # No pipe available: the step runs uncaptured.
            return self
        self._writer = os.fdopen(write_fd, "w", encoding="utf-8", errors="replace")
        relay = threading.Thread(target=self._relay, args=(read_fd,), name="step-output-relay", daemon=True)
        relay.start()
        self._saved = sys.stdout
        sys.stdout = self._writer
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        if self._writer is None or self._saved is None:
            return
        sys.stdout = self._saved
        try:
            self._writer.close()
        finally:
            # Closing the write end gives the relay EOF; the log is complete once it signals.
            self._done.wait()
        self.text = b"".join(self._chunks).decode("utf-8", errors="replace")

    def _relay(self, read_fd: int) -> None:
        try:
            while True:
                chunk = os.read(read_fd, _READ_CHUNK)
                if not chunk:
                    break
                self._chunks.append(chunk)
        finally:
            os.close(read_fd)
            self._done.set()


class NoCapture:
    # Used when capture is disabled in config; output goes straight to the real stdout.
    text = ""

    def __enter__(self) -> NoCapture:
        return self

    def __exit__(self, *exc_info: object) -> None:
        return None


def capture_output(enabled: bool = True) -> OutputCapture | NoCapture:
    return OutputCapture() if enabled else NoCapture()
