"""Progress reporting for directory scans: a text spinner fed through a queue."""

from __future__ import annotations

import asyncio
import contextlib
import enum
import sys
import time
from dataclasses import dataclass
from typing import TextIO

_BINARY_UNITS = ("KiB", "MiB", "GiB", "TiB", "PiB", "EiB", "ZiB", "YiB")


def human_bytes(size: int) -> str:
    """Format a byte count with binary prefixes, e.g. ``1.50 KiB``."""
    if size < 1024:
        return f"{size} B"
    value = float(size)
    for unit in _BINARY_UNITS:
        value /= 1024
        if value < 1024 or unit == _BINARY_UNITS[-1]:
            return f"{value:.2f} {unit}"
    raise AssertionError("unreachable")


class ProgressKind(enum.Enum):
    """The kinds of event a scan reports."""

    NEW_ITEM_FOUND = "new_item_found"
    BYTES_PROCESSED = "bytes_processed"
    ERROR_ENCOUNTERED = "error_encountered"
    SCAN_COMPLETED = "scan_completed"


@dataclass(frozen=True)
class ProgressUpdate:
    """One progress event; ``size`` is only meaningful for BYTES_PROCESSED."""

    kind: ProgressKind
    size: int = 0

    @classmethod
    def new_item(cls) -> ProgressUpdate:
        return cls(ProgressKind.NEW_ITEM_FOUND)

    @classmethod
    def bytes_processed(cls, size: int) -> ProgressUpdate:
        return cls(ProgressKind.BYTES_PROCESSED, size)

    @classmethod
    def error(cls) -> ProgressUpdate:
        return cls(ProgressKind.ERROR_ENCOUNTERED)

    @classmethod
    def completed(cls) -> ProgressUpdate:
        return cls(ProgressKind.SCAN_COMPLETED)


class ProgressReporter:
    """Consumes progress updates from a queue and draws a spinner line.

    With no stream given, output goes to stderr and only when it is a terminal.
    A ``tick_interval`` of zero disables the steady tick and redraws on every update.
    """

    TICKS = ("-", "\\", "|", "/")
    _RED = "\x1b[31m"
    _RESET = "\x1b[0m"

    def __init__(self, stream: TextIO | None = None, tick_interval: float = 0.12) -> None:
        if stream is None:
            self.stream: TextIO = sys.stderr
            self._enabled = self.stream.isatty()
        else:
            self.stream = stream
            self._enabled = True
        self.tick_interval = tick_interval
        self.total_items = 0
        self.total_bytes = 0
        self.message = "Scanning..."
        self._tick = 0
        self._started = time.monotonic()
        self._last_draw = 0.0
        self._drawn_width = 0

    async def run(self, queue: asyncio.Queue) -> None:
        """Process updates until a SCAN_COMPLETED update arrives, then finish the line."""
        self._started = time.monotonic()
        self.message = "Scanning..."
        self._draw()
        ticker = asyncio.create_task(self._tick_loop()) if self.tick_interval > 0 else None
        try:
            while True:
                update: ProgressUpdate = await queue.get()
                if update.kind is ProgressKind.SCAN_COMPLETED:
                    break
                self._apply(update)
                if time.monotonic() - self._last_draw >= self.tick_interval:
                    self._draw()
        finally:
            if ticker is not None:
                ticker.cancel()
                with contextlib.suppress(asyncio.CancelledError):
                    await ticker
        self.message = (
            f"Scan finished! Total Items: {self.total_items}, "
            f"Total Size: {human_bytes(self.total_bytes)}"
        )
        self._draw(finished=True)
        if self._enabled:
            self.stream.write("\n")
            self.stream.flush()

    def _status(self, suffix: str = "") -> str:
        return (
            f"Scanning... Items: {self.total_items}, "
            f"Size: {human_bytes(self.total_bytes)}{suffix}"
        )

    def _apply(self, update: ProgressUpdate) -> None:
        if update.kind is ProgressKind.NEW_ITEM_FOUND:
            self.total_items += 1
            self.message = self._status()
        elif update.kind is ProgressKind.BYTES_PROCESSED:
            self.total_bytes += update.size
            self.message = self._status()
        elif update.kind is ProgressKind.ERROR_ENCOUNTERED:
            self.message = self._status(" (errors encountered)")

    async def _tick_loop(self) -> None:
        while True:
            await asyncio.sleep(self.tick_interval)
            self._tick += 1
            self._draw()

    def _elapsed(self) -> str:
        seconds = int(time.monotonic() - self._started)
        hours, rest = divmod(seconds, 3600)
        minutes, secs = divmod(rest, 60)
        return f"{hours:02}:{minutes:02}:{secs:02}"

    def _draw(self, finished: bool = False) -> None:
        self._last_draw = time.monotonic()
        if not self._enabled:
            return
        spinning = self.TICKS[:-1]
        spinner = self.TICKS[-1] if finished else spinning[self._tick % len(spinning)]
        if self.stream.isatty():
            spinner = f"{self._RED}{spinner}{self._RESET}"
        line = f"{spinner} {self.message} [{self._elapsed()}] Items: {self.total_items}"
        padding = " " * max(0, self._drawn_width - len(line))
        self.stream.write(f"\r{line}{padding}")
        self.stream.flush()
        self._drawn_width = len(line)