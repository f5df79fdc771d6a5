"""Console logger for debug and trace output."""

import sys
from typing import Optional, TextIO

from .models import DEBUG_TRACE


class ConsoleLogger:
    """Prints tagged diagnostic lines to stderr.

    ``[debug]`` lines are emitted whenever a debug level is set; ``[trace]``
    lines only when the level is ``trace``.
    """

    def __init__(self, level: Optional[str] = None, stream: Optional[TextIO] = None) -> None:
        self.level = level
        self._stream = stream

    @property
    def stream(self) -> TextIO:
        # Looked up lazily so pytest's capsys sees the output
        return self._stream if self._stream is not None else sys.stderr

    @property
    def debug_enabled(self) -> bool:
        return bool(self.level)

    @property
    def trace_enabled(self) -> bool:
        return self.level == DEBUG_TRACE

    def _print(self, tag: str, message: str) -> None:
        if tag:
            message = f"[{tag}] {message}"
        print(message, file=self.stream)

    @staticmethod
    def _ensure_text(message) -> str:
        if isinstance(message, bytes):
            return message.decode("utf-8", "ignore")
        return str(message)

    def trace(self, message) -> None:
        if self.trace_enabled:
            self._print("trace", self._ensure_text(message))

    def debug(self, message) -> None:
        if self.debug_enabled:
            self._print("debug", self._ensure_text(message))

    def warning(self, message) -> None:
        self._print("", f"Warning: {self._ensure_text(message)}")
