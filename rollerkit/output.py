"""Console output that can be silenced: messages, prompts and a spinner."""

from __future__ import annotations

import itertools
import sys
import threading
from collections.abc import Sequence
from typing import TextIO


class Spinner:
    """A terminal spinner drawn from a background thread."""

    FRAMES: tuple[str, ...] = ("|", "/", "-", "\\")

    def __init__(
        self,
        stream: TextIO | None = None,
        interval: float = 0.1,
        frames: Sequence[str] = FRAMES,
    ) -> None:
        self.stream = stream
        self.interval = interval
        self.frames = tuple(frames)
        self.suffix = ""
        self._stop = threading.Event()
        self._thread: threading.Thread | None = None
        self._width = 0

    @property
    def running(self) -> bool:
        """Whether the spinner is currently drawn."""
        return self._thread is not None

    def _write(self, text: str) -> None:
        stream = self.stream if self.stream is not None else sys.stdout
        stream.write(text)
        stream.flush()

    def _spin(self, stop: threading.Event) -> None:
        for frame in itertools.cycle(self.frames):
            line = f"{frame}{self.suffix}"
            self._width = max(self._width, len(line))
            self._write(f"\r{line}")
            if stop.wait(self.interval):
                return

    def start(self, suffix: str = "") -> None:
        """Start spinning with ``suffix`` after the frame, restarting if running."""
        self.stop()
        self.suffix = suffix
        self._stop = threading.Event()
        self._thread = threading.Thread(target=self._spin, args=(self._stop,), daemon=True)
        self._thread.start()

    def stop(self) -> None:
        """Stop spinning and clear the line."""
        if self._thread is None:
            return
        self._stop.set()
        self._thread.join()
        self._thread = None
        self._write("\r" + " " * self._width + "\r")
        self._width = 0


class OutputHandler:
    """Prints messages and shows a spinner unless output is disabled."""

    def __init__(self, no_output: bool = False) -> None:
        self.no_output = no_output
        self.spinner: Spinner | None = None if no_output else Spinner()

    def prompt_overwrite_config(self, home: str) -> bool:
        """Ask whether to overwrite a non-empty directory; ``True`` when silenced."""
        if self.no_output:
            return True
        msg = f"Directory {home} is not empty. Do you want to overwrite it?"
        try:
            answer = input(f"{msg} [y/N]: ")
        except EOFError:
            return False
        return answer.strip().lower() in {"y", "yes"}

    def display_message(self, msg: str) -> None:
        """Print ``msg`` unless output is disabled."""
        if not self.no_output:
            print(msg)

    def start_spinner(self, suffix: str) -> None:
        """Start (or restart) the spinner with ``suffix``."""
        if not self.no_output and self.spinner is not None:
            self.spinner.start(suffix)

    def stop_spinner(self) -> None:
        """Stop the spinner."""
        if not self.no_output and self.spinner is not None:
            self.spinner.stop()