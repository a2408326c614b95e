"""Uniform reporting of fatal errors and interrupt handling."""

from __future__ import annotations

import signal
import sys
from collections.abc import Callable
from typing import Any


def prettify_error_if_exists(err: BaseException | None, *args: Callable[[], Any]) -> None:
    """Print ``err``, run each extra printer, and exit with status 1.

    Does nothing when ``err`` is ``None``.
    """
    if err is None:
        return
    print(f"ERROR: 💈 {err}", file=sys.stderr)
    for print_info in args:
        print_info()
    raise SystemExit(1)


def run_on_interrupt(func_to_run: Callable[[], Any]) -> Any:
    """Run ``func_to_run`` and exit with status 0 when SIGINT arrives.

    Returns the previously installed SIGINT handler.
    """

    def _handler(signum: int, frame: Any) -> None:
        func_to_run()
        raise SystemExit(0)

    return signal.signal(signal.SIGINT, _handler)