"""Helpers for running external commands."""

from __future__ import annotations

import shlex
import shutil
import subprocess
import sys
import threading
from collections.abc import Callable, Sequence
from typing import IO, Any

from rollerkit.errorhandling import prettify_error_if_exists

_POLL_SECONDS = 0.1
_DEFAULT_PROMPT = "do you want to continue?"


class CommandError(RuntimeError):
    """Raised when an external command fails."""

    def __init__(
        self,
        message: str,
        *,
        returncode: int | None = None,
        stdout: str = "",
        stderr: str = "",
    ) -> None:
        super().__init__(message)
        self.returncode = returncode
        self.stdout = stdout
        self.stderr = stderr


def _describe_exit(returncode: int) -> str:
    if returncode < 0:
        return f"terminated by signal {-returncode}"
    return f"exit status {returncode}"


def _wait_or_kill(proc: subprocess.Popen[Any], stop_event: threading.Event) -> int:
    """Wait for ``proc``, killing it as soon as ``stop_event`` is set."""
    while True:
        if stop_event.is_set():
            proc.kill()
            return proc.wait()
        try:
            return proc.wait(timeout=_POLL_SECONDS)
        except subprocess.TimeoutExpired:
            continue


def run_command_every(
    command: str,
    args: Sequence[str],
    interval_sec: float,
    stop_event: threading.Event,
) -> threading.Thread:
    """Run a command repeatedly in a background thread until ``stop_event`` is set."""
    argv = [command, *args]

    def _loop() -> None:
        while True:
            try:
                proc = subprocess.Popen(
                    argv, stdout=subprocess.DEVNULL, stderr=subprocess.DEVNULL
                )
            except OSError as exc:
                error = str(exc)
            else:
                returncode = _wait_or_kill(proc, stop_event)
                error = _describe_exit(returncode) if returncode else ""
            if error:
                try:
                    sys.stderr.write(
                        f"Failed to execute command: {shlex.join(argv)}, err: {error}\n"
                    )
                except OSError:
                    return
            if stop_event.is_set():
                return
            if stop_event.wait(interval_sec):
                return

    thread = threading.Thread(target=_loop, daemon=True)
    thread.start()
    return thread


def run_cmd_async(
    args: Sequence[str],
    stop_event: threading.Event,
    print_output: Callable[[], Any],
    parse_error: Callable[[str], str] | None = None,
) -> None:
    """Run a command until it exits or ``stop_event`` is set.

    A failure is reported through :func:`prettify_error_if_exists`, which exits.
    """
    parse = parse_error if parse_error is not None else (lambda message: message)
    try:
        proc = subprocess.Popen(
            list(args), stdout=subprocess.DEVNULL, stderr=subprocess.PIPE, text=True
        )
    except OSError as exc:
        message = parse("")
        prettify_error_if_exists(exc if not message else CommandError(message))
        return

    print_output()

    collected: list[str] = []
    reader = threading.Thread(
        target=lambda: collected.append(proc.stderr.read() if proc.stderr else ""),
        daemon=True,
    )
    reader.start()
    returncode = _wait_or_kill(proc, stop_event)
    reader.join()
    if proc.stderr:
        proc.stderr.close()

    if returncode != 0:
        prettify_error_if_exists(CommandError(parse("".join(collected)), returncode=returncode))


def _run_captured(args: Sequence[str]) -> subprocess.CompletedProcess[str]:
    try:
        return subprocess.run(list(args), capture_output=True, text=True, check=False)
    except OSError as exc:
        raise CommandError(
            f"command execution failed: {exc}, stderr: ", stderr=""
        ) from exc


def exec_command_with_stdout(args: Sequence[str]) -> str:
    """Run a command and return its standard output."""
    result = _run_captured(args)
    if result.returncode != 0:
        raise CommandError(
            f"command execution failed: {_describe_exit(result.returncode)}, "
            f"stderr: {result.stderr}",
            returncode=result.returncode,
            stdout=result.stdout,
            stderr=result.stderr,
        )
    return result.stdout


def exec_command_with_stderr(args: Sequence[str]) -> str:
    """Run a command and return its standard error."""
    result = _run_captured(args)
    if result.returncode != 0:
        raise CommandError(
            f"command execution failed: {_describe_exit(result.returncode)}, "
            f"stderr: {result.stderr}",
            returncode=result.returncode,
            stdout=result.stdout,
            stderr=result.stderr,
        )
    return result.stderr


def exec_cmd(args: Sequence[str]) -> None:
    """Run a command, discarding its output."""
    try:
        returncode = subprocess.run(
            list(args),
            stdout=subprocess.DEVNULL,
            stderr=subprocess.DEVNULL,
            check=False,
        ).returncode
    except OSError as exc:
        raise CommandError(f"command execution failed: {exc}") from exc
    if returncode != 0:
        raise CommandError(
            f"command execution failed: {_describe_exit(returncode)}", returncode=returncode
        )


def _pump_lines(stream: IO[str]) -> None:
    for line in stream:
        print(line.rstrip("\n"))


def exec_cmd_follow(args: Sequence[str]) -> None:
    """Run a command, printing its stdout and stderr lines as they arrive."""
    try:
        proc = subprocess.Popen(
            list(args), stdout=subprocess.PIPE, stderr=subprocess.PIPE, text=True
        )
    except OSError as exc:
        raise CommandError(str(exc)) from exc

    with proc:
        pumps = [
            threading.Thread(target=_pump_lines, args=(stream,), daemon=True)
            for stream in (proc.stdout, proc.stderr)
            if stream is not None
        ]
        for pump in pumps:
            pump.start()
        returncode = proc.wait()
        for pump in pumps:
            pump.join()

    if returncode != 0:
        raise CommandError(_describe_exit(returncode), returncode=returncode)


def exec_command_with_interactions(cmd_name: str, *args: str) -> None:
    """Run a command attached to this process's terminal."""
    try:
        proc = subprocess.Popen([cmd_name, *args])
    except OSError as exc:
        raise CommandError(f"error starting command: {exc}") from exc
    returncode = proc.wait()
    if returncode != 0:
        raise CommandError(
            f"command finished with error: {_describe_exit(returncode)}",
            returncode=returncode,
        )


def _confirm(prompt: str) -> bool:
    try:
        answer = input(f"{prompt} [y/N]: ")
    except EOFError:
        return False
    return answer.strip().lower() in {"y", "yes"}


def _send(proc: subprocess.Popen[str], reply: str) -> None:
    if proc.stdin is None:
        raise CommandError("stdin is not available")
    try:
        proc.stdin.write(reply)
        proc.stdin.flush()
    except OSError as exc:
        raise CommandError(str(exc)) from exc


def exec_command_with_input(
    args: Sequence[str], text: str, prompt_text: str | None = None
) -> str:
    """Run a command, asking the user to confirm whenever a line contains ``text``.

    Returns everything the command printed. Raises :class:`CommandError` when
    the user declines or the command fails.
    """
    prompt = prompt_text or _DEFAULT_PROMPT
    try:
        proc = subprocess.Popen(
            list(args),
            stdin=subprocess.PIPE,
            stdout=subprocess.PIPE,
            stderr=subprocess.STDOUT,
            text=True,
        )
    except OSError as exc:
        raise CommandError(f"error starting command: {exc}") from exc

    output: list[str] = []
    with proc:
        assert proc.stdout is not None
        for raw in proc.stdout:
            line = raw[:-1] if raw.endswith("\n") else raw
            print(line)
            output.append(line + "\n")
            if text in line:
                if _confirm(prompt):
                    _send(proc, "y\n")
                else:
                    try:
                        _send(proc, "n\n")
                    finally:
                        proc.kill()
                    raise CommandError("cancelled by user")
        returncode = proc.wait()

    if returncode != 0:
        raise CommandError(
            f"command finished with error: {_describe_exit(returncode)}",
            returncode=returncode,
            stdout="".join(output),
        )
    return "".join(output)


def extract_tx_hash(output: str) -> str:
    """Return the value of the ``txhash:`` line in command output."""
    for line in output.split("\n"):
        if line.startswith("txhash:"):
            return line[len("txhash:"):].strip()
    raise ValueError("txhash not found in output")


def is_available(binary: str) -> bool:
    """Return whether ``binary`` can be found on PATH."""
    return shutil.which(binary) is not None