import signal

import pytest

from rollerkit.errorhandling import prettify_error_if_exists, run_on_interrupt


def test_none_error_does_nothing(capsys):
    assert prettify_error_if_exists(None) is None
    captured = capsys.readouterr()
    assert captured.out == ""
    assert captured.err == ""


def test_error_is_printed_and_exits(capsys):
    with pytest.raises(SystemExit) as info:
        prettify_error_if_exists(RuntimeError("boom"))
    assert info.value.code == 1
    assert "💈 boom" in capsys.readouterr().err


def test_additional_info_printers_are_called():
    calls = []
    with pytest.raises(SystemExit):
        prettify_error_if_exists(
            ValueError("bad"), lambda: calls.append("first"), lambda: calls.append("second")
        )
    assert calls == ["first", "second"]


def test_run_on_interrupt_runs_callback_then_exits():
    calls = []
    previous = signal.getsignal(signal.SIGINT)
    try:
        returned = run_on_interrupt(lambda: calls.append("ran"))
        assert returned == previous
        with pytest.raises(SystemExit) as info:
            signal.raise_signal(signal.SIGINT)
        assert info.value.code == 0
        assert calls == ["ran"]
    finally:
        signal.signal(signal.SIGINT, previous)