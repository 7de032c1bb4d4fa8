#!/usr/bin/env python3
"""
Raw terminal mode must always be restored.
"""

import sys
import os
sys.path.append(os.path.join(os.path.dirname(__file__), '..', 'src'))

import io

import pytest

from bfvm.terminal import raw_terminal

termios = pytest.importorskip("termios")


class FakeTTY:
    def isatty(self):
        return True

    def fileno(self):
        return 42


@pytest.fixture
def fake_termios(monkeypatch):
    calls = []
    attrs = [0, 0, 0, termios.ECHO | termios.ICANON | termios.ISIG, 0, 0, []]

    def tcgetattr(fd):
        return list(attrs)

    def tcsetattr(fd, when, new):
        calls.append((fd, when, list(new)))

    monkeypatch.setattr(termios, "tcgetattr", tcgetattr)
    monkeypatch.setattr(termios, "tcsetattr", tcsetattr)
    return attrs, calls


def test_not_a_terminal_is_left_alone():
    with raw_terminal(io.BytesIO()) as changed:
        assert changed is False


def test_raw_mode_clears_echo_and_canonical(fake_termios):
    attrs, calls = fake_termios
    with raw_terminal(FakeTTY()) as changed:
        assert changed is True
        assert len(calls) == 1
        fd, _, raw = calls[0]
        assert fd == 42
        assert raw[3] & termios.ECHO == 0
        assert raw[3] & termios.ICANON == 0
        assert raw[3] & termios.ISIG
    assert calls[-1][2] == attrs


def test_settings_restored_on_error(fake_termios):
    attrs, calls = fake_termios
    with pytest.raises(KeyError):
        with raw_terminal(FakeTTY()):
            raise KeyError("boom")
    assert len(calls) == 2
    assert calls[-1][2] == attrs
