from __future__ import annotations

import contextlib
import logging
from typing import IO, Iterator

logger = logging.getLogger(__name__)


@contextlib.contextmanager
def raw_terminal(stream: IO) -> Iterator[bool]:
    """
    Turn off line buffering and echo on ``stream`` for the duration of the block.

    Only ECHO and ICANON are cleared so Ctrl-C still interrupts. The previous
    settings are restored on every exit path. Yields True when the mode was
    actually changed, False when ``stream`` is not an interactive terminal or
    the platform has no termios.
    """
    if not stream.isatty():
        yield False
        return
    try:
        import termios
    except ImportError:
        yield False
        return

    fd = stream.fileno()
    saved = termios.tcgetattr(fd)
    raw = termios.tcgetattr(fd)
    raw[3] &= ~(termios.ECHO | termios.ICANON)
    termios.tcsetattr(fd, termios.TCSAFLUSH, raw)
    logger.debug("terminal on fd %d switched to raw mode", fd)
    try:
        yield True
    finally:
        termios.tcsetattr(fd, termios.TCSAFLUSH, saved)
        logger.debug("terminal on fd %d restored", fd)
