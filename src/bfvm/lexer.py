from __future__ import annotations

from typing import Iterator, Tuple, Union

from .instructions import Op

Source = Union[bytes, bytearray, memoryview, str]

OPERATORS = frozenset(b'><+-.,[]')


def is_operator(byte: int) -> bool:
    return byte in OPERATORS


def as_bytes(source: Source) -> bytes:
    if isinstance(source, str):
        return source.encode('utf-8')
    return bytes(source)


def iter_operators(source: Source) -> Iterator[Tuple[int, Op]]:
    """
    Lazily yield ``(offset, op)`` for every operator byte in ``source``.

    Anything that is not one of the eight operators is a comment and is
    skipped without complaint.
    """
    data = as_bytes(source)
    for offset, byte in enumerate(data):
        if is_operator(byte):
            yield offset, Op(chr(byte))
