from __future__ import annotations

import logging
from typing import BinaryIO

from .errors import make_out_of_bounds
from .instructions import Op, Program
from .state import MachineState

logger = logging.getLogger(__name__)


class VirtualMachine:
    """
    Executes a compiled Program against a bounded tape.

    Cell arithmetic wraps modulo the cell width. Moving the data pointer
    outside ``[0, tape_length)`` raises OutOfBoundsPointer and leaves the
    state as it was before the failing instruction.

    ``stdin`` needs ``read(n) -> bytes`` (empty means end of stream, read as 0)
    and ``stdout`` needs ``write(bytes)``; it is flushed after every output
    instruction when it has a ``flush`` method.
    """

    def __init__(self, program: Program, stdin: BinaryIO, stdout: BinaryIO,
                 *, tape_length: int = 1024, cell_bits: int = 8, trace: bool = False):
        self.program = program
        self.stdin = stdin
        self.stdout = stdout
        self.trace = trace
        self.state = MachineState(tape_length=tape_length, cell_bits=cell_bits)

    def reset(self) -> None:
        self.state.reset()

    @property
    def halted(self) -> bool:
        return self.state.instruction_pointer >= len(self.program)

    def run(self) -> MachineState:
        while self.step():
            pass
        return self.state

    def step(self) -> bool:
        """Execute one instruction. Returns False once the program has finished."""
        state = self.state
        ip = state.instruction_pointer
        if ip >= len(self.program):
            return False

        inst = self.program[ip]
        op = inst.op
        n = inst.operand
        if self.trace:
            logger.debug("ip=%d dp=%d cell=%d %s", ip, state.data_pointer, state.current, inst)

        if op is Op.INCREMENT:
            state.current = state.current + n
        elif op is Op.DECREMENT:
            state.current = state.current - n
        elif op is Op.MOVE_RIGHT:
            if state.data_pointer + n >= state.tape_length:
                raise make_out_of_bounds(instruction_index=ip, data_pointer=state.data_pointer,
                                         delta=n, tape_length=state.tape_length)
            state.data_pointer += n
        elif op is Op.MOVE_LEFT:
            if state.data_pointer - n < 0:
                raise make_out_of_bounds(instruction_index=ip, data_pointer=state.data_pointer,
                                         delta=-n, tape_length=state.tape_length)
            state.data_pointer -= n
        elif op is Op.OUTPUT:
            self._write(bytes([state.current & 0xFF]) * n)
        elif op is Op.INPUT:
            value = 0
            for _ in range(n):
                value = self._read()
            state.current = value
        elif op is Op.LOOP_START:
            if state.current == 0:
                state.instruction_pointer = n
                return True
        elif op is Op.LOOP_END:
            if state.current != 0:
                state.instruction_pointer = n
                return True

        state.instruction_pointer = ip + 1
        return True

    def _read(self) -> int:
        data = self.stdin.read(1)
        if not data:
            return 0
        return data[0]

    def _write(self, data: bytes) -> None:
        self.stdout.write(data)
        flush = getattr(self.stdout, 'flush', None)
        if flush is not None:
            flush()

