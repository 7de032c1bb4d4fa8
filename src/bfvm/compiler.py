from __future__ import annotations

import logging

from .errors import make_compile_error
from .instructions import Instruction, Op, Program
from .lexer import Source, as_bytes, iter_operators
from .state import CompilerState

logger = logging.getLogger(__name__)


class Compiler:
    """
    Single-pass compiler from operator text to a Program.

    Steps:
    1. Filter: keep only the eight operator bytes (lazily, see lexer)
    2. Pack: runs of the same simple operator become one counted instruction
    3. Link: brackets become jumps with precomputed absolute targets

    Jump convention:
    - LOOP_START jumps just past its LOOP_END when the cell is zero
    - LOOP_END jumps to the first instruction of the body when the cell is
      non-zero, skipping the LOOP_START whose test would be redundant
    """

    def __init__(self):
        self.state = CompilerState()

    def compile(self, source: Source) -> Program:
        data = as_bytes(source)
        self.state.reset()
        emitted = self.state.instructions
        loop_stack = self.state.loop_stack

        ops = iter_operators(data)
        current = next(ops, None)
        while current is not None:
            offset, op = current
            self.state.operator_count += 1

            if op is Op.LOOP_START:
                loop_stack.append(len(emitted))
                emitted.append(Instruction(Op.LOOP_START, 0, offset))
                current = next(ops, None)
                continue

            if op is Op.LOOP_END:
                if not loop_stack:
                    raise make_compile_error('unmatched_close', source=data, offset=offset)
                start = loop_stack.pop()
                here = len(emitted)
                opening = emitted[start]
                emitted[start] = Instruction(Op.LOOP_START, here + 1, opening.offset)
                emitted.append(Instruction(Op.LOOP_END, start + 1, offset))
                current = next(ops, None)
                continue

            count = 1
            current = next(ops, None)
            while current is not None and current[1] is op:
                count += 1
                current = next(ops, None)
            self.state.operator_count += count - 1
            emitted.append(Instruction(op, count, offset))

        if loop_stack:
            opening = emitted[loop_stack[-1]]
            raise make_compile_error('unmatched_open', source=data, offset=opening.offset)

        logger.debug("compiled %d operators into %d instructions",
                     self.state.operator_count, len(emitted))
        return Program(tuple(emitted))
