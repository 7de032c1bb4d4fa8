from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import BinaryIO, List, Optional

from .api import MachineOptions, compile_string, make_vm
from .errors import CompileError, ExecutionError, runtime_hint, source_excerpt
from .state import CELL_DTYPES
from .terminal import raw_terminal
from .vm import VirtualMachine

logger = logging.getLogger('bfvm')

EXIT_OK = 0
EXIT_USAGE = 1
EXIT_FAILURE = 255


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='bfvm',
        description='Compile and run a Brainfuck program on a bounded tape.',
    )
    parser.add_argument('file', nargs='?', help='Program source file')
    parser.add_argument('--tape-length', type=int, default=1024, help='Number of cells (default 1024)')
    parser.add_argument('--cell-bits', type=int, default=8, choices=sorted(CELL_DTYPES),
                        help='Cell width in bits (default 8)')
    parser.add_argument('--disasm', action='store_true', help='Print the compiled program instead of running it')
    parser.add_argument('-d', '--debug', action='store_true', help='Trace every instruction to stderr')
    return parser


def _report_runtime_error(err: ExecutionError, vm: VirtualMachine, source: bytes) -> None:
    logger.error("%s", err)
    index = err.instruction_index
    if 0 <= index < len(vm.program):
        logger.error("at source offset %d:\n%s", vm.program[index].offset,
                     source_excerpt(source, vm.program[index].offset))
    hint = runtime_hint(err)
    if hint:
        logger.error("Hint: %s", hint)
    state = vm.state
    logger.error("Final state: ip=%d dp=%d", state.instruction_pointer, state.data_pointer)
    logger.error("Memory: %s", state.window())
    logger.error("Disassembly:\n%s", vm.program.disassemble(index - 5, index + 5, marker=index))


def main(argv: Optional[List[str]] = None, *,
         stdin: Optional[BinaryIO] = None, stdout: Optional[BinaryIO] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(stream=sys.stderr, format='%(levelname)s: %(message)s')
    logger.setLevel(logging.DEBUG if args.debug else logging.INFO)

    if args.file is None:
        logger.error("You have to provide a filename")
        parser.print_usage(sys.stderr)
        return EXIT_USAGE

    try:
        options = MachineOptions(tape_length=args.tape_length, cell_bits=args.cell_bits, trace=args.debug)
    except ValueError as e:
        parser.error(str(e))

    try:
        source = Path(args.file).read_bytes()
    except OSError as e:
        logger.error("Couldn't read %s: %s", args.file, e)
        return EXIT_FAILURE

    try:
        program = compile_string(source)
    except CompileError as e:
        logger.error("%s", e)
        return EXIT_FAILURE

    out = stdout if stdout is not None else sys.stdout.buffer
    if args.disasm:
        out.write(program.disassemble().encode('utf-8') + b'\n')
        return EXIT_OK

    if stdin is None:
        term = sys.stdin
        inp = sys.stdin.buffer
    else:
        term = inp = stdin

    vm = make_vm(program, inp, out, options=options)
    try:
        if program.uses_input:
            with raw_terminal(term):
                vm.run()
        else:
            vm.run()
    except ExecutionError as e:
        _report_runtime_error(e, vm, source)
        return EXIT_FAILURE

    out.write(b'\n')
    out.flush()
    return EXIT_OK


if __name__ == '__main__':
    raise SystemExit(main())
