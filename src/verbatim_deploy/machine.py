"""Constructor-program interpreter for the simulated ledger.

Covers the instructions a launcher needs and nothing more. Anything else is an
execution error, which the ledger reports as a failed construction.
"""
from __future__ import annotations

from verbatim_core.protocol import (
    MAX_MEMORY_BYTES,
    MAX_STACK_DEPTH,
    OP_CODECOPY,
    OP_PUSH0,
    OP_PUSH1,
    OP_PUSH32,
    OP_RETURN,
    OP_STOP,
    WORD_BITS,
)

WORD_MASK = (1 << WORD_BITS) - 1


class ExecutionError(Exception):
    """Constructor program halted abnormally."""


class _Frame:
    def __init__(self, code: bytes):
        self.code = code
        self.stack: list[int] = []
        self.memory = bytearray()

    def push(self, value: int) -> None:
        if len(self.stack) >= MAX_STACK_DEPTH:
            raise ExecutionError("Stack overflow")
        self.stack.append(value & WORD_MASK)

    def pop(self) -> int:
        if not self.stack:
            raise ExecutionError("Stack underflow")
        return self.stack.pop()

    def expand(self, offset: int, size: int) -> None:
        if size == 0:
            return
        end = offset + size
        if end > MAX_MEMORY_BYTES:
            raise ExecutionError(f"Memory access up to {end} exceeds {MAX_MEMORY_BYTES} bytes")
        if end > len(self.memory):
            self.memory.extend(b"\x00" * (end - len(self.memory)))

    def code_slice(self, offset: int, size: int) -> bytes:
        # Reads past the end of the code are zero-filled.
        chunk = self.code[offset:offset + size]
        return chunk + b"\x00" * (size - len(chunk))


def execute(code: bytes) -> bytes:
    """Run a constructor program and return its output."""
    frame = _Frame(bytes(code))
    pc = 0

    while pc < len(frame.code):
        op = frame.code[pc]

        if op == OP_STOP:
            return b""

        if op == OP_PUSH0:
            frame.push(0)
            pc += 1
            continue

        if OP_PUSH1 <= op <= OP_PUSH32:
            width = op - OP_PUSH1 + 1
            frame.push(int.from_bytes(frame.code_slice(pc + 1, width), "big"))
            pc += 1 + width
            continue

        if op == OP_CODECOPY:
            dest, offset, size = frame.pop(), frame.pop(), frame.pop()
            frame.expand(dest, size)
            if size:
                frame.memory[dest:dest + size] = frame.code_slice(offset, size)
            pc += 1
            continue

        if op == OP_RETURN:
            offset, size = frame.pop(), frame.pop()
            frame.expand(offset, size)
            return bytes(frame.memory[offset:offset + size])

        raise ExecutionError(f"Invalid opcode 0x{op:02x} at pc {pc}")

    return b""
