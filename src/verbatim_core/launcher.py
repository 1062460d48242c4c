"""Verbatim launcher synthesis.

A launcher is a constructor program whose only job is to return the bytes that
follow it. Executed by the ledger's construction primitive it leaves the payload,
unchanged, as the stored code of the new address:

    PUSH2 n       copy length
    PUSH1 12      source offset (first payload byte)
    PUSH0         memory destination
    CODECOPY
    PUSH2 n       return length
    PUSH0         return offset
    RETURN
    <payload>

The length field is fixed-width, so the header is 12 bytes for every payload
and the source offset never moves.
"""
from __future__ import annotations

import struct
from dataclasses import dataclass

from .errors import PayloadTooLarge
from .protocol import (
    HEADER_LEN,
    LENGTH_FMT,
    LENGTH_SLOTS,
    MAX_PAYLOAD_LEN,
    OP_CODECOPY,
    OP_PUSH0,
    OP_PUSH1,
    OP_PUSH2,
    OP_RETURN,
)

_LENGTH_WIDTH = struct.calcsize(LENGTH_FMT)

_TEMPLATE = bytes([
    OP_PUSH2, 0x00, 0x00,
    OP_PUSH1, HEADER_LEN,
    OP_PUSH0,
    OP_CODECOPY,
    OP_PUSH2, 0x00, 0x00,
    OP_PUSH0,
    OP_RETURN,
])
if len(_TEMPLATE) != HEADER_LEN:
    raise RuntimeError(f"Launcher template is {len(_TEMPLATE)} bytes, HEADER_LEN is {HEADER_LEN}")

# Header offsets that never depend on the payload
FIXED_OFFSETS = tuple(
    i for i in range(HEADER_LEN)
    if not any(slot <= i < slot + _LENGTH_WIDTH for slot in LENGTH_SLOTS)
)


@dataclass(frozen=True)
class LauncherHeader:
    payload_length: int
    payload_offset: int = HEADER_LEN


def encode_length(n: int) -> bytes:
    """Pack a payload length into the fixed-width big-endian field."""
    if n > MAX_PAYLOAD_LEN:
        raise PayloadTooLarge(n, MAX_PAYLOAD_LEN)
    return struct.pack(LENGTH_FMT, n)


def encode(payload: bytes) -> bytes:
    """Return the launcher for ``payload``: 12-byte header followed by the payload verbatim.

    Raises PayloadTooLarge when the payload does not fit the 2-byte length field,
    and TypeError when it is not a bytes-like object.
    """
    payload = memoryview(payload).tobytes()
    len_bytes = encode_length(len(payload))

    header = bytearray(_TEMPLATE)
    for slot in LENGTH_SLOTS:
        header[slot:slot + _LENGTH_WIDTH] = len_bytes
    return bytes(header) + payload


def inspect_launcher(program: bytes) -> LauncherHeader:
    """Check that ``program`` is a well-formed launcher and describe its header."""
    program = memoryview(program).tobytes()
    if len(program) < HEADER_LEN:
        raise ValueError(f"Launcher is {len(program)} bytes, shorter than the {HEADER_LEN}-byte header")

    for i in FIXED_OFFSETS:
        if program[i] != _TEMPLATE[i]:
            raise ValueError(
                f"Unexpected byte 0x{program[i]:02x} at offset {i} (expected 0x{_TEMPLATE[i]:02x})"
            )

    lengths = [struct.unpack_from(LENGTH_FMT, program, slot)[0] for slot in LENGTH_SLOTS]
    if len(set(lengths)) != 1:
        raise ValueError(f"Length fields disagree: copy={lengths[0]} return={lengths[1]}")

    n = lengths[0]
    if len(program) != HEADER_LEN + n:
        raise ValueError(f"Launcher declares {n} payload bytes but carries {len(program) - HEADER_LEN}")
    return LauncherHeader(payload_length=n)
