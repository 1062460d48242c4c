"""Verbatim launcher protocol constants.

Single source of truth for opcodes, the launcher header layout and size bounds.
Keep this file stable. Encoder, inspector and simulated ledger must remain synchronized.
"""

# Opcodes used by the launcher template
OP_STOP     = 0x00
OP_CODECOPY = 0x39
OP_PUSH0    = 0x5F
OP_PUSH1    = 0x60
OP_PUSH2    = 0x61
OP_PUSH32   = 0x7F
OP_RETURN   = 0xF3

# Header: [PUSH2 len(2) | PUSH1 12 | PUSH0 | CODECOPY | PUSH2 len(2) | PUSH0 | RETURN] = 12 bytes
HEADER_LEN = 12
LENGTH_FMT = ">H"
LENGTH_SLOTS = (1, 8)  # offsets of the two big-endian length fields

# Largest payload the 2-byte length field can describe
MAX_PAYLOAD_LEN = 0xFFFF

# Ledger addresses
ADDRESS_LEN = 20
ZERO_ADDRESS = b"\x00" * ADDRESS_LEN  # construction failure sentinel

# Code beginning with this byte is refused by the ledger
RESERVED_CODE_PREFIX = 0xEF

# Execution bounds for the simulated ledger
WORD_BITS = 256
MAX_STACK_DEPTH = 1024
MAX_MEMORY_BYTES = 1024 * 1024  # 1 MiB
