"""Ledger construction primitive: the outbound interface and an in-memory stand-in."""
from __future__ import annotations

import hashlib
import logging
from typing import Protocol

from verbatim_core.protocol import (
    ADDRESS_LEN,
    MAX_PAYLOAD_LEN,
    RESERVED_CODE_PREFIX,
    ZERO_ADDRESS,
)

from .machine import ExecutionError, execute

logger = logging.getLogger(__name__)

DEFAULT_CREATOR = b"\x00" * (ADDRESS_LEN - 1) + b"\x01"


class ConstructionPrimitive(Protocol):
    def create(self, value: int, program: bytes) -> bytes:
        """Run ``program`` as a constructor and store its output as new code.

        Returns the new address, or ZERO_ADDRESS when construction fails.
        """
        ...


class SimulatedLedger:
    """Single-creator ledger that runs constructors with the local interpreter.

    Failed constructions leave no trace: no nonce bump, no balance change, no code.
    """

    def __init__(
        self,
        balance: int = 0,
        max_code_size: int = MAX_PAYLOAD_LEN,
        creator: bytes = DEFAULT_CREATOR,
    ):
        self.creator = bytes(creator)
        self.max_code_size = max_code_size
        self.nonce = 0
        self.balances: dict[bytes, int] = {self.creator: int(balance)}
        self.code: dict[bytes, bytes] = {}

    def _next_address(self) -> bytes:
        h = hashlib.sha256(self.creator + self.nonce.to_bytes(8, "big")).digest()
        return h[:ADDRESS_LEN]

    def create(self, value: int, program: bytes) -> bytes:
        if value < 0 or value > self.balances[self.creator]:
            logger.debug("Rejecting construction: value %d exceeds balance", value)
            return ZERO_ADDRESS

        try:
            output = execute(program)
        except ExecutionError as e:
            logger.debug("Rejecting construction: %s", e)
            return ZERO_ADDRESS

        if len(output) > self.max_code_size:
            logger.debug("Rejecting construction: code size %d > %d", len(output), self.max_code_size)
            return ZERO_ADDRESS
        if output[:1] == bytes([RESERVED_CODE_PREFIX]):
            logger.debug("Rejecting construction: code starts with reserved byte 0x%02x", RESERVED_CODE_PREFIX)
            return ZERO_ADDRESS

        address = self._next_address()
        self.nonce += 1
        self.balances[self.creator] -= value
        self.balances[address] = self.balances.get(address, 0) + value
        self.code[address] = output
        return address

    def code_at(self, address: bytes) -> bytes:
        return self.code.get(bytes(address), b"")

    def balance_of(self, address: bytes) -> int:
        return self.balances.get(bytes(address), 0)
