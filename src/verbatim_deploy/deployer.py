"""Deploy a payload so that the stored code equals it byte for byte."""
from __future__ import annotations

import logging

from verbatim_core.errors import ConstructionFailed
from verbatim_core.launcher import encode
from verbatim_core.protocol import ZERO_ADDRESS

from .ledger import ConstructionPrimitive

logger = logging.getLogger(__name__)


class Deployer:
    """Thin adapter over a ledger's construction primitive.

    One ledger call per deployment and no retries: a failed construction with
    identical inputs fails again.
    """

    def __init__(self, ledger: ConstructionPrimitive):
        self.ledger = ledger

    def deploy_launcher(self, launcher: bytes, value: int = 0) -> bytes:
        """Submit an already-encoded launcher. Returns the address the ledger assigned."""
        logger.debug("Submitting %d-byte launcher with value %d", len(launcher), value)
        address = self.ledger.create(value, launcher)
        if address == ZERO_ADDRESS:
            logger.warning("Construction failed for %d-byte launcher", len(launcher))
            raise ConstructionFailed(value, len(launcher))
        logger.info("Deployed %d-byte launcher at 0x%s", len(launcher), bytes(address).hex())
        return address

    def deploy(self, payload: bytes, value: int = 0) -> bytes:
        """Encode ``payload`` and deploy it. PayloadTooLarge is raised before the ledger is touched."""
        return self.deploy_launcher(encode(payload), value)


def deploy(ledger: ConstructionPrimitive, payload: bytes, value: int = 0) -> bytes:
    return Deployer(ledger).deploy(payload, value)
