"""Error codes and typed failures."""
from __future__ import annotations

ERRORS = {
  "E_PAYLOAD_TOO_LARGE": "Payload exceeds the launcher length field",
  "E_CONSTRUCTION_FAILED": "Ledger construction returned the zero address",
  "E_LAUNCHER_MALFORMED": "Launcher header invalid",
}


class VerbatimError(Exception):
    """Base class for deployment failures. ``code`` is a key of ``ERRORS``."""

    code = ""

    def to_dict(self) -> dict:
        return {"code": self.code, "message": ERRORS.get(self.code, ""), "detail": str(self)}


class PayloadTooLarge(VerbatimError):
    """Raised locally, before anything is submitted to the ledger."""

    code = "E_PAYLOAD_TOO_LARGE"

    def __init__(self, length: int, limit: int):
        super().__init__(f"payload is {length} bytes, limit is {limit}")
        self.length = length
        self.limit = limit


class ConstructionFailed(VerbatimError):
    """The construction primitive handed back the sentinel address."""

    code = "E_CONSTRUCTION_FAILED"

    def __init__(self, value: int, program_length: int):
        super().__init__(f"construction of {program_length}-byte launcher (value={value}) failed")
        self.value = value
        self.program_length = program_length
