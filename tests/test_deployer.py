import logging

import pytest

from verbatim_core import ConstructionFailed, PayloadTooLarge, encode
from verbatim_core.protocol import ADDRESS_LEN, MAX_PAYLOAD_LEN, ZERO_ADDRESS
from verbatim_deploy import Deployer, SimulatedLedger, deploy

VECTOR_PAYLOAD = bytes.fromhex("6212345660005260206000f3")


class RecordingLedger:
    def __init__(self, address=ZERO_ADDRESS):
        self.address = address
        self.calls = []

    def create(self, value, program):
        self.calls.append((value, program))
        return self.address


def test_end_to_end_stored_code_matches_payload():
    ledger = SimulatedLedger()
    address = deploy(ledger, VECTOR_PAYLOAD)
    assert len(address) == ADDRESS_LEN
    assert address != ZERO_ADDRESS
    assert ledger.code_at(address) == VECTOR_PAYLOAD


def test_empty_payload_deploys_empty_code():
    ledger = SimulatedLedger()
    address = Deployer(ledger).deploy(b"")
    assert address != ZERO_ADDRESS
    assert ledger.code_at(address) == b""


def test_largest_payload_deploys():
    payload = bytes(i & 0xFF for i in range(MAX_PAYLOAD_LEN))
    ledger = SimulatedLedger()
    address = Deployer(ledger).deploy(payload)
    assert ledger.code_at(address) == payload


def test_successive_deployments_get_distinct_addresses():
    ledger = SimulatedLedger()
    d = Deployer(ledger)
    a = d.deploy(b"\x01")
    b = d.deploy(b"\x01")
    assert a != b
    assert ledger.code_at(a) == ledger.code_at(b) == b"\x01"


def test_launcher_and_value_are_passed_through_once():
    ledger = RecordingLedger(address=b"\x11" * ADDRESS_LEN)
    address = Deployer(ledger).deploy(VECTOR_PAYLOAD, value=5)
    assert address == b"\x11" * ADDRESS_LEN
    assert ledger.calls == [(5, encode(VECTOR_PAYLOAD))]


def test_sentinel_surfaces_as_construction_failed(caplog):
    ledger = RecordingLedger()
    with caplog.at_level(logging.WARNING, logger="verbatim_deploy.deployer"):
        with pytest.raises(ConstructionFailed) as exc:
            Deployer(ledger).deploy(VECTOR_PAYLOAD, value=3)
    assert len(ledger.calls) == 1
    assert exc.value.value == 3
    assert exc.value.program_length == 24
    assert "Construction failed" in caplog.text


def test_deploy_launcher_accepts_prebuilt_launcher():
    ledger = SimulatedLedger()
    address = Deployer(ledger).deploy_launcher(encode(VECTOR_PAYLOAD))
    assert ledger.code_at(address) == VECTOR_PAYLOAD


def test_too_large_never_reaches_ledger():
    ledger = RecordingLedger()
    with pytest.raises(PayloadTooLarge):
        Deployer(ledger).deploy(b"\x00" * (MAX_PAYLOAD_LEN + 1))
    assert ledger.calls == []


def test_value_is_transferred_to_new_account():
    ledger = SimulatedLedger(balance=10)
    address = Deployer(ledger).deploy(VECTOR_PAYLOAD, value=4)
    assert ledger.balance_of(address) == 4
    assert ledger.balance_of(ledger.creator) == 6


def test_insufficient_balance_fails_without_state_change():
    ledger = SimulatedLedger(balance=1)
    with pytest.raises(ConstructionFailed):
        Deployer(ledger).deploy(VECTOR_PAYLOAD, value=2)
    assert ledger.nonce == 0
    assert ledger.code == {}
    assert ledger.balance_of(ledger.creator) == 1


def test_code_size_limit_fails():
    ledger = SimulatedLedger(max_code_size=8)
    with pytest.raises(ConstructionFailed):
        Deployer(ledger).deploy(VECTOR_PAYLOAD)
    assert ledger.code == {}


def test_reserved_prefix_fails():
    ledger = SimulatedLedger()
    with pytest.raises(ConstructionFailed):
        Deployer(ledger).deploy(b"\xef\x00")


def test_faulting_constructor_fails():
    ledger = SimulatedLedger()
    with pytest.raises(ConstructionFailed):
        Deployer(ledger).deploy_launcher(b"\xfe")
