"""Verbatim Deploy - Submit launchers to a ledger's construction primitive."""
import logging

from .deployer import Deployer, deploy
from .ledger import ConstructionPrimitive, SimulatedLedger

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = ["Deployer", "deploy", "ConstructionPrimitive", "SimulatedLedger"]
