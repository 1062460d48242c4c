"""Verbatim Core - Launcher synthesis and protocol constants."""
from .errors import ConstructionFailed, PayloadTooLarge, VerbatimError
from .launcher import LauncherHeader, encode, inspect_launcher

__all__ = [
    "encode",
    "inspect_launcher",
    "LauncherHeader",
    "VerbatimError",
    "PayloadTooLarge",
    "ConstructionFailed",
]
