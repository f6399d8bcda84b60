"""
Integration layer for ledger access.
"""
from .base import LedgerError, LedgerIntegration
from .fabric import FabricIntegration

__all__ = ["LedgerError", "LedgerIntegration", "FabricIntegration"]
