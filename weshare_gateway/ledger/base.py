"""
Base integration layer for ledger access.
All ledger integrations should inherit from LedgerIntegration.
"""
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional


class LedgerError(Exception):
    """Raised when the ledger integration is misconfigured."""


class LedgerIntegration(ABC):
    """Abstract base class for ledger integrations."""

    def __init__(self, config: Optional[Dict[str, Any]] = None):
        """Initialize integration with configuration."""
        self.config = config or {}
        self.name = self.__class__.__name__

    @abstractmethod
    async def identity_exists(self, identity: str) -> bool:
        """
        Check whether an identity is present in the local wallet.

        Args:
            identity: Wallet label of the identity

        Returns:
            True if the wallet holds credentials for the identity
        """
        pass

    @abstractmethod
    async def submit_transaction(self, name: str, *args: str) -> bytes:
        """
        Submit a transaction to be endorsed, ordered and committed.

        Args:
            name: Chaincode function name
            *args: Chaincode arguments

        Returns:
            Raw payload returned by the chaincode
        """
        pass

    @abstractmethod
    async def evaluate_transaction(self, name: str, *args: str) -> bytes:
        """
        Evaluate a transaction on a peer without committing it.

        Args:
            name: Chaincode function name
            *args: Chaincode arguments

        Returns:
            Raw payload returned by the chaincode
        """
        pass

    @abstractmethod
    async def health_check(self) -> Dict[str, Any]:
        """
        Report whether the integration is able to reach the ledger.

        Returns:
            Dict with a boolean "healthy" key and component details
        """
        pass
