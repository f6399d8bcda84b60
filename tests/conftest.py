"""
Pytest configuration and shared fixtures for WeShare gateway tests.
"""
import json
from typing import AsyncGenerator, Dict, List, Optional, Tuple

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport

from weshare_gateway.ledger.base import LedgerIntegration
from weshare_gateway.transactions import TransactionService


class FakeLedger(LedgerIntegration):
    """In-memory ledger that records every call it receives."""

    def __init__(self, identities=("user1", "admin"), responses: Optional[Dict[str, bytes]] = None,
                 error: Optional[Exception] = None):
        super().__init__()
        self.identities = set(identities)
        self.responses = responses or {}
        self.error = error
        self.identity_checks: List[str] = []
        self.calls: List[Tuple[str, str, tuple]] = []

    async def identity_exists(self, identity: str) -> bool:
        self.identity_checks.append(identity)
        return identity in self.identities

    async def _call(self, mode: str, name: str, args: tuple) -> bytes:
        self.calls.append((mode, name, args))
        if self.error:
            raise self.error
        return self.responses.get(name, b"")

    async def submit_transaction(self, name: str, *args: str) -> bytes:
        return await self._call("submit", name, args)

    async def evaluate_transaction(self, name: str, *args: str) -> bytes:
        return await self._call("evaluate", name, args)

    async def health_check(self):
        return {"healthy": True, "connection_profile": "loaded"}


@pytest.fixture
def fake_ledger():
    """A ledger holding user1 that returns WeShare-shaped payloads."""
    return FakeLedger(responses={
        "query": json.dumps({"UserId": "bob", "Amount": 110}).encode(),
        "completeShare": b'{"shareAmount":100,"listenAmount":10}',
    })


@pytest.fixture
def service(fake_ledger):
    return TransactionService(fake_ledger, required_identity="user1")


@pytest_asyncio.fixture
async def test_client(monkeypatch, fake_ledger, service) -> AsyncGenerator[AsyncClient, None]:
    """Async HTTP client with the fake ledger wired into the app."""
    from weshare_gateway import main as main_module

    monkeypatch.setattr(main_module, "ledger", fake_ledger)
    monkeypatch.setattr(main_module, "transaction_service", service)
    async with AsyncClient(
        transport=ASGITransport(app=main_module.app),
        base_url="http://test"
    ) as client:
        yield client
