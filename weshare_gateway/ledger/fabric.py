"""
Hyperledger Fabric integration built on fabric-sdk-py.
"""
import json
import logging
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional

from ..config import settings
from ..models import TransactionMode
from .base import LedgerError, LedgerIntegration

logger = logging.getLogger(__name__)


def _default_gateway_factory():
    from hfc.fabric_network.gateway import Gateway
    return Gateway()


def _default_wallet_factory(path: str):
    from hfc.fabric_network.wallet import FileSystenWallet
    return FileSystenWallet(path)


class FabricIntegration(LedgerIntegration):
    """
    Integration for a Fabric network reached through a gateway.

    Every transaction opens its own gateway connection and closes it
    before returning; nothing is shared between requests.
    """

    def __init__(
        self,
        config: Optional[Dict[str, Any]] = None,
        gateway_factory: Callable[[], Any] = _default_gateway_factory,
        wallet_factory: Callable[[str], Any] = _default_wallet_factory,
    ):
        super().__init__(config)
        cfg = self.config
        self.profile_path = cfg.get("connection_profile_path", settings.connection_profile_path)
        self.wallet_path = cfg.get("wallet_path", settings.wallet_path)
        self.identity = cfg.get("gateway_identity", settings.gateway_identity)
        self.required_identity = cfg.get("required_identity", settings.required_identity)
        self.org_name = cfg.get("org_name", settings.org_name)
        self.msp_id = cfg.get("msp_id", settings.msp_id)
        self.channel_name = cfg.get("channel_name", settings.channel_name)
        self.chaincode_name = cfg.get("chaincode_name", settings.chaincode_name)
        self.discovery = {
            "enabled": cfg.get("discovery_enabled", settings.discovery_enabled),
            "asLocalhost": cfg.get("discovery_as_localhost", settings.discovery_as_localhost),
        }
        self._gateway_factory = gateway_factory
        self._wallet_factory = wallet_factory

        self.profile: Optional[Dict[str, Any]] = None
        self.profile_error: Optional[str] = None
        self._load_profile()

    def _load_profile(self):
        """Read and parse the connection profile."""
        path = Path(self.profile_path).resolve()
        try:
            self.profile = json.loads(path.read_text(encoding="utf-8"))
            self.profile_path = str(path)
            logger.info(f"Loaded connection profile from {path}")
        except (OSError, ValueError) as e:
            self.profile = None
            self.profile_error = f"Cannot load connection profile {path}: {e}"
            logger.error(self.profile_error)

    def _wallet(self):
        return self._wallet_factory(self.wallet_path)

    async def identity_exists(self, identity: str) -> bool:
        """Check the file-system wallet for an identity."""
        return bool(self._wallet().exists(identity))

    async def submit_transaction(self, name: str, *args: str) -> bytes:
        return await self._invoke(TransactionMode.SUBMIT, name, list(args))

    async def evaluate_transaction(self, name: str, *args: str) -> bytes:
        return await self._invoke(TransactionMode.EVALUATE, name, list(args))

    def _endorsing_peers(self) -> List[str]:
        """Peer names from the connection profile, channel peers first."""
        channel = self.profile.get("channels", {}).get(self.channel_name, {})
        peers = list(channel.get("peers", {}))
        if not peers:
            peers = list(self.profile.get("peers", {}))
        if not peers:
            raise LedgerError(f"No peers defined in connection profile {self.profile_path}")
        return peers

    async def _invoke(self, mode: TransactionMode, name: str, args: list) -> bytes:
        """Connect, run one transaction and disconnect."""
        if self.profile is None:
            raise LedgerError(self.profile_error or "Connection profile not loaded")

        wallet = self._wallet()
        if not wallet.exists(self.identity):
            raise LedgerError(f'An identity for "{self.identity}" does not exist in the wallet')
        user = wallet.create_user(self.identity, self.org_name, self.msp_id)
        peers = self._endorsing_peers()

        gateway = self._gateway_factory()
        try:
            await gateway.connect(self.profile_path, {
                "wallet": wallet,
                "identity": {"org_name": self.org_name, "name": self.identity},
                "discovery": self.discovery,
            })
            # Initializes the channel on the gateway's client
            await gateway.get_network(self.channel_name, user)
            client = gateway.get_client()
            if mode == TransactionMode.SUBMIT:
                response = await client.chaincode_invoke(
                    requestor=user,
                    channel_name=self.channel_name,
                    peers=peers,
                    fcn=name,
                    args=args,
                    cc_name=self.chaincode_name,
                    wait_for_event=True,
                )
            else:
                response = await client.chaincode_query(
                    requestor=user,
                    channel_name=self.channel_name,
                    peers=peers,
                    fcn=name,
                    args=args,
                    cc_name=self.chaincode_name,
                )
            logger.debug(f"{mode.value} {name}{args} on {self.channel_name}/{self.chaincode_name}")
        finally:
            gateway.disconnect()

        if response is None:
            return b""
        if isinstance(response, str):
            return response.encode("utf-8")
        return bytes(response)

    async def health_check(self) -> Dict[str, Any]:
        """Report profile and wallet status without contacting the network."""
        wallet_ok = Path(self.wallet_path).is_dir()
        enrolled = {self.identity: False, self.required_identity: False}
        if wallet_ok:
            for identity in enrolled:
                try:
                    enrolled[identity] = await self.identity_exists(identity)
                except Exception as e:
                    logger.error(f"Wallet lookup for {identity} failed: {e}")
        return {
            "healthy": self.profile is not None and all(enrolled.values()),
            "connection_profile": "loaded" if self.profile is not None else "missing",
            "wallet": "found" if wallet_ok else "missing",
            "gateway_identity": "enrolled" if enrolled[self.identity] else "missing",
            "required_identity": "enrolled" if enrolled[self.required_identity] else "missing",
        }
