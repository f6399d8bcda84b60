"""
Configuration management for the WeShare gateway.
Supports environment variables and a .env file.
"""
import os
from typing import Optional
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings with environment variable support."""

    # Server settings
    host: str = "0.0.0.0"
    port: int = 8083
    reload: bool = False

    # Fabric network
    connection_profile_path: str = os.getenv(
        "CONNECTION_PROFILE_PATH", "weshare/connection-org1.json"
    )
    channel_name: str = os.getenv("CHANNEL_NAME", "mychannel")
    chaincode_name: str = os.getenv("CHAINCODE_NAME", "mycc")
    discovery_enabled: bool = True
    discovery_as_localhost: bool = False

    # Wallet and identities
    wallet_path: str = os.getenv("WALLET_PATH", "wallet")
    required_identity: str = os.getenv("REQUIRED_IDENTITY", "user1")  # checked before connecting
    gateway_identity: str = os.getenv("GATEWAY_IDENTITY", "admin")  # identity the gateway signs as
    org_name: str = os.getenv("ORG_NAME", "org1.example.com")
    msp_id: str = os.getenv("MSP_ID", "Org1MSP")

    # Logging
    log_level: str = "INFO"
    log_file: Optional[str] = "weshare_gateway.log"

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"


settings = Settings()
