"""Environment configuration and logging setup for the tool server."""

import logging
import os
import sys
from dataclasses import dataclass
from typing import Mapping, Optional

from dotenv import find_dotenv, load_dotenv

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

DEFAULT_NODE_URLS = {
    "mainnet": "https://rpc.mainnet.near.org",
    "testnet": "https://rpc.testnet.near.org",
}


class ConfigError(ValueError):
    """Raised when required configuration is missing or malformed."""


@dataclass(frozen=True)
class ServerConfig:
    network_id: str
    node_url: str
    mnemonic: Optional[str] = None
    secret_key: Optional[str] = None
    account_id: Optional[str] = None
    rpc_timeout: Optional[float] = None
    log_level: str = "INFO"

    @staticmethod
    def from_env(
        env: Optional[Mapping[str, str]] = None, dotenv_path: Optional[str] = None
    ) -> "ServerConfig":
        """Read configuration; a ``.env`` file only fills variables not already set."""

        if env is None:
            load_dotenv(dotenv_path or find_dotenv(usecwd=True))
            env = os.environ

        mnemonic = _clean(env.get("MNEMONIC"))
        secret_key = _clean(env.get("NEAR_SECRET_KEY"))
        if not mnemonic and not secret_key:
            raise ConfigError("MNEMONIC environment variable is not set.")

        network_id = _clean(env.get("NEAR_NETWORK_ID"))
        if not network_id:
            raise ConfigError(
                "NEAR_NETWORK_ID environment variable is not set "
                "(e.g., 'testnet' or 'mainnet')."
            )

        node_url = _clean(env.get("NEAR_NODE_URL")) or default_node_url(network_id)
        return ServerConfig(
            network_id=network_id,
            node_url=node_url,
            mnemonic=mnemonic,
            secret_key=secret_key,
            account_id=_clean(env.get("NEAR_ACCOUNT_ID")),
            rpc_timeout=_parse_timeout(env.get("NEAR_RPC_TIMEOUT")),
            log_level=(_clean(env.get("LOG_LEVEL")) or "INFO").upper(),
        )


def default_node_url(network_id: str) -> str:
    if network_id == "mainnet":
        return DEFAULT_NODE_URLS["mainnet"]
    return DEFAULT_NODE_URLS["testnet"]


def configure_logging(level: str = "INFO") -> None:
    """Send log records to stderr; stdout carries tool output."""

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    root = logging.getLogger()
    for existing in list(root.handlers):
        root.removeHandler(existing)
    root.addHandler(handler)
    root.setLevel(level)


def _clean(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    return value or None


def _parse_timeout(value: Optional[str]) -> Optional[float]:
    text = _clean(value)
    if text is None:
        return None
    try:
        timeout = float(text)
    except ValueError as exc:
        raise ConfigError(f"NEAR_RPC_TIMEOUT must be a number of seconds, got {value!r}.") from exc
    if timeout <= 0:
        raise ConfigError("NEAR_RPC_TIMEOUT must be positive.")
    return timeout
