"""Owned NEAR connection: key material, RPC provider and signing account."""

import logging
from typing import Optional

from execution_adapter.near.account import NearAccount
from execution_adapter.near.rpc import JsonRpcProvider
from wallet_core.keys import KeyPair, implicit_account_id
from wallet_core.keystore import InMemoryKeyStore
from wallet_core.seed import parse_seed_phrase
from wallet_core.signer import InMemorySigner

from .config import ConfigError, ServerConfig

logger = logging.getLogger(__name__)


def load_key_pair(config: ServerConfig) -> KeyPair:
    if config.secret_key:
        try:
            return KeyPair.from_string(config.secret_key)
        except ValueError as exc:
            raise ConfigError(f"NEAR_SECRET_KEY is not a valid ed25519 secret key: {exc}") from exc
    if not config.mnemonic:
        raise ConfigError("MNEMONIC environment variable is not set.")
    try:
        return parse_seed_phrase(config.mnemonic)
    except ValueError as exc:
        raise ConfigError(f"MNEMONIC could not be used: {exc}") from exc


class NearConnection:
    """Built once, then shared read-only by every tool call.

    ``ensure_ready`` is idempotent. Two racing first calls may both build a
    handle; they are equivalent and the last one is kept.
    """

    def __init__(self, config: ServerConfig, provider: Optional[JsonRpcProvider] = None) -> None:
        self.config = config
        self._provider = provider
        self._account: Optional[NearAccount] = None

    @property
    def network_id(self) -> str:
        return self.config.network_id

    def ensure_ready(self) -> NearAccount:
        if self._account is not None:
            return self._account

        key_pair = load_key_pair(self.config)
        account_id = self.config.account_id or implicit_account_id(key_pair.public_key)
        keystore = InMemoryKeyStore()
        keystore.set_key(self.config.network_id, account_id, key_pair)
        provider = self._provider or JsonRpcProvider(
            self.config.node_url, timeout=self.config.rpc_timeout
        )

        self._account = NearAccount(
            provider=provider,
            signer=InMemorySigner(keystore),
            account_id=account_id,
            network_id=self.config.network_id,
        )
        logger.info("Connected to NEAR %s as %s", self.config.network_id, account_id)
        return self._account
