"""Key pair storage keyed by network and account."""

from typing import Dict, Protocol, Tuple

from .keys import KeyPair


class KeyStore(Protocol):
    def set_key(self, network_id: str, account_id: str, key_pair: KeyPair) -> None:
        ...

    def get_key(self, network_id: str, account_id: str) -> KeyPair:
        ...


class InMemoryKeyStore:
    def __init__(self) -> None:
        self._keys: Dict[Tuple[str, str], KeyPair] = {}

    def set_key(self, network_id: str, account_id: str, key_pair: KeyPair) -> None:
        self._keys[(network_id, account_id)] = key_pair

    def get_key(self, network_id: str, account_id: str) -> KeyPair:
        try:
            return self._keys[(network_id, account_id)]
        except KeyError:
            raise KeyError(f"No key for {account_id} on {network_id}") from None
