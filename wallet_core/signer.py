"""Signer backed by a keystore; signs SHA-256 digests of serialized payloads."""

import hashlib
from typing import Protocol

from .keystore import KeyStore
from .models import PublicKey, Signature


class Signer(Protocol):
    def get_public_key(self, account_id: str, network_id: str) -> PublicKey:
        ...

    def sign_message(self, message: bytes, account_id: str, network_id: str) -> Signature:
        ...


class InMemorySigner:
    def __init__(self, keystore: KeyStore) -> None:
        self._keystore = keystore

    def get_public_key(self, account_id: str, network_id: str) -> PublicKey:
        return self._keystore.get_key(network_id, account_id).public_key

    def sign_message(self, message: bytes, account_id: str, network_id: str) -> Signature:
        key_pair = self._keystore.get_key(network_id, account_id)
        return key_pair.sign(hashlib.sha256(message).digest())
