"""Ed25519 key parsing, signing and signature verification."""

from dataclasses import dataclass
from typing import Tuple

import base58
from cryptography.exceptions import InvalidSignature
from cryptography.hazmat.primitives.asymmetric.ed25519 import (
    Ed25519PrivateKey,
    Ed25519PublicKey,
)
from cryptography.hazmat.primitives.serialization import Encoding, PublicFormat

from near_core.errors import InvalidPublicKey

from .models import KEY_TYPE_NAMES, KeyType, PublicKey, Signature

ED25519_PUBLIC_KEY_SIZE = 32
ED25519_SIGNATURE_SIZE = 64


def parse_public_key(text: str) -> PublicKey:
    """Parse ``ed25519:<base58>`` (or bare base58) into a :class:`PublicKey`."""

    key_type, data = _split_key_string(text)
    if len(data) != ED25519_PUBLIC_KEY_SIZE:
        raise InvalidPublicKey(
            f"Invalid public key size ({len(data)}), must be {ED25519_PUBLIC_KEY_SIZE}"
        )
    return PublicKey(data=data, key_type=key_type)


def verify_signature(message: bytes, signature: bytes, public_key: PublicKey) -> bool:
    if len(signature) != ED25519_SIGNATURE_SIZE:
        raise ValueError(
            f"Invalid signature size ({len(signature)}), must be {ED25519_SIGNATURE_SIZE}"
        )
    verifier = Ed25519PublicKey.from_public_bytes(public_key.data)
    try:
        verifier.verify(signature, message)
    except InvalidSignature:
        return False
    return True


def implicit_account_id(public_key: PublicKey) -> str:
    return public_key.data.hex()


@dataclass(frozen=True)
class KeyPair:
    """Ed25519 key pair; ``secret_key`` is the 32-byte seed."""

    secret_key: bytes
    public_key: PublicKey

    @staticmethod
    def from_seed(seed: bytes) -> "KeyPair":
        if len(seed) != 32:
            raise ValueError("Ed25519 seed must be 32 bytes.")
        private_key = Ed25519PrivateKey.from_private_bytes(seed)
        public_bytes = private_key.public_key().public_bytes(Encoding.Raw, PublicFormat.Raw)
        return KeyPair(secret_key=seed, public_key=PublicKey(data=public_bytes))

    @staticmethod
    def from_string(text: str) -> "KeyPair":
        """Load the ``ed25519:<base58 64 bytes>`` form used by NEAR key files."""

        _, data = _split_key_string(text)
        if len(data) not in (32, 64):
            raise ValueError("Secret key must decode to 32 or 64 bytes.")
        pair = KeyPair.from_seed(data[:32])
        if len(data) == 64 and data[32:] != pair.public_key.data:
            raise ValueError("Secret key does not match its embedded public key.")
        return pair

    def sign(self, message: bytes) -> Signature:
        private_key = Ed25519PrivateKey.from_private_bytes(self.secret_key)
        return Signature(data=private_key.sign(message))

    def to_string(self) -> str:
        encoded = base58.b58encode(self.secret_key + self.public_key.data).decode("ascii")
        return f"{KEY_TYPE_NAMES[KeyType.ED25519]}:{encoded}"


def _split_key_string(text: str) -> Tuple[KeyType, bytes]:
    if not isinstance(text, str) or not text.strip():
        raise InvalidPublicKey("Key string must be non-empty.")
    parts = text.strip().split(":")
    if len(parts) == 1:
        key_type, encoded = KeyType.ED25519, parts[0]
    elif len(parts) == 2:
        key_type = _key_type_from_name(parts[0])
        encoded = parts[1]
    else:
        raise InvalidPublicKey("Invalid encoded key format, must be <curve>:<encoded key>")
    try:
        data = base58.b58decode(encoded)
    except ValueError as exc:
        raise InvalidPublicKey(f"Invalid base58 key encoding: {exc}") from exc
    return key_type, data


def _key_type_from_name(name: str) -> KeyType:
    for key_type, key_name in KEY_TYPE_NAMES.items():
        if key_name == name.lower():
            return key_type
    raise InvalidPublicKey(f"Unknown key type {name}")
