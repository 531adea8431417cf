"""Domain models for the wallet core."""

from dataclasses import dataclass
from enum import Enum
from typing import Tuple

import base58


class KeyType(Enum):
    ED25519 = 0


KEY_TYPE_NAMES = {KeyType.ED25519: "ed25519"}


@dataclass(frozen=True)
class DerivationPath:
    """SLIP-10 hardened derivation path used for NEAR recovery phrases."""

    purpose: int = 44
    coin_type: int = 397
    account: int = 0

    def to_string(self) -> str:
        return f"m/{self.purpose}'/{self.coin_type}'/{self.account}'"

    def indices(self) -> Tuple[int, ...]:
        return (self.purpose, self.coin_type, self.account)


@dataclass(frozen=True)
class PublicKey:
    data: bytes
    key_type: KeyType = KeyType.ED25519

    def to_string(self) -> str:
        encoded = base58.b58encode(self.data).decode("ascii")
        return f"{KEY_TYPE_NAMES[self.key_type]}:{encoded}"

    def __str__(self) -> str:
        return self.to_string()


@dataclass(frozen=True)
class Signature:
    data: bytes
    key_type: KeyType = KeyType.ED25519
