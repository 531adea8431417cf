"""Recovery phrase to key pair derivation (BIP-39 seed, SLIP-10 Ed25519 path)."""

import hashlib
import hmac
import unicodedata
from typing import Optional, Sequence

from .keys import KeyPair
from .models import DerivationPath

_HARDENED_OFFSET = 0x80000000
_ED25519_CURVE_KEY = b"ed25519 seed"
_PBKDF2_ROUNDS = 2048


def normalize_seed_phrase(phrase: str) -> str:
    return " ".join(part.lower() for part in phrase.strip().split())


def mnemonic_to_seed(phrase: str, passphrase: str = "") -> bytes:
    mnemonic = unicodedata.normalize("NFKD", normalize_seed_phrase(phrase))
    salt = unicodedata.normalize("NFKD", "mnemonic" + passphrase)
    return hashlib.pbkdf2_hmac(
        "sha512",
        mnemonic.encode("utf-8"),
        salt.encode("utf-8"),
        _PBKDF2_ROUNDS,
        dklen=64,
    )


def derive_ed25519_key(seed: bytes, indices: Sequence[int] = DerivationPath().indices()) -> bytes:
    """Walk a fully hardened SLIP-10 path and return the 32-byte private seed."""

    digest = hmac.new(_ED25519_CURVE_KEY, seed, hashlib.sha512).digest()
    key, chain_code = digest[:32], digest[32:]
    for index in indices:
        data = b"\x00" + key + (index + _HARDENED_OFFSET).to_bytes(4, "big")
        digest = hmac.new(chain_code, data, hashlib.sha512).digest()
        key, chain_code = digest[:32], digest[32:]
    return key


def parse_seed_phrase(
    phrase: str,
    passphrase: str = "",
    path: Optional[DerivationPath] = None,
) -> KeyPair:
    if not phrase or not phrase.strip():
        raise ValueError("Seed phrase must be non-empty.")
    seed = mnemonic_to_seed(phrase, passphrase)
    indices = (path or DerivationPath()).indices()
    return KeyPair.from_seed(derive_ed25519_key(seed, indices))
