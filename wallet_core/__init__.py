from .keys import KeyPair, implicit_account_id, parse_public_key, verify_signature
from .keystore import InMemoryKeyStore, KeyStore
from .models import DerivationPath, KeyType, PublicKey, Signature
from .seed import parse_seed_phrase
from .signer import InMemorySigner, Signer

__all__ = [
    "DerivationPath",
    "InMemoryKeyStore",
    "InMemorySigner",
    "KeyPair",
    "KeyStore",
    "KeyType",
    "PublicKey",
    "Signature",
    "Signer",
    "implicit_account_id",
    "parse_public_key",
    "parse_seed_phrase",
    "verify_signature",
]
