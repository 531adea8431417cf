"""Borsh serialization of NEAR transactions.

Integers are little-endian, strings and vectors carry a u32 length prefix,
options a one-byte tag and enums a one-byte variant index.
"""

from dataclasses import dataclass, field
from typing import Dict, Iterable, Optional

from wallet_core.models import PublicKey, Signature

from .models import (
    AccessKey,
    AddKey,
    CreateAccount,
    DeleteAccount,
    DeleteKey,
    DeployContract,
    FullAccessPermission,
    FunctionCall,
    FunctionCallPermission,
    NativeAction,
    SignedTransaction,
    Stake,
    Transaction,
    Transfer,
)


class SerializationError(ValueError):
    """Raised when a value does not fit its Borsh wire type."""


ACTION_INDEX: Dict[type, int] = {
    CreateAccount: 0,
    DeployContract: 1,
    FunctionCall: 2,
    Transfer: 3,
    Stake: 4,
    AddKey: 5,
    DeleteKey: 6,
    DeleteAccount: 7,
}


@dataclass
class Writer:
    buf: bytearray = field(default_factory=bytearray)

    def write_uint(self, value: int, size: int) -> None:
        if value < 0 or value >= 1 << (8 * size):
            raise SerializationError(f"{value} does not fit in u{8 * size}.")
        self.buf.extend(int(value).to_bytes(size, "little"))

    def write_u8(self, value: int) -> None:
        self.write_uint(value, 1)

    def write_u32(self, value: int) -> None:
        self.write_uint(value, 4)

    def write_u64(self, value: int) -> None:
        self.write_uint(value, 8)

    def write_u128(self, value: int) -> None:
        self.write_uint(value, 16)

    def write_fixed(self, data: bytes, size: int) -> None:
        if len(data) != size:
            raise SerializationError(f"Expected {size} bytes, got {len(data)}.")
        self.buf.extend(data)

    def write_bytes(self, data: bytes) -> None:
        self.write_u32(len(data))
        self.buf.extend(data)

    def write_string(self, value: str) -> None:
        self.write_bytes(value.encode("utf-8"))

    def write_optional_u128(self, value: Optional[int]) -> None:
        if value is None:
            self.write_u8(0)
        else:
            self.write_u8(1)
            self.write_u128(value)

    def write_strings(self, values: Iterable[str]) -> None:
        items = list(values)
        self.write_u32(len(items))
        for item in items:
            self.write_string(item)

    def to_bytes(self) -> bytes:
        return bytes(self.buf)


def serialize_transaction(transaction: Transaction) -> bytes:
    writer = Writer()
    _write_transaction(writer, transaction)
    return writer.to_bytes()


def serialize_signed_transaction(signed: SignedTransaction) -> bytes:
    writer = Writer()
    _write_transaction(writer, signed.transaction)
    _write_signature(writer, signed.signature)
    return writer.to_bytes()


def _write_transaction(writer: Writer, transaction: Transaction) -> None:
    writer.write_string(transaction.signer_id)
    _write_public_key(writer, transaction.public_key)
    writer.write_u64(transaction.nonce)
    writer.write_string(transaction.receiver_id)
    writer.write_fixed(transaction.block_hash, 32)
    writer.write_u32(len(transaction.actions))
    for action in transaction.actions:
        _write_action(writer, action)


def _write_public_key(writer: Writer, public_key: PublicKey) -> None:
    writer.write_u8(public_key.key_type.value)
    writer.write_fixed(public_key.data, 32)


def _write_signature(writer: Writer, signature: Signature) -> None:
    writer.write_u8(signature.key_type.value)
    writer.write_fixed(signature.data, 64)


def _write_access_key(writer: Writer, access_key: AccessKey) -> None:
    writer.write_u64(access_key.nonce)
    permission = access_key.permission
    if isinstance(permission, FunctionCallPermission):
        writer.write_u8(0)
        writer.write_optional_u128(permission.allowance)
        writer.write_string(permission.receiver_id)
        writer.write_strings(permission.method_names)
    elif isinstance(permission, FullAccessPermission):
        writer.write_u8(1)
    else:
        raise SerializationError(f"Unsupported access key permission: {permission!r}")


def _write_action(writer: Writer, action: NativeAction) -> None:
    index = ACTION_INDEX.get(type(action))
    if index is None:
        raise SerializationError(f"Unsupported action: {type(action).__name__}")
    writer.write_u8(index)

    if isinstance(action, CreateAccount):
        return
    if isinstance(action, DeployContract):
        writer.write_bytes(action.code)
    elif isinstance(action, FunctionCall):
        writer.write_string(action.method_name)
        writer.write_bytes(action.args)
        writer.write_u64(action.gas)
        writer.write_u128(action.deposit)
    elif isinstance(action, Transfer):
        writer.write_u128(action.deposit)
    elif isinstance(action, Stake):
        writer.write_u128(action.stake)
        _write_public_key(writer, action.public_key)
    elif isinstance(action, AddKey):
        _write_public_key(writer, action.public_key)
        _write_access_key(writer, action.access_key)
    elif isinstance(action, DeleteKey):
        _write_public_key(writer, action.public_key)
    elif isinstance(action, DeleteAccount):
        writer.write_string(action.beneficiary_id)
