"""Native NEAR action and transaction models in wire units (yocto, gas)."""

from dataclasses import dataclass
from typing import Optional, Tuple, Union

from wallet_core.models import PublicKey, Signature


@dataclass(frozen=True)
class CreateAccount:
    pass


@dataclass(frozen=True)
class DeployContract:
    code: bytes


@dataclass(frozen=True)
class FunctionCall:
    method_name: str
    args: bytes
    gas: int
    deposit: int


@dataclass(frozen=True)
class Transfer:
    deposit: int


@dataclass(frozen=True)
class Stake:
    stake: int
    public_key: PublicKey


@dataclass(frozen=True)
class FullAccessPermission:
    pass


@dataclass(frozen=True)
class FunctionCallPermission:
    receiver_id: str
    method_names: Tuple[str, ...] = ()
    allowance: Optional[int] = None


@dataclass(frozen=True)
class AccessKey:
    permission: Union[FullAccessPermission, FunctionCallPermission]
    nonce: int = 0


@dataclass(frozen=True)
class AddKey:
    public_key: PublicKey
    access_key: AccessKey


@dataclass(frozen=True)
class DeleteKey:
    public_key: PublicKey


@dataclass(frozen=True)
class DeleteAccount:
    beneficiary_id: str


NativeAction = Union[
    CreateAccount,
    DeployContract,
    FunctionCall,
    Transfer,
    Stake,
    AddKey,
    DeleteKey,
    DeleteAccount,
]


def full_access_key() -> AccessKey:
    return AccessKey(permission=FullAccessPermission())


def function_call_access_key(
    receiver_id: str, method_names: Tuple[str, ...] = (), allowance: Optional[int] = None
) -> AccessKey:
    return AccessKey(
        permission=FunctionCallPermission(
            receiver_id=receiver_id,
            method_names=tuple(method_names),
            allowance=allowance,
        )
    )


@dataclass(frozen=True)
class Transaction:
    signer_id: str
    public_key: PublicKey
    nonce: int
    receiver_id: str
    block_hash: bytes
    actions: Tuple[NativeAction, ...]


@dataclass(frozen=True)
class SignedTransaction:
    transaction: Transaction
    signature: Signature


@dataclass(frozen=True)
class AccountBalance:
    total: int
    state_staked: int
    staked: int
    available: int
