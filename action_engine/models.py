"""Abstract ledger actions as supplied by callers, in display units."""

from dataclasses import dataclass, field
from typing import Any, Literal, Mapping, Optional, Tuple, Union

FULL_ACCESS = "FullAccess"
DEFAULT_GAS_TERAS = "30"
DEFAULT_DEPOSIT_NEAR = "0"


@dataclass(frozen=True)
class FunctionCallPermission:
    receiver_id: str
    method_names: Tuple[str, ...] = ()
    allowance: Optional[str] = None


Permission = Union[Literal["FullAccess"], FunctionCallPermission]


@dataclass(frozen=True)
class CreateAccount:
    pass


@dataclass(frozen=True)
class DeployContract:
    wasm_base64: str


@dataclass(frozen=True)
class FunctionCall:
    contract_id: str
    method_name: str
    args: Mapping[str, Any] = field(default_factory=dict)
    gas: str = DEFAULT_GAS_TERAS
    deposit: str = DEFAULT_DEPOSIT_NEAR


@dataclass(frozen=True)
class Transfer:
    deposit: str


@dataclass(frozen=True)
class Stake:
    """Stake amount is in yoctoNEAR, unlike every other amount here."""

    stake: str
    public_key: str


@dataclass(frozen=True)
class AddKey:
    public_key: str
    permission: Permission = FULL_ACCESS


@dataclass(frozen=True)
class DeleteKey:
    public_key: str


@dataclass(frozen=True)
class DeleteAccount:
    beneficiary_id: str


AbstractAction = Union[
    CreateAccount,
    DeployContract,
    FunctionCall,
    Transfer,
    Stake,
    AddKey,
    DeleteKey,
    DeleteAccount,
]
