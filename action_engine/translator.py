"""Translate abstract actions into native NEAR actions."""

from typing import Callable, Dict

from execution_adapter.near import models as native
from near_core.codec import decode_base64, encode_args
from near_core.units import (
    gas_display_to_base,
    ledger_amount,
    ledger_gas,
    parse_base_units,
    to_base_units,
)
from wallet_core.keys import parse_public_key

from .models import (
    FULL_ACCESS,
    AbstractAction,
    AddKey,
    CreateAccount,
    DeleteAccount,
    DeleteKey,
    DeployContract,
    FunctionCall,
    FunctionCallPermission,
    Stake,
    Transfer,
)


class TranslationError(RuntimeError):
    """Raised for an action variant the translator has no branch for."""


def translate(action: AbstractAction) -> native.NativeAction:
    handler = _HANDLERS.get(type(action))
    if handler is None:
        raise TranslationError(f"Unsupported action variant: {type(action).__name__}")
    return handler(action)


def _create_account(action: CreateAccount) -> native.CreateAccount:
    return native.CreateAccount()


def _deploy_contract(action: DeployContract) -> native.DeployContract:
    return native.DeployContract(code=decode_base64(action.wasm_base64))


def _function_call(action: FunctionCall) -> native.FunctionCall:
    return native.FunctionCall(
        method_name=action.method_name,
        args=encode_args(action.args),
        gas=ledger_gas(gas_display_to_base(action.gas), action.gas),
        deposit=_near(action.deposit),
    )


def _transfer(action: Transfer) -> native.Transfer:
    return native.Transfer(deposit=_near(action.deposit))


def _stake(action: Stake) -> native.Stake:
    return native.Stake(
        stake=ledger_amount(parse_base_units(action.stake), action.stake),
        public_key=parse_public_key(action.public_key),
    )


def _add_key(action: AddKey) -> native.AddKey:
    permission = action.permission
    if permission == FULL_ACCESS:
        access_key = native.AccessKey(permission=native.FullAccessPermission())
    elif isinstance(permission, FunctionCallPermission):
        allowance = _near(permission.allowance) if permission.allowance else None
        access_key = native.AccessKey(
            permission=native.FunctionCallPermission(
                receiver_id=permission.receiver_id,
                method_names=tuple(permission.method_names),
                allowance=allowance,
            ),
        )
    else:
        raise TranslationError(f"Unsupported access key permission: {permission!r}")
    return native.AddKey(public_key=parse_public_key(action.public_key), access_key=access_key)


def _delete_key(action: DeleteKey) -> native.DeleteKey:
    return native.DeleteKey(public_key=parse_public_key(action.public_key))


def _delete_account(action: DeleteAccount) -> native.DeleteAccount:
    return native.DeleteAccount(beneficiary_id=action.beneficiary_id)


def _near(display: str) -> int:
    return ledger_amount(to_base_units(display), display)


_HANDLERS: Dict[type, Callable[..., native.NativeAction]] = {
    CreateAccount: _create_account,
    DeployContract: _deploy_contract,
    FunctionCall: _function_call,
    Transfer: _transfer,
    Stake: _stake,
    AddKey: _add_key,
    DeleteKey: _delete_key,
    DeleteAccount: _delete_account,
}
