"""The NEAR tools: each call returns one text block, success or error, and never raises.

Every tool suspends at most once, on the thread that talks to the node.
"""

import asyncio
import json
import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Mapping, Protocol, TypeVar

from action_engine.assembler import TransactionAssembler
from execution_adapter.near.account import NearAccount
from execution_adapter.near.classifier import OperationContext, classify_exception
from execution_adapter.near.models import AccountBalance
from execution_adapter.near.outcome import Failure, Success, submit_and_normalize
from near_core.codec import (
    base64_byte_length,
    decode_base64,
    decode_return_value,
    decode_text_or_marker,
    encode_args,
    format_return_value,
)
from near_core.units import (
    gas_display_to_base,
    ledger_amount,
    ledger_gas,
    to_base_units,
    to_display_units,
)
from wallet_core.keys import parse_public_key, verify_signature

from .schemas import (
    AccountRequest,
    AddFunctionCallKeyRequest,
    BatchActionsRequest,
    CallFunctionRequest,
    CreateSubAccountRequest,
    DeleteAccountRequest,
    DeployContractRequest,
    EmptyRequest,
    PublicKeyRequest,
    SendTokensRequest,
    VerifySignatureRequest,
    ViewFunctionRequest,
    ViewStateRequest,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")

NO_RETURN_VALUE = "[No return value]"


class Connection(Protocol):
    @property
    def network_id(self) -> str:
        ...

    def ensure_ready(self) -> NearAccount:
        ...


@dataclass(frozen=True)
class ToolResult:
    text: str
    is_error: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {"content": [{"type": "text", "text": self.text}], "isError": self.is_error}


class ToolService:
    def __init__(self, connection: Connection) -> None:
        self._connection = connection

    @property
    def account(self) -> NearAccount:
        return self._connection.ensure_ready()

    @property
    def account_id(self) -> str:
        return self.account.account_id

    def check_my_balance(self) -> Dict[str, Any]:
        """Prompt asking for the configured account's balance breakdown."""

        return {
            "messages": [
                {
                    "role": "user",
                    "content": {
                        "type": "text",
                        "text": (
                            f"What is the current balance breakdown for my account "
                            f"({self.account_id})? Please use the get_account_balance tool."
                        ),
                    },
                }
            ]
        }

    async def get_account_balance(self, request: AccountRequest) -> ToolResult:
        account_id = request.account_id
        logger.info("Tool: get_account_balance called for %s", account_id)
        if account_id != self.account_id:
            # The reported figures are always the signing account's own.
            logger.warning(
                "get_account_balance reports %s, not the requested %s",
                self.account_id,
                account_id,
            )

        def render(balance: AccountBalance) -> str:
            return (
                f"Balance for {account_id}:\n"
                f"  Total: {to_display_units(balance.total)} NEAR\n"
                f"  Staked: {to_display_units(balance.staked)} NEAR\n"
                f"  State Staked: {to_display_units(balance.state_staked)} NEAR\n"
                f"  Available: {to_display_units(balance.available)} NEAR"
            )

        context = self._context(
            "get_account_balance",
            f"Failed to fetch balance for {account_id}.",
            account_id=account_id,
        )
        return await self._query(context, self.account.get_account_balance, render)

    async def view_account_state(self, request: ViewStateRequest) -> ToolResult:
        account_id, prefix = request.account_id, request.prefix_base64
        logger.info(
            'Tool: view_account_state called for %s with base64 prefix "%s"', account_id, prefix
        )

        def render(values: List[Mapping[str, str]]) -> str:
            if not values:
                matching = " matching the prefix" if prefix else ""
                return (
                    f"Account {account_id} has no contract state{matching}. "
                    "It might not have a contract deployed."
                )
            entries = "\n---\n".join(
                f"  Key: {decode_text_or_marker(item['key'])}\n"
                f"  Value: {decode_text_or_marker(item['value'])}"
                for item in values
            )
            prefix_text = f' (prefix base64: "{prefix}")' if prefix else ""
            return f"Contract state for {account_id}{prefix_text}:\n{entries}"

        context = self._context(
            "view_account_state",
            f"Failed to fetch state for {account_id}.",
            account_id=account_id,
            contract_id=account_id,
        )
        provider = self.account.provider
        return await self._query(context, lambda: provider.view_state(account_id, prefix), render)

    async def get_account_details(self, request: AccountRequest) -> ToolResult:
        account_id = request.account_id
        logger.info("Tool: get_account_details called for %s", account_id)

        def render(state: Mapping[str, Any]) -> str:
            return (
                f"Account details for {account_id}:\n"
                f"  Amount (Balance): {to_display_units(state.get('amount'))} NEAR\n"
                f"  Locked (Staked): {to_display_units(state.get('locked'))} NEAR\n"
                f"  Storage Usage: {state.get('storage_usage')} bytes\n"
                f"  Code Hash: {state.get('code_hash')}"
            )

        context = self._context(
            "get_account_details",
            f"Failed to fetch details for {account_id}.",
            account_id=account_id,
        )
        provider = self.account.provider
        return await self._query(context, lambda: provider.view_account(account_id), render)

    async def create_sub_account(self, request: CreateSubAccountRequest) -> ToolResult:
        new_account_id = f"{request.new_account_id_suffix}.{self.account_id}"
        logger.info("Tool: create_sub_account called for %s", new_account_id)
        context = self._context(
            "create_sub_account",
            f"Failed to create sub-account {new_account_id}.",
            account_id=new_account_id,
            suffix=request.new_account_id_suffix,
        )

        def submit(account: NearAccount) -> Mapping[str, Any]:
            public_key = parse_public_key(request.new_account_public_key)
            amount = _near_amount(request.initial_balance_near)
            return account.create_account(new_account_id, public_key, amount)

        return await self._transact(
            context,
            submit,
            lambda success: (
                f"Successfully created sub-account {new_account_id} with initial balance "
                f"{request.initial_balance_near} NEAR. "
                f"Transaction hash: {success.transaction_hash}"
            ),
        )

    async def delete_account(self, request: DeleteAccountRequest) -> ToolResult:
        signer_id, beneficiary_id = self.account_id, request.beneficiary_id
        logger.info(
            "Tool: delete_account called for %s, beneficiary: %s", signer_id, beneficiary_id
        )
        context = self._context(
            "delete_account",
            f"Failed to delete account {signer_id}.",
            beneficiary_id=beneficiary_id,
        )
        return await self._transact(
            context,
            lambda account: account.delete_account(beneficiary_id),
            lambda success: (
                f"Successfully submitted request to delete account {signer_id} and transfer "
                f"remaining balance to {beneficiary_id}. "
                f"Transaction hash: {success.transaction_hash}"
            ),
        )

    async def send_tokens(self, request: SendTokensRequest) -> ToolResult:
        receiver_id, amount = request.receiver_id, request.amount_near
        logger.info("Tool: send_tokens called: %s NEAR to %s", amount, receiver_id)
        context = self._context(
            "send_tokens",
            f"Failed to send {amount} NEAR to {receiver_id}.",
            account_id=receiver_id,
            amount=amount,
        )
        return await self._transact(
            context,
            lambda account: account.send_money(receiver_id, _near_amount(amount)),
            lambda success: (
                f"Successfully sent {amount} NEAR to {receiver_id}. "
                f"Transaction hash: {success.transaction_hash}"
            ),
        )

    async def call_function(self, request: CallFunctionRequest) -> ToolResult:
        contract_id, method_name = request.contract_id, request.method_name
        logger.info(
            "Tool: call_function called: %s.%s(%s)",
            contract_id,
            method_name,
            _render_args(request.args),
        )
        context = self._context(
            "call_function",
            f"Failed to call function {method_name} on {contract_id}.",
            contract_id=contract_id,
            method_name=method_name,
        )

        def submit(account: NearAccount) -> Mapping[str, Any]:
            return account.function_call(
                contract_id,
                method_name,
                encode_args(request.args),
                ledger_gas(gas_display_to_base(request.gas_teras), request.gas_teras),
                _near_amount(request.attached_deposit_near),
            )

        return await self._transact(
            context,
            submit,
            lambda success: (
                f"Successfully called {method_name} on {contract_id}. "
                f"Result: {format_return_value(success.return_value)}. "
                f"Transaction hash: {success.transaction_hash}"
            ),
        )

    async def batch_actions(self, request: BatchActionsRequest) -> ToolResult:
        receiver_id = request.receiver_id or self.account_id
        count = len(request.actions)
        logger.info(
            "Tool: batch_actions called for receiver %s with %d actions", receiver_id, count
        )
        context = self._context(
            "batch_actions",
            f"Failed to execute batch actions for {receiver_id}.",
            account_id=receiver_id,
        )
        abstract_actions = [spec.to_action() for spec in request.actions]
        return await self._transact(
            context,
            lambda account: TransactionAssembler(account).submit(receiver_id, abstract_actions),
            lambda success: (
                f"Successfully executed batch transaction with {count} actions for receiver "
                f"{receiver_id}. Transaction hash: {success.transaction_hash}"
            ),
        )

    async def deploy_contract(self, request: DeployContractRequest) -> ToolResult:
        signer_id = self.account_id
        logger.info("Tool: deploy_contract called for %s", signer_id)
        context = self._context(
            "deploy_contract",
            f"Failed to deploy contract to {signer_id}.",
            contract_size=str(base64_byte_length(request.wasm_base64)),
        )

        def submit(account: NearAccount) -> Mapping[str, Any]:
            code = decode_base64(request.wasm_base64)
            logger.info("Deploying contract size: %d bytes", len(code))
            return account.deploy_contract(code)

        return await self._transact(
            context,
            submit,
            lambda success: (
                f"Successfully deployed contract to {signer_id}. "
                f"Transaction hash: {success.transaction_hash}"
            ),
        )

    async def view_function(self, request: ViewFunctionRequest) -> ToolResult:
        contract_id, method_name = request.contract_id, request.method_name
        logger.info(
            "Tool: view_function called: %s.%s(%s)",
            contract_id,
            method_name,
            _render_args(request.args),
        )
        context = self._context(
            "view_function",
            f"Failed to view function {method_name} on {contract_id}.",
            contract_id=contract_id,
            method_name=method_name,
        )
        provider = self.account.provider

        def fetch() -> bytes:
            return provider.call_function(contract_id, method_name, encode_args(request.args))

        def render(raw: bytes) -> str:
            value = format_return_value(decode_return_value(raw)) if raw else NO_RETURN_VALUE
            return f"Result of calling {method_name} on {contract_id}: {value}"

        return await self._query(context, fetch, render)

    async def get_access_keys(self, request: EmptyRequest) -> ToolResult:
        signer_id = self.account_id
        logger.info("Tool: get_access_keys called for %s", signer_id)

        def render(keys: List[Mapping[str, Any]]) -> str:
            if not keys:
                return f"Account {signer_id} has no access keys."
            return f"Access keys for {signer_id}:\n" + "\n---\n".join(
                _render_access_key(key) for key in keys
            )

        context = self._context(
            "get_access_keys", f"Failed to fetch access keys for {signer_id}."
        )
        return await self._query(context, self.account.get_access_keys, render)

    async def add_full_access_key(self, request: PublicKeyRequest) -> ToolResult:
        signer_id, public_key = self.account_id, request.public_key
        logger.info("Tool: add_full_access_key called for %s", signer_id)
        context = self._context(
            "add_full_access_key",
            f"Failed to add full access key {public_key} to {signer_id}.",
            public_key=public_key,
        )
        return await self._transact(
            context,
            lambda account: account.add_key(parse_public_key(public_key)),
            lambda success: (
                f"Successfully added full access key {public_key} to {signer_id}. "
                f"Transaction hash: {success.transaction_hash}"
            ),
        )

    async def add_function_call_key(self, request: AddFunctionCallKeyRequest) -> ToolResult:
        signer_id, public_key = self.account_id, request.public_key
        contract_id = request.contract_id
        logger.info(
            "Tool: add_function_call_key called for %s, target contract: %s",
            signer_id,
            contract_id,
        )
        context = self._context(
            "add_function_call_key",
            f"Failed to add function call key {public_key} to {signer_id}.",
            public_key=public_key,
            contract_id=contract_id,
        )

        def submit(account: NearAccount) -> Mapping[str, Any]:
            allowance = _near_amount(request.allowance_near) if request.allowance_near else None
            return account.add_key(
                parse_public_key(public_key), contract_id, request.method_names, allowance
            )

        return await self._transact(
            context,
            submit,
            lambda success: (
                f"Successfully added function call access key {public_key} to {signer_id} "
                f"for contract {contract_id}. Transaction hash: {success.transaction_hash}"
            ),
        )

    async def delete_access_key(self, request: PublicKeyRequest) -> ToolResult:
        signer_id, public_key = self.account_id, request.public_key
        logger.info("Tool: delete_access_key called for %s, key: %s", signer_id, public_key)
        context = self._context(
            "delete_access_key",
            f"Failed to delete access key {public_key} from {signer_id}.",
            public_key=public_key,
        )
        return await self._transact(
            context,
            lambda account: account.delete_key(parse_public_key(public_key)),
            lambda success: (
                f"Successfully deleted access key {public_key} from {signer_id}. "
                f"Transaction hash: {success.transaction_hash}"
            ),
        )

    async def verify_signature(self, request: VerifySignatureRequest) -> ToolResult:
        public_key = request.public_key
        logger.info("Tool: verify_signature called for key: %s", public_key)
        context = OperationContext(
            operation="verify_signature",
            headline=f"Failed to verify signature for public key {public_key}.",
            network_id=self._connection.network_id,
            signer_id="",
            subjects={"public_key": public_key},
        )
        try:
            signature = decode_base64(request.signature_base64)
            valid = verify_signature(
                request.message.encode("utf-8"), signature, parse_public_key(public_key)
            )
        except Exception as exc:
            logger.error("Error verifying signature for key %s: %s", public_key, exc)
            return ToolResult(classify_exception(exc, context).detail_message, is_error=True)
        verdict = "Valid" if valid else "Invalid"
        return ToolResult(f"Signature verification result for public key {public_key}: {verdict}")

    def _context(self, operation: str, headline: str, **subjects: str) -> OperationContext:
        return OperationContext(
            operation=operation,
            headline=headline,
            network_id=self._connection.network_id,
            signer_id=self.account_id,
            subjects=subjects,
        )

    async def _transact(
        self,
        context: OperationContext,
        submit: Callable[[NearAccount], Mapping[str, Any]],
        describe: Callable[[Success], str],
    ) -> ToolResult:
        account = self.account
        outcome = await asyncio.to_thread(submit_and_normalize, lambda: submit(account), context)
        if isinstance(outcome, Failure):
            return ToolResult(outcome.error.detail_message, is_error=True)
        return ToolResult(describe(outcome))

    async def _query(
        self,
        context: OperationContext,
        fetch: Callable[[], T],
        render: Callable[[T], str],
    ) -> ToolResult:
        try:
            value = await asyncio.to_thread(fetch)
            return ToolResult(render(value))
        except Exception as exc:
            logger.error("%s %s", context.headline, exc, exc_info=True)
            return ToolResult(classify_exception(exc, context).detail_message, is_error=True)


def _near_amount(display: str) -> int:
    return ledger_amount(to_base_units(display), display)


def _render_args(args: Mapping[str, Any]) -> str:
    try:
        return json.dumps(args, separators=(",", ":"))
    except (TypeError, ValueError):
        return repr(args)


def _render_access_key(key: Mapping[str, Any]) -> str:
    access_key = key.get("access_key") or {}
    permission = access_key.get("permission")
    if permission == "FullAccess":
        permission_info = "  Permission: FullAccess"
    else:
        scoped = (permission or {}).get("FunctionCall") or {}
        methods = scoped.get("method_names") or []
        allowance = scoped.get("allowance")
        permission_info = (
            "  Permission: FunctionCall\n"
            f"    Receiver: {scoped.get('receiver_id')}\n"
            f"    Methods: {', '.join(methods) if methods else '[Any]'}\n"
            f"    Allowance: {to_display_units(allowance) + ' NEAR' if allowance else 'Unlimited'}"
        )
    return f"Public Key: {key.get('public_key')}\n  Nonce: {access_key.get('nonce')}\n{permission_info}"
