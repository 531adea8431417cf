"""Signing account handle: builds, signs and submits transactions."""

import logging
from typing import Any, Dict, List, Optional, Protocol, Sequence

import base58

from wallet_core.models import PublicKey
from wallet_core.signer import Signer

from .borsh import serialize_signed_transaction, serialize_transaction
from .models import (
    AccountBalance,
    AddKey,
    CreateAccount,
    DeleteAccount,
    DeleteKey,
    DeployContract,
    FunctionCall,
    NativeAction,
    SignedTransaction,
    Transaction,
    Transfer,
    full_access_key,
    function_call_access_key,
)

logger = logging.getLogger(__name__)


class Provider(Protocol):
    def view_state(
        self, account_id: str, prefix_base64: str = ..., finality: str = ...
    ) -> List[Dict[str, str]]:
        ...

    def call_function(
        self, account_id: str, method_name: str, args: bytes, finality: str = ...
    ) -> bytes:
        ...

    def view_account(self, account_id: str, finality: str = ...) -> Dict[str, Any]:
        ...

    def view_access_key(
        self, account_id: str, public_key: str, finality: str = ...
    ) -> Dict[str, Any]:
        ...

    def view_access_key_list(self, account_id: str, finality: str = ...) -> List[Dict[str, Any]]:
        ...

    def block(self, finality: str = ...) -> Dict[str, Any]:
        ...

    def protocol_config(self, finality: str = ...) -> Dict[str, Any]:
        ...

    def send_transaction(self, signed_transaction: bytes) -> Dict[str, Any]:
        ...


class NearAccount:
    """One account on one network, signing with keys held by ``signer``.

    Mutating methods return the raw ``broadcast_tx_commit`` outcome; a
    ``status.Failure`` inside it is left for the caller to interpret.
    """

    def __init__(self, provider: Provider, signer: Signer, account_id: str, network_id: str) -> None:
        self.provider = provider
        self.signer = signer
        self.account_id = account_id
        self.network_id = network_id

    def state(self) -> Dict[str, Any]:
        return self.provider.view_account(self.account_id)

    def get_account_balance(self) -> AccountBalance:
        config = self.provider.protocol_config()
        cost_per_byte = int(config["runtime_config"]["storage_amount_per_byte"])
        state = self.state()
        staked = int(state["locked"])
        total = int(state["amount"]) + staked
        state_staked = int(state["storage_usage"]) * cost_per_byte
        available = total - max(staked, state_staked)
        return AccountBalance(
            total=total,
            state_staked=state_staked,
            staked=staked,
            available=available,
        )

    def get_access_keys(self) -> List[Dict[str, Any]]:
        return self.provider.view_access_key_list(self.account_id)

    def sign_transaction(
        self, receiver_id: str, actions: Sequence[NativeAction]
    ) -> SignedTransaction:
        public_key = self.signer.get_public_key(self.account_id, self.network_id)
        access_key = self.provider.view_access_key(self.account_id, public_key.to_string())
        block = self.provider.block(finality="final")
        transaction = Transaction(
            signer_id=self.account_id,
            public_key=public_key,
            nonce=int(access_key["nonce"]) + 1,
            receiver_id=receiver_id,
            block_hash=base58.b58decode(block["header"]["hash"]),
            actions=tuple(actions),
        )
        signature = self.signer.sign_message(
            serialize_transaction(transaction), self.account_id, self.network_id
        )
        return SignedTransaction(transaction=transaction, signature=signature)

    def sign_and_send_transaction(
        self, receiver_id: str, actions: Sequence[NativeAction]
    ) -> Dict[str, Any]:
        signed = self.sign_transaction(receiver_id, actions)
        logger.info(
            "Submitting transaction %s -> %s with %d action(s)",
            self.account_id,
            receiver_id,
            len(signed.transaction.actions),
        )
        return self.provider.send_transaction(serialize_signed_transaction(signed))

    def create_account(
        self, new_account_id: str, public_key: PublicKey, amount: int
    ) -> Dict[str, Any]:
        return self.sign_and_send_transaction(
            new_account_id,
            [
                CreateAccount(),
                Transfer(deposit=amount),
                AddKey(public_key=public_key, access_key=full_access_key()),
            ],
        )

    def delete_account(self, beneficiary_id: str) -> Dict[str, Any]:
        return self.sign_and_send_transaction(
            self.account_id, [DeleteAccount(beneficiary_id=beneficiary_id)]
        )

    def send_money(self, receiver_id: str, amount: int) -> Dict[str, Any]:
        return self.sign_and_send_transaction(receiver_id, [Transfer(deposit=amount)])

    def deploy_contract(self, code: bytes) -> Dict[str, Any]:
        return self.sign_and_send_transaction(self.account_id, [DeployContract(code=code)])

    def function_call(
        self, contract_id: str, method_name: str, args: bytes, gas: int, deposit: int
    ) -> Dict[str, Any]:
        return self.sign_and_send_transaction(
            contract_id,
            [FunctionCall(method_name=method_name, args=args, gas=gas, deposit=deposit)],
        )

    def add_key(
        self,
        public_key: PublicKey,
        contract_id: Optional[str] = None,
        method_names: Sequence[str] = (),
        allowance: Optional[int] = None,
    ) -> Dict[str, Any]:
        """Add a full access key, or a function call key when ``contract_id`` is set."""

        if contract_id:
            access_key = function_call_access_key(contract_id, tuple(method_names), allowance)
        else:
            access_key = full_access_key()
        return self.sign_and_send_transaction(
            self.account_id, [AddKey(public_key=public_key, access_key=access_key)]
        )

    def delete_key(self, public_key: PublicKey) -> Dict[str, Any]:
        return self.sign_and_send_transaction(self.account_id, [DeleteKey(public_key=public_key)])
