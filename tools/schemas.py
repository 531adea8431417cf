"""Request schemas for every tool; field aliases are the wire names callers send."""

from typing import Annotated, Any, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from action_engine import models as abstract


class ToolRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class EmptyRequest(ToolRequest):
    pass


class AccountRequest(ToolRequest):
    account_id: str = Field(
        alias="accountId", description="The NEAR account ID (e.g., example.testnet)"
    )


class ViewStateRequest(ToolRequest):
    account_id: str = Field(
        alias="accountId",
        description="The NEAR account ID of the contract (e.g., guest-book.testnet)",
    )
    prefix_base64: str = Field(
        default="",
        description=(
            "Base64 encoded prefix for the keys to view (optional, default views all state). "
            "Empty string for no prefix."
        ),
    )


class CreateSubAccountRequest(ToolRequest):
    new_account_id_suffix: str = Field(
        alias="newAccountIdSuffix",
        description=(
            "The suffix for the new sub-account (e.g., 'sub'). "
            "The full ID will be 'suffix.your-account.testnet'."
        ),
    )
    new_account_public_key: str = Field(
        alias="newAccountPublicKey",
        description="The base58 encoded public key for the new account.",
    )
    initial_balance_near: str = Field(
        alias="initialBalanceNear",
        description="The initial balance in NEAR to fund the new account (e.g., '0.1').",
    )


class DeleteAccountRequest(ToolRequest):
    beneficiary_id: str = Field(
        alias="beneficiaryId", description="The NEAR account ID to receive the remaining balance."
    )


class SendTokensRequest(ToolRequest):
    receiver_id: str = Field(
        alias="receiverId", description="The NEAR account ID receiving the tokens."
    )
    amount_near: str = Field(
        alias="amountNear", description="The amount of NEAR to send (e.g., '1.5')."
    )


class CallFunctionRequest(ToolRequest):
    contract_id: str = Field(alias="contractId", description="The NEAR account ID of the contract.")
    method_name: str = Field(alias="methodName", description="The name of the function to call.")
    args: Dict[str, Any] = Field(
        default_factory=dict,
        description="Arguments for the function call as a JSON object (default: {}).",
    )
    gas_teras: str = Field(
        default=abstract.DEFAULT_GAS_TERAS,
        alias="gasTeras",
        description="Amount of Gas (in TeraGas, TGas) to attach (e.g., '30'). Default: 30 TGas.",
    )
    attached_deposit_near: str = Field(
        default=abstract.DEFAULT_DEPOSIT_NEAR,
        alias="attachedDepositNear",
        description="Amount of NEAR to attach as deposit (e.g., '0.1'). Default: 0 NEAR.",
    )


class ViewFunctionRequest(ToolRequest):
    contract_id: str = Field(alias="contractId", description="The NEAR account ID of the contract.")
    method_name: str = Field(
        alias="methodName", description="The name of the view function to call."
    )
    args: Dict[str, Any] = Field(
        default_factory=dict,
        description="Arguments for the function call as a JSON object (default: {}).",
    )


class DeployContractRequest(ToolRequest):
    wasm_base64: str = Field(
        alias="wasmBase64", description="Base64 encoded string of the WASM contract bytecode."
    )


class PublicKeyRequest(ToolRequest):
    public_key: str = Field(alias="publicKey", description="The base58 encoded public key.")


class AddFunctionCallKeyRequest(ToolRequest):
    public_key: str = Field(alias="publicKey", description="The base58 encoded public key to add.")
    contract_id: str = Field(
        alias="contractId", description="The contract ID this key is allowed to call."
    )
    method_names: List[str] = Field(
        default_factory=list,
        alias="methodNames",
        description="Array of method names allowed (empty array or omit for any method).",
    )
    allowance_near: Optional[str] = Field(
        default=None,
        alias="allowanceNear",
        description="Allowance in NEAR for this key (e.g., '0.25'). Omit for no allowance limit.",
    )


class VerifySignatureRequest(ToolRequest):
    message: str = Field(description="The message that was signed (provide as plain string).")
    signature_base64: str = Field(
        alias="signatureBase64", description="The base64 encoded signature string."
    )
    public_key: str = Field(
        alias="publicKey", description="The base58 encoded public key to verify against."
    )


class CreateAccountSpec(ToolRequest):
    type: Literal["CreateAccount"]

    def to_action(self) -> abstract.CreateAccount:
        return abstract.CreateAccount()


class DeployContractSpec(ToolRequest):
    type: Literal["DeployContract"]
    wasm_base64: str = Field(alias="wasmBase64", description="Base64 encoded WASM contract code.")

    def to_action(self) -> abstract.DeployContract:
        return abstract.DeployContract(wasm_base64=self.wasm_base64)


class FunctionCallSpec(ToolRequest):
    type: Literal["FunctionCall"]
    contract_id: str = Field(alias="contractId")
    method_name: str = Field(alias="methodName")
    args: Dict[str, Any] = Field(default_factory=dict)
    gas_teras: str = Field(default=abstract.DEFAULT_GAS_TERAS, alias="gasTeras")
    deposit_near: str = Field(default=abstract.DEFAULT_DEPOSIT_NEAR, alias="depositNear")

    def to_action(self) -> abstract.FunctionCall:
        return abstract.FunctionCall(
            contract_id=self.contract_id,
            method_name=self.method_name,
            args=self.args,
            gas=self.gas_teras,
            deposit=self.deposit_near,
        )


class TransferSpec(ToolRequest):
    type: Literal["Transfer"]
    deposit_near: str = Field(alias="depositNear")

    def to_action(self) -> abstract.Transfer:
        return abstract.Transfer(deposit=self.deposit_near)


class StakeSpec(ToolRequest):
    type: Literal["Stake"]
    stake_yocto: str = Field(alias="stakeYocto", description="Stake amount in yoctoNEAR.")
    public_key: str = Field(alias="publicKey")

    def to_action(self) -> abstract.Stake:
        return abstract.Stake(stake=self.stake_yocto, public_key=self.public_key)


class FunctionCallPermissionSpec(ToolRequest):
    receiver_id: str = Field(alias="receiverId")
    method_names: List[str] = Field(alias="methodNames")
    allowance_near: Optional[str] = Field(default=None, alias="allowanceNear")


class AccessKeySpec(ToolRequest):
    nonce: Optional[int] = Field(
        default=None, description="Ignored: a new access key always starts at nonce 0."
    )
    permission: Union[Literal["FullAccess"], FunctionCallPermissionSpec]


class AddKeySpec(ToolRequest):
    type: Literal["AddKey"]
    public_key: str = Field(alias="publicKey")
    access_key: AccessKeySpec = Field(alias="accessKey")

    def to_action(self) -> abstract.AddKey:
        permission = self.access_key.permission
        if isinstance(permission, FunctionCallPermissionSpec):
            permission = abstract.FunctionCallPermission(
                receiver_id=permission.receiver_id,
                method_names=tuple(permission.method_names),
                allowance=permission.allowance_near,
            )
        return abstract.AddKey(
            public_key=self.public_key,
            permission=permission,
        )


class DeleteKeySpec(ToolRequest):
    type: Literal["DeleteKey"]
    public_key: str = Field(alias="publicKey")

    def to_action(self) -> abstract.DeleteKey:
        return abstract.DeleteKey(public_key=self.public_key)


class DeleteAccountSpec(ToolRequest):
    type: Literal["DeleteAccount"]
    beneficiary_id: str = Field(alias="beneficiaryId")

    def to_action(self) -> abstract.DeleteAccount:
        return abstract.DeleteAccount(beneficiary_id=self.beneficiary_id)


ActionSpec = Annotated[
    Union[
        CreateAccountSpec,
        DeployContractSpec,
        FunctionCallSpec,
        TransferSpec,
        StakeSpec,
        AddKeySpec,
        DeleteKeySpec,
        DeleteAccountSpec,
    ],
    Field(discriminator="type"),
]


class BatchActionsRequest(ToolRequest):
    receiver_id: Optional[str] = Field(
        default=None,
        alias="receiverId",
        description=(
            "The primary receiver account ID for the transaction. If omitted, the server's "
            "account ID is used. Most actions define their own specific target."
        ),
    )
    actions: List[ActionSpec] = Field(
        min_length=1, description="An array of action objects to execute in sequence."
    )
