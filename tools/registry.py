"""Tool catalog: names, descriptions, request schemas and dispatch."""

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional, Tuple, Type

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
    ToolRequest,
    VerifySignatureRequest,
    ViewFunctionRequest,
    ViewStateRequest,
)
from .service import ToolResult, ToolService

logger = logging.getLogger(__name__)

SERVER_NAME = "near-protocol-server"
SERVER_VERSION = "1.1.0"


class UnknownToolError(KeyError):
    """Raised when a tool or prompt name is not in the catalog."""


@dataclass(frozen=True)
class ToolSpec:
    name: str
    description: str
    request_model: Type[ToolRequest]

    def input_schema(self) -> Dict[str, Any]:
        return self.request_model.model_json_schema(by_alias=True)

    def describe(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "description": self.description,
            "inputSchema": self.input_schema(),
        }


@dataclass(frozen=True)
class PromptSpec:
    name: str
    description: str


TOOLS: Tuple[ToolSpec, ...] = (
    ToolSpec("get_account_balance", "Get the balance of a specific NEAR account.", AccountRequest),
    ToolSpec(
        "view_account_state",
        "View the raw key-value state stored in a NEAR account's contract. "
        "Prefix is expected in base64.",
        ViewStateRequest,
    ),
    ToolSpec(
        "get_account_details",
        "Get detailed information about a NEAR account, including balance and storage usage.",
        AccountRequest,
    ),
    ToolSpec(
        "create_sub_account",
        "Create a new sub-account under the server's configured account.",
        CreateSubAccountRequest,
    ),
    ToolSpec(
        "delete_account",
        "Delete the server's configured account and transfer remaining balance. "
        "WARNING: This is irreversible!",
        DeleteAccountRequest,
    ),
    ToolSpec(
        "send_tokens",
        "Send NEAR tokens from the server's configured account to another account.",
        SendTokensRequest,
    ),
    ToolSpec(
        "call_function",
        "Call a function (change method) on a specified contract.",
        CallFunctionRequest,
    ),
    ToolSpec(
        "batch_actions",
        "Execute multiple NEAR actions atomically within a single transaction. "
        "Actions are executed in the specified order.",
        BatchActionsRequest,
    ),
    ToolSpec(
        "deploy_contract",
        "Deploy a WASM smart contract to the server's configured account.",
        DeployContractRequest,
    ),
    ToolSpec(
        "view_function",
        "Call a view-only function on a specified contract "
        "(does not change state, does not cost gas beyond RPC fees).",
        ViewFunctionRequest,
    ),
    ToolSpec(
        "get_access_keys",
        "List all access keys associated with the server's configured account.",
        EmptyRequest,
    ),
    ToolSpec(
        "add_full_access_key",
        "Add a new key with full access permissions to the server's configured account.",
        PublicKeyRequest,
    ),
    ToolSpec(
        "add_function_call_key",
        "Add a new key with limited function call permissions to the server's configured account.",
        AddFunctionCallKeyRequest,
    ),
    ToolSpec(
        "delete_access_key",
        "Delete an existing access key from the server's configured account.",
        PublicKeyRequest,
    ),
    ToolSpec(
        "verify_signature",
        "Verify if a message signature is valid for a given public key.",
        VerifySignatureRequest,
    ),
)

PROMPTS: Tuple[PromptSpec, ...] = (
    PromptSpec(
        "check_my_balance",
        "Get the current balance details of the configured NEAR account.",
    ),
)

_TOOLS_BY_NAME: Dict[str, ToolSpec] = {spec.name: spec for spec in TOOLS}
_PROMPTS_BY_NAME: Dict[str, PromptSpec] = {spec.name: spec for spec in PROMPTS}


def get_tool(name: str) -> ToolSpec:
    try:
        return _TOOLS_BY_NAME[name]
    except KeyError:
        raise UnknownToolError(f"Unknown tool: {name}") from None


def list_tools() -> List[Dict[str, Any]]:
    return [spec.describe() for spec in TOOLS]


def list_prompts() -> List[Dict[str, Any]]:
    return [{"name": spec.name, "description": spec.description, "arguments": []} for spec in PROMPTS]


def parse_request(name: str, arguments: Optional[Mapping[str, Any]]) -> ToolRequest:
    """Validate raw arguments; raises pydantic ``ValidationError`` on bad input."""

    return get_tool(name).request_model.model_validate(dict(arguments or {}))


async def call_tool(
    service: ToolService, name: str, arguments: Optional[Mapping[str, Any]] = None
) -> ToolResult:
    request = parse_request(name, arguments)
    handler = getattr(service, name)
    try:
        return await handler(request)
    except Exception as exc:
        logger.exception("Tool %s failed", name)
        return ToolResult(f"Tool {name} failed. Reason: {exc}", is_error=True)


def get_prompt(service: ToolService, name: str) -> Dict[str, Any]:
    if name not in _PROMPTS_BY_NAME:
        raise UnknownToolError(f"Unknown prompt: {name}")
    return getattr(service, name)()
