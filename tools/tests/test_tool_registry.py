import asyncio
import unittest

from pydantic import ValidationError

from tools.registry import (
    PROMPTS,
    TOOLS,
    UnknownToolError,
    call_tool,
    get_prompt,
    get_tool,
    list_prompts,
    list_tools,
    parse_request,
)
from tools.schemas import BatchActionsRequest, FunctionCallSpec
from tools.service import ToolResult

EXPECTED_TOOLS = {
    "get_account_balance",
    "view_account_state",
    "get_account_details",
    "create_sub_account",
    "delete_account",
    "send_tokens",
    "call_function",
    "batch_actions",
    "deploy_contract",
    "view_function",
    "get_access_keys",
    "add_full_access_key",
    "add_function_call_key",
    "delete_access_key",
    "verify_signature",
}


class StubService:
    """Answers every tool with a canned result; ``send_tokens`` blows up."""

    def __init__(self) -> None:
        self.requests = []

    async def get_account_balance(self, request) -> ToolResult:
        self.requests.append(request)
        return ToolResult("ok")

    async def send_tokens(self, request) -> ToolResult:
        raise RuntimeError("connection refused")

    def check_my_balance(self):
        return {"messages": []}


class CatalogTests(unittest.TestCase):
    def test_all_tools_listed_once(self) -> None:
        names = [tool["name"] for tool in list_tools()]
        self.assertEqual(len(names), len(TOOLS))
        self.assertEqual(set(names), EXPECTED_TOOLS)

    def test_schemas_use_wire_names(self) -> None:
        schema = get_tool("send_tokens").input_schema()
        self.assertEqual(set(schema["properties"]), {"receiverId", "amountNear"})
        self.assertEqual(set(schema["required"]), {"receiverId", "amountNear"})

        call_schema = get_tool("call_function").input_schema()
        self.assertEqual(call_schema["properties"]["gasTeras"]["default"], "30")
        self.assertEqual(call_schema["properties"]["attachedDepositNear"]["default"], "0")

    def test_prompts(self) -> None:
        self.assertEqual([p["name"] for p in list_prompts()], [p.name for p in PROMPTS])
        self.assertEqual(list_prompts()[0]["name"], "check_my_balance")

    def test_unknown_tool(self) -> None:
        with self.assertRaises(UnknownToolError):
            get_tool("mint_tokens")
        with self.assertRaises(UnknownToolError):
            get_prompt(StubService(), "nope")


class ParseRequestTests(unittest.TestCase):
    def test_aliases_and_defaults(self) -> None:
        request = parse_request(
            "call_function", {"contractId": "app.testnet", "methodName": "ping"}
        )
        self.assertEqual(request.contract_id, "app.testnet")
        self.assertEqual(request.args, {})
        self.assertEqual(request.gas_teras, "30")

    def test_missing_field(self) -> None:
        with self.assertRaises(ValidationError):
            parse_request("send_tokens", {"receiverId": "bob.testnet"})

    def test_batch_needs_actions(self) -> None:
        with self.assertRaises(ValidationError):
            parse_request("batch_actions", {"actions": []})

    def test_batch_rejects_unknown_action_type(self) -> None:
        with self.assertRaises(ValidationError):
            parse_request("batch_actions", {"actions": [{"type": "Mint"}]})

    def test_batch_action_variants(self) -> None:
        request = parse_request(
            "batch_actions",
            {
                "actions": [
                    {"type": "FunctionCall", "contractId": "app.testnet", "methodName": "go"},
                    {"type": "DeleteAccount", "beneficiaryId": "bob.testnet"},
                ]
            },
        )
        self.assertIsInstance(request, BatchActionsRequest)
        self.assertIsInstance(request.actions[0], FunctionCallSpec)
        self.assertIsNone(request.receiver_id)
        action = request.actions[0].to_action()
        self.assertEqual(action.gas, "30")
        self.assertEqual(action.deposit, "0")


class CallToolTests(unittest.TestCase):
    def test_dispatches_validated_request(self) -> None:
        service = StubService()
        result = asyncio.run(
            call_tool(service, "get_account_balance", {"accountId": "alice.testnet"})
        )
        self.assertEqual(result, ToolResult("ok"))
        self.assertEqual(service.requests[0].account_id, "alice.testnet")

    def test_unexpected_exception_becomes_error_result(self) -> None:
        with self.assertLogs("tools.registry", level="ERROR"):
            result = asyncio.run(
                call_tool(StubService(), "send_tokens", {"receiverId": "b", "amountNear": "1"})
            )
        self.assertTrue(result.is_error)
        self.assertEqual(result.text, "Tool send_tokens failed. Reason: connection refused")
        self.assertEqual(
            result.to_dict(),
            {
                "content": [{"type": "text", "text": result.text}],
                "isError": True,
            },
        )

    def test_prompt(self) -> None:
        self.assertEqual(get_prompt(StubService(), "check_my_balance"), {"messages": []})


if __name__ == "__main__":
    unittest.main()
