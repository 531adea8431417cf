"""Parsing tests for the raw failure shapes a NEAR node produces."""

import unittest

from execution_adapter.near.failures import (
    CauseFailure,
    OpaqueFailure,
    TypedFailure,
    failure_from_execution_failure,
    failure_from_query_error,
    failure_from_rpc_error,
)


class RpcErrorParsingTests(unittest.TestCase):
    def test_structured_error_type(self) -> None:
        failure = failure_from_rpc_error(
            {
                "code": -32000,
                "message": "Server error",
                "data": {"error_type": "AccountDoesNotExist", "error_message": "no such account"},
                "cause": {"name": "UNKNOWN_ACCOUNT"},
            }
        )
        self.assertEqual(
            failure,
            TypedFailure("AccountDoesNotExist", "no such account", cause_name="UNKNOWN_ACCOUNT"),
        )

    def test_handler_error_keeps_cause_name(self) -> None:
        failure = failure_from_rpc_error(
            {
                "name": "HANDLER_ERROR",
                "code": -32000,
                "message": "Server error",
                "data": "Contract method is not found",
                "cause": {"name": "METHOD_NOT_FOUND", "info": {}},
            }
        )
        self.assertIsInstance(failure, TypedFailure)
        self.assertEqual(failure.error_type, "HANDLER_ERROR")
        self.assertEqual(failure.cause_name, "METHOD_NOT_FOUND")
        self.assertIn("Contract method is not found", failure.message)

    def test_cause_only(self) -> None:
        failure = failure_from_rpc_error(
            {"code": -32000, "message": "Server error", "cause": {"name": "NO_CONTRACT_CODE"}}
        )
        self.assertIsInstance(failure, CauseFailure)
        self.assertEqual(failure.cause_name, "NO_CONTRACT_CODE")

    def test_message_pattern(self) -> None:
        failure = failure_from_rpc_error(
            {
                "code": -32000,
                "message": "Server error",
                "data": "account ghost.near does not exist while viewing",
            }
        )
        self.assertEqual(failure.error_type, "AccountDoesNotExist")

    def test_timeout(self) -> None:
        failure = failure_from_rpc_error({"code": -32000, "message": "Server error", "data": "Timeout"})
        self.assertEqual(failure.error_type, "TimeoutError")

    def test_invalid_tx_error(self) -> None:
        failure = failure_from_rpc_error(
            {
                "code": -32000,
                "message": "Server error",
                "data": {
                    "TxExecutionError": {
                        "InvalidTxError": {
                            "NotEnoughBalance": {"signer_id": "a.near", "balance": "1", "cost": "2"}
                        }
                    }
                },
                "cause": {"name": "INVALID_TRANSACTION"},
            }
        )
        self.assertIsInstance(failure, TypedFailure)
        self.assertEqual(failure.error_type, "NotEnoughBalance")
        self.assertEqual(failure.cause_name, "INVALID_TRANSACTION")

    def test_unknown_shape_is_opaque(self) -> None:
        failure = failure_from_rpc_error({"code": -32600, "message": "Invalid request"})
        self.assertIsInstance(failure, OpaqueFailure)
        self.assertIn("Invalid request", failure.message)


class ExecutionFailureParsingTests(unittest.TestCase):
    def test_action_error_kind(self) -> None:
        failure = failure_from_execution_failure(
            {"ActionError": {"index": 0, "kind": {"AccountDoesNotExist": {"account_id": "x.near"}}}}
        )
        self.assertEqual(failure.error_type, "AccountDoesNotExist")
        self.assertIsNone(failure.execution_error)

    def test_contract_panic_sets_execution_error(self) -> None:
        failure = failure_from_execution_failure(
            {
                "ActionError": {
                    "index": 0,
                    "kind": {
                        "FunctionCallError": {"ExecutionError": "Smart contract panicked: nope"}
                    },
                }
            }
        )
        self.assertEqual(failure.error_type, "FunctionCallError")
        self.assertEqual(failure.execution_error, "Smart contract panicked: nope")

    def test_unit_variant_leaf(self) -> None:
        failure = failure_from_execution_failure(
            {
                "ActionError": {
                    "index": 0,
                    "kind": {"FunctionCallError": {"MethodResolveError": "MethodNotFound"}},
                }
            }
        )
        self.assertEqual(failure.error_type, "MethodNotFound")

    def test_missing_code(self) -> None:
        failure = failure_from_execution_failure(
            {
                "ActionError": {
                    "kind": {
                        "FunctionCallError": {
                            "CompilationError": {"CodeDoesNotExist": {"account_id": "x.near"}}
                        }
                    }
                }
            }
        )
        self.assertEqual(failure.error_type, "CodeDoesNotExist")

    def test_text_failure_is_opaque(self) -> None:
        failure = failure_from_execution_failure("something broke")
        self.assertEqual(failure, OpaqueFailure("something broke"))


class QueryErrorParsingTests(unittest.TestCase):
    def test_method_not_found(self) -> None:
        failure = failure_from_query_error(
            "wasm execution failed with error: FunctionCallError(MethodResolveError(MethodNotFound))"
        )
        self.assertEqual(failure.error_type, "MethodNotFound")
        self.assertTrue(failure.message.startswith("Querying failed: "))

    def test_code_does_not_exist(self) -> None:
        failure = failure_from_query_error(
            "wasm execution failed with error: CompilationError(CodeDoesNotExist { account_id: \"x\" })"
        )
        self.assertEqual(failure.error_type, "CodeDoesNotExist")

    def test_unmatched(self) -> None:
        self.assertIsInstance(failure_from_query_error("weird"), OpaqueFailure)


if __name__ == "__main__":
    unittest.main()
