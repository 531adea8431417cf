"""Parsed ledger failures.

Raw RPC error objects and transaction-outcome failures come in several
unrelated shapes. They are turned into one of three variants here, so the
classifier matches on explicit fields instead of probing dictionaries:

* ``TypedFailure``  - a symbolic error type is known (``AccountDoesNotExist``),
  possibly alongside an RPC cause name.
* ``CauseFailure``  - only the RPC handler's cause name is known
  (``METHOD_NOT_FOUND``).
* ``OpaqueFailure`` - nothing but a message.

Every variant may carry ``execution_error``: the text of a contract panic,
which is reported alongside whatever else went wrong.
"""

import json
import re
from dataclasses import dataclass
from typing import Any, List, Mapping, Optional, Tuple, Union


@dataclass(frozen=True)
class TypedFailure:
    error_type: str
    message: str
    cause_name: Optional[str] = None
    execution_error: Optional[str] = None


@dataclass(frozen=True)
class CauseFailure:
    cause_name: str
    message: str
    execution_error: Optional[str] = None


@dataclass(frozen=True)
class OpaqueFailure:
    message: str
    execution_error: Optional[str] = None


LedgerFailure = Union[TypedFailure, CauseFailure, OpaqueFailure]


class LedgerError(RuntimeError):
    """Raised by the RPC provider and account handle for ledger-side failures."""

    def __init__(self, failure: LedgerFailure) -> None:
        super().__init__(failure.message)
        self.failure = failure


_MESSAGE_TYPES: Tuple[Tuple[re.Pattern, str], ...] = (
    (re.compile(r"^account .*? does not exist while viewing$"), "AccountDoesNotExist"),
    (re.compile(r"^Account .*? doesn't exist$"), "AccountDoesNotExist"),
    (re.compile(r"^access key .*? does not exist while viewing$"), "AccessKeyDoesNotExist"),
    (re.compile(r"CompilationError\(CodeDoesNotExist"), "CodeDoesNotExist"),
    (re.compile(r"MethodResolveError\(MethodNotFound\)"), "MethodNotFound"),
    (
        re.compile(r"Transaction nonce \d+ must be larger than nonce of the used access key \d+"),
        "InvalidNonce",
    ),
)

_TIMEOUT_MARKERS = ("Timeout error", "query has timed out")

_CAMEL_CASE = re.compile(r"^[A-Z][A-Za-z0-9]*$")


def error_type_from_message(message: str) -> Optional[str]:
    for pattern, error_type in _MESSAGE_TYPES:
        if pattern.search(message):
            return error_type
    return None


def failure_from_rpc_error(error: Mapping[str, Any]) -> LedgerFailure:
    """Parse the ``error`` member of a JSON-RPC response."""

    cause = error.get("cause")
    cause_name = cause.get("name") if isinstance(cause, Mapping) else None
    data = error.get("data")

    if isinstance(data, Mapping):
        if isinstance(data.get("error_message"), str) and isinstance(data.get("error_type"), str):
            return TypedFailure(
                error_type=data["error_type"],
                message=data["error_message"],
                cause_name=cause_name,
            )
        parsed = failure_from_execution_failure(data.get("TxExecutionError", data))
        if isinstance(parsed, OpaqueFailure) and cause_name:
            return CauseFailure(cause_name, parsed.message, parsed.execution_error)
        if isinstance(parsed, TypedFailure) and cause_name:
            return TypedFailure(
                parsed.error_type, parsed.message, cause_name, parsed.execution_error
            )
        return parsed

    message = f"[{error.get('code')}] {error.get('message')}"
    if data is not None:
        message += f": {data}"
    if data == "Timeout" or any(marker in message for marker in _TIMEOUT_MARKERS):
        return TypedFailure("TimeoutError", message, cause_name)

    error_type = error_type_from_message(str(data)) if data is not None else None
    if error_type:
        return TypedFailure(error_type, str(data), cause_name)
    name = error.get("name")
    if name:
        return TypedFailure(str(name), message, cause_name)
    if cause_name:
        return CauseFailure(cause_name, message)
    return OpaqueFailure(message)


def failure_from_query_error(message: str) -> LedgerFailure:
    """Parse the ``error`` string some nodes return inside a query result."""

    text = f"Querying failed: {message}"
    error_type = error_type_from_message(message)
    if error_type:
        return TypedFailure(error_type, text)
    return OpaqueFailure(text)


def failure_from_execution_failure(failure: Any) -> LedgerFailure:
    """Parse ``status.Failure`` of an outcome, or a ``TxExecutionError`` body.

    The deepest variant name on the nested path is the symbolic type; an
    ``ExecutionError`` string leaf is the contract's own panic message.
    """

    names: List[str] = []
    execution_error: Optional[str] = None
    node = failure
    while isinstance(node, Mapping) and node:
        variant = next((key for key in node if _CAMEL_CASE.match(str(key))), None)
        if variant is None:
            node = node.get("kind")
            continue
        value = node[variant]
        names.append(variant)
        if isinstance(value, str):
            if variant == "ExecutionError":
                names.pop()
                execution_error = value
            elif _CAMEL_CASE.match(value):
                names.append(value)
            break
        node = value

    message = _describe(failure)
    if not names:
        return OpaqueFailure(message, execution_error)
    return TypedFailure(names[-1], message, execution_error=execution_error)


def _describe(failure: Any) -> str:
    if isinstance(failure, str):
        return failure
    try:
        return json.dumps(failure, sort_keys=True)
    except (TypeError, ValueError):
        return str(failure)
