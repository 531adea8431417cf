"""Read-only JSON-RPC query provider for a NEAR node."""

from __future__ import annotations

import itertools
import json
import logging
import socket
import urllib.error
import urllib.request
from typing import Any, Callable, Dict, List, Optional

from near_core.codec import encode_base64

from .failures import (
    LedgerError,
    OpaqueFailure,
    TypedFailure,
    failure_from_query_error,
    failure_from_rpc_error,
)

logger = logging.getLogger(__name__)

Opener = Callable[..., Any]


class JsonRpcProvider:
    """Posts JSON-RPC 2.0 requests to ``url``.

    ``timeout`` is in seconds; ``None`` lets a hung node block the call.
    Every node-side or transport failure surfaces as :class:`LedgerError`.
    """

    def __init__(
        self,
        url: str,
        timeout: Optional[float] = None,
        opener: Opener = urllib.request.urlopen,
    ) -> None:
        self.url = url
        self.timeout = timeout
        self._opener = opener
        self._ids = itertools.count(1)

    def send(self, method: str, params: Any) -> Any:
        payload = {
            "jsonrpc": "2.0",
            "id": next(self._ids),
            "method": method,
            "params": params,
        }
        body = json.dumps(payload).encode("utf-8")
        request = urllib.request.Request(
            self.url,
            data=body,
            headers={"Content-Type": "application/json"},
            method="POST",
        )
        logger.debug("RPC %s -> %s", method, self.url)
        raw = self._post(request)

        try:
            data = json.loads(raw)
        except json.JSONDecodeError as exc:
            raise LedgerError(OpaqueFailure("RPC node returned invalid JSON.")) from exc

        if not isinstance(data, dict):
            raise LedgerError(OpaqueFailure("RPC node returned an unexpected response."))
        if data.get("error"):
            raise LedgerError(failure_from_rpc_error(data["error"]))
        return data.get("result")

    def _post(self, request: urllib.request.Request) -> str:
        kwargs = {} if self.timeout is None else {"timeout": self.timeout}
        try:
            with self._opener(request, **kwargs) as response:
                return response.read().decode("utf-8")
        except urllib.error.HTTPError as exc:
            text = exc.read().decode("utf-8", errors="replace")
            try:
                data = json.loads(text)
            except json.JSONDecodeError:
                data = None
            if isinstance(data, dict) and data.get("error"):
                raise LedgerError(failure_from_rpc_error(data["error"])) from exc
            raise LedgerError(
                OpaqueFailure(f"RPC request failed with HTTP {exc.code}: {text or exc.reason}")
            ) from exc
        except (socket.timeout, TimeoutError) as exc:
            raise LedgerError(
                TypedFailure("TimeoutError", f"RPC request to {self.url} timed out.")
            ) from exc
        except urllib.error.URLError as exc:
            if isinstance(exc.reason, (socket.timeout, TimeoutError)):
                raise LedgerError(
                    TypedFailure("TimeoutError", f"RPC request to {self.url} timed out.")
                ) from exc
            raise LedgerError(OpaqueFailure(f"RPC request failed: {exc.reason}")) from exc

    def query(self, params: Dict[str, Any]) -> Dict[str, Any]:
        result = self.send("query", params)
        if isinstance(result, dict) and isinstance(result.get("error"), str):
            raise LedgerError(failure_from_query_error(result["error"]))
        return result

    def view_account(self, account_id: str, finality: str = "optimistic") -> Dict[str, Any]:
        return self.query(
            {"request_type": "view_account", "finality": finality, "account_id": account_id}
        )

    def view_state(
        self, account_id: str, prefix_base64: str = "", finality: str = "optimistic"
    ) -> List[Dict[str, str]]:
        result = self.query(
            {
                "request_type": "view_state",
                "finality": finality,
                "account_id": account_id,
                "prefix_base64": prefix_base64,
            }
        )
        return list(result.get("values") or [])

    def call_function(
        self, account_id: str, method_name: str, args: bytes, finality: str = "optimistic"
    ) -> bytes:
        """Run a view method and return its raw result bytes."""

        result = self.query(
            {
                "request_type": "call_function",
                "finality": finality,
                "account_id": account_id,
                "method_name": method_name,
                "args_base64": encode_base64(args),
            }
        )
        return bytes(result.get("result") or [])

    def view_access_key(
        self, account_id: str, public_key: str, finality: str = "final"
    ) -> Dict[str, Any]:
        return self.query(
            {
                "request_type": "view_access_key",
                "finality": finality,
                "account_id": account_id,
                "public_key": public_key,
            }
        )

    def view_access_key_list(
        self, account_id: str, finality: str = "optimistic"
    ) -> List[Dict[str, Any]]:
        result = self.query(
            {
                "request_type": "view_access_key_list",
                "finality": finality,
                "account_id": account_id,
            }
        )
        return list(result.get("keys") or [])

    def block(self, finality: str = "final") -> Dict[str, Any]:
        return self.send("block", {"finality": finality})

    def protocol_config(self, finality: str = "final") -> Dict[str, Any]:
        return self.send("EXPERIMENTAL_protocol_config", {"finality": finality})

    def send_transaction(self, signed_transaction: bytes) -> Dict[str, Any]:
        """Submit with ``broadcast_tx_commit`` and wait for the final outcome."""

        return self.send("broadcast_tx_commit", [encode_base64(signed_transaction)])
