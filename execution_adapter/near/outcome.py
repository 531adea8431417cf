"""Normalize submission results into success or classified failure."""

import logging
from dataclasses import dataclass
from typing import Any, Callable, Mapping, Union

from near_core.codec import decode_base64, decode_return_value

from .classifier import ClassifiedError, OperationContext, classify_exception, classify_failure
from .failures import failure_from_execution_failure

logger = logging.getLogger(__name__)

VOID = "void"


@dataclass(frozen=True)
class Success:
    return_value: Any
    transaction_hash: str


@dataclass(frozen=True)
class Failure:
    error: ClassifiedError


SubmissionOutcome = Union[Success, Failure]


def normalize_outcome(raw: Mapping[str, Any], context: OperationContext) -> SubmissionOutcome:
    status = raw.get("status")
    if isinstance(status, Mapping) and "Failure" in status:
        failure = failure_from_execution_failure(status["Failure"])
        logger.error("%s Outcome failure: %s", context.headline, failure.message)
        return Failure(classify_failure(failure, context))

    payload = status.get("SuccessValue") if isinstance(status, Mapping) else None
    return_value = decode_return_value(decode_base64(payload)) if payload else VOID
    return Success(return_value=return_value, transaction_hash=transaction_hash(raw))


def submit_and_normalize(
    submit: Callable[[], Mapping[str, Any]], context: OperationContext
) -> SubmissionOutcome:
    """Run ``submit`` and normalize its result; nothing raised escapes."""

    try:
        return normalize_outcome(submit(), context)
    except Exception as exc:
        logger.error("%s %s", context.headline, exc, exc_info=True)
        return Failure(classify_exception(exc, context))


def transaction_hash(raw: Mapping[str, Any]) -> str:
    transaction = raw.get("transaction")
    if isinstance(transaction, Mapping) and transaction.get("hash"):
        return str(transaction["hash"])
    outcome = raw.get("transaction_outcome")
    if isinstance(outcome, Mapping) and outcome.get("id"):
        return str(outcome["id"])
    return ""
