from .account import NearAccount
from .classifier import ClassifiedError, OperationContext, classify_exception, classify_failure
from .failures import CauseFailure, LedgerError, LedgerFailure, OpaqueFailure, TypedFailure
from .outcome import Failure, SubmissionOutcome, Success, normalize_outcome, submit_and_normalize
from .rpc import JsonRpcProvider

__all__ = [
    "CauseFailure",
    "ClassifiedError",
    "Failure",
    "JsonRpcProvider",
    "LedgerError",
    "LedgerFailure",
    "NearAccount",
    "OpaqueFailure",
    "OperationContext",
    "SubmissionOutcome",
    "Success",
    "TypedFailure",
    "classify_exception",
    "classify_failure",
    "normalize_outcome",
    "submit_and_normalize",
]
