"""Error taxonomy shared by the translation and classification layers."""

from enum import Enum
from typing import ClassVar


class ErrorCategory(Enum):
    INVALID_AMOUNT_FORMAT = "InvalidAmountFormat"
    INVALID_BASE64 = "InvalidBase64"
    ARG_ENCODING_ERROR = "ArgEncodingError"
    INVALID_PUBLIC_KEY = "InvalidPublicKey"
    ACCOUNT_DOES_NOT_EXIST = "AccountDoesNotExist"
    ACCOUNT_ALREADY_EXISTS = "AccountAlreadyExists"
    CREATE_ACCOUNT_NOT_ALLOWED = "CreateAccountNotAllowed"
    DELETE_ACCOUNT_NOT_EMPTY = "DeleteAccountNotEmpty"
    INSUFFICIENT_BALANCE = "InsufficientBalance"
    METHOD_NOT_FOUND = "MethodNotFound"
    CONTRACT_CODE_NOT_FOUND = "ContractCodeNotFound"
    CONTRACT_SIZE_EXCEEDED = "ContractSizeExceeded"
    KEY_ALREADY_EXISTS = "KeyAlreadyExists"
    KEY_NOT_FOUND = "KeyNotFound"
    CONTRACT_EXECUTION_ERROR = "ContractExecutionError"
    UNCLASSIFIED_FAILURE = "UnclassifiedFailure"


class ToolInputError(ValueError):
    """Raised when caller-supplied input cannot be translated for the ledger.

    Raised before any network call; the category tells the classifier which
    bucket the failure belongs to without inspecting the message.
    """

    category: ClassVar[ErrorCategory] = ErrorCategory.UNCLASSIFIED_FAILURE


class InvalidAmountFormat(ToolInputError):
    category = ErrorCategory.INVALID_AMOUNT_FORMAT


class InvalidBase64(ToolInputError):
    category = ErrorCategory.INVALID_BASE64


class ArgEncodingError(ToolInputError):
    category = ErrorCategory.ARG_ENCODING_ERROR


class InvalidPublicKey(ToolInputError):
    category = ErrorCategory.INVALID_PUBLIC_KEY
