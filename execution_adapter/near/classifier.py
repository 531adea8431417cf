"""Map parsed ledger failures and input errors to user-facing error categories.

Matching order, first hit wins:

1. the symbolic error type against ``TYPE_CATALOG``;
2. the RPC cause name against ``CAUSE_CATALOG``;
3. a generic "operation failed" message carrying the raw reason.

A contract panic text, when present, is appended whichever branch matched.
"""

import logging
import string
from dataclasses import dataclass, field
from typing import Dict, Mapping, Optional, Tuple

from near_core.errors import ErrorCategory, ToolInputError

from .failures import CauseFailure, LedgerError, LedgerFailure, TypedFailure

logger = logging.getLogger(__name__)

TYPE_CATALOG: Dict[str, ErrorCategory] = {
    "AccountDoesNotExist": ErrorCategory.ACCOUNT_DOES_NOT_EXIST,
    "AccountAlreadyExists": ErrorCategory.ACCOUNT_ALREADY_EXISTS,
    "CreateAccountNotAllowed": ErrorCategory.CREATE_ACCOUNT_NOT_ALLOWED,
    "DeleteAccountHasEnoughBalance": ErrorCategory.DELETE_ACCOUNT_NOT_EMPTY,
    "DeleteAccountHasRent": ErrorCategory.DELETE_ACCOUNT_NOT_EMPTY,
    "NotEnoughBalance": ErrorCategory.INSUFFICIENT_BALANCE,
    "MethodNotFound": ErrorCategory.METHOD_NOT_FOUND,
    "ContractSizeExceeded": ErrorCategory.CONTRACT_SIZE_EXCEEDED,
    "AddKeyAlreadyExists": ErrorCategory.KEY_ALREADY_EXISTS,
    "DeleteKeyDoesNotExist": ErrorCategory.KEY_NOT_FOUND,
    "CodeDoesNotExist": ErrorCategory.CONTRACT_CODE_NOT_FOUND,
}

CAUSE_CATALOG: Dict[str, ErrorCategory] = {
    "CONTRACT_CODE_NOT_FOUND": ErrorCategory.CONTRACT_CODE_NOT_FOUND,
    "NO_CONTRACT_CODE": ErrorCategory.CONTRACT_CODE_NOT_FOUND,
    "METHOD_NOT_FOUND": ErrorCategory.METHOD_NOT_FOUND,
    "UNKNOWN_ACCOUNT": ErrorCategory.ACCOUNT_DOES_NOT_EXIST,
}

TEMPLATES: Dict[ErrorCategory, str] = {
    ErrorCategory.ACCOUNT_DOES_NOT_EXIST: "Account {account_id} does not exist on {network_id}.",
    ErrorCategory.ACCOUNT_ALREADY_EXISTS: "Account {account_id} already exists.",
    ErrorCategory.CREATE_ACCOUNT_NOT_ALLOWED: (
        "{headline} Check if the suffix '{suffix}' is valid and doesn't conflict "
        "with existing implicit accounts."
    ),
    ErrorCategory.DELETE_ACCOUNT_NOT_EMPTY: (
        "Account {signer_id} cannot be deleted because it still has enough balance "
        "to cover storage. Ensure the balance is near zero."
    ),
    ErrorCategory.INSUFFICIENT_BALANCE: (
        "Account {signer_id} does not have enough balance to cover this transaction "
        "and its gas fees."
    ),
    ErrorCategory.METHOD_NOT_FOUND: 'Method "{method_name}" not found on contract {contract_id}.',
    ErrorCategory.CONTRACT_CODE_NOT_FOUND: "Account {contract_id} does not have a contract deployed.",
    ErrorCategory.CONTRACT_SIZE_EXCEEDED: "Contract size ({contract_size} bytes) exceeds the limit.",
    ErrorCategory.KEY_ALREADY_EXISTS: "Public key {public_key} already exists for account {signer_id}.",
    ErrorCategory.KEY_NOT_FOUND: "Public key {public_key} does not exist for account {signer_id}.",
}

OPERATION_TEMPLATES: Dict[Tuple[str, ErrorCategory], str] = {
    ("delete_account", ErrorCategory.ACCOUNT_DOES_NOT_EXIST): (
        "Account {beneficiary_id} (beneficiary) does not exist on {network_id}."
    ),
    ("call_function", ErrorCategory.ACCOUNT_DOES_NOT_EXIST): (
        "Contract account {contract_id} does not exist on {network_id}."
    ),
    ("view_function", ErrorCategory.ACCOUNT_DOES_NOT_EXIST): (
        "Contract account {contract_id} does not exist on {network_id}."
    ),
    ("send_tokens", ErrorCategory.INSUFFICIENT_BALANCE): (
        "Account {signer_id} does not have enough balance to send {amount} NEAR "
        "and cover gas fees."
    ),
    ("deploy_contract", ErrorCategory.ACCOUNT_ALREADY_EXISTS): (
        "Account {signer_id} seems to already exist with code? This might indicate an issue."
    ),
}


@dataclass(frozen=True)
class OperationContext:
    """Who did what: fills the message templates for one tool call."""

    operation: str
    headline: str
    network_id: str
    signer_id: str
    subjects: Mapping[str, str] = field(default_factory=dict)

    def fields(self) -> Dict[str, str]:
        values = dict(self.subjects)
        values.update(
            headline=self.headline,
            network_id=self.network_id,
            signer_id=self.signer_id,
        )
        return values


@dataclass(frozen=True)
class ClassifiedError:
    category: ErrorCategory
    detail_message: str
    contract_error: Optional[str] = None


def category_for(failure: LedgerFailure) -> Optional[ErrorCategory]:
    if isinstance(failure, TypedFailure):
        if failure.error_type in TYPE_CATALOG:
            return TYPE_CATALOG[failure.error_type]
        for name in (failure.cause_name, failure.error_type):
            if name in CAUSE_CATALOG:
                return CAUSE_CATALOG[name]
        return None
    if isinstance(failure, CauseFailure):
        return CAUSE_CATALOG.get(failure.cause_name)
    return None


def classify_failure(failure: LedgerFailure, context: OperationContext) -> ClassifiedError:
    category = category_for(failure)
    message = None
    if category is not None:
        message = render_template(category, context)

    if message is None:
        message = generic_message(context, failure.message)
    if category is None:
        category = (
            ErrorCategory.CONTRACT_EXECUTION_ERROR
            if failure.execution_error
            else ErrorCategory.UNCLASSIFIED_FAILURE
        )

    if failure.execution_error:
        message += f" Contract Error: {failure.execution_error}"
    return ClassifiedError(
        category=category,
        detail_message=message,
        contract_error=failure.execution_error,
    )


def classify_exception(exc: BaseException, context: OperationContext) -> ClassifiedError:
    """Classify anything raised while serving one tool call."""

    if isinstance(exc, LedgerError):
        return classify_failure(exc.failure, context)
    if isinstance(exc, ToolInputError):
        return ClassifiedError(
            category=exc.category,
            detail_message=generic_message(context, str(exc)),
        )
    return ClassifiedError(
        category=ErrorCategory.UNCLASSIFIED_FAILURE,
        detail_message=generic_message(context, str(exc)),
    )


def render_template(category: ErrorCategory, context: OperationContext) -> Optional[str]:
    """Fill the category's template, or ``None`` if a subject it names is unknown."""

    template = OPERATION_TEMPLATES.get((context.operation, category), TEMPLATES.get(category))
    if template is None:
        return None
    values = context.fields()
    names = {name for _, name, _, _ in string.Formatter().parse(template) if name}
    missing = names - values.keys()
    if missing:
        logger.debug("No %s for %s message on %s", sorted(missing), category.value, context.operation)
        return None
    return template.format(**values)


def generic_message(context: OperationContext, reason: Optional[str]) -> str:
    if reason:
        return f"{context.headline} Reason: {reason}"
    return context.headline
