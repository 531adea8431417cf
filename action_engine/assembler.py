"""Assemble an ordered action batch into one atomic transaction."""

import logging
from typing import Any, Dict, Protocol, Sequence, Tuple

from execution_adapter.near.models import NativeAction

from .models import AbstractAction, FunctionCall
from .translator import translate

logger = logging.getLogger(__name__)


class BatchValidationError(ValueError):
    """Raised when an action batch cannot be submitted as given."""


class TransactionSubmitter(Protocol):
    def sign_and_send_transaction(
        self, receiver_id: str, actions: Sequence[NativeAction]
    ) -> Dict[str, Any]:
        ...


class TransactionAssembler:
    """Translates every action up front, then submits them in a single call."""

    def __init__(self, submitter: TransactionSubmitter) -> None:
        self._submitter = submitter

    def assemble(
        self, receiver_id: str, actions: Sequence[AbstractAction]
    ) -> Tuple[NativeAction, ...]:
        validate_batch(receiver_id, actions)
        for index, action in enumerate(actions):
            if isinstance(action, FunctionCall) and action.contract_id != receiver_id:
                logger.warning(
                    "Action %d calls %s but the batch is sent to %s",
                    index,
                    action.contract_id,
                    receiver_id,
                )
        return tuple(translate(action) for action in actions)

    def submit(self, receiver_id: str, actions: Sequence[AbstractAction]) -> Dict[str, Any]:
        native_actions = self.assemble(receiver_id, actions)
        return self._submitter.sign_and_send_transaction(receiver_id, native_actions)


def validate_batch(receiver_id: str, actions: Sequence[AbstractAction]) -> None:
    if not receiver_id:
        raise BatchValidationError("Batch receiver must be a non-empty account id.")
    if not actions:
        raise BatchValidationError("Batch must include at least one action.")
