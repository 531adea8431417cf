from .assembler import BatchValidationError, TransactionAssembler, validate_batch
from .models import (
    FULL_ACCESS,
    AbstractAction,
    AddKey,
    CreateAccount,
    DeleteAccount,
    DeleteKey,
    DeployContract,
    FunctionCall,
    FunctionCallPermission,
    Stake,
    Transfer,
)
from .translator import TranslationError, translate

__all__ = [
    "FULL_ACCESS",
    "AbstractAction",
    "AddKey",
    "BatchValidationError",
    "CreateAccount",
    "DeleteAccount",
    "DeleteKey",
    "DeployContract",
    "FunctionCall",
    "FunctionCallPermission",
    "Stake",
    "TransactionAssembler",
    "TranslationError",
    "Transfer",
    "translate",
    "validate_batch",
]
