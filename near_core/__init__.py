from .codec import (
    base64_byte_length,
    decode_base64,
    decode_return_value,
    decode_text_or_marker,
    encode_args,
    encode_base64,
    format_return_value,
)
from .errors import (
    ArgEncodingError,
    ErrorCategory,
    InvalidAmountFormat,
    InvalidBase64,
    InvalidPublicKey,
    ToolInputError,
)
from .units import (
    gas_display_to_base,
    ledger_amount,
    ledger_gas,
    parse_base_units,
    to_base_units,
    to_display_units,
)

__all__ = [
    "ArgEncodingError",
    "ErrorCategory",
    "InvalidAmountFormat",
    "InvalidBase64",
    "InvalidPublicKey",
    "ToolInputError",
    "base64_byte_length",
    "decode_base64",
    "decode_return_value",
    "decode_text_or_marker",
    "encode_args",
    "encode_base64",
    "format_return_value",
    "gas_display_to_base",
    "ledger_amount",
    "ledger_gas",
    "parse_base_units",
    "to_base_units",
    "to_display_units",
]
