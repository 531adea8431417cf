"""Fixed-point conversions between display amounts and ledger base units."""

import re
from typing import Union

from .errors import InvalidAmountFormat

NEAR_NOMINATION_EXP = 24
NEAR_NOMINATION = 10**NEAR_NOMINATION_EXP
TGAS = 10**12
DEFAULT_DISPLAY_PRECISION = 5
U64_MAX = 2**64 - 1
U128_MAX = 2**128 - 1

_DECIMAL_PATTERN = re.compile(r"^(?P<whole>[0-9]*)(?:\.(?P<frac>[0-9]*))?$")
_INTEGER_PATTERN = re.compile(r"^[0-9]+$")


def to_base_units(display: str) -> int:
    """Parse a decimal NEAR amount such as ``"0.5"`` into yoctoNEAR."""

    text = display.strip() if isinstance(display, str) else ""
    match = _DECIMAL_PATTERN.match(text)
    if not text or match is None:
        raise InvalidAmountFormat(_amount_message(display))

    whole = match.group("whole")
    frac = match.group("frac") or ""
    if not whole and not frac:
        raise InvalidAmountFormat(_amount_message(display))
    if len(frac) > NEAR_NOMINATION_EXP:
        raise InvalidAmountFormat(
            f"Cannot parse '{display}' as NEAR amount: more than "
            f"{NEAR_NOMINATION_EXP} fractional digits."
        )

    return int((whole or "0") + frac.ljust(NEAR_NOMINATION_EXP, "0"))


def to_display_units(
    base_units: Union[int, str], precision: int = DEFAULT_DISPLAY_PRECISION
) -> str:
    """Render yoctoNEAR as a decimal string rounded half-up to ``precision`` digits.

    Display is best-effort: malformed input is returned unchanged.
    """

    raw = str(base_units)
    if not _INTEGER_PATTERN.match(raw) or precision < 0:
        return raw

    value = int(raw)
    rounding_exp = NEAR_NOMINATION_EXP - precision - 1
    if rounding_exp >= 0:
        value += 5 * 10**rounding_exp

    digits = str(value)
    whole = digits[:-NEAR_NOMINATION_EXP] or "0"
    fraction = digits[-NEAR_NOMINATION_EXP:].rjust(NEAR_NOMINATION_EXP, "0")
    fraction = fraction[:precision].rstrip("0")
    return f"{whole}.{fraction}" if fraction else whole


def gas_display_to_base(display: str) -> int:
    """Convert whole TGas (``"30"``) into gas units."""

    text = display.strip() if isinstance(display, str) else ""
    if not _INTEGER_PATTERN.match(text):
        raise InvalidAmountFormat(
            f'Invalid gas amount: "{display}". Use a whole number of TGas like "30".'
        )
    return int(text) * TGAS


def _amount_message(display: object) -> str:
    return f'Invalid NEAR amount format: "{display}". Use a decimal number like "0.5".'


def parse_base_units(text: str) -> int:
    """Parse an amount already given in yoctoNEAR."""

    value = text.strip() if isinstance(text, str) else ""
    if not _INTEGER_PATTERN.match(value):
        raise InvalidAmountFormat(
            f'Invalid yoctoNEAR amount: "{text}". Use a whole number of yoctoNEAR.'
        )
    return int(value)


def ledger_amount(value: int, display: object) -> int:
    """Check that a base-unit amount fits the ledger's u128 balance field."""

    if not 0 <= value <= U128_MAX:
        raise InvalidAmountFormat(
            f'Amount "{display}" is out of range for the ledger (at most {U128_MAX} yoctoNEAR).'
        )
    return value


def ledger_gas(value: int, display: object) -> int:
    """Check that a gas amount fits the ledger's u64 gas field."""

    if not 0 <= value <= U64_MAX:
        raise InvalidAmountFormat(
            f'Gas amount "{display}" is out of range for the ledger (at most {U64_MAX} gas).'
        )
    return value
