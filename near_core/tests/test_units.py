"""Precision and edge-case tests for display/base unit conversion."""

import unittest

from near_core.errors import ErrorCategory, InvalidAmountFormat
from near_core.units import (
    NEAR_NOMINATION,
    TGAS,
    U64_MAX,
    U128_MAX,
    gas_display_to_base,
    ledger_amount,
    ledger_gas,
    parse_base_units,
    to_base_units,
    to_display_units,
)


class ToBaseUnitsTests(unittest.TestCase):
    def test_half_near(self) -> None:
        self.assertEqual(to_base_units("0.5"), 5 * 10**23)

    def test_whole_and_fraction_forms(self) -> None:
        self.assertEqual(to_base_units("1"), NEAR_NOMINATION)
        self.assertEqual(to_base_units("1."), NEAR_NOMINATION)
        self.assertEqual(to_base_units(".25"), 25 * 10**22)
        self.assertEqual(to_base_units("0"), 0)
        self.assertEqual(to_base_units(" 2.5 "), 25 * 10**23)

    def test_smallest_unit(self) -> None:
        self.assertEqual(to_base_units("0." + "0" * 23 + "1"), 1)

    def test_exceeds_64_bit_range(self) -> None:
        value = to_base_units("123456789012345678901234567890")
        self.assertEqual(value, 123456789012345678901234567890 * NEAR_NOMINATION)
        self.assertGreater(value, 2**128)

    def test_rejects_malformed(self) -> None:
        for bad in ("abc", "", ".", "1.2.3", "-1", "1e5", "1,000", "0x10", " "):
            with self.subTest(value=bad):
                with self.assertRaises(InvalidAmountFormat) as ctx:
                    to_base_units(bad)
                self.assertEqual(ctx.exception.category, ErrorCategory.INVALID_AMOUNT_FORMAT)

    def test_rejects_too_many_fraction_digits(self) -> None:
        with self.assertRaises(InvalidAmountFormat):
            to_base_units("0." + "1" * 25)

    def test_error_is_value_error(self) -> None:
        with self.assertRaises(ValueError):
            to_base_units("abc")


class ToDisplayUnitsTests(unittest.TestCase):
    def test_default_precision_rounds_half_up(self) -> None:
        self.assertEqual(to_display_units(str(NEAR_NOMINATION)), "1")
        self.assertEqual(to_display_units("1234560000000000000000000"), "1.23456")
        self.assertEqual(to_display_units("1234565000000000000000000"), "1.23457")
        self.assertEqual(to_display_units("1234564999999999999999999"), "1.23456")

    def test_small_values_round_to_zero(self) -> None:
        self.assertEqual(to_display_units("1"), "0")
        self.assertEqual(to_display_units("0"), "0")

    def test_large_values(self) -> None:
        self.assertEqual(to_display_units(str(10**30)), "1000000")

    def test_accepts_int(self) -> None:
        self.assertEqual(to_display_units(5 * 10**23), "0.5")

    def test_malformed_input_returned_unchanged(self) -> None:
        for raw in ("abc", "-5", "1.5", ""):
            with self.subTest(value=raw):
                self.assertEqual(to_display_units(raw), raw)

    def test_round_trip_full_precision(self) -> None:
        for display in ("0.5", "1", "12." + "0" * 23 + "1", "0.1", "987654321.123"):
            with self.subTest(value=display):
                self.assertEqual(to_display_units(to_base_units(display), precision=24), display)

    def test_round_trip_normalizes_trailing_zeroes(self) -> None:
        self.assertEqual(to_display_units(to_base_units("1.500"), precision=24), "1.5")
        self.assertEqual(to_display_units(to_base_units("2.0"), precision=24), "2")


class GasConversionTests(unittest.TestCase):
    def test_default_gas(self) -> None:
        self.assertEqual(gas_display_to_base("30"), 30 * 10**12)
        self.assertEqual(TGAS, 10**12)

    def test_no_upper_bound(self) -> None:
        self.assertEqual(gas_display_to_base("1000000"), 10**18)

    def test_rejects_non_integer(self) -> None:
        for bad in ("30.5", "abc", "", "-1"):
            with self.subTest(value=bad):
                with self.assertRaises(InvalidAmountFormat):
                    gas_display_to_base(bad)


class BaseUnitParsingTests(unittest.TestCase):
    def test_whole_yocto_passes_through(self) -> None:
        self.assertEqual(parse_base_units("1000000000000000000000000"), NEAR_NOMINATION)

    def test_decimal_rejected(self) -> None:
        for bad in ("1.5", "1e24", ""):
            with self.subTest(value=bad):
                with self.assertRaises(InvalidAmountFormat):
                    parse_base_units(bad)


class LedgerRangeTests(unittest.TestCase):
    def test_conversion_itself_is_unbounded(self) -> None:
        self.assertEqual(to_base_units("400000000000000"), 4 * 10**38)

    def test_u128_boundary(self) -> None:
        self.assertEqual(ledger_amount(U128_MAX, "max"), U128_MAX)
        with self.assertRaises(InvalidAmountFormat) as ctx:
            ledger_amount(U128_MAX + 1, "too much")
        self.assertIn('"too much"', str(ctx.exception))
        self.assertEqual(ctx.exception.category, ErrorCategory.INVALID_AMOUNT_FORMAT)

    def test_u64_gas_boundary(self) -> None:
        self.assertEqual(ledger_gas(U64_MAX, "max"), U64_MAX)
        with self.assertRaises(InvalidAmountFormat):
            ledger_gas(gas_display_to_base("18446745"), "18446745")


if __name__ == "__main__":
    unittest.main()
