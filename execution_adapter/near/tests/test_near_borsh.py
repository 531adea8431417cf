"""Wire-format tests for Borsh transaction serialization."""

import unittest

from wallet_core.models import PublicKey, Signature

from execution_adapter.near.borsh import (
    SerializationError,
    Writer,
    serialize_signed_transaction,
    serialize_transaction,
)
from execution_adapter.near.models import (
    AddKey,
    CreateAccount,
    DeleteAccount,
    DeleteKey,
    DeployContract,
    FunctionCall,
    SignedTransaction,
    Stake,
    Transaction,
    Transfer,
    full_access_key,
    function_call_access_key,
)

KEY = PublicKey(data=bytes(range(32)))
KEY_BYTES = b"\x00" + bytes(range(32))


def u32(value: int) -> bytes:
    return value.to_bytes(4, "little")


def u64(value: int) -> bytes:
    return value.to_bytes(8, "little")


def u128(value: int) -> bytes:
    return value.to_bytes(16, "little")


def string(value: str) -> bytes:
    data = value.encode("utf-8")
    return u32(len(data)) + data


def serialize_action(action) -> bytes:
    """Bytes one action contributes to a transaction, after the action count."""

    def encode(actions) -> bytes:
        return serialize_transaction(
            Transaction(
                signer_id="a.near",
                public_key=KEY,
                nonce=0,
                receiver_id="b.near",
                block_hash=b"\x00" * 32,
                actions=actions,
            )
        )

    return encode((action,))[len(encode(())):]


class ActionSerializationTests(unittest.TestCase):
    def test_create_account_is_tag_only(self) -> None:
        self.assertEqual(serialize_action(CreateAccount()), b"\x00")

    def test_deploy_contract(self) -> None:
        self.assertEqual(
            serialize_action(DeployContract(code=b"\x00asm")),
            b"\x01" + u32(4) + b"\x00asm",
        )

    def test_function_call(self) -> None:
        action = FunctionCall(method_name="increase", args=b"{}", gas=30 * 10**12, deposit=5)
        self.assertEqual(
            serialize_action(action),
            b"\x02" + string("increase") + u32(2) + b"{}" + u64(30 * 10**12) + u128(5),
        )

    def test_transfer_supports_full_u128_range(self) -> None:
        amount = 10**30
        self.assertEqual(serialize_action(Transfer(deposit=amount)), b"\x03" + u128(amount))

    def test_stake(self) -> None:
        self.assertEqual(
            serialize_action(Stake(stake=7, public_key=KEY)),
            b"\x04" + u128(7) + KEY_BYTES,
        )

    def test_add_full_access_key(self) -> None:
        action = AddKey(public_key=KEY, access_key=full_access_key())
        self.assertEqual(serialize_action(action), b"\x05" + KEY_BYTES + u64(0) + b"\x01")

    def test_add_function_call_key(self) -> None:
        limited = AddKey(
            public_key=KEY,
            access_key=function_call_access_key("app.near", ("a", "bc"), allowance=9),
        )
        self.assertEqual(
            serialize_action(limited),
            b"\x05"
            + KEY_BYTES
            + u64(0)
            + b"\x00"
            + b"\x01"
            + u128(9)
            + string("app.near")
            + u32(2)
            + string("a")
            + string("bc"),
        )

        unlimited = AddKey(public_key=KEY, access_key=function_call_access_key("app.near"))
        self.assertEqual(
            serialize_action(unlimited),
            b"\x05" + KEY_BYTES + u64(0) + b"\x00" + b"\x00" + string("app.near") + u32(0),
        )

    def test_delete_key_and_account(self) -> None:
        self.assertEqual(serialize_action(DeleteKey(public_key=KEY)), b"\x06" + KEY_BYTES)
        self.assertEqual(
            serialize_action(DeleteAccount(beneficiary_id="bob.near")),
            b"\x07" + string("bob.near"),
        )

    def test_unknown_action_rejected(self) -> None:
        with self.assertRaises(SerializationError):
            serialize_action("Transfer")  # type: ignore[arg-type]


class TransactionSerializationTests(unittest.TestCase):
    def setUp(self) -> None:
        self.transaction = Transaction(
            signer_id="alice.near",
            public_key=KEY,
            nonce=42,
            receiver_id="bob.near",
            block_hash=b"\x11" * 32,
            actions=(Transfer(deposit=1), CreateAccount()),
        )

    def test_field_order(self) -> None:
        expected = (
            string("alice.near")
            + KEY_BYTES
            + u64(42)
            + string("bob.near")
            + b"\x11" * 32
            + u32(2)
            + b"\x03"
            + u128(1)
            + b"\x00"
        )
        self.assertEqual(serialize_transaction(self.transaction), expected)

    def test_signed_transaction_appends_signature(self) -> None:
        signed = SignedTransaction(
            transaction=self.transaction, signature=Signature(data=b"\x22" * 64)
        )
        data = serialize_signed_transaction(signed)
        self.assertEqual(data[: -65], serialize_transaction(self.transaction))
        self.assertEqual(data[-65:], b"\x00" + b"\x22" * 64)

    def test_block_hash_must_be_32_bytes(self) -> None:
        broken = Transaction(
            signer_id="alice.near",
            public_key=KEY,
            nonce=1,
            receiver_id="bob.near",
            block_hash=b"\x00" * 31,
            actions=(),
        )
        with self.assertRaises(SerializationError):
            serialize_transaction(broken)


class WriterTests(unittest.TestCase):
    def test_out_of_range_integers_rejected(self) -> None:
        writer = Writer()
        with self.assertRaises(SerializationError):
            writer.write_u64(2**64)
        with self.assertRaises(SerializationError):
            writer.write_u128(-1)
        self.assertEqual(writer.to_bytes(), b"")

    def test_strings_are_utf8_with_length_prefix(self) -> None:
        writer = Writer()
        writer.write_string("é")
        self.assertEqual(writer.to_bytes(), u32(2) + "é".encode("utf-8"))


if __name__ == "__main__":
    unittest.main()
