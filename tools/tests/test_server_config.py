import logging
import os
import sys
import tempfile
import unittest
from unittest import mock

from wallet_core.keys import KeyPair, implicit_account_id
from wallet_core.seed import parse_seed_phrase

from tools.config import ConfigError, ServerConfig, configure_logging, default_node_url
from tools.connection import NearConnection, load_key_pair

SECRET = KeyPair.from_seed(b"\x05" * 32)
PHRASE = (
    "abandon abandon abandon abandon abandon abandon "
    "abandon abandon abandon abandon abandon about"
)


class FromEnvTests(unittest.TestCase):
    def test_minimal_testnet(self) -> None:
        config = ServerConfig.from_env({"MNEMONIC": PHRASE, "NEAR_NETWORK_ID": "testnet"})
        self.assertEqual(config.network_id, "testnet")
        self.assertEqual(config.node_url, "https://rpc.testnet.near.org")
        self.assertEqual(config.mnemonic, PHRASE)
        self.assertIsNone(config.account_id)
        self.assertIsNone(config.rpc_timeout)
        self.assertEqual(config.log_level, "INFO")

    def test_overrides(self) -> None:
        config = ServerConfig.from_env(
            {
                "NEAR_SECRET_KEY": SECRET.to_string(),
                "NEAR_NETWORK_ID": "mainnet",
                "NEAR_NODE_URL": "http://localhost:3030",
                "NEAR_ACCOUNT_ID": "alice.near",
                "NEAR_RPC_TIMEOUT": "2.5",
                "LOG_LEVEL": "debug",
            }
        )
        self.assertEqual(config.node_url, "http://localhost:3030")
        self.assertEqual(config.account_id, "alice.near")
        self.assertEqual(config.rpc_timeout, 2.5)
        self.assertEqual(config.log_level, "DEBUG")

    def test_missing_key_material(self) -> None:
        with self.assertRaises(ConfigError) as ctx:
            ServerConfig.from_env({"NEAR_NETWORK_ID": "testnet", "MNEMONIC": "   "})
        self.assertEqual(str(ctx.exception), "MNEMONIC environment variable is not set.")

    def test_missing_network(self) -> None:
        with self.assertRaises(ConfigError) as ctx:
            ServerConfig.from_env({"MNEMONIC": PHRASE})
        self.assertEqual(
            str(ctx.exception),
            "NEAR_NETWORK_ID environment variable is not set (e.g., 'testnet' or 'mainnet').",
        )

    def test_bad_timeouts(self) -> None:
        for value in ("soon", "0", "-1"):
            with self.subTest(value=value):
                with self.assertRaises(ConfigError):
                    ServerConfig.from_env(
                        {"MNEMONIC": PHRASE, "NEAR_NETWORK_ID": "testnet", "NEAR_RPC_TIMEOUT": value}
                    )

    def test_dotenv_is_read_from_working_directory(self) -> None:
        with tempfile.TemporaryDirectory() as workdir:
            with open(os.path.join(workdir, ".env"), "w", encoding="utf-8") as handle:
                handle.write(f"MNEMONIC={PHRASE}\nNEAR_NETWORK_ID=mainnet\n")
            previous = os.getcwd()
            os.chdir(workdir)
            try:
                with mock.patch.dict("os.environ", {}, clear=True):
                    config = ServerConfig.from_env()
            finally:
                os.chdir(previous)
        self.assertEqual(config.network_id, "mainnet")
        self.assertEqual(config.mnemonic, PHRASE)

    def test_default_node_url_falls_back_to_testnet(self) -> None:
        self.assertEqual(default_node_url("mainnet"), "https://rpc.mainnet.near.org")
        self.assertEqual(default_node_url("localnet"), "https://rpc.testnet.near.org")


class LoggingSetupTests(unittest.TestCase):
    def setUp(self) -> None:
        root = logging.getLogger()
        self.saved = (list(root.handlers), root.level)

    def tearDown(self) -> None:
        root = logging.getLogger()
        root.handlers[:] = self.saved[0]
        root.setLevel(self.saved[1])

    def test_single_stderr_handler(self) -> None:
        configure_logging("WARNING")
        configure_logging("DEBUG")
        root = logging.getLogger()
        self.assertEqual(len(root.handlers), 1)
        self.assertIs(root.handlers[0].stream, sys.stderr)
        self.assertEqual(root.level, logging.DEBUG)


class ConnectionTests(unittest.TestCase):
    def config(self, **overrides) -> ServerConfig:
        values = dict(network_id="testnet", node_url="http://node", secret_key=SECRET.to_string())
        values.update(overrides)
        return ServerConfig(**values)

    def test_secret_key_wins_over_mnemonic(self) -> None:
        pair = load_key_pair(self.config(mnemonic=PHRASE))
        self.assertEqual(pair.public_key, SECRET.public_key)

    def test_mnemonic(self) -> None:
        pair = load_key_pair(self.config(secret_key=None, mnemonic=PHRASE))
        self.assertEqual(pair, parse_seed_phrase(PHRASE))

    def test_bad_secret_key(self) -> None:
        with self.assertRaises(ConfigError):
            load_key_pair(self.config(secret_key="ed25519:abc"))

    def test_ensure_ready_is_idempotent(self) -> None:
        provider = object()
        connection = NearConnection(self.config(account_id="alice.testnet"), provider=provider)
        with self.assertLogs("tools.connection", level="INFO"):
            account = connection.ensure_ready()
        self.assertIs(connection.ensure_ready(), account)
        self.assertIs(account.provider, provider)
        self.assertEqual(account.account_id, "alice.testnet")
        self.assertEqual(
            account.signer.get_public_key("alice.testnet", "testnet"), SECRET.public_key
        )

    def test_implicit_account_when_unset(self) -> None:
        connection = NearConnection(self.config(), provider=object())
        account = connection.ensure_ready()
        self.assertEqual(account.account_id, implicit_account_id(SECRET.public_key))

    def test_default_provider_uses_node_url(self) -> None:
        connection = NearConnection(self.config(rpc_timeout=3.0))
        provider = connection.ensure_ready().provider
        self.assertEqual(provider.url, "http://node")
        self.assertEqual(provider.timeout, 3.0)


if __name__ == "__main__":
    unittest.main()
