"""
Configuration Tests

Tests for reading MERKLE_* settings from the environment.
"""

import unittest
from unittest.mock import patch
import sys
import os

# Add src directory to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from merkle_proofs.config import Settings, get_settings, reset_settings
from merkle_proofs.constants import NodeEncoding, DEFAULT_MAX_LEAVES

_MERKLE_VARS = (
    "MERKLE_NODE_ENCODING",
    "MERKLE_MAX_LEAVES",
    "MERKLE_API_HOST",
    "MERKLE_API_PORT",
    "MERKLE_LOG_LEVEL",
    "MERKLE_CORS_ORIGINS",
)


def clean_env(**values):
    env = {k: v for k, v in os.environ.items() if k not in _MERKLE_VARS}
    env.update(values)
    return patch.dict(os.environ, env, clear=True)


class TestSettings(unittest.TestCase):

    def setUp(self):
        reset_settings()

    def tearDown(self):
        reset_settings()

    def test_defaults(self):
        with clean_env():
            settings = Settings.from_env()
        self.assertEqual(settings.node_encoding, NodeEncoding.BYTES)
        self.assertEqual(settings.max_leaves, DEFAULT_MAX_LEAVES)
        self.assertEqual(settings.api_host, "127.0.0.1")
        self.assertEqual(settings.api_port, 8000)
        self.assertEqual(settings.log_level, "INFO")
        self.assertEqual(settings.cors_origins, ("*",))

    def test_overrides(self):
        with clean_env(
            MERKLE_NODE_ENCODING="HEX",
            MERKLE_MAX_LEAVES="10",
            MERKLE_API_HOST="0.0.0.0",
            MERKLE_API_PORT="9001",
            MERKLE_LOG_LEVEL="debug",
            MERKLE_CORS_ORIGINS="https://a.example, https://b.example",
        ):
            settings = Settings.from_env()
        self.assertEqual(settings.node_encoding, NodeEncoding.HEX)
        self.assertEqual(settings.max_leaves, 10)
        self.assertEqual(settings.api_host, "0.0.0.0")
        self.assertEqual(settings.api_port, 9001)
        self.assertEqual(settings.log_level, "DEBUG")
        self.assertEqual(settings.cors_origins, ("https://a.example", "https://b.example"))

    def test_invalid_values(self):
        cases = {
            "MERKLE_NODE_ENCODING": "base64",
            "MERKLE_MAX_LEAVES": "0",
            "MERKLE_API_PORT": "70000",
            "MERKLE_LOG_LEVEL": "LOUD",
        }
        for name, value in cases.items():
            with self.subTest(variable=name):
                with clean_env(**{name: value}):
                    with self.assertRaises(ValueError) as ctx:
                        Settings.from_env()
                self.assertIn(name, str(ctx.exception))

    def test_non_integer(self):
        with clean_env(MERKLE_MAX_LEAVES="many"):
            with self.assertRaises(ValueError) as ctx:
                Settings.from_env()
        self.assertIn("MERKLE_MAX_LEAVES", str(ctx.exception))

    def test_get_settings_is_cached(self):
        with clean_env(MERKLE_MAX_LEAVES="5"):
            first = get_settings()
        with clean_env(MERKLE_MAX_LEAVES="6"):
            self.assertIs(get_settings(), first)
            reset_settings()
            self.assertEqual(get_settings().max_leaves, 6)


if __name__ == '__main__':
    unittest.main()
