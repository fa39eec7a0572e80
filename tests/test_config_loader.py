import os
import tempfile
import unittest
from pathlib import Path

from convo.config_loader import ConfigLoader, model_kwargs_from
from convo.errors import ConfigurationError
from convo.session import ConversationSession

BASE_CONFIG = """\
model: gpt-4o-mini
temperature: 0.5
max_tokens: 256
context: You are a film expert
"""


class TestConfigLoader(unittest.TestCase):
    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        self.path = Path(self.tmp.name) / "config.yaml"

    def tearDown(self):
        self.tmp.cleanup()

    def write(self, text):
        self.path.write_text(text, encoding="utf-8")

    def test_load_fills_defaults(self):
        self.write(BASE_CONFIG)
        config = ConfigLoader(self.path).load()
        self.assertEqual(config["model"], "gpt-4o-mini")
        self.assertEqual(config["max_messages"], 10)

    def test_model_kwargs_skip_session_keys(self):
        self.write(BASE_CONFIG + "max_messages: 6\n")
        loader = ConfigLoader(self.path)
        self.assertEqual(loader.model_kwargs(), {"temperature": 0.5, "max_tokens": 256})

    def test_session_gets_same_model_kwargs(self):
        self.write(BASE_CONFIG + "base_url: https://openrouter.ai/api/v1\n")
        loader = ConfigLoader(self.path)
        config = loader.get_config()
        expected = {"temperature": 0.5, "max_tokens": 256, "base_url": "https://openrouter.ai/api/v1"}
        self.assertEqual(model_kwargs_from(config), expected)
        self.assertEqual(loader.model_kwargs(), expected)

        client = ConversationSession.from_config(config, "sk-test").client
        self.assertEqual(client.base_url, "https://openrouter.ai/api/v1")
        self.assertEqual(client.kwargs, {"temperature": 0.5, "max_tokens": 256})

    def test_missing_file(self):
        with self.assertRaises(FileNotFoundError):
            ConfigLoader(self.path).load()

    def test_invalid_content(self):
        for text in ("temperature: 0.5\n", "- just\n- a list\n", "model: x\nmax_messages: 0\n", "model: [unclosed\n"):
            self.write(text)
            with self.assertRaises(ConfigurationError):
                ConfigLoader(self.path).load()

    def test_reload_on_change_and_keep_previous_on_error(self):
        self.write(BASE_CONFIG)
        loader = ConfigLoader(self.path)
        self.assertTrue(loader.check_and_reload()[0])
        self.assertFalse(loader.check_and_reload()[0])

        self.write(BASE_CONFIG.replace("gpt-4o-mini", "gpt-4o"))
        bump = loader.last_mtime + 10
        os.utime(self.path, (bump, bump))
        reloaded, config = loader.check_and_reload()
        self.assertTrue(reloaded)
        self.assertEqual(config["model"], "gpt-4o")

        self.write("temperature: 1.0\n")
        os.utime(self.path, (bump + 10, bump + 10))
        reloaded, config = loader.check_and_reload()
        self.assertFalse(reloaded)
        self.assertEqual(config["model"], "gpt-4o")

    def test_shipped_config_is_valid(self):
        shipped = Path(__file__).resolve().parent.parent / "config" / "config.yaml"
        config = ConfigLoader(shipped).load()
        self.assertEqual(config["max_messages"], 10)


if __name__ == '__main__':
    unittest.main()
