"""
End-to-end tests for the Streamlit page, driven through AppTest.

Each test points the data file at a temp dir and runs without a Gemini key,
so the chat always answers with the fallback message.
"""

import json
import os
import tempfile
import unittest
from pathlib import Path
from unittest import mock

from streamlit.testing.v1 import AppTest

from studyhub.constants import CHAT_FALLBACK_TEMPLATE

APP_PATH = str(Path(__file__).resolve().parent.parent / "app.py")


class AppTestCase(unittest.TestCase):
    def setUp(self) -> None:
        tmp = tempfile.TemporaryDirectory()
        self.addCleanup(tmp.cleanup)
        self.tmp = Path(tmp.name)
        self.data_file = self.tmp / "studyhub.json"
        self.use_data_file(self.data_file)

    def use_data_file(self, path: Path) -> None:
        env = {
            "STUDYHUB_DATA_FILE": str(path),
            "STUDYHUB_STUDENT_NAME": "Mithila",
            "GEMINI_API_KEY": "",
        }
        patcher = mock.patch.dict(os.environ, env)
        patcher.start()
        self.addCleanup(patcher.stop)

    def run_app(self) -> AppTest:
        at = AppTest.from_file(APP_PATH, default_timeout=30)
        at.run()
        self.assertEqual(len(at.exception), 0)
        return at

    def stored(self, key: str):
        data = json.loads(self.data_file.read_text(encoding="utf-8"))
        return json.loads(data[key])


class TestPage(AppTestCase):
    def test_renders_all_tabs(self) -> None:
        at = self.run_app()
        self.assertEqual([t.label for t in at.tabs], ["Home", "Academic", "Performance", "Ask Me"])

    def test_manual_present_is_stored(self) -> None:
        at = self.run_app()
        at.button(key="perf_mp_MKT 2127").click().run()
        self.assertEqual(len(at.exception), 0)

        attendance = self.stored("attendance")
        self.assertEqual(len(attendance), 1)
        (key, value), = attendance.items()
        self.assertTrue(key.startswith("MKT 2127-MANUAL-"))
        self.assertIs(value, True)

    def test_chat_without_key_gets_fallback_reply(self) -> None:
        at = self.run_app()
        at.chat_input[0].set_value("hello").run()
        self.assertEqual(len(at.exception), 0)

        app = at.session_state["app"]
        self.assertEqual(
            [(m.role, m.content) for m in app.chat_history],
            [("user", "hello"), ("assistant", CHAT_FALLBACK_TEMPLATE.format(name="Mithila"))],
        )
        self.assertEqual(at.session_state["uploader_nonce"], 1)
        self.assertEqual([m["role"] for m in self.stored("chatHistory")], ["user", "assistant"])


class TestSaveFailure(AppTestCase):
    def test_write_failure_is_shown(self) -> None:
        # a regular file where the data directory should be
        blocker = self.tmp / "blocker"
        blocker.write_text("", encoding="utf-8")
        self.use_data_file(blocker / "studyhub.json")

        at = self.run_app()
        at.button(key="perf_mp_MKT 2127").click().run()
        self.assertEqual(len(at.exception), 0)

        errors = [e.value for e in at.error]
        self.assertTrue(any(str(v).startswith("Error saving data") for v in errors), errors)
        # the change is kept in memory even though the write failed
        self.assertEqual(len(at.session_state["app"].attendance), 1)


if __name__ == "__main__":
    unittest.main()
