"""
Tests for the Gemini chat collaborator.

A fake client stands in for google.genai.Client; no request leaves the
machine.
"""

import base64
import unittest
from types import SimpleNamespace

from studyhub.chat import ChatError, get_study_tips, parse_data_url, send_chat, to_data_url
from studyhub.config import Settings
from studyhub.constants import EMPTY_REPLY_TEXT, TIPS_FALLBACK_TEXT


class FakeModels:
    def __init__(self, text=None, error=None):
        self.text = text
        self.error = error
        self.calls = []

    def generate_content(self, **kwargs):
        self.calls.append(kwargs)
        if self.error is not None:
            raise self.error
        return SimpleNamespace(text=self.text)


def fake_client(text=None, error=None):
    return SimpleNamespace(models=FakeModels(text=text, error=error))


SETTINGS = Settings(gemini_api_key="test-key", gemini_model="gemini-test", student_name="Mithila")


class TestDataUrl(unittest.TestCase):
    def test_parse(self) -> None:
        url = to_data_url(b"\x89PNG", "image/png")
        self.assertTrue(url.startswith("data:image/png;base64,"))
        self.assertEqual(parse_data_url(url), ("image/png", b"\x89PNG"))

    def test_rejects_malformed(self) -> None:
        for bad in ["", "image/png;base64,AAAA", "data:;base64,AAAA", "data:image/png;base64,@@@", "data:image/png,AAAA"]:
            with self.assertRaises(ValueError, msg=bad):
                parse_data_url(bad)


class TestSendChat(unittest.TestCase):
    def test_text_only(self) -> None:
        client = fake_client(text="  Revenue minus costs.  ")
        reply = send_chat("What is profit?", settings=SETTINGS, client=client)
        self.assertEqual(reply, "Revenue minus costs.")

        (call,) = client.models.calls
        self.assertEqual(call["model"], "gemini-test")
        self.assertEqual(call["contents"], ["What is profit?"])
        self.assertIn("Mithila", call["config"].system_instruction)

    def test_with_image(self) -> None:
        client = fake_client(text="A supply curve.")
        image = "data:image/jpeg;base64," + base64.b64encode(b"jpegbytes").decode("ascii")
        send_chat("What is this?", image, settings=SETTINGS, client=client)
        contents = client.models.calls[0]["contents"]
        self.assertEqual(len(contents), 2)
        self.assertEqual(contents[0], "What is this?")
        self.assertEqual(contents[1].inline_data.mime_type, "image/jpeg")
        self.assertEqual(contents[1].inline_data.data, b"jpegbytes")

    def test_empty_reply_gets_friendly_text(self) -> None:
        self.assertEqual(send_chat("Hi", settings=SETTINGS, client=fake_client(text="")), EMPTY_REPLY_TEXT)
        self.assertEqual(send_chat("Hi", settings=SETTINGS, client=fake_client(text=None)), EMPTY_REPLY_TEXT)

    def test_api_error_raises_chat_error(self) -> None:
        with self.assertRaises(ChatError):
            send_chat("Hi", settings=SETTINGS, client=fake_client(error=ConnectionError("boom")))

    def test_bad_image_raises_chat_error(self) -> None:
        client = fake_client(text="unused")
        with self.assertRaises(ChatError):
            send_chat("Hi", "not a data url", settings=SETTINGS, client=client)
        self.assertEqual(client.models.calls, [])

    def test_missing_api_key(self) -> None:
        with self.assertRaises(ChatError):
            send_chat("Hi", settings=Settings(gemini_api_key=""))


class TestStudyTips(unittest.TestCase):
    def test_tips_prompt_names_course(self) -> None:
        client = fake_client(text="- Review weekly")
        self.assertEqual(get_study_tips("MKT 2127", settings=SETTINGS, client=client), "- Review weekly")
        self.assertIn('"MKT 2127"', client.models.calls[0]["contents"][0])

    def test_tips_never_raise(self) -> None:
        client = fake_client(error=RuntimeError("quota"))
        with self.assertLogs("studyhub.chat", level="ERROR"):
            self.assertEqual(get_study_tips("MKT 2127", settings=SETTINGS, client=client), TIPS_FALLBACK_TEXT)


if __name__ == "__main__":
    unittest.main()
