"""
Gemini chat collaborator.

``send_chat`` raises ``ChatError`` on any failure; the caller decides what
to show instead. ``get_study_tips`` never raises and answers with a canned
message when the model is unavailable.
"""

from __future__ import annotations

import base64
import binascii
import logging
from typing import Any, List, Optional, Tuple

from google import genai
from google.genai import types

from studyhub.config import Settings
from studyhub.constants import (
    EMPTY_REPLY_TEXT,
    PERSONA_TEMPLATE,
    STUDY_TIPS_TEMPLATE,
    TIPS_EMPTY_TEXT,
    TIPS_FALLBACK_TEXT,
)

logger = logging.getLogger(__name__)


class ChatError(RuntimeError):
    pass


def persona_for(settings: Settings) -> str:
    return PERSONA_TEMPLATE.format(name=settings.student_name, program=settings.program)


def parse_data_url(data_url: str) -> Tuple[str, bytes]:
    """
    Split "data:<mime>;base64,<payload>" into (mime, raw bytes).
    """
    head, sep, payload = str(data_url or "").partition(";base64,")
    if not sep or not head.startswith("data:"):
        raise ValueError("Image must be a base64 data URL")
    mime = head[len("data:"):].strip()
    if not mime:
        raise ValueError("Image data URL has no MIME type")
    try:
        raw = base64.b64decode(payload, validate=True)
    except (binascii.Error, ValueError) as e:
        raise ValueError(f"Image payload is not valid base64: {e}") from e
    return mime, raw


def to_data_url(raw: bytes, mime: str) -> str:
    return f"data:{mime};base64,{base64.b64encode(raw).decode('ascii')}"


def make_client(settings: Settings) -> Any:
    if not settings.gemini_api_key:
        raise ChatError("GEMINI_API_KEY is not set.")
    return genai.Client(api_key=settings.gemini_api_key)


def _generate(client: Any, model: str, contents: List[Any], system_instruction: Optional[str]) -> str:
    config = types.GenerateContentConfig(
        system_instruction=system_instruction,
        thinking_config=types.ThinkingConfig(thinking_budget=0),
    )
    resp = client.models.generate_content(model=model, contents=contents, config=config)
    return (getattr(resp, "text", None) or "").strip()


def send_chat(
    prompt: str,
    image_data_url: Optional[str] = None,
    *,
    settings: Settings,
    client: Any = None,
) -> str:
    try:
        contents: List[Any] = [prompt or ""]
        if image_data_url:
            mime, raw = parse_data_url(image_data_url)
            contents.append(types.Part.from_bytes(data=raw, mime_type=mime))

        client = client if client is not None else make_client(settings)
        text = _generate(client, settings.gemini_model, contents, persona_for(settings))
    except ChatError:
        raise
    except Exception as e:
        raise ChatError(f"Chat request failed: {e}") from e

    return text or EMPTY_REPLY_TEXT


def get_study_tips(subject: str, *, settings: Settings, client: Any = None) -> str:
    prompt = STUDY_TIPS_TEMPLATE.format(program=settings.program, subject=subject)
    try:
        client = client if client is not None else make_client(settings)
        text = _generate(client, settings.gemini_model, [prompt], None)
    except Exception:
        logger.exception("Error generating study tips for %s", subject)
        return TIPS_FALLBACK_TEXT
    return text or TIPS_EMPTY_TEXT
