import os
from dataclasses import dataclass
from typing import Any, Dict, Optional

import streamlit as st


DEFAULT_MODEL = "gemini-3-flash-preview"
DEFAULT_DATA_FILE = "studyhub_data.json"
DEFAULT_REFRESH_SECONDS = 10


@dataclass(frozen=True)
class Settings:
    gemini_api_key: str = ""
    gemini_model: str = DEFAULT_MODEL
    data_file: str = DEFAULT_DATA_FILE
    student_name: str = "Ishana"
    program: str = "BBA Section 3B"
    refresh_seconds: int = DEFAULT_REFRESH_SECONDS
    log_level: str = "INFO"
    log_file: Optional[str] = None

    @property
    def chat_enabled(self) -> bool:
        return bool(self.gemini_api_key)


def _secrets_section(name: str) -> Dict[str, Any]:
    try:
        s = st.secrets.get(name, {})
        # st.secrets sections are AttrDict, not plain dict
        return dict(s) if hasattr(s, "keys") else {}
    except Exception:
        return {}


def _secret_flat(name: str) -> str:
    try:
        return str(st.secrets.get(name, "") or "").strip()
    except Exception:
        return ""


def _lookup(section: Dict[str, Any], nested_key: str, flat_key: str, default: str = "") -> str:
    """
    Supports BOTH secrets formats, then the environment:

    A) Nested:
      [gemini]
      api_key = "..."

    B) Flat:
      GEMINI_API_KEY = "..."
    """
    val = str(section.get(nested_key, "") or "").strip()
    if val:
        return val
    val = _secret_flat(flat_key)
    if val:
        return val
    return os.environ.get(flat_key, "").strip() or default


def _coerce_positive_int(x: Any, default: int) -> int:
    try:
        val = int(x)
    except Exception:
        return default
    return val if val > 0 else default


def load_settings() -> Settings:
    gemini = _secrets_section("gemini")
    app = _secrets_section("studyhub")

    return Settings(
        gemini_api_key=_lookup(gemini, "api_key", "GEMINI_API_KEY"),
        gemini_model=_lookup(gemini, "model", "GEMINI_MODEL", DEFAULT_MODEL),
        data_file=_lookup(app, "data_file", "STUDYHUB_DATA_FILE", DEFAULT_DATA_FILE),
        student_name=_lookup(app, "student_name", "STUDYHUB_STUDENT_NAME", "Ishana"),
        program=_lookup(app, "program", "STUDYHUB_PROGRAM", "BBA Section 3B"),
        refresh_seconds=_coerce_positive_int(
            _lookup(app, "refresh_seconds", "STUDYHUB_REFRESH_SECONDS"), DEFAULT_REFRESH_SECONDS
        ),
        log_level=_lookup(app, "log_level", "STUDYHUB_LOG_LEVEL", "INFO").upper(),
        log_file=_lookup(app, "log_file", "STUDYHUB_LOG_FILE") or None,
    )
