"""Process configuration, read once from the environment.

Vendor credentials are optional at startup: a gateway whose credential is
missing fails on its first call with a ConfigurationError instead.
"""

import logging
import os
from dataclasses import dataclass
from typing import Mapping, Optional

DEFAULT_TTS_LANGUAGE = "ko-KR"
DEFAULT_TTS_VOICE = "ko-KR-Standard-A"
DEFAULT_TIMEOUT_SECONDS = 30.0
DEFAULT_MAX_RETRIES = 2


@dataclass(frozen=True)
class Settings:
    gcp_tts_credentials_json: Optional[str] = None
    tts_language: str = DEFAULT_TTS_LANGUAGE
    tts_voice: str = DEFAULT_TTS_VOICE
    yt_api_key: Optional[str] = None
    vendor_timeout: float = DEFAULT_TIMEOUT_SECONDS
    vendor_max_retries: int = DEFAULT_MAX_RETRIES
    log_level: int = logging.INFO

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        env = os.environ if environ is None else environ

        log_level_str = env.get("LOG_LEVEL") or "INFO"
        log_level = getattr(logging, log_level_str.upper(), None)
        if not isinstance(log_level, int):
            raise ValueError(f"Invalid LOG_LEVEL: {log_level_str}")

        timeout_str = env.get("VENDOR_TIMEOUT_SECONDS")
        try:
            timeout = float(timeout_str) if timeout_str else DEFAULT_TIMEOUT_SECONDS
        except ValueError:
            raise ValueError(f"Invalid VENDOR_TIMEOUT_SECONDS: {timeout_str}")
        if timeout <= 0:
            raise ValueError(f"Invalid VENDOR_TIMEOUT_SECONDS: {timeout_str}")

        retries_str = env.get("VENDOR_MAX_RETRIES")
        try:
            retries = int(retries_str) if retries_str else DEFAULT_MAX_RETRIES
        except ValueError:
            raise ValueError(f"Invalid VENDOR_MAX_RETRIES: {retries_str}")
        if retries < 0:
            raise ValueError(f"Invalid VENDOR_MAX_RETRIES: {retries_str}")

        return cls(
            gcp_tts_credentials_json=_optional(env.get("GCP_TTS_CREDENTIALS_JSON")),
            tts_language=_optional(env.get("GCP_TTS_LANGUAGE")) or DEFAULT_TTS_LANGUAGE,
            tts_voice=_optional(env.get("GCP_TTS_VOICE")) or DEFAULT_TTS_VOICE,
            yt_api_key=_optional(env.get("YT_API_KEY")),
            vendor_timeout=timeout,
            vendor_max_retries=retries,
            log_level=log_level,
        )


def _optional(value: Optional[str]) -> Optional[str]:
    if value is None or not value.strip():
        return None
    return value.strip()
