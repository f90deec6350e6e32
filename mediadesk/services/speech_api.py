"""Google Cloud Text-to-Speech client (REST v1).

Authenticates with a service-account JSON blob through google-auth. The
authorized session is built on first use, so a missing or broken credential
surfaces as a ConfigurationError on the first call rather than at startup.
"""

import base64
import binascii
import json
import logging
import re
from typing import Any, Dict, List, Optional

import requests
from google.auth.exceptions import GoogleAuthError
from google.auth.transport.requests import AuthorizedSession
from google.oauth2 import service_account

from mediadesk.core.errors import ConfigurationError, SynthesisError, UpstreamError
from mediadesk.schemas.speech import DEFAULT_PITCH, DEFAULT_SPEAKING_RATE, VoiceDescriptor

logger = logging.getLogger(__name__)

BASE_URL = "https://texttospeech.googleapis.com/v1"
SCOPES = ["https://www.googleapis.com/auth/cloud-platform"]

# Voice names start with their language code, e.g. en-US-Neural2-A.
_VOICE_LANGUAGE = re.compile(r"^([a-z]{2,3}-[A-Z]{2})-")


class GoogleSpeechAPI:
    def __init__(
        self,
        credentials_json: Optional[str],
        language: str = "ko-KR",
        voice: str = "ko-KR-Standard-A",
        timeout: float = 30.0,
    ):
        self.credentials_json = credentials_json
        self.language = language
        self.voice = voice
        self.timeout = timeout
        self._session: Optional[AuthorizedSession] = None

        logger.info(
            f"GoogleSpeechAPI initialized (credentials={'set' if credentials_json else 'missing'}, "
            f"language={language}, voice={voice})"
        )

    def _get_session(self) -> AuthorizedSession:
        if self._session is not None:
            return self._session

        if not self.credentials_json:
            raise ConfigurationError("Missing GCP_TTS_CREDENTIALS_JSON")

        try:
            info = json.loads(self.credentials_json)
        except ValueError as e:
            raise ConfigurationError(f"GCP_TTS_CREDENTIALS_JSON is not valid JSON: {e}")
        if not isinstance(info, dict):
            raise ConfigurationError("GCP_TTS_CREDENTIALS_JSON must be a JSON object")

        try:
            credentials = service_account.Credentials.from_service_account_info(
                info, scopes=SCOPES
            )
        except (ValueError, KeyError, GoogleAuthError) as e:
            raise ConfigurationError(f"Invalid GCP_TTS_CREDENTIALS_JSON: {e}")

        self._session = AuthorizedSession(credentials)
        return self._session

    def make_request(self, method: str, endpoint: str, payload: Optional[Dict] = None) -> Dict:
        session = self._get_session()
        try:
            response = session.request(
                method, f"{BASE_URL}/{endpoint}", json=payload, timeout=self.timeout
            )
        except (requests.RequestException, GoogleAuthError) as e:
            logger.error(f"Text-to-Speech request to {endpoint} failed: {e}")
            raise UpstreamError(f"Text-to-Speech request failed: {e}")

        if response.status_code != 200:
            message = _error_message(response)
            logger.error(f"Text-to-Speech error {response.status_code} on {endpoint}: {message}")
            raise UpstreamError(message)

        try:
            body = response.json()
        except ValueError:
            body = None
        if not isinstance(body, dict):
            raise UpstreamError("Text-to-Speech returned an invalid response")
        return body

    def synthesize(
        self,
        text: str,
        voice: Optional[str] = None,
        rate: float = DEFAULT_SPEAKING_RATE,
        pitch: float = DEFAULT_PITCH,
    ) -> bytes:
        """Synthesize ``text`` to MP3 bytes. Single attempt, no retry."""
        voice_name = voice or self.voice
        payload = {
            "input": {"text": text},
            "voice": {
                "languageCode": self.language_for(voice_name),
                "name": voice_name,
            },
            "audioConfig": {
                "audioEncoding": "MP3",
                "speakingRate": rate,
                "pitch": pitch,
            },
        }

        logger.info(f"[TTS] {len(text)} chars, voice={voice_name}, rate={rate}, pitch={pitch}")
        result = self.make_request("POST", "text:synthesize", payload)

        audio_b64 = result.get("audioContent")
        if not audio_b64:
            raise SynthesisError("no audio")
        try:
            audio = base64.b64decode(audio_b64, validate=True)
        except (binascii.Error, TypeError):
            raise SynthesisError("Text-to-Speech returned undecodable audio")
        if not audio:
            raise SynthesisError("no audio")
        return audio

    def list_voices(self) -> List[VoiceDescriptor]:
        """Every voice the vendor offers, ordered by name."""
        result = self.make_request("GET", "voices")
        items = result.get("voices")
        if not isinstance(items, list):
            items = []
        voices = [voice_from_item(item) for item in items if isinstance(item, dict)]
        voices.sort(key=lambda v: v.name)
        return voices

    def language_for(self, voice_name: str) -> str:
        match = _VOICE_LANGUAGE.match(voice_name)
        return match.group(1) if match else self.language


def voice_from_item(item: Dict[str, Any]) -> VoiceDescriptor:
    language_codes = item.get("languageCodes")
    if not isinstance(language_codes, list):
        language_codes = []
    try:
        sample_rate = int(item.get("naturalSampleRateHertz") or 0)
    except (TypeError, ValueError):
        sample_rate = 0
    return VoiceDescriptor(
        name=str(item.get("name") or ""),
        language_codes=[str(code) for code in language_codes if code],
        ssml_gender=str(item.get("ssmlGender") or "SSML_VOICE_GENDER_UNSPECIFIED"),
        natural_sample_rate_hertz=sample_rate,
    )


def _error_message(response: requests.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        body = None

    if isinstance(body, dict):
        error = body.get("error")
        if isinstance(error, dict) and error.get("message"):
            return str(error["message"])

    return f"Text-to-Speech error {response.status_code}"
