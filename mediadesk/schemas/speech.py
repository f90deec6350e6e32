"""Schemas for the text-to-speech endpoints."""

from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

DEFAULT_SPEAKING_RATE = 1.05
DEFAULT_PITCH = 0.0


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


class SynthesisRequest(BaseModel):
    text: str = Field(default="", validate_default=True)
    voice: Optional[str] = None
    rate: float = Field(default=DEFAULT_SPEAKING_RATE, ge=0.25, le=4.0)
    pitch: float = Field(default=DEFAULT_PITCH, ge=-20.0, le=20.0)

    @field_validator("text", mode="before")
    @classmethod
    def _require_text(cls, value: Any) -> str:
        if not isinstance(value, str) or not value:
            raise ValueError("text is required")
        return value

    @field_validator("voice", mode="before")
    @classmethod
    def _voice_or_default(cls, value: Any) -> Optional[str]:
        if isinstance(value, str) and value.strip():
            return value.strip()
        return None

    @field_validator("rate", mode="before")
    @classmethod
    def _rate_or_default(cls, value: Any) -> Any:
        return value if _is_number(value) else DEFAULT_SPEAKING_RATE

    @field_validator("pitch", mode="before")
    @classmethod
    def _pitch_or_default(cls, value: Any) -> Any:
        return value if _is_number(value) else DEFAULT_PITCH


class VoiceDescriptor(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    name: str = ""
    language_codes: List[str] = Field(default_factory=list)
    ssml_gender: str = "SSML_VOICE_GENDER_UNSPECIFIED"
    natural_sample_rate_hertz: int = 0


class VoicesResponse(BaseModel):
    voices: List[VoiceDescriptor]
