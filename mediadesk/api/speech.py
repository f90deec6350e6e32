"""Text-to-speech endpoints: synthesis and the voice catalog."""

import logging
import time

from fastapi import APIRouter, Depends, HTTPException, Response

from mediadesk.api.dependencies import get_speech_api
from mediadesk.core.errors import MediaDeskError
from mediadesk.schemas.speech import SynthesisRequest, VoicesResponse
from mediadesk.services.speech_api import GoogleSpeechAPI

logger = logging.getLogger(__name__)

router = APIRouter(tags=["speech"])


@router.post(
    "/synthesize",
    response_class=Response,
    responses={200: {"content": {"audio/mpeg": {}}}},
)
def synthesize(request: SynthesisRequest, speech_api: GoogleSpeechAPI = Depends(get_speech_api)):
    """Synthesize text to an MP3 attachment."""
    try:
        audio = speech_api.synthesize(
            request.text, voice=request.voice, rate=request.rate, pitch=request.pitch
        )
    except MediaDeskError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
    except Exception as e:
        logger.exception("Synthesis failed")
        raise HTTPException(status_code=500, detail=str(e) or "error")

    filename = f"tts_{int(time.time() * 1000)}.mp3"
    return Response(
        content=audio,
        media_type="audio/mpeg",
        headers={
            "Content-Disposition": f'attachment; filename="{filename}"',
            "Cache-Control": "no-store",
        },
    )


@router.get("/voices", response_model=VoicesResponse)
def list_voices(speech_api: GoogleSpeechAPI = Depends(get_speech_api)):
    """List the vendor's voices sorted by name."""
    try:
        return VoicesResponse(voices=speech_api.list_voices())
    except MediaDeskError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
    except Exception as e:
        logger.exception("Voice listing failed")
        raise HTTPException(status_code=500, detail=str(e) or "error")
