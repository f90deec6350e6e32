"""Request-scoped accessors for the vendor clients built by create_app()."""

from fastapi import Request

from mediadesk.services.speech_api import GoogleSpeechAPI
from mediadesk.services.youtube_api import YouTubeDataAPI


def get_speech_api(request: Request) -> GoogleSpeechAPI:
    return request.app.state.speech_api


def get_youtube_api(request: Request) -> YouTubeDataAPI:
    return request.app.state.youtube_api
