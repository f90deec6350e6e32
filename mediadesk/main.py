import logging
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException

from mediadesk.api.pages import STATIC_DIR
from mediadesk.api.pages import router as pages_router
from mediadesk.api.speech import router as speech_router
from mediadesk.api.video_search import router as video_search_router
from mediadesk.core.config import Settings
from mediadesk.core.errors import MediaDeskError
from mediadesk.services.speech_api import GoogleSpeechAPI
from mediadesk.services.youtube_api import YouTubeDataAPI

logger = logging.getLogger(__name__)


def configure_logging(level: int) -> None:
    logging.basicConfig(
        level=level,
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
        datefmt="%H:%M:%S",
    )


async def http_error_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(status_code=exc.status_code, content={"error": str(exc.detail)})


async def app_error_handler(request: Request, exc: MediaDeskError):
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


async def unexpected_error_handler(request: Request, exc: Exception):
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    return JSONResponse(status_code=500, content={"error": str(exc) or "error"})


async def validation_error_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(status_code=400, content={"error": validation_message(exc)})


def validation_message(exc: RequestValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return "invalid request"

    first = errors[0]
    ctx_error = (first.get("ctx") or {}).get("error")
    if first.get("type") == "value_error" and ctx_error is not None:
        return str(ctx_error)

    location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
    message = first.get("msg", "invalid value")
    return f"{location}: {message}" if location else message


def create_app(
    settings: Optional[Settings] = None,
    youtube_api: Optional[YouTubeDataAPI] = None,
    speech_api: Optional[GoogleSpeechAPI] = None,
) -> FastAPI:
    settings = settings or Settings.from_env()
    configure_logging(settings.log_level)

    app = FastAPI(
        title="MediaDesk",
        description="Google Cloud text-to-speech front end and YouTube search analysis",
        version="1.0.0",
    )

    app.state.settings = settings
    app.state.speech_api = speech_api or GoogleSpeechAPI(
        settings.gcp_tts_credentials_json,
        language=settings.tts_language,
        voice=settings.tts_voice,
        timeout=settings.vendor_timeout,
    )
    app.state.youtube_api = youtube_api or YouTubeDataAPI(
        settings.yt_api_key,
        timeout=settings.vendor_timeout,
        max_retries=settings.vendor_max_retries,
    )

    app.add_exception_handler(StarletteHTTPException, http_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(MediaDeskError, app_error_handler)
    app.add_exception_handler(Exception, unexpected_error_handler)

    app.include_router(speech_router)
    app.include_router(video_search_router)
    app.include_router(pages_router)
    app.mount("/static", StaticFiles(directory=STATIC_DIR), name="static")

    @app.get("/health")
    def health_check():
        return {"status": "ok"}

    return app


app = create_app()
