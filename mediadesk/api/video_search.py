"""YouTube keyword search with duration, view-band and date filters."""

import logging

from fastapi import APIRouter, Depends, HTTPException

from mediadesk.api.dependencies import get_youtube_api
from mediadesk.core.errors import MediaDeskError
from mediadesk.schemas.video_search import VideoSearchFilter, VideoSearchResult
from mediadesk.services.video_search import search_videos
from mediadesk.services.youtube_api import YouTubeDataAPI

logger = logging.getLogger(__name__)

router = APIRouter(tags=["youtube"])


@router.post("/video-search", response_model=VideoSearchResult)
def video_search(
    request: VideoSearchFilter,
    youtube_api: YouTubeDataAPI = Depends(get_youtube_api),
):
    """Search YouTube, filter and sort the matches locally."""
    try:
        return search_videos(youtube_api, request)
    except MediaDeskError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
    except Exception as e:
        logger.exception("Video search failed")
        raise HTTPException(status_code=500, detail=str(e) or "error")
