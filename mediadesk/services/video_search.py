"""Keyword search with local filtering, enrichment and sorting.

Pipeline: search.list -> videos.list -> (channels.list when sorting by
subscribers). The vendor's duration buckets differ from ours (short is
<= 60s here, long is >= 20 min), so every filter is re-applied locally.
"""

import logging
import re
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from mediadesk.core.errors import RequestValidationFailed, UpstreamError
from mediadesk.schemas.video_search import VideoRecord, VideoSearchFilter, VideoSearchResult
from mediadesk.services.youtube_api import MAX_IDS_PER_CALL, YouTubeDataAPI, parse_count

logger = logging.getLogger(__name__)

SHORT_MAX_SECONDS = 60
LONG_MIN_SECONDS = 20 * 60
MAX_RESULT_LIMIT = 100

VIEW_BANDS = {
    "lt100k": (0, 100_000),
    "100k_1m": (100_000, 1_000_000),
    "gte1m": (1_000_000, None),
}

_ISO_DURATION = re.compile(
    r"^P(?:(\d+)Y)?(?:(\d+)M)?(?:(\d+)W)?(?:(\d+)D)?"
    r"(?:T(?:(\d+)H)?(?:(\d+)M)?(?:(\d+)(?:[.,]\d+)?S)?)?$"
)
# Calendar fields never appear on video durations; fixed lengths keep the
# arithmetic total.
_DURATION_UNITS = (365 * 86400, 30 * 86400, 7 * 86400, 86400, 3600, 60, 1)


def parse_iso_duration(value: Any) -> int:
    """Parse an ISO-8601 period such as ``PT1H2M3S`` into seconds.

    Missing fields count as zero; anything unparseable is 0 seconds.
    """
    if not isinstance(value, str):
        return 0
    match = _ISO_DURATION.match(value.strip().upper())
    if not match:
        return 0
    return sum(int(part) * unit for part, unit in zip(match.groups(), _DURATION_UNITS) if part)


def parse_published_at(value: str) -> Optional[float]:
    if not value:
        return None
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.timestamp()


def _object(value: Any) -> Dict:
    return value if isinstance(value, dict) else {}


def video_record_from_item(item: Dict) -> VideoRecord:
    snippet = _object(item.get("snippet"))
    content_details = _object(item.get("contentDetails"))
    statistics = _object(item.get("statistics"))
    thumbnails = _object(snippet.get("thumbnails"))

    thumbnail_url = None
    for size in ("medium", "default"):
        url = _object(thumbnails.get(size)).get("url")
        if url:
            thumbnail_url = str(url)
            break

    channel_id = snippet.get("channelId")
    return VideoRecord(
        id=str(item.get("id") or ""),
        title=str(snippet.get("title") or ""),
        channel_title=str(snippet.get("channelTitle") or ""),
        channel_id=str(channel_id) if channel_id else None,
        published_at=str(snippet.get("publishedAt") or ""),
        thumbnail_url=thumbnail_url,
        duration_seconds=parse_iso_duration(content_details.get("duration")),
        view_count=parse_count(statistics.get("viewCount")),
    )


def apply_filters(videos: List[VideoRecord], search_filter: VideoSearchFilter) -> List[VideoRecord]:
    cap = search_filter.length_cap_seconds
    if cap:
        videos = [v for v in videos if v.duration_seconds <= cap]

    if search_filter.duration_class == "short":
        videos = [v for v in videos if v.duration_seconds <= SHORT_MAX_SECONDS]
    elif search_filter.duration_class == "long":
        videos = [v for v in videos if v.duration_seconds >= LONG_MIN_SECONDS]

    band = VIEW_BANDS.get(search_filter.view_band)
    if band:
        low, high = band
        videos = [
            v for v in videos
            if v.view_count >= low and (high is None or v.view_count < high)
        ]

    return videos


def sort_videos(
    videos: List[VideoRecord], sort_key: str, subscriber_index: Dict[str, int]
) -> List[VideoRecord]:
    if sort_key == "date":
        def date_key(video: VideoRecord):
            timestamp = parse_published_at(video.published_at)
            return (timestamp is not None, timestamp or 0.0)

        return sorted(videos, key=date_key, reverse=True)
    if sort_key == "viewCount":
        return sorted(videos, key=lambda v: v.view_count, reverse=True)
    if sort_key == "subscriberCount":
        return sorted(
            videos,
            key=lambda v: subscriber_index.get(v.channel_id or "", 0),
            reverse=True,
        )
    return list(videos)


def effective_limit(result_limit: int, available: int) -> int:
    limit = result_limit if result_limit > 0 else available
    return min(limit, MAX_RESULT_LIMIT)


def lookup_subscribers(api: YouTubeDataAPI, videos: List[VideoRecord]) -> Dict[str, int]:
    """Subscriber counts for the channels in ``videos``; failures yield an empty index."""
    channel_ids: List[str] = []
    for video in videos:
        if video.channel_id and video.channel_id not in channel_ids:
            channel_ids.append(video.channel_id)
    if not channel_ids:
        return {}

    try:
        return api.get_channel_subscribers(channel_ids[:MAX_IDS_PER_CALL])
    except UpstreamError as e:
        logger.warning(f"Subscriber lookup failed, sorting with zero counts: {e}")
        return {}


def search_videos(api: YouTubeDataAPI, search_filter: VideoSearchFilter) -> VideoSearchResult:
    keyword = search_filter.keyword.strip()
    if not keyword:
        raise RequestValidationFailed("keyword is required")

    upstream_size = search_filter.result_limit or MAX_IDS_PER_CALL
    video_ids = api.search_video_ids(
        keyword,
        video_duration=search_filter.duration_class,
        order=search_filter.sort_key,
        max_results=upstream_size,
        published_after=search_filter.published_after,
        published_before=search_filter.published_before,
    )
    if not video_ids:
        logger.info(f"[SEARCH] '{keyword}': no matches")
        return VideoSearchResult()

    videos = [video_record_from_item(item) for item in api.get_videos(video_ids)]
    # relevance order is the search order, not the details order
    position = {video_id: i for i, video_id in enumerate(video_ids)}
    videos.sort(key=lambda v: position.get(v.id, len(position)))
    filtered = apply_filters(videos, search_filter)

    subscriber_index: Dict[str, int] = {}
    if search_filter.sort_key == "subscriberCount":
        subscriber_index = lookup_subscribers(api, filtered)

    ordered = sort_videos(filtered, search_filter.sort_key, subscriber_index)
    items = ordered[: effective_limit(search_filter.result_limit, len(ordered))]

    logger.info(
        f"[SEARCH] '{keyword}': {len(video_ids)} ids, {len(videos)} details, "
        f"{len(filtered)} after filters, returning {len(items)} "
        f"(order={search_filter.sort_key})"
    )
    return VideoSearchResult(items=items, subscriber_index=subscriber_index)
