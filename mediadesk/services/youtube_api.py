"""YouTube Data API v3 client.

One key, one session. Transient 5xx answers are retried a bounded number of
times by the session's urllib3 adapter; any other failure is raised as an
UpstreamError carrying the vendor's message.
"""

import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from mediadesk.core.errors import ConfigurationError, UpstreamError

logger = logging.getLogger(__name__)

BASE_URL = "https://www.googleapis.com/youtube/v3"
MAX_IDS_PER_CALL = 50

# The vendor has no subscriber order; that sort happens locally.
UPSTREAM_ORDERS = {"relevance", "date", "viewCount"}


def _create_session(max_retries: int) -> requests.Session:
    session = requests.Session()
    retry = Retry(
        total=max_retries,
        backoff_factor=0.5,
        status_forcelist=[500, 502, 503, 504],
        allowed_methods=["GET"],
        raise_on_status=False,
    )
    session.mount("https://", HTTPAdapter(max_retries=retry))
    return session


class YouTubeDataAPI:
    """Thin wrapper over the search, videos and channels endpoints."""

    def __init__(self, api_key: Optional[str], timeout: float = 30.0, max_retries: int = 2):
        self.api_key = api_key
        self.timeout = timeout
        self.session = _create_session(max_retries)

        logger.info(
            f"YouTubeDataAPI initialized (key={'set' if api_key else 'missing'}, "
            f"timeout={timeout}s, retries={max_retries})"
        )

    def make_request(self, endpoint: str, params: Dict[str, Any]) -> Dict:
        """GET an endpoint and return the decoded JSON body."""
        if not self.api_key:
            raise ConfigurationError("Missing YT_API_KEY")

        query = dict(params)
        query["key"] = self.api_key
        try:
            response = self.session.get(
                f"{BASE_URL}/{endpoint}", params=query, timeout=self.timeout
            )
        except requests.RequestException as e:
            logger.error(f"YouTube API request to {endpoint} failed: {e}")
            raise UpstreamError(f"YouTube API request failed: {e}")

        if response.status_code != 200:
            message = _error_message(response)
            logger.error(f"YouTube API error {response.status_code} on {endpoint}: {message}")
            raise UpstreamError(message)

        try:
            body = response.json()
        except ValueError:
            body = None
        if not isinstance(body, dict):
            logger.error(f"YouTube API returned a non-object body on {endpoint}")
            raise UpstreamError("YouTube API returned an invalid response")
        return body

    def search_video_ids(
        self,
        query: str,
        video_duration: str = "any",
        order: str = "relevance",
        max_results: int = MAX_IDS_PER_CALL,
        published_after: Optional[datetime] = None,
        published_before: Optional[datetime] = None,
    ) -> List[str]:
        """Run search.list and return the matched video IDs in vendor order."""
        params: Dict[str, Any] = {
            "part": "snippet",
            "type": "video",
            "q": query,
            "maxResults": min(max(max_results, 1), MAX_IDS_PER_CALL),
            "order": order if order in UPSTREAM_ORDERS else "relevance",
            "videoDuration": video_duration,
        }
        if published_after:
            params["publishedAfter"] = format_timestamp(published_after)
        if published_before:
            params["publishedBefore"] = format_timestamp(published_before)

        result = self.make_request("search", params)

        video_ids: List[str] = []
        for item in _items(result):
            item_id = item.get("id") if isinstance(item, dict) else None
            video_id = item_id.get("videoId") if isinstance(item_id, dict) else None
            if video_id:
                video_ids.append(str(video_id))
        return video_ids

    def get_videos(self, video_ids: List[str]) -> List[Dict]:
        """Fetch snippet, contentDetails and statistics for a batch of video IDs (max 50)."""
        if not video_ids:
            return []

        result = self.make_request(
            "videos",
            {
                "part": "snippet,contentDetails,statistics",
                "id": ",".join(video_ids[:MAX_IDS_PER_CALL]),
            },
        )
        return [item for item in _items(result) if isinstance(item, dict)]

    def get_channel_subscribers(self, channel_ids: List[str]) -> Dict[str, int]:
        """Fetch subscriber counts for a batch of channel IDs (max 50).

        Hidden or malformed counts map to 0.
        """
        if not channel_ids:
            return {}

        result = self.make_request(
            "channels",
            {"part": "statistics", "id": ",".join(channel_ids[:MAX_IDS_PER_CALL])},
        )

        subs_map: Dict[str, int] = {}
        for item in _items(result):
            if not isinstance(item, dict) or not item.get("id"):
                continue
            statistics = _object(item.get("statistics"))
            subs_map[str(item["id"])] = parse_count(statistics.get("subscriberCount"))
        return subs_map


def _items(result: Dict) -> List:
    items = result.get("items")
    return items if isinstance(items, list) else []


def _object(value: Any) -> Dict:
    return value if isinstance(value, dict) else {}


def parse_count(value: Any) -> int:
    """Vendor counts arrive as decimal strings; anything else counts as 0."""
    try:
        return max(int(value), 0)
    except (TypeError, ValueError):
        return 0


def format_timestamp(value: datetime) -> str:
    """RFC 3339 in UTC, the form search.list expects."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")


def _error_message(response: requests.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        body = None

    if isinstance(body, dict):
        error = body.get("error")
        if isinstance(error, dict) and error.get("message"):
            return str(error["message"])
        if isinstance(error, str) and error:
            return error

    return f"YouTube API error {response.status_code}"
