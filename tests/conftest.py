from typing import Dict, List, Optional

import pytest
from fastapi.testclient import TestClient

from mediadesk.core.config import Settings
from mediadesk.core.errors import SynthesisError
from mediadesk.main import create_app
from mediadesk.schemas.speech import VoiceDescriptor


def make_video_item(
    video_id: str,
    duration: str = "PT5M",
    views: Optional[str] = "1000",
    published_at: str = "2024-01-01T00:00:00Z",
    channel_id: Optional[str] = "UC_default",
) -> Dict:
    snippet = {
        "title": f"title {video_id}",
        "channelTitle": f"channel {channel_id}",
        "publishedAt": published_at,
        "thumbnails": {
            "default": {"url": f"https://i.ytimg.com/vi/{video_id}/default.jpg"},
            "medium": {"url": f"https://i.ytimg.com/vi/{video_id}/mqdefault.jpg"},
        },
    }
    if channel_id:
        snippet["channelId"] = channel_id
    statistics = {"viewCount": views} if views is not None else {}
    return {
        "id": video_id,
        "snippet": snippet,
        "contentDetails": {"duration": duration},
        "statistics": statistics,
    }


class FakeYouTubeAPI:
    """Stands in for YouTubeDataAPI; records every call it receives."""

    def __init__(self, items: Optional[List[Dict]] = None, subscribers=None, search_ids=None):
        self.items = items or []
        self.search_ids = search_ids
        self.subscribers = subscribers or {}
        self.calls: List[tuple] = []

    def search_video_ids(self, query, **kwargs) -> List[str]:
        self.calls.append(("search", query, kwargs))
        if self.search_ids is not None:
            return list(self.search_ids)
        return [item["id"] for item in self.items]

    def get_videos(self, video_ids: List[str]) -> List[Dict]:
        self.calls.append(("videos", list(video_ids)))
        return [item for item in self.items if item["id"] in video_ids]

    def get_channel_subscribers(self, channel_ids: List[str]) -> Dict[str, int]:
        self.calls.append(("channels", list(channel_ids)))
        if isinstance(self.subscribers, Exception):
            raise self.subscribers
        return {cid: count for cid, count in self.subscribers.items() if cid in channel_ids}

    def endpoints_called(self) -> List[str]:
        return [call[0] for call in self.calls]


class FakeSpeechAPI:
    def __init__(self, audio: bytes = b"ID3fake-mp3", voices: Optional[List[VoiceDescriptor]] = None):
        self.audio = audio
        self.voices = voices or []
        self.calls: List[tuple] = []

    def synthesize(self, text, voice=None, rate=1.05, pitch=0.0) -> bytes:
        self.calls.append(("synthesize", text, voice, rate, pitch))
        if not self.audio:
            raise SynthesisError("no audio")
        return self.audio

    def list_voices(self) -> List[VoiceDescriptor]:
        self.calls.append(("voices",))
        return sorted(self.voices, key=lambda v: v.name)


@pytest.fixture
def settings():
    return Settings(gcp_tts_credentials_json=None, yt_api_key=None)


@pytest.fixture
def youtube_api():
    return FakeYouTubeAPI()


@pytest.fixture
def speech_api():
    return FakeSpeechAPI()


@pytest.fixture
def client(settings, youtube_api, speech_api):
    app = create_app(settings, youtube_api=youtube_api, speech_api=speech_api)
    with TestClient(app) as c:
        yield c
