"""Schemas for the YouTube search endpoint.

The request accepts both the short wire names sent by the search page
(``q``, ``type``, ``max``, ``order``, ``lengthCapSec``, ``publishedRange``)
and the descriptive field names.
"""

from datetime import datetime
from typing import Any, Dict, List, Literal, Optional

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    field_validator,
    model_validator,
)
from pydantic.alias_generators import to_camel

DurationClass = Literal["any", "short", "long"]
ViewBand = Literal["any", "lt100k", "100k_1m", "gte1m"]
SortKey = Literal["relevance", "date", "viewCount", "subscriberCount"]


class VideoSearchFilter(BaseModel):
    keyword: str = Field(default="", validation_alias=AliasChoices("q", "keyword"))
    duration_class: DurationClass = Field(
        default="any",
        validation_alias=AliasChoices("type", "durationClass", "duration_class"),
    )
    published_after: Optional[datetime] = Field(
        default=None,
        validation_alias=AliasChoices("publishedAfter", "published_after"),
    )
    published_before: Optional[datetime] = Field(
        default=None,
        validation_alias=AliasChoices("publishedBefore", "published_before"),
    )
    view_band: ViewBand = Field(
        default="any", validation_alias=AliasChoices("viewBand", "view_band")
    )
    result_limit: int = Field(
        default=50,
        ge=0,
        validation_alias=AliasChoices("max", "resultLimit", "result_limit"),
    )
    sort_key: SortKey = Field(
        default="relevance",
        validation_alias=AliasChoices("order", "sortKey", "sort_key"),
    )
    length_cap_seconds: Optional[int] = Field(
        default=None,
        ge=0,
        validation_alias=AliasChoices(
            "lengthCapSec", "lengthCapSeconds", "length_cap_seconds"
        ),
    )

    @model_validator(mode="before")
    @classmethod
    def _lift_published_range(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        published_range = data.get("publishedRange")
        if not isinstance(published_range, dict):
            return data
        data = dict(data)
        if published_range.get("after"):
            data.setdefault("publishedAfter", published_range["after"])
        if published_range.get("before"):
            data.setdefault("publishedBefore", published_range["before"])
        return data

    @field_validator("duration_class", "view_band", mode="before")
    @classmethod
    def _all_means_any(cls, value: Any) -> Any:
        if value is None or value == "all":
            return "any"
        return value

    @field_validator("keyword", mode="before")
    @classmethod
    def _missing_keyword_is_blank(cls, value: Any) -> Any:
        return "" if value is None else value

    @field_validator("sort_key", mode="before")
    @classmethod
    def _default_order(cls, value: Any) -> Any:
        return "relevance" if value is None else value

    @field_validator("result_limit", mode="before")
    @classmethod
    def _default_limit(cls, value: Any) -> Any:
        return 50 if value is None else value

    @field_validator("published_after", "published_before", mode="before")
    @classmethod
    def _blank_is_none(cls, value: Any) -> Any:
        if isinstance(value, str) and not value.strip():
            return None
        return value


class VideoRecord(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: str = ""
    title: str = ""
    channel_title: str = ""
    channel_id: Optional[str] = None
    published_at: str = ""
    thumbnail_url: Optional[str] = None
    duration_seconds: int = 0
    view_count: int = 0


class VideoSearchResult(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    items: List[VideoRecord] = Field(default_factory=list)
    subscriber_index: Dict[str, int] = Field(default_factory=dict)
