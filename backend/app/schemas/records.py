"""帖子指标记录与分析选项模型"""
import enum
import logging
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from app.config import get_settings

logger = logging.getLogger(__name__)


class Provider(str, enum.Enum):
    """社交平台枚举"""
    INSTAGRAM = "instagram"
    FACEBOOK = "facebook"
    TWITTER = "twitter"
    YOUTUBE = "youtube"
    TIKTOK = "tiktok"
    LINKEDIN = "linkedin"
    MANUAL = "manual"


class TimeRange(str, enum.Enum):
    """分析时间范围"""
    LAST_7_DAYS = "7d"
    LAST_14_DAYS = "14d"
    LAST_30_DAYS = "30d"
    LAST_60_DAYS = "60d"
    LAST_90_DAYS = "90d"
    CUSTOM = "custom"

    @property
    def days(self) -> Optional[int]:
        """固定范围对应的天数，custom 返回 None"""
        if self is TimeRange.CUSTOM:
            return None
        return int(self.value.rstrip("d"))


class SentimentMetrics(BaseModel):
    """入库时计算的情感值"""
    score: float = Field(default=0.0, ge=-1.0, le=1.0)
    comparative: float = 0.0

    class Config:
        frozen = True


class EngagementMetrics(BaseModel):
    """单帖互动指标"""
    likes: int = Field(default=0, ge=0)
    comments: int = Field(default=0, ge=0)
    shares: int = Field(default=0, ge=0)
    saves: int = Field(default=0, ge=0)
    views: int = Field(default=0, ge=0)
    watch_time_seconds: int = Field(default=0, ge=0)
    sentiment: Optional[SentimentMetrics] = None

    class Config:
        frozen = True


class PostRecord(BaseModel):
    """分析输入单元，入库后不可变"""
    id: str = Field(..., min_length=1)
    provider: Provider
    timestamp: datetime
    text: Optional[str] = None
    metrics: EngagementMetrics

    class Config:
        frozen = True

    @field_validator("id", mode="before")
    @classmethod
    def _coerce_id(cls, value):
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return str(value)
        return value

    @field_validator("provider", mode="before")
    @classmethod
    def _lower_provider(cls, value):
        if isinstance(value, str):
            return value.strip().lower()
        return value

    @field_validator("text", mode="before")
    @classmethod
    def _drop_non_string_text(cls, value):
        if value is None or isinstance(value, str):
            return value
        logger.warning("Discarding non-string post text of type %s", type(value).__name__)
        return None

    @property
    def sentiment_score(self) -> float:
        if self.metrics.sentiment is None:
            return 0.0
        return self.metrics.sentiment.score


class AnalysisOptions(BaseModel):
    """分析选项"""
    time_range: TimeRange = Field(
        default_factory=lambda: TimeRange(get_settings().default_time_range)
    )
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None

    class Config:
        frozen = True

    @model_validator(mode="after")
    def _check_window(self):
        if self.time_range is TimeRange.CUSTOM and (self.start_date is None or self.end_date is None):
            raise ValueError("Custom date range requires both start_date and end_date")
        if self.start_date and self.end_date and self.end_date < self.start_date:
            raise ValueError("end_date must not be before start_date")
        return self
