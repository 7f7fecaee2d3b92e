"""帖子指标模型"""
import uuid
from datetime import datetime, timedelta, timezone

from sqlalchemy import Column, String, DateTime, Enum, Integer, Text, JSON, UniqueConstraint, Uuid

from app.database import Base
from app.schemas.records import EngagementMetrics, PostRecord, Provider


class PostMetric(Base):
    """帖子指标表（每个用户每个平台帖子一行）"""
    __tablename__ = "post_metrics"
    __table_args__ = (
        UniqueConstraint("user_id", "provider", "post_id", name="uq_user_provider_post_id"),
    )

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(String(64), nullable=False, index=True)

    provider = Column(Enum(Provider), nullable=False, index=True)
    post_id = Column(String(255), nullable=False)
    # UTC 无时区时间，用于窗口过滤和排序
    timestamp = Column(DateTime, nullable=False, index=True)
    # 原始时间戳的 UTC 偏移（分钟），无时区输入为 NULL
    utc_offset_minutes = Column(Integer, nullable=True)
    text = Column(Text, nullable=True)

    # likes / comments / shares / saves / views / watch_time_seconds / sentiment
    metrics = Column(JSON, default=dict)

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def set_timestamp(self, value: datetime) -> None:
        offset = value.utcoffset()
        if offset is None:
            self.timestamp = value
            self.utc_offset_minutes = None
            return
        self.timestamp = value.astimezone(timezone.utc).replace(tzinfo=None)
        self.utc_offset_minutes = int(offset.total_seconds() // 60)

    def local_timestamp(self) -> datetime:
        """按入库时的原始偏移还原时间戳"""
        if self.utc_offset_minutes is None:
            return self.timestamp
        original_tz = timezone(timedelta(minutes=self.utc_offset_minutes))
        return self.timestamp.replace(tzinfo=timezone.utc).astimezone(original_tz)

    def to_record(self) -> PostRecord:
        return PostRecord(
            id=self.post_id,
            provider=self.provider,
            timestamp=self.local_timestamp(),
            text=self.text,
            metrics=EngagementMetrics.model_validate(self.metrics or {}),
        )
