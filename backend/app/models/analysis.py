"""分析记录模型"""
import uuid
from datetime import datetime

from sqlalchemy import Column, String, DateTime, Enum, JSON, Uuid

from app.database import Base
from app.schemas.records import TimeRange


class Analysis(Base):
    """已保存的分析结果表"""
    __tablename__ = "analyses"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(String(64), nullable=False, index=True)

    date = Column(DateTime, default=datetime.utcnow, index=True)
    time_range = Column(Enum(TimeRange), nullable=False)
    start_date = Column(DateTime, nullable=False)
    end_date = Column(DateTime, nullable=False)

    metrics = Column(JSON, nullable=False)
    post_ids = Column(JSON, default=list)
