"""
Pytest 公共配置与 fixture

- 使用内存 sqlite，导入应用前设置环境变量
- 提供记录工厂与可控时钟
"""
import os

os.environ["DATABASE_URL"] = "sqlite://"
os.environ["API_KEY"] = "test-key"
os.environ["LOG_LEVEL"] = "WARNING"

from datetime import datetime, timezone  # noqa: E402
from typing import Any, Dict, Optional  # noqa: E402

import pytest  # noqa: E402

from app import models  # noqa: E402,F401
from app.database import Base, engine  # noqa: E402
from app.schemas import PostRecord  # noqa: E402

Base.metadata.create_all(bind=engine)


class FakeClock:
    """可手动推进的单调时钟"""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


def record_dict(
    record_id: str,
    text: Optional[str] = None,
    timestamp: str = "2024-01-01T12:00:00+00:00",
    provider: str = "instagram",
    **metrics: Any,
) -> Dict[str, Any]:
    """构造原始记录字典"""
    return {
        "id": record_id,
        "provider": provider,
        "timestamp": timestamp,
        "text": text,
        "metrics": metrics,
    }


@pytest.fixture
def make_record():
    """PostRecord 工厂"""
    def _make(record_id: str = "p1", text: Optional[str] = None, **kwargs: Any) -> PostRecord:
        return PostRecord.model_validate(record_dict(record_id, text, **kwargs))
    return _make


@pytest.fixture
def scenario_records():
    """两条重复的正面文本和一条含中等风险词的文本"""
    return [
        record_dict("1", "I am so happy today", timestamp="2024-01-01T09:00:00+00:00", likes=10),
        record_dict("2", "I feel hopeless and want to give up", timestamp="2024-01-02T09:00:00+00:00", likes=2),
        record_dict("3", "I am so happy today", timestamp="2024-01-03T09:00:00+00:00", likes=12),
    ]


@pytest.fixture
def utc():
    def _utc(*args: int) -> datetime:
        return datetime(*args, tzinfo=timezone.utc)
    return _utc
