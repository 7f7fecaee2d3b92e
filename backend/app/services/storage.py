"""指标与分析记录的持久化"""
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import List, Optional, Sequence, Tuple
from uuid import UUID

from sqlalchemy.orm import Session

from app.analyzers.sentiment import SentimentScorer
from app.models import Analysis, PostMetric
from app.schemas.analysis import AnalysisResult
from app.schemas.records import AnalysisOptions, PostRecord, Provider
from app.utils.logger import get_logger

logger = get_logger(__name__)


def to_naive_utc(value: Optional[datetime]) -> Optional[datetime]:
    """数据库中统一存储 UTC 无时区时间"""
    if value is None or value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


@dataclass
class MetricsFilter:
    """指标查询条件，时间窗口为 [start_date, end_date]，按 UTC 比较"""
    user_id: str
    start_date: datetime
    end_date: datetime
    provider: Optional[Provider] = None


class MetricsStore:
    """帖子指标存取"""

    def __init__(self, db: Session, scorer: Optional[SentimentScorer] = None):
        self.db = db
        self.scorer = scorer or SentimentScorer()

    def find(self, metrics_filter: MetricsFilter) -> List[PostRecord]:
        query = self.db.query(PostMetric).filter(
            PostMetric.user_id == metrics_filter.user_id,
            PostMetric.timestamp >= to_naive_utc(metrics_filter.start_date),
            PostMetric.timestamp <= to_naive_utc(metrics_filter.end_date),
        )
        if metrics_filter.provider is not None:
            query = query.filter(PostMetric.provider == metrics_filter.provider)

        rows = query.order_by(PostMetric.timestamp.asc()).all()
        return [row.to_record() for row in rows]

    def add_many(self, user_id: str, records: Sequence[PostRecord]) -> Tuple[int, int]:
        """
        写入帖子指标，同一 (user, provider, post id) 覆盖旧值

        Returns:
            (inserted, updated)
        """
        inserted = updated = 0
        for record in self.scorer.score_records(records):
            row = self.db.query(PostMetric).filter(
                PostMetric.user_id == user_id,
                PostMetric.provider == record.provider,
                PostMetric.post_id == record.id,
            ).first()

            if row is None:
                row = PostMetric(user_id=user_id, provider=record.provider, post_id=record.id)
                self.db.add(row)
                inserted += 1
            else:
                updated += 1

            row.set_timestamp(record.timestamp)
            row.text = record.text
            row.metrics = record.metrics.model_dump(mode="json")

        self.db.commit()
        logger.info(f"Stored metrics for user {user_id}: inserted={inserted}, updated={updated}")
        return inserted, updated


class AnalysisStore:
    """分析记录存取"""

    def __init__(self, db: Session):
        self.db = db

    def save(
        self,
        user_id: str,
        options: AnalysisOptions,
        result: AnalysisResult,
        post_ids: Sequence[str],
    ) -> Analysis:
        analysis = Analysis(
            user_id=user_id,
            time_range=options.time_range,
            start_date=to_naive_utc(options.start_date),
            end_date=to_naive_utc(options.end_date),
            metrics=result.model_dump(mode="json"),
            post_ids=list(post_ids),
        )
        self.db.add(analysis)
        self.db.commit()
        self.db.refresh(analysis)
        return analysis

    def list_for_user(self, user_id: str, limit: int = 20, offset: int = 0) -> List[Analysis]:
        return (
            self.db.query(Analysis)
            .filter(Analysis.user_id == user_id)
            .order_by(Analysis.date.desc())
            .offset(offset)
            .limit(limit)
            .all()
        )

    def get(self, analysis_id: UUID) -> Optional[Analysis]:
        return self.db.query(Analysis).filter(Analysis.id == analysis_id).first()

    def delete(self, analysis_id: UUID) -> bool:
        analysis = self.get(analysis_id)
        if analysis is None:
            return False
        self.db.delete(analysis)
        self.db.commit()
        return True

