"""分析结果相关的模型"""
import enum
from datetime import date as CalendarDate, datetime
from typing import Any, Dict, List, Optional
from uuid import UUID

from pydantic import BaseModel, Field

from app.schemas.records import PostRecord, Provider, TimeRange


class Severity(str, enum.Enum):
    """风险等级（单帖）"""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"

    @property
    def rank(self) -> int:
        return {"low": 1, "medium": 2, "high": 3}[self.value]


class RiskLevel(str, enum.Enum):
    """整体风险等级"""
    NONE = "none"
    LOW = "low"
    LOW_MEDIUM = "low-medium"
    MEDIUM = "medium"
    MEDIUM_HIGH = "medium-high"
    HIGH = "high"


class EngagementAggregate(BaseModel):
    """互动汇总"""
    total_posts: int
    total_likes: int
    total_comments: int
    total_shares: int
    total_saves: int
    total_watch_time: int
    avg_likes: float
    avg_comments: float
    avg_shares: float
    avg_saves: float
    avg_watch_time: float
    engagement_rate: float

    class Config:
        frozen = True


class SentimentAggregate(BaseModel):
    """情感汇总，三个百分比之和为 100"""
    avg_sentiment: float = 0.0
    positive_pct: float = 0.0
    negative_pct: float = 0.0
    neutral_pct: float = 100.0
    comparative: float = 0.0

    class Config:
        frozen = True


class CompositeScores(BaseModel):
    """综合得分，均在 [0, 100]"""
    interest_score: float
    stress_score: float
    mood_score: float
    energy_level: float
    social_support: float
    interest_level: str
    stress_level: str

    class Config:
        frozen = True


class ContextSnippet(BaseModel):
    """关键词上下文片段"""
    keyword: str
    snippet: str
    position: str

    class Config:
        frozen = True


class RiskFinding(BaseModel):
    """单帖风险命中"""
    post_id: str
    excerpt: str
    timestamp: datetime
    matched_keywords: List[str]
    severity: Severity
    context_snippets: List[ContextSnippet] = []

    class Config:
        frozen = True


class RiskSummary(BaseModel):
    """风险文字摘要"""
    summary: str
    assessment: str
    recommendations: List[str]
    risk_score: int
    risk_level: RiskLevel

    class Config:
        frozen = True


class RiskReport(BaseModel):
    """风险汇总报告"""
    total: int = 0
    high_risk: int = 0
    medium_risk: int = 0
    low_risk: int = 0
    risk_level: RiskLevel = RiskLevel.NONE
    risk_score: int = Field(default=0, ge=0, le=100)
    examples: List[RiskFinding] = []
    summary: RiskSummary

    class Config:
        frozen = True


class PlatformEngagement(BaseModel):
    """平台互动数据"""
    likes: int
    comments: int
    shares: int
    avg_likes: float
    avg_comments: float
    avg_shares: float

    class Config:
        frozen = True


class PlatformBreakdown(BaseModel):
    """按平台拆分"""
    platform: Provider
    post_count: int
    engagement: PlatformEngagement
    sentiment: float

    class Config:
        frozen = True


class DailyTrendPoint(BaseModel):
    """日趋势点（无帖子的日期不出现）"""
    date: CalendarDate
    post_count: int
    avg_sentiment: float
    total_likes: int
    total_comments: int
    total_shares: int

    class Config:
        frozen = True


class WeeklyTrendPoint(BaseModel):
    """周趋势点（ISO 周）"""
    year: int
    week: int
    post_count: int
    avg_sentiment: float
    total_likes: int
    total_comments: int
    total_shares: int

    class Config:
        frozen = True


class TrendSeries(BaseModel):
    daily: List[DailyTrendPoint] = []
    weekly: List[WeeklyTrendPoint] = []

    class Config:
        frozen = True


class Summary(BaseModel):
    """自然语言摘要"""
    overall: str
    key_findings: List[str]
    recommendations: List[str]
    positive_aspects: List[str]
    areas_of_concern: List[str]

    class Config:
        frozen = True


class AnalysisResult(BaseModel):
    """一次分析的完整结果，创建后不再修改"""
    engagement: EngagementAggregate
    sentiment: SentimentAggregate
    scores: CompositeScores
    risk: RiskReport
    by_platform: List[PlatformBreakdown]
    trends: TrendSeries
    summary: Summary

    class Config:
        frozen = True


class AnalysisResponse(BaseModel):
    """分析调用返回，附带缓存标记和耗时"""
    result: AnalysisResult
    cached: bool
    processing_time_ms: float


class StoredAnalysisResponse(BaseModel):
    """已保存的分析记录"""
    id: UUID
    user_id: str
    date: datetime
    time_range: TimeRange
    start_date: datetime
    end_date: datetime
    metrics: AnalysisResult
    post_ids: List[str] = []
    cached: Optional[bool] = None

    class Config:
        from_attributes = True


class AnalysisSummaryResponse(BaseModel):
    """分析列表项"""
    id: UUID
    user_id: str
    date: datetime
    time_range: TimeRange
    start_date: datetime
    end_date: datetime
    interest_score: float
    stress_score: float
    risk_level: RiskLevel


class AnalysisRunRequest(BaseModel):
    """对已入库指标执行分析的请求"""
    user_id: str = Field(..., min_length=1, max_length=64)
    time_range: TimeRange = TimeRange.LAST_30_DAYS
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    provider: Optional[Provider] = None

    class Config:
        json_schema_extra = {
            "example": {
                "user_id": "demo-user",
                "time_range": "30d",
                "provider": "instagram",
            }
        }


class BatchAnalysisRequest(BaseModel):
    """直接提交记录批次的分析请求，记录在服务层校验"""
    records: List[Any]
    options: Optional[Dict[str, Any]] = None


class MetricsIngestRequest(BaseModel):
    """帖子指标入库请求"""
    user_id: str = Field(..., min_length=1, max_length=64)
    records: List[PostRecord] = Field(..., min_length=1)


class MetricsIngestResponse(BaseModel):
    inserted: int
    updated: int
