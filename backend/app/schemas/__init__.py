"""请求/响应与分析结果模型"""
from app.schemas.records import (
    Provider,
    TimeRange,
    SentimentMetrics,
    EngagementMetrics,
    PostRecord,
    AnalysisOptions,
)
from app.schemas.analysis import (
    Severity,
    RiskLevel,
    EngagementAggregate,
    SentimentAggregate,
    CompositeScores,
    ContextSnippet,
    RiskFinding,
    RiskSummary,
    RiskReport,
    PlatformEngagement,
    PlatformBreakdown,
    DailyTrendPoint,
    WeeklyTrendPoint,
    TrendSeries,
    Summary,
    AnalysisResult,
    AnalysisResponse,
    StoredAnalysisResponse,
    AnalysisSummaryResponse,
    AnalysisRunRequest,
    BatchAnalysisRequest,
    MetricsIngestRequest,
    MetricsIngestResponse,
)

__all__ = [
    "Provider",
    "TimeRange",
    "SentimentMetrics",
    "EngagementMetrics",
    "PostRecord",
    "AnalysisOptions",
    "Severity",
    "RiskLevel",
    "EngagementAggregate",
    "SentimentAggregate",
    "CompositeScores",
    "ContextSnippet",
    "RiskFinding",
    "RiskSummary",
    "RiskReport",
    "PlatformEngagement",
    "PlatformBreakdown",
    "DailyTrendPoint",
    "WeeklyTrendPoint",
    "TrendSeries",
    "Summary",
    "AnalysisResult",
    "AnalysisResponse",
    "StoredAnalysisResponse",
    "AnalysisSummaryResponse",
    "AnalysisRunRequest",
    "BatchAnalysisRequest",
    "MetricsIngestRequest",
    "MetricsIngestResponse",
]
