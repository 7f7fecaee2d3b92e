"""分析引擎模块"""
from app.analyzers.sentiment import SentimentScorer
from app.analyzers.risk import RiskKeywordDetector
from app.analyzers.risk_summary import RiskSummaryBuilder
from app.analyzers.engagement import EngagementAggregator
from app.analyzers.scoring import ScoreCalculator
from app.analyzers.trends import TrendBuilder
from app.analyzers.report import ReportAssembler

__all__ = [
    "SentimentScorer",
    "RiskKeywordDetector",
    "RiskSummaryBuilder",
    "EngagementAggregator",
    "ScoreCalculator",
    "TrendBuilder",
    "ReportAssembler",
]
