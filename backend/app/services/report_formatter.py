"""分析报告展示格式化（只做舍入，不改变结构）"""
import copy
from typing import Any, Dict, Union

from app.schemas.analysis import AnalysisResult

ENGAGEMENT_ROUNDED = ("avg_likes", "avg_comments", "avg_shares", "avg_saves", "avg_watch_time", "engagement_rate")
SCORE_ROUNDED = ("interest_score", "stress_score", "mood_score", "energy_level", "social_support")
PLATFORM_ROUNDED = ("avg_likes", "avg_comments", "avg_shares")


def _round_fields(data: Dict[str, Any], fields, digits: int) -> None:
    for name in fields:
        if isinstance(data.get(name), (int, float)):
            data[name] = round(data[name], digits)


def format_analysis_report(result: Union[AnalysisResult, Dict[str, Any]]) -> Dict[str, Any]:
    """
    生成用于展示的报告副本

    Args:
        result: AnalysisResult 或其 model_dump 结果

    Returns:
        dict: 舍入后的新字典，原对象不被修改
    """
    if isinstance(result, AnalysisResult):
        report = result.model_dump(mode="json")
    else:
        report = copy.deepcopy(result)

    engagement = report.get("engagement")
    if engagement:
        _round_fields(engagement, ENGAGEMENT_ROUNDED, 2)

    sentiment = report.get("sentiment")
    if sentiment:
        _round_fields(sentiment, ("positive_pct", "negative_pct", "neutral_pct"), 1)
        _round_fields(sentiment, ("avg_sentiment", "comparative"), 2)

    scores = report.get("scores")
    if scores:
        _round_fields(scores, SCORE_ROUNDED, 1)

    for platform in report.get("by_platform") or []:
        _round_fields(platform, ("sentiment",), 2)
        if platform.get("engagement"):
            _round_fields(platform["engagement"], PLATFORM_ROUNDED, 2)

    trends = report.get("trends") or {}
    for point in (trends.get("daily") or []) + (trends.get("weekly") or []):
        _round_fields(point, ("avg_sentiment",), 2)

    return report
