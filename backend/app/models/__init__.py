"""数据库模型"""
from app.models.post_metric import PostMetric
from app.models.analysis import Analysis

__all__ = [
    "PostMetric",
    "Analysis",
]
