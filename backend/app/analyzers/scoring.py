"""兴趣分、压力分及派生分计算"""
import math
from typing import Iterable, Optional

from app.analyzers.risk import RiskKeywordDetector
from app.schemas.analysis import CompositeScores, EngagementAggregate, SentimentAggregate
from app.schemas.records import AnalysisOptions, TimeRange

# 各互动指标的饱和上限，超过即记为 1.0
INTEREST_CAPS = {
    "likes": 100,
    "comments": 10,
    "shares": 5,
    "saves": 20,
    "watch_time": 300,
}

# 权重之和为 1.0，全部饱和时恰好 100 分
INTEREST_WEIGHTS = {
    "likes": 0.4,
    "comments": 0.3,
    "shares": 0.2,
    "saves": 0.05,
    "watch_time": 0.05,
}

STRESS_WEIGHTS = {
    "negative_sentiment": 0.6,
    "negative_content": 0.2,
    "post_frequency": 0.2,
    "risk_density": 0.3,
}

# 每天超过 10 帖视为高频
POST_FREQUENCY_CAP = 10

INTEREST_HIGH = 75
INTEREST_MODERATE = 40
STRESS_HIGH = 70
STRESS_MODERATE = 40


def clamp(value: float, low: float = 0.0, high: float = 100.0) -> float:
    return min(max(value, low), high)


def interest_category(score: float) -> str:
    if score >= INTEREST_HIGH:
        return "high"
    if score >= INTEREST_MODERATE:
        return "moderate"
    return "low"


def stress_category(score: float) -> str:
    if score >= STRESS_HIGH:
        return "high"
    if score >= STRESS_MODERATE:
        return "moderate"
    return "low"


class ScoreCalculator:
    """综合得分计算器"""

    def __init__(self, detector: Optional[RiskKeywordDetector] = None):
        self.detector = detector or RiskKeywordDetector()

    def interest_score(
        self,
        likes: float = 0,
        comments: float = 0,
        shares: float = 0,
        saves: float = 0,
        watch_time: float = 0,
    ) -> float:
        values = {
            "likes": likes,
            "comments": comments,
            "shares": shares,
            "saves": saves,
            "watch_time": watch_time,
        }
        score = math.fsum(
            min(values[name] / INTEREST_CAPS[name], 1.0) * INTEREST_WEIGHTS[name]
            for name in INTEREST_WEIGHTS
        ) * 100
        return clamp(score)

    def stress_score(
        self,
        avg_sentiment: float = 0.0,
        negative_pct: float = 0.0,
        post_frequency: float = 0.0,
        texts: Iterable[str] = (),
    ) -> float:
        normalized_sentiment = (avg_sentiment + 1) / 2
        negative_content = negative_pct / 100
        normalized_frequency = min(post_frequency / POST_FREQUENCY_CAP, 1.0)
        density = self.risk_keyword_density(texts)

        score = math.fsum([
            (1 - normalized_sentiment) * STRESS_WEIGHTS["negative_sentiment"],
            negative_content * STRESS_WEIGHTS["negative_content"],
            normalized_frequency * STRESS_WEIGHTS["post_frequency"],
            density * STRESS_WEIGHTS["risk_density"],
        ]) * 100
        return clamp(score)

    def risk_keyword_density(self, texts: Iterable[str]) -> float:
        """风险词出现次数 / 总词数，无文本时为 0"""
        total_words = 0
        risk_hits = 0
        for text in texts:
            if not text or not isinstance(text, str):
                continue
            total_words += len(text.split())
            risk_hits += self.detector.count_keyword_hits(text)

        if total_words == 0:
            return 0.0
        return min(risk_hits / total_words, 1.0)

    @staticmethod
    def post_frequency(total_posts: int, options: AnalysisOptions) -> float:
        """每日发帖频率"""
        if options.time_range is TimeRange.CUSTOM and options.start_date and options.end_date:
            days = (options.end_date - options.start_date).total_seconds() / 86400
            return total_posts / max(1.0, days)
        return total_posts / (options.time_range.days or 30)

    @staticmethod
    def mood_score(avg_sentiment: float) -> float:
        return clamp(50 + avg_sentiment * 25)

    @staticmethod
    def energy_level(interest_score: float) -> float:
        return clamp(50 + (interest_score - 50) * 0.5)

    @staticmethod
    def social_support(avg_comments: float) -> float:
        return clamp(50 + avg_comments * 0.1)

    def calculate(
        self,
        engagement: EngagementAggregate,
        sentiment: SentimentAggregate,
        post_frequency: float,
        texts: Iterable[str] = (),
    ) -> CompositeScores:
        interest = self.interest_score(
            likes=engagement.avg_likes,
            comments=engagement.avg_comments,
            shares=engagement.avg_shares,
            saves=engagement.avg_saves,
            watch_time=engagement.avg_watch_time,
        )
        stress = self.stress_score(
            avg_sentiment=sentiment.avg_sentiment,
            negative_pct=sentiment.negative_pct,
            post_frequency=post_frequency,
            texts=texts,
        )
        return CompositeScores(
            interest_score=interest,
            stress_score=stress,
            mood_score=self.mood_score(sentiment.avg_sentiment),
            energy_level=self.energy_level(interest),
            social_support=self.social_support(engagement.avg_comments),
            interest_level=interest_category(interest),
            stress_level=stress_category(stress),
        )
