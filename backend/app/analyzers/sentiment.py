"""情感分析器（词典匹配）"""
import math
import string
from dataclasses import dataclass, field
from typing import List, Sequence

from app.errors import RecordProcessingError
from app.schemas.analysis import SentimentAggregate
from app.schemas.records import PostRecord, SentimentMetrics
from app.utils.logger import get_logger

logger = get_logger(__name__)

# 情感倾向阈值：高于 +0.1 记为正面，低于 -0.1 记为负面
POLARITY_THRESHOLD = 0.1


@dataclass
class TextSentiment:
    """单段文本的情感打分"""
    score: int = 0
    comparative: float = 0.0
    tokens: List[str] = field(default_factory=list)
    positive_words: List[str] = field(default_factory=list)
    negative_words: List[str] = field(default_factory=list)


class SentimentScorer:
    """情感分析器，正面词 +1、负面词 -1，无否定处理和词干还原"""

    POSITIVE_WORDS = frozenset({
        "happy", "happiness", "love", "loved", "lovely", "great", "good", "amazing",
        "awesome", "excellent", "wonderful", "fantastic", "beautiful", "best",
        "nice", "perfect", "joy", "joyful", "glad", "grateful", "thankful",
        "blessed", "excited", "exciting", "fun", "proud", "enjoy", "enjoyed",
        "peaceful", "calm", "relaxed", "smile", "smiling", "laugh", "laughter",
        "success", "successful", "inspired", "lucky", "cheerful", "delighted",
        "gratitude", "hopeful", "confident", "motivated", "win", "won",
        "celebrate", "brilliant", "strong", "support", "supportive", "yum",
    })

    NEGATIVE_WORDS = frozenset({
        "sad", "hate", "hated", "angry", "bad", "terrible", "awful", "horrible",
        "worst", "hopeless", "lonely", "depressed", "depression", "anxious",
        "anxiety", "stressed", "stress", "upset", "hurt", "pain", "cry",
        "crying", "miserable", "worthless", "useless", "failure", "scared",
        "afraid", "broken", "empty", "exhausted", "overwhelmed", "disappointed",
        "suicidal", "die", "dead", "kill", "fear", "worried", "sick", "annoyed",
        "frustrated", "numb", "guilty", "ashamed", "struggling", "tough",
        "down", "lost", "alone", "tired", "cutting", "hard",
    })

    def score(self, text) -> TextSentiment:
        """单段文本打分；空文本或非字符串视为中性"""
        if not text or not isinstance(text, str):
            return TextSentiment()

        tokens = [
            token.strip(string.punctuation).lower()
            for token in text.split()
        ]
        tokens = [token for token in tokens if token]
        if not tokens:
            return TextSentiment()

        positive = [token for token in tokens if token in self.POSITIVE_WORDS]
        negative = [token for token in tokens if token in self.NEGATIVE_WORDS]
        total = len(positive) - len(negative)

        return TextSentiment(
            score=total,
            comparative=total / len(tokens),
            tokens=tokens,
            positive_words=positive,
            negative_words=negative,
        )

    def score_record(self, record: PostRecord) -> PostRecord:
        """缺少情感值的记录按文本补齐，返回新记录"""
        if record.metrics.sentiment is not None:
            return record
        if record.text is not None and not isinstance(record.text, str):
            raise RecordProcessingError("post text is not a string", record_id=record.id)

        result = self.score(record.text)
        # comparative 天然落在 [-1, 1]，作为入库极性
        sentiment = SentimentMetrics(
            score=max(-1.0, min(1.0, result.comparative)),
            comparative=result.comparative,
        )
        metrics = record.metrics.model_copy(update={"sentiment": sentiment})
        return record.model_copy(update={"metrics": metrics})

    def score_records(self, records: Sequence[PostRecord]) -> List[PostRecord]:
        """批量补齐情感值，单条失败记录日志后按中性处理"""
        scored = []
        for record in records:
            try:
                scored.append(self.score_record(record))
            except Exception as e:
                logger.warning(f"[SentimentScorer] Skipping sentiment for record {record.id}: {e}")
                scored.append(record)
        return scored

    def aggregate(self, records: Sequence[PostRecord]) -> SentimentAggregate:
        """情感汇总：平均值与正/负/中性占比"""
        scores = [
            record.sentiment_score
            for record in records
            if not math.isnan(record.sentiment_score)
        ]
        if not scores:
            return SentimentAggregate()

        count = len(scores)
        avg_sentiment = sum(scores) / count
        positive_pct = sum(1 for s in scores if s > POLARITY_THRESHOLD) / count * 100
        negative_pct = sum(1 for s in scores if s < -POLARITY_THRESHOLD) / count * 100

        return SentimentAggregate(
            avg_sentiment=avg_sentiment,
            positive_pct=positive_pct,
            negative_pct=negative_pct,
            neutral_pct=100 - positive_pct - negative_pct,
            comparative=avg_sentiment * 5,
        )
