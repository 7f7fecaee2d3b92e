"""心理健康风险关键词检测"""
import re
from typing import Dict, List, Optional, Sequence, Set

from app.errors import RecordProcessingError
from app.schemas.analysis import ContextSnippet, RiskFinding, Severity
from app.schemas.records import PostRecord
from app.utils.logger import get_logger

logger = get_logger(__name__)


class RiskKeywordDetector:
    """
    风险关键词检测器

    按 high → medium → low 顺序匹配，命中即停止，
    每条帖子只归入它命中的最高等级。
    相同文本在一个批次内只检测一次。
    """

    RISK_KEYWORDS: Dict[Severity, List[str]] = {
        Severity.HIGH: [
            "suicide", "kill myself", "end my life", "suicidal",
            "self-harm", "self harm", "cutting", "want to die",
        ],
        Severity.MEDIUM: [
            "hopeless", "can't go on", "tired of life",
            "no reason to live", "give up",
        ],
        Severity.LOW: [
            "depressed", "anxious", "overwhelmed", "lonely",
            "alone", "nobody cares", "no one cares", "worthless",
            "useless", "failure", "hate myself", "disappointed in myself",
        ],
    }

    TIER_ORDER = (Severity.HIGH, Severity.MEDIUM, Severity.LOW)

    def __init__(self, excerpt_limit: int = 200, context_words: int = 10):
        self.excerpt_limit = excerpt_limit
        self.context_words = context_words
        self.patterns = {
            severity: self._compile(keywords)
            for severity, keywords in self.RISK_KEYWORDS.items()
        }
        self.any_pattern = self._compile(
            [kw for severity in self.TIER_ORDER for kw in self.RISK_KEYWORDS[severity]]
        )

    @staticmethod
    def _compile(keywords: List[str]) -> re.Pattern:
        # 长短语优先，避免被其前缀抢先匹配
        ordered = sorted(keywords, key=len, reverse=True)
        return re.compile(r"\b(" + "|".join(re.escape(kw) for kw in ordered) + r")\b", re.IGNORECASE)

    def detect(self, records: Sequence[PostRecord]) -> List[RiskFinding]:
        """扫描批次，返回风险命中列表"""
        findings: List[RiskFinding] = []
        processed_texts: Set[str] = set()

        for record in records:
            text = getattr(record, "text", None)
            try:
                if not text:
                    continue
                if not isinstance(text, str):
                    raise RecordProcessingError("post text is not a string", record_id=getattr(record, "id", None))
                if text in processed_texts:
                    continue
                processed_texts.add(text)

                finding = self.scan(record, text)
                if finding is not None:
                    findings.append(finding)
            except Exception as e:
                logger.error(f"[RiskKeywordDetector] Error scanning record {getattr(record, 'id', None)}: {e}")

        return findings

    def scan(self, record: PostRecord, text: str) -> Optional[RiskFinding]:
        """单条文本检测，首个命中等级即为结果"""
        for severity in self.TIER_ORDER:
            matches = self.patterns[severity].findall(text)
            if not matches:
                continue

            keywords = list(dict.fromkeys(match.lower() for match in matches))
            return RiskFinding(
                post_id=record.id,
                excerpt=self._excerpt(text),
                timestamp=record.timestamp,
                matched_keywords=keywords,
                severity=severity,
                context_snippets=self.context_snippets(text, keywords),
            )
        return None

    def count_keyword_hits(self, text) -> int:
        """文本中所有等级关键词出现次数"""
        if not text or not isinstance(text, str):
            return 0
        return len(self.any_pattern.findall(text))

    def context_snippets(self, text: str, keywords: List[str]) -> List[ContextSnippet]:
        """每处关键词出现提取前后若干词的上下文，关键词加粗"""
        words = text.split()
        if not words or not keywords:
            return []

        pattern = self._compile(keywords)
        snippets = []
        for match in pattern.finditer(text):
            keyword = match.group(0).lower()
            before = text[:match.start()]
            index = len(before.split())
            # 匹配起点位于某个词内部（如 "(alone"）时归入该词
            if before and not before[-1].isspace():
                index -= 1
            span = len(keyword.split())

            start = max(0, index - self.context_words)
            end = min(len(words), index + span + self.context_words)
            snippet = self._compile([keyword]).sub(
                lambda m: f"<strong>{m.group(0)}</strong>",
                " ".join(words[start:end]),
            )
            snippets.append(ContextSnippet(
                keyword=keyword,
                snippet=snippet,
                position=f"{round(index / len(words) * 100)}%",
            ))
        return snippets

    def _excerpt(self, text: str) -> str:
        if len(text) > self.excerpt_limit:
            return f"{text[:self.excerpt_limit]}..."
        return text
