"""风险汇总：等级判定、风险分、示例排序与建议"""
from typing import List, Sequence

from app.schemas.analysis import RiskFinding, RiskLevel, RiskReport, RiskSummary, Severity

# 每条命中对风险分的贡献
SEVERITY_POINTS = {Severity.HIGH: 10, Severity.MEDIUM: 3, Severity.LOW: 1}
MAX_RISK_SCORE = 100

ASSESSMENTS = {
    RiskLevel.HIGH: "High risk level detected. Immediate attention is recommended.",
    RiskLevel.MEDIUM_HIGH: "Moderate to high risk level detected. Close monitoring is advised.",
    RiskLevel.MEDIUM: "Moderate risk level detected. Consider monitoring for changes.",
    RiskLevel.LOW_MEDIUM: "Low to moderate risk level detected.",
    RiskLevel.LOW: "Low risk level detected. No immediate action needed.",
    RiskLevel.NONE: "No significant risk indicators detected.",
}


def risk_score(high: int, medium: int, low: int) -> int:
    """确定性风险分，封顶 100"""
    total = (
        high * SEVERITY_POINTS[Severity.HIGH]
        + medium * SEVERITY_POINTS[Severity.MEDIUM]
        + low * SEVERITY_POINTS[Severity.LOW]
    )
    return min(MAX_RISK_SCORE, total)


def risk_level(high: int, medium: int, low: int) -> RiskLevel:
    """整体风险等级，自上而下首个满足的条件生效"""
    if high > 0:
        return RiskLevel.HIGH
    if medium >= 3:
        return RiskLevel.MEDIUM_HIGH
    if medium > 0:
        return RiskLevel.MEDIUM
    if low >= 5:
        return RiskLevel.LOW_MEDIUM
    if low > 0:
        return RiskLevel.LOW
    return RiskLevel.NONE


class RiskSummaryBuilder:
    """将检测结果转换为风险报告"""

    def __init__(self, example_limit: int = 5):
        self.example_limit = example_limit

    def build(self, findings: Sequence[RiskFinding]) -> RiskReport:
        high = sum(1 for f in findings if f.severity is Severity.HIGH)
        medium = sum(1 for f in findings if f.severity is Severity.MEDIUM)
        low = sum(1 for f in findings if f.severity is Severity.LOW)

        level = risk_level(high, medium, low)
        score = risk_score(high, medium, low)

        return RiskReport(
            total=len(findings),
            high_risk=high,
            medium_risk=medium,
            low_risk=low,
            risk_level=level,
            risk_score=score,
            examples=self.rank_examples(findings),
            summary=self.summarize(level, high, medium, low, score),
        )

    def rank_examples(self, findings: Sequence[RiskFinding]) -> List[RiskFinding]:
        """按等级、命中词数、时间倒序排序后取前 N 条"""
        ranked = sorted(
            findings,
            key=lambda f: (f.severity.rank, len(f.matched_keywords), f.timestamp.timestamp()),
            reverse=True,
        )
        return ranked[:self.example_limit]

    def summarize(self, level: RiskLevel, high: int, medium: int, low: int, score: int) -> RiskSummary:
        parts = []
        recommendations = []

        if high > 0:
            parts.append(f"{high} high-risk indicators found")
            recommendations.append(
                "Immediate attention recommended. Consider reaching out to a mental health professional."
            )
        if medium > 0:
            parts.append(f"{medium} medium-risk indicators found")
            if level is RiskLevel.MEDIUM_HIGH:
                recommendations.append("Multiple concerning indicators detected. Monitoring is advised.")
        if low > 0:
            parts.append(f"{low} low-risk indicators found")
            if level is RiskLevel.LOW_MEDIUM:
                recommendations.append("Several low-risk indicators detected. Consider monitoring for changes.")

        return RiskSummary(
            summary=", ".join(parts) if parts else "No risk indicators found",
            assessment=ASSESSMENTS[level],
            recommendations=recommendations or ["No specific recommendations at this time."],
            risk_score=score,
            risk_level=level,
        )
