"""分析结果组装与自然语言摘要"""
from typing import List, Sequence

from app.analyzers.scoring import interest_category, stress_category
from app.schemas.analysis import (
    AnalysisResult,
    CompositeScores,
    DailyTrendPoint,
    EngagementAggregate,
    PlatformBreakdown,
    RiskReport,
    SentimentAggregate,
    Summary,
    TrendSeries,
)

# 日均发帖超过该值时给出频率提醒
FREQUENT_POSTING_PER_DAY = 5

BALANCED_HABITS = "Your social media habits appear balanced. Keep up the good work!"
NO_POSITIVE_ASPECTS = "No significant positive aspects detected"
NO_CONCERNS = "No significant areas of concern detected"


class ReportAssembler:
    """将各组件输出合并为 AnalysisResult"""

    def assemble(
        self,
        engagement: EngagementAggregate,
        sentiment: SentimentAggregate,
        scores: CompositeScores,
        risk: RiskReport,
        by_platform: List[PlatformBreakdown],
        trends: TrendSeries,
    ) -> AnalysisResult:
        return AnalysisResult(
            engagement=engagement,
            sentiment=sentiment,
            scores=scores,
            risk=risk,
            by_platform=by_platform,
            trends=trends,
            summary=self.build_summary(scores, risk, by_platform, trends.daily),
        )

    def build_summary(
        self,
        scores: CompositeScores,
        risk: RiskReport,
        by_platform: Sequence[PlatformBreakdown],
        daily: Sequence[DailyTrendPoint],
    ) -> Summary:
        """模板化摘要，相同输入得到相同文本"""
        interest_level = interest_category(scores.interest_score)
        stress_level = stress_category(scores.stress_score)

        key_findings: List[str] = []
        recommendations: List[str] = []
        positive_aspects: List[str] = []
        areas_of_concern: List[str] = []

        if interest_level == "high":
            key_findings.append(
                "Your engagement level is high, indicating strong interest in your social media content."
            )
            positive_aspects.append("High engagement with your content")
        elif interest_level == "moderate":
            key_findings.append("Your engagement level is moderate. There is room for increased interaction.")
        else:
            key_findings.append(
                "Your engagement level is lower than average. "
                "Consider experimenting with different types of content."
            )
            recommendations.append(
                "Try posting at different times or using different content formats to increase engagement."
            )

        if stress_level == "high":
            key_findings.append("Your stress indicators are elevated. Consider taking breaks from social media.")
            areas_of_concern.append("Elevated stress levels")
            recommendations.append(
                "Consider implementing digital wellness practices like screen time limits or mindfulness exercises."
            )
        elif stress_level == "moderate":
            key_findings.append("Your stress levels appear to be within a moderate range.")
            recommendations.append("Be mindful of your social media usage to maintain healthy stress levels.")
        else:
            key_findings.append("Your stress levels appear to be well-managed.")
            positive_aspects.append("Healthy stress management")

        if risk.high_risk > 0:
            key_findings.append(
                f"We've detected {risk.high_risk} posts with concerning content that may indicate distress."
            )
            areas_of_concern.append("Concerning content in posts")
            recommendations.append("Consider reaching out to a mental health professional for support.")
        elif risk.medium_risk > 0:
            key_findings.append(
                f"We've detected {risk.medium_risk} posts that may indicate some emotional distress."
            )
            recommendations.append(
                "Be mindful of your emotional well-being and consider talking to someone "
                "if you're feeling overwhelmed."
            )

        if by_platform:
            top = by_platform[0]
            for platform in by_platform[1:]:
                if platform.engagement.avg_likes > top.engagement.avg_likes:
                    top = platform
            key_findings.append(
                f"Your highest engagement is on {top.platform.value} with an average of "
                f"{round(top.engagement.avg_likes)} likes per post."
            )
            if len(by_platform) > 1:
                recommendations.append(
                    f"Consider focusing on the content strategies that work well on "
                    f"{top.platform.value} for other platforms."
                )

        if len(daily) > 1:
            avg_posts_per_day = sum(day.post_count for day in daily) / len(daily)
            if avg_posts_per_day > FREQUENT_POSTING_PER_DAY:
                key_findings.append(
                    f"You're posting an average of {round(avg_posts_per_day)} times per day, "
                    f"which is quite frequent."
                )
                recommendations.append(
                    "Consider quality over quantity - fewer, more meaningful posts often perform better."
                )

        return Summary(
            overall=(
                f"Your social media engagement is {interest_level}, "
                f"and your stress levels appear {stress_level}."
            ),
            key_findings=key_findings,
            recommendations=recommendations or [BALANCED_HABITS],
            positive_aspects=positive_aspects or [NO_POSITIVE_ASPECTS],
            areas_of_concern=areas_of_concern or [NO_CONCERNS],
        )
