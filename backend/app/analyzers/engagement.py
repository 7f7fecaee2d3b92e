"""互动数据聚合"""
from collections import defaultdict
from datetime import date
from typing import Dict, List, Sequence

from app.errors import InvalidInputError
from app.schemas.analysis import EngagementAggregate, PlatformBreakdown, PlatformEngagement
from app.schemas.records import PostRecord

ENGAGEMENT_FIELDS = ("likes", "comments", "shares", "saves", "watch_time_seconds")


class EngagementAggregator:
    """按批次、平台、日期聚合互动指标"""

    def sum_field(self, records: Sequence[PostRecord], field: str) -> int:
        return sum(getattr(record.metrics, field) or 0 for record in records)

    def aggregate(self, records: Sequence[PostRecord]) -> EngagementAggregate:
        """批次汇总；空批次属于调用方违约"""
        if not records:
            raise InvalidInputError("No records provided for engagement aggregation", no_data=True)

        totals = {field: self.sum_field(records, field) for field in ENGAGEMENT_FIELDS}
        total_posts = len(records)

        return EngagementAggregate(
            total_posts=total_posts,
            total_likes=totals["likes"],
            total_comments=totals["comments"],
            total_shares=totals["shares"],
            total_saves=totals["saves"],
            total_watch_time=totals["watch_time_seconds"],
            avg_likes=totals["likes"] / total_posts,
            avg_comments=totals["comments"] / total_posts,
            avg_shares=totals["shares"] / total_posts,
            avg_saves=totals["saves"] / total_posts,
            avg_watch_time=totals["watch_time_seconds"] / total_posts,
            engagement_rate=(totals["likes"] + totals["comments"] + totals["shares"]) / total_posts,
        )

    def by_platform(self, records: Sequence[PostRecord]) -> List[PlatformBreakdown]:
        """按平台分组，顺序为平台首次出现的顺序"""
        groups: Dict[str, List[PostRecord]] = {}
        for record in records:
            groups.setdefault(record.provider, []).append(record)

        breakdown = []
        for platform, items in groups.items():
            count = len(items)
            likes = self.sum_field(items, "likes")
            comments = self.sum_field(items, "comments")
            shares = self.sum_field(items, "shares")
            breakdown.append(PlatformBreakdown(
                platform=platform,
                post_count=count,
                engagement=PlatformEngagement(
                    likes=likes,
                    comments=comments,
                    shares=shares,
                    avg_likes=likes / count,
                    avg_comments=comments / count,
                    avg_shares=shares / count,
                ),
                sentiment=sum(r.sentiment_score for r in items) / count,
            ))
        return breakdown

    def group_by_day(self, records: Sequence[PostRecord]) -> Dict[date, List[PostRecord]]:
        """按时间戳自身时区下的日历日期分组"""
        days: Dict[date, List[PostRecord]] = defaultdict(list)
        for record in records:
            days[record.timestamp.date()].append(record)
        return dict(days)
