"""时间趋势：按日/按 ISO 周聚合"""
from datetime import date, datetime, time, timedelta
from typing import Dict, List, Optional, Sequence, Tuple

from app.analyzers.engagement import EngagementAggregator
from app.schemas.analysis import DailyTrendPoint, TrendSeries, WeeklyTrendPoint
from app.schemas.records import AnalysisOptions, PostRecord


class TrendBuilder:
    """趋势构建器，空白日期不补零"""

    def __init__(self, aggregator: Optional[EngagementAggregator] = None):
        self.aggregator = aggregator or EngagementAggregator()

    def build(self, records: Sequence[PostRecord], options: AnalysisOptions) -> TrendSeries:
        start, end = self.resolve_window(records, options)
        return TrendSeries(
            daily=self.daily(records, start, end),
            weekly=self.weekly(records, start, end),
        )

    @staticmethod
    def resolve_window(records: Sequence[PostRecord], options: AnalysisOptions) -> Tuple[datetime, datetime]:
        """选项未给出日期时，用批次首尾日期推导 [start, end)"""
        if options.start_date and options.end_date:
            return options.start_date, options.end_date

        days = [record.timestamp.date() for record in records]
        first, last = min(days), max(days)
        given = options.start_date or options.end_date
        tzinfo = given.tzinfo if given else None
        start = options.start_date or datetime.combine(first, time.min, tzinfo=tzinfo)
        end = options.end_date or datetime.combine(last + timedelta(days=1), time.min, tzinfo=tzinfo)
        return start, end

    @staticmethod
    def window_days(start: datetime, end: datetime) -> List[date]:
        """[start, end) 覆盖的日历日期，含 end 前最后一刻所在的日期"""
        first = start.date()
        last = (end - timedelta(microseconds=1)).date()
        return [first + timedelta(days=i) for i in range((last - first).days + 1)]

    def daily(self, records: Sequence[PostRecord], start: datetime, end: datetime) -> List[DailyTrendPoint]:
        by_day = self.aggregator.group_by_day(records)
        points = []
        for day in self.window_days(start, end):
            items = by_day.get(day)
            if not items:
                continue
            points.append(DailyTrendPoint(date=day, **self._totals(items)))
        return points

    def weekly(self, records: Sequence[PostRecord], start: datetime, end: datetime) -> List[WeeklyTrendPoint]:
        by_day = self.aggregator.group_by_day(records)
        weeks: Dict[Tuple[int, int], List[PostRecord]] = {}
        for day in self.window_days(start, end):
            items = by_day.get(day)
            if not items:
                continue
            iso = day.isocalendar()
            weeks.setdefault((iso[0], iso[1]), []).extend(items)

        return [
            WeeklyTrendPoint(year=year, week=week, **self._totals(items))
            for (year, week), items in sorted(weeks.items())
        ]

    def _totals(self, items: Sequence[PostRecord]) -> dict:
        return {
            "post_count": len(items),
            "avg_sentiment": sum(r.sentiment_score for r in items) / len(items),
            "total_likes": self.aggregator.sum_field(items, "likes"),
            "total_comments": self.aggregator.sum_field(items, "comments"),
            "total_shares": self.aggregator.sum_field(items, "shares"),
        }
