"""分析服务：输入校验、缓存与完整分析流程"""
import hashlib
import json
import time
from collections.abc import Mapping
from datetime import datetime, timedelta, timezone
from typing import Any, List, Optional, Sequence

from pydantic import ValidationError

from app.analyzers import (
    EngagementAggregator,
    ReportAssembler,
    RiskKeywordDetector,
    RiskSummaryBuilder,
    ScoreCalculator,
    SentimentScorer,
    TrendBuilder,
)
from app.config import Settings, get_settings
from app.errors import AnalysisError, ComputationError, InvalidInputError
from app.schemas.analysis import AnalysisResponse, AnalysisResult
from app.schemas.records import AnalysisOptions, PostRecord, TimeRange
from app.services.result_cache import ResultCache
from app.utils.logger import get_logger

logger = get_logger(__name__)


def validate_records(records: Any) -> List[PostRecord]:
    """校验输入批次，结构问题直接失败，不做部分处理"""
    if isinstance(records, (str, bytes)) or not isinstance(records, Sequence):
        raise InvalidInputError("Records must be a list")
    if len(records) == 0:
        raise InvalidInputError("No records provided for analysis", no_data=True)

    validated = []
    for index, record in enumerate(records):
        if isinstance(record, PostRecord):
            validated.append(record)
            continue
        if not isinstance(record, Mapping):
            raise InvalidInputError(f"Invalid record at index {index}: must be an object", index=index)
        try:
            validated.append(PostRecord.model_validate(record))
        except ValidationError as e:
            raise InvalidInputError(f"Invalid record at index {index}: {e.errors()[0]['msg']}", index=index) from e
    return validated


def coerce_options(options: Any) -> AnalysisOptions:
    if options is None:
        return AnalysisOptions()
    if isinstance(options, AnalysisOptions):
        return options
    if not isinstance(options, Mapping):
        raise InvalidInputError("Options must be an object")
    try:
        return AnalysisOptions.model_validate(options)
    except ValidationError as e:
        raise InvalidInputError(f"Invalid analysis options: {e.errors()[0]['msg']}") from e


def resolve_time_window(
    time_range: TimeRange,
    start_date: Optional[datetime] = None,
    end_date: Optional[datetime] = None,
    now: Optional[datetime] = None,
) -> AnalysisOptions:
    """将时间范围解析为带明确起止时间的分析选项"""
    if time_range is TimeRange.CUSTOM:
        if start_date is None or end_date is None:
            raise InvalidInputError("Custom date range requires both start_date and end_date")
        return coerce_options({"time_range": time_range, "start_date": start_date, "end_date": end_date})

    end = now or datetime.now(timezone.utc)
    return AnalysisOptions(
        time_range=time_range,
        start_date=end - timedelta(days=time_range.days),
        end_date=end,
    )


def build_cache_key(records: Sequence[PostRecord], options: AnalysisOptions) -> str:
    """批次标识（id + 时间戳）与选项的稳定哈希"""
    records_key = "|".join(f"{r.id}:{r.timestamp.isoformat()}" for r in records)
    options_key = json.dumps(
        {
            "time_range": options.time_range.value,
            "start_date": options.start_date.isoformat() if options.start_date else None,
            "end_date": options.end_date.isoformat() if options.end_date else None,
        },
        sort_keys=True,
    )
    return hashlib.sha256(f"{records_key}|{options_key}".encode("utf-8")).hexdigest()


class AnalysisService:
    """分析服务，持有结果缓存；由应用启动时创建，关闭时释放"""

    def __init__(self, cache: Optional[ResultCache] = None, settings: Optional[Settings] = None):
        settings = settings or get_settings()
        if cache is None and settings.analysis_cache_enabled:
            cache = ResultCache(
                ttl_seconds=settings.analysis_cache_ttl_seconds,
                sweep_interval_seconds=settings.analysis_cache_sweep_interval_seconds,
            )
        self.cache = cache

        self.scorer = SentimentScorer()
        self.detector = RiskKeywordDetector(
            excerpt_limit=settings.risk_excerpt_limit,
            context_words=settings.risk_context_words,
        )
        self.risk_summary = RiskSummaryBuilder(example_limit=settings.risk_example_limit)
        self.aggregator = EngagementAggregator()
        self.calculator = ScoreCalculator(self.detector)
        self.trends = TrendBuilder(self.aggregator)
        self.assembler = ReportAssembler()

    def start(self) -> None:
        if self.cache is not None:
            self.cache.start_sweeper()

    def shutdown(self) -> None:
        if self.cache is not None:
            self.cache.shutdown(wait=True)

    def analyze(self, records: Any, options: Any = None) -> AnalysisResponse:
        """
        分析一个记录批次

        Args:
            records: PostRecord 或等价字典组成的列表
            options: AnalysisOptions 或等价字典，time_range 默认 30d

        Returns:
            AnalysisResponse: 分析结果、缓存命中标记与耗时
        """
        started = time.perf_counter()
        batch = validate_records(records)
        analysis_options = coerce_options(options)

        if self.cache is None:
            result, cached = self._run_analysis(batch, analysis_options), False
        else:
            key = build_cache_key(batch, analysis_options)
            result, cached = self.cache.get_or_compute(
                key, lambda: self._run_analysis(batch, analysis_options)
            )

        elapsed_ms = (time.perf_counter() - started) * 1000
        if not cached:
            logger.info(f"Analyzed {len(batch)} records in {elapsed_ms:.1f}ms")
        return AnalysisResponse(result=result, cached=cached, processing_time_ms=elapsed_ms)

    def _run_analysis(self, records: List[PostRecord], options: AnalysisOptions) -> AnalysisResult:
        """执行完整分析流程"""
        try:
            records = self.scorer.score_records(records)

            engagement = self.aggregator.aggregate(records)
            sentiment = self.scorer.aggregate(records)
            findings = self.detector.detect(records)

            post_frequency = self.calculator.post_frequency(len(records), options)
            scores = self.calculator.calculate(
                engagement,
                sentiment,
                post_frequency,
                texts=[r.text for r in records if r.text],
            )
            risk = self.risk_summary.build(findings)

            return self.assembler.assemble(
                engagement=engagement,
                sentiment=sentiment,
                scores=scores,
                risk=risk,
                by_platform=self.aggregator.by_platform(records),
                trends=self.trends.build(records, options),
            )
        except AnalysisError:
            raise
        except Exception as e:
            logger.exception("Analysis failed")
            raise ComputationError(str(e)) from e
