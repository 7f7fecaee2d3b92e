"""分析服务测试"""
import pytest

from app.config import get_settings
from app.errors import ComputationError, InvalidInputError
from app.schemas import RiskLevel, Severity, TimeRange
from app.services.analysis_service import (
    AnalysisService,
    build_cache_key,
    coerce_options,
    resolve_time_window,
    validate_records,
)
from app.services.result_cache import ResultCache


class TestAnalysisService:
    """AnalysisService 端到端测试"""

    @pytest.fixture
    def service(self, clock):
        return AnalysisService(cache=ResultCache(ttl_seconds=300, clock=clock))

    def test_scenario_duplicate_positive_text(self, service, scenario_records):
        result = service.analyze(scenario_records).result

        assert result.risk.total == 1
        assert result.risk.medium_risk == 1
        assert result.risk.examples[0].post_id == "2"
        assert result.risk.examples[0].severity is Severity.MEDIUM
        assert result.risk.risk_level is RiskLevel.MEDIUM

        assert result.sentiment.positive_pct == pytest.approx(200 / 3)
        assert result.sentiment.negative_pct == pytest.approx(100 / 3)
        assert result.sentiment.neutral_pct == pytest.approx(0.0, abs=1e-9)

    def test_percentages_sum_to_100(self, service, scenario_records):
        sentiment = service.analyze(scenario_records).result.sentiment

        total = sentiment.positive_pct + sentiment.negative_pct + sentiment.neutral_pct
        assert total == pytest.approx(100.0)

    def test_saturated_engagement(self, service):
        records = [{
            "id": "1",
            "provider": "youtube",
            "timestamp": "2024-01-01T00:00:00Z",
            "metrics": {"likes": 200, "comments": 20, "shares": 10, "saves": 20, "watch_time_seconds": 300},
        }]
        scores = service.analyze(records).result.scores

        assert scores.interest_score == pytest.approx(100.0)
        assert 0.0 <= scores.stress_score <= 100.0

    def test_empty_batch(self, service):
        with pytest.raises(InvalidInputError) as exc_info:
            service.analyze([])

        assert exc_info.value.no_data is True

    def test_not_a_list(self, service):
        with pytest.raises(InvalidInputError):
            service.analyze({"id": "1"})
        with pytest.raises(InvalidInputError):
            service.analyze("records")

    def test_missing_metrics(self, service):
        records = [
            {"id": "1", "provider": "instagram", "timestamp": "2024-01-01T00:00:00Z", "metrics": {}},
            {"id": "2", "provider": "instagram", "timestamp": "2024-01-01T00:00:00Z"},
        ]

        with pytest.raises(InvalidInputError) as exc_info:
            service.analyze(records)

        assert exc_info.value.index == 1
        assert exc_info.value.no_data is False

    def test_invalid_options(self, service, scenario_records):
        with pytest.raises(InvalidInputError):
            service.analyze(scenario_records, {"time_range": "custom"})

    def test_repeat_call_is_cached(self, service, scenario_records):
        first = service.analyze(scenario_records, {"time_range": "7d"})
        second = service.analyze(scenario_records, {"time_range": "7d"})

        assert first.cached is False
        assert second.cached is True
        assert second.result == first.result

    def test_different_options_not_shared(self, service, scenario_records):
        service.analyze(scenario_records, {"time_range": "7d"})

        assert service.analyze(scenario_records, {"time_range": "30d"}).cached is False

    def test_recomputed_after_ttl(self, service, scenario_records, clock):
        service.analyze(scenario_records)
        clock.advance(301)

        response = service.analyze(scenario_records)

        assert response.cached is False

    def test_without_cache(self, scenario_records):
        settings = get_settings().model_copy(update={"analysis_cache_enabled": False})
        service = AnalysisService(settings=settings)

        assert service.cache is None
        assert service.analyze(scenario_records).cached is False
        assert service.analyze(scenario_records).cached is False

    def test_unexpected_failure_wrapped(self, service, scenario_records, monkeypatch):
        def broken(*args, **kwargs):
            raise ZeroDivisionError("division by zero")

        monkeypatch.setattr(service.calculator, "calculate", broken)

        with pytest.raises(ComputationError) as exc_info:
            service.analyze(scenario_records)

        assert isinstance(exc_info.value.__cause__, ZeroDivisionError)
        assert exc_info.value.message == "analysis failed: division by zero"

    def test_summary_and_trends(self, service, scenario_records):
        result = service.analyze(scenario_records).result

        assert len(result.trends.daily) == 3
        assert result.summary.overall.startswith("Your social media engagement is ")
        assert any("1 posts that may indicate some emotional distress" in f for f in result.summary.key_findings)
        assert result.by_platform[0].post_count == 3


def test_validate_records_coerces_numeric_id():
    records = validate_records([{
        "id": 42,
        "provider": "Instagram",
        "timestamp": "2024-01-01T00:00:00Z",
        "text": ["not", "text"],
        "metrics": {},
    }])

    assert records[0].id == "42"
    assert records[0].provider.value == "instagram"
    assert records[0].text is None


def test_cache_key_depends_on_ids_timestamps_and_options(scenario_records):
    records = validate_records(scenario_records)
    options = coerce_options({"time_range": "7d"})

    assert build_cache_key(records, options) == build_cache_key(validate_records(scenario_records), options)
    assert build_cache_key(records, options) != build_cache_key(records[:2], options)
    assert build_cache_key(records, options) != build_cache_key(records, coerce_options({"time_range": "14d"}))


def test_resolve_time_window(utc):
    now = utc(2024, 2, 1)
    options = resolve_time_window(TimeRange.LAST_7_DAYS, now=now)

    assert options.start_date == utc(2024, 1, 25)
    assert options.end_date == now

    with pytest.raises(InvalidInputError):
        resolve_time_window(TimeRange.CUSTOM, start_date=now)
