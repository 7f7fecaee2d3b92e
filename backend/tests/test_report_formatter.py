"""报告格式化测试"""
import pytest

from app.services.analysis_service import AnalysisService
from app.services.report_formatter import format_analysis_report


@pytest.fixture
def result(scenario_records):
    return AnalysisService(cache=None).analyze(scenario_records).result


def test_rounds_for_display(result):
    report = format_analysis_report(result)

    assert report["sentiment"]["positive_pct"] == 66.7
    assert report["sentiment"]["negative_pct"] == 33.3
    assert report["engagement"]["avg_likes"] == 8.0
    assert report["by_platform"][0]["engagement"]["avg_likes"] == 8.0
    assert report["scores"]["interest_score"] == round(result.scores.interest_score, 1)
    assert report["risk"]["medium_risk"] == 1


def test_dict_input_not_mutated(result):
    raw = result.model_dump(mode="json")
    raw["engagement"]["avg_comments"] = 1.23456

    report = format_analysis_report(raw)

    assert report["engagement"]["avg_comments"] == 1.23
    assert raw["engagement"]["avg_comments"] == 1.23456


def test_partial_report():
    assert format_analysis_report({"scores": {"stress_score": 33.333}}) == {"scores": {"stress_score": 33.3}}
