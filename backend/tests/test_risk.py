"""风险关键词检测测试"""
from datetime import datetime, timezone
from types import SimpleNamespace

import pytest

from app.analyzers.risk import RiskKeywordDetector
from app.schemas import Severity


class TestRiskKeywordDetector:
    """RiskKeywordDetector 单元测试"""

    @pytest.fixture
    def detector(self):
        return RiskKeywordDetector()

    def test_medium_keywords(self, detector, make_record):
        findings = detector.detect([make_record("2", "I feel hopeless and want to give up")])

        assert len(findings) == 1
        assert findings[0].post_id == "2"
        assert findings[0].severity is Severity.MEDIUM
        assert findings[0].matched_keywords == ["hopeless", "give up"]

    def test_highest_tier_wins(self, detector, make_record):
        findings = detector.detect([make_record("1", "I want to die, I am so lonely")])

        assert len(findings) == 1
        assert findings[0].severity is Severity.HIGH
        assert findings[0].matched_keywords == ["want to die"]

    def test_duplicate_text_scanned_once(self, detector, make_record):
        findings = detector.detect([
            make_record("1", "feeling so alone"),
            make_record("2", "feeling so alone"),
        ])

        assert [f.post_id for f in findings] == ["1"]

    def test_duplicate_positive_text_ignored(self, detector, make_record):
        findings = detector.detect([
            make_record("1", "I am so happy today"),
            make_record("2", "I feel hopeless and want to give up"),
            make_record("3", "I am so happy today"),
        ])

        assert len(findings) == 1
        assert findings[0].post_id == "2"

    def test_case_insensitive_and_word_boundaries(self, detector, make_record):
        assert detector.detect([make_record("1", "Thinking about SUICIDE")])[0].matched_keywords == ["suicide"]
        assert detector.detect([make_record("2", "enjoying some aloneness")]) == []

    def test_keywords_unique(self, detector, make_record):
        finding = detector.detect([make_record("1", "alone, alone, always alone")])[0]

        assert finding.matched_keywords == ["alone"]

    def test_empty_text_skipped(self, detector, make_record):
        assert detector.detect([make_record("1", None), make_record("2", "")]) == []

    def test_bad_record_does_not_abort_batch(self, detector, make_record):
        broken = SimpleNamespace(id="x", text=123, timestamp=datetime(2024, 1, 1, tzinfo=timezone.utc))
        findings = detector.detect([broken, make_record("2", "so overwhelmed")])

        assert [f.post_id for f in findings] == ["2"]
        assert findings[0].severity is Severity.LOW

    def test_excerpt_truncated(self, detector, make_record):
        text = "lonely " + "x" * 250
        finding = detector.detect([make_record("1", text)])[0]

        assert len(finding.excerpt) == 203
        assert finding.excerpt.endswith("...")
        assert finding.excerpt.startswith("lonely ")

    def test_short_excerpt_kept(self, detector, make_record):
        finding = detector.detect([make_record("1", "so lonely")])[0]

        assert finding.excerpt == "so lonely"

    def test_context_snippets(self, detector):
        snippets = detector.context_snippets("I feel so alone tonight", ["alone"])

        assert len(snippets) == 1
        assert snippets[0].snippet == "I feel so <strong>alone</strong> tonight"
        assert snippets[0].position == "60%"

    def test_context_snippet_window(self):
        detector = RiskKeywordDetector(context_words=2)
        text = "one two three four hopeless five six seven"
        snippet = detector.context_snippets(text, ["hopeless"])[0]

        assert snippet.snippet == "three four <strong>hopeless</strong> five six"

    def test_count_keyword_hits(self, detector):
        assert detector.count_keyword_hits("alone and hopeless, so alone") == 3
        assert detector.count_keyword_hits(None) == 0

    def test_snippet_centred_on_whole_word(self):
        detector = RiskKeywordDetector(context_words=1)
        snippets = detector.context_snippets("failures happen, I am a failure", ["failure"])

        assert len(snippets) == 1
        assert snippets[0].snippet == "a <strong>failure</strong>"
        assert snippets[0].position == "83%"

    def test_snippet_per_occurrence(self, detector, make_record):
        finding = detector.detect([make_record("1", "alone at home, alone at work")])[0]

        assert finding.matched_keywords == ["alone"]
        assert [s.position for s in finding.context_snippets] == ["0%", "50%"]
        assert all(s.keyword == "alone" for s in finding.context_snippets)

    def test_snippet_match_inside_punctuated_word(self, detector):
        snippets = detector.context_snippets("so (alone) tonight", ["alone"])

        assert snippets[0].snippet == "so (<strong>alone</strong>) tonight"
        assert snippets[0].position == "33%"
