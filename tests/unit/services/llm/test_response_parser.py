"""Tests for ResponseParser module."""

import pytest

from paperrank.services.llm.response_parser import ResponseParser
from paperrank.utils.exceptions import JSONParseError


class TestResponseParser:
    """Tests for ResponseParser class."""

    @pytest.fixture
    def parser(self) -> ResponseParser:
        return ResponseParser(reason_chars=20)

    def test_parse_full_format(self, parser) -> None:
        text = (
            '[{"index":0,"relevance":8,"discovery":4,"reason":"labor match"},'
            '{"index":1,"relevance":3,"discovery":9,"reason":"new method"}]'
        )
        scores = parser.parse(text, expected_count=2)

        assert [s.index for s in scores] == [0, 1]
        assert scores[0].relevance == 8.0
        assert scores[0].discovery == 4.0
        assert scores[1].reason == "new method"

    def test_parse_legacy_format(self, parser) -> None:
        scores = parser.parse('[{"i":0,"s":7,"r":"ok"}]', expected_count=1)
        assert scores[0].relevance == 7.0
        assert scores[0].discovery == 7.0
        assert scores[0].reason == "ok"

    def test_missing_discovery_defaults_to_relevance(self, parser) -> None:
        scores = parser.parse('[{"index":0,"relevance":6}]', expected_count=1)
        assert scores[0].discovery == 6.0
        assert scores[0].reason == ""

    def test_code_fence_stripped(self, parser) -> None:
        text = '```json\n[{"index":0,"relevance":5,"discovery":5,"reason":"x"}]\n```'
        assert len(parser.parse(text, expected_count=1)) == 1

    def test_surrounding_prose_stripped(self, parser) -> None:
        text = 'Here are the scores: [{"index":0,"relevance":5}] Hope this helps.'
        assert len(parser.parse(text, expected_count=1)) == 1

    def test_trailing_prose_after_array(self, parser) -> None:
        text = '[{"index":0,"relevance":7,"discovery":5,"reason":"ok"}]\nHope this helps!'
        scores = parser.parse(text, expected_count=1)
        assert len(scores) == 1
        assert scores[0].relevance == 7.0

    def test_bracketed_prose_around_array(self, parser) -> None:
        text = (
            'Here (scale [1, 10]): [{"index":0,"relevance":7,"discovery":5,"reason":"ok"}]'
            " (scores in [1, 10])"
        )
        scores = parser.parse(text, expected_count=1)
        assert [s.index for s in scores] == [0]
        assert scores[0].discovery == 5.0

    def test_prose_inside_code_fence(self, parser) -> None:
        text = '```json\n[{"index":0,"relevance":6}]\nThat is all.\n```'
        assert parser.parse(text, expected_count=1)[0].relevance == 6.0

    def test_scores_clamped_and_rounded(self, parser) -> None:
        text = '[{"index":0,"relevance":14,"discovery":0},{"index":1,"relevance":6.66}]'
        scores = parser.parse(text, expected_count=2)
        assert scores[0].relevance == 10.0
        assert scores[0].discovery == 1.0
        assert scores[1].relevance == 6.7

    def test_malformed_entries_dropped(self, parser) -> None:
        text = (
            '[{"index":0,"relevance":"high"},'
            '{"index":5,"relevance":7},'
            '{"index":-1,"relevance":7},'
            '{"index":true,"relevance":7},'
            '{"index":"1","relevance":7},'
            '"not an object",'
            '{"index":2,"relevance":NaN},'
            '{"index":3,"relevance":7}]'
        )
        scores = parser.parse(text, expected_count=4)
        assert [s.index for s in scores] == [3]

    def test_duplicate_index_keeps_last(self, parser) -> None:
        text = '[{"index":0,"relevance":2},{"index":0,"relevance":9}]'
        scores = parser.parse(text, expected_count=1)
        assert len(scores) == 1
        assert scores[0].relevance == 9.0

    def test_reason_truncated(self, parser) -> None:
        text = '[{"index":0,"relevance":5,"reason":"' + "a" * 50 + '"}]'
        assert parser.parse(text, expected_count=1)[0].reason == "a" * 20

    def test_invalid_json_raises(self, parser) -> None:
        with pytest.raises(JSONParseError):
            parser.parse("I cannot score these papers.", expected_count=3)

    def test_non_array_raises(self, parser) -> None:
        with pytest.raises(JSONParseError, match="Expected a JSON array"):
            parser.parse('{"index":0,"relevance":5}', expected_count=1)

    def test_all_invalid_gives_empty_list(self, parser) -> None:
        assert parser.parse('[{"foo":1}]', expected_count=1) == []
