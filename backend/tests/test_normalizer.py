"""
Tests for locating predictions inside workflow responses.
"""

import pytest

from predictions.normalizer import EXTRACTION_STRATEGIES, extract_predictions, match_predictions

ROWS = [{"product_name": "A", "current_stock": 10}]
OTHER_ROWS = [{"product_name": "B", "current_stock": 99}]


class TestStrategyOrder:
    def test_strategy_names_in_priority_order(self):
        assert [s.name for s in EXTRACTION_STRATEGIES] == [
            "result.predictions",
            "result.response_body.result.predictions",
            "predictions",
        ]

    def test_result_predictions(self):
        assert match_predictions({"result": {"predictions": ROWS}}) == ("result.predictions", ROWS)

    def test_nested_response_body(self):
        payload = {"result": {"response_body": {"result": {"predictions": ROWS}}}}
        assert match_predictions(payload) == ("result.response_body.result.predictions", ROWS)

    def test_top_level_predictions(self):
        assert match_predictions({"predictions": ROWS}) == ("predictions", ROWS)

    def test_first_path_wins(self):
        payload = {"result": {"predictions": ROWS}, "predictions": OTHER_ROWS}
        assert extract_predictions(payload) == ROWS

    def test_empty_list_falls_through_to_next_path(self):
        payload = {"result": {"predictions": []}, "predictions": OTHER_ROWS}
        assert match_predictions(payload) == ("predictions", OTHER_ROWS)


class TestNoMatch:
    @pytest.mark.parametrize(
        "payload",
        [
            {},
            None,
            [],
            "predictions",
            {"result": None},
            {"result": "not-a-dict"},
            {"result": {"predictions": {"A": 1}}},
            {"predictions": []},
        ],
    )
    def test_returns_empty_list(self, payload):
        assert extract_predictions(payload) == []
        assert match_predictions(payload) == (None, [])

    def test_list_is_returned_unchanged(self):
        rows = [{"product_name": "A"}, {"product_name": "A"}]
        assert extract_predictions({"predictions": rows}) is rows
