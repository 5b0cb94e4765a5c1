"""
규칙 모델 / 결과 직렬화 테스트
"""
import json

import pytest

from stock_checklist.checklist.evaluator import evaluate_stock
from stock_checklist.core.interfaces import (
    Checklist,
    ConditionItem,
    EvaluationResult,
    ItemResult,
    Verdict,
)


def _make_checklist() -> Checklist:
    return Checklist(
        id=3,
        user_id=9,
        name="Dividend Aristocrats",
        description="Stable dividend-paying companies",
        items=[
            ConditionItem(id=10, checklist_id=3, left_operand="dividend_yield", operator=">", right_operand="0.02", sort_order=2),
            ConditionItem(id=11, checklist_id=3, left_operand="sector", operator="=", right_operand="Utilities", sort_order=1),
            ConditionItem(id=12, checklist_id=3, left_operand="pe_ratio", operator="<", right_operand="25", enabled=False, sort_order=3),
            ConditionItem(id=13, checklist_id=3, left_operand="beta", operator=">", right_operand="x", sort_order=4),
        ],
    )


METRICS = {"symbol": "DUK", "dividend_yield": 0.041, "sector": "Utilities", "pe_ratio": 18.2, "beta": 0.45}


class TestChecklistSerialization:
    """체크리스트 직렬화"""

    def test_to_dict_contains_items(self):
        data = _make_checklist().to_dict()
        assert data["name"] == "Dividend Aristocrats"
        assert len(data["items"]) == 4
        assert data["items"][0]["right_operand"] == "0.02"
        assert isinstance(data["created_at"], str)

    def test_json_round_trip(self):
        """직렬화 → 역직렬화 후 동일"""
        checklist = _make_checklist()
        restored = Checklist.from_json(checklist.to_json())
        assert restored == checklist

    def test_round_trip_evaluation_identical(self):
        """역직렬화한 체크리스트로 재평가해도 결과 동일"""
        checklist = _make_checklist()
        restored = Checklist.from_json(checklist.to_json())

        original = evaluate_stock(METRICS, checklist)
        again = evaluate_stock(METRICS, restored)
        assert again == original

    def test_from_dict_defaults(self):
        """선택 필드 기본값"""
        item = ConditionItem.from_dict(
            {"id": 1, "checklist_id": 2, "left_operand": "pe_ratio", "operator": "<", "right_operand": 20}
        )
        assert item.enabled is True
        assert item.sort_order == 0
        assert item.right_operand == "20"

    @pytest.mark.parametrize("raw,expected", [("false", False), ("False", False), ("0", False), ("true", True), (0, False), (True, True)])
    def test_from_dict_enabled_parsing(self, raw, expected):
        """문자열 "false" 로 저장된 항목은 비활성으로 복원"""
        item = ConditionItem.from_dict(
            {"id": 1, "checklist_id": 2, "left_operand": "pe_ratio", "operator": "<", "right_operand": "20", "enabled": raw}
        )
        assert item.enabled is expected

    def test_from_dict_disabled_item_excluded_from_score(self):
        checklist = Checklist.from_dict(
            {
                "id": 1,
                "user_id": 1,
                "name": "Text flags",
                "active": "true",
                "items": [
                    {"id": 1, "checklist_id": 1, "left_operand": "pe_ratio", "operator": "<", "right_operand": "20"},
                    {"id": 2, "checklist_id": 1, "left_operand": "beta", "operator": "<", "right_operand": "1", "enabled": "false"},
                ],
            }
        )
        assert checklist.active is True
        assert evaluate_stock(METRICS, checklist).total_checks == 1

    def test_from_dict_invalid_flag(self):
        with pytest.raises(ValueError):
            ConditionItem.from_dict(
                {"id": 1, "checklist_id": 2, "left_operand": "pe_ratio", "operator": "<", "right_operand": "20", "enabled": "maybe"}
            )


class TestEvaluationResultSerialization:
    """평가 결과 직렬화"""

    def test_result_json_round_trip(self):
        result = evaluate_stock(METRICS, _make_checklist())
        restored = EvaluationResult.from_json(result.to_json())
        assert restored == result
        assert restored.overall_result == result.overall_result

    def test_result_dict_shape(self):
        result = evaluate_stock(METRICS, _make_checklist())
        data = json.loads(result.to_json())
        assert data["symbol"] == "DUK"
        assert data["overall_result"] == "partial"
        assert [d["item_id"] for d in data["details"]] == [11, 10, 13]
        assert data["details"][2]["error_code"] == "UnsupportedOperator"

    def test_failed_result(self):
        result = EvaluationResult.failed("BAD", 3, "feed down")
        assert result.is_error
        assert result.total_checks == 0
        assert result.overall_result == Verdict.FAIL
        assert EvaluationResult.from_dict(result.to_dict()) == result

    def test_item_result_round_trip(self):
        item = ItemResult(
            item_id=1,
            left_operand="pe_ratio",
            operator="<",
            right_operand="20",
            actual_value=None,
            expected_value=20.0,
            passed=False,
            error="NoData: pe_ratio 데이터 없음",
            error_code="NoData",
        )
        assert ItemResult.from_dict(item.to_dict()) == item
