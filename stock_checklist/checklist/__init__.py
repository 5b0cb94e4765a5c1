"""
체크리스트 평가 엔진

- fields: 지표 필드 카탈로그
- operators: 연산자와 비교 규칙
- operands: 실제 값/기대 값 해석
- evaluator: 항목/종목/배치 평가
"""
from stock_checklist.checklist.operators import Operator, EQUALITY_TOLERANCE
from stock_checklist.checklist.fields import (
    CATALOG_VERSION,
    FIELD_CATALOG,
    FieldSpec,
    get_field,
    available_fields,
    available_operators,
)
from stock_checklist.checklist.evaluator import (
    ChecklistEvaluator,
    evaluate_stock,
    evaluate_many,
    rank_results,
    score_to_verdict,
)

__all__ = [
    "Operator",
    "EQUALITY_TOLERANCE",
    "CATALOG_VERSION",
    "FIELD_CATALOG",
    "FieldSpec",
    "get_field",
    "available_fields",
    "available_operators",
    "ChecklistEvaluator",
    "evaluate_stock",
    "evaluate_many",
    "rank_results",
    "score_to_verdict",
]
