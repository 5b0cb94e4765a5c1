"""
체크리스트 평가 엔진

- evaluate_item: 조건 항목 하나 → ItemResult (예외를 항목 밖으로 던지지 않음)
- evaluate_stock: 종목 하나 → EvaluationResult (부수효과 없음)
- evaluate_many: 종목 여러 개 → EvaluationResult 리스트 (종목 단위 오류 격리)
"""
from collections.abc import Iterable, Mapping
from typing import Any

from stock_checklist.checklist.fields import get_field
from stock_checklist.checklist.operands import coerce_number, parse_literal, resolve_actual, to_text
from stock_checklist.checklist.operators import (
    EQUALITY_TOLERANCE,
    Operator,
    compare_numbers,
    compare_strings,
)
from stock_checklist.core.exceptions import (
    EvaluationError,
    InvalidNumericComparisonError,
    UnsupportedOperatorError,
)
from stock_checklist.core.interfaces import (
    Checklist,
    ConditionItem,
    EvaluationResult,
    ItemResult,
    Verdict,
)
from stock_checklist.core.logger import get_logger


def score_to_verdict(score_percentage: float) -> Verdict:
    """100 → pass, 0 → fail, 그 외 partial"""
    if score_percentage == 100:
        return Verdict.PASS
    if score_percentage == 0:
        return Verdict.FAIL
    return Verdict.PARTIAL


def order_items(items: Iterable[ConditionItem]) -> list[ConditionItem]:
    """활성 항목만 sort_order 오름차순 (안정 정렬)"""
    return sorted(
        (item for item in items if item.enabled),
        key=lambda item: item.sort_order,
    )


class ChecklistEvaluator:
    """
    체크리스트 평가기

    상태는 허용 오차뿐이며 종목 간 공유하는 가변 상태가 없으므로
    호출자가 종목 단위로 병렬 실행해도 된다.

    사용법:
        evaluator = ChecklistEvaluator()

        # 단일 종목
        result = evaluator.evaluate_stock(metrics, checklist)

        # 배치 (입력 순서 유지, 실패 종목은 오류 결과로 대체)
        results = evaluator.evaluate_many({"AAPL": aapl, "MSFT": msft}, checklist)
    """

    def __init__(self, tolerance: float = EQUALITY_TOLERANCE):
        if tolerance < 0:
            raise ValueError(f"허용 오차는 0 이상이어야 합니다: {tolerance}")
        self.tolerance = tolerance
        self.logger = get_logger(self.__class__.__name__)

    # ------------------------------------------------------------
    # 항목 단위
    # ------------------------------------------------------------
    def evaluate_item(self, metrics: Mapping[str, Any], item: ConditionItem) -> ItemResult:
        """
        조건 항목 평가

        오류는 모두 ItemResult.error 로 기록하고 passed=False 로 반환한다.
        """
        expected = parse_literal(item.right_operand)
        actual = None

        try:
            spec = get_field(item.left_operand)
            actual = resolve_actual(metrics, spec)
            operator = Operator.parse(item.operator)

            actual_number = coerce_number(actual)
            if spec.is_numeric:
                if actual_number is None:
                    raise InvalidNumericComparisonError(spec.key, actual)
                # contains / not_contains 는 문자열 필드 전용
                if operator.is_text_match:
                    raise UnsupportedOperatorError(operator.value, "number")

            if operator.is_text_match:
                passed = compare_strings(to_text(actual), operator, to_text(item.right_operand))
            elif actual_number is not None and isinstance(expected, float):
                passed = compare_numbers(actual_number, operator, expected, self.tolerance)
            else:
                passed = compare_strings(to_text(actual), operator, to_text(item.right_operand))

        except EvaluationError as e:
            return self._error_result(item, actual, expected, e.describe(), e.code)
        except Exception as e:
            self.logger.exception(f"항목 평가 중 예기치 않은 오류 (item_id={item.id}): {e}")
            return self._error_result(item, actual, expected, f"EvaluationError: {e}", "EvaluationError")

        return ItemResult(
            item_id=item.id,
            left_operand=item.left_operand,
            operator=item.operator,
            right_operand=item.right_operand,
            actual_value=actual,
            expected_value=expected,
            passed=passed,
        )

    @staticmethod
    def _error_result(
        item: ConditionItem,
        actual: Any,
        expected: float | str,
        error: str,
        error_code: str,
    ) -> ItemResult:
        return ItemResult(
            item_id=item.id,
            left_operand=item.left_operand,
            operator=item.operator,
            right_operand=item.right_operand,
            actual_value=actual,
            expected_value=expected,
            passed=False,
            error=error,
            error_code=error_code,
        )

    # ------------------------------------------------------------
    # 종목 단위
    # ------------------------------------------------------------
    def evaluate_stock(
        self,
        metrics: Mapping[str, Any],
        checklist: Checklist,
        items: Iterable[ConditionItem] | None = None,
        symbol: str | None = None,
    ) -> EvaluationResult:
        """
        단일 종목 평가

        Args:
            metrics: {필드명: 값} 지표 매핑 (변경하지 않음)
            checklist: 체크리스트
            items: 조건 항목 (None 이면 checklist.items)
            symbol: 종목 코드 (None 이면 metrics["symbol"])

        Returns:
            EvaluationResult
        """
        if not isinstance(metrics, Mapping):
            raise TypeError(f"지표 매핑이 아닙니다: {type(metrics).__name__}")

        if symbol is None:
            symbol = str(metrics.get("symbol") or "").upper()

        ordered = order_items(checklist.items if items is None else items)
        details = [self.evaluate_item(metrics, item) for item in ordered]

        total_checks = len(details)
        passed_checks = sum(1 for d in details if d.passed)
        score = round(passed_checks / total_checks * 100, 2) if total_checks > 0 else 0.0

        return EvaluationResult(
            symbol=symbol,
            checklist_id=checklist.id,
            passed_checks=passed_checks,
            total_checks=total_checks,
            score_percentage=score,
            details=details,
            overall_result=score_to_verdict(score),
        )

    # ------------------------------------------------------------
    # 배치
    # ------------------------------------------------------------
    def evaluate_symbol(
        self,
        metrics_by_symbol: Mapping[str, Mapping[str, Any]],
        symbol: str,
        checklist: Checklist,
        items: list[ConditionItem] | None = None,
    ) -> EvaluationResult:
        """
        매핑 조회 + 평가. 어떤 예외도 오류 결과로 바꿔 반환한다.
        """
        try:
            metrics = metrics_by_symbol[symbol]
            return self.evaluate_stock(metrics, checklist, items, symbol=symbol)
        except Exception as e:
            self.logger.warning(f"[{symbol}] 평가 실패, 오류 결과로 대체: {e}")
            return EvaluationResult.failed(symbol, checklist.id, f"평가 실패: {e}")

    def evaluate_many(
        self,
        metrics_by_symbol: Mapping[str, Mapping[str, Any]],
        checklist: Checklist,
        items: Iterable[ConditionItem] | None = None,
        symbols: Iterable[str] | None = None,
    ) -> list[EvaluationResult]:
        """
        복수 종목 평가

        Args:
            metrics_by_symbol: {종목: 지표 매핑}. 조회 자체가 예외를 던져도 된다.
            checklist: 체크리스트
            items: 조건 항목 (None 이면 checklist.items)
            symbols: 평가할 종목 순서 (None 이면 매핑의 키 순서)

        Returns:
            요청 종목마다 하나씩, 입력 순서 그대로
        """
        item_list = list(checklist.items if items is None else items)
        symbol_list = list(metrics_by_symbol.keys() if symbols is None else symbols)

        results = [
            self.evaluate_symbol(metrics_by_symbol, symbol, checklist, item_list)
            for symbol in symbol_list
        ]

        failed = sum(1 for r in results if r.is_error)
        if failed:
            self.logger.info(
                f"[checklist={checklist.id}] 배치 평가 완료: {len(results)}종목 중 {failed}종목 오류"
            )
        return results


def evaluate_stock(
    metrics: Mapping[str, Any],
    checklist: Checklist,
    items: Iterable[ConditionItem] | None = None,
    symbol: str | None = None,
    tolerance: float = EQUALITY_TOLERANCE,
) -> EvaluationResult:
    """ChecklistEvaluator.evaluate_stock 편의 함수"""
    return ChecklistEvaluator(tolerance).evaluate_stock(metrics, checklist, items, symbol)


def evaluate_many(
    metrics_by_symbol: Mapping[str, Mapping[str, Any]],
    checklist: Checklist,
    items: Iterable[ConditionItem] | None = None,
    symbols: Iterable[str] | None = None,
    tolerance: float = EQUALITY_TOLERANCE,
) -> list[EvaluationResult]:
    """ChecklistEvaluator.evaluate_many 편의 함수"""
    return ChecklistEvaluator(tolerance).evaluate_many(metrics_by_symbol, checklist, items, symbols)


def rank_results(results: Iterable[EvaluationResult]) -> list[EvaluationResult]:
    """score_percentage 내림차순 (동점은 입력 순서 유지)"""
    return sorted(results, key=lambda r: r.score_percentage, reverse=True)
