"""
평가 결과 요약

배치 평가 결과를 집계하거나 pandas DataFrame 으로 변환
"""
from collections.abc import Iterable

import pandas as pd

from stock_checklist.core.interfaces import EvaluationResult, Verdict

RESULT_COLUMNS = [
    "symbol",
    "checklist_id",
    "passed_checks",
    "total_checks",
    "score_percentage",
    "overall_result",
    "error",
]

ITEM_COLUMNS = [
    "symbol",
    "item_id",
    "left_operand",
    "operator",
    "right_operand",
    "actual_value",
    "passed",
    "error_code",
]


def summarize_results(results: Iterable[EvaluationResult]) -> dict:
    """
    배치 결과 요약

    Returns:
        {
            "total": 종목 수,
            "passed": pass 판정 수,
            "partial": partial 판정 수,
            "failed": fail 판정 수 (오류 결과 포함),
            "errors": 종목 단위 오류 수,
            "pass_rate": pass 비율 (%),
            "average_score": 오류를 제외한 평균 점수,
        }
    """
    results = list(results)
    counts = {verdict: 0 for verdict in Verdict}
    for r in results:
        counts[r.overall_result] += 1

    scored = [r.score_percentage for r in results if not r.is_error]
    return {
        "total": len(results),
        "passed": counts[Verdict.PASS],
        "partial": counts[Verdict.PARTIAL],
        "failed": counts[Verdict.FAIL],
        "errors": sum(1 for r in results if r.is_error),
        "pass_rate": round(counts[Verdict.PASS] / len(results) * 100, 2) if results else 0.0,
        "average_score": round(sum(scored) / len(scored), 2) if scored else 0.0,
    }


def results_to_frame(results: Iterable[EvaluationResult], ranked: bool = True) -> pd.DataFrame:
    """
    종목별 한 행 DataFrame

    Args:
        results: 평가 결과
        ranked: True 면 점수 내림차순 (동점은 입력 순서)
    """
    rows = [
        {
            "symbol": r.symbol,
            "checklist_id": r.checklist_id,
            "passed_checks": r.passed_checks,
            "total_checks": r.total_checks,
            "score_percentage": r.score_percentage,
            "overall_result": r.overall_result.value,
            "error": r.error,
        }
        for r in results
    ]
    df = pd.DataFrame(rows, columns=RESULT_COLUMNS)

    if ranked and not df.empty:
        df = df.sort_values("score_percentage", ascending=False, kind="mergesort")
        df = df.reset_index(drop=True)
    return df


def item_breakdown_frame(results: Iterable[EvaluationResult]) -> pd.DataFrame:
    """(종목, 항목) 한 행 long-format DataFrame"""
    rows = [
        {
            "symbol": r.symbol,
            "item_id": d.item_id,
            "left_operand": d.left_operand,
            "operator": d.operator,
            "right_operand": d.right_operand,
            "actual_value": d.actual_value,
            "passed": d.passed,
            "error_code": d.error_code,
        }
        for r in results
        for d in r.details
    ]
    return pd.DataFrame(rows, columns=ITEM_COLUMNS)


def criterion_pass_rates(results: Iterable[EvaluationResult]) -> pd.DataFrame:
    """
    조건 항목별 통과율

    Returns:
        item_id, left_operand, operator, right_operand, evaluated, passed, pass_rate 컬럼
    """
    items = item_breakdown_frame(results)
    if items.empty:
        return pd.DataFrame(
            columns=["item_id", "left_operand", "operator", "right_operand", "evaluated", "passed", "pass_rate"]
        )

    grouped = (
        items.groupby(["item_id", "left_operand", "operator", "right_operand"], sort=False)["passed"]
        .agg(evaluated="count", passed="sum")
        .reset_index()
    )
    grouped["passed"] = grouped["passed"].astype(int)
    grouped["pass_rate"] = (grouped["passed"] / grouped["evaluated"] * 100).round(2)
    return grouped
