"""
평가 결과 요약
"""
from stock_checklist.output.summary import (
    RESULT_COLUMNS,
    ITEM_COLUMNS,
    summarize_results,
    results_to_frame,
    item_breakdown_frame,
    criterion_pass_rates,
)

__all__ = [
    "RESULT_COLUMNS",
    "ITEM_COLUMNS",
    "summarize_results",
    "results_to_frame",
    "item_breakdown_frame",
    "criterion_pass_rates",
]
