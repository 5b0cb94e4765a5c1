"""
체크리스트 실행 (저장소 + 데이터 소스 + 평가기)
"""
from stock_checklist.orchestrator.runner import ChecklistRunner, RunResult, normalize_symbols

__all__ = [
    "ChecklistRunner",
    "RunResult",
    "normalize_symbols",
]
