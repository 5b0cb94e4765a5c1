"""
체크리스트 실행기

저장소에서 체크리스트를 읽고, 데이터 소스에서 종목 지표를 가져와
배치 평가한 뒤 결과를 저장한다.
"""
import threading
import time
from collections.abc import Callable, Iterable
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field

from stock_checklist.checklist.evaluator import ChecklistEvaluator
from stock_checklist.core.config import get_config
from stock_checklist.core.exceptions import ChecklistNotFoundError, DatabaseError, StoreError
from stock_checklist.core.interfaces import (
    Checklist,
    ChecklistStore,
    DataSource,
    EvaluationResult,
)
from stock_checklist.core.logger import get_logger
from stock_checklist.ingest.base import DataSourceMapping, normalize_symbol
from stock_checklist.output.summary import summarize_results

CANCELLED_MESSAGE = "평가 취소됨"


def normalize_symbols(symbols: Iterable[str]) -> list[str]:
    """공백 제거, 대문자, 중복 제거 (첫 등장 순서 유지)"""
    seen: dict[str, None] = {}
    for symbol in symbols:
        key = normalize_symbol(symbol)
        if key:
            seen.setdefault(key, None)
    return list(seen)


@dataclass
class RunResult:
    """체크리스트 실행 결과"""
    checklist_id: int
    results: list[EvaluationResult] = field(default_factory=list)
    duration_seconds: float = 0.0
    persisted: int = 0
    persist_errors: list[str] = field(default_factory=list)

    @property
    def summary(self) -> dict:
        return summarize_results(self.results)

    @property
    def cancelled(self) -> bool:
        return any(r.error == CANCELLED_MESSAGE for r in self.results)

    def to_dict(self) -> dict:
        return {
            "checklist_id": self.checklist_id,
            "results": [r.to_dict() for r in self.results],
            "duration_seconds": round(self.duration_seconds, 3),
            "persisted": self.persisted,
            "persist_errors": self.persist_errors,
            "summary": self.summary,
        }


class ChecklistRunner:
    """
    체크리스트 실행기

    저장소와 데이터 소스는 생성자로 주입한다.

    사용법:
        runner = ChecklistRunner(store, data_source, max_workers=4)
        run = runner.run(checklist_id=1, symbols=["aapl", "MSFT"])

        for result in run.results:
            print(result.symbol, result.score_percentage)
    """

    def __init__(
        self,
        store: ChecklistStore,
        data_source: DataSource,
        evaluator: ChecklistEvaluator | None = None,
        max_workers: int | None = None,
    ):
        self.logger = get_logger(self.__class__.__name__)
        self.store = store
        self.data_source = data_source

        if evaluator is None or max_workers is None:
            eval_config = get_config().get_section("evaluation")
            if evaluator is None:
                evaluator = ChecklistEvaluator(
                    tolerance=float(eval_config.get("equality_tolerance", 0.001))
                )
            if max_workers is None:
                max_workers = int(eval_config.get("max_workers", 1))

        self.evaluator = evaluator
        self.max_workers = max(1, max_workers)

    def load_checklist(self, checklist_id: int) -> Checklist:
        """
        Raises:
            ChecklistNotFoundError: 체크리스트가 없는 경우
        """
        checklist = self.store.get_checklist(checklist_id)
        if checklist is None:
            raise ChecklistNotFoundError(checklist_id)
        return checklist

    def run(
        self,
        checklist_id: int,
        symbols: Iterable[str],
        persist: bool = True,
        cancel_event: threading.Event | None = None,
        progress_callback: Callable[[int, int], None] | None = None,
    ) -> RunResult:
        """
        체크리스트 실행

        Args:
            checklist_id: 체크리스트 ID
            symbols: 종목 코드 목록
            persist: 결과 저장 여부 (종목 단위 오류 결과는 저장하지 않음)
            cancel_event: set 되면 아직 시작하지 않은 종목은 취소 결과로 반환
            progress_callback: (완료 수, 전체 수) 콜백

        Returns:
            RunResult (요청 종목마다 결과 하나)
        """
        checklist = self.load_checklist(checklist_id)
        symbol_list = normalize_symbols(symbols)
        metrics_by_symbol = DataSourceMapping(self.data_source, symbol_list)
        items = list(checklist.items)
        run_logger = self.logger.bind(checklist_id=checklist.id)

        run_logger.info(
            f"[{checklist.name}] {len(symbol_list)}개 종목 평가 시작 "
            f"(항목 {len(items)}개, workers={self.max_workers})"
        )
        start = time.time()
        completed = 0
        lock = threading.Lock()

        def evaluate_one(symbol: str) -> EvaluationResult:
            nonlocal completed
            if cancel_event is not None and cancel_event.is_set():
                result = EvaluationResult.failed(symbol, checklist.id, CANCELLED_MESSAGE)
            else:
                result = self.evaluator.evaluate_symbol(metrics_by_symbol, symbol, checklist, items)

            if progress_callback:
                with lock:
                    completed += 1
                    done = completed
                progress_callback(done, len(symbol_list))
            return result

        if self.max_workers == 1:
            results = [evaluate_one(symbol) for symbol in symbol_list]
        else:
            with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
                results = list(executor.map(evaluate_one, symbol_list))

        run = RunResult(
            checklist_id=checklist.id,
            results=results,
            duration_seconds=time.time() - start,
        )

        if persist:
            self._persist(run)

        summary = run.summary
        run_logger.info(
            f"[{checklist.name}] 평가 완료: pass {summary['passed']} / partial {summary['partial']} / "
            f"fail {summary['failed']} (오류 {summary['errors']}), 소요시간: {run.duration_seconds:.2f}초"
        )
        return run

    def _persist(self, run: RunResult) -> None:
        """결과 저장. 저장 실패는 기록만 하고 계속 진행"""
        persist_logger = self.logger.bind(checklist_id=run.checklist_id)
        for result in run.results:
            if result.is_error:
                continue
            try:
                self.store.save_result(result)
                run.persisted += 1
            except (StoreError, DatabaseError) as e:
                persist_logger.error(f"[{result.symbol}] 결과 저장 실패: {e}")
                run.persist_errors.append(f"{result.symbol}: {e}")
            except Exception as e:
                persist_logger.exception(f"[{result.symbol}] 결과 저장 중 예기치 않은 오류: {e}")
                run.persist_errors.append(f"{result.symbol}: {e}")
