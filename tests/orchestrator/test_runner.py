"""
ChecklistRunner 테스트
"""
import threading
from unittest.mock import MagicMock

import pytest

from stock_checklist.checklist.evaluator import ChecklistEvaluator
from stock_checklist.core.exceptions import ChecklistNotFoundError, StoreError
from stock_checklist.core.interfaces import Verdict
from stock_checklist.ingest import StaticDataSource
from stock_checklist.orchestrator.runner import (
    CANCELLED_MESSAGE,
    ChecklistRunner,
    RunResult,
    normalize_symbols,
)
from stock_checklist.storage import InMemoryChecklistStore

SNAPSHOTS = {
    "AAPL": {"pe_ratio": 28.1, "market_cap": 3_000_000_000_000, "dividend_yield": 0.005},
    "KO": {"pe_ratio": 19.5, "market_cap": 260_000_000_000, "dividend_yield": 0.031},
    "MSFT": {"pe_ratio": 35.2, "market_cap": 2_800_000_000_000, "dividend_yield": 0.008},
}


@pytest.fixture
def store():
    store = InMemoryChecklistStore()
    checklist = store.create_checklist(user_id=1, name="Value")
    store.add_item(checklist.id, "pe_ratio", "<", "20")
    store.add_item(checklist.id, "market_cap", ">", "1000000000")
    store.add_item(checklist.id, "dividend_yield", ">", "0.01")
    return store


def _make_runner(store, data_source=None, max_workers=1):
    return ChecklistRunner(
        store,
        data_source or StaticDataSource(SNAPSHOTS),
        evaluator=ChecklistEvaluator(),
        max_workers=max_workers,
    )


class TestNormalizeSymbols:

    def test_dedupe_keep_order(self):
        assert normalize_symbols([" msft", "AAPL", "msft ", "", "ko"]) == ["MSFT", "AAPL", "KO"]


class TestChecklistRunner:

    def test_run_sequential(self, store):
        runner = _make_runner(store)
        run = runner.run(1, ["aapl", "KO", "msft"])

        assert isinstance(run, RunResult)
        assert [r.symbol for r in run.results] == ["AAPL", "KO", "MSFT"]
        assert run.results[1].overall_result == Verdict.PASS
        assert run.results[0].passed_checks == 1
        assert run.persisted == 3
        assert run.persist_errors == []
        assert len(store.get_results(1)) == 3

    def test_run_parallel_keeps_order(self, store):
        runner = _make_runner(store, max_workers=4)
        symbols = ["MSFT", "KO", "AAPL"] * 3
        run = runner.run(1, symbols, persist=False)

        assert [r.symbol for r in run.results] == ["MSFT", "KO", "AAPL"]
        assert run.persisted == 0
        assert store.get_results(1) == []

    def test_missing_symbol_is_isolated(self, store):
        runner = _make_runner(store)
        run = runner.run(1, ["AAPL", "NVDA", "KO"])

        assert len(run.results) == 3
        assert run.results[1].is_error
        assert "NVDA" in run.results[1].error
        # 오류 결과는 저장하지 않음
        assert run.persisted == 2
        assert run.summary["errors"] == 1

    def test_unknown_checklist(self, store):
        runner = _make_runner(store)
        with pytest.raises(ChecklistNotFoundError):
            runner.run(999, ["AAPL"])

    def test_cancel_before_start(self, store):
        cancel = threading.Event()
        cancel.set()

        run = _make_runner(store).run(1, ["AAPL", "KO"], cancel_event=cancel)

        assert all(r.error == CANCELLED_MESSAGE for r in run.results)
        assert run.cancelled is True
        assert run.persisted == 0

    def test_cancel_midway(self, store):
        cancel = threading.Event()

        def progress(done, total):
            if done == 1:
                cancel.set()

        run = _make_runner(store).run(
            1, ["AAPL", "KO", "MSFT"], cancel_event=cancel, progress_callback=progress
        )

        assert run.results[0].is_error is False
        assert [r.error for r in run.results[1:]] == [CANCELLED_MESSAGE, CANCELLED_MESSAGE]

    def test_progress_callback(self, store):
        progress = MagicMock()
        _make_runner(store, max_workers=2).run(1, ["AAPL", "KO", "MSFT"], persist=False, progress_callback=progress)

        assert progress.call_count == 3
        assert sorted(c.args[0] for c in progress.call_args_list) == [1, 2, 3]
        assert all(c.args[1] == 3 for c in progress.call_args_list)

    def test_persist_failure_recorded(self, store):
        failing_store = MagicMock(wraps=store)
        failing_store.save_result.side_effect = StoreError("disk full")

        run = _make_runner(failing_store).run(1, ["AAPL", "KO"])

        assert run.persisted == 0
        assert len(run.persist_errors) == 2
        assert run.persist_errors[0].startswith("AAPL")
        assert len(run.results) == 2

    def test_unexpected_persist_error_recorded(self, store):
        """저장소가 임의 예외를 던져도 실행 결과는 반환"""
        broken_store = MagicMock(wraps=store)
        broken_store.save_result.side_effect = RuntimeError("disk full")

        run = _make_runner(broken_store).run(1, ["AAPL", "MSFT"])

        assert [r.symbol for r in run.results] == ["AAPL", "MSFT"]
        assert run.persisted == 0
        assert run.persist_errors == ["AAPL: disk full", "MSFT: disk full"]

    def test_disabled_items_skipped(self, store):
        item_id = store.get_items(1)[2].id
        store.update_item(item_id, enabled=False)

        run = _make_runner(store).run(1, ["AAPL"], persist=False)
        assert run.results[0].total_checks == 2

    def test_run_result_to_dict(self, store):
        run = _make_runner(store).run(1, ["KO"], persist=False)
        data = run.to_dict()

        assert data["checklist_id"] == 1
        assert data["summary"]["passed"] == 1
        assert data["results"][0]["symbol"] == "KO"
