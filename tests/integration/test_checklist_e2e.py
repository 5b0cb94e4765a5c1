"""
E2E 통합 테스트: 저장소 → 데이터 소스(폴백) → 실행기 → 요약

외부 지표 공급자는 mock 으로 대체하고
체크리스트 정의부터 결과 저장/요약까지 데이터 흐름을 검증
"""
from unittest.mock import MagicMock

from stock_checklist.checklist.evaluator import ChecklistEvaluator
from stock_checklist.core.database import DatabaseManager
from stock_checklist.core.exceptions import DataSourceError
from stock_checklist.core.interfaces import Checklist, Verdict
from stock_checklist.ingest import FallbackDataSource, StaticDataSource
from stock_checklist.orchestrator import ChecklistRunner
from stock_checklist.output import results_to_frame
from stock_checklist.storage import SqlChecklistStore

# ===== 공통 Mock 데이터 =====

BACKUP_SNAPSHOTS = {
    "ACME": {"pe_ratio": 15, "market_cap": 2_000_000_000, "dividend_yield": 0},
    "GLOBEX": {"pe_ratio": 25, "market_cap": 500_000_000, "dividend_yield": 0.03},
    "INITECH": {"pe_ratio": "N/A", "market_cap": 8_000_000_000, "dividend_yield": 0.02},
}


def _make_primary_provider() -> MagicMock:
    """항상 실패하는 1순위 공급자"""
    provider = MagicMock()
    provider.get_source_name.return_value = "primary"
    provider.get_metrics.side_effect = DataSourceError("rate limited")
    return provider


def _make_checklist(store) -> Checklist:
    checklist = store.create_checklist(user_id=1, name="Value Investing Checklist")
    store.add_item(checklist.id, "pe_ratio", "<", "20")
    store.add_item(checklist.id, "market_cap", ">", "1000000000")
    store.add_item(checklist.id, "dividend_yield", ">", "0.01", enabled=False)
    return store.get_checklist(checklist.id)


class TestChecklistE2E:
    """정의 → 평가 → 저장 → 요약"""

    def test_full_flow(self, tmp_path):
        db = DatabaseManager(f"sqlite:///{tmp_path / 'e2e.db'}")
        store = SqlChecklistStore(db)
        checklist = _make_checklist(store)

        source = FallbackDataSource(
            [_make_primary_provider(), StaticDataSource(BACKUP_SNAPSHOTS, name="backup")],
            max_attempts=2,
            backoff_seconds=0.0,
            backoff_factor=1.0,
            sleep=lambda _: None,
        )
        runner = ChecklistRunner(store, source, evaluator=ChecklistEvaluator(), max_workers=2)

        run = runner.run(checklist.id, ["acme", "globex", "initech", "missing"])

        acme, globex, initech, missing = run.results

        # 비활성 항목은 점수에서 완전히 제외
        assert acme.total_checks == 2
        assert acme.passed_checks == 2
        assert acme.score_percentage == 100.0
        assert acme.overall_result == Verdict.PASS

        assert globex.overall_result == Verdict.FAIL
        assert initech.overall_result == Verdict.PARTIAL
        assert initech.details[0].error_code == "InvalidNumericComparison"

        assert missing.is_error
        assert source.last_provider == "backup"

        # 오류 종목 제외 3건 저장
        assert run.persisted == 3
        stored = store.get_results(checklist.id)
        assert {s.symbol for s in stored} == {"ACME", "GLOBEX", "INITECH"}

        df = results_to_frame(run.results)
        assert df.loc[0, "symbol"] == "ACME"
        assert run.summary["errors"] == 1

        db.close()

    def test_reevaluation_is_identical(self, tmp_path):
        """저장된 정의를 다시 읽어 재평가해도 동일"""
        db = DatabaseManager(f"sqlite:///{tmp_path / 'repeat.db'}")
        store = SqlChecklistStore(db)
        checklist = _make_checklist(store)
        source = StaticDataSource(BACKUP_SNAPSHOTS)
        runner = ChecklistRunner(store, source, evaluator=ChecklistEvaluator(), max_workers=1)

        first = runner.run(checklist.id, ["ACME", "GLOBEX"], persist=False)
        restored = Checklist.from_json(store.get_checklist(checklist.id).to_json())
        second = ChecklistEvaluator().evaluate_many(
            {s: source.get_metrics(s) for s in ["ACME", "GLOBEX"]}, restored
        )

        assert second == first.results
        db.close()
