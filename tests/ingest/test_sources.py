"""
데이터 소스 테스트
- StaticDataSource
- FallbackDataSource (재시도/백오프/폴백)
- DataSourceMapping (지연 조회)
"""
from datetime import datetime, timedelta
from unittest.mock import MagicMock

import pytest

from stock_checklist.core.exceptions import DataSourceError
from stock_checklist.ingest import (
    DataSourceMapping,
    FallbackDataSource,
    StaticDataSource,
    extract_metrics,
    normalize_symbol,
)


def _failing_provider(name: str, error: Exception | None = None) -> MagicMock:
    provider = MagicMock()
    provider.get_source_name.return_value = name
    provider.get_metrics.side_effect = error or DataSourceError(f"{name} down")
    return provider


class TestExtractMetrics:
    """원본 레코드 평면화"""

    def test_normalize_symbol(self):
        assert normalize_symbol("  aapl ") == "AAPL"

    def test_flattens_to_catalog(self):
        record = {
            "Symbol": "msft",
            "PE_Ratio": 35.2,
            "sector": "Technology",
            "raw_info": {"longName": "Microsoft"},
            "beta": {"5y": 0.9},
        }
        metrics = extract_metrics(record)

        assert metrics["symbol"] == "MSFT"
        assert metrics["pe_ratio"] == 35.2
        assert metrics["sector"] == "Technology"
        assert metrics["beta"] is None
        assert metrics["dividend_yield"] is None
        assert "raw_info" not in metrics

    def test_missing_symbol(self):
        assert extract_metrics({"pe_ratio": 10})["symbol"] == ""
        assert extract_metrics({"symbol": None})["symbol"] == ""


class TestStaticDataSource:
    """정적 데이터 소스"""

    def test_get_metrics_case_insensitive(self):
        source = StaticDataSource({"aapl": {"pe_ratio": 28.1}})
        metrics = source.get_metrics(" AAPL")
        assert metrics["symbol"] == "AAPL"
        assert metrics["pe_ratio"] == 28.1
        assert source.symbols() == ["AAPL"]

    def test_returns_copy(self):
        source = StaticDataSource({"AAPL": {"pe_ratio": 28.1}})
        source.get_metrics("AAPL")["pe_ratio"] = 1
        assert source.get_metrics("AAPL")["pe_ratio"] == 28.1

    def test_missing_symbol_raises(self):
        source = StaticDataSource(name="snapshot")
        with pytest.raises(DataSourceError) as exc_info:
            source.get_metrics("NVDA")
        assert exc_info.value.details == {"symbol": "NVDA"}
        assert source.get_source_name() == "snapshot"

    def test_fetch_timing_is_per_call(self):
        """겹친 조회가 서로의 소요시간을 덮어쓰지 않음"""
        source = StaticDataSource({"AAPL": {"pe_ratio": 28.1}})
        source.logger = MagicMock()

        slow_start = datetime.now() - timedelta(seconds=5)
        source._log_fetch_start("MSFT")
        source._log_fetch_complete("AAPL", slow_start)

        message = source.logger.debug.call_args.args[0]
        assert "AAPL" in message
        assert "소요시간: 5." in message
        assert not hasattr(source, "_last_fetch_time")

    def test_get_metrics_logs_elapsed(self):
        source = StaticDataSource({"AAPL": {"pe_ratio": 28.1}})
        source.logger = MagicMock()
        source.get_metrics("AAPL")
        messages = [c.args[0] for c in source.logger.debug.call_args_list]
        assert len(messages) == 2
        assert "소요시간" in messages[1]

    def test_add_snapshot_replaces(self):
        source = StaticDataSource({"AAPL": {"pe_ratio": 28.1}})
        source.add_snapshot("aapl", {"pe_ratio": 30})
        assert source.get_metrics("AAPL")["pe_ratio"] == 30


class TestFallbackDataSource:
    """공급자 폴백"""

    def test_first_provider_success(self):
        primary = StaticDataSource({"AAPL": {"pe_ratio": 28.1}}, name="primary")
        backup = _failing_provider("backup")
        sleep = MagicMock()

        source = FallbackDataSource([primary, backup], max_attempts=2, backoff_seconds=0.1, backoff_factor=2.0, sleep=sleep)
        metrics = source.get_metrics("aapl")

        assert metrics["pe_ratio"] == 28.1
        assert source.last_provider == "primary"
        backup.get_metrics.assert_not_called()
        sleep.assert_not_called()

    def test_falls_back_after_retries(self):
        primary = _failing_provider("primary")
        backup = StaticDataSource({"AAPL": {"pe_ratio": 28.1}}, name="backup")
        sleep = MagicMock()

        source = FallbackDataSource([primary, backup], max_attempts=3, backoff_seconds=0.5, backoff_factor=2.0, sleep=sleep)
        metrics = source.get_metrics("AAPL")

        assert metrics["symbol"] == "AAPL"
        assert source.last_provider == "backup"
        assert primary.get_metrics.call_count == 3
        # 같은 공급자 재시도 사이에만 대기
        assert [c.args[0] for c in sleep.call_args_list] == [0.5, 1.0]

    def test_retry_then_success(self):
        flaky = MagicMock()
        flaky.get_source_name.return_value = "flaky"
        flaky.get_metrics.side_effect = [TimeoutError("timeout"), {"symbol": "AAPL", "pe_ratio": 20}]
        sleep = MagicMock()

        source = FallbackDataSource([flaky], max_attempts=2, backoff_seconds=0.2, backoff_factor=1.0, sleep=sleep)

        assert source.get_metrics("AAPL")["pe_ratio"] == 20
        sleep.assert_called_once_with(0.2)

    def test_all_providers_fail(self):
        sleep = MagicMock()
        source = FallbackDataSource(
            [_failing_provider("a"), _failing_provider("b", RuntimeError("boom"))],
            max_attempts=1,
            backoff_seconds=0.1,
            backoff_factor=2.0,
            sleep=sleep,
        )

        with pytest.raises(DataSourceError) as exc_info:
            source.get_metrics("aapl")

        assert exc_info.value.details["symbol"] == "AAPL"
        assert exc_info.value.details["errors"] == {"a": "a down", "b": "boom"}
        assert source.last_provider is None
        sleep.assert_not_called()

    def test_backoff_delay(self):
        source = FallbackDataSource([_failing_provider("a")], max_attempts=1, backoff_seconds=0.5, backoff_factor=2.0)
        assert source.backoff_delay(0) == 0.5
        assert source.backoff_delay(2) == 2.0

    def test_source_name(self):
        source = FallbackDataSource(
            [_failing_provider("a"), _failing_provider("b")],
            max_attempts=1,
            backoff_seconds=0,
            backoff_factor=1,
        )
        assert source.get_source_name() == "fallback(a, b)"

    def test_invalid_arguments(self):
        with pytest.raises(ValueError):
            FallbackDataSource([], max_attempts=1, backoff_seconds=0, backoff_factor=1)
        with pytest.raises(ValueError):
            FallbackDataSource([_failing_provider("a")], max_attempts=0, backoff_seconds=0, backoff_factor=1)


class TestDataSourceMapping:
    """지연 조회 매핑"""

    def test_lazy_lookup(self):
        source = MagicMock()
        source.get_metrics.return_value = {"symbol": "AAPL"}
        mapping = DataSourceMapping(source, ["AAPL", "MSFT"])

        assert list(mapping) == ["AAPL", "MSFT"]
        assert len(mapping) == 2
        assert "MSFT" in mapping
        source.get_metrics.assert_not_called()

        assert mapping["AAPL"] == {"symbol": "AAPL"}
        source.get_metrics.assert_called_once_with("AAPL")

    def test_lookup_error_propagates(self):
        source = StaticDataSource()
        mapping = DataSourceMapping(source, ["AAPL"])
        with pytest.raises(DataSourceError):
            mapping["AAPL"]
