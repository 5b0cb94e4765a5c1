"""
정적 데이터 소스

메모리에 들고 있는 스냅샷에서 지표를 반환 (테스트, 오프라인 평가용)
"""
from collections.abc import Mapping
from typing import Any

from stock_checklist.core.exceptions import DataSourceError
from stock_checklist.ingest.base import BaseDataSource, extract_metrics, normalize_symbol


class StaticDataSource(BaseDataSource):
    """
    스냅샷 기반 데이터 소스

    사용법:
        source = StaticDataSource({
            "AAPL": {"pe_ratio": 28.1, "sector": "Technology"},
        })
        metrics = source.get_metrics("aapl")
    """

    def __init__(
        self,
        snapshots: Mapping[str, Mapping[str, Any]] | None = None,
        name: str = "static",
    ):
        super().__init__()
        self._name = name
        self._snapshots: dict[str, dict[str, Any]] = {}
        for symbol, record in (snapshots or {}).items():
            self.add_snapshot(symbol, record)

    def get_source_name(self) -> str:
        return self._name

    def add_snapshot(self, symbol: str, record: Mapping[str, Any]) -> None:
        """스냅샷 추가/교체"""
        key = normalize_symbol(symbol)
        metrics = extract_metrics(record)
        metrics["symbol"] = key
        self._snapshots[key] = metrics

    def symbols(self) -> list[str]:
        return list(self._snapshots)

    def get_metrics(self, symbol: str) -> dict[str, Any]:
        """
        Raises:
            DataSourceError: 스냅샷이 없는 종목
        """
        key = normalize_symbol(symbol)
        started_at = self._log_fetch_start(key)

        metrics = self._snapshots.get(key)
        if metrics is None:
            error = DataSourceError(f"[{self._name}] 지표 데이터 없음: {key}", {"symbol": key})
            self._log_fetch_error(key, error)
            raise error

        self._log_fetch_complete(key, started_at)
        # 복사본 반환
        return dict(metrics)
