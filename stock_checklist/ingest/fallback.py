"""
공급자 폴백 데이터 소스

순위가 매겨진 공급자 목록을 차례로 시도한다.
공급자마다 max_attempts 회 재시도하고, 재시도 사이에는 백오프 대기.
"""
import time
from collections.abc import Callable, Sequence
from typing import Any

from stock_checklist.core.config import get_config
from stock_checklist.core.exceptions import DataSourceError
from stock_checklist.core.interfaces import DataSource
from stock_checklist.ingest.base import BaseDataSource, normalize_symbol


class FallbackDataSource(BaseDataSource):
    """
    폴백 데이터 소스

    평가기는 어느 공급자가 응답했는지 알 필요가 없다.
    마지막으로 성공한 공급자 이름만 last_provider 에 남긴다.

    사용법:
        source = FallbackDataSource(
            [primary_source, backup_source],
            max_attempts=3,
            backoff_seconds=0.5,
            backoff_factor=2.0,   # 0.5s, 1.0s ... (1.0 이면 고정 간격)
        )
        metrics = source.get_metrics("MSFT")
    """

    def __init__(
        self,
        providers: Sequence[DataSource],
        max_attempts: int | None = None,
        backoff_seconds: float | None = None,
        backoff_factor: float | None = None,
        sleep: Callable[[float], None] = time.sleep,
    ):
        super().__init__()
        if not providers:
            raise ValueError("공급자가 최소 하나 필요합니다")

        if max_attempts is None or backoff_seconds is None or backoff_factor is None:
            ds_config = get_config().get_section("data_source")
            if max_attempts is None:
                max_attempts = ds_config.get("max_attempts", 2)
            if backoff_seconds is None:
                backoff_seconds = ds_config.get("backoff_seconds", 0.5)
            if backoff_factor is None:
                backoff_factor = ds_config.get("backoff_factor", 2.0)

        if max_attempts < 1:
            raise ValueError(f"max_attempts 는 1 이상이어야 합니다: {max_attempts}")

        self.providers = list(providers)
        self.max_attempts = int(max_attempts)
        self.backoff_seconds = float(backoff_seconds)
        self.backoff_factor = float(backoff_factor)
        self._sleep = sleep
        self.last_provider: str | None = None

    def get_source_name(self) -> str:
        names = ", ".join(p.get_source_name() for p in self.providers)
        return f"fallback({names})"

    def backoff_delay(self, attempt: int) -> float:
        """attempt 번째(0부터) 실패 후 대기 시간"""
        return self.backoff_seconds * (self.backoff_factor ** attempt)

    def get_metrics(self, symbol: str) -> dict[str, Any]:
        """
        Raises:
            DataSourceError: 모든 공급자가 실패한 경우
        """
        key = normalize_symbol(symbol)
        errors: dict[str, str] = {}

        for provider in self.providers:
            name = provider.get_source_name()

            for attempt in range(self.max_attempts):
                try:
                    metrics = provider.get_metrics(key)
                except Exception as e:
                    errors[name] = str(e)
                    self.logger.warning(
                        f"[{name}] {key} 조회 실패 ({attempt + 1}/{self.max_attempts}): {e}"
                    )
                    if attempt + 1 < self.max_attempts:
                        self._sleep(self.backoff_delay(attempt))
                    continue

                if self.last_provider != name:
                    self.logger.info(f"{key} 지표 공급자: {name}")
                self.last_provider = name
                return metrics

        raise DataSourceError(
            f"모든 공급자에서 {key} 지표 조회 실패",
            {"symbol": key, "errors": errors},
        )
