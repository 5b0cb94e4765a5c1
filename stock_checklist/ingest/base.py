"""
Data Source - 기본 클래스

모든 지표 데이터 소스의 공통 기능
"""
from abc import abstractmethod
from collections.abc import Iterable, Iterator, Mapping
from datetime import datetime
from typing import Any

from stock_checklist.checklist.fields import FIELD_CATALOG
from stock_checklist.core.interfaces import DataSource
from stock_checklist.core.logger import get_logger

_CATALOG_KEYS = tuple(spec.key for spec in FIELD_CATALOG)


def normalize_symbol(symbol: str) -> str:
    """종목 코드 정규화 (공백 제거, 대문자)"""
    return str(symbol).strip().upper()


def extract_metrics(record: Mapping[str, Any]) -> dict[str, Any]:
    """
    원본 레코드를 카탈로그 필드만 담은 평면 매핑으로 변환

    raw_* 같은 중첩 구조는 버리고, 카탈로그 필드의 비스칼라 값은 None 으로 둔다.

    Args:
        record: 데이터 공급자가 반환한 레코드

    Returns:
        {"symbol": ..., 카탈로그 필드: 값 | None}
    """
    lowered = {
        str(key).lower(): value
        for key, value in record.items()
    }

    metrics: dict[str, Any] = {"symbol": normalize_symbol(lowered.get("symbol") or "")}
    for key in _CATALOG_KEYS:
        value = lowered.get(key)
        metrics[key] = value if isinstance(value, (int, float, str)) else None
    return metrics


class BaseDataSource(DataSource):
    """
    데이터 소스 기본 클래스

    조회 로깅 헬퍼 제공. 인스턴스에 조회별 상태를 두지 않는다.
    """

    def __init__(self):
        self.logger = get_logger(self.__class__.__name__)

    @abstractmethod
    def get_metrics(self, symbol: str) -> dict[str, Any]:
        pass

    @abstractmethod
    def get_source_name(self) -> str:
        pass

    def _log_fetch_start(self, symbol: str) -> datetime:
        """조회 시작 로그. 시작 시각을 반환"""
        self.logger.debug(f"[{self.get_source_name()}] {symbol} 지표 조회 시작")
        return datetime.now()

    def _log_fetch_complete(self, symbol: str, started_at: datetime) -> None:
        elapsed = (datetime.now() - started_at).total_seconds()
        self.logger.debug(f"[{self.get_source_name()}] {symbol} 지표 조회 완료, 소요시간: {elapsed:.3f}초")

    def _log_fetch_error(self, symbol: str, error: Exception) -> None:
        self.logger.warning(f"[{self.get_source_name()}] {symbol} 지표 조회 실패: {error}")


class DataSourceMapping(Mapping):
    """
    데이터 소스를 {종목: 지표 매핑} 으로 보이게 하는 지연 조회 어댑터

    조회는 __getitem__ 시점에 일어나므로, 조회 실패도 배치 평가의
    종목 단위 격리 안에서 처리된다.
    """

    def __init__(self, data_source: DataSource, symbols: Iterable[str]):
        self.data_source = data_source
        self._symbols = list(symbols)

    def __getitem__(self, symbol: str) -> dict[str, Any]:
        return self.data_source.get_metrics(symbol)

    def __iter__(self) -> Iterator[str]:
        return iter(self._symbols)

    def __len__(self) -> int:
        return len(self._symbols)

    def __contains__(self, symbol: object) -> bool:
        return symbol in self._symbols
