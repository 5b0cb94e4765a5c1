"""
지표 데이터 소스

평가기는 어느 공급자가 응답했는지 모른다. DataSource 계약만 사용한다.
"""
from stock_checklist.ingest.base import (
    BaseDataSource,
    DataSourceMapping,
    extract_metrics,
    normalize_symbol,
)
from stock_checklist.ingest.static_source import StaticDataSource
from stock_checklist.ingest.fallback import FallbackDataSource

__all__ = [
    "BaseDataSource",
    "DataSourceMapping",
    "extract_metrics",
    "normalize_symbol",
    "StaticDataSource",
    "FallbackDataSource",
]
