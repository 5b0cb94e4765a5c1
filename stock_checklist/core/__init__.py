"""
Core 모듈 - 공통 인프라

- config: 설정 관리
- logger: 로깅 서비스
- database: DB 관리
- exceptions: 커스텀 예외
- interfaces: 규칙 모델 및 협력자 인터페이스
- models: ORM 모델
"""
from stock_checklist.core.config import Config, get_config
from stock_checklist.core.logger import get_logger, LoggerService, setup_logger_from_config
from stock_checklist.core.database import DatabaseManager, init_database_from_config, Base
from stock_checklist.core.exceptions import (
    BaseError,
    ConfigError,
    ConfigNotFoundError,
    ConfigValidationError,
    EvaluationError,
    UnknownFieldError,
    NoDataError,
    UnsupportedOperatorError,
    UnknownOperatorError,
    InvalidNumericComparisonError,
    DataSourceError,
    StoreError,
    ChecklistNotFoundError,
    DatabaseError,
)
from stock_checklist.core.interfaces import (
    FieldType,
    Verdict,
    Checklist,
    ConditionItem,
    ItemResult,
    EvaluationResult,
    StoredResult,
    DataSource,
    ChecklistStore,
)

__all__ = [
    # Config
    "Config",
    "get_config",
    # Logger
    "get_logger",
    "LoggerService",
    "setup_logger_from_config",
    # Database
    "DatabaseManager",
    "init_database_from_config",
    "Base",
    # Exceptions
    "BaseError",
    "ConfigError",
    "ConfigNotFoundError",
    "ConfigValidationError",
    "EvaluationError",
    "UnknownFieldError",
    "NoDataError",
    "UnsupportedOperatorError",
    "UnknownOperatorError",
    "InvalidNumericComparisonError",
    "DataSourceError",
    "StoreError",
    "ChecklistNotFoundError",
    "DatabaseError",
    # Interfaces
    "FieldType",
    "Verdict",
    "Checklist",
    "ConditionItem",
    "ItemResult",
    "EvaluationResult",
    "StoredResult",
    "DataSource",
    "ChecklistStore",
]
