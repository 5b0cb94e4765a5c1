"""
커스텀 예외 클래스 정의

체크리스트 평가 엔진과 주변 협력자(데이터 소스, 저장소)가 공유하는 예외 계층
"""
from typing import Any


class BaseError(Exception):
    """모든 커스텀 예외의 기본 클래스"""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message


# ============================================
# Configuration Errors
# ============================================
class ConfigError(BaseError):
    """설정 관련 오류"""
    pass


class ConfigNotFoundError(ConfigError):
    """설정 파일을 찾을 수 없음"""
    pass


class ConfigValidationError(ConfigError):
    """설정 값 유효성 검증 실패"""
    pass


# ============================================
# Evaluation Errors (항목 단위, 배치를 중단시키지 않음)
# ============================================
class EvaluationError(BaseError):
    """
    체크리스트 항목 평가 오류

    code는 ItemResult.error_code 로 그대로 기록된다.
    """
    code: str = "EvaluationError"

    def describe(self) -> str:
        """ItemResult.error 에 기록할 문자열"""
        return f"{self.code}: {self.message}"


class UnknownFieldError(EvaluationError):
    """필드 카탈로그에 없는 left_operand"""
    code = "UnknownField"

    def __init__(self, field_name: str):
        super().__init__(f"알 수 없는 필드: {field_name}", {"field": field_name})
        self.field_name = field_name


class NoDataError(EvaluationError):
    """실제 값이 없음 (None/누락)"""
    code = "NoData"

    def __init__(self, field_name: str):
        super().__init__(f"{field_name} 데이터 없음", {"field": field_name})
        self.field_name = field_name


class UnsupportedOperatorError(EvaluationError):
    """피연산자 타입에 쓸 수 없는 연산자"""
    code = "UnsupportedOperator"

    def __init__(self, operator: str, operand_type: str):
        super().__init__(
            f"{operand_type} 비교에는 '{operator}' 연산자를 사용할 수 없습니다",
            {"operator": operator, "operand_type": operand_type},
        )
        self.operator = operator
        self.operand_type = operand_type


class UnknownOperatorError(EvaluationError):
    """고정 연산자 집합에 없는 연산자 문자열"""
    code = "UnknownOperator"

    def __init__(self, operator: str):
        super().__init__(f"알 수 없는 연산자: {operator}", {"operator": operator})
        self.operator = operator


class InvalidNumericComparisonError(EvaluationError):
    """숫자 필드인데 값을 숫자로 해석할 수 없음"""
    code = "InvalidNumericComparison"

    def __init__(self, field_name: str, value: Any):
        super().__init__(
            f"{field_name} 값을 숫자로 비교할 수 없습니다: {value!r}",
            {"field": field_name, "value": repr(value)},
        )
        self.field_name = field_name
        self.value = value


# ============================================
# Data Source Errors
# ============================================
class DataSourceError(BaseError):
    """지표 데이터 조회 실패"""
    pass


# ============================================
# Store Errors
# ============================================
class StoreError(BaseError):
    """체크리스트 저장소 관련 오류"""
    pass


class ChecklistNotFoundError(StoreError):
    """체크리스트를 찾을 수 없음"""

    def __init__(self, checklist_id: int):
        super().__init__(
            f"체크리스트를 찾을 수 없습니다: {checklist_id}",
            {"checklist_id": checklist_id},
        )
        self.checklist_id = checklist_id


# ============================================
# Database Errors
# ============================================
class DatabaseError(BaseError):
    """데이터베이스 관련 오류"""
    pass
