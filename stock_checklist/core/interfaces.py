"""
핵심 인터페이스 정의

체크리스트 규칙 모델, 평가 결과, 외부 협력자(데이터 소스, 저장소) 인터페이스
"""
import json
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any


# ============================================
# Enums
# ============================================
class FieldType(Enum):
    """지표 필드 타입"""
    NUMBER = "number"
    STRING = "string"


class Verdict(Enum):
    """종목 단위 최종 판정"""
    PASS = "pass"        # 100%
    PARTIAL = "partial"  # 0% < score < 100%
    FAIL = "fail"        # 0% (항목이 없는 경우 포함)


_TRUE_STRINGS = frozenset({"true", "1", "yes", "y", "on"})
_FALSE_STRINGS = frozenset({"false", "0", "no", "n", "off", ""})


def _parse_bool(value: Any) -> bool:
    """불리언 해석 ("false" 같은 문자열 포함)"""
    if isinstance(value, str):
        text = value.strip().lower()
        if text in _TRUE_STRINGS:
            return True
        if text in _FALSE_STRINGS:
            return False
        raise ValueError(f"불리언으로 해석할 수 없는 값: {value!r}")
    return bool(value)


def _parse_datetime(value: Any) -> datetime:
    if isinstance(value, datetime):
        return value
    if value:
        return datetime.fromisoformat(value)
    return datetime.now()


# ============================================
# Rule Model
# ============================================
@dataclass
class ConditionItem:
    """체크리스트 조건 항목 (left_operand operator right_operand)"""
    id: int
    checklist_id: int
    left_operand: str            # 필드 카탈로그 키
    operator: str                # 원본 연산자 문자열 (평가 시 해석)
    right_operand: str           # 리터럴 문자열 (평가 시 숫자/문자 해석)
    enabled: bool = True
    sort_order: int = 0
    created_at: datetime = field(default_factory=datetime.now)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "checklist_id": self.checklist_id,
            "left_operand": self.left_operand,
            "operator": self.operator,
            "right_operand": self.right_operand,
            "enabled": self.enabled,
            "sort_order": self.sort_order,
            "created_at": self.created_at.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "ConditionItem":
        return cls(
            id=int(data["id"]),
            checklist_id=int(data["checklist_id"]),
            left_operand=str(data["left_operand"]),
            operator=str(data["operator"]),
            right_operand=str(data["right_operand"]),
            enabled=_parse_bool(data.get("enabled", True)),
            sort_order=int(data.get("sort_order", 0)),
            created_at=_parse_datetime(data.get("created_at")),
        )


@dataclass
class Checklist:
    """체크리스트 (조건 항목을 소유)"""
    id: int
    user_id: int
    name: str
    description: str | None = None
    active: bool = True
    created_at: datetime = field(default_factory=datetime.now)
    updated_at: datetime = field(default_factory=datetime.now)
    items: list[ConditionItem] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "user_id": self.user_id,
            "name": self.name,
            "description": self.description,
            "active": self.active,
            "created_at": self.created_at.isoformat(),
            "updated_at": self.updated_at.isoformat(),
            "items": [item.to_dict() for item in self.items],
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Checklist":
        return cls(
            id=int(data["id"]),
            user_id=int(data["user_id"]),
            name=str(data["name"]),
            description=data.get("description"),
            active=_parse_bool(data.get("active", True)),
            created_at=_parse_datetime(data.get("created_at")),
            updated_at=_parse_datetime(data.get("updated_at")),
            items=[ConditionItem.from_dict(item) for item in data.get("items", [])],
        )

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), ensure_ascii=False)

    @classmethod
    def from_json(cls, raw: str) -> "Checklist":
        return cls.from_dict(json.loads(raw))


# ============================================
# Evaluation Results
# ============================================
@dataclass
class ItemResult:
    """조건 항목 하나의 평가 결과"""
    item_id: int
    left_operand: str
    operator: str
    right_operand: str
    actual_value: float | int | str | None
    expected_value: float | str | None
    passed: bool
    error: str | None = None        # 사람이 읽을 수 있는 오류 메시지
    error_code: str | None = None   # UnknownField, NoData, ...

    def to_dict(self) -> dict:
        return {
            "item_id": self.item_id,
            "left_operand": self.left_operand,
            "operator": self.operator,
            "right_operand": self.right_operand,
            "actual_value": self.actual_value,
            "expected_value": self.expected_value,
            "passed": self.passed,
            "error": self.error,
            "error_code": self.error_code,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "ItemResult":
        return cls(
            item_id=int(data["item_id"]),
            left_operand=data["left_operand"],
            operator=data["operator"],
            right_operand=data["right_operand"],
            actual_value=data.get("actual_value"),
            expected_value=data.get("expected_value"),
            passed=_parse_bool(data["passed"]),
            error=data.get("error"),
            error_code=data.get("error_code"),
        )


@dataclass
class EvaluationResult:
    """(체크리스트, 종목) 한 쌍의 평가 결과"""
    symbol: str
    checklist_id: int
    passed_checks: int
    total_checks: int
    score_percentage: float
    details: list[ItemResult] = field(default_factory=list)
    overall_result: Verdict = Verdict.FAIL
    error: str | None = None  # 종목 단위 실패 시에만 설정

    @property
    def is_error(self) -> bool:
        return self.error is not None

    @classmethod
    def failed(cls, symbol: str, checklist_id: int, error: str) -> "EvaluationResult":
        """종목 단위 오류 결과 (점수 0, 항목 0)"""
        return cls(
            symbol=symbol,
            checklist_id=checklist_id,
            passed_checks=0,
            total_checks=0,
            score_percentage=0.0,
            details=[],
            overall_result=Verdict.FAIL,
            error=error,
        )

    def to_dict(self) -> dict:
        return {
            "symbol": self.symbol,
            "checklist_id": self.checklist_id,
            "passed_checks": self.passed_checks,
            "total_checks": self.total_checks,
            "score_percentage": self.score_percentage,
            "details": [d.to_dict() for d in self.details],
            "overall_result": self.overall_result.value,
            "error": self.error,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "EvaluationResult":
        return cls(
            symbol=data["symbol"],
            checklist_id=int(data["checklist_id"]),
            passed_checks=int(data["passed_checks"]),
            total_checks=int(data["total_checks"]),
            score_percentage=float(data["score_percentage"]),
            details=[ItemResult.from_dict(d) for d in data.get("details", [])],
            overall_result=Verdict(data.get("overall_result", Verdict.FAIL.value)),
            error=data.get("error"),
        )

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), ensure_ascii=False)

    @classmethod
    def from_json(cls, raw: str) -> "EvaluationResult":
        return cls.from_dict(json.loads(raw))


@dataclass
class StoredResult:
    """저장소에 기록된 평가 결과"""
    id: int
    result_date: datetime
    result: EvaluationResult

    @property
    def checklist_id(self) -> int:
        return self.result.checklist_id

    @property
    def symbol(self) -> str:
        return self.result.symbol


# ============================================
# Abstract Interfaces
# ============================================
class DataSource(ABC):
    """종목 지표 데이터 소스 인터페이스"""

    @abstractmethod
    def get_metrics(self, symbol: str) -> dict[str, Any]:
        """
        종목 지표 조회

        Returns:
            {필드명: 숫자 | 문자열 | None} 평면 매핑

        Raises:
            DataSourceError: 조회 실패
        """
        pass

    @abstractmethod
    def get_source_name(self) -> str:
        """데이터 소스 이름"""
        pass


class ChecklistStore(ABC):
    """체크리스트 정의/결과 저장소 인터페이스"""

    # ---- 체크리스트 ----
    @abstractmethod
    def list_checklists(self, user_id: int) -> list[Checklist]:
        """사용자의 활성 체크리스트 목록"""
        pass

    @abstractmethod
    def get_checklist(self, checklist_id: int) -> Checklist | None:
        """체크리스트 조회 (항목 포함)"""
        pass

    @abstractmethod
    def create_checklist(
        self,
        user_id: int,
        name: str,
        description: str | None = None,
        active: bool = True,
    ) -> Checklist:
        """체크리스트 생성"""
        pass

    @abstractmethod
    def update_checklist(self, checklist_id: int, **updates) -> Checklist | None:
        """체크리스트 수정 (name, description, active)"""
        pass

    @abstractmethod
    def delete_checklist(self, checklist_id: int) -> bool:
        """체크리스트 삭제 (항목도 함께 삭제)"""
        pass

    # ---- 조건 항목 ----
    @abstractmethod
    def get_items(self, checklist_id: int) -> list[ConditionItem]:
        """체크리스트 항목 목록"""
        pass

    @abstractmethod
    def add_item(
        self,
        checklist_id: int,
        left_operand: str,
        operator: str,
        right_operand: str,
        enabled: bool = True,
        sort_order: int | None = None,
    ) -> ConditionItem:
        """항목 추가 (sort_order 미지정 시 마지막 순서)"""
        pass

    @abstractmethod
    def update_item(self, item_id: int, **updates) -> ConditionItem | None:
        """항목 수정"""
        pass

    @abstractmethod
    def delete_item(self, item_id: int) -> bool:
        """항목 삭제"""
        pass

    # ---- 평가 결과 ----
    @abstractmethod
    def save_result(self, result: EvaluationResult) -> StoredResult:
        """평가 결과 저장"""
        pass

    @abstractmethod
    def get_results(self, checklist_id: int, limit: int = 50) -> list[StoredResult]:
        """체크리스트 평가 결과 (최신순)"""
        pass
