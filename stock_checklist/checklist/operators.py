"""
비교 연산자

고정 연산자 집합과 타입별 비교 규칙
- 숫자 비교: 관계 연산 + 허용 오차 기반 =, !=
- 문자열 비교: 대소문자 무시 =, !=, contains, not_contains
"""
from enum import Enum

from stock_checklist.core.exceptions import UnknownOperatorError, UnsupportedOperatorError

# 숫자 =, != 허용 오차 (절대값)
EQUALITY_TOLERANCE = 0.001


class Operator(Enum):
    """체크리스트 연산자"""
    LT = "<"
    GT = ">"
    LE = "<="
    GE = ">="
    EQ = "="
    NE = "!="
    CONTAINS = "contains"
    NOT_CONTAINS = "not_contains"

    @property
    def label(self) -> str:
        return _LABELS[self]

    @property
    def is_relational(self) -> bool:
        return self in (Operator.LT, Operator.GT, Operator.LE, Operator.GE)

    @property
    def is_text_match(self) -> bool:
        return self in (Operator.CONTAINS, Operator.NOT_CONTAINS)

    @classmethod
    def parse(cls, raw: str) -> "Operator":
        """
        연산자 문자열 해석

        Raises:
            UnknownOperatorError: 고정 집합에 없는 연산자
        """
        if isinstance(raw, Operator):
            return raw
        try:
            return cls(str(raw).strip().lower())
        except ValueError:
            raise UnknownOperatorError(str(raw)) from None


_LABELS = {
    Operator.LT: "less than",
    Operator.GT: "greater than",
    Operator.LE: "less than or equal",
    Operator.GE: "greater than or equal",
    Operator.EQ: "equals",
    Operator.NE: "not equals",
    Operator.CONTAINS: "contains",
    Operator.NOT_CONTAINS: "does not contain",
}


def compare_numbers(
    actual: float,
    operator: Operator,
    expected: float,
    tolerance: float = EQUALITY_TOLERANCE,
) -> bool:
    """
    숫자 비교

    Raises:
        UnsupportedOperatorError: contains/not_contains
    """
    if operator == Operator.LT:
        return actual < expected
    if operator == Operator.GT:
        return actual > expected
    if operator == Operator.LE:
        return actual <= expected
    if operator == Operator.GE:
        return actual >= expected
    if operator == Operator.EQ:
        return abs(actual - expected) < tolerance
    if operator == Operator.NE:
        return abs(actual - expected) >= tolerance
    raise UnsupportedOperatorError(operator.value, "number")


def compare_strings(actual: str, operator: Operator, expected: str) -> bool:
    """
    문자열 비교 (양쪽 모두 casefold 된 값)

    Raises:
        UnsupportedOperatorError: <, >, <=, >=
    """
    if operator == Operator.EQ:
        return actual == expected
    if operator == Operator.NE:
        return actual != expected
    if operator == Operator.CONTAINS:
        return expected in actual
    if operator == Operator.NOT_CONTAINS:
        return expected not in actual
    raise UnsupportedOperatorError(operator.value, "string")
