"""
피연산자 해석

- 실제 값: 지표 매핑에서 카탈로그 필드로 조회
- 기대 값: right_operand 리터럴을 숫자 우선으로 해석, 실패 시 casefold 문자열
"""
import math
from collections.abc import Mapping
from typing import Any

from stock_checklist.checklist.fields import FieldSpec
from stock_checklist.core.exceptions import NoDataError

_SCALAR_TYPES = (int, float, str)


def coerce_number(value: Any) -> float | None:
    """
    유한한 숫자로 해석 가능하면 float, 아니면 None

    bool 은 숫자로 보지 않는다.
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str):
        try:
            number = float(value.strip())
        except ValueError:
            return None
    else:
        return None

    if not math.isfinite(number):
        return None
    return number


def to_text(value: Any) -> str:
    """문자열 비교용 정규화 (정수형 float 은 소수점 없이)"""
    if isinstance(value, bool):
        return str(value).lower()
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    return str(value).strip().casefold()


def parse_literal(raw: str) -> float | str:
    """right_operand 리터럴 해석"""
    number = coerce_number(raw)
    if number is not None:
        return number
    return to_text(raw)


def resolve_actual(metrics: Mapping[str, Any], spec: FieldSpec) -> float | int | str:
    """
    지표 매핑에서 필드 값 조회

    카탈로그 키로 먼저 찾고, 없으면 매핑 키를 대소문자 무시로 비교한다.

    Raises:
        NoDataError: 값이 없거나 None, 또는 스칼라가 아닌 값
    """
    if spec.key in metrics:
        value = metrics[spec.key]
    else:
        value = None
        for key, candidate in metrics.items():
            if isinstance(key, str) and key.lower() == spec.key:
                value = candidate
                break

    if value is None or not isinstance(value, _SCALAR_TYPES):
        raise NoDataError(spec.key)
    return value
