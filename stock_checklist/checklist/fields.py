"""
지표 필드 카탈로그

left_operand 로 쓸 수 있는 필드 목록. 평가 시 필드 검증과
작성 UI의 연산자 선택에 함께 사용된다.
"""
from dataclasses import dataclass

from stock_checklist.core.exceptions import UnknownFieldError
from stock_checklist.core.interfaces import FieldType
from stock_checklist.checklist.operators import Operator

CATALOG_VERSION = "2"


@dataclass(frozen=True)
class FieldSpec:
    """카탈로그 필드 정의"""
    key: str
    label: str
    type: FieldType

    @property
    def is_numeric(self) -> bool:
        return self.type == FieldType.NUMBER

    def to_dict(self) -> dict:
        return {"key": self.key, "label": self.label, "type": self.type.value}


FIELD_CATALOG: tuple[FieldSpec, ...] = (
    # 밸류에이션
    FieldSpec("pe_ratio", "P/E Ratio", FieldType.NUMBER),
    FieldSpec("peg_ratio", "PEG Ratio", FieldType.NUMBER),
    FieldSpec("price_to_book", "Price to Book", FieldType.NUMBER),
    FieldSpec("price_to_sales", "Price to Sales", FieldType.NUMBER),
    FieldSpec("ev_ebitda", "EV/EBITDA", FieldType.NUMBER),
    # 수익성
    FieldSpec("roe", "Return on Equity", FieldType.NUMBER),
    FieldSpec("roa", "Return on Assets", FieldType.NUMBER),
    FieldSpec("gross_margin", "Gross Margin", FieldType.NUMBER),
    FieldSpec("operating_margin", "Operating Margin", FieldType.NUMBER),
    FieldSpec("net_margin", "Net Margin", FieldType.NUMBER),
    # 재무 건전성
    FieldSpec("debt_to_equity", "Debt to Equity", FieldType.NUMBER),
    FieldSpec("current_ratio", "Current Ratio", FieldType.NUMBER),
    FieldSpec("quick_ratio", "Quick Ratio", FieldType.NUMBER),
    FieldSpec("interest_coverage", "Interest Coverage", FieldType.NUMBER),
    # 성장성
    FieldSpec("revenue_growth", "Revenue Growth", FieldType.NUMBER),
    FieldSpec("earnings_growth", "Earnings Growth", FieldType.NUMBER),
    FieldSpec("book_value_growth", "Book Value Growth", FieldType.NUMBER),
    # 시장 데이터
    FieldSpec("market_cap", "Market Cap", FieldType.NUMBER),
    FieldSpec("volume", "Volume", FieldType.NUMBER),
    FieldSpec("price", "Stock Price", FieldType.NUMBER),
    FieldSpec("dividend_yield", "Dividend Yield", FieldType.NUMBER),
    FieldSpec("beta", "Beta", FieldType.NUMBER),
    FieldSpec("shares_outstanding", "Shares Outstanding", FieldType.NUMBER),
    FieldSpec("float_shares", "Float Shares", FieldType.NUMBER),
    # 애널리스트
    FieldSpec("analyst_rating", "Analyst Rating", FieldType.STRING),
    FieldSpec("price_target", "Price Target", FieldType.NUMBER),
    FieldSpec("analyst_count", "Analyst Count", FieldType.NUMBER),
    # 기술적 지표
    FieldSpec("rsi", "RSI", FieldType.NUMBER),
    FieldSpec("moving_avg_50", "50-Day Moving Average", FieldType.NUMBER),
    FieldSpec("moving_avg_200", "200-Day Moving Average", FieldType.NUMBER),
    # 기업 정보
    FieldSpec("sector", "Sector", FieldType.STRING),
    FieldSpec("industry", "Industry", FieldType.STRING),
    FieldSpec("employees", "Employees", FieldType.NUMBER),
    FieldSpec("esg_score", "ESG Score", FieldType.NUMBER),
)

_FIELDS_BY_KEY: dict[str, FieldSpec] = {spec.key: spec for spec in FIELD_CATALOG}

NUMERIC_OPERATORS: tuple[Operator, ...] = (
    Operator.LT,
    Operator.LE,
    Operator.GT,
    Operator.GE,
    Operator.EQ,
    Operator.NE,
)
STRING_OPERATORS: tuple[Operator, ...] = (Operator.EQ, Operator.NE)
TEXT_MATCH_OPERATORS: tuple[Operator, ...] = (Operator.CONTAINS, Operator.NOT_CONTAINS)


def get_field(name: str) -> FieldSpec:
    """
    필드 조회 (대소문자 무시)

    Raises:
        UnknownFieldError: 카탈로그에 없는 필드
    """
    spec = _FIELDS_BY_KEY.get(str(name).strip().lower())
    if spec is None:
        raise UnknownFieldError(name)
    return spec


def is_known_field(name: str) -> bool:
    return str(name).strip().lower() in _FIELDS_BY_KEY


def available_fields() -> list[FieldSpec]:
    """카탈로그 전체 (정의 순서)"""
    return list(FIELD_CATALOG)


def available_operators(
    field_type: FieldType,
    include_text_match: bool = False,
) -> list[Operator]:
    """
    필드 타입별 사용 가능한 연산자

    숫자 필드는 6개 관계/동등 연산자, 문자열 필드는 =, != 만.
    include_text_match 가 True 이면 문자열 필드에 contains/not_contains 추가.
    """
    if field_type == FieldType.NUMBER:
        return list(NUMERIC_OPERATORS)

    operators = list(STRING_OPERATORS)
    if include_text_match:
        operators.extend(TEXT_MATCH_OPERATORS)
    return operators
