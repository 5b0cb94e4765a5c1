"""
데이터베이스 모델 정의

SQLAlchemy ORM 모델
"""
from datetime import datetime

from sqlalchemy import (
    Column, String, Integer, Float, Boolean, DateTime,
    Text, ForeignKey, Index
)
from sqlalchemy.orm import relationship

from stock_checklist.core.database import Base


# ============================================
# 체크리스트
# ============================================
class ChecklistModel(Base):
    """체크리스트 테이블"""
    __tablename__ = "checklists"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, nullable=False)
    name = Column(String(200), nullable=False)
    description = Column(Text, nullable=True)
    active = Column(Boolean, default=True)

    created_at = Column(DateTime, default=datetime.now)
    updated_at = Column(DateTime, default=datetime.now, onupdate=datetime.now)

    # 항목은 체크리스트와 생명주기를 같이한다
    items = relationship(
        "ChecklistItemModel",
        back_populates="checklist",
        cascade="all, delete-orphan",
    )
    results = relationship(
        "ChecklistResultModel",
        back_populates="checklist",
        cascade="all, delete-orphan",
    )

    __table_args__ = (
        Index("idx_checklist_user", "user_id", "active"),
    )

    def __repr__(self):
        return f"<Checklist {self.id}: {self.name}>"


# ============================================
# 조건 항목
# ============================================
class ChecklistItemModel(Base):
    """체크리스트 조건 항목 테이블"""
    __tablename__ = "checklist_items"

    id = Column(Integer, primary_key=True, autoincrement=True)
    checklist_id = Column(Integer, ForeignKey("checklists.id"), nullable=False)

    left_operand = Column(String(50), nullable=False)   # 필드 카탈로그 키
    operator = Column(String(20), nullable=False)       # <, >, <=, >=, =, !=, contains, not_contains
    right_operand = Column(String(200), nullable=False)  # 리터럴 문자열
    enabled = Column(Boolean, default=True)
    sort_order = Column(Integer, default=0)

    created_at = Column(DateTime, default=datetime.now)

    checklist = relationship("ChecklistModel", back_populates="items")

    __table_args__ = (
        Index("idx_item_checklist", "checklist_id", "sort_order"),
    )

    def __repr__(self):
        return f"<ChecklistItem {self.id}: {self.left_operand} {self.operator} {self.right_operand}>"


# ============================================
# 평가 결과 히스토리
# ============================================
class ChecklistResultModel(Base):
    """종목별 체크리스트 평가 결과"""
    __tablename__ = "checklist_results"

    id = Column(Integer, primary_key=True, autoincrement=True)
    checklist_id = Column(Integer, ForeignKey("checklists.id"), nullable=False)
    symbol = Column(String(20), nullable=False)

    passed_checks = Column(Integer, default=0)
    total_checks = Column(Integer, default=0)
    score_percentage = Column(Float, default=0.0)
    overall_result = Column(String(10), default="fail")  # pass/partial/fail
    error = Column(Text, nullable=True)

    # ItemResult 리스트 (JSON)
    details = Column(Text, default="[]")

    result_date = Column(DateTime, nullable=False, default=datetime.now)

    checklist = relationship("ChecklistModel", back_populates="results")

    __table_args__ = (
        Index("idx_result_checklist_date", "checklist_id", "result_date"),
        Index("idx_result_symbol", "symbol"),
    )

    def __repr__(self):
        return f"<ChecklistResult {self.symbol} @ {self.result_date}: {self.score_percentage}%>"
