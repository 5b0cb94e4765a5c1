"""
SQLAlchemy 체크리스트 저장소

checklists / checklist_items / checklist_results 테이블에 정의와 결과를 저장
"""
import json
from datetime import datetime

from sqlalchemy import func, select
from sqlalchemy.orm import Session, selectinload

from stock_checklist.core.database import DatabaseManager
from stock_checklist.core.exceptions import StoreError
from stock_checklist.core.interfaces import (
    Checklist,
    ChecklistStore,
    ConditionItem,
    EvaluationResult,
    ItemResult,
    StoredResult,
    Verdict,
)
from stock_checklist.core.logger import get_logger
from stock_checklist.core.models import ChecklistItemModel, ChecklistModel, ChecklistResultModel
from stock_checklist.storage.memory_store import CHECKLIST_FIELDS, ITEM_FIELDS, check_updates


def _to_item(model: ChecklistItemModel) -> ConditionItem:
    return ConditionItem(
        id=model.id,
        checklist_id=model.checklist_id,
        left_operand=model.left_operand,
        operator=model.operator,
        right_operand=model.right_operand,
        enabled=bool(model.enabled),
        sort_order=model.sort_order or 0,
        created_at=model.created_at,
    )


def _to_checklist(model: ChecklistModel) -> Checklist:
    # 입력(id) 순서로 반환, 평가 순서는 평가기가 sort_order 로 정한다
    items = sorted(model.items, key=lambda i: i.id)
    return Checklist(
        id=model.id,
        user_id=model.user_id,
        name=model.name,
        description=model.description,
        active=bool(model.active),
        created_at=model.created_at,
        updated_at=model.updated_at,
        items=[_to_item(i) for i in items],
    )


def _to_stored_result(model: ChecklistResultModel) -> StoredResult:
    details = [ItemResult.from_dict(d) for d in json.loads(model.details or "[]")]
    return StoredResult(
        id=model.id,
        result_date=model.result_date,
        result=EvaluationResult(
            symbol=model.symbol,
            checklist_id=model.checklist_id,
            passed_checks=model.passed_checks,
            total_checks=model.total_checks,
            score_percentage=model.score_percentage,
            details=details,
            overall_result=Verdict(model.overall_result),
            error=model.error,
        ),
    )


class SqlChecklistStore(ChecklistStore):
    """
    SQLAlchemy 기반 저장소

    사용법:
        db = DatabaseManager("sqlite:///data/checklists.db")
        store = SqlChecklistStore(db)   # 테이블 자동 생성

        checklist = store.create_checklist(user_id=1, name="Value")
        store.add_item(checklist.id, "pe_ratio", "<", "20")
    """

    def __init__(self, db: DatabaseManager, create_tables: bool = True):
        self.db = db
        self.logger = get_logger(self.__class__.__name__)
        if create_tables:
            self.db.create_all_tables()

    # ---- 체크리스트 ----
    def _load_checklist(self, session: Session, checklist_id: int) -> ChecklistModel | None:
        stmt = (
            select(ChecklistModel)
            .options(selectinload(ChecklistModel.items))
            .where(ChecklistModel.id == checklist_id)
        )
        return session.execute(stmt).scalar_one_or_none()

    def list_checklists(self, user_id: int) -> list[Checklist]:
        with self.db.session() as session:
            stmt = (
                select(ChecklistModel)
                .options(selectinload(ChecklistModel.items))
                .where(ChecklistModel.user_id == user_id, ChecklistModel.active == True)  # noqa: E712
                .order_by(ChecklistModel.id)
            )
            return [_to_checklist(m) for m in session.execute(stmt).scalars()]

    def get_checklist(self, checklist_id: int) -> Checklist | None:
        with self.db.session() as session:
            model = self._load_checklist(session, checklist_id)
            return _to_checklist(model) if model else None

    def create_checklist(
        self,
        user_id: int,
        name: str,
        description: str | None = None,
        active: bool = True,
    ) -> Checklist:
        with self.db.session() as session:
            now = datetime.now()
            model = ChecklistModel(
                user_id=user_id,
                name=name,
                description=description,
                active=active,
                created_at=now,
                updated_at=now,
            )
            session.add(model)
            session.flush()
            self.logger.debug(f"체크리스트 생성: {model.id} ({name})")
            return _to_checklist(model)

    def update_checklist(self, checklist_id: int, **updates) -> Checklist | None:
        check_updates(updates, CHECKLIST_FIELDS, "체크리스트")

        with self.db.session() as session:
            model = self._load_checklist(session, checklist_id)
            if model is None:
                return None

            for key, value in updates.items():
                setattr(model, key, value)
            model.updated_at = datetime.now()
            session.flush()
            return _to_checklist(model)

    def delete_checklist(self, checklist_id: int) -> bool:
        with self.db.session() as session:
            model = session.get(ChecklistModel, checklist_id)
            if model is None:
                return False
            # items/results 는 cascade 로 함께 삭제
            session.delete(model)
            return True

    # ---- 조건 항목 ----
    def get_items(self, checklist_id: int) -> list[ConditionItem]:
        with self.db.session() as session:
            stmt = (
                select(ChecklistItemModel)
                .where(ChecklistItemModel.checklist_id == checklist_id)
                .order_by(ChecklistItemModel.id)
            )
            return [_to_item(m) for m in session.execute(stmt).scalars()]

    def add_item(
        self,
        checklist_id: int,
        left_operand: str,
        operator: str,
        right_operand: str,
        enabled: bool = True,
        sort_order: int | None = None,
    ) -> ConditionItem:
        with self.db.session() as session:
            if session.get(ChecklistModel, checklist_id) is None:
                raise StoreError(
                    f"항목을 추가할 체크리스트가 없습니다: {checklist_id}",
                    {"checklist_id": checklist_id},
                )

            if sort_order is None:
                current_max = session.execute(
                    select(func.max(ChecklistItemModel.sort_order))
                    .where(ChecklistItemModel.checklist_id == checklist_id)
                ).scalar()
                sort_order = (current_max or 0) + 1

            model = ChecklistItemModel(
                checklist_id=checklist_id,
                left_operand=left_operand,
                operator=operator,
                right_operand=str(right_operand),
                enabled=enabled,
                sort_order=sort_order,
                created_at=datetime.now(),
            )
            session.add(model)
            session.flush()
            return _to_item(model)

    def update_item(self, item_id: int, **updates) -> ConditionItem | None:
        check_updates(updates, ITEM_FIELDS, "항목")

        with self.db.session() as session:
            model = session.get(ChecklistItemModel, item_id)
            if model is None:
                return None

            for key, value in updates.items():
                setattr(model, key, str(value) if key == "right_operand" else value)
            session.flush()
            return _to_item(model)

    def delete_item(self, item_id: int) -> bool:
        with self.db.session() as session:
            model = session.get(ChecklistItemModel, item_id)
            if model is None:
                return False
            session.delete(model)
            return True

    # ---- 평가 결과 ----
    def save_result(self, result: EvaluationResult) -> StoredResult:
        with self.db.session() as session:
            model = ChecklistResultModel(
                checklist_id=result.checklist_id,
                symbol=result.symbol,
                passed_checks=result.passed_checks,
                total_checks=result.total_checks,
                score_percentage=result.score_percentage,
                overall_result=result.overall_result.value,
                error=result.error,
                details=json.dumps([d.to_dict() for d in result.details], ensure_ascii=False),
                result_date=datetime.now(),
            )
            session.add(model)
            session.flush()
            return _to_stored_result(model)

    def get_results(self, checklist_id: int, limit: int = 50) -> list[StoredResult]:
        with self.db.session() as session:
            stmt = (
                select(ChecklistResultModel)
                .where(ChecklistResultModel.checklist_id == checklist_id)
                .order_by(ChecklistResultModel.result_date.desc(), ChecklistResultModel.id.desc())
                .limit(limit)
            )
            return [_to_stored_result(m) for m in session.execute(stmt).scalars()]
