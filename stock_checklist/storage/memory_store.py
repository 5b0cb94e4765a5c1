"""
인메모리 체크리스트 저장소

프로세스 메모리에 정의와 결과를 보관 (테스트, 단일 프로세스 실행용)
"""
import copy
from dataclasses import replace
from datetime import datetime

from stock_checklist.core.exceptions import StoreError
from stock_checklist.core.interfaces import (
    Checklist,
    ChecklistStore,
    ConditionItem,
    EvaluationResult,
    StoredResult,
)
from stock_checklist.core.logger import get_logger

CHECKLIST_FIELDS = frozenset({"name", "description", "active"})
ITEM_FIELDS = frozenset({"left_operand", "operator", "right_operand", "enabled", "sort_order"})

# (이름, 설명, [(필드, 연산자, 값), ...])
SAMPLE_CHECKLISTS = (
    (
        1,
        "Value Investing Checklist",
        "Focus on undervalued stocks with strong fundamentals",
        [("pe_ratio", "<", "20"), ("market_cap", ">", "1000000000"), ("dividend_yield", ">", "0.01")],
    ),
    (
        1,
        "Growth Stock Screener",
        "High-growth companies with strong momentum",
        [("pe_ratio", "<", "40"), ("market_cap", ">", "5000000000"), ("earnings_growth", ">", "0.15")],
    ),
    (
        2,
        "Dividend Aristocrats",
        "Stable dividend-paying companies",
        [("dividend_yield", ">", "0.02"), ("pe_ratio", "<", "25"), ("market_cap", ">", "10000000000")],
    ),
)


def check_updates(updates: dict, allowed: frozenset, kind: str) -> None:
    unknown = set(updates) - allowed
    if unknown:
        raise StoreError(f"수정할 수 없는 {kind} 필드: {sorted(unknown)}", {"fields": sorted(unknown)})


class InMemoryChecklistStore(ChecklistStore):
    """
    인메모리 저장소

    반환 값은 복사본이므로 호출자가 수정해도 저장소 상태는 바뀌지 않는다.

    사용법:
        store = InMemoryChecklistStore(with_sample_data=True)
        checklist = store.create_checklist(user_id=1, name="My Screen")
        store.add_item(checklist.id, "pe_ratio", "<", "15")
    """

    def __init__(self, with_sample_data: bool = False):
        self.logger = get_logger(self.__class__.__name__)
        self._checklists: dict[int, Checklist] = {}
        self._results: list[StoredResult] = []
        self._next_id = 1

        if with_sample_data:
            self.load_sample_data()

    def _allocate_id(self) -> int:
        new_id = self._next_id
        self._next_id += 1
        return new_id

    def load_sample_data(self) -> None:
        """샘플 체크리스트 3종 등록"""
        for user_id, name, description, conditions in SAMPLE_CHECKLISTS:
            checklist = self.create_checklist(user_id, name, description)
            for left, op, right in conditions:
                self.add_item(checklist.id, left, op, right)
        self.logger.debug(f"샘플 체크리스트 {len(SAMPLE_CHECKLISTS)}개 로드")

    # ---- 체크리스트 ----
    def list_checklists(self, user_id: int) -> list[Checklist]:
        return [
            copy.deepcopy(c)
            for c in self._checklists.values()
            if c.user_id == user_id and c.active
        ]

    def get_checklist(self, checklist_id: int) -> Checklist | None:
        checklist = self._checklists.get(checklist_id)
        return copy.deepcopy(checklist) if checklist else None

    def create_checklist(
        self,
        user_id: int,
        name: str,
        description: str | None = None,
        active: bool = True,
    ) -> Checklist:
        now = datetime.now()
        checklist = Checklist(
            id=self._allocate_id(),
            user_id=user_id,
            name=name,
            description=description,
            active=active,
            created_at=now,
            updated_at=now,
        )
        self._checklists[checklist.id] = checklist
        return copy.deepcopy(checklist)

    def update_checklist(self, checklist_id: int, **updates) -> Checklist | None:
        check_updates(updates, CHECKLIST_FIELDS, "체크리스트")

        existing = self._checklists.get(checklist_id)
        if existing is None:
            return None

        updated = replace(existing, **updates, updated_at=datetime.now())
        self._checklists[checklist_id] = updated
        return copy.deepcopy(updated)

    def delete_checklist(self, checklist_id: int) -> bool:
        # 항목은 Checklist.items 에 들어 있으므로 함께 사라진다
        deleted = self._checklists.pop(checklist_id, None) is not None
        if deleted:
            self._results = [r for r in self._results if r.checklist_id != checklist_id]
        return deleted

    # ---- 조건 항목 ----
    def get_items(self, checklist_id: int) -> list[ConditionItem]:
        checklist = self._checklists.get(checklist_id)
        return copy.deepcopy(checklist.items) if checklist else []

    def add_item(
        self,
        checklist_id: int,
        left_operand: str,
        operator: str,
        right_operand: str,
        enabled: bool = True,
        sort_order: int | None = None,
    ) -> ConditionItem:
        checklist = self._checklists.get(checklist_id)
        if checklist is None:
            raise StoreError(
                f"항목을 추가할 체크리스트가 없습니다: {checklist_id}",
                {"checklist_id": checklist_id},
            )

        if sort_order is None:
            sort_order = max((i.sort_order for i in checklist.items), default=0) + 1

        item = ConditionItem(
            id=self._allocate_id(),
            checklist_id=checklist_id,
            left_operand=left_operand,
            operator=operator,
            right_operand=str(right_operand),
            enabled=enabled,
            sort_order=sort_order,
        )
        checklist.items.append(item)
        return copy.deepcopy(item)

    def _find_item(self, item_id: int) -> tuple[Checklist, int] | None:
        for checklist in self._checklists.values():
            for index, item in enumerate(checklist.items):
                if item.id == item_id:
                    return checklist, index
        return None

    def update_item(self, item_id: int, **updates) -> ConditionItem | None:
        check_updates(updates, ITEM_FIELDS, "항목")

        found = self._find_item(item_id)
        if found is None:
            return None

        if "right_operand" in updates:
            updates["right_operand"] = str(updates["right_operand"])

        checklist, index = found
        updated = replace(checklist.items[index], **updates)
        checklist.items[index] = updated
        return copy.deepcopy(updated)

    def delete_item(self, item_id: int) -> bool:
        found = self._find_item(item_id)
        if found is None:
            return False

        checklist, index = found
        del checklist.items[index]
        return True

    # ---- 평가 결과 ----
    def save_result(self, result: EvaluationResult) -> StoredResult:
        stored = StoredResult(
            id=self._allocate_id(),
            result_date=datetime.now(),
            result=copy.deepcopy(result),
        )
        self._results.append(stored)
        return copy.deepcopy(stored)

    def get_results(self, checklist_id: int, limit: int = 50) -> list[StoredResult]:
        matched = [r for r in self._results if r.checklist_id == checklist_id]
        matched.sort(key=lambda r: (r.result_date, r.id), reverse=True)
        return copy.deepcopy(matched[:limit])
