"""
체크리스트 저장소 구현
"""
from stock_checklist.storage.memory_store import InMemoryChecklistStore
from stock_checklist.storage.sql_store import SqlChecklistStore

__all__ = [
    "InMemoryChecklistStore",
    "SqlChecklistStore",
]
