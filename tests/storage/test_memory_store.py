"""
InMemoryChecklistStore 전용 테스트
"""
from stock_checklist.storage import InMemoryChecklistStore
from stock_checklist.storage.memory_store import SAMPLE_CHECKLISTS


class TestInMemoryStore:

    def test_sample_data(self):
        store = InMemoryChecklistStore(with_sample_data=True)

        user1 = store.list_checklists(1)
        assert [c.name for c in user1] == ["Value Investing Checklist", "Growth Stock Screener"]
        assert len(store.list_checklists(2)) == 1
        assert all(len(c.items) == 3 for c in user1)
        assert len(SAMPLE_CHECKLISTS) == 3

    def test_returned_objects_are_copies(self):
        """반환 객체를 수정해도 저장소는 그대로"""
        store = InMemoryChecklistStore()
        checklist = store.create_checklist(user_id=1, name="Original")
        store.add_item(checklist.id, "pe_ratio", "<", "20")

        fetched = store.get_checklist(checklist.id)
        fetched.name = "Changed"
        fetched.items[0].operator = ">"
        fetched.items.clear()

        again = store.get_checklist(checklist.id)
        assert again.name == "Original"
        assert again.items[0].operator == "<"

    def test_ids_are_unique_across_kinds(self):
        store = InMemoryChecklistStore()
        checklist = store.create_checklist(user_id=1, name="A")
        item = store.add_item(checklist.id, "pe_ratio", "<", "20")
        assert item.id != checklist.id

    def test_empty_store(self):
        store = InMemoryChecklistStore()
        assert store.list_checklists(1) == []
        assert store.get_items(1) == []
        assert store.delete_item(1) is False
