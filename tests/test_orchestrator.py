"""Integration tests for the FinanceController."""

import pytest
from datetime import date

from pennylog.audit import AuditLogger
from pennylog.config import StorageSettings
from pennylog.models.finance import (
    CategoryGroup,
    EntryDraft,
    EntryKind,
    FinanceData,
    Frequency,
    Period,
    Settings,
)
from pennylog.orchestrator import FinanceController, create_store
from pennylog.services.storage import (
    CookieStore,
    InMemoryStore,
    JsonFileStore,
    StorageError,
)
from pennylog.validation import EntryValidationError


class RecordingLogger:
    """Stands in for the structlog logger; keeps what was logged."""

    def __init__(self):
        self.records = []

    def _record(self, level, event, **kwargs):
        self.records.append((level, event, kwargs))

    def debug(self, event, **kwargs):
        self._record("debug", event, **kwargs)

    def info(self, event, **kwargs):
        self._record("info", event, **kwargs)

    def warning(self, event, **kwargs):
        self._record("warning", event, **kwargs)

    def error(self, event, **kwargs):
        self._record("error", event, **kwargs)

    def event_types(self):
        return [kwargs["event_type"] for _, _, kwargs in self.records]


class FailingStore(InMemoryStore):
    """Loads normally, refuses every write."""

    def save(self, key, value):
        raise StorageError("disk full")


def storage_settings(**overrides) -> StorageSettings:
    values = {"backend": "memory", "finance_data_key": "financeData",
              "settings_key": "financeSettings"}
    values.update(overrides)
    return StorageSettings(**values)


@pytest.fixture
def recorder():
    return RecordingLogger()


@pytest.fixture
def store():
    return InMemoryStore()


@pytest.fixture
def controller(store, recorder):
    return FinanceController(store, AuditLogger(recorder), storage_settings())


class TestLoading:
    """Tests for the load-once contract."""

    def test_defaults_when_store_empty(self, controller):
        controller.load()
        assert controller.data == FinanceData()
        assert controller.settings == Settings()

    def test_loads_stored_documents(self, store, recorder):
        store.save("financeSettings", Settings(app_name="Stored").to_document())
        controller = FinanceController(store, AuditLogger(recorder), storage_settings())
        assert controller.settings.app_name == "Stored"
        assert "data_loaded" in recorder.event_types()

    def test_load_runs_once(self, store, controller):
        controller.load()
        store.save("financeSettings", Settings(app_name="Later").to_document())
        controller.load()
        assert controller.settings.app_name == "Pennylog"

    def test_wrong_shape_falls_back_to_default(self, store, recorder):
        store.save("financeData", ["not", "a", "document"])
        controller = FinanceController(store, AuditLogger(recorder), storage_settings())
        assert controller.data == FinanceData()
        assert "storage_fallback" in recorder.event_types()

    def test_partial_settings_accepted(self, store, recorder):
        store.save("financeSettings", {"appName": "Old", "currency": "USD"})
        controller = FinanceController(store, AuditLogger(recorder), storage_settings())
        assert controller.settings.app_name == "Old"
        assert controller.settings.daily_budget is None

    def test_null_amount_keeps_whole_document(self, store, recorder):
        """An entry stored with "amount": null must not cost the other entries."""
        store.save("financeData", {
            "income": [{"id": "income-1", "amount": 1000, "category": "Salary",
                        "date": "2024-03-01", "description": ""}],
            "expenses": [{"id": "expense-1", "amount": None, "category": "Food",
                          "type": "variable", "date": "2024-03-02",
                          "description": "", "frequency": "daily"}],
            "savings": [],
        })
        controller = FinanceController(store, AuditLogger(recorder), storage_settings())

        assert [e.id for e in controller.data.income] == ["income-1"]
        assert controller.data.expenses[0].amount is None
        assert "storage_fallback" not in recorder.event_types()

        stats = controller.statistics(Period(month=2, year=2024), today=date(2024, 3, 15))
        assert stats.monthly_income == 1000
        assert stats.monthly_expenses == 0

        controller.add_entry(EntryKind.SAVING, EntryDraft(amount="5"), now_ms=1)
        stored = store.load("financeData", None)
        assert [e["id"] for e in stored["income"]] == ["income-1"]
        assert stored["expenses"][0]["amount"] is None

    def test_entry_without_date_loads(self, store, recorder):
        store.save("financeData", {"savings": [{"id": "saving-1", "amount": 3}]})
        controller = FinanceController(store, AuditLogger(recorder), storage_settings())
        assert controller.data.savings[0].date == ""

    def test_broken_entry_dropped_alone(self, store, recorder):
        store.save("financeData", {
            "income": [{"id": "income-1", "amount": 10, "date": "2024-03-01"}],
            "expenses": [
                {"id": "expense-1", "amount": 4, "type": "sometimes", "date": "2024-03-02"},
                {"id": "expense-2", "amount": 6, "date": "2024-03-03"},
            ],
        })
        controller = FinanceController(store, AuditLogger(recorder), storage_settings())

        assert [e.id for e in controller.data.income] == ["income-1"]
        assert [e.id for e in controller.data.expenses] == ["expense-2"]
        _, _, details = recorder.records[0]
        assert details["event_type"] == "storage_repaired"
        assert details["details"]["dropped"] == ["expenses.0"]

    def test_bad_settings_field_takes_default(self, store, recorder):
        store.save("financeSettings", {"appName": "Mine", "expenseFrequency": "hourly"})
        controller = FinanceController(store, AuditLogger(recorder), storage_settings())
        assert controller.settings.app_name == "Mine"
        assert controller.settings.expense_frequency == Settings().expense_frequency
        assert "storage_repaired" in recorder.event_types()


class TestEntryOperations:
    """Tests for add / delete / clear through the controller."""

    def test_add_persists(self, store, controller):
        entry = controller.add_entry(
            EntryKind.INCOME,
            EntryDraft(amount="1000", category="Salary", date="2024-03-01"),
            now_ms=1,
        )
        assert entry.id == "income-1"
        stored = FinanceData.model_validate(store.load("financeData", None))
        assert [e.id for e in stored.income] == ["income-1"]

    def test_rejected_entry_not_persisted(self, store, controller, recorder):
        with pytest.raises(EntryValidationError):
            controller.add_entry(EntryKind.EXPENSE, EntryDraft(amount="5"))
        assert store.load("financeData", None) is None
        assert recorder.event_types()[-1] == "entry_rejected"

    def test_delete(self, store, controller):
        entry = controller.add_entry(EntryKind.SAVING, EntryDraft(amount="5"), now_ms=2)
        assert controller.delete_entry("savings", entry.id) is True
        assert controller.data.savings == []
        assert store.load("financeData", None)["savings"] == []

    def test_delete_missing_is_noop(self, controller, recorder):
        assert controller.delete_entry(EntryKind.INCOME, "income-404") is False
        assert recorder.event_types()[-1] == "entry_delete_missed"

    def test_clear_all(self, store, controller, recorder):
        controller.add_entry(EntryKind.SAVING, EntryDraft(amount="5"), now_ms=3)
        controller.clear_all()
        assert controller.data.is_empty
        assert store.load("financeData", None) == {"income": [], "expenses": [], "savings": []}
        _, _, details = recorder.records[-1]
        assert details["details"]["removed"]["savings"] == 1

    def test_save_failure_keeps_memory_state(self, recorder):
        controller = FinanceController(FailingStore(), AuditLogger(recorder), storage_settings())
        entry = controller.add_entry(EntryKind.SAVING, EntryDraft(amount="5"), now_ms=4)
        assert controller.data.savings == [entry]
        assert "save_failed" in recorder.event_types()

    def test_statistics_after_mutation(self, controller):
        controller.add_entry(EntryKind.INCOME,
                             EntryDraft(amount="1000", category="Salary", date="2024-03-01"))
        controller.add_entry(EntryKind.EXPENSE,
                             EntryDraft(amount="400", category="Rent", date="2024-03-02"))
        editor = controller.open_settings_editor()
        editor.set_expense_frequency(Frequency.MONTHLY)
        editor.set_budget(Frequency.MONTHLY, 500)
        editor.commit()

        stats = controller.statistics(Period(month=2, year=2024), today=date(2024, 3, 15))

        assert stats.remaining_budget == 600
        assert stats.frequency_remaining_budget == 100
        assert stats.budget_percentage == pytest.approx(80)

    def test_category_options(self, controller):
        assert controller.category_options(EntryKind.SAVING) == []
        assert "Rent" in controller.category_options(EntryKind.EXPENSE)


class TestSettings:
    """Tests for committing settings through the controller."""

    def test_commit_persists_camel_case(self, store, controller):
        editor = controller.open_settings_editor()
        editor.add_category(CategoryGroup.INCOME, "Bonus")
        editor.set_currency("EUR")
        editor.commit()

        assert "Bonus" in controller.settings.categories.income
        stored = store.load("financeSettings", None)
        assert stored["currency"] == "EUR"
        assert stored["currencySymbol"] == "€"
        assert "Bonus" in stored["categories"]["income"]

    def test_uncommitted_draft_not_persisted(self, store, controller):
        editor = controller.open_settings_editor()
        editor.set_app_name("Draft only")
        assert controller.settings.app_name == "Pennylog"
        assert store.load("financeSettings", None) is None

    def test_settings_saved_audit_lists_changes(self, controller, recorder):
        editor = controller.open_settings_editor()
        editor.set_app_name("Renamed")
        editor.commit()
        _, _, details = recorder.records[-1]
        assert details["event_type"] == "settings_saved"
        assert details["details"]["changed_fields"] == ["app_name"]


class TestCookieRoundTrip:
    """A new session reads what the previous one wrote."""

    def test_second_session_sees_data(self, recorder):
        first_store = CookieStore()
        first = FinanceController(first_store, AuditLogger(recorder), storage_settings())
        first.add_entry(EntryKind.INCOME,
                        EntryDraft(amount="10", category="Gift", description="Ünïcode & co"),
                        now_ms=9)

        header = f"financeData={first_store.raw_value('financeData')}"
        second = FinanceController(CookieStore.from_header(header), AuditLogger(recorder),
                                   storage_settings())

        assert second.data == first.data
        assert second.data.income[0].description == "Ünïcode & co"


class TestCreateStore:
    """Tests for the backend factory."""

    def test_memory(self):
        assert isinstance(create_store(storage_settings(backend="memory")), InMemoryStore)

    def test_cookie(self):
        store = create_store(storage_settings(backend="cookie"), cookies={"a": "1"})
        assert isinstance(store, CookieStore)
        assert store.load("a", None) == 1

    def test_file(self, tmp_path):
        store = create_store(storage_settings(backend="file", data_dir=str(tmp_path)))
        assert isinstance(store, JsonFileStore)
        assert store.directory == tmp_path


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
