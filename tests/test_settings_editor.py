"""Tests for the Settings editor."""

import pytest

from pennylog.editor import SettingsEditor, parse_reset_date
from pennylog.models.finance import CategoryGroup, Frequency, ResetCycle, Settings


class TestCategoryEditing:
    """Tests for adding and removing categories."""

    def test_add_then_remove_restores_list(self):
        editor = SettingsEditor(Settings())
        original = list(editor.draft.categories.income)

        assert editor.add_category(CategoryGroup.INCOME, "Bonus") is True
        index = editor.draft.categories.income.index("Bonus")
        assert editor.remove_category(CategoryGroup.INCOME, index) is True

        assert editor.draft.categories.income == original

    def test_add_trims_and_ignores_blank(self):
        editor = SettingsEditor(Settings())
        assert editor.add_category("expense", "   ") is False
        assert editor.add_category("expense", "  Pets  ") is True
        assert editor.draft.categories.expense[-1] == "Pets"

    def test_duplicates_are_kept(self):
        editor = SettingsEditor(Settings())
        editor.add_category(CategoryGroup.FIXED_EXPENSE, "Rent")
        assert editor.draft.categories.fixed_expense.count("Rent") == 2

    def test_remove_out_of_range_is_noop(self):
        editor = SettingsEditor(Settings())
        before = editor.draft
        assert editor.remove_category(CategoryGroup.VARIABLE_EXPENSE, 99) is False
        assert editor.remove_category(CategoryGroup.VARIABLE_EXPENSE, -1) is False
        assert editor.draft == before

    def test_unknown_group_rejected(self):
        editor = SettingsEditor(Settings())
        with pytest.raises(ValueError):
            editor.add_category("savings", "Emergency")


class TestPreferences:
    """Tests for preference setters."""

    def test_currency_sets_symbol(self):
        editor = SettingsEditor(Settings())
        editor.set_currency("usd")
        assert editor.draft.currency == "USD"
        assert editor.draft.currency_symbol == "$"

    def test_unknown_currency_keeps_symbol(self):
        editor = SettingsEditor(Settings())
        editor.set_currency("JPY")
        assert editor.draft.currency == "JPY"
        assert editor.draft.currency_symbol == "Rp"

    def test_budgets(self):
        editor = SettingsEditor(Settings())
        editor.set_budget(Frequency.DAILY, 50)
        editor.set_budget("monthly", 1500)
        assert editor.draft.daily_budget == 50.0
        assert editor.draft.monthly_budget == 1500.0
        editor.set_budget(Frequency.DAILY, None)
        assert editor.draft.daily_budget is None

    def test_frequency_and_cycle(self):
        editor = SettingsEditor(Settings())
        editor.set_expense_frequency("monthly")
        editor.set_reset_cycle(ResetCycle.WEEKLY)
        assert editor.draft.expense_frequency == Frequency.MONTHLY
        assert editor.draft.reset_cycle == ResetCycle.WEEKLY

    def test_reset_date(self):
        editor = SettingsEditor(Settings())
        editor.set_reset_date("25")
        assert editor.draft.reset_date == 25
        editor.set_reset_date("soon")
        assert editor.draft.reset_date == 1


class TestParseResetDate:
    """Tests for reset date parsing."""

    def test_values(self):
        assert parse_reset_date("15") == 15
        assert parse_reset_date("15th") == 15
        assert parse_reset_date(" 3 ") == 3
        assert parse_reset_date(7) == 7

    def test_fallback_to_one(self):
        assert parse_reset_date("") == 1
        assert parse_reset_date(None) == 1
        assert parse_reset_date("abc") == 1
        assert parse_reset_date("0") == 1

    def test_not_clamped(self):
        assert parse_reset_date("45") == 45


class TestCommitAndDiscard:
    """Tests for the draft lifecycle."""

    def test_draft_is_independent(self):
        committed = Settings()
        editor = SettingsEditor(committed)
        editor.set_app_name("Budgetly")
        assert committed.app_name == "Pennylog"
        assert editor.is_dirty is True
        assert editor.changed_fields() == ["app_name"]

    def test_commit_calls_handler(self):
        received = []
        editor = SettingsEditor(Settings(), on_commit=received.append)
        editor.add_category(CategoryGroup.INCOME, "Bonus")

        committed = editor.commit()

        assert received == [committed]
        assert "Bonus" in committed.categories.income
        assert editor.committed is committed
        assert editor.is_dirty is False

    def test_edits_after_commit_do_not_leak(self):
        editor = SettingsEditor(Settings())
        committed = editor.commit()
        editor.add_category(CategoryGroup.INCOME, "Later")
        assert "Later" not in committed.categories.income

    def test_discard_restores_committed(self):
        editor = SettingsEditor(Settings(app_name="Mine"))
        editor.set_app_name("Other")
        draft = editor.discard()
        assert draft.app_name == "Mine"
        assert editor.is_dirty is False

    def test_discard_with_new_committed(self):
        editor = SettingsEditor(Settings())
        draft = editor.discard(Settings(currency="GBP", currency_symbol="£"))
        assert draft.currency == "GBP"


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
