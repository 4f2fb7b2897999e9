"""
Streamlit Frontend for Pennylog

The screens a user works with every day:
1. Dashboard: period picker, stat cards, budget bar, entry tables
2. Add Entry: income, expense and saving forms
3. Settings: preferences, budgets, categories, clear all data

The UI only renders what the controller computes and forwards user
actions to it. Settings edits go through a draft that is committed only
on "Save Settings".
"""

import calendar
import json
from datetime import date

import streamlit as st
import streamlit.components.v1 as components

from pennylog.aggregation import available_years
from pennylog.config import get_config, validate_all_config
from pennylog.models.finance import (
    CURRENCY_SYMBOLS,
    CategoryGroup,
    EntryDraft,
    EntryKind,
    ExpenseType,
    Frequency,
    Period,
    ResetCycle,
)
from pennylog.orchestrator import FinanceController, create_app_components
from pennylog.services.storage import CookieStore
from pennylog.validation import EntryValidationError


# Page configuration
st.set_page_config(
    page_title="Pennylog",
    page_icon="💰",
    layout="wide",
    initial_sidebar_state="expanded",
)

st.markdown("""
<style>
    .stButton>button {
        width: 100%;
    }
    .over-budget {
        color: #dc3545;
        font-weight: bold;
    }
    .within-budget {
        color: #28a745;
    }
</style>
""", unsafe_allow_html=True)


CATEGORY_GROUP_LABELS = {
    CategoryGroup.INCOME: "Income",
    CategoryGroup.EXPENSE: "Expense",
    CategoryGroup.FIXED_EXPENSE: "Fixed Expense",
    CategoryGroup.VARIABLE_EXPENSE: "Variable Expense",
}


def get_controller() -> FinanceController:
    """One controller per browser session, loaded on first access."""
    if "controller" not in st.session_state:
        try:
            cookies = dict(st.context.cookies)
        except AttributeError:
            cookies = {}
        st.session_state.controller = create_app_components(cookies=cookies)
    return st.session_state.controller


def flush_cookies(controller: FinanceController) -> None:
    """Apply queued Set-Cookie strings in the browser."""
    store = controller.store
    if not isinstance(store, CookieStore):
        return
    for set_cookie in store.drain_set_cookies():
        components.html(
            f"<script>parent.document.cookie = {json.dumps(set_cookie)};</script>",
            height=0,
        )


def money(settings, amount) -> str:
    if amount is None:
        return "-"
    return f"{settings.currency_symbol}{amount:,.2f}"


def budget_label(settings, label: str, budget) -> str:
    """'Daily Expense / Rp50,000.00', or just the label when no budget is set."""
    if budget and budget > 0:
        return f"{label} / {money(settings, budget)}"
    return label


def main():
    """Main application entry point."""
    controller = get_controller()
    settings = controller.settings

    st.sidebar.title(f"💰 {settings.app_name}")
    if get_config().app.debug_mode:
        with st.sidebar.expander("Configuration"):
            st.json(validate_all_config())

    st.sidebar.markdown("---")

    page = st.sidebar.radio(
        "Navigate to:",
        ["📊 Dashboard", "➕ Add Entry", "⚙️ Settings"],
        index=0,
    )
    previous_page = st.session_state.get("current_page")
    st.session_state.current_page = page

    if page == "📊 Dashboard":
        render_dashboard_page(controller)
    elif page == "➕ Add Entry":
        render_add_entry_page(controller)
    elif page == "⚙️ Settings":
        render_settings_page(controller, reopened=previous_page != page)

    flush_cookies(controller)


def select_period() -> Period:
    today = date.today()
    years = available_years(today, get_config().app.selectable_years)

    col1, col2 = st.columns(2)
    with col1:
        month = st.selectbox(
            "Month",
            options=list(range(12)),
            index=today.month - 1,
            format_func=lambda m: calendar.month_name[m + 1],
        )
    with col2:
        year = st.selectbox("Year", options=years, index=0)
    return Period(month=month, year=year)


def render_dashboard_page(controller: FinanceController):
    """Render stats, the budget bar and the period tables."""
    settings = controller.settings
    st.title(f"📊 {settings.app_name}")
    st.caption(date.today().strftime("%A, %d %B %Y"))

    period = select_period()
    stats = controller.statistics(period)

    daily = stats.expense_frequency == Frequency.DAILY
    col1, col2, col3, col4, col5 = st.columns(5)
    with col1:
        st.metric("Monthly Income", money(settings, stats.monthly_income))
    with col2:
        st.metric(
            budget_label(settings, "Daily Expense", settings.daily_budget),
            money(settings, stats.daily_expenses),
        )
    with col3:
        st.metric(
            budget_label(settings, "Monthly Expense", settings.monthly_budget),
            money(settings, stats.monthly_expenses),
        )
    with col4:
        st.metric("Remaining Budget", money(settings, stats.remaining_budget))
    with col5:
        st.metric("Monthly Savings", money(settings, stats.monthly_savings))

    st.markdown("---")
    st.subheader(f"{'Daily' if daily else 'Monthly'} Budget")
    if stats.has_budget:
        st.progress(stats.budget_progress / 100)
        if stats.is_over_budget:
            st.markdown(
                f'<p class="over-budget">Over budget by {money(settings, stats.over_budget_amount)}</p>',
                unsafe_allow_html=True,
            )
        else:
            st.markdown(
                f'<p class="within-budget">{money(settings, stats.frequency_remaining_budget)} remaining</p>',
                unsafe_allow_html=True,
            )
    else:
        st.info("No budget set. Add one on the Settings page.")

    entries = controller.period_entries(period)
    st.markdown("---")
    st.subheader(f"Entries for {period.label}")

    render_entry_table(controller, "Income", EntryKind.INCOME, entries.income)
    col1, col2 = st.columns(2)
    with col1:
        render_entry_table(controller, "Fixed Expenses", EntryKind.EXPENSE, entries.fixed_expenses)
    with col2:
        render_entry_table(controller, "Variable Expenses", EntryKind.EXPENSE, entries.variable_expenses)
    render_entry_table(controller, "All Expenses", EntryKind.EXPENSE, entries.expenses, show_type=True)
    render_entry_table(controller, "Savings", EntryKind.SAVING, entries.savings)


def render_entry_table(
    controller: FinanceController,
    title: str,
    kind: EntryKind,
    entries: list,
    show_type: bool = False,
):
    settings = controller.settings
    st.markdown(f"#### {title}")
    if not entries:
        st.caption("No entries for this period.")
        return

    # one expense can appear in two tables
    table = title.lower().replace(" ", "-")
    for position, entry in enumerate(entries):
        cols = st.columns([2, 2, 2, 4, 2, 1] if show_type else [2, 2, 4, 2, 1])
        cells = iter(cols)
        next(cells).write(entry.date or "-")
        if show_type:
            next(cells).write(entry.type.value.capitalize())
        next(cells).write(getattr(entry, "category", "") or "-")
        next(cells).write(entry.description or "-")
        next(cells).write(money(settings, entry.amount))
        if next(cells).button("🗑️", key=f"delete-{table}-{entry.id}-{position}"):
            controller.delete_entry(kind, entry.id)
            st.rerun()


def render_add_entry_page(controller: FinanceController):
    """Render the add-entry forms."""
    st.title("➕ Add Entry")

    kind = st.radio(
        "Type",
        options=list(EntryKind),
        format_func=lambda k: k.value.capitalize(),
        horizontal=True,
    )

    with st.form(f"add-{kind.value}", clear_on_submit=True):
        entry_date = st.date_input("Date", value=date.today())
        amount = st.text_input("Amount", placeholder="0")

        category = ""
        if kind != EntryKind.SAVING:
            options = controller.category_options(kind)
            category = st.selectbox("Category", options=[""] + options) or ""

        expense_type = ExpenseType.VARIABLE
        frequency = Frequency.DAILY
        if kind == EntryKind.EXPENSE:
            expense_type = st.selectbox(
                "Expense Type",
                options=list(ExpenseType),
                index=1,
                format_func=lambda t: t.value.capitalize(),
            )
            frequency = st.selectbox(
                "Frequency",
                options=list(Frequency),
                format_func=lambda f: f.value.capitalize(),
            )

        description = st.text_input("Description (Optional)", placeholder="Add a note...")

        submitted = st.form_submit_button(f"Add {kind.value}", type="primary")

    if submitted:
        draft = EntryDraft(
            amount=amount,
            category=category,
            date=entry_date.isoformat(),
            description=description,
            expense_type=expense_type,
            frequency=frequency,
        )
        try:
            entry = controller.add_entry(kind, draft)
        except EntryValidationError as e:
            for issue in e.result.errors:
                st.error(f"❌ {issue.message}")
            st.warning("Please fill in all required fields")
        else:
            st.success(f"✅ {kind.value.capitalize()} of {money(controller.settings, entry.amount)} added")
            for issue in controller.validator().validate(kind, draft).warnings:
                st.warning(issue.message)


def get_settings_editor(controller: FinanceController, reopened: bool = False):
    """The session's editor; its draft restarts whenever the page is reopened."""
    if "settings_editor" not in st.session_state:
        st.session_state.settings_editor = controller.open_settings_editor()
    elif reopened:
        st.session_state.settings_editor.discard(controller.settings)
    return st.session_state.settings_editor


def render_settings_page(controller: FinanceController, reopened: bool = False):
    """Render the settings page."""
    st.title("⚙️ Settings")
    editor = get_settings_editor(controller, reopened)
    draft = editor.draft

    st.markdown("### General")
    editor.set_app_name(st.text_input("App Name", value=draft.app_name))

    currencies = list(CURRENCY_SYMBOLS)
    currency = st.selectbox(
        "Currency",
        options=currencies,
        index=currencies.index(draft.currency) if draft.currency in currencies else None,
        placeholder=f"{draft.currency} ({draft.currency_symbol})",
        format_func=lambda c: f"{c} ({CURRENCY_SYMBOLS[c]})",
    )
    if currency is not None and currency != draft.currency:
        editor.set_currency(currency)

    st.markdown("### Budget")
    frequency = st.selectbox(
        "Expense Frequency",
        options=list(Frequency),
        index=list(Frequency).index(draft.expense_frequency),
        format_func=lambda f: f.value.capitalize(),
    )
    editor.set_expense_frequency(frequency)

    col1, col2 = st.columns(2)
    with col1:
        daily_budget = st.number_input(
            "Daily Budget", min_value=0.0, value=float(draft.daily_budget or 0.0)
        )
    with col2:
        monthly_budget = st.number_input(
            "Monthly Budget", min_value=0.0, value=float(draft.monthly_budget or 0.0)
        )
    editor.set_budget(Frequency.DAILY, daily_budget or None)
    editor.set_budget(Frequency.MONTHLY, monthly_budget or None)

    cycle = st.selectbox(
        "Reset Cycle",
        options=list(ResetCycle),
        index=list(ResetCycle).index(draft.reset_cycle),
        format_func=lambda c: c.value.capitalize(),
    )
    editor.set_reset_cycle(cycle)
    if cycle == ResetCycle.MONTHLY:
        editor.set_reset_date(st.text_input("Reset Date (day of month)", value=str(draft.reset_date)))

    st.markdown("### Categories")
    for group, label in CATEGORY_GROUP_LABELS.items():
        with st.expander(f"{label} Categories"):
            for index, name in enumerate(editor.draft.categories.group(group)):
                col1, col2 = st.columns([5, 1])
                col1.write(name)
                if col2.button("✖", key=f"remove-{group.value}-{index}"):
                    editor.remove_category(group, index)
                    st.rerun()
            new_name = st.text_input(f"New {label.lower()} category", key=f"new-{group.value}")
            if st.button("Add", key=f"add-{group.value}"):
                editor.add_category(group, new_name)
                st.rerun()

    st.markdown("---")
    col1, col2 = st.columns(2)
    with col1:
        if st.button("💾 Save Settings", type="primary"):
            editor.commit()
            del st.session_state["settings_editor"]
            st.success("Settings saved")
            st.rerun()
    with col2:
        if st.button("↩️ Discard Changes"):
            editor.discard(controller.settings)
            st.rerun()

    st.markdown("---")
    st.markdown("### Danger Zone")
    confirm = st.checkbox("I understand this deletes every income, expense and saving entry")
    if st.button("🗑️ Clear All Data", disabled=not confirm):
        controller.clear_all()
        st.success("All data cleared")


if __name__ == "__main__":
    main()
