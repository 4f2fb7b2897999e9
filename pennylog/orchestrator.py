"""
Main Orchestrator for Pennylog

This module ties together all the components. The FinanceController is
the ONE owner of the two long-lived documents:
1. FinanceData (the income, expense and saving lists)
2. Settings (preferences, budgets, categories)

DESIGN DECISION: The controller enforces the boundaries:
- Each stored document is loaded exactly once, before any mutation
- Every mutation replaces a whole document, then persists it
- Statistics are recomputed on demand from the current documents
- Every state change is audited

Components receive the controller (or the documents it hands out)
explicitly; there is no module-level state.
"""

from datetime import date
from pathlib import Path
from typing import Any, Mapping, Optional, Union

from pydantic import BaseModel, ValidationError
from pydantic.alias_generators import to_camel

from pennylog.aggregation import compute_statistics, period_entries
from pennylog.audit import AuditLogger, configure_logging
from pennylog.config import StorageSettings, get_config
from pennylog.editor import SettingsEditor
from pennylog.ledger import add_entry, clear_all, delete_entry, find_entry
from pennylog.models.finance import (
    Entry,
    EntryDraft,
    EntryKind,
    FinanceData,
    FinanceStatistics,
    Period,
    PeriodEntries,
    Settings,
    default_finance_data,
    default_settings,
)
from pennylog.services.storage import (
    CookieStore,
    InMemoryStore,
    JsonFileStore,
    KeyValueStoreInterface,
    StorageError,
)
from pennylog.validation import EntryValidationError, EntryValidator


class FinanceController:
    """
    Owns FinanceData and Settings for one session.

    Flow for every mutation:
    1. Ensure both documents were loaded from the store (once)
    2. Build the new document (pure functions in ledger / editor)
    3. Swap it in with a single assignment
    4. Persist it under its key
    5. Audit
    """

    def __init__(
        self,
        store: KeyValueStoreInterface,
        audit_logger: Optional[AuditLogger] = None,
        storage_settings: Optional[StorageSettings] = None,
    ):
        self._store = store
        self._audit_logger = audit_logger or AuditLogger()
        storage_settings = storage_settings or StorageSettings()
        self._data_key = storage_settings.finance_data_key
        self._settings_key = storage_settings.settings_key

        self._data: FinanceData = default_finance_data()
        self._settings: Settings = default_settings()
        self._loaded = False

    # -- loading ------------------------------------------------------------

    @property
    def is_loaded(self) -> bool:
        return self._loaded

    def load(self) -> None:
        """
        Load both documents from the store.

        Runs once; later calls do nothing, so a freshly loaded value is
        never clobbered by a second read.
        """
        if self._loaded:
            return
        self._data = self._load_document(self._data_key, FinanceData, default_finance_data())
        self._settings = self._load_document(self._settings_key, Settings, default_settings())
        self._loaded = True

    def _load_document(self, key: str, model: type[BaseModel], default: BaseModel) -> Any:
        """
        Read one document, falling back to `default` only when nothing
        usable is stored.

        A stored object that fails validation keeps its valid parts:
        the failing entries or fields are dropped and audited.
        """
        raw = self._store.load(key, None)
        if raw is None:
            self._audit_logger.log_data_loaded(key, found=False)
            return default
        try:
            document = model.model_validate(raw)
        except ValidationError as e:
            if not isinstance(raw, dict):
                self._audit_logger.log_storage_fallback(key, str(e))
                return default
            pruned, dropped = prune_invalid(raw, e)
            try:
                document = model.model_validate(pruned)
            except ValidationError as retry_error:
                self._audit_logger.log_storage_fallback(key, str(retry_error))
                return default
            self._audit_logger.log_storage_repaired(key, dropped, str(e))
            return document
        self._audit_logger.log_data_loaded(key, found=True)
        return document

    def _persist(self, key: str, document: BaseModel) -> bool:
        """
        Write a document to the store.

        Returns False (and audits) on failure; the in-memory state stays.
        """
        try:
            self._store.save(key, document.to_document())
        except StorageError as e:
            self._audit_logger.log_save_failed(key, str(e))
            return False
        return True

    # -- read access --------------------------------------------------------

    @property
    def store(self) -> KeyValueStoreInterface:
        return self._store

    @property
    def data(self) -> FinanceData:
        self.load()
        return self._data

    @property
    def settings(self) -> Settings:
        self.load()
        return self._settings

    def statistics(
        self,
        period: Optional[Period] = None,
        today: Optional[date] = None,
    ) -> FinanceStatistics:
        """Dashboard figures for `period` (default: this month)."""
        today = today or date.today()
        return compute_statistics(self.data, self.settings, period or Period.current(today), today)

    def period_entries(self, period: Optional[Period] = None) -> PeriodEntries:
        return period_entries(self.data, period or Period.current())

    def category_options(self, kind: Union[EntryKind, str]) -> list[str]:
        return self.settings.entry_categories(kind)

    def validator(self) -> EntryValidator:
        return EntryValidator(self.settings)

    # -- entry lifecycle ----------------------------------------------------

    def add_entry(
        self,
        kind: Union[EntryKind, str],
        draft: EntryDraft,
        now_ms: Optional[int] = None,
    ) -> Entry:
        """
        Add an entry and persist.

        Raises:
            EntryValidationError: Required fields missing or malformed;
                nothing changes.
        """
        kind = EntryKind.resolve(kind)
        try:
            updated = add_entry(self.data, kind, draft, self.settings, now_ms)
        except EntryValidationError as e:
            self._audit_logger.log_entry_rejected(
                kind.value,
                [issue.model_dump() for issue in e.result.errors],
            )
            raise

        self._data = updated
        entry = updated.collection(kind)[-1]
        self._persist(self._data_key, self._data)
        self._audit_logger.log_entry_added(kind.value, entry.id, entry.amount)
        return entry

    def delete_entry(self, kind: Union[EntryKind, str], entry_id: str) -> bool:
        """
        Delete an entry by id and persist.

        Returns False (and changes nothing) when no entry has that id.
        """
        kind = EntryKind.resolve(kind)
        if find_entry(self.data, kind, entry_id) is None:
            self._audit_logger.log_entry_delete_missed(kind.value, entry_id)
            return False

        self._data = delete_entry(self.data, kind, entry_id)
        self._persist(self._data_key, self._data)
        self._audit_logger.log_entry_deleted(kind.value, entry_id)
        return True

    def clear_all(self) -> None:
        """Replace FinanceData with three empty lists and persist."""
        counts = {
            kind.collection: len(self.data.collection(kind)) for kind in EntryKind
        }
        self._data = clear_all()
        self._persist(self._data_key, self._data)
        self._audit_logger.log_data_cleared(counts)

    # -- settings -----------------------------------------------------------

    def open_settings_editor(self) -> SettingsEditor:
        """A fresh editor whose draft starts from the committed Settings."""
        return SettingsEditor(self.settings, on_commit=self.commit_settings)

    def commit_settings(self, settings: Settings) -> bool:
        """Replace the committed Settings and persist them."""
        previous = self.settings
        self._settings = settings
        saved = self._persist(self._settings_key, self._settings)
        self._audit_logger.log_settings_saved([
            name for name in Settings.model_fields
            if getattr(previous, name) != getattr(settings, name)
        ])
        return saved


def prune_invalid(raw: dict, error: ValidationError) -> tuple[dict, list[str]]:
    """
    Copy of a stored document without the parts `error` points at.

    A failing list item (one entry) is dropped on its own; any other
    failure drops its top-level key so the field takes its default.
    Everything else is kept as stored.

    Returns:
        (pruned document, dotted locations that were dropped)
    """
    bad_items: dict[str, set[int]] = {}
    bad_keys: set[str] = set()
    for detail in error.errors():
        loc = detail["loc"]
        if not loc:
            continue
        top = str(loc[0])
        if len(loc) > 1 and isinstance(loc[1], int) and isinstance(raw.get(top), list):
            bad_items.setdefault(top, set()).add(loc[1])
        else:
            bad_keys.add(top)

    pruned = dict(raw)
    dropped = []
    for top in sorted(bad_keys):
        # error locations may name the field rather than its stored alias
        for name in (top, to_camel(top)):
            if name in pruned:
                del pruned[name]
                dropped.append(name)
    for top, indexes in sorted(bad_items.items()):
        if top in bad_keys:
            continue
        pruned[top] = [item for i, item in enumerate(raw[top]) if i not in indexes]
        dropped.extend(f"{top}.{i}" for i in sorted(indexes))
    return pruned, dropped


def create_store(
    storage_settings: StorageSettings,
    cookies: Optional[Mapping[str, str]] = None,
) -> KeyValueStoreInterface:
    """
    Build the configured store backend.

    Args:
        storage_settings: Which backend, and its options
        cookies: Raw cookie values from the browser (cookie backend only)
    """
    if storage_settings.backend == "cookie":
        return CookieStore(
            cookies,
            path=storage_settings.cookie_path,
            lifetime_years=storage_settings.cookie_lifetime_years,
        )
    if storage_settings.backend == "memory":
        return InMemoryStore()
    return JsonFileStore(Path(storage_settings.data_dir))


def create_app_components(
    cookies: Optional[Mapping[str, str]] = None,
    store: Optional[KeyValueStoreInterface] = None,
) -> FinanceController:
    """
    Factory function to create a loaded controller from configuration.

    Args:
        cookies: Browser cookies, when the cookie backend is configured
        store: Use this store instead of the configured one

    Returns:
        A FinanceController with both documents loaded
    """
    config = get_config()
    app_settings = config.app
    storage_settings = config.storage

    configure_logging(app_settings.log_level, app_settings.log_format)

    controller = FinanceController(
        store=store or create_store(storage_settings, cookies),
        audit_logger=AuditLogger(),
        storage_settings=storage_settings,
    )
    controller.load()
    return controller
