"""Tests for reading and saving notification preferences."""

from __future__ import annotations

from collections import defaultdict

import pytest
from sqlalchemy.exc import IntegrityError, OperationalError, ProgrammingError

from alerts_engine.application.use_cases.notifications import PreferenceRepository
from alerts_engine.domain.entities import default_preferences
from alerts_engine.infrastructure.models import NotificationPreferenceModel
from alerts_engine.infrastructure.repositories import (
    PreferenceDocumentStore,
    PreferenceStoreError,
    StoreErrorReason,
    classify_error,
)

from conftest import USER_ID, FakeSessions


class FakeStore:
    """In-memory document store that fails on demand."""

    def __init__(self) -> None:
        self.documents: dict[str, dict] = {}
        self.failures: dict[str, list[StoreErrorReason]] = defaultdict(list)
        self.calls: list[str] = []

    def fail(self, method: str, *reasons: StoreErrorReason) -> None:
        self.failures[method].extend(reasons)

    def _call(self, method: str) -> None:
        self.calls.append(method)
        if self.failures[method]:
            raise PreferenceStoreError(self.failures[method].pop(0))

    def get(self, user_id):
        self._call("get")
        if user_id not in self.documents:
            raise PreferenceStoreError(StoreErrorReason.NOT_FOUND)
        return self.documents[user_id]

    def upsert(self, user_id, document):
        self._call("upsert")
        self.documents[user_id] = document

    def update(self, user_id, document):
        self._call("update")
        if user_id not in self.documents:
            raise PreferenceStoreError(StoreErrorReason.NOT_FOUND)
        self.documents[user_id] = document

    def insert(self, user_id, document):
        self._call("insert")
        self.documents[user_id] = document


@pytest.fixture()
def store() -> FakeStore:
    return FakeStore()


def test_first_read_creates_default_document(store):
    repository = PreferenceRepository(store, FakeSessions())

    preferences = repository.get(USER_ID)

    assert preferences == default_preferences()
    assert store.documents[USER_ID] == default_preferences().to_document()


def test_missing_table_returns_defaults_without_writing(store):
    store.fail("get", StoreErrorReason.MISSING_TABLE)
    repository = PreferenceRepository(store, FakeSessions())

    assert repository.get(USER_ID) == default_preferences()
    assert "upsert" not in store.calls
    assert store.documents == {}


def test_stored_partial_document_is_merged(store):
    store.documents[USER_ID] = {"system": {"tips_guidance": True}}
    repository = PreferenceRepository(store, FakeSessions())

    preferences = repository.get(USER_ID)

    assert preferences.system.tips_guidance is True
    assert preferences.financial == default_preferences().financial


@pytest.mark.parametrize("session_user", [None, "someone-else"])
def test_save_requires_matching_session(store, session_user):
    repository = PreferenceRepository(store, FakeSessions(session_user))

    assert repository.save(USER_ID, default_preferences()) is False
    assert store.calls == []


def test_permission_denied_refreshes_session_and_retries(store):
    store.fail("upsert", StoreErrorReason.PERMISSION_DENIED)
    sessions = FakeSessions()
    repository = PreferenceRepository(store, sessions)

    assert repository.save(USER_ID, default_preferences()) is True
    assert sessions.refreshes == 1
    assert store.calls == ["upsert", "upsert"]


def test_permission_denied_without_refresh_fails(store):
    store.fail("upsert", StoreErrorReason.PERMISSION_DENIED)
    repository = PreferenceRepository(store, FakeSessions(refresh_succeeds=False))

    assert repository.save(USER_ID, default_preferences()) is False
    assert store.documents == {}


def test_unique_conflict_falls_back_to_update(store):
    store.documents[USER_ID] = {}
    store.fail("upsert", StoreErrorReason.UNIQUE_CONFLICT)
    repository = PreferenceRepository(store, FakeSessions())

    assert repository.save(USER_ID, default_preferences()) is True
    assert store.calls == ["upsert", "update"]
    assert len(store.documents) == 1


def test_failed_update_falls_back_to_insert(store):
    store.fail("upsert", StoreErrorReason.UNIQUE_CONFLICT)
    repository = PreferenceRepository(store, FakeSessions())

    assert repository.save(USER_ID, default_preferences()) is True
    assert store.calls == ["upsert", "update", "insert"]


def test_save_reports_failure_when_every_path_fails(store):
    store.fail("upsert", StoreErrorReason.UNIQUE_CONFLICT)
    store.fail("insert", StoreErrorReason.OTHER)
    repository = PreferenceRepository(store, FakeSessions())

    assert repository.save(USER_ID, default_preferences()) is False


def test_update_changes_a_single_field(store):
    repository = PreferenceRepository(store, FakeSessions())

    assert repository.update(USER_ID, "financial", "overdue_payments", False) is True
    assert repository.get(USER_ID).financial.overdue_payments is False
    assert repository.get(USER_ID).financial.due_soon_reminders is True


@pytest.mark.parametrize(
    ("category", "key", "value"),
    [("financial", "missing", True), ("marketing", "emails", True), ("financial", "overdue_payments", 1)],
)
def test_update_rejects_invalid_fields(store, category, key, value):
    repository = PreferenceRepository(store, FakeSessions())

    assert repository.update(USER_ID, category, key, value) is False


def test_should_send_checks_flags():
    preferences = default_preferences()

    assert PreferenceRepository.should_send(preferences, "financial", "overdue_payments") is True
    assert PreferenceRepository.should_send(preferences, "system", "tips_guidance") is False
    assert PreferenceRepository.should_send(preferences, "unknown", "overdue_payments") is False
    assert PreferenceRepository.should_send(preferences, "financial", "unknown") is False


def test_should_send_category_maps_labels():
    preferences = default_preferences().with_value("financial", "due_soon_reminders", False)

    assert PreferenceRepository.should_send_category(preferences, "overdue") is True
    assert PreferenceRepository.should_send_category(preferences, "due_soon") is False
    assert PreferenceRepository.should_send_category(preferences, "tip") is False
    assert PreferenceRepository.should_send_category(preferences, "promotion") is False


class _ConflictOnceStore(PreferenceDocumentStore):
    """Store whose first lookup misses an existing row, as a concurrent writer would."""

    def __init__(self, session) -> None:
        super().__init__(session)
        self._missed = False

    def _find(self, user_id, key):
        if not self._missed:
            self._missed = True
            return None
        return super()._find(user_id, key)


def test_database_conflict_updates_the_existing_row(db_session):
    PreferenceDocumentStore(db_session).insert(USER_ID, {"financial": {"overdue_payments": False}})
    repository = PreferenceRepository(_ConflictOnceStore(db_session), FakeSessions())

    preferences = default_preferences().with_value("system", "tips_guidance", True)

    assert repository.save(USER_ID, preferences) is True
    rows = db_session.query(NotificationPreferenceModel).all()
    assert len(rows) == 1
    assert PreferenceDocumentStore(db_session).get(USER_ID)["system"]["tips_guidance"] is True


def test_non_object_document_reads_as_defaults(db_session):
    PreferenceDocumentStore(db_session).insert(USER_ID, ["legacy", "flags"])
    repository = PreferenceRepository(PreferenceDocumentStore(db_session), FakeSessions())

    assert PreferenceDocumentStore(db_session).get(USER_ID) == {}
    assert repository.get(USER_ID) == default_preferences()


def test_store_reports_missing_document(db_session):
    with pytest.raises(PreferenceStoreError) as excinfo:
        PreferenceDocumentStore(db_session).get(USER_ID)

    assert excinfo.value.reason is StoreErrorReason.NOT_FOUND


def test_store_reports_missing_table(db_session):
    NotificationPreferenceModel.__table__.drop(bind=db_session.get_bind())

    with pytest.raises(PreferenceStoreError) as excinfo:
        PreferenceDocumentStore(db_session).get(USER_ID)

    assert excinfo.value.reason is StoreErrorReason.MISSING_TABLE
    assert PreferenceRepository(PreferenceDocumentStore(db_session), FakeSessions()).get(
        USER_ID
    ) == default_preferences()


class _DriverError(Exception):
    def __init__(self, message: str, pgcode: str | None = None) -> None:
        super().__init__(message)
        self.pgcode = pgcode


@pytest.mark.parametrize(
    ("error", "expected"),
    [
        (OperationalError("SELECT", {}, _DriverError("no such table: prefs")), StoreErrorReason.MISSING_TABLE),
        (ProgrammingError("SELECT", {}, _DriverError("relation", "42P01")), StoreErrorReason.MISSING_TABLE),
        (ProgrammingError("UPDATE", {}, _DriverError("denied", "42501")), StoreErrorReason.PERMISSION_DENIED),
        (OperationalError("UPDATE", {}, _DriverError("permission denied for table")), StoreErrorReason.PERMISSION_DENIED),
        (IntegrityError("INSERT", {}, _DriverError("duplicate key value", "23505")), StoreErrorReason.UNIQUE_CONFLICT),
        (OperationalError("SELECT", {}, _DriverError("disk I/O error")), StoreErrorReason.OTHER),
    ],
)
def test_classify_error(error, expected):
    assert classify_error(error) is expected
