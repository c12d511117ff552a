"""Unit tests for redaction, diffing and summary synthesis."""

from datetime import date

import pytest

from src.models import Agency, AuditAction, Resident, Shift
from src.services.change_auditor import (
    REDACTED_FIELDS,
    ChangeAuditor,
    changed_keys,
    describe,
    diff,
    redact,
    subject_identifier,
)


class TestRedact:
    """Tests for the redaction filter."""

    def test_removes_every_denylisted_field(self):
        attributes = {field: "sensitive" for field in REDACTED_FIELDS}
        attributes["name"] = "Alice"

        assert redact(attributes) == {"name": "Alice"}

    def test_missing_fields_are_not_an_error(self):
        assert redact({"phone": "555-0100"}) == {"phone": "555-0100"}

    def test_does_not_mutate_input(self):
        attributes = {"name": "Alice", "password": "hash"}
        redact(attributes)

        assert attributes == {"name": "Alice", "password": "hash"}


class TestDiff:
    """Tests for changed-key computation."""

    def test_only_changed_keys_are_returned(self):
        original = {"name": "Acme Agency", "phone": "555-0100", "is_active": True}
        current = {"name": "Acme Agency", "phone": "555-0199", "is_active": True}

        before, after = diff(original, current)

        assert before == {"phone": "555-0100"}
        assert after == {"phone": "555-0199"}

    def test_before_and_after_share_key_set(self):
        original = {"a": 1, "b": 2, "c": 3}
        current = {"a": 1, "b": 20, "c": 30}

        before, after = diff(original, current)

        assert set(before) == set(after) == {"b", "c"}

    def test_key_present_on_one_side_counts_as_changed(self):
        before, after = diff({"a": 1}, {"a": 1, "notes": "new"})

        assert before == {"notes": None}
        assert after == {"notes": "new"}

    def test_redacted_only_change_yields_empty_diff(self):
        original = {"name": "Alice", "password": "old-hash"}
        current = {"name": "Alice", "password": "new-hash"}

        assert changed_keys(original, current) == set()
        assert diff(original, current) == ({}, {})

    def test_redacted_fields_never_appear_in_diff(self):
        original = {"name": "Alice", "remember_token": "a"}
        current = {"name": "Alicia", "remember_token": "b"}

        before, after = diff(original, current)

        assert "remember_token" not in before
        assert "remember_token" not in after
        assert after == {"name": "Alicia"}

    def test_diff_is_deterministic(self):
        original = {"a": 1, "b": 2, "password": "x"}
        current = {"a": 2, "b": 2, "password": "y"}

        assert changed_keys(original, current) == changed_keys(original, current) == {"a"}
        assert diff(original, current) == diff(original, current)

    def test_equal_maps_yield_no_changes(self):
        attributes = {"name": "Acme", "is_active": False}

        assert changed_keys(attributes, dict(attributes)) == set()


class TestSubjectIdentifier:
    """Tests for the identifier fallback chain."""

    def test_name_wins_over_first_and_last_name(self):
        attributes = {"name": "Display Name", "first_name": "Jane", "last_name": "Doe"}

        assert subject_identifier(None, attributes, 1) == "Display Name"

    def test_title_used_when_no_name(self):
        assert subject_identifier(None, {"title": "Nutrition plan"}, 1) == "Nutrition plan"

    def test_first_and_last_name_combined(self):
        resident = Resident(first_name="Jane", last_name="Doe")

        assert subject_identifier(resident, resident.audit_snapshot(), 3) == "Jane Doe"

    def test_first_name_alone_is_not_enough(self):
        assert subject_identifier(None, {"first_name": "Jane"}, 9) == "#9"

    def test_display_label_capability(self):
        shift = Shift(user_id=1, shift_date=date(2026, 1, 5), shift_type="night")

        assert subject_identifier(shift, shift.audit_snapshot(), 4) == "Night shift on 2026-01-05"

    def test_falls_back_to_id(self):
        assert subject_identifier(object(), {"phone": "555"}, 42) == "#42"

    def test_none_name_is_treated_as_absent(self):
        assert subject_identifier(None, {"name": None, "title": "Plan"}, 1) == "Plan"


class TestDescribe:
    """Tests for summary composition."""

    @pytest.mark.parametrize(
        "action,expected",
        [
            (AuditAction.CREATED, "Agency 'Acme Agency' was created"),
            (AuditAction.UPDATED, "Agency 'Acme Agency' was updated"),
            (AuditAction.DELETED, "Agency 'Acme Agency' was deleted"),
            (AuditAction.RESTORED, "Agency 'Acme Agency' was restored"),
        ],
    )
    def test_describe(self, action, expected):
        assert describe("Agency", "Acme Agency", action) == expected


class TestChangeAuditor:
    """Tests for ChangeAuditor against a recording store."""

    class RecordingStore:
        def __init__(self):
            self.calls = []

        def log(self, db, **kwargs):
            self.calls.append(kwargs)
            return kwargs

    def make_agency(self):
        agency = Agency(name="Acme Agency", phone="555-0100", is_active=True)
        agency.id = 7
        return agency

    def test_created_passes_full_snapshot(self, context):
        store = self.RecordingStore()
        ChangeAuditor(store).created(None, context, self.make_agency())

        call = store.calls[0]
        assert call["action"] == AuditAction.CREATED
        assert call["subject_type"] == "Agency"
        assert call["subject_id"] == 7
        assert call["before"] == {}
        assert call["after"] == {"name": "Acme Agency", "phone": "555-0100", "is_active": True}
        assert call["summary"] == "Agency 'Acme Agency' was created"
        assert call["context"] is context

    def test_updated_without_changes_writes_nothing(self, context):
        store = self.RecordingStore()
        agency = self.make_agency()

        result = ChangeAuditor(store).updated(None, context, agency, agency.audit_snapshot())

        assert result is None
        assert store.calls == []

    def test_deleted_puts_snapshot_in_before(self, context):
        store = self.RecordingStore()
        ChangeAuditor(store).deleted(None, context, self.make_agency())

        call = store.calls[0]
        assert call["before"] == {"name": "Acme Agency", "phone": "555-0100", "is_active": True}
        assert call["after"] == {}

    def test_restored_puts_snapshot_in_after(self, context):
        store = self.RecordingStore()
        ChangeAuditor(store).restored(None, context, self.make_agency())

        call = store.calls[0]
        assert call["before"] == {}
        assert call["after"]["name"] == "Acme Agency"
