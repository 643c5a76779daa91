"""Tests for domain models and configuration parsing."""

from datetime import date

import pytest

import config
from models.document import Document, validate_status
from models.reminder import Reminder


def test_root_id_of_first_version_is_own_id():
    doc = Document(user_id=1, name="a.pdf", document_type="Income", year=2023, id=4)
    assert doc.root_id == 4


def test_root_id_of_later_version_is_lineage():
    doc = Document(user_id=1, name="a.pdf", document_type="Income", year=2023, id=9, version=2, lineage_id=4)
    assert doc.root_id == 4


def test_document_str_marks_deleted():
    doc = Document(user_id=1, name="a.pdf", document_type="Income", year=2023, id=4, is_deleted=True)
    assert str(doc).endswith("(deleted)")


@pytest.mark.parametrize("status", ["uploaded", "reviewed", "approved"])
def test_validate_status_accepts_known(status):
    assert validate_status(status) == status


def test_validate_status_rejects_unknown():
    with pytest.raises(ValueError, match="Invalid document status"):
        validate_status("Reviewed")


def test_reminder_due():
    reminder = Reminder(user_id=1, message="x", remind_date=date(2025, 7, 31))
    assert reminder.is_due(date(2025, 7, 31))
    assert not reminder.is_due(date(2025, 7, 30))
    reminder.is_done = True
    assert not reminder.is_due(date(2025, 8, 1))


@pytest.mark.parametrize(
    "raw, expected",
    [("true", True), ("1", True), ("Yes", True), ("false", False), ("0", False), ("", True)],
)
def test_env_bool(monkeypatch, raw, expected):
    monkeypatch.setenv("SOME_FLAG", raw)
    assert config._env_bool("SOME_FLAG", True) is expected


def test_env_bool_default_when_unset(monkeypatch):
    monkeypatch.delenv("SOME_FLAG", raising=False)
    assert config._env_bool("SOME_FLAG", False) is False
