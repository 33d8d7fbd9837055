from datetime import datetime

import pytest
import pytz

from models.journal_entry import JournalEntry, JournalEntryStatus as Status
from utils.entry_lifecycle import TRANSITIONS, allowed_targets, apply_transition, can_transition
from utils.exceptions import InvalidStatus

NOW = datetime(2024, 3, 15, 12, 0, tzinfo=pytz.utc)


def entry_in(status, is_posted=False):
    return JournalEntry(status=status, is_posted=is_posted)


@pytest.mark.parametrize("current, target", [
    (Status.DRAFT, Status.PENDING_APPROVAL),
    (Status.PENDING_APPROVAL, Status.APPROVED),
    (Status.PENDING_APPROVAL, Status.DRAFT),
    (Status.APPROVED, Status.POSTED),
    (Status.DRAFT, Status.CANCELLED),
    (Status.PENDING_APPROVAL, Status.CANCELLED),
    (Status.APPROVED, Status.CANCELLED),
])
def test_legal_transitions(current, target):
    assert can_transition(current, target)


def test_every_other_pair_is_illegal():
    for current in Status:
        for target in Status:
            assert can_transition(current, target) == ((current, target) in TRANSITIONS)


def test_no_skipping_approval():
    assert not can_transition(Status.DRAFT, Status.POSTED)
    assert not can_transition(Status.DRAFT, Status.APPROVED)
    assert not can_transition(Status.PENDING_APPROVAL, Status.POSTED)


def test_terminal_statuses_have_no_way_out():
    assert allowed_targets(Status.POSTED) == []
    assert allowed_targets(Status.CANCELLED) == []


def test_posted_flag_blocks_everything():
    assert not can_transition(Status.APPROVED, Status.CANCELLED, is_posted=True)
    assert allowed_targets(Status.APPROVED, is_posted=True) == []


def test_approval_records_approver():
    entry = entry_in(Status.PENDING_APPROVAL)
    apply_transition(entry, Status.APPROVED, "approver", NOW)
    assert entry.status == Status.APPROVED
    assert entry.approved_by == "approver"
    assert entry.approved_at == NOW
    assert not entry.is_posted


def test_rejection_clears_approval():
    entry = entry_in(Status.PENDING_APPROVAL)
    entry.approved_by = "approver"
    entry.approved_at = NOW
    apply_transition(entry, Status.DRAFT, "reviewer", NOW)
    assert entry.status == Status.DRAFT
    assert entry.approved_by is None
    assert entry.approved_at is None


def test_posting_sets_posted_fields():
    entry = entry_in(Status.APPROVED)
    apply_transition(entry, Status.POSTED, "poster", NOW)
    assert entry.status == Status.POSTED
    assert entry.is_posted is True
    assert entry.posted_by == "poster"
    assert entry.posted_at == NOW


def test_illegal_transition_leaves_entry_untouched():
    entry = entry_in(Status.DRAFT)
    with pytest.raises(InvalidStatus) as exc_info:
        apply_transition(entry, Status.POSTED, "user-1", NOW)
    assert entry.status == Status.DRAFT
    assert not entry.is_posted
    assert entry.posted_by is None
    assert exc_info.value.details() == {"current_status": "DRAFT", "target_status": "POSTED"}
    assert exc_info.value.message.endswith("allowed: PENDING_APPROVAL, CANCELLED.")


def test_posted_entry_cannot_be_cancelled():
    entry = entry_in(Status.POSTED, is_posted=True)
    with pytest.raises(InvalidStatus) as exc_info:
        apply_transition(entry, Status.CANCELLED, "user-1", NOW)
    assert entry.status == Status.POSTED
    assert entry.is_posted
    assert "can no longer change status" in exc_info.value.message


def test_status_strings_are_accepted():
    entry = entry_in("DRAFT")
    apply_transition(entry, "PENDING_APPROVAL", "user-1", NOW)
    assert entry.status == Status.PENDING_APPROVAL
