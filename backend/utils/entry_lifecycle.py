"""
Journal entry lifecycle.

    DRAFT -> PENDING_APPROVAL -> APPROVED -> POSTED
      ^            |
      +--(reject)--+
    DRAFT / PENDING_APPROVAL / APPROVED -> CANCELLED

POSTED and CANCELLED are terminal. The table below is the only place legal
transitions are defined; each entry maps to the side effect applied to the
entry when the transition happens.
"""
from datetime import datetime
from typing import Callable, Dict, List, Optional, Tuple
from models.audit_mixin import utcnow
from models.journal_entry import JournalEntry, JournalEntryStatus
from utils.exceptions import InvalidStatus

Status = JournalEntryStatus


def _no_side_effect(entry: JournalEntry, user_id: str, now: datetime):
    pass


def _mark_approved(entry, user_id, now):
    entry.approved_by = user_id
    entry.approved_at = now


def _clear_approval(entry, user_id, now):
    entry.approved_by = None
    entry.approved_at = None


def _mark_posted(entry, user_id, now):
    entry.is_posted = True
    entry.posted_by = user_id
    entry.posted_at = now


SideEffect = Callable[[JournalEntry, str, datetime], None]

TRANSITIONS: Dict[Tuple[Status, Status], SideEffect] = {
    (Status.DRAFT, Status.PENDING_APPROVAL): _no_side_effect,
    (Status.PENDING_APPROVAL, Status.APPROVED): _mark_approved,
    (Status.PENDING_APPROVAL, Status.DRAFT): _clear_approval,
    (Status.APPROVED, Status.POSTED): _mark_posted,
    (Status.DRAFT, Status.CANCELLED): _no_side_effect,
    (Status.PENDING_APPROVAL, Status.CANCELLED): _no_side_effect,
    (Status.APPROVED, Status.CANCELLED): _no_side_effect,
}

TERMINAL_STATUSES = frozenset({Status.POSTED, Status.CANCELLED})


def can_transition(current: Status, target: Status, is_posted: bool = False) -> bool:
    # A posted entry never moves again, whatever its status column says
    if is_posted:
        return False
    return (Status(current), Status(target)) in TRANSITIONS


def allowed_targets(current: Status, is_posted: bool = False) -> List[Status]:
    if is_posted:
        return []
    return [target for (source, target) in TRANSITIONS if source == Status(current)]


def apply_transition(entry: JournalEntry, target: Status, user_id: str, now: Optional[datetime] = None) -> None:
    """
    Move `entry` to `target`, applying the transition's side effect.

    The entry is left untouched when the transition is not in the table.

    Raises:
        InvalidStatus: the transition is not legal from the entry's current state.
    """
    current = Status(entry.status)
    target = Status(target)
    if not can_transition(current, target, bool(entry.is_posted)):
        if entry.is_posted or current in TERMINAL_STATUSES:
            raise InvalidStatus(
                current, target,
                f"Journal entry is {current.value} and can no longer change status."
            )
        allowed = ", ".join(status.value for status in allowed_targets(current))
        raise InvalidStatus(
            current, target,
            f"Invalid status transition from {current.value} to {target.value}; allowed: {allowed}."
        )

    side_effect = TRANSITIONS[(current, target)]
    entry.status = target
    side_effect(entry, user_id, now or utcnow())
