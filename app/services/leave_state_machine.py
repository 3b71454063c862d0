"""
Aggregate leave status derived from the approval record set

Everything here works on plain RecordState tuples so it can be evaluated
against a fresh read of the database or against hand-built fixtures alike.
"""
from typing import AbstractSet, Iterable, List, NamedTuple

from app.models.leave import ApproverRole, Decision, DecisionStatus, LeaveStatus


class RecordState(NamedTuple):
    approver_id: int
    role: ApproverRole
    status: DecisionStatus


def snapshot(records) -> List[RecordState]:
    """Copy LeaveApprovalRecord rows into immutable RecordState tuples"""
    return [RecordState(r.approver_id, r.approver_role, r.decision_status) for r in records]


def is_waived(record: RecordState, inactive_approver_ids: AbstractSet[int]) -> bool:
    """A pending standin decision is waived once the standin is no longer active"""
    return (
        record.role == ApproverRole.STANDIN
        and record.status == DecisionStatus.PENDING
        and record.approver_id in inactive_approver_ids
    )


def outstanding(
    records: Iterable[RecordState],
    inactive_approver_ids: AbstractSet[int] = frozenset(),
) -> List[RecordState]:
    """Records still waiting for a decision"""
    return [
        r for r in records
        if r.status == DecisionStatus.PENDING and not is_waived(r, inactive_approver_ids)
    ]


def aggregate_status(
    records: Iterable[RecordState],
    current_status: LeaveStatus,
    inactive_approver_ids: AbstractSet[int] = frozenset(),
) -> LeaveStatus:
    """
    Compute the overall leave status from its approval records.

    Rules, in order:
    - CANCELED is terminal.
    - PENDED_REVOKE holds while the manager has not re-decided.
    - Any REJECTED record makes the leave REJECTED.
    - All records APPROVED (waived standins aside) makes it APPROVED.
    - Otherwise it stays NEW.

    The result depends only on the set of record states, never on the order
    the decisions arrived in.

    Raises:
        ValueError: If the record set is empty. Record-less leaves are either
            auto-approved or legacy and their stored status is authoritative.
    """
    records = list(records)
    if not records:
        raise ValueError("Cannot aggregate a leave without approval records")

    if current_status == LeaveStatus.CANCELED:
        return LeaveStatus.CANCELED

    if any(r.status == DecisionStatus.REJECTED for r in records):
        return LeaveStatus.REJECTED

    waiting = outstanding(records, inactive_approver_ids)
    if current_status == LeaveStatus.PENDED_REVOKE and waiting:
        return LeaveStatus.PENDED_REVOKE
    if not waiting:
        return LeaveStatus.APPROVED
    return LeaveStatus.NEW


def record_status_for(decision: Decision, revoking: bool) -> DecisionStatus:
    """
    Map an approver decision onto the record value it stores.

    While a revoke is pending the manager decides on the revoke itself:
    approving the revoke withdraws their approval of the leave (REJECTED),
    rejecting the revoke re-affirms it (APPROVED).
    """
    if revoking:
        return DecisionStatus.REJECTED if decision == Decision.APPROVE else DecisionStatus.APPROVED
    return DecisionStatus.APPROVED if decision == Decision.APPROVE else DecisionStatus.REJECTED
