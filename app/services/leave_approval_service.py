"""
Leave approval service - business logic for the multi-approver leave workflow
"""
import logging
from datetime import date, datetime, timezone
from typing import List, NamedTuple, Optional

from sqlalchemy.orm import Session, joinedload

from app.core.config import settings
from app.core.exceptions import (
    AlreadyDecided,
    InvalidDateRange,
    InvalidLeaveState,
    LeaveNotFound,
    LeaveOverlap,
    LeaveTypeNotFound,
    ManagerOnlyAction,
    NotAnApprover,
    NotLeaveOwner,
)
from app.models.employee import Employee, Role
from app.models.leave import (
    ACTIVE_LEAVE_STATUSES,
    ApproverRole,
    Decision,
    DecisionStatus,
    Leave,
    LeaveApprovalRecord,
    LeaveStatus,
    LeaveType,
)
from app.services.allowance_service import count_working_days
from app.services.approver_resolver import resolve_for_employee
from app.services.audit_service import log_audit
from app.services.directory_service import DirectoryService
from app.services.leave_state_machine import (
    RecordState,
    aggregate_status,
    is_waived,
    outstanding,
    record_status_for,
    snapshot,
)
from app.services.notification_service import NotificationKind, Notifier

logger = logging.getLogger(__name__)


class ConflictWarning(NamedTuple):
    """A standin is already away during the requested dates. Informational only."""
    approver_id: int
    conflicting_leave_id: int
    date_start: date
    date_end: date
    kind: str = "conflict_warning"


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _log_transition(leave_id: int, before, after, action: str) -> None:
    logger.info(
        "leave status transition: leave_id=%s before=%s after=%s action=%s",
        leave_id,
        before.value if before is not None else None,
        after.value,
        action,
    )


def _leave_payload(leave: Leave) -> dict:
    return {
        "leave_id": leave.id,
        "employee_id": leave.employee_id,
        "leave_type": leave.leave_type.name if leave.leave_type else None,
        "date_start": leave.date_start,
        "date_end": leave.date_end,
        "days": leave.days,
        "status": leave.status,
    }


def is_auto_approved(employee: Employee, leave_type: LeaveType) -> bool:
    """Auto-approval applies when either the employee or the leave type is flagged"""
    return bool(employee.auto_approve or leave_type.auto_approve)


def get_leave(db: Session, leave_id: int, for_update: bool = False) -> Leave:
    """
    Load a leave by id

    Raises:
        LeaveNotFound: If no such leave exists
    """
    query = db.query(Leave).filter(Leave.id == leave_id)
    if for_update:
        query = query.with_for_update().populate_existing()
    leave = query.first()
    if not leave:
        raise LeaveNotFound(f"Leave with id {leave_id} not found")
    return leave


def get_records_for_leave(db: Session, leave_id: int) -> List[LeaveApprovalRecord]:
    """All approval records of a leave, always re-read from the database"""
    return (
        db.query(LeaveApprovalRecord)
        .filter(LeaveApprovalRecord.leave_id == leave_id)
        .order_by(LeaveApprovalRecord.id)
        .populate_existing()
        .all()
    )


def _recompute_status(db: Session, directory: DirectoryService, leave: Leave, current_status: LeaveStatus):
    """Aggregate a fresh read of the leave's records; returns (status, records)"""
    records = get_records_for_leave(db, leave.id)
    inactive = directory.inactive_among(
        r.approver_id for r in records if r.approver_role == ApproverRole.STANDIN
    )
    return aggregate_status(snapshot(records), current_status, inactive), records, inactive


def validate_overlap(
    db: Session,
    employee_id: int,
    date_start: date,
    date_end: date,
    exclude_leave_id: Optional[int] = None
) -> None:
    """
    Validate that the request doesn't overlap with the employee's own
    NEW, APPROVED or PENDED_REVOKE leaves.

    Raises:
        LeaveOverlap: If an overlapping leave exists
    """
    # Overlap: existing.date_end >= new.date_start AND existing.date_start <= new.date_end
    query = db.query(Leave).filter(
        Leave.employee_id == employee_id,
        Leave.status.in_(ACTIVE_LEAVE_STATUSES),
        Leave.date_end >= date_start,
        Leave.date_start <= date_end,
    )
    if exclude_leave_id:
        query = query.filter(Leave.id != exclude_leave_id)

    overlapping = query.first()
    if overlapping:
        raise LeaveOverlap(
            f"Leave request overlaps with existing leave from {overlapping.date_start} to {overlapping.date_end}"
        )


def find_conflicts(db: Session, approver_id: int, date_start: date, date_end: date) -> List[ConflictWarning]:
    """Approved leaves of approver_id that intersect [date_start, date_end] inclusive"""
    rows = (
        db.query(Leave)
        .filter(
            Leave.employee_id == approver_id,
            Leave.status == LeaveStatus.APPROVED,
            Leave.date_end >= date_start,
            Leave.date_start <= date_end,
        )
        .order_by(Leave.date_start)
        .all()
    )
    return [ConflictWarning(approver_id, row.id, row.date_start, row.date_end) for row in rows]


def submit_leave(
    db: Session,
    employee: Employee,
    leave_type_id: int,
    date_start: date,
    date_end: date,
    comment: Optional[str] = None,
    notifier: Optional[Notifier] = None,
    standin_enabled: Optional[bool] = None,
) -> Leave:
    """
    Submit a leave request

    Auto-approved requests are stored APPROVED without approval records.
    Everything else is stored NEW with one PENDING record per resolved
    approver, created in the same transaction as the leave.

    Args:
        db: Database session
        employee: Employee requesting the leave
        leave_type_id: Leave type ID
        date_start: First day of leave
        date_end: Last day of leave (inclusive)
        comment: Optional comment from the employee
        notifier: Notification sink (defaults to the logging sender)
        standin_enabled: Override for STANDIN_APPROVAL_ENABLED

    Returns:
        Created Leave instance

    Raises:
        InvalidDateRange, LeaveTypeNotFound, LeaveOverlap, NoManagerConfigured
    """
    notifier = notifier or Notifier()
    if standin_enabled is None:
        standin_enabled = settings.STANDIN_APPROVAL_ENABLED

    if date_start > date_end:
        raise InvalidDateRange(f"date_start {date_start} is after date_end {date_end}")

    leave_type = db.query(LeaveType).filter(LeaveType.id == leave_type_id, LeaveType.active == True).first()  # noqa: E712
    if not leave_type:
        raise LeaveTypeNotFound(f"Leave type with id {leave_type_id} not found")

    validate_overlap(db, employee.id, date_start, date_end)

    directory = DirectoryService(db)
    auto = is_auto_approved(employee, leave_type)
    # Resolve before writing anything so a missing manager leaves no partial rows
    approvers = [] if auto else resolve_for_employee(directory, employee, standin_enabled)

    leave = Leave(
        employee_id=employee.id,
        leave_type_id=leave_type.id,
        date_start=date_start,
        date_end=date_end,
        days=count_working_days(date_start, date_end),
        employee_comment=comment,
        status=LeaveStatus.APPROVED if auto else LeaveStatus.NEW,
        auto_approved=auto,
        last_actor_id=employee.id,
        decided_at=_now() if auto else None,
    )
    for approver in approvers:
        leave.approval_records.append(
            LeaveApprovalRecord(
                approver_id=approver.approver_id,
                approver_role=approver.role,
                decision_status=DecisionStatus.PENDING,
            )
        )

    try:
        db.add(leave)
        db.flush()
        log_audit(
            db=db,
            actor_id=employee.id,
            action="LEAVE_SUBMIT",
            entity_type="leaves",
            entity_id=leave.id,
            meta={
                "leave_type": leave_type.name,
                "date_start": date_start,
                "date_end": date_end,
                "status": leave.status,
                "auto_approved": auto,
                "approvers": [{"approver_id": a.approver_id, "role": a.role} for a in approvers],
            },
            commit=False,
        )
        db.commit()
    except Exception:
        db.rollback()
        raise
    db.refresh(leave)
    _log_transition(leave.id, None, leave.status, "submit")

    payload = _leave_payload(leave)
    if auto:
        notifier.notify(NotificationKind.FULLY_APPROVED, employee.id, {**payload, "auto_approved": True})
        manager_id = directory.find_manager(employee.id)
        if manager_id is not None:
            notifier.notify(NotificationKind.FULLY_APPROVED, manager_id, {**payload, "auto_approved": True})
        return leave

    notifier.notify(
        NotificationKind.SUBMISSION_CONFIRMED,
        employee.id,
        {**payload, "approvers": [{"approver_id": a.approver_id, "role": a.role} for a in approvers]},
    )
    for approver in approvers:
        approver_payload = {**payload, "role": approver.role}
        if approver.role == ApproverRole.STANDIN:
            conflicts = find_conflicts(db, approver.approver_id, date_start, date_end)
            if conflicts:
                logger.info(
                    "standin conflict: leave_id=%s standin_id=%s conflicting=%s",
                    leave.id, approver.approver_id, [c.conflicting_leave_id for c in conflicts],
                )
                approver_payload["conflict_warnings"] = conflicts
        notifier.notify(NotificationKind.APPROVAL_NEEDED, approver.approver_id, approver_payload)

    return leave


def _decide_legacy(
    db: Session,
    directory: DirectoryService,
    leave: Leave,
    actor: Employee,
    decision: Decision,
    comment: Optional[str],
    notifier: Notifier,
) -> Leave:
    """Decide a NEW leave that predates approval records; only its manager may act"""
    if directory.find_manager(leave.employee_id) != actor.id:
        raise NotAnApprover(f"Employee {actor.id} is not an approver for leave {leave.id}")

    before = leave.status
    leave.status = LeaveStatus.APPROVED if decision == Decision.APPROVE else LeaveStatus.REJECTED
    leave.last_actor_id = actor.id
    leave.decided_at = _now()
    try:
        log_audit(
            db=db,
            actor_id=actor.id,
            action="LEAVE_DECIDE",
            entity_type="leaves",
            entity_id=leave.id,
            meta={"decision": decision, "legacy": True, "comment": comment},
            commit=False,
        )
        db.commit()
    except Exception:
        db.rollback()
        raise
    db.refresh(leave)
    _log_transition(leave.id, before, leave.status, "decide_legacy")

    kind = NotificationKind.FULLY_APPROVED if leave.status == LeaveStatus.APPROVED else NotificationKind.REJECTED
    notifier.notify(kind, leave.employee_id, {**_leave_payload(leave), "comment": comment})
    return leave


def decide(
    db: Session,
    leave_id: int,
    actor: Employee,
    decision: Decision,
    comment: Optional[str] = None,
    notifier: Optional[Notifier] = None,
) -> Leave:
    """
    Record one approver's decision and recompute the leave status

    The leave and the actor's record are locked, the decision is written,
    every record of the leave is re-read and aggregated, and both rows are
    committed together. Notifications go out only after the commit.

    While the leave is PENDED_REVOKE the manager decides on the revoke:
    APPROVE cancels the leave (REJECTED), REJECT restores it (APPROVED).

    Raises:
        LeaveNotFound, ManagerOnlyAction, NotAnApprover, AlreadyDecided, InvalidLeaveState
    """
    notifier = notifier or Notifier()
    directory = DirectoryService(db)

    leave = get_leave(db, leave_id, for_update=True)
    before = leave.status

    record = (
        db.query(LeaveApprovalRecord)
        .filter(
            LeaveApprovalRecord.leave_id == leave.id,
            LeaveApprovalRecord.approver_id == actor.id,
        )
        .with_for_update()
        .populate_existing()
        .first()
    )

    revoking = before == LeaveStatus.PENDED_REVOKE
    if revoking and (record is None or record.approver_role != ApproverRole.MANAGER):
        raise ManagerOnlyAction("Only the manager can decide on a revoke request")

    if before == LeaveStatus.CANCELED:
        raise InvalidLeaveState(f"Leave {leave.id} has been canceled")

    if record is None:
        has_records = db.query(LeaveApprovalRecord.id).filter(LeaveApprovalRecord.leave_id == leave.id).first()
        if not has_records and before == LeaveStatus.NEW:
            return _decide_legacy(db, directory, leave, actor, decision, comment, notifier)
        raise NotAnApprover(f"Employee {actor.id} is not an approver for leave {leave.id}")

    if record.decision_status != DecisionStatus.PENDING:
        raise AlreadyDecided(
            f"Decision for leave {leave.id} was already recorded as {record.decision_status.value}"
        )

    if before == LeaveStatus.APPROVED or is_waived(
        RecordState(record.approver_id, record.approver_role, record.decision_status),
        directory.inactive_among([actor.id]),
    ):
        # a pending record on an approved leave is a waived standin decision
        raise InvalidLeaveState(f"Decision for leave {leave.id} was waived")

    try:
        record.decision_status = record_status_for(decision, revoking)
        record.decided_at = _now()
        if comment is not None:
            record.comment = comment
        db.flush()

        after, records, inactive = _recompute_status(db, directory, leave, before)
        leave.status = after
        leave.last_actor_id = actor.id
        if after in (LeaveStatus.APPROVED, LeaveStatus.REJECTED) and after != before:
            leave.decided_at = _now()

        log_audit(
            db=db,
            actor_id=actor.id,
            action="LEAVE_REVOKE_DECIDE" if revoking else "LEAVE_DECIDE",
            entity_type="leaves",
            entity_id=leave.id,
            meta={
                "decision": decision,
                "role": record.approver_role,
                "record_status": record.decision_status,
                "before": before,
                "after": after,
                "comment": comment,
            },
            commit=False,
        )
        db.commit()
    except Exception:
        db.rollback()
        raise
    db.refresh(leave)
    _log_transition(leave.id, before, after, "revoke_decide" if revoking else "decide")

    payload = {**_leave_payload(leave), "decided_by": actor.id, "role": record.approver_role, "comment": comment}
    if revoking:
        if after == LeaveStatus.REJECTED:
            notifier.notify(NotificationKind.REJECTED, leave.employee_id, {**payload, "revoked": True})
        else:
            notifier.notify(NotificationKind.FULLY_APPROVED, leave.employee_id, {**payload, "revoke_declined": True})
    elif after == LeaveStatus.APPROVED and before != LeaveStatus.APPROVED:
        notifier.notify(NotificationKind.FULLY_APPROVED, leave.employee_id, payload)
    elif after == LeaveStatus.NEW:
        awaiting = outstanding(snapshot(records), inactive)
        notifier.notify(
            NotificationKind.PARTIALLY_APPROVED,
            leave.employee_id,
            {**payload, "awaiting": len(awaiting), "awaiting_approver_ids": [r.approver_id for r in awaiting]},
        )
    elif after == LeaveStatus.REJECTED and before != LeaveStatus.REJECTED:
        notifier.notify(NotificationKind.REJECTED, leave.employee_id, payload)
    else:
        logger.debug("no outcome notification: leave_id=%s status=%s", leave.id, after.value)

    return leave


def revoke(
    db: Session,
    leave_id: int,
    actor: Employee,
    comment: Optional[str] = None,
    notifier: Optional[Notifier] = None,
) -> Leave:
    """
    Start revoking an approved leave

    Leaves without approval records (auto-approved or legacy) are rejected
    immediately. Otherwise the leave moves to PENDED_REVOKE and only the
    MANAGER record is reset to PENDING; a STANDIN decision stays as it was.

    Raises:
        LeaveNotFound, InvalidLeaveState, ManagerOnlyAction
    """
    notifier = notifier or Notifier()
    directory = DirectoryService(db)

    leave = get_leave(db, leave_id, for_update=True)
    before = leave.status
    if before != LeaveStatus.APPROVED:
        raise InvalidLeaveState(f"Only approved leaves can be revoked, leave {leave.id} is {before.value}")

    records = get_records_for_leave(db, leave.id)
    manager_record = next((r for r in records if r.approver_role == ApproverRole.MANAGER), None)

    if manager_record is None:
        if directory.find_manager(leave.employee_id) != actor.id:
            raise ManagerOnlyAction("Only the employee's manager can revoke this leave")
    elif manager_record.approver_id != actor.id:
        raise ManagerOnlyAction("Only the manager who approved this leave can revoke it")

    try:
        if manager_record is None:
            after = LeaveStatus.REJECTED
            leave.decided_at = _now()
        else:
            manager_record.decision_status = DecisionStatus.PENDING
            manager_record.decided_at = None
            db.flush()
            after, _, _ = _recompute_status(db, directory, leave, LeaveStatus.PENDED_REVOKE)
        leave.status = after
        leave.last_actor_id = actor.id

        log_audit(
            db=db,
            actor_id=actor.id,
            action="LEAVE_REVOKE",
            entity_type="leaves",
            entity_id=leave.id,
            meta={"before": before, "after": after, "immediate": manager_record is None, "comment": comment},
            commit=False,
        )
        db.commit()
    except Exception:
        db.rollback()
        raise
    db.refresh(leave)
    _log_transition(leave.id, before, after, "revoke")

    payload = {**_leave_payload(leave), "revoked_by": actor.id, "comment": comment}
    if after == LeaveStatus.REJECTED:
        notifier.notify(NotificationKind.REJECTED, leave.employee_id, {**payload, "revoked": True})
    else:
        notifier.notify(NotificationKind.REVOKE_REQUESTED, manager_record.approver_id, payload)
        notifier.notify(NotificationKind.REVOKE_REQUESTED, leave.employee_id, payload)
    return leave


def cancel(db: Session, leave_id: int, employee: Employee) -> Leave:
    """
    Cancel a leave that is still waiting for approval

    Raises:
        LeaveNotFound, NotLeaveOwner, InvalidLeaveState
    """
    leave = get_leave(db, leave_id, for_update=True)
    if leave.employee_id != employee.id:
        raise NotLeaveOwner(f"Leave {leave.id} does not belong to employee {employee.id}")
    if leave.status != LeaveStatus.NEW:
        raise InvalidLeaveState(f"Only NEW leaves can be canceled, leave {leave.id} is {leave.status.value}")

    before = leave.status
    leave.status = LeaveStatus.CANCELED
    leave.last_actor_id = employee.id
    try:
        log_audit(
            db=db,
            actor_id=employee.id,
            action="LEAVE_CANCEL",
            entity_type="leaves",
            entity_id=leave.id,
            meta={"before": before, "after": leave.status},
            commit=False,
        )
        db.commit()
    except Exception:
        db.rollback()
        raise
    db.refresh(leave)
    _log_transition(leave.id, before, leave.status, "cancel")
    return leave


def handle_approver_deactivated(
    db: Session,
    approver_id: int,
    notifier: Optional[Notifier] = None,
) -> List[Leave]:
    """
    Re-aggregate leaves waiting on a standin who has just been deactivated

    The standin's pending decision is waived, so leaves already approved by
    their manager become APPROVED. Pending MANAGER records are never waived;
    those leaves are only reported in the log.

    Returns:
        Leaves whose status changed
    """
    notifier = notifier or Notifier()
    directory = DirectoryService(db)

    pending = (
        db.query(LeaveApprovalRecord)
        .join(Leave, LeaveApprovalRecord.leave_id == Leave.id)
        .filter(
            LeaveApprovalRecord.approver_id == approver_id,
            LeaveApprovalRecord.decision_status == DecisionStatus.PENDING,
            Leave.status == LeaveStatus.NEW,
        )
        .all()
    )

    changed = []
    for record in pending:
        if record.approver_role == ApproverRole.MANAGER:
            logger.warning(
                "deactivated manager still holds a pending approval: leave_id=%s approver_id=%s",
                record.leave_id, approver_id,
            )
            continue

        leave = get_leave(db, record.leave_id, for_update=True)
        before = leave.status
        try:
            after, _, _ = _recompute_status(db, directory, leave, before)
            if after == before:
                db.rollback()
                continue
            leave.status = after
            leave.decided_at = _now()
            log_audit(
                db=db,
                actor_id=approver_id,
                action="LEAVE_STANDIN_WAIVED",
                entity_type="leaves",
                entity_id=leave.id,
                meta={"before": before, "after": after},
                commit=False,
            )
            db.commit()
        except Exception:
            db.rollback()
            raise
        db.refresh(leave)
        _log_transition(leave.id, before, after, "standin_waived")
        changed.append(leave)
        if after == LeaveStatus.APPROVED:
            notifier.notify(NotificationKind.FULLY_APPROVED, leave.employee_id, {**_leave_payload(leave), "standin_waived": True})

    return changed


def list_my_leaves(db: Session, employee: Employee, year: Optional[int] = None) -> List[Leave]:
    """All leaves of one employee, most recent first, every status included"""
    query = db.query(Leave).options(
        joinedload(Leave.leave_type),
        joinedload(Leave.approval_records),
    ).filter(Leave.employee_id == employee.id)
    if year:
        query = query.filter(Leave.date_start >= date(year, 1, 1), Leave.date_start <= date(year, 12, 31))
    return query.order_by(Leave.date_start.desc()).all()


def list_pending_for_approver(db: Session, approver: Employee) -> List[Leave]:
    """
    Leaves waiting on this approver's decision, oldest first

    Leaves that are already REJECTED by another approver are left out.
    """
    return (
        db.query(Leave)
        .options(joinedload(Leave.leave_type), joinedload(Leave.approval_records), joinedload(Leave.employee))
        .join(LeaveApprovalRecord, LeaveApprovalRecord.leave_id == Leave.id)
        .filter(
            LeaveApprovalRecord.approver_id == approver.id,
            LeaveApprovalRecord.decision_status == DecisionStatus.PENDING,
            Leave.status.in_([LeaveStatus.NEW, LeaveStatus.PENDED_REVOKE]),
        )
        .order_by(Leave.created_at.asc(), Leave.id.asc())
        .all()
    )


def get_leave_for_viewer(db: Session, leave_id: int, viewer: Employee) -> Leave:
    """
    Load a leave visible to viewer: its owner, one of its approvers, the
    employee's current manager, or an admin.

    Raises:
        LeaveNotFound: If missing or not visible
    """
    leave = get_leave(db, leave_id)
    if viewer.role == Role.ADMIN or leave.employee_id == viewer.id:
        return leave
    if any(r.approver_id == viewer.id for r in leave.approval_records):
        return leave
    if DirectoryService(db).find_manager(leave.employee_id) == viewer.id:
        return leave
    raise LeaveNotFound(f"Leave with id {leave_id} not found")


def list_leaves_in_range(db: Session, from_date: date, to_date: date) -> List[Leave]:
    """Leaves intersecting [from_date, to_date], for reporting"""
    return (
        db.query(Leave)
        .options(joinedload(Leave.employee), joinedload(Leave.leave_type), joinedload(Leave.approval_records))
        .filter(Leave.date_end >= from_date, Leave.date_start <= to_date)
        .order_by(Leave.date_start.asc(), Leave.id.asc())
        .all()
    )
