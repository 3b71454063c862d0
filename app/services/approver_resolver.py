"""
Approver resolution - who has to sign off a leave request
"""
from typing import List, NamedTuple, Optional

from app.core.exceptions import NoManagerConfigured
from app.models.leave import ApproverRole


class ResolvedApprover(NamedTuple):
    approver_id: int
    role: ApproverRole


def resolve_approvers(
    employee_id: int,
    manager_id: Optional[int],
    standin_id: Optional[int],
    standin_enabled: bool = True,
) -> List[ResolvedApprover]:
    """
    Resolve the approver set for one employee's leave.

    The department manager is always required. A configured standin is added
    as a second approver unless it is the manager (one MANAGER entry only) or
    the employee themself. With ``standin_enabled`` off the standin is ignored
    and the legacy manager-only behaviour applies.

    Args:
        employee_id: Employee requesting the leave
        manager_id: Resolved department manager, None if there is none
        standin_id: Configured standin, None if there is none
        standin_enabled: Feature flag for standin approval

    Returns:
        Approvers in a stable order, MANAGER first

    Raises:
        NoManagerConfigured: If manager_id is None or the employee themself
    """
    if manager_id is None or manager_id == employee_id:
        raise NoManagerConfigured(f"No manager is configured for employee {employee_id}")

    approvers = [ResolvedApprover(manager_id, ApproverRole.MANAGER)]

    if (
        standin_enabled
        and standin_id is not None
        and standin_id != manager_id
        and standin_id != employee_id
    ):
        approvers.append(ResolvedApprover(standin_id, ApproverRole.STANDIN))

    return approvers


def resolve_for_employee(directory, employee, standin_enabled: bool = True) -> List[ResolvedApprover]:
    """Resolve approvers for an Employee row through the directory lookups"""
    manager_id = directory.get_manager(employee.id)
    standin_id = directory.get_standin(employee.id) if standin_enabled else None
    return resolve_approvers(employee.id, manager_id, standin_id, standin_enabled)
